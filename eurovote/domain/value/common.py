"""Base classes for value objects."""

from typing import Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, RootModel
from pydantic import ValidationError as PydanticValidationError

from eurovote.domain.error import ValidationError

T = TypeVar("T")


class ValueObject(BaseModel):
    """Base class for composite value objects.

    Immutable and compared by value, not identity.
    """

    model_config = ConfigDict(frozen=True)


class RootValueObject(RootModel[T], Generic[T]):
    """Base class for value objects wrapping one primitive (``.root``).

    ``model_dump()`` returns the primitive itself, so these serialize the
    same as the raw value.
    """

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, raw: T) -> Self:
        """Build from user input.

        Raises:
            ValidationError: With the first validation message, instead of
                pydantic's error listing
        """
        try:
            return cls(raw)
        except PydanticValidationError as e:
            raise ValidationError(e.errors()[0]["msg"].removeprefix("Value error, ")) from e

    def __str__(self) -> str:
        return str(self.root)

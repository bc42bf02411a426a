"""Base classes for dependency injection providers."""

from typing import ClassVar, Literal, get_args

from dishka import Provider

# Components with a production and a mock implementation
Component = Literal["gateway", "credentials", "session"]

COMPONENTS: frozenset[str] = frozenset(get_args(Component))


class ProviderBase(Provider):
    """Base for all DI providers with unified metadata.

    A provider with subclasses is a mockable component: its subclasses are
    the implementations, told apart by ``__is_mock__``.

    Attributes:
        __mock_component__: Component name (for mockable components, None for concrete providers)
        __is_mock__: Whether this is a mock implementation
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

    @classmethod
    def is_mockable(cls) -> bool:
        return bool(cls.__subclasses__())

    @classmethod
    def component_name(cls) -> str:
        """Name used in errors and unmock sets."""
        return cls.__mock_component__ or cls.__name__

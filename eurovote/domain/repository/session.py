"""Guest session store interface."""

from abc import ABC, abstractmethod

from eurovote.domain.value import GuestId


class SessionStore(ABC):
    """Local record of which guest id this client holds for each party code.

    One record per code. Written when a join succeeds, deleted on rejection
    or when the guest cancels. Implementations live in the persistence layer.
    """

    @abstractmethod
    async def get(self, code: str) -> GuestId | None:
        """Find the guest id recorded for a party code.

        Args:
            code: Normalized party code

        Returns:
            The guest id if this client joined the party, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, code: str, guest_id: GuestId) -> None:
        """Record the guest id for a party code, replacing any previous one.

        Args:
            code: Normalized party code
            guest_id: Guest id returned by the join request
        """
        pass

    @abstractmethod
    async def delete(self, code: str) -> None:
        """Forget the guest id for a party code. Missing records are ignored.

        Args:
            code: Normalized party code
        """
        pass

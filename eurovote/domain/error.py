"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Local input validation error, raised before any request is made."""

    pass


class NotJoinedError(DomainError):
    """Raised when a party flow starts without a session record for the code."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"No guest session for party {code}")

"""Adapter layer errors.

Every failure of a gateway call is a ``GatewayError``. Calls that got an
HTTP response raise an ``ApiError`` subclass chosen from the status code,
calls that never got one raise ``TransportFailureError``.
"""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class GatewayError(AdapterError):
    """Party API call failed."""

    pass


class ApiError(GatewayError):
    """Party API answered with a non-success status."""

    def __init__(self, status: int, status_text: str, message: str):
        self.status = status
        self.status_text = status_text
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status}, "
            f"status_text={self.status_text!r}, message={self.message!r})"
        )


class UnauthenticatedError(ApiError):
    """A credentialed call was attempted without a signed-in subject.

    Raised locally, before any request is sent.
    """

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(401, "Unauthorized", message)


class NotFoundError(ApiError):
    """Resource does not exist (unknown code, guest or vote)."""

    pass


class ConflictError(ApiError):
    """Input was rejected by the server (validation or state conflict)."""

    pass


class ServerFailureError(ApiError):
    """Any other non-success status."""

    pass


class TransportFailureError(GatewayError):
    """No response was received (connection, DNS, timeout)."""

    pass


CONFLICT_STATUSES = frozenset({400, 409, 422})


def error_for_status(status: int, status_text: str, message: str) -> ApiError:
    """Build the typed error for a non-success status."""
    if status == 404:
        return NotFoundError(status, status_text, message)
    if status in CONFLICT_STATUSES:
        return ConflictError(status, status_text, message)
    return ServerFailureError(status, status_text, message)

"""Gateway client for the party API.

Single entry point for every outbound request, anonymous or credentialed.
One call to ``request`` makes at most one HTTP request, with no retries and
no caching. Polling loops retry by polling again.
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx
import logfire

from eurovote.adapter.auth.credentials import CredentialProvider
from eurovote.adapter.error import (
    TransportFailureError,
    UnauthenticatedError,
    error_for_status,
)
from eurovote.adapter.gateway.decode import decode_error_body

logger = logging.getLogger(__name__)


class GatewayClient:
    """HTTP gateway to the party API.

    The underlying ``httpx.AsyncClient`` is created lazily and reused for
    the life of the gateway. Pass ``transport`` to route requests somewhere
    other than the network (see ``InMemoryPartyBackend``).
    """

    def __init__(
        self,
        base_url: str,
        credentials: CredentialProvider,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize gateway.

        Args:
            base_url: Prefix for every path. Empty means relative paths.
            credentials: Bearer token source for credentialed calls
            transport: Optional httpx transport override
            timeout: Per-request timeout in seconds, None for the httpx default
        """
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            kwargs: dict[str, Any] = {"transport": self._transport}
            if self._timeout is not None:
                kwargs["timeout"] = self._timeout
            self._client = httpx.AsyncClient(**kwargs)
        return self._client

    def build_url(self, path: str) -> str:
        """Join the configured base and a request path."""
        return f"{self.base_url}{path}"

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Any = None,
        requires_credential: bool = False,
        query: Mapping[str, str] | None = None,
    ) -> Any:
        """Send one request and decode its JSON response.

        Args:
            path: API path, e.g. ``/api/parties/ABCDEF``
            method: HTTP method
            body: JSON-serializable payload, sent only when not None
            requires_credential: Attach a freshly fetched bearer token
            query: Query string parameters

        Returns:
            Decoded JSON body, or None for a 204 response

        Raises:
            UnauthenticatedError: Credential required but nobody signed in
                (raised before any network call)
            NotFoundError: 404 response
            ConflictError: 400, 409 or 422 response
            ServerFailureError: Any other non-success response
            TransportFailureError: No response received
        """
        headers: dict[str, str] = {}

        if body is not None:
            headers["Content-Type"] = "application/json"

        if requires_credential:
            if self.credentials.current_subject is None:
                logfire.warn(
                    "Credentialed request without signed-in subject",
                    method=method,
                    path=path,
                )
                raise UnauthenticatedError()
            token = await self.credentials.get_token()
            headers["Authorization"] = f"Bearer {token}"

        url = self.build_url(path)

        try:
            response = await self._get_client().request(
                method,
                url,
                params=dict(query) if query else None,
                json=body,
                headers=headers,
            )
        except httpx.TransportError as e:
            logfire.warn(
                "Gateway transport failure", method=method, path=path, error=str(e)
            )
            raise TransportFailureError(f"{method} {path} failed: {e}") from e

        logger.debug(f"{method} {path} -> {response.status_code}")

        if not response.is_success:
            decoded = decode_error_body(response)
            logfire.info(
                "Gateway request rejected",
                method=method,
                path=path,
                status=response.status_code,
                message=decoded.message,
                source=decoded.kind,
            )
            raise error_for_status(
                response.status_code, response.reason_phrase, decoded.message
            )

        if response.status_code == 204:
            return None

        return response.json()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

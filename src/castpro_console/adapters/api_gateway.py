"""Single egress point for CastPro backend calls."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from castpro_console.adapters.credential_store import CredentialStore, read_credential
from castpro_console.errors import (
    ApiError,
    AuthError,
    ConsoleError,
    NetworkError,
    NotFoundError,
    SessionExpiredError,
    ValidationError,
)

logger = logging.getLogger(__name__)

UnauthorizedListener = Callable[[], None]


class ApiGateway(Protocol):
    """Interface for authenticated JSON calls to the backend."""

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, object] | None = None,
        handle_unauthorized: bool = True,
    ) -> object:
        """Send a request and return the decoded JSON body."""


@dataclass
class HttpxApiGateway(ApiGateway):
    """Gateway implemented with httpx.

    Every request carries the stored credential as a bearer token. A 401
    clears the credential store and notifies unauthorized listeners before
    the error is raised to the caller. Nothing is retried here.
    """

    base_url: str
    credentials: CredentialStore
    http_client: httpx.AsyncClient
    timeout: float = 15
    unauthorized_listeners: list[UnauthorizedListener] = field(default_factory=list)

    @classmethod
    def create(
        cls, base_url: str, credentials: CredentialStore, timeout: float = 15
    ) -> "HttpxApiGateway":
        """Create a gateway with a managed httpx session."""
        return cls(
            base_url=base_url,
            credentials=credentials,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    def subscribe_unauthorized(self, listener: UnauthorizedListener) -> None:
        """Register a callback invoked after a 401 has cleared the session."""
        self.unauthorized_listeners.append(listener)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, object] | None = None,
        handle_unauthorized: bool = True,
    ) -> object:
        """Send a request to the backend and normalize failures."""
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        token = read_credential(self.credentials)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = f"{self.base_url.rstrip('/')}{path}"
        try:
            response = await self.http_client.request(
                method, url, json=json, headers=headers, timeout=self.timeout
            )
        except httpx.TransportError as exc:
            logger.warning("Backend unreachable: %s %s (%s)", method, path, exc)
            raise NetworkError() from exc

        if response.status_code == httpx.codes.UNAUTHORIZED and handle_unauthorized:
            self._handle_unauthorized()
            raise SessionExpiredError(status_code=response.status_code)
        if response.is_error:
            raise _error_for(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                "Unexpected response from server", response.status_code
            ) from exc

    def _handle_unauthorized(self) -> None:
        logger.info("Credential rejected by backend, clearing session")
        self.credentials.clear()
        for listener in list(self.unauthorized_listeners):
            try:
                listener()
            except Exception:
                logger.exception("Unauthorized listener failed")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_for(response: httpx.Response) -> ConsoleError:
    body = _json_or_none(response)
    message = None
    field_errors: dict[str, list[str]] = {}
    if isinstance(body, dict):
        raw_message = body.get("message")
        if isinstance(raw_message, str) and raw_message:
            message = raw_message
        raw_errors = body.get("errors")
        if isinstance(raw_errors, dict):
            for name, messages in raw_errors.items():
                if isinstance(messages, list):
                    field_errors[str(name)] = [str(item) for item in messages]
                else:
                    field_errors[str(name)] = [str(messages)]
    status_code = response.status_code
    if status_code == httpx.codes.UNAUTHORIZED:
        return AuthError(message, status_code)
    if status_code == httpx.codes.NOT_FOUND:
        return NotFoundError(message, status_code)
    if status_code in {httpx.codes.BAD_REQUEST, httpx.codes.UNPROCESSABLE_ENTITY}:
        return ValidationError(message, status_code, field_errors)
    return ApiError(message or response.reason_phrase or None, status_code)


def _json_or_none(response: httpx.Response) -> object | None:
    try:
        return response.json()
    except ValueError:
        return None

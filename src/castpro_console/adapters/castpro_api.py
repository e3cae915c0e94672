"""Named CastPro backend operations grouped by resource."""

from dataclasses import dataclass

from castpro_console.adapters.api_gateway import ApiGateway
from castpro_console.domain.models import (
    ApplicationStatus,
    CastingApplication,
    CastingCall,
    CastingCallInput,
)
from castpro_console.domain.sessions import AdminIdentity, Session
from castpro_console.errors import ApiError, AuthError, ValidationError


@dataclass
class AuthApi:
    """Credential endpoints."""

    gateway: ApiGateway

    async def login(self, email: str, password: str) -> Session:
        """Exchange email and password for a bearer credential."""
        try:
            payload = await self.gateway.request(
                "POST",
                "/admin/login",
                json={"email": email, "password": password},
                handle_unauthorized=False,
            )
        except ValidationError as exc:
            raise AuthError(exc.message, exc.status_code) from exc
        return _parse_session(payload)

    async def logout(self) -> None:
        """Invalidate the credential on the backend."""
        await self.gateway.request(
            "POST", "/admin/logout", handle_unauthorized=False
        )


@dataclass
class CastingCallsApi:
    """Casting call CRUD endpoints."""

    gateway: ApiGateway

    async def list(self) -> list[CastingCall]:
        payload = await self.gateway.request("GET", "/admin/casting-calls")
        return [CastingCall.model_validate(row) for row in _unwrap_list(payload)]

    async def get(self, casting_call_id: int) -> CastingCall:
        payload = await self.gateway.request(
            "GET", f"/admin/casting-calls/{casting_call_id}"
        )
        return CastingCall.model_validate(_unwrap(payload))

    async def create(self, data: CastingCallInput) -> CastingCall | None:
        payload = await self.gateway.request(
            "POST", "/admin/casting-calls", json=data.model_dump(mode="json")
        )
        return _optional_casting_call(payload)

    async def update(
        self, casting_call_id: int, data: dict[str, object]
    ) -> CastingCall | None:
        """Send a partial update; only the given fields are changed."""
        payload = await self.gateway.request(
            "PUT", f"/admin/casting-calls/{casting_call_id}", json=data
        )
        return _optional_casting_call(payload)

    async def delete(self, casting_call_id: int) -> None:
        await self.gateway.request("DELETE", f"/admin/casting-calls/{casting_call_id}")


@dataclass
class ApplicationsApi:
    """Casting application endpoints."""

    gateway: ApiGateway

    async def list(self) -> list[CastingApplication]:
        payload = await self.gateway.request("GET", "/admin/applications")
        return [
            CastingApplication.model_validate(row) for row in _unwrap_list(payload)
        ]

    async def get(self, application_id: int) -> CastingApplication:
        payload = await self.gateway.request(
            "GET", f"/admin/applications/{application_id}"
        )
        return CastingApplication.model_validate(_unwrap(payload))

    async def set_status(self, application_id: int, status: ApplicationStatus) -> None:
        await self.gateway.request(
            "PATCH",
            f"/admin/applications/{application_id}/status",
            json={"status": status.value},
        )

    async def shortlist(self, application_id: int) -> None:
        await self.set_status(application_id, ApplicationStatus.SHORTLISTED)

    async def hire(self, application_id: int) -> None:
        await self.set_status(application_id, ApplicationStatus.HIRED)

    async def reject(self, application_id: int) -> None:
        await self.set_status(application_id, ApplicationStatus.REJECTED)


def _unwrap(payload: object) -> object:
    # Resource responses may be wrapped in a "data" envelope.
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def _unwrap_list(payload: object) -> list[object]:
    rows = _unwrap(payload)
    if not isinstance(rows, list):
        raise ApiError("Unexpected response from server")
    return rows


def _optional_casting_call(payload: object) -> CastingCall | None:
    body = _unwrap(payload)
    if isinstance(body, dict) and "id" in body:
        return CastingCall.model_validate(body)
    return None


def _parse_session(payload: object) -> Session:
    if not isinstance(payload, dict):
        raise AuthError("Unexpected login response")
    token = payload.get("token") or payload.get("access_token")
    if not isinstance(token, str) or not token:
        raise AuthError("Login response did not include a token")
    admin_raw = payload.get("admin") or payload.get("user")
    admin = None
    if isinstance(admin_raw, dict):
        admin = AdminIdentity(
            id=admin_raw.get("id"),
            name=admin_raw.get("name"),
            email=admin_raw.get("email"),
        )
    return Session(credential=token, admin=admin)

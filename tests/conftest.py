"""Shared test fixtures."""

import json
import re
from dataclasses import dataclass, field

import httpx
import pytest

from castpro_console.adapters.api_gateway import HttpxApiGateway
from castpro_console.adapters.credential_store import CREDENTIAL_KEY, CredentialStore
from castpro_console.config import Settings
from castpro_console.containers import AppContainer, build_container

ADMIN_EMAIL = "admin@castpro.com"
ADMIN_PASSWORD = "right"
VALID_TOKEN = "valid-token"

_CASTING_CALL = re.compile(r"^/admin/casting-calls/(\d+)$")
_APPLICATION = re.compile(r"^/admin/applications/(\d+)$")
_APPLICATION_STATUS = re.compile(r"^/admin/applications/(\d+)/status$")


@dataclass
class InMemoryCredentialStore(CredentialStore):
    """In-memory credential store for tests."""

    entries: dict[str, object] = field(default_factory=dict)
    clears: int = 0

    def read(self) -> dict[str, object]:
        return dict(self.entries)

    def write(self, entries: dict[str, object]) -> None:
        self.entries = dict(entries)

    def clear(self) -> None:
        self.entries = {}
        self.clears += 1


def casting_call_row(casting_call_id: int, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": casting_call_id,
        "title": f"Casting #{casting_call_id}",
        "description": "Looking for talent",
        "requirements": None,
        "deadline": "2026-12-01T00:00:00.000000Z",
        "status": "open",
        "created_by": 1,
        "created_at": "2026-10-01T10:00:00.000000Z",
        "updated_at": "2026-10-01T10:00:00.000000Z",
    }
    row.update(overrides)
    return row


def application_row(
    application_id: int, casting_call_id: int, **overrides: object
) -> dict[str, object]:
    row: dict[str, object] = {
        "id": application_id,
        "casting_call_id": casting_call_id,
        "full_name": f"Applicant {application_id}",
        "address": "1 Stage Road",
        "phone": "555-0100",
        "email": None,
        "gender": "female",
        "experience_story": "Ten years of theatre.",
        "image_path": f"applications/{application_id}.jpg",
        "status": "pending",
        "created_at": "2026-10-02T10:00:00.000000Z",
        "updated_at": "2026-10-02T10:00:00.000000Z",
        "videos": [],
    }
    row.update(overrides)
    return row


@dataclass
class FakeCastProBackend:
    """In-memory CastPro REST backend served through httpx.MockTransport."""

    casting_calls: dict[int, dict[str, object]] = field(default_factory=dict)
    applications: dict[int, dict[str, object]] = field(default_factory=dict)
    failures: dict[tuple[str, str], httpx.Response] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)
    valid_token: str = VALID_TOKEN
    unreachable: bool = False
    next_id: int = 100

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(req.method, _api_path(req)) for req in self.requests]

    def authorization_headers(self) -> list[str | None]:
        return [req.headers.get("Authorization") for req in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:  # noqa: PLR0911
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        method, path = request.method, _api_path(request)
        failure = self.failures.get((method, path))
        if failure is not None:
            return failure
        if path == "/admin/login" and method == "POST":
            return self._login(_body(request))
        if request.headers.get("Authorization") != f"Bearer {self.valid_token}":
            return httpx.Response(401, json={"message": "Unauthenticated."})
        if path == "/admin/logout":
            return httpx.Response(200, json={"message": "Logged out"})
        if path == "/admin/casting-calls":
            if method == "GET":
                return httpx.Response(
                    200, json=[self._casting_call(i) for i in self.casting_calls]
                )
            return self._create_casting_call(_body(request))
        if match := _CASTING_CALL.match(path):
            return self._casting_call_detail(method, int(match.group(1)), request)
        if path == "/admin/applications":
            return httpx.Response(
                200, json=[self._application(i) for i in self.applications]
            )
        if match := _APPLICATION_STATUS.match(path):
            return self._set_status(int(match.group(1)), _body(request))
        if match := _APPLICATION.match(path):
            application_id = int(match.group(1))
            if application_id not in self.applications:
                return httpx.Response(404, json={"message": "Application not found."})
            return httpx.Response(200, json=self._application(application_id))
        return httpx.Response(404, json={"message": "Route not found."})

    def _login(self, body: dict[str, object]) -> httpx.Response:
        if body.get("email") == ADMIN_EMAIL and body.get("password") == ADMIN_PASSWORD:
            return httpx.Response(
                200,
                json={
                    "token": self.valid_token,
                    "admin": {"id": 1, "name": "Ava Admin", "email": ADMIN_EMAIL},
                },
            )
        return httpx.Response(401, json={"message": "Invalid credentials"})

    def _create_casting_call(self, body: dict[str, object]) -> httpx.Response:
        if not body.get("title"):
            return httpx.Response(
                422,
                json={
                    "message": "The title field is required.",
                    "errors": {"title": ["The title field is required."]},
                },
            )
        self.next_id += 1
        self.casting_calls[self.next_id] = casting_call_row(self.next_id, **body)
        return httpx.Response(201, json=self._casting_call(self.next_id))

    def _casting_call_detail(
        self, method: str, casting_call_id: int, request: httpx.Request
    ) -> httpx.Response:
        if casting_call_id not in self.casting_calls:
            return httpx.Response(404, json={"message": "Casting call not found."})
        if method == "DELETE":
            del self.casting_calls[casting_call_id]
            return httpx.Response(204)
        if method == "PUT":
            self.casting_calls[casting_call_id].update(_body(request))
        return httpx.Response(200, json=self._casting_call(casting_call_id))

    def _set_status(
        self, application_id: int, body: dict[str, object]
    ) -> httpx.Response:
        if application_id not in self.applications:
            return httpx.Response(404, json={"message": "Application not found."})
        self.applications[application_id]["status"] = body["status"]
        return httpx.Response(
            200,
            json={
                "message": "Status updated",
                "data": self._application(application_id),
            },
        )

    def _casting_call(self, casting_call_id: int) -> dict[str, object]:
        row = dict(self.casting_calls[casting_call_id])
        row["applications"] = [
            dict(app)
            for app in self.applications.values()
            if app["casting_call_id"] == casting_call_id
        ]
        return row

    def _application(self, application_id: int) -> dict[str, object]:
        row = dict(self.applications[application_id])
        casting_call = self.casting_calls.get(row["casting_call_id"])
        row["casting_call"] = dict(casting_call) if casting_call else None
        return row


def _api_path(request: httpx.Request) -> str:
    return request.url.path.removeprefix("/api")


def _body(request: httpx.Request) -> dict[str, object]:
    if not request.content:
        return {}
    return json.loads(request.content.decode())


@pytest.fixture
def backend() -> FakeCastProBackend:
    fake = FakeCastProBackend()
    fake.casting_calls[7] = casting_call_row(7, title="Lead Dancer")
    fake.casting_calls[8] = casting_call_row(8, title="Voice Actor", status="closed")
    fake.applications[42] = application_row(42, 7, full_name="Jane Doe")
    fake.applications[43] = application_row(43, 8, status="shortlisted")
    fake.applications[44] = application_row(44, 7, status="hired")
    return fake


@pytest.fixture
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def authenticated(credential_store: InMemoryCredentialStore) -> InMemoryCredentialStore:
    credential_store.entries = {CREDENTIAL_KEY: VALID_TOKEN}
    return credential_store


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        api_base_url="https://castpro.test/api",
        credential_store_path=tmp_path / "credentials.json",
        verify_media=False,
    )


@pytest.fixture
def gateway(
    settings: Settings,
    backend: FakeCastProBackend,
    credential_store: InMemoryCredentialStore,
) -> HttpxApiGateway:
    transport = httpx.MockTransport(backend.handle)
    return HttpxApiGateway(
        base_url=settings.api_base_url,
        credentials=credential_store,
        http_client=httpx.AsyncClient(transport=transport),
    )


@pytest.fixture
def container(settings: Settings, gateway: HttpxApiGateway) -> AppContainer:
    return build_container(settings, gateway=gateway)

"""Tests for console view-models."""

import asyncio

import httpx
import pytest

from castpro_console.containers import AppContainer
from castpro_console.errors import NavigationInterrupted, SessionExpiredError
from castpro_console.services.filters import ApplicationFilter
from castpro_console.services.navigation import LOGIN_PATH
from tests.conftest import FakeCastProBackend, InMemoryCredentialStore


def test_dashboard_counts(
    container: AppContainer, authenticated: InMemoryCredentialStore
) -> None:
    ticket = container.navigator.begin_view("/admin/dashboard")

    view = asyncio.run(container.views.dashboard(ticket))

    assert view.stats.total_castings == 2
    assert view.stats.active_castings == 1
    assert view.stats.total_applications == 3
    assert view.stats.pending_applications == 1
    assert view.stats.shortlisted_applications == 1
    assert view.stats.hired_talents == 1
    assert [app.id for app in view.recent_applications] == [42, 43, 44]
    assert view.notice is None


def test_failed_list_load_renders_empty_state(
    container: AppContainer,
    backend: FakeCastProBackend,
    authenticated: InMemoryCredentialStore,
) -> None:
    backend.failures[("GET", "/admin/casting-calls")] = httpx.Response(
        503, json={"message": "Maintenance"}
    )
    ticket = container.navigator.begin_view("/admin/casting-calls")

    view = asyncio.run(container.views.casting_call_list(ticket))

    assert view.is_empty
    assert view.notice is not None
    assert view.notice.text == "Maintenance"


def test_expired_session_is_not_rendered_as_empty_state(
    container: AppContainer,
    backend: FakeCastProBackend,
    authenticated: InMemoryCredentialStore,
) -> None:
    backend.valid_token = "rotated"
    ticket = container.navigator.begin_view("/admin/applications")

    with pytest.raises((SessionExpiredError, NavigationInterrupted)):
        asyncio.run(container.views.application_list(ticket, ApplicationFilter()))

    assert container.navigator.location == LOGIN_PATH


def test_evicted_view_stops_after_its_request(
    container: AppContainer, authenticated: InMemoryCredentialStore
) -> None:
    ticket = container.navigator.begin_view("/admin/applications/42")
    container.navigator.on_unauthorized()

    with pytest.raises(NavigationInterrupted):
        asyncio.run(container.views.application_detail(ticket, 42))


def test_filter_change_does_not_refetch(
    container: AppContainer,
    backend: FakeCastProBackend,
    authenticated: InMemoryCredentialStore,
) -> None:
    ticket = container.navigator.begin_view("/admin/applications")

    everything = asyncio.run(
        container.views.application_list(ticket, ApplicationFilter())
    )
    hired = asyncio.run(
        container.views.application_list(
            ticket, ApplicationFilter.from_query({"status": "hired"})
        )
    )

    assert everything.filtered.total == 3
    assert [app.id for app in hired.filtered.items] == [44]
    assert backend.calls.count(("GET", "/admin/applications")) == 1


def test_casting_call_detail_counts(
    container: AppContainer, authenticated: InMemoryCredentialStore
) -> None:
    ticket = container.navigator.begin_view("/admin/casting-calls/7")

    view = asyncio.run(container.views.casting_call_detail(ticket, 7))

    assert view.application_counts == {
        "total": 2,
        "pending": 1,
        "shortlisted": 0,
        "hired": 1,
        "rejected": 0,
    }
    assert view.applications_url == "/admin/applications?casting_call_id=7"


def test_application_detail_offers_actions_for_open_status(
    container: AppContainer, authenticated: InMemoryCredentialStore
) -> None:
    ticket = container.navigator.begin_view("/admin/applications/43")

    view = asyncio.run(container.views.application_detail(ticket, 43))

    assert [(a.action, a.label, a.tone) for a in view.actions] == [
        ("hire", "Hire Talent", "affirmative"),
        ("reject", "Reject", "destructive"),
    ]
    assert not view.terminal
    assert not view.busy
    assert view.image_url == "https://castpro.test/storage/applications/43.jpg"


def test_terminal_application_offers_no_actions(
    container: AppContainer, authenticated: InMemoryCredentialStore
) -> None:
    ticket = container.navigator.begin_view("/admin/applications/44")

    view = asyncio.run(container.views.application_detail(ticket, 44))

    assert view.actions == []
    assert view.terminal

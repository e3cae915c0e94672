"""Tests for dependency wiring."""

import asyncio

from castpro_console.adapters.credential_store import FileCredentialStore
from castpro_console.config import Settings
from castpro_console.containers import build_container


def test_build_container_from_settings(tmp_path) -> None:
    settings = Settings(
        api_base_url="https://castpro.test/api/",
        credential_store_path=tmp_path / "credentials.json",
        request_timeout_seconds=3,
        cache_ttl_seconds=12,
    )

    container = build_container(settings)

    assert container.gateway.base_url == "https://castpro.test/api/"
    assert container.gateway.timeout == 3
    assert isinstance(container.gateway.credentials, FileCredentialStore)
    assert container.application_registry.ttl_seconds == 12
    assert container.views.media.storage_url == "https://castpro.test"
    assert not container.session_store.is_authenticated()

    asyncio.run(container.close_resources())


def test_navigator_listens_for_unauthorized(tmp_path) -> None:
    settings = Settings(credential_store_path=tmp_path / "credentials.json")
    container = build_container(settings)
    listeners = container.gateway.unauthorized_listeners

    assert container.navigator.on_unauthorized in listeners

    asyncio.run(container.close_resources())

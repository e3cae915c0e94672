"""Dependency container wiring for the console."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from castpro_console.adapters.api_gateway import HttpxApiGateway
from castpro_console.adapters.castpro_api import (
    ApplicationsApi,
    AuthApi,
    CastingCallsApi,
)
from castpro_console.adapters.credential_store import FileCredentialStore
from castpro_console.config import Settings, storage_base_url
from castpro_console.services.activity import BusyTracker
from castpro_console.services.cache import InMemoryCache
from castpro_console.services.casting_calls import CastingCallService
from castpro_console.services.confirmations import ConfirmationBook
from castpro_console.services.guard import AuthorizationGuard
from castpro_console.services.media import MediaResolver
from castpro_console.services.navigation import Navigator
from castpro_console.services.registry import ApplicationRegistry, CastingCallRegistry
from castpro_console.services.sessions import SessionStore
from castpro_console.services.views import ConsoleViews
from castpro_console.services.workflow import StatusWorkflowEngine


@dataclass
class AppContainer:
    """Holds console-wide dependencies."""

    settings: Settings
    gateway: HttpxApiGateway
    session_store: SessionStore
    navigator: Navigator
    guard: AuthorizationGuard
    casting_call_service: CastingCallService
    application_registry: ApplicationRegistry
    workflow: StatusWorkflowEngine
    views: ConsoleViews
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None, gateway: HttpxApiGateway | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    credential_store = FileCredentialStore(resolved_settings.credential_store_path)
    resolved_gateway = gateway or HttpxApiGateway.create(
        base_url=resolved_settings.api_base_url,
        credentials=credential_store,
        timeout=resolved_settings.request_timeout_seconds,
    )
    navigator = Navigator()
    # The gateway clears the credential itself; navigation only reacts.
    resolved_gateway.subscribe_unauthorized(navigator.on_unauthorized)

    session_store = SessionStore(
        credential_store=resolved_gateway.credentials,
        auth_client=AuthApi(resolved_gateway),
    )
    guard = AuthorizationGuard(sessions=session_store, navigator=navigator)
    activity = BusyTracker()
    cache = InMemoryCache()
    confirmations = ConfirmationBook(
        ttl_seconds=resolved_settings.confirmation_ttl_seconds
    )
    applications_api = ApplicationsApi(resolved_gateway)
    casting_call_registry = CastingCallRegistry(
        client=CastingCallsApi(resolved_gateway),
        cache=cache,
        activity=activity,
        ttl_seconds=resolved_settings.cache_ttl_seconds,
    )
    application_registry = ApplicationRegistry(
        client=applications_api,
        cache=cache,
        activity=activity,
        ttl_seconds=resolved_settings.cache_ttl_seconds,
    )
    workflow = StatusWorkflowEngine(
        client=applications_api,
        registry=application_registry,
        confirmations=confirmations,
        activity=activity,
    )
    media = MediaResolver.create(
        storage_base_url(resolved_settings.api_base_url),
        verify=resolved_settings.verify_media,
    )
    views = ConsoleViews(
        navigator=navigator,
        casting_calls=casting_call_registry,
        applications=application_registry,
        workflow=workflow,
        media=media,
    )

    async def close_resources() -> None:
        await resolved_gateway.close()
        await media.close()

    return AppContainer(
        settings=resolved_settings,
        gateway=resolved_gateway,
        session_store=session_store,
        navigator=navigator,
        guard=guard,
        casting_call_service=CastingCallService(
            registry=casting_call_registry, confirmations=confirmations
        ),
        application_registry=application_registry,
        workflow=workflow,
        views=views,
        close_resources=close_resources,
    )

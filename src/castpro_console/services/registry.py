"""Client-side caches of casting calls and applications."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol, TypeVar

from castpro_console.domain.models import (
    ApplicationStatus,
    CastingApplication,
    CastingCall,
    CastingCallInput,
)
from castpro_console.services.activity import BusyTracker
from castpro_console.services.cache import InMemoryCache

T = TypeVar("T")

CASTING_CALLS_KEY = "casting-calls"
APPLICATIONS_KEY = "applications"


class CastingCallClient(Protocol):
    """Backend operations for casting calls."""

    async def list(self) -> list[CastingCall]: ...

    async def get(self, casting_call_id: int) -> CastingCall: ...

    async def create(self, data: CastingCallInput) -> CastingCall | None: ...

    async def update(
        self, casting_call_id: int, data: dict[str, object]
    ) -> CastingCall | None: ...

    async def delete(self, casting_call_id: int) -> None: ...


class ApplicationClient(Protocol):
    """Backend operations for applications."""

    async def list(self) -> list[CastingApplication]: ...

    async def get(self, application_id: int) -> CastingApplication: ...

    async def set_status(
        self, application_id: int, status: ApplicationStatus
    ) -> None: ...


@dataclass
class CastingCallRegistry:
    """Read/write cache of casting calls over the gateway."""

    client: CastingCallClient
    cache: InMemoryCache
    activity: BusyTracker
    ttl_seconds: int = 30

    def cached_list(self) -> list[CastingCall] | None:
        value = self.cache.get(CASTING_CALLS_KEY)
        return value if isinstance(value, list) else None

    async def list(self, force: bool = False) -> list[CastingCall]:
        """Return the cached list, fetching it when missing, expired or forced."""
        cached = None if force else self.cached_list()
        if cached is not None:
            return cached
        return await _fetch(self, CASTING_CALLS_KEY, self.client.list)

    async def get(self, casting_call_id: int) -> CastingCall:
        """Fetch a single casting call; detail views always read fresh."""
        return await _fetch(
            self,
            _detail_key(CASTING_CALLS_KEY, casting_call_id),
            lambda: self.client.get(casting_call_id),
        )

    async def create(self, data: CastingCallInput) -> CastingCall | None:
        async with self.activity.hold(_form_key(None)):
            created = await self.client.create(data)
        _invalidate(self, CASTING_CALLS_KEY)
        return created

    async def update(
        self, casting_call_id: int, data: dict[str, object]
    ) -> CastingCall | None:
        async with self.activity.hold(_form_key(casting_call_id)):
            updated = await self.client.update(casting_call_id, data)
        _invalidate(
            self,
            CASTING_CALLS_KEY,
            _detail_key(CASTING_CALLS_KEY, casting_call_id),
            APPLICATIONS_KEY,
        )
        return updated

    async def delete(self, casting_call_id: int) -> None:
        """Delete on the backend, then drop the record from the cached list."""
        async with self.activity.hold(_delete_key(casting_call_id)):
            await self.client.delete(casting_call_id)
        cached = self.cached_list()
        ttl = self._remaining_ttl()
        # Applications of a deleted call may have been removed server-side.
        _invalidate(
            self,
            CASTING_CALLS_KEY,
            _detail_key(CASTING_CALLS_KEY, casting_call_id),
            APPLICATIONS_KEY,
        )
        if cached is not None:
            remaining = [call for call in cached if call.id != casting_call_id]
            self.cache.set(CASTING_CALLS_KEY, remaining, ttl)

    def is_saving(self, casting_call_id: int | None) -> bool:
        return self.activity.is_busy(_form_key(casting_call_id))

    def is_deleting(self, casting_call_id: int) -> bool:
        return self.activity.is_busy(_delete_key(casting_call_id))

    def _remaining_ttl(self) -> int:
        expires_at = self.cache.expires_at(CASTING_CALLS_KEY)
        if expires_at is None:
            return self.ttl_seconds
        remaining = int((expires_at - datetime.now(tz=UTC)).total_seconds())
        return max(remaining, 1)


@dataclass
class ApplicationRegistry:
    """Read cache of applications over the gateway."""

    client: ApplicationClient
    cache: InMemoryCache
    activity: BusyTracker
    ttl_seconds: int = 30

    def cached_list(self) -> list[CastingApplication] | None:
        value = self.cache.get(APPLICATIONS_KEY)
        return value if isinstance(value, list) else None

    def cached(self, application_id: int) -> CastingApplication | None:
        """Return the freshest cached projection of one application."""
        value = self.cache.get(_detail_key(APPLICATIONS_KEY, application_id))
        if isinstance(value, CastingApplication):
            return value
        for application in self.cached_list() or []:
            if application.id == application_id:
                return application
        return None

    async def list(self, force: bool = False) -> list[CastingApplication]:
        cached = None if force else self.cached_list()
        if cached is not None:
            return cached
        return await _fetch(self, APPLICATIONS_KEY, self.client.list)

    async def get(self, application_id: int) -> CastingApplication:
        """Fetch one application and cache it as the authoritative projection."""
        return await _fetch(
            self,
            _detail_key(APPLICATIONS_KEY, application_id),
            lambda: self.client.get(application_id),
        )

    async def refresh(self, application_id: int) -> CastingApplication:
        """Re-fetch after a mutation with a request of its own.

        Reads already in flight were issued before the mutation, so they are
        detached and their results are never cached. The lists are re-fetched
        on their next read.
        """
        key = _detail_key(APPLICATIONS_KEY, application_id)
        _invalidate(self, key, APPLICATIONS_KEY, CASTING_CALLS_KEY)
        application = await self.client.get(application_id)
        self.cache.set(key, application, self.ttl_seconds)
        return application


class _Registry(Protocol):
    cache: InMemoryCache
    activity: BusyTracker
    ttl_seconds: int


async def _fetch(
    registry: _Registry, key: str, operation: Callable[[], Awaitable[T]]
) -> T:
    version = registry.cache.version(key)
    value = await registry.activity.join(key, operation)
    # A mutation since `version` makes this result stale; it is returned but not kept.
    registry.cache.set_if_unchanged(key, value, registry.ttl_seconds, version)
    return value


def _invalidate(registry: _Registry, *keys: str) -> None:
    for key in keys:
        registry.cache.delete(key)
        registry.activity.forget(key)


def _detail_key(prefix: str, record_id: int) -> str:
    return f"{prefix}:{record_id}"


def _form_key(casting_call_id: int | None) -> str:
    suffix = "new" if casting_call_id is None else casting_call_id
    return f"casting-call-form:{suffix}"


def _delete_key(casting_call_id: int) -> str:
    return f"casting-call-delete:{casting_call_id}"

"""View-models for the console's protected pages."""

import asyncio
import logging
from dataclasses import dataclass

from castpro_console.domain.models import (
    ApplicationStatus,
    CastingApplication,
    CastingCall,
    CastingCallStatus,
)
from castpro_console.domain.notices import Notice
from castpro_console.domain.workflow import StatusAction, Tone, is_terminal
from castpro_console.errors import AuthError, ConsoleError
from castpro_console.services.filters import (
    ApplicationFilter,
    FilteredApplications,
    build_filtered_view,
)
from castpro_console.services.media import MediaResolver, VideoSource
from castpro_console.services.navigation import Navigator, ViewTicket
from castpro_console.services.registry import ApplicationRegistry, CastingCallRegistry
from castpro_console.services.workflow import StatusWorkflowEngine

logger = logging.getLogger(__name__)

RECENT_APPLICATIONS = 5


@dataclass(frozen=True)
class DashboardStats:
    total_castings: int = 0
    active_castings: int = 0
    total_applications: int = 0
    pending_applications: int = 0
    shortlisted_applications: int = 0
    hired_talents: int = 0


@dataclass(frozen=True)
class DashboardView:
    stats: DashboardStats
    recent_applications: list[CastingApplication]
    notice: Notice | None = None


@dataclass(frozen=True)
class CastingCallListView:
    casting_calls: list[CastingCall]
    notice: Notice | None = None

    @property
    def is_empty(self) -> bool:
        return not self.casting_calls


@dataclass(frozen=True)
class CastingCallDetailView:
    casting_call: CastingCall
    application_counts: dict[str, int]
    applications_url: str


@dataclass(frozen=True)
class ApplicationListView:
    filtered: FilteredApplications
    notice: Notice | None = None


@dataclass(frozen=True)
class ActionView:
    action: str
    label: str
    tone: Tone


@dataclass(frozen=True)
class ApplicationDetailView:
    application: CastingApplication
    actions: list[ActionView]
    busy: bool
    terminal: bool
    image_url: str
    image_fallback_url: str
    videos: list[VideoSource]


_ACTION_LABELS = {
    StatusAction.SHORTLIST: "Shortlist",
    StatusAction.HIRE: "Hire Talent",
    StatusAction.REJECT: "Reject",
}


@dataclass
class ConsoleViews:
    """Loads data for each protected page, stopping if the view was evicted."""

    navigator: Navigator
    casting_calls: CastingCallRegistry
    applications: ApplicationRegistry
    workflow: StatusWorkflowEngine
    media: MediaResolver

    async def dashboard(self, ticket: ViewTicket) -> DashboardView:
        try:
            calls, applications = await asyncio.gather(
                self.casting_calls.list(force=True),
                self.applications.list(force=True),
            )
        except ConsoleError as exc:
            self.navigator.ensure_current(ticket)
            notice = _load_failure("dashboard", exc)
            return DashboardView(
                stats=DashboardStats(), recent_applications=[], notice=notice
            )
        self.navigator.ensure_current(ticket)
        return DashboardView(
            stats=_dashboard_stats(calls, applications),
            recent_applications=applications[:RECENT_APPLICATIONS],
        )

    async def casting_call_list(
        self, ticket: ViewTicket, refresh: bool = True
    ) -> CastingCallListView:
        try:
            calls = await self.casting_calls.list(force=refresh)
        except ConsoleError as exc:
            self.navigator.ensure_current(ticket)
            return CastingCallListView(
                casting_calls=[], notice=_load_failure("casting calls", exc)
            )
        self.navigator.ensure_current(ticket)
        return CastingCallListView(casting_calls=calls)

    async def casting_call_detail(
        self, ticket: ViewTicket, casting_call_id: int
    ) -> CastingCallDetailView:
        call = await self.casting_calls.get(casting_call_id)
        self.navigator.ensure_current(ticket)
        counts = call.count_by_status()
        return CastingCallDetailView(
            casting_call=call,
            application_counts={
                "total": len(call.applications or []),
                **{status.value: counts[status] for status in ApplicationStatus},
            },
            applications_url=ApplicationFilter(casting_call_id=call.id).url(),
        )

    async def application_list(
        self,
        ticket: ViewTicket,
        application_filter: ApplicationFilter,
        refresh: bool = False,
    ) -> ApplicationListView:
        """Filter the cached list; only a missing or stale cache hits the backend."""
        notice = None
        try:
            applications = await self.applications.list(force=refresh)
        except ConsoleError as exc:
            self.navigator.ensure_current(ticket)
            applications = []
            notice = _load_failure("applications", exc)
        self.navigator.ensure_current(ticket)
        return ApplicationListView(
            filtered=build_filtered_view(applications, application_filter),
            notice=notice,
        )

    async def application_detail(
        self, ticket: ViewTicket, application_id: int
    ) -> ApplicationDetailView:
        application = await self.applications.get(application_id)
        self.navigator.ensure_current(ticket)
        image = self.media.profile_image(application)
        image_url = await self.media.resolve(image)
        self.navigator.ensure_current(ticket)
        return self.describe_application(application, image_url=image_url)

    def describe_application(
        self, application: CastingApplication, image_url: str | None = None
    ) -> ApplicationDetailView:
        image = self.media.profile_image(application)
        return ApplicationDetailView(
            application=application,
            actions=[
                ActionView(
                    action=action.verb,
                    label=_ACTION_LABELS[action],
                    tone=action.tone,
                )
                for action in self.workflow.actions_for(application)
            ],
            busy=self.workflow.is_busy(application.id),
            terminal=is_terminal(application.status),
            image_url=image_url or image.url,
            image_fallback_url=image.fallback_url,
            videos=self.media.videos(application),
        )


def _dashboard_stats(
    calls: list[CastingCall], applications: list[CastingApplication]
) -> DashboardStats:
    def count(status: ApplicationStatus) -> int:
        return sum(1 for app in applications if app.status == status)

    return DashboardStats(
        total_castings=len(calls),
        active_castings=sum(
            1 for call in calls if call.status == CastingCallStatus.OPEN
        ),
        total_applications=len(applications),
        pending_applications=count(ApplicationStatus.PENDING),
        shortlisted_applications=count(ApplicationStatus.SHORTLISTED),
        hired_talents=count(ApplicationStatus.HIRED),
    )


def _load_failure(what: str, exc: ConsoleError) -> Notice:
    # A rejected credential has already triggered the global redirect.
    if isinstance(exc, AuthError):
        raise exc
    logger.warning("Failed to load %s: %s", what, exc.message)
    return Notice.error("Error", exc.message)

"""URL-encoded filtering of the cached application list."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from urllib.parse import urlencode

from castpro_console.domain.models import ApplicationStatus, CastingApplication
from castpro_console.services.navigation import APPLICATIONS_PATH

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"
STATUS_PARAM = "status"
CASTING_CALL_PARAM = "casting_call_id"


@dataclass(frozen=True)
class ApplicationFilter:
    """Two independent predicates; None means unrestricted."""

    status: ApplicationStatus | None = None
    casting_call_id: int | None = None

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "ApplicationFilter":
        """Parse query parameters, ignoring values that are not understood."""
        return cls(
            status=_parse_status(params.get(STATUS_PARAM)),
            casting_call_id=_parse_id(params.get(CASTING_CALL_PARAM)),
        )

    def with_status(
        self, status: ApplicationStatus | str | None
    ) -> "ApplicationFilter":
        """Return a copy with the status predicate replaced."""
        if isinstance(status, str) and not isinstance(status, ApplicationStatus):
            status = _parse_status(status)
        return replace(self, status=status)

    def to_query(self) -> dict[str, str]:
        query: dict[str, str] = {}
        if self.status is not None:
            query[STATUS_PARAM] = self.status.value
        if self.casting_call_id is not None:
            query[CASTING_CALL_PARAM] = str(self.casting_call_id)
        return query

    def url(self, base_path: str = APPLICATIONS_PATH) -> str:
        query = self.to_query()
        return f"{base_path}?{urlencode(query)}" if query else base_path

    @property
    def is_active(self) -> bool:
        return self.status is not None or self.casting_call_id is not None

    def matches(self, application: CastingApplication) -> bool:
        if self.status is not None and application.status != self.status:
            return False
        return not (
            self.casting_call_id is not None
            and application.casting_call_id != self.casting_call_id
        )


def filter_applications(
    applications: Sequence[CastingApplication], application_filter: ApplicationFilter
) -> list[CastingApplication]:
    """Pure filter over an already loaded list; order is preserved."""
    return [app for app in applications if application_filter.matches(app)]


@dataclass(frozen=True)
class StatusOption:
    """A status filter control with the URL it navigates to."""

    label: str
    value: str
    url: str
    selected: bool


@dataclass(frozen=True)
class FilteredApplications:
    """Visible subset of applications plus what the view needs to render it."""

    items: list[CastingApplication]
    filter: ApplicationFilter
    total: int
    options: list[StatusOption]
    reset_url: str | None

    @property
    def is_empty(self) -> bool:
        return not self.items


def status_options(application_filter: ApplicationFilter) -> list[StatusOption]:
    """Status controls reflecting, and linking to, the URL state."""
    options = [
        StatusOption(
            label="All",
            value=ALL_STATUSES,
            url=application_filter.with_status(None).url(),
            selected=application_filter.status is None,
        )
    ]
    for status in ApplicationStatus:
        options.append(
            StatusOption(
                label=status.label,
                value=status.value,
                url=application_filter.with_status(status).url(),
                selected=application_filter.status == status,
            )
        )
    return options


def build_filtered_view(
    applications: Sequence[CastingApplication], application_filter: ApplicationFilter
) -> FilteredApplications:
    return FilteredApplications(
        items=filter_applications(applications, application_filter),
        filter=application_filter,
        total=len(applications),
        options=status_options(application_filter),
        reset_url=_reset_url(application_filter),
    )


def _reset_url(application_filter: ApplicationFilter) -> str | None:
    """Clearing drops the status restriction only; the casting call stays."""
    if application_filter.status is None:
        return None
    return application_filter.with_status(None).url()


def _parse_status(raw: str | None) -> ApplicationStatus | None:
    if raw is None or raw in {"", ALL_STATUSES}:
        return None
    try:
        return ApplicationStatus(raw)
    except ValueError:
        logger.warning("Ignoring unknown status filter %r", raw)
        return None


def _parse_id(raw: str | None) -> int | None:
    if raw is None or raw == "":
        return None
    if not raw.isdigit():
        logger.warning("Ignoring invalid casting call filter %r", raw)
        return None
    return int(raw)

"""Domain models for the admin session."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AdminIdentity:
    """The staff member a credential belongs to."""

    id: int | None
    name: str | None
    email: str | None


@dataclass(frozen=True)
class Session:
    """An authenticated admin session; presence implies authentication."""

    credential: str
    admin: AdminIdentity | None = None

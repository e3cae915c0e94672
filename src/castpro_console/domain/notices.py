"""Transient acknowledgments shown after an operation."""

from dataclasses import dataclass
from enum import StrEnum


class NoticeLevel(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notice:
    """A toast-style message; errors stay until dismissed."""

    level: NoticeLevel
    title: str
    text: str
    timeout_ms: int | None = None

    @classmethod
    def success(cls, title: str, text: str) -> "Notice":
        return cls(level=NoticeLevel.SUCCESS, title=title, text=text, timeout_ms=2000)

    @classmethod
    def error(cls, title: str, text: str) -> "Notice":
        return cls(level=NoticeLevel.ERROR, title=title, text=text)

"""
Transient user notifications.

Services describe what to tell the user; the frontend decides how
to show it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

ERROR_DURATION_MS = 5000
INFO_DURATION_MS = 3000


class Severity(str, Enum):
    NORMAL = "normal"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Toast:
    title: str
    description: str = ""
    severity: Severity = Severity.NORMAL
    duration_ms: int = INFO_DURATION_MS

    @classmethod
    def error(cls, title: str, description: str) -> "Toast":
        return cls(
            title=title,
            description=description,
            severity=Severity.DESTRUCTIVE,
            duration_ms=ERROR_DURATION_MS,
        )


class Notifier(Protocol):
    def notify(self, toast: Toast) -> None: ...

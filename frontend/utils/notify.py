"""
NiceGUI rendering of service toasts.
"""

from contextlib import nullcontext
from typing import Any, Dict, Optional

from nicegui import ui

from app.common.notifications import Severity, Toast


class NiceGUINotifier:
    """
    Show toasts with ``ui.notify``.

    Args:
        anchor: Element whose client receives the notification. Needed
            when notifying from a background task that has no slot.
    """

    def __init__(self, anchor: Optional[ui.element] = None) -> None:
        self._anchor = anchor

    def notify(self, toast: Toast) -> None:
        options: Dict[str, Any] = {
            "type": "negative" if toast.severity is Severity.DESTRUCTIVE else "positive",
            "timeout": toast.duration_ms,
            "position": "bottom-right",
        }
        if toast.description:
            options["caption"] = toast.description

        with self._anchor if self._anchor is not None else nullcontext():
            ui.notify(toast.title, **options)

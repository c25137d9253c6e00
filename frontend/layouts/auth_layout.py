"""
Authentication layout components.

Provides the shared card layout for the login and signup screens.
"""

from typing import Callable

from nicegui import ui

from frontend.utils.logger import get_logger

logger = get_logger(__name__)


def auth_layout(title: str, subtitle: str, content_fn: Callable[[], None]) -> None:
    """
    Render a centered authentication card.

    Args:
        title: Title displayed at the top of the card.
        subtitle: Muted line under the title.
        content_fn: Callback that renders the inner form content.

    Raises:
        RuntimeError: If content rendering fails.
    """
    with ui.column().classes(
        "w-screen h-screen items-center justify-center bg-neutral-950"
    ):
        with ui.card().classes(
            "w-[380px] border border-neutral-800 bg-neutral-900 "
            "text-white shadow-2xl rounded-2xl p-6"
        ):
            ui.label(title).classes("text-2xl font-bold text-center w-full mb-1")
            ui.label(subtitle).classes("text-sm text-neutral-400 text-center w-full mb-6")

            try:
                content_fn()
            except Exception as exc:
                logger.exception(
                    "Failed to render auth layout content",
                    extra={"title": title},
                )
                ui.label("Something went wrong. Please refresh the page.").classes(
                    "text-red-400"
                )
                raise RuntimeError("Auth layout rendering failed") from exc

"""
Application entrypoint and route definitions.

Registers all frontend pages and starts the NiceGUI app.
"""

from nicegui import app, ui

from frontend.config import settings
from frontend.pages.login_page import show_login_page
from frontend.pages.settings_page import show_settings_page
from frontend.pages.signup_page import show_signup_page
from frontend.state.app_state import UserServices, registry
from frontend.utils.logger import get_logger

logger = get_logger(__name__)


def _enable_dark_mode() -> None:
    """Enable global dark mode."""
    ui.dark_mode().enable()


def _services() -> UserServices:
    """Services bound to the requesting browser."""
    return registry.for_browser(app.storage.browser["id"])


@ui.page("/")
def root() -> None:
    """Root route; redirects to settings."""
    logger.debug("Root route accessed; redirecting to /settings")
    ui.navigate.to("/settings")


@ui.page("/login")
def login() -> None:
    """Login page route."""
    _enable_dark_mode()
    logger.debug("Login page accessed")
    show_login_page(_services())


@ui.page("/signup")
def signup() -> None:
    """Signup page route."""
    _enable_dark_mode()
    logger.debug("Signup page accessed")
    show_signup_page(_services())


@ui.page("/settings")
async def settings_page() -> None:
    """Settings page route."""
    _enable_dark_mode()
    logger.debug("Settings page accessed")
    await show_settings_page(_services())


def start_app() -> None:
    """
    Start the NiceGUI application.
    """
    logger.info("Starting Eventbell frontend application")

    ui.run(
        title=settings.TITLE,
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        storage_secret=settings.STORAGE_SECRET,
    )


if __name__ in {"__main__", "__mp_main__"}:
    start_app()

"""
Login page UI.

Signs the user in with Supabase email/password auth.
"""

import asyncio

from nicegui import ui

from app.identity_service.provider import AuthenticationError
from frontend.layouts.auth_layout import auth_layout
from frontend.state.app_state import UserServices
from frontend.utils.logger import get_logger

logger = get_logger(__name__)


def show_login_page(services: UserServices) -> None:
    """
    Render the login page.
    """
    auth_layout("Eventbell", "Welcome back", lambda: _login_form(services))


def _login_form(services: UserServices) -> None:
    email = (
        ui.input(label="Email", placeholder="you@example.com")
        .props("outlined dense dark")
        .classes("w-full")
    )

    password = (
        ui.input(
            label="Password",
            placeholder="••••••••",
            password=True,
            password_toggle_button=True,
        )
        .props("outlined dense dark")
        .classes("w-full mt-3")
    )

    login_btn = ui.button(
        "Login",
        on_click=lambda: _handle_login(
            services,
            email.value,
            password.value,
            login_btn,
        ),
    ).classes(
        "w-full mt-5 bg-neutral-800 hover:bg-neutral-700 "
        "text-white font-semibold rounded-lg"
    )

    ui.separator().classes("my-4")

    ui.label("Don't have an account?").classes(
        "text-center text-neutral-400 text-sm w-full"
    )

    ui.button(
        "Create account",
        on_click=lambda: ui.navigate.to("/signup"),
    ).props("flat").classes("w-full text-neutral-200")


async def _handle_login(
    services: UserServices,
    email: str,
    password: str,
    button,
) -> None:
    """
    Authenticate the user and navigate to the settings page.
    """
    if not email or not password:
        ui.notify("Please enter both email and password", type="warning")
        return

    button.disable()

    try:
        identity = await asyncio.to_thread(services.identity.sign_in, email, password)
    except AuthenticationError:
        logger.warning("Login failed")
        ui.notify("Invalid email or password", type="negative")
        return
    finally:
        button.enable()

    logger.info("User logged in", extra={"user_id": identity.id})
    ui.notify("Login successful", type="positive")
    ui.navigate.to("/settings")

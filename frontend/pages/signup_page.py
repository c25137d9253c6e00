"""
Signup page UI.
"""

import asyncio

from nicegui import ui

from app.identity_service.provider import AuthenticationError
from frontend.layouts.auth_layout import auth_layout
from frontend.state.app_state import UserServices
from frontend.utils.logger import get_logger

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def show_signup_page(services: UserServices) -> None:
    auth_layout(
        "Create Eventbell Account",
        "Get notified on Discord when things happen",
        lambda: _signup_form(services),
    )


def _signup_form(services: UserServices) -> None:
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

    signup_btn = ui.button(
        "Sign up",
        on_click=lambda: _handle_signup(
            services,
            email.value,
            password.value,
            signup_btn,
        ),
    ).classes(
        "w-full mt-5 bg-neutral-800 hover:bg-neutral-700 "
        "text-white font-semibold rounded-lg"
    )

    ui.separator().classes("my-4")

    ui.label("Already have an account?").classes(
        "text-center text-neutral-400 text-sm w-full"
    )

    ui.button(
        "Login",
        on_click=lambda: ui.navigate.to("/login"),
    ).props("flat").classes("w-full text-neutral-200")


async def _handle_signup(
    services: UserServices,
    email: str,
    password: str,
    button,
) -> None:
    if not email or not password:
        ui.notify("Please enter both email and password", type="warning")
        return

    if len(password) < MIN_PASSWORD_LENGTH:
        ui.notify(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            type="warning",
        )
        return

    button.disable()

    try:
        identity = await asyncio.to_thread(services.identity.sign_up, email, password)
    except AuthenticationError:
        logger.warning("Signup failed")
        ui.notify("Signup failed. Please try again.", type="negative")
        return
    finally:
        button.enable()

    if identity is None:
        # Project requires email confirmation before the first login
        ui.notify("Check your inbox to confirm your email", type="info")
        ui.navigate.to("/login")
        return

    logger.info("User signed up", extra={"user_id": identity.id})
    ui.notify("Account created", type="positive")
    ui.navigate.to("/settings")

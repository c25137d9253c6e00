"""
Settings page UI.

Lets the signed-in user connect a Discord account and manage the API
key used to send event notifications. The page follows the session
observer: anonymous sessions are redirected to the login page and
every newly signed-in identity triggers a fresh record fetch.
"""

import asyncio
from typing import Optional

from nicegui import ui

from app.config import get_settings
from app.identity_service.observer import SessionObserver
from app.identity_service.provider import AuthenticationError
from app.identity_service.schemas import Identity, SessionState, SessionStatus
from app.settings_service.service import UserSettingsService
from frontend.components.loading import loading_screen
from frontend.components.usage_snippets import usage_tabs
from frontend.state.app_state import UserServices
from frontend.utils.logger import get_logger
from frontend.utils.notify import NiceGUINotifier

logger = get_logger(__name__)

CARD_CLASSES = "w-full border border-neutral-800 bg-neutral-900 shadow-2xl p-6"
BUTTON_CLASSES = "bg-neutral-800 hover:bg-neutral-700 text-white border border-neutral-700"
INPUT_PROPS = "outlined dense dark"


async def show_settings_page(services: UserServices) -> None:
    """
    Render the settings page and keep it bound to the session.

    Args:
        services: Identity provider and record store of this browser.
    """
    config = get_settings()
    client = ui.context.client

    root = ui.column().classes("min-h-screen w-full max-w-6xl mx-auto px-4 py-10")

    settings_service = UserSettingsService(
        services.store,
        NiceGUINotifier(anchor=root),
        table=config.USERS_TABLE,
        key_bytes=config.API_KEY_BYTES,
    )
    observer = SessionObserver(services.identity)
    loaded_user: Optional[str] = None

    @ui.refreshable
    def render() -> None:
        state = observer.state

        if state.status is SessionStatus.ANONYMOUS:
            loading_screen("Redirecting...")
            return

        if observer.loading or settings_service.loading or loaded_user != state.identity.id:
            loading_screen("Loading your API settings...")
            return

        _settings_view(
            state.identity,
            services,
            settings_service,
            events_url=config.EVENTS_API_URL,
            on_change=render.refresh,
        )

    async def load(identity: Identity) -> None:
        nonlocal loaded_user

        await settings_service.fetch(identity)

        # A newer sign-in may have replaced this identity meanwhile
        if observer.identity == identity:
            loaded_user = identity.id

        with root:
            render.refresh()

    def on_session_change(state: SessionState) -> None:
        with root:
            if state.status is SessionStatus.ANONYMOUS:
                logger.info("No active session; redirecting to login")
                render.refresh()
                ui.navigate.to("/login")
                return

            if state.identity.id != loaded_user:
                asyncio.create_task(load(state.identity))

            render.refresh()

    with root:
        render()

    observer.add_listener(on_session_change)
    client.on_disconnect(observer.dispose)

    try:
        await client.connected()
    except TimeoutError:
        logger.warning("Settings page client never connected")
        observer.dispose()
        return

    await observer.initialize()


def _settings_view(
    identity: Identity,
    services: UserServices,
    settings_service: UserSettingsService,
    *,
    events_url: str,
    on_change,
) -> None:
    with ui.row().classes("w-full items-center justify-between mb-8"):
        ui.label("API Settings").classes("text-3xl font-bold text-white")
        ui.button(
            "Logout",
            on_click=lambda: _handle_logout(services),
        ).props("flat").classes("text-neutral-400")

    with ui.column().classes("w-full gap-8"):
        _discord_card(identity, settings_service)
        _api_key_card(identity, settings_service, on_change)
        _usage_card(events_url, settings_service.api_key)


# =================================================
# CARDS
# =================================================
def _card_header(title: str, description: str) -> None:
    ui.label(title).classes("text-xl font-semibold text-neutral-100")
    ui.label(description).classes("text-neutral-400 mb-4")


def _discord_card(identity: Identity, settings_service: UserSettingsService) -> None:
    with ui.card().classes(CARD_CLASSES):
        _card_header(
            "Discord Integration",
            "Connect your Discord account to receive event notifications",
        )

        ui.label("Discord User ID:").classes("text-sm font-medium text-neutral-300")

        with ui.row().classes("w-full items-center gap-2 no-wrap"):
            discord_input = (
                ui.input(
                    value=settings_service.chat_id or "",
                    placeholder="Enter your Discord User ID",
                )
                .props(INPUT_PROPS)
                .classes("flex-grow")
            )

            save_btn = ui.button(
                "Save",
                on_click=lambda: _handle_save_discord_id(
                    identity,
                    settings_service,
                    discord_input.value,
                    save_btn,
                ),
            ).classes(BUTTON_CLASSES)

        ui.label(
            "To find your Discord User ID, enable Developer Mode in Discord "
            'settings, then right-click your profile and click "Copy ID"'
        ).classes("text-xs text-neutral-400 mt-1")


def _api_key_card(
    identity: Identity,
    settings_service: UserSettingsService,
    on_change,
) -> None:
    with ui.card().classes(CARD_CLASSES):
        _card_header("API Key Management", "Generate or manage your API key")

        if not settings_service.api_key:
            generate_btn = ui.button(
                "Generate API Key",
                icon="key",
                on_click=lambda: _handle_generate_key(
                    identity,
                    settings_service,
                    generate_btn,
                    on_change,
                ),
            ).classes(f"w-full {BUTTON_CLASSES}")
            return

        ui.label("Your API Key:").classes("text-sm font-medium text-neutral-300")

        with ui.row().classes("w-full items-center gap-2 no-wrap"):
            ui.input(value=settings_service.api_key).props(
                f"{INPUT_PROPS} readonly"
            ).classes("flex-grow")

            ui.button(
                icon="content_copy",
                on_click=lambda: settings_service.copy_api_key(ui.clipboard.write),
            ).props("outline").classes("text-white")


def _usage_card(events_url: str, api_key: Optional[str]) -> None:
    with ui.card().classes(CARD_CLASSES):
        _card_header("Usage Instructions", "Learn how to use your API key")
        usage_tabs(events_url, api_key)


# =================================================
# HANDLERS
# =================================================
async def _handle_save_discord_id(
    identity: Identity,
    settings_service: UserSettingsService,
    value: str,
    button,
) -> None:
    button.disable()
    try:
        await settings_service.update_chat_id(identity, value or "")
    finally:
        button.enable()


async def _handle_generate_key(
    identity: Identity,
    settings_service: UserSettingsService,
    button,
    on_change,
) -> None:
    button.disable()
    try:
        api_key = await settings_service.create_key(identity)
    finally:
        button.enable()

    if api_key:
        on_change()


async def _handle_logout(services: UserServices) -> None:
    try:
        await asyncio.to_thread(services.identity.sign_out)
    except AuthenticationError:
        ui.notify("Logout failed. Please try again.", type="negative")
        return

    # The session observer picks up the sign-out and redirects
    logger.info("User logged out")

from nicegui import ui


def loading_screen(text: str) -> None:
    """Render a centered spinner with a status line."""
    with ui.column().classes("w-full min-h-[60vh] items-center justify-center gap-4"):
        ui.spinner(size="lg", color="white")
        ui.label(text).classes("text-neutral-400")

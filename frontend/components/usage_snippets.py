"""
Usage instruction snippets.

Shows how to send an event notification with the user's API key.
"""

from typing import Optional

from nicegui import ui

KEY_PLACEHOLDER = "YOUR_API_KEY"

JAVASCRIPT_TEMPLATE = """\
await fetch("{endpoint}", {{
  method: "POST",
  headers: {{
    "Content-Type": "application/json",
    "x-api-key": "{api_key}",
  }},
  body: JSON.stringify({{
    title: "New signup",
    content: {{ Email: "jane@example.com", Plan: "Pro" }},
  }}),
}});
"""

PYTHON_TEMPLATE = """\
import requests

requests.post(
    "{endpoint}",
    headers={{"x-api-key": "{api_key}"}},
    json={{
        "title": "New signup",
        "content": {{"Email": "jane@example.com", "Plan": "Pro"}},
    }},
    timeout=10,
)
"""


def build_snippet(language: str, endpoint: str, api_key: Optional[str]) -> str:
    """
    Fill the snippet template for a language.

    Raises:
        ValueError: If the language has no snippet.
    """
    templates = {"javascript": JAVASCRIPT_TEMPLATE, "python": PYTHON_TEMPLATE}

    if language not in templates:
        raise ValueError(f"No usage snippet for language: {language}")

    return templates[language].format(
        endpoint=endpoint,
        api_key=api_key or KEY_PLACEHOLDER,
    )


def usage_tabs(endpoint: str, api_key: Optional[str]) -> None:
    """Render JavaScript / Python tabs with ready-to-run snippets."""
    with ui.tabs().classes("w-full bg-neutral-800 text-neutral-100") as tabs:
        javascript = ui.tab("JavaScript")
        python = ui.tab("Python")

    with ui.tab_panels(tabs, value=javascript).classes("w-full bg-transparent"):
        with ui.tab_panel(javascript):
            ui.code(
                build_snippet("javascript", endpoint, api_key),
                language="javascript",
            ).classes("w-full")
        with ui.tab_panel(python):
            ui.code(
                build_snippet("python", endpoint, api_key),
                language="python",
            ).classes("w-full")

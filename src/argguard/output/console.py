"""Rich Console factory and theme for argguard output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GUARD_THEME = Theme(
    {
        "guard.ok": "bold green",
        "guard.error": "bold red",
        "guard.warning": "bold yellow",
        "guard.op": "bold cyan",
        "guard.key": "dim",
    }
)

_SEVERITY_STYLES: dict[str, str] = {
    "error": "guard.error",
    "warning": "guard.warning",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=GUARD_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_severity(severity: str) -> str:
    return _SEVERITY_STYLES.get(severity, "")

# Rich markup styles for the CLI
from __future__ import annotations

from rich.theme import Theme
from strenum import StrEnum


class TextStyle(StrEnum):
    """Names of styles for non-code text"""

    WARNING = "warning"
    ERROR = "error"
    INFO = "info"
    SUCCESS = "success"


class TableStyle(StrEnum):
    """Names of styles for table cells."""

    PROBLEM = "problem"
    OK = "ok"
    SEVERITY = "severity"


class Color(StrEnum):
    YELLOW = "yellow"
    GREEN = "green"
    RED = "red"
    MAGENTA = "magenta"

    def __call__(self, message: str) -> str:
        return f"[{self.value}]{message}[/]"


RICH_THEME = Theme(
    {
        TextStyle.SUCCESS.value: Color.GREEN,
        TextStyle.WARNING.value: f"bold {Color.YELLOW}",
        TextStyle.ERROR.value: f"bold {Color.RED}",
        TextStyle.INFO.value: Color.GREEN,
        TableStyle.PROBLEM.value: Color.RED,
        TableStyle.OK.value: Color.GREEN,
        TableStyle.SEVERITY.value: Color.MAGENTA,
    }
)


def green(message: str) -> str:
    return Color.GREEN(message)


class Icon(StrEnum):
    INFO = "!"
    OK = "✓"
    ERROR = "✗"
    PROMPT = "::"
    WARNING = "⚠"

"""Consoles and user-facing notices.

Results (the triggers table or JSON) are the only thing written to
stdout. Notices, prompts and errors go to stderr, so the output of
`zabbix-triggers` can be piped without picking them up.
"""

from __future__ import annotations

import logging
from typing import Final
from typing import NamedTuple
from typing import NoReturn
from typing import Optional
from typing import Union

from rich.console import Console
from rich.markup import escape

from zabbix_triggers.logs import logger
from zabbix_triggers.output.style import RICH_THEME
from zabbix_triggers.output.style import Icon
from zabbix_triggers.output.style import TextStyle

console = Console(theme=RICH_THEME)
"""stdout console for results."""

err_console = Console(
    stderr=True,
    highlight=False,
    soft_wrap=True,
    theme=RICH_THEME,
)
"""stderr console for notices and prompts."""


class Notice(NamedTuple):
    icon: Icon
    style: TextStyle
    level: int
    prefix: str = ""


NOTICES: Final[dict[str, Notice]] = {
    "info": Notice(Icon.INFO, TextStyle.INFO, logging.INFO),
    "success": Notice(Icon.OK, TextStyle.SUCCESS, logging.INFO),
    "warning": Notice(Icon.WARNING, TextStyle.WARNING, logging.WARNING),
    "error": Notice(Icon.ERROR, TextStyle.ERROR, logging.ERROR, prefix="ERROR: "),
}


def notify(
    kind: str,
    message: str,
    *,
    log: bool = True,
    exc_info: Union[bool, BaseException] = False,
    stacklevel: int = 1,
) -> None:
    """Print a notice on stderr and log it at the notice's level.

    `stacklevel` counts from the caller of `notify`, so that records
    point at the code that raised the notice.
    """
    notice = NOTICES[kind]
    if log:
        logger.log(
            notice.level, message, exc_info=exc_info, stacklevel=stacklevel + 1
        )
    err_console.print(f"[{notice.style}]{notice.icon} {notice.prefix}{message}[/]")


def info(message: str) -> None:
    notify("info", message, stacklevel=2)


def success(message: str) -> None:
    notify("success", message, stacklevel=2)


def warning(message: str) -> None:
    notify("warning", message, stacklevel=2)


def error(message: str, *, log: bool = True, exc_info: bool = False) -> None:
    """Print an error. Pass `log=False` when logging is not set up yet."""
    notify("error", message, log=log, exc_info=exc_info, stacklevel=2)


def exit_err(
    message: str,
    code: int = 1,
    exception: Optional[Exception] = None,
    exc_info: bool = False,
) -> NoReturn:
    """Print an error and exit with `code` (default: 1).

    The message is printed verbatim, since it can contain user input and
    API responses. When `exc_info` is set, the traceback of `exception`
    is written to the log.
    """
    notify(
        "error",
        escape(message),
        exc_info=exception if exception and exc_info else False,
        stacklevel=2,
    )
    raise SystemExit(code)

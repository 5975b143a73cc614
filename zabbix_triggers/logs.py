# Authors:
# rafael@postgresql.org.es / http://www.postgresql.org.es/
#
# Copyright (c) 2014-2015 USIT-University of Oslo
#
# This file is part of Zabbix-triggers
# https://github.com/unioslo/zabbix-triggers
#
# Zabbix-triggers is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# Zabbix-triggers is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with Zabbix-triggers.  If not, see <http://www.gnu.org/licenses/>.
"""Logging for zabbix-triggers.

Log records carry the Zabbix server and user of the current session
once they are known, so that acknowledgements in a shared log file can
be traced back to who made them and where.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING
from typing import Final
from typing import Literal

if TYPE_CHECKING:
    from pathlib import Path

    from zabbix_triggers.config.model import LoggingConfig

# Modules use `logging.getLogger(__name__)`, which makes their loggers
# children of this one
logger = logging.getLogger("zabbix_triggers")

DEFAULT_FORMAT = (
    "%(asctime)s [%(name)s][%(user)s@%(server)s][%(levelname)s]"
    "[%(filename)s:%(lineno)d %(funcName)s]: %(message)s"
)

CONTEXT_FIELDS: Final = ("user", "server")
"""Record fields filled in by `SessionContext`."""

UNKNOWN: Final = "-"

LogLevelStr = Literal["DEBUG", "INFO", "WARN", "WARNING", "ERROR", "CRITICAL", "FATAL"]

LOG_LEVELS: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
}

# Libraries that log every request at INFO/DEBUG
HTTP_LOGGERS: Final = ("httpx", "httpcore")


def remove_markup(text: str) -> str:
    """Remove Rich markup from a string.

    Text that is not valid markup is returned unchanged.
    """
    from rich.errors import MarkupError
    from rich.text import Text

    try:
        return Text.from_markup(text).plain
    except MarkupError:
        return text


class SessionContext(logging.Filter):
    """Handler filter that stamps records with the current session."""

    def __init__(self) -> None:
        super().__init__()
        self.fields: dict[str, str] = {}

    def filter(self, record: logging.LogRecord) -> Literal[True]:
        for field in CONTEXT_FIELDS:
            setattr(record, field, self.fields.get(field) or UNKNOWN)
        return True


session_context = SessionContext()


class TriggersFormatter(logging.Formatter):
    """Formatter for records that may lack session fields or contain markup.

    Records created before a handler with `SessionContext` was attached
    are formatted with placeholders instead of failing.
    """

    def format(self, record: logging.LogRecord) -> str:
        for field in CONTEXT_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, UNKNOWN)
        if isinstance(record.msg, str):
            record.msg = remove_markup(record.msg)
        return super().format(record)


def get_log_level(level: str) -> int:
    """Numeric level for a level name. Unknown names give `NOTSET`."""
    return LOG_LEVELS.get(level.upper(), logging.NOTSET)


def add_user(user: str) -> None:
    """Add the logged in username to subsequent log records."""
    session_context.fields["user"] = user


def add_server(url: str) -> None:
    """Add the Zabbix API URL to subsequent log records."""
    session_context.fields["server"] = url


def get_handler(config: LoggingConfig) -> logging.Handler:
    """Handler for the configured destination.

    Disabled logging gives a `NullHandler`, no log file logs to stderr.
    """
    if not config.enabled:
        return logging.NullHandler()
    if not config.log_file:
        return logging.StreamHandler(sys.stderr)
    return get_file_handler_safe(config.log_file)


def get_file_handler_safe(filename: Path) -> logging.Handler:
    """Return a FileHandler for `filename`, creating its directory.

    Falls back to stderr if the file cannot be opened."""
    try:
        filename.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(filename)
    except OSError as e:
        from zabbix_triggers.output.console import error

        error(f"Could not open log file {filename} for writing: {e}", log=False)
        return logging.StreamHandler(sys.stderr)


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Replace the root logger's handlers according to `config`.

    Without a config, logging is disabled until one is loaded.
    """
    if not config:
        from zabbix_triggers.config.model import LoggingConfig

        config = LoggingConfig(enabled=False)

    handler = get_handler(config)
    handler.setFormatter(TriggersFormatter(fmt=DEFAULT_FORMAT))
    handler.addFilter(session_context)

    level = get_log_level(config.log_level)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    logger.setLevel(level)

    # Request logs are only wanted when debugging
    http_level = level if level == logging.DEBUG else max(level, logging.WARNING)
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

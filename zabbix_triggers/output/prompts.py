from __future__ import annotations

import logging
from typing import Optional
from typing import TextIO

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.text import TextType

from .console import err_console
from .style import Icon
from .style import green

logger = logging.getLogger(__name__)

AFFIRMATIVE_ANSWERS = ("", "Y", "y")
"""Answers that confirm a [Y/n] prompt. Empty input selects the default (yes)."""


class LinePrompt(Prompt):
    """Prompt that raises EOFError at end of input also when reading from a stream."""

    @classmethod
    def get_input(
        cls,
        console: Console,
        prompt: TextType,
        password: bool,
        stream: Optional[TextIO] = None,
    ) -> str:
        answer = super().get_input(console, prompt, password, stream=stream)
        # readline() returns an empty string only at EOF
        if stream is not None and answer == "":
            raise EOFError
        return answer


def prompt_msg(*msgs: str) -> str:
    return f"[bold]{green(Icon.PROMPT)} {' '.join(msg.strip() for msg in filter(None, msgs))}[/bold]"


def confirm_prompt(prompt: str, *, stream: Optional[TextIO] = None) -> bool:
    """Ask a yes/no question that defaults to yes.

    Reads a single line of input. Empty input, `Y` and `y` are
    affirmative. Anything else, including end of input, is a decline.

    Args:
        prompt (str): Question to display to the user.
        stream (TextIO, optional): Stream to read the answer from.
            Defaults to None, which reads from stdin.

    Returns:
        bool: Whether the user confirmed.
    """
    try:
        answer = LinePrompt.ask(
            prompt_msg(prompt, escape("[Y/n]")),
            console=err_console,
            default="",
            show_default=False,
            stream=stream,
        )
    except EOFError:
        logger.debug("No answer to prompt %r (EOF)", prompt)
        return False
    logger.debug("Got answer %r to prompt %r", answer, prompt)
    return answer in AFFIRMATIVE_ANSWERS


def confirm_acknowledge(stream: Optional[TextIO] = None) -> bool:
    """Ask the user to confirm acknowledging the listed triggers."""
    err_console.print()
    return confirm_prompt("Proceed with acknowledge?", stream=stream)

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING

from rich.measure import Measurement
from rich.segment import Segments
from rich.table import Table
from rich.text import Text

from zabbix_triggers.config.constants import OutputFormat
from zabbix_triggers.output.console import console
from zabbix_triggers.output.style import TableStyle

if TYPE_CHECKING:
    from zabbix_triggers.pyzabbix.types import Trigger


def get_triggers_table(triggers: Sequence[Trigger]) -> Table:
    """Returns a borderless Rich table with one row per trigger.

    Columns are event ID, last change, severity, problem status,
    acknowledge status, host and description.
    """
    table = Table(box=None, show_header=False, pad_edge=False, padding=(0, 1))
    for _ in range(7):
        table.add_column(no_wrap=True)
    for trigger in triggers:
        cells = [Text(cell) for cell in trigger.row()]
        cells[2].stylize(TableStyle.SEVERITY.value)
        cells[3].stylize(
            TableStyle.PROBLEM.value if trigger.value == 1 else TableStyle.OK.value
        )
        table.add_row(*cells)
    return table


def render_table(triggers: Sequence[Trigger]) -> None:
    """Print the triggers table at its natural width.

    Lines are never cropped or ellipsized to fit the terminal, so every
    field of every row is printed even when stdout is piped.
    """
    table = get_triggers_table(triggers)
    if not table.rows:
        return
    natural = Measurement.get(
        console, console.options.update_width(sys.maxsize), table
    ).maximum
    options = console.options.update_width(natural)
    for line in console.render_lines(table, options, pad=False):
        console.print(Segments(line), soft_wrap=True)


def render_json(triggers: Sequence[Trigger]) -> None:
    """Render the triggers as a JSON list."""
    o_json = json.dumps([t.model_dump(mode="json") for t in triggers])
    console.print_json(o_json, indent=2, sort_keys=False)


def render_triggers(
    triggers: Sequence[Trigger], fmt: OutputFormat = OutputFormat.TABLE
) -> None:
    """Render triggers to stdout in the given output format."""
    if fmt == OutputFormat.JSON:
        render_json(triggers)
    elif fmt == OutputFormat.TABLE:
        render_table(triggers)
    else:
        raise ValueError(f"Unknown output format {fmt!r}.")

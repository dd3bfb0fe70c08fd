"""
Commandset help rendering: aligned, multi-column command tables.

Layout
    {title}

    Usage:
    {usage}

    Command Description                  Options                 Parameters
    help    Show this information
    convert Convert file for some reason -e, --encoding <option> <input file path>
                                                                 <output file path>

- Up to four columns, always in this order: Command, Description, Options, Parameters.
- Command is always shown; any other column is shown only when at least one command
  has content for it (a catalog without options has no Options column at all).
- Each column is as wide as its label or its widest cell; every column except the
  last gets one extra space as separator. Trailing padding is dropped.
- A command spans max(1, #options, #parameters) lines: name and description sit on
  the first line only, option i and parameter i on line i.
- The title block and the usage statement are emitted only when given.

Width policy
- Option cells render as "-e, --encoding" (+ " <option>" when the option takes a
  value). Their width is accounted as len(long name) + 6, + 9 for the value
  placeholder, which is exact for single-character short names.

Purity
- The renderer snapshots the commands it is given and never touches the caller's
  sequence. The text is computed once per renderer and cached; the snapshot holds
  the same command objects, which are immutable, so the cache cannot go stale.
"""
import functools
import itertools
from enum import IntEnum

from .commands import Command
from .utils import *

_SHORT_PREFIX = 6       # "-x, --" in front of the long name
_PLACEHOLDER = " <option>"


class Column(IntEnum):
    """
    help table columns, in display order.
    """
    COMMAND     = 1
    DESCRIPTION = 2
    OPTIONS     = 3
    PARAMETERS  = 4

    @property
    def label(self):
        return self.name.title()


def _format_option(option):
    if option.short_name is not None and option.long_name is not None:
        text = f"-{option.short_name}, --{option.long_name}"
    elif option.long_name is not None:
        text = " " * 4 + f"--{option.long_name}"
    else:
        text = f"-{option.short_name}"
    if option.requires_parameter:
        text += _PLACEHOLDER
    return text


def _measure_option(option):
    width = len(option.long_name or "") + _SHORT_PREFIX
    if option.requires_parameter:
        width += len(_PLACEHOLDER)
    return max(width, len(_format_option(option)))


def _cells(command, column):
    match column:
        case Column.COMMAND:
            return [command.name]
        case Column.DESCRIPTION:
            return [command.description] if command.description else []
        case Column.OPTIONS:
            return [_format_option(option) for option in command.options]
        case Column.PARAMETERS:
            return [f"<{parameter}>" for parameter in command.parameters]
    raise ValueError(f"unknown column {column!r}")


class HelpRenderer:
    """
    Render a command list into column-aligned help text.

    Parameters
    - commands: Iterable[Command]
      Commands in display order; the renderer keeps its own tuple snapshot.
    - title: str | Unset
      Headline emitted above "Usage:" followed by a blank line.
    - usage: str | Unset
      Free-text usage statement emitted under "Usage:" followed by a blank line.

    Example
        >>> renderer = HelpRenderer([Command("help", "Show this information")], "T")
        >>> renderer.text
        'T\\n\\nUsage:\\nCommand Description\\nhelp    Show this information\\n'
    """

    def __init__(self, commands, /, title=Unset, usage=Unset):
        commands = tuple(commands)
        if not all(isinstance(command, Command) for command in commands):
            raise TypeError("help-renderer 'commands' must only contain commands")
        if not isinstance(title, str | Unset):
            raise TypeError("help-renderer 'title' must be a string")
        if not isinstance(usage, str | Unset):
            raise TypeError("help-renderer 'usage' must be a string")

        self._commands = commands
        self._title = coalesce(title)
        self._usage = coalesce(usage)

    @property
    def commands(self):
        return self._commands

    @functools.cached_property
    def columns(self):
        """
        Active columns, in display order.
        """
        return tuple(
            column for column in Column
            if column is Column.COMMAND or any(_cells(command, column) for command in self._commands)
        )

    @functools.cached_property
    def widths(self):
        """
        Content width of every active column (separator space not included).
        """
        widths = {}
        for column in self.columns:
            width = len(column.label)
            for command in self._commands:
                if column is Column.OPTIONS:
                    measures = map(_measure_option, command.options)
                else:
                    measures = map(len, _cells(command, column))
                width = max(width, *measures, 0)
            widths[column] = width
        return widths

    def _join(self, cells):
        # Pad every cell up to the last non-empty one, which is written as is.
        pairs = list(zip(self.columns, cells))
        while len(pairs) > 1 and not pairs[-1][1]:
            pairs.pop()
        *heads, (_, last) = pairs
        return "".join(cell.ljust(self.widths[column] + 1) for column, cell in heads) + last

    @functools.cached_property
    def header(self):
        header = ""
        if self._title is not None:
            header += f"{self._title}\n\n"
        header += "Usage:\n"
        if self._usage:
            header += f"{self._usage}\n\n"
        return header + self._join([column.label for column in self.columns]) + "\n"

    def lines(self, command, /):
        """
        Return the rendered lines (without newlines) for one command.
        """
        if not isinstance(command, Command):
            raise TypeError("lines() argument must be a command")
        cells = {column: _cells(command, column) for column in self.columns}
        count = max(1, len(command.options), len(command.parameters))
        lines = []
        for index in range(count):
            lines.append(self._join([
                cells[column][index] if index < len(cells[column]) else "" for column in self.columns
            ]))
        return lines

    @functools.cached_property
    def body(self):
        return "".join(
            line + "\n" for line in itertools.chain.from_iterable(map(self.lines, self._commands))
        )

    @functools.cached_property
    def text(self):
        """
        Header plus body, newline-terminated. Computed once per renderer.
        """
        return self.header + self.body

    def __str__(self):
        return self.text


__all__ = (
    "Column",
    "HelpRenderer",
)

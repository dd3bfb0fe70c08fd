"""
Command catalog: the immutable-per-session set of recognized command templates.

Scope
- Ordered collection of Command templates, unique by name (ordinal comparison).
- Optional free-text usage statement and a logging-vs-console preference, both
  consumed only when help is shown.
- Construction either programmatically or from a JSON document (text or file).

JSON shape
    [
        {
            "command": "convert",
            "description": "Convert file for some reason",
            "options": [{"shortName": "e", "longName": "encoding", "requiresParameter": true}],
            "parameters": ["input file path", "output file path"],
            "parameterCount": 2
        }
    ]
- "command" is required; every other member is optional.
- "parameters" are documentation names (rendered as <input file path> in help);
  "parameterCount" is the required positional count enforced when parsing.

Failures
- Malformed documents raise MalformedCatalogError; a missing file raises
  CatalogNotFoundError. Both are load-time failures, never parse faults.
"""
import json
from collections.abc import Iterable, Mapping, Sequence

from .commands import Command, CommandOption
from .faults import CatalogNotFoundError, MalformedCatalogError
from .helps import HelpRenderer
from .outputs import resolve_sink
from .utils import *


def _decode_option(index, object):
    if not isinstance(object, Mapping):
        raise MalformedCatalogError(
            "%s option must be an object" % ordinal(index + 1),
            hint="write options as {\"shortName\": ..., \"longName\": ..., \"requiresParameter\": ...}",
        )
    # A JSON null counts as "not given".
    short, long = object.get("shortName"), object.get("longName")
    return CommandOption(
        short if short is not None else Unset,
        long if long is not None else Unset,
        requires_parameter=object.get("requiresParameter") or False,
    )


def _decode_command(index, object):
    if not isinstance(object, Mapping):
        raise MalformedCatalogError(
            "%s catalog entry must be an object" % ordinal(index + 1),
            hint="every entry needs at least a \"command\" member",
        )
    if "command" not in object:
        raise MalformedCatalogError(
            "%s catalog entry has no \"command\" member" % ordinal(index + 1),
            hint="add the command name, e.g. {\"command\": \"help\"}",
        )

    options = object.get("options") or ()
    parameters = object.get("parameters") or ()
    if not isinstance(options, Sequence) or isinstance(options, str):
        raise MalformedCatalogError("%s catalog entry \"options\" must be an array" % ordinal(index + 1))
    if not isinstance(parameters, Sequence) or isinstance(parameters, str):
        raise MalformedCatalogError("%s catalog entry \"parameters\" must be an array" % ordinal(index + 1))

    description = object.get("description")
    return Command(
        object["command"],
        description if description is not None else Unset,
        options=[_decode_option(position, option) for position, option in enumerate(options)],
        parameters=parameters,
        required_parameter_count=object.get("parameterCount") or 0,
    )


class CommandCatalog:
    """
    Ordered, name-unique collection of command templates.

    Parameters
    - commands: Iterable[Command]
      Templates in declaration order (this order is also the help order).
    - usage: str | Unset
      Free-text usage statement shown under "Usage:" in help.
    - use_log: bool (keyword-only)
      When True, show_help() writes through logging instead of the console.

    Raises
    - TypeError: non-Command members or wrong option types.
    - ValueError: duplicated command names.

    The catalog is read-only after construction: concurrent parses and renders may
    share it freely.
    """

    def __init__(self, commands=(), /, usage=Unset, *, use_log=False):
        if not isinstance(commands, Iterable) or isinstance(commands, str):
            raise TypeError("command-catalog 'commands' must be an iterable of commands")
        if not isinstance(usage, str | Unset):
            raise TypeError("command-catalog 'usage' must be a string")
        if not isinstance(use_log, bool):
            raise TypeError("command-catalog 'use_log' must be a boolean")

        index = {}
        for command in commands:
            if not isinstance(command, Command):
                raise TypeError("command-catalog 'commands' must only contain commands")
            if index.setdefault(command.name, command) is not command:
                raise ValueError(f"command-catalog command name {command.name!r} is already in use")

        self._index = index
        self._commands = tuple(index.values())
        self._usage = coalesce(usage)
        self._use_log = use_log

    @classmethod
    def loads(cls, text, /, usage=Unset, *, use_log=False):
        """
        Build a catalog from a JSON document (see the module docstring for its shape).

        Raises
        - MalformedCatalogError: invalid JSON, wrong shapes, or values the model rejects.
        """
        if not isinstance(text, str | bytes | bytearray):
            raise TypeError("loads() argument must be a string")
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exception:
            raise MalformedCatalogError(
                "invalid json at line %d column %d: %s" % (exception.lineno, exception.colno, exception.msg),
                hint="check the catalog file with a json validator",
            ) from exception

        if not isinstance(document, list):
            raise MalformedCatalogError(
                "catalog document must be an array of commands",
                hint="wrap the command objects in [ ... ]",
            )

        try:
            return cls(
                [_decode_command(index, object) for index, object in enumerate(document)],
                usage,
                use_log=use_log,
            )
        except (TypeError, ValueError) as exception:
            if isinstance(exception, MalformedCatalogError):
                raise
            raise MalformedCatalogError(str(exception), hint="fix the offending catalog entry") from exception

    @classmethod
    def load(cls, path, /, usage=Unset, *, use_log=False):
        """
        Build a catalog from a UTF-8 JSON file.

        Raises
        - CatalogNotFoundError: the file does not exist.
        - MalformedCatalogError: see loads().
        """
        try:
            with open(path, encoding="utf-8") as file:
                text = file.read()
        except FileNotFoundError as exception:
            raise CatalogNotFoundError(
                "catalog file %r was not found" % str(path),
                hint="check the path or create the catalog file",
                input=str(path),
            ) from exception
        return cls.loads(text, usage, use_log=use_log)

    @property
    def commands(self):
        return self._commands

    @property
    def usage(self):
        return self._usage

    @property
    def use_log(self):
        return self._use_log

    def get(self, name, /):
        """
        Return the template whose name equals name (ordinal comparison), else None.
        """
        return self._index.get(name) if isinstance(name, str) else None

    def __contains__(self, name):
        return self.get(name) is not None

    def __iter__(self):
        return iter(self._commands)

    def __len__(self):
        return len(self._commands)

    def __rich_repr__(self):
        yield "commands", self._commands
        yield "usage", self._usage
        yield "use_log", self._use_log

    def __repr__(self):
        return f"command-catalog(commands={list(self._commands)!r}, usage={self._usage!r}, use_log={self._use_log!r})"

    def get_help(self, title=Unset, /):
        """
        Return the rendered help text for every command, in declaration order.
        """
        return HelpRenderer(self._commands, title, self._usage).text

    def show_help(self, title=Unset, /, sink=Unset):
        """
        Write the help text to sink (default: logging when use_log, else the console).
        """
        resolve_sink(sink, use_log=self._use_log)(self.get_help(title))


__all__ = (
    "CommandCatalog",
)

"""
Commandset argument matching: map a raw argument vector to a command.

Pipeline
1) Route: the first token names the command. Help markers ("help" first, or any of
   -?, -h, --help anywhere, case-insensitive) short-circuit to the help command.
   Unknown names are offered to an optional infer strategy before failing.
2) Walk: every following token is a long option ("--name"), a short option ("-n")
   or a positional. Value-taking options consume the next token unless it looks
   like an option itself.
3) Validate: fewer positionals than the template requires is a fault.

Contract
- match() never raises for user input and never logs: the outcome (success or the
  first fault met) is handed back as a ParseResult.
- Templates are never written to. The matched command and every matched option
  are fresh copies built with copy.replace(), so one catalog can serve any number
  of parses, concurrently if needed.
- invoke() is the CLI-facing wrapper: it tokenizes, matches, shows help and
  surfaces faults through trigger().
"""
import copy
import shlex
import sys
from collections import namedtuple
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from .catalog import CommandCatalog
from .commands import Command
from .faults import *
from .outputs import resolve_sink
from .utils import *

_HELP_COMMAND = "help"
_HELP_MARKERS = frozenset(("-?", "-h", "--help"))


@runtime_checkable
class InferStrategy(Protocol):
    """
    Fallback lookup for command names the catalog does not know.

    infer_command() receives the unknown first token and the catalog templates (a
    tuple, in declaration order) and returns a Command to use as template, or None.
    """

    def infer_command(self, token, templates, /):
        ...


class ParseResult(namedtuple("ParseResult", ("valid", "command", "fault"))):
    """
    Outcome of one match() call.

    - valid: bool
    - command: Command | None (always None when invalid)
    - fault: CommandException | None (always None when valid)
    """
    __slots__ = ()

    @property
    def code(self):
        return None if self.fault is None else self.fault.code

    @property
    def message(self):
        return None if self.fault is None else str(self.fault)


def _succeed(command):
    return ParseResult(True, command, None)


def _fail(fault):
    return ParseResult(False, None, fault)


def _is_help(tokens):
    return tokens[0].lower() == _HELP_COMMAND or any(token.lower() in _HELP_MARKERS for token in tokens)


class ArgumentMatcher:
    """
    Match argument vectors against a catalog of command templates.

    Parameters
    - catalog: CommandCatalog | Iterable[Command]
      Plain iterables are wrapped into a CommandCatalog (same validation rules).
    - infer: InferStrategy | Callable[[str, tuple[Command, ...]], Command | None] | Unset
      Consulted only when the first token names no template.

    Raises
    - TypeError: catalog or infer of the wrong kind.
    """

    def __init__(self, catalog, /, infer=Unset):
        if not isinstance(catalog, CommandCatalog):
            if not isinstance(catalog, Iterable) or isinstance(catalog, str):
                raise TypeError("argument-matcher 'catalog' must be a command catalog or an iterable of commands")
            catalog = CommandCatalog(catalog)

        if infer is Unset:
            inferrer = None
        elif isinstance(infer, InferStrategy) and callable(infer.infer_command):
            inferrer = infer.infer_command
        elif callable(infer):
            inferrer = infer
        else:
            raise TypeError("argument-matcher 'infer' must be an infer strategy or a callable")

        self._catalog = catalog
        self._infer = inferrer

    @property
    def catalog(self):
        return self._catalog

    def _template(self, token):
        template = self._catalog.get(token)
        if template is None and self._infer is not None:
            template = self._infer(token, self._catalog.commands)
            if template is not None and not isinstance(template, Command):
                raise TypeError("infer_command() must return a command or None")
        return template

    def _help(self):
        template = self._catalog.get(_HELP_COMMAND)
        if template is None:
            return Command(_HELP_COMMAND)
        return copy.replace(template, options=[], parameters=[])

    def match(self, arguments, /):
        """
        Match one argument vector (index 0 is the command name).

        Returns
        - ParseResult: success with a fresh command holding the matched options (in
          match order) and positionals (in input order), or failure with the first
          fault met.
        """
        if isinstance(arguments, str) or not isinstance(arguments, Iterable):
            raise TypeError("match() argument must be an iterable of strings")
        tokens = list(arguments)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("match() argument must only contain strings")

        if not tokens:
            return _fail(NoArgumentsError(
                "there are no arguments given",
                hint=f"run '{_HELP_COMMAND}' to list the available commands",
            ))

        if _is_help(tokens):
            return _succeed(self._help())

        template = self._template(tokens[0])
        if template is None:
            return _fail(UnknownCommandError(
                f"unknown command {tokens[0]!r} at first position",
                hint=f"run '{_HELP_COMMAND}' to list the available commands",
                input=tokens[0],
                index=0,
            ))

        options, parameters = [], []
        index = 1
        while index < len(tokens):
            token = tokens[index]
            if token.startswith("--"):
                option = template.get_option(long=token[2:])
            elif token.startswith("-"):
                option = template.get_option(short=token[1:])
            else:
                parameters.append(token)
                index += 1
                continue

            if option is None:
                return _fail(UnknownOptionError(
                    f"unknown option {token!r} at {ordinal(index + 1)} position",
                    hint=f"run '{_HELP_COMMAND}' to list the options of {template.name!r}",
                    input=token,
                    index=index,
                ))

            if option.requires_parameter:
                if index + 1 >= len(tokens) or tokens[index + 1].startswith("-"):
                    return _fail(MissingOptionValueError(
                        f"option {token!r} at {ordinal(index + 1)} position requires a value",
                        hint=f"write the value right after it, e.g. {token} <value>",
                        input=token,
                        index=index,
                    ))
                options.append(copy.replace(option, parameter=tokens[index + 1]))
                index += 2
            else:
                options.append(copy.replace(option))
                index += 1

        if len(parameters) < template.required_parameter_count:
            required = template.required_parameter_count
            return _fail(TooFewParametersError(
                f"command {template.name!r} requires {required} "
                f"parameter{"s" if required != 1 else ""}, {len(parameters)} given",
                hint=f"run '{_HELP_COMMAND}' to see the parameters of {template.name!r}",
                input=template.name,
                index=0,
            ))

        return _succeed(copy.replace(template, options=options, parameters=parameters))


def _tokenize(prompt):
    if prompt is Unset:
        return sys.argv[1:]
    elif isinstance(prompt, str):
        return shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = []
        for item in prompt:
            if not isinstance(item, str):
                raise TypeError("invoke() prompt must be a string or an iterable of strings")
            if item := item.strip():
                tokens.append(item)
        return tokens
    raise TypeError("invoke() prompt must be a string or an iterable of strings")


def invoke(
        catalog,
        prompt=Unset,
        /,
        *,
        title=Unset,
        infer=Unset,
        shell=False,
        fancy=False,
        colorful=True,
        sink=Unset,
):
    """
    Tokenize, match and surface the outcome the way a CLI would.

    Parameters
    - catalog: CommandCatalog | Iterable[Command] | ArgumentMatcher
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string; split with shlex.split.
      • Iterable[str]: pre-tokenized; each item is trimmed, empty items dropped.
    - title: headline for the help text.
    - infer: forwarded to ArgumentMatcher (ignored for a ready matcher).
    - shell/fancy/colorful: fault rendering switches (see trigger()).
    - sink: where help goes; defaults to the catalog's preference.

    Behavior
    - Success: returns the ParseResult. In shell mode a help match also shows the
      help text.
    - Failure, non-shell mode: the fault is raised.
    - Failure, shell mode: help goes to stderr (or the log), the fault is printed
      through rich and the process exits with status 1.
    """
    matcher = catalog if isinstance(catalog, ArgumentMatcher) else ArgumentMatcher(catalog, infer)
    result = matcher.match(_tokenize(prompt))

    if result.valid:
        if shell and result.command.name == _HELP_COMMAND:
            matcher.catalog.show_help(title, sink=resolve_sink(sink, use_log=matcher.catalog.use_log))
        return result

    if shell:
        matcher.catalog.show_help(title, sink=resolve_sink(sink, use_log=matcher.catalog.use_log, stderr=True))
    trigger(result.fault, shell=shell, fancy=fancy, colorful=colorful)


__all__ = (
    "InferStrategy",
    "ParseResult",
    "ArgumentMatcher",
    "invoke",
)

"""
Commandset faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and searches predictable.
- CommandException: base type that carries message + options and knows how to
  render itself (rich) in a friendly, lowercased and actionable way.
- trigger(): central entry point to surface a fault (raise, or print and exit).

UX goals
- Position-first messages: parse faults name the ordinal position of the token
  that failed (“unknown option '-z' at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single hint.

Integration
- The matcher never raises for user input: it builds a fault and hands it back
  inside a ParseResult. Callers (or invoke()) decide whether to trigger it.
- In non-shell mode trigger() raises the fault; in shell mode it is printed on
  stderr through rich and the process exits with status 1.
- Catalog loading raises its faults directly (they are load-time failures).
"""
import copy
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (1110x): NO_ARGUMENTS, UNKNOWN_COMMAND
    - options (1111x): UNKNOWN_OPTION (also used when a value-taking option has no value)
    - positionals (1112x): TOO_FEW_PARAMETERS
    - catalog loading (131xx): MALFORMED_CATALOG, MISSING_CATALOG

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- routing errors ---
    NO_ARGUMENTS       = 11100
    UNKNOWN_COMMAND    = 11101

    # --- option errors ---
    UNKNOWN_OPTION     = 11112

    # --- positional errors ---
    TOO_FEW_PARAMETERS = 11125

    # --- catalog errors ---
    MALFORMED_CATALOG  = 13101
    MISSING_CATALOG    = 13102

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to override
        numeric ids with friendlier labels; otherwise the numeric value is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base fault: a message plus read-only rendering/context options.

    common options
    - code: FaultCode (defaults to the class-level __code__)
    - title: short lowercase headline
    - hint: one actionable sentence
    - input/index: offending token and its 0-based position, when relevant
    - shell/fancy/colorful/prog: rendering switches used by trigger()
    """
    __code__ = Unset
    __title__ = "command error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = self.options.get("prog", getattr(main, "__prog__", os.path.basename(sys.argv[0]) or "commandset"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "-"

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(code, "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        message = text(str(self), "error-message")
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NoArgumentsError(CommandException):
    __code__ = FaultCode.NO_ARGUMENTS
    __title__ = "no arguments"


class UnknownCommandError(CommandException):
    __code__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class UnknownOptionError(CommandException):
    __code__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"


class MissingOptionValueError(UnknownOptionError):
    __title__ = "missing option value"


class TooFewParametersError(CommandException):
    __code__ = FaultCode.TOO_FEW_PARAMETERS
    __title__ = "too few parameters"


class CatalogError(CommandException):
    """
    load-time catalog failure (not a parse fault).
    """
    __code__ = FaultCode.MALFORMED_CATALOG
    __title__ = "bad catalog"


class MalformedCatalogError(CatalogError, ValueError):
    __title__ = "malformed catalog"


class CatalogNotFoundError(CatalogError, FileNotFoundError):
    __code__ = FaultCode.MISSING_CATALOG
    __title__ = "catalog not found"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace() before triggering.
    - shell=True prints the fault through rich and exits with status 1;
      otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "NoArgumentsError",
    "UnknownCommandError",
    "UnknownOptionError",
    "MissingOptionValueError",
    "TooFewParametersError",
    "CatalogError",
    "MalformedCatalogError",
    "CatalogNotFoundError",
    "trigger",
)

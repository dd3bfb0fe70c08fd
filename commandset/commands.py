"""
Commandset data model: commands and their options.

Overview
- CommandOption: one flag, either as a declared template (-e/--encoding) or as a
  matched runtime instance carrying the value it captured.
- Command: one recognized verb. As a catalog template it declares its options,
  the documentation names of its positionals and how many positionals it needs;
  as a parse result it holds only what the invocation actually supplied.

Templates vs results
- Both roles use the same classes. A parse result is always a fresh instance built
  with copy.replace(template, ...); templates are never written to, which keeps a
  catalog reusable across parses and safe to share between threads.
- Every field is exposed through a read-only property; container properties hand
  out fresh lists, so callers cannot mutate a template through them either.

Quick example
    >>> encoding = CommandOption("e", "encoding", requires_parameter=True)
    >>> convert = Command("convert", "Convert a file", options=[encoding], required_parameter_count=1)
    >>> convert.get_option(long="encoding") is encoding
    True
"""
import functools
import operator
import re
from collections.abc import Iterable

from .utils import *


class _Model:
    """
    Shared introspection for the model classes.

    Subclasses list their public fields in __introspectable__; each one is published
    as a read-only property over the private "_{name}" attribute, and drives the
    stable __repr__ and rich's __rich_repr__.
    """
    __introspectable__ = ()
    __typename__ = "model"

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        cls.__typename__ = re.sub(r"(?<!^)(?=[A-Z])", r"-", cls.__name__).lower()
        for name in cls.__introspectable__:
            setattr(cls, name, mirror(name))

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return f"{type(self).__typename__}({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"


def _unset(object, /):
    # None is how the model stores "absent"; constructors spell it Unset.
    return Unset if object is None else object


def _sanitize_name(cls, field, name, /):
    # Option names are bare words: the dashes belong to the command line, not the name.
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    elif not re.fullmatch(r"[^\s-]\S*", name):
        raise ValueError(f"{cls.__typename__} {field!r} must be a non-empty word not starting with '-'")
    return name


class CommandOption(_Model):
    """
    A command option (flag).

    Fields
    - short_name: str | None
      Short form, written "-e" on the command line.
    - long_name: str | None
      Long form, written "--encoding".
    - requires_parameter: bool
      The option consumes the following argument.
    - parameter: str | None
      Captured value; only ever set on matched options.

    At least one of the two names must be given. Options are immutable; use
    copy.replace(option, parameter=value) to derive a matched instance.
    """
    __introspectable__ = (
        "short_name",
        "long_name",
        "requires_parameter",
        "parameter",
    )

    def __init__(self, short_name=Unset, long_name=Unset, /, requires_parameter=False, parameter=Unset):
        if short_name is Unset and long_name is Unset:
            raise TypeError(f"{type(self).__typename__} must specify at least one name")
        if short_name is not Unset:
            _sanitize_name(type(self), "short_name", short_name)
        if long_name is not Unset:
            _sanitize_name(type(self), "long_name", long_name)

        if not isinstance(requires_parameter, bool):
            raise TypeError(f"{type(self).__typename__} 'requires_parameter' must be a boolean")

        if not isinstance(parameter, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'parameter' must be a string")
        elif isinstance(parameter, str) and not requires_parameter:
            raise ValueError(f"{type(self).__typename__} cannot hold a parameter it does not require")

        self._short_name = coalesce(short_name)
        self._long_name = coalesce(long_name)
        self._requires_parameter = requires_parameter
        self._parameter = coalesce(parameter)

    def matches(self, short=Unset, long=Unset):
        """
        Return True when either supplied name matches this option.

        Comparison is ordinal. A name that is not supplied (or not declared on this
        option) never matches, so an option declared with only one form is still
        found through that form.
        """
        return (
            (short is not Unset and self._short_name is not None and self._short_name == short) or
            (long is not Unset and self._long_name is not None and self._long_name == long)
        )

    def __replace__(self, **changes):
        fields = {
            "short_name": _unset(self._short_name),
            "long_name": _unset(self._long_name),
            "requires_parameter": self._requires_parameter,
            "parameter": _unset(self._parameter),
        } | {name: _unset(value) for name, value in changes.items()}
        return type(self)(
            fields.pop("short_name"),
            fields.pop("long_name"),
            **fields
        )


class Command(_Model):
    """
    A command-line command.

    Fields
    - name: str
      Non-empty, compared ordinally against the first argument.
    - description: str | None
      Help text; an empty or blank string is stored as None. Commands without one
      leave the Description column blank (or suppress it when no command has one).
    - options: list[CommandOption]
      Declared options on a template, matched options (in match order) on a parse result.
    - parameters: list[str]
      Documentation names of positionals on a template, consumed positional
      arguments (in input order) on a parse result.
    - required_parameter_count: int
      Minimum number of positionals; no maximum.
    """
    __introspectable__ = (
        "name",
        "description",
        "options",
        "parameters",
        "required_parameter_count",
    )

    def __init__(self, name, /, description=Unset, options=(), parameters=(), required_parameter_count=0):
        typename = type(self).__typename__

        if not isinstance(name, str):
            raise TypeError(f"{typename} 'name' must be a string")
        elif not name:
            raise ValueError(f"{typename} 'name' cannot be empty")

        if not isinstance(description, str | Unset):
            raise TypeError(f"{typename} 'description' must be a string")
        elif isinstance(description, str) and not description.strip():
            # Blank means absent: it has no width in help.
            description = Unset

        if not isinstance(options, Iterable) or isinstance(options, str):
            raise TypeError(f"{typename} 'options' must be an iterable of options")
        options = list(options)
        if not all(isinstance(option, CommandOption) for option in options):
            raise TypeError(f"{typename} 'options' must only contain options")

        if not isinstance(parameters, Iterable) or isinstance(parameters, str):
            raise TypeError(f"{typename} 'parameters' must be an iterable of strings")
        parameters = list(parameters)
        if not all(isinstance(parameter, str) for parameter in parameters):
            raise TypeError(f"{typename} 'parameters' must only contain strings")

        if not isinstance(required_parameter_count, int) or isinstance(required_parameter_count, bool):
            raise TypeError(f"{typename} 'required_parameter_count' must be an integer")
        elif required_parameter_count < 0:
            raise ValueError(f"{typename} 'required_parameter_count' cannot be negative")

        self._name = name
        self._description = coalesce(description)
        self._options = options
        self._parameters = parameters
        self._required_parameter_count = required_parameter_count

    def get_option(self, short=Unset, long=Unset):
        """
        Return the first option (declaration order) matching short OR long, else None.
        """
        for option in self._options:
            if option.matches(short, long):
                return option
        return None

    def has_option(self, short=Unset, long=Unset):
        return self.get_option(short, long) is not None

    def __replace__(self, **changes):
        fields = {
            "name": self._name,
            "description": _unset(self._description),
            "options": self._options,
            "parameters": self._parameters,
            "required_parameter_count": self._required_parameter_count,
        } | changes
        fields["description"] = _unset(fields["description"])
        return type(self)(fields.pop("name"), **fields)


__all__ = (
    "CommandOption",
    "Command",
)

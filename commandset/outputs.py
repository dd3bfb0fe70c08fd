"""
Output sinks for rendered help.

A sink is any callable that accepts one string. The library ships two:
- ConsoleSink: prints through a rich Console (stdout, or stderr on request) with
  markup and highlighting off, so column alignment reaches the terminal untouched.
- LogSink: writes through a logging.Logger ("commandset" unless one is supplied).
  Handler/level configuration belongs to the host application.
"""
import logging

from rich.console import Console

from .utils import *


class ConsoleSink:
    def __init__(self, *, stderr=False, file=None):
        self._console = Console(stderr=stderr, file=file, highlight=False, emoji=False)

    @property
    def console(self):
        return self._console

    def __call__(self, message, /):
        # The help text carries its own trailing newline.
        self._console.print(message, markup=False, highlight=False, emoji=False, soft_wrap=True, end="")


class LogSink:
    def __init__(self, logger=Unset, /, level=logging.INFO):
        if not isinstance(logger, logging.Logger | Unset):
            raise TypeError("log-sink 'logger' must be a logging.Logger")
        self._logger = coalesce(logger, logging.getLogger("commandset"))
        self._level = level

    @property
    def logger(self):
        return self._logger

    def __call__(self, message, /):
        self._logger.log(self._level, message.rstrip("\n"))


def resolve_sink(sink=Unset, /, *, use_log=False, stderr=False):
    """
    Return a concrete sink: the one given, else a LogSink or ConsoleSink by preference.
    """
    if sink is Unset:
        return LogSink() if use_log else ConsoleSink(stderr=stderr)
    if not callable(sink):
        raise TypeError("sink must be a callable accepting one string")
    return sink


__all__ = (
    "ConsoleSink",
    "LogSink",
    "resolve_sink",
)

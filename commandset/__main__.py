"""
Command line entry point: python -m commandset CATALOG [ARGUMENT ...]

Loads a JSON catalog, matches the remaining arguments against it in shell mode and
pretty-prints the matched command. Help requests print the help text instead.

Exit status
- 0: matched (or help shown)
- 1: the arguments did not match (help and the fault go to stderr)
- 2: the catalog could not be loaded, or no catalog was given
"""
import sys

from rich.pretty import pprint

from .catalog import CommandCatalog
from .faults import CatalogError, CommandException, console
from .matcher import invoke

__prog__ = "commandset"


def main(argv=None, /):
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv:
        console.print(CommandException(
            "a catalog file is required",
            title="missing catalog",
            hint="run python -m commandset CATALOG [ARGUMENT ...]",
            prog=__prog__,
        ))
        return 2

    path, *arguments = argv
    try:
        catalog = CommandCatalog.load(path)
    except CatalogError as fault:
        console.print(fault)
        return 2

    result = invoke(catalog, arguments, title=__prog__, shell=True)
    if result.command.name != "help":
        pprint(result.command)
    return 0


if __name__ == "__main__":
    sys.exit(main())

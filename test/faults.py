"""
Faults tests (codes, options, rendering, triggering).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured through a rich Console writing into a StringIO.
"""

from __future__ import annotations

import copy
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from commandset.faults import (
    FaultCode,
    CommandException,
    NoArgumentsError,
    UnknownCommandError,
    UnknownOptionError,
    MissingOptionValueError,
    TooFewParametersError,
    CatalogError,
    MalformedCatalogError,
    CatalogNotFoundError,
    trigger,
)


def _capture():
    return Console(file=io.StringIO(), color_system=None, width=120, highlight=False)


class TestFaultCode(TestCase):
    def testCodesAreStable(self):
        self.assertEqual(FaultCode.NO_ARGUMENTS, 11100)
        self.assertEqual(FaultCode.UNKNOWN_COMMAND, 11101)
        self.assertEqual(FaultCode.UNKNOWN_OPTION, 11112)
        self.assertEqual(FaultCode.TOO_FEW_PARAMETERS, 11125)
        self.assertEqual(FaultCode.MALFORMED_CATALOG, 13101)
        self.assertEqual(FaultCode.MISSING_CATALOG, 13102)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "11101")

    def testNormalizeHonorsHostCodes(self):
        main = __import__("__main__")
        with mock.patch.object(main, "__codes__", {FaultCode.UNKNOWN_COMMAND: "E-CMD"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "E-CMD")


class TestCommandException(TestCase):
    def testClassLevelCodesAndTitles(self):
        self.assertEqual(NoArgumentsError().code, FaultCode.NO_ARGUMENTS)
        self.assertEqual(UnknownCommandError().code, FaultCode.UNKNOWN_COMMAND)
        self.assertEqual(TooFewParametersError().code, FaultCode.TOO_FEW_PARAMETERS)
        self.assertEqual(MissingOptionValueError().title, "missing option value")

    def testMissingValueSharesUnknownOptionCode(self):
        fault = MissingOptionValueError("option '-e' at second position requires a value")
        self.assertIsInstance(fault, UnknownOptionError)
        self.assertEqual(fault.code, FaultCode.UNKNOWN_OPTION)

    def testCatalogFaultsAreAlsoBuiltinErrors(self):
        self.assertIsInstance(MalformedCatalogError("bad"), ValueError)
        self.assertIsInstance(CatalogNotFoundError("missing"), FileNotFoundError)
        self.assertIsInstance(CatalogNotFoundError("missing"), CatalogError)
        self.assertEqual(CatalogNotFoundError("missing").code, FaultCode.MISSING_CATALOG)
        self.assertEqual(str(CatalogNotFoundError("missing")), "missing")

    def testOptionsAreReadOnly(self):
        fault = UnknownCommandError("unknown command 'x' at first position", input="x", index=0)
        self.assertEqual(fault.options["input"], "x")
        with self.assertRaises(TypeError):
            fault.options["input"] = "y"  # type: ignore[index]

    def testOptionsOverrideClassDefaults(self):
        fault = UnknownCommandError("boom", code=FaultCode.NO_ARGUMENTS, title="custom", hint="try again")
        self.assertEqual(fault.code, FaultCode.NO_ARGUMENTS)
        self.assertEqual(fault.title, "custom")
        self.assertEqual(fault.hint, "try again")

    def testReplaceMergesOptions(self):
        fault = UnknownOptionError("unknown option '-z' at third position", index=2)
        replaced = copy.replace(fault, shell=True)
        self.assertIsInstance(replaced, UnknownOptionError)
        self.assertEqual(str(replaced), str(fault))
        self.assertEqual(replaced.options["index"], 2)
        self.assertTrue(replaced.options["shell"])
        self.assertNotIn("shell", fault.options)

    def testRichRendering(self):
        console = _capture()
        console.print(UnknownCommandError(
            "unknown command 'x' at first position",
            hint="run 'help' to list the available commands",
            prog="tool",
        ))
        output = console.file.getvalue()
        self.assertIn("[ tool — 11101 | Unknown Command ]", output)
        self.assertIn("unknown command 'x' at first position", output)
        self.assertIn("→ run 'help' to list the available commands", output)

    def testRichRenderingFancyPanel(self):
        console = _capture()
        console.print(NoArgumentsError("there are no arguments given", prog="tool", fancy=True, colorful=False))
        output = console.file.getvalue()
        self.assertIn("tool — 11100 | No Arguments", output)
        self.assertIn("there are no arguments given", output)


class TestTrigger(TestCase):
    def testTriggerRaisesOutsideShell(self):
        with self.assertRaises(UnknownCommandError) as context:
            trigger(UnknownCommandError("unknown command 'x' at first position"), hint="h")
        self.assertEqual(context.exception.hint, "h")

    def testTriggerPrintsAndExitsInShell(self):
        console = _capture()
        with mock.patch("commandset.faults.console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(TooFewParametersError("command 'x' requires 1 parameter, 0 given", prog="tool"), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("command 'x' requires 1 parameter, 0 given", console.file.getvalue())

    def testTriggerRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


if __name__ == "__main__":
    unittest.main()

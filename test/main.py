"""
Entry point tests (python -m commandset CATALOG [ARGUMENT ...]).

Conventions
- Test method names follow CamelCase per project convention.
- stdout is redirected; fault output goes through a patched fault console.
"""

from __future__ import annotations

import contextlib
import io
import json
import os
import tempfile
import unittest
from unittest import TestCase, mock

from rich.console import Console

from commandset.__main__ import main

SAMPLE = [
    {"command": "help", "description": "Show this information"},
    {"command": "convert", "parameters": ["input file path"], "parameterCount": 1},
]


class TestMain(TestCase):
    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.addCleanup(self.directory.cleanup)
        self.path = os.path.join(self.directory.name, "catalog.json")
        with open(self.path, "w", encoding="utf-8") as file:
            json.dump(SAMPLE, file)

        self.console = Console(file=io.StringIO(), color_system=None, width=120)
        patcher = mock.patch("commandset.__main__.console", self.console)
        patcher.start()
        self.addCleanup(patcher.stop)
        patcher = mock.patch("commandset.faults.console", self.console)
        patcher.start()
        self.addCleanup(patcher.stop)

    def testMissingCatalogArgument(self):
        self.assertEqual(main([]), 2)
        self.assertIn("a catalog file is required", self.console.file.getvalue())

    def testMissingCatalogFile(self):
        self.assertEqual(main([os.path.join(self.directory.name, "missing.json")]), 2)
        self.assertIn("13102", self.console.file.getvalue())

    def testMalformedCatalogFile(self):
        with open(self.path, "w", encoding="utf-8") as file:
            file.write("[{")
        self.assertEqual(main([self.path]), 2)
        self.assertIn("13101", self.console.file.getvalue())

    def testHelpPrintsHelp(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            self.assertEqual(main([self.path, "help"]), 0)
        self.assertIn("help    Show this information", stdout.getvalue())

    def testMatchPrintsCommand(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            self.assertEqual(main([self.path, "convert", "file.txt"]), 0)
        self.assertIn("file.txt", stdout.getvalue())

    def testParseFailureExitsWithOne(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as context:
                main([self.path, "convert"])
        self.assertEqual(context.exception.code, 1)
        self.assertIn("requires 1 parameter, 0 given", self.console.file.getvalue())


if __name__ == "__main__":
    unittest.main()

#!/usr/bin/env python3
"""Tests for the readline completer adapter."""
import types
import unittest
from unittest import mock

import pycqlsh.cli.repl as repl_mod
from pycqlsh.cli.repl import ReadlineCompleter
from pycqlsh.core.completion import CompletionEngine


class FakeEngine:

    def get_keyspaces(self):
        return ["ks", "system"]

    def get_tables(self, keyspace):
        return ["users", "user_events"]

    def get_current_keyspace(self):
        return "ks"

    def get_table_columns(self, spec):
        return ["id", "name"]


def fake_readline(line, begidx=None, endidx=None):
    if begidx is None:
        begidx = len(line) - len(line.split(" ")[-1])
    return types.SimpleNamespace(
        get_line_buffer=lambda: line,
        get_begidx=lambda: begidx,
        get_endidx=lambda: len(line) if endidx is None else endidx,
    )


class ReadlineCompleterTests(unittest.TestCase):

    def setUp(self):
        self.completer = ReadlineCompleter(CompletionEngine(FakeEngine()))

    def collect(self, text):
        out, state = [], 0
        while True:
            match = self.completer.complete(text, state)
            if match is None:
                return out
            out.append(match)
            state += 1

    def test_tables(self):
        with mock.patch.object(repl_mod, "readline", fake_readline("SELECT * FROM us")):
            self.assertEqual(self.collect("us"), ["users", "user_events"])

    def test_cursor_inside_line(self):
        line = "SELECT * FROM us WHERE id = 1"
        with mock.patch.object(repl_mod, "readline", fake_readline(line, begidx=14, endidx=16)):
            self.assertEqual(self.collect("us"), ["users", "user_events"])

    def test_keyspaces(self):
        with mock.patch.object(repl_mod, "readline", fake_readline("USE s")):
            self.assertEqual(self.collect("s"), ["system"])

    def test_engine_failure(self):
        engine = mock.Mock()
        engine.complete.side_effect = RuntimeError("boom")
        completer = ReadlineCompleter(engine)
        with mock.patch.object(repl_mod, "readline", fake_readline("SELECT")):
            self.assertIsNone(completer.complete("SELECT", 0))


if __name__ == "__main__":
    unittest.main()

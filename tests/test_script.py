#!/usr/bin/env python3
"""Tests for script statement splitting."""
import os
import tempfile
import unittest

from pycqlsh.core.errors import ScriptFileError
from pycqlsh.core.script import iter_statements, read_script, split_statements


class SplitStatementsTests(unittest.TestCase):

    def test_comments_and_blank_lines_skipped(self):
        text = "-- header\n\n// note\nSELECT * FROM t;\n"
        self.assertEqual(split_statements(text), ["SELECT * FROM t;"])

    def test_lines_joined_with_space(self):
        text = "SELECT *\n   FROM t\n WHERE id = 1;\nUSE ks;"
        self.assertEqual(split_statements(text), ["SELECT * FROM t WHERE id = 1;", "USE ks;"])

    def test_trailing_unterminated_statement(self):
        self.assertEqual(list(iter_statements(["SELECT 1;", "SELECT 2"])), ["SELECT 1;", "SELECT 2"])

    def test_read_script(self):
        with tempfile.NamedTemporaryFile('w', suffix='.cql', delete=False) as f:
            f.write("CREATE TABLE t (id int);\nINSERT INTO t VALUES (1);\n")
            path = f.name
        try:
            self.assertEqual(len(read_script(path)), 2)
        finally:
            os.unlink(path)

    def test_read_missing_script(self):
        with self.assertRaises(ScriptFileError):
            read_script("/nonexistent/dir/script.cql")


if __name__ == "__main__":
    unittest.main()

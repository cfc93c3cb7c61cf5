#!/usr/bin/env python3
"""Tests for the command-line entry point."""
import contextlib
import io
import os
import tempfile
import unittest
from unittest import mock

from pycqlsh.cli import main as main_mod


class NormalizeArgvTests(unittest.TestCase):

    def test_shell_is_default_subcommand(self):
        self.assertEqual(main_mod._normalize_argv([]), ["shell"])
        self.assertEqual(main_mod._normalize_argv(["db1", "9042"]), ["shell", "db1", "9042"])
        self.assertEqual(main_mod._normalize_argv(["--engine", "duckdb"]), ["shell", "--engine", "duckdb"])
        self.assertEqual(main_mod._normalize_argv(["config", "--list"]), ["config", "--list"])
        self.assertEqual(main_mod._normalize_argv(["--version"]), ["--version"])

    def test_parser_accepts_positional_host_and_port(self):
        args = main_mod.build_parser().parse_args(["shell", "db1", "9142", "-k", "ks"])
        self.assertEqual((args.host_arg, args.port_arg, args.keyspace), ("db1", 9142, "ks"))

    def test_file_and_execute_are_exclusive(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                main_mod.build_parser().parse_args(["shell", "-f", "a.cql", "-e", "SELECT 1;"])


class MainTests(unittest.TestCase):

    def run_main(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            with mock.patch.object(main_mod, "configure_logging"):
                with self.assertRaises(SystemExit) as cm:
                    main_mod.main(argv)
        return cm.exception.code, out.getvalue(), err.getvalue()

    def test_execute_statements(self):
        code, out, err = self.run_main(["--engine", "duckdb", "-e", "SELECT 1 AS x;"])
        self.assertEqual(code, 0)
        self.assertIn("x | \n--+-\n1 | \n", out)
        self.assertNotIn("> SELECT", out)
        self.assertIn("Script executed successfully.", err)

    def test_execute_with_error(self):
        code, out, err = self.run_main(["--engine", "duckdb", "-e", "SELECT * FROM nowhere;"])
        self.assertEqual(code, 1)
        self.assertIn("ERROR: ", err)
        self.assertIn("Script completed with errors.", err)

    def test_script_file_with_json_output(self):
        fd, path = tempfile.mkstemp(suffix=".cql")
        with os.fdopen(fd, "w") as f:
            f.write("CREATE TABLE t (id INTEGER, name VARCHAR);\nINSERT INTO t VALUES (1, 'a');\n"
                    "SELECT * FROM t;\n")
        self.addCleanup(os.unlink, path)
        code, out, err = self.run_main(["--engine", "duckdb", "--output-format", "json", "-f", path])
        self.assertEqual(code, 0)
        self.assertIn("> SELECT * FROM t;", out)
        self.assertIn('"name": "a"', out)

    def test_bad_consistency_exits_2(self):
        code, _, err = self.run_main(["--engine", "duckdb", "--consistency", "MOST", "-e", "SELECT 1;"])
        self.assertEqual(code, 2)
        self.assertIn("Error: Improper CONSISTENCY command", err)

    def test_banner(self):
        code, out, _ = self.run_main(["banner"])
        self.assertEqual(code, 0)
        self.assertIn("Interactive CQL shell", out)


if __name__ == "__main__":
    unittest.main()

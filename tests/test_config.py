#!/usr/bin/env python3
"""Tests for configuration loading and argument validation."""
import json
import os
import tempfile
import unittest

from pycqlsh.core.errors import ScriptFileError, UsageError
from pycqlsh.utils.config import Config, DEFAULT_CONFIG
from pycqlsh.utils.string_utils import (normalize_smart_quotes, strip_quotes,
                                        truncate_string, unquote_identifier)
from pycqlsh.utils.validation import (parse_page_size, parse_switch, validate_consistency,
                                      validate_output_path, validate_script_file,
                                      validate_serial_consistency)


class ConfigTests(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.path = os.path.join(self.tmpdir.name, "config.json")

    def test_defaults_without_file(self):
        cfg = Config(config_file=self.path, environ={})
        self.assertEqual(cfg.settings, DEFAULT_CONFIG)

    def test_file_overrides_defaults(self):
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"max_width": 80, "engine": "duckdb"}, f)
        cfg = Config(config_file=self.path, environ={})
        self.assertEqual(cfg.get("max_width"), 80)
        self.assertEqual(cfg.get("engine"), "duckdb")
        self.assertEqual(cfg.get("consistency"), "ONE")

    def test_bad_file_is_ignored(self):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with self.assertLogs("pycqlsh.utils.config", level="WARNING"):
            cfg = Config(config_file=self.path, environ={})
        self.assertEqual(cfg.get("max_width"), 100)

    def test_environment_overrides(self):
        cfg = Config(config_file=self.path, environ={"PYCQLSH_MAX_WIDTH": "60", "PYCQLSH_COLOR": "1"})
        self.assertEqual(cfg.get("max_width"), 60)
        self.assertTrue(cfg.get("color"))
        cfg = Config(config_file=self.path, environ={"PYCQLSH_MAX_WIDTH": "wide", "PYCQLSH_COLOR": "0"})
        self.assertEqual(cfg.get("max_width"), 100)
        self.assertFalse(cfg.get("color"))

    def test_set_coerces_and_save_round_trips(self):
        cfg = Config(config_file=self.path, environ={})
        cfg.set("max_width", "120")
        cfg.set("color", "on")
        cfg.set("host", "db1")
        cfg.save()
        reloaded = Config(config_file=self.path, environ={})
        self.assertEqual(reloaded.get("max_width"), 120)
        self.assertIs(reloaded.get("color"), True)
        self.assertEqual(reloaded.get("host"), "db1")
        with self.assertRaises(ValueError):
            cfg.set("page_size", "lots")


class ValidationTests(unittest.TestCase):

    def test_parse_switch(self):
        self.assertIsNone(parse_switch("  ", "EXPAND"))
        self.assertTrue(parse_switch("on", "EXPAND"))
        self.assertFalse(parse_switch(" OFF ", "EXPAND"))
        with self.assertRaises(UsageError):
            parse_switch("yes", "EXPAND")

    def test_consistency_levels(self):
        self.assertEqual(validate_consistency(" local_quorum "), "LOCAL_QUORUM")
        self.assertEqual(validate_consistency("each_quorum"), "EACH_QUORUM")
        with self.assertRaises(UsageError) as cm:
            validate_consistency("MOST")
        self.assertIn("Valid levels: ANY, ONE", cm.exception.message)
        self.assertEqual(validate_serial_consistency("serial"), "SERIAL")
        with self.assertRaises(UsageError):
            validate_serial_consistency("QUORUM")

    def test_page_size(self):
        self.assertEqual(parse_page_size(" 500 "), 500)
        for bad in ("0", "-1", "abc"):
            with self.assertRaises(UsageError):
                parse_page_size(bad)

    def test_script_and_output_paths(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ScriptFileError):
                validate_script_file(os.path.join(tmp, "missing.cql"))
            with self.assertRaises(ScriptFileError):
                validate_script_file(tmp)
            target = os.path.join(tmp, "out.txt")
            self.assertEqual(validate_output_path(target), target)
            with self.assertRaises(UsageError):
                validate_output_path(os.path.join(tmp, "nope", "out.txt"))


class StringUtilsTests(unittest.TestCase):

    def test_identifiers(self):
        self.assertEqual(unquote_identifier('"MyKs"'), "MyKs")
        self.assertEqual(unquote_identifier("MyKs"), "myks")

    def test_quotes(self):
        self.assertEqual(strip_quotes("'file.cql'"), "file.cql")
        self.assertEqual(strip_quotes('"file.cql"'), "file.cql")
        self.assertEqual(strip_quotes("'file.cql"), "'file.cql")
        self.assertEqual(normalize_smart_quotes("‘a’ “b”"), "'a' \"b\"")

    def test_truncate(self):
        self.assertEqual(truncate_string("abcdefghij", 6), "abc...")
        self.assertEqual(truncate_string("abc", 6), "abc")


if __name__ == "__main__":
    unittest.main()

#!/usr/bin/env python3
"""Tests for context-sensitive completion."""
import unittest

from pycqlsh.core.completion import (CompletionEngine, extract_table_name, filter_prefix,
                                     is_after_keyword, keyword_position)
from pycqlsh.core.models import CompletionContext


class FakeEngine:
    """Minimal metadata source for completion."""

    def __init__(self, current="ks"):
        self.current = current
        self.tables = {"ks": ["users", "user_events", "orders"], "other": ["audit"]}
        self.columns = {"users": ["id", "name", "email"], "orders": ["order_id", "user_id", "total"]}
        self.fail = False

    def get_keyspaces(self):
        if self.fail:
            raise RuntimeError("cluster unavailable")
        return ["ks", "other", "system"]

    def get_tables(self, keyspace):
        if self.fail:
            raise RuntimeError("cluster unavailable")
        return self.tables.get(keyspace, [])

    def get_current_keyspace(self):
        return self.current

    def get_table_columns(self, spec):
        if self.fail:
            raise RuntimeError("cluster unavailable")
        return self.columns.get(spec.split(".")[-1], [])


def complete(engine, buffer):
    return CompletionEngine(engine).complete(CompletionContext.from_buffer(buffer))


class CompletionContextTests(unittest.TestCase):

    def test_from_buffer(self):
        ctx = CompletionContext.from_buffer("SELECT * FROM us")
        self.assertEqual((ctx.word, ctx.word_index), ("us", 3))
        ctx = CompletionContext.from_buffer("SELECT * FROM ")
        self.assertEqual((ctx.word, ctx.word_index), ("", 3))
        ctx = CompletionContext.from_buffer("")
        self.assertEqual((ctx.word, ctx.word_index), ("", 0))


class CompletionEngineTests(unittest.TestCase):

    def setUp(self):
        self.engine = FakeEngine()

    def test_tables_after_from(self):
        self.assertEqual(complete(self.engine, "SELECT * FROM us"), ["users", "user_events"])

    def test_tables_after_from_lowercase_keyword(self):
        self.assertEqual(complete(self.engine, "select * from o"), ["orders"])

    def test_qualified_table(self):
        self.assertEqual(complete(self.engine, "SELECT * FROM other.a"), ["other.audit"])

    def test_first_word_offers_keywords_and_commands(self):
        self.assertIn("SELECT", complete(self.engine, "SEL"))
        candidates = complete(self.engine, "de")
        self.assertIn("DELETE", candidates)
        self.assertIn("DESCRIBE", candidates)
        self.assertIn("HELP", complete(self.engine, ""))

    def test_keyspaces_after_use(self):
        self.assertEqual(complete(self.engine, "USE o"), ["other"])
        self.assertEqual(complete(self.engine, "use "), ["ks", "other", "system"])

    def test_table_keyword_outranks_where(self):
        # FROM anywhere in the line wins over a later WHERE
        self.assertEqual(complete(self.engine, "SELECT * FROM users WHERE o"), ["orders"])
        self.assertEqual(complete(self.engine, "SELECT * FROM users WHERE n"), [])

    def test_table_keyword_outranks_set(self):
        self.assertEqual(complete(self.engine, "UPDATE users SET u"), ["users", "user_events"])

    def test_use_outranks_everything(self):
        self.assertEqual(complete(self.engine, "USE ks; SELECT * FROM o"), ["other"])

    def test_column_provider_uses_extracted_table(self):
        completer = CompletionEngine(self.engine)
        self.assertEqual(completer._columns("SELECT * FROM users WHERE ", "n"), ["name"])
        self.assertEqual(completer._columns("UPDATE users SET ", "e"), ["email"])

    def test_equals_sign_selects_columns(self):
        self.assertEqual(complete(self.engine, "IF id = "), [])

    def test_columns_without_table(self):
        self.assertEqual(complete(self.engine, "SELECT i"), [])

    def test_keywords_elsewhere(self):
        self.assertIn("TABLE", complete(self.engine, "CREATE TA"))

    def test_no_current_keyspace(self):
        self.engine.current = None
        self.assertEqual(complete(self.engine, "SELECT * FROM us"), [])

    def test_metadata_failure_gives_no_candidates(self):
        self.engine.fail = True
        self.assertEqual(complete(self.engine, "SELECT * FROM us"), [])
        self.assertEqual(complete(self.engine, "USE k"), [])
        self.assertEqual(complete(self.engine, "SELECT * FROM users WHERE n"), [])
        self.assertEqual(complete(self.engine, "SELECT n"), [])

    def test_no_engine(self):
        self.assertEqual(complete(None, "SELECT * FROM us"), [])


class KeywordScanTests(unittest.TestCase):

    def test_keyword_position_whole_word(self):
        self.assertEqual(keyword_position("SELECT * FROM users", "from"), 9)
        self.assertEqual(keyword_position("SELECT fromage FROM t", "FROM"), 15)
        self.assertEqual(keyword_position("SELECT fromage", "FROM"), -1)

    def test_is_after_keyword(self):
        self.assertTrue(is_after_keyword("SELECT a FROM t WHERE ", "from"))
        self.assertTrue(is_after_keyword("update t set ", "SET"))
        self.assertFalse(is_after_keyword("CREATE TABLE offset ", "SET"))

    def test_extract_table_name(self):
        self.assertEqual(extract_table_name("SELECT * FROM users WHERE id = 1"), "users")
        self.assertEqual(extract_table_name("select * from ks.users;"), "ks.users")
        self.assertEqual(extract_table_name("UPDATE orders SET total = 1"), "orders")
        self.assertEqual(extract_table_name("INSERT INTO events (id)"), "events")
        self.assertIsNone(extract_table_name("SELECT * FROM "))
        self.assertIsNone(extract_table_name("SELECT 1"))

    def test_filter_prefix(self):
        self.assertEqual(filter_prefix(["Users", "user_events", "users", "orders"], "US"),
                         ["Users", "user_events", "users"])


if __name__ == "__main__":
    unittest.main()

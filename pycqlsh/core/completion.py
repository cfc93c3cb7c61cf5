"""Context-sensitive completion for partially typed input.

Position is inferred with a whole-word keyword scan of the text before the
word being completed; there is no grammar. Keyword groups are checked in a
fixed order (USE, then table keywords, then column keywords) and the first
group present anywhere in the text picks the candidate source.
"""
from __future__ import annotations
from typing import Callable, Iterable, List, Optional
import logging
import re

from pycqlsh.core.models import CompletionContext
from pycqlsh.utils.constants import CQL_KEYWORDS, SPECIAL_COMMAND_NAMES

logger = logging.getLogger(__name__)

KEYSPACE_CONTEXT = ('USE',)
TABLE_CONTEXT = ('FROM', 'UPDATE', 'INTO', 'JOIN')
COLUMN_CONTEXT = ('SELECT', 'WHERE', 'SET')
TABLE_NAME_KEYWORDS = ('from', 'update', 'into')


def _word_pattern(keyword: str) -> 're.Pattern[str]':
    return re.compile(r'(?<!\S)' + re.escape(keyword) + r'(?!\S)', re.IGNORECASE)


def keyword_position(buffer: str, keyword: str) -> int:
    """Index of the last whole-word, case-insensitive occurrence of ``keyword``, or -1."""
    pos = -1
    for m in _word_pattern(keyword).finditer(buffer or ''):
        pos = m.start()
    return pos


def is_after_keyword(buffer: str, keyword: str) -> bool:
    return keyword_position(buffer, keyword) >= 0


def extract_table_name(buffer: str) -> Optional[str]:
    """Table named after the first FROM, else UPDATE, else INTO."""
    for keyword in TABLE_NAME_KEYWORDS:
        m = _word_pattern(keyword).search(buffer or '')
        if not m:
            continue
        after = buffer[m.end():].strip()
        if not after:
            return None
        return after.split()[0].rstrip(';')
    return None


def _after_any(buffer: str, keywords: Iterable[str]) -> bool:
    return any(is_after_keyword(buffer, k) for k in keywords)


def filter_prefix(candidates: Iterable[str], prefix: str) -> List[str]:
    """Case-insensitive prefix filter, order kept, duplicates dropped."""
    low = (prefix or '').lower()
    return list(dict.fromkeys(c for c in candidates if c.lower().startswith(low)))


class CompletionEngine:
    """Produce completion candidates using live metadata from a query engine."""

    def __init__(self, engine=None):
        self.engine = engine
        self.command_names = list(SPECIAL_COMMAND_NAMES)

    def complete(self, ctx: CompletionContext) -> List[str]:
        word = ctx.word or ''
        if not ctx.buffer.strip() or ctx.word_index == 0:
            return filter_prefix(CQL_KEYWORDS + self.command_names, word)

        scanned = ctx.buffer[:len(ctx.buffer) - len(word)] if word and ctx.buffer.endswith(word) else ctx.buffer
        if _after_any(scanned, KEYSPACE_CONTEXT):
            return self._lookup(lambda: self._keyspaces(word))
        if _after_any(scanned, TABLE_CONTEXT):
            return self._lookup(lambda: self._tables(word))
        if _after_any(scanned, COLUMN_CONTEXT) or '=' in scanned:
            return self._lookup(lambda: self._columns(scanned, word))
        return filter_prefix(CQL_KEYWORDS, word)

    def _lookup(self, provider: Callable[[], List[str]]) -> List[str]:
        if self.engine is None:
            return []
        try:
            return provider()
        except Exception as e:
            logger.debug("Completion lookup failed: %s", e)
            return []

    def _keyspaces(self, word: str) -> List[str]:
        return filter_prefix(self.engine.get_keyspaces(), word)

    def _tables(self, word: str) -> List[str]:
        if '.' in word:
            # keyspace-qualified: complete tables of the named keyspace
            ks, _, partial = word.partition('.')
            return [f"{ks}.{t}" for t in filter_prefix(self.engine.get_tables(ks), partial)]
        keyspace = self.engine.get_current_keyspace()
        if not keyspace:
            logger.debug("No keyspace selected; no table candidates")
            return []
        return filter_prefix(self.engine.get_tables(keyspace), word)

    def _columns(self, buffer: str, word: str) -> List[str]:
        table = extract_table_name(buffer)
        if not table:
            return []
        return filter_prefix(self.engine.get_table_columns(table), word)

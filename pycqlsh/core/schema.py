"""Rebuild CREATE KEYSPACE / CREATE TABLE text from schema metadata."""
from __future__ import annotations
from typing import List, Optional, Tuple
import re

from pycqlsh.core.errors import StateError
from pycqlsh.core.models import KeyspaceSchema, TableSchema
from pycqlsh.utils.string_utils import unquote_identifier

INDENT = '    '
_NUMERIC_RE = re.compile(r'^\d+$')


def _replication_value(value) -> str:
    text = str(value)
    return text if _NUMERIC_RE.match(text) else f"'{text}'"


def describe_keyspace(ks: KeyspaceSchema) -> str:
    """CREATE KEYSPACE statement for a keyspace, replication entries in source order."""
    entries = ', '.join(f"'{k}': {_replication_value(v)}" for k, v in ks.replication.items())
    text = f"CREATE KEYSPACE {ks.name} WITH REPLICATION = {{{entries}}}"
    if not ks.durable_writes:
        text += " AND DURABLE_WRITES = false"
    return text + ";"


def _primary_key(table: TableSchema) -> Optional[str]:
    if not table.partition_key:
        return None
    if len(table.partition_key) == 1:
        parts = [table.partition_key[0]]
    else:
        parts = ['(' + ', '.join(table.partition_key) + ')']
    parts.extend(name for name, _ in table.clustering)
    return f"PRIMARY KEY ({', '.join(parts)})"


def describe_table(table: TableSchema, keyspace: Optional[str] = None, name: Optional[str] = None) -> str:
    """CREATE TABLE statement for a table.

    Column lines follow the schema's column order; the WITH clause carries the
    clustering order and COMPACT STORAGE when present.
    """
    keyspace = keyspace or table.keyspace
    name = name or table.name
    lines: List[str] = []
    for col in table.columns:
        line = f"{INDENT}{col.name} {col.type_text}"
        if col.is_static:
            line += " STATIC"
        lines.append(line)
    pk = _primary_key(table)
    if pk:
        lines.append(INDENT + pk)

    text = f"CREATE TABLE {keyspace}.{name} (\n" + ',\n'.join(lines)

    options: List[str] = []
    if table.clustering:
        order = ', '.join(f"{col} {direction.upper()}" for col, direction in table.clustering)
        options.append(f"CLUSTERING ORDER BY ({order})")
    if table.compact_storage:
        options.append("COMPACT STORAGE")
    if options:
        text += "\n) WITH " + " AND ".join(options) + ";"
    else:
        text += "\n);"
    return text


def parse_table_spec(spec: str, current_keyspace: Optional[str]) -> Tuple[str, str]:
    """Split ``[keyspace.]table`` into its parts.

    Raises StateError when the name is unqualified and no keyspace is in use.
    """
    text = (spec or '').strip().rstrip(';').strip()
    if '.' in text:
        ks, _, table = text.partition('.')
        return unquote_identifier(ks), unquote_identifier(table)
    if not current_keyspace:
        raise StateError("No keyspace specified and no current keyspace. Use USE <keyspace> first.")
    return current_keyspace, unquote_identifier(text)

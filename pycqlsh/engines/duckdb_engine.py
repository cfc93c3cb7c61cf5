"""Local DuckDB adapter: schemas play the part of keyspaces.

Consistency, paging and tracing options are accepted and ignored.
"""
from __future__ import annotations
from typing import Dict, List, Optional
import logging
import re

import duckdb

from pycqlsh.core.errors import EngineConnectionError, ExecutionError, MetadataLookupError
from pycqlsh.core.models import (Column, ColumnSchema, KeyspaceSchema, QueryResult,
                                 SessionState, TableSchema)
from pycqlsh.engines.base import QueryEngine
from pycqlsh.utils.constants import CQL_SPEC_VERSION

logger = logging.getLogger(__name__)

HIDDEN_SCHEMAS = ('information_schema', 'pg_catalog')
# Row-count results DuckDB returns for writes; cqlsh prints nothing for these
_WRITE_RE = re.compile(r'^\s*(INSERT|UPDATE|DELETE|CREATE|DROP|ALTER|TRUNCATE|USE)\b', re.IGNORECASE)

SCHEMAS_SQL = ("SELECT schema_name FROM information_schema.schemata "
               "WHERE catalog_name = current_database() AND schema_name NOT IN (?, ?) "
               "ORDER BY schema_name")
TABLES_SQL = ("SELECT table_name FROM information_schema.tables "
              "WHERE table_catalog = current_database() AND table_schema = ? ORDER BY table_name")
COLUMNS_SQL = ("SELECT table_schema, table_name, column_name, data_type FROM information_schema.columns "
               "WHERE table_catalog = current_database() AND lower(table_schema) = lower(?) "
               "AND lower(table_name) = lower(?) ORDER BY ordinal_position")
PRIMARY_KEY_SQL = ("SELECT constraint_column_names FROM duckdb_constraints() "
                   "WHERE database_name = current_database() AND schema_name = ? AND table_name = ? "
                   "AND constraint_type = 'PRIMARY KEY'")


class DuckDBEngine(QueryEngine):
    """Query engine backed by a DuckDB database file (or an in-memory database)."""

    name = 'duckdb'

    def __init__(self, database: str = ':memory:'):
        self.database = database
        self.con: Optional[duckdb.DuckDBPyConnection] = None

    def connect(self) -> None:
        try:
            self.con = duckdb.connect(self.database)
        except duckdb.Error as e:
            raise EngineConnectionError(f"Failed to open DuckDB database {self.database}: {e}") from e

    def _query(self, sql: str, params: Optional[list] = None) -> list:
        try:
            return self.con.execute(sql, params or []).fetchall()
        except duckdb.Error as e:
            raise MetadataLookupError(str(e)) from e

    def execute(self, statement: str, state: SessionState) -> QueryResult:
        logger.debug("duckdb execute (consistency=%s ignored): %s", state.consistency, statement)
        try:
            cur = self.con.execute(statement)
            description = cur.description
            if description is None:
                return QueryResult()
            rows = cur.fetchall()
        except duckdb.Error as e:
            raise ExecutionError(str(e)) from e
        names = [d[0] for d in description]
        if names == ['Count'] and _WRITE_RE.match(statement):
            return QueryResult()
        return QueryResult(columns=[Column(n) for n in names],
                           rows=[dict(zip(names, r)) for r in rows])

    def get_keyspaces(self) -> List[str]:
        return [r[0] for r in self._query(SCHEMAS_SQL, list(HIDDEN_SCHEMAS))]

    def _match_keyspace(self, name: str) -> str:
        """Stored schema name for ``name``; exact match first, then case-insensitive."""
        keyspaces = self.get_keyspaces()
        if name in keyspaces:
            return name
        for ks in keyspaces:
            if ks.lower() == name.lower():
                return ks
        raise MetadataLookupError(f"Keyspace '{name}' not found")

    def get_tables(self, keyspace: str) -> List[str]:
        return [r[0] for r in self._query(TABLES_SQL, [self._match_keyspace(keyspace)])]

    def get_table_metadata(self, spec: str) -> TableSchema:
        keyspace, table = self.resolve_table(spec)
        cols = self._query(COLUMNS_SQL, [keyspace, table])
        if not cols:
            raise MetadataLookupError(f"Table '{keyspace}.{table}' not found")
        keyspace, table = cols[0][0], cols[0][1]
        pk_rows = self._query(PRIMARY_KEY_SQL, [keyspace, table])
        partition_key = tuple(pk_rows[0][0]) if pk_rows else ()
        return TableSchema(
            keyspace=keyspace,
            name=table,
            columns=tuple(ColumnSchema(name, str(dtype).lower()) for _, _, name, dtype in cols),
            partition_key=partition_key,
        )

    def get_keyspace_metadata(self, name: str) -> KeyspaceSchema:
        name = self._match_keyspace(name)
        return KeyspaceSchema(name=name, replication={'class': 'LocalStrategy'},
                              durable_writes=True, tables=tuple(self.get_tables(name)))

    def get_current_keyspace(self) -> Optional[str]:
        return self._query("SELECT current_schema()")[0][0]

    def use_keyspace(self, name: str) -> None:
        name = self._match_keyspace(name)
        database = self._query("SELECT current_database()")[0][0]
        try:
            self.con.execute('USE "{}"."{}"'.format(database.replace('"', '""'), name.replace('"', '""')))
        except duckdb.Error as e:
            raise ExecutionError(str(e)) from e

    def cluster_name(self) -> str:
        return 'DuckDB'

    def host(self) -> str:
        return self.database

    def port(self) -> int:
        return 0

    def version_info(self) -> Dict[str, Optional[str]]:
        return {
            'product': 'DuckDB',
            'release_version': duckdb.__version__,
            'cql_version': CQL_SPEC_VERSION,
            'protocol_version': None,
        }

    def close(self) -> None:
        if self.con is not None:
            self.con.close()
            self.con = None

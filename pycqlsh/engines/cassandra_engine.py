"""Cassandra adapter built on the DataStax ``cassandra-driver``."""
from __future__ import annotations
from typing import Dict, List, Optional
import logging
import uuid

from cassandra import (ConsistencyLevel, DriverException, OperationTimedOut,
                       RequestExecutionException, RequestValidationException)
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster, ExecutionProfile, EXEC_PROFILE_DEFAULT, NoHostAvailable
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from cassandra.query import SimpleStatement, TraceUnavailable, dict_factory

from pycqlsh.core.errors import (EngineConnectionError, ExecutionError, MetadataLookupError,
                                 UsageError)
from pycqlsh.core.models import (Column, ColumnSchema, KeyspaceSchema, QueryResult,
                                 SessionState, TableSchema)
from pycqlsh.engines.base import QueryEngine
from pycqlsh.utils.constants import CQL_SPEC_VERSION

logger = logging.getLogger(__name__)

DRIVER_ERRORS = (DriverException, RequestExecutionException, RequestValidationException,
                 OperationTimedOut, NoHostAvailable)
# TraceUnavailable derives from Exception, not DriverException
TRACE_ERRORS = DRIVER_ERRORS + (TraceUnavailable,)

KEYSPACE_QUERY = "SELECT replication, durable_writes FROM system_schema.keyspaces WHERE keyspace_name = %s"
VERSION_QUERY = "SELECT release_version, cql_version FROM system.local"
TRACE_EVENTS_QUERY = ("SELECT activity, timestamp, source, source_elapsed, thread "
                      "FROM system_traces.events WHERE session_id = %s")


class CassandraEngine(QueryEngine):
    """Query engine backed by a live Cassandra cluster."""

    name = 'cassandra'

    def __init__(self, host: str = 'localhost', port: int = 9042, username: Optional[str] = None,
                 password: Optional[str] = None, keyspace: Optional[str] = None,
                 local_dc: Optional[str] = None, connect_timeout: float = 5.0,
                 request_timeout: float = 10.0):
        self._host = host
        self._port = port
        self.username = username
        self.password = password
        self.initial_keyspace = keyspace
        self.local_dc = local_dc
        self.connect_timeout = connect_timeout
        self.request_timeout = request_timeout
        self.cluster: Optional[Cluster] = None
        self.session = None

    def connect(self) -> None:
        auth_provider = None
        if self.username:
            auth_provider = PlainTextAuthProvider(username=self.username, password=self.password or '')
        profile = ExecutionProfile(
            load_balancing_policy=TokenAwarePolicy(DCAwareRoundRobinPolicy(local_dc=self.local_dc)),
            row_factory=dict_factory,
            request_timeout=self.request_timeout,
        )
        self.cluster = Cluster(
            contact_points=[h.strip() for h in self._host.split(',') if h.strip()],
            port=self._port,
            auth_provider=auth_provider,
            execution_profiles={EXEC_PROFILE_DEFAULT: profile},
            connect_timeout=self.connect_timeout,
        )
        try:
            self.session = self.cluster.connect(self.initial_keyspace)
        except DRIVER_ERRORS as e:
            self.cluster.shutdown()
            raise EngineConnectionError(f"Failed to connect to {self._host}:{self._port}: {e}") from e
        logger.info("Connected to %s at %s:%d", self.cluster_name(), self._host, self._port)

    def _statement(self, cql: str, state: SessionState) -> SimpleStatement:
        return SimpleStatement(
            cql,
            consistency_level=ConsistencyLevel.name_to_value[state.consistency],
            serial_consistency_level=ConsistencyLevel.name_to_value[state.serial_consistency],
            fetch_size=state.fetch_size,
        )

    def execute(self, statement: str, state: SessionState) -> QueryResult:
        stmt = self._statement(statement, state)
        try:
            rs = self.session.execute(stmt, trace=state.tracing)
            names = list(rs.column_names or [])
            rows = list(rs) if names else []
        except DRIVER_ERRORS as e:
            raise ExecutionError(str(e)) from e
        trace_id = None
        if state.tracing:
            try:
                trace_id = str(rs.get_query_trace().trace_id)
            except TRACE_ERRORS as e:
                logger.warning("Trace unavailable: %s", e)
        return QueryResult(columns=[Column(n) for n in names], rows=rows, trace_id=trace_id)

    def _keyspace_meta(self, name: str):
        ks = self.cluster.metadata.keyspaces.get(name)
        if ks is None:
            raise MetadataLookupError(f"Keyspace '{name}' not found")
        return ks

    def get_keyspaces(self) -> List[str]:
        return sorted(self.cluster.metadata.keyspaces.keys())

    def get_tables(self, keyspace: str) -> List[str]:
        return sorted(self._keyspace_meta(keyspace).tables.keys())

    def get_table_metadata(self, spec: str) -> TableSchema:
        keyspace, table = self.resolve_table(spec)
        meta = self._keyspace_meta(keyspace).tables.get(table)
        if meta is None:
            raise MetadataLookupError(f"Table '{keyspace}.{table}' not found")
        return TableSchema(
            keyspace=keyspace,
            name=table,
            columns=tuple(ColumnSchema(c.name, c.cql_type, bool(c.is_static)) for c in meta.columns.values()),
            partition_key=tuple(c.name for c in meta.partition_key),
            clustering=tuple((c.name, 'DESC' if c.is_reversed else 'ASC') for c in meta.clustering_key),
            options={k: str(v) for k, v in (meta.options or {}).items()},
            compact_storage=bool(getattr(meta, 'is_compact_storage', False)),
        )

    def get_keyspace_metadata(self, name: str) -> KeyspaceSchema:
        ks = self._keyspace_meta(name)
        try:
            row = self.session.execute(KEYSPACE_QUERY, (name,)).one()
        except DRIVER_ERRORS as e:
            raise MetadataLookupError(f"Could not read keyspace '{name}': {e}") from e
        if row is None:
            raise MetadataLookupError(f"Keyspace '{name}' not found")
        return KeyspaceSchema(
            name=name,
            replication={k: str(v) for k, v in dict(row['replication'] or {}).items()},
            durable_writes=bool(row['durable_writes']),
            tables=tuple(sorted(ks.tables.keys())),
        )

    def get_current_keyspace(self) -> Optional[str]:
        return self.session.keyspace if self.session else None

    def use_keyspace(self, name: str) -> None:
        try:
            self.session.set_keyspace(name)
        except DRIVER_ERRORS as e:
            raise ExecutionError(str(e)) from e

    def cluster_name(self) -> str:
        return self.cluster.metadata.cluster_name or 'Unknown Cluster'

    def host(self) -> str:
        return self._host

    def port(self) -> int:
        return self._port

    def version_info(self) -> Dict[str, Optional[str]]:
        try:
            row = self.session.execute(VERSION_QUERY).one() or {}
        except DRIVER_ERRORS as e:
            logger.warning("Could not read version from system.local: %s", e)
            row = {}
        return {
            'product': 'Cassandra',
            'release_version': str(row.get('release_version') or 'unknown'),
            'cql_version': str(row.get('cql_version') or CQL_SPEC_VERSION),
            'protocol_version': str(self.cluster.protocol_version),
        }

    def get_trace_events(self, session_id: str) -> QueryResult:
        try:
            trace_uuid = uuid.UUID(session_id.strip())
        except ValueError as e:
            raise UsageError(f"Invalid trace session id: {session_id}") from e
        try:
            rs = self.session.execute(TRACE_EVENTS_QUERY, (trace_uuid,))
            names = list(rs.column_names or [])
            rows = list(rs)
        except DRIVER_ERRORS as e:
            raise ExecutionError(str(e)) from e
        return QueryResult(columns=[Column(n) for n in names], rows=rows)

    def close(self) -> None:
        if self.cluster is not None:
            self.cluster.shutdown()
            self.cluster = None
            self.session = None

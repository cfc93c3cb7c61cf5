"""Interface every query engine adapter implements."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from pycqlsh.core.models import KeyspaceSchema, QueryResult, SessionState, TableSchema
from pycqlsh.core.schema import parse_table_spec


class QueryEngine(ABC):
    """Executes statements and answers schema questions for the shell."""

    name = 'engine'

    @abstractmethod
    def connect(self) -> None:
        ...

    @abstractmethod
    def execute(self, statement: str, state: SessionState) -> QueryResult:
        """Run one statement; raise ExecutionError on failure."""

    @abstractmethod
    def get_keyspaces(self) -> List[str]:
        ...

    @abstractmethod
    def get_tables(self, keyspace: str) -> List[str]:
        ...

    @abstractmethod
    def get_table_metadata(self, spec: str) -> TableSchema:
        """Schema of ``[keyspace.]table``; MetadataLookupError if it does not exist."""

    @abstractmethod
    def get_keyspace_metadata(self, name: str) -> KeyspaceSchema:
        ...

    @abstractmethod
    def get_current_keyspace(self) -> Optional[str]:
        ...

    @abstractmethod
    def use_keyspace(self, name: str) -> None:
        ...

    @abstractmethod
    def cluster_name(self) -> str:
        ...

    @abstractmethod
    def host(self) -> str:
        ...

    @abstractmethod
    def port(self) -> int:
        ...

    @abstractmethod
    def version_info(self) -> Dict[str, Optional[str]]:
        """Keys: ``product``, ``release_version``, ``cql_version``, ``protocol_version`` (may be None)."""

    def get_trace_events(self, session_id: str) -> QueryResult:
        return QueryResult()

    def get_table_columns(self, spec: str) -> List[str]:
        return [c.name for c in self.get_table_metadata(spec).columns]

    def resolve_table(self, spec: str) -> Tuple[str, str]:
        """Split ``[keyspace.]table`` using the current keyspace for bare names."""
        return parse_table_spec(spec, self.get_current_keyspace())

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


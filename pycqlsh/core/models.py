"""Data model shared by the shell, the render engine and the query engines."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from pycqlsh.utils.constants import (
    OUTPUT_MODES, DEFAULT_MAX_WIDTH, DEFAULT_OUTPUT_MODE,
    DEFAULT_CONSISTENCY, DEFAULT_SERIAL_CONSISTENCY, DEFAULT_PAGE_SIZE,
)


@dataclass(frozen=True)
class Column:
    """Result column metadata. ``width_hint`` is a minimum display width."""
    name: str
    width_hint: Optional[int] = None


ColumnLike = Union[Column, str]


@dataclass
class QueryResult:
    columns: List[Column] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)
    trace_id: Optional[str] = None

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class RenderConfig:
    mode: str = DEFAULT_OUTPUT_MODE
    max_total_width: int = DEFAULT_MAX_WIDTH
    color_enabled: bool = False

    def __post_init__(self):
        self.mode = (self.mode or '').lower()
        if self.mode not in OUTPUT_MODES:
            raise ValueError(f"Unknown output mode: {self.mode} (expected one of {', '.join(OUTPUT_MODES)})")
        if not isinstance(self.max_total_width, int) or self.max_total_width <= 0:
            raise ValueError(f"max_total_width must be a positive integer, got {self.max_total_width!r}")


@dataclass
class SessionState:
    """Per-session execution options read by the engine on every statement."""
    tracing: bool = False
    consistency: str = DEFAULT_CONSISTENCY
    serial_consistency: str = DEFAULT_SERIAL_CONSISTENCY
    paging_enabled: bool = True
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def fetch_size(self) -> Optional[int]:
        return self.page_size if self.paging_enabled else None


@dataclass(frozen=True)
class ColumnSchema:
    name: str
    type_text: str
    is_static: bool = False


@dataclass(frozen=True)
class TableSchema:
    keyspace: str
    name: str
    columns: Tuple[ColumnSchema, ...] = ()
    partition_key: Tuple[str, ...] = ()
    clustering: Tuple[Tuple[str, str], ...] = ()
    options: Dict[str, str] = field(default_factory=dict)
    compact_storage: bool = False


@dataclass(frozen=True)
class KeyspaceSchema:
    name: str
    replication: Dict[str, str] = field(default_factory=dict)
    durable_writes: bool = True
    tables: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CompletionContext:
    buffer: str
    word: str
    word_index: int

    @classmethod
    def from_buffer(cls, buffer: str, begidx: Optional[int] = None) -> 'CompletionContext':
        """Build a context from a line buffer, the partial word ending at the cursor."""
        buffer = buffer or ''
        if begidx is None:
            begidx = len(buffer) - len(buffer.split(' ')[-1]) if buffer else 0
        word = buffer[begidx:]
        word_index = len(buffer[:begidx].split())
        return cls(buffer=buffer, word=word, word_index=word_index)

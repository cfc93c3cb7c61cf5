"""Result rendering: tabular, expanded, JSON and CSV layouts.

``render`` is pure: the same columns, rows and config always produce the
same text, and nothing is printed here.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence
import json
import logging

import pandas as pd

from pycqlsh.core.models import Column, ColumnLike, RenderConfig
from pycqlsh.utils.constants import NO_ROWS_MARKER, EXPANDED_RULE
from pycqlsh.utils.string_utils import truncate_string

logger = logging.getLogger(__name__)

HEADER_COLOR = '32'
CELL_SEPARATOR = ' | '
RULE_SEPARATOR = '-+-'


def _as_columns(columns: Iterable[ColumnLike]) -> List[Column]:
    return [c if isinstance(c, Column) else Column(str(c)) for c in columns]


def _format_nested(value: Any) -> str:
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    return format_value(value)


def format_value(value: Any) -> str:
    """Display string for a single cell value."""
    if value is None:
        return 'null'
    if isinstance(value, (bytes, bytearray, memoryview)):
        return '0x' + bytes(value).hex()
    if isinstance(value, dict):
        return '{' + ', '.join(f"{_format_nested(k)}: {_format_nested(v)}" for k, v in value.items()) + '}'
    if isinstance(value, (set, frozenset)):
        items = sorted((_format_nested(v) for v in value))
        return '{' + ', '.join(items) + '}'
    if isinstance(value, (list, tuple)):
        return '[' + ', '.join(_format_nested(v) for v in value) + ']'
    # cassandra-driver collection types (SortedSet, OrderedMapSerializedKey)
    if hasattr(value, 'items') and callable(value.items):
        return format_value(dict(value.items()))
    if type(value).__name__ == 'SortedSet':
        return '{' + ', '.join(_format_nested(v) for v in value) + '}'
    return str(value)


def _display_cells(columns: Sequence[Column], rows: Sequence[Dict[str, Any]]) -> List[List[str]]:
    return [[format_value(row.get(c.name)) for c in columns] for row in rows]


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        if width >= 3:
            text = truncate_string(text, width)
        else:
            text = text[:width]
    return text.ljust(width)


def column_widths(columns: Sequence[Column], cells: Sequence[Sequence[str]], max_total_width: int) -> List[int]:
    """Natural width per column, clamped to an equal share of ``max_total_width``."""
    share = max_total_width // len(columns) if columns else max_total_width
    widths = []
    for idx, col in enumerate(columns):
        natural = max([len(col.name)] + [len(r[idx]) for r in cells])
        if col.width_hint:
            natural = max(natural, col.width_hint)
        widths.append(min(natural, share))
    return widths


def _render_tabular(columns: List[Column], rows: Sequence[Dict[str, Any]], config: RenderConfig) -> str:
    cells = _display_cells(columns, rows)
    widths = column_widths(columns, cells, config.max_total_width)

    def colorize(text: str) -> str:
        return f"\033[{HEADER_COLOR}m{text}\033[0m" if config.color_enabled else text

    header = ''.join(colorize(_fit(c.name, w)) + CELL_SEPARATOR for c, w in zip(columns, widths))
    rule = ''.join('-' * w + RULE_SEPARATOR for w in widths)
    lines = [header, rule]
    for row in cells:
        lines.append(''.join(_fit(v, w) + CELL_SEPARATOR for v, w in zip(row, widths)))
    return '\n'.join(lines)


def _render_expanded(columns: List[Column], rows: Sequence[Dict[str, Any]]) -> str:
    lines: List[str] = []
    for n, row in enumerate(_display_cells(columns, rows), start=1):
        lines.append(f"@ Row {n}")
        lines.append(EXPANDED_RULE)
        for col, value in zip(columns, row):
            lines.append(f"{col.name}: {value}")
        lines.append('')
    return '\n'.join(lines)


def _frame(columns: List[Column], rows: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    # Display strings with None kept for nulls; object dtype keeps pandas from coercing
    names = [c.name for c in columns]
    records = [[None if row.get(n) is None else format_value(row.get(n)) for n in names] for row in rows]
    return pd.DataFrame(records, columns=names, dtype=object)


def _render_json(columns: List[Column], rows: Sequence[Dict[str, Any]]) -> str:
    df = _frame(columns, rows)
    records = df.to_dict(orient='records')
    return json.dumps(records, indent=2, ensure_ascii=False)


def _render_csv(columns: List[Column], rows: Sequence[Dict[str, Any]]) -> str:
    df = _frame(columns, rows)
    text = df.to_csv(index=False, na_rep='', lineterminator='\n')
    return text[:-1] if text.endswith('\n') else text


def render(columns: Iterable[ColumnLike], rows: Optional[Sequence[Dict[str, Any]]],
           config: Optional[RenderConfig] = None) -> str:
    """Render result rows as text according to ``config.mode``."""
    config = config or RenderConfig()
    cols = _as_columns(columns or [])
    rows = list(rows or [])
    if not cols or not rows:
        return NO_ROWS_MARKER
    if config.mode == 'expanded':
        return _render_expanded(cols, rows)
    if config.mode == 'json':
        return _render_json(cols, rows)
    if config.mode == 'csv':
        return _render_csv(cols, rows)
    return _render_tabular(cols, rows, config)

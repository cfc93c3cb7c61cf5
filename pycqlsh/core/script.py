"""Split CQL scripts into statements."""
from __future__ import annotations
from typing import Iterable, Iterator, List
import logging

from pycqlsh.core.errors import ScriptFileError
from pycqlsh.utils.constants import COMMENT_PREFIXES, STATEMENT_TERMINATOR

logger = logging.getLogger(__name__)


def iter_statements(lines: Iterable[str]) -> Iterator[str]:
    """Yield statements from script lines.

    Lines are trimmed; blank lines and ``--``/``//`` comment lines are skipped.
    Lines are joined with a single space until one ends with ``;``. Text left
    over at the end without a terminator is yielded as a final statement.
    """
    pending: List[str] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue
        pending.append(line)
        if line.endswith(STATEMENT_TERMINATOR):
            yield ' '.join(pending)
            pending = []
    if pending:
        yield ' '.join(pending)


def split_statements(text: str) -> List[str]:
    return list(iter_statements(text.splitlines()))


def read_script(path: str) -> List[str]:
    """Read and split a script file; ScriptFileError if it cannot be read."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            statements = list(iter_statements(f))
    except (OSError, UnicodeDecodeError) as e:
        raise ScriptFileError(f"Error reading file: {path} - {e}") from e
    logger.debug("Read %d statement(s) from %s", len(statements), path)
    return statements

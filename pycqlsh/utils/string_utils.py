"""String helpers shared by the shell commands and the render engine."""
from __future__ import annotations
from typing import Dict, Optional

# Typographic quotes pasted from documents are treated as plain ASCII quotes
SMART_QUOTE_MAP: Dict[str, str] = {
    '“': '"',
    '”': '"',
    '„': '"',
    '‟': '"',
    '″': '"',
    '‘': "'",
    '’': "'",
    '‛': "'",
    '′': "'",
}


def normalize_smart_quotes(s: str) -> str:
    return ''.join(SMART_QUOTE_MAP.get(ch, ch) for ch in s)


def strip_quotes(s: str) -> str:
    """Strip one matching pair of surrounding quotes (single or double)."""
    if not s:
        return s
    s2 = normalize_smart_quotes(s.strip())
    if len(s2) >= 2 and s2[0] == s2[-1] and s2[0] in ("'", '"'):
        s2 = s2[1:-1]
    return s2.strip()


def unquote_identifier(name: str) -> str:
    """Return a CQL identifier as stored: quoted names keep case, bare names are lowercased."""
    name = (name or '').strip()
    if len(name) >= 2 and name[0] == name[-1] == '"':
        return name[1:-1].replace('""', '"')
    return name.lower()


def first_word(s: str) -> Optional[str]:
    parts = (s or '').split(None, 1)
    return parts[0] if parts else None


def truncate_string(s: str, max_length: int = 50, suffix: str = '...') -> str:
    """Truncate a string to specified maximum length."""
    if not s or len(s) <= max_length:
        return s
    truncated_length = max_length - len(suffix)
    if truncated_length <= 0:
        return suffix[:max_length]
    return s[:truncated_length] + suffix

"""Argument validation for the built-in shell commands."""
from __future__ import annotations
from typing import Optional
import os

from pycqlsh.core.errors import UsageError, ScriptFileError
from pycqlsh.utils.constants import CONSISTENCY_LEVELS, SERIAL_CONSISTENCY_LEVELS

ON_VALUES = ('ON',)
OFF_VALUES = ('OFF',)


def parse_switch(arg: str, command: str) -> Optional[bool]:
    """Parse an ON/OFF argument. Empty input returns None (query the current value)."""
    value = (arg or '').strip().upper()
    if not value:
        return None
    if value in ON_VALUES:
        return True
    if value in OFF_VALUES:
        return False
    raise UsageError(f"Improper {command} command: expected ON or OFF, got '{arg.strip()}'")


def validate_consistency(level: str) -> str:
    value = (level or '').strip().upper()
    if value not in CONSISTENCY_LEVELS:
        raise UsageError(f"Improper CONSISTENCY command: invalid consistency level '{level.strip()}'. "
                         f"Valid levels: {', '.join(CONSISTENCY_LEVELS)}")
    return value


def validate_serial_consistency(level: str) -> str:
    value = (level or '').strip().upper()
    if value not in SERIAL_CONSISTENCY_LEVELS:
        raise UsageError(f"Improper SERIAL CONSISTENCY command: invalid serial consistency level "
                         f"'{level.strip()}'. Valid levels: {', '.join(SERIAL_CONSISTENCY_LEVELS)}")
    return value


def parse_page_size(arg: str) -> int:
    try:
        size = int(arg.strip())
    except (TypeError, ValueError):
        raise UsageError(f"Improper PAGING command: '{arg.strip()}' is not ON, OFF or a page size")
    if size <= 0:
        raise UsageError("Improper PAGING command: page size must be a positive integer")
    return size


def validate_script_file(filepath: str) -> str:
    """Check a script file exists and is readable; return its expanded path."""
    path = os.path.expanduser(filepath)
    if not os.path.exists(path):
        raise ScriptFileError(f"Script file not found: {filepath}")
    if not os.path.isfile(path):
        raise ScriptFileError(f"Path is not a file: {filepath}")
    if not os.access(path, os.R_OK):
        raise ScriptFileError(f"File not readable: {filepath}")
    return path


def validate_output_path(filepath: str) -> str:
    """Check the directory of a capture file exists and is writable."""
    path = os.path.expanduser(filepath)
    directory = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(directory):
        raise UsageError(f"Output directory does not exist: {directory}")
    if not os.access(directory, os.W_OK):
        raise UsageError(f"Output directory not writable: {directory}")
    return path

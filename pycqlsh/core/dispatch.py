"""Command registry: maps the leading token of a line to a built-in handler.

Lines whose leading token is not a registered command are handed, verbatim,
to the fallback (normally the shell's statement executor).
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class ContinueSignal(Enum):
    CONTINUE = 'continue'
    STOP = 'stop'


Handler = Callable[[str], Optional[ContinueSignal]]


@dataclass(frozen=True)
class Command:
    name: str
    handler: Handler
    help_text: str = ''


def split_command(line: str) -> Tuple[str, str]:
    """Return (UPPERCASED first token, remaining text) for a command line."""
    text = (line or '').strip()
    if text.endswith(';'):
        text = text[:-1].rstrip()
    parts = text.split(None, 1)
    if not parts:
        return '', ''
    token = parts[0].upper()
    rest = parts[1].strip() if len(parts) > 1 else ''
    return token, rest


class CommandRegistry:
    """Name to handler registry with a fallback for non-command input."""

    def __init__(self, fallback: Optional[Callable[[str], object]] = None):
        self._commands: Dict[str, Command] = {}
        self._fallback = fallback

    def register(self, name: str, handler: Handler, help_text: str = '') -> Command:
        cmd = Command(name=name.upper(), handler=handler, help_text=help_text)
        if cmd.name in self._commands:
            logger.debug("Replacing handler for command %s", cmd.name)
        self._commands[cmd.name] = cmd
        return cmd

    def commands(self) -> List[Command]:
        return list(self._commands.values())

    def is_command(self, line: str) -> bool:
        token, _ = split_command(line)
        return bool(token) and token in self._commands

    def dispatch(self, line: str) -> ContinueSignal:
        token, rest = split_command(line)
        if not token:
            return ContinueSignal.CONTINUE
        cmd = self._commands.get(token)
        if cmd is None:
            if self._fallback is None:
                logger.debug("No fallback registered; ignoring: %s", line)
                return ContinueSignal.CONTINUE
            self._fallback(line)
            return ContinueSignal.CONTINUE
        logger.debug("Dispatching %s (args=%r)", cmd.name, rest)
        signal = cmd.handler(rest)
        return signal if isinstance(signal, ContinueSignal) else ContinueSignal.CONTINUE

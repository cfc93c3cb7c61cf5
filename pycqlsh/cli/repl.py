"""Line-editor front end: readline prompt, tab completion and history."""
from __future__ import annotations
from typing import List, Optional
import logging
import os

from pycqlsh.core.completion import CompletionEngine
from pycqlsh.core.models import CompletionContext
from pycqlsh.cli.commands import version_line

try:
    import readline  # type: ignore
except ImportError:  # pragma: no cover
    readline = None

logger = logging.getLogger(__name__)

HISTORY_LENGTH = 1000


class ReadlineCompleter:
    """Adapts a CompletionEngine to readline's ``completer(text, state)`` protocol."""

    def __init__(self, engine: CompletionEngine):
        self.engine = engine
        self._matches: List[str] = []

    def _context(self, text: str) -> CompletionContext:
        if readline is None:
            return CompletionContext.from_buffer(text)
        line = readline.get_line_buffer() or ''
        begidx = readline.get_begidx()
        endidx = readline.get_endidx()
        return CompletionContext.from_buffer(line[:endidx], begidx)

    def complete(self, text: str, state: int) -> Optional[str]:
        if state == 0:
            try:
                self._matches = self.engine.complete(self._context(text))
            except Exception:
                logger.debug("Completion failed", exc_info=True)
                self._matches = []
        return self._matches[state] if state < len(self._matches) else None


class ReadlineSource:
    """Line source reading from the terminal through ``input()``."""

    def read_line(self, prompt: str) -> Optional[str]:
        try:
            return input(prompt)
        except EOFError:
            return None


def setup_readline(completer: ReadlineCompleter, history_file: Optional[str] = None) -> None:
    if not readline:
        return
    readline.set_completer(completer.complete)
    readline.set_completer_delims(' \t\n')
    # libedit (macOS default) needs a different binding than GNU readline
    docstr = getattr(readline, '__doc__', '') or ''
    if 'libedit' in docstr.lower():
        readline.parse_and_bind('bind ^I rl_complete')
    else:
        readline.parse_and_bind('tab: complete')
    readline.parse_and_bind('set completion-ignore-case on')
    readline.parse_and_bind('set show-all-if-ambiguous on')
    if history_file:
        path = os.path.expanduser(history_file)
        readline.set_history_length(HISTORY_LENGTH)
        if os.path.exists(path):
            try:
                readline.read_history_file(path)
            except OSError as e:
                logger.warning("Could not read history file %s: %s", path, e)


def save_history(history_file: Optional[str]) -> None:
    if not readline or not history_file:
        return
    path = os.path.expanduser(history_file)
    try:
        readline.write_history_file(path)
    except OSError as e:
        logger.warning("Could not write history file %s: %s", path, e)


def print_welcome(shell) -> None:
    engine = shell.engine
    shell.out.writeline(f"Connected to {engine.cluster_name()} at {engine.host()}:{engine.port()}.")
    shell.out.writeline(version_line(engine))
    shell.out.writeline("Use HELP for help.")


def start_repl(shell, history_file: Optional[str] = None, welcome: bool = True) -> None:
    """Run the interactive loop on the terminal until EXIT or end of input."""
    completer = ReadlineCompleter(shell.completer)
    setup_readline(completer, history_file)
    if welcome:
        print_welcome(shell)
    try:
        shell.run(ReadlineSource())
    finally:
        save_history(history_file)

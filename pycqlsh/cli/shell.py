"""Shell loop shared by every front end.

The shell owns the render config, the session state and the output sink.
Front ends feed it lines through ``handle_line`` (interactive buffering) or
``run_script`` / ``run_statements`` (batch) and supply a line source with a
``read_line(prompt)`` method for ``run``.
"""
from __future__ import annotations
from typing import Iterable, List, Optional, Protocol, TextIO
import logging
import sys

from pycqlsh.cli.commands import BuiltinCommands
from pycqlsh.core.completion import CompletionEngine
from pycqlsh.core.dispatch import CommandRegistry, ContinueSignal
from pycqlsh.core.errors import ShellError, ScriptFileError
from pycqlsh.core.models import QueryResult, RenderConfig, SessionState
from pycqlsh.core.render import render
from pycqlsh.core.script import read_script
from pycqlsh.utils.constants import SHELL_NAME, STATEMENT_TERMINATOR
from pycqlsh.utils.validation import validate_script_file

logger = logging.getLogger(__name__)

CONTINUATION_PROMPT = "   ... "
CLEAR_SCREEN = "\033[H\033[2J"


class LineSource(Protocol):
    def read_line(self, prompt: str) -> Optional[str]:
        """Next input line, or None at end of input."""


class OutputSink:
    """Writes to a stream and, while capturing, appends a copy to a file."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.capture_path: Optional[str] = None
        self._capture: Optional[TextIO] = None

    def write(self, text: str) -> None:
        self.stream.write(text)
        if self._capture is not None:
            self._capture.write(text)

    def writeline(self, text: str = '') -> None:
        self.write(text + '\n')

    def flush(self) -> None:
        self.stream.flush()
        if self._capture is not None:
            self._capture.flush()

    def clear(self) -> None:
        self.stream.write(CLEAR_SCREEN)
        self.stream.flush()

    @property
    def capturing(self) -> bool:
        return self._capture is not None

    def start_capture(self, path: str) -> None:
        self.stop_capture()
        try:
            self._capture = open(path, 'a', encoding='utf-8')
        except OSError as e:
            raise ScriptFileError(f"Could not open capture file '{path}': {e}") from e
        self.capture_path = path

    def stop_capture(self) -> Optional[str]:
        path = self.capture_path
        if self._capture is not None:
            self._capture.close()
        self._capture = None
        self.capture_path = None
        return path

    def close(self) -> None:
        self.stop_capture()


class Shell:
    """Interactive and batch CQL shell bound to one query engine."""

    def __init__(self, engine, render_config: Optional[RenderConfig] = None,
                 state: Optional[SessionState] = None, out: Optional[TextIO] = None,
                 err: Optional[TextIO] = None):
        self.engine = engine
        self.render_config = render_config or RenderConfig()
        self.default_mode = self.render_config.mode if self.render_config.mode != 'expanded' else 'tabular'
        self.state = state or SessionState()
        self.out = out if isinstance(out, OutputSink) else OutputSink(out)
        self.err = err if err is not None else sys.stderr
        self.batch = False
        self.failed = False
        self._buffer: List[str] = []
        self.registry = CommandRegistry(fallback=self.execute_statement)
        self.commands = BuiltinCommands(self)
        self.commands.register(self.registry)
        self.completer = CompletionEngine(engine)

    # --- prompts ---

    def prompt(self) -> str:
        if self._buffer:
            return CONTINUATION_PROMPT
        keyspace = self.engine.get_current_keyspace()
        return f"{SHELL_NAME}:{keyspace}> " if keyspace else f"{SHELL_NAME}> "

    @property
    def pending(self) -> bool:
        return bool(self._buffer)

    # --- output ---

    def report_error(self, message: str) -> None:
        line = f"ERROR: {message}"
        if self.batch:
            print(line, file=self.err)
        else:
            self.out.writeline(line)

    def show_result(self, result: QueryResult) -> None:
        if result.columns:
            self.out.writeline(render(result.columns, result.rows, self.render_config))
            if result.rows and self.render_config.mode in ('tabular', 'expanded'):
                self.out.writeline()
                self.out.writeline(f"({len(result.rows)} rows)")
        if result.trace_id:
            self.out.writeline()
            self.out.writeline(f"Tracing session: {result.trace_id}")

    # --- execution ---

    def execute_statement(self, statement: str) -> None:
        logger.debug("Executing statement: %s", statement)
        self.show_result(self.engine.execute(statement, self.state))

    def dispatch(self, text: str) -> ContinueSignal:
        """Dispatch one complete command or statement, reporting any failure inline."""
        try:
            return self.registry.dispatch(text)
        except ShellError as e:
            logger.debug("%s: %s", type(e).__name__, e)
            self.report_error(e.message)
        except Exception as e:
            logger.debug("Unexpected error while running %r", text, exc_info=True)
            self.report_error(str(e) or type(e).__name__)
        self.failed = True
        return ContinueSignal.CONTINUE

    def handle_line(self, line: str) -> ContinueSignal:
        """Feed one interactive line; statements run once terminated by ``;``."""
        stripped = line.strip()
        if not self._buffer:
            if not stripped:
                return ContinueSignal.CONTINUE
            if self.registry.is_command(stripped):
                return self.dispatch(stripped)
        if not stripped:
            # blank line flushes an unterminated statement
            return self._flush()
        self._buffer.append(line.rstrip())
        if stripped.endswith(STATEMENT_TERMINATOR):
            return self._flush()
        return ContinueSignal.CONTINUE

    def _flush(self) -> ContinueSignal:
        statement = '\n'.join(self._buffer).strip()
        self._buffer.clear()
        if not statement:
            return ContinueSignal.CONTINUE
        return self.dispatch(statement)

    def interrupt(self) -> None:
        self._buffer.clear()
        self.out.writeline('^C')

    def run(self, source: LineSource) -> None:
        """Read and handle lines until EXIT or end of input."""
        while True:
            try:
                line = source.read_line(self.prompt())
                if line is None:
                    self.out.writeline()
                    break
                if self.handle_line(line) is ContinueSignal.STOP:
                    break
            except KeyboardInterrupt:
                self.interrupt()

    def run_statements(self, statements: Iterable[str], echo: bool = True) -> bool:
        """Run complete statements in batch mode; True if none failed. EXIT stops early."""
        outer_batch, outer_failed = self.batch, self.failed
        self.batch, self.failed = True, False
        try:
            for statement in statements:
                if echo:
                    self.out.writeline(f"> {statement}")
                if self.dispatch(statement) is ContinueSignal.STOP:
                    break
            ok = not self.failed
        finally:
            self.batch = outer_batch
            self.failed = outer_failed or self.failed
        return ok

    def run_script(self, path: str) -> bool:
        """Run a CQL script file. Unreadable files are reported on the error stream."""
        try:
            statements = read_script(validate_script_file(path))
        except ScriptFileError as e:
            print(f"ERROR: {e.message}", file=self.err)
            self.failed = True
            return False
        logger.info("Running %d statement(s) from %s", len(statements), path)
        return self.run_statements(statements)

    def close(self) -> None:
        self.out.close()
        self.engine.close()

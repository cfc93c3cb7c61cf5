"""Built-in shell commands (HELP, USE, DESCRIBE, EXPAND, TRACING, ...).

Each handler receives the text after the command name and returns a
ContinueSignal (None means continue). Bad arguments raise UsageError and
the shell reports them inline.
"""
from __future__ import annotations
from typing import Dict, List
import logging

from pycqlsh import __version__
from pycqlsh.core.dispatch import CommandRegistry, ContinueSignal
from pycqlsh.core.errors import StateError, UsageError
from pycqlsh.core.render import render
from pycqlsh.core.schema import describe_keyspace, describe_table
from pycqlsh.utils.constants import CONSISTENCY_LEVELS, SERIAL_CONSISTENCY_LEVELS, SHELL_NAME
from pycqlsh.utils.string_utils import first_word, strip_quotes, unquote_identifier
from pycqlsh.utils.validation import (parse_page_size, parse_switch, validate_consistency,
                                      validate_output_path, validate_serial_consistency)

logger = logging.getLogger(__name__)

HELP_TOPICS: Dict[str, str] = {
    'HELP': "HELP [<topic>]\n\nShow the list of commands, or help for one command.",
    'EXIT': "EXIT | QUIT\n\nLeave the shell.",
    'CLEAR': "CLEAR | CLS\n\nClear the terminal screen.",
    'USE': "USE <keyspace>\n\nSwitch the current keyspace.\n\nExample: USE my_keyspace",
    'DESCRIBE': (
        "DESCRIBE | DESC [SCHEMA | KEYSPACES | KEYSPACE [<name>] | TABLES | TABLE <[keyspace.]name>]\n\n"
        "  DESCRIBE KEYSPACES      - List all keyspaces\n"
        "  DESCRIBE KEYSPACE <ks>  - Show the CREATE KEYSPACE statement and its tables\n"
        "  DESCRIBE TABLES         - List tables in the current keyspace\n"
        "  DESCRIBE TABLE <t>      - Show the CREATE TABLE statement"
    ),
    'EXPAND': "EXPAND [ON | OFF]\n\nShow or toggle expanded (vertical) output.",
    'TRACING': "TRACING [ON | OFF]\n\nShow or toggle request tracing.",
    'PAGING': (
        "PAGING [ON | OFF | <page size>]\n\n"
        "Controls paging of query results:\n"
        "  PAGING ON       - Enables paging with current page size\n"
        "  PAGING OFF      - Disables paging\n"
        "  PAGING <size>   - Sets page size and enables paging\n\n"
        "Example: PAGING 1000"
    ),
    'CONSISTENCY': (
        "CONSISTENCY [<level>]\n\n"
        "Sets the consistency level for operations to follow. Valid arguments include:\n"
        f"  {', '.join(CONSISTENCY_LEVELS)}\n\n"
        "Example: CONSISTENCY QUORUM"
    ),
    'SERIAL': (
        "SERIAL CONSISTENCY [<level>]\n\n"
        "Sets the serial consistency level for conditional updates. Valid arguments include:\n"
        f"  {', '.join(SERIAL_CONSISTENCY_LEVELS)}\n\n"
        "Example: SERIAL CONSISTENCY LOCAL_SERIAL"
    ),
    'SHOW': (
        "SHOW VERSION | HOST | SESSION <id>\n\n"
        "SHOW VERSION      - Displays version information for the shell, server, CQL and protocol\n"
        "SHOW HOST         - Displays connection information\n"
        "SHOW SESSION <id> - Displays details of a tracing session"
    ),
    'SOURCE': "SOURCE '<file>'\n\nExecute the statements and commands in a file.\n\nExample: SOURCE 'schema.cql'",
    'CAPTURE': (
        "CAPTURE ['<file>' | OFF]\n\n"
        "Controls capturing of output to a file:\n"
        "  CAPTURE '<file>' - Begins appending output to the specified file\n"
        "  CAPTURE OFF      - Stops capturing output\n"
        "  CAPTURE          - Shows current capture status\n\n"
        "Example: CAPTURE 'query_results.txt'"
    ),
}
HELP_ALIASES = {'?': 'HELP', 'QUIT': 'EXIT', 'CLS': 'CLEAR', 'DESC': 'DESCRIBE'}


def version_line(engine) -> str:
    """``[pycqlsh x | Cassandra y | CQL spec z | Native protocol vN]``"""
    info = engine.version_info()
    fields = [f"{SHELL_NAME} {__version__}",
              f"{info.get('product', 'Cassandra')} {info.get('release_version')}",
              f"CQL spec {info.get('cql_version')}"]
    if info.get('protocol_version'):
        fields.append(f"Native protocol v{info['protocol_version']}")
    return '[' + ' | '.join(fields) + ']'


class BuiltinCommands:
    """Handlers bound to one shell instance."""

    def __init__(self, shell):
        self.shell = shell

    @property
    def out(self):
        return self.shell.out

    def register(self, registry: CommandRegistry) -> None:
        table = [
            ('HELP', self.do_help, "Show this help message"),
            ('?', self.do_help, "Show this help message"),
            ('EXIT', self.do_exit, "Exit the shell"),
            ('QUIT', self.do_exit, "Exit the shell"),
            ('CLEAR', self.do_clear, "Clear the screen"),
            ('CLS', self.do_clear, "Clear the screen"),
            ('USE', self.do_use, "Switch to a keyspace"),
            ('DESCRIBE', self.do_describe, "Describe keyspaces or tables"),
            ('DESC', self.do_describe, "Describe keyspaces or tables"),
            ('EXPAND', self.do_expand, "Toggle expanded (vertical) output"),
            ('TRACING', self.do_tracing, "Toggle request tracing"),
            ('PAGING', self.do_paging, "Control paging of query results"),
            ('CONSISTENCY', self.do_consistency, "Set consistency level for queries"),
            ('SERIAL', self.do_serial, "Set serial consistency level for conditional updates"),
            ('SHOW', self.do_show, "Show version, host or tracing session details"),
            ('SOURCE', self.do_source, "Execute commands from a file"),
            ('CAPTURE', self.do_capture, "Capture output to a file"),
        ]
        for name, handler, help_text in table:
            registry.register(name, handler, help_text)

    # --- HELP / EXIT / CLEAR ---

    def do_help(self, args: str) -> None:
        topic = ' '.join(args.split()).upper()
        if not topic:
            self._print_command_list()
            return
        key = HELP_ALIASES.get(topic, topic)
        key = first_word(key) if key not in HELP_TOPICS else key
        text = HELP_TOPICS.get(key or '')
        if text is None:
            self.out.writeline(f"No help available for: {args.strip()}")
        else:
            self.out.writeline(text)

    def _print_command_list(self) -> None:
        self.out.writeline("Available commands:")
        self.out.writeline()
        seen = set()
        for cmd in self.shell.registry.commands():
            if cmd.handler in seen:
                continue
            seen.add(cmd.handler)
            names = [c.name for c in self.shell.registry.commands() if c.handler == cmd.handler]
            label = ', '.join(names)
            if cmd.name == 'SERIAL':
                label = 'SERIAL CONSISTENCY'
            self.out.writeline(f"{label:<26}- {cmd.help_text}")
        self.out.writeline()
        self.out.writeline("For help on a specific command, type 'HELP <command>'")

    def do_exit(self, args: str) -> ContinueSignal:
        return ContinueSignal.STOP

    def do_clear(self, args: str) -> None:
        self.out.clear()

    # --- USE / DESCRIBE ---

    def do_use(self, args: str) -> None:
        name = args.strip()
        if not name:
            raise UsageError("Keyspace name required")
        keyspace = unquote_identifier(name)
        self.shell.engine.use_keyspace(keyspace)
        self.out.writeline(f"Now using keyspace {keyspace}")

    def _current_keyspace(self, message: str) -> str:
        keyspace = self.shell.engine.get_current_keyspace()
        if not keyspace:
            raise StateError(message)
        return keyspace

    def _print_names(self, title: str, names: List[str], empty: str) -> None:
        if not names:
            self.out.writeline(empty)
            return
        self.out.writeline(title)
        for name in names:
            self.out.writeline(f"  {name}")

    def do_describe(self, args: str) -> None:
        engine = self.shell.engine
        parts = args.split(None, 1)
        what = parts[0].upper() if parts else ''
        target = parts[1].strip() if len(parts) > 1 else ''

        if what in ('', 'SCHEMA', 'KEYSPACES') and not target:
            self._print_names("Keyspaces:", engine.get_keyspaces(), "No keyspaces found.")
        elif what == 'KEYSPACE':
            name = unquote_identifier(target) if target else self._current_keyspace(
                "No keyspace specified and not connected to a keyspace. Please specify a keyspace name.")
            ks = engine.get_keyspace_metadata(name)
            self.out.writeline(describe_keyspace(ks))
            self.out.writeline()
            self._print_names("Tables:", list(ks.tables), "No tables found in keyspace.")
        elif what == 'TABLES' and not target:
            keyspace = self._current_keyspace(
                "Not connected to a keyspace. Use USE <keyspace> or DESCRIBE KEYSPACE <name>.")
            self._print_names("Tables:", engine.get_tables(keyspace), "No tables found in keyspace.")
        elif what == 'TABLE':
            if not target:
                raise UsageError("Table name required")
            table = engine.get_table_metadata(target)
            self.out.writeline(describe_table(table, table.keyspace, table.name))
        else:
            raise UsageError(f"Cannot describe '{args.strip()}'. Use DESCRIBE KEYSPACE or DESCRIBE TABLE.")

    # --- session toggles ---

    def do_expand(self, args: str) -> None:
        config = self.shell.render_config
        value = parse_switch(args, 'EXPAND')
        if value is None:
            self.out.writeline(f"Expanded display is {'on' if config.mode == 'expanded' else 'off'}.")
        elif value:
            config.mode = 'expanded'
            self.out.writeline("Expanded display is now on.")
        else:
            config.mode = self.shell.default_mode
            self.out.writeline("Expanded display is now off.")

    def do_tracing(self, args: str) -> None:
        state = self.shell.state
        value = parse_switch(args, 'TRACING')
        if value is None:
            self.out.writeline(f"Tracing is {'on' if state.tracing else 'off'}.")
            return
        state.tracing = value
        self.out.writeline(f"Tracing is now {'on' if value else 'off'}.")

    def do_paging(self, args: str) -> None:
        state = self.shell.state
        arg = args.strip()
        if not arg:
            self.out.writeline(f"Paging is {'ON' if state.paging_enabled else 'OFF'}. Page size: {state.page_size}")
        elif arg.upper() in ('ON', 'OFF'):
            state.paging_enabled = arg.upper() == 'ON'
            self.out.writeline(f"Paging is now {arg.upper()}.")
        else:
            state.page_size = parse_page_size(arg)
            state.paging_enabled = True
            self.out.writeline(f"Page size set to {state.page_size}. Paging is ON.")

    def do_consistency(self, args: str) -> None:
        state = self.shell.state
        if not args.strip():
            self.out.writeline(f"Current consistency level is {state.consistency}.")
            return
        state.consistency = validate_consistency(args)
        self.out.writeline(f"Consistency level set to {state.consistency}.")

    def do_serial(self, args: str) -> None:
        parts = args.split(None, 1)
        if not parts or parts[0].upper() != 'CONSISTENCY':
            raise UsageError("Usage: SERIAL CONSISTENCY <level>")
        state = self.shell.state
        level = parts[1].strip() if len(parts) > 1 else ''
        if not level:
            self.out.writeline(f"Current serial consistency level is {state.serial_consistency}.")
            return
        state.serial_consistency = validate_serial_consistency(level)
        self.out.writeline(f"Serial consistency level set to {state.serial_consistency}.")

    # --- SHOW ---

    def do_show(self, args: str) -> None:
        engine = self.shell.engine
        parts = args.split(None, 1)
        what = parts[0].upper() if parts else ''
        if what == 'VERSION':
            self.out.writeline(version_line(engine))
        elif what == 'HOST':
            self.out.writeline(f"Connected to {engine.cluster_name()} at {engine.host()}:{engine.port()}.")
        elif what == 'SESSION':
            session_id = parts[1].strip() if len(parts) > 1 else ''
            if not session_id:
                raise UsageError("SESSION command requires a session ID")
            result = engine.get_trace_events(session_id)
            self.out.writeline(f"Tracing session: {session_id}")
            self.out.writeline()
            self.out.writeline(render(result.columns, result.rows, self.shell.render_config))
        else:
            raise UsageError("SHOW command requires an argument (VERSION, HOST, SESSION)")

    # --- SOURCE / CAPTURE ---

    def do_source(self, args: str) -> None:
        path = strip_quotes(args)
        if not path:
            raise UsageError("File name required")
        self.shell.run_script(path)

    def do_capture(self, args: str) -> None:
        sink = self.out
        arg = args.strip()
        if not arg:
            if sink.capturing:
                self.out.writeline(f"Currently capturing to '{sink.capture_path}'.")
            else:
                self.out.writeline("Not currently capturing.")
        elif arg.upper() == 'OFF':
            path = sink.stop_capture()
            if path:
                self.out.writeline(f"Stopped capture. Output saved to '{path}'.")
            else:
                self.out.writeline("Not currently capturing.")
        else:
            path = validate_output_path(strip_quotes(arg))
            self.out.writeline(f"Now capturing query output to '{path}'.")
            sink.start_capture(path)

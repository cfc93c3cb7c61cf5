"""CLI entry for pycqlsh with subcommands.

Subcommands:
  shell        Connect and run interactively, or run -f FILE / -e STATEMENTS (default)
  config       View or update configuration
  banner       Show the ASCII banner
"""
from __future__ import annotations
import argparse
import getpass
import logging
import sys
from typing import List, Optional

from pycqlsh import __version__
from pycqlsh.cli.repl import start_repl
from pycqlsh.cli.shell import Shell
from pycqlsh.core.errors import EngineConnectionError, UsageError
from pycqlsh.core.models import RenderConfig, SessionState
from pycqlsh.core.script import split_statements
from pycqlsh.engines import create_engine
from pycqlsh.utils.config import config
from pycqlsh.utils.constants import OUTPUT_MODES
from pycqlsh.utils.logging_setup import configure_logging
from pycqlsh.utils.validation import validate_consistency

logger = logging.getLogger(__name__)

ASCII_BANNER = r"""
                        _     _
  _ __  _   _  ___ __ _| |___| |__
 | '_ \| | | |/ __/ _` | / __| '_ \
 | |_) | |_| | (_| (_| | \__ \ | | |
 | .__/ \__, |\___\__, |_|___/_| |_|
 |_|    |___/        |_|

    Interactive CQL shell
"""

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
SUBCOMMANDS = ('shell', 'config', 'banner')


# --- Helpers ---

def _render_config(args: argparse.Namespace) -> RenderConfig:
    mode = args.output_format or config.get('output_format')
    max_width = args.max_width or config.get('max_width')
    color = config.get('color') and not args.no_color
    if args.ui == 'panel':
        color = False
    return RenderConfig(mode=mode, max_total_width=int(max_width), color_enabled=bool(color))


def _session_state(args: argparse.Namespace) -> SessionState:
    state = SessionState()
    state.consistency = validate_consistency(args.consistency or config.get('consistency'))
    page_size = config.get('page_size')
    if page_size:
        state.page_size = int(page_size)
    return state


def _engine_options(args: argparse.Namespace) -> dict:
    password = args.password
    if args.username and password is None and sys.stdin.isatty():
        password = getpass.getpass('Password: ')
    return dict(
        host=args.host or config.get('host'),
        port=args.port or config.get('port'),
        username=args.username,
        password=password,
        keyspace=args.keyspace,
        local_dc=args.dc,
        connect_timeout=args.connect_timeout,
        request_timeout=args.request_timeout,
        database=args.database,
    )


# --- Subcommand handlers ---

def cmd_shell(args: argparse.Namespace) -> int:
    try:
        render_config = _render_config(args)
        state = _session_state(args)
    except (ValueError, UsageError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    kind = args.engine or config.get('engine')
    try:
        engine = create_engine(kind, **_engine_options(args))
    except EngineConnectionError as e:
        if args.debug:
            logger.exception("Connection failed")
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    history_file = config.get('history_file')
    if args.file or args.execute:
        shell = Shell(engine, render_config=render_config, state=state)
        try:
            if args.file:
                ok = shell.run_script(args.file)
            else:
                ok = shell.run_statements(split_statements(' '.join(args.execute)), echo=False)
        finally:
            shell.close()
        print("Script executed successfully." if ok else "Script completed with errors.", file=sys.stderr)
        return 0 if ok else 1

    if args.ui == 'panel':
        from pycqlsh.cli.panel import run_panel
        shell = None
        try:
            shell = run_panel(engine, render_config, state, history_file)
        finally:
            if shell is not None:
                shell.close()
            else:
                engine.close()
        return 0

    shell = Shell(engine, render_config=render_config, state=state)
    try:
        start_repl(shell, history_file=history_file)
    finally:
        shell.close()
    return 0


def cmd_banner(_args: argparse.Namespace) -> int:
    print(ASCII_BANNER)
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Handle configuration commands."""
    if args.list:
        for key, value in config.settings.items():
            print(f"{key} = {value}")
    elif args.get:
        value = config.get(args.get)
        print(f"{args.get} = {value}")
    elif args.set and args.value is not None:
        try:
            config.set(args.set, args.value)
        except ValueError as e:
            print(f"Error: invalid value for {args.set}: {e}", file=sys.stderr)
            return 2
        config.save()
        print(f"Set {args.set} = {config.get(args.set)}")
    else:
        print(f"Configuration file: {config.config_file}")
    return 0


# --- Parser construction ---

def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument('--log-level', default=None, choices=LOG_LEVELS, help='Logging level (default WARNING)')
    p.add_argument('--log-file', help='Also write logs to this file')
    p.add_argument('--debug', action='store_true', help='Debug logging and tracebacks')


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog='pycqlsh', description='Interactive CQL shell')
    p.add_argument('--version', action='version', version=f'pycqlsh {__version__}')
    sub = p.add_subparsers(dest='command', required=True)

    # shell
    sh = sub.add_parser('shell', help='Connect and start the shell (default)')
    sh.add_argument('host_arg', nargs='?', metavar='host', help='Contact point (overrides --host)')
    sh.add_argument('port_arg', nargs='?', metavar='port', type=int, help='Native protocol port (overrides --port)')
    sh.add_argument('--engine', choices=['cassandra', 'duckdb'], help='Query engine (default from config: cassandra)')
    sh.add_argument('--host', help='Contact point(s), comma separated')
    sh.add_argument('--port', type=int, help='Native protocol port (default 9042)')
    sh.add_argument('-u', '--username', help='Authenticate as user')
    sh.add_argument('-p', '--password', help='Password (prompted when -u is given without it)')
    sh.add_argument('-k', '--keyspace', help='Keyspace to use on connect')
    sh.add_argument('--dc', help='Local datacenter for load balancing')
    sh.add_argument('--connect-timeout', type=float, default=5.0, help='Connection timeout in seconds')
    sh.add_argument('--request-timeout', type=float, default=10.0, help='Request timeout in seconds')
    sh.add_argument('--database', help='DuckDB database file (duckdb engine; default in-memory)')
    sh.add_argument('--consistency', help='Initial consistency level (default ONE)')
    mode = sh.add_mutually_exclusive_group()
    mode.add_argument('-f', '--file', help='Execute statements from FILE, then exit')
    mode.add_argument('-e', '--execute', nargs='+', metavar='STATEMENT', help='Execute statement(s), then exit')
    sh.add_argument('--ui', choices=['readline', 'panel'], default='readline', help='Interactive front end')
    sh.add_argument('--output-format', choices=OUTPUT_MODES, help='Result format (default tabular)')
    sh.add_argument('--max-width', type=int, help='Maximum total table width (default 100)')
    sh.add_argument('--no-color', action='store_true', help='Disable ANSI color')
    _add_common(sh)

    # config management
    config_p = sub.add_parser('config', help='View or update configuration')
    config_p.add_argument('--list', action='store_true', help='List all configuration values')
    config_p.add_argument('--get', metavar='KEY', help='Get specific configuration value')
    config_p.add_argument('--set', metavar='KEY', help='Set configuration value')
    config_p.add_argument('--value', help='Value to set (used with --set)')
    _add_common(config_p)

    # banner
    banner_p = sub.add_parser('banner', help='Show ASCII logo banner')
    _add_common(banner_p)
    return p


def _normalize_argv(argv: List[str]) -> List[str]:
    # "pycqlsh [options]" without a subcommand means "pycqlsh shell [options]"
    if any(a in ('-h', '--help', '--version') for a in argv[:1]):
        return argv
    if not argv or argv[0] not in SUBCOMMANDS:
        return ['shell'] + argv
    return argv


# --- Main entry ---

def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(_normalize_argv(list(sys.argv[1:] if argv is None else argv)))

    level = 'DEBUG' if args.debug else (args.log_level or 'WARNING')
    configure_logging(level, args.log_file)

    if args.command == 'shell':
        if args.host_arg:
            args.host = args.host_arg
        if args.port_arg:
            args.port = args.port_arg

    try:
        if args.command == 'shell':
            code = cmd_shell(args)
        elif args.command == 'config':
            code = cmd_config(args)
        elif args.command == 'banner':
            code = cmd_banner(args)
        else:
            parser.error('Unknown command')
            return
        sys.exit(code)
    except KeyboardInterrupt:
        logging.warning("Operation interrupted by user")
        sys.exit(130)
    except Exception as e:
        logging.error(f"Unhandled error: {e}", exc_info=args.debug)
        sys.exit(1)


if __name__ == '__main__':
    main()

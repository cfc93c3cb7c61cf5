"""Full-screen curses front end: scrolling output pane above a one-line editor.

Keys: Enter submits, Tab completes, Up/Down walk history, PgUp/PgDn scroll
output, Ctrl-C clears the pending statement, Ctrl-L clears the output,
Ctrl-D on an empty line exits.
"""
from __future__ import annotations
from typing import List, Optional
import curses
import logging
import os

from pycqlsh.cli.shell import OutputSink, Shell
from pycqlsh.core.dispatch import ContinueSignal
from pycqlsh.core.models import CompletionContext

logger = logging.getLogger(__name__)

MAX_OUTPUT_LINES = 5000
KEY_CTRL_C = 3
KEY_CTRL_D = 4
KEY_CTRL_L = 12


class OutputPane:
    def __init__(self, max_lines: int = MAX_OUTPUT_LINES):
        self.lines: List[str] = ['']
        self.scroll = 0  # lines scrolled up from the bottom
        self.max_lines = max_lines

    def write(self, text: str) -> None:
        parts = text.split('\n')
        self.lines[-1] += parts[0]
        self.lines.extend(parts[1:])
        if len(self.lines) > self.max_lines:
            self.lines = self.lines[-self.max_lines:]
        self.scroll = 0

    def flush(self) -> None:
        pass

    def clear(self) -> None:
        self.lines = ['']
        self.scroll = 0

    def scroll_up(self, n: int) -> None:
        self.scroll = min(max(0, len(self.lines) - 1), self.scroll + n)

    def scroll_down(self, n: int) -> None:
        self.scroll = max(0, self.scroll - n)

    def visible(self, height: int) -> List[str]:
        end = len(self.lines) - self.scroll
        return self.lines[max(0, end - height):end]

    def draw(self, win, height: int, width: int) -> None:
        for i, line in enumerate(self.visible(height)):
            try:
                win.addnstr(i, 0, line.expandtabs(), width - 1)
            except curses.error:
                pass


class PaneSink(OutputSink):
    """Output sink that renders into the output pane; CLEAR empties the pane."""

    def __init__(self, pane: OutputPane):
        super().__init__(pane)
        self.pane = pane

    def clear(self) -> None:
        self.pane.clear()


class CommandLine:
    def __init__(self, history: Optional[List[str]] = None):
        self.buffer = ""
        self.cursor = 0
        self.history: List[str] = list(history or [])
        self._hist_pos = len(self.history)

    def insert(self, text: str) -> None:
        self.buffer = self.buffer[:self.cursor] + text + self.buffer[self.cursor:]
        self.cursor += len(text)

    def backspace(self) -> None:
        if self.cursor > 0:
            self.buffer = self.buffer[:self.cursor - 1] + self.buffer[self.cursor:]
            self.cursor -= 1

    def delete(self) -> None:
        self.buffer = self.buffer[:self.cursor] + self.buffer[self.cursor + 1:]

    def move(self, delta: int) -> None:
        self.cursor = max(0, min(len(self.buffer), self.cursor + delta))

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.buffer)

    def recall(self, delta: int) -> None:
        if not self.history:
            return
        self._hist_pos = max(0, min(len(self.history), self._hist_pos + delta))
        self.buffer = self.history[self._hist_pos] if self._hist_pos < len(self.history) else ""
        self.cursor = len(self.buffer)

    def take(self) -> str:
        line = self.buffer
        if line.strip():
            self.history.append(line)
        self._hist_pos = len(self.history)
        self.reset()
        return line

    def reset(self) -> None:
        self.buffer = ""
        self.cursor = 0


def common_prefix(words: List[str]) -> str:
    if not words:
        return ''
    prefix = words[0]
    for w in words[1:]:
        while not w.lower().startswith(prefix.lower()):
            prefix = prefix[:-1]
    return prefix


class Panel:
    """Drives a Shell from curses key events."""

    def __init__(self, shell: Shell, pane: OutputPane, history: Optional[List[str]] = None):
        self.shell = shell
        self.pane = pane
        self.line = CommandLine(history)

    def complete(self) -> None:
        text = self.line.buffer[:self.line.cursor]
        ctx = CompletionContext.from_buffer(text)
        matches = self.shell.completer.complete(ctx)
        if not matches:
            return
        if len(matches) == 1:
            self.line.insert(matches[0][len(ctx.word):] + ' ')
            return
        prefix = common_prefix(matches)
        if len(prefix) > len(ctx.word):
            self.line.insert(prefix[len(ctx.word):])
        else:
            self.pane.write('  '.join(matches) + '\n')

    def submit(self) -> ContinueSignal:
        prompt = self.shell.prompt()
        line = self.line.take()
        self.pane.write(prompt + line + '\n')
        return self.shell.handle_line(line)

    def handle_key(self, key) -> Optional[ContinueSignal]:
        if isinstance(key, str):
            code = ord(key) if len(key) == 1 else -1
            if key in ('\n', '\r'):
                return self.submit()
            if key == '\t':
                self.complete()
            elif code in (8, 127):
                self.line.backspace()
            elif code == KEY_CTRL_D and not self.line.buffer:
                return ContinueSignal.STOP
            elif code == KEY_CTRL_L:
                self.pane.clear()
            elif code == KEY_CTRL_C:
                self.interrupt()
            elif key.isprintable():
                self.line.insert(key)
            return None
        if key == curses.KEY_ENTER:
            return self.submit()
        if key == curses.KEY_BACKSPACE:
            self.line.backspace()
        elif key == curses.KEY_DC:
            self.line.delete()
        elif key == curses.KEY_LEFT:
            self.line.move(-1)
        elif key == curses.KEY_RIGHT:
            self.line.move(1)
        elif key == curses.KEY_HOME:
            self.line.home()
        elif key == curses.KEY_END:
            self.line.end()
        elif key == curses.KEY_UP:
            self.line.recall(-1)
        elif key == curses.KEY_DOWN:
            self.line.recall(1)
        elif key == curses.KEY_PPAGE:
            self.pane.scroll_up(10)
        elif key == curses.KEY_NPAGE:
            self.pane.scroll_down(10)
        return None

    def interrupt(self) -> None:
        self.line.reset()
        self.shell.interrupt()

    def draw(self, stdscr) -> None:
        stdscr.erase()
        h, w = stdscr.getmaxyx()
        out_h = max(1, h - 2)
        self.pane.draw(stdscr, out_h, w)
        status = f" {self.shell.engine.cluster_name()} | {self.shell.render_config.mode}"
        if self.pane.scroll:
            status += f" | scrolled {self.pane.scroll}"
        try:
            stdscr.addnstr(h - 2, 0, status.ljust(w - 1), w - 1, curses.A_REVERSE)
            prompt = self.shell.prompt()
            text = prompt + self.line.buffer
            offset = max(0, len(prompt) + self.line.cursor - (w - 2))
            stdscr.addnstr(h - 1, 0, text[offset:], w - 1)
            stdscr.move(h - 1, min(w - 2, len(prompt) + self.line.cursor - offset))
        except curses.error:
            pass
        stdscr.refresh()

    def loop(self, stdscr) -> None:
        stdscr.keypad(True)
        while True:
            self.draw(stdscr)
            try:
                key = stdscr.get_wch()
            except KeyboardInterrupt:
                self.interrupt()
                continue
            except curses.error:
                continue
            if key == curses.KEY_RESIZE:
                continue
            if self.handle_key(key) is ContinueSignal.STOP:
                break


def _load_history(history_file: Optional[str]) -> List[str]:
    if not history_file:
        return []
    path = os.path.expanduser(history_file)
    if not os.path.exists(path):
        return []
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return [l.rstrip('\n') for l in f if l.strip()]
    except OSError as e:
        logger.warning("Could not read history file %s: %s", path, e)
        return []


def _save_history(history_file: Optional[str], history: List[str]) -> None:
    if not history_file:
        return
    path = os.path.expanduser(history_file)
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(history[-1000:]) + ('\n' if history else ''))
    except OSError as e:
        logger.warning("Could not write history file %s: %s", path, e)


def build_panel_shell(engine, render_config=None, state=None, history_file: Optional[str] = None) -> Panel:
    pane = OutputPane()
    shell = Shell(engine, render_config=render_config, state=state, out=PaneSink(pane), err=pane)
    return Panel(shell, pane, _load_history(history_file))


def run_panel(engine, render_config=None, state=None, history_file: Optional[str] = None) -> Shell:
    """Run the full-screen front end; returns the shell so the caller can close it."""
    panel = build_panel_shell(engine, render_config, state, history_file)
    panel.pane.write(f"Connected to {engine.cluster_name()} at {engine.host()}:{engine.port()}.\n")
    panel.pane.write("Use HELP for help. PgUp/PgDn scroll, Ctrl-D exits.\n")
    try:
        curses.wrapper(panel.loop)
    finally:
        _save_history(history_file, panel.line.history)
    return panel.shell

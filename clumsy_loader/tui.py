#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shared TUI components (Menu, key reading, terminal guard) for ClumsyLoader.
"""
from __future__ import annotations
import contextlib
import os
import sys
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt

try:
    import msvcrt
except ImportError:
    msvcrt = None

try:
    import termios, tty, select
except ImportError:  # Windows
    termios = tty = select = None

# Normalized key tokens; anything else comes back as the raw character
KEY_UP = "up"
KEY_DOWN = "down"
KEY_ENTER = "enter"
KEY_ESC = "esc"

KeySource = Callable[[], Optional[str]]

def clear_screen(console: Console) -> None:
    console.clear()

def section(console: Console, title: str, subtitle: str = "") -> None:
    clear_screen(console)
    msg = f"[bold]{title}[/]"
    if subtitle:
        msg += f"\n[dim]{subtitle}[/]"
    console.print(Panel.fit(msg, border_style="magenta"))

# ────────────────────────── Key decoding ──────────────────────────
_CSI_KEYS = {"A": KEY_UP, "B": KEY_DOWN}
_WIN_ARROWS = {b"H": KEY_UP, b"P": KEY_DOWN}

def decode_posix(read: Callable[[], str], pending: Callable[[], bool]) -> Optional[str]:
    """
    One key from a cbreak-mode stream. Arrows arrive as ESC [ A / ESC O A;
    a lone ESC (nothing pending right after it) is the Escape key.
    Returns None for sequences we don't handle.
    """
    ch = read()
    if ch in ("\r", "\n"):
        return KEY_ENTER
    if ch != "\x1b":
        return ch
    if not pending():
        return KEY_ESC
    nxt = read()
    if nxt not in ("[", "O"):
        return None
    code = read()
    # swallow the tail of longer sequences (e.g. ESC [ 1 ; 5 A)
    while code and (code.isdigit() or code == ";"):
        code = read()
    return _CSI_KEYS.get(code)

def decode_windows(getch: Callable[[], bytes]) -> Optional[str]:
    key = getch()
    if key in (b"\000", b"\xe0"):  # arrow / function key prefix
        return _WIN_ARROWS.get(getch())
    if key in (b"\r", b"\n"):
        return KEY_ENTER
    if key == b"\x1b":
        return KEY_ESC
    try:
        return key.decode()
    except UnicodeDecodeError:
        return None

def read_key() -> Optional[str]:
    """Block for the next key press on the real terminal."""
    if msvcrt:
        return decode_windows(msvcrt.getch)
    fd = sys.stdin.fileno()

    def read() -> str:
        return os.read(fd, 1).decode(errors="ignore")

    def pending() -> bool:
        return bool(select.select([fd], [], [], 0.05)[0])

    return decode_posix(read, pending)

def interactive() -> bool:
    if msvcrt:
        return True
    return termios is not None and sys.stdin.isatty()

@contextlib.contextmanager
def terminal_session(console: Console) -> Iterator[None]:
    """
    Key-by-key input with the cursor hidden. Whatever happens inside,
    the saved tty mode comes back, the cursor reappears and the screen
    is cleared before control returns.
    """
    saved = None
    fd = None
    if termios is not None and not msvcrt and sys.stdin.isatty():
        fd = sys.stdin.fileno()
        saved = termios.tcgetattr(fd)
        tty.setcbreak(fd)
    console.show_cursor(False)
    try:
        yield
    finally:
        if saved is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        console.show_cursor(True)
        clear_screen(console)

# ────────────────────────── Menu ──────────────────────────
class Menu:
    """
    Single-highlight list chooser.

    show() returns the chosen index, or None when the user backs out
    (Esc / q). Up/Down clamp at the ends of the list, no wrap-around;
    long lists scroll so the highlighted row stays on screen.
    """

    def __init__(
        self,
        console_: Console,
        title: str,
        labels: Sequence[str],
        subtitle: str = "",
        key_source: Optional[KeySource] = None,
    ):
        if not labels:
            raise ValueError("Menu needs at least one item")
        self.console = console_
        self.title = title
        self.labels: List[str] = list(labels)
        self.subtitle = subtitle
        self.key_source = key_source
        self.idx = 0
        self.top = 0  # first label inside the viewport

    def handle_key(self, key: Optional[str]) -> Tuple[bool, Optional[int]]:
        """Apply one key. Returns (done, result)."""
        if key == KEY_UP:
            self.idx = max(0, self.idx - 1)
        elif key == KEY_DOWN:
            self.idx = min(len(self.labels) - 1, self.idx + 1)
        elif key == KEY_ENTER:
            return True, self.idx
        elif key in (KEY_ESC, "q"):
            return True, None
        return False, None

    def window_rows(self) -> int:
        """Item rows that fit under the title panel, scroll hints and key help."""
        header = 3 + (len(self.subtitle.splitlines()) if self.subtitle else 0)
        reserved = header + 2 + 2
        return max(1, self.console.size.height - reserved)

    def _scroll(self, rows: int) -> None:
        # keep the highlighted row inside [top, top + rows)
        if self.idx < self.top:
            self.top = self.idx
        elif self.idx >= self.top + rows:
            self.top = self.idx - rows + 1
        self.top = max(0, min(self.top, len(self.labels) - rows))

    def render(self) -> None:
        clear_screen(self.console)
        msg = f"[bold yellow]{escape(self.title)}[/]"
        if self.subtitle:
            msg += f"\n[dim]{escape(self.subtitle)}[/]"
        self.console.print(Panel.fit(msg, border_style="magenta"))

        rows = self.window_rows()
        self._scroll(rows)
        end = min(len(self.labels), self.top + rows)
        lines = [f"[dim]  ↑ {self.top} more[/]" if self.top else ""]
        for i in range(self.top, end):
            label = escape(self.labels[i])
            if i == self.idx:
                lines.append(f"[reverse bold cyan]➤ {label}[/]")
            else:
                lines.append(f"  {label}")
        below = len(self.labels) - end
        lines.append(f"[dim]  ↓ {below} more[/]" if below else "")
        self.console.print("\n".join(lines), no_wrap=True, overflow="ellipsis")
        self.console.print("\n[dim]Use ↑/↓ and Enter to select. Esc/q to go back.[/]")

    def _loop(self, next_key: KeySource) -> Optional[int]:
        while True:
            self.render()
            done, result = self.handle_key(next_key())
            if done:
                return result

    def show(self) -> Optional[int]:
        if self.key_source is not None:
            with terminal_session(self.console):
                return self._loop(self.key_source)

        # Fallback when there is no keyboard to read from (pipes, IDE consoles)
        if not interactive():
            return self.prompt()

        with terminal_session(self.console):
            return self._loop(read_key)

    def prompt(self) -> Optional[int]:
        self.console.print(f"[bold]{escape(self.title)}[/]")
        for i, label in enumerate(self.labels):
            self.console.print(f"[{i}] {escape(label)}")
        ans = Prompt.ask("Select # (blank or q to go back)", default="", console=self.console).strip()
        if ans.isdigit() and 0 <= int(ans) < len(self.labels):
            return int(ans)
        return None

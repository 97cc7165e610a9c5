import argparse
import curses
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple, Union

from . import clipboard
from .apps import locate_apps, open_url, process_launcher
from .bookmarks import import_bookmarks
from .config import load_config, save_config
from .dispatch import Capabilities, dispatch, mode_summary
from .errors import BookmarkImportError, LocateError
from .keys import (
    KEY_BACKSPACE,
    KEY_DELETE,
    KEY_DOWN,
    KEY_ENTER,
    KEY_ESC,
    KEY_F2,
    KEY_LEFT,
    KEY_PAGE_DOWN,
    KEY_PAGE_UP,
    KEY_RIGHT,
    KEY_TAB,
    KEY_UP,
    KeyEvent,
    route,
)
from .models import Bookmark, ConfigField, Mode, StatusKind
from .state import AppState, Snapshot


logger = logging.getLogger(__name__)

LOG_FILE = Path(
    os.environ.get(
        "HHAND_LOG_FILE",
        Path.home() / ".local" / "state" / "hhand" / "hhand.log",
    )
)

MODE_TITLES = {
    Mode.BOOKMARKS: "Search bookmarks",
    Mode.LAUNCHER: "Launch application",
}

MODE_HINTS = {
    Mode.BOOKMARKS: "(ESC) exit  (PgUp/PgDn) switch mode  (Up/Down) select  (ENTER) open  (F2) config",
    Mode.LAUNCHER: "(ESC) exit  (PgUp/PgDn) switch mode  (Up/Down) select  (ENTER) launch  (F2) config",
}

CONFIG_HINT = "(Up/Down) move  (Left/Right) change browser  (F2) close, saving on OK"

NAMED_KEYS = {
    curses.KEY_UP: KEY_UP,
    curses.KEY_DOWN: KEY_DOWN,
    curses.KEY_LEFT: KEY_LEFT,
    curses.KEY_RIGHT: KEY_RIGHT,
    curses.KEY_PPAGE: KEY_PAGE_UP,
    curses.KEY_NPAGE: KEY_PAGE_DOWN,
    curses.KEY_ENTER: KEY_ENTER,
    curses.KEY_BACKSPACE: KEY_BACKSPACE,
    curses.KEY_DC: KEY_DELETE,
    curses.KEY_F2: KEY_F2,
}

CONTROL_CHARS = {
    "\x1b": KEY_ESC,
    "\n": KEY_ENTER,
    "\r": KEY_ENTER,
    "\t": KEY_TAB,
    "\x08": KEY_BACKSPACE,
    "\x7f": KEY_BACKSPACE,
}


def decode_key(raw: Union[int, str]) -> KeyEvent:
    if isinstance(raw, int):
        if raw in NAMED_KEYS:
            return KeyEvent(NAMED_KEYS[raw])
        if 0 <= raw < 256:
            return decode_key(chr(raw))
        return KeyEvent("unknown")

    if raw in CONTROL_CHARS:
        return KeyEvent(CONTROL_CHARS[raw])
    if len(raw) == 1 and 1 <= ord(raw) <= 26:
        return KeyEvent(chr(ord(raw) + 96), ctrl=True)
    if len(raw) == 1 and raw.isprintable():
        return KeyEvent(raw)
    return KeyEvent("unknown")


def default_capabilities() -> Capabilities:
    return Capabilities(
        get_clipboard_text=clipboard.get_text,
        open_url=open_url,
        launch=process_launcher(),
        save_config=save_config,
        import_bookmarks=import_bookmarks,
    )


def draw_box(stdscr, top: int, left: int, height: int, width: int, attr: int = curses.A_NORMAL) -> None:
    if height < 2 or width < 2:
        return
    bottom = top + height - 1
    right = left + width - 1
    for y in (top, bottom):
        stdscr.hline(y, left + 1, curses.ACS_HLINE, width - 2, attr)
    for x in (left, right):
        stdscr.vline(top + 1, x, curses.ACS_VLINE, height - 2, attr)
    corners = (
        (top, left, curses.ACS_ULCORNER),
        (top, right, curses.ACS_URCORNER),
        (bottom, left, curses.ACS_LLCORNER),
        (bottom, right, curses.ACS_LRCORNER),
    )
    for y, x, corner in corners:
        try:
            stdscr.addch(y, x, corner, attr)
        except curses.error:
            # The bottom-right cell of the screen cannot be written without scrolling.
            pass


def draw_title(stdscr, top: int, left: int, width: int, title: str, attr: int) -> None:
    if width > 4 and title:
        stdscr.addnstr(top, left + 2, f" {title} ", width - 4, attr)


def printable(text: str) -> str:
    # addnstr rejects NUL and garbles other control characters.
    return "".join(ch if ch.isprintable() else " " for ch in text)


def format_row(entry) -> str:
    if isinstance(entry, Bookmark):
        return printable(f"{entry.name:<40} : {entry.url}")
    return printable(entry.name)


def status_text(snapshot: Snapshot) -> str:
    if snapshot.status.kind is StatusKind.NONE:
        return "Status: OK"
    return f"Status: {snapshot.status.text}"


def draw_config_panel(stdscr, snapshot: Snapshot, area: Tuple[int, int, int, int], attrs: dict) -> None:
    top, left, height, width = area
    panel_width = min(width, max(36, width * 6 // 10))
    panel_height = min(height, 7)
    if panel_width < 20 or panel_height < 5:
        return
    py = top + (height - panel_height) // 2
    px = left + (width - panel_width) // 2
    for y in range(py, py + panel_height):
        stdscr.addnstr(y, px, " " * panel_width, panel_width)
    draw_box(stdscr, py, px, panel_height, panel_width, attrs["accent"])
    draw_title(stdscr, py, px, panel_width, "Config", attrs["accent"])

    overlay = snapshot.overlay
    pending = overlay.pending or snapshot.config

    def field_attr(field: ConfigField) -> int:
        return attrs["highlight"] if overlay.active_field is field else curses.A_NORMAL

    inner = panel_width - 4
    stdscr.addnstr(py + 2, px + 2, "Browser", inner)
    stdscr.addnstr(py + 2, px + 12, f"[ {pending.browser.label} ]", max(0, inner - 10), field_attr(ConfigField.BROWSER))
    half = inner // 2
    stdscr.addnstr(py + 4, px + 2, "[ OK ]".center(half), half, field_attr(ConfigField.OK))
    stdscr.addnstr(py + 4, px + 2 + half, "[ Cancel ]".center(half), half, field_attr(ConfigField.CANCEL))


def draw_ui(stdscr, snapshot: Snapshot, attrs: dict) -> None:
    stdscr.erase()
    h, w = stdscr.getmaxyx()
    header_height = 3
    footer_rows = 3
    body_height = max(3, h - header_height - footer_rows)
    list_height = max(1, body_height - 2)
    footer_y = header_height + body_height
    if h < header_height + footer_rows + 3 or w < 20:
        stdscr.addnstr(0, 0, "Terminal too small", max(1, w - 1))
        stdscr.refresh()
        return

    # Header with the current query
    draw_box(stdscr, 0, 0, header_height, w, attrs["border"])
    draw_title(stdscr, 0, 0, w, MODE_TITLES[snapshot.mode], attrs["accent"])
    stdscr.addnstr(1, 2, printable(snapshot.input_buffer[-(w - 4):]), w - 4)

    # Result list
    list_title = "Bookmarks" if snapshot.mode is Mode.BOOKMARKS else "Applications"
    draw_box(stdscr, header_height, 0, body_height, w, attrs["border"])
    draw_title(stdscr, header_height, 0, w, list_title, attrs["accent"])
    selected = snapshot.selected
    offset = 0
    if selected is not None and selected >= list_height:
        offset = selected - list_height + 1
    for idx, entry in enumerate(snapshot.rows[offset : offset + list_height]):
        absolute = offset + idx
        is_selected = absolute == selected
        marker = "> " if is_selected else "  "
        attr = attrs["highlight"] if is_selected else curses.A_NORMAL
        line = f"{marker}{format_row(entry)}"
        stdscr.addnstr(header_height + 1 + idx, 1, line.ljust(w - 2), w - 2, attr)

    if snapshot.overlay.visible:
        draw_config_panel(stdscr, snapshot, (header_height, 0, body_height, w), attrs)

    # Footer: key hints and status
    stdscr.hline(footer_y, 0, curses.ACS_HLINE, w)
    hint = CONFIG_HINT if snapshot.overlay.visible else MODE_HINTS[snapshot.mode]
    stdscr.addnstr(footer_y + 1, 0, hint, w - 1, attrs["accent"])
    status_attr = attrs["error"] if snapshot.status.is_error else attrs["success"]
    stdscr.addnstr(footer_y + 2, 0, printable(status_text(snapshot)), w - 1, status_attr)
    stdscr.refresh()


def init_attrs() -> dict:
    attrs = {
        "accent": curses.A_BOLD,
        "highlight": curses.A_REVERSE | curses.A_BOLD,
        "border": curses.A_NORMAL,
        "success": curses.A_NORMAL,
        "error": curses.A_BOLD,
    }
    try:
        curses.use_default_colors()
        curses.init_pair(1, curses.COLOR_CYAN, -1)
        curses.init_pair(2, curses.COLOR_GREEN, -1)
        curses.init_pair(3, curses.COLOR_RED, -1)
        curses.init_pair(4, curses.COLOR_BLACK, curses.COLOR_MAGENTA)
        attrs["accent"] = curses.color_pair(1) | curses.A_BOLD
        attrs["border"] = curses.color_pair(1)
        attrs["success"] = curses.color_pair(2) | curses.A_BOLD
        attrs["error"] = curses.color_pair(3) | curses.A_BOLD
        attrs["highlight"] = curses.color_pair(4) | curses.A_BOLD
    except curses.error:
        pass
    return attrs


def main(stdscr, state: AppState, caps: Capabilities) -> None:
    curses.curs_set(0)
    # Raw mode so Ctrl+<key> reaches us instead of the tty driver.
    curses.raw()
    stdscr.keypad(True)
    attrs = init_attrs()

    while not state.should_exit:
        draw_ui(stdscr, state.snapshot(), attrs)
        try:
            raw = stdscr.get_wch()
        except curses.error:
            continue
        control = route(decode_key(raw), state.mode, state.overlay)
        logger.debug("Key %r -> %s", raw, control)
        dispatch(state, control, caps)


def setup_logging() -> None:
    level = logging.DEBUG if os.environ.get("HHAND_DEBUG") else logging.INFO
    try:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[handler],
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hhand",
        description="Search browser bookmarks and launch applications from the terminal.",
    )
    return parser.parse_args(argv)


def load_state() -> AppState:
    config = load_config()
    bookmarks = import_bookmarks(config.browser)
    apps = locate_apps()
    return AppState.create(bookmarks, apps, config)


def run(argv: Optional[List[str]] = None) -> int:
    parse_args(argv)
    setup_logging()
    try:
        state = load_state()
    except (BookmarkImportError, LocateError) as exc:
        logger.error("Startup failed: %s", exc)
        print(f"hhand: {exc}", file=sys.stderr)
        return 1

    logger.info(mode_summary(state))
    os.environ.setdefault("ESCDELAY", "25")
    curses.wrapper(main, state, default_capabilities())
    return 0

import logging
from dataclasses import dataclass
from typing import Callable, List

from .errors import HhandError
from .keys import Command, Control
from .models import Bookmark, Browser, Config, ConfigField, LaunchableApp, Mode, StatusMessage
from .state import AppState


logger = logging.getLogger(__name__)


@dataclass
class Capabilities:
    """Side-effecting operations the dispatcher may call.

    Every callable reports failure by raising a ``HhandError`` subclass.
    """

    get_clipboard_text: Callable[[], str]
    open_url: Callable[[str], None]
    launch: Callable[[str], None]
    save_config: Callable[[Config], None]
    import_bookmarks: Callable[[Browser], List[Bookmark]]


def mode_summary(state: AppState) -> str:
    if state.mode is Mode.BOOKMARKS:
        return f"Bookmarks mode: {len(state.bookmarks.items)} bookmarks loaded."
    return f"Launcher mode: {len(state.apps.items)} applications found."


def dispatch(state: AppState, control: Control, caps: Capabilities) -> None:
    command = control.command

    if command is Command.NONE:
        return
    if command is Command.EXIT:
        state.should_exit = True
    elif command is Command.APPEND_INPUT:
        state.input_buffer += control.char
    elif command is Command.DELETE_CHAR:
        state.input_buffer = state.input_buffer[:-1]
    elif command is Command.CLEAR_INPUT:
        state.input_buffer = ""
    elif command is Command.PASTE_INPUT:
        paste_input(state, caps)
    elif command is Command.SELECT_NEXT:
        state.active_store().select_next(len(state.active_view()))
    elif command is Command.SELECT_PREVIOUS:
        state.active_store().select_previous(len(state.active_view()))
    elif command is Command.ACTIVATE:
        activate(state, caps)
    elif command is Command.SWITCH_MODE:
        switch_mode(state, control.target or state.mode.other)
    elif command is Command.TOGGLE_CONFIG:
        toggle_config(state, caps)
    elif command is Command.CONFIG_NEXT:
        step_config(state, control.adjust, forward=True)
    elif command is Command.CONFIG_PREVIOUS:
        step_config(state, control.adjust, forward=False)


def paste_input(state: AppState, caps: Capabilities) -> None:
    try:
        text = caps.get_clipboard_text()
    except HhandError as exc:
        logger.warning("Paste failed: %s", exc)
        state.status = StatusMessage.error(str(exc))
        return
    state.input_buffer += single_line(text)


def single_line(text: str) -> str:
    """Flatten pasted text into something the query line can hold.

    Line breaks become spaces; NULs and other control characters are dropped
    because curses refuses to draw them.
    """
    joined = " ".join(text.splitlines())
    return "".join(ch for ch in joined if ch.isprintable())


def activate(state: AppState, caps: Capabilities) -> None:
    view = state.active_view()
    entry = state.active_store().pick(view)
    if entry is None:
        return

    try:
        if isinstance(entry, LaunchableApp):
            caps.launch(entry.exec_handle)
            message = f"Launched {entry.name}."
        else:
            caps.open_url(entry.url)
            message = f"Opened {entry.url}"
    except HhandError as exc:
        logger.warning("Activation of %r failed: %s", entry.name, exc)
        state.status = StatusMessage.error(str(exc))
        return
    logger.info(message)
    state.status = StatusMessage.success(message)


def switch_mode(state: AppState, target: Mode) -> None:
    state.mode = target
    state.input_buffer = ""
    state.status = StatusMessage.success(mode_summary(state))


def step_config(state: AppState, adjust: bool, forward: bool) -> None:
    overlay = state.overlay
    if adjust and overlay.active_field is ConfigField.BROWSER and overlay.pending is not None:
        browser = overlay.pending.browser
        overlay.pending.browser = browser.next() if forward else browser.previous()
        return
    field = overlay.active_field
    overlay.active_field = field.next() if forward else field.previous()


def toggle_config(state: AppState, caps: Capabilities) -> None:
    overlay = state.overlay
    if not overlay.visible:
        overlay.visible = True
        overlay.active_field = ConfigField.BROWSER
        overlay.pending = Config(browser=state.config.browser)
        return

    pending = overlay.pending
    overlay.visible = False
    overlay.pending = None
    if overlay.active_field is not ConfigField.OK or pending is None:
        return
    commit_config(state, pending, caps)


def commit_config(state: AppState, pending: Config, caps: Capabilities) -> None:
    try:
        caps.save_config(pending)
    except HhandError as exc:
        logger.warning("Saving configuration failed: %s", exc)
        state.status = StatusMessage.error(str(exc))
        return

    previous = state.config.browser
    state.config = pending
    if pending.browser is previous:
        state.status = StatusMessage.success("Configuration saved.")
        return

    try:
        bookmarks = caps.import_bookmarks(pending.browser)
    except HhandError as exc:
        logger.warning("Reloading bookmarks from %s failed: %s", pending.browser.label, exc)
        state.status = StatusMessage.error(f"Configuration saved, but reload failed: {exc}")
        return
    state.bookmarks.replace(bookmarks)
    state.status = StatusMessage.success(
        f"Configuration saved. Imported {len(bookmarks)} bookmarks from {pending.browser.label}."
    )

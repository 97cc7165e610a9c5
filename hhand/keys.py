"""Key vocabulary and the key-to-control router.

The router never touches curses: the terminal layer decodes raw input into
``KeyEvent`` values first, so routing can be exercised with plain data.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .models import ConfigOverlay, Mode


KEY_ESC = "esc"
KEY_F2 = "f2"
KEY_TAB = "tab"
KEY_UP = "up"
KEY_DOWN = "down"
KEY_LEFT = "left"
KEY_RIGHT = "right"
KEY_PAGE_UP = "pageup"
KEY_PAGE_DOWN = "pagedown"
KEY_ENTER = "enter"
KEY_BACKSPACE = "backspace"
KEY_DELETE = "delete"

EXIT_KEYS = (KEY_ESC,)
TOGGLE_CONFIG_KEYS = (KEY_F2,)
CONFIG_PREVIOUS_KEYS = (KEY_UP, KEY_LEFT)
CONFIG_NEXT_KEYS = (KEY_DOWN, KEY_RIGHT)
# Horizontal keys also step the value of the focused field.
ADJUST_KEYS = (KEY_LEFT, KEY_RIGHT)
SWITCH_MODE_KEYS = (KEY_PAGE_UP, KEY_PAGE_DOWN)


@dataclass(frozen=True)
class KeyEvent:
    key: str
    ctrl: bool = False

    @property
    def is_char(self) -> bool:
        return len(self.key) == 1 and self.key.isprintable()


class Command(Enum):
    NONE = "none"
    EXIT = "exit"
    TOGGLE_CONFIG = "toggle_config"
    CONFIG_NEXT = "config_next"
    CONFIG_PREVIOUS = "config_previous"
    SELECT_NEXT = "select_next"
    SELECT_PREVIOUS = "select_previous"
    APPEND_INPUT = "append_input"
    DELETE_CHAR = "delete_char"
    CLEAR_INPUT = "clear_input"
    PASTE_INPUT = "paste_input"
    ACTIVATE = "activate"
    SWITCH_MODE = "switch_mode"


@dataclass(frozen=True)
class Control:
    command: Command
    char: str = ""
    target: Optional[Mode] = None
    adjust: bool = False


NO_CONTROL = Control(Command.NONE)


def route(event: KeyEvent, mode: Mode, overlay: ConfigOverlay) -> Control:
    key = event.key

    if key in EXIT_KEYS:
        return Control(Command.EXIT)
    if key in TOGGLE_CONFIG_KEYS:
        return Control(Command.TOGGLE_CONFIG)

    # The overlay owns the keyboard while it is open.
    if overlay.visible:
        if key in CONFIG_PREVIOUS_KEYS:
            return Control(Command.CONFIG_PREVIOUS, adjust=key in ADJUST_KEYS)
        if key in CONFIG_NEXT_KEYS:
            return Control(Command.CONFIG_NEXT, adjust=key in ADJUST_KEYS)
        return NO_CONTROL

    if key == KEY_DOWN:
        return Control(Command.SELECT_NEXT)
    if key == KEY_UP:
        return Control(Command.SELECT_PREVIOUS)
    if key == KEY_ENTER:
        return Control(Command.ACTIVATE)
    if key == KEY_BACKSPACE:
        return Control(Command.DELETE_CHAR)
    if key == KEY_DELETE:
        return Control(Command.CLEAR_INPUT)
    if key in SWITCH_MODE_KEYS:
        return Control(Command.SWITCH_MODE, target=mode.other)
    if event.is_char:
        if event.ctrl:
            return Control(Command.PASTE_INPUT)
        return Control(Command.APPEND_INPUT, char=key)
    return NO_CONTROL

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, Sequence, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class Bookmark:
    name: str
    url: str


@dataclass(frozen=True)
class LaunchableApp:
    name: str
    exec_handle: str


class Browser(Enum):
    CHROME = "chrome"
    FIREFOX = "firefox"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def next(self) -> "Browser":
        members = list(Browser)
        return members[(members.index(self) + 1) % len(members)]

    def previous(self) -> "Browser":
        members = list(Browser)
        return members[(members.index(self) - 1) % len(members)]


@dataclass
class Config:
    browser: Browser = Browser.FIREFOX


class Mode(Enum):
    BOOKMARKS = "bookmarks"
    LAUNCHER = "launcher"

    @property
    def other(self) -> "Mode":
        return Mode.LAUNCHER if self is Mode.BOOKMARKS else Mode.BOOKMARKS


class ConfigField(Enum):
    BROWSER = "browser"
    OK = "ok"
    CANCEL = "cancel"

    def next(self) -> "ConfigField":
        members = list(ConfigField)
        return members[(members.index(self) + 1) % len(members)]

    def previous(self) -> "ConfigField":
        members = list(ConfigField)
        return members[(members.index(self) - 1) % len(members)]


@dataclass
class ConfigOverlay:
    visible: bool = False
    active_field: ConfigField = ConfigField.BROWSER
    pending: Optional[Config] = None


class StatusKind(Enum):
    NONE = "none"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class StatusMessage:
    kind: StatusKind = StatusKind.NONE
    text: str = ""

    @classmethod
    def none(cls) -> "StatusMessage":
        return cls()

    @classmethod
    def success(cls, text: str) -> "StatusMessage":
        return cls(StatusKind.SUCCESS, text)

    @classmethod
    def error(cls, text: str) -> "StatusMessage":
        return cls(StatusKind.ERROR, text)

    @property
    def is_error(self) -> bool:
        return self.kind is StatusKind.ERROR


@dataclass
class EntryStore(Generic[T]):
    """Loaded entries plus a cursor into the *filtered* view of them.

    The filtered view changes whenever the query does, so the cursor is
    re-validated against the current view length on every read instead of
    being trusted.
    """

    items: List[T] = field(default_factory=list)
    selected: Optional[int] = None

    def replace(self, items: Sequence[T]) -> None:
        self.items = list(items)
        self.selected = None

    def clamp(self, count: int) -> Optional[int]:
        if count <= 0:
            self.selected = None
        elif self.selected is not None:
            self.selected = max(0, min(self.selected, count - 1))
        return self.selected

    def select_next(self, count: int) -> None:
        current = self.clamp(count)
        if count <= 0:
            return
        self.selected = 0 if current is None else (current + 1) % count

    def select_previous(self, count: int) -> None:
        current = self.clamp(count)
        if count <= 0:
            return
        self.selected = count - 1 if current is None else (current - 1) % count

    def pick(self, view: Sequence[T]) -> Optional[T]:
        idx = self.selected
        if idx is None or not 0 <= idx < len(view):
            return None
        return view[idx]

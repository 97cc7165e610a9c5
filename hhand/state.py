from dataclasses import dataclass, field
from typing import List, Optional

from .filtering import filter_apps, filter_bookmarks
from .models import (
    Bookmark,
    Config,
    ConfigOverlay,
    EntryStore,
    LaunchableApp,
    Mode,
    StatusMessage,
)


@dataclass
class AppState:
    bookmarks: EntryStore[Bookmark] = field(default_factory=EntryStore)
    apps: EntryStore[LaunchableApp] = field(default_factory=EntryStore)
    mode: Mode = Mode.BOOKMARKS
    input_buffer: str = ""
    overlay: ConfigOverlay = field(default_factory=ConfigOverlay)
    status: StatusMessage = field(default_factory=StatusMessage.none)
    config: Config = field(default_factory=Config)
    should_exit: bool = False

    @classmethod
    def create(
        cls,
        bookmarks: List[Bookmark],
        apps: List[LaunchableApp],
        config: Optional[Config] = None,
    ) -> "AppState":
        state = cls(config=config or Config())
        state.bookmarks.replace(bookmarks)
        state.apps.replace(apps)
        return state

    def visible_bookmarks(self) -> List[Bookmark]:
        return filter_bookmarks(self.bookmarks.items, self.input_buffer)

    def visible_apps(self) -> List[LaunchableApp]:
        return filter_apps(self.apps.items, self.input_buffer)

    def active_store(self) -> EntryStore:
        return self.bookmarks if self.mode is Mode.BOOKMARKS else self.apps

    def active_view(self) -> list:
        return self.visible_bookmarks() if self.mode is Mode.BOOKMARKS else self.visible_apps()

    def snapshot(self) -> "Snapshot":
        view = self.active_view()
        selected = self.active_store().clamp(len(view))
        return Snapshot(
            mode=self.mode,
            input_buffer=self.input_buffer,
            overlay=ConfigOverlay(
                visible=self.overlay.visible,
                active_field=self.overlay.active_field,
                pending=self.overlay.pending,
            ),
            rows=view,
            selected=selected,
            status=self.status,
            config=self.config,
        )


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the state handed to the renderer each iteration."""

    mode: Mode
    input_buffer: str
    overlay: ConfigOverlay
    rows: list
    selected: Optional[int]
    status: StatusMessage
    config: Config

from typing import Callable, List, Sequence, TypeVar

from .models import Bookmark, LaunchableApp


T = TypeVar("T")


def filter_entries(items: Sequence[T], query: str, name_of: Callable[[T], str]) -> List[T]:
    # An empty query shows no rows at all; the list only fills once the user types.
    if not query:
        return []
    needle = query.casefold()
    return [item for item in items if needle in name_of(item).casefold()]


def filter_bookmarks(bookmarks: Sequence[Bookmark], query: str) -> List[Bookmark]:
    return filter_entries(bookmarks, query, lambda bm: bm.name)


def filter_apps(apps: Sequence[LaunchableApp], query: str) -> List[LaunchableApp]:
    return filter_entries(apps, query, lambda app: app.name)

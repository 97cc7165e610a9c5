import json
import logging
import os
import shutil
import sqlite3
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from .errors import BookmarkImportError
from .models import Bookmark, Browser


logger = logging.getLogger(__name__)

CHROME_ROOTS = ("bookmark_bar", "other", "synced")

PLACES_QUERY = """
    SELECT moz_bookmarks.title, moz_places.url
    FROM moz_bookmarks
    JOIN moz_places ON moz_bookmarks.fk = moz_places.id
    WHERE moz_bookmarks.type = 1
    ORDER BY moz_bookmarks.id
"""


def import_bookmarks(browser: Browser) -> List[Bookmark]:
    if browser is Browser.CHROME:
        bookmarks = import_chrome()
    else:
        bookmarks = import_firefox()
    logger.info("Imported %d bookmarks from %s", len(bookmarks), browser.label)
    return bookmarks


def chrome_bookmarks_file(home: Optional[Path] = None, platform: str = sys.platform) -> Path:
    home = home or Path.home()
    if platform.startswith("win"):
        base = Path(os.environ.get("LOCALAPPDATA", home / "AppData" / "Local"))
        user_data = base / "Google" / "Chrome" / "User Data"
        default = user_data / "Default" / "Bookmarks"
        return default if default.exists() else user_data / "Profile 1" / "Bookmarks"
    if platform == "darwin":
        return home / "Library" / "Application Support" / "Google" / "Chrome" / "Default" / "Bookmarks"
    return home / ".config" / "google-chrome" / "Default" / "Bookmarks"


def import_chrome(path: Optional[Path] = None) -> List[Bookmark]:
    path = path or chrome_bookmarks_file()
    if not path.exists():
        raise BookmarkImportError(f"Chrome bookmarks file not found at {path}")
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise BookmarkImportError(f"Failed to read Chrome bookmarks at {path}: {exc}") from exc

    roots = data.get("roots") if isinstance(data, dict) else None
    if not isinstance(roots, dict):
        raise BookmarkImportError(f"Unexpected Chrome bookmarks format in {path}")
    return unpack_chrome_roots(roots)


def unpack_chrome_roots(roots: Dict[str, dict]) -> List[Bookmark]:
    bookmarks: List[Bookmark] = []
    for root_name in CHROME_ROOTS:
        root = roots.get(root_name)
        if not isinstance(root, dict):
            continue
        # Depth-first walk in document order without recursion.
        stack = [root]
        while stack:
            node = stack.pop()
            url = node.get("url")
            if url:
                bookmarks.append(Bookmark(str(node.get("name", "")).strip(), str(url)))
                continue
            children = node.get("children") or []
            stack.extend(child for child in reversed(children) if isinstance(child, dict))
    return bookmarks


def firefox_profiles_dir(home: Optional[Path] = None, platform: str = sys.platform) -> Path:
    home = home or Path.home()
    if platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", home / "AppData" / "Roaming"))
        return base / "Mozilla" / "Firefox" / "Profiles"
    if platform == "darwin":
        return home / "Library" / "Application Support" / "Firefox" / "Profiles"
    return home / ".mozilla" / "firefox"


def find_firefox_profile(profiles_dir: Path) -> Path:
    if not profiles_dir.is_dir():
        raise BookmarkImportError(f"Firefox profile directory not found at {profiles_dir}")
    try:
        candidates = sorted(p for p in profiles_dir.iterdir() if p.is_dir())
    except OSError as exc:
        raise BookmarkImportError(f"Failed to list {profiles_dir}: {exc}") from exc
    for suffix in (".default-release", ".default"):
        for candidate in candidates:
            if candidate.name.endswith(suffix) and (candidate / "places.sqlite").exists():
                return candidate
    raise BookmarkImportError(f"No Firefox profile with places.sqlite found in {profiles_dir}")


def import_firefox(profiles_dir: Optional[Path] = None) -> List[Bookmark]:
    profile = find_firefox_profile(profiles_dir or firefox_profiles_dir())
    places = profile / "places.sqlite"

    # Firefox keeps the live database locked, so read from a copy.
    fd, temp_name = tempfile.mkstemp(prefix="hhand-places-", suffix=".sqlite")
    os.close(fd)
    temp_path = Path(temp_name)
    try:
        shutil.copyfile(places, temp_path)
        return read_places(temp_path)
    except OSError as exc:
        raise BookmarkImportError(f"Failed to copy {places}: {exc}") from exc
    finally:
        temp_path.unlink(missing_ok=True)


def read_places(db_path: Path) -> List[Bookmark]:
    try:
        conn = sqlite3.connect(str(db_path))
        try:
            rows = conn.execute(PLACES_QUERY).fetchall()
        finally:
            conn.close()
    except sqlite3.Error as exc:
        raise BookmarkImportError(f"Failed to read Firefox bookmarks from {db_path}: {exc}") from exc
    return [Bookmark((title or url).strip(), url) for title, url in rows if url]


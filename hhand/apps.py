import configparser
import logging
import os
import shlex
import subprocess
import sys
import webbrowser
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from .errors import LaunchError, LocateError
from .models import LaunchableApp


logger = logging.getLogger(__name__)

DESKTOP_SECTION = "Desktop Entry"


def locate_apps(platform: str = sys.platform) -> List[LaunchableApp]:
    if platform.startswith("win"):
        apps = locate_windows_apps(start_menu_dirs())
    else:
        apps = locate_desktop_apps(application_dirs())
    logger.info("Located %d applications", len(apps))
    return apps


def application_dirs(env: Optional[Dict[str, str]] = None) -> List[Path]:
    env = os.environ if env is None else env
    data_home = env.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    data_dirs = env.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
    roots = [data_home] + [d for d in data_dirs.split(os.pathsep) if d]
    return [Path(root) / "applications" for root in roots]


def start_menu_dirs(env: Optional[Dict[str, str]] = None) -> List[Path]:
    env = os.environ if env is None else env
    appdata = env.get("APPDATA") or str(Path.home() / "AppData" / "Roaming")
    programdata = env.get("PROGRAMDATA") or "C:/ProgramData"
    return [
        Path(appdata) / "Microsoft" / "Windows" / "Start Menu" / "Programs",
        Path(programdata) / "Microsoft" / "Windows" / "Start Menu" / "Programs",
    ]


def list_dir(path: Path) -> List[Path]:
    try:
        return sorted(path.iterdir())
    except OSError as exc:
        raise LocateError(f"Could not list {path}: {exc}") from exc


def parse_desktop_file(path: Path) -> Optional[LaunchableApp]:
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.optionxform = str
    try:
        parser.read(path, encoding="utf-8")
    except (configparser.Error, UnicodeDecodeError, OSError) as exc:
        logger.debug("Skipping unreadable desktop entry %s: %s", path, exc)
        return None
    if not parser.has_section(DESKTOP_SECTION):
        return None

    entry = parser[DESKTOP_SECTION]
    if entry.get("Type", "Application") != "Application":
        return None
    if entry.get("NoDisplay", "false").lower() == "true" or entry.get("Hidden", "false").lower() == "true":
        return None
    name = entry.get("Name", "").strip()
    exec_handle = entry.get("Exec", "").strip()
    if not name or not exec_handle:
        return None
    return LaunchableApp(name, exec_handle)


def locate_desktop_apps(dirs: Iterable[Path]) -> List[LaunchableApp]:
    apps: Dict[str, LaunchableApp] = {}
    for directory in dirs:
        if not directory.is_dir():
            continue
        for path in list_dir(directory):
            if path.suffix != ".desktop" or not path.is_file():
                continue
            app = parse_desktop_file(path)
            if app is not None and app.name not in apps:
                apps[app.name] = app
    return sorted(apps.values(), key=lambda app: app.name.lower())


def locate_windows_apps(dirs: Iterable[Path]) -> List[LaunchableApp]:
    apps: List[LaunchableApp] = []
    for directory in dirs:
        if not directory.is_dir():
            continue
        stack = [directory]
        while stack:
            current = stack.pop()
            children = list_dir(current)
            stack.extend(reversed([child for child in children if child.is_dir()]))
            for child in children:
                if not child.is_dir():
                    apps.append(LaunchableApp(child.stem, str(child)))
    return apps


def build_command(exec_handle: str, platform: str = sys.platform) -> List[str]:
    if platform.startswith("win"):
        return ["cmd", "/C", "start", "", exec_handle]
    try:
        parts = shlex.split(exec_handle)
    except ValueError as exc:
        raise LaunchError(f"Cannot parse launch command {exec_handle!r}: {exc}") from exc
    # Drop desktop-entry field codes such as %f, %U or %i.
    return [part for part in parts if not part.startswith("%")]


def process_launcher(platform: str = sys.platform) -> Callable[[str], None]:
    def launch(exec_handle: str) -> None:
        command = build_command(exec_handle, platform)
        if not command:
            raise LaunchError(f"Nothing to launch for {exec_handle!r}.")
        kwargs = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
        }
        if not platform.startswith("win"):
            kwargs["start_new_session"] = True
        try:
            subprocess.Popen(command, **kwargs)
        except OSError as exc:
            raise LaunchError(f"Failed to launch {command[0]}: {exc}") from exc
        logger.info("Spawned %s", command)

    return launch


def open_url(url: str) -> None:
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as exc:
        raise LaunchError(f"Failed to open {url}: {exc}") from exc
    if not opened:
        raise LaunchError(f"No browser available to open {url}.")

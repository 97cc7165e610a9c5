import subprocess
import tempfile
import unittest
import webbrowser
from pathlib import Path
from unittest import mock

from hhand import apps
from hhand.apps import (
    application_dirs,
    build_command,
    locate_desktop_apps,
    locate_windows_apps,
    open_url,
    parse_desktop_file,
    process_launcher,
)
from hhand.errors import LaunchError, LocateError
from hhand.models import LaunchableApp


def desktop_entry(name: str, exec_line: str, extra: str = "") -> str:
    return f"[Desktop Entry]\nType=Application\nName={name}\nExec={exec_line}\n{extra}"


class DesktopLocatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        self.user_dir = self.root / "user" / "applications"
        self.system_dir = self.root / "system" / "applications"
        self.user_dir.mkdir(parents=True)
        self.system_dir.mkdir(parents=True)

    def write(self, directory: Path, filename: str, content: str) -> Path:
        path = directory / filename
        path.write_text(content, encoding="utf-8")
        return path

    def test_parses_name_and_exec(self) -> None:
        path = self.write(self.user_dir, "firefox.desktop", desktop_entry("Firefox", "firefox %u", "Name[de]=Feuerfuchs\n"))
        self.assertEqual(parse_desktop_file(path), LaunchableApp("Firefox", "firefox %u"))

    def test_skips_hidden_non_app_and_broken_entries(self) -> None:
        cases = {
            "hidden.desktop": desktop_entry("Hidden", "hidden", "NoDisplay=true\n"),
            "link.desktop": "[Desktop Entry]\nType=Link\nName=Site\nURL=https://x\n",
            "noexec.desktop": "[Desktop Entry]\nName=Nothing\n",
            "garbage.desktop": "no section header at all",
            "other.desktop": "[Something Else]\nName=X\nExec=x\n",
        }
        for filename, content in cases.items():
            path = self.write(self.user_dir, filename, content)
            self.assertIsNone(parse_desktop_file(path), filename)

    def test_percent_signs_in_exec_are_literal(self) -> None:
        path = self.write(self.user_dir, "x.desktop", desktop_entry("X", "x --ratio=50%% %F"))
        self.assertEqual(parse_desktop_file(path).exec_handle, "x --ratio=50%% %F")

    def test_user_entries_shadow_system_entries_and_sort(self) -> None:
        self.write(self.user_dir, "b.desktop", desktop_entry("files", "my-files"))
        self.write(self.system_dir, "a.desktop", desktop_entry("Editor", "gedit"))
        self.write(self.system_dir, "c.desktop", desktop_entry("files", "nautilus"))
        self.write(self.system_dir, "readme.txt", "not an entry")
        found = locate_desktop_apps([self.user_dir, self.system_dir, self.root / "missing"])
        self.assertEqual(found, [LaunchableApp("Editor", "gedit"), LaunchableApp("files", "my-files")])

    def test_unlistable_directory_raises_locate_error(self) -> None:
        with mock.patch.object(Path, "iterdir", side_effect=PermissionError("denied")):
            with self.assertRaises(LocateError):
                locate_desktop_apps([self.user_dir])

    def test_application_dirs_follow_xdg(self) -> None:
        dirs = application_dirs({"XDG_DATA_HOME": "/data/home", "XDG_DATA_DIRS": "/a:/b"})
        self.assertEqual(dirs, [Path("/data/home/applications"), Path("/a/applications"), Path("/b/applications")])


class WindowsLocatorTests(unittest.TestCase):
    def test_walks_start_menu_tree(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            programs = Path(tmp) / "Programs"
            (programs / "Tools" / "Nested").mkdir(parents=True)
            (programs / "Notepad.lnk").write_text("", encoding="utf-8")
            (programs / "Tools" / "Terminal.lnk").write_text("", encoding="utf-8")
            (programs / "Tools" / "Nested" / "Deep.lnk").write_text("", encoding="utf-8")
            found = locate_windows_apps([programs, Path(tmp) / "absent"])
            self.assertEqual(sorted(app.name for app in found), ["Deep", "Notepad", "Terminal"])
            self.assertIn(LaunchableApp("Notepad", str(programs / "Notepad.lnk")), found)

    def test_locate_apps_dispatches_on_platform(self) -> None:
        with mock.patch.object(apps, "locate_windows_apps", return_value=[]) as windows, mock.patch.object(
            apps, "locate_desktop_apps", return_value=[]
        ) as desktop:
            apps.locate_apps("win32")
            apps.locate_apps("linux")
        windows.assert_called_once()
        desktop.assert_called_once()


class LauncherTests(unittest.TestCase):
    def test_build_command_strips_field_codes(self) -> None:
        self.assertEqual(build_command("firefox %u", "linux"), ["firefox"])
        self.assertEqual(
            build_command('env FOO=1 "/opt/My App/app" --flag %F', "linux"),
            ["env", "FOO=1", "/opt/My App/app", "--flag"],
        )

    def test_build_command_windows_uses_start(self) -> None:
        self.assertEqual(
            build_command("C:/Programs/App.lnk", "win32"),
            ["cmd", "/C", "start", "", "C:/Programs/App.lnk"],
        )

    def test_unbalanced_quotes_raise_launch_error(self) -> None:
        with self.assertRaises(LaunchError):
            build_command('app "unterminated', "linux")

    def test_launch_spawns_detached(self) -> None:
        launch = process_launcher("linux")
        with mock.patch.object(subprocess, "Popen") as popen:
            launch("nautilus --new-window %U")
        args, kwargs = popen.call_args
        self.assertEqual(args[0], ["nautilus", "--new-window"])
        self.assertTrue(kwargs["start_new_session"])
        self.assertIs(kwargs["stdout"], subprocess.DEVNULL)
        popen.return_value.wait.assert_not_called()

    def test_launch_failures_raise_launch_error(self) -> None:
        launch = process_launcher("linux")
        with self.assertRaises(LaunchError):
            launch("%U")
        with mock.patch.object(subprocess, "Popen", side_effect=FileNotFoundError("no such file")):
            with self.assertRaises(LaunchError) as ctx:
                launch("does-not-exist")
        self.assertIn("does-not-exist", str(ctx.exception))


class OpenUrlTests(unittest.TestCase):
    def test_opens_with_webbrowser(self) -> None:
        with mock.patch.object(webbrowser, "open", return_value=True) as opener:
            open_url("https://a")
        opener.assert_called_once_with("https://a")

    def test_no_browser_raises(self) -> None:
        with mock.patch.object(webbrowser, "open", return_value=False):
            with self.assertRaises(LaunchError):
                open_url("https://a")
        with mock.patch.object(webbrowser, "open", side_effect=webbrowser.Error("boom")):
            with self.assertRaises(LaunchError):
                open_url("https://a")


if __name__ == "__main__":
    unittest.main()

import unittest

from hhand.models import Browser, ConfigField, EntryStore, Mode, StatusKind, StatusMessage


class EntryStoreTests(unittest.TestCase):
    def test_select_next_starts_at_first_and_wraps(self) -> None:
        store = EntryStore(["a", "b", "c"])
        store.select_next(3)
        self.assertEqual(store.selected, 0)
        store.select_next(3)
        store.select_next(3)
        self.assertEqual(store.selected, 2)
        store.select_next(3)
        self.assertEqual(store.selected, 0)

    def test_select_previous_starts_at_last_and_wraps(self) -> None:
        store = EntryStore(["a", "b", "c"])
        store.select_previous(3)
        self.assertEqual(store.selected, 2)
        store.select_previous(3)
        self.assertEqual(store.selected, 1)
        store.selected = 0
        store.select_previous(3)
        self.assertEqual(store.selected, 2)

    def test_empty_view_clears_selection(self) -> None:
        store = EntryStore(["a"], selected=0)
        store.select_next(0)
        self.assertIsNone(store.selected)
        store.selected = 4
        store.select_previous(0)
        self.assertIsNone(store.selected)

    def test_selection_stays_in_bounds_under_shrinking_view(self) -> None:
        store = EntryStore(list(range(10)))
        counts = [10, 10, 4, 4, 1, 0, 7, 3, 3, 2]
        for step, count in enumerate(counts):
            if step % 2:
                store.select_previous(count)
            else:
                store.select_next(count)
            if store.selected is not None:
                self.assertTrue(0 <= store.selected < count)
            else:
                self.assertEqual(count, 0)

    def test_clamp_pulls_stale_index_into_range(self) -> None:
        store = EntryStore(["a", "b", "c"], selected=9)
        self.assertEqual(store.clamp(2), 1)
        self.assertIsNone(store.clamp(0))

    def test_pick_is_bounds_checked(self) -> None:
        store = EntryStore(["a", "b"], selected=5)
        self.assertIsNone(store.pick(["a", "b"]))
        store.selected = None
        self.assertIsNone(store.pick(["a"]))
        store.selected = 1
        self.assertEqual(store.pick(["a", "b"]), "b")

    def test_replace_resets_selection(self) -> None:
        store = EntryStore(["a", "b"], selected=1)
        store.replace(["x"])
        self.assertEqual(store.items, ["x"])
        self.assertIsNone(store.selected)


class ConfigFieldTests(unittest.TestCase):
    def test_next_and_previous_are_inverses(self) -> None:
        for field in ConfigField:
            self.assertIs(field.next().previous(), field)
            self.assertIs(field.previous().next(), field)

    def test_cycle_order_wraps(self) -> None:
        self.assertIs(ConfigField.BROWSER.next(), ConfigField.OK)
        self.assertIs(ConfigField.OK.next(), ConfigField.CANCEL)
        self.assertIs(ConfigField.CANCEL.next(), ConfigField.BROWSER)
        self.assertIs(ConfigField.BROWSER.previous(), ConfigField.CANCEL)


class MiscModelTests(unittest.TestCase):
    def test_mode_other(self) -> None:
        self.assertIs(Mode.BOOKMARKS.other, Mode.LAUNCHER)
        self.assertIs(Mode.LAUNCHER.other, Mode.BOOKMARKS)

    def test_browser_cycles(self) -> None:
        self.assertIs(Browser.CHROME.next(), Browser.FIREFOX)
        self.assertIs(Browser.FIREFOX.next(), Browser.CHROME)
        for browser in Browser:
            self.assertIs(browser.next().previous(), browser)
        self.assertEqual(Browser.CHROME.label, "Chrome")

    def test_status_constructors(self) -> None:
        self.assertIs(StatusMessage.none().kind, StatusKind.NONE)
        self.assertEqual(StatusMessage.success("ok"), StatusMessage(StatusKind.SUCCESS, "ok"))
        self.assertTrue(StatusMessage.error("bad").is_error)


if __name__ == "__main__":
    unittest.main()

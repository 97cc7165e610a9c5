import pyperclip

from .errors import ClipboardError


def get_text() -> str:
    try:
        text = pyperclip.paste()
    except pyperclip.PyperclipException as exc:
        raise ClipboardError(f"Failed to read the clipboard: {exc}") from exc
    return text or ""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from .errors import ConfigError
from .models import Browser, Config


logger = logging.getLogger(__name__)

CONFIG_FILE = Path(
    os.environ.get(
        "HHAND_CONFIG_FILE",
        Path.home() / ".config" / "hhand" / "config.json",
    )
)


def load_config(path: Optional[Path] = None) -> Config:
    path = path or CONFIG_FILE
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        return Config()
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return Config()

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a JSON object", path)
        return Config()
    try:
        browser = Browser(str(data.get("browser", Browser.FIREFOX.value)).lower())
    except ValueError:
        logger.warning("Unknown browser %r in %s, using default", data.get("browser"), path)
        browser = Browser.FIREFOX
    return Config(browser=browser)


def save_config(config: Config, path: Optional[Path] = None) -> None:
    path = path or CONFIG_FILE
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump({"browser": config.browser.value}, fh, indent=2)
    except OSError as exc:
        raise ConfigError(f"Failed to save configuration to {path}: {exc}") from exc
    logger.info("Saved configuration to %s", path)

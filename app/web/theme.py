"""Light/dark theme preference backed by an injected key-value storage."""

import logging
from collections.abc import MutableMapping
from enum import Enum

logger = logging.getLogger(__name__)

THEME_STORAGE_KEY = "theme-preference"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class ThemePreference:
    """
    Current theme plus its persistence.

    The storage is any string mapping: a dict in tests, the request cookies
    (with writes collected for the response) in the web page.
    """

    def __init__(self, storage: MutableMapping[str, str], default: Theme = Theme.LIGHT):
        self._storage = storage
        self._default = default

    @property
    def theme(self) -> Theme:
        saved = self._storage.get(THEME_STORAGE_KEY)
        try:
            return Theme(saved) if saved else self._default
        except ValueError:
            logger.debug(f"Ignoring invalid stored theme {saved!r}")
            return self._default

    def set(self, theme: Theme) -> None:
        self._storage[THEME_STORAGE_KEY] = theme.value

    def toggle(self) -> Theme:
        new_theme = Theme.DARK if self.theme is Theme.LIGHT else Theme.LIGHT
        self.set(new_theme)
        return new_theme

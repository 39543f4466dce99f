"""Theme preference persistence."""

import logging

from .config import THEMES
from .errors import StorageError
from .storage import THEME_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class PreferenceStore:
    """Reads and writes the "theme" key ("dark" or "light")."""

    def __init__(self, store: KeyValueStore, default_theme: str = "light"):
        if default_theme not in THEMES:
            raise ValueError(f"Unknown theme: {default_theme}")
        self.store = store
        self.default_theme = default_theme

    async def load_theme(self) -> str:
        """Return the saved theme, or the default if unset or unreadable."""
        try:
            saved = await self.store.get(THEME_KEY)
        except StorageError as e:
            logger.error("Error loading preferences: %s", e)
            return self.default_theme
        if saved in THEMES:
            return saved
        if saved is not None:
            logger.warning("Ignoring unknown theme %r", saved)
        return self.default_theme

    async def set_theme(self, theme: str) -> str:
        """Persist a theme. Write failures are logged, not raised.

        Raises:
            ValueError: If theme is not "dark" or "light".
        """
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        try:
            await self.store.set(THEME_KEY, theme)
        except StorageError as e:
            logger.error("Error saving theme preference: %s", e)
        return theme

    async def toggle_theme(self) -> str:
        """Flip between dark and light and persist the new value."""
        current = await self.load_theme()
        return await self.set_theme("light" if current == "dark" else "dark")

"""Active translation map of an i18n store."""

from types import MappingProxyType
from typing import Mapping, Optional

from core.logging import get_module_logger

logger = get_module_logger()


class TranslationMap:
    """Holds the active key -> template mapping.

    The active dict is never mutated in place: load() and add() build a new
    dict and swap the reference, so readers never observe a partial update.
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._translations: dict[str, str] = dict(initial or {})

    def load(self, new_translations: Mapping[str, str]) -> None:
        """Replace the active translations, dropping keys not in the new set."""
        self._translations = dict(new_translations)
        logger.debug("translations_loaded", key_count=len(self._translations))

    def add(self, new_translations: Mapping[str, str]) -> None:
        """Merge new translations over the active ones.

        Keys present in both take the new value; the others are kept.
        """
        self.load({**self._translations, **new_translations})

    def has(self, key: str) -> bool:
        return key in self._translations

    def get(self, key: str) -> Optional[str]:
        return self._translations.get(key)

    @property
    def snapshot(self) -> Mapping[str, str]:
        """Read-only view of the active translations."""
        return MappingProxyType(self._translations)

    def __contains__(self, key: object) -> bool:
        return key in self._translations

    def __len__(self) -> int:
        return len(self._translations)

    def __repr__(self) -> str:
        return f"TranslationMap(keys={len(self._translations)})"

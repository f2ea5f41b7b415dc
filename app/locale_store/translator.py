"""Translation service for resolving keys into rendered text.

Applies pluralization, looks the key up in a translation map, interpolates
the template and falls back through the missing-key strategies.
"""

from numbers import Number
from typing import Optional, Union

from core.logging import get_module_logger
from locale_store.models import Interpolations, TranslatorConfig
from locale_store.translations import TranslationMap

logger = get_module_logger()


def _split_arguments(
    interpolations: Union[Interpolations, int, float, None],
    count: Optional[Union[int, float]],
):
    """Support translate(key, count) besides translate(key, values, count)."""
    if isinstance(interpolations, Number) and not isinstance(interpolations, bool):
        return {}, interpolations
    return interpolations or {}, count


class Translator:
    """Resolves translation keys against a locale and a translation map.

    Attributes:
        config: TranslatorConfig with the strategies in use.
    """

    def __init__(self, config: Optional[TranslatorConfig] = None):
        """Initialize Translator.

        Args:
            config: Strategies to use; defaults to TranslatorConfig().
        """
        self.config = config or TranslatorConfig()

    def translate(
        self,
        locale: str,
        translations: TranslationMap,
        key: str,
        interpolations: Union[Interpolations, int, float, None] = None,
        count: Optional[Union[int, float]] = None,
    ) -> str:
        """Translate key for locale.

        When count is given, the key is rewritten with key_with_plural using
        the category returned by plural_for. A missing key never raises: the
        missing_key hook is called (if any) and the result of
        translation_for_missing_key is returned.

        Args:
            locale: Locale the text is rendered for.
            translations: Translation map to read from.
            key: Translation key.
            interpolations: Values for {identifier} placeholders, or the
                plural count.
            count: Number selecting the plural variant of the key.

        Returns:
            Rendered text or the missing-key fallback.
        """
        config = self.config
        values, count = _split_arguments(interpolations, count)

        if count is not None:
            plural_type = config.plural_for(locale, count)
            key = config.key_with_plural(locale, key, plural_type)

        if not translations.has(key):
            snapshot = translations.snapshot
            logger.debug("translation_key_missing", key=key, locale=locale)
            if config.missing_key is not None:
                config.missing_key(locale, key, snapshot)
            return config.translation_for_missing_key(locale, key, snapshot)

        return config.interpolate_values(translations.get(key), values)

"""Locale store - locale negotiation, reactive locale and translation engine.

Resolves a user's preferred language into an active locale, loads the
matching translations and renders templated text with interpolation and
pluralization.

Main components:
- negotiator: best_locale, parse_accept_language, locale_list_from_env
- translations: TranslationMap with atomic load/add
- locale: ObservableValue and LocaleCell with a gated async update path
- translator: Translator resolving keys into rendered text
- loader: LocaleFetcher and AssetLocaleFetcher
- store: I18nStore orchestrating all of the above
"""

from locale_store.factory import create_store_from_settings, options_from_settings
from locale_store.loader import AssetLocaleFetcher, LocaleFetcher, validate_payload
from locale_store.locale import LocaleCell, ObservableValue
from locale_store.models import (
    I18nOptions,
    PluralType,
    TranslateFn,
    TranslatorConfig,
)
from locale_store.negotiator import (
    best_locale,
    locale_list_from_env,
    parse_accept_language,
)
from locale_store.store import I18nStore, create_i18n_store, fill_options
from locale_store.translations import TranslationMap
from locale_store.translator import Translator

__all__ = [
    "AssetLocaleFetcher",
    "I18nOptions",
    "I18nStore",
    "LocaleCell",
    "LocaleFetcher",
    "ObservableValue",
    "PluralType",
    "TranslateFn",
    "TranslationMap",
    "Translator",
    "TranslatorConfig",
    "best_locale",
    "create_i18n_store",
    "create_store_from_settings",
    "fill_options",
    "locale_list_from_env",
    "options_from_settings",
    "parse_accept_language",
    "validate_payload",
]

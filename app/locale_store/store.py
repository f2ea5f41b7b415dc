"""I18n store wiring negotiation, locale cell, translation map and translator.

Usage:
    from locale_store import I18nOptions, create_i18n_store

    store = await create_i18n_store(
        I18nOptions(available_locales=["en", "es"], locale_list=["es-ES"])
    )
    store.translate("greeting", {"name": "Ana"})

    @store.on_locale_will_update
    def announce(translate, has_key):
        print(translate("locale.changed"))

    await store.locale.set("en")
"""

import asyncio
import inspect
from dataclasses import replace
from functools import partial
from typing import Awaitable, List, Mapping, Optional, Union

from core.config import FALLBACK_LOCALE, I18nSettings, settings
from core.logging import get_module_logger
from locale_store.loader import AssetLocaleFetcher
from locale_store.locale import LocaleCell
from locale_store.models import (
    DEFAULT_AVAILABLE_LOCALES,
    I18nOptions,
    Interpolations,
    LocaleWillUpdateFn,
)
from locale_store.negotiator import best_locale, locale_list_from_env
from locale_store.translations import TranslationMap
from locale_store.translator import Translator

logger = get_module_logger()


def default_fetch_locale(
    i18n: Optional[I18nSettings] = None,
) -> AssetLocaleFetcher:
    """Asset fetcher configured from i18n settings (default: settings.i18n)."""
    i18n = i18n or settings.i18n
    return AssetLocaleFetcher(
        base_path=i18n.ASSETS_PATH,
        locales_dir=i18n.LOCALES_DIR,
        payload_format=i18n.PAYLOAD_FORMAT,
        timeout=i18n.FETCH_TIMEOUT,
        use_cache=i18n.CACHE_TRANSLATIONS,
    )


def fill_options(options: I18nOptions) -> I18nOptions:
    """Derive every option left unset.

    default_locale falls back to the first available locale, then to
    FALLBACK_LOCALE. An explicit locale always wins over negotiation.

    Args:
        options: Options as given by the caller.

    Returns:
        A new I18nOptions with no field left as None.
    """
    available_locales = list(
        options.available_locales
        if options.available_locales is not None
        else DEFAULT_AVAILABLE_LOCALES
    )
    default_locale = options.default_locale or (
        available_locales[0] if available_locales else FALLBACK_LOCALE
    )
    locale_list = list(
        options.locale_list
        if options.locale_list is not None
        else locale_list_from_env()
    )

    if options.locale:
        locale = options.locale
    else:
        locale = best_locale(locale_list, available_locales, default_locale)
        logger.info(
            "locale_negotiated",
            locale=locale,
            locale_list=locale_list,
            available_locales=available_locales,
        )

    return replace(
        options,
        available_locales=available_locales,
        default_locale=default_locale,
        locale=locale,
        locale_list=locale_list,
        translations=dict(options.translations or {}),
        fetch_locale=options.fetch_locale or default_fetch_locale(),
    )


class I18nStore:
    """Active locale, its translations and the functions rendering them.

    A locale change fetches the new translations, swaps the translation map,
    runs the "locale will update" handlers and only then commits the locale.
    Until that happens locale.get() keeps reporting the previous locale.

    Attributes:
        options: Filled construction options.
        locale: LocaleCell holding the active locale.
    """

    def __init__(self, options: Optional[I18nOptions] = None):
        given = options or I18nOptions()
        self.options = fill_options(given)

        self._translations = TranslationMap(self.options.translations)
        self._translator = Translator(self.options.translator)
        self._will_update_handlers: List[LocaleWillUpdateFn] = []
        self._loaded = bool(given.translations)
        self._ready: Optional[asyncio.Future] = None

        self.locale = LocaleCell(self.options.locale, self._before_locale_update)
        self.log = logger.bind(store_id=id(self))

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            self.log.debug("initial_fetch_deferred", locale=self.locale.get())
        else:
            self.wait_until_ready()

    def translate(
        self,
        key: str,
        interpolations: Union[Interpolations, int, float, None] = None,
        count: Optional[Union[int, float]] = None,
    ) -> str:
        """Translate key against the current locale and translations.

        Args:
            key: Translation key.
            interpolations: Values for {identifier} placeholders, or the
                plural count.
            count: Number selecting the plural variant of the key.

        Returns:
            Rendered text, or the missing-key fallback.
        """
        return self._translator.translate(
            self.locale.get(), self._translations, key, interpolations, count
        )

    def load_translations(self, translations: Mapping[str, str]) -> None:
        """Load a new set of translations, removing the previous set."""
        self._translations.load(translations)

    def add_translations(self, translations: Mapping[str, str]) -> None:
        """Add translations, keeping the previous set (shared keys are overridden)."""
        self._translations.add(translations)

    def has_key(self, key: str) -> bool:
        """Check if a key is present in the loaded translations."""
        return self._translations.has(key)

    def on_locale_will_update(self, handler: LocaleWillUpdateFn) -> LocaleWillUpdateFn:
        """Register a handler run after new translations load, before the commit.

        The handler receives a translate function bound to the new locale
        and a has_key function; both read the new translations. It may be
        a coroutine function. Can be used as a decorator.
        """
        self._will_update_handlers.append(handler)
        return handler

    def remove_locale_will_update(self, handler: LocaleWillUpdateFn) -> None:
        if handler in self._will_update_handlers:
            self._will_update_handlers.remove(handler)

    def wait_until_ready(self) -> Awaitable[None]:
        """Awaitable resolved once the first set of translations is loaded.

        The initial fetch starts when the store is built inside a running
        event loop, otherwise on the first call. Every call returns the same
        awaitable. A locale change committed first satisfies readiness and
        nothing is fetched again.
        """
        if self._ready is None:
            self._ready = asyncio.ensure_future(self._load_initial_translations())
        return self._ready

    async def _load_initial_translations(self) -> None:
        async with self.locale.lock:
            if self._loaded:
                self.log.info("initial_translations_present", locale=self.locale.get())
                return
            await self._before_locale_update(self.locale.get())
        self.log.info("store_ready", locale=self.locale.get())

    async def _before_locale_update(self, new_locale: str) -> None:
        log = self.log.bind(locale=new_locale, previous=self.locale.get())
        try:
            payload = await self.options.fetch_locale(new_locale)
        except Exception as e:
            log.error("locale_fetch_failed", error=str(e))
            raise

        self.load_translations(payload)
        self._loaded = True
        log.info("locale_translations_loaded", key_count=len(self._translations))

        translate = partial(self._translator.translate, new_locale, self._translations)
        for handler in list(self._will_update_handlers):
            result = handler(translate, self.has_key)
            if inspect.isawaitable(result):
                await result


async def create_i18n_store(options: Optional[I18nOptions] = None) -> I18nStore:
    """Create an I18nStore and wait until its first translations are loaded."""
    store = I18nStore(options)
    await store.wait_until_ready()
    return store

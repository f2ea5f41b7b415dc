"""Factory functions for creating i18n stores from settings.

Maps the I18N_* environment settings onto I18nOptions so applications can
build a configured store without wiring every option by hand.
"""

from typing import Any, Optional

import structlog
from core.config import Settings, settings as default_settings
from locale_store.models import I18nOptions
from locale_store.store import I18nStore, default_fetch_locale

logger = structlog.get_logger()


def options_from_settings(
    settings: Optional[Settings] = None,
    **overrides: Any,
) -> I18nOptions:
    """Build I18nOptions from settings.

    Args:
        settings: Settings to read (default: the module-level settings).
        **overrides: I18nOptions fields taking precedence over settings.

    Returns:
        I18nOptions ready to be passed to I18nStore.

    Usage:
        # Defaults from the environment
        options = options_from_settings()

        # Environment plus a preference list from a request
        options = options_from_settings(
            locale_list=parse_accept_language(request.headers["Accept-Language"])
        )
    """
    i18n = (settings or default_settings).i18n

    values: dict[str, Any] = {
        "available_locales": list(i18n.AVAILABLE_LOCALES),
        "default_locale": i18n.DEFAULT_LOCALE,
        "locale": i18n.LOCALE,
        "fetch_locale": default_fetch_locale(i18n),
    }
    values.update(overrides)

    logger.info(
        "options_from_settings",
        available_locales=values["available_locales"],
        assets_path=i18n.ASSETS_PATH,
        overrides=sorted(overrides),
    )
    return I18nOptions(**values)


def create_store_from_settings(
    settings: Optional[Settings] = None,
    **overrides: Any,
) -> I18nStore:
    """Create an I18nStore configured from settings.

    The store is not ready yet; await store.wait_until_ready() before use.
    """
    return I18nStore(options_from_settings(settings, **overrides))

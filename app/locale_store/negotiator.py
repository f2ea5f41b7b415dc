"""Locale negotiation.

Selects the best supported locale from a ranked preference list, and builds
preference lists from an Accept-Language header or the process environment.
"""

import os
from typing import Mapping, Optional, Sequence

from core.config import FALLBACK_LOCALE
from core.logging import get_module_logger

logger = get_module_logger()

# Checked in order, LANGUAGE may hold a colon separated list
LOCALE_ENV_VARS = ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG")
NEUTRAL_ENV_LOCALES = {"c", "posix"}


def best_locale(
    locale_list: Sequence[str],
    available_locales: Sequence[str],
    default_locale: str,
) -> str:
    """Find the best available locale for a preference list.

    Preference order dominates specificity: an earlier preference matching
    only through its region-neutral form wins over a later exact match.

    Args:
        locale_list: User preferences, most preferred first.
        available_locales: Locales the application can serve.
        default_locale: Returned when no preference matches.

    Returns:
        The matched locale, its two letter prefix, or default_locale.
    """
    for locale in locale_list:
        if locale in available_locales:
            return locale

        if len(locale) == 2:
            continue

        region_neutral = locale[:2]
        if region_neutral in available_locales:
            return region_neutral

    return default_locale


def parse_accept_language(accept_language: Optional[str]) -> list[str]:
    """Turn an Accept-Language header into a preference list.

    Parses "es-ES,es;q=0.9,en;q=0.8" -> ["es-ES", "es", "en"]. Entries are
    ordered by quality; equal qualities keep header order. Wildcards and
    entries with q=0 are dropped, an unparseable quality counts as 1.0.

    Args:
        accept_language: Header value, may be None or empty.

    Returns:
        Locales ordered from most to least preferred.
    """
    if not accept_language:
        return []

    preferences = []
    for part in accept_language.split(","):
        lang_range, _, params = part.partition(";")
        lang_range = lang_range.strip()
        if not lang_range or lang_range == "*":
            continue

        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 1.0

        if quality <= 0:
            continue
        preferences.append((lang_range, quality))

    # sorted() is stable, ties keep header order
    return [lang for lang, _ in sorted(preferences, key=lambda x: x[1], reverse=True)]


def _env_value_to_locale(value: str) -> Optional[str]:
    """Convert "es_ES.UTF-8@euro" style values into "es-ES"."""
    value = value.split(".")[0].split("@")[0].strip()
    if not value or value.lower() in NEUTRAL_ENV_LOCALES:
        return None
    return value.replace("_", "-")


def locale_list_from_env(environ: Optional[Mapping[str, str]] = None) -> list[str]:
    """Build a preference list from the POSIX locale environment variables.

    Args:
        environ: Mapping to read instead of os.environ.

    Returns:
        De-duplicated preference list, or [FALLBACK_LOCALE] when the
        environment holds nothing usable.
    """
    environ = os.environ if environ is None else environ

    locales: list[str] = []
    for var in LOCALE_ENV_VARS:
        raw = environ.get(var)
        if not raw:
            continue
        for value in raw.split(":"):
            locale = _env_value_to_locale(value)
            if locale and locale not in locales:
                locales.append(locale)

    if not locales:
        logger.debug("no_locale_in_environment", fallback=FALLBACK_LOCALE)
        return [FALLBACK_LOCALE]

    return locales

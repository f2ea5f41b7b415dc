"""Shared fixtures for locale store tests."""

import pytest

from locale_store.negotiator import LOCALE_ENV_VARS


@pytest.fixture(autouse=True)
def clean_locale_environment(monkeypatch):
    """Remove locale and I18N_* variables so tests do not depend on the host."""
    for var in LOCALE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    for var in (
        "I18N_AVAILABLE_LOCALES",
        "I18N_DEFAULT_LOCALE",
        "I18N_LOCALE",
        "I18N_ASSETS_PATH",
        "I18N_LOCALES_DIR",
        "I18N_PAYLOAD_FORMAT",
        "I18N_FETCH_TIMEOUT",
        "I18N_CACHE_TRANSLATIONS",
    ):
        monkeypatch.delenv(var, raising=False)

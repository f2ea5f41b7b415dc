"""Feature-level fixtures for locale store tests.

Provides translation payload files and fetch strategies for store scenarios.
"""

import json

import pytest
import yaml

from tests.factories.i18n import make_fetch_locale, make_translations


@pytest.fixture
def translations():
    """Sample flat translation payload."""
    return make_translations()


@pytest.fixture
def temp_assets_dir(tmp_path):
    """Create a temporary asset directory with locale payloads.

    Returns a directory structure like:
    - locales/en.json
    - locales/es.json
    - locales/es.yml
    - locales/broken.json
    - locales/nested.json
    """
    locales_dir = tmp_path / "locales"
    locales_dir.mkdir()

    with open(locales_dir / "en.json", "w", encoding="utf-8") as f:
        json.dump({"greeting": "Hello, {name}", "farewell": "Bye"}, f)

    with open(locales_dir / "es.json", "w", encoding="utf-8") as f:
        json.dump({"greeting": "Hola, {name}", "farewell": "Adiós"}, f)

    with open(locales_dir / "es.yml", "w", encoding="utf-8") as f:
        yaml.dump({"greeting": "Hola, {name}"}, f, allow_unicode=True)

    (locales_dir / "broken.json").write_text("{not json", encoding="utf-8")

    with open(locales_dir / "nested.json", "w", encoding="utf-8") as f:
        json.dump({"greeting": {"formal": "Good day"}}, f)

    return tmp_path


@pytest.fixture
def fetch_locale():
    """Fetch strategy answering {"locale": <locale>} for any locale."""
    return make_fetch_locale()

"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    make_fetch_locale,
    make_options,
    make_translations,
    simple_plural_for,
)

__all__ = [
    "make_fetch_locale",
    "make_options",
    "make_translations",
    "simple_plural_for",
]

"""Locale store models.

Defines plural types, the translator strategy configuration and the
construction options of the i18n store.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Union,
)

from babel import Locale as BabelLocale
from babel.core import UnknownLocaleError

from core.config import FALLBACK_LOCALE
from core.logging import get_module_logger

logger = get_module_logger()

TranslationDict = Dict[str, str]
Interpolations = Mapping[str, Any]


class PluralType(str, Enum):
    """CLDR plural categories.

    Strategies may also return any other string for custom plural schemes.
    """

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


PluralCategory = Union[PluralType, str]

InterpolateValuesFn = Callable[[str, Interpolations], str]
KeyWithPluralFn = Callable[[str, str, PluralCategory], str]
PluralForFn = Callable[[str, Union[int, float]], PluralCategory]
MissingKeyFn = Callable[[str, str, Mapping[str, str]], None]
TranslationForMissingKeyFn = Callable[[str, str, Mapping[str, str]], str]
FetchLocaleFn = Callable[[str], Awaitable[Mapping[str, str]]]


class TranslateFn(Protocol):
    """Signature of the bound translate functions handed to callers."""

    def __call__(
        self,
        key: str,
        interpolations: Union[Interpolations, int, float, None] = None,
        count: Optional[Union[int, float]] = None,
    ) -> str: ...


HasKeyFn = Callable[[str], bool]
LocaleWillUpdateFn = Callable[[TranslateFn, HasKeyFn], Optional[Awaitable[None]]]

_PLACEHOLDER = re.compile(r"(\\)?\{([^}\s]+?)\}")


def interpolate_values(template: str, interpolations: Interpolations) -> str:
    """Replace {identifier} placeholders with values from interpolations.

    A placeholder preceded by a backslash is escaped: it is emitted without
    the backslash and left unsubstituted. Braces holding whitespace are never
    placeholders. Identifiers without a value are left as they are.
    """
    parts = []
    position = 0
    for match in _PLACEHOLDER.finditer(template):
        parts.append(template[position : match.start()])
        position = match.end()

        escaped, identifier = match.group(1), match.group(2)
        if escaped or identifier not in interpolations:
            parts.append("{" + identifier + "}")
        else:
            # Substituted values are never unescaped
            parts.append(str(interpolations[identifier]))
    parts.append(template[position:])

    # One remaining escaped brace in the template, e.g. "\{not a placeholder}"
    for index in range(0, len(parts), 2):
        if "\\{" in parts[index]:
            parts[index] = parts[index].replace("\\{", "{", 1)
            break

    return "".join(parts)


def key_with_plural(locale: str, key: str, plural_type: PluralCategory) -> str:
    return f"{key}.{plural_type}"


@lru_cache(maxsize=64)
def _plural_rule(locale: str):
    """Babel plural rule for locale, its language, or FALLBACK_LOCALE.

    Locales are opaque tags, so tags Babel has no data for fall back
    instead of raising.
    """
    tag = locale.replace("_", "-")
    for candidate in dict.fromkeys((tag, tag.split("-")[0])):
        try:
            return BabelLocale.parse(candidate, sep="-").plural_form
        except (UnknownLocaleError, ValueError):
            continue

    logger.debug("plural_rule_fallback", locale=locale, fallback=FALLBACK_LOCALE)
    return BabelLocale.parse(FALLBACK_LOCALE).plural_form


def plural_for(locale: str, number: Union[int, float]) -> PluralCategory:
    """Resolve the CLDR plural category of number in locale using Babel."""
    return _plural_rule(locale)(number)


def translation_for_missing_key(
    locale: str, key: str, translations: Mapping[str, str]
) -> str:
    return f"***{key}***"


@dataclass
class TranslatorConfig:
    """Strategies used by the translator.

    Each field can be overridden on its own; unset fields keep the defaults.

    Attributes:
        interpolate_values: Renders a template with interpolation values.
        key_with_plural: Builds the plural-specific key (default "key.type").
        plural_for: Returns the plural category of a number for a locale.
        translation_for_missing_key: Fallback text for a missing key.
        missing_key: Optional side-effect hook called on a missing key.
    """

    interpolate_values: InterpolateValuesFn = interpolate_values
    key_with_plural: KeyWithPluralFn = key_with_plural
    plural_for: PluralForFn = plural_for
    translation_for_missing_key: TranslationForMissingKeyFn = (
        translation_for_missing_key
    )
    missing_key: Optional[MissingKeyFn] = None


@dataclass
class I18nOptions:
    """Construction options of the i18n store.

    Fields left as None are derived when the store is built.

    Attributes:
        available_locales: Locales the application can serve.
        default_locale: Locale used when negotiation finds no match.
        locale: Active locale; bypasses negotiation when given.
        locale_list: User preference list, most preferred first.
        translations: Initial translations; non-empty skips the first fetch.
        fetch_locale: Async callable returning the payload of a locale.
        translator: Translator strategies.
    """

    available_locales: Optional[Sequence[str]] = None
    default_locale: Optional[str] = None
    locale: Optional[str] = None
    locale_list: Optional[Sequence[str]] = None
    translations: Optional[Mapping[str, str]] = None
    fetch_locale: Optional[FetchLocaleFn] = None
    translator: TranslatorConfig = field(default_factory=TranslatorConfig)


DEFAULT_AVAILABLE_LOCALES = (FALLBACK_LOCALE,)

"""Locale Store configuration settings."""

from typing import Any, Optional
import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.stdlib.get_logger().bind(component="config")

FALLBACK_LOCALE = "en"


class I18nSettings(BaseSettings):
    """Locale negotiation and translation loading settings.

    Environment Variables:
        I18N_AVAILABLE_LOCALES: JSON list or comma separated list of locales.
        I18N_DEFAULT_LOCALE: Locale used when negotiation finds no match.
        I18N_LOCALE: Forces the active locale, bypassing negotiation.
        I18N_ASSETS_PATH: Base directory or URL holding the locale payloads.
        I18N_LOCALES_DIR: Sub-directory of the assets path with payloads.
        I18N_PAYLOAD_FORMAT: "json" or "yaml".
        I18N_FETCH_TIMEOUT: Timeout in seconds for HTTP fetches.
        I18N_CACHE_TRANSLATIONS: Keep fetched payloads in memory.
    """

    AVAILABLE_LOCALES: list[str] | str = Field(
        default_factory=lambda: [FALLBACK_LOCALE], alias="I18N_AVAILABLE_LOCALES"
    )
    DEFAULT_LOCALE: Optional[str] = Field(default=None, alias="I18N_DEFAULT_LOCALE")
    LOCALE: Optional[str] = Field(default=None, alias="I18N_LOCALE")
    ASSETS_PATH: str = Field(default="assets", alias="I18N_ASSETS_PATH")
    LOCALES_DIR: str = Field(default="locales", alias="I18N_LOCALES_DIR")
    PAYLOAD_FORMAT: str = Field(default="json", alias="I18N_PAYLOAD_FORMAT")
    FETCH_TIMEOUT: int = Field(default=10, alias="I18N_FETCH_TIMEOUT")
    CACHE_TRANSLATIONS: bool = Field(default=False, alias="I18N_CACHE_TRANSLATIONS")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("AVAILABLE_LOCALES", mode="before")
    @classmethod
    def _parse_available_locales(cls, v: Optional[Any]) -> Any:
        """Accept a JSON list or a comma separated string."""
        if v is None or v == "":
            return [FALLBACK_LOCALE]
        if isinstance(v, str):
            stripped = v.strip()
            if stripped.startswith("["):
                try:
                    return json.loads(stripped)
                except json.JSONDecodeError as e:
                    logger.warning("invalid_available_locales", value=v, error=str(e))
                    raise ValueError(f"Invalid I18N_AVAILABLE_LOCALES: {v}") from e
            return [part.strip() for part in stripped.split(",") if part.strip()]
        return v

    @field_validator("PAYLOAD_FORMAT")
    @classmethod
    def _check_payload_format(cls, v: str) -> str:
        normalized = v.lower()
        if normalized not in ("json", "yaml"):
            raise ValueError(f"Unsupported payload format: {v}")
        return normalized


class Settings(BaseSettings):
    """Locale Store configuration settings.

    Environment Variables:
        PREFIX: Environment prefix; empty means production.
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR).
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    i18n: I18nSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        settings_map = {
            "i18n": I18nSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the settings instance
settings = Settings()

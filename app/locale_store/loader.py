"""Locale payload fetching interface and implementations.

Defines the contract for fetching the translations of a locale and provides
an asset-based fetcher reading "<base>/locales/<locale>.json" from the
filesystem or over HTTP.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import requests
import structlog
import yaml

logger = structlog.get_logger()

PAYLOAD_EXTENSIONS = {"json": "json", "yaml": "yml"}


def validate_payload(data: Any, source: str) -> Dict[str, str]:
    """Check that a decoded payload is a flat object of strings.

    Args:
        data: Decoded payload.
        source: Where the payload came from (for errors and logging).

    Returns:
        The payload as a dict.

    Raises:
        ValueError: If the payload is not a flat string -> string object.
    """
    if data is None:
        return {}

    if not isinstance(data, dict):
        logger.error(
            "invalid_payload_format",
            source=source,
            expected="object",
            got=type(data).__name__,
        )
        raise ValueError(f"Locale payload {source} must be an object")

    for key, value in data.items():
        if not isinstance(key, str) or not isinstance(value, str):
            logger.error("invalid_payload_entry", source=source, key=str(key))
            raise ValueError(
                f"Locale payload {source} must map strings to strings, "
                f"invalid entry: {key!r}"
            )

    return dict(data)


class LocaleFetcher(ABC):
    """Abstract base for locale payload fetchers.

    Instances are awaitable callables, so they can be passed as the
    fetch_locale option of the i18n store.
    """

    @abstractmethod
    async def fetch(self, locale: str) -> Dict[str, str]:
        """Fetch the translations of a locale.

        Args:
            locale: Locale to fetch translations for.

        Returns:
            Flat mapping of translation key to template.

        Raises:
            FileNotFoundError: If the payload does not exist.
            ValueError: If the payload format is invalid.
        """
        pass

    async def __call__(self, locale: str) -> Dict[str, str]:
        return await self.fetch(locale)


class AssetLocaleFetcher(LocaleFetcher):
    """Fetches locale payloads from a conventional asset location.

    The payload of a locale lives at <base_path>/<locales_dir>/<locale>.json
    (or .yml for YAML payloads). A base path starting with http:// or
    https:// is fetched with requests, anything else is read from disk.
    Blocking I/O runs in a worker thread.

    Attributes:
        base_path: Asset root, a directory or a URL.
        locales_dir: Sub-directory holding the payloads.
        payload_format: "json" or "yaml".
        timeout: HTTP timeout in seconds.
        use_cache: Whether fetched payloads are kept in memory.
        cache: Cached payloads by locale.
    """

    def __init__(
        self,
        base_path: str | Path = "assets",
        locales_dir: str = "locales",
        payload_format: str = "json",
        timeout: int = 10,
        use_cache: bool = False,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the asset fetcher.

        Args:
            base_path: Asset root directory or URL.
            locales_dir: Sub-directory holding the payloads.
            payload_format: "json" or "yaml".
            timeout: HTTP timeout in seconds.
            use_cache: Whether to cache fetched payloads in memory.
            session: Requests session for HTTP fetches.

        Raises:
            ValueError: If payload_format is not supported.
        """
        if payload_format not in PAYLOAD_EXTENSIONS:
            raise ValueError(f"Unsupported payload format: {payload_format}")

        self.base_path = str(base_path)
        self.locales_dir = locales_dir
        self.payload_format = payload_format
        self.timeout = timeout
        self.use_cache = use_cache
        self.cache: Dict[str, Dict[str, str]] = {}
        self._session = session

        logger.info(
            "initialized_asset_fetcher",
            base_path=self.base_path,
            payload_format=payload_format,
            use_cache=use_cache,
        )

    @property
    def is_remote(self) -> bool:
        return self.base_path.startswith(("http://", "https://"))

    def path_for(self, locale: str) -> str:
        """Location of the payload of a locale."""
        filename = f"{locale}.{PAYLOAD_EXTENSIONS[self.payload_format]}"
        if self.is_remote:
            return "/".join(
                [self.base_path.rstrip("/"), self.locales_dir.strip("/"), filename]
            )
        return str(Path(self.base_path) / self.locales_dir / filename)

    async def fetch(self, locale: str) -> Dict[str, str]:
        """Fetch and validate the payload of a locale.

        Args:
            locale: Locale to fetch.

        Returns:
            Flat mapping of translation key to template.

        Raises:
            FileNotFoundError: If the payload file does not exist.
            requests.HTTPError: If the HTTP fetch fails.
            ValueError: If the payload cannot be decoded or is not flat.
        """
        if self.use_cache and locale in self.cache:
            logger.info("loaded_from_cache", locale=locale)
            return dict(self.cache[locale])

        source = self.path_for(locale)
        reader = self._read_remote if self.is_remote else self._read_file
        raw = await asyncio.to_thread(reader, source)
        payload = validate_payload(self._decode(raw, source), source)

        logger.info(
            "fetched_locale_payload",
            locale=locale,
            source=source,
            key_count=len(payload),
        )

        if self.use_cache:
            self.cache[locale] = payload

        return dict(payload)

    def _read_file(self, source: str) -> str:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"No locale payload found at {source}")
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def _read_remote(self, source: str) -> str:
        get = self._session.get if self._session is not None else requests.get
        response = get(
            source,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.text

    def _decode(self, raw: str, source: str) -> Any:
        if self.payload_format == "yaml":
            try:
                return yaml.safe_load(raw)
            except yaml.YAMLError as e:
                logger.error("yaml_parse_error", source=source, error=str(e))
                raise ValueError(f"Failed to parse {source}: {e}") from e

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("json_parse_error", source=source, error=str(e))
            raise ValueError(f"Failed to parse {source}: {e}") from e

    def clear_cache(self) -> None:
        """Clear all cached payloads."""
        self.cache.clear()
        logger.info("cleared_locale_payload_cache")

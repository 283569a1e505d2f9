"""Configuration loading and service wiring.

Settings come from a JSON file (default ``config/config.json``). Every key is
optional; missing keys fall back to the defaults on ``Settings``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .cache.io import read_json
from .fetch import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS, PokeApiClient
from .service import CatalogService
from .store import CreatureStore

DEFAULT_CONFIG_PATH = "config/config.json"


@dataclass(frozen=True)
class Settings:
    pokeapi_base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = 5
    retry_backoff_seconds: float = 1.0
    request_delay_seconds: float = 0.1
    ttl_days: Optional[float] = None
    cache_dir: str = "data/cache"


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load JSON configuration from ``config_path``.

    Raises ``RuntimeError`` if the file is missing or invalid.
    """
    data = read_json(config_path)
    if data is None:
        raise RuntimeError(f"Missing or invalid config: {config_path}")
    return data


def settings_from_dict(cfg: Dict[str, Any]) -> Settings:
    defaults = Settings()
    ttl = (cfg.get("ttl_days") or {}).get("pokemon")
    return Settings(
        pokeapi_base_url=str(cfg.get("pokeapi_base_url", defaults.pokeapi_base_url)),
        timeout_seconds=float(cfg.get("timeout_seconds", defaults.timeout_seconds)),
        max_retries=int(cfg.get("max_retries", defaults.max_retries)),
        retry_backoff_seconds=float(
            cfg.get("retry_backoff_seconds", defaults.retry_backoff_seconds)
        ),
        request_delay_seconds=float(
            cfg.get("request_delay_seconds", defaults.request_delay_seconds)
        ),
        ttl_days=float(ttl) if ttl is not None else None,
        cache_dir=str(cfg.get("cache_dir", defaults.cache_dir)),
    )


def load_settings(config_path: str = DEFAULT_CONFIG_PATH) -> Settings:
    return settings_from_dict(load_config(config_path))


def build_service(settings: Optional[Settings] = None) -> CatalogService:
    """Wire a client, a store and a service from ``settings``."""
    settings = settings or Settings()
    client = PokeApiClient(settings.pokeapi_base_url, timeout=settings.timeout_seconds)
    store = CreatureStore(settings.cache_dir)
    return CatalogService(
        client,
        store,
        max_retries=settings.max_retries,
        retry_backoff_seconds=settings.retry_backoff_seconds,
        request_delay_seconds=settings.request_delay_seconds,
        ttl_days=settings.ttl_days,
    )

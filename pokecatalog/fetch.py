"""HTTP client for the PokéAPI catalog.

Wraps a ``requests.Session``, maps transport failures onto the catalog error
taxonomy, and returns decoded JSON objects. It never retries; retry policy
belongs to ``CatalogService``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
import pokebase.common as pokebase_common

from .errors import DecodeError, NotFound, TransportError
from .transform import map_resource_names

logger = logging.getLogger("pokecatalog.fetch")

DEFAULT_BASE_URL = "https://pokeapi.co/api/v2"
DEFAULT_TIMEOUT_SECONDS = 30.0


def _configure_pokebase_base_url(base_url: str) -> None:
    """Point pokebase's URL builder at the configured PokéAPI base URL."""
    pokebase_common.BASE_URL = base_url.rstrip("/")


class PokeApiClient:
    """Read-only access to the PokéAPI endpoints the catalog consumes.

    ``timeout`` applies to every request and is fixed at construction.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def __enter__(self) -> "PokeApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _endpoint_url(self, endpoint: str, key: Optional[str] = None) -> str:
        _configure_pokebase_base_url(self.base_url)
        # pokebase only accepts integer ids, so slugs are appended here.
        url = pokebase_common.api_url_build(endpoint)
        if key is None:
            return url
        return f"{url}{quote(key, safe='')}"

    def _get_json(
        self,
        url: str,
        *,
        resource: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        logger.debug("GET %s params=%s", url, params)
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise TransportError(
                f"Request to {url} failed: {exc}", resource=resource
            ) from exc

        if resp.status_code == 404:
            raise NotFound(f"{resource!r} not found upstream", resource=resource)
        try:
            resp.raise_for_status()
        except requests.exceptions.HTTPError as exc:
            raise TransportError(
                f"{url} returned HTTP {resp.status_code}",
                resource=resource,
                status_code=resp.status_code,
            ) from exc

        try:
            payload = resp.json()
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON from {url}", resource=resource) from exc
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a JSON object from {url}", resource=resource)
        return payload

    def fetch_by_name(self, name: str) -> Dict[str, Any]:
        """GET ``/pokemon/{name}``. The caller lower-cases ``name``."""
        return self._get_json(self._endpoint_url("pokemon", name), resource=name)

    def fetch_species(self, name: str) -> Dict[str, Any]:
        """GET ``/pokemon-species/{name}``."""
        return self._get_json(self._endpoint_url("pokemon-species", name), resource=name)

    def fetch_evolution_chain(self, url: str) -> Dict[str, Any]:
        """GET an evolution-chain URL taken verbatim from a species payload."""
        return self._get_json(url, resource=url)

    def fetch_ability(self, name: str) -> Dict[str, Any]:
        """GET ``/ability/{name}``."""
        return self._get_json(self._endpoint_url("ability", name), resource=name)

    def fetch_type(self, name: str) -> Dict[str, Any]:
        """GET ``/type/{name}``."""
        return self._get_json(self._endpoint_url("type", name), resource=name)

    def fetch_page(self, limit: int, offset: int) -> List[str]:
        """Return the ordered creature names of one listing page."""
        payload = self._get_json(
            self._endpoint_url("pokemon"),
            resource=f"pokemon?limit={limit}&offset={offset}",
            params={"limit": limit, "offset": offset},
        )
        return map_resource_names(payload)

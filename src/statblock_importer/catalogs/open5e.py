"""
Open5e spell catalog.

Fetches the spell list from the Open5e API (https://api.open5e.com/v1/) and
caches the merged response locally for offline use and performance.
"""

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx

from ..models import SpellEntity
from .base import CatalogBase, CatalogError, IndexEntry


logger = logging.getLogger("statblock-importer")


# API Configuration
OPEN5E_API_BASE = "https://api.open5e.com/v1"
DEFAULT_TIMEOUT = 30.0
MAX_RETRIES = 3
RETRY_BACKOFF = 2.0
PAGE_LIMIT = 100


class Open5eCatalogError(CatalogError):
    """Error fetching or parsing Open5e data."""
    pass


class Open5eSpellCatalog(CatalogBase):
    """
    Spell catalog for the Open5e API.

    Features:
    - Fetches every spell page and merges the results
    - Caches the merged list locally for offline use
    - Supports filtering by document (e.g., "wotc-srd")
    """

    def __init__(
        self,
        document_filter: str | None = None,
        cache_dir: Path | None = None,
    ):
        """
        Initialize the Open5e catalog.

        Args:
            document_filter: Filter spells by document slug (e.g., "wotc-srd").
                            If None, loads all documents
            cache_dir: Directory for caching API responses
        """
        catalog_id = f"open5e-spells-{document_filter}" if document_filter else "open5e-spells"
        super().__init__(
            catalog_id=catalog_id,
            name=f"Open5e spells ({document_filter})" if document_filter else "Open5e spells",
        )

        self.document_filter = document_filter
        self.cache_dir = cache_dir or Path("statblock_data/catalog_cache") / "open5e"
        self._raw: dict[str, dict[str, Any]] = {}

    async def _build_index(self) -> list[IndexEntry]:
        """Load the spell list from cache or API."""
        spell_list = self._read_cache()
        if spell_list is None:
            spell_list = await self._fetch_all()
            self._write_cache(spell_list)

        index: list[IndexEntry] = []
        for spell_data in spell_list:
            slug = spell_data.get("slug")
            name = spell_data.get("name")
            if not slug or not name:
                logger.warning(f"Skipping Open5e spell without slug/name: {spell_data!r:.80}")
                continue
            self._raw[slug] = spell_data
            index.append(IndexEntry(id=slug, name=name))

        logger.info(f"Loaded {self.name}: {len(index)} spells")
        return index

    async def get_entry(self, entry_id: str) -> SpellEntity | None:
        data = self._raw.get(entry_id)
        if data is None:
            return None
        return self._map_spell(data)

    # =========================================================================
    # Cache
    # =========================================================================

    @property
    def cache_path(self) -> Path:
        """Cache file of the merged spell list (``spells.json`` or ``spells_<doc>.json``)."""
        suffix = f"_{self.document_filter}" if self.document_filter else ""
        return self.cache_dir / f"spells{suffix}.json"

    def _read_cache(self) -> list[dict[str, Any]] | None:
        if not self.cache_path.exists():
            return None
        try:
            cached = json.loads(self.cache_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Corrupt cache file: {self.cache_path}, refetching")
            self.cache_path.unlink()
            return None
        if isinstance(cached, dict):
            return cached.get("results", [])
        return cached if isinstance(cached, list) else None

    def _write_cache(self, spell_list: list[dict[str, Any]]) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        cache_data = {
            "results": spell_list,
            "count": len(spell_list),
            "cached_at": datetime.now().isoformat(),
        }
        self.cache_path.write_text(json.dumps(cache_data, indent=2), encoding="utf-8")

    # =========================================================================
    # HTTP
    # =========================================================================

    async def _fetch_all(self) -> list[dict[str, Any]]:
        """Follow the ``next`` links of the spell endpoint and merge every page.

        Raises:
            Open5eCatalogError: If a page cannot be fetched
        """
        url = f"{OPEN5E_API_BASE}/spells/?limit={PAGE_LIMIT}&format=json"
        if self.document_filter:
            url += f"&document__slug={self.document_filter}"

        results: list[dict[str, Any]] = []
        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
            while url:
                page = await self._fetch_page(client, url)
                results.extend(page.get("results", []))
                url = page.get("next")
                if url:
                    logger.debug(f"Fetching next page: {url}")
        return results

    async def _fetch_page(self, client: httpx.AsyncClient, url: str) -> dict[str, Any]:
        """Fetch one page, backing off on rate limits, timeouts and server errors."""
        last_error: Exception | None = None

        for attempt in range(MAX_RETRIES):
            wait = RETRY_BACKOFF ** attempt
            try:
                response = await client.get(url)
                if response.status_code == 429:
                    logger.warning(f"Rate limited, waiting {wait}s")
                    await asyncio.sleep(wait)
                    continue
                response.raise_for_status()
                return response.json()
            except httpx.TimeoutException as e:
                logger.warning(f"Timeout fetching {url}, attempt {attempt + 1}")
                last_error = e
            except httpx.HTTPStatusError as e:
                if e.response.status_code < 500:
                    raise Open5eCatalogError(f"HTTP error: {e}") from e
                logger.warning(f"Server error {e.response.status_code}, attempt {attempt + 1}")
                last_error = e
            except httpx.RequestError as e:
                raise Open5eCatalogError(f"Failed to connect to Open5e: {e}") from e
            await asyncio.sleep(wait)

        raise Open5eCatalogError(f"Failed to fetch {url} after {MAX_RETRIES} retries: {last_error}")

    # =========================================================================
    # Data Mapping
    # =========================================================================

    @staticmethod
    def _flag(value: Any) -> bool:
        # The API returns "yes"/"no" strings as well as booleans
        if isinstance(value, str):
            return value.strip().lower() == "yes"
        return bool(value)

    def _map_spell(self, data: dict) -> SpellEntity:
        """Map Open5e spell data to SpellEntity."""
        listed = data.get("components") or ""
        components = [
            letter
            for letter, flag in (
                ("V", "requires_verbal_components"),
                ("S", "requires_somatic_components"),
                ("M", "requires_material_components"),
            )
            if data.get(flag) or letter in listed
        ]

        return SpellEntity(
            index=data["slug"],
            name=data["name"],
            level=data.get("level_int") or data.get("spell_level") or 0,
            school=(data.get("school") or "").lower(),
            casting_time=data.get("casting_time", "1 action"),
            range=data.get("range", "Self"),
            duration=data.get("duration", "Instantaneous"),
            components=components,
            material=data.get("material") or None,
            ritual=self._flag(data.get("can_be_cast_as_ritual", False)),
            concentration=self._flag(data.get("requires_concentration", False)),
            desc=data.get("desc", ""),
            higher_level=data.get("higher_level") or None,
            source=self.catalog_id,
        )


__all__ = [
    "Open5eSpellCatalog",
    "Open5eCatalogError",
]

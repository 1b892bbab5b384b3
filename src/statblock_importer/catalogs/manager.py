"""
CatalogManager - Registry of spell catalogs.

Catalogs are enumerated in registration order; the spell resolver relies on
that order for its first-match-wins lookup.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .base import CatalogBase

if TYPE_CHECKING:
    from ..config import ImporterConfig

logger = logging.getLogger("statblock-importer")


class CatalogManagerError(Exception):
    """Exception raised by CatalogManager operations."""
    pass


class CatalogManager:
    """
    Holds the available catalogs and enumerates them by identifier.

    Used from a single event loop; registration and enumeration never await
    between reading and updating the registry.
    """

    CATALOG_EXTENSIONS = (".json", ".yaml", ".yml")

    def __init__(self):
        self._catalogs: dict[str, CatalogBase] = {}
        self._order: list[str] = []

    @property
    def catalog_ids(self) -> list[str]:
        """IDs of all registered catalogs, in enumeration order."""
        return list(self._order)

    def get(self, catalog_id: str) -> CatalogBase | None:
        return self._catalogs.get(catalog_id)

    def catalogs(self, marker: str | None = None) -> list[CatalogBase]:
        """
        Enumerate catalogs in registration order.

        Args:
            marker: If provided, only catalogs whose ID contains it
                   (case-insensitive) are returned

        Returns:
            List of catalogs
        """
        ids = self._order
        if marker:
            marker_lower = marker.lower()
            ids = [cid for cid in ids if marker_lower in cid.lower()]
        return [self._catalogs[cid] for cid in ids]

    # =========================================================================
    # Catalog Management
    # =========================================================================

    async def add_catalog(self, catalog: CatalogBase, load: bool = True) -> None:
        """
        Register a catalog, optionally building its index right away.

        A catalog with an existing ID replaces the old one and moves to the
        end of the enumeration order.

        Raises:
            CatalogManagerError: If loading fails
        """
        if load:
            try:
                await catalog.load_index()
            except Exception as e:
                raise CatalogManagerError(
                    f"Failed to load catalog {catalog.catalog_id}: {e}"
                ) from e

        if catalog.catalog_id in self._catalogs:
            self._order.remove(catalog.catalog_id)
        self._catalogs[catalog.catalog_id] = catalog
        self._order.append(catalog.catalog_id)

        logger.info(f"Registered catalog: {catalog.catalog_id}")

    def remove_catalog(self, catalog_id: str) -> bool:
        """
        Remove a catalog.

        Returns:
            True if the catalog was removed, False if not found
        """
        if catalog_id not in self._catalogs:
            return False
        del self._catalogs[catalog_id]
        self._order.remove(catalog_id)

        logger.info(f"Removed catalog: {catalog_id}")
        return True

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    async def from_config(cls, config: ImporterConfig) -> "CatalogManager":
        """
        Create a CatalogManager from importer configuration.

        Every JSON/YAML file in ``config.catalog_dir`` is registered as a file
        catalog (sorted by filename), followed by the Open5e catalog when
        enabled. Indexes are built lazily on first lookup.
        """
        from .custom import FileCatalog
        from .open5e import Open5eSpellCatalog

        manager = cls()

        catalog_dir = Path(config.catalog_dir)
        if catalog_dir.is_dir():
            for path in sorted(catalog_dir.iterdir()):
                if path.suffix.lower() in cls.CATALOG_EXTENSIONS:
                    await manager.add_catalog(FileCatalog(path), load=False)
        else:
            logger.debug(f"Catalog directory {catalog_dir} not found, no file catalogs")

        if config.open5e_enabled:
            await manager.add_catalog(
                Open5eSpellCatalog(
                    document_filter=config.open5e_document,
                    cache_dir=Path(config.cache_dir) / "open5e",
                ),
                load=False,
            )

        return manager

    # =========================================================================
    # Cleanup
    # =========================================================================

    async def close(self) -> None:
        """Close all catalogs and clean up resources."""
        catalogs = list(self._catalogs.values())
        self._catalogs.clear()
        self._order.clear()
        for catalog in catalogs:
            await catalog.close()

    def __repr__(self) -> str:
        catalog_info = ", ".join(self._order) if self._order else "none"
        return f"CatalogManager(catalogs=[{catalog_info}])"


__all__ = [
    "CatalogManager",
    "CatalogManagerError",
]

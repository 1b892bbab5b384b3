"""
Spell catalogs for statblock-importer.

This module provides:
- CatalogBase, the indexed-catalog interface used by the spell resolver
- FileCatalog for local JSON/YAML spell lists
- Open5eSpellCatalog for the Open5e API
- CatalogManager for registering and enumerating catalogs
"""

from .base import CatalogBase, CatalogError, IndexEntry
from .custom import FileCatalog
from .manager import CatalogManager, CatalogManagerError
from .open5e import Open5eCatalogError, Open5eSpellCatalog

__all__ = [
    "CatalogBase",
    "CatalogError",
    "IndexEntry",
    "FileCatalog",
    "Open5eSpellCatalog",
    "Open5eCatalogError",
    "CatalogManager",
    "CatalogManagerError",
]

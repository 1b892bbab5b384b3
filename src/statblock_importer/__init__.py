"""
Statblock Importer - turns extracted creature statblocks into creature records,
owned items and catalog-resolved spells.
"""

from .catalogs import CatalogManager
from .config import ImporterConfig, load_config
from .importers import ImportContext, ImportResult, import_statblock
from .storage import JsonCreatureStore

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("statblock-importer")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable
__all__ = [
    "CatalogManager",
    "ImporterConfig",
    "load_config",
    "ImportContext",
    "ImportResult",
    "import_statblock",
    "JsonCreatureStore",
]

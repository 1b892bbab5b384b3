"""
Abstract base class for spell catalogs.

A catalog is an indexed collection of spell entities. The index maps entry
names to identifiers and is built once on first use; full entities are
retrieved by identifier.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from ..models import SpellEntity


class CatalogError(Exception):
    """Error loading or querying a catalog."""
    pass


@dataclass
class IndexEntry:
    """One entry of a catalog's name index."""
    id: str
    name: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"id": self.id, "name": self.name}


class CatalogBase(ABC):
    """
    Abstract base class for spell catalogs.

    All catalogs (local files, Open5e) implement this interface so the spell
    resolver can query them uniformly, in the order they were registered.
    """

    def __init__(self, catalog_id: str, name: str | None = None):
        """
        Initialize the catalog.

        Args:
            catalog_id: Unique identifier (e.g., "custom-homebrew-spells", "open5e-spells")
            name: Human-readable name for the catalog
        """
        self.catalog_id = catalog_id
        self.name = name or catalog_id
        self.loaded_at: datetime | None = None
        self._index: list[IndexEntry] | None = None

    @property
    def is_loaded(self) -> bool:
        """Check if the index has been built."""
        return self._index is not None

    @property
    def index(self) -> list[IndexEntry]:
        """The name index (empty until loaded)."""
        return list(self._index or [])

    # =========================================================================
    # Abstract Methods - Must be implemented by subclasses
    # =========================================================================

    @abstractmethod
    async def _build_index(self) -> list[IndexEntry]:
        """
        Read the catalog and return its name index.

        Raises:
            CatalogError: If the catalog cannot be read
        """
        pass

    @abstractmethod
    async def get_entry(self, entry_id: str) -> SpellEntity | None:
        """
        Retrieve the full entity for an index identifier.

        Args:
            entry_id: Identifier from the index

        Returns:
            SpellEntity if found, None otherwise
        """
        pass

    # =========================================================================
    # Shared behaviour
    # =========================================================================

    async def load_index(self) -> list[IndexEntry]:
        """Build the index on first call and reuse it afterwards."""
        if self._index is None:
            self._index = await self._build_index()
            self.loaded_at = datetime.now()
        return self.index

    def find(self, name: str) -> IndexEntry | None:
        """
        Find an index entry by exact, case-insensitive name.

        Args:
            name: Spell name

        Returns:
            The first matching entry, or None
        """
        wanted = name.strip().lower()
        for entry in self._index or []:
            if entry.name.lower() == wanted:
                return entry
        return None

    async def close(self) -> None:
        """
        Clean up any resources (e.g., HTTP connections).

        Override this if your catalog needs cleanup.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.catalog_id!r})"


__all__ = [
    "CatalogBase",
    "CatalogError",
    "IndexEntry",
]

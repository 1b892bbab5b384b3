"""
Storage layer for imported creatures.

Defines the store contract used by the importer and a JSON-file
implementation that keeps one document per creature.
"""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

import shortuuid

from .models import CreatureHandle, CreatureRecord, EmbeddedKind

logger = logging.getLogger("statblock-importer")


def new_uuid() -> str:
    """Generate a new random 16-character ID."""
    return shortuuid.random(length=16)


class StorageError(Exception):
    """Raised when the store cannot create or read a record."""


class CreatureStore(Protocol):
    """Persistence runtime the importer hands its records to."""

    async def create_creature(self, record: CreatureRecord) -> CreatureHandle: ...

    async def create_embedded_items(
        self,
        handle: CreatureHandle,
        kind: EmbeddedKind,
        items: dict[str, Any] | list[dict[str, Any]],
    ) -> list[dict[str, Any]]: ...


# Document key holding each kind of embedded record
EMBEDDED_COLLECTIONS: dict[EmbeddedKind, str] = {
    EmbeddedKind.OWNED_ITEM: "items",
    EmbeddedKind.ACTIVE_EFFECT: "effects",
}


class JsonCreatureStore:
    """Stores each creature as ``<data_dir>/creatures/<id>.json``."""

    def __init__(self, data_dir: str | Path = "statblock_data"):
        self.data_dir = Path(data_dir)
        self.creatures_dir = self.data_dir / "creatures"
        logger.debug(f"📂 Initializing JsonCreatureStore with data_dir: {self.data_dir.resolve()}")
        self.creatures_dir.mkdir(parents=True, exist_ok=True)

    def _creature_path(self, creature_id: str) -> Path:
        return self.creatures_dir / f"{creature_id}.json"

    async def create_creature(self, record: CreatureRecord) -> CreatureHandle:
        """Persist a new creature document and return its handle."""
        creature_id = new_uuid()
        document = record.to_payload()
        document["_id"] = creature_id
        for item in document.get("items", []):
            item.setdefault("_id", new_uuid())

        self._atomic_write(self._creature_path(creature_id), document)
        logger.info(f"🐉 Created creature '{record.name}' ({creature_id})")
        return CreatureHandle(id=creature_id, name=record.name)

    async def create_embedded_items(
        self,
        handle: CreatureHandle,
        kind: EmbeddedKind,
        items: dict[str, Any] | list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """Attach one or more embedded records to an existing creature.

        Returns:
            The stored records, each with its new ``_id``.

        Raises:
            StorageError: If the creature does not exist.
        """
        batch = [items] if isinstance(items, dict) else list(items)
        document = self.get_creature(handle.id)

        created = []
        for item in batch:
            stored = dict(item)
            stored["_id"] = new_uuid()
            created.append(stored)

        document.setdefault(EMBEDDED_COLLECTIONS[kind], []).extend(created)
        self._atomic_write(self._creature_path(handle.id), document)
        logger.debug(f"✅ Added {len(created)} {kind.value} record(s) to '{handle.name}'")
        return created

    def get_creature(self, creature_id: str) -> dict[str, Any]:
        """Load a stored creature document.

        Raises:
            StorageError: If the creature does not exist or cannot be read.
        """
        path = self._creature_path(creature_id)
        if not path.exists():
            raise StorageError(f"Creature '{creature_id}' not found")
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read creature '{creature_id}': {e}") from e

    def list_creatures(self) -> list[str]:
        """Return the IDs of all stored creatures."""
        return sorted(p.stem for p in self.creatures_dir.glob("*.json"))

    def _atomic_write(self, file_path: Path, data: dict | list) -> None:
        """Write data to file atomically (write to temp, then rename).

        Args:
            file_path: Path to the file to write
            data: Data to write (will be JSON serialized)
        """
        temp_file = file_path.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, default=str)
            temp_file.replace(file_path)
            logger.debug(f"✅ Atomic write to {file_path.name} successful")
        except Exception as e:
            if temp_file.exists():
                temp_file.unlink()
            logger.error(f"❌ Error during atomic write to {file_path.name}: {e}")
            raise

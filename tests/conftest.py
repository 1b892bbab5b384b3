"""
Pytest configuration and fixtures for statblock-importer tests.
"""

import json
import sys
from pathlib import Path
import pytest

# Add src directory to Python path to allow importing statblock_importer
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from statblock_importer.catalogs.base import CatalogBase, IndexEntry  # noqa: E402
from statblock_importer.models import CreatureHandle, SpellEntity, StatBlockPrimitives  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# Configure anyio to only use asyncio (not trio)
@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def lich_data():
    """Raw extracted fields of the sample lich statblock."""
    with open(FIXTURES_DIR / "ancient_lich.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def lich(lich_data):
    """Parsed primitives of the sample lich statblock."""
    return StatBlockPrimitives.model_validate(lich_data)


class FakeStore:
    """In-memory store recording every call; can reject named items."""

    def __init__(self, fail_on: tuple[str, ...] = ()):
        self.creatures = []
        self.embedded = []
        self.fail_on = set(fail_on)

    async def create_creature(self, record):
        self.creatures.append(record)
        return CreatureHandle(id=f"creature-{len(self.creatures)}", name=record.name)

    async def create_embedded_items(self, handle, kind, items):
        if isinstance(items, dict) and items.get("name") in self.fail_on:
            raise RuntimeError(f"store rejected {items['name']}")
        self.embedded.append((handle, kind, items))
        return items if isinstance(items, list) else [items]

    def item_names(self) -> list[str]:
        names = []
        for _, _, items in self.embedded:
            batch = items if isinstance(items, list) else [items]
            names.extend(item["name"] for item in batch)
        return names


class MemoryCatalog(CatalogBase):
    """Catalog over an in-memory list of spells, counting index builds."""

    def __init__(self, catalog_id: str, spells: list[SpellEntity]):
        super().__init__(catalog_id)
        self._spells = {spell.index: spell for spell in spells}
        self.build_calls = 0
        self.get_calls: list[str] = []

    async def _build_index(self):
        self.build_calls += 1
        return [IndexEntry(id=s.index, name=s.name) for s in self._spells.values()]

    async def get_entry(self, entry_id):
        self.get_calls.append(entry_id)
        return self._spells.get(entry_id)


def make_spell(name: str, source: str = "test", level: int = 1) -> SpellEntity:
    return SpellEntity(
        index=name.lower().replace(" ", "-"),
        name=name,
        level=level,
        source=source,
    )


@pytest.fixture
def fake_store():
    return FakeStore()

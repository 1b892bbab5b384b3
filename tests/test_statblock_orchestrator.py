"""
Tests for the full statblock import flow.
"""

import asyncio

import pytest

from conftest import FakeStore, MemoryCatalog, make_spell
from statblock_importer.catalogs import CatalogManager
from statblock_importer.config import ImporterConfig
from statblock_importer.importers.base import NormalizationError
from statblock_importer.importers.statblock import (
    ImportContext,
    build_creature_record,
    import_statblock,
    import_statblock_text,
)
from statblock_importer.models import EmbeddedKind
from statblock_importer.notifications import RecordingNotifier


pytestmark = pytest.mark.anyio

ITEM_NAMES = ["Spellcasting", "Turn Resistance", "Paralyzing Touch", "Cantrip", "Disrupt Life"]


async def spell_catalogs() -> CatalogManager:
    manager = CatalogManager()
    await manager.add_catalog(
        MemoryCatalog(
            "srd-spells",
            [
                make_spell("Mage Hand", "srd-spells", level=0),
                make_spell("Ray of Frost", "srd-spells", level=0),
                make_spell("Magic Missile", "srd-spells"),
                make_spell("Shield", "srd-spells"),
            ],
        ),
        load=False,
    )
    return manager


async def make_context(store, **config) -> ImportContext:
    return ImportContext(
        store=store,
        catalogs=await spell_catalogs(),
        notifier=RecordingNotifier(),
        config=ImporterConfig(**config),
    )


class TestBuildCreatureRecord:
    """Test the base creature record."""

    def test_record_shape(self, lich):
        record = build_creature_record(lich)
        payload = record.to_payload()

        assert payload["name"] == "Ancient Lich"
        assert payload["type"] == "npc"
        assert payload["sort"] == 12000
        assert payload["items"] == []
        assert payload["data"]["details"]["spellLevel"] == 18
        assert payload["data"]["attributes"]["spellcasting"] == "int"

    def test_sort_from_config(self, lich):
        record = build_creature_record(lich, ImporterConfig(creature_sort=500))
        assert record.sort == 500


class TestImportStatblock:
    """Test creature, item and spell submission."""

    async def test_full_import(self, lich):
        store = FakeStore()
        context = await make_context(store)

        result = await import_statblock(lich, context)

        assert len(store.creatures) == 1
        assert result.creature.name == "Ancient Lich"
        assert sorted(result.created_items) == sorted(ITEM_NAMES)
        assert result.failed_items == []
        assert result.resolved_spells == ["Mage Hand", "Ray of Frost", "Magic Missile", "Shield"]
        assert result.missing_spells == ["power word kill"]
        assert result.warnings == ["power word kill has not been found"]
        assert context.notifier.messages == ["power word kill has not been found"]

    async def test_one_request_per_item_and_one_spell_batch(self, lich):
        store = FakeStore()
        context = await make_context(store)

        await import_statblock(lich, context)

        single = [items for _, _, items in store.embedded if isinstance(items, dict)]
        batches = [items for _, _, items in store.embedded if isinstance(items, list)]
        assert len(single) == len(ITEM_NAMES)
        assert len(batches) == 1
        assert [spell["type"] for spell in batches[0]] == ["spell"] * 4
        assert all(kind == EmbeddedKind.OWNED_ITEM for _, kind, _ in store.embedded)

    async def test_items_reference_created_creature(self, lich):
        store = FakeStore()
        context = await make_context(store)

        result = await import_statblock(lich, context)

        assert all(handle == result.creature for handle, _, _ in store.embedded)

    async def test_failed_item_recorded(self, lich):
        store = FakeStore(fail_on=("Paralyzing Touch",))
        context = await make_context(store)

        result = await import_statblock(lich, context)

        assert [f.name for f in result.failed_items] == ["Paralyzing Touch"]
        assert "store rejected" in result.failed_items[0].reason
        assert "Paralyzing Touch" not in result.created_items
        assert len(result.created_items) == len(ITEM_NAMES) - 1
        assert result.build_report().status == "partial"

    async def test_background_submission(self, lich):
        store = FakeStore(fail_on=("Cantrip",))
        context = await make_context(store, item_submission="background")

        result = await import_statblock(lich, context)
        outcomes = await asyncio.gather(*result.pending_tasks, return_exceptions=True)

        assert result.created_items == []
        assert result.failed_items == []
        assert sorted(result.pending_items) == sorted(ITEM_NAMES)
        assert sum(isinstance(o, RuntimeError) for o in outcomes) == 1
        assert "Cantrip" not in store.item_names()
        assert "Disrupt Life" in store.item_names()

    async def test_all_spells_missing_skips_batch(self, lich):
        lich.spells = {"9th level": ["Power Word Kill", "Wish"]}
        store = FakeStore()
        context = await make_context(store)

        result = await import_statblock(lich, context)

        assert not any(isinstance(items, list) for _, _, items in store.embedded)
        assert result.missing_spells == ["power word kill", "wish"]

    async def test_no_spells_no_abilities(self, lich):
        lich.spells = None
        lich.abilities = {}
        lich.legendary_actions = None
        store = FakeStore()
        context = await make_context(store)

        result = await import_statblock(lich, context)

        assert store.embedded == []
        assert result.created_items == []
        assert result.build_report().status == "success"

    async def test_zero_proficiency_fails_before_creation(self, lich):
        lich.proficiency = 0
        store = FakeStore()
        context = await make_context(store)

        with pytest.raises(NormalizationError):
            await import_statblock(lich, context)

        assert store.creatures == []

    async def test_spell_batch_error_propagates(self, lich):
        class BrokenBatchStore(FakeStore):
            async def create_embedded_items(self, handle, kind, items):
                if isinstance(items, list):
                    raise RuntimeError("batch refused")
                return await super().create_embedded_items(handle, kind, items)

        context = await make_context(BrokenBatchStore())

        with pytest.raises(RuntimeError, match="batch refused"):
            await import_statblock(lich, context)


class TestImportStatblockText:
    """Test importing through an extraction adapter."""

    async def test_adapter_output_imported(self, lich):
        class StaticAdapter:
            def __init__(self):
                self.seen = []

            def extract(self, text):
                self.seen.append(text)
                return lich

        adapter = StaticAdapter()
        store = FakeStore()
        context = await make_context(store)

        result = await import_statblock_text("ANCIENT LICH\nMedium undead", adapter, context)

        assert adapter.seen == ["ANCIENT LICH\nMedium undead"]
        assert result.creature.name == "Ancient Lich"
        assert len(store.creatures) == 1

"""
Tests for file catalogs and the catalog manager.
"""

import json
import pytest
from pathlib import Path

from conftest import MemoryCatalog, make_spell
from statblock_importer.catalogs import (
    CatalogError,
    CatalogManager,
    CatalogManagerError,
    FileCatalog,
)
from statblock_importer.config import ImporterConfig


# Path to test fixtures
FIXTURES_DIR = Path(__file__).parent / "fixtures" / "catalogs"


class TestFileCatalog:
    """Test loading spells from local files."""

    @pytest.mark.anyio
    async def test_load_yaml(self):
        catalog = FileCatalog(FIXTURES_DIR / "homebrew_spells.yaml")

        index = await catalog.load_index()

        assert catalog.catalog_id == "custom-homebrew-spells"
        assert catalog.name == "Table Spells"
        assert [e.name for e in index] == ["Mage Hand", "Ray of Frost", "Magic Missile"]
        assert catalog.is_loaded
        assert catalog.loaded_at is not None

    @pytest.mark.anyio
    async def test_get_entry(self):
        catalog = FileCatalog(FIXTURES_DIR / "homebrew_spells.yaml")
        await catalog.load_index()

        entry = catalog.find("ray of frost")
        spell = await catalog.get_entry(entry.id)

        assert entry.id == "ray-of-frost"
        assert spell.level == 0
        assert spell.source == "custom-homebrew-spells"
        assert spell.desc.startswith("A frigid beam")
        assert "5th level" in spell.desc

    @pytest.mark.anyio
    async def test_load_json_with_explicit_index(self):
        catalog = FileCatalog(FIXTURES_DIR / "core_spells.json", catalog_id="core-spells")
        await catalog.load_index()

        entry = catalog.find("Magic Missile")

        assert entry.id == "magic-missile-core"
        assert catalog.catalog_id == "core-spells"

    @pytest.mark.anyio
    async def test_bare_list(self, tmp_path):
        path = tmp_path / "quick_spells.json"
        path.write_text(json.dumps([{"name": "Light", "level": 0}]), encoding="utf-8")

        catalog = FileCatalog(path)
        index = await catalog.load_index()

        assert [e.name for e in index] == ["Light"]

    @pytest.mark.anyio
    async def test_invalid_entry_skipped(self, tmp_path, caplog):
        path = tmp_path / "bad_spells.json"
        path.write_text(
            json.dumps({"spells": [{"name": "Wish", "level": 12}, {"name": "Light", "level": 0}]}),
            encoding="utf-8",
        )

        index = await FileCatalog(path).load_index()

        assert [e.name for e in index] == ["Light"]
        assert "Invalid spell definition" in caplog.text

    @pytest.mark.anyio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            await FileCatalog(tmp_path / "nope.yaml").load_index()

    @pytest.mark.anyio
    async def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "spells.txt"
        path.write_text("Shield", encoding="utf-8")
        with pytest.raises(CatalogError, match="Unsupported file format"):
            await FileCatalog(path).load_index()

    @pytest.mark.anyio
    async def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken_spells.yaml"
        path.write_text("spells: [unclosed", encoding="utf-8")
        with pytest.raises(CatalogError, match="Failed to parse"):
            await FileCatalog(path).load_index()

    def test_find_before_load(self):
        catalog = FileCatalog(FIXTURES_DIR / "homebrew_spells.yaml")
        assert catalog.find("Mage Hand") is None
        assert catalog.index == []


class TestCatalogManager:
    """Test catalog registration and enumeration."""

    @pytest.mark.anyio
    async def test_enumeration_order(self):
        manager = CatalogManager()
        await manager.add_catalog(MemoryCatalog("b-spells", []))
        await manager.add_catalog(MemoryCatalog("a-spells", []))

        assert manager.catalog_ids == ["b-spells", "a-spells"]

    @pytest.mark.anyio
    async def test_marker_filter(self):
        manager = CatalogManager()
        await manager.add_catalog(MemoryCatalog("srd-monsters", []))
        await manager.add_catalog(MemoryCatalog("srd-Spells", []))

        assert [c.catalog_id for c in manager.catalogs("spell")] == ["srd-Spells"]
        assert len(manager.catalogs()) == 2

    @pytest.mark.anyio
    async def test_add_loads_index(self):
        catalog = MemoryCatalog("srd-spells", [make_spell("Shield")])
        manager = CatalogManager()

        await manager.add_catalog(catalog)

        assert catalog.is_loaded
        assert catalog.build_calls == 1

    @pytest.mark.anyio
    async def test_lazy_add(self):
        catalog = MemoryCatalog("srd-spells", [make_spell("Shield")])
        manager = CatalogManager()

        await manager.add_catalog(catalog, load=False)

        assert not catalog.is_loaded

    @pytest.mark.anyio
    async def test_replace_moves_to_end(self):
        manager = CatalogManager()
        await manager.add_catalog(MemoryCatalog("a-spells", []))
        await manager.add_catalog(MemoryCatalog("b-spells", []))
        replacement = MemoryCatalog("a-spells", [make_spell("Shield")])

        await manager.add_catalog(replacement)

        assert manager.catalog_ids == ["b-spells", "a-spells"]
        assert manager.get("a-spells") is replacement

    @pytest.mark.anyio
    async def test_remove(self):
        manager = CatalogManager()
        await manager.add_catalog(MemoryCatalog("a-spells", []))

        assert manager.remove_catalog("a-spells") is True
        assert manager.remove_catalog("a-spells") is False
        assert manager.catalog_ids == []

    @pytest.mark.anyio
    async def test_load_failure_wrapped(self, tmp_path):
        manager = CatalogManager()
        with pytest.raises(CatalogManagerError, match="custom-missing-spells"):
            await manager.add_catalog(FileCatalog(tmp_path / "missing_spells.json"))
        assert manager.catalog_ids == []

    @pytest.mark.anyio
    async def test_from_config(self):
        config = ImporterConfig(catalog_dir=FIXTURES_DIR, open5e_enabled=False)

        manager = await CatalogManager.from_config(config)

        assert manager.catalog_ids == ["custom-core-spells", "custom-homebrew-spells"]
        assert not any(c.is_loaded for c in manager.catalogs())

    @pytest.mark.anyio
    async def test_from_config_with_open5e(self, tmp_path):
        config = ImporterConfig(
            catalog_dir=tmp_path / "none",
            cache_dir=tmp_path / "cache",
            open5e_enabled=True,
            open5e_document="wotc-srd",
        )

        manager = await CatalogManager.from_config(config)

        assert manager.catalog_ids == ["open5e-spells-wotc-srd"]

    @pytest.mark.anyio
    async def test_close(self):
        manager = CatalogManager()
        await manager.add_catalog(MemoryCatalog("a-spells", []))

        await manager.close()

        assert manager.catalog_ids == []

    @pytest.mark.anyio
    async def test_enumeration_is_a_snapshot(self):
        manager = CatalogManager()
        await manager.add_catalog(MemoryCatalog("a-spells", []))
        listed = manager.catalogs()
        ids = manager.catalog_ids

        await manager.add_catalog(MemoryCatalog("b-spells", []))
        manager.remove_catalog("a-spells")

        assert [c.catalog_id for c in listed] == ["a-spells"]
        assert ids == ["a-spells"]
        assert manager.catalog_ids == ["b-spells"]

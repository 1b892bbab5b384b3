"""
File catalog for loading spell lists from local JSON/YAML files.

This catalog lets users keep homebrew or table-specific spells next to the
official ones; entries are matched by name like any other catalog.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..models import SpellEntity
from .base import CatalogBase, CatalogError, IndexEntry


logger = logging.getLogger("statblock-importer")


class FileCatalog(CatalogBase):
    """
    Spell catalog backed by a local JSON or YAML file.

    File formats supported:
    - .json - JSON files
    - .yaml / .yml - YAML files

    Expected file structure:
    ```yaml
    name: Homebrew Spells
    spells:
      - name: Frost Lance
        level: 2
        school: evocation
        desc: A lance of ice...
    ```
    A bare list of spells is accepted as well.
    """

    SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}

    def __init__(self, path: Path | str, catalog_id: str | None = None):
        """
        Initialize a file catalog.

        Args:
            path: Path to the JSON or YAML file
            catalog_id: Optional custom ID. If not provided, derived from filename.
        """
        self.path = Path(path)

        if catalog_id is None:
            # "homebrew_spells.yaml" -> "custom-homebrew-spells"
            catalog_id = f"custom-{self.path.stem.replace('_', '-').lower()}"

        super().__init__(catalog_id=catalog_id)
        self._spells: dict[str, SpellEntity] = {}

    async def _build_index(self) -> list[IndexEntry]:
        """Read and parse the catalog file."""
        data = self._read_file()

        if isinstance(data, dict):
            self.name = data.get("name", self.catalog_id)
            entries = data.get("spells", [])
        else:
            entries = data

        if not isinstance(entries, list):
            raise CatalogError(f"Catalog {self.path} must contain a list of spells")

        index: list[IndexEntry] = []
        for raw in entries:
            try:
                spell = self._parse_spell(raw)
            except (ValidationError, TypeError, ValueError) as e:
                logger.warning(f"Invalid spell definition in {self.path}: {e}")
                continue
            self._spells[spell.index] = spell
            index.append(IndexEntry(id=spell.index, name=spell.name))

        logger.info(f"Loaded spell catalog '{self.name}' from {self.path}: {len(index)} spells")
        return index

    def _read_file(self) -> Any:
        if not self.path.exists():
            raise CatalogError(f"Catalog file not found: {self.path}")

        suffix = self.path.suffix.lower()
        if suffix not in self.SUPPORTED_EXTENSIONS:
            raise CatalogError(
                f"Unsupported file format: {suffix}. "
                f"Supported: {', '.join(sorted(self.SUPPORTED_EXTENSIONS))}"
            )

        try:
            raw_content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise CatalogError(f"Failed to read file: {e}") from e

        try:
            if suffix == ".json":
                return json.loads(raw_content)
            return yaml.safe_load(raw_content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise CatalogError(f"Failed to parse {suffix} file: {e}") from e

    def _parse_spell(self, data: dict) -> SpellEntity:
        """Parse a spell definition, deriving its index from the name if needed."""
        data = dict(data)
        if not data.get("name"):
            raise TypeError("spell entry has no name")
        if "index" not in data:
            data["index"] = data["name"].lower().replace(" ", "-").replace("'", "")
        if isinstance(data.get("desc"), list):
            data["desc"] = "\n\n".join(data["desc"])
        data["source"] = self.catalog_id
        return SpellEntity.model_validate(data)

    async def get_entry(self, entry_id: str) -> SpellEntity | None:
        return self._spells.get(entry_id)


__all__ = [
    "FileCatalog",
]

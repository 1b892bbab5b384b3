"""
Resolve spell names against the registered spell catalogs.

Lookup is exact and case-insensitive. Catalogs are searched in registration
order and the first match wins; a name found nowhere leaves an empty slot
and raises exactly one warning.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from ...catalogs import CatalogBase, CatalogError, CatalogManager
from ...models import SpellEntity
from ...notifications import Notifier

logger = logging.getLogger("statblock-importer")


class SpellResolver:
    """Looks up requested spells across every catalog carrying the spell marker."""

    def __init__(self, catalogs: CatalogManager, notifier: Notifier, marker: str = "spell"):
        self.catalogs = catalogs
        self.notifier = notifier
        self.marker = marker

    async def spell_catalogs(self) -> list[CatalogBase]:
        """Return the spell catalogs in enumeration order, with indexes loaded.

        A catalog whose index cannot be built is skipped with a warning so the
        remaining catalogs still take part in the lookup.
        """
        loaded: list[CatalogBase] = []
        for catalog in self.catalogs.catalogs(self.marker):
            try:
                await catalog.load_index()
            except CatalogError as e:
                logger.warning(f"Skipping spell catalog {catalog.catalog_id}: {e}")
                self.notifier.warn(f"Spell catalog {catalog.catalog_id} could not be loaded: {e}")
                continue
            loaded.append(catalog)
        return loaded

    async def find_spell(
        self,
        catalogs: Sequence[CatalogBase],
        spell_name: str,
    ) -> SpellEntity | None:
        """
        Return the first catalog entity named ``spell_name``.

        Args:
            catalogs: Catalogs to search, in order
            spell_name: Normalized (trimmed, lowercased) spell name

        Returns:
            The resolved entity, or None after warning that it was not found
        """
        for catalog in catalogs:
            entry = catalog.find(spell_name)
            if entry:
                entity = await catalog.get_entry(entry.id)
                if entity is not None:
                    logger.debug(f"Resolved '{spell_name}' in {catalog.catalog_id}")
                    return entity

        self.notifier.warn(f"{spell_name} has not been found")
        return None

    async def resolve(
        self,
        spells: Mapping[str, Sequence[str]] | None,
    ) -> list[SpellEntity | None]:
        """
        Resolve every requested spell, flattening all categories into one list.

        Args:
            spells: Spell names grouped by category

        Returns:
            One slot per requested name, in category order; unresolved
            names are None
        """
        if not spells:
            return []

        catalogs = await self.spell_catalogs()
        if not catalogs:
            logger.warning(f"No catalogs matching '{self.marker}' are registered")

        resolved: list[SpellEntity | None] = []
        for category, names in spells.items():
            for name in names:
                resolved.append(await self.find_spell(catalogs, name.strip().lower()))
            logger.debug(f"Resolved spell category '{category}' ({len(names)} names)")
        return resolved

"""
Assemble a creature from statblock primitives and hand it to the store.

The import runs in four steps: take the primitive groups, create the base
creature, attach one item per ability/legendary action, then resolve spells
and attach them in one batch.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Mapping

from ...catalogs import CatalogManager
from ...config import ImporterConfig
from ...models import (
    AbilityData,
    CreatureHandle,
    CreatureRecord,
    EmbeddedKind,
    ItemRecord,
    StatBlockPrimitives,
)
from ...notifications import LoggingNotifier, Notifier, RecordingNotifier
from ...storage import CreatureStore
from ..base import FailedItem, ImportResult
from .items import build_item
from .normalizer import make_creature_data
from .reader import ExtractionAdapter
from .spells import SpellResolver

logger = logging.getLogger("statblock-importer")


@dataclass
class ImportContext:
    """Collaborators used by one or more imports."""
    store: CreatureStore
    catalogs: CatalogManager
    notifier: Notifier = field(default_factory=LoggingNotifier)
    config: ImporterConfig = field(default_factory=ImporterConfig)


def build_creature_record(
    primitives: StatBlockPrimitives,
    config: ImporterConfig | None = None,
) -> CreatureRecord:
    """Build the base creature record (no embedded items yet)."""
    config = config or ImporterConfig()
    return CreatureRecord(
        name=primitives.name,
        sort=config.creature_sort,
        data=make_creature_data(primitives),
    )


def build_items(
    abilities: Mapping[str, AbilityData] | None,
    stats: Mapping[str, int | str],
) -> list[ItemRecord]:
    """Build one item record per ability, keeping declaration order."""
    if not abilities:
        return []
    return [build_item(name, ability, stats) for name, ability in abilities.items()]


def _log_background_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        logger.warning(f"Background item creation '{task.get_name()}' was cancelled")
        return
    error = task.exception()
    if error is not None:
        logger.warning(f"Background item creation '{task.get_name()}' failed: {error}")


async def add_items(
    handle: CreatureHandle,
    items: list[ItemRecord],
    context: ImportContext,
    result: ImportResult,
) -> None:
    """Submit every item as its own embedded creation request.

    In "supervised" mode all requests run concurrently and the call returns
    once each has settled, recording successes and failures on ``result``.
    In "background" mode the requests are scheduled and left running; they
    are recorded as pending and failures are only logged.
    """
    if not items:
        return

    store = context.store

    if context.config.item_submission == "background":
        for item in items:
            task = asyncio.create_task(
                store.create_embedded_items(handle, EmbeddedKind.OWNED_ITEM, item.to_payload()),
                name=item.name,
            )
            task.add_done_callback(_log_background_failure)
            result.pending_tasks.append(task)
            result.pending_items.append(item.name)
        logger.debug(f"Scheduled {len(items)} item(s) for '{handle.name}' in background")
        return

    outcomes = await asyncio.gather(
        *(
            store.create_embedded_items(handle, EmbeddedKind.OWNED_ITEM, item.to_payload())
            for item in items
        ),
        return_exceptions=True,
    )
    for item, outcome in zip(items, outcomes):
        if isinstance(outcome, BaseException):
            logger.warning(f"Failed to create item '{item.name}' on '{handle.name}': {outcome}")
            reason = str(outcome) or type(outcome).__name__
            result.failed_items.append(FailedItem(name=item.name, reason=reason))
        else:
            result.created_items.append(item.name)


async def add_spells(
    handle: CreatureHandle,
    spells: Mapping[str, list[str]] | None,
    context: ImportContext,
    result: ImportResult,
) -> None:
    """Resolve the requested spells and attach the found ones in one batch.

    Store errors on the batch call propagate to the caller.
    """
    if not spells:
        return

    recorder = RecordingNotifier(forward=context.notifier)
    resolver = SpellResolver(
        context.catalogs,
        recorder,
        marker=context.config.spell_catalog_marker,
    )
    slots = await resolver.resolve(spells)

    requested = [name.strip().lower() for names in spells.values() for name in names]
    found = [spell for spell in slots if spell is not None]
    result.resolved_spells.extend(spell.name for spell in found)
    result.missing_spells.extend(name for name, spell in zip(requested, slots) if spell is None)
    result.warnings.extend(recorder.messages)

    if not found:
        return

    await context.store.create_embedded_items(
        handle,
        EmbeddedKind.OWNED_ITEM,
        [spell.to_item() for spell in found],
    )


async def import_statblock(
    primitives: StatBlockPrimitives,
    context: ImportContext,
) -> ImportResult:
    """
    Import one creature from already-extracted primitives.

    Args:
        primitives: Fields extracted from the statblock
        context: Store, catalogs, notifier and configuration

    Returns:
        ImportResult describing the created creature, its items and spells

    Raises:
        NormalizationError: If the primitives cannot be normalized
        Exception: Whatever the store raises for the creature or spell batch
    """
    abilities = primitives.abilities
    legendary_actions = primitives.legendary_actions
    spells = primitives.spells
    stats = primitives.stats

    record = build_creature_record(primitives, context.config)
    handle = await context.store.create_creature(record)
    result = ImportResult(creature=handle)

    items = build_items(abilities, stats) + build_items(legendary_actions, stats)
    await add_items(handle, items, context, result)
    await add_spells(handle, spells, context, result)

    logger.info(
        f"Imported '{handle.name}': {len(result.created_items)} items, "
        f"{len(result.resolved_spells)} spells, {len(result.missing_spells)} missing"
    )
    return result


async def import_statblock_text(
    text: str,
    adapter: ExtractionAdapter,
    context: ImportContext,
) -> ImportResult:
    """Extract primitives from raw statblock text, then import them."""
    return await import_statblock(adapter.extract(text), context)

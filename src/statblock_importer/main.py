"""
Statblock Importer MCP Server
Imports extracted creature statblocks into a creature store, built with FastMCP.
"""

import logging
from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from .catalogs import CatalogError, CatalogManager, CatalogManagerError
from .config import ImporterConfig, load_config
from .importers import ImportContext, StatBlockImportError, import_statblock, read_statblock_file
from .importers.statblock import SpellResolver
from .notifications import LoggingNotifier, RecordingNotifier
from .storage import CreatureStore, JsonCreatureStore

logger = logging.getLogger("statblock-importer")

logging.basicConfig(
    level=logging.DEBUG,
    )

config = load_config()
logger.debug(f"📂 Data path: {config.data_dir.resolve()}")

_store: JsonCreatureStore | None = None
_catalogs: CatalogManager | None = None

mcp = FastMCP(
    name="statblock-importer"
)


def get_store() -> JsonCreatureStore:
    """Create the creature store on first use."""
    global _store
    if _store is None:
        _store = JsonCreatureStore(data_dir=config.data_dir)
        logger.debug("✅ Storage layer initialized")
    return _store


async def get_catalogs() -> CatalogManager:
    """Build the catalog manager on first use."""
    global _catalogs
    if _catalogs is None:
        _catalogs = await CatalogManager.from_config(config)
        logger.debug(f"📚 Catalogs registered: {_catalogs.catalog_ids}")
    return _catalogs


# ----------------------------------------------------------------------
# Import Tools
# ----------------------------------------------------------------------

async def _import_statblock_file_impl(
    file_path: str,
    store_ref: CreatureStore,
    catalogs: CatalogManager,
    config_ref: ImporterConfig,
) -> str:
    """Implementation for import_statblock_file (testable without MCP wrapper)."""
    try:
        primitives = read_statblock_file(file_path)
        context = ImportContext(
            store=store_ref,
            catalogs=catalogs,
            notifier=LoggingNotifier(),
            config=config_ref,
        )
        result = await import_statblock(primitives, context)
    except (StatBlockImportError, CatalogError, CatalogManagerError) as e:
        return f"❌ Import failed: {e}"

    return result.build_report().format()


@mcp.tool
async def import_statblock_file(
    file_path: Annotated[str, Field(description="Path to a JSON or YAML file of extracted statblock fields")],
) -> str:
    """Import a creature, its abilities and its spells from an extracted statblock file."""
    return await _import_statblock_file_impl(file_path, get_store(), await get_catalogs(), config)


# ----------------------------------------------------------------------
# Spell Catalog Tools
# ----------------------------------------------------------------------

def _list_spell_catalogs_impl(catalogs: CatalogManager, marker: str) -> str:
    """Implementation for list_spell_catalogs (testable without MCP wrapper)."""
    matching = catalogs.catalogs(marker)
    if not matching:
        return f"❌ No catalogs matching '{marker}' are registered."

    lines = []
    for catalog in matching:
        state = f"{len(catalog.index)} spells" if catalog.is_loaded else "not loaded"
        lines.append(f"• {catalog.catalog_id} ({catalog.name}): {state}")
    return "**Spell Catalogs:**\n" + "\n".join(lines)


@mcp.tool
async def list_spell_catalogs() -> str:
    """List the catalogs searched when resolving spells."""
    return _list_spell_catalogs_impl(await get_catalogs(), config.spell_catalog_marker)


async def _find_spell_impl(name: str, catalogs: CatalogManager, marker: str) -> str:
    """Implementation for find_spell (testable without MCP wrapper)."""
    recorder = RecordingNotifier()
    resolver = SpellResolver(catalogs, recorder, marker=marker)
    spell = await resolver.find_spell(await resolver.spell_catalogs(), name.strip().lower())
    if spell is None:
        return f"❌ {recorder.messages[-1]}"

    return (
        f"**{spell.name}** (level {spell.level} {spell.school}, from {spell.source})\n"
        f"Casting time: {spell.casting_time} | Range: {spell.range} | Duration: {spell.duration}\n\n"
        f"{spell.desc}"
    )


@mcp.tool
async def find_spell(
    name: Annotated[str, Field(description="Exact spell name (case-insensitive)")],
) -> str:
    """Look up a spell by exact name across the spell catalogs."""
    return await _find_spell_impl(name, await get_catalogs(), config.spell_catalog_marker)


logger.debug("✅ All tools successfully registered. Statblock importer running! 🎲")

def main() -> None:
    """Main entry point for the statblock importer MCP server."""
    mcp.run()

if __name__ == "__main__":
    main()

"""
Statblock import: normalization, inference, item building and spell resolution.
"""

from .orchestrator import (
    ImportContext,
    build_creature_record,
    import_statblock,
    import_statblock_text,
)
from .reader import ExtractionAdapter, parse_primitives, read_statblock_file
from .spells import SpellResolver

__all__ = [
    "ImportContext",
    "build_creature_record",
    "import_statblock",
    "import_statblock_text",
    "ExtractionAdapter",
    "parse_primitives",
    "read_statblock_file",
    "SpellResolver",
]

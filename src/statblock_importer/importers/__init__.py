"""
Creature import from extracted statblocks.

Currently supports:
- Statblock primitives (from an extraction adapter, or a JSON/YAML file)
"""

from .base import ImportResult, NormalizationError, StatBlockFileError, StatBlockImportError
from .statblock import ImportContext, import_statblock, read_statblock_file

__all__ = [
    "ImportContext",
    "import_statblock",
    "read_statblock_file",
    "ImportResult",
    "StatBlockImportError",
    "NormalizationError",
    "StatBlockFileError",
]

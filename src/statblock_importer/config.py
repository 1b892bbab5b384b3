"""
Configuration model for the statblock importer.
"""

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class ImporterConfig(BaseModel):
    """Settings for statblock imports, catalogs and storage."""

    data_dir: Path = Field(
        default=Path("statblock_data"),
        description="Directory where imported creatures are stored",
    )
    catalog_dir: Path = Field(
        default=Path("statblock_data/catalogs"),
        description="Directory scanned for JSON/YAML spell catalogs",
    )
    cache_dir: Path = Field(
        default=Path("statblock_data/catalog_cache"),
        description="Directory for cached remote catalog responses",
    )
    spell_catalog_marker: str = Field(
        default="spell",
        min_length=1,
        description="Only catalogs whose ID contains this marker are searched for spells",
    )
    item_submission: Literal["supervised", "background"] = Field(
        default="supervised",
        description=(
            "'supervised' waits for every item creation and reports failures; "
            "'background' submits items without waiting (best effort)"
        ),
    )
    open5e_enabled: bool = Field(default=False, description="Search the Open5e spell list")
    open5e_document: str | None = Field(
        default=None,
        description="Restrict Open5e spells to one document slug (e.g. 'wotc-srd')",
    )
    creature_sort: int = Field(default=12000, ge=0, description="Sort value of new creatures")

    @field_validator("item_submission", mode="before")
    @classmethod
    def validate_item_submission(cls, v: str) -> str:
        """Accept the submission mode case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


def _env_flag(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> ImporterConfig:
    """Build the configuration from ``.env`` and ``STATBLOCK_*`` variables."""
    load_dotenv()

    data_dir = Path(os.getenv("STATBLOCK_DATA_DIR", "statblock_data"))
    values: dict = {
        "data_dir": data_dir,
        "catalog_dir": Path(os.getenv("STATBLOCK_CATALOG_DIR", str(data_dir / "catalogs"))),
        "cache_dir": Path(os.getenv("STATBLOCK_CACHE_DIR", str(data_dir / "catalog_cache"))),
        "open5e_enabled": _env_flag(os.getenv("STATBLOCK_OPEN5E")),
        "open5e_document": os.getenv("STATBLOCK_OPEN5E_DOCUMENT") or None,
    }
    if os.getenv("STATBLOCK_ITEM_SUBMISSION"):
        values["item_submission"] = os.getenv("STATBLOCK_ITEM_SUBMISSION")
    if os.getenv("STATBLOCK_SPELL_MARKER"):
        values["spell_catalog_marker"] = os.getenv("STATBLOCK_SPELL_MARKER")

    return ImporterConfig(**values)

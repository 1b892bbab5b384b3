"""
Base models and exceptions for the statblock import system.
"""

from __future__ import annotations

import asyncio

from pydantic import BaseModel, ConfigDict, Field

from ..models import CreatureHandle


class StatBlockImportError(Exception):
    """Raised when a statblock import fails.

    Provides a user-facing message explaining what went wrong
    and, where possible, how to fix it.
    """


class NormalizationError(StatBlockImportError):
    """Raised when primitives cannot be normalized into the creature schema."""


class StatBlockFileError(StatBlockImportError):
    """Raised when a primitives file cannot be read or parsed."""


class FailedItem(BaseModel):
    """An embedded item whose creation was rejected by the store."""

    name: str = Field(description="Name of the ability or legendary action")
    reason: str = Field(description="Error reported by the store")


class ImportReport(BaseModel):
    """Structured import report with status, created items, and warnings."""

    status: str = Field(description='Import status: "success", "success_with_warnings", or "partial"')
    creature_name: str = Field(description="Name of the imported creature")
    creature_id: str = Field(description="Store ID of the imported creature")
    items: list[str] = Field(default_factory=list, description="Items created on the creature")
    failed_items: list[FailedItem] = Field(default_factory=list)
    pending_items: list[str] = Field(default_factory=list)
    spells: list[str] = Field(default_factory=list, description="Spells attached to the creature")
    missing_spells: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def format(self) -> str:
        """Format the report as a readable text block.

        Returns:
            Multi-line formatted string suitable for MCP tool response.
        """
        lines: list[str] = []

        lines.append(f"Statblock Import Report - {self.creature_name} ({self.creature_id})")
        status_display = self.status.upper().replace("_", " ")
        lines.append(f"Status: {status_display}")
        lines.append("")

        if self.items:
            lines.append(f"Items ({len(self.items)}): {', '.join(self.items)}")
        if self.pending_items:
            lines.append(
                f"Submitted in background ({len(self.pending_items)}): {', '.join(self.pending_items)}"
            )
        if self.spells:
            lines.append(f"Spells ({len(self.spells)}): {', '.join(self.spells)}")
        if self.items or self.pending_items or self.spells:
            lines.append("")

        if self.failed_items:
            lines.append(f"Failed items ({len(self.failed_items)}):")
            for failed in self.failed_items:
                lines.append(f"  - {failed.name}: {failed.reason}")
            lines.append("")

        if self.missing_spells:
            lines.append(f"Spells not found ({len(self.missing_spells)}):")
            for name in self.missing_spells:
                lines.append(f"  - {name}")
            lines.append("")

        if self.warnings:
            lines.append(f"Warnings ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  - {w}")
            lines.append("")

        return "\n".join(lines).rstrip()


class ImportResult(BaseModel):
    """Result of a statblock import operation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    creature: CreatureHandle = Field(description="Handle of the created creature")
    created_items: list[str] = Field(default_factory=list)
    failed_items: list[FailedItem] = Field(default_factory=list)
    pending_items: list[str] = Field(
        default_factory=list,
        description="Items submitted without waiting for completion (background mode)",
    )
    resolved_spells: list[str] = Field(default_factory=list)
    missing_spells: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    pending_tasks: list[asyncio.Task] = Field(default_factory=list, exclude=True, repr=False)

    def build_report(self) -> ImportReport:
        """Build a structured ImportReport from this ImportResult."""
        if self.failed_items:
            status = "partial"
        elif self.warnings or self.missing_spells:
            status = "success_with_warnings"
        else:
            status = "success"

        return ImportReport(
            status=status,
            creature_name=self.creature.name,
            creature_id=self.creature.id,
            items=list(self.created_items),
            failed_items=list(self.failed_items),
            pending_items=list(self.pending_items),
            spells=list(self.resolved_spells),
            missing_spells=list(self.missing_spells),
            warnings=list(self.warnings),
        )

"""
Data models for the statblock importer.

Input models describe the primitive fields handed over by the extraction
adapter. Output models mirror the creature/item document layout expected by
the game-state store (camelCase keys are kept as serialization aliases).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Extracted primitives (input)
# ---------------------------------------------------------------------------

class RangeData(BaseModel):
    """Range information attached to an ability by the extraction adapter."""

    model_config = ConfigDict(populate_by_name=True)

    single_range: dict[str, Any] | None = Field(
        default=None,
        alias="singleRange",
        description="Single range value, or a self-targeted area ({value, units, type})",
    )
    double_range: dict[str, Any] | None = Field(
        default=None,
        alias="doubleRange",
        description="Short/long range pair for ranged attacks",
    )


class AbilityPayload(BaseModel):
    """Structured data of an ability: damage tuples, save, range.

    The ``Spellcasting`` ability additionally carries the caster ``level``
    and the spellcasting ``modifier`` (ability name).
    """

    damage: list[list[Any]] = Field(
        default_factory=list,
        description="Damage tuples: [dice formula, damage type, to-hit modifier]",
    )
    save: dict[str, Any] | None = Field(default=None, description="Saving throw data")
    range: RangeData | None = None
    level: int | None = Field(default=None, description="Caster level (Spellcasting only)")
    modifier: str | None = Field(default=None, description="Spellcasting ability name")


class AbilityData(BaseModel):
    """A single ability or legendary action as extracted from the statblock."""

    description: str = ""
    cost: int | None = Field(default=None, description="Legendary action point cost")
    data: AbilityPayload | None = None


class StatBlockPrimitives(BaseModel):
    """All primitive fields extracted from one statblock."""

    name: str = "Unknown Creature"
    size: str = "Medium"
    alignment: str = ""
    race: str = ""
    cr: float | int | str | None = None
    xp: int | None = None
    ac: int = 10
    ac_source: str | None = None
    hp: int = 1
    hp_formula: str = ""
    speed: Any = None
    stats: dict[str, int | str] = Field(
        default_factory=dict,
        description="Ability scores keyed by ability (e.g. {'STR': '10'})",
    )
    saves: dict[str, Any] | None = Field(
        default=None,
        description="Saving-throw proficiency flags keyed by ability",
    )
    skills: dict[str, int] = Field(default_factory=dict, description="Raw skill bonuses")
    damage_modifiers: dict[str, str] = Field(
        default_factory=dict,
        description="Damage modifiers keyed by label (e.g. 'Damage Resistances')",
    )
    languages: str = ""
    senses: dict[str, Any] = Field(default_factory=dict)
    proficiency: int = 2
    abilities: dict[str, AbilityData] | None = None
    legendary_actions: dict[str, AbilityData] | None = None
    spells: dict[str, list[str]] | None = Field(
        default=None,
        description="Spell names grouped by category (e.g. 'At will', '1/day')",
    )


# ---------------------------------------------------------------------------
# Creature record (output)
# ---------------------------------------------------------------------------

class AbilityScoreEntry(BaseModel):
    value: int | float
    proficient: Literal[0, 1] = 0
    prof: int


class SkillEntry(BaseModel):
    value: int


class CustomValue(BaseModel):
    custom: str


class ValueField(BaseModel):
    value: Any = None


class TraitRecord(BaseModel):
    """Traits of the creature: damage modifiers, size, languages, senses.

    Damage-modifier keys are a declared set (resistance, immunity,
    vulnerability, condition immunity); absent modifiers stay ``None``.
    """

    dr: CustomValue | None = None
    di: CustomValue | None = None
    dv: CustomValue | None = None
    ci: CustomValue | None = None
    size: str = "med"
    languages: CustomValue = Field(default_factory=lambda: CustomValue(custom=""))
    senses: Any = None


class DetailRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    alignment: str = ""
    type: str = ""
    cr: float | int | str | None = None
    xp: ValueField = Field(default_factory=ValueField)
    spell_level: int | None = Field(default=None, alias="spellLevel")


class HitPoints(BaseModel):
    value: int
    max: int
    formula: str = ""


class AttributeRecord(BaseModel):
    ac: ValueField
    hp: HitPoints
    speed: Any = None
    prof: int
    spellcasting: str | None = None


class CreatureData(BaseModel):
    abilities: dict[str, AbilityScoreEntry] = Field(default_factory=dict)
    attributes: AttributeRecord
    details: DetailRecord
    traits: TraitRecord
    skills: dict[str, SkillEntry] = Field(default_factory=dict)


class CreatureRecord(BaseModel):
    """Top-level creature document submitted to the store."""

    name: str
    type: Literal["npc"] = "npc"
    img: str = ""
    sort: int = 12000
    data: CreatureData
    token: dict[str, Any] = Field(default_factory=dict)
    items: list[dict[str, Any]] = Field(default_factory=list)
    flags: dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Serialize with store-side key names, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Embedded items (output)
# ---------------------------------------------------------------------------

class Activation(BaseModel):
    type: str = ""
    cost: int = 0
    condition: str = ""


class Description(BaseModel):
    value: str = ""


class DamageParts(BaseModel):
    parts: list[list[Any]] = Field(default_factory=list)


class ItemData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: Description = Field(default_factory=Description)
    activation: Activation = Field(default_factory=Activation)
    ability: str | None = None
    action_type: str | None = Field(default=None, alias="actionType")
    damage: DamageParts = Field(default_factory=DamageParts)
    save: dict[str, Any] | None = None
    equipped: bool = True
    range: dict[str, Any] | None = None
    target: dict[str, Any] | None = None


class ItemRecord(BaseModel):
    """An owned item built from one ability or legendary action."""

    name: str
    type: Literal["weapon", "feat"]
    data: ItemData

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SpellEntity(BaseModel):
    """A spell retrieved from a catalog."""

    index: str
    name: str
    level: int = Field(default=0, ge=0, le=9)
    school: str = ""
    casting_time: str = ""
    range: str = ""
    duration: str = ""
    components: list[str] = Field(default_factory=list)
    material: str | None = None
    ritual: bool = False
    concentration: bool = False
    desc: str = ""
    higher_level: str | None = None
    source: str = Field(default="", description="ID of the catalog the spell came from")

    def to_item(self) -> dict[str, Any]:
        """Convert to an owned-item payload for the store."""
        return {
            "name": self.name,
            "type": "spell",
            "data": {
                "description": {"value": self.desc},
                "level": self.level,
                "school": self.school,
                "activation": {"type": self.casting_time},
                "range": {"value": self.range},
                "duration": {"value": self.duration},
                "components": {
                    "vocal": "V" in self.components,
                    "somatic": "S" in self.components,
                    "material": "M" in self.components,
                    "ritual": self.ritual,
                    "concentration": self.concentration,
                },
                "materials": {"value": self.material or ""},
                "source": self.source,
            },
        }


# ---------------------------------------------------------------------------
# Store-facing types
# ---------------------------------------------------------------------------

class EmbeddedKind(str, Enum):
    """Kind of embedded record attached to a creature."""
    OWNED_ITEM = "OwnedItem"
    ACTIVE_EFFECT = "ActiveEffect"


class CreatureHandle(BaseModel):
    """Reference to a creature created by the store."""

    id: str
    name: str

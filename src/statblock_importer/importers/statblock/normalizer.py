"""
Builders that normalize extracted statblock primitives into the creature schema.

Each builder is independent and pure. ``make_details`` and
``make_attributes`` read the creature's ``Spellcasting`` ability (if any)
for the caster level and spellcasting modifier.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from ...models import (
    AbilityData,
    AbilityScoreEntry,
    AttributeRecord,
    CreatureData,
    CustomValue,
    DetailRecord,
    HitPoints,
    SkillEntry,
    StatBlockPrimitives,
    TraitRecord,
    ValueField,
)
from ..base import NormalizationError
from .schema import (
    SPELLCASTING_ABILITY,
    convert_resistance,
    convert_size,
    shorten_ability,
    shorten_skill,
)

logger = logging.getLogger("statblock-importer")


def _to_number(value: int | float | str) -> int | float:
    """Coerce a score to a number, keeping integral values as int."""
    number = float(value)
    return int(number) if number.is_integer() else number


def _spellcasting_payload(abilities: Mapping[str, AbilityData] | None):
    if not abilities:
        return None
    spellcasting = abilities.get(SPELLCASTING_ABILITY)
    return spellcasting.data if spellcasting else None


def make_abilities(
    stats: Mapping[str, int | str],
    saves: Mapping[str, Any] | None,
    proficiency: int,
) -> dict[str, AbilityScoreEntry]:
    """Build the ability score structure.

    Args:
        stats: Ability scores keyed by ability (e.g. {"STR": "10"}).
        saves: Saving-throw flags keyed the same way; a truthy flag marks
            the creature as proficient in that save.
        proficiency: Creature proficiency bonus.

    Returns:
        Ability entries keyed by the lowercased ability key.
    """
    abilities: dict[str, AbilityScoreEntry] = {}
    for stat, score in stats.items():
        proficient = 1 if saves and saves.get(stat) else 0
        abilities[stat.lower()] = AbilityScoreEntry(
            value=_to_number(score),
            proficient=proficient,
            prof=proficiency,
        )
    return abilities


def make_skills(skills: Mapping[str, int], proficiency: int) -> dict[str, SkillEntry]:
    """Build the skills structure.

    The stored value is floor(raw bonus / proficiency), a proficiency rank
    derived from the raw bonus shown in the statblock.

    Raises:
        NormalizationError: If proficiency is zero.
    """
    if not proficiency:
        raise NormalizationError(
            "Proficiency bonus must be non-zero to derive skill values. "
            "Check the proficiency field of the statblock."
        )

    return {
        shorten_skill(skill): SkillEntry(value=math.floor(bonus / proficiency))
        for skill, bonus in skills.items()
    }


def make_resistances(modifiers: Mapping[str, str]) -> dict[str, CustomValue]:
    """Build the damage-modifier entries keyed by trait key (dr, di, dv, ci)."""
    structure: dict[str, CustomValue] = {}
    for heading, value in modifiers.items():
        key = convert_resistance(heading)
        if key is None:
            logger.warning(f"Unknown damage modifier '{heading}', skipping")
            continue
        structure[key] = CustomValue(custom=value)
    return structure


def make_traits(primitives: StatBlockPrimitives) -> TraitRecord:
    """Build the traits structure: damage modifiers, size, languages, senses."""
    return TraitRecord(
        **make_resistances(primitives.damage_modifiers),
        size=convert_size(primitives.size),
        languages=CustomValue(custom=primitives.languages.lower()),
        senses=primitives.senses.get("vision"),
    )


def make_details(
    primitives: StatBlockPrimitives,
    abilities: Mapping[str, AbilityData] | None,
) -> DetailRecord:
    """Build the details structure.

    Args:
        primitives: Extracted statblock primitives.
        abilities: The creature's ability map, used to read the caster level
            of its ``Spellcasting`` entry.
    """
    spellcasting = _spellcasting_payload(abilities)
    return DetailRecord(
        alignment=primitives.alignment,
        type=primitives.race,
        cr=primitives.cr,
        xp=ValueField(value=primitives.xp),
        spell_level=spellcasting.level if spellcasting else None,
    )


def make_hp(primitives: StatBlockPrimitives) -> HitPoints:
    return HitPoints(
        value=primitives.hp,
        max=primitives.hp,
        formula=primitives.hp_formula,
    )


def make_attributes(
    primitives: StatBlockPrimitives,
    proficiency: int,
    abilities: Mapping[str, AbilityData] | None,
) -> AttributeRecord:
    """Build the attributes structure (AC, HP, speed, proficiency, spellcasting)."""
    spellcasting = _spellcasting_payload(abilities)
    return AttributeRecord(
        ac=ValueField(value=primitives.ac),
        hp=make_hp(primitives),
        speed=primitives.speed,
        prof=proficiency,
        spellcasting=shorten_ability(spellcasting.modifier) if spellcasting else None,
    )


def make_creature_data(primitives: StatBlockPrimitives) -> CreatureData:
    """Compose all sub-structures of the creature data.

    Raises:
        NormalizationError: If the proficiency bonus is zero.
    """
    proficiency = primitives.proficiency
    abilities = primitives.abilities

    return CreatureData(
        abilities=make_abilities(primitives.stats, primitives.saves, proficiency),
        attributes=make_attributes(primitives, proficiency, abilities),
        details=make_details(primitives, abilities),
        traits=make_traits(primitives),
        skills=make_skills(primitives.skills, proficiency),
    )

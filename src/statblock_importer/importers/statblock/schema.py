"""
Statblock schema constants, lookup tables and formatting helpers.

These map the labels produced by the extraction adapter (full skill and
ability names, size words, damage-modifier headings) to the short keys used
by the creature document.
"""

import math

# ---------------------------------------------------------------------------
# Abilities
# ---------------------------------------------------------------------------

ABILITY_ABBREVIATIONS: dict[str, str] = {
    "strength": "str",
    "dexterity": "dex",
    "constitution": "con",
    "intelligence": "int",
    "wisdom": "wis",
    "charisma": "cha",
}

# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

SKILL_ABBREVIATIONS: dict[str, str] = {
    "acrobatics": "acr",
    "animal handling": "ani",
    "arcana": "arc",
    "athletics": "ath",
    "deception": "dec",
    "history": "his",
    "insight": "ins",
    "intimidation": "itm",
    "investigation": "inv",
    "medicine": "med",
    "nature": "nat",
    "perception": "prc",
    "performance": "prf",
    "persuasion": "per",
    "religion": "rel",
    "sleight of hand": "slt",
    "stealth": "ste",
    "survival": "sur",
}

# ---------------------------------------------------------------------------
# Sizes
# ---------------------------------------------------------------------------

SIZE_TOKENS: dict[str, str] = {
    "tiny": "tiny",
    "small": "sm",
    "medium": "med",
    "large": "lg",
    "huge": "huge",
    "gargantuan": "grg",
}

# ---------------------------------------------------------------------------
# Damage modifiers (heading -> trait key)
# ---------------------------------------------------------------------------

RESISTANCE_KEYS: dict[str, str] = {
    "damage resistances": "dr",
    "damage immunities": "di",
    "damage vulnerabilities": "dv",
    "condition immunities": "ci",
}

# Ability whose data carries the caster level and spellcasting modifier
SPELLCASTING_ABILITY = "Spellcasting"

# Action type tag given to weapon-style items
WEAPON_ACTION_TYPE = "mwak"


def ability_modifier(score: int | float | str) -> int:
    """Return the standard ability modifier, floor((score - 10) / 2)."""
    return math.floor((float(score) - 10) / 2)


def shorten_skill(skill: str) -> str:
    """Convert a full skill name to its short key.

    Unknown names fall back to their first three letters, lowercased.
    """
    key = " ".join(skill.lower().split())
    return SKILL_ABBREVIATIONS.get(key, key.replace(" ", "")[:3])


def shorten_ability(ability: str | None) -> str | None:
    """Convert an ability name ("Intelligence", "INT") to its short key."""
    if not ability:
        return None
    key = ability.strip().lower()
    return ABILITY_ABBREVIATIONS.get(key, key[:3])


def convert_resistance(heading: str) -> str | None:
    """Map a damage-modifier heading to its trait key, or None if unknown."""
    return RESISTANCE_KEYS.get(" ".join(heading.lower().split()))


def convert_size(size: str | None) -> str:
    """Map a size word to its size token. Unknown sizes default to medium."""
    if not size:
        return SIZE_TOKENS["medium"]
    return SIZE_TOKENS.get(size.strip().lower(), SIZE_TOKENS["medium"])

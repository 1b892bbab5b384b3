"""
Inference of attributes a statblock does not state explicitly.

All functions are pure and total: missing nested data yields the
"nothing inferred" result instead of raising.
"""

from __future__ import annotations

from typing import Any, Mapping

from ...models import AbilityData, Activation
from .schema import ability_modifier


def _first_damage_entry(ability: AbilityData | None) -> list[Any] | None:
    if ability is None or ability.data is None or not ability.data.damage:
        return None
    return ability.data.damage[0]


def _to_hit(entry: list[Any] | None) -> Any:
    if entry is None or len(entry) < 3:
        return None
    return entry[2]


def infer_attack_ability(
    ability: AbilityData | None,
    stats: Mapping[str, int | str],
) -> str | None:
    """Return the ability key whose modifier equals the recorded to-hit bonus.

    Keys are tried in the mapping's insertion order, so the first matching
    ability wins when several share a modifier.

    Args:
        ability: The ability to inspect.
        stats: Creature ability scores keyed by ability.

    Returns:
        The lowercased ability key, or None when there is no damage entry,
        the to-hit value is not numeric, or no ability matches.
    """
    to_hit = _to_hit(_first_damage_entry(ability))
    if to_hit is None:
        return None

    try:
        bonus = float(to_hit)
    except (TypeError, ValueError):
        return None

    for key, score in stats.items():
        try:
            if ability_modifier(score) == bonus:
                return key.lower()
        except (TypeError, ValueError):
            continue
    return None


def infer_activation(ability: AbilityData | None) -> Activation:
    """Return how an ability is activated.

    A legendary-action cost makes it a legendary activation with that cost;
    otherwise damage entries or a save make it a one-action activation;
    anything else is a passive feature.
    """
    if ability is None:
        return Activation()

    if ability.cost:
        return Activation(type="legendary", cost=ability.cost)

    if ability.data is not None and (ability.data.damage or ability.data.save):
        return Activation(type="action", cost=1)

    return Activation()


def infer_item_type(ability: AbilityData | None) -> str:
    """Return "weapon" if the first damage entry has a to-hit value, else "feat"."""
    return "weapon" if _to_hit(_first_damage_entry(ability)) is not None else "feat"

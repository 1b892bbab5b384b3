"""
Build owned item records from statblock abilities and legendary actions.
"""

from __future__ import annotations

from typing import Any, Mapping

from ...models import (
    AbilityData,
    DamageParts,
    Description,
    ItemData,
    ItemRecord,
    RangeData,
)
from .inference import infer_activation, infer_attack_ability, infer_item_type
from .schema import WEAPON_ACTION_TYPE


def clean_damage_parts(damage: list[list[Any]] | None) -> list[list[Any]]:
    """Return the damage tuples without their trailing to-hit element.

    The input is left untouched; a new list of new tuples is returned.
    """
    if not damage:
        return []
    return [list(part[:-1]) for part in damage]


def _to_number(value: Any) -> int | float | None:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return int(number) if number.is_integer() else number


def make_range_target(range_data: RangeData | None) -> dict[str, Any]:
    """Build the range and target fields of an item.

    A single range carrying an area ``type`` is a self-centred effect: the
    single range becomes the target and the range is "self". Otherwise the
    numeric range comes from the short/long pair when it has a short value,
    else from the single range value.

    Returns:
        A dict with ``range`` and optionally ``target``; empty when there is
        no range data.
    """
    if range_data is None:
        return {}

    single = range_data.single_range or {}
    double = range_data.double_range or {}

    if single.get("type"):
        return {
            "target": dict(single),
            "range": {"value": None, "long": None, "units": "self"},
        }

    if double.get("short"):
        return {
            "range": {
                "value": _to_number(double.get("short")),
                "long": _to_number(double.get("long")),
                "units": double.get("units", "ft"),
            }
        }

    return {
        "range": {
            "value": _to_number(single.get("value")),
            "long": None,
            "units": single.get("units", "ft"),
        }
    }


def build_item(
    name: str,
    ability: AbilityData,
    stats: Mapping[str, int | str],
) -> ItemRecord:
    """Build the item record for one ability.

    Args:
        name: Ability name, used as the item name.
        ability: Extracted ability data.
        stats: Creature ability scores, for attack ability inference.

    Returns:
        A weapon item when the first damage entry carries a to-hit value,
        otherwise a feat.
    """
    item_type = infer_item_type(ability)
    payload = ability.data

    data = ItemData(
        description=Description(value=ability.description),
        activation=infer_activation(ability),
        ability=infer_attack_ability(ability, stats),
        action_type=WEAPON_ACTION_TYPE if item_type == "weapon" else None,
        damage=DamageParts(parts=clean_damage_parts(payload.damage if payload else None)),
        save=payload.save if payload else None,
        equipped=True,
        **make_range_target(payload.range if payload else None),
    )

    return ItemRecord(name=name, type=item_type, data=data)

"""
Narration of damage outcomes.
"""

from __future__ import annotations

from pocketbattle.battle.damage import DamageDetails

CRITICAL_HIT = "A critical hit!"
SUPER_EFFECTIVE = "That's super effective!"
NOT_VERY_EFFECTIVE = "That was not very effective.."


def narrate(details: DamageDetails) -> list[str]:
    """Lines to show after a hit, in display order. May be empty."""
    lines = []

    if details.critical > 1.0:
        lines.append(CRITICAL_HIT)

    if details.type_effectiveness > 1:
        lines.append(SUPER_EFFECTIVE)
    elif details.type_effectiveness < 1:
        lines.append(NOT_VERY_EFFECTIVE)

    return lines

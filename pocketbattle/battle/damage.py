"""
Damage resolution - HP delta and qualitative outcome of one move use.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Optional, Protocol

from pocketbattle.creatures import Creature, Move, TypeChart


@dataclass(frozen=True)
class DamageDetails:
    """
    Outcome of one move use.

    Attributes:
        fainted: The defender reached 0 HP with this hit
        critical: Critical multiplier (> 1.0 only on a critical hit)
        type_effectiveness: Combined type multiplier against the defender
    """
    fainted: bool = False
    critical: float = 1.0
    type_effectiveness: float = 1.0


class DamageResolver(Protocol):
    """Computes and applies the damage of one move use."""

    def resolve(self, move: Move, attacker: Creature, defender: Creature) -> DamageDetails:
        ...


class StandardDamageResolver:
    """
    Classic formula:

        a = (2 * level + 10) / 250
        d = a * power * (attack / defense) + 2
        damage = floor(d * random(0.85, 1.0) * type * critical)

    Any hit that is not fully resisted deals at least 1 damage. Immune
    defenders (effectiveness 0) take none, so a battle in which neither
    side can damage the other never ends.

    Mutates only the defender's HP.
    """

    CRITICAL_CHANCE = 0.0625
    CRITICAL_MULTIPLIER = 2.0

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def resolve(self, move: Move, attacker: Creature, defender: Creature) -> DamageDetails:
        critical = 1.0
        if self._rng.random() <= self.CRITICAL_CHANCE:
            critical = self.CRITICAL_MULTIPLIER

        type_effectiveness = (
            TypeChart.get_effectiveness(move.base.type, defender.base.type1)
            * TypeChart.get_effectiveness(move.base.type, defender.base.type2)
        )

        modifiers = self._rng.uniform(0.85, 1.0) * type_effectiveness * critical
        a = (2 * attacker.level + 10) / 250
        d = a * move.base.power * (attacker.attack / defender.defense) + 2
        damage = math.floor(d * modifiers)
        if type_effectiveness > 0:
            damage = max(1, damage)

        fainted = defender.take_damage(damage)

        return DamageDetails(
            fainted=fainted,
            critical=critical,
            type_effectiveness=type_effectiveness,
        )

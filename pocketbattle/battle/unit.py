"""
Battle units - one side's creature plus its on-screen view.
"""

from __future__ import annotations

from typing import Awaitable, Optional

from pocketbattle.battle.presentation import UnitView
from pocketbattle.creatures import Creature


class BattleUnit:
    """
    A participant in battle.

    Bound to a creature once per battle; the view plays its animations.
    """

    def __init__(self, view: UnitView, is_player_unit: bool):
        self.view = view
        self.is_player_unit = is_player_unit
        self._creature: Optional[Creature] = None

    @property
    def creature(self) -> Creature:
        if self._creature is None:
            side = "player" if self.is_player_unit else "enemy"
            raise RuntimeError(f"The {side} unit has no creature bound")
        return self._creature

    @property
    def is_bound(self) -> bool:
        return self._creature is not None

    def bind(self, creature: Creature) -> None:
        """Attach the creature for this battle and reset the view."""
        self._creature = creature
        self.view.setup(creature)

    def unbind(self) -> None:
        self._creature = None

    def play_attack_animation(self) -> Awaitable[None]:
        return self.view.play_attack_animation()

    def play_hit_animation(self) -> Awaitable[None]:
        return self.view.play_hit_animation()

    def play_faint_animation(self) -> Awaitable[None]:
        return self.view.play_faint_animation()

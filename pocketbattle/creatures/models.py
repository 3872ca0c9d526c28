"""
Creature and move models.

Static definitions (species, moves) are Pydantic models: validated on
load, immutable afterwards. Runtime instances (a creature with its
current HP, a move with its remaining PP) are plain dataclasses that
reference those definitions.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pocketbattle.creatures.types import CreatureType

MAX_MOVES = 4


class MoveBase(BaseModel):
    """
    Static move definition.

    Attributes:
        name: Display name
        description: Flavor text
        type: Elemental type
        power: Base power used by the damage formula
        accuracy: Hit chance in percent
        pp: Maximum number of uses
    """
    model_config = ConfigDict(extra='forbid', frozen=True)

    name: str
    description: str = ""
    type: CreatureType = CreatureType.NORMAL
    power: int = Field(default=40, ge=0)
    accuracy: int = Field(default=100, ge=0, le=100)
    pp: int = Field(default=35, ge=1)


class LearnableMove(BaseModel):
    """A move a species learns upon reaching a level."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    move: MoveBase
    level: int = Field(default=1, ge=1, le=100)


class CreatureBase(BaseModel):
    """
    Static species definition.

    Stats are base values; the level-scaled values live on Creature.
    """
    model_config = ConfigDict(extra='forbid', frozen=True)

    name: str
    description: str = ""
    type1: CreatureType = CreatureType.NORMAL
    type2: CreatureType = CreatureType.NONE

    max_hp: int = Field(default=40, ge=1)
    attack: int = Field(default=40, ge=1)
    defense: int = Field(default=40, ge=1)
    sp_attack: int = Field(default=40, ge=1)
    sp_defense: int = Field(default=40, ge=1)
    speed: int = Field(default=40, ge=1)

    learnable_moves: list[LearnableMove] = Field(default_factory=list)


@dataclass
class Move:
    """A move slot on a creature: definition plus remaining uses."""
    base: MoveBase
    pp: Optional[int] = None

    def __post_init__(self):
        if self.pp is None:
            self.pp = self.base.pp
        if self.pp < 0:
            raise ValueError(f"PP cannot be negative: {self.pp}")

    @property
    def name(self) -> str:
        return self.base.name

    @property
    def max_pp(self) -> int:
        return self.base.pp

    @property
    def is_exhausted(self) -> bool:
        return self.pp == 0

    def use(self) -> None:
        """Spend one use. Exhausted moves stay at 0."""
        if self.pp > 0:
            self.pp -= 1


def _scaled(stat: int, level: int) -> int:
    return math.floor(stat * level / 100) + 5


@dataclass
class Creature:
    """
    A battling creature.

    Moves default to the last MAX_MOVES learnable moves at or below
    the creature's level, in learn order.
    """
    base: CreatureBase
    level: int
    moves: list[Move] = field(default_factory=list)
    hp: Optional[int] = None

    def __post_init__(self):
        if not 1 <= self.level <= 100:
            raise ValueError(f"Level out of range: {self.level}")

        if not self.moves:
            learned = [lm for lm in self.base.learnable_moves if lm.level <= self.level]
            self.moves = [Move(lm.move) for lm in learned[-MAX_MOVES:]]

        if len(self.moves) > MAX_MOVES:
            raise ValueError(f"A creature knows at most {MAX_MOVES} moves")

        if self.hp is None:
            self.hp = self.max_hp
        self.hp = max(0, min(self.hp, self.max_hp))

    @property
    def name(self) -> str:
        return self.base.name

    @property
    def max_hp(self) -> int:
        return math.floor(self.base.max_hp * self.level / 100) + 10

    @property
    def attack(self) -> int:
        return _scaled(self.base.attack, self.level)

    @property
    def defense(self) -> int:
        return _scaled(self.base.defense, self.level)

    @property
    def sp_attack(self) -> int:
        return _scaled(self.base.sp_attack, self.level)

    @property
    def sp_defense(self) -> int:
        return _scaled(self.base.sp_defense, self.level)

    @property
    def speed(self) -> int:
        return _scaled(self.base.speed, self.level)

    @property
    def is_fainted(self) -> bool:
        return self.hp == 0

    @property
    def hp_percent(self) -> float:
        return self.hp / self.max_hp

    def take_damage(self, amount: int) -> bool:
        """
        Lose HP, clamped at 0.

        Returns:
            True if this brought the creature to 0 HP
        """
        self.hp = max(0, self.hp - max(0, amount))
        return self.hp == 0

    def get_random_move(self, rng: random.Random | None = None) -> Move:
        """Pick any known move, remaining PP not considered."""
        return (rng or random).choice(self.moves)

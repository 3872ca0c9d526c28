"""
Creatures module - species, moves, types and the data loader.
"""

from pocketbattle.creatures.types import CreatureType, TypeChart
from pocketbattle.creatures.models import (
    MAX_MOVES,
    MoveBase,
    LearnableMove,
    CreatureBase,
    Move,
    Creature,
)
from pocketbattle.creatures.database import CreatureDatabase

__all__ = [
    "CreatureType",
    "TypeChart",
    "MAX_MOVES",
    "MoveBase",
    "LearnableMove",
    "CreatureBase",
    "Move",
    "Creature",
    "CreatureDatabase",
]

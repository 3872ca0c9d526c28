"""
Elemental types and the type effectiveness chart.
"""

from __future__ import annotations

from enum import Enum


class CreatureType(str, Enum):
    """Elemental type of a creature or a move."""
    NONE = "none"
    NORMAL = "normal"
    FIRE = "fire"
    WATER = "water"
    ELECTRIC = "electric"
    GRASS = "grass"
    ICE = "ice"
    FIGHTING = "fighting"
    POISON = "poison"
    GROUND = "ground"
    FLYING = "flying"
    PSYCHIC = "psychic"
    BUG = "bug"
    ROCK = "rock"
    GHOST = "ghost"
    DRAGON = "dragon"


T = CreatureType

# attack type -> defense type -> multiplier; missing pairs are neutral
_CHART: dict[CreatureType, dict[CreatureType, float]] = {
    T.NORMAL:   {T.ROCK: 0.5, T.GHOST: 0.0},
    T.FIRE:     {T.FIRE: 0.5, T.WATER: 0.5, T.GRASS: 2.0, T.ICE: 2.0, T.BUG: 2.0,
                 T.ROCK: 0.5, T.DRAGON: 0.5},
    T.WATER:    {T.FIRE: 2.0, T.WATER: 0.5, T.GRASS: 0.5, T.GROUND: 2.0, T.ROCK: 2.0,
                 T.DRAGON: 0.5},
    T.ELECTRIC: {T.WATER: 2.0, T.ELECTRIC: 0.5, T.GRASS: 0.5, T.GROUND: 0.0,
                 T.FLYING: 2.0, T.DRAGON: 0.5},
    T.GRASS:    {T.FIRE: 0.5, T.WATER: 2.0, T.GRASS: 0.5, T.POISON: 0.5, T.GROUND: 2.0,
                 T.FLYING: 0.5, T.BUG: 0.5, T.ROCK: 2.0, T.DRAGON: 0.5},
    T.ICE:      {T.FIRE: 0.5, T.WATER: 0.5, T.GRASS: 2.0, T.ICE: 0.5, T.GROUND: 2.0,
                 T.FLYING: 2.0, T.DRAGON: 2.0},
    T.FIGHTING: {T.NORMAL: 2.0, T.ICE: 2.0, T.POISON: 0.5, T.FLYING: 0.5,
                 T.PSYCHIC: 0.5, T.BUG: 0.5, T.ROCK: 2.0, T.GHOST: 0.0},
    T.POISON:   {T.GRASS: 2.0, T.POISON: 0.5, T.GROUND: 0.5, T.ROCK: 0.5, T.GHOST: 0.5},
    T.GROUND:   {T.FIRE: 2.0, T.ELECTRIC: 2.0, T.GRASS: 0.5, T.POISON: 2.0,
                 T.FLYING: 0.0, T.BUG: 0.5, T.ROCK: 2.0},
    T.FLYING:   {T.ELECTRIC: 0.5, T.GRASS: 2.0, T.FIGHTING: 2.0, T.BUG: 2.0, T.ROCK: 0.5},
    T.PSYCHIC:  {T.FIGHTING: 2.0, T.POISON: 2.0, T.PSYCHIC: 0.5},
    T.BUG:      {T.FIRE: 0.5, T.GRASS: 2.0, T.FIGHTING: 0.5, T.POISON: 0.5,
                 T.FLYING: 0.5, T.PSYCHIC: 2.0, T.GHOST: 0.5},
    T.ROCK:     {T.FIRE: 2.0, T.ICE: 2.0, T.FIGHTING: 0.5, T.GROUND: 0.5,
                 T.FLYING: 2.0, T.BUG: 2.0},
    T.GHOST:    {T.NORMAL: 0.0, T.PSYCHIC: 2.0, T.GHOST: 2.0},
    T.DRAGON:   {T.DRAGON: 2.0},
}

del T


class TypeChart:
    """Lookup for type effectiveness multipliers."""

    @staticmethod
    def get_effectiveness(attack_type: CreatureType, defense_type: CreatureType) -> float:
        """
        Multiplier for an attack of one type hitting a defender type.

        NONE on either side is neutral (single-typed creatures carry
        NONE as their second type).
        """
        if attack_type == CreatureType.NONE or defense_type == CreatureType.NONE:
            return 1.0
        return _CHART.get(attack_type, {}).get(defense_type, 1.0)

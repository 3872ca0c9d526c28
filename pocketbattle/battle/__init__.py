"""
Battle module - one-on-one turn-based wild encounters.

Provides:
- Battle state machine and move sequences
- Action and move selection
- Damage resolution and narration
- Tick-driven battle widgets
"""

from pocketbattle.battle.config import BattleConfig
from pocketbattle.battle.damage import (
    DamageDetails,
    DamageResolver,
    StandardDamageResolver,
)
from pocketbattle.battle.narration import narrate
from pocketbattle.battle.selection import (
    FIGHT,
    RUN,
    Direction,
    SelectionController,
)
from pocketbattle.battle.unit import BattleUnit
from pocketbattle.battle.system import (
    BattleSystem,
    BattleState,
    BattleEvent,
    MovePolicy,
    random_move_policy,
)
from pocketbattle.battle.ui import (
    BattleDialogBox,
    BattleHud,
    UnitSprite,
    UnitAnimation,
    BattleTimer,
)

__all__ = [
    # Config
    "BattleConfig",
    # Damage
    "DamageDetails",
    "DamageResolver",
    "StandardDamageResolver",
    "narrate",
    # Selection
    "FIGHT",
    "RUN",
    "Direction",
    "SelectionController",
    # System
    "BattleUnit",
    "BattleSystem",
    "BattleState",
    "BattleEvent",
    "MovePolicy",
    "random_move_policy",
    # Widgets
    "BattleDialogBox",
    "BattleHud",
    "UnitSprite",
    "UnitAnimation",
    "BattleTimer",
]

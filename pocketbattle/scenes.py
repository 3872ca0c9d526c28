"""
Game scenes: the overworld and the battle.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable, Optional

from engine.core.actions import Action
from engine.core.events import EventBus
from engine.core.scene import Scene
from engine.input.handler import InputHandler
from pocketbattle.battle import (
    BattleConfig,
    BattleDialogBox,
    BattleHud,
    BattleSystem,
    BattleTimer,
    BattleUnit,
    DamageResolver,
    MovePolicy,
    UnitSprite,
)
from pocketbattle.creatures import Creature

logger = logging.getLogger(__name__)

MOVE_ACTIONS = (Action.MENU_UP, Action.MENU_DOWN, Action.MENU_LEFT, Action.MENU_RIGHT)


class OverworldScene(Scene):
    """
    Free roaming.

    Each step (a direction pressed this tick) may trigger a wild
    encounter with probability encounter_rate. Movement itself is not
    simulated; the camera flag follows whether the scene is on top.
    """

    name = "overworld"

    def __init__(
        self,
        input_handler: InputHandler,
        encounter_rate: float = 0.1,
        rng: Optional[random.Random] = None,
    ):
        super().__init__()
        self.input = input_handler
        self.encounter_rate = encounter_rate
        self._rng = rng or random.Random()

        self.camera_active = False
        self.steps = 0

        self.on_encountered: Optional[Callable[[], None]] = None

    def on_enter(self) -> None:
        super().on_enter()
        self.camera_active = True

    def on_exit(self) -> None:
        super().on_exit()
        self.camera_active = False

    def update(self, dt: float) -> None:
        if not any(self.input.is_action_just_pressed(a) for a in MOVE_ACTIONS):
            return

        self.steps += 1
        if self._rng.random() < self.encounter_rate:
            self.trigger_encounter()

    def trigger_encounter(self) -> None:
        """Report a wild encounter to whoever listens."""
        logger.debug("Encounter after %d steps", self.steps)
        if self.on_encountered:
            self.on_encountered()


class BattleScene(Scene):
    """
    Battle view: widgets, units and the battle system wired together.

    Per tick the battle polls input first, then every widget advances,
    which resolves whatever the running sequence is waiting on.
    """

    name = "battle"

    def __init__(
        self,
        input_handler: InputHandler,
        config: Optional[BattleConfig] = None,
        events: Optional[EventBus] = None,
        resolver: Optional[DamageResolver] = None,
        move_policy: Optional[MovePolicy] = None,
    ):
        super().__init__()
        self.input = input_handler
        self.config = config or BattleConfig()

        # Widgets
        self.dialog_box = BattleDialogBox(self.config)
        self.player_hud = BattleHud(self.config)
        self.enemy_hud = BattleHud(self.config)
        self.player_sprite = UnitSprite(is_player_unit=True, config=self.config)
        self.enemy_sprite = UnitSprite(is_player_unit=False, config=self.config)
        self.timer = BattleTimer()

        self.player_unit = BattleUnit(self.player_sprite, is_player_unit=True)
        self.enemy_unit = BattleUnit(self.enemy_sprite, is_player_unit=False)

        self.battle = BattleSystem(
            self.player_unit,
            self.enemy_unit,
            self.player_hud,
            self.enemy_hud,
            self.dialog_box,
            resolver=resolver,
            move_policy=move_policy,
            clock=self.timer.wait,
            config=self.config,
            events=events,
        )

        self.view_active = False

    def start(self, player: Creature, enemy: Creature) -> asyncio.Future[bool]:
        return self.battle.start_battle(player, enemy)

    def on_enter(self) -> None:
        super().on_enter()
        self.view_active = True

    def on_exit(self) -> None:
        super().on_exit()
        self.view_active = False

    def on_destroy(self) -> None:
        self.timer.cancel_all()
        self.player_unit.unbind()
        self.enemy_unit.unbind()

    def update(self, dt: float) -> None:
        self.battle.handle_update(self.input)

        self.dialog_box.update(dt)
        self.player_hud.update(dt)
        self.enemy_hud.update(dt)
        self.player_sprite.update(dt)
        self.enemy_sprite.update(dt)
        self.timer.update(dt)

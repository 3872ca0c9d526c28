"""
Game controller - switches between free roaming and battle.
"""

from __future__ import annotations

import asyncio
import logging
import random
from enum import Enum, auto
from typing import Callable, Optional, Sequence

from engine.core.events import EventBus
from engine.core.scene import SceneManager
from engine.input.handler import InputHandler
from pocketbattle.battle import BattleConfig, DamageResolver, MovePolicy
from pocketbattle.creatures import Creature, CreatureDatabase
from pocketbattle.scenes import BattleScene, OverworldScene

logger = logging.getLogger(__name__)

CreatureFactory = Callable[[], Creature]


class GameState(Enum):
    """What the game is currently doing."""
    FREE_ROAM = auto()
    BATTLE = auto()


class GameController:
    """
    Starts a battle on every overworld encounter and returns to the
    overworld once the battle reports its result.

    Creatures are produced fresh for each battle by the factories.

    Usage:
        controller = GameController(game.scene_manager, game.input, player, wild)
        controller.start()
        await game.run()
    """

    def __init__(
        self,
        scene_manager: SceneManager,
        input_handler: InputHandler,
        player_factory: CreatureFactory,
        wild_factory: CreatureFactory,
        battle_config: Optional[BattleConfig] = None,
        events: Optional[EventBus] = None,
        resolver: Optional[DamageResolver] = None,
        move_policy: Optional[MovePolicy] = None,
        encounter_rate: float = 0.1,
        rng: Optional[random.Random] = None,
    ):
        self.scene_manager = scene_manager
        self.input = input_handler
        self.player_factory = player_factory
        self.wild_factory = wild_factory
        self.battle_config = battle_config
        self.events = events
        self.resolver = resolver
        self.move_policy = move_policy

        self.state = GameState.FREE_ROAM
        self.overworld = OverworldScene(input_handler, encounter_rate, rng)
        self.overworld.on_encountered = self.start_battle

        self.battle_scene: Optional[BattleScene] = None
        self.results: list[bool] = []

        # Called with each battle result after the overworld is back
        self.on_battle_result: Optional[Callable[[bool], None]] = None

    def start(self) -> None:
        """Put the overworld on the scene stack."""
        self.scene_manager.push(self.overworld)

    def start_battle(self) -> Optional[asyncio.Future[bool]]:
        """Enter a battle against a fresh wild creature."""
        if self.state == GameState.BATTLE:
            logger.warning("Encounter ignored: already in battle")
            return None

        player, wild = self.player_factory(), self.wild_factory()

        scene = BattleScene(
            self.input,
            config=self.battle_config,
            events=self.events,
            resolver=self.resolver,
            move_policy=self.move_policy,
        )
        scene.battle.on_battle_over(self.end_battle)

        # Raises before anything changes if a creature cannot battle
        result = scene.start(player, wild)
        result.add_done_callback(self._on_result_done)

        logger.info("Battle: %s (Lvl %d) vs wild %s (Lvl %d)",
                    player.name, player.level, wild.name, wild.level)
        self.state = GameState.BATTLE
        self.battle_scene = scene
        self.scene_manager.push(scene)
        return result

    def end_battle(self, won: bool) -> None:
        """Leave the battle scene and resume free roaming."""
        self.state = GameState.FREE_ROAM
        self.scene_manager.pop()
        self.battle_scene = None
        self.results.append(won)

        if self.on_battle_result:
            self.on_battle_result(won)

    def _on_result_done(self, future: asyncio.Future[bool]) -> None:
        if future.cancelled() or future.exception() is None:
            return
        # The battle failed without reporting a result
        logger.error("Battle aborted: %r", future.exception())
        if self.state == GameState.BATTLE:
            self.state = GameState.FREE_ROAM
            self.scene_manager.pop()
            self.battle_scene = None

    def update(self, dt: float) -> None:
        """Advance whichever scene is active."""
        self.scene_manager.update(dt)


def database_factory(
    database: CreatureDatabase,
    species: Sequence[str],
    levels: tuple[int, int],
    rng: Optional[random.Random] = None,
) -> CreatureFactory:
    """Factory creating a creature of a random species and level range."""
    rng = rng or random.Random()
    low, high = levels

    def create() -> Creature:
        return database.create_creature(rng.choice(list(species)), rng.randint(low, high))

    return create

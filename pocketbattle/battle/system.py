"""
Battle system - turn-based combat controller.

One player unit against one wild unit. The orchestrator is an explicit
state machine; each move-resolution sequence is a coroutine whose
suspension points (dialog, animations, pauses, HP bar) are awaited in
order. Per-tick input only reaches the state machine while it is in an
input-accepting state.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum, auto
from typing import Any, Callable, Coroutine, Optional, Protocol

from engine.core.actions import Action
from engine.core.events import EventBus
from pocketbattle.battle.config import BattleConfig
from pocketbattle.battle.damage import DamageDetails, DamageResolver, StandardDamageResolver
from pocketbattle.battle.narration import narrate
from pocketbattle.battle.presentation import Clock, DialogSurface, HudSurface
from pocketbattle.battle.selection import FIGHT, RUN, Direction, SelectionController
from pocketbattle.battle.unit import BattleUnit
from pocketbattle.creatures import Creature, Move

logger = logging.getLogger(__name__)

CHOOSE_ACTION = "Choose an action"


class BattleState(Enum):
    """State of the battle."""
    START = auto()
    PLAYER_ACTION = auto()
    PLAYER_MOVE = auto()
    BUSY = auto()
    ENEMY_MOVE = auto()
    TERMINATED = auto()


INPUT_STATES = frozenset({BattleState.PLAYER_ACTION, BattleState.PLAYER_MOVE})


class BattleEvent(Enum):
    """Battle notifications published on the EventBus."""
    BATTLE_STARTED = auto()     # player, enemy
    MOVE_USED = auto()          # user, move, pp, is_player
    DAMAGE_DEALT = auto()       # target, hp, max_hp, critical, type_effectiveness
    CREATURE_FAINTED = auto()   # name, is_player
    BATTLE_ENDED = auto()       # won


class ActionSource(Protocol):
    """Anything that reports per-tick button edges (InputHandler)."""

    def is_action_just_pressed(self, action: Action) -> bool:
        ...


# Picks the opponent's move for its turn
MovePolicy = Callable[[Creature], Move]


def random_move_policy(creature: Creature) -> Move:
    """Uniform over every known move, including ones with 0 PP."""
    return creature.get_random_move()


class BattleSystem:
    """
    Turn-based battle controller.

    Manages:
    - Battle setup
    - Action and move selection
    - Player and enemy move sequences
    - Faint detection and the single battle result

    Usage:
        battle = BattleSystem(player_unit, enemy_unit, player_hud, enemy_hud, dialog_box)
        result = battle.start_battle(my_creature, wild_creature)

        # Once per tick
        battle.handle_update(input_handler)

        won = await result
    """

    def __init__(
        self,
        player_unit: BattleUnit,
        enemy_unit: BattleUnit,
        player_hud: HudSurface,
        enemy_hud: HudSurface,
        dialog_box: DialogSurface,
        resolver: Optional[DamageResolver] = None,
        move_policy: Optional[MovePolicy] = None,
        clock: Optional[Clock] = None,
        config: Optional[BattleConfig] = None,
        events: Optional[EventBus] = None,
    ):
        self.player_unit = player_unit
        self.enemy_unit = enemy_unit
        self.player_hud = player_hud
        self.enemy_hud = enemy_hud
        self.dialog_box = dialog_box

        self.resolver = resolver or StandardDamageResolver()
        self.move_policy = move_policy or random_move_policy
        self.clock: Clock = clock or asyncio.sleep
        self.config = config or BattleConfig()
        self.events = events

        # State
        self.state = BattleState.START
        self.selection = SelectionController()

        # Sequences in flight; the prompt is typed without blocking input
        self._tasks: set[asyncio.Task] = set()
        self._prompt_task: Optional[asyncio.Task] = None

        # Result channel
        self._result: Optional[asyncio.Future[bool]] = None
        self._on_battle_over: Optional[Callable[[bool], None]] = None
        self._on_run: Optional[Callable[[], None]] = None

    def on_battle_over(self, callback: Callable[[bool], None]) -> None:
        """Set the consumer called once per battle with True if the player won."""
        self._on_battle_over = callback

    def on_run(self, callback: Callable[[], None]) -> None:
        """Set the hook for the Run action. Running does not end the battle."""
        self._on_run = callback

    # Setup

    def start_battle(self, player_creature: Creature, enemy_creature: Creature) -> asyncio.Future[bool]:
        """
        Start a battle. Must be called from inside the running event loop.

        Returns:
            Future resolved once with True if the player won
        """
        if self.is_active:
            logger.warning("Battle already in progress; start_battle ignored")
            return self._result

        for creature in (player_creature, enemy_creature):
            if not creature.moves:
                raise ValueError(f"{creature.name} has no moves to battle with")

        self._result = asyncio.get_running_loop().create_future()
        self._prompt_task = None
        self.selection.reset()
        self._set_state(BattleState.START)

        self.player_unit.bind(player_creature)
        self.enemy_unit.bind(enemy_creature)
        self.player_hud.set_data(player_creature)
        self.enemy_hud.set_data(enemy_creature)

        self.dialog_box.set_move_names(player_creature.moves)

        self._publish(
            BattleEvent.BATTLE_STARTED,
            player=player_creature.name,
            enemy=enemy_creature.name,
        )

        self._spawn(self._setup_battle(enemy_creature))
        return self._result

    async def _setup_battle(self, enemy_creature: Creature) -> None:
        await self.dialog_box.type_dialog(f"A wild {enemy_creature.name} appeared.")

        self._player_action()

    # State entry

    def _player_action(self) -> None:
        self._set_state(BattleState.PLAYER_ACTION)
        self._prompt_task = self._spawn(self._type(CHOOSE_ACTION))
        self.dialog_box.enable_action_selector(True)

    def _player_move(self) -> None:
        self._set_state(BattleState.PLAYER_MOVE)
        self.dialog_box.enable_action_selector(False)
        self.dialog_box.enable_dialog_text(False)
        self.dialog_box.enable_move_selector(True)

    def _player_run(self) -> None:
        logger.debug("Run selected")
        if self._on_run:
            self._on_run()

    # Input

    def handle_update(self, input_source: ActionSource) -> None:
        """Poll input once per tick. Does nothing while a sequence runs."""
        if self.state == BattleState.PLAYER_ACTION:
            self._handle_action_selection(input_source)
        elif self.state == BattleState.PLAYER_MOVE:
            self._handle_move_selection(input_source)

    def _handle_action_selection(self, input_source: ActionSource) -> None:
        if input_source.is_action_just_pressed(Action.MENU_DOWN):
            self.move_action_cursor(Direction.DOWN)
        elif input_source.is_action_just_pressed(Action.MENU_UP):
            self.move_action_cursor(Direction.UP)

        self.dialog_box.update_action_selection(self.selection.action_index)

        if input_source.is_action_just_pressed(Action.CONFIRM):
            self.confirm()

    def _handle_move_selection(self, input_source: ActionSource) -> None:
        for action, direction in (
            (Action.MENU_RIGHT, Direction.RIGHT),
            (Action.MENU_LEFT, Direction.LEFT),
            (Action.MENU_DOWN, Direction.DOWN),
            (Action.MENU_UP, Direction.UP),
        ):
            if input_source.is_action_just_pressed(action):
                self.move_move_cursor(direction)
                break

        moves = self.player_unit.creature.moves
        index = self.selection.move_index
        if 0 <= index < len(moves):
            self.dialog_box.update_move_selection(index, moves[index])

        if input_source.is_action_just_pressed(Action.CONFIRM):
            self.confirm()

    def move_action_cursor(self, direction: Direction) -> None:
        if self.state != BattleState.PLAYER_ACTION:
            return
        self.selection.move_action_cursor(direction)

    def move_move_cursor(self, direction: Direction) -> None:
        if self.state != BattleState.PLAYER_MOVE:
            return
        self.selection.move_move_cursor(direction, len(self.player_unit.creature.moves))

    def confirm(self) -> None:
        """Confirm the highlighted entry of the active menu."""
        if self.state == BattleState.PLAYER_ACTION:
            action = self.selection.action_index
            if action == FIGHT:
                self._player_move()
            elif action == RUN:
                self._player_run()
            else:
                logger.debug("Ignoring unknown action index %d", action)

        elif self.state == BattleState.PLAYER_MOVE:
            self.perform_player_move()

        else:
            logger.debug("Ignoring confirm in state %s", self.state.name)

    # Move sequences

    def perform_player_move(self) -> Optional[asyncio.Task]:
        """
        Start the player's move sequence with the highlighted move.

        Refused (returns None) unless the player is choosing a move and
        the highlighted index names one of its moves.
        """
        if self.state != BattleState.PLAYER_MOVE:
            logger.debug("Move sequence refused in state %s", self.state.name)
            return None

        moves = self.player_unit.creature.moves
        index = self.selection.move_index
        if not 0 <= index < len(moves):
            logger.debug("Move index %d out of range (%d moves)", index, len(moves))
            return None

        self.dialog_box.enable_move_selector(False)
        self.dialog_box.enable_dialog_text(True)
        self._set_state(BattleState.BUSY)

        return self._spawn(self._perform_player_move(moves[index]))

    async def _perform_player_move(self, move: Move) -> None:
        await self._finish_prompt()

        details = await self._run_move(self.player_unit, self.enemy_unit, self.enemy_hud, move)

        if details.fainted:
            enemy = self.enemy_unit.creature
            self._publish(BattleEvent.CREATURE_FAINTED, name=enemy.name, is_player=False)
            await self.dialog_box.type_dialog(f"The {enemy.name} enemy fainted")
            await self.enemy_unit.play_faint_animation()
            await self.clock(self.config.faint_pause)
            self._end_battle(True)
        else:
            await self._enemy_move()

    async def _enemy_move(self) -> None:
        self._set_state(BattleState.ENEMY_MOVE)

        move = self.move_policy(self.enemy_unit.creature)
        details = await self._run_move(self.enemy_unit, self.player_unit, self.player_hud, move)

        if details.fainted:
            player = self.player_unit.creature
            self._publish(BattleEvent.CREATURE_FAINTED, name=player.name, is_player=True)
            await self.dialog_box.type_dialog(f"Your {player.name} fainted")
            await self.player_unit.play_faint_animation()
            await self.clock(self.config.faint_pause)
            self._end_battle(False)
        else:
            self._player_action()

    async def _run_move(
        self,
        attacker_unit: BattleUnit,
        defender_unit: BattleUnit,
        defender_hud: HudSurface,
        move: Move,
    ) -> DamageDetails:
        """Shared body of a turn: announce, animate, resolve, narrate."""
        attacker = attacker_unit.creature
        defender = defender_unit.creature

        move.use()
        self._publish(
            BattleEvent.MOVE_USED,
            user=attacker.name,
            move=move.name,
            pp=move.pp,
            is_player=attacker_unit.is_player_unit,
        )
        await self.dialog_box.type_dialog(f"{attacker.name} used {move.name}")

        await attacker_unit.play_attack_animation()
        await self.clock(self.config.attack_pause)
        await defender_unit.play_hit_animation()

        details = self.resolver.resolve(move, attacker, defender)
        self._publish(
            BattleEvent.DAMAGE_DEALT,
            target=defender.name,
            hp=defender.hp,
            max_hp=defender.max_hp,
            critical=details.critical,
            type_effectiveness=details.type_effectiveness,
        )

        await defender_hud.update_hp()
        await self._show_damage_details(details)
        return details

    async def _show_damage_details(self, details: DamageDetails) -> None:
        for line in narrate(details):
            await self.dialog_box.type_dialog(line)

    def _end_battle(self, won: bool) -> None:
        self._set_state(BattleState.TERMINATED)
        logger.info("Battle over: %s", "won" if won else "lost")
        self._publish(BattleEvent.BATTLE_ENDED, won=won)

        if not self._result.done():
            self._result.set_result(won)

        if self._on_battle_over:
            self._on_battle_over(won)

    # Task plumbing

    async def _type(self, text: str) -> None:
        await self.dialog_box.type_dialog(text)

    async def _finish_prompt(self) -> None:
        """Let the non-blocking prompt finish so dialog lines never overlap."""
        if self._prompt_task is not None:
            task, self._prompt_task = self._prompt_task, None
            await task

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return

        exc = task.exception()
        if exc is None:
            return

        logger.error("Battle sequence failed in state %s", self.state.name, exc_info=exc)
        if self._result is not None and not self._result.done():
            self._result.set_exception(exc)

    def _set_state(self, state: BattleState) -> None:
        if state != self.state:
            logger.debug("Battle state %s -> %s", self.state.name, state.name)
        self.state = state

    def _publish(self, event_type: BattleEvent, **data: Any) -> None:
        if self.events:
            self.events.publish(event_type, **data)

    # Properties

    @property
    def is_active(self) -> bool:
        """A battle has been started and has not produced its result."""
        return self._result is not None and not self._result.done()

    @property
    def accepts_input(self) -> bool:
        return self.state in INPUT_STATES

    @property
    def battle_over(self) -> Optional[asyncio.Future[bool]]:
        """Result future of the current (or last) battle."""
        return self._result

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def wait_idle(self) -> None:
        """Wait for every running sequence to finish (tests, shutdown)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

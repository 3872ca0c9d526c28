"""
Battle widgets.

Tick-driven: update(dt) advances them from the scene's fixed update.
Effects the battle waits on return asyncio futures that update()
resolves once the effect has played out.
"""

from __future__ import annotations

import asyncio
from enum import Enum, auto
from typing import Callable, Optional, Sequence

from pocketbattle.battle.config import BattleConfig
from pocketbattle.battle.selection import FIGHT
from pocketbattle.creatures import MAX_MOVES, Creature, Move

EMPTY_MOVE_SLOT = "-"


def _new_future() -> asyncio.Future[None]:
    return asyncio.get_running_loop().create_future()


def _resolve(future: Optional[asyncio.Future[None]]) -> None:
    if future is not None and not future.done():
        future.set_result(None)


class BattleDialogBox:
    """
    Dialog box with typewriter text, the Fight/Run selector and the
    move grid.

    A line counts as shown once every letter is typed and it has stayed
    up for dialog_hold seconds.
    """

    def __init__(self, config: Optional[BattleConfig] = None):
        self.config = config or BattleConfig()

        # Text content
        self._full_text = ""
        self._visible_text = ""
        self._char_index = 0
        self._char_timer = 0.0
        self._hold_timer = 0.0
        self._pending: Optional[asyncio.Future[None]] = None

        # Affordances
        self.dialog_text_enabled = True
        self.action_selector_enabled = False
        self.move_selector_enabled = False

        # Selection display
        self.action_index = FIGHT
        self.move_index = 0
        self.move_names: list[str] = [EMPTY_MOVE_SLOT] * MAX_MOVES
        self.pp_text = ""
        self.type_text = ""

        # Called with each line once it has been shown
        self.on_line_complete: Optional[Callable[[str], None]] = None

    @property
    def text(self) -> str:
        return self._full_text

    @property
    def visible_text(self) -> str:
        return self._visible_text

    @property
    def is_typing(self) -> bool:
        return self._char_index < len(self._full_text)

    @property
    def is_busy(self) -> bool:
        return self._pending is not None

    def type_dialog(self, text: str) -> asyncio.Future[None]:
        """
        Start typing a line. A line still on screen is cut short and
        reported as shown.
        """
        if self._pending is not None:
            self._complete_line()

        self._full_text = text
        self._visible_text = ""
        self._char_index = 0
        self._char_timer = 0.0
        self._hold_timer = 0.0
        self._pending = _new_future()
        return self._pending

    def skip_to_end(self) -> None:
        """Instantly show the whole line."""
        self._visible_text = self._full_text
        self._char_index = len(self._full_text)

    def set_move_names(self, moves: Sequence[Move]) -> None:
        self.move_names = [
            moves[i].name if i < len(moves) else EMPTY_MOVE_SLOT
            for i in range(MAX_MOVES)
        ]

    def enable_dialog_text(self, enabled: bool) -> None:
        self.dialog_text_enabled = enabled

    def enable_action_selector(self, enabled: bool) -> None:
        self.action_selector_enabled = enabled

    def enable_move_selector(self, enabled: bool) -> None:
        self.move_selector_enabled = enabled

    def update_action_selection(self, index: int) -> None:
        self.action_index = index

    def update_move_selection(self, index: int, move: Move) -> None:
        self.move_index = index
        self.pp_text = f"PP {move.pp}/{move.max_pp}"
        self.type_text = move.base.type.value.upper()

    # Lifecycle

    def update(self, dt: float) -> None:
        """Advance the typewriter effect."""
        if self._pending is None:
            return

        if self.is_typing:
            self._char_timer += dt
            chars_to_add = int(self._char_timer * self.config.letters_per_second)
            if chars_to_add <= 0:
                return

            self._char_timer -= chars_to_add / self.config.letters_per_second
            self._char_index = min(len(self._full_text), self._char_index + chars_to_add)
            self._visible_text = self._full_text[:self._char_index]

            if self.is_typing:
                return
            # Time left over after the last letter counts towards the hold
            dt = self._char_timer
            self._char_timer = 0.0

        self._hold_timer += dt
        if self._hold_timer >= self.config.dialog_hold:
            self._complete_line()

    def _complete_line(self) -> None:
        self.skip_to_end()
        pending, self._pending = self._pending, None
        _resolve(pending)

        if self.on_line_complete:
            self.on_line_complete(self._full_text)


class BattleHud:
    """
    Name, level and HP bar of one side.

    The bar shows an animated display value that drains towards the
    creature's HP at hp_speed (fractions of the full bar per second).
    """

    def __init__(self, config: Optional[BattleConfig] = None):
        self.config = config or BattleConfig()

        self.creature: Optional[Creature] = None
        self.name_text = ""
        self.level_text = ""

        self._display_hp = 0.0
        self._pending: Optional[asyncio.Future[None]] = None

    def set_data(self, creature: Creature) -> None:
        self.creature = creature
        self.name_text = creature.name
        self.level_text = f"Lvl {creature.level}"
        self._display_hp = float(creature.hp)

        # A new battle abandons any drain still in progress
        _resolve(self._pending)
        self._pending = None

    @property
    def display_hp(self) -> float:
        return self._display_hp

    @property
    def display_percent(self) -> float:
        """Animated bar fill (0-1)."""
        if self.creature is None:
            return 0.0
        return self._display_hp / self.creature.max_hp

    def update_hp(self) -> asyncio.Future[None]:
        """Animate the bar to the creature's current HP."""
        if self.creature is None:
            raise RuntimeError("HUD has no creature; call set_data first")

        _resolve(self._pending)
        future = self._pending = _new_future()
        if self._display_hp == self.creature.hp:
            self._finish()
        return future

    def update(self, dt: float) -> None:
        if self._pending is None or self.creature is None:
            return

        target = float(self.creature.hp)
        step = self.config.hp_speed * self.creature.max_hp * dt

        if self._display_hp > target:
            self._display_hp = max(target, self._display_hp - step)
        else:
            self._display_hp = min(target, self._display_hp + step)

        if self._display_hp == target:
            self._finish()

    def _finish(self) -> None:
        pending, self._pending = self._pending, None
        _resolve(pending)


class UnitAnimation(Enum):
    """Animations a unit sprite can play."""
    ENTER = auto()
    ATTACK = auto()
    HIT = auto()
    FAINT = auto()


class UnitSprite:
    """
    Sprite of one side's creature.

    Only one animation plays at a time; starting another completes the
    running one. Fainting leaves the sprite hidden until the next setup.
    """

    def __init__(self, is_player_unit: bool, config: Optional[BattleConfig] = None):
        self.is_player_unit = is_player_unit
        self.config = config or BattleConfig()

        self.creature: Optional[Creature] = None
        self.visible = False

        self.animation: Optional[UnitAnimation] = None
        self._elapsed = 0.0
        self._duration = 0.0
        self._pending: Optional[asyncio.Future[None]] = None

    @property
    def is_animating(self) -> bool:
        return self.animation is not None

    @property
    def progress(self) -> float:
        """Progress of the running animation (0-1)."""
        if self.animation is None or self._duration <= 0:
            return 1.0
        return min(1.0, self._elapsed / self._duration)

    def setup(self, creature: Creature) -> None:
        self.creature = creature
        self._stop()
        self.visible = True
        self.animation = UnitAnimation.ENTER
        self._elapsed = 0.0
        self._duration = 0.0

    def play_attack_animation(self) -> asyncio.Future[None]:
        return self._play(UnitAnimation.ATTACK, self.config.attack_duration)

    def play_hit_animation(self) -> asyncio.Future[None]:
        return self._play(UnitAnimation.HIT, self.config.hit_duration)

    def play_faint_animation(self) -> asyncio.Future[None]:
        return self._play(UnitAnimation.FAINT, self.config.faint_duration)

    def _play(self, animation: UnitAnimation, duration: float) -> asyncio.Future[None]:
        self._stop()
        self.animation = animation
        self._elapsed = 0.0
        self._duration = duration
        self._pending = _new_future()
        return self._pending

    def update(self, dt: float) -> None:
        if self.animation is None:
            return

        self._elapsed += dt
        if self._elapsed >= self._duration:
            self._stop()

    def _stop(self) -> None:
        if self.animation == UnitAnimation.FAINT:
            self.visible = False
        self.animation = None
        pending, self._pending = self._pending, None
        _resolve(pending)


class BattleTimer:
    """
    Pause clock driven by the scene's ticks.

    wait(seconds) completes once update() has accounted for that much
    time, so pauses follow the game loop rather than wall time.
    """

    def __init__(self):
        self._waits: list[list] = []  # [remaining, future]

    @property
    def pending(self) -> int:
        return len(self._waits)

    def wait(self, seconds: float) -> asyncio.Future[None]:
        future = _new_future()
        if seconds <= 0:
            future.set_result(None)
        else:
            self._waits.append([seconds, future])
        return future

    def update(self, dt: float) -> None:
        remaining = []
        for entry in self._waits:
            entry[0] -= dt
            if entry[0] <= 0:
                _resolve(entry[1])
            else:
                remaining.append(entry)
        self._waits = remaining

    def cancel_all(self) -> None:
        for _, future in self._waits:
            if not future.done():
                future.cancel()
        self._waits = []

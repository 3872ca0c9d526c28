"""
Presentation contracts the battle orchestrator drives.

Anything awaitable here is a suspension point: the orchestrator does
not continue until it completes. The affordance toggles return nothing
and take effect immediately.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol, Sequence

from pocketbattle.creatures import Creature, Move

# Fixed dramatic pause: clock(seconds) completes after that much time
Clock = Callable[[float], Awaitable[None]]


class DialogSurface(Protocol):
    """Dialog box with typed text, an action selector and a move grid."""

    def type_dialog(self, text: str) -> Awaitable[None]:
        ...

    def set_move_names(self, moves: Sequence[Move]) -> None:
        ...

    def enable_dialog_text(self, enabled: bool) -> None:
        ...

    def enable_action_selector(self, enabled: bool) -> None:
        ...

    def enable_move_selector(self, enabled: bool) -> None:
        ...

    def update_action_selection(self, index: int) -> None:
        ...

    def update_move_selection(self, index: int, move: Move) -> None:
        ...


class HudSurface(Protocol):
    """Name, level and HP bar of one side."""

    def set_data(self, creature: Creature) -> None:
        ...

    def update_hp(self) -> Awaitable[None]:
        ...


class UnitView(Protocol):
    """On-screen representation of one side's creature."""

    def setup(self, creature: Creature) -> None:
        ...

    def play_attack_animation(self) -> Awaitable[None]:
        ...

    def play_hit_animation(self) -> Awaitable[None]:
        ...

    def play_faint_animation(self) -> Awaitable[None]:
        ...

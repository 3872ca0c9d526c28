"""
Selection state for the action menu and the move grid.
"""

from __future__ import annotations

from enum import Enum, auto

# Action menu entries
FIGHT = 0
RUN = 1
ACTION_COUNT = 2


class Direction(Enum):
    """Cursor directions."""
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()


# Moves are laid out in a 2-column grid: left/right step by one,
# up/down by a full row.
MOVE_GRID_STEP: dict[Direction, int] = {
    Direction.LEFT: -1,
    Direction.RIGHT: 1,
    Direction.UP: -2,
    Direction.DOWN: 2,
}


class SelectionController:
    """
    Cursor positions for one battle.

    Neither index is reset between turns; the move cursor stays where
    the player left it.
    """

    def __init__(self):
        self.action_index = FIGHT
        self.move_index = 0

    def reset(self) -> None:
        self.action_index = FIGHT
        self.move_index = 0

    def move_action_cursor(self, direction: Direction) -> bool:
        """
        Move between Fight and Run, without wrapping.

        Returns:
            True if the index changed
        """
        if direction == Direction.DOWN and self.action_index < ACTION_COUNT - 1:
            self.action_index += 1
            return True
        if direction == Direction.UP and self.action_index > 0:
            self.action_index -= 1
            return True
        return False

    def move_move_cursor(self, direction: Direction, move_count: int) -> bool:
        """
        Step through the move grid. A step that would leave
        [0, move_count - 1] is rejected, not clamped.

        Returns:
            True if the index changed
        """
        target = self.move_index + MOVE_GRID_STEP[direction]
        if 0 <= target < move_count:
            self.move_index = target
            return True
        return False

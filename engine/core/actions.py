"""
Input action definitions.

Actions abstract raw input (keys, buttons) into semantic actions.
Battle logic reads Actions, never raw keys, so bindings can change
without touching the orchestrator.

Usage:
    if input.is_action_just_pressed(Action.CONFIRM):
        ...
"""

from enum import Enum, auto

import pygame


class Action(Enum):
    """
    Semantic input actions.

    The battle screen only needs four directions and a confirm button;
    CANCEL and PAUSE are consumed by the host loop.
    """

    # Menu navigation
    MENU_UP = auto()
    MENU_DOWN = auto()
    MENU_LEFT = auto()
    MENU_RIGHT = auto()
    CONFIRM = auto()
    CANCEL = auto()

    # System
    PAUSE = auto()


# Default key bindings (can be customized)
DEFAULT_KEY_BINDINGS: dict[Action, list[int]] = {
    Action.MENU_UP: [pygame.K_UP, pygame.K_w],
    Action.MENU_DOWN: [pygame.K_DOWN, pygame.K_s],
    Action.MENU_LEFT: [pygame.K_LEFT, pygame.K_a],
    Action.MENU_RIGHT: [pygame.K_RIGHT, pygame.K_d],
    Action.CONFIRM: [pygame.K_RETURN, pygame.K_SPACE],
    Action.CANCEL: [pygame.K_ESCAPE, pygame.K_x],
    Action.PAUSE: [pygame.K_p],
}

# Gamepad button bindings (SDL controller layout)
DEFAULT_GAMEPAD_BINDINGS: dict[Action, list[int]] = {
    Action.CONFIRM: [0],  # A button
    Action.CANCEL: [1],   # B button
    Action.PAUSE: [7],    # Start
}

# D-pad bindings (hat)
DEFAULT_GAMEPAD_HAT_BINDINGS: dict[tuple[int, int], Action] = {
    (0, 1): Action.MENU_UP,
    (0, -1): Action.MENU_DOWN,
    (-1, 0): Action.MENU_LEFT,
    (1, 0): Action.MENU_RIGHT,
}

"""
Input handler with action-based abstraction.

Handles keyboard and gamepad input, translating raw input into
semantic Actions for game logic.

Usage:
    if input.is_action_just_pressed(Action.CONFIRM):
        battle.confirm()

    dx, dy = input.get_menu_direction()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import pygame

from engine.core.actions import (
    Action,
    DEFAULT_KEY_BINDINGS,
    DEFAULT_GAMEPAD_BINDINGS,
    DEFAULT_GAMEPAD_HAT_BINDINGS,
)
from engine.core.events import EventBus


class InputEvent(Enum):
    """Input-specific events."""
    ACTION_PRESSED = "input.action_pressed"
    ACTION_RELEASED = "input.action_released"


@dataclass
class InputState:
    """Complete input state for current tick."""
    actions_pressed: set[Action] = field(default_factory=set)
    actions_just_pressed: set[Action] = field(default_factory=set)
    actions_just_released: set[Action] = field(default_factory=set)

    # Raw key states (for edge cases)
    keys_pressed: set[int] = field(default_factory=set)


class InputHandler:
    """
    Handles all input processing.

    Raw pygame events update the held-down sets as they arrive;
    update() turns them into per-tick edges ("just pressed"), which is
    what menu navigation reads.
    """

    def __init__(self, event_bus: EventBus | None = None):
        self.event_bus = event_bus

        self._state = InputState()
        self._prev_actions: set[Action] = set()
        # Presses that began and ended between two ticks
        self._tapped: set[Action] = set()

        # Key bindings (action -> list of keys)
        self._key_bindings = {a: list(keys) for a, keys in DEFAULT_KEY_BINDINGS.items()}
        self._reverse_key_bindings: dict[int, list[Action]] = {}
        self._rebuild_reverse_bindings()

        self._gamepad_bindings = DEFAULT_GAMEPAD_BINDINGS.copy()
        self._gamepad_hat_bindings = DEFAULT_GAMEPAD_HAT_BINDINGS.copy()

    def _rebuild_reverse_bindings(self) -> None:
        """Build reverse lookup: key -> actions."""
        self._reverse_key_bindings.clear()
        for action, keys in self._key_bindings.items():
            for key in keys:
                self._reverse_key_bindings.setdefault(key, []).append(action)

    # Public API

    def is_action_pressed(self, action: Action) -> bool:
        """Check if an action is currently held down."""
        return action in self._state.actions_pressed

    def is_action_just_pressed(self, action: Action) -> bool:
        """Check if an action was pressed this tick."""
        return action in self._state.actions_just_pressed

    def is_action_just_released(self, action: Action) -> bool:
        """Check if an action was released this tick."""
        return action in self._state.actions_just_released

    def get_menu_direction(self) -> tuple[int, int]:
        """
        Get menu navigation direction (just pressed).

        Returns:
            (dx, dy) where each is -1, 0, or 1
        """
        dx = 0
        dy = 0

        if self.is_action_just_pressed(Action.MENU_LEFT):
            dx = -1
        elif self.is_action_just_pressed(Action.MENU_RIGHT):
            dx = 1

        if self.is_action_just_pressed(Action.MENU_UP):
            dy = -1
        elif self.is_action_just_pressed(Action.MENU_DOWN):
            dy = 1

        return (dx, dy)

    # Key binding management

    def bind_key(self, action: Action, key: int) -> None:
        """Add a key binding for an action."""
        keys = self._key_bindings.setdefault(action, [])
        if key not in keys:
            keys.append(key)
        self._rebuild_reverse_bindings()

    def unbind_key(self, action: Action, key: int) -> None:
        """Remove a key binding for an action."""
        if key in self._key_bindings.get(action, []):
            self._key_bindings[action].remove(key)
        self._rebuild_reverse_bindings()

    def get_bindings(self, action: Action) -> list[int]:
        """Get all key bindings for an action."""
        return self._key_bindings.get(action, []).copy()

    # Frame update

    def process_event(self, event: pygame.event.Event) -> None:
        """Process a pygame event."""
        if event.type == pygame.KEYDOWN:
            self._on_key_down(event.key)

        elif event.type == pygame.KEYUP:
            self._on_key_up(event.key)

        elif event.type == pygame.JOYBUTTONDOWN:
            for action, buttons in self._gamepad_bindings.items():
                if event.button in buttons:
                    self._press(action)

        elif event.type == pygame.JOYBUTTONUP:
            for action, buttons in self._gamepad_bindings.items():
                if event.button in buttons:
                    self._release(action)

        elif event.type == pygame.JOYHATMOTION:
            self._on_hat_motion(event.value)

    def press(self, action: Action) -> None:
        """Press an action directly (scripted input, replays)."""
        self._press(action)

    def release(self, action: Action) -> None:
        """Release an action pressed with press()."""
        self._release(action)

    def tap(self, action: Action) -> None:
        """Press and release before the next tick; still counts once."""
        self._press(action)
        self._release(action)

    def update(self) -> None:
        """
        Update input state for a new tick.

        Call this once at the start of each fixed update.
        """
        self._state.actions_just_pressed = (
            (self._state.actions_pressed - self._prev_actions) | self._tapped
        )
        self._state.actions_just_released = (
            (self._prev_actions - self._state.actions_pressed) | self._tapped
        )
        self._tapped = set()

        if self.event_bus:
            for action in self._state.actions_just_pressed:
                self.event_bus.publish(InputEvent.ACTION_PRESSED, action=action)
            for action in self._state.actions_just_released:
                self.event_bus.publish(InputEvent.ACTION_RELEASED, action=action)

        self._prev_actions = self._state.actions_pressed.copy()

    def _press(self, action: Action) -> None:
        self._state.actions_pressed.add(action)

    def _release(self, action: Action) -> None:
        if action in self._state.actions_pressed and action not in self._prev_actions:
            # Released before any tick saw it held
            self._tapped.add(action)
        self._state.actions_pressed.discard(action)

    def _on_key_down(self, key: int) -> None:
        """Handle key press."""
        self._state.keys_pressed.add(key)

        for action in self._reverse_key_bindings.get(key, []):
            self._press(action)

    def _on_key_up(self, key: int) -> None:
        """Handle key release."""
        self._state.keys_pressed.discard(key)

        # Unmap from actions (only if no other keys for that action are pressed)
        for action in self._reverse_key_bindings.get(key, []):
            still_pressed = any(
                other_key != key and other_key in self._state.keys_pressed
                for other_key in self._key_bindings.get(action, [])
            )
            if not still_pressed:
                self._release(action)

    def _on_hat_motion(self, value: tuple[int, int]) -> None:
        """Handle D-pad input."""
        for action in self._gamepad_hat_bindings.values():
            if action in self._state.actions_pressed:
                self._release(action)

        if value in self._gamepad_hat_bindings:
            self._press(self._gamepad_hat_bindings[value])

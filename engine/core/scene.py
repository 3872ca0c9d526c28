"""
Scene management system.

Scenes represent different game states (overworld, battle, ...).
The SceneManager handles a stack of scenes, allowing for:
- Push: Add a new scene on top (e.g., start a battle over the overworld)
- Pop: Remove the top scene (e.g., battle over, back to the overworld)
- Switch: Replace the current scene entirely
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from engine.core.events import EngineEvent

if TYPE_CHECKING:
    import pygame

    from engine.core.events import EventBus

logger = logging.getLogger(__name__)


class Scene(ABC):
    """
    Abstract base class for game scenes.

    Lifecycle:
        1. __init__: Called when scene is created
        2. on_enter: Called when scene becomes active
        3. update: Called each tick while active
        4. on_exit: Called when scene is removed or covered
        5. on_destroy: Called when scene is permanently removed
    """

    name: str = "scene"

    def __init__(self):
        self._is_active = False
        self._blocks_update = True    # If True, scene below doesn't update

    @property
    def is_active(self) -> bool:
        """Whether this scene is currently the top scene."""
        return self._is_active

    @property
    def blocks_update(self) -> bool:
        """Whether this scene blocks updates to scenes below."""
        return self._blocks_update

    def on_enter(self) -> None:
        """Called when scene becomes active (pushed or uncovered)."""
        self._is_active = True

    def on_exit(self) -> None:
        """Called when scene is deactivated (popped or covered)."""
        self._is_active = False

    def on_destroy(self) -> None:
        """Called when scene is permanently removed from the stack."""
        pass

    @abstractmethod
    def update(self, dt: float) -> None:
        """
        Update scene logic.

        Args:
            dt: Delta time in seconds (fixed timestep)
        """
        pass

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a raw pygame event.

        Returns:
            True if the event was consumed (don't propagate)
        """
        return False


class SceneManager:
    """
    Manages a stack of scenes.

    The scene on top of the stack is the active scene. Stack operations
    are deferred to the start of the next update so a scene can pop
    itself from inside its own callbacks.
    """

    def __init__(self, event_bus: EventBus | None = None):
        self.event_bus = event_bus
        self._stack: list[Scene] = []
        self._pending_operations: list[tuple[str, Any]] = []

    @property
    def current(self) -> Scene | None:
        """Get the current (top) scene."""
        return self._stack[-1] if self._stack else None

    @property
    def is_empty(self) -> bool:
        return len(self._stack) == 0

    @property
    def has_pending(self) -> bool:
        return bool(self._pending_operations)

    def push(self, scene: Scene) -> None:
        """Push a new scene onto the stack (covered scene gets on_exit)."""
        self._pending_operations.append(("push", scene))

    def pop(self) -> None:
        """Pop the current scene; the uncovered scene gets on_enter."""
        self._pending_operations.append(("pop", None))

    def switch(self, scene: Scene) -> None:
        """Replace the current scene with a new one."""
        self._pending_operations.append(("switch", scene))

    def clear(self) -> None:
        """Clear all scenes from the stack."""
        self._pending_operations.append(("clear", None))

    def update(self, dt: float) -> None:
        """Update scenes that should be updated."""
        self.process_pending()

        for scene in self._get_update_list():
            scene.update(dt)

    def handle_event(self, event: pygame.event.Event) -> None:
        """Pass event to the current scene."""
        if self.current:
            self.current.handle_event(event)

    def process_pending(self) -> None:
        """Process pending scene operations."""
        while self._pending_operations:
            op, arg = self._pending_operations.pop(0)

            if op == "push":
                self._do_push(arg)
            elif op == "pop":
                self._do_pop()
            elif op == "switch":
                self._do_pop()
                self._do_push(arg)
            elif op == "clear":
                while self._stack:
                    self._do_pop()

    def _do_push(self, scene: Scene) -> None:
        if self._stack:
            self._stack[-1].on_exit()
        self._stack.append(scene)
        scene.on_enter()
        logger.debug("Scene pushed: %s", scene.name)

        if self.event_bus:
            self.event_bus.publish(EngineEvent.SCENE_PUSHED, scene=scene.name)

    def _do_pop(self) -> None:
        if not self._stack:
            return

        scene = self._stack.pop()
        scene.on_exit()
        scene.on_destroy()
        logger.debug("Scene popped: %s", scene.name)

        if self._stack:
            self._stack[-1].on_enter()

        if self.event_bus:
            self.event_bus.publish(EngineEvent.SCENE_POPPED, scene=scene.name)

    def _get_update_list(self) -> list[Scene]:
        """Get list of scenes to update (bottom to top)."""
        result = []
        # Start from top, go down until we find a scene that blocks updates
        for scene in reversed(self._stack):
            result.insert(0, scene)
            if scene.blocks_update:
                break

        return result

"""
Core Game class with a fixed timestep, asyncio-driven loop.

The Game class is the host loop for the engine. It handles:
- Optional window creation (Pygame)
- Fixed timestep update loop
- Input polling once per tick
- Scene management delegation

The loop yields to the asyncio event loop between ticks, which is what
lets scene coroutines (battle sequences waiting on dialog, animations
and pauses) make progress alongside per-tick input polling.
"""

from __future__ import annotations

import asyncio
import logging

import pygame

from engine.core.actions import Action
from engine.core.events import EventBus, EngineEvent
from engine.core.scene import SceneManager
from engine.input.handler import InputHandler

logger = logging.getLogger(__name__)


class GameConfig:
    """Configuration for the game loop."""

    def __init__(
        self,
        title: str = "Pocket Battle",
        width: int = 800,
        height: int = 600,
        fixed_timestep: float = 1 / 60,
        headless: bool = True,
        max_ticks: int | None = None,
    ):
        self.title = title
        self.width = width
        self.height = height
        self.fixed_timestep = fixed_timestep
        self.headless = headless
        # Safety valve for scripted runs; None runs until quit()
        self.max_ticks = max_ticks


class Game:
    """
    Main loop.

    Usage:
        game = Game(GameConfig(headless=False))
        game.scene_manager.push(OverworldScene(...))
        asyncio.run(game.run())
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        input_handler: InputHandler | None = None,
        event_bus: EventBus | None = None,
    ):
        self.config = config or GameConfig()
        self._running = False
        self._paused = False
        self._ticks = 0

        if not self.config.headless:
            pygame.init()
            pygame.display.set_mode((self.config.width, self.config.height))
            pygame.display.set_caption(self.config.title)

        self.event_bus = event_bus or EventBus()
        self.input = input_handler or InputHandler(self.event_bus)
        self.scene_manager = SceneManager(self.event_bus)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def ticks(self) -> int:
        """Number of ticks processed so far."""
        return self._ticks

    async def run(self) -> None:
        """
        Run until quit() is called, the scene stack empties or
        config.max_ticks is reached.
        """
        self._running = True
        self.event_bus.publish(EngineEvent.GAME_START)
        logger.info("Game loop started (dt=%.4f)", self.config.fixed_timestep)

        try:
            while self._running:
                self._process_events()
                self.tick(self.config.fixed_timestep)

                if self.scene_manager.is_empty and not self.scene_manager.has_pending:
                    self.quit()
                if self.config.max_ticks is not None and self._ticks >= self.config.max_ticks:
                    logger.warning("Stopping after max_ticks=%d", self.config.max_ticks)
                    self.quit()

                await asyncio.sleep(self.config.fixed_timestep)
        finally:
            self._shutdown()

    def tick(self, dt: float) -> None:
        """Advance one fixed step: poll input, then update scenes."""
        self.input.update()

        if self.input.is_action_just_pressed(Action.PAUSE):
            self.toggle_pause()

        if not self._paused:
            self.scene_manager.update(dt)

        self._ticks += 1

    def quit(self) -> None:
        """Request loop shutdown."""
        self._running = False

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def toggle_pause(self) -> None:
        self._paused = not self._paused

    def _process_events(self) -> None:
        """Process Pygame events when a window exists."""
        if self.config.headless:
            return

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit()
            else:
                self.input.process_event(event)
                self.scene_manager.handle_event(event)

    def _shutdown(self) -> None:
        self.event_bus.publish(EngineEvent.GAME_QUIT, ticks=self._ticks)
        logger.info("Game loop stopped after %d ticks", self._ticks)

        if not self.config.headless:
            pygame.quit()

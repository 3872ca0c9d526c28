"""
Engine

Host-side building blocks shared by the game: a fixed timestep asyncio
loop, a scene stack, a typed event bus and action-based input.

Quick Start:
    from engine.core import Game, GameConfig, Scene

    class MyScene(Scene):
        def update(self, dt: float) -> None:
            pass

    game = Game(GameConfig())
    game.scene_manager.push(MyScene())
    asyncio.run(game.run())
"""

__version__ = "0.1.0"

from engine.core import (
    Game,
    GameConfig,
    Scene,
    SceneManager,
    EventBus,
    Event,
    EngineEvent,
    Action,
)

from engine.input import InputHandler

__all__ = [
    # Core
    "Game",
    "GameConfig",
    "Scene",
    "SceneManager",
    # Events
    "EventBus",
    "Event",
    "EngineEvent",
    # Input
    "InputHandler",
    "Action",
]

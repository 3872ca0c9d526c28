"""
Core engine module.

Exports:
- Game, GameConfig: Host loop and configuration
- Scene, SceneManager: Scene management
- EventBus, Event, EngineEvent: Event system
- Action: Input actions
"""

from engine.core.game import Game, GameConfig
from engine.core.scene import Scene, SceneManager
from engine.core.events import EventBus, Event, EngineEvent
from engine.core.actions import Action

__all__ = [
    # Game
    "Game",
    "GameConfig",
    # Scene
    "Scene",
    "SceneManager",
    # Events
    "EventBus",
    "Event",
    "EngineEvent",
    # Input
    "Action",
]

"""
Pocket Battle.

Wild creature battles built on top of the engine:
- Creatures (species, moves, types, data loading)
- Battle (state machine, damage, narration, widgets)
- Scenes and the game controller switching between them
"""

__version__ = "0.1.0"

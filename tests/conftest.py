import os
import sys
import pytest
from unittest.mock import MagicMock, patch

# Ensure engine modules can be imported
sys.path.append(os.getcwd())

@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for pygame to allow headless testing.
    Autoused for all tests to prevent accidental window creation.
    """
    with patch('pygame.init'), \
         patch('pygame.quit'), \
         patch('pygame.display'), \
         patch('pygame.event'), \
         patch('pygame.time'), \
         patch('pygame.joystick'), \
         patch('pygame.key'):

        import pygame
        pygame.time.get_ticks = MagicMock(return_value=0)

        yield

@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()

@pytest.fixture
def input_handler(event_bus):
    from engine.input.handler import InputHandler
    return InputHandler(event_bus)


# Creatures

@pytest.fixture
def make_move():
    """Factory for a move slot with an optional PP override."""
    from pocketbattle.creatures import Move, MoveBase, CreatureType

    def _make(name="Tackle", type=CreatureType.NORMAL, power=40, pp=35, current_pp=None):
        return Move(MoveBase(name=name, type=type, power=power, pp=pp), current_pp)

    return _make

@pytest.fixture
def make_creature(make_move):
    """Factory for a creature with explicit moves and HP."""
    from pocketbattle.creatures import Creature, CreatureBase, CreatureType

    def _make(name="Charmander", level=5, hp=None, moves=None,
              type1=CreatureType.FIRE, type2=CreatureType.NONE):
        base = CreatureBase(name=name, type1=type1, type2=type2, max_hp=100)
        if moves is None:
            moves = [make_move()]
        return Creature(base, level, moves=moves, hp=hp)

    return _make

@pytest.fixture
def database():
    from pocketbattle.creatures import CreatureDatabase
    db = CreatureDatabase()
    db.load_all()
    return db


# Battle presentation fakes: every awaitable completes at once and is
# recorded in one shared log, so tests can assert the exact sequence.

async def _done():
    return None


class RecordingDialog:
    def __init__(self, log):
        self.log = log
        self.move_names = []
        self.action_selector = False
        self.move_selector = False
        self.dialog_text = True
        self.action_index = None
        self.move_selection = None

    def type_dialog(self, text):
        self.log.append(("dialog", text))
        return _done()

    def set_move_names(self, moves):
        self.move_names = [m.name for m in moves]

    def enable_dialog_text(self, enabled):
        self.dialog_text = enabled

    def enable_action_selector(self, enabled):
        self.action_selector = enabled

    def enable_move_selector(self, enabled):
        self.move_selector = enabled

    def update_action_selection(self, index):
        self.action_index = index

    def update_move_selection(self, index, move):
        self.move_selection = (index, move.name)

    @property
    def lines(self):
        return [entry[1] for entry in self.log if entry[0] == "dialog"]


class RecordingHud:
    def __init__(self, log, side):
        self.log = log
        self.side = side
        self.creature = None

    def set_data(self, creature):
        self.creature = creature

    def update_hp(self):
        self.log.append(("hp", self.side, self.creature.hp))
        return _done()


class RecordingView:
    def __init__(self, log, side):
        self.log = log
        self.side = side
        self.creature = None

    def setup(self, creature):
        self.creature = creature

    def play_attack_animation(self):
        self.log.append(("attack", self.side))
        return _done()

    def play_hit_animation(self):
        self.log.append(("hit", self.side))
        return _done()

    def play_faint_animation(self):
        self.log.append(("faint", self.side))
        return _done()


class Presentation:
    def __init__(self):
        self.log = []
        self.dialog = RecordingDialog(self.log)
        self.player_hud = RecordingHud(self.log, "player")
        self.enemy_hud = RecordingHud(self.log, "enemy")
        self.player_view = RecordingView(self.log, "player")
        self.enemy_view = RecordingView(self.log, "enemy")

    async def clock(self, seconds):
        self.log.append(("pause", seconds))


class ScriptedResolver:
    """Deals fixed damage per call; optional effectiveness/critical per call."""

    def __init__(self, damage, type_effectiveness=None, critical=None):
        self.damage = list(damage)
        self.type_effectiveness = list(type_effectiveness or [])
        self.critical = list(critical or [])
        self.calls = []

    def resolve(self, move, attacker, defender):
        from pocketbattle.battle import DamageDetails

        self.calls.append((move.name, attacker.name, defender.name))
        amount = self.damage.pop(0) if self.damage else 1
        fainted = defender.take_damage(amount)
        return DamageDetails(
            fainted=fainted,
            critical=self.critical.pop(0) if self.critical else 1.0,
            type_effectiveness=self.type_effectiveness.pop(0) if self.type_effectiveness else 1.0,
        )


@pytest.fixture
def presentation():
    return Presentation()

@pytest.fixture
def scripted_resolver():
    return ScriptedResolver

@pytest.fixture
def make_battle(presentation):
    """Factory for a BattleSystem wired to the recording fakes."""
    from pocketbattle.battle import BattleConfig, BattleSystem, BattleUnit

    def _make(resolver=None, move_policy=None, events=None):
        return BattleSystem(
            BattleUnit(presentation.player_view, is_player_unit=True),
            BattleUnit(presentation.enemy_view, is_player_unit=False),
            presentation.player_hud,
            presentation.enemy_hud,
            presentation.dialog,
            resolver=resolver,
            move_policy=move_policy,
            clock=presentation.clock,
            config=BattleConfig(),
            events=events,
        )

    return _make

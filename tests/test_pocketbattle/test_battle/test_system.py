import asyncio
import logging
import pytest

from engine.core.actions import Action
from pocketbattle.battle import BattleEvent, BattleState, Direction, FIGHT, RUN
from pocketbattle.creatures import CreatureType


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def player(make_creature, make_move):
    return make_creature("Charmander", moves=[
        make_move("Scratch"),
        make_move("Ember", type=CreatureType.FIRE),
        make_move("Quick Attack"),
    ])

@pytest.fixture
def enemy(make_creature, make_move):
    return make_creature("Pidgey", type1=CreatureType.NORMAL, moves=[make_move("Gust")])


async def start(battle, player, enemy):
    result = battle.start_battle(player, enemy)
    await battle.wait_idle()
    return result


def test_setup_announces_and_waits_for_action(make_battle, presentation, player, enemy):
    battle = make_battle()

    async def scenario():
        result = await start(battle, player, enemy)
        assert not result.done()

    run(scenario())

    assert presentation.dialog.lines == ["A wild Pidgey appeared.", "Choose an action"]
    assert battle.state == BattleState.PLAYER_ACTION
    assert presentation.dialog.action_selector
    assert presentation.dialog.move_names == ["Scratch", "Ember", "Quick Attack"]
    assert presentation.player_hud.creature is player
    assert presentation.enemy_hud.creature is enemy
    assert battle.player_unit.creature is player
    assert battle.enemy_unit.creature is enemy


def test_lethal_first_move_wins_without_enemy_turn(make_battle, presentation, scripted_resolver,
                                                  player, make_creature, make_move):
    enemy = make_creature("Pidgey", hp=5, moves=[make_move("Gust")])
    resolver = scripted_resolver([10])
    battle = make_battle(resolver=resolver)
    over = []
    battle.on_battle_over(over.append)

    async def scenario():
        result = await start(battle, player, enemy)
        presentation.log.clear()

        battle.confirm()
        assert battle.state == BattleState.PLAYER_MOVE
        battle.perform_player_move()
        await battle.wait_idle()
        return await result

    assert run(scenario()) is True

    assert presentation.log == [
        ("dialog", "Charmander used Scratch"),
        ("attack", "player"),
        ("pause", 0.75),
        ("hit", "enemy"),
        ("hp", "enemy", 0),
        ("dialog", "The Pidgey enemy fainted"),
        ("faint", "enemy"),
        ("pause", 2.0),
    ]
    assert resolver.calls == [("Scratch", "Charmander", "Pidgey")]
    assert battle.state == BattleState.TERMINATED
    assert over == [True]


def test_enemy_turn_narrates_and_hands_back(make_battle, presentation, scripted_resolver,
                                           player, enemy):
    resolver = scripted_resolver([1, 3], type_effectiveness=[1.0, 0.5])
    battle = make_battle(resolver=resolver)

    async def scenario():
        await start(battle, player, enemy)
        presentation.log.clear()
        battle.confirm()
        battle.perform_player_move()
        await battle.wait_idle()

    run(scenario())

    assert presentation.dialog.lines == [
        "Charmander used Scratch",
        "Pidgey used Gust",
        "That was not very effective..",
        "Choose an action",
    ]
    # The opponent attacks with its own creature
    assert resolver.calls[1] == ("Gust", "Pidgey", "Charmander")
    assert ("attack", "enemy") in presentation.log
    assert ("hit", "player") in presentation.log
    assert player.hp == player.max_hp - 3
    assert enemy.hp == enemy.max_hp - 1
    assert battle.state == BattleState.PLAYER_ACTION
    assert battle.battle_over is not None and not battle.battle_over.done()


def test_enemy_knockout_loses(make_battle, presentation, scripted_resolver, make_creature, make_move,
                              enemy):
    player = make_creature("Charmander", hp=2, moves=[make_move("Scratch")])
    battle = make_battle(resolver=scripted_resolver([1, 5]))

    async def scenario():
        result = await start(battle, player, enemy)
        battle.confirm()
        battle.perform_player_move()
        await battle.wait_idle()
        return await result

    assert run(scenario()) is False
    assert presentation.dialog.lines[-1] == "Your Charmander fainted"
    assert presentation.log[-2:] == [("faint", "player"), ("pause", 2.0)]
    assert player.is_fainted


def test_critical_and_super_effective_narration(make_battle, presentation, scripted_resolver,
                                                player, enemy):
    battle = make_battle(resolver=scripted_resolver([1, 1], type_effectiveness=[2.0], critical=[2.0]))

    async def scenario():
        await start(battle, player, enemy)
        battle.confirm()
        battle.perform_player_move()
        await battle.wait_idle()

    run(scenario())

    lines = presentation.dialog.lines
    used = lines.index("Charmander used Scratch")
    assert lines[used + 1:used + 3] == ["A critical hit!", "That's super effective!"]


def test_move_use_spends_pp(make_battle, scripted_resolver, player, enemy):
    battle = make_battle(resolver=scripted_resolver([1, 1]))

    async def scenario():
        await start(battle, player, enemy)
        battle.confirm()
        battle.move_move_cursor(Direction.RIGHT)
        battle.perform_player_move()
        await battle.wait_idle()

    run(scenario())

    assert [m.pp for m in player.moves] == [35, 34, 35]
    assert enemy.moves[0].pp == 34


def test_exhausted_move_stays_usable(make_battle, presentation, scripted_resolver, make_creature,
                                     make_move, enemy):
    player = make_creature("Charmander", moves=[make_move("Scratch", current_pp=0)])
    battle = make_battle(resolver=scripted_resolver([1, 1]))

    async def scenario():
        await start(battle, player, enemy)
        battle.confirm()
        assert battle.perform_player_move() is not None
        await battle.wait_idle()

    run(scenario())

    assert "Charmander used Scratch" in presentation.dialog.lines
    assert player.moves[0].pp == 0


def test_busy_refuses_retrigger(make_battle, scripted_resolver, input_handler, player, enemy):
    resolver = scripted_resolver([1, 1])
    battle = make_battle(resolver=resolver)

    async def scenario():
        await start(battle, player, enemy)
        battle.confirm()

        task = battle.perform_player_move()
        assert task is not None
        assert battle.state == BattleState.BUSY
        assert not battle.accepts_input

        assert battle.perform_player_move() is None
        battle.confirm()
        battle.move_move_cursor(Direction.RIGHT)
        battle.move_action_cursor(Direction.DOWN)
        assert battle.selection.move_index == 0
        assert battle.selection.action_index == FIGHT
        input_handler.tap(Action.CONFIRM)
        input_handler.update()
        battle.handle_update(input_handler)

        await battle.wait_idle()

    run(scenario())

    player_moves = [c for c in resolver.calls if c[1] == "Charmander"]
    assert len(player_moves) == 1
    assert player.moves[0].pp == 34


def test_perform_refused_outside_move_selection(make_battle, player, enemy):
    battle = make_battle()

    async def scenario():
        assert battle.perform_player_move() is None
        await start(battle, player, enemy)
        assert battle.perform_player_move() is None
        assert battle.state == BattleState.PLAYER_ACTION

    run(scenario())


def test_out_of_range_move_index_refused(make_battle, presentation, player, enemy):
    battle = make_battle()

    async def scenario():
        await start(battle, player, enemy)
        battle.confirm()
        battle.selection.move_index = 3
        assert battle.perform_player_move() is None

    run(scenario())

    assert battle.state == BattleState.PLAYER_MOVE
    assert presentation.dialog.move_selector


def test_action_menu_via_input(make_battle, presentation, input_handler, player, enemy):
    battle = make_battle()
    runs = []
    battle.on_run(lambda: runs.append(True))

    async def scenario():
        await start(battle, player, enemy)

        input_handler.tap(Action.MENU_DOWN)
        input_handler.update()
        battle.handle_update(input_handler)
        assert battle.selection.action_index == RUN
        assert presentation.dialog.action_index == RUN

        # Run is a hook only; the battle keeps waiting for an action
        input_handler.tap(Action.CONFIRM)
        input_handler.update()
        battle.handle_update(input_handler)
        assert runs == [True]
        assert battle.state == BattleState.PLAYER_ACTION

        input_handler.tap(Action.MENU_UP)
        input_handler.update()
        battle.handle_update(input_handler)
        input_handler.tap(Action.CONFIRM)
        input_handler.update()
        battle.handle_update(input_handler)

    run(scenario())

    assert battle.selection.action_index == FIGHT
    assert battle.state == BattleState.PLAYER_MOVE
    assert presentation.dialog.move_selector
    assert not presentation.dialog.action_selector
    assert not presentation.dialog.dialog_text


def test_move_grid_via_input(make_battle, presentation, input_handler, player, enemy):
    battle = make_battle()

    def press(action):
        input_handler.tap(action)
        input_handler.update()
        battle.handle_update(input_handler)

    async def scenario():
        await start(battle, player, enemy)
        battle.confirm()

        press(Action.MENU_RIGHT)
        assert presentation.dialog.move_selection == (1, "Ember")
        press(Action.MENU_DOWN)   # 3 would be out of range
        assert battle.selection.move_index == 1
        press(Action.MENU_LEFT)
        press(Action.MENU_DOWN)
        assert presentation.dialog.move_selection == (2, "Quick Attack")
        press(Action.MENU_UP)
        assert battle.selection.move_index == 0

    run(scenario())


def test_cursor_ignored_in_wrong_state(make_battle, player, enemy):
    battle = make_battle()

    async def scenario():
        await start(battle, player, enemy)
        battle.move_move_cursor(Direction.RIGHT)
        assert battle.selection.move_index == 0
        battle.confirm()
        battle.move_action_cursor(Direction.DOWN)
        assert battle.selection.action_index == FIGHT

    run(scenario())


def test_move_cursor_kept_between_turns_reset_between_battles(make_battle, scripted_resolver,
                                                              player, enemy, make_creature, make_move):
    resolver = scripted_resolver([1, 1, 100])
    battle = make_battle(resolver=resolver)

    async def scenario():
        await start(battle, player, enemy)
        battle.confirm()
        battle.move_move_cursor(Direction.RIGHT)
        battle.perform_player_move()
        await battle.wait_idle()

        assert battle.state == BattleState.PLAYER_ACTION
        assert battle.selection.move_index == 1
        battle.confirm()
        battle.perform_player_move()
        await battle.wait_idle()
        assert battle.state == BattleState.TERMINATED

        fresh = make_creature("Pidgey", moves=[make_move("Gust")])
        await start(battle, player, fresh)
        assert battle.selection.move_index == 0

    run(scenario())

    assert [c[0] for c in resolver.calls if c[1] == "Charmander"] == ["Ember", "Ember"]


def test_start_while_running_is_refused(make_battle, caplog, player, enemy, make_creature):
    battle = make_battle()
    other = make_creature("Geodude")

    async def scenario():
        first = await start(battle, player, enemy)
        with caplog.at_level(logging.WARNING, logger="pocketbattle.battle.system"):
            second = battle.start_battle(player, other)
        assert second is first
        assert battle.enemy_unit.creature is enemy

    run(scenario())

    assert "already in progress" in caplog.text


def test_creature_without_moves_rejected(make_battle, make_creature, player):
    battle = make_battle()
    empty = make_creature("Magikarp", moves=[])

    async def scenario():
        with pytest.raises(ValueError):
            battle.start_battle(player, empty)

    run(scenario())

    assert battle.state == BattleState.START
    assert battle.battle_over is None


def test_result_reported_once(make_battle, scripted_resolver, player, enemy):
    battle = make_battle(resolver=scripted_resolver([100]))
    over = []
    battle.on_battle_over(over.append)

    async def scenario():
        result = await start(battle, player, enemy)
        battle.confirm()
        battle.perform_player_move()
        battle.confirm()
        battle.perform_player_move()
        await battle.wait_idle()
        assert result.done()
        battle.confirm()
        battle.handle_update(None)

    run(scenario())

    assert over == [True]


def test_events_published_in_order(make_battle, event_bus, scripted_resolver, player, enemy):
    received = []
    for event_type in BattleEvent:
        event_bus.subscribe(event_type, received.append, weak=False)

    battle = make_battle(resolver=scripted_resolver([100]), events=event_bus)

    async def scenario():
        await start(battle, player, enemy)
        battle.confirm()
        battle.perform_player_move()
        await battle.wait_idle()

    run(scenario())

    assert [e.type for e in received] == [
        BattleEvent.BATTLE_STARTED,
        BattleEvent.MOVE_USED,
        BattleEvent.DAMAGE_DEALT,
        BattleEvent.CREATURE_FAINTED,
        BattleEvent.BATTLE_ENDED,
    ]
    assert received[1]["move"] == "Scratch"
    assert received[1]["pp"] == 34
    assert received[2]["hp"] == 0
    assert received[3]["is_player"] is False
    assert received[4]["won"] is True


def test_random_policy_picks_enemy_moves(make_battle, scripted_resolver, player, make_creature,
                                         make_move):
    enemy = make_creature("Pidgey", moves=[make_move("Gust"), make_move("Tackle")])
    picked = []

    def policy(creature):
        move = creature.moves[len(picked) % 2]
        picked.append(move.name)
        return move

    resolver = scripted_resolver([1, 1, 1, 1])
    battle = make_battle(resolver=resolver, move_policy=policy)

    async def scenario():
        await start(battle, player, enemy)
        for _ in range(2):
            battle.confirm()
            battle.perform_player_move()
            await battle.wait_idle()

    run(scenario())

    assert picked == ["Gust", "Tackle"]
    assert [c[0] for c in resolver.calls if c[1] == "Pidgey"] == ["Gust", "Tackle"]


def test_presentation_failure_reaches_result(make_battle, presentation, player, enemy, caplog):
    def broken():
        raise RuntimeError("animation missing")

    presentation.player_view.play_attack_animation = broken
    battle = make_battle()

    async def scenario():
        result = await start(battle, player, enemy)
        battle.confirm()
        battle.perform_player_move()
        await battle.wait_idle()
        with pytest.raises(RuntimeError, match="animation missing"):
            await result

    with caplog.at_level(logging.ERROR, logger="pocketbattle.battle.system"):
        run(scenario())

    assert "Battle sequence failed" in caplog.text

"""
Battle Demo: wild encounters on autopilot

Demonstrates:
- Overworld steps triggering wild encounters
- The battle state machine driven by per-tick input
- Typed dialog, HP bars and unit animations advancing with the game loop
- Returning to the overworld on the battle result

The autopilot walks until an encounter, then always picks Fight and the
highlighted move. Every dialog line is printed once shown.

Usage:
    python demos/battle_demo.py --battles 3 --fast
"""

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from engine.core import Action, Game, GameConfig
from pocketbattle.battle import BattleConfig, BattleEvent
from pocketbattle.creatures import CreatureDatabase
from pocketbattle.game_controller import GameController, GameState, database_factory


async def autopilot(game: Game, controller: GameController) -> None:
    """Tap one action per tick: walk in the overworld, confirm in battle."""
    seen_scene = None

    while game.is_running:
        scene = controller.battle_scene
        if scene is not None and scene is not seen_scene:
            scene.dialog_box.on_line_complete = lambda line: print(f"  {line}")
            seen_scene = scene

        if controller.state == GameState.FREE_ROAM:
            game.input.tap(Action.MENU_RIGHT)
        elif scene is not None and scene.battle.accepts_input:
            game.input.tap(Action.CONFIRM)

        await asyncio.sleep(game.config.fixed_timestep)


async def run_demo(args: argparse.Namespace) -> None:
    rng = random.Random(args.seed)

    db = CreatureDatabase()
    db.load_all()

    game = Game(GameConfig(title="Pocket Battle - Demo", max_ticks=args.max_ticks))
    game.event_bus.subscribe(
        BattleEvent.BATTLE_ENDED,
        lambda e: print("Victory!" if e.get("won") else "Defeat..."),
        weak=False,
    )

    controller = GameController(
        game.scene_manager,
        game.input,
        player_factory=lambda: db.create_creature(args.player, args.level),
        wild_factory=database_factory(db, sorted(db.species), (2, args.level), rng),
        battle_config=BattleConfig.instant() if args.fast else None,
        events=game.event_bus,
        encounter_rate=0.2,
        rng=rng,
    )

    def on_result(won: bool) -> None:
        if len(controller.results) >= args.battles:
            game.quit()

    controller.on_battle_result = on_result
    controller.start()

    pilot = asyncio.create_task(autopilot(game, controller))
    await game.run()
    await pilot

    wins = sum(controller.results)
    print(f"{wins}/{len(controller.results)} battles won in {game.ticks} ticks")


def main():
    """Run the battle demo."""
    parser = argparse.ArgumentParser(description="Pocket Battle autopilot demo")
    parser.add_argument("--battles", type=int, default=1, help="Battles to fight before quitting")
    parser.add_argument("--player", default="Charmander", help="Player species")
    parser.add_argument("--level", type=int, default=5, help="Player level")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fast", action="store_true", help="Skip pauses and animations")
    parser.add_argument("--max-ticks", type=int, default=100_000, help="Safety limit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    asyncio.run(run_demo(args))


if __name__ == "__main__":
    main()

"""Play games of the 8x8 block puzzle with one of the built-in players.

Run with::

    python -m block_puzzle_search --player fulleval --games 5 --seed 1

Pass ``--render`` to print every board to stdout.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from block_puzzle_search.game import ScoringRules
from block_puzzle_search.players import PLAYERS, Player, RandomPlayer
from block_puzzle_search.runner import GameConfig, GameRunner, GameStats, RandomBatchSupplier
from block_puzzle_search.visualization import ConsoleRenderer, NullRenderer


LOGGER = logging.getLogger("block_puzzle_search")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    p.add_argument("--player", choices=sorted(PLAYERS), default="greedy")
    p.add_argument("--games", type=int, default=1)
    p.add_argument("--seed", type=int, default=None, help="Seed for the shape batches and the random player.")
    p.add_argument("--max-rounds", type=int, default=10000)
    p.add_argument("--batch-size", type=int, default=3)
    p.add_argument("--line-points", type=int, default=10, help="Points per cleared line.")
    p.add_argument("--cell-points", type=int, default=1, help="Points per covered cell.")
    p.add_argument("--combo", choices=["additive", "multiplicative"], default="additive")
    p.add_argument("--render", action="store_true", help="Print every board to stdout.")
    p.add_argument("--log-level", default="INFO", help="Logging level (e.g. DEBUG, INFO, WARNING).")
    return p


def build_player(name: str, seed: Optional[int] = None) -> Player:
    """Instantiate a registered player; seeded players get ``seed``."""
    factory = PLAYERS[name]
    if factory is RandomPlayer:
        return RandomPlayer(seed=seed)
    return factory()


def summarize(results: List[GameStats]) -> str:
    if not results:
        return "No games played."
    scores = [r.score for r in results]
    return (
        f"{len(results)} games: mean score {sum(scores) / len(scores):.1f}, "
        f"best {max(scores)}, worst {min(scores)}, "
        f"forfeits {sum(r.forfeits for r in results)}"
    )


def main(argv: List[str] | None = None) -> List[GameStats]:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")

    rules = ScoringRules(
        placement_points=args.cell_points,
        line_clear_points=args.line_points,
        combo=args.combo,
    )
    config = GameConfig(batch_size=args.batch_size, max_rounds=args.max_rounds, seed=args.seed)
    supplier = RandomBatchSupplier(config.batch_size, seed=config.seed)
    renderer = ConsoleRenderer() if args.render else NullRenderer()
    player = build_player(args.player, args.seed)

    results: List[GameStats] = []
    for game_idx in range(1, args.games + 1):
        runner = GameRunner(player, config=config, rules=rules, supplier=supplier, renderer=renderer)
        stats = runner.play()
        LOGGER.info(
            "Game %d: score=%d moves=%d lines=%d forfeits=%d",
            game_idx, stats.score, stats.moves, stats.lines_cleared, stats.forfeits,
        )
        results.append(stats)
    LOGGER.info(summarize(results))
    return results


if __name__ == "__main__":  # pragma: no cover
    main()

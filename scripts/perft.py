#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import time
import os
import sys

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo root (which contains `gambit/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from gambit.engine.board import board_to_text
from gambit.engine.game import Game
from gambit.engine.move import parse_uci
from gambit.engine.perft import perft, perft_divide


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run perft from the start position, optionally after some moves"
    )
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    parser.add_argument(
        "--moves", nargs="*", default=[], help="UCI moves to play first, e.g. e2e4 e7e5"
    )
    parser.add_argument("--divide", action="store_true", help="Print counts per root move")
    parser.add_argument("--show", action="store_true", help="Print the board before counting")
    args = parser.parse_args()

    game = Game.new()
    for uci in args.moves:
        from_sq, to_sq, promo = parse_uci(uci)
        if game.make_move(from_sq, to_sq, promo) is None:
            parser.error(f"illegal move: {uci}")

    if args.show:
        print(board_to_text(game.state.position))

    start = time.perf_counter()
    if args.divide:
        counts = perft_divide(game, args.depth)
        for uci, n in sorted(counts.items()):
            print(f"{uci}: {n}")
        nodes = sum(counts.values())
    else:
        nodes = perft(game, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()

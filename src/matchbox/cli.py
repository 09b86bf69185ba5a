from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional

from .board import Board, Player
from .config import ExhaustionPolicy, LearningConfig
from .display import format_board, format_result
from .errors import CellOccupied, InvalidPosition, MoveExhausted
from .game import Game
from .store import ReinforcementStore
from .tracking import log_metrics, log_params, maybe_mlflow_run
from .training import DEFAULT_EPISODES, play_episode, train


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="matchbox", description="Self-learning tic-tac-toe")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Seed for the agent's move selection")
    p.add_argument(
        "--exhaustion",
        choices=[e.value for e in ExhaustionPolicy],
        default=None,
        help="What to do when a move pool runs dry (default: refill, or MATCHBOX_EXHAUSTION)",
    )
    p.add_argument(
        "--reinforce-both",
        dest="reinforce_both",
        action="store_true",
        default=None,
        help="Also reinforce directed (human) moves",
    )
    p.add_argument(
        "--no-dedup",
        dest="dedup",
        action="store_false",
        default=None,
        help="Keep an independent pool per path instead of per position",
    )

    def add_episodes(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "--episodes",
            type=int,
            default=DEFAULT_EPISODES,
            help=f"Self-play training games (default: {DEFAULT_EPISODES})",
        )

    p_train = sub.add_parser("train", help="Train by self-play and report outcome counts")
    add_episodes(p_train)
    p_train.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_train.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs (for mlflow local backend)",
    )

    p_play = sub.add_parser("play", help="Play against the trained agent on the console")
    add_episodes(p_play)
    p_play.add_argument("--human", choices=["X", "O"], default="X", help="Your mark (X moves first)")
    p_play.add_argument(
        "--zero-based", action="store_true", help="Enter cells as 0-8 instead of 1-9"
    )
    p_play.add_argument("--games", type=int, default=1, help="Number of games to play")

    p_self = sub.add_parser("selfplay", help="Train, then show one agent-vs-agent game")
    add_episodes(p_self)

    p_ins = sub.add_parser("inspect", help="Show the learned move distribution for a board")
    add_episodes(p_ins)
    p_ins.add_argument("--board", required=True, help="Board string, e.g., 100020000 (0=empty,1=X,2=O)")
    p_ins.add_argument("--player", choices=["X", "O"], required=True, help="Side to move")

    return p


def _learning_config(ns: argparse.Namespace) -> LearningConfig:
    cfg = LearningConfig.from_env()
    if ns.seed is not None:
        cfg = replace(cfg, seed=ns.seed)
    if ns.exhaustion is not None:
        cfg = replace(cfg, exhaustion=ExhaustionPolicy(ns.exhaustion))
    if ns.reinforce_both is not None:
        cfg = replace(cfg, reinforce_both_players=ns.reinforce_both)
    if ns.dedup is not None:
        cfg = replace(cfg, dedup=ns.dedup)
    return cfg


def _print_info() -> None:
    import importlib.util
    import platform
    import sys

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _read_position(
    player: Player, zero_based: bool, read: Callable[[str], str]
) -> Optional[int]:
    lo, hi = (0, 8) if zero_based else (1, 9)
    raw = read(f"{player} to move ({lo}-{hi}): ").strip()
    try:
        value = int(raw)
    except ValueError:
        logging.error("Not a number: %r", raw)
        return None
    return value if zero_based else value - 1


def play_interactive(
    store: ReinforcementStore,
    config: LearningConfig,
    human: Player,
    zero_based: bool = False,
    read: Callable[[str], str] = input,
) -> Game:
    game = Game(store, config)
    player = Player.X
    while not game.is_game_over():
        if player is human:
            print(format_board(game.board))
            pos = _read_position(player, zero_based, read)
            if pos is None:
                continue
            try:
                game.apply_move(player, pos)
            except (InvalidPosition, CellOccupied) as e:
                logging.error("%s", e)
                continue
        else:
            try:
                game.apply_move(player)
            except MoveExhausted:
                break
        player = player.opponent()
    print(format_result(game))
    print(format_board(game.board))
    return game


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("matchbox-ttt"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if ns.cmd is None:
        parser.print_help()
        return 0

    try:
        cfg = _learning_config(ns)
    except ValueError as e:
        logging.error("%s", e)
        return 2
    if ns.episodes < 0:
        logging.error("Episodes must be >= 0: %s", ns.episodes)
        return 2

    if ns.cmd == "train":
        with maybe_mlflow_run(ns.tracking == "mlflow", run_name="self_play_training", log_dir=ns.log_dir):
            if ns.tracking == "mlflow":
                log_params({
                    "episodes": ns.episodes,
                    "exhaustion": cfg.exhaustion.value,
                    "dedup": cfg.dedup,
                    "seed": cfg.seed,
                })
            store, stats = train(ns.episodes, config=cfg)
            if ns.tracking == "mlflow":
                log_metrics({**stats.as_metrics(), "positions": float(len(store))})
        rates = stats.win_rates()
        logging.info(
            "games=%d x_wins=%d o_wins=%d draws=%d exhausted=%d positions=%d",
            stats.games, stats.x_wins, stats.o_wins, stats.draws, stats.exhausted, len(store),
        )
        logging.info("x_rate=%.3f o_rate=%.3f draw_rate=%.3f", rates["x"], rates["o"], rates["draw"])
        return 0

    if ns.cmd == "play":
        store, _ = train(ns.episodes, config=cfg)
        human = Player[ns.human]
        for _ in range(max(ns.games, 0)):
            try:
                play_interactive(store, cfg, human, zero_based=ns.zero_based)
            except EOFError:
                logging.error("Input closed; stopping")
                return 1
        return 0

    if ns.cmd == "selfplay":
        store, _ = train(ns.episodes, config=cfg)
        game = play_episode(store, cfg)
        print(format_result(game))
        print(format_board(game.board))
        return 0

    if ns.cmd == "inspect":
        try:
            board = Board.from_string(ns.board)
        except ValueError as e:
            logging.error("%s", e)
            return 2
        if board.is_terminal():
            logging.error("Board is terminal; no moves to inspect.")
            return 2
        if not cfg.dedup:
            logging.error("inspect needs per-position pools; drop --no-dedup.")
            return 2
        store, _ = train(ns.episodes, config=cfg)
        player = Player[ns.player]
        node = store.registry.find(board)
        if node is None or not store.has_pool(node, player):
            logging.warning("Position never played by %s during training", player)
            return 1
        weights = store.weights(node, player)
        policy = store.policy(node, player)
        for i in range(9):
            if board[i] is Player.EMPTY:
                logging.info("cell=%d copies=%d p=%.3f", i, weights[i], policy[i])
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

"""Main entry point for the tilematch console game."""

import argparse
import logging
import random
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tilematch.bridge import HostBridge
from tilematch.config import Config, load_config
from tilematch.game.session import GameSession
from tilematch.logging import GameLogConfig, GameLogger
from tilematch.models.game_state import GameResult
from tilematch.strategy import STRATEGIES, Strategy
from tilematch.utils.logger import BoardDisplay, setup_logging

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  r1 c1 r2 c2   swap two adjacent cards
  h             hint
  s             shuffle
  p             pause / resume
  n             next level (after a win or loss)
  r             retry level
  q             quit"""


def generate_log_filename(log_dir: str, mode: str) -> str:
    """Generate log filename with timestamp and play mode.

    Format: {ISO timestamp}_{mode}.jsonl

    Args:
        log_dir: Directory for log files.
        mode: "interactive" or the autoplay strategy name.

    Returns:
        Full path to log file.
    """
    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    return str(Path(log_dir) / f"{timestamp}_{mode}.jsonl")


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Match-3 tile puzzle in the terminal"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config file (YAML)",
    )
    parser.add_argument(
        "-l",
        "--level",
        type=int,
        help="Level number to start at, 1-based (overrides config)",
    )
    parser.add_argument(
        "--campaign",
        action="store_true",
        help="Play the built-in campaign",
    )
    parser.add_argument(
        "--autoplay",
        choices=sorted(STRATEGIES),
        help="Let a strategy play instead of reading commands",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for boards and shuffles",
    )
    parser.add_argument(
        "--max-moves",
        type=int,
        default=500,
        help="Stop autoplay after this many moves (default: 500)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--show-board",
        action="store_true",
        help="Print the board after every move during autoplay",
    )
    parser.add_argument(
        "--game-log",
        type=Path,
        help="Directory for game log files (filename auto-generated)",
    )
    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command-line overrides to a loaded config."""
    if args.level:
        config.game.level_index = args.level - 1
    if args.campaign:
        config.game.campaign = True
    if args.verbose:
        config.logging.level = "DEBUG"
    if args.show_board:
        config.logging.show_board = True
    if args.game_log:
        config.game_log.enabled = True
        config.game_log.output_path = str(args.game_log)
    return config


def run_autoplay(
    session: GameSession,
    strategy: Strategy,
    display: BoardDisplay,
    max_moves: int,
) -> None:
    """Play levels with a strategy until a level is lost or moves run out."""
    moves = 0
    while moves < max_moves:
        state = session.state
        if state.is_game_over:
            if state.last_result != GameResult.WIN or session.catalog.is_last(state.level_index):
                break
            session.next_level()
            continue

        if not strategy.play_turn(session):
            break
        moves += 1
        # One countdown tick per move
        session.scheduler.advance(session.timing.tick_interval)
        display.print_board(session)
        display.print_status(session)


def run_interactive(
    session: GameSession,
    display: BoardDisplay,
    stdin: TextIO = sys.stdin,
) -> None:
    """Read commands from stdin until quit or end of input."""
    print(HELP_TEXT)
    display.print_board(session, force=True)
    display.print_status(session)

    last = time.monotonic()
    for line in stdin:
        now = time.monotonic()
        # Wall-clock time drives the countdown between commands
        session.scheduler.advance(now - last)
        last = now

        parts = line.split()
        if not parts:
            continue
        command = parts[0].lower()
        if command == "q":
            break
        elif command == "h":
            if session.use_hint() is None:
                print("No hint available")
        elif command == "s":
            session.use_shuffle()
        elif command == "p":
            session.toggle_pause()
        elif command == "n":
            session.next_level()
        elif command == "r":
            session.retry_level()
        elif len(parts) == 4 and all(p.lstrip("-").isdigit() for p in parts):
            r1, c1, r2, c2 = (int(p) for p in parts)
            session.back()
            session.select_at(r1, c1)
            session.select_at(r2, c2)
        else:
            print(HELP_TEXT)
            continue

        display.print_board(session, force=True)
        display.print_status(session)


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success)
    """
    args = build_parser().parse_args()

    # Load config
    config = apply_overrides(load_config(args.config), args)

    # Setup logging
    setup_logging(config.logging.level)

    display = BoardDisplay(show_board=config.logging.show_board)
    rng = random.Random(args.seed)
    mode = args.autoplay or "interactive"

    if config.game_log.enabled:
        log_path = generate_log_filename(config.game_log.output_path, mode)
        game_log_config = GameLogConfig(enabled=True, output_path=log_path)
        print(f"Game log: {log_path}")
    else:
        game_log_config = GameLogConfig(enabled=False)

    bridge = HostBridge()
    bridge.init(mode=mode)

    try:
        with GameLogger(game_log_config) as game_logger:
            session = GameSession(config, rng=rng, bridge=bridge, game_logger=game_logger)
            session.set_callbacks(
                on_score=display.print_score,
                on_win=display.print_win,
                on_lose=display.print_lose,
                on_level_change=lambda event: display.print_level_start(
                    event.level, event.index, len(session.catalog)
                ),
            )
            session.start()

            if args.autoplay:
                run_autoplay(session, STRATEGIES[args.autoplay](), display, args.max_moves)
            else:
                run_interactive(session, display)

            session.stop()
            display.print_final_results(session.state.score, session.levels_won)
        return 0

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"Game error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

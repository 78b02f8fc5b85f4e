#!/usr/bin/env python3
"""
2048 - terminal front-end
Play with arrow keys or WASD, 'r' restarts, 'q' quits.
"""

import argparse
import curses
import logging
from typing import Optional

import numpy as np

from merge2048.config import FOUR_PROBABILITY, GRID_SIZE, GameConfig
from merge2048.controller import GameController, GameState
from merge2048.events import NullPresenter

KEY_NAMES = {
    curses.KEY_UP: 'up',
    curses.KEY_DOWN: 'down',
    curses.KEY_LEFT: 'left',
    curses.KEY_RIGHT: 'right',
}


class TerminalPresenter(NullPresenter):
    """Redraws are driven by the input loop, so effects are acknowledged at once."""

    def __init__(self):
        self.lost = False

    def on_loss(self) -> None:
        self.lost = True


def format_board(board: np.ndarray) -> list:
    n = board.shape[0]
    lines = []
    for i, row in enumerate(board):
        row_str = "|".join(f"{num:5}" if num > 0 else "     " for num in row)
        lines.append(f"|{row_str}|")
        if i < n - 1:
            lines.append("+-----" * n + "+")
    return lines


def render(stdscr, game: GameController, previous_board: Optional[np.ndarray] = None, message: str = ""):
    stdscr.clear()
    stdscr.addstr(0, 0, f"Moves: {game.move_count}    {message}")

    if previous_board is not None:
        stdscr.addstr(1, 0, "Previous Board:")
        for i, line in enumerate(format_board(previous_board)):
            stdscr.addstr(i + 2, 0, line)

    col = 6 * game.grid.size + 6
    stdscr.addstr(1, col, "Current Board:")
    for i, line in enumerate(format_board(game.board())):
        stdscr.addstr(i + 2, col, line)
    stdscr.refresh()


def key_name(key: int) -> Optional[str]:
    if key in KEY_NAMES:
        return KEY_NAMES[key]
    if 0 <= key < 256:
        return chr(key).lower()
    return None


def run(stdscr, config: GameConfig):
    curses.curs_set(0)
    presenter = TerminalPresenter()
    game = GameController(presenter, config)
    game.start()

    previous_board = None
    render(stdscr, game)
    while True:
        key = key_name(stdscr.getch())
        if key == 'q':
            return game
        if key == 'r' and game.state in (GameState.AWAITING_INPUT, GameState.TERMINAL):
            presenter.lost = False
            game.restart()
            previous_board = None
            render(stdscr, game, message="New game")
            continue
        if game.is_terminal:
            continue
        board_before = game.board()
        if game.handle_input(key):
            previous_board = board_before
            message = "You lose! 'r' restarts, 'q' quits." if presenter.lost else ""
            render(stdscr, game, previous_board, message)
        else:
            render(stdscr, game, previous_board, "Invalid input or illegal move.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play 2048 in the terminal.")
    parser.add_argument("--size", type=int, default=GRID_SIZE, help="grid edge length")
    parser.add_argument("--seed", type=int, default=None, help="random seed for reproducible games")
    parser.add_argument("--four-probability", type=float, default=FOUR_PROBABILITY,
                        help="chance that a spawned tile is a 4")
    parser.add_argument("--gui", action="store_true", help="open the pygame window instead")
    parser.add_argument("--log-file", default=None, help="write debug logs of every turn here")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.log_file:
        logging.basicConfig(filename=args.log_file, level=logging.DEBUG,
                            format="%(asctime)s %(name)s %(levelname)s %(message)s")
    config = GameConfig(size=args.size, seed=args.seed, four_probability=args.four_probability)
    if args.gui:
        from merge2048.gui import main as gui_main
        gui_main(config)
        return
    game = curses.wrapper(run, config)
    print(f"Moves: {game.move_count}    Highest tile: {game.max_tile()}")


if __name__ == "__main__":
    main()

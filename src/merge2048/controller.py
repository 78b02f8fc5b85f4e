"""
Turn sequencing for the merge puzzle.

    AWAITING_INPUT -> RESOLVING -> FINALIZING -> AWAITING_INPUT | TERMINAL

Input is single-shot: the listener is disarmed as soon as a legal move starts
and re-armed only once the turn has finished. Merges and the spawn are
deferred until every slide effect of the turn has been acknowledged.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence

import numpy as np

from merge2048.config import KEY_BINDINGS, GameConfig
from merge2048.effects import EffectBarrier
from merge2048.events import NullPresenter, Presenter
from merge2048.grid import Grid
from merge2048.moves import Direction, can_move, legal_directions, lines_for, slide_tiles
from merge2048.tile import Tile

logger = logging.getLogger(__name__)


class GameState(Enum):
    AWAITING_INPUT = 'awaiting_input'
    RESOLVING = 'resolving'
    FINALIZING = 'finalizing'
    TERMINAL = 'terminal'


class GameController:

    def __init__(self, presenter: Optional[Presenter] = None, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self.presenter = presenter or NullPresenter()
        self.grid = Grid(self.config.size)
        self.state: Optional[GameState] = None
        self.listener_armed = False
        self.move_count = 0
        self.last_direction: Optional[Direction] = None
        self._next_id = 1
        self._barrier: Optional[EffectBarrier] = None
        self._loss_signaled = False
        self._generation = 0
        self._loss_callbacks: List[Callable[[], None]] = []

    # ---------- setup ----------

    def start(self) -> None:
        """Place the initial tiles and wait for the first move."""
        if self.state is not None:
            raise RuntimeError("Game already started; use restart()")
        last = None
        for _ in range(self.config.initial_tiles):
            last = self._spawn_tile()
        logger.debug("Game started:\n%s", self.grid)
        self._settle(last)

    def restart(self) -> None:
        self._require_idle("restart")
        self._clear()
        self.state = None
        self.start()

    def set_board(self, values: Sequence[Sequence[int]]) -> None:
        """Replace every tile with the given [y][x] values (0 = empty)."""
        self._require_idle("set_board")
        board = np.asarray(values, dtype=int)
        if board.shape != (self.grid.size, self.grid.size):
            raise ValueError(f"Board must be {self.grid.size}x{self.grid.size}, got {board.shape}")
        if (board < 0).any():
            raise ValueError("Board values must be 0 (empty) or positive")
        self._clear()
        for y in range(self.grid.size):
            for x in range(self.grid.size):
                if board[y, x]:
                    self.grid.cell_at(x, y).tile = self._new_tile(int(board[y, x]))
        self._settle(None)

    def on_loss(self, fn: Callable[[], None]) -> None:
        self._loss_callbacks.append(fn)

    # ---------- input ----------

    def handle_input(self, key) -> bool:
        """
        Feed one input symbol. Returns True when it started a turn.
        Non-directional keys and illegal moves leave the listener armed.
        """
        if not self.listener_armed:
            logger.debug("Input %r ignored in state %s", key, self.state)
            return False
        if isinstance(key, Direction):
            direction = key
        else:
            name = KEY_BINDINGS.get(key)
            if name is None:
                return False
            direction = Direction(name)

        if not can_move(lines_for(self.grid, direction)):
            logger.debug("Move %s is not legal", direction.value)
            return False

        self.listener_armed = False
        self._resolve(direction)
        return True

    def can_move(self, direction) -> bool:
        return can_move(lines_for(self.grid, Direction.from_name(direction)))

    def legal_directions(self) -> List[Direction]:
        return legal_directions(self.grid)

    # ---------- turn phases ----------

    def _resolve(self, direction: Direction) -> None:
        self.state = GameState.RESOLVING
        self.last_direction = direction
        effects = slide_tiles(lines_for(self.grid, direction))
        logger.debug("Resolving %s: waiting on %d effect(s)", direction.value, len(effects))
        barrier = EffectBarrier(effects, self._finalize)
        # With nothing outstanding the barrier has already run _finalize
        self._barrier = None if barrier.fired else barrier

    def _finalize(self) -> None:
        self._barrier = None
        self.state = GameState.FINALIZING
        merges = sum(1 for cell in self.grid.cells if cell.merge_tiles())
        self.move_count += 1
        new_tile = self._spawn_tile()
        logger.debug("Move %d finalized: %d merge(s), spawned %r", self.move_count, merges, new_tile)
        self._settle(new_tile)

    def _settle(self, last_spawn: Optional[Tile]) -> None:
        """Decide between waiting for input and the terminal state."""
        if self.legal_directions():
            self.state = GameState.AWAITING_INPUT
            self.listener_armed = True
            return
        self.state = GameState.TERMINAL
        self.listener_armed = False
        if last_spawn is None:
            self._signal_loss()
        else:
            generation = self._generation
            last_spawn.wait_for_transition(animation=True).add_done_callback(
                lambda _: self._signal_loss(generation))

    def _signal_loss(self, generation: Optional[int] = None) -> None:
        # A pending entrance effect may outlive the game that requested it
        if generation is not None and generation != self._generation:
            return
        if self._loss_signaled:
            return
        self._loss_signaled = True
        logger.info("No legal move left after %d move(s)", self.move_count)
        self.presenter.on_loss()
        for fn in self._loss_callbacks:
            fn()

    # ---------- tiles ----------

    def _new_tile(self, value: int) -> Tile:
        tile = Tile(self.presenter, value, self._next_id)
        self._next_id += 1
        return tile

    def _spawn_tile(self) -> Tile:
        cell = self.grid.random_empty_cell(self.config.rng)
        tile = self._new_tile(self.config.spawn_value())
        cell.tile = tile
        return tile

    def _clear(self) -> None:
        self._generation += 1
        for cell in self.grid.cells:
            if cell.tile is not None:
                cell.tile.remove()
                cell.tile = None
        self.move_count = 0
        self.last_direction = None
        self._loss_signaled = False

    def _require_idle(self, what: str) -> None:
        if self.state in (GameState.RESOLVING, GameState.FINALIZING):
            raise RuntimeError(f"Cannot {what} while a turn is in progress ({self.state.value})")

    # ---------- queries ----------

    @property
    def is_terminal(self) -> bool:
        return self.state is GameState.TERMINAL

    @property
    def pending_effects(self) -> int:
        return self._barrier.pending if self._barrier is not None else 0

    def board(self) -> np.ndarray:
        return self.grid.to_array()

    def max_tile(self) -> int:
        return int(self.board().max())

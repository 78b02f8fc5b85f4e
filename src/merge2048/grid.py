import random
from typing import List, Optional

import numpy as np

from merge2048.cell import Cell
from merge2048.config import GRID_SIZE


class NoEmptyCellError(AssertionError):
    """Raised when a tile must be placed but every cell is occupied."""


class Grid:
    """
    Fixed N x N collection of cells, built once per game.
    Row and column views are projections over the same cells, not copies.
    """

    def __init__(self, size: int = GRID_SIZE):
        self.size = size
        # Row-major: index = y * size + x
        self._cells = [Cell(i % size, i // size) for i in range(size * size)]

    @property
    def cells(self) -> List[Cell]:
        return list(self._cells)

    @property
    def cells_by_row(self) -> List[List[Cell]]:
        """One list per y, ordered by x ascending."""
        n = self.size
        return [self._cells[y * n:(y + 1) * n] for y in range(n)]

    @property
    def cells_by_column(self) -> List[List[Cell]]:
        """One list per x, ordered by y ascending."""
        n = self.size
        return [[self._cells[y * n + x] for y in range(n)] for x in range(n)]

    def cell_at(self, x: int, y: int) -> Cell:
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise IndexError(f"({x}, {y}) is outside a {self.size}x{self.size} grid")
        return self._cells[y * self.size + x]

    @property
    def empty_cells(self) -> List[Cell]:
        return [cell for cell in self._cells if cell.tile is None]

    def random_empty_cell(self, rng: Optional[random.Random] = None) -> Cell:
        empty = self.empty_cells
        if not empty:
            raise NoEmptyCellError("No empty cell left to place a tile in")
        return (rng or random).choice(empty)

    def to_array(self) -> np.ndarray:
        """Tile values as an array indexed [y, x]; 0 marks an empty cell."""
        board = np.zeros((self.size, self.size), dtype=int)
        for cell in self._cells:
            if cell.tile is not None:
                board[cell.y, cell.x] = cell.tile.value
        return board

    def total_value(self) -> int:
        return sum(cell.tile.value for cell in self._cells if cell.tile is not None)

    def __str__(self):
        rows = []
        for row in self.cells_by_row:
            rows.append("|".join(f"{c.tile.value:4}" if c.tile else "    " for c in row))
        return "\n".join(f"|{r}|" for r in rows)

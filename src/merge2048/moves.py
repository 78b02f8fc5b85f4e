"""
Slide/merge resolution.

Every direction is handled by the same algorithm: pick the row or column view
of the grid, reverse it when needed, and slide each line toward index 0.
"""

import logging
from enum import Enum
from typing import List, Sequence

from merge2048.cell import Cell
from merge2048.effects import Effect
from merge2048.grid import Grid

logger = logging.getLogger(__name__)


class Direction(Enum):
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'

    @classmethod
    def from_name(cls, name) -> 'Direction':
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise ValueError(f"Invalid move direction: {name!r}") from None


def lines_for(grid: Grid, direction: Direction) -> List[List[Cell]]:
    """Lines ordered from the near edge (index 0) to the far edge in the direction of travel."""
    direction = Direction.from_name(direction)
    if direction is Direction.UP:
        return grid.cells_by_column
    if direction is Direction.DOWN:
        return [list(reversed(column)) for column in grid.cells_by_column]
    if direction is Direction.LEFT:
        return grid.cells_by_row
    return [list(reversed(row)) for row in grid.cells_by_row]


def slide_tiles(lines: Sequence[Sequence[Cell]]) -> List[Effect]:
    """
    Slide every line toward index 0, one pass, near-to-far.
    Returns one transition effect per tile that moved.
    """
    effects: List[Effect] = []
    for line in lines:
        for i in range(1, len(line)):
            cell = line[i]
            if cell.tile is None:
                continue
            last_valid_cell = None
            for j in range(i - 1, -1, -1):
                move_to_cell = line[j]
                if not move_to_cell.can_accept(cell.tile):
                    break
                last_valid_cell = move_to_cell

            if last_valid_cell is None:
                continue
            tile = cell.tile
            if last_valid_cell.tile is not None:
                last_valid_cell.merge_tile = tile
            else:
                last_valid_cell.tile = tile
            cell.tile = None
            logger.debug("Tile %d (%d) slid (%d, %d) -> (%d, %d)%s",
                         tile.id, tile.value, cell.x, cell.y,
                         last_valid_cell.x, last_valid_cell.y,
                         " to merge" if last_valid_cell.merge_tile is tile else "")
            effects.append(tile.wait_for_transition())
    return effects


def can_move(lines: Sequence[Sequence[Cell]]) -> bool:
    """One-step lookahead: some tile past index 0 is accepted by its near neighbour."""
    for line in lines:
        for index in range(1, len(line)):
            cell = line[index]
            if cell.tile is None:
                continue
            if line[index - 1].can_accept(cell.tile):
                return True
    return False


def legal_directions(grid: Grid) -> List[Direction]:
    return [d for d in Direction if can_move(lines_for(grid, d))]

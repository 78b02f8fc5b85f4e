import unittest

import numpy as np

from merge2048.events import RecordingPresenter
from merge2048.grid import Grid
from merge2048.moves import Direction, can_move, legal_directions, lines_for, slide_tiles
from test_grid import fill

EMPTY = [0, 0, 0, 0]


def resolve(values, direction):
    """Slide a board, fold merges, and return (new_board, effects, grid)."""
    grid = fill(Grid(), values)
    effects = slide_tiles(lines_for(grid, direction))
    for cell in grid.cells:
        cell.merge_tiles()
    return grid.to_array(), effects, grid


def row_board(row):
    return [list(row), EMPTY, EMPTY, EMPTY]


class TestDirection(unittest.TestCase):

    def test_from_name(self):
        self.assertIs(Direction.from_name('LEFT'), Direction.LEFT)
        self.assertIs(Direction.from_name(Direction.UP), Direction.UP)
        with self.assertRaises(ValueError):
            Direction.from_name('sideways')

    def test_lines_for_orientation(self):
        grid = Grid()
        coords = lambda lines: [[(c.x, c.y) for c in line] for line in lines]
        self.assertEqual(coords(lines_for(grid, Direction.LEFT))[0], [(0, 0), (1, 0), (2, 0), (3, 0)])
        self.assertEqual(coords(lines_for(grid, Direction.RIGHT))[0], [(3, 0), (2, 0), (1, 0), (0, 0)])
        self.assertEqual(coords(lines_for(grid, Direction.UP))[1], [(1, 0), (1, 1), (1, 2), (1, 3)])
        self.assertEqual(coords(lines_for(grid, Direction.DOWN))[1], [(1, 3), (1, 2), (1, 1), (1, 0)])


class TestSlideScenarios(unittest.TestCase):

    def assertRowAfter(self, row, direction, expected):
        board, _, _ = resolve(row_board(row), direction)
        np.testing.assert_array_equal(board[0], np.array(expected))

    def test_pair_merges_left(self):
        self.assertRowAfter([2, 2, 0, 0], Direction.LEFT, [4, 0, 0, 0])

    def test_gap_then_merge(self):
        self.assertRowAfter([2, 0, 2, 0], Direction.LEFT, [4, 0, 0, 0])

    def test_blocked_row_is_unchanged(self):
        self.assertRowAfter([2, 4, 0, 0], Direction.LEFT, [2, 4, 0, 0])
        grid = fill(Grid(), row_board([2, 4, 0, 0]))
        self.assertFalse(can_move(lines_for(grid, Direction.LEFT)))

    def test_slide_without_merge(self):
        board, effects, grid = resolve(row_board([0, 0, 0, 2]), Direction.LEFT)
        np.testing.assert_array_equal(board[0], [2, 0, 0, 0])
        self.assertEqual(len(effects), 1)
        self.assertIsNone(grid.cell_at(0, 0).merge_tile)

    def test_four_equal_tiles(self):
        self.assertRowAfter([2, 2, 2, 2], Direction.LEFT, [4, 4, 0, 0])

    def test_no_chain_merge(self):
        self.assertRowAfter([2, 2, 4, 0], Direction.LEFT, [4, 4, 0, 0])
        self.assertRowAfter([4, 4, 8, 0], Direction.LEFT, [8, 8, 0, 0])

    def test_merge_behind_blocker(self):
        self.assertRowAfter([4, 2, 2, 0], Direction.LEFT, [4, 4, 0, 0])

    def test_right(self):
        self.assertRowAfter([2, 2, 0, 0], Direction.RIGHT, [0, 0, 0, 4])
        self.assertRowAfter([2, 0, 0, 4], Direction.RIGHT, [0, 0, 2, 4])
        self.assertRowAfter([8, 8, 8, 0], Direction.RIGHT, [0, 0, 8, 16])

    def test_up_and_down(self):
        values = [
            [2, 0, 0, 0],
            [2, 4, 0, 0],
            [0, 4, 0, 2],
            [4, 0, 0, 0],
        ]
        up, _, _ = resolve(values, Direction.UP)
        np.testing.assert_array_equal(up, [
            [4, 8, 0, 2],
            [4, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        down, _, _ = resolve(values, Direction.DOWN)
        np.testing.assert_array_equal(down, [
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [4, 0, 0, 0],
            [4, 8, 0, 2],
        ])

    def test_multi_row_board(self):
        board, _, _ = resolve([
            [2, 2, 0, 0],
            [4, 0, 4, 0],
            [0, 0, 0, 0],
            [2, 2, 2, 2],
        ], Direction.LEFT)
        np.testing.assert_array_equal(board, [
            [4, 0, 0, 0],
            [8, 0, 0, 0],
            [0, 0, 0, 0],
            [4, 4, 0, 0],
        ])


class TestSlideMechanics(unittest.TestCase):

    def test_source_cell_is_emptied_and_merge_is_pending(self):
        grid = fill(Grid(), row_board([2, 2, 0, 0]))
        resident = grid.cell_at(0, 0).tile
        mover = grid.cell_at(1, 0).tile
        slide_tiles(lines_for(grid, Direction.LEFT))
        self.assertIsNone(grid.cell_at(1, 0).tile)
        self.assertIs(grid.cell_at(0, 0).tile, resident)
        self.assertIs(grid.cell_at(0, 0).merge_tile, mover)
        # values only change once merges are folded in
        self.assertEqual(resident.value, 2)
        grid.cell_at(0, 0).merge_tiles()
        self.assertEqual(resident.value, 4)
        self.assertTrue(mover.removed)

    def test_tile_jumps_straight_to_destination(self):
        presenter = RecordingPresenter()
        grid = fill(Grid(), row_board([0, 0, 0, 8]), presenter)
        presenter.clear()
        effects = slide_tiles(lines_for(grid, Direction.LEFT))
        moves = [e for e in presenter.events if e.__class__.__name__ == 'TileChanged']
        self.assertEqual([(e.x, e.y) for e in moves], [(0, 0)])
        self.assertEqual(len(effects), 1)

    def test_one_effect_per_moving_tile(self):
        _, effects, _ = resolve([
            [2, 2, 2, 2],
            [0, 4, 0, 0],
            [8, 0, 0, 0],
            [0, 0, 0, 0],
        ], Direction.LEFT)
        # row 0: three movers, row 1: one, row 2: none
        self.assertEqual(len(effects), 4)
        self.assertTrue(all(e.kind == 'transition' for e in effects))

    def test_merges_conserve_tile_sum(self):
        values = [
            [2, 2, 4, 4],
            [8, 8, 8, 0],
            [2, 0, 2, 2],
            [16, 16, 0, 0],
        ]
        for direction in Direction:
            board, _, _ = resolve(values, direction)
            self.assertEqual(board.sum(), np.array(values).sum())

    def test_each_destination_takes_one_merge(self):
        grid = fill(Grid(), row_board([2, 2, 2, 0]))
        slide_tiles(lines_for(grid, Direction.LEFT))
        self.assertIsNotNone(grid.cell_at(0, 0).merge_tile)
        self.assertIsNone(grid.cell_at(1, 0).merge_tile)
        self.assertEqual(grid.cell_at(1, 0).tile.value, 2)


class TestCanMove(unittest.TestCase):

    CHECKERBOARD = [
        [2, 4, 2, 4],
        [4, 2, 4, 2],
        [2, 4, 2, 4],
        [4, 2, 4, 2],
    ]

    def test_stuck_board(self):
        grid = fill(Grid(), self.CHECKERBOARD)
        for direction in Direction:
            self.assertFalse(can_move(lines_for(grid, direction)))
            before = grid.to_array()
            self.assertEqual(slide_tiles(lines_for(grid, direction)), [])
            np.testing.assert_array_equal(grid.to_array(), before)
        self.assertEqual(legal_directions(grid), [])

    def test_single_merge_available(self):
        values = [row[:] for row in self.CHECKERBOARD]
        values[3][2] = values[3][3] = 8  # only a horizontal pair
        grid = fill(Grid(), values)
        self.assertEqual(set(legal_directions(grid)), {Direction.LEFT, Direction.RIGHT})

    def test_empty_grid_cannot_move(self):
        self.assertEqual(legal_directions(Grid()), [])

    def test_lookahead_agrees_with_resolution(self):
        boards = [
            row_board([2, 4, 0, 0]),
            row_board([0, 2, 0, 0]),
            row_board([2, 4, 8, 16]),
            [[2, 0, 0, 0], [2, 0, 0, 0], EMPTY, EMPTY],
        ]
        for values in boards:
            for direction in Direction:
                grid = fill(Grid(), values)
                predicted = can_move(lines_for(grid, direction))
                moved = bool(slide_tiles(lines_for(grid, direction)))
                self.assertEqual(predicted, moved, (values, direction))


if __name__ == "__main__":
    unittest.main()

"""
Rules engine for a 2048-style sliding-tile merge puzzle.
Presentation, input and timing live outside the core; see events.Presenter.
"""

from merge2048.cell import Cell
from merge2048.config import GameConfig
from merge2048.controller import GameController, GameState
from merge2048.effects import Effect, EffectBarrier
from merge2048.events import NullPresenter, Presenter, RecordingPresenter
from merge2048.grid import Grid, NoEmptyCellError
from merge2048.moves import Direction, can_move, legal_directions, lines_for, slide_tiles
from merge2048.tile import Tile

__version__ = "0.1.0"

__all__ = [
    'Cell', 'GameConfig', 'GameController', 'GameState', 'Effect', 'EffectBarrier',
    'NullPresenter', 'Presenter', 'RecordingPresenter', 'Grid', 'NoEmptyCellError',
    'Direction', 'can_move', 'legal_directions', 'lines_for', 'slide_tiles', 'Tile',
]

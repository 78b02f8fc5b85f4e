from typing import Optional

from merge2048.tile import Tile


class Cell:
    """One grid slot: a resident tile plus, mid-turn only, a tile sliding in to merge."""

    def __init__(self, x: int, y: int):
        self._x = x
        self._y = y
        self._tile: Optional[Tile] = None
        self._merge_tile: Optional[Tile] = None

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    @property
    def tile(self) -> Optional[Tile]:
        return self._tile

    @tile.setter
    def tile(self, value: Optional[Tile]):
        self._tile = value
        if value is None:
            return
        value.move_to(self._x, self._y)

    @property
    def merge_tile(self) -> Optional[Tile]:
        return self._merge_tile

    @merge_tile.setter
    def merge_tile(self, value: Optional[Tile]):
        self._merge_tile = value
        if value is None:
            return
        value.move_to(self._x, self._y)

    @property
    def is_empty(self) -> bool:
        return self._tile is None

    def can_accept(self, tile: Tile) -> bool:
        return (
            self._tile is None
            or (self._merge_tile is None and self._tile.value == tile.value)
        )

    def merge_tiles(self) -> bool:
        """Fold the incoming merge tile into the resident one. Returns True if a merge happened."""
        if self._tile is None or self._merge_tile is None:
            return False
        self._tile.value = self._tile.value + self._merge_tile.value
        self._merge_tile.remove()
        self._merge_tile = None
        return True

    def __repr__(self):
        return f"Cell({self._x}, {self._y}, tile={self._tile}, merge_tile={self._merge_tile})"

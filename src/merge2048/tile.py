from typing import Optional, Tuple

from merge2048.effects import ENTRANCE, TRANSITION, Effect


class Tile:
    """
    A numbered game piece.
    State changes are applied first and then reported to the presenter, so the
    core stays usable without any rendering surface. The presenter first hears
    of a tile when a cell places it.
    """

    def __init__(self, presenter, value: int, tile_id: int = 0):
        if value <= 0:
            raise ValueError(f"Tile value must be positive, got {value}")
        self._presenter = presenter
        self._value = int(value)
        self._x: Optional[int] = None
        self._y: Optional[int] = None
        self.id = tile_id
        self.removed = False

    @property
    def value(self) -> int:
        return self._value

    @value.setter
    def value(self, v: int):
        if v <= 0:
            raise ValueError(f"Tile value must be positive, got {v}")
        self._value = int(v)
        self._presenter.on_tile_changed(self)

    @property
    def x(self) -> Optional[int]:
        return self._x

    @property
    def y(self) -> Optional[int]:
        return self._y

    @property
    def position(self) -> Optional[Tuple[int, int]]:
        if self._x is None:
            return None
        return self._x, self._y

    def move_to(self, x: int, y: int) -> None:
        self._x, self._y = x, y
        self._presenter.on_tile_changed(self)

    def remove(self) -> None:
        self.removed = True
        self._presenter.on_tile_removed(self)

    def wait_for_transition(self, animation: bool = False) -> Effect:
        """Ask the presenter for the slide (or, with animation=True, the entrance) effect."""
        return self._presenter.request_effect(self, ENTRANCE if animation else TRANSITION)

    def __repr__(self):
        return f"Tile(id={self.id}, value={self._value}, pos={self.position})"

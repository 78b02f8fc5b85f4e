from dataclasses import dataclass
from typing import List, Optional, Union

from merge2048.effects import ENTRANCE, TRANSITION, Effect

# ===== Presentation sync records =====

@dataclass(frozen=True)
class TileChanged:
    id: int
    value: int
    x: Optional[int]
    y: Optional[int]

@dataclass(frozen=True)
class TileRemoved:
    id: int

@dataclass(frozen=True)
class EffectRequested:
    id: int
    kind: str

@dataclass(frozen=True)
class LossSignaled:
    pass


Event = Union[TileChanged, TileRemoved, EffectRequested, LossSignaled]


class Presenter:
    """
    Observer interface the core talks to.
    Rendering layers subclass this; the core never draws anything itself.
    Effects returned by request_effect must be completed by the presenter later on.
    """

    def on_tile_changed(self, tile) -> None:
        pass

    def on_tile_removed(self, tile) -> None:
        pass

    def request_effect(self, tile, kind: str = TRANSITION) -> Effect:
        return Effect(tile, kind)

    def on_loss(self) -> None:
        pass


class NullPresenter(Presenter):
    """Draws nothing and acknowledges every effect on the spot."""

    def request_effect(self, tile, kind: str = TRANSITION) -> Effect:
        effect = Effect(tile, kind)
        effect.complete()
        return effect


class RecordingPresenter(Presenter):
    """
    Keeps an ordered log of everything the core reported.
    With auto_ack=False effects stay outstanding until complete_pending() is called.
    """

    def __init__(self, auto_ack: bool = True):
        self.auto_ack = auto_ack
        self.events: List[Event] = []
        self.pending: List[Effect] = []
        self.losses = 0

    def on_tile_changed(self, tile) -> None:
        self.events.append(TileChanged(tile.id, tile.value, tile.x, tile.y))

    def on_tile_removed(self, tile) -> None:
        self.events.append(TileRemoved(tile.id))

    def request_effect(self, tile, kind: str = TRANSITION) -> Effect:
        self.events.append(EffectRequested(tile.id, kind))
        effect = Effect(tile, kind)
        if self.auto_ack:
            effect.complete()
        else:
            self.pending.append(effect)
        return effect

    def on_loss(self) -> None:
        self.losses += 1
        self.events.append(LossSignaled())

    def complete_pending(self, kind: Optional[str] = None) -> int:
        """Complete outstanding effects (optionally only one kind); returns how many."""
        todo = [e for e in self.pending if kind is None or e.kind == kind]
        self.pending = [e for e in self.pending if e not in todo]
        for effect in todo:
            effect.complete()
        return len(todo)

    def clear(self) -> None:
        self.events.clear()

    def of_type(self, cls) -> List[Event]:
        return [e for e in self.events if isinstance(e, cls)]


__all__ = [
    'TileChanged', 'TileRemoved', 'EffectRequested', 'LossSignaled', 'Event',
    'Presenter', 'NullPresenter', 'RecordingPresenter', 'ENTRANCE', 'TRANSITION',
]

import logging
from typing import Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

# Kinds of visual effect a tile can be asked to play
TRANSITION = 'transition'  # slide to a new cell
ENTRANCE = 'entrance'      # spawn animation


class Effect:
    """
    Single-shot completion handle for one visual effect.
    The presentation layer calls complete() exactly once when the effect has finished.
    """

    def __init__(self, tile=None, kind: str = TRANSITION):
        self.tile = tile
        self.kind = kind
        self._done = False
        self._callbacks: List[Callable[['Effect'], None]] = []

    @property
    def done(self) -> bool:
        return self._done

    def add_done_callback(self, fn: Callable[['Effect'], None]) -> None:
        """Run fn(effect) on completion; immediately if already complete."""
        if self._done:
            fn(self)
        else:
            self._callbacks.append(fn)

    def complete(self) -> None:
        if self._done:
            raise RuntimeError(f"Effect {self!r} completed twice")
        self._done = True
        callbacks, self._callbacks = self._callbacks, []
        for fn in callbacks:
            fn(self)

    def __repr__(self):
        tile_id = getattr(self.tile, 'id', None)
        return f"Effect(kind={self.kind!r}, tile={tile_id}, done={self._done})"


class EffectBarrier:
    """
    All-of join over a batch of effects.
    The continuation runs once, after the last outstanding effect completes.
    There is no timeout and no cancellation: a never-completing effect stalls the barrier.
    """

    def __init__(self, effects: Sequence[Effect], continuation: Callable[[], None]):
        self._continuation: Optional[Callable[[], None]] = continuation
        self._pending = sum(1 for e in effects if not e.done)
        self.total = len(effects)
        if self._pending == 0:
            self._fire()
            return
        for effect in effects:
            if not effect.done:
                effect.add_done_callback(self._on_effect_done)

    @property
    def pending(self) -> int:
        return self._pending

    @property
    def fired(self) -> bool:
        return self._continuation is None

    def _on_effect_done(self, effect: Effect) -> None:
        self._pending -= 1
        logger.debug("Effect done: %r (%d pending)", effect, self._pending)
        if self._pending == 0:
            self._fire()

    def _fire(self) -> None:
        continuation, self._continuation = self._continuation, None
        continuation()

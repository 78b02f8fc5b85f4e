import random
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

# ------------------------
# Board
# ------------------------
GRID_SIZE = 4
INITIAL_TILES = 2
SPAWN_VALUES: Tuple[int, int] = (2, 4)
FOUR_PROBABILITY = 0.5  # 2 and 4 spawn with equal odds

# ------------------------
# Input
# ------------------------
KEY_BINDINGS: Dict[str, str] = {
    'ArrowUp': 'up', 'ArrowDown': 'down', 'ArrowLeft': 'left', 'ArrowRight': 'right',
    'up': 'up', 'down': 'down', 'left': 'left', 'right': 'right',
    'w': 'up', 'a': 'left', 's': 'down', 'd': 'right',
}

# ------------------------
# Animation timings (ms), used by the front-ends only
# ------------------------
SLIDE_MS_PER_CELL = 50
SLIDE_MIN_MS = 50
MERGE_POP_MS = 90
SPAWN_MS = 90


@dataclass
class GameConfig:
    """Per-game settings handed to the controller."""
    size: int = GRID_SIZE
    initial_tiles: int = INITIAL_TILES
    four_probability: float = FOUR_PROBABILITY
    seed: Optional[int] = None
    rng: Optional[random.Random] = field(default=None, repr=False)

    def __post_init__(self):
        if self.size < 2:
            raise ValueError(f"Grid size must be at least 2, got {self.size}")
        if not 0.0 <= self.four_probability <= 1.0:
            raise ValueError(f"four_probability must be within [0, 1], got {self.four_probability}")
        if self.initial_tiles > self.size * self.size:
            raise ValueError("More initial tiles than cells")
        if self.rng is None:
            self.rng = random.Random(self.seed)

    def spawn_value(self) -> int:
        low, high = SPAWN_VALUES
        return high if self.rng.random() < self.four_probability else low

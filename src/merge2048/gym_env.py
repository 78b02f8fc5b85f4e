import numpy as np
import gymnasium as gym
from gymnasium import spaces

from merge2048.config import GameConfig
from merge2048.controller import GameController
from merge2048.moves import Direction

ACTIONS = [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]


class Merge2048Env(gym.Env):
    """
    Headless environment over the rules engine.
    Effects are acknowledged immediately, so every step is one complete turn.
    Reward is +1 per legal move and -1 per illegal one; there is no score.
    """
    metadata = {"render_modes": ["human", "ansi"]}

    def __init__(self, size: int = 4, four_probability: float = 0.5, render_mode=None):
        super().__init__()
        self.size = size
        self.four_probability = four_probability
        self.render_mode = render_mode
        self.action_space = spaces.Discrete(len(ACTIONS))
        self.observation_space = spaces.Box(low=0, high=1, shape=(size * size,), dtype=np.float32)
        self.game = self._new_game(seed=None)

        # Episode-level counters
        self.episode_moves = 0
        self.episode_invalid_moves = 0

    def _new_game(self, seed) -> GameController:
        config = GameConfig(size=self.size, four_probability=self.four_probability, seed=seed)
        game = GameController(config=config)
        game.start()
        return game

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        if seed is None:
            seed = int(self.np_random.integers(0, 2**31 - 1))
        self.game = self._new_game(seed)
        if options and "board" in options:
            self.game.set_board(options["board"])
        self.episode_moves = 0
        self.episode_invalid_moves = 0
        return self._get_obs(), self._info(invalid=False)

    def step(self, action):
        direction = ACTIONS[int(action)]
        self.episode_moves += 1
        if self.game.handle_input(direction):
            reward = 1.0
            invalid = False
        else:
            reward = -1.0
            invalid = True
            self.episode_invalid_moves += 1
        terminated = self.game.is_terminal
        return self._get_obs(), reward, terminated, False, self._info(invalid=invalid)

    def _info(self, invalid: bool) -> dict:
        board = self.game.board()
        return {
            "invalid_move": invalid,
            "max_tile": int(board.max()),
            "empty_tiles": int(np.count_nonzero(board == 0)),
            "episode_moves": self.episode_moves,
            "episode_invalid_moves": self.episode_invalid_moves,
            "action_mask": self.get_action_mask(),
        }

    def _get_obs(self):
        board = self.game.board()
        obs = np.where(board > 0, np.log2(np.maximum(board, 1)) / 16, 0)
        return np.clip(obs.flatten(), 0, 1).astype(np.float32)

    def get_action_mask(self):
        # Float mask in ACTIONS order [up, down, left, right]
        legal = set(self.game.legal_directions())
        return np.array([d in legal for d in ACTIONS], dtype=np.float32)

    def render(self):
        text = str(self.game.grid)
        if self.render_mode == "ansi":
            return text
        print(text)

    def close(self):
        pass

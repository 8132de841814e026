import logging

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from reversi import BOARD_SIZE, Cell, GameState, Side, Status

logger = logging.getLogger(__name__)


class ReversiEnv(gym.Env):
    """Both sides are driven through ``step``; the side to move is ``current_player``.

    Passes are resolved by the engine, so after a step the same side may be
    asked to move again.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(self, reward_mode: str = "standard", margin_scale: float = 0.3):
        super().__init__()
        if reward_mode not in ("standard", "margin"):
            raise ValueError(f"Unknown reward_mode {reward_mode!r}")
        self.board_size = BOARD_SIZE
        self.action_space = spaces.Discrete(self.board_size * self.board_size)
        # Planes: black stones, white stones, side-to-move, corners, edges
        self.observation_space = spaces.Box(
            low=0.0,
            high=1.0,
            shape=(5, self.board_size, self.board_size),
            dtype=np.float32,
        )
        self.reward_mode = reward_mode
        self.margin_scale = margin_scale
        self.game = GameState()

    @property
    def current_player(self) -> Side:
        return self.game.current_side

    def set_state(self, state: GameState) -> None:
        self.game = state

    def _encode_board(self):
        cells = np.array([[cell.value for cell in row] for row in self.game.board.cells], dtype=np.int8)

        b = (cells == Cell.BLACK.value).astype(np.float32)
        w = (cells == Cell.WHITE.value).astype(np.float32)
        side = np.full_like(b, 1.0 if self.current_player == Side.BLACK else 0.0)

        corners = np.zeros((self.board_size, self.board_size), dtype=np.float32)
        corners[0, 0] = corners[0, -1] = corners[-1, 0] = corners[-1, -1] = 1.0

        edges = np.zeros((self.board_size, self.board_size), dtype=np.float32)
        edges[0, :] = edges[-1, :] = edges[:, 0] = edges[:, -1] = 1.0
        edges[0, 0] = edges[0, -1] = edges[-1, 0] = edges[-1, -1] = 0.0

        return np.stack([b, w, side, corners, edges], axis=0)

    def _legal_mask(self):
        mask = np.zeros(self.action_space.n, dtype=np.float32)
        for r, c in self.game.legal_moves:
            mask[r * self.board_size + c] = 1.0
        return mask

    def _margin_reward(self, winner: Side) -> float:
        counts = self.game.disc_counts()
        total = max(1, counts.black + counts.white)
        margin = abs(counts.black - counts.white) / total
        return 1.0 + self.margin_scale * margin

    def _final_reward(self, mover: Side) -> float:
        winner = self.game.winner
        if winner is None:
            return 0.0
        base = self._margin_reward(winner) if self.reward_mode == "margin" else 1.0
        return base if winner == mover else -base

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        self.game = GameState()
        return self._encode_board(), {"action_mask": self._legal_mask()}

    def step(self, action):
        assert self.action_space.contains(action)
        truncated = False

        if self.game.game_over:
            raise RuntimeError("Episode is done. Call reset() first.")

        mover = self.current_player
        r, c = divmod(int(action), self.board_size)
        result = self.game.apply((r, c), mover)

        if result.status == Status.ILLEGAL_MOVE:
            # Illegal actions are not allowed; end episode with penalty.
            logger.debug("Illegal action %d for %s", action, mover.name)
            info = {"action_mask": self._legal_mask(), "illegal_action": True}
            return self._encode_board(), -1.0, True, truncated, info

        info = {
            "action_mask": self._legal_mask(),
            "status": result.status.value,
            "passed": result.passed,
            "flipped": len(result.captured),
        }
        if result.status == Status.FINISHED:
            info["winner"] = self.game.winner
            return self._encode_board(), self._final_reward(mover), True, truncated, info

        return self._encode_board(), 0.0, False, truncated, info

    def render(self):
        return "\n".join(" ".join(row) for row in self.game.board.to_rows())

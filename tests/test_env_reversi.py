import numpy as np
import pytest

from env_reversi import ReversiEnv
from reversi import Board, GameState, Side

PASS_ROWS = ["BW......"] + ["........"] * 6 + ["BW......"]


def test_reset_provides_mask_and_obs_shape():
    env = ReversiEnv()
    obs, info = env.reset()
    assert obs.shape == (5, 8, 8)
    assert obs.dtype == np.float32
    assert "action_mask" in info
    mask = info["action_mask"]
    assert mask.shape == (64,)
    # Initial legal moves should be 4 for the starting player
    assert np.isclose(mask.sum(), 4)


def test_action_mask_matches_valid_moves():
    env = ReversiEnv()
    env.reset()
    mask = env._legal_mask()
    encoded_moves = {
        divmod(idx, env.board_size)
        for idx, allowed in enumerate(mask)
        if allowed == 1.0
    }
    assert set(env.game.legal_moves) == encoded_moves


def test_observation_planes():
    env = ReversiEnv()
    obs, _ = env.reset()
    assert obs[0].sum() == 2 and obs[0, 3, 4] == 1.0 and obs[0, 4, 3] == 1.0
    assert obs[1].sum() == 2 and obs[1, 3, 3] == 1.0 and obs[1, 4, 4] == 1.0
    assert np.all(obs[2] == 1.0)
    assert obs[3].sum() == 4
    assert obs[4].sum() == 24


def test_legal_step_switches_side():
    env = ReversiEnv()
    env.reset()
    obs, reward, terminated, truncated, info = env.step(5 * 8 + 4)
    assert reward == 0.0
    assert terminated is False
    assert truncated is False
    assert info["status"] == "continued"
    assert info["flipped"] == 1
    assert env.current_player == Side.WHITE
    assert np.all(obs[2] == 0.0)


def test_illegal_action_penalty():
    env = ReversiEnv()
    env.reset()
    obs, reward, terminated, truncated, info = env.step(0)
    assert reward == -1.0
    assert terminated is True
    assert info.get("illegal_action") is True


def test_pass_keeps_same_player():
    env = ReversiEnv()
    env.reset()
    env.set_state(GameState.from_board(Board.from_rows(PASS_ROWS), Side.BLACK))

    obs, reward, terminated, truncated, info = env.step(2)
    assert terminated is False
    assert info["status"] == "passed"
    assert info["passed"] == Side.WHITE
    assert env.current_player == Side.BLACK
    assert info["action_mask"].sum() == 1.0

    obs, reward, terminated, truncated, info = env.step(7 * 8 + 2)
    assert terminated is True
    assert reward == 1.0
    assert info["winner"] == Side.BLACK

    with pytest.raises(RuntimeError):
        env.step(5)


def test_margin_reward_mode():
    env = ReversiEnv(reward_mode="margin", margin_scale=0.5)
    env.reset()
    env.set_state(GameState.from_board(Board.from_rows(PASS_ROWS), Side.BLACK))
    env.step(2)
    obs, reward, terminated, truncated, info = env.step(7 * 8 + 2)
    assert terminated is True
    assert reward == pytest.approx(1.5)


def test_render_ansi():
    env = ReversiEnv()
    env.reset()
    lines = env.render().splitlines()
    assert lines[3] == ". . . W B . . ."
    assert lines[4] == ". . . B W . . ."


def test_unknown_reward_mode():
    with pytest.raises(ValueError):
        ReversiEnv(reward_mode="bogus")

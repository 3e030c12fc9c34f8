import gymnasium as gym
import numpy as np

import skillblocks.env  # noqa: F401
from skillblocks.env.skillblocks_env import AGENT_ACTIONS, SkillBlocksEnv
from skillblocks.game import Action


def test_registered_env_resets_to_valid_observation():
    env = gym.make("SkillBlocks-10x20-v0")
    obs, info = env.reset(seed=3)
    assert env.observation_space.contains(obs)
    assert obs["grid"].shape == (20, 10)
    assert info["score"] == 0
    env.close()


def test_agent_actions_exclude_pause_and_reset():
    assert Action.TOGGLE_PAUSE not in AGENT_ACTIONS
    assert Action.RESET not in AGENT_ACTIONS
    assert SkillBlocksEnv().action_space.n == len(AGENT_ACTIONS)


def test_hard_drops_end_episode():
    env = SkillBlocksEnv(max_episode_steps=1000)
    env.reset(seed=0)
    hard_drop = AGENT_ACTIONS.index(Action.HARD_DROP)
    terminated = truncated = False
    steps = 0
    while not (terminated or truncated):
        obs, reward, terminated, truncated, info = env.step(hard_drop)
        steps += 1
    assert terminated
    assert steps < 200
    assert reward == float(info["score_delta"])


def test_skill_use_shows_in_observation():
    env = SkillBlocksEnv()
    obs, _ = env.reset(seed=1)
    assert obs["skills_ready"].tolist() == [1, 1, 1]
    obs, *_ = env.step(AGENT_ACTIONS.index(Action.SKILL_SLOW))
    assert obs["skills_ready"].tolist() == [0, 1, 1]
    obs, _ = env.reset(seed=1)
    assert obs["skills_ready"].tolist() == [1, 1, 1]


def test_rgb_render_matches_board_size():
    env = SkillBlocksEnv(render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert isinstance(img, np.ndarray)
    assert img.shape == (20 * 12, 10 * 12, 3)

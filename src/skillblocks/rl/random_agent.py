from __future__ import annotations

import logging

import gymnasium as gym

# Ensure envs are registered
import skillblocks.env  # noqa: F401

logger = logging.getLogger(__name__)


def run_random(steps: int = 200, seed: int | None = None) -> float:
    env = gym.make("SkillBlocks-10x20-v0")
    obs, info = env.reset(seed=seed)
    env.action_space.seed(seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            logger.info("Episode %d finished: score=%s lines=%s", episodes, info["score"], info["lines"])
            obs, info = env.reset()
    env.close()
    logger.info("Random agent total reward: %.2f over %d steps", total_reward, steps)
    return total_reward


if __name__ == "__main__":  # pragma: no cover
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(message)s")
    run_random()

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from skillblocks.game import Action, GameConfig, GameSession, SkillKind, TetrominoType


# Agent-facing actions: Action values 0..8 (pause/reset stay with the env).
AGENT_ACTIONS = tuple(a for a in Action if a < Action.TOGGLE_PAUSE)


class SimulatedClock:
    """Millisecond clock advanced by the environment instead of wall time."""

    def __init__(self) -> None:
        self.now = 0.0

    def advance(self, ms: float) -> None:
        self.now += ms

    def __call__(self) -> float:
        return self.now


class SkillBlocksEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 10}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 frame_ms: float = 100.0,
                 max_episode_steps: int = 5000,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.clock = SimulatedClock()
        self.game = GameSession(config, clock=self.clock)
        self.render_mode = render_mode
        self.frame_ms = float(frame_ms)
        self.max_episode_steps = int(max_episode_steps)
        self.terminal_penalty = float(terminal_penalty)

        h, w = self.game.grid.height, self.game.grid.width
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=len(TetrominoType), shape=(h, w), dtype=np.int8),
                "next_kind": spaces.Discrete(len(TetrominoType) + 1),
                "skills_ready": spaces.MultiBinary(len(SkillKind)),
            }
        )
        self.action_space = spaces.Discrete(len(AGENT_ACTIONS))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        snap = self.game.snapshot()
        ready = np.array([snap.skills_ready[k] for k in SkillKind], dtype=np.int8)
        return {
            "grid": snap.grid.astype(np.int8),
            "next_kind": int(snap.next_kind) if snap.next_kind is not None else 0,
            "skills_ready": ready,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines": self.game.lines_cleared_total,
            "gravity_interval": self.game.gravity_interval,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.clock.now = 0.0
        self.game.skills.reset_cooldowns()
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        score_before = self.game.score
        self.game.step(AGENT_ACTIONS[int(action)])
        self.clock.advance(self.frame_ms)
        self.game.update()
        self._steps += 1

        reward = float(self.game.score - score_before)
        terminated = bool(self.game.game_over)
        truncated = not terminated and self._steps >= self.max_episode_steps
        if terminated:
            reward += self.terminal_penalty

        info = self._get_info()
        info["score_delta"] = self.game.score - score_before
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        from skillblocks.visualization.palette import color_for_value

        grid = self.game.snapshot().grid
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(grid[y, x]))
        return img

    def close(self) -> None:
        pass

"""Gymnasium environments for SkillBlocks."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register the default 10x20 falling-block environment
register(
    id="SkillBlocks-10x20-v0",
    entry_point="skillblocks.env.skillblocks_env:SkillBlocksEnv",
)

__all__ = ["SkillBlocks-10x20-v0"]

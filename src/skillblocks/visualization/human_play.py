from __future__ import annotations

import argparse
import logging
import threading
from typing import Dict, List

import pygame

from skillblocks.game import Action, GameConfig, GameLoop, GameSession
from skillblocks.leaderboard import (
    LeaderboardConnection,
    LeaderboardEntry,
    LeaderboardStore,
    ScoreSubmitter,
)
from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE_CW,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_p: Action.TOGGLE_PAUSE,
    pygame.K_r: Action.RESET,
    pygame.K_1: Action.SKILL_SLOW,
    pygame.K_2: Action.SKILL_CLEAR_ROW,
    pygame.K_3: Action.SKILL_SWAP_NEXT,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play SkillBlocks")
    p.add_argument("--name", type=str, default="Player", help="Name shown on the leaderboard")
    p.add_argument("--storage", type=str, default="storage", help="Leaderboard storage directory")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--top", type=int, default=10, help="Leaderboard rows to show")
    return p


def run(args: argparse.Namespace) -> None:
    connection = LeaderboardConnection(LeaderboardStore(args.storage))
    submitter = ScoreSubmitter(connection)
    board_changed = threading.Event()
    connection.subscribe(lambda payload: board_changed.set())

    session = GameSession(
        GameConfig(random_seed=args.seed, player_name=args.name),
        on_game_over=submitter.submit,
    )
    loop = GameLoop(session)
    renderer = Renderer(cell_size=28)
    leaderboard: List[LeaderboardEntry] = connection.top(args.top)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size(session.grid.grid.shape))
        pygame.display.set_caption("SkillBlocks")
        clock = pygame.time.Clock()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            loop.post(action)

            loop.pump()

            if board_changed.is_set():
                board_changed.clear()
                leaderboard = connection.top(args.top)

            renderer.draw(screen, session.snapshot(), leaderboard)
            clock.tick(args.fps)
    finally:
        pygame.quit()
        submitter.close(timeout=2.0)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(name)s: %(message)s")
    run(build_parser().parse_args())


if __name__ == "__main__":  # pragma: no cover
    main()

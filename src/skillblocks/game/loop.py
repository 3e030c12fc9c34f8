from __future__ import annotations

import logging
import queue
from typing import List, Optional

from .core import Action, GameSession

logger = logging.getLogger(__name__)


class GameLoop:
    """Serializes input commands and gravity ticks onto one session.

    ``post`` may be called from any thread (input handlers, network
    listeners). ``pump`` runs on the game thread: it applies queued commands
    strictly in arrival order, then lets the gravity clock fire, so a tick and
    a key press are ordered by processing, never raced.
    """

    def __init__(self, session: GameSession) -> None:
        self.session = session
        self._commands: "queue.Queue[Action]" = queue.Queue()

    def post(self, action: Action) -> None:
        self._commands.put(Action(action))

    def pending(self) -> int:
        return self._commands.qsize()

    def drain(self) -> List[Action]:
        applied: List[Action] = []
        while True:
            try:
                action = self._commands.get_nowait()
            except queue.Empty:
                break
            self.session.step(action)
            applied.append(action)
        return applied

    def pump(self, now: Optional[float] = None) -> bool:
        """Apply pending commands, then poll gravity. Returns True if gravity fired."""
        applied = self.drain()
        if applied:
            logger.debug("Applied %d command(s)", len(applied))
        return self.session.update(now)

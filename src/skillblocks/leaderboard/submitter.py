"""Score submission boundary between a game session and the leaderboard.

The hosting shell owns a :class:`LeaderboardConnection` and hands it to a
:class:`ScoreSubmitter`; the game session only ever sees the submitter's
``submit`` as its game-over callback.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, Dict, List, Optional

from skillblocks.game import ScoreRecord

from .records import LeaderboardEntry
from .store import LeaderboardStore

logger = logging.getLogger(__name__)

ScoreObserver = Callable[[Dict[str, Any]], None]

NEW_SCORE_EVENT = "new-score"


class LeaderboardConnection:
    """Persists scores and pushes ``new-score`` payloads to live observers."""

    def __init__(self, store: LeaderboardStore) -> None:
        self.store = store
        self._observers: List[ScoreObserver] = []
        self._lock = threading.Lock()

    def subscribe(self, observer: ScoreObserver) -> None:
        with self._lock:
            self._observers.append(observer)

    def unsubscribe(self, observer: ScoreObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def submit(self, record: ScoreRecord) -> LeaderboardEntry:
        entry = self.store.add(record)
        self.broadcast(entry.payload())
        return entry

    def broadcast(self, payload: Dict[str, Any]) -> None:
        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            try:
                observer(payload)
            except Exception:
                logger.exception("Observer failed on %s", NEW_SCORE_EVENT)

    def top(self, limit: int = 50) -> List[LeaderboardEntry]:
        return self.store.top(limit)


class ScoreSubmitter:
    """Fire-and-forget delivery of finished games on a background thread.

    ``submit`` only enqueues, so the game loop never waits on storage.
    Failed deliveries are logged and dropped; nothing is retried here.
    """

    _STOP = object()

    def __init__(self, connection: LeaderboardConnection, name: str = "score-submitter") -> None:
        self.connection = connection
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._closed = False
        self.delivered = 0
        self.failed = 0
        self._thread.start()

    def __call__(self, record: ScoreRecord) -> None:
        self.submit(record)

    def submit(self, record: ScoreRecord) -> None:
        if self._closed:
            logger.warning("Submitter closed, dropping score for %s", record.name)
            return
        self._queue.put(record)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is self._STOP:
                    return
                self._deliver(item)
            finally:
                self._queue.task_done()

    def _deliver(self, record: ScoreRecord) -> Optional[LeaderboardEntry]:
        try:
            entry = self.connection.submit(record)
        except Exception as e:
            self.failed += 1
            logger.warning("Score submission failed for %s: %s", record.name, e)
            return None
        self.delivered += 1
        return entry

    def flush(self) -> None:
        """Block until everything queued so far has been attempted."""
        self._queue.join()

    def close(self, timeout: Optional[float] = None) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put(self._STOP)
        self._thread.join(timeout)

from __future__ import annotations

import json
import logging
import queue
import threading
from collections import defaultdict
from typing import Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class ChangeFeed:
    """In-process publish/subscribe of row-change events, scoped by user id.

    Each subscriber owns an unbounded queue; ``publish`` never blocks.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: Dict[int, List[queue.Queue]] = defaultdict(list)

    def subscribe(self, user_id: int) -> queue.Queue:
        q: queue.Queue = queue.Queue()
        with self._lock:
            self._subscribers[int(user_id)].append(q)
        return q

    def unsubscribe(self, user_id: int, q: queue.Queue) -> None:
        with self._lock:
            queues = self._subscribers.get(int(user_id), [])
            if q in queues:
                queues.remove(q)
            if not queues:
                self._subscribers.pop(int(user_id), None)

    def subscriber_count(self, user_id: int) -> int:
        with self._lock:
            return len(self._subscribers.get(int(user_id), []))

    def publish(self, user_id: int, event: dict) -> int:
        with self._lock:
            targets = list(self._subscribers.get(int(user_id), []))
        for q in targets:
            q.put(event)
        logger.debug("Published %s to %d subscriber(s) of user %s", event, len(targets), user_id)
        return len(targets)

    def stream(self, user_id: int, *, keepalive_seconds: float = 15.0, q: Optional[queue.Queue] = None) -> Iterator[str]:
        """Yield server-sent-event frames until the client disconnects."""
        q = q or self.subscribe(user_id)
        try:
            yield ": connected\n\n"
            while True:
                try:
                    event = q.get(timeout=keepalive_seconds)
                except queue.Empty:
                    yield ": keepalive\n\n"
                    continue
                yield f"data: {json.dumps(event)}\n\n"
        finally:
            self.unsubscribe(user_id, q)

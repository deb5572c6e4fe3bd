# genelinker/session.py
# Per-process workspace state plus the guard against late responses
# overwriting newer ones.
from __future__ import annotations
import itertools, logging, threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ticket:
    channel: str
    seq: int


class RequestSequencer:
    """Hands out increasing tickets per channel; only the newest may commit."""

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest: Dict[str, int] = {}
        self._lock = threading.Lock()

    def issue(self, channel: str) -> Ticket:
        with self._lock:
            seq = next(self._counter)
            self._latest[channel] = seq
            return Ticket(channel, seq)

    def is_latest(self, ticket: Ticket) -> bool:
        with self._lock:
            return self._latest.get(ticket.channel) == ticket.seq


class Workspace:
    """What the page used to hold in component state."""

    def __init__(self, sequencer: Optional[RequestSequencer] = None):
        self.sequencer = sequencer or RequestSequencer()
        self._state: Dict[str, Any] = {}
        self.view = None  # genelinker.mindmap.render.MindMapView, set once a map exists

    def begin(self, channel: str) -> Ticket:
        return self.sequencer.issue(channel)

    def commit(self, ticket: Ticket, value: Any) -> bool:
        if not self.sequencer.is_latest(ticket):
            log.info("dropping stale %s response (seq=%d)", ticket.channel, ticket.seq)
            return False
        self._state[ticket.channel] = value
        return True

    def invalidate(self, *channels: str) -> None:
        """Drop these channels and make every ticket already issued on them stale."""
        for c in channels:
            self.sequencer.issue(c)
        self.clear(*channels)

    def get(self, channel: str, default: Any = None) -> Any:
        return self._state.get(channel, default)

    def put(self, channel: str, value: Any) -> None:
        self._state[channel] = value

    def clear(self, *channels: str) -> None:
        for c in channels:
            self._state.pop(c, None)

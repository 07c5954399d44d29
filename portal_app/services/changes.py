"""In-process change feed for table writes.

Every Streamlit session lives in the same process, so a write made in one
evaluator's session reaches the others through this feed. Each subscriber
holds at most one pending event: consumers re-fetch full state on each
event, so further writes before the next read are coalesced into it.
Subscribers are held weakly; a session dropped without ``close()`` is
collected along with its subscription.
"""
from __future__ import annotations
import queue
import threading
import time
import weakref
from dataclasses import dataclass, field
from typing import Dict, List, Optional

_CLOSED = object()


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event: str           # INSERT | UPDATE | DELETE
    row_id: Optional[str] = None
    at: float = field(default_factory=time.time)


class ChangeSubscription:
    """Lazy, infinite iterator of change events for one table.

    Iteration blocks until the next event arrives. Events published while
    one is already pending are dropped. Once closed it is exhausted for
    good; subscribe again to get a fresh one.
    """

    def __init__(self, feed: "ChangeFeed", table: str):
        self.table = table
        self._feed = feed
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=1)
        self._closed = False

    def __iter__(self) -> "ChangeSubscription":
        return self

    def __next__(self) -> ChangeEvent:
        if self._closed:
            raise StopIteration
        item = self._queue.get()
        if item is _CLOSED:
            self._closed = True
            raise StopIteration
        return item  # type: ignore[return-value]

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def poll(self) -> List[ChangeEvent]:
        """Drain whatever is pending without blocking."""
        events: List[ChangeEvent] = []
        while not self._closed:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            if item is _CLOSED:
                self._closed = True
                break
            events.append(item)  # type: ignore[arg-type]
        return events

    def _push(self, item: object) -> None:
        try:
            self._queue.put_nowait(item)
        except queue.Full:
            pass

    def close(self) -> None:
        if self._closed:
            return
        self._feed._remove(self)
        # the close marker replaces any pending event
        while True:
            try:
                self._queue.put_nowait(_CLOSED)
                return
            except queue.Full:
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    pass

    def __enter__(self) -> "ChangeSubscription":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ChangeFeed:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: Dict[str, "weakref.WeakSet[ChangeSubscription]"] = {}

    def subscribe(self, table: str) -> ChangeSubscription:
        sub = ChangeSubscription(self, table)
        with self._lock:
            self._subscribers.setdefault(table, weakref.WeakSet()).add(sub)
        return sub

    def publish(self, table: str, event: str, row_id: Optional[str] = None) -> None:
        change = ChangeEvent(table=table, event=event, row_id=row_id)
        with self._lock:
            targets = list(self._subscribers.get(table, ()))
        for sub in targets:
            sub._push(change)

    def subscriber_count(self, table: str) -> int:
        with self._lock:
            return len(self._subscribers.get(table, ()))

    def _remove(self, sub: ChangeSubscription) -> None:
        with self._lock:
            subs = self._subscribers.get(sub.table)
            if subs is not None:
                subs.discard(sub)


# shared by every session of the running app
default_feed = ChangeFeed()

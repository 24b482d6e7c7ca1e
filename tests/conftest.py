from __future__ import annotations

import heapq
import itertools
import random
from types import MappingProxyType

import pytest

from lifeskills_core.session import QuizSession


def build_synthetic_catalog(
    *,
    skills: list[str] | None = None,
    developed: int = 1,
    underdeveloped: int = 1,
):
    """Deterministic catalog; one skill with ``P1``/``N1`` by default."""

    target_skills = skills or ["receivingLove"]
    prefix = len(target_skills) > 1
    out = {}
    for skill in target_skills:
        head = f"{skill} " if prefix else ""
        pos = tuple(f"{head}P{i}" for i in range(1, developed + 1))
        neg = tuple(f"{head}N{i}" for i in range(1, underdeveloped + 1))
        out[skill] = (pos, neg)
    return MappingProxyType(out)


class _Handle:
    def __init__(self, clock: "ManualClock", when: float, callback, args):
        self.clock = clock
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    """Stands in for the asyncio loop; callbacks fire only on ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, _Handle]] = []
        self._seq = itertools.count()
        self.handles: list[_Handle] = []

    def call_later(self, delay, callback, *args):
        h = _Handle(self, self.now + float(delay), callback, args)
        heapq.heappush(self._queue, (h.when, next(self._seq), h))
        self.handles.append(h)
        return h

    @property
    def live(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, h = heapq.heappop(self._queue)
            self.now = when
            if not h.cancelled:
                h.callback(*h.args)
        self.now = target

    def fire_all(self, include_cancelled: bool = False) -> None:
        """Run every queued callback, optionally even cancelled ones (stale timers)."""
        while self._queue:
            _, _, h = heapq.heappop(self._queue)
            if include_cancelled or not h.cancelled:
                h.callback(*h.args)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def make_session(clock):
    def _make(catalog=None, seed: int = 7, delay: float = 0.3) -> QuizSession:
        kwargs = {"rng": random.Random(seed), "scheduler": clock, "delay": delay}
        if catalog is not None:
            kwargs["catalog"] = catalog
        return QuizSession(**kwargs)
    return _make


def answer_and_wait(sess: QuizSession, clock: ManualClock, value: int) -> bool:
    ok = sess.answer(value)
    clock.advance(sess.delay)
    return ok

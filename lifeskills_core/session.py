# lifeskills_core/session.py
from __future__ import annotations
import asyncio
import logging
import random
from typing import Any, Callable, List, Optional, Protocol

from .types import Phase, Question, ScoreResult, SessionView
from .question_bank import CATALOG, Catalog, build_session, skills_for
from .scoring import score_results
from .errors import QuizError, InvalidTransition, OutOfRangeAnswer
from .config import MIN_ANSWER, MAX_ANSWER, advance_delay_sec


log = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with the ``asyncio`` loop ``call_later`` signature."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


def _coerce_answer(value: Any) -> int:
    if isinstance(value, bool):
        raise OutOfRangeAnswer(value, MIN_ANSWER, MAX_ANSWER)
    try:
        v = int(value)
    except (TypeError, ValueError):
        raise OutOfRangeAnswer(value, MIN_ANSWER, MAX_ANSWER)
    if isinstance(value, float) and v != value:
        raise OutOfRangeAnswer(value, MIN_ANSWER, MAX_ANSWER)
    if not MIN_ANSWER <= v <= MAX_ANSWER:
        raise OutOfRangeAnswer(value, MIN_ANSWER, MAX_ANSWER)
    return v


class QuizSession:
    """One respondent's pass through the shuffled statement bank.

    Phases go ``not_started -> in_progress -> completed``; ``restart`` returns
    to ``not_started`` from anywhere. Actions that do not fit the current
    phase are logged and ignored; every action returns ``True`` when it took
    effect.

    ``answer`` records the value immediately and defers the highlight clear
    and the index advance by ``delay`` seconds through ``scheduler``. When no
    scheduler is given the running asyncio loop is used; outside a running
    loop ``answer`` is ignored and nothing is recorded.
    """

    def __init__(
        self,
        *,
        catalog: Catalog = CATALOG,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
        delay: Optional[float] = None,
    ):
        self.catalog = catalog
        self.skills = skills_for(catalog)
        self.rng = rng or random.Random()
        self.delay = advance_delay_sec() if delay is None else max(0.0, float(delay))
        self._scheduler = scheduler
        self._pending: Optional[TimerHandle] = None
        self._token: Optional[object] = None
        self._closed = False
        self._reset()

    def _reset(self) -> None:
        self.phase: Phase = "not_started"
        self.questions: List[Question] = []
        self.answers: List[int] = []
        self.current_index = 0
        self.highlighted: Optional[int] = None

    # ---- guards ----
    def _require(self, action: str, *phases: Phase) -> None:
        if self._closed:
            raise InvalidTransition(action, "closed")
        if self.phase not in phases:
            raise InvalidTransition(action, self.phase)

    def _ignored(self, err: QuizError) -> bool:
        log.debug("ignored: %s", err)
        return False

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._token = None

    def _complete(self) -> None:
        self._cancel_pending()
        self.highlighted = None
        self.phase = "completed"
        log.info("session complete questions=%d", len(self.questions))

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    # ---- actions ----
    def start(self) -> bool:
        try:
            self._require("start", "not_started")
        except QuizError as e:
            return self._ignored(e)
        self.questions = build_session(self.catalog, self.rng)
        self.answers = [0] * len(self.questions)
        self.current_index = 0
        self.highlighted = None
        self.phase = "in_progress"
        log.info("session start questions=%d", len(self.questions))
        if not self.questions:
            # empty catalog: nothing to ask, every skill scores 0
            self._complete()
        return True

    def answer(self, value: Any) -> bool:
        try:
            self._require("answer", "in_progress")
            v = _coerce_answer(value)
        except QuizError as e:
            return self._ignored(e)

        token = object()
        try:
            handle = self._schedule_advance(token)
        except QuizError as e:
            return self._ignored(e)

        self._cancel_pending()
        self._token = token
        self._pending = handle
        self.answers[self.current_index] = v
        self.highlighted = v
        log.debug("answer index=%d value=%d", self.current_index, v)
        return True

    def _schedule_advance(self, token: object) -> TimerHandle:
        try:
            scheduler = self._scheduler or asyncio.get_running_loop()
            return scheduler.call_later(self.delay, self._advance, token)
        except RuntimeError as e:
            raise InvalidTransition("answer", f"unschedulable ({e})")

    def _advance(self, token: object) -> None:
        if token is not self._token or self._pending is None or self.phase != "in_progress":
            log.debug("stale advance dropped")
            return
        self._pending = None
        self._token = None
        self.highlighted = None
        if self.current_index < len(self.questions) - 1:
            self.current_index += 1
        else:
            self._complete()

    def jump_to_random_completion(self) -> bool:
        try:
            self._require("jump_to_random_completion", "in_progress")
        except QuizError as e:
            return self._ignored(e)
        filled = 0
        for i in range(self.current_index, len(self.answers)):
            if self.answers[i] == 0:
                self.answers[i] = self.rng.randint(MIN_ANSWER, MAX_ANSWER)
                filled += 1
        log.info("random completion from index=%d filled=%d", self.current_index, filled)
        self._complete()
        return True

    def restart(self) -> bool:
        if self._closed:
            return self._ignored(InvalidTransition("restart", "closed"))
        self._cancel_pending()
        if self.phase != "not_started":
            log.info("session restart from %s", self.phase)
        self._reset()
        return True

    def close(self) -> None:
        self._cancel_pending()
        self._closed = True

    # ---- derived state ----
    def score_preview(self) -> List[ScoreResult]:
        return score_results(self.questions, self.answers, self.skills)

    def results(self) -> List[ScoreResult]:
        if self.phase != "completed":
            return []
        return self.score_preview()

    def view(self) -> SessionView:
        if self.phase == "in_progress":
            return SessionView(
                phase=self.phase,
                question=self.questions[self.current_index],
                number=self.current_index + 1,
                total=len(self.questions),
                highlighted=self.highlighted,
            )
        if self.phase == "completed":
            return SessionView(
                phase=self.phase,
                number=len(self.questions),
                total=len(self.questions),
                results=self.results(),
            )
        return SessionView(phase=self.phase)

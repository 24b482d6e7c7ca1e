from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from .types import KeyEvent
from .session import QuizSession


log = logging.getLogger(__name__)

KeyHandler = Callable[[KeyEvent], object]

ANSWER_KEYS = ("1", "2", "3", "4")
ENTER_KEYS = ("Enter", "Return")


class KeyEventBus:
    """Broadcasts key events to every current subscriber."""

    def __init__(self) -> None:
        self._handlers: List[KeyHandler] = []

    def subscribe(self, handler: KeyHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)
        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def publish(self, event: KeyEvent) -> None:
        for handler in list(self._handlers):
            handler(event)


def is_restart(event: KeyEvent) -> bool:
    return event.shift and event.key in ("1", "!")


def is_random_completion(event: KeyEvent) -> bool:
    return event.shift and event.key in ENTER_KEYS


class InputController:
    """Translates key events into session actions; holds no state of its own."""

    def __init__(self, session: QuizSession):
        self.session = session

    def handle_event(self, event: KeyEvent) -> Optional[str]:
        """Dispatch one key press. Returns the name of the action fired, if any."""
        if is_restart(event):
            return "restart" if self.session.restart() else None
        if self.session.phase != "in_progress":
            return None
        if event.key in ANSWER_KEYS:
            return "answer" if self.session.answer(int(event.key)) else None
        if is_random_completion(event):
            self.session.jump_to_random_completion()
            return "jump_to_random_completion"
        return None

    @contextmanager
    def attached(self, bus: KeyEventBus) -> Iterator["InputController"]:
        unsubscribe = bus.subscribe(self.handle_event)
        log.debug("input controller attached")
        try:
            yield self
        finally:
            unsubscribe()
            log.debug("input controller detached")


def parse_key(token: str) -> Optional[KeyEvent]:
    """Parse a typed token such as ``3``, ``shift+1``, ``!`` or ``shift+enter``."""
    raw = (token or "").strip()
    if not raw:
        return None
    if raw == "!":
        return KeyEvent("1", shift=True)
    low = raw.lower()
    shift = False
    if low.startswith("shift+"):
        shift = True
        low = low[len("shift+"):]
    if low in ("enter", "return"):
        return KeyEvent("Enter", shift=shift)
    if len(low) == 1:
        return KeyEvent(low, shift=shift)
    return None

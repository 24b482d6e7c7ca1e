"""Errors raised inside the quiz session guards.

They never leave :class:`~lifeskills_core.session.QuizSession`: the public
actions catch them, log them and report the action as ignored.
"""
from __future__ import annotations


class QuizError(Exception):
    pass


class InvalidTransition(QuizError):
    def __init__(self, action: str, phase: str):
        super().__init__(f"{action} not allowed while {phase}")
        self.action = action
        self.phase = phase


class OutOfRangeAnswer(QuizError):
    def __init__(self, value: object, low: int, high: int):
        super().__init__(f"answer {value!r} outside {low}..{high}")
        self.value = value


__all__ = ["QuizError", "InvalidTransition", "OutOfRangeAnswer"]

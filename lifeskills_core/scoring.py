from __future__ import annotations
from typing import List, Sequence, Tuple, Iterable
from .types import Category, Question, ScoreResult, Skill
from .question_bank import SKILLS

# (lower bound exclusive, stars, category); first match wins
TIERS: Tuple[Tuple[int, int, Category], ...] = (
    (6, 5, "Excellent"),
    (4, 4, "Very Good"),
    (2, 3, "Good"),
    (0, 2, "Fair"),
)
FLOOR_TIER: Tuple[int, Category] = (1, "Needs Improvement")

NARRATIVES: dict[str, str] = {
    "Excellent": "You have a well-developed skill in {name}. Keep nurturing this strength.",
    "Very Good": "You have a strong foundation in {name}. There's still room for growth.",
    "Good": "You have a good base in {name}. Consider ways to further develop this area.",
    "Fair": "Your skill in {name} could use some development. Focus on improving this area.",
    "Needs Improvement": (
        "You may want to prioritize developing your skill in {name}. "
        "Consider seeking support or resources to help you in this area."
    ),
}


def _tier(score: int) -> Tuple[int, Category]:
    s = int(score)
    for bound, stars, cat in TIERS:
        if s > bound:
            return stars, cat
    return FLOOR_TIER


def score_skill(skill: str, questions: Sequence[Question], answers: Sequence[int]) -> int:
    """Sum of answers for ``skill``: added when positive, subtracted otherwise.

    Unanswered slots are 0 and contribute nothing, so partial sessions score
    without error. Only the aligned prefix is considered.
    """
    total = 0
    for q, v in zip(questions, answers):
        if q.skill != skill:
            continue
        total += int(v) if q.positive else -int(v)
    return total


def star_rating(score: int) -> int:
    return _tier(score)[0]


def category(score: int) -> Category:
    return _tier(score)[1]


def narrative(skill_name: str, cat: str) -> str:
    template = NARRATIVES.get(cat, NARRATIVES["Needs Improvement"])
    return template.format(name=skill_name)


def score_results(
    questions: Sequence[Question],
    answers: Sequence[int],
    skills: Iterable[Skill] = SKILLS,
) -> List[ScoreResult]:
    out: List[ScoreResult] = []
    for sk in skills:
        raw = score_skill(sk.id, questions, answers)
        stars, cat = _tier(raw)
        out.append(ScoreResult(
            skill=sk.id,
            name=sk.name,
            description=sk.description,
            raw_score=raw,
            star_rating=stars,
            category=cat,
            narrative=narrative(sk.name, cat),
        ))
    return out

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Optional, Literal, Any

Phase = Literal["not_started", "in_progress", "completed"]
Category = Literal["Excellent", "Very Good", "Good", "Fair", "Needs Improvement"]

@dataclass(frozen=True)
class Skill:
    id: str; name: str; description: str

@dataclass(frozen=True)
class Statement:
    text: str; skill: str; positive: bool

@dataclass(frozen=True)
class Question:
    text: str; skill: str; positive: bool

    @classmethod
    def from_statement(cls, st: Statement) -> "Question":
        return cls(text=st.text, skill=st.skill, positive=st.positive)

@dataclass(frozen=True)
class KeyEvent:
    key: str
    shift: bool = False

@dataclass(frozen=True)
class ScoreResult:
    skill: str
    name: str
    description: str
    raw_score: int
    star_rating: int
    category: Category
    narrative: str

@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot handed to whatever renders the quiz."""

    phase: Phase
    question: Optional[Question] = None
    number: int = 0
    total: int = 0
    highlighted: Optional[int] = None
    results: List[ScoreResult] = field(default_factory=list)

    @property
    def progress(self) -> float:
        return self.number / self.total if self.total else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase,
            "question": asdict(self.question) if self.question else None,
            "number": self.number,
            "total": self.total,
            "progress": round(self.progress, 4),
            "highlighted": self.highlighted,
            "results": [asdict(r) for r in self.results],
        }

from __future__ import annotations
import random
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple
from .types import Skill, Statement, Question

SKILLS: Tuple[Skill, ...] = (
    Skill("receivingLove", "Receiving Love",
          "I can receive love because I am loved just as I am"),
    Skill("exploringPlayfully", "Exploring Playfully",
          "I can try new behaviors because I am protected"),
    Skill("thinkingForYourself", "Thinking for Yourself",
          "I can become my own person as I remain connected to others"),
    Skill("initiatingPower", "Initiating Power",
          "I can use my power for healthy relationships"),
    Skill("expandingCompetence", "Expanding Competence",
          "I can grow my competence in new environments"),
    Skill("increasingResponsibility", "Increasing Responsibility",
          "I can manage my internal world and behavior"),
    Skill("expandingLove", "Expanding Love",
          "I can meet my needs and honor the needs of others"),
)
SKILL_IDS: Tuple[str, ...] = tuple(s.id for s in SKILLS)

# skill id -> (developed, underdeveloped)
Catalog = Mapping[str, Tuple[Tuple[str, ...], Tuple[str, ...]]]

CATALOG: Catalog = MappingProxyType({
    "receivingLove": (
        (
            "I believe my physical needs are important",
            "I can comfort and calm myself when I am upset",
            "I can communicate my needs to others, even if it's inconvenient",
            "I take care of my body",
            "I believe I'm a beloved child of God",
        ),
        (
            "I worry that people might abandon me",
            "I avoid getting emotionally close to others",
            "I avoid being vulnerable and receiving help",
            "I feel shame about myself",
            "I have negative thoughts about myself",
        ),
    ),
    "exploringPlayfully": (
        (
            "I enjoy trying things I have never done before",
            "I can laugh at my own mistakes",
            "I feel safe enough to be curious around the people close to me",
            "I can play and have fun without feeling guilty",
            "I return to joy quickly after something goes wrong",
        ),
        (
            "I avoid new situations because I might fail",
            "I need to control how things turn out",
            "I feel anxious when plans change unexpectedly",
            "I take myself too seriously to play",
            "I stay inside my comfort zone",
        ),
    ),
    "thinkingForYourself": (
        (
            "I can hold my own opinion when others disagree",
            "I make decisions based on my own values",
            "I can say no without losing the relationship",
            "I know what I like and what I don't like",
            "I stay connected to people I disagree with",
        ),
        (
            "I go along with others to avoid conflict",
            "I need someone else's approval before I decide",
            "I cut people off when we disagree",
            "I feel lost when I have to choose for myself",
            "I change my views to fit whoever I am with",
        ),
    ),
    "initiatingPower": (
        (
            "I take the first step to fix a broken relationship",
            "I use my influence to protect people who are weaker",
            "I can ask for what I want directly",
            "I start projects that help others",
            "I act when I see something that needs to be done",
        ),
        (
            "I use anger to get my way",
            "I wait for others to make the first move",
            "I feel powerless to change my situation",
            "I manipulate people to get what I need",
            "I back down even when something matters to me",
        ),
    ),
    "expandingCompetence": (
        (
            "I can learn the skills a new role requires",
            "I ask for feedback so I can improve",
            "I stay myself when I am in an unfamiliar place",
            "I can adapt to people from different backgrounds",
            "I finish what I start even when it is hard",
        ),
        (
            "I give up when something takes a long time to learn",
            "I act differently depending on who I am around",
            "I avoid tasks I am not already good at",
            "I feel like an impostor at work or school",
            "I blame others when I fall short",
        ),
    ),
    "increasingResponsibility": (
        (
            "I can name what I am feeling",
            "I keep my promises",
            "I own my mistakes and make amends",
            "I can calm down before I respond",
            "I take responsibility for my own growth",
        ),
        (
            "I lose my temper and regret it later",
            "I use food, screens or substances to avoid my feelings",
            "I make excuses for my behavior",
            "I feel overwhelmed by my emotions",
            "I expect others to fix my problems",
        ),
    ),
    "expandingLove": (
        (
            "I can care for others without neglecting myself",
            "I notice when someone around me needs help",
            "I can love people who are hard to love",
            "I give my time generously to others",
            "I can balance my needs with the needs of my family",
        ),
        (
            "I give until I am resentful",
            "I put my needs above everyone else's",
            "I only help when there is something in it for me",
            "I feel drained by the needs of others",
            "I keep score in my relationships",
        ),
    ),
})


def load_bank(catalog: Catalog = CATALOG) -> List[Statement]:
    out: List[Statement] = []
    for skill, (developed, underdeveloped) in catalog.items():
        out.extend(Statement(text=t, skill=skill, positive=True) for t in developed)
        out.extend(Statement(text=t, skill=skill, positive=False) for t in underdeveloped)
    return out


def build_session(catalog: Catalog = CATALOG, rng: Optional[random.Random] = None) -> List[Question]:
    """Flatten the catalog and return it as one uniformly shuffled question list.

    ``random.Random.shuffle`` is a Fisher-Yates pass, so every permutation of
    the full list is equally likely and skills/polarities end up interleaved.
    """
    questions = [Question.from_statement(st) for st in load_bank(catalog)]
    (rng or random).shuffle(questions)
    return questions


def skills_for(catalog: Catalog = CATALOG) -> List[Skill]:
    known = {s.id: s for s in SKILLS}
    return [known.get(sid) or Skill(sid, sid, "") for sid in catalog.keys()]


def validate_catalog(catalog: Catalog = CATALOG) -> List[str]:
    problems: List[str] = []
    for skill, sets in catalog.items():
        developed, underdeveloped = sets
        if not developed:
            problems.append(f"{skill}: no developed statements")
        if not underdeveloped:
            problems.append(f"{skill}: no underdeveloped statements")
    return problems

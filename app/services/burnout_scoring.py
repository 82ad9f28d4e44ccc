"""Oldenburg Burnout Inventory (OLBI) scoring.

Responses are 1=Strongly Agree .. 4=Strongly Disagree. Six statements feed
the exhaustion subscale and six the disengagement subscale; the positively
framed statements are reverse scored (5 - value).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Union

QUESTION_COUNT = 12
MIN_RESPONSE = 1
MAX_RESPONSE = 4

OLBI_QUESTIONS = [
    "I always find new and interesting aspects in my work",
    "There are days when I feel tired before I arrive at work",
    "It happens more and more often that I talk about my work in a negative way",
    "After work, I tend to need more time than in the past in order to relax and feel better",
    "I can tolerate the pressure of my work very well",
    "Lately, I tend to think less at work and do my job almost mechanically",
    "I find my work to be a positive challenge",
    "During my work, I often feel emotionally drained",
    "Over time, one can become dis-connected from this type of work",
    "After working, I have enough energy for my leisure activities",
    "Sometimes I feel sickened by my work tasks",
    "After my work, I usually feel worn out and weary",
]

RESPONSE_OPTIONS = {
    1: "Strongly Agree",
    2: "Agree",
    3: "Disagree",
    4: "Strongly Disagree",
}

EXHAUSTION_QUESTIONS = frozenset({2, 4, 5, 8, 10, 12})
DISENGAGEMENT_QUESTIONS = frozenset({1, 3, 6, 7, 9, 11})
REVERSE_SCORED_QUESTIONS = frozenset({1, 5, 7, 10})

# (upper bound inclusive, level, description); anything above the last bound is Very High.
LEVEL_THRESHOLDS = [
    (2.0, "Low", "Low burnout risk"),
    (2.5, "Moderate", "Moderate burnout risk"),
    (3.0, "High", "High burnout risk"),
]
TOP_LEVEL = ("Very High", "Very high burnout risk")


@dataclass(frozen=True)
class BurnoutLevel:
    level: str
    description: str


@dataclass(frozen=True)
class BurnoutScores:
    exhaustion_score: int
    disengagement_score: int
    exhaustion_average: float
    disengagement_average: float
    total_average: float
    exhaustion_level: str
    disengagement_level: str
    total_level: str


Responses = Union[Mapping[int, int], Iterable]


def interpret(average: float) -> BurnoutLevel:
    for bound, level, description in LEVEL_THRESHOLDS:
        if average <= bound:
            return BurnoutLevel(level, description)
    return BurnoutLevel(*TOP_LEVEL)


def _as_mapping(responses: Responses) -> dict:
    if isinstance(responses, Mapping):
        return {int(k): v for k, v in responses.items()}
    mapping = {}
    for item in responses:
        if isinstance(item, Mapping):
            mapping[int(item["question_number"])] = item["response_value"]
        else:
            mapping[int(item.question_number)] = item.response_value
    return mapping


def is_complete(responses: Responses) -> bool:
    mapping = _as_mapping(responses)
    for question in range(1, QUESTION_COUNT + 1):
        value = mapping.get(question)
        if isinstance(value, bool) or not isinstance(value, int):
            return False
        if not MIN_RESPONSE <= value <= MAX_RESPONSE:
            return False
    return True


def score_burnout(
    responses: Responses,
    reverse_scored: Iterable[int] = REVERSE_SCORED_QUESTIONS,
) -> Optional[BurnoutScores]:
    """Score a complete answer set; partial or out-of-range sets give ``None``.

    Questions in ``reverse_scored`` are flipped first, so by default all-4
    answers average 3.0 (High) rather than 4.0. Pass ``reverse_scored=()``
    for the raw averages.
    """
    if not is_complete(responses):
        return None

    mapping = _as_mapping(responses)
    reverse = frozenset(reverse_scored)

    def scored(question: int) -> int:
        value = mapping[question]
        return (MAX_RESPONSE + MIN_RESPONSE) - value if question in reverse else value

    exhaustion = sum(scored(q) for q in EXHAUSTION_QUESTIONS)
    disengagement = sum(scored(q) for q in DISENGAGEMENT_QUESTIONS)

    exhaustion_average = exhaustion / len(EXHAUSTION_QUESTIONS)
    disengagement_average = disengagement / len(DISENGAGEMENT_QUESTIONS)
    total_average = (exhaustion + disengagement) / QUESTION_COUNT

    return BurnoutScores(
        exhaustion_score=exhaustion,
        disengagement_score=disengagement,
        exhaustion_average=round(exhaustion_average, 2),
        disengagement_average=round(disengagement_average, 2),
        total_average=round(total_average, 2),
        exhaustion_level=interpret(exhaustion_average).level,
        disengagement_level=interpret(disengagement_average).level,
        total_level=interpret(total_average).level,
    )

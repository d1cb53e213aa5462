"""
Archetype scoring engine.

Maps submitted answers onto a single archetype by plurality vote. Pure and
total: the same (schema, answers) pair always yields the same result and no
input raises.

Dependencies: quizfunnel.models.question_schema
System role: Deterministic scoring run once at quiz submission
"""

from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from quizfunnel.models.question_schema import Answer, QuestionSchema

UNKNOWN_ARCHETYPE = "unknown"


@dataclass(frozen=True)
class ArchetypeResult:
    """Winning archetype key and its display name."""

    key: str
    name: str


def tally_answers(schema: QuestionSchema, answers: Sequence[Answer]) -> Counter:
    """
    Count mapped archetype votes over the schema's questions.

    Only the first answer per question id counts. Unanswered questions and
    choices missing from the scoring map are skipped.

    Args:
        schema: Question set schema
        answers: Submitted answers in any order

    Returns:
        Counter: archetype key -> votes, insertion-ordered by first vote
    """
    first_answer: dict[str, str] = {}
    for answer in answers:
        first_answer.setdefault(answer.id, answer.choice)

    tally: Counter = Counter()
    for question in schema.questions:
        choice = first_answer.get(question.id)
        if choice is None:
            continue
        archetype_key = schema.scoring.map.get(question.id, {}).get(choice)
        if not archetype_key:
            continue
        tally[archetype_key] += 1
    return tally


def pick_archetype(schema: QuestionSchema, answers: Sequence[Answer]) -> ArchetypeResult:
    """
    Pick the archetype with the most votes.

    Ties go to the archetype declared first in the schema. Keys that were
    voted for but never declared rank after every declared key, in the order
    they were first seen. With no votes the first declared archetype wins, or
    ``unknown`` when the schema declares none.

    Args:
        schema: Question set schema
        answers: Submitted answers

    Returns:
        ArchetypeResult: Winning key and display name
    """
    tally = tally_answers(schema, answers)

    if not tally:
        if schema.archetypes:
            first = schema.archetypes[0]
            return ArchetypeResult(key=first.key, name=first.name)
        return ArchetypeResult(key=UNKNOWN_ARCHETYPE, name=UNKNOWN_ARCHETYPE)

    declared = {archetype.key: index for index, archetype in enumerate(schema.archetypes)}
    seen = {key: index for index, key in enumerate(tally)}

    def rank(key: str) -> tuple[int, int, int]:
        # Higher votes first, then declared order, then first-seen order.
        return (-tally[key], declared.get(key, len(declared)), seen[key])

    winner = min(tally, key=rank)
    return ArchetypeResult(key=winner, name=schema.archetype_name(winner))

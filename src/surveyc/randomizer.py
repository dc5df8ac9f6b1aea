"""
Randomizer — question order and option order shuffling.

Two question-ordering policies:
    - Flat: the whole sequence is shuffled as one unit
    - Section-respecting: the sequence is split into sections (each
      section_break starts a new section and stays in it), every section
      is shuffled on its own, and sections keep their original order

Option shuffling is independent and happens at render time, so two
presentations of the same question may show different option orders.
"""

import random
from typing import List, Optional, Sequence, TypeVar

from surveyc.model import ChoiceQuestion, Question, QuestionType, Settings


T = TypeVar("T")


def shuffle(sequence: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Fisher-Yates shuffle into a new list. The input is left untouched.

    Args:
        sequence: Items to permute
        rng: Random source (a fresh unseeded one when None)
    """
    if rng is None:
        rng = random.Random()
    items = list(sequence)
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def split_sections(questions: Sequence[Question]) -> List[List[Question]]:
    """
    Partition questions into contiguous sections.

    A section_break opens a new section and is its first element.
    A leading section_break does not produce an empty section before it.
    """
    sections: List[List[Question]] = []
    current: List[Question] = []

    for question in questions:
        if question.type == QuestionType.SECTION_BREAK and current:
            sections.append(current)
            current = [question]
        else:
            current.append(question)

    if current:
        sections.append(current)

    return sections


def order_questions(
    questions: Sequence[Question],
    settings: Settings,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """Question order for one session, according to the survey settings."""
    if not settings.randomize_questions:
        return list(questions)

    if settings.respect_sections:
        ordered: List[Question] = []
        for section in split_sections(questions):
            ordered.extend(shuffle(section, rng))
        return ordered

    return shuffle(questions, rng)


def question_options(question: Question, rng: Optional[random.Random] = None) -> list:
    """Options to present for a question, shuffled when `randomize` is set."""
    if not isinstance(question, ChoiceQuestion):
        return []
    if question.randomize:
        return shuffle(question.options, rng)
    return list(question.options)

"""
Runtime State Machine — one respondent's pass through a survey.

States:
    ANSWERING  cursor is an index into the *visible* questions
    COMPLETED  terminal; a ResponseSnapshot has been produced

Every response mutation goes through respond(), which synchronously
recomputes the Visibility Map and returns it together with the
validation result as plain data. There is no observer graph.

The browser runtime embedded in export artifacts (backends/assets/
runtime.js) implements the same transitions.
"""

import logging
import math
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from surveyc.model import (
    NavigationStyle,
    Question,
    QuestionType,
    RankingQuestion,
    Survey,
)
from surveyc.randomizer import order_questions, question_options
from surveyc.snapshot import (
    ResponseSnapshot,
    SnapshotEntry,
    format_response,
    is_answered,
    snapshot_value,
)
from surveyc.text import resolve_text
from surveyc.validator import VALID, ValidationResult, validate
from surveyc.visibility import resolve_visibility


logger = logging.getLogger(__name__)


class SessionState(Enum):
    ANSWERING = "answering"
    COMPLETED = "completed"


@dataclass(frozen=True)
class RespondResult:
    """What respond() reports back to the caller."""

    visibility: Dict[str, bool]
    validation: ValidationResult
    advanced: bool = False


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class SurveySession:
    """
    Drives navigation, validation and submission for one respondent.

    Args:
        survey: Survey Definition (never mutated)
        language: Active language; defaults to the survey default
        rng: Random source for question/option shuffling
        clock: Callable returning the submission datetime; None keeps
            snapshots free of timestamps
    """

    def __init__(
        self,
        survey: Survey,
        language: Optional[str] = None,
        rng: Optional[random.Random] = None,
        clock=None,
    ):
        self.survey = survey
        self.settings = survey.settings
        self.language = language or self.settings.default_language
        self.rng = rng or random.Random()
        self.clock = clock

        self.state = SessionState.ANSWERING
        self.current_index = 0
        self.responses: Dict[str, Any] = {}
        self.other_responses: Dict[str, str] = {}
        self.errors: Dict[str, str] = {}
        self.snapshot: Optional[ResponseSnapshot] = None

        self._by_id = {q.id: q for q in survey.questions}
        self.question_order: List[Question] = order_questions(survey.questions, self.settings, self.rng)

        for question in survey.questions:
            if isinstance(question, RankingQuestion):
                self.responses[question.id] = [o.id for o in question.options]
            elif question.type == QuestionType.FILE_UPLOAD:
                self.responses[question.id] = []

        self.visibility: Dict[str, bool] = resolve_visibility(survey.questions, self.responses)

    # =========================================================================
    # DERIVED VIEWS
    # =========================================================================

    @property
    def visible_questions(self) -> List[Question]:
        return [q for q in self.question_order if self.visibility.get(q.id, True)]

    @property
    def current_question(self) -> Optional[Question]:
        visible = self.visible_questions
        if not visible:
            return None
        return visible[self.current_index]

    @property
    def is_last(self) -> bool:
        return self.current_index >= len(self.visible_questions) - 1

    @property
    def progress(self) -> int:
        """Percentage through the visible questions, rounded half up."""
        total = len(self.visible_questions)
        if total == 0:
            return 0
        return round_half_up((self.current_index + 1) / total * 100)

    @property
    def question_number(self) -> str:
        return f"Question {self.current_index + 1} of {len(self.visible_questions)}"

    def text(self, field) -> str:
        return resolve_text(field, self.language, self.settings.default_language)

    def options_for(self, question: Question) -> list:
        return question_options(question, self.rng)

    def set_language(self, code: str) -> None:
        if code not in self.settings.enabled_languages():
            logger.debug("Language %s is not enabled for survey %s", code, self.survey.id)
        self.language = code

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def _question(self, question_id: str) -> Question:
        try:
            return self._by_id[question_id]
        except KeyError:
            raise KeyError(f"Unknown question id: {question_id}") from None

    def _refresh_visibility(self) -> None:
        self.visibility = resolve_visibility(self.survey.questions, self.responses)
        visible_count = len(self.visible_questions)
        if visible_count and self.current_index > visible_count - 1:
            self.current_index = visible_count - 1
        elif not visible_count:
            self.current_index = 0

    def _check_current(self) -> ValidationResult:
        question = self.current_question
        if question is None:
            return VALID
        result = validate(question, self.responses)
        if result.valid:
            self.errors.pop(question.id, None)
        else:
            self.errors[question.id] = result.message
        return result

    def respond(self, question_id: str, value: Any) -> RespondResult:
        """
        Record a response, recompute visibility, maybe auto-advance.

        Raises:
            KeyError: if the question id is not part of the survey
        """
        question = self._question(question_id)
        if self.state == SessionState.COMPLETED:
            return RespondResult(visibility=dict(self.visibility), validation=VALID)

        self.responses[question_id] = value
        self.errors.pop(question_id, None)
        self._refresh_visibility()

        validation = validate(question, self.responses)
        advanced = False

        if (
            self.state == SessionState.ANSWERING
            and self.settings.navigation_style == NavigationStyle.AUTO_ADVANCE
            and self.current_question is not None
            and not self.is_last
            and validate(self.current_question, self.responses).valid
        ):
            advanced = self.next()

        return RespondResult(visibility=dict(self.visibility), validation=validation, advanced=advanced)

    def respond_other(self, question_id: str, text: str) -> RespondResult:
        """Record the free text typed next to an 'Other' choice."""
        self._question(question_id)
        if self.state == SessionState.COMPLETED:
            return RespondResult(visibility=dict(self.visibility), validation=VALID)
        self.other_responses[question_id] = text
        return self.respond(question_id, self.responses.get(question_id))

    def next(self) -> bool:
        """Move forward. Refused while the current question is invalid."""
        if self.state != SessionState.ANSWERING:
            return False
        if not self._check_current().valid:
            return False
        if self.is_last:
            return False
        self.current_index += 1
        return True

    def previous(self) -> bool:
        if self.state != SessionState.ANSWERING or self.current_index == 0:
            return False
        self.current_index -= 1
        return True

    def submit(self) -> Optional[ResponseSnapshot]:
        """
        Complete the survey.

        Returns:
            The ResponseSnapshot, or None when refused because the
            current question is invalid
        """
        if self.state == SessionState.COMPLETED:
            return self.snapshot
        if not self._check_current().valid:
            return None

        self.state = SessionState.COMPLETED
        self.snapshot = self.build_snapshot()
        logger.debug("Survey %s submitted with %d entries", self.survey.id, len(self.snapshot.entries))
        return self.snapshot

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    def build_snapshot(self) -> ResponseSnapshot:
        submitted_at = None
        if self.clock is not None:
            submitted_at = self.clock().astimezone(timezone.utc).isoformat()

        default_lang = self.settings.default_language
        entries = []
        for question in self.survey.questions:
            if question.type == QuestionType.SECTION_BREAK:
                continue
            value = self.responses.get(question.id)
            other_text = self.other_responses.get(question.id, "")
            entries.append(SnapshotEntry(
                question_id=question.id,
                question_type=question.type,
                question_text=self.text(question.text),
                response=snapshot_value(question, value, other_text),
                visible=self.visibility.get(question.id, True),
                answered=is_answered(question, value),
                display=format_response(question, value, self.language, default_lang, other_text),
            ))

        return ResponseSnapshot(survey_id=self.survey.id, submitted_at=submitted_at, entries=entries)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)

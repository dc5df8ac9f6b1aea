"""
Validator — per-question-type response checks.

Two families of checks:
    - Required-ness: does the question have a response at all?
    - Constraints: does the response respect the question's bounds
      (file count/size, selection count, numeric/date range, length)?

Constraints are checked even for optional questions, as soon as a
response is present: they protect data integrity, not completeness.

Failures are returned as data (ValidationResult), never raised.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional

from surveyc.model import (
    CheckboxGroupQuestion,
    DateQuestion,
    FileUploadQuestion,
    NumericQuestion,
    OpenTextQuestion,
    Question,
    QuestionType,
)


class FailureKind(Enum):
    REQUIRED = "required"
    MAX_FILES = "max_files"
    FILE_SIZE = "file_size"
    MAX_SELECTIONS = "max_selections"
    NOT_A_NUMBER = "not_a_number"
    INVALID_DATE = "invalid_date"
    OUT_OF_RANGE = "out_of_range"
    TOO_LONG = "too_long"


MESSAGES = {
    FailureKind.REQUIRED: "This question is required.",
    FailureKind.MAX_FILES: "Maximum file limit reached.",
    FailureKind.FILE_SIZE: "One or more files exceed the size limit.",
    FailureKind.MAX_SELECTIONS: "Too many options selected.",
    FailureKind.NOT_A_NUMBER: "Please enter a valid number.",
    FailureKind.INVALID_DATE: "Please enter a valid date.",
    FailureKind.OUT_OF_RANGE: "The answer is outside the allowed range.",
    FailureKind.TOO_LONG: "The answer is too long.",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one question."""

    valid: bool
    failure: Optional[FailureKind] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.valid


VALID = ValidationResult(valid=True)


def _fail(kind: FailureKind) -> ValidationResult:
    return ValidationResult(valid=False, failure=kind, message=MESSAGES[kind])


def is_blank(value: Any) -> bool:
    """None, empty strings and empty containers count as 'no response'."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def has_response(question: Question, value: Any) -> bool:
    """The per-type "has a response" predicate."""
    qtype = question.type

    if qtype == QuestionType.SECTION_BREAK:
        return True

    if qtype == QuestionType.MATRIX:
        if not isinstance(value, Mapping):
            return False
        return all(not is_blank(value.get(row.id)) for row in question.rows)

    if qtype in (QuestionType.CHECKBOX_GROUP, QuestionType.RANKING, QuestionType.FILE_UPLOAD):
        return isinstance(value, (list, tuple)) and len(value) > 0

    return not is_blank(value)


def file_size(entry: Any) -> int:
    """Size in bytes of an uploaded file (UploadedFile or {'size': ...})."""
    if isinstance(entry, Mapping):
        return int(entry.get("size") or 0)
    return int(getattr(entry, "size", 0) or 0)


def parse_number(value: Any) -> Optional[float]:
    """Finite float or None. Booleans are not numbers here."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def _check_constraints(question: Question, value: Any) -> ValidationResult:
    if isinstance(question, FileUploadQuestion):
        files = list(value) if isinstance(value, (list, tuple)) else []
        if len(files) > question.max_files:
            return _fail(FailureKind.MAX_FILES)
        if question.max_file_size is not None:
            if any(file_size(f) > question.max_file_size for f in files):
                return _fail(FailureKind.FILE_SIZE)

    elif isinstance(question, CheckboxGroupQuestion):
        if question.max_selections and isinstance(value, (list, tuple)):
            if len(value) > question.max_selections:
                return _fail(FailureKind.MAX_SELECTIONS)

    elif isinstance(question, NumericQuestion):
        number = parse_number(value)
        if number is None:
            return _fail(FailureKind.NOT_A_NUMBER)
        if question.min is not None and number < question.min:
            return _fail(FailureKind.OUT_OF_RANGE)
        if question.max is not None and number > question.max:
            return _fail(FailureKind.OUT_OF_RANGE)

    elif isinstance(question, DateQuestion):
        day = _parse_date(value)
        if day is None:
            return _fail(FailureKind.INVALID_DATE)
        lower = _parse_date(question.min_date) if question.min_date else None
        upper = _parse_date(question.max_date) if question.max_date else None
        if (lower and day < lower) or (upper and day > upper):
            return _fail(FailureKind.OUT_OF_RANGE)

    elif isinstance(question, OpenTextQuestion):
        if question.max_length is not None and len(str(value)) > question.max_length:
            return _fail(FailureKind.TOO_LONG)

    return VALID


def validate(question: Question, responses: Mapping[str, Any]) -> ValidationResult:
    """
    Validate the current response of a question.

    Args:
        question: Question to check
        responses: Response State (question id -> value); read only

    Returns:
        ValidationResult describing the first failure, or VALID
    """
    if question.type == QuestionType.SECTION_BREAK:
        return VALID

    value = responses.get(question.id)
    answered = has_response(question, value)

    if question.required and not answered:
        return _fail(FailureKind.REQUIRED)

    if not answered:
        # A partially filled matrix still has nothing to constrain
        return VALID

    return _check_constraints(question, value)


def is_valid(question: Question, responses: Mapping[str, Any]) -> bool:
    return validate(question, responses).valid

"""
Response Snapshot — the finalized answers produced on submission.

One entry per non-section_break question, tagged with its type and
resolved text. The summary view lists only answered, visible entries;
answers to hidden questions are retained in the snapshot but never
surfaced there.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from surveyc.model import (
    ChoiceQuestion,
    LikertScaleQuestion,
    MatrixQuestion,
    Question,
    QuestionType,
)
from surveyc.text import resolve_text
from surveyc.validator import file_size, has_response


OTHER = "other"


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} bytes"
    if size < 1048576:
        return f"{size / 1024:.1f} KB"
    return f"{size / 1048576:.1f} MB"


def is_answered(question: Question, value: Any) -> bool:
    """
    Whether a question counts as answered for the summary.

    Looser than the required-ness predicate for matrices: one answered
    row is enough.
    """
    if question.type == QuestionType.SECTION_BREAK:
        return False
    if question.type == QuestionType.MATRIX:
        return isinstance(value, dict) and any(value.values())
    return has_response(question, value)


@dataclass
class SnapshotEntry:
    question_id: str
    question_type: QuestionType
    question_text: str
    response: Any
    visible: bool = True
    answered: bool = False
    display: str = ""


@dataclass
class ResponseSnapshot:
    """
    Properties:
        survey_id: Identifier of the submitted survey
        submitted_at: ISO-8601 timestamp, or None for reproducible output
        entries: One entry per non-section_break question, in survey order
    """

    survey_id: str
    submitted_at: Optional[str] = None
    entries: List[SnapshotEntry] = field(default_factory=list)

    @property
    def summary(self) -> List[SnapshotEntry]:
        return [e for e in self.entries if e.answered and e.visible]

    def get(self, question_id: str) -> Optional[SnapshotEntry]:
        for entry in self.entries:
            if entry.question_id == question_id:
                return entry
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "survey_id": self.survey_id,
            "timestamp": self.submitted_at,
            "responses": {
                e.question_id: {
                    "question_type": e.question_type.value,
                    "question_text": e.question_text,
                    "response": e.response,
                }
                for e in self.entries
            },
        }


def _option_text(question: ChoiceQuestion, option_id: Any, lang: str, default_lang: str) -> str:
    option = question.get_option(option_id)
    return resolve_text(option.text, lang, default_lang) if option else str(option_id)


def format_response(
    question: Question,
    value: Any,
    lang: str,
    default_lang: str,
    other_text: str = "",
) -> str:
    """Human-readable answer for the summary view."""
    qtype = question.type

    if qtype == QuestionType.FILE_UPLOAD:
        files = value or []
        if not files:
            return "No files uploaded"
        return "1 file uploaded" if len(files) == 1 else f"{len(files)} files uploaded"

    if not is_answered(question, value):
        return "No answer"

    if qtype in (QuestionType.MULTIPLE_CHOICE, QuestionType.DROPDOWN):
        if value == OTHER:
            return other_text or "Other"
        return _option_text(question, value, lang, default_lang)

    if qtype == QuestionType.CHECKBOX_GROUP:
        parts = []
        for choice in value:
            if choice == OTHER:
                parts.append(other_text or "Other")
            else:
                parts.append(_option_text(question, choice, lang, default_lang))
        return ", ".join(parts)

    if qtype == QuestionType.RANKING:
        return "\n".join(
            f"{i}. {_option_text(question, item, lang, default_lang)}"
            for i, item in enumerate(value, start=1)
        )

    if isinstance(question, LikertScaleQuestion):
        return f"{value} out of {question.scale}"

    if isinstance(question, MatrixQuestion):
        lines = []
        for row in question.rows:
            column_id = value.get(row.id)
            if not column_id:
                continue
            column = question.get_column(column_id)
            column_text = resolve_text(column.text, lang, default_lang) if column else str(column_id)
            lines.append(f"{resolve_text(row.text, lang, default_lang)}: {column_text}")
        return "\n".join(lines)

    if qtype == QuestionType.DATE:
        if isinstance(value, date):
            return value.isoformat()
        return str(value)

    return str(value)


def _file_metadata(entry: Any) -> Dict[str, Any]:
    name = entry.get("name") if isinstance(entry, dict) else getattr(entry, "name", None)
    return {"name": name, "size": file_size(entry)}


def snapshot_value(question: Question, value: Any, other_text: str) -> Any:
    """Response value as stored in the snapshot ('other' replaced by its text)."""
    if question.type == QuestionType.MULTIPLE_CHOICE and value == OTHER and other_text:
        return {OTHER: other_text}
    if question.type == QuestionType.CHECKBOX_GROUP:
        selected = list(value or [])
        if OTHER in selected and other_text:
            return [v for v in selected if v != OTHER] + [{OTHER: other_text}]
        return selected
    if question.type == QuestionType.MATRIX:
        return dict(value or {})
    if question.type == QuestionType.FILE_UPLOAD:
        return [_file_metadata(f) for f in value or []]
    return value

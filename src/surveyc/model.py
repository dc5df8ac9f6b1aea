"""
Core Survey Definition Objects

Defines the data structures a survey editor hands to the compiler:
    - Localizable text (plain or per-language)
    - Logic rules (show/hide a target question)
    - Questions (one variant per question type)
    - Settings (runtime behavior and theme)
    - Surveys (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about HTML, CSS or JavaScript
        - Are treated as immutable once handed to the compiler
        - Are fully serializable (see serialization.py)
        - Represent structure, not behavior
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


# =============================================================================
# LOCALIZABLE TEXT
# =============================================================================


@dataclass(frozen=True)
class PlainText:
    """
    Text that is identical in every language.

    On the wire this is a bare JSON string.
    """

    value: str = ""


@dataclass(frozen=True)
class LocalizedText:
    """
    Text keyed by language code.

    Properties:
        translations:
            Mapping language code -> string.
            Insertion order is significant: it is the last-resort
            fallback order used by the text resolver.
    """

    translations: Dict[str, str] = field(default_factory=dict)

    def languages(self) -> List[str]:
        return list(self.translations.keys())


Text = Union[PlainText, LocalizedText]


def as_text(value: Any) -> Text:
    """Coerce a wire value (str, mapping, None or Text) into a Text variant."""
    if isinstance(value, (PlainText, LocalizedText)):
        return value
    if value is None:
        return PlainText("")
    if isinstance(value, dict):
        return LocalizedText({str(k): "" if v is None else str(v) for k, v in value.items()})
    return PlainText(str(value))


# =============================================================================
# ENUMERATIONS
# =============================================================================


class QuestionType(Enum):
    """Closed set of question types understood by the runtime."""
    MULTIPLE_CHOICE = "multiple_choice"
    CHECKBOX_GROUP = "checkbox_group"
    LIKERT_SCALE = "likert_scale"
    OPEN_TEXT = "open_text"
    DROPDOWN = "dropdown"
    MATRIX = "matrix"
    NUMERIC = "numeric"
    DATE = "date"
    RANKING = "ranking"
    FILE_UPLOAD = "file_upload"
    SECTION_BREAK = "section_break"


class RuleAction(Enum):
    SHOW = "show"
    HIDE = "hide"


class RuleCondition(Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"


class NavigationStyle(Enum):
    MANUAL = "manual"
    AUTO_ADVANCE = "auto"


class QuestionNumbering(Enum):
    VISIBLE = "visible"
    HIDDEN = "hidden"


class RequiredIndicator(Enum):
    ASTERISK = "asterisk"
    TEXT = "text"
    NONE = "none"


# =============================================================================
# LOGIC RULES
# =============================================================================


@dataclass(frozen=True)
class LogicRule:
    """
    A condition owned by a source question that shows or hides a target.

    The source is always the question that declares the rule; the
    condition is evaluated against the source's own response.

    Properties:
        target_question_id: Question whose visibility is affected
        action: SHOW or HIDE
        condition: Comparison applied to the source response
        value: Operand of the comparison (option id, number, text...)

    Example:
        Show Q2 when Q1 is answered "A":

        LogicRule(
            target_question_id="Q2",
            action=RuleAction.SHOW,
            condition=RuleCondition.EQUALS,
            value="A",
        )
    """

    target_question_id: str
    action: RuleAction
    condition: RuleCondition
    value: Any = None


# =============================================================================
# QUESTIONS
# =============================================================================


@dataclass(frozen=True)
class Option:
    """A selectable choice, matrix row or matrix column."""

    id: str
    text: Text = PlainText("")


@dataclass
class Question:
    """
    Base class for every question variant.

    Never instantiated directly: use one of the concrete variants below so
    that validators and renderers can switch exhaustively on `type`.

    Properties:
        id: Unique identifier within the survey
        text: Question wording (localizable)
        description: Helper text shown under the wording (localizable)
        required: Whether an answer must be given before moving on
        logic: Ordered rules whose source is this question
    """

    id: str
    text: Text = PlainText("")
    description: Text = PlainText("")
    required: bool = False
    logic: List[LogicRule] = field(default_factory=list)

    type = None  # overridden by each variant


@dataclass
class ChoiceQuestion(Question):
    """Shared shape of option-based questions."""

    options: List[Option] = field(default_factory=list)
    randomize: bool = False

    def get_option(self, option_id: str) -> Optional[Option]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


@dataclass
class MultipleChoiceQuestion(ChoiceQuestion):
    allow_other: bool = False

    type = QuestionType.MULTIPLE_CHOICE


@dataclass
class CheckboxGroupQuestion(ChoiceQuestion):
    allow_other: bool = False
    max_selections: Optional[int] = None

    type = QuestionType.CHECKBOX_GROUP


@dataclass
class DropdownQuestion(ChoiceQuestion):
    placeholder: Text = PlainText("")

    type = QuestionType.DROPDOWN


@dataclass
class RankingQuestion(ChoiceQuestion):
    show_numbers: bool = True

    type = QuestionType.RANKING


@dataclass
class LikertScaleQuestion(Question):
    scale: int = 5
    start_label: Text = PlainText("")
    end_label: Text = PlainText("")
    show_values: bool = True

    type = QuestionType.LIKERT_SCALE


@dataclass
class OpenTextQuestion(Question):
    multiline: bool = False
    placeholder: Text = PlainText("")
    max_length: Optional[int] = None

    type = QuestionType.OPEN_TEXT


@dataclass
class MatrixQuestion(Question):
    rows: List[Option] = field(default_factory=list)
    columns: List[Option] = field(default_factory=list)

    type = QuestionType.MATRIX

    def get_column(self, column_id: str) -> Optional[Option]:
        for column in self.columns:
            if column.id == column_id:
                return column
        return None


@dataclass
class NumericQuestion(Question):
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    unit: Text = PlainText("")

    type = QuestionType.NUMERIC


@dataclass
class DateQuestion(Question):
    """Dates are ISO strings (YYYY-MM-DD); bounds are inclusive."""

    min_date: Optional[str] = None
    max_date: Optional[str] = None

    type = QuestionType.DATE


@dataclass
class FileUploadQuestion(Question):
    """
    Properties:
        allowed_types: Accept list for the file picker (e.g. [".pdf", "image/*"])
        max_files: Maximum number of retained files
        max_file_size: Maximum size of a single file, in bytes
    """

    allowed_types: List[str] = field(default_factory=list)
    max_files: int = 1
    max_file_size: Optional[int] = None

    type = QuestionType.FILE_UPLOAD


@dataclass
class SectionBreak(Question):
    """Delimits sections. Collects no response."""

    type = QuestionType.SECTION_BREAK


QUESTION_CLASSES = {
    QuestionType.MULTIPLE_CHOICE: MultipleChoiceQuestion,
    QuestionType.CHECKBOX_GROUP: CheckboxGroupQuestion,
    QuestionType.LIKERT_SCALE: LikertScaleQuestion,
    QuestionType.OPEN_TEXT: OpenTextQuestion,
    QuestionType.DROPDOWN: DropdownQuestion,
    QuestionType.MATRIX: MatrixQuestion,
    QuestionType.NUMERIC: NumericQuestion,
    QuestionType.DATE: DateQuestion,
    QuestionType.RANKING: RankingQuestion,
    QuestionType.FILE_UPLOAD: FileUploadQuestion,
    QuestionType.SECTION_BREAK: SectionBreak,
}

MULTI_SELECT_TYPES = {QuestionType.CHECKBOX_GROUP}

NUMERIC_LIKE_TYPES = {QuestionType.NUMERIC, QuestionType.LIKERT_SCALE}


# =============================================================================
# RESPONSES
# =============================================================================


@dataclass(frozen=True)
class UploadedFile:
    """A file retained by a file_upload question. Only metadata is kept."""

    name: str
    size: int


# =============================================================================
# SURVEY
# =============================================================================


@dataclass
class Settings:
    """
    Survey-wide behavior and theme.

    Properties:
        default_language: Fallback language for localizable text
        languages: Languages offered in the language selector
        primary_color / background_color / font_family: Theme
        randomize_questions: Shuffle question order per session
        respect_sections: Shuffle within sections only
        show_progress_bar / show_response_summary: Presentation flags
        navigation_style: MANUAL or AUTO_ADVANCE
        question_numbering: Show "Question n of m"
        required_indicator: How required questions are flagged
        completion_message: Shown once the survey is submitted
    """

    default_language: str = "en"
    languages: List[str] = field(default_factory=list)
    primary_color: str = "#228be6"
    background_color: str = "#ffffff"
    font_family: Optional[str] = None
    randomize_questions: bool = False
    respect_sections: bool = False
    show_progress_bar: bool = True
    show_response_summary: bool = False
    navigation_style: NavigationStyle = NavigationStyle.MANUAL
    question_numbering: QuestionNumbering = QuestionNumbering.VISIBLE
    required_indicator: RequiredIndicator = RequiredIndicator.ASTERISK
    completion_message: Text = PlainText("Thank you for completing the survey!")

    def enabled_languages(self) -> List[str]:
        return list(self.languages) if self.languages else [self.default_language]


@dataclass
class Survey:
    """
    Root container: the Survey Definition.

    Everything the export artifact does MUST be derivable from this
    object alone. The compiler never mutates it.

    INVARIANTS:
        - Question ids are unique
        - Rule targets should name existing questions (see analyzer)
    """

    id: str
    title: Text = PlainText("")
    description: Text = PlainText("")
    settings: Settings = field(default_factory=Settings)
    questions: List[Question] = field(default_factory=list)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def all_rules(self) -> List[tuple]:
        """(source question, rule) pairs in declaration order."""
        return [(q, rule) for q in self.questions for rule in q.logic]

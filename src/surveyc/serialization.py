"""
Serialization helpers for Survey Definitions.

Converts between model objects and the editor's wire format (camelCase
JSON/YAML, question-specific settings under `properties`). Round-trips
are lossless for every modelled field.

Malformed definitions raise SurveyDefinitionError. Recoverable oddities
are reported with warnings.warn and skipped.
"""
from __future__ import annotations

import json
import warnings
from typing import Any, Callable, Dict, List, Optional

import yaml

from surveyc.model import (
    QUESTION_CLASSES,
    CheckboxGroupQuestion,
    ChoiceQuestion,
    DateQuestion,
    DropdownQuestion,
    FileUploadQuestion,
    LikertScaleQuestion,
    LocalizedText,
    LogicRule,
    MatrixQuestion,
    MultipleChoiceQuestion,
    NavigationStyle,
    NumericQuestion,
    OpenTextQuestion,
    Option,
    Question,
    QuestionNumbering,
    QuestionType,
    RankingQuestion,
    RequiredIndicator,
    RuleAction,
    RuleCondition,
    Settings,
    Survey,
    Text,
    as_text,
)


class SurveyDefinitionError(ValueError):
    """Raised when a Survey Definition cannot be loaded."""
    pass


def _enum(enum_cls, value: Any, what: str, aliases: Optional[Dict[str, Any]] = None):
    if aliases and value in aliases:
        return aliases[value]
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise SurveyDefinitionError(f"Invalid {what} {value!r} (expected one of: {allowed})") from None


def _optional_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise SurveyDefinitionError(f"Expected a number, got {value!r}") from None
    return int(number) if number.is_integer() else number


def _optional_int(value: Any) -> Optional[int]:
    number = _optional_number(value)
    return None if number is None else int(number)


# =============================================================================
# TEXT
# =============================================================================


def text_to_wire(text: Text) -> Any:
    if isinstance(text, LocalizedText):
        return dict(text.translations)
    return text.value


def text_from_wire(value: Any) -> Text:
    if value is not None and not isinstance(value, (str, dict, int, float)):
        raise SurveyDefinitionError(f"Localizable text must be a string or mapping, got {type(value).__name__}")
    return as_text(value)


# =============================================================================
# RULES & OPTIONS
# =============================================================================


def rule_to_dict(rule: LogicRule) -> Dict[str, Any]:
    return {
        "targetQuestionId": rule.target_question_id,
        "action": rule.action.value,
        "condition": rule.condition.value,
        "value": rule.value,
    }


def rule_from_dict(d: Dict[str, Any]) -> LogicRule:
    return LogicRule(
        target_question_id=str(d["targetQuestionId"]),
        action=_enum(RuleAction, d.get("action"), "rule action"),
        condition=_enum(RuleCondition, d.get("condition"), "rule condition"),
        value=d.get("value"),
    )


def option_to_dict(o: Option) -> Dict[str, Any]:
    return {"id": o.id, "text": text_to_wire(o.text)}


def option_from_dict(d: Dict[str, Any]) -> Option:
    if "id" not in d:
        raise SurveyDefinitionError(f"Option without id: {d!r}")
    return Option(id=str(d["id"]), text=text_from_wire(d.get("text")))


# =============================================================================
# QUESTION PROPERTIES (per variant)
# =============================================================================


def _properties_to_dict(q: Question) -> Dict[str, Any]:
    props: Dict[str, Any] = {}
    if isinstance(q, ChoiceQuestion):
        props["randomize"] = q.randomize
    if isinstance(q, (MultipleChoiceQuestion, CheckboxGroupQuestion)):
        props["allowOther"] = q.allow_other
    if isinstance(q, CheckboxGroupQuestion) and q.max_selections is not None:
        props["maxSelections"] = q.max_selections
    if isinstance(q, (DropdownQuestion, OpenTextQuestion)):
        props["placeholder"] = text_to_wire(q.placeholder)
    if isinstance(q, RankingQuestion):
        props["showNumbers"] = q.show_numbers
    if isinstance(q, LikertScaleQuestion):
        props["scale"] = q.scale
        props["labels"] = {"start": text_to_wire(q.start_label), "end": text_to_wire(q.end_label)}
        props["showValues"] = q.show_values
    if isinstance(q, OpenTextQuestion):
        props["multiline"] = q.multiline
        if q.max_length is not None:
            props["maxLength"] = q.max_length
    if isinstance(q, NumericQuestion):
        for key in ("min", "max", "step"):
            if getattr(q, key) is not None:
                props[key] = getattr(q, key)
        props["unit"] = text_to_wire(q.unit)
    if isinstance(q, DateQuestion):
        if q.min_date:
            props["minDate"] = q.min_date
        if q.max_date:
            props["maxDate"] = q.max_date
    if isinstance(q, FileUploadQuestion):
        props["allowedTypes"] = list(q.allowed_types)
        props["maxFiles"] = q.max_files
        if q.max_file_size is not None:
            props["maxFileSize"] = q.max_file_size
    return props


def _properties_from_dict(qtype: QuestionType, props: Dict[str, Any], d: Dict[str, Any]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}
    cls = QUESTION_CLASSES[qtype]

    if issubclass(cls, ChoiceQuestion):
        kwargs["options"] = [option_from_dict(o) for o in d.get("options") or []]
        kwargs["randomize"] = bool(props.get("randomize", False))
    if cls in (MultipleChoiceQuestion, CheckboxGroupQuestion):
        kwargs["allow_other"] = bool(props.get("allowOther", False))
    if cls is CheckboxGroupQuestion:
        kwargs["max_selections"] = _optional_int(props.get("maxSelections"))
    if cls in (DropdownQuestion, OpenTextQuestion):
        kwargs["placeholder"] = text_from_wire(props.get("placeholder"))
    if cls is RankingQuestion:
        kwargs["show_numbers"] = bool(props.get("showNumbers", True))
    if cls is LikertScaleQuestion:
        labels = props.get("labels") or {}
        kwargs["scale"] = _optional_int(props.get("scale")) or 5
        kwargs["start_label"] = text_from_wire(labels.get("start"))
        kwargs["end_label"] = text_from_wire(labels.get("end"))
        kwargs["show_values"] = bool(props.get("showValues", True))
    if cls is OpenTextQuestion:
        kwargs["multiline"] = bool(props.get("multiline", False))
        kwargs["max_length"] = _optional_int(props.get("maxLength"))
    if cls is NumericQuestion:
        kwargs["min"] = _optional_number(props.get("min"))
        kwargs["max"] = _optional_number(props.get("max"))
        kwargs["step"] = _optional_number(props.get("step"))
        kwargs["unit"] = text_from_wire(props.get("unit"))
    if cls is DateQuestion:
        kwargs["min_date"] = props.get("minDate") or None
        kwargs["max_date"] = props.get("maxDate") or None
    if cls is FileUploadQuestion:
        kwargs["allowed_types"] = list(props.get("allowedTypes") or [])
        max_files = _optional_int(props.get("maxFiles"))
        kwargs["max_files"] = 1 if max_files is None else max_files
        kwargs["max_file_size"] = _optional_int(props.get("maxFileSize"))
    if cls is MatrixQuestion:
        kwargs["rows"] = [option_from_dict(r) for r in d.get("rows") or []]
        kwargs["columns"] = [option_from_dict(c) for c in d.get("columns") or []]

    return kwargs


# =============================================================================
# QUESTIONS
# =============================================================================


def question_to_dict(q: Question) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": q.id,
        "type": q.type.value,
        "text": text_to_wire(q.text),
        "description": text_to_wire(q.description),
        "required": q.required,
        "properties": _properties_to_dict(q),
        "logic": [rule_to_dict(r) for r in q.logic],
    }
    if isinstance(q, ChoiceQuestion):
        d["options"] = [option_to_dict(o) for o in q.options]
    if isinstance(q, MatrixQuestion):
        d["rows"] = [option_to_dict(r) for r in q.rows]
        d["columns"] = [option_to_dict(c) for c in q.columns]
    return d


def question_from_dict(d: Dict[str, Any]) -> Question:
    if "id" not in d:
        raise SurveyDefinitionError(f"Question without id: {d!r}")
    qid = str(d["id"])
    qtype = _enum(QuestionType, d.get("type"), f"question type for {qid}")

    logic: List[LogicRule] = []
    for raw in d.get("logic") or []:
        if not raw.get("targetQuestionId"):
            warnings.warn(f"Ignoring rule without target on question {qid}", UserWarning)
            continue
        logic.append(rule_from_dict(raw))

    cls = QUESTION_CLASSES[qtype]
    return cls(
        id=qid,
        text=text_from_wire(d.get("text")),
        description=text_from_wire(d.get("description")),
        required=bool(d.get("required", False)),
        logic=logic,
        **_properties_from_dict(qtype, d.get("properties") or {}, d),
    )


# =============================================================================
# SETTINGS
# =============================================================================


_SETTINGS_FIELDS: Dict[str, Callable[[Settings], Any]] = {
    "defaultLanguage": lambda s: s.default_language,
    "languages": lambda s: list(s.languages),
    "primaryColor": lambda s: s.primary_color,
    "backgroundColor": lambda s: s.background_color,
    "fontFamily": lambda s: s.font_family,
    "randomizeQuestions": lambda s: s.randomize_questions,
    "respectSections": lambda s: s.respect_sections,
    "showProgressBar": lambda s: s.show_progress_bar,
    "showResponseSummary": lambda s: s.show_response_summary,
    "navigationStyle": lambda s: s.navigation_style.value,
    "questionNumbering": lambda s: s.question_numbering.value,
    "requiredIndicator": lambda s: s.required_indicator.value,
    "completionMessage": lambda s: text_to_wire(s.completion_message),
}


def settings_to_dict(s: Settings) -> Dict[str, Any]:
    d = {key: getter(s) for key, getter in _SETTINGS_FIELDS.items()}
    if d["fontFamily"] is None:
        del d["fontFamily"]
    return d


def settings_from_dict(d: Dict[str, Any]) -> Settings:
    unknown = sorted(set(d) - set(_SETTINGS_FIELDS))
    if unknown:
        warnings.warn(f"Ignoring unknown settings: {', '.join(unknown)}", UserWarning)

    s = Settings()
    s.default_language = d.get("defaultLanguage") or s.default_language
    s.languages = [str(lang) for lang in d.get("languages") or []]
    s.primary_color = d.get("primaryColor") or s.primary_color
    s.background_color = d.get("backgroundColor") or s.background_color
    s.font_family = d.get("fontFamily") or None
    s.randomize_questions = bool(d.get("randomizeQuestions", False))
    s.respect_sections = bool(d.get("respectSections", False))
    s.show_progress_bar = bool(d.get("showProgressBar", True))
    s.show_response_summary = bool(d.get("showResponseSummary", False))
    s.navigation_style = _enum(
        NavigationStyle, d.get("navigationStyle", "manual"), "navigation style",
        aliases={"auto-advance": NavigationStyle.AUTO_ADVANCE},
    )
    s.question_numbering = _enum(QuestionNumbering, d.get("questionNumbering", "visible"), "question numbering")
    s.required_indicator = _enum(RequiredIndicator, d.get("requiredIndicator", "asterisk"), "required indicator")
    if "completionMessage" in d:
        s.completion_message = text_from_wire(d["completionMessage"])
    return s


# =============================================================================
# SURVEY
# =============================================================================


def survey_to_dict(s: Survey) -> Dict[str, Any]:
    return {
        "id": s.id,
        "title": text_to_wire(s.title),
        "description": text_to_wire(s.description),
        "settings": settings_to_dict(s.settings),
        "questions": [question_to_dict(q) for q in s.questions],
    }


def survey_from_dict(d: Dict[str, Any]) -> Survey:
    if not isinstance(d, dict):
        raise SurveyDefinitionError("Survey Definition must be a mapping")
    if "id" not in d:
        raise SurveyDefinitionError("Survey Definition without id")

    questions = [question_from_dict(q) for q in d.get("questions") or []]
    seen = set()
    for q in questions:
        if q.id in seen:
            raise SurveyDefinitionError(f"Duplicate question id: {q.id}")
        seen.add(q.id)

    return Survey(
        id=str(d["id"]),
        title=text_from_wire(d.get("title")),
        description=text_from_wire(d.get("description")),
        settings=settings_from_dict(d.get("settings") or {}),
        questions=questions,
    )


def survey_to_json(s: Survey, indent: Optional[int] = None) -> str:
    # Key order is kept: the order of translations is meaningful
    return json.dumps(survey_to_dict(s), indent=indent, ensure_ascii=False)


def survey_from_json(s: str) -> Survey:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as e:
        raise SurveyDefinitionError(f"Invalid JSON: {e}") from e
    return survey_from_dict(d)


def survey_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_to_dict(s), sort_keys=False, allow_unicode=True)


def survey_from_yaml(s: str) -> Survey:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise SurveyDefinitionError(f"Invalid YAML: {e}") from e
    return survey_from_dict(d)

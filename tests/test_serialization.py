"""
Tests for serialization and deserialization of Survey Definitions.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `surveyc.serialization`, and that malformed
definitions are rejected with SurveyDefinitionError.
"""

import json
import warnings

import pytest
from surveyc.examples import build_example_survey
from surveyc.model import (
    CheckboxGroupQuestion,
    FileUploadQuestion,
    LocalizedText,
    NavigationStyle,
    PlainText,
    RuleAction,
    RuleCondition,
)
from surveyc.serialization import (
    SurveyDefinitionError,
    survey_from_dict,
    survey_from_json,
    survey_from_yaml,
    survey_to_dict,
    survey_to_json,
    survey_to_yaml,
)


def minimal_definition():
    return {
        "id": "s1",
        "title": {"en": "Title", "fr": "Titre"},
        "settings": {"navigationStyle": "manual"},
        "questions": [
            {
                "id": "q1",
                "type": "checkbox_group",
                "text": "Pick",
                "required": True,
                "properties": {"allowOther": True, "maxSelections": 2},
                "options": [{"id": "a", "text": "A"}, {"id": "b", "text": {"en": "B"}}],
                "logic": [
                    {"targetQuestionId": "q2", "action": "show", "condition": "contains", "value": "a"}
                ],
            },
            {
                "id": "q2",
                "type": "file_upload",
                "text": "Upload",
                "properties": {"maxFiles": 2, "maxFileSize": 1048576, "allowedTypes": [".pdf"]},
            },
        ],
    }


def test_load_minimal_definition():
    survey = survey_from_dict(minimal_definition())
    assert survey.id == "s1"
    assert survey.title == LocalizedText({"en": "Title", "fr": "Titre"})

    q1 = survey.get_question("q1")
    assert isinstance(q1, CheckboxGroupQuestion)
    assert q1.allow_other is True
    assert q1.max_selections == 2
    assert q1.options[0].text == PlainText("A")
    assert q1.logic[0].action == RuleAction.SHOW
    assert q1.logic[0].condition == RuleCondition.CONTAINS

    q2 = survey.get_question("q2")
    assert isinstance(q2, FileUploadQuestion)
    assert q2.max_file_size == 1048576
    assert q2.allowed_types == [".pdf"]


def test_dict_roundtrip():
    survey = build_example_survey()
    d = survey_to_dict(survey)
    survey2 = survey_from_dict(d)
    assert survey_to_dict(survey2) == d


def test_json_roundtrip():
    survey = build_example_survey()
    j = survey_to_json(survey, indent=2)
    survey2 = survey_from_json(j)
    assert survey_to_json(survey2, indent=2) == j


def test_json_keeps_translation_order_and_unicode():
    survey = survey_from_dict(minimal_definition())
    j = survey_to_json(survey)
    assert j.index('"en"') < j.index('"fr"')
    survey = build_example_survey()
    assert "España" in survey_to_json(survey)


def test_yaml_roundtrip():
    survey = build_example_survey()
    y = survey_to_yaml(survey)
    survey2 = survey_from_yaml(y)
    assert survey_to_dict(survey2) == survey_to_dict(survey)


def test_settings_roundtrip():
    survey = build_example_survey()
    d = survey_to_dict(survey)
    assert d["settings"]["defaultLanguage"] == "en"
    assert d["settings"]["languages"] == ["en", "es"]
    assert d["settings"]["showResponseSummary"] is True
    assert d["settings"]["completionMessage"]["es"] == "¡Gracias por sus comentarios!"


def test_auto_advance_alias():
    d = minimal_definition()
    d["settings"]["navigationStyle"] = "auto-advance"
    assert survey_from_dict(d).settings.navigation_style == NavigationStyle.AUTO_ADVANCE
    d["settings"]["navigationStyle"] = "auto"
    assert survey_from_dict(d).settings.navigation_style == NavigationStyle.AUTO_ADVANCE


def test_unknown_question_type_rejected():
    d = minimal_definition()
    d["questions"][0]["type"] = "slider"
    with pytest.raises(SurveyDefinitionError):
        survey_from_dict(d)


def test_unknown_rule_condition_rejected():
    d = minimal_definition()
    d["questions"][0]["logic"][0]["condition"] = "matches"
    with pytest.raises(SurveyDefinitionError):
        survey_from_dict(d)


def test_duplicate_question_ids_rejected():
    d = minimal_definition()
    d["questions"][1]["id"] = "q1"
    with pytest.raises(SurveyDefinitionError):
        survey_from_dict(d)


def test_missing_survey_id_rejected():
    d = minimal_definition()
    del d["id"]
    with pytest.raises(SurveyDefinitionError):
        survey_from_dict(d)


def test_invalid_json_rejected():
    with pytest.raises(SurveyDefinitionError):
        survey_from_json("{not json")


def test_invalid_yaml_rejected():
    with pytest.raises(SurveyDefinitionError):
        survey_from_yaml("questions: [unclosed")


def test_rule_without_target_warns_and_is_skipped():
    d = minimal_definition()
    d["questions"][0]["logic"].append({"action": "hide", "condition": "equals", "value": "x"})
    with pytest.warns(UserWarning):
        survey = survey_from_dict(d)
    assert len(survey.get_question("q1").logic) == 1


def test_unknown_setting_warns():
    d = minimal_definition()
    d["settings"]["sparkles"] = True
    with pytest.warns(UserWarning, match="sparkles"):
        survey_from_dict(d)


def test_known_settings_do_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        survey_from_dict(survey_to_dict(build_example_survey()))


def test_wire_names_are_camel_case():
    d = json.loads(survey_to_json(survey_from_dict(minimal_definition())))
    assert d["questions"][0]["logic"][0]["targetQuestionId"] == "q2"
    assert d["questions"][1]["properties"]["maxFileSize"] == 1048576


def test_max_files_zero_kept():
    """An explicit maxFiles of 0 is not replaced by the default."""
    d = minimal_definition()
    d["questions"][1]["properties"]["maxFiles"] = 0
    assert survey_from_dict(d).get_question("q2").max_files == 0
    del d["questions"][1]["properties"]["maxFiles"]
    assert survey_from_dict(d).get_question("q2").max_files == 1

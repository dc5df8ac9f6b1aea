"""
Tests for the survey analyzer.
"""

from surveyc.analyzer import analyze_survey
from surveyc.model import (
    CheckboxGroupQuestion,
    LogicRule,
    MultipleChoiceQuestion,
    NumericQuestion,
    OpenTextQuestion,
    RuleAction,
    RuleCondition,
    SectionBreak,
    Survey,
)


SHOW = RuleAction.SHOW
HIDE = RuleAction.HIDE


def _mc(qid, *rules, required=False):
    return MultipleChoiceQuestion(id=qid, required=required, logic=list(rules))


def test_counts_and_inventory():
    survey = Survey(id="s", questions=[
        SectionBreak(id="intro"),
        _mc("a", LogicRule("b", SHOW, RuleCondition.EQUALS, "x"), required=True),
        OpenTextQuestion(id="b"),
    ])
    report = analyze_survey(survey)
    assert report.total_questions == 2
    assert report.total_sections == 1
    assert report.total_rules == 1
    assert report.required_questions == 1
    assert report.questions_by_type == {"section_break": 1, "multiple_choice": 1, "open_text": 1}
    assert report.rule_edges == [("a", "b", "show")]
    assert report.conditional_questions == {"b"}
    assert report.warnings == []


def test_duplicate_ids():
    survey = Survey(id="s", questions=[OpenTextQuestion(id="a"), OpenTextQuestion(id="a")])
    report = analyze_survey(survey)
    assert report.duplicate_ids == {"a"}
    assert "Duplicate question ids: a" in report.warnings


def test_unknown_target():
    survey = Survey(id="s", questions=[_mc("a", LogicRule("ghost", HIDE, RuleCondition.EQUALS, "x"))])
    report = analyze_survey(survey)
    assert report.unknown_targets == {"ghost"}
    assert "Rules target unknown questions: ghost" in report.warnings


def test_self_target():
    survey = Survey(id="s", questions=[_mc("a", LogicRule("a", HIDE, RuleCondition.EQUALS, "x"))])
    report = analyze_survey(survey)
    assert "Rule on a targets its own question" in report.warnings


def test_contains_on_single_choice():
    survey = Survey(id="s", questions=[
        _mc("a", LogicRule("b", SHOW, RuleCondition.CONTAINS, "x")),
        OpenTextQuestion(id="b"),
    ])
    report = analyze_survey(survey)
    assert any("never matches a multiple_choice" in w for w in report.warnings)


def test_equals_on_checkbox():
    survey = Survey(id="s", questions=[
        CheckboxGroupQuestion(id="c", logic=[LogicRule("b", SHOW, RuleCondition.EQUALS, "x")]),
        OpenTextQuestion(id="b"),
    ])
    report = analyze_survey(survey)
    assert any("never matches a checkbox_group" in w for w in report.warnings)


def test_numeric_comparison_checks():
    survey = Survey(id="s", questions=[
        _mc("a", LogicRule("c", SHOW, RuleCondition.GREATER_THAN, 3)),
        NumericQuestion(id="n", logic=[LogicRule("c", SHOW, RuleCondition.LESS_THAN, "ten")]),
        OpenTextQuestion(id="c"),
    ])
    report = analyze_survey(survey)
    assert "Rule on a: numeric comparison on a multiple_choice question" in report.warnings
    assert "Rule on n: comparison value 'ten' is not a number" in report.warnings


def test_show_and_hide_on_same_target():
    survey = Survey(id="s", questions=[
        _mc("a", LogicRule("t", SHOW, RuleCondition.EQUALS, "x")),
        _mc("b", LogicRule("t", HIDE, RuleCondition.EQUALS, "y")),
        OpenTextQuestion(id="t"),
    ])
    report = analyze_survey(survey)
    assert any("both show and hide" in w for w in report.warnings)


def test_cycle_detected():
    survey = Survey(id="s", questions=[
        _mc("a", LogicRule("b", SHOW, RuleCondition.EQUALS, "x")),
        _mc("b", LogicRule("a", SHOW, RuleCondition.EQUALS, "y")),
    ])
    report = analyze_survey(survey)
    assert report.has_cycles
    assert report.cycle_example == ["a", "b", "a"]
    assert "Cycle detected: a -> b -> a" in report.warnings


def test_required_question_can_be_hidden():
    survey = Survey(id="s", questions=[
        _mc("a", LogicRule("b", HIDE, RuleCondition.EQUALS, "x")),
        OpenTextQuestion(id="b", required=True),
    ])
    report = analyze_survey(survey)
    assert "Required question b can be hidden by logic" in report.warnings


def test_analysis_does_not_modify_survey():
    a = _mc("a", LogicRule("ghost", HIDE, RuleCondition.EQUALS, "x"))
    survey = Survey(id="s", questions=[a])
    analyze_survey(survey)
    assert survey.questions == [a]
    assert len(a.logic) == 1

"""
Tests for the visibility resolver.

These tests verify:
    - Condition evaluation per source type
    - Hide dominates show, whatever the authoring order
    - Several show rules combine as any-of
    - Malformed numeric operands evaluate false
"""

import logging

from surveyc.model import (
    CheckboxGroupQuestion,
    LikertScaleQuestion,
    LogicRule,
    MultipleChoiceQuestion,
    NumericQuestion,
    OpenTextQuestion,
    Option,
    RuleAction,
    RuleCondition,
)
from surveyc.visibility import evaluate_rule, evaluate_rules, resolve_visibility


SHOW = RuleAction.SHOW
HIDE = RuleAction.HIDE


def _rule(target, action, condition, value):
    return LogicRule(target, action, condition, value)


class TestEvaluateRule:
    """Test single-rule evaluation."""

    def test_equals_on_choice(self):
        q = MultipleChoiceQuestion(id="q1", options=[Option("yes"), Option("no")])
        rule = _rule("q2", SHOW, RuleCondition.EQUALS, "yes")
        assert evaluate_rule(q, rule, {"q1": "yes"})
        assert not evaluate_rule(q, rule, {"q1": "no"})
        assert not evaluate_rule(q, rule, {})

    def test_not_equals_missing_response(self):
        """A missing response compares as the empty string."""
        q = OpenTextQuestion(id="q1")
        rule = _rule("q2", SHOW, RuleCondition.NOT_EQUALS, "x")
        assert evaluate_rule(q, rule, {})

    def test_equals_compares_string_forms(self):
        q = LikertScaleQuestion(id="l")
        rule = _rule("q2", SHOW, RuleCondition.EQUALS, 3)
        assert evaluate_rule(q, rule, {"l": "3"})
        assert evaluate_rule(q, rule, {"l": 3.0})

    def test_greater_and_less_than(self):
        q = NumericQuestion(id="n")
        gt = _rule("q2", SHOW, RuleCondition.GREATER_THAN, "10")
        lt = _rule("q2", SHOW, RuleCondition.LESS_THAN, 10)
        assert evaluate_rule(q, gt, {"n": "11"})
        assert not evaluate_rule(q, gt, {"n": 10})
        assert evaluate_rule(q, lt, {"n": 9.5})

    def test_unparseable_operand_is_false(self, caplog):
        """Should evaluate false and log, never raise."""
        q = NumericQuestion(id="n")
        rule = _rule("q2", SHOW, RuleCondition.GREATER_THAN, 5)
        with caplog.at_level(logging.DEBUG, logger="surveyc.visibility"):
            assert not evaluate_rule(q, rule, {"n": "abc"})
            assert not evaluate_rule(q, rule, {})
        assert "treated as false" in caplog.text

    def test_unparseable_rule_value_is_false(self):
        q = NumericQuestion(id="n")
        assert not evaluate_rule(q, _rule("q2", SHOW, RuleCondition.LESS_THAN, "lots"), {"n": 1})

    def test_contains_on_checkbox(self):
        q = CheckboxGroupQuestion(id="c")
        contains = _rule("q2", SHOW, RuleCondition.CONTAINS, "app")
        not_contains = _rule("q2", SHOW, RuleCondition.NOT_CONTAINS, "app")
        assert evaluate_rule(q, contains, {"c": ["web", "app"]})
        assert not evaluate_rule(q, contains, {"c": ["web"]})
        assert evaluate_rule(q, not_contains, {})

    def test_equals_on_checkbox_is_false(self):
        """Multi-select sources only support membership conditions."""
        q = CheckboxGroupQuestion(id="c")
        assert not evaluate_rule(q, _rule("q2", SHOW, RuleCondition.EQUALS, "app"), {"c": "app"})

    def test_contains_on_single_choice_is_false(self):
        q = MultipleChoiceQuestion(id="q1")
        assert not evaluate_rule(q, _rule("q2", SHOW, RuleCondition.CONTAINS, "yes"), {"q1": "yes"})


class TestResolveVisibility:
    """Test aggregation into the Visibility Map."""

    def test_no_rules_everything_visible(self):
        questions = [OpenTextQuestion(id="a"), OpenTextQuestion(id="b")]
        assert resolve_visibility(questions, {}) == {"a": True, "b": True}

    def test_show_rule_gates_target(self):
        """Q1 'yes' shows Q2; otherwise Q2 is hidden."""
        q1 = MultipleChoiceQuestion(
            id="q1",
            options=[Option("yes"), Option("no")],
            logic=[_rule("q2", SHOW, RuleCondition.EQUALS, "yes")],
        )
        q2 = OpenTextQuestion(id="q2")
        assert resolve_visibility([q1, q2], {}) == {"q1": True, "q2": False}
        assert resolve_visibility([q1, q2], {"q1": "yes"})["q2"] is True
        assert resolve_visibility([q1, q2], {"q1": "no"})["q2"] is False

    def test_hide_dominates_show(self):
        """A true hide wins even when a show rule is also true."""
        a = MultipleChoiceQuestion(id="a", logic=[_rule("t", SHOW, RuleCondition.EQUALS, "x")])
        b = MultipleChoiceQuestion(id="b", logic=[_rule("t", HIDE, RuleCondition.EQUALS, "y")])
        t = OpenTextQuestion(id="t")
        assert resolve_visibility([a, b, t], {"a": "x", "b": "y"})["t"] is False
        assert resolve_visibility([b, a, t], {"a": "x", "b": "y"})["t"] is False
        assert resolve_visibility([a, b, t], {"a": "x", "b": "n"})["t"] is True

    def test_false_hide_leaves_default_visible(self):
        a = MultipleChoiceQuestion(id="a", logic=[_rule("t", HIDE, RuleCondition.EQUALS, "x")])
        t = OpenTextQuestion(id="t")
        assert resolve_visibility([a, t], {"a": "z"})["t"] is True

    def test_show_rules_combine_any_of(self):
        """One true show rule is enough."""
        a = MultipleChoiceQuestion(id="a", logic=[_rule("t", SHOW, RuleCondition.EQUALS, "x")])
        b = MultipleChoiceQuestion(id="b", logic=[_rule("t", SHOW, RuleCondition.EQUALS, "y")])
        t = OpenTextQuestion(id="t")
        assert resolve_visibility([a, b, t], {"a": "x"})["t"] is True
        assert resolve_visibility([a, b, t], {"b": "y"})["t"] is True
        assert resolve_visibility([a, b, t], {})["t"] is False

    def test_same_key_later_rule_wins(self):
        """Rules sharing source, target and action overwrite in declaration order."""
        a = MultipleChoiceQuestion(id="a", logic=[
            _rule("t", SHOW, RuleCondition.EQUALS, "x"),
            _rule("t", SHOW, RuleCondition.EQUALS, "y"),
        ])
        t = OpenTextQuestion(id="t")
        table = evaluate_rules([a, t], {"a": "x"})
        assert table == {("a", "t", SHOW): False}
        assert resolve_visibility([a, t], {"a": "y"})["t"] is True

    def test_unknown_target_is_ignored(self):
        a = MultipleChoiceQuestion(id="a", logic=[_rule("ghost", HIDE, RuleCondition.EQUALS, "x")])
        assert resolve_visibility([a], {"a": "x"}) == {"a": True}

    def test_responses_not_mutated(self):
        a = MultipleChoiceQuestion(id="a", logic=[_rule("t", SHOW, RuleCondition.EQUALS, "x")])
        responses = {"a": "x"}
        resolve_visibility([a, OpenTextQuestion(id="t")], responses)
        assert responses == {"a": "x"}

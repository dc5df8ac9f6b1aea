"""
Visibility Resolver — conditional show/hide logic.

Given every question, the rules embedded in them and the current
Response State, produce a Visibility Map (question id -> bool).

ALGORITHM (two phases):
    1. Evaluate: every rule R declared on a question Q is evaluated
       against Q's own response. Results are memoized in a table keyed
       by (Q.id, R.target_question_id, R.action).
    2. Aggregate, for each question T:
         - any true HIDE entry targeting T  -> hidden (hide dominates)
         - else any SHOW entries targeting T -> visible iff one is true
         - else                               -> visible

POLICY:
    Hide strictly dominates show, whatever the authoring order.
    Several show rules from different sources combine as any-of.

The resolver is a pure function. Callers re-run it after every response
mutation; there is no incremental invalidation.
"""

import logging
from typing import Any, Dict, Mapping, Sequence, Tuple

from surveyc.model import (
    MULTI_SELECT_TYPES,
    LogicRule,
    Question,
    RuleAction,
    RuleCondition,
)
from surveyc.validator import parse_number


logger = logging.getLogger(__name__)


RuleKey = Tuple[str, str, RuleAction]


class MalformedRuleError(ValueError):
    """A rule operand could not be interpreted (e.g. non-numeric for greater_than)."""
    pass


def _as_comparable(value: Any) -> Any:
    """Scalars compare in string form; a missing response is the empty string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (str, int, float)):
        return str(value)
    return value


def _values_equal(response: Any, expected: Any) -> bool:
    return _as_comparable(response) == _as_comparable(expected)


def _numeric_operands(response: Any, expected: Any) -> Tuple[float, float]:
    left = parse_number(response)
    right = parse_number(expected)
    if left is None or right is None:
        raise MalformedRuleError(f"Cannot compare {response!r} with {expected!r} numerically")
    return left, right


def evaluate_rule(source: Question, rule: LogicRule, responses: Mapping[str, Any]) -> bool:
    """
    Evaluate one rule against the response of the question that declares it.

    Multi-select sources only support contains / not_contains; every other
    condition is false for them. Numeric comparisons whose operands do not
    parse evaluate false.
    """
    response = responses.get(source.id)
    condition = rule.condition

    if source.type in MULTI_SELECT_TYPES:
        selected = list(response) if isinstance(response, (list, tuple)) else []
        if condition == RuleCondition.CONTAINS:
            return rule.value in selected
        if condition == RuleCondition.NOT_CONTAINS:
            return rule.value not in selected
        return False

    if condition == RuleCondition.EQUALS:
        return _values_equal(response, rule.value)
    if condition == RuleCondition.NOT_EQUALS:
        return not _values_equal(response, rule.value)

    if condition in (RuleCondition.GREATER_THAN, RuleCondition.LESS_THAN):
        try:
            left, right = _numeric_operands(response, rule.value)
        except MalformedRuleError as e:
            logger.debug("Rule %s -> %s treated as false: %s", source.id, rule.target_question_id, e)
            return False
        if condition == RuleCondition.GREATER_THAN:
            return left > right
        return left < right

    return False


def evaluate_rules(questions: Sequence[Question], responses: Mapping[str, Any]) -> Dict[RuleKey, bool]:
    """
    Phase 1: evaluate every rule into the memo table.

    A later rule with the same (source, target, action) key overwrites
    an earlier one.
    """
    table: Dict[RuleKey, bool] = {}
    for question in questions:
        for rule in question.logic:
            key = (question.id, rule.target_question_id, rule.action)
            table[key] = evaluate_rule(question, rule, responses)
    return table


def aggregate_visibility(questions: Sequence[Question], table: Mapping[RuleKey, bool]) -> Dict[str, bool]:
    """Phase 2: fold the memo table into a Visibility Map."""
    hide_results: Dict[str, list] = {}
    show_results: Dict[str, list] = {}

    for (_, target, action), result in table.items():
        bucket = hide_results if action == RuleAction.HIDE else show_results
        bucket.setdefault(target, []).append(result)

    visibility: Dict[str, bool] = {}
    for question in questions:
        if any(hide_results.get(question.id, [])):
            visibility[question.id] = False
        elif question.id in show_results:
            visibility[question.id] = any(show_results[question.id])
        else:
            visibility[question.id] = True

    return visibility


def resolve_visibility(questions: Sequence[Question], responses: Mapping[str, Any]) -> Dict[str, bool]:
    """
    Compute the Visibility Map for the current responses.

    Args:
        questions: Every question of the survey
        responses: Response State; read only

    Returns:
        Dict covering every question id
    """
    return aggregate_visibility(questions, evaluate_rules(questions, responses))

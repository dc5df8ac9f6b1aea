"""
Survey Analyzer — early diagnostics and inventory of survey definitions.

This module provides lightweight analysis of Survey objects:
    - Question inventory by type
    - Logic rule graph (edges, cycles)
    - Warning flags for rules that can never behave as authored

IMPORTANT: This is an analysis layer. It does NOT modify the survey and
never raises on a questionable definition; problems are reported as
warnings so an author can fix them before export.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from surveyc.model import (
    MULTI_SELECT_TYPES,
    NUMERIC_LIKE_TYPES,
    QuestionType,
    RuleAction,
    RuleCondition,
    Survey,
)
from surveyc.validator import parse_number


NUMERIC_CONDITIONS = {RuleCondition.GREATER_THAN, RuleCondition.LESS_THAN}
MEMBERSHIP_CONDITIONS = {RuleCondition.CONTAINS, RuleCondition.NOT_CONTAINS}


def _find_cycles_dfs(graph: Dict[str, List[str]], start: str, visited: Set[str],
                     rec_stack: Set[str], path: List[str]) -> Optional[List[str]]:
    """DFS to find a cycle starting from a node."""
    visited.add(start)
    rec_stack.add(start)
    path.append(start)

    for neighbor in graph.get(start, []):
        if neighbor not in visited:
            cycle = _find_cycles_dfs(graph, neighbor, visited, rec_stack, path[:])
            if cycle:
                return cycle
        elif neighbor in rec_stack:
            cycle_start_idx = path.index(neighbor)
            return path[cycle_start_idx:] + [neighbor]

    rec_stack.remove(start)
    return None


@dataclass
class SurveyReport:
    """Analysis report for a survey."""

    survey_id: str
    total_questions: int = 0
    total_sections: int = 0
    total_rules: int = 0
    required_questions: int = 0

    # Inventory
    questions_by_type: Dict[str, int] = field(default_factory=dict)
    languages: List[str] = field(default_factory=list)

    # Rule graph: (source id, target id, action)
    rule_edges: List[Tuple[str, str, str]] = field(default_factory=list)
    duplicate_ids: Set[str] = field(default_factory=set)
    unknown_targets: Set[str] = field(default_factory=set)
    conditional_questions: Set[str] = field(default_factory=set)
    has_cycles: bool = False
    cycle_example: Optional[List[str]] = None

    # Warnings and flags
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_survey(survey: Survey) -> SurveyReport:
    """
    Perform analysis of a Survey.

    Checks for:
    - Duplicate question ids
    - Rules targeting unknown questions or their own source
    - Conditions that cannot apply to their source question type
    - Questions targeted by both show and hide rules
    - Cycles in the rule graph
    - Required questions that logic can hide

    Returns a SurveyReport with metrics and warnings.
    """
    report = SurveyReport(survey_id=survey.id)

    report.languages = survey.settings.enabled_languages()
    report.total_questions = sum(1 for q in survey.questions if q.type != QuestionType.SECTION_BREAK)
    report.total_sections = sum(1 for q in survey.questions if q.type == QuestionType.SECTION_BREAK)
    report.required_questions = sum(1 for q in survey.questions if q.required)

    by_type: Dict[str, int] = defaultdict(int)
    for question in survey.questions:
        by_type[question.type.value] += 1
    report.questions_by_type = dict(by_type)

    # =========================================================================
    # 1. IDENTITY
    # =========================================================================

    seen: Set[str] = set()
    for question in survey.questions:
        if question.id in seen:
            report.duplicate_ids.add(question.id)
        seen.add(question.id)

    # =========================================================================
    # 2. RULES
    # =========================================================================

    outgoing: Dict[str, List[str]] = defaultdict(list)
    actions_by_target: Dict[str, Set[RuleAction]] = defaultdict(set)

    for source, rule in survey.all_rules():
        report.total_rules += 1
        target = rule.target_question_id
        report.rule_edges.append((source.id, target, rule.action.value))

        if target not in seen:
            report.unknown_targets.add(target)
            continue

        if target == source.id:
            report.add_warning(f"Rule on {source.id} targets its own question")

        outgoing[source.id].append(target)
        actions_by_target[target].add(rule.action)
        report.conditional_questions.add(target)

        if rule.condition in MEMBERSHIP_CONDITIONS and source.type not in MULTI_SELECT_TYPES:
            report.add_warning(
                f"Rule on {source.id}: '{rule.condition.value}' never matches a {source.type.value} question"
            )
        if source.type in MULTI_SELECT_TYPES and rule.condition not in MEMBERSHIP_CONDITIONS:
            report.add_warning(
                f"Rule on {source.id}: '{rule.condition.value}' never matches a {source.type.value} question"
            )
        if rule.condition in NUMERIC_CONDITIONS:
            if source.type not in NUMERIC_LIKE_TYPES:
                report.add_warning(
                    f"Rule on {source.id}: numeric comparison on a {source.type.value} question"
                )
            if parse_number(rule.value) is None:
                report.add_warning(
                    f"Rule on {source.id}: comparison value {rule.value!r} is not a number"
                )

    for target, actions in actions_by_target.items():
        if actions == {RuleAction.SHOW, RuleAction.HIDE}:
            report.add_warning(f"Question {target} has both show and hide rules; hide rules take precedence")

    # Cycle detection
    visited: Set[str] = set()
    for question_id in list(outgoing.keys()):
        if question_id not in visited:
            cycle = _find_cycles_dfs(outgoing, question_id, visited, set(), [])
            if cycle:
                report.has_cycles = True
                report.cycle_example = cycle
                break

    # =========================================================================
    # 3. WARNING FLAGS
    # =========================================================================

    if report.duplicate_ids:
        report.add_warning(f"Duplicate question ids: {', '.join(sorted(report.duplicate_ids))}")

    if report.unknown_targets:
        report.add_warning(f"Rules target unknown questions: {', '.join(sorted(report.unknown_targets))}")

    if report.has_cycles:
        report.add_warning(f"Cycle detected: {' -> '.join(report.cycle_example)}")

    for question in survey.questions:
        if question.required and question.id in report.conditional_questions:
            report.add_warning(f"Required question {question.id} can be hidden by logic")

    return report

"""
Graphviz DOT diagram generator for survey logic.

Nodes are questions in declaration order, joined by a faint flow edge.
Every logic rule becomes an edge from its source question to its
target: show rules solid, hide rules dashed.

Supports multiple modes:
    - SIMPLE: Question ids and rule edges
    - DETAILED: Question text/type in nodes, conditions on edges
    - SECTIONS: Questions grouped into clusters by section break
"""

from enum import Enum
from typing import List

from surveyc.model import LogicRule, Question, QuestionType, RuleAction, RuleCondition, Survey
from surveyc.randomizer import split_sections
from surveyc.text import resolve_text


class DotMode(Enum):
    """Visualization modes for DOT output."""
    SIMPLE = "simple"        # Ids and rule edges
    DETAILED = "detailed"    # Include text and conditions
    SECTIONS = "sections"    # Clusters per section


CONDITION_SYMBOLS = {
    RuleCondition.EQUALS: "==",
    RuleCondition.NOT_EQUALS: "!=",
    RuleCondition.CONTAINS: "contains",
    RuleCondition.NOT_CONTAINS: "not contains",
    RuleCondition.GREATER_THAN: ">",
    RuleCondition.LESS_THAN: "<",
}


def _escape_dot_string(s: str) -> str:
    """Escape special characters for DOT labels."""
    if not s:
        return '""'
    s = s.replace('\\', '\\\\')
    s = s.replace('"', '\\"')
    s = s.replace('\n', '\\n')
    return f'"{s}"'


def _escape_dot_id(identifier: str) -> str:
    """Escape/quote an identifier for DOT."""
    if not identifier or identifier[0].isdigit() or not identifier.replace('_', '').isalnum():
        return _escape_dot_string(identifier)
    return identifier


def _rule_label(rule: LogicRule) -> str:
    label = f"{CONDITION_SYMBOLS[rule.condition]} {rule.value}"
    # Shorten for readability
    if len(label) > 40:
        label = label[:37] + "..."
    return label


def _node_line(question: Question, mode: DotMode, lang: str, indent: str = "  ") -> str:
    node_id = _escape_dot_id(question.id)
    attrs = []
    label = question.id

    if mode == DotMode.DETAILED:
        text = resolve_text(question.text, lang, lang)
        if len(text) > 40:
            text = text[:37] + "..."
        label = f"{question.id}\n{text}\n[{question.type.value}]"
        if question.required:
            attrs.append("penwidth=2")

    if question.type == QuestionType.SECTION_BREAK:
        attrs.append("shape=note")
        attrs.append("fillcolor=lightyellow")

    attrs.insert(0, f"label={_escape_dot_string(label)}")
    return f"{indent}{node_id} [{', '.join(attrs)}];"


def generate_dot(survey: Survey, mode: DotMode = DotMode.SIMPLE) -> str:
    """
    Generate Graphviz DOT format for a survey's logic.

    Args:
        survey: Survey object to visualize
        mode: Visualization mode (SIMPLE, DETAILED, SECTIONS)

    Returns:
        String containing DOT graph definition
    """
    lang = survey.settings.default_language
    lines: List[str] = []

    # Header
    lines.append("digraph survey {")
    lines.append("  rankdir=TB;")
    lines.append("  node [shape=box, style=filled, fillcolor=lightblue];")

    # =========================================================================
    # NODES
    # =========================================================================

    if mode == DotMode.SECTIONS:
        for index, section in enumerate(split_sections(survey.questions), start=1):
            head = section[0]
            if head.type == QuestionType.SECTION_BREAK:
                title = resolve_text(head.text, lang, lang) or head.id
            else:
                title = f"Section {index}"
            lines.append(f'  subgraph "cluster_{index}" {{')
            lines.append(f'    label={_escape_dot_string(title)};')
            lines.append('    style=filled;')
            lines.append('    color=lightgrey;')
            for question in section:
                lines.append(_node_line(question, mode, lang, indent="    "))
            lines.append("  }")
    else:
        for question in survey.questions:
            lines.append(_node_line(question, mode, lang))

    # =========================================================================
    # EDGES
    # =========================================================================

    # Declaration order
    for current, following in zip(survey.questions, survey.questions[1:]):
        lines.append(
            f"  {_escape_dot_id(current.id)} -> {_escape_dot_id(following.id)} [color=gray, arrowhead=none];"
        )

    for source, rule in survey.all_rules():
        from_id = _escape_dot_id(source.id)
        to_id = _escape_dot_id(rule.target_question_id)

        attrs = ["color=darkgreen"] if rule.action == RuleAction.SHOW else ["color=red", "style=dashed"]
        if mode == DotMode.DETAILED:
            attrs.append(f"label={_escape_dot_string(_rule_label(rule))}")

        lines.append(f"  {from_id} -> {to_id} [{', '.join(attrs)}];")

    # Footer
    lines.append("}")

    return "\n".join(lines)


def save_dot_file(survey: Survey, filename: str, mode: DotMode = DotMode.SIMPLE) -> None:
    """
    Generate DOT and save to file.

    Args:
        survey: Survey to visualize
        filename: Output file path (.dot extension recommended)
        mode: Visualization mode
    """
    dot = generate_dot(survey, mode=mode)
    with open(filename, 'w', encoding='utf-8') as f:
        f.write(dot)


__all__ = ["DotMode", "generate_dot", "save_dot_file"]

"""
Standalone HTML export for surveys.

Compiles a Survey into one self-contained HTML document:
    - <style>   theme variables + base rules (backends/styles.py)
    - <script type="application/json">   the Survey Definition
    - <script>  the browser runtime (backends/assets/runtime.js)

The artifact references no external resource: it works offline and
from a file:// URL.

ARCHITECTURAL RULE:
    compile_survey() is pure. The same Survey and ExportOptions always
    produce byte-identical output; the only time-dependent content is
    ExportOptions.generated_at, which the caller supplies explicitly.
"""

import html
import json
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Optional

from surveyc.backends.styles import generate_styles
from surveyc.model import Survey
from surveyc.serialization import survey_to_dict
from surveyc.text import LANGUAGE_NAMES, resolve_text
from surveyc.validator import MESSAGES


logger = logging.getLogger(__name__)


@dataclass
class ExportOptions:
    """
    Properties:
        generated_at: Timestamp recorded in the artifact's <meta> tag;
            omitted when None
        indent: JSON indentation of the embedded definition (None = compact)
        lang: Language used for the document title and <html lang>;
            defaults to the survey's default language
    """

    generated_at: Optional[str] = None
    indent: Optional[int] = 2
    lang: Optional[str] = None


def _load_runtime() -> str:
    return resources.files("surveyc.backends").joinpath("assets", "runtime.js").read_text(encoding="utf-8")


def _embed_json(data, indent: Optional[int]) -> str:
    # "</" would close the surrounding <script> element
    return json.dumps(data, ensure_ascii=False, indent=indent).replace("</", "<\\/")


def compile_survey(survey: Survey, options: Optional[ExportOptions] = None) -> str:
    """
    Compile a survey into a standalone HTML document.

    Args:
        survey: Survey Definition to export
        options: Export options (defaults to ExportOptions())

    Returns:
        HTML text
    """
    options = options or ExportOptions()
    settings = survey.settings
    lang = options.lang or settings.default_language

    title = resolve_text(survey.title, lang, settings.default_language) or survey.id
    runtime_config = {
        "languageNames": LANGUAGE_NAMES,
        "messages": {kind.value: message for kind, message in MESSAGES.items()},
    }

    head = [
        "<!DOCTYPE html>",
        f'<html lang="{html.escape(lang)}">',
        "<head>",
        '<meta charset="UTF-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
        '<meta name="generator" content="surveyc">',
    ]
    if options.generated_at:
        head.append(f'<meta name="generated-at" content="{html.escape(options.generated_at)}">')
    head += [
        f"<title>{html.escape(title)}</title>",
        "<style>",
        generate_styles(settings),
        "</style>",
        "</head>",
    ]

    body = [
        "<body>",
        '<div id="app"></div>',
        '<script type="application/json" id="survey-definition">',
        _embed_json(survey_to_dict(survey), options.indent),
        "</script>",
        '<script type="application/json" id="survey-runtime-config">',
        _embed_json(runtime_config, None),
        "</script>",
        "<script>",
        _load_runtime(),
        "</script>",
        "</body>",
        "</html>",
    ]

    logger.debug("Compiled survey %s (%d questions)", survey.id, len(survey.questions))
    return "\n".join(head + body) + "\n"


def save_export(survey: Survey, filepath: str, options: Optional[ExportOptions] = None) -> None:
    """
    Compile a survey and write the HTML artifact to a file.

    Args:
        survey: Survey Definition to export
        filepath: Output file path (e.g., "survey.html")
        options: Export options
    """
    Path(filepath).write_text(compile_survey(survey, options), encoding="utf-8")
    logger.info("Wrote survey export %s", filepath)

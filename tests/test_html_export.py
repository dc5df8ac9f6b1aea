"""
Tests for the standalone HTML export and its stylesheet.
"""

import json
import re

from surveyc.backends import ExportOptions, adjust_color, compile_survey, generate_styles, save_export
from surveyc.examples import build_example_survey
from surveyc.model import FileUploadQuestion, LocalizedText, OpenTextQuestion, PlainText, Settings, Survey
from surveyc.serialization import survey_from_dict, survey_to_dict


def _embedded_definition(document: str) -> dict:
    match = re.search(
        r'<script type="application/json" id="survey-definition">\n(.*?)\n</script>',
        document,
        re.DOTALL,
    )
    return json.loads(match.group(1))


class TestCompileSurvey:
    """Test the compiled document."""

    def test_is_html_document(self):
        document = compile_survey(build_example_survey())
        assert document.startswith("<!DOCTYPE html>")
        assert '<html lang="en">' in document
        assert "<title>Customer Feedback</title>" in document
        assert '<div id="app"></div>' in document

    def test_deterministic(self):
        """Same definition and options produce identical bytes."""
        assert compile_survey(build_example_survey()) == compile_survey(build_example_survey())

    def test_timestamp_only_when_given(self):
        document = compile_survey(build_example_survey())
        assert "generated-at" not in document
        stamped = compile_survey(build_example_survey(), ExportOptions(generated_at="2024-01-01T00:00:00Z"))
        assert '<meta name="generated-at" content="2024-01-01T00:00:00Z">' in stamped

    def test_no_external_resources(self):
        """The artifact must work offline."""
        document = compile_survey(build_example_survey())
        assert "http://" not in document
        assert "https://" not in document
        assert "<link" not in document
        assert "src=" not in document

    def test_embeds_runtime(self):
        document = compile_survey(build_example_survey())
        assert "function resolveVisibility" in document
        assert "window.surveyRuntime" in document

    def test_embeds_definition(self):
        survey = build_example_survey()
        document = compile_survey(survey)
        assert _embedded_definition(document) == survey_to_dict(survey)

    def test_embedded_definition_loads_back(self):
        survey = build_example_survey()
        loaded = survey_from_dict(_embedded_definition(compile_survey(survey)))
        assert survey_to_dict(loaded) == survey_to_dict(survey)

    def test_zero_file_limit_reaches_runtime(self):
        """maxFiles 0 is embedded as 0 and the runtime only defaults a missing value."""
        survey = Survey(id="x", questions=[FileUploadQuestion(id="f", max_files=0)])
        document = compile_survey(survey)
        assert _embedded_definition(document)["questions"][0]["properties"]["maxFiles"] == 0
        assert "props.maxFiles || 1" not in document
        assert "function maxFilesOf" in document

    def test_script_close_tag_escaped(self):
        """Text containing </script> cannot break out of the data block."""
        survey = Survey(id="x", questions=[OpenTextQuestion(id="q", text=PlainText("</script><b>hi</b>"))])
        document = compile_survey(survey)
        assert "</script><b>" not in document
        assert "<\\/script><b>hi<\\/b>" in document
        assert _embedded_definition(document)["questions"][0]["text"] == "</script><b>hi</b>"

    def test_title_escaped(self):
        survey = Survey(id="x", title=PlainText("Tom & <Jerry>"))
        assert "<title>Tom &amp; &lt;Jerry&gt;</title>" in compile_survey(survey)

    def test_title_language_option(self):
        survey = Survey(id="x", title=LocalizedText({"en": "Hello", "es": "Hola"}))
        document = compile_survey(survey, ExportOptions(lang="es"))
        assert '<html lang="es">' in document
        assert "<title>Hola</title>" in document

    def test_untitled_survey_uses_id(self):
        assert "<title>my-survey</title>" in compile_survey(Survey(id="my-survey"))

    def test_compact_json(self):
        document = compile_survey(build_example_survey(), ExportOptions(indent=None))
        assert _embedded_definition(document)["id"] == "customer-feedback"

    def test_validation_messages_shared_with_runtime(self):
        document = compile_survey(build_example_survey())
        assert '"required": "This question is required."' in document

    def test_save_export(self, tmp_path):
        path = tmp_path / "survey.html"
        save_export(build_example_survey(), str(path))
        assert path.read_text(encoding="utf-8") == compile_survey(build_example_survey())


class TestStyles:
    """Test the generated stylesheet."""

    def test_theme_variables(self):
        css = generate_styles(Settings(primary_color="#228be6", background_color="#fafafa"))
        assert "--primary-color: #228be6;" in css
        assert "--primary-hover: #1881dc;" in css
        assert "--background-color: #fafafa;" in css

    def test_adjust_color_clamps(self):
        assert adjust_color("#000000", -10) == "#000000"
        assert adjust_color("#ffffff", 10) == "#ffffff"
        assert adjust_color("#fff", -15) == "#f0f0f0"

    def test_invalid_color_falls_back(self):
        css = generate_styles(Settings(primary_color="red; }"))
        assert "--primary-color: #228be6;" in css

    def test_font_family_sanitized(self):
        css = generate_styles(Settings(font_family="Arial; } body { color: red"))
        assert "--font-family: Arial  body  color: red;" in css

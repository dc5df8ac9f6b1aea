"""
Stylesheet generator for exported surveys.

A pure function from theme settings to CSS text. Nothing is mutated at
compile time; the artifact simply embeds the returned string.
"""

import re

from surveyc.model import Settings


DEFAULT_PRIMARY = "#228be6"
DEFAULT_BACKGROUND = "#ffffff"
DEFAULT_FONT = (
    'system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Oxygen, '
    'Ubuntu, Cantarell, "Open Sans", "Helvetica Neue", sans-serif'
)

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")
_SHORT_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3})$")


def _normalize_hex(color: str, fallback: str) -> str:
    """Six-digit '#rrggbb' form, or the fallback for anything else."""
    color = (color or "").strip()
    short = _SHORT_HEX_RE.match(color)
    if short:
        return "#" + "".join(c * 2 for c in short.group(1)).lower()
    full = _HEX_RE.match(color)
    if full:
        return "#" + full.group(1).lower()
    return fallback


def adjust_color(color: str, amount: int) -> str:
    """
    Shift each RGB channel of a hex color by `amount`, clamped to 0..255.

    Example:
        adjust_color("#228be6", -10) -> "#1881dc"
    """
    color = _normalize_hex(color, DEFAULT_PRIMARY).lstrip("#")
    channels = [int(color[i:i + 2], 16) for i in (0, 2, 4)]
    channels = [max(0, min(255, c + amount)) for c in channels]
    return "#" + "".join(f"{c:02x}" for c in channels)


_CSS_VALUE_RE = re.compile(r"[;{}<>]")


def _css_value(value: str) -> str:
    # Theme values land inside a <style> element: keep them declaration-safe
    return _CSS_VALUE_RE.sub("", value)


BASE_CSS = """
* { box-sizing: border-box; margin: 0; padding: 0; }
body {
  font-family: var(--font-family);
  line-height: 1.6;
  color: var(--text-color);
  background-color: var(--background-color);
  padding: 20px;
}
.survey-container {
  max-width: 800px;
  margin: 0 auto;
  background-color: white;
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 30px;
}
.survey-header { margin-bottom: 30px; text-align: center; }
.survey-title { font-size: 24px; font-weight: 600; margin-bottom: 10px; color: var(--primary-color); }
.survey-description { color: var(--text-secondary); }
.language-selector { margin-bottom: 20px; text-align: right; }
.language-selector select {
  padding: 5px 10px;
  border-radius: 4px;
  border: 1px solid var(--border-color);
  font-family: var(--font-family);
}
.progress-container { margin-bottom: 30px; }
.progress-bar { height: 8px; background-color: #f0f0f0; border-radius: 4px; overflow: hidden; margin-bottom: 5px; }
.progress-fill { height: 100%; background-color: var(--primary-color); transition: width 0.3s ease; }
.progress-text { text-align: right; font-size: 12px; color: var(--text-secondary); }
.question-container {
  margin-bottom: 30px;
  padding: 20px;
  border: 1px solid var(--border-color);
  border-radius: var(--radius);
}
.question-number { font-size: 14px; font-weight: bold; color: var(--primary-color); margin-bottom: 5px; }
.question-text { font-size: 18px; font-weight: 500; margin-bottom: 10px; }
.required-indicator { color: var(--error-color); margin-left: 5px; }
.question-description { color: var(--text-secondary); margin-bottom: 15px; font-size: 14px; }
.options-container { display: flex; flex-direction: column; gap: 10px; }
.option-item { display: flex; align-items: center; gap: 10px; }
.option-item input { accent-color: var(--primary-color); }
.likert-labels { display: flex; justify-content: space-between; font-size: 14px; color: var(--text-secondary); }
.likert-scale { display: flex; justify-content: space-between; }
.likert-option { display: flex; flex-direction: column; align-items: center; gap: 5px; }
.text-input, .text-area, .dropdown-select {
  width: 100%;
  padding: 10px;
  border: 1px solid var(--border-color);
  border-radius: 4px;
  font-family: var(--font-family);
  font-size: 16px;
}
.text-area { min-height: 100px; resize: vertical; }
.matrix-container { overflow-x: auto; }
.matrix-table { border-collapse: collapse; width: 100%; }
.matrix-table th, .matrix-table td { padding: 10px; text-align: center; border-bottom: 1px solid var(--border-color); }
.matrix-table td:first-child { text-align: left; font-weight: 500; }
.ranking-list { display: flex; flex-direction: column; gap: 8px; }
.ranking-item {
  display: flex;
  align-items: center;
  gap: 10px;
  padding: 12px;
  border: 1px solid var(--border-color);
  border-radius: 4px;
}
.ranking-number {
  width: 24px;
  height: 24px;
  border-radius: 50%;
  background-color: var(--primary-color);
  color: white;
  text-align: center;
  font-size: 12px;
  line-height: 24px;
}
.ranking-text { flex-grow: 1; }
.upload-limits { font-size: 12px; color: var(--text-secondary); display: flex; gap: 15px; margin: 10px 0; }
.selected-file { display: flex; align-items: center; gap: 5px; padding: 5px 0; }
.file-size { font-size: 12px; color: var(--text-secondary); flex-grow: 1; }
.validation-error { color: var(--error-color); margin-top: 10px; font-size: 14px; }
.nav-buttons { display: flex; justify-content: space-between; margin-top: 20px; }
button {
  background-color: var(--primary-color);
  color: white;
  border: none;
  padding: 10px 20px;
  border-radius: 4px;
  font-size: 16px;
  cursor: pointer;
}
button:hover { background-color: var(--primary-hover); }
button:disabled { background-color: #cccccc; cursor: not-allowed; }
button.secondary { background-color: #f8f9fa; color: #333; border: 1px solid #ddd; }
button.small { padding: 2px 8px; font-size: 12px; }
.completion-container { text-align: center; padding: 30px 0; }
.completion-icon { font-size: 48px; color: var(--success-color); margin-bottom: 20px; }
.completion-message { font-size: 20px; margin-bottom: 20px; }
.response-summary { margin-top: 30px; border-top: 1px solid var(--border-color); padding-top: 30px; text-align: left; }
.summary-item { margin-bottom: 20px; }
.summary-question { font-weight: 600; margin-bottom: 5px; }
.summary-answer { padding-left: 20px; white-space: pre-line; }
@media (max-width: 600px) {
  .survey-container, .question-container { padding: 15px; }
  .nav-buttons { flex-direction: column; gap: 10px; }
}
"""


def generate_styles(settings: Settings) -> str:
    """
    Build the artifact stylesheet for a survey's theme.

    Args:
        settings: Survey settings (primary/background color, font family)

    Returns:
        CSS text: theme variables followed by the fixed base rules
    """
    primary = _normalize_hex(settings.primary_color, DEFAULT_PRIMARY)
    background = _normalize_hex(settings.background_color, DEFAULT_BACKGROUND)
    font = _css_value(settings.font_family or DEFAULT_FONT)

    variables = [
        ":root {",
        f"  --primary-color: {primary};",
        f"  --primary-hover: {adjust_color(primary, -10)};",
        f"  --background-color: {background};",
        "  --text-color: #333333;",
        "  --text-secondary: #666666;",
        "  --border-color: #dddddd;",
        "  --success-color: #4caf50;",
        "  --error-color: #f44336;",
        "  --radius: 8px;",
        "  --shadow: 0 2px 10px rgba(0, 0, 0, 0.1);",
        f"  --font-family: {font};",
        "}",
    ]
    return "\n".join(variables) + "\n" + BASE_CSS.lstrip("\n")

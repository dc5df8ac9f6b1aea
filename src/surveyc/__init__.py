"""
Survey compiler and runtime.

Takes a declarative Survey Definition (questions, logic rules, settings,
translations) and compiles it into a single self-contained HTML file that
runs the survey offline in a browser.

ARCHITECTURAL GUARANTEE:
------------------------
The core modules (model, text, randomizer, validator, visibility,
runtime, snapshot) contain ZERO knowledge of:
    - HTML, CSS or JavaScript
    - File formats (see serialization.py)

All rendering happens in surveyc.backends.
All backends consume the Survey Definition unchanged.
"""

__version__ = "0.1.0"

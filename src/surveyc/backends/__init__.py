"""Backends for survey output generation (HTML export, DOT)."""

from .dot_generator import DotMode, generate_dot, save_dot_file
from .html_export import ExportOptions, compile_survey, save_export
from .styles import adjust_color, generate_styles

__all__ = [
    "DotMode",
    "generate_dot",
    "save_dot_file",
    "ExportOptions",
    "compile_survey",
    "save_export",
    "adjust_color",
    "generate_styles",
]

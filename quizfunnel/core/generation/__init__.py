"""Report text generation."""

from quizfunnel.core.generation.prompt_builder import build_report_prompt, fill_template
from quizfunnel.core.generation.report_writer import (
    ReportWriter,
    content_to_text,
    strip_code_fences,
)

__all__ = [
    "ReportWriter",
    "build_report_prompt",
    "content_to_text",
    "fill_template",
    "strip_code_fences",
]

"""
Document rendering boundary.

Exports: PdfRenderer
"""

from .pdf_renderer import PdfRenderer

__all__ = ["PdfRenderer"]

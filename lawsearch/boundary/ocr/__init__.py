"""
Text extraction boundary.

Exports:
  - PdfTextExtractor: pypdf-backed TextExtractor
"""

from lawsearch.boundary.ocr.pdf_extractor import PdfTextExtractor

__all__ = ["PdfTextExtractor"]

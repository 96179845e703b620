"""
Input Handler Module for Proforma Invoice Field Extraction.

This module provides functionality for:
    - Validating and loading PDF files
    - Collecting PDFs from directories
    - Reading positioned text fragments from the PDF text layer

Image-only PDFs are not supported: they carry no text layer.
"""

from .handler import InputHandler, InputDocument
from .pdf_processor import FragmentCollector

__all__ = ['InputHandler', 'InputDocument', 'FragmentCollector']

"""
Text Layout Module for Proforma Invoice Field Extraction.

This module rebuilds reading-order text from positioned PDF text runs:
    - Vertical clustering of fragments into lines
    - Left-to-right ordering within a line
    - Page and document text assembly
"""

from .fragments import TextFragment, TextLine, PageFragments, PageText
from .reconstructor import LineReconstructor

__all__ = ['TextFragment', 'TextLine', 'PageFragments', 'PageText', 'LineReconstructor']

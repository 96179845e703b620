"""
Model Inference Module for Proforma Invoice Field Extraction.

This module turns reconstructed document text into extraction records.

Features:
    - Remote language model oracle (OpenAI-compatible chat completions)
    - Validating decode of the oracle's JSON reply
    - Deterministic regex fallback with item table segmentation
    - Pluggable row interpreters for item table layouts

Author: ML Engineering Team
"""

from .extractor import InvoiceExtractor
from .extraction_record import ExtractionRecord, ExtractionOutcome
from .fallback import FallbackExtractor
from .oracle import FieldExtractionOracle
from .row_interpreter import RowInterpreter, PositionalRowInterpreter, ItemSegment

__all__ = [
    'InvoiceExtractor',
    'ExtractionRecord',
    'ExtractionOutcome',
    'FallbackExtractor',
    'FieldExtractionOracle',
    'RowInterpreter',
    'PositionalRowInterpreter',
    'ItemSegment',
]

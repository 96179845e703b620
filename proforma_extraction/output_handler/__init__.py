"""
Output Handler Module for Proforma Invoice Field Extraction.

This module provides functionality for:
    - Assembling output records (ids, file names, timestamps)
    - Excel file generation with a summary sheet

Author: ML Engineering Team
"""

from .record_assembler import RecordAssembler, OutputRecord
from .excel_exporter import ExcelExporter

__all__ = ['RecordAssembler', 'OutputRecord', 'ExcelExporter']

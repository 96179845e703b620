"""
Proforma Invoice Extraction System - Source Package.

This package contains the core modules for extracting header and line
item fields from text proforma invoice PDFs. Each module has a single
responsibility.

Modules:
    - input_handler: File validation and PDF text fragment collection
    - text_layout: Reading-order line reconstruction
    - model_inference: Language model oracle and regex fallback extraction
    - output_handler: Output record assembly and Excel export
    - pipeline: Per-file pipeline and batch driver

Architecture:
    Input → Text Layout → Model Inference (oracle | fallback) → Output
"""

__version__ = "1.0.0"
__author__ = "ML Engineering Team"

__all__ = [
    'input_handler',
    'text_layout',
    'model_inference',
    'output_handler',
    'pipeline',
    'utils'
]

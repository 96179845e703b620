"""
Invoice Extractor Module.

This module provides the InvoiceExtractor class that turns document text
into extraction records. The remote oracle is preferred; the regex
fallback takes over when no credential is available, the oracle is
disabled, or the oracle call fails in any way.

Author: ML Engineering Team
"""

import time
from typing import Optional

from config import get_config
from proforma_extraction.utils.logger import get_logger
from proforma_extraction.utils.exceptions import OracleError
from .extraction_record import ExtractionOutcome
from .fallback import FallbackExtractor
from .oracle import FieldExtractionOracle

# Initialize module logger
logger = get_logger(__name__)


class InvoiceExtractor:
    """
    Oracle-first field extractor with deterministic fallback.

    OracleError never leaves this class: a failed oracle call is logged
    and the fallback result is returned instead.

    Attributes:
        oracle: FieldExtractionOracle instance
        fallback: FallbackExtractor instance
        use_oracle: Whether the oracle is tried at all

    Example:
        >>> extractor = InvoiceExtractor()
        >>> outcome = extractor.extract(document_text, api_key="sk-...")
        >>> print(outcome.method, len(outcome.records))
    """

    def __init__(
        self,
        oracle: Optional[FieldExtractionOracle] = None,
        fallback: Optional[FallbackExtractor] = None,
        use_oracle: Optional[bool] = None
    ) -> None:
        """
        Initialize the invoice extractor.

        Args:
            oracle: Oracle client. Created from config when None.
            fallback: Fallback extractor. Created from config when None.
            use_oracle: Override config "oracle.enabled".
        """
        self.use_oracle = use_oracle if use_oracle is not None else \
            get_config("oracle.enabled", True)
        self.oracle = oracle or FieldExtractionOracle()
        self.fallback = fallback or FallbackExtractor()

        logger.info(f"InvoiceExtractor initialized (oracle={'on' if self.use_oracle else 'off'})")

    def extract(
        self,
        document_text: str,
        api_key: Optional[str] = None,
        source_file: Optional[str] = None
    ) -> ExtractionOutcome:
        """
        Extract records from document text.

        Args:
            document_text: Reconstructed document text.
            api_key: Oracle credential. Without one the fallback is used.
            source_file: File name for log messages.

        Returns:
            ExtractionOutcome with at least one record.
        """
        start_time = time.time()
        label = source_file or "document"
        oracle_error = None

        if not self.use_oracle:
            oracle_error = "oracle disabled"
        elif not api_key:
            oracle_error = "no credential supplied"
        else:
            try:
                records = self.oracle.extract(document_text, api_key)
                return ExtractionOutcome(
                    records=records,
                    method="oracle",
                    processing_time=time.time() - start_time
                )
            except OracleError as e:
                oracle_error = str(e)
                logger.warning(f"{label}: {e}; using fallback extractor")

        logger.info(f"{label}: extracting with fallback ({oracle_error})")
        records = self.fallback.extract(document_text)

        return ExtractionOutcome(
            records=records,
            method="fallback",
            oracle_error=oracle_error,
            processing_time=time.time() - start_time
        )

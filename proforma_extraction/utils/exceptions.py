"""
Custom Exceptions Module.

This module defines all custom exceptions used throughout the proforma
invoice extraction system. Using specific exceptions allows the batch
driver to tell per-file failures apart from recoverable conditions.

Exception Hierarchy:
    ProformaExtractionError (base)
    ├── InputError
    │   ├── UnsupportedFileTypeError
    │   ├── MissingFileError
    │   ├── DocumentReadError
    │   ├── EmptyDocumentError
    │   └── PageProcessingError
    ├── OracleError
    │   └── OracleTimeoutError
    └── OutputError
        └── ExcelExportError

Only the input errors end a file's run. OracleError is absorbed by the
fallback extractor and PageProcessingError by the fragment collector.
"""


class ProformaExtractionError(Exception):
    """
    Base exception for all proforma extraction errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(ProformaExtractionError):
    """Base exception for input handling errors."""
    pass


class UnsupportedFileTypeError(InputError):
    """
    Raised when an unsupported file type is provided.

    Example:
        >>> raise UnsupportedFileTypeError(".doc", [".pdf"])
    """

    def __init__(self, file_type: str, supported_types: list):
        message = f"Unsupported file type: '{file_type}'"
        details = {"file_type": file_type, "supported_types": supported_types}
        super().__init__(message, details)


class MissingFileError(InputError):
    """Raised when an input file cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class DocumentReadError(InputError):
    """Raised when the bytes are not a readable PDF document."""

    def __init__(self, file_name: str, reason: str = None):
        message = f"Could not read PDF document: {file_name}"
        details = {"file_name": file_name, "reason": reason}
        super().__init__(message, details)


class EmptyDocumentError(InputError):
    """Raised when a PDF has no extractable text layer (image-only or protected)."""

    def __init__(self, file_name: str, page_count: int = 0):
        message = (
            f"No text could be extracted from: {file_name}. "
            "The file may be image-only or protected."
        )
        details = {"file_name": file_name, "page_count": page_count}
        super().__init__(message, details)


class PageProcessingError(InputError):
    """Raised when a single page cannot be read. Recovered by the collector."""

    def __init__(self, page_number: int, reason: str = None):
        message = f"Failed to process page {page_number}"
        details = {"page_number": page_number, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# ORACLE ERRORS
# =============================================================================

class OracleError(ProformaExtractionError):
    """
    Raised when the field extraction oracle call fails.

    Covers transport failures, non-2xx responses, empty bodies and
    content that cannot be decoded into extraction records.
    """

    def __init__(self, reason: str, status_code: int = None):
        message = f"Field extraction oracle failed: {reason}"
        details = {"status_code": status_code} if status_code is not None else None
        super().__init__(message, details)
        self.reason = reason
        self.status_code = status_code


class OracleTimeoutError(OracleError):
    """Raised when the oracle call exceeds its deadline."""

    def __init__(self, timeout: float):
        super().__init__(f"no complete response within {timeout:g}s")
        self.timeout = timeout


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class OutputError(ProformaExtractionError):
    """Base exception for output handling errors."""
    pass


class ExcelExportError(OutputError):
    """Raised when Excel export fails."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Failed to export Excel file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


__all__ = [
    'ProformaExtractionError',
    'InputError',
    'UnsupportedFileTypeError',
    'MissingFileError',
    'DocumentReadError',
    'EmptyDocumentError',
    'PageProcessingError',
    'OracleError',
    'OracleTimeoutError',
    'OutputError',
    'ExcelExportError',
]

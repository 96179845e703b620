"""
Main Input Handler Module.

This module provides the InputHandler class that validates invoice file
paths and reads them into in-memory documents for the pipeline.

Usage:
    from proforma_extraction.input_handler import InputHandler

    handler = InputHandler()
    document = handler.load("invoice.pdf")

    # Collect a directory
    paths = handler.collect("./invoices/")
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union, List

from config import get_config
from proforma_extraction.utils.logger import get_logger
from proforma_extraction.utils.helpers import get_file_extension
from proforma_extraction.utils.exceptions import (
    InputError,
    UnsupportedFileTypeError,
    MissingFileError,
    DocumentReadError
)

# Initialize module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class InputDocument:
    """
    A PDF document read into memory.

    Attributes:
        file_name: Original file name (no directory)
        data: Raw PDF bytes
    """
    file_name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"InputDocument(file_name='{self.file_name}', size={self.size})"


class InputHandler:
    """
    Validates and loads invoice PDF files.

    Attributes:
        supported_extensions: Set of accepted file extensions

    Example:
        >>> handler = InputHandler()
        >>> document = handler.load("invoice.pdf")
        >>> print(document.file_name, document.size)
    """

    PDF_EXTENSIONS = {'.pdf'}

    def __init__(self) -> None:
        """Initialize the InputHandler from configuration."""
        extensions = get_config("input.supported_extensions", list(self.PDF_EXTENSIONS))
        self.supported_extensions = {ext.lower() for ext in extensions}

        logger.debug(f"InputHandler initialized with extensions: {self.supported_extensions}")

    def validate_file(self, filepath: Union[str, Path]) -> Path:
        """
        Validate that a file exists and is a supported PDF.

        Args:
            filepath: Path to the file to validate.

        Returns:
            Path object pointing to the validated file.

        Raises:
            MissingFileError: If file doesn't exist.
            UnsupportedFileTypeError: If file type is not supported.
            DocumentReadError: If file is empty.
        """
        path = Path(filepath)

        if not path.exists():
            raise MissingFileError(str(filepath))

        if not path.is_file():
            raise InputError(f"Path is not a file: {filepath}")

        extension = get_file_extension(path)
        if extension not in self.supported_extensions:
            raise UnsupportedFileTypeError(extension, sorted(self.supported_extensions))

        if path.stat().st_size == 0:
            raise DocumentReadError(path.name, "File is empty")

        return path

    def load(self, filepath: Union[str, Path]) -> InputDocument:
        """
        Validate a file and read its bytes.

        Args:
            filepath: Path to the invoice PDF.

        Returns:
            InputDocument with the file name and contents.

        Raises:
            InputError: If the file fails validation or cannot be read.
        """
        path = self.validate_file(filepath)

        try:
            data = path.read_bytes()
        except OSError as e:
            raise DocumentReadError(path.name, str(e)) from e

        logger.debug(f"Loaded {path.name} ({len(data)} bytes)")
        return InputDocument(file_name=path.name, data=data)

    def collect(
        self,
        directory: Union[str, Path],
        recursive: bool = False
    ) -> List[Path]:
        """
        List all supported files in a directory, sorted by path.

        Args:
            directory: Path to directory containing invoice files.
            recursive: Whether to search subdirectories.

        Returns:
            Sorted list of file paths.

        Raises:
            MissingFileError: If the directory doesn't exist.
            InputError: If the path is not a directory.
        """
        directory = Path(directory)

        if not directory.exists():
            raise MissingFileError(str(directory))

        if not directory.is_dir():
            raise InputError(f"Path is not a directory: {directory}")

        pattern = "**/*" if recursive else "*"
        files = [
            path for path in directory.glob(pattern)
            if path.is_file() and get_file_extension(path) in self.supported_extensions
        ]
        files = sorted(set(files))

        logger.info(f"Found {len(files)} files to process in {directory}")
        return files

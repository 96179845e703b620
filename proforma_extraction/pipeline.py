"""
Extraction Pipeline Module.

This module wires the pipeline phases together for one document and
drives them over a batch of files, one file at a time:

    PDF bytes → FragmentCollector → LineReconstructor → InvoiceExtractor
              → RecordAssembler → OutputRecords

Usage:
    from proforma_extraction.pipeline import InvoicePipeline

    pipeline = InvoicePipeline(api_key="sk-...")
    result = pipeline.process_batch(["./invoices/"])
    for failure in result.failures:
        print(failure.file_name, failure.message)

Author: ML Engineering Team
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from proforma_extraction.utils.logger import get_logger
from proforma_extraction.utils.exceptions import ProformaExtractionError
from proforma_extraction.input_handler import InputHandler, InputDocument, FragmentCollector
from proforma_extraction.text_layout import LineReconstructor
from proforma_extraction.model_inference import InvoiceExtractor
from proforma_extraction.output_handler import RecordAssembler, OutputRecord

# Initialize module logger
logger = get_logger(__name__)

BatchInput = Union[str, Path, InputDocument, Tuple[str, bytes]]


@dataclass(frozen=True)
class FileFailure:
    """
    Diagnostic for a file that produced no records.

    Attributes:
        file_name: Name of the failed file
        error_type: Exception class name, e.g. "DocumentReadError"
        message: Rendered exception message
    """
    file_name: str
    error_type: str
    message: str

    @classmethod
    def from_exception(cls, file_name: str, error: Exception) -> 'FileFailure':
        return cls(
            file_name=file_name,
            error_type=type(error).__name__,
            message=str(error)
        )


@dataclass
class BatchResult:
    """
    Result of a batch run.

    Attributes:
        records: Output records of all successful files, in input order
        failures: One FileFailure per failed file
        files_processed: Number of files that yielded records
        files_failed: Number of files that failed
    """
    records: List[OutputRecord] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)
    files_processed: int = 0
    files_failed: int = 0

    @property
    def succeeded(self) -> bool:
        """True when at least one file yielded records."""
        return self.files_processed > 0


class InvoicePipeline:
    """
    Per-file extraction pipeline and sequential batch driver.

    Components are created from configuration unless passed in.

    Attributes:
        input_handler: Path validation and file reading
        collector: PDF text fragment collector
        reconstructor: Reading-order text reconstruction
        extractor: Oracle-first field extractor
        assembler: Output record assembler
        api_key: Oracle credential, or None for fallback-only runs
    """

    def __init__(
        self,
        collector: Optional[FragmentCollector] = None,
        reconstructor: Optional[LineReconstructor] = None,
        extractor: Optional[InvoiceExtractor] = None,
        assembler: Optional[RecordAssembler] = None,
        input_handler: Optional[InputHandler] = None,
        api_key: Optional[str] = None
    ) -> None:
        self.input_handler = input_handler or InputHandler()
        self.collector = collector or FragmentCollector()
        self.reconstructor = reconstructor or LineReconstructor()
        self.extractor = extractor or InvoiceExtractor()
        self.assembler = assembler or RecordAssembler()
        self.api_key = api_key

        logger.debug("InvoicePipeline initialized")

    def process_document(self, file_name: str, data: bytes) -> List[OutputRecord]:
        """
        Run the pipeline on one PDF held in memory.

        Args:
            file_name: Name recorded on every output record.
            data: Raw PDF bytes.

        Returns:
            At least one OutputRecord, in item order.

        Raises:
            DocumentReadError: If the bytes are not a readable PDF.
            EmptyDocumentError: If the document has no text.
        """
        start_time = time.time()

        pages = self.collector.collect(data, file_name=file_name)
        document_text = self.reconstructor.build_document_text(pages, file_name=file_name)

        outcome = self.extractor.extract(
            document_text,
            api_key=self.api_key,
            source_file=file_name
        )
        records = self.assembler.assemble(outcome.records, file_name)

        logger.info(
            f"{file_name}: {len(records)} record(s) via {outcome.method} "
            f"in {time.time() - start_time:.2f}s"
        )
        return records

    def process_file(self, filepath: Union[str, Path]) -> List[OutputRecord]:
        """
        Validate, read and process one PDF file.

        Raises:
            InputError: If the file fails validation, cannot be read or
                        has no text.
        """
        document = self.input_handler.load(filepath)
        return self.process_document(document.file_name, document.data)

    def process_batch(
        self,
        inputs: Sequence[BatchInput],
        recursive: bool = False
    ) -> BatchResult:
        """
        Process files sequentially in the given order.

        A failing file is recorded in the result and logged; the remaining
        files are still processed.

        Args:
            inputs: File paths, directory paths (expanded to their PDFs),
                    InputDocuments or (file name, bytes) pairs.
            recursive: Whether directories are searched recursively.

        Returns:
            BatchResult with the records of all successful files.
        """
        result = BatchResult()

        for item in self._expand(inputs, recursive, result):
            file_name = self._name_of(item)

            try:
                if isinstance(item, InputDocument):
                    records = self.process_document(item.file_name, item.data)
                elif isinstance(item, tuple):
                    records = self.process_document(item[0], item[1])
                else:
                    records = self.process_file(item)

            except ProformaExtractionError as e:
                logger.error(f"Failed to process {file_name}: {e}")
                result.failures.append(FileFailure.from_exception(file_name, e))
                result.files_failed += 1
                continue

            result.records.extend(records)
            result.files_processed += 1

        logger.info(
            f"Batch complete: {result.files_processed} succeeded, "
            f"{result.files_failed} failed, {len(result.records)} record(s)"
        )
        return result

    def _expand(
        self,
        inputs: Sequence[BatchInput],
        recursive: bool,
        result: BatchResult
    ) -> List[BatchInput]:
        """Replace directory paths by their PDF files; keep everything else."""
        expanded: List[BatchInput] = []

        for item in inputs:
            if isinstance(item, (str, Path)) and Path(item).is_dir():
                try:
                    expanded.extend(self.input_handler.collect(item, recursive=recursive))
                except ProformaExtractionError as e:
                    logger.error(f"Failed to list {item}: {e}")
                    result.failures.append(FileFailure.from_exception(str(item), e))
                    result.files_failed += 1
            else:
                expanded.append(item)

        return expanded

    @staticmethod
    def _name_of(item: BatchInput) -> str:
        if isinstance(item, InputDocument):
            return item.file_name
        if isinstance(item, tuple):
            return item[0]
        return Path(item).name

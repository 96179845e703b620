"""
Record Assembler Module.

Combines extraction records with file metadata into the final output
records handed to display and export collaborators. Field contents are
copied as they are; nothing is validated or normalised here.
"""

import itertools
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Union

from proforma_extraction.utils.logger import get_logger
from proforma_extraction.utils.helpers import utc_now_iso
from proforma_extraction.model_inference.extraction_record import (
    ExtractionRecord,
    FIELD_KEYS,
)

# Initialize module logger
logger = get_logger(__name__)

RecordLike = Union[ExtractionRecord, Mapping[str, Any]]


@dataclass(frozen=True)
class OutputRecord:
    """
    One extracted invoice item with its file metadata.

    Attributes:
        id: Identifier unique within the running process
        file_name: Source PDF file name
        extracted_at: ISO-8601 UTC timestamp of assembly
        (plus the 12 ExtractionRecord fields, all strings)
    """
    id: str
    file_name: str
    extracted_at: str
    pi_no: str = ""
    po_no: str = ""
    sc_no: str = ""
    item_no: str = ""
    description: str = ""
    quantity: str = ""
    unit_price: str = ""
    amount: str = ""
    beneficiary: str = ""
    name_of_bank: str = ""
    account_no: str = ""
    swift: str = ""

    def to_dict(self) -> Dict[str, str]:
        """
        Convert to dictionary with camelCase keys.

        Returns:
            Dictionary with id, fileName, the 12 fields and extractedAt.
        """
        result = {'id': self.id, 'fileName': self.file_name}
        result.update({key: getattr(self, attr) for attr, key in FIELD_KEYS})
        result['extractedAt'] = self.extracted_at
        return result


class RecordAssembler:
    """
    Builds OutputRecords from ExtractionRecords.

    Identifiers combine the assembly time in milliseconds with a
    sequence number shared by every assembler in the process, so two
    records never share an id within one process.

    Example:
        >>> assembler = RecordAssembler()
        >>> records = assembler.assemble(extraction_records, "invoice.pdf")
        >>> records[0].file_name
        "invoice.pdf"
    """

    _sequence = itertools.count(1)
    _lock = threading.Lock()

    def assemble(
        self,
        records: Iterable[RecordLike],
        file_name: str
    ) -> List[OutputRecord]:
        """
        Create one OutputRecord per input record.

        Args:
            records: ExtractionRecords or plain mappings. Absent keys
                    become "".
            file_name: Source file name.

        Returns:
            Output records in input order.
        """
        extracted_at = utc_now_iso()
        output = []

        for record in records:
            if not isinstance(record, ExtractionRecord):
                record = ExtractionRecord.from_mapping(record)

            output.append(OutputRecord(
                id=self._next_id(),
                file_name=file_name,
                extracted_at=extracted_at,
                **{attr: getattr(record, attr) for attr, _ in FIELD_KEYS}
            ))

        logger.debug(f"Assembled {len(output)} record(s) for {file_name}")
        return output

    @classmethod
    def _next_id(cls) -> str:
        with cls._lock:
            sequence = next(cls._sequence)
        return f"{int(time.time() * 1000)}-{sequence}"

"""
Fallback Extractor Module.

Deterministic, regex-based extraction of proforma invoice records from
reconstructed document text. Used whenever the field extraction oracle
is unavailable or returns something unusable.

Phases:
    A. Header fields: one labelled pattern per field over the whole text.
    B. Item table: isolate the table region, split it at item codes and
       hand each segment to a row interpreter.

The extractor never raises and never returns an empty list: a document
without a recognisable table yields one record holding only the header
fields.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Pattern

from config import get_config
from proforma_extraction.utils.logger import get_logger
from proforma_extraction.utils.helpers import collapse_whitespace
from .extraction_record import ExtractionRecord
from .row_interpreter import RowInterpreter, PositionalRowInterpreter, ItemSegment

# Initialize module logger
logger = get_logger(__name__)


# Label, optional colon/whitespace, then the value. First match wins.
HEADER_PATTERNS: Dict[str, Pattern] = {
    'pi_no': re.compile(r'P\s*/\s*I\s+No\.?\s*:?\s*(\S+)', re.IGNORECASE),
    'po_no': re.compile(r'P\s*/\s*O\s+No\.?\s*:?\s*(\S+)', re.IGNORECASE),
    'sc_no': re.compile(r'S\s*/\s*C\s+No\.?\s*:?\s*(\S+)', re.IGNORECASE),
    'swift': re.compile(r'SWIFT(?:\s*/?\s*(?:CODE|BIC))?\s*:?\s*([A-Z0-9]+)', re.IGNORECASE),
    'beneficiary': re.compile(
        r"BENEFICIARY(?!\s*(?:'S\s+)?BANK)\s*:?\s*([^\n\r]+)", re.IGNORECASE
    ),
    'name_of_bank': re.compile(r'NAME\s+OF\s+(?:THE\s+)?BANK\s*:?\s*([^\n\r]+)', re.IGNORECASE),
    'account_no': re.compile(
        r'(?:ACCOUNT|A/C)\s+(?:No\.?|NUMBER)\s*:?\s*(\S+)', re.IGNORECASE
    ),
}

TABLE_START = re.compile(r'\bItem\s+No\b\.?', re.IGNORECASE)

# REMARKS, BENEFICIARY, or a TOTAL line carrying a currency marker
TABLE_END = re.compile(
    r'REMARKS|BENEFICIARY|^[ \t]*TOTAL\b[^\n]*?(?:US\$|USD|EUR|RMB|R\$|\$|€|¥)',
    re.IGNORECASE | re.MULTILINE
)

ITEM_CODE = re.compile(r'\b\d{5}-\d{2}\b')

VALUE_TRAILING = ' \t,;'


@dataclass(frozen=True)
class TableRegion:
    """
    Slice of the document text holding the item table, from the
    "Item No." header up to the terminator (or the end of the text).
    """
    text: str

class FallbackExtractor:
    """
    Regex and table-heuristic extractor for proforma invoices.

    The extractor is a pure function of the document text: the same text
    always yields the same records.

    Attributes:
        row_interpreter: Strategy that turns item segments into fields

    Example:
        >>> extractor = FallbackExtractor()
        >>> records = extractor.extract("P/I No.: PI-1001\\nSWIFT: ABCDEFGH")
        >>> records[0].pi_no, records[0].swift
        ("PI-1001", "ABCDEFGH")
    """

    def __init__(
        self,
        row_interpreter: Optional[RowInterpreter] = None,
        product_patterns: Optional[Iterable[str]] = None
    ) -> None:
        """
        Initialize the fallback extractor.

        Args:
            row_interpreter: Item row strategy. Defaults to the positional
                            interpreter.
            product_patterns: Product-name patterns for the default
                             interpreter. If None, uses config.
        """
        if row_interpreter is None:
            if product_patterns is None:
                product_patterns = get_config("fallback.product_patterns", [])
            row_interpreter = PositionalRowInterpreter(product_patterns)

        self.row_interpreter = row_interpreter

        logger.debug(f"FallbackExtractor initialized (interpreter={row_interpreter.name})")

    def extract(self, text: str) -> List[ExtractionRecord]:
        """
        Extract one record per invoice item.

        Args:
            text: Reconstructed document text.

        Returns:
            Records in item-code order, each carrying the header fields.
            Never empty.
        """
        header = self.extract_header(text)
        region = self.find_table_region(text)

        if region is None:
            logger.info("Fallback: no item table found, returning header fields only")
            return [header]

        segments = self.segment_items(region)
        if not segments:
            logger.info("Fallback: item table has no item codes, returning header fields only")
            return [header]

        records = [
            header.with_fields(**self.row_interpreter.interpret(segment))
            for segment in segments
        ]

        logger.info(
            f"Fallback extracted {len(records)} item(s): "
            f"{', '.join(record.item_no for record in records)}"
        )
        return records

    def extract_header(self, text: str) -> ExtractionRecord:
        """
        Apply the header patterns to the whole text.

        Returns:
            Record with only header fields set; unmatched fields are "".
        """
        values = {}
        for field_name, pattern in HEADER_PATTERNS.items():
            match = pattern.search(text)
            if match:
                value = collapse_whitespace(match.group(1)).rstrip(VALUE_TRAILING)
                if value:
                    values[field_name] = value
                    logger.debug(f"Fallback header {field_name}: '{value}'")

        return ExtractionRecord(**values)

    def find_table_region(self, text: str) -> Optional[TableRegion]:
        """
        Locate the item table.

        The region runs from the first "Item No." header to the first
        terminator after it, or to the end of the text.

        Returns:
            TableRegion, or None if there is no "Item No." header.
        """
        start_match = TABLE_START.search(text)
        if start_match is None:
            return None

        end_match = TABLE_END.search(text, start_match.end())
        end = end_match.start() if end_match else len(text)

        return TableRegion(text=text[start_match.start():end])

    def segment_items(self, region: TableRegion) -> List[ItemSegment]:
        """
        Split the table region at every item code.

        Each segment runs from its code to the next code, the last one to
        the end of the region.
        """
        matches = list(ITEM_CODE.finditer(region.text))
        segments = []

        for index, match in enumerate(matches):
            end = matches[index + 1].start() if index + 1 < len(matches) else len(region.text)
            segments.append(ItemSegment(
                item_no=match.group(0),
                text=region.text[match.start():end]
            ))

        return segments

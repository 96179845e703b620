"""
Extraction Record Data Classes.

This module defines the fixed 12-field record produced for every invoice
line item, and the outcome wrapper returned by the invoice extractor.

Attributes use snake_case; ``to_dict()`` emits the camelCase keys
consumed by the display and export collaborators and by the oracle
prompt. Every field is a string and defaults to ``""``.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional


# (attribute name, wire key) pairs in display order
FIELD_KEYS = (
    ('pi_no', 'piNo'),
    ('po_no', 'poNo'),
    ('sc_no', 'scNo'),
    ('item_no', 'itemNo'),
    ('description', 'description'),
    ('quantity', 'quantity'),
    ('unit_price', 'unitPrice'),
    ('amount', 'amount'),
    ('beneficiary', 'beneficiary'),
    ('name_of_bank', 'nameOfBank'),
    ('account_no', 'accountNo'),
    ('swift', 'swift'),
)

ATTRIBUTE_BY_KEY = {key: attr for attr, key in FIELD_KEYS}
ATTRIBUTE_BY_KEY.update({attr: attr for attr, _ in FIELD_KEYS})


@dataclass(frozen=True)
class ExtractionRecord:
    """
    One invoice line item plus the document-level header fields.

    Header fields (P/I, P/O and S/C numbers, beneficiary and bank data)
    belong to the whole document but are repeated on every item record.

    Example:
        >>> record = ExtractionRecord(pi_no="PI-1001", item_no="72692-01")
        >>> record.to_dict()["piNo"]
        "PI-1001"
    """
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

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'ExtractionRecord':
        """
        Build a record from a mapping keyed by wire keys or attribute names.

        Unknown keys are ignored; ``None`` becomes ``""``; numbers are
        rendered as strings. String values are kept as given.

        Args:
            data: Mapping with any subset of the 12 fields.

        Returns:
            ExtractionRecord with every field populated.
        """
        values: Dict[str, str] = {}
        for key, value in data.items():
            attr = ATTRIBUTE_BY_KEY.get(key)
            if attr is None or attr in values and values[attr]:
                continue
            values[attr] = coerce_field_value(value)
        return cls(**values)

    def with_fields(self, **changes: str) -> 'ExtractionRecord':
        """Return a copy with some fields replaced."""
        return replace(self, **changes)

    @property
    def extracted_fields(self) -> Dict[str, str]:
        """Fields that carry a non-empty value, keyed by wire key."""
        return {key: value for key, value in self.to_dict().items() if value}

    def is_empty(self) -> bool:
        """Check if no field was extracted."""
        return not self.extracted_fields

    def to_dict(self) -> Dict[str, str]:
        """
        Convert to dictionary with camelCase wire keys.

        Returns:
            Dictionary with all 12 keys present.
        """
        return {key: getattr(self, attr) for attr, key in FIELD_KEYS}

    def __repr__(self) -> str:
        return (
            f"ExtractionRecord(pi_no={self.pi_no!r}, item_no={self.item_no!r}, "
            f"amount={self.amount!r}, fields={len(self.extracted_fields)}/12)"
        )


def coerce_field_value(value: Any) -> str:
    """
    Convert an untrusted JSON value to a field string.

    Strings pass through, numbers are rendered with ``str``, and ``None``,
    booleans and nested structures become ``""``.
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return ""


@dataclass
class ExtractionOutcome:
    """
    Records extracted from one document and how they were produced.

    Attributes:
        records: Extracted records, at least one
        method: 'oracle' or 'fallback'
        oracle_error: Why the oracle was not used, if it failed
        processing_time: Seconds spent extracting
    """
    records: List[ExtractionRecord] = field(default_factory=list)
    method: str = "fallback"
    oracle_error: Optional[str] = None
    processing_time: float = 0.0

    @property
    def used_fallback(self) -> bool:
        return self.method == "fallback"

    def __repr__(self) -> str:
        return (
            f"ExtractionOutcome(method='{self.method}', records={len(self.records)})"
        )

"""
Row Interpreter Module.

An item segment is the slice of the invoice table that starts at one
item code and ends at the next. A row interpreter turns a segment into
the item fields of a record (item number, description, quantity, unit
price, amount).

The positional interpreter maps numbers to fields by their order on the
priced line. That only holds while the source keeps the usual
``quantity | unit price | amount`` column order; other layouts should
get their own RowInterpreter subclass.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Pattern

from proforma_extraction.utils.helpers import collapse_whitespace

# Currency-marked number: "$12.50", "USD 1,250.00", "US$3", "€ 9,99"
CURRENCY_AMOUNT = re.compile(
    r'(?:(?<![A-Za-z])(?:US\$|USD|EUR|RMB|R\$)|\$|€|¥)[ \t]*\d(?:[\d,]*\d)?(?:\.\d+)?',
    re.IGNORECASE
)

# Standalone number at the end of the text before a price, with an
# optional unit word ("500 PCS").
QUANTITY_BEFORE_PRICE = re.compile(
    r'(?:^|\s)(\d(?:[\d,]*\d)?(?:\.\d+)?)(?:[ \t]+[A-Za-z]{1,6}\.?)?[ \t]*$'
)

# Weight, serial and total annotations never belong to the description
ANNOTATION_LABEL = re.compile(
    r'\b(?:Serial\s+NO\b|G\.\s?W\b|N\.\s?W\b|TOTAL\b)',
    re.IGNORECASE
)

EDGE_PUNCTUATION = ' \t-:|,;'


@dataclass(frozen=True)
class ItemSegment:
    """
    Text of one invoice item, from its code up to the next code.

    Attributes:
        item_no: The item code that opens the segment
        text: Segment text, starting with the code
    """
    item_no: str
    text: str

    @property
    def lines(self) -> List[str]:
        return self.text.splitlines()

    @property
    def code_line_rest(self) -> str:
        """Text following the item code on the code's own line."""
        first = self.lines[0] if self.text else ""
        return first[len(self.item_no):] if first.startswith(self.item_no) else first


class RowInterpreter:
    """
    Base class for item row interpretation strategies.

    Subclasses implement ``interpret`` and return a dictionary keyed by
    ExtractionRecord attribute names (item_no, description, quantity,
    unit_price, amount). Missing keys are left empty by the caller.
    """

    name = "base"

    def interpret(self, segment: ItemSegment) -> Dict[str, str]:
        raise NotImplementedError


class PositionalRowInterpreter(RowInterpreter):
    """
    Maps numbers to fields by position on the item's priced line.

    Rules:
        - unit_price: first currency-marked number on the priced line
        - amount: last currency-marked number, when there is more than one
        - quantity: bare number immediately before the first price
        - description: a configured product-name match in the segment,
          otherwise the text before the quantity/price, without
          annotations

    Attributes:
        product_patterns: Compiled product-name patterns, tried in order

    Example:
        >>> interpreter = PositionalRowInterpreter()
        >>> interpreter.interpret(ItemSegment("72692-01", "72692-01 kettle 10 $5.00 $50.00"))
        {'item_no': '72692-01', 'description': 'kettle', 'quantity': '10',
         'unit_price': '$5.00', 'amount': '$50.00'}
    """

    name = "positional"

    def __init__(self, product_patterns: Optional[Iterable[str]] = None) -> None:
        self.product_patterns: List[Pattern] = [
            re.compile(pattern, re.IGNORECASE) for pattern in (product_patterns or [])
        ]

    def interpret(self, segment: ItemSegment) -> Dict[str, str]:
        priced_line = self._priced_line(segment)
        prices = [collapse_whitespace(m.group(0)) for m in CURRENCY_AMOUNT.finditer(priced_line)]

        return {
            'item_no': segment.item_no,
            'description': self._description(segment, priced_line),
            'quantity': self._quantity(priced_line),
            'unit_price': prices[0] if prices else "",
            'amount': prices[-1] if len(prices) > 1 else "",
        }

    def _priced_line(self, segment: ItemSegment) -> str:
        """
        The code's own line when it carries a price, else the first
        later line of the segment that does.
        """
        lines = segment.lines
        if not lines:
            return ""

        first = segment.code_line_rest
        if CURRENCY_AMOUNT.search(first):
            return first

        for line in lines[1:]:
            if CURRENCY_AMOUNT.search(line):
                return line
        return first

    def _quantity(self, line: str) -> str:
        price = CURRENCY_AMOUNT.search(line)
        if price is None:
            return ""

        match = QUANTITY_BEFORE_PRICE.search(line[:price.start()])
        return match.group(1) if match else ""

    def _description(self, segment: ItemSegment, priced_line: str) -> str:
        for pattern in self.product_patterns:
            match = pattern.search(segment.text)
            if match:
                return collapse_whitespace(match.group(0))

        candidates = [segment.code_line_rest]
        if priced_line and priced_line != segment.code_line_rest:
            candidates.append(priced_line)
        candidates.extend(segment.lines[1:])

        for candidate in candidates:
            text = self._clean_description(candidate)
            if text:
                return text
        return ""

    def _clean_description(self, text: str) -> str:
        """Cut pricing and annotations from a line; keep only wordy text."""
        price = CURRENCY_AMOUNT.search(text)
        if price is not None:
            text = text[:price.start()]
            quantity = QUANTITY_BEFORE_PRICE.search(text)
            if quantity:
                text = text[:quantity.start(1)]

        annotation = ANNOTATION_LABEL.search(text)
        if annotation:
            text = text[:annotation.start()]

        text = collapse_whitespace(text).strip(EDGE_PUNCTUATION)
        return text if re.search(r'[A-Za-z]', text) else ""

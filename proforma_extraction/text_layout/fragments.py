"""
Text Layout Data Classes.

This module defines the data structures produced while turning a PDF's
positioned text runs into reading-order text.

Classes:
    TextFragment: One positioned text run (PDF coordinate space)
    TextLine: Fragments sharing an inferred row
    PageFragments: Fragments collected from one page
    PageText: Reconstructed lines of one page
"""

from dataclasses import dataclass, field
from typing import List, Optional

from proforma_extraction.utils.exceptions import PageProcessingError


@dataclass(frozen=True)
class TextFragment:
    """
    A single positioned text run from a PDF page.

    Coordinates follow PDF space: the origin is the bottom-left corner of
    the page and ``y`` grows upward, so a higher ``y`` is earlier in
    reading order.

    Attributes:
        text: The text content of the run
        x: Left edge
        y: Baseline position
        width: Horizontal extent
        height: Vertical extent

    Example:
        >>> fragment = TextFragment("Invoice", x=72.0, y=770.0, width=40.0, height=11.0)
    """
    text: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0

    def is_blank(self) -> bool:
        """Check if the fragment carries no visible text."""
        return not self.text or not self.text.strip()


@dataclass
class TextLine:
    """
    Represents a row of text made of one or more fragments.

    Attributes:
        fragments: Fragments in left-to-right order
        line_index: Index of this line on its page
    """
    fragments: List[TextFragment] = field(default_factory=list)
    line_index: int = 0

    @property
    def text(self) -> str:
        """Get the full text of the line."""
        return ' '.join(fragment.text.strip() for fragment in self.fragments)


@dataclass
class PageFragments:
    """
    Fragments collected from a single page.

    A page that could not be read carries an empty fragment list and the
    PageProcessingError describing the failure.
    """
    page_number: int
    fragments: List[TextFragment] = field(default_factory=list)
    error: Optional[PageProcessingError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class PageText:
    """
    Reading-order lines reconstructed for a single page.

    Attributes:
        page_number: 1-based page number
        lines: Lines in top-to-bottom order
    """
    page_number: int
    lines: List[TextLine] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Lines joined with newlines."""
        return '\n'.join(line.text for line in self.lines)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def is_empty(self) -> bool:
        """Check if the page produced no text."""
        return not self.text.strip()

    def __repr__(self) -> str:
        return f"PageText(page={self.page_number}, lines={self.line_count})"

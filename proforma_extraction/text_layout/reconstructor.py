"""
Line Reconstructor Module.

PDFs store text as independently positioned runs with no line or row
structure. This module rebuilds reading order by clustering fragments on
their vertical position and ordering each cluster left to right.

The vertical tolerance is a fixed heuristic, not derived from font
metrics. Documents with unusually large or small fonts may cluster
badly.

Usage:
    from proforma_extraction.text_layout import LineReconstructor

    reconstructor = LineReconstructor()
    text = reconstructor.build_document_text(pages, file_name="invoice.pdf")
"""

from typing import Iterable, List, Optional, Sequence

from config import get_config
from proforma_extraction.utils.logger import get_logger
from proforma_extraction.utils.exceptions import EmptyDocumentError
from proforma_extraction.utils.helpers import truncate
from .fragments import TextFragment, TextLine, PageFragments, PageText

# Initialize module logger
logger = get_logger(__name__)


class LineReconstructor:
    """
    Groups positioned fragments into lines, pages and document text.

    Attributes:
        y_tolerance: Maximum vertical distance between consecutive
            fragments of the same line, in PDF units.

    Example:
        >>> reconstructor = LineReconstructor()
        >>> lines = reconstructor.group_lines(fragments)
        >>> print(lines[0].text)
        "P/I No.: PI-1001"
    """

    DEFAULT_Y_TOLERANCE = 5.0

    def __init__(self, y_tolerance: Optional[float] = None) -> None:
        """
        Initialize the reconstructor.

        Args:
            y_tolerance: Line clustering tolerance. If None, uses config.
        """
        if y_tolerance is None:
            y_tolerance = get_config("layout.y_tolerance", self.DEFAULT_Y_TOLERANCE)
        self.y_tolerance = float(y_tolerance)

        logger.debug(f"LineReconstructor initialized (y_tolerance={self.y_tolerance})")

    def group_lines(self, fragments: Iterable[TextFragment]) -> List[TextLine]:
        """
        Cluster fragments into reading-order lines.

        Fragments are sorted by descending ``y`` then ascending ``x``. A new
        line starts whenever a fragment sits further than the tolerance
        from the previous fragment.

        Args:
            fragments: Fragments of one page, in any order.

        Returns:
            Lines in top-to-bottom order, each with fragments left to right.
        """
        visible = [f for f in fragments if not f.is_blank()]
        visible.sort(key=lambda f: (-f.y, f.x))

        groups: List[List[TextFragment]] = []
        current: List[TextFragment] = []
        last_y = None

        for fragment in visible:
            if last_y is None or abs(fragment.y - last_y) <= self.y_tolerance:
                current.append(fragment)
            else:
                groups.append(current)
                current = [fragment]
            last_y = fragment.y

        if current:
            groups.append(current)

        # A cluster can drift a few units, so re-sort each row by x
        return [
            TextLine(fragments=sorted(group, key=lambda f: f.x), line_index=index)
            for index, group in enumerate(groups)
        ]

    def build_page(self, page: PageFragments) -> PageText:
        """Reconstruct the lines of a single page."""
        page_text = PageText(
            page_number=page.page_number,
            lines=self.group_lines(page.fragments)
        )
        logger.debug(
            f"Page {page.page_number}: {len(page.fragments)} fragments -> "
            f"{page_text.line_count} lines"
        )
        return page_text

    def build_document_text(
        self,
        pages: Sequence[PageFragments],
        file_name: str = "document"
    ) -> str:
        """
        Reconstruct the full reading-order text of a document.

        Non-empty page texts are joined with newlines in page order.

        Args:
            pages: Per-page fragments, in page order.
            file_name: Name used in diagnostics.

        Returns:
            The document text.

        Raises:
            EmptyDocumentError: If no page produced any text.
        """
        page_texts = [self.build_page(page) for page in pages]
        document_text = '\n'.join(
            page.text for page in page_texts if not page.is_empty()
        )

        if not document_text.strip():
            raise EmptyDocumentError(file_name, page_count=len(pages))

        logger.info(
            f"Reconstructed {file_name}: {len(page_texts)} page(s), "
            f"{len(document_text)} characters"
        )
        logger.debug(f"Document text preview: {truncate(document_text)}")
        return document_text

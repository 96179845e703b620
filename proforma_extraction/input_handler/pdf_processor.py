"""
PDF Fragment Collector Module.

This module reads the internal text layer of digital PDFs and yields,
per page, the positioned text runs ("fragments") found on that page.

Supported backends:
    - pdfplumber (default): word boxes from pdfminer's layout analysis
    - pymupdf: word boxes from MuPDF

Backend settings are passed to the collector's constructor; when they
are omitted, the ``input.pdf`` section of settings.yaml is used.
"""

import io
from typing import Any, Callable, Dict, List, Optional

import pymupdf as fitz
import pdfplumber

from config import get_config
from proforma_extraction.utils.logger import get_logger
from proforma_extraction.utils.exceptions import DocumentReadError, PageProcessingError
from proforma_extraction.text_layout.fragments import TextFragment, PageFragments

# Initialize module logger
logger = get_logger(__name__)


class FragmentCollector:
    """
    Collects positioned text fragments from PDF bytes.

    Every page is read independently: a page that fails yields an empty
    fragment list together with a PageProcessingError, and the remaining
    pages are still read. Only document-level failures raise.

    Attributes:
        backend: Name of the PDF backend ('pdfplumber' or 'pymupdf')
        password: Password used to open encrypted documents
        max_pages: Maximum number of pages to read (None = all)
        keep_blank_chars: pdfplumber word grouping option

    Example:
        >>> collector = FragmentCollector({"backend": "pymupdf"})
        >>> pages = collector.collect(pdf_bytes, file_name="invoice.pdf")
        >>> print(f"Read {len(pages)} pages")
    """

    SUPPORTED_BACKENDS = ['pdfplumber', 'pymupdf']
    DEFAULT_BACKEND = 'pdfplumber'

    def __init__(self, settings: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the collector.

        Args:
            settings: Backend settings (backend, password, max_pages,
                     keep_blank_chars). Missing keys fall back to config.
        """
        resolved = dict(get_config("input.pdf", {}) or {})
        resolved.update(settings or {})

        backend = str(resolved.get("backend") or self.DEFAULT_BACKEND).lower()
        if backend not in self.SUPPORTED_BACKENDS:
            logger.warning(
                f"Unknown PDF backend '{backend}', falling back to {self.DEFAULT_BACKEND}"
            )
            backend = self.DEFAULT_BACKEND

        self.backend = backend
        self.password = resolved.get("password")
        self.max_pages = resolved.get("max_pages")
        self.keep_blank_chars = bool(resolved.get("keep_blank_chars", False))

        logger.debug(f"FragmentCollector initialized (backend={self.backend})")

    def collect(self, data: bytes, file_name: str = "document") -> List[PageFragments]:
        """
        Read every page of a PDF and return its fragments.

        Args:
            data: Raw PDF bytes.
            file_name: Name used in diagnostics.

        Returns:
            One PageFragments per page, in page order.

        Raises:
            DocumentReadError: If the bytes are not a readable PDF.
        """
        if not data:
            raise DocumentReadError(file_name, "File is empty")

        logger.info(f"Collecting text fragments from {file_name} ({self.backend})")

        if self.backend == 'pymupdf':
            pages = self._collect_with_pymupdf(data, file_name)
        else:
            pages = self._collect_with_pdfplumber(data, file_name)

        failed = sum(1 for page in pages if page.failed)
        fragment_count = sum(len(page.fragments) for page in pages)
        logger.info(
            f"Collected {fragment_count} fragments from {len(pages)} page(s)"
            + (f", {failed} page(s) failed" if failed else "")
        )
        return pages

    def _collect_with_pdfplumber(self, data: bytes, file_name: str) -> List[PageFragments]:
        """Collect fragments using pdfplumber."""
        try:
            pdf = pdfplumber.open(io.BytesIO(data), password=self.password)
        except Exception as e:
            logger.error(f"pdfplumber could not open {file_name}: {e}")
            raise DocumentReadError(file_name, str(e)) from e

        with pdf:
            try:
                pages = list(pdf.pages)
            except Exception as e:
                raise DocumentReadError(file_name, f"Could not read page tree: {e}") from e

            if not pages:
                raise DocumentReadError(file_name, "Document has no pages")

            return [
                self._read_page(number, lambda page=page: self._pdfplumber_fragments(page))
                for number, page in enumerate(self._limit(pages), 1)
            ]

    def _pdfplumber_fragments(self, page) -> List[TextFragment]:
        """
        Convert pdfplumber word boxes to PDF-space fragments.

        pdfplumber measures ``top``/``bottom`` from the top of the page,
        so the baseline in PDF space is ``page.height - bottom``.
        """
        page_height = float(page.height)
        words = page.extract_words(keep_blank_chars=self.keep_blank_chars)

        return [
            TextFragment(
                text=word['text'],
                x=float(word['x0']),
                y=page_height - float(word['bottom']),
                width=float(word['x1']) - float(word['x0']),
                height=float(word['bottom']) - float(word['top'])
            )
            for word in words
        ]

    def _collect_with_pymupdf(self, data: bytes, file_name: str) -> List[PageFragments]:
        """Collect fragments using PyMuPDF."""
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            logger.error(f"PyMuPDF could not open {file_name}: {e}")
            raise DocumentReadError(file_name, str(e)) from e

        with doc:
            if doc.needs_pass and not doc.authenticate(self.password or ""):
                raise DocumentReadError(file_name, "Document is encrypted")

            if doc.page_count == 0:
                raise DocumentReadError(file_name, "Document has no pages")

            page_indexes = self._limit(list(range(doc.page_count)))
            return [
                self._read_page(
                    index + 1,
                    lambda index=index: self._pymupdf_fragments(doc.load_page(index))
                )
                for index in page_indexes
            ]

    def _pymupdf_fragments(self, page) -> List[TextFragment]:
        """
        Convert PyMuPDF word tuples to PDF-space fragments.

        Each tuple is (x0, y0, x1, y1, word, block_no, line_no, word_no)
        with ``y`` measured from the top of the page.
        """
        page_height = float(page.rect.height)

        return [
            TextFragment(
                text=word[4],
                x=float(word[0]),
                y=page_height - float(word[3]),
                width=float(word[2]) - float(word[0]),
                height=float(word[3]) - float(word[1])
            )
            for word in page.get_text("words")
        ]

    def _read_page(
        self,
        page_number: int,
        extract: Callable[[], List[TextFragment]]
    ) -> PageFragments:
        """
        Run one page extraction, turning any failure into an empty page.

        Args:
            page_number: 1-based page number.
            extract: Callable returning the page's fragments.

        Returns:
            PageFragments, with ``error`` set if the page failed.
        """
        try:
            fragments = extract()
        except Exception as e:
            error = PageProcessingError(page_number, str(e))
            logger.warning(f"{error}; continuing with next page")
            return PageFragments(page_number=page_number, error=error)

        logger.debug(f"Page {page_number}: {len(fragments)} fragments")
        return PageFragments(page_number=page_number, fragments=fragments)

    def _limit(self, pages: list) -> list:
        """Apply the configured page limit."""
        if self.max_pages and len(pages) > self.max_pages:
            logger.warning(
                f"PDF has {len(pages)} pages, limiting to {self.max_pages}"
            )
            return pages[:self.max_pages]
        return pages

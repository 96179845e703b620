"""
Unit tests for reading-order line reconstruction.
"""

import pytest

from proforma_extraction.text_layout import (
    LineReconstructor,
    TextFragment,
    PageFragments,
)
from proforma_extraction.utils.exceptions import EmptyDocumentError


class TestGroupLines:
    """Tests for LineReconstructor.group_lines."""

    def test_orders_top_to_bottom_then_left_to_right(self):
        fragments = [
            TextFragment("Amount", x=300, y=700),
            TextFragment("World", x=120, y=750),
            TextFragment("Item", x=50, y=700),
            TextFragment("Hello", x=50, y=750),
        ]

        lines = LineReconstructor(y_tolerance=5).group_lines(fragments)

        assert [line.text for line in lines] == ["Hello World", "Item Amount"]

    def test_fragments_within_tolerance_share_a_line(self):
        fragments = [
            TextFragment("USD", x=200, y=698),
            TextFragment("500", x=100, y=700),
            TextFragment("12.50", x=240, y=697),
        ]

        lines = LineReconstructor(y_tolerance=5).group_lines(fragments)

        assert len(lines) == 1
        assert lines[0].text == "500 USD 12.50"

    def test_gap_beyond_tolerance_starts_new_line(self):
        fragments = [
            TextFragment("first", x=50, y=700),
            TextFragment("second", x=50, y=694),
        ]

        lines = LineReconstructor(y_tolerance=5).group_lines(fragments)

        assert [line.text for line in lines] == ["first", "second"]

    def test_blank_fragments_are_discarded(self):
        fragments = [
            TextFragment("   ", x=10, y=700),
            TextFragment("", x=20, y=690),
            TextFragment(" kept ", x=30, y=700),
        ]

        lines = LineReconstructor(y_tolerance=5).group_lines(fragments)

        assert [line.text for line in lines] == ["kept"]

    def test_tolerance_defaults_to_config(self):
        assert LineReconstructor().y_tolerance == 5.0


class TestDocumentText:
    """Tests for page and document assembly."""

    def test_pages_joined_in_order_skipping_empty_pages(self):
        pages = [
            PageFragments(1, [TextFragment("page one", x=0, y=100)]),
            PageFragments(2, []),
            PageFragments(3, [TextFragment("page three", x=0, y=100)]),
        ]

        text = LineReconstructor().build_document_text(pages)

        assert text == "page one\npage three"

    def test_no_text_raises_empty_document(self):
        pages = [PageFragments(1, [TextFragment(" ", x=0, y=0)]), PageFragments(2, [])]

        with pytest.raises(EmptyDocumentError) as exc_info:
            LineReconstructor().build_document_text(pages, file_name="scan.pdf")

        assert exc_info.value.details["page_count"] == 2

    def test_build_page_counts_lines(self):
        page = PageFragments(1, [
            TextFragment("a", x=0, y=100),
            TextFragment("b", x=0, y=80),
        ])

        page_text = LineReconstructor().build_page(page)

        assert page_text.line_count == 2
        assert page_text.text == "a\nb"

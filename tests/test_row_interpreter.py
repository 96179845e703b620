"""
Unit tests for item row interpretation.
"""

import pytest

from proforma_extraction.model_inference import (
    FallbackExtractor,
    ItemSegment,
    PositionalRowInterpreter,
    RowInterpreter,
)


@pytest.fixture
def interpreter():
    return PositionalRowInterpreter([r"coffee\s+maker\s+\d+\s*V"])


class TestPositionalRowInterpreter:
    """Tests for PositionalRowInterpreter."""

    def test_single_price_has_no_amount(self, interpreter):
        fields = interpreter.interpret(ItemSegment("72692-01", "72692-01 mug 24 $1.20"))

        assert fields["unit_price"] == "$1.20"
        assert fields["amount"] == ""
        assert fields["quantity"] == "24"
        assert fields["description"] == "mug"

    def test_number_glued_to_letters_is_not_a_quantity(self, interpreter):
        fields = interpreter.interpret(
            ItemSegment("72692-03", "72692-03 adaptor 127V USD 2.00 USD 20.00")
        )

        assert fields["quantity"] == ""
        assert fields["description"] == "adaptor 127V"

    def test_currency_whitespace_is_collapsed(self, interpreter):
        fields = interpreter.interpret(
            ItemSegment("72692-01", "72692-01 tray 5 US$   3.50 US$ 17.50")
        )

        assert fields["unit_price"] == "US$ 3.50"
        assert fields["amount"] == "US$ 17.50"

    @pytest.mark.parametrize("price", ["€12.00", "RMB 80", "¥ 1,200", "R$ 9.90", "EUR 4"])
    def test_currency_markers(self, interpreter, price):
        fields = interpreter.interpret(ItemSegment("72692-01", f"72692-01 lamp 2 {price}"))

        assert fields["unit_price"] == price
        assert fields["quantity"] == "2"

    def test_product_pattern_wins_over_line_text(self, interpreter):
        segment = ItemSegment(
            "72692-01",
            "72692-01 MODEL CM-1 G.W. 3KG\ncoffee maker 127V 500 USD 12.50 USD 6,250.00",
        )

        fields = interpreter.interpret(segment)

        assert fields["description"] == "coffee maker 127V"
        assert fields["quantity"] == "500"
        assert fields["amount"] == "USD 6,250.00"

    def test_annotations_are_cut_from_description(self):
        fields = PositionalRowInterpreter().interpret(
            ItemSegment("72692-01", "72692-01 toaster N.W. 2KG")
        )

        assert fields["description"] == "toaster"
        assert fields["unit_price"] == ""
        assert fields["quantity"] == ""


class TestCustomInterpreter:
    """The fallback accepts any RowInterpreter."""

    def test_fallback_uses_injected_interpreter(self, invoice_text):
        class CodeOnly(RowInterpreter):
            name = "code-only"

            def interpret(self, segment):
                return {"item_no": segment.item_no}

        records = FallbackExtractor(row_interpreter=CodeOnly()).extract(invoice_text)

        assert [r.item_no for r in records] == ["72692-01", "72692-02"]
        assert all(r.unit_price == "" for r in records)
        assert records[0].pi_no == "PI-1001"

"""
Unit tests for output record assembly.
"""

from datetime import datetime

from proforma_extraction.model_inference import ExtractionRecord
from proforma_extraction.output_handler import RecordAssembler


class TestRecordAssembler:
    """Tests for RecordAssembler."""

    def test_missing_field_becomes_empty_string(self):
        record = RecordAssembler().assemble([{"piNo": "PI-1001", "itemNo": "72692-01"}], "a.pdf")[0]

        assert record.swift == ""
        assert record.to_dict()["swift"] == ""
        assert record.pi_no == "PI-1001"

    def test_metadata_and_order(self):
        records = RecordAssembler().assemble(
            [ExtractionRecord(item_no="72692-01"), ExtractionRecord(item_no="72692-02")],
            "invoice.pdf",
        )

        assert [r.item_no for r in records] == ["72692-01", "72692-02"]
        assert all(r.file_name == "invoice.pdf" for r in records)
        extracted_at = datetime.fromisoformat(records[0].extracted_at)
        assert extracted_at.utcoffset().total_seconds() == 0

    def test_values_copied_verbatim(self):
        record = RecordAssembler().assemble([{"amount": "  USD 1,000.00 "}], "a.pdf")[0]

        assert record.amount == "  USD 1,000.00 "

    def test_ids_unique_across_assemblers(self):
        first = RecordAssembler().assemble([{}] * 50, "a.pdf")
        second = RecordAssembler().assemble([{}] * 50, "b.pdf")

        ids = [r.id for r in first + second]
        assert len(set(ids)) == 100

    def test_to_dict_has_all_keys(self):
        record = RecordAssembler().assemble([ExtractionRecord()], "a.pdf")[0]

        assert list(record.to_dict()) == [
            "id", "fileName", "piNo", "poNo", "scNo", "itemNo", "description",
            "quantity", "unitPrice", "amount", "beneficiary", "nameOfBank",
            "accountNo", "swift", "extractedAt",
        ]

"""
Integration tests for the per-file pipeline and batch driver.
"""

import pytest

from proforma_extraction.input_handler import InputDocument
from proforma_extraction.model_inference import InvoiceExtractor
from proforma_extraction.pipeline import InvoicePipeline
from proforma_extraction.utils.exceptions import DocumentReadError, EmptyDocumentError


@pytest.fixture
def pipeline():
    return InvoicePipeline(extractor=InvoiceExtractor(use_oracle=False))


class TestProcessDocument:
    """Tests for single-document processing."""

    def test_invoice_yields_one_record_per_item(self, pipeline, invoice_pdf):
        records = pipeline.process_document("invoice.pdf", invoice_pdf)

        assert [r.item_no for r in records] == ["72692-01", "72692-02"]
        assert all(r.file_name == "invoice.pdf" for r in records)
        assert records[1].amount == "USD 3,900.00"

    def test_corrupt_document_raises(self, pipeline):
        with pytest.raises(DocumentReadError):
            pipeline.process_document("bad.pdf", b"this is not a pdf")

    def test_document_without_text_raises(self, pipeline, make_pdf):
        with pytest.raises(EmptyDocumentError):
            pipeline.process_document("scan.pdf", make_pdf([]))

    def test_text_without_fields_still_yields_a_record(self, pipeline, make_pdf):
        records = pipeline.process_document("note.pdf", make_pdf(["Thank you for your order"]))

        assert len(records) == 1
        assert records[0].to_dict()["piNo"] == ""


class TestProcessBatch:
    """Tests for the sequential batch driver."""

    def test_corrupt_middle_file_does_not_stop_batch(self, pipeline, make_pdf, tmp_path):
        first = tmp_path / "1_first.pdf"
        corrupt = tmp_path / "2_corrupt.pdf"
        third = tmp_path / "3_third.pdf"
        first.write_bytes(make_pdf(["P/I No.: ONE", "Item No.", "72692-01 cup 1 $1.00"]))
        corrupt.write_bytes(b"this is not a pdf")
        third.write_bytes(make_pdf(["P/I No.: THREE", "Item No.", "72692-09 jar 3 $2.00"]))

        result = pipeline.process_batch([first, corrupt, third])

        assert [r.file_name for r in result.records] == ["1_first.pdf", "3_third.pdf"]
        assert [r.pi_no for r in result.records] == ["ONE", "THREE"]
        assert result.files_processed == 2
        assert result.files_failed == 1
        assert result.failures[0].file_name == "2_corrupt.pdf"
        assert result.failures[0].error_type == "DocumentReadError"
        assert result.succeeded

    def test_directory_expands_to_sorted_pdfs(self, pipeline, make_pdf, tmp_path):
        (tmp_path / "b.pdf").write_bytes(make_pdf(["P/I No.: B"]))
        (tmp_path / "a.pdf").write_bytes(make_pdf(["P/I No.: A"]))
        (tmp_path / "notes.txt").write_text("ignored")

        result = pipeline.process_batch([str(tmp_path)])

        assert [r.pi_no for r in result.records] == ["A", "B"]

    def test_in_memory_inputs(self, pipeline, invoice_pdf):
        result = pipeline.process_batch([
            InputDocument("one.pdf", invoice_pdf),
            ("two.pdf", invoice_pdf),
        ])

        assert [r.file_name for r in result.records] == [
            "one.pdf", "one.pdf", "two.pdf", "two.pdf",
        ]
        assert len({r.id for r in result.records}) == 4

    def test_missing_and_unsupported_files_are_failures(self, pipeline, tmp_path):
        text_file = tmp_path / "invoice.docx"
        text_file.write_text("not a pdf")

        result = pipeline.process_batch([tmp_path / "missing.pdf", text_file])

        assert result.files_processed == 0
        assert [f.error_type for f in result.failures] == [
            "MissingFileError", "UnsupportedFileTypeError",
        ]
        assert not result.succeeded

    def test_mixed_file_and_directory_keep_argument_order(self, pipeline, make_pdf, tmp_path):
        folder = tmp_path / "batch"
        folder.mkdir()
        (folder / "b.pdf").write_bytes(make_pdf(["P/I No.: B"]))
        (folder / "a.pdf").write_bytes(make_pdf(["P/I No.: A"]))
        single = tmp_path / "z.pdf"
        single.write_bytes(make_pdf(["P/I No.: Z"]))

        result = pipeline.process_batch([single, folder])

        assert [r.file_name for r in result.records] == ["z.pdf", "a.pdf", "b.pdf"]
        assert [r.pi_no for r in result.records] == ["Z", "A", "B"]

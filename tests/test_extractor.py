"""
Unit tests for oracle-first extraction with fallback.
"""

import pytest

from proforma_extraction.model_inference import (
    ExtractionRecord,
    FallbackExtractor,
    FieldExtractionOracle,
    InvoiceExtractor,
)
from proforma_extraction.utils.exceptions import OracleError


class StubOracle:
    """Oracle double returning canned records or raising."""

    def __init__(self, records=None, error=None):
        self.records = records or []
        self.error = error
        self.calls = 0

    def extract(self, document_text, api_key):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.records


class TestInvoiceExtractor:
    """Tests for InvoiceExtractor."""

    def test_oracle_result_is_used(self, invoice_text):
        oracle = StubOracle(records=[ExtractionRecord(item_no="ORACLE-1")])

        outcome = InvoiceExtractor(oracle=oracle, use_oracle=True).extract(invoice_text, "sk-test")

        assert outcome.method == "oracle"
        assert not outcome.used_fallback
        assert outcome.records[0].item_no == "ORACLE-1"

    @pytest.mark.parametrize("error", [
        OracleError("HTTP 401: Incorrect API key provided", status_code=401),
        OracleError("completion is not valid JSON"),
        OracleError("completion contains no records"),
    ])
    def test_oracle_failure_falls_back(self, invoice_text, error):
        oracle = StubOracle(error=error)

        outcome = InvoiceExtractor(oracle=oracle, use_oracle=True).extract(invoice_text, "sk-test")

        assert outcome.method == "fallback"
        assert outcome.records == FallbackExtractor().extract(invoice_text)
        assert error.reason in outcome.oracle_error

    def test_no_credential_skips_oracle(self, invoice_text):
        oracle = StubOracle(records=[ExtractionRecord(item_no="never")])

        outcome = InvoiceExtractor(oracle=oracle, use_oracle=True).extract(invoice_text, None)

        assert oracle.calls == 0
        assert outcome.used_fallback
        assert outcome.oracle_error == "no credential supplied"
        assert [r.item_no for r in outcome.records] == ["72692-01", "72692-02"]

    def test_disabled_oracle_is_not_called(self, invoice_text):
        oracle = StubOracle(records=[ExtractionRecord(item_no="never")])

        outcome = InvoiceExtractor(oracle=oracle, use_oracle=False).extract(invoice_text, "sk-test")

        assert oracle.calls == 0
        assert outcome.oracle_error == "oracle disabled"

    def test_real_oracle_http_failure_falls_back(
        self, invoice_text, fake_session, fake_response
    ):
        session = fake_session(fake_response({"error": {"message": "bad key"}}, status_code=401))
        oracle = FieldExtractionOracle(session=session)

        outcome = InvoiceExtractor(oracle=oracle, use_oracle=True).extract(invoice_text, "sk-bad")

        assert len(session.calls) == 1
        assert outcome.method == "fallback"
        assert outcome.records[0].pi_no == "PI-1001"

"""
Pytest configuration and fixtures.
"""

import json

import pymupdf as fitz
import pytest

from config import ConfigurationManager, SETTINGS_ENV_VAR


INVOICE_LINES = [
    "PROFORMA INVOICE",
    "P/I No.: PI-1001",
    "P/O No.: PO-2024-77",
    "S/C No.: SC-88",
    "Item No. Description Quantity Unit Price Amount",
    "72692-01 coffee maker 127V 500 PCS USD 12.50 USD 6,250.00",
    "72692-02 coffee maker 220V 300 PCS USD 13.00 USD 3,900.00",
    "TOTAL USD 10,150.00",
    "BENEFICIARY: ACME HOUSEWARES LTD",
    "NAME OF THE BANK: BANK OF CHINA",
    "ACCOUNT No.: 6222021001",
    "SWIFT: BKCHCNBJ",
]


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Reload the default settings file for every test."""
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture
def invoice_text():
    """Document text of a two-item proforma invoice."""
    return "\n".join(INVOICE_LINES)


@pytest.fixture
def make_pdf():
    """
    Build a text PDF in memory.

    Each page is a list of lines written top to bottom, 20 points apart.
    """
    def _make_pdf(*pages):
        doc = fitz.open()
        for lines in pages:
            page = doc.new_page()
            for index, line in enumerate(lines):
                page.insert_text((50, 60 + index * 20), line, fontsize=10)
        data = doc.tobytes()
        doc.close()
        return data

    return _make_pdf


@pytest.fixture
def invoice_pdf(make_pdf):
    """PDF bytes of the two-item proforma invoice."""
    return make_pdf(INVOICE_LINES)


class FakeResponse:
    """Stand-in for a streamed requests.Response."""

    def __init__(self, body="", status_code=200, chunks=None):
        if not isinstance(body, str):
            body = json.dumps(body)
        self.status_code = status_code
        self.encoding = "utf-8"
        self._chunks = chunks if chunks is not None else [body.encode("utf-8")]
        self.closed = False

    def iter_content(self, chunk_size=1):
        for chunk in self._chunks:
            yield chunk

    def close(self):
        self.closed = True


class FakeSession:
    """Records POST calls and replays a canned response or error."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def completion(content):
    """Chat completions body carrying the given message content."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def fake_session():
    """Factory for FakeSession objects."""
    return FakeSession


@pytest.fixture
def fake_response():
    """The FakeResponse class."""
    return FakeResponse


@pytest.fixture
def completion_body():
    """Builder for chat completions bodies."""
    return completion

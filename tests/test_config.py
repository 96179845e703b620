"""
Unit tests for configuration and input handling.
"""

import pytest

from config import ConfigurationManager, SETTINGS_ENV_VAR, get_config
from proforma_extraction.input_handler import InputHandler
from proforma_extraction.utils.exceptions import (
    DocumentReadError,
    MissingFileError,
    UnsupportedFileTypeError,
)


class TestConfigurationManager:
    """Tests for ConfigurationManager."""

    def test_default_values(self):
        assert get_config("oracle.model") == "gpt-4o"
        assert get_config("oracle.temperature") == 0.1
        assert get_config("layout.y_tolerance") == 5
        assert get_config("input.pdf.backend") == "pdfplumber"

    def test_missing_key_returns_default(self):
        assert get_config("nonexistent.key", "fallback") == "fallback"
        assert get_config("input.pdf.password", "none-set") == "none-set"

    def test_settings_path_from_environment(self, monkeypatch, tmp_path):
        settings = tmp_path / "custom.yaml"
        settings.write_text("oracle:\n  model: local-model\n", encoding="utf-8")
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(settings))
        ConfigurationManager.reset()

        assert get_config("oracle.model") == "local-model"
        assert get_config("layout.y_tolerance", 5) == 5

    def test_missing_settings_file_raises(self, tmp_path):
        ConfigurationManager.reset()

        with pytest.raises(FileNotFoundError):
            ConfigurationManager(str(tmp_path / "absent.yaml"))


class TestInputHandler:
    """Tests for InputHandler."""

    def test_load_reads_bytes(self, tmp_path, invoice_pdf):
        path = tmp_path / "invoice.PDF"
        path.write_bytes(invoice_pdf)

        document = InputHandler().load(path)

        assert document.file_name == "invoice.PDF"
        assert document.data == invoice_pdf

    def test_missing_file(self, tmp_path):
        with pytest.raises(MissingFileError):
            InputHandler().load(tmp_path / "nope.pdf")

    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "scan.png"
        path.write_bytes(b"\x89PNG")

        with pytest.raises(UnsupportedFileTypeError):
            InputHandler().load(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.pdf"
        path.write_bytes(b"")

        with pytest.raises(DocumentReadError):
            InputHandler().load(path)

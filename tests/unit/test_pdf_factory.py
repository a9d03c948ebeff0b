from unittest.mock import MagicMock

import pytest

from payslip_ledger.pdf.factory import PdfExtractorFactory
from payslip_ledger.pdf.pdfplumber_adapter import PdfPlumberAdapter
from payslip_ledger.pdf.pymupdf_adapter import PyMuPdfAdapter


def _make_settings(pdf_engine: str) -> MagicMock:
    return MagicMock(pdf_engine=pdf_engine)


class TestPdfExtractorFactory:
    def test_creates_pdfplumber_adapter(self) -> None:
        assert isinstance(PdfExtractorFactory.create(_make_settings("pdfplumber")), PdfPlumberAdapter)

    def test_creates_pymupdf_adapter(self) -> None:
        assert isinstance(PdfExtractorFactory.create(_make_settings("pymupdf")), PyMuPdfAdapter)

    def test_is_case_insensitive(self) -> None:
        assert isinstance(PdfExtractorFactory.create(_make_settings("PdfPlumber")), PdfPlumberAdapter)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            PdfExtractorFactory.create(_make_settings("unknown"))

from payslip_ledger.config.settings import Settings
from payslip_ledger.pdf.base import BasePdfExtractor
from payslip_ledger.pdf.pdfplumber_adapter import PdfPlumberAdapter
from payslip_ledger.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Picks the PDF reader named by settings.pdf_engine."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        adapter.engine: adapter for adapter in (PdfPlumberAdapter, PyMuPdfAdapter)
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.strip().lower()
        if engine not in cls.ADAPTERS:
            raise ValueError(
                f"Unknown PDF engine '{settings.pdf_engine}'. Expected one of: "
                f"{', '.join(cls.ADAPTERS)}"
            )
        return cls.ADAPTERS[engine]()

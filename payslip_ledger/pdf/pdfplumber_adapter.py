import io

import pdfplumber

from payslip_ledger.pdf.base import BasePdfExtractor


class PdfPlumberAdapter(BasePdfExtractor):
    """Reads payslip PDFs with pdfplumber."""

    engine = "pdfplumber"

    def _page_texts(self, pdf_bytes: bytes) -> list[str]:
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            return [page.extract_text() or "" for page in pdf.pages]

    def _count_pages(self, pdf_bytes: bytes) -> int:
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            return len(pdf.pages)

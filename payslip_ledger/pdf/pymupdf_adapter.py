import pymupdf

from payslip_ledger.pdf.base import BasePdfExtractor


class PyMuPdfAdapter(BasePdfExtractor):
    """Reads payslip PDFs with PyMuPDF. Faster than pdfplumber on large scans."""

    engine = "pymupdf"

    def _page_texts(self, pdf_bytes: bytes) -> list[str]:
        with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
            return [page.get_text() for page in doc]

    def _count_pages(self, pdf_bytes: bytes) -> int:
        with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
            return int(doc.page_count)

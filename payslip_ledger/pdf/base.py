from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TypeVar

from payslip_ledger.pdf.exceptions import PdfExtractionError

T = TypeVar("T")


class BasePdfExtractor(ABC):
    """Contract for all PDF reading adapters.

    Adapters only read page texts and count pages; any error raised by the
    underlying library surfaces as PdfExtractionError naming the engine.
    """

    engine: str

    def extract(self, pdf_bytes: bytes) -> str:
        """Text of every page joined by newlines, stripped.

        Raises:
            PdfExtractionError: if the PDF cannot be read.
        """
        pages = self._guarded("text extraction", lambda: self._page_texts(pdf_bytes))
        return "\n".join(pages).strip()

    def page_count(self, pdf_bytes: bytes) -> int:
        """Raises PdfExtractionError if the PDF cannot be read."""
        return self._guarded("page count", lambda: self._count_pages(pdf_bytes))

    @abstractmethod
    def _page_texts(self, pdf_bytes: bytes) -> list[str]:
        """One string per page, in page order."""

    @abstractmethod
    def _count_pages(self, pdf_bytes: bytes) -> int:
        ...

    def _guarded(self, action: str, call: Callable[[], T]) -> T:
        try:
            return call()
        except Exception as exc:
            raise PdfExtractionError(f"{self.engine} {action} failed: {exc}") from exc

from pathlib import Path

from payslip_ledger.upload.exceptions import FileReadError, UnsupportedDocumentError
from payslip_ledger.upload.models import SourceDocument

SUPPORTED_SUFFIXES = frozenset({".pdf"})


class FileLoader:
    """Turns local paths into SourceDocuments and reads their bytes."""

    def describe(self, path: Path) -> SourceDocument:
        """Build a SourceDocument for a local PDF.

        Raises:
            UnsupportedDocumentError: if the file is not a PDF.
            FileReadError: if the file does not exist or cannot be stat'ed.
        """
        path = Path(path)
        if path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise UnsupportedDocumentError(f"Only PDF payslips are supported, got {path.name}")
        try:
            size = path.stat().st_size
        except OSError as exc:
            raise FileReadError(f"File not found: {path}") from exc
        return SourceDocument(name=path.name, uri=str(path.resolve()), size=size)

    def load(self, document: SourceDocument) -> bytes:
        try:
            return Path(document.uri).read_bytes()
        except OSError as exc:
            raise FileReadError(f"Failed to read {document.uri}: {exc}") from exc

class UploadError(Exception):
    """Base exception for payslip upload errors."""


class FileReadError(UploadError):
    """Raised when a source document cannot be read from disk."""


class UnsupportedDocumentError(UploadError):
    """Raised when a source document is not a PDF."""

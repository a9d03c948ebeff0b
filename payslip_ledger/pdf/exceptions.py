class PdfExtractionError(Exception):
    """Raised when a payslip PDF cannot be opened or read."""

class ExtractionError(Exception):
    """Raised when salary figures cannot be extracted from a payslip."""


class ExtractionValidationError(ExtractionError):
    """Raised when extracted data does not form valid salary details."""


class ExtractionNetworkError(ExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""

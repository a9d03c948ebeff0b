class RecordFormatError(ValueError):
    """Raised when a serialized payslip record has a missing or invalid field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field

class BackupError(Exception):
    """Base exception for backup and restore failures."""


class SnapshotValidationError(BackupError):
    """Raised when a backup document fails structural validation.

    `field` names the missing or invalid field.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Invalid backup, {field}: {message}")
        self.field = field

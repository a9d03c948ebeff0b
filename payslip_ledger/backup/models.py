from dataclasses import dataclass, field
from datetime import datetime

from payslip_ledger.records.models import PayslipRecord, UserProfile

SNAPSHOT_VERSION = "1.0"
BACKUP_FILE_EXTENSION = ".rbs"


@dataclass(frozen=True)
class BackupSnapshot:
    """Portable export of every payslip plus the profile."""

    version: str
    timestamp: datetime
    payslips: list[PayslipRecord] = field(default_factory=list)
    profile: UserProfile | None = None

import secrets
import string
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from payslip_ledger.extraction.base import BaseSalaryExtractor
from payslip_ledger.logging.logger import Log
from payslip_ledger.pdf.base import BasePdfExtractor
from payslip_ledger.pdf.exceptions import PdfExtractionError
from payslip_ledger.records.models import PayslipRecord, PayslipStatus
from payslip_ledger.records.record_store import RecordStore
from payslip_ledger.upload.exceptions import FileReadError, UploadError
from payslip_ledger.upload.file_loader import FileLoader
from payslip_ledger.upload.models import SourceDocument

_ID_ALPHABET = string.digits + string.ascii_lowercase
_SIZE_UNITS = ("B", "KB", "MB", "GB")


def generate_payslip_id(now: datetime) -> str:
    """'<epoch ms>-<6 base36 chars>', unique enough for one local store."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    return f"{int(now.timestamp() * 1000)}-{suffix}"


def format_file_size(size_bytes: int) -> str:
    """1536 -> '1.5 KB', 1024 -> '1 KB', 0 -> '0 B'."""
    if size_bytes <= 0:
        return "0 B"
    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 1):g} {_SIZE_UNITS[unit]}"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PayslipUploader:
    """Runs one upload: record -> processing -> extraction -> completed | error.

    Extraction failures are recorded on the payslip (status `error`) and
    logged; storage failures propagate.
    """

    def __init__(
        self,
        store: RecordStore,
        extractor: BaseSalaryExtractor,
        pdf_extractor: BasePdfExtractor | None = None,
        file_loader: FileLoader | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._extractor = extractor
        self._pdf_extractor = pdf_extractor
        self._file_loader = file_loader or FileLoader()
        self._clock = clock

    def upload_path(self, path: Path) -> PayslipRecord:
        return self.upload(self._file_loader.describe(path))

    def upload(self, document: SourceDocument) -> PayslipRecord:
        now = self._clock()
        record = PayslipRecord(
            id=generate_payslip_id(now),
            name=document.name,
            status=PayslipStatus.UPLOADING,
            timestamp=now,
            size=format_file_size(document.size),
            page_count=self._count_pages(document),
        )
        self._store.upsert_payslip(record)
        Log.info(f"Uploading payslip {record.id} ({document.name}, {record.size})")

        self._store.update_payslip_status(record.id, PayslipStatus.PROCESSING)
        try:
            details = self._extractor.extract(document)
        except Exception as exc:
            Log.error(f"Failed to process payslip {record.id}: {exc}")
            self._store.update_payslip_status(record.id, PayslipStatus.ERROR)
        else:
            self._store.update_payslip_status(record.id, PayslipStatus.COMPLETED, details)
            Log.info(f"Payslip {record.id} processed: {details.month} {details.year}")

        stored = self._store.get_payslip(record.id)
        if stored is None:
            raise UploadError(f"Payslip {record.id} was removed while it was being processed")
        return stored

    def _count_pages(self, document: SourceDocument) -> int | None:
        if self._pdf_extractor is None:
            return None
        try:
            return self._pdf_extractor.page_count(self._file_loader.load(document))
        except (FileReadError, PdfExtractionError) as exc:
            Log.warning(f"Could not count pages of {document.name}: {exc}")
            return None

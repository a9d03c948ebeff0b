import io

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from payslip_ledger.records.record_store import RecordStore
from payslip_ledger.storage.memory_adapter import InMemoryKeyValueStore

PAYSLIP_LINES = (
    "ACME Industries Pvt Ltd - Salary Slip for March 2024",
    "Basic Pay 45000",
    "Dearness Allowance 9000",
    "House Rent Allowance 5400",
    "Provident Fund 5400",
)


class FailingWritesAdapter(InMemoryKeyValueStore):
    """In-memory adapter whose writes start failing on demand.

    `writes_allowed` is how many more writes succeed (None means unlimited);
    writes to `failing_keys` always fail.
    """

    def __init__(self) -> None:
        super().__init__()
        self.writes_allowed: int | None = None
        self.failing_keys: set[str] = set()

    def set(self, key: str, value: str) -> None:
        if key in self.failing_keys or self.writes_allowed == 0:
            raise OSError(f"No space left on device ({key})")
        if self.writes_allowed is not None:
            self.writes_allowed -= 1
        super().set(key, value)

    def remove(self, key: str) -> None:
        if self.writes_allowed == 0:
            raise OSError(f"No space left on device ({key})")
        super().remove(key)


@pytest.fixture()
def adapter() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def store(adapter: InMemoryKeyValueStore) -> RecordStore:
    return RecordStore(adapter)


@pytest.fixture()
def payslip_pdf_bytes() -> bytes:
    """A single-page payslip PDF with known text."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    y = 780
    for line in PAYSLIP_LINES:
        c.drawString(72, y, line)
        y -= 20
    c.save()
    return buf.getvalue()


@pytest.fixture()
def two_page_pdf_bytes() -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.drawString(72, 780, "Earnings page")
    c.showPage()
    c.drawString(72, 780, "Deductions page")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def blank_pdf_bytes() -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def failing_adapter() -> FailingWritesAdapter:
    return FailingWritesAdapter()

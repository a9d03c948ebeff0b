from abc import ABC, abstractmethod

from payslip_ledger.records.models import SalaryDetails
from payslip_ledger.upload.models import SourceDocument


class BaseSalaryExtractor(ABC):
    """Contract for all salary extraction adapters."""

    @abstractmethod
    def extract(self, document: SourceDocument) -> SalaryDetails:
        """Read the salary figures of one payslip.

        Args:
            document: The uploaded payslip.

        Returns:
            SalaryDetails with whatever figures could be found.

        Raises:
            ExtractionError: on any failure.
        """

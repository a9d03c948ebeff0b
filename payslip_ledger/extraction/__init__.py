from payslip_ledger.extraction.base import BaseSalaryExtractor

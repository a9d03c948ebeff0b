"""AI-powered salary extraction from payslip PDFs."""

import json
from pathlib import Path

from payslip_ledger.extraction.base import BaseSalaryExtractor
from payslip_ledger.extraction.client_base import BaseExtractionClient, CompletionRequest
from payslip_ledger.extraction.exceptions import ExtractionError
from payslip_ledger.extraction.prompt_loader import load_json_schema, load_prompt_template
from payslip_ledger.extraction.validator import validate_and_build
from payslip_ledger.logging.logger import Log
from payslip_ledger.pdf.base import BasePdfExtractor
from payslip_ledger.pdf.exceptions import PdfExtractionError
from payslip_ledger.records.models import SalaryDetails
from payslip_ledger.upload.exceptions import FileReadError
from payslip_ledger.upload.file_loader import FileLoader
from payslip_ledger.upload.models import SourceDocument

DEFAULT_SYSTEM_PROMPT = (
    "You read Indian salary slips and return their figures as JSON. "
    "Never invent numbers that are not printed on the slip."
)


class LlmSalaryExtractor(BaseSalaryExtractor):
    """Extracts salary figures from PDF text with an AI provider."""

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        pdf_extractor: BasePdfExtractor,
        model: str,
        temperature: float = 0.0,
        file_loader: FileLoader | None = None,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._pdf_extractor = pdf_extractor
        self._file_loader = file_loader or FileLoader()
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._json_schema = load_json_schema(json_schema_path)
        self._json_schema_dict = json.loads(self._json_schema)

    def extract(self, document: SourceDocument) -> SalaryDetails:
        try:
            pdf_bytes = self._file_loader.load(document)
            text = self._pdf_extractor.extract(pdf_bytes)
        except (FileReadError, PdfExtractionError) as exc:
            raise ExtractionError(f"Cannot read {document.name}: {exc}") from exc
        if not text:
            raise ExtractionError(f"No text found in {document.name}")

        prompt = self._prompt_template.format(
            payslip_text=text,
            json_schema=self._json_schema,
        )
        Log.debug(f"Extraction prompt:\n{prompt}")

        raw_response = self._client.complete_json(
            CompletionRequest(
                model=self._model,
                temperature=self._temperature,
                system_prompt=self._system_prompt,
                user_prompt=prompt,
                json_schema=self._json_schema_dict,
            )
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        details = validate_and_build(self._parse_json(raw_response))
        Log.info(f"Extracted salary details for {document.name}: {details.month} {details.year}")
        return details

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ExtractionError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise ExtractionError("JSON response must be an object")
        return parsed

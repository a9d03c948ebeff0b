"""Bundled prompt and schema files for AI salary extraction."""

from pathlib import Path

from payslip_ledger.extraction.exceptions import ExtractionError

PROMPTS_DIR = Path(__file__).parent / "prompts"
PROMPT_TEMPLATE_FILE = "extraction_prompt.txt"
JSON_SCHEMA_FILE = "salary_schema.json"


def load_prompt_template(path: Path | None = None) -> str:
    """Template with `{payslip_text}` and `{json_schema}` placeholders.

    Raises:
        ExtractionError: if the file cannot be read.
    """
    return _read(path or PROMPTS_DIR / PROMPT_TEMPLATE_FILE, "prompt template")


def load_json_schema(path: Path | None = None) -> str:
    """Raw JSON schema text describing the expected salary figures."""
    return _read(path or PROMPTS_DIR / JSON_SCHEMA_FILE, "JSON schema")


def _read(path: Path, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExtractionError(f"Failed to load {what} from {path}: {exc}") from exc

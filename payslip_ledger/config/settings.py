from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    storage_engine: str = "file"
    storage_path: str = ".payslip_ledger"
    recompute_salary_totals: bool = True

    backup_dir: str = "."

    pdf_engine: str = "pdfplumber"

    extraction_provider: str = "example"
    extraction_example_seed: int | None = None

    extraction_openai_api_key: str = ""
    extraction_openai_model_name: str = "gpt-4o-mini"
    extraction_openai_timeout_seconds: int = 30
    extraction_openai_temperature: float = 0.0

    extraction_openai_compatible_base_url: str = ""
    extraction_openai_compatible_api_key: str = ""
    extraction_openai_compatible_model_name: str = ""
    extraction_openai_compatible_timeout_seconds: int = 30

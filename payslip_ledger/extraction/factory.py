from payslip_ledger.config.settings import Settings
from payslip_ledger.extraction.base import BaseSalaryExtractor
from payslip_ledger.extraction.example_extractor import ExampleSalaryExtractor
from payslip_ledger.extraction.llm_extractor import LlmSalaryExtractor
from payslip_ledger.extraction.openai_client_adapter import OpenAIClientAdapter
from payslip_ledger.pdf.base import BasePdfExtractor
from payslip_ledger.pdf.factory import PdfExtractorFactory


class ExtractorFactory:
    """Creates the salary extractor named by settings.extraction_provider."""

    PROVIDERS: tuple[str, ...] = ("example", "openai", "openai_compatible")

    @classmethod
    def create(
        cls,
        settings: Settings,
        pdf_extractor: BasePdfExtractor | None = None,
    ) -> BaseSalaryExtractor:
        provider = settings.extraction_provider.lower()
        if provider == "example":
            return ExampleSalaryExtractor(seed=settings.extraction_example_seed)
        if provider not in cls.PROVIDERS:
            raise ValueError(
                f"Unknown extraction provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )

        pdf_extractor = pdf_extractor or PdfExtractorFactory.create(settings)
        if provider == "openai":
            client = OpenAIClientAdapter(
                api_key=settings.extraction_openai_api_key,
                timeout_seconds=settings.extraction_openai_timeout_seconds,
            )
            return LlmSalaryExtractor(
                client=client,
                pdf_extractor=pdf_extractor,
                model=settings.extraction_openai_model_name,
                temperature=settings.extraction_openai_temperature,
            )

        base_url = settings.extraction_openai_compatible_base_url.strip()
        if not base_url:
            raise ValueError(
                "extraction_openai_compatible_base_url is required for "
                "extraction_provider=openai_compatible"
            )
        client = OpenAIClientAdapter(
            api_key=settings.extraction_openai_compatible_api_key,
            timeout_seconds=settings.extraction_openai_compatible_timeout_seconds,
            base_url=base_url,
        )
        return LlmSalaryExtractor(
            client=client,
            pdf_extractor=pdf_extractor,
            model=settings.extraction_openai_compatible_model_name,
        )

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CompletionRequest:
    """One structured-output chat call: a system and a user message plus the schema."""

    model: str
    temperature: float
    system_prompt: str
    user_prompt: str
    json_schema: dict[str, object] = field(default_factory=dict)
    schema_name: str = "salary_details"


class BaseExtractionClient(ABC):
    """Contract for provider-specific AI chat clients."""

    @abstractmethod
    def complete_json(self, request: CompletionRequest) -> str:
        """Send the request and return the raw JSON text of the reply.

        Raises:
            ExtractionNetworkError: if the provider cannot be reached.
            ExtractionError: if the reply has no usable content.
        """

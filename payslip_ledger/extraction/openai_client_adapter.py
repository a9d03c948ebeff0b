from typing import Any

import httpx
import openai

from payslip_ledger.extraction.client_base import BaseExtractionClient, CompletionRequest
from payslip_ledger.extraction.exceptions import ExtractionError, ExtractionNetworkError
from payslip_ledger.logging.logger import Log


class OpenAIClientAdapter(BaseExtractionClient):
    """Chat client for OpenAI and any endpoint speaking its API (Ollama, vLLM, ...)."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def complete_json(self, request: CompletionRequest) -> str:
        try:
            response = self._client.chat.completions.create(
                model=request.model,
                temperature=request.temperature,
                response_format=self._response_format(request),
                messages=[
                    {"role": "system", "content": request.system_prompt},
                    {"role": "user", "content": request.user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ExtractionNetworkError(f"AI provider network error: {exc}") from exc
        except openai.RateLimitError as exc:
            raise ExtractionNetworkError(f"AI provider rate limit reached: {exc}") from exc
        except openai.APIError as exc:
            raise ExtractionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ExtractionError("AI returned no choices")
        choice = response.choices[0]
        if choice.finish_reason == "length":
            raise ExtractionError("AI response was cut off before the JSON was complete")
        refusal = getattr(choice.message, "refusal", None)
        if isinstance(refusal, str) and refusal:
            raise ExtractionError(f"AI refused the request: {refusal}")
        if not choice.message.content:
            raise ExtractionError("AI returned empty response")
        Log.debug(f"AI call used model {response.model}")
        return choice.message.content

    @staticmethod
    def _response_format(request: CompletionRequest) -> Any:
        return {
            "type": "json_schema",
            "json_schema": {
                "name": request.schema_name,
                "strict": True,
                "schema": request.json_schema,
            },
        }

"""OpenAIInferenceClient — OpenAI backend (strict json_schema response format)."""
from openai import AsyncOpenAI

from imagecheck.constants import (
    ANALYSIS_SCHEMA_NAME,
    DEFAULT_INFERENCE_TIMEOUT,
    FORENSIC_PROMPT,
    OPENAI_ANALYSIS_MODEL,
    OPENAI_MIME_TYPES,
    PROVIDER_OPENAI,
    SDK_MAX_RETRIES,
)
from imagecheck.errors import ConfigurationError
from imagecheck.inference.client import InferenceClient, Payload
from imagecheck.schema import RESPONSE_SCHEMA


class OpenAIInferenceClient(InferenceClient):
    provider = PROVIDER_OPENAI
    supported_mime_types = OPENAI_MIME_TYPES

    def __init__(
        self,
        api_key: str | None,
        model: str = OPENAI_ANALYSIS_MODEL,
        timeout: float = DEFAULT_INFERENCE_TIMEOUT,
    ) -> None:
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY must be set in .env")
        super().__init__(model, timeout)
        self._client = AsyncOpenAI(
            api_key=api_key, max_retries=SDK_MAX_RETRIES, timeout=timeout
        )

    async def _request(self, image_data: str, mime_type: str) -> Payload:
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{image_data}"},
                        },
                        {"type": "text", "text": FORENSIC_PROMPT},
                    ],
                }
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": ANALYSIS_SCHEMA_NAME,
                    "strict": True,
                    "schema": RESPONSE_SCHEMA,
                },
            },
        )
        content = response.choices[0].message.content
        return content.strip() if content else None

    async def aclose(self) -> None:
        await self._client.close()

"""ClaudeInferenceClient — Anthropic Claude backend (forced tool use for structured output)."""
from anthropic import AsyncAnthropic

from imagecheck.constants import (
    ANALYSIS_TOOL_DESCRIPTION,
    ANALYSIS_TOOL_NAME,
    CLAUDE_ANALYSIS_MODEL,
    CLAUDE_MAX_TOKENS,
    CLAUDE_MIME_TYPES,
    DEFAULT_INFERENCE_TIMEOUT,
    FORENSIC_PROMPT,
    PROVIDER_CLAUDE,
    SDK_MAX_RETRIES,
)
from imagecheck.errors import ConfigurationError
from imagecheck.inference.client import InferenceClient, Payload
from imagecheck.schema import RESPONSE_SCHEMA


class ClaudeInferenceClient(InferenceClient):
    provider = PROVIDER_CLAUDE
    supported_mime_types = CLAUDE_MIME_TYPES

    def __init__(
        self,
        api_key: str | None,
        model: str = CLAUDE_ANALYSIS_MODEL,
        timeout: float = DEFAULT_INFERENCE_TIMEOUT,
    ) -> None:
        if not api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY must be set in .env")
        super().__init__(model, timeout)
        self._client = AsyncAnthropic(
            api_key=api_key, max_retries=SDK_MAX_RETRIES, timeout=timeout
        )

    async def _request(self, image_data: str, mime_type: str) -> Payload:
        message = await self._client.messages.create(
            model=self._model,
            max_tokens=CLAUDE_MAX_TOKENS,
            tools=[
                {
                    "name": ANALYSIS_TOOL_NAME,
                    "description": ANALYSIS_TOOL_DESCRIPTION,
                    "input_schema": RESPONSE_SCHEMA,
                }
            ],
            tool_choice={"type": "tool", "name": ANALYSIS_TOOL_NAME},
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": mime_type,
                                "data": image_data,
                            },
                        },
                        {"type": "text", "text": FORENSIC_PROMPT},
                    ],
                }
            ],
        )
        match [block.input for block in message.content if block.type == "tool_use"]:
            case [tool_input, *_]:
                return tool_input
            case _:
                return None

    async def aclose(self) -> None:
        await self._client.close()

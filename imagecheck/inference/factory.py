"""build_client — construct the configured backend once, at startup."""
from imagecheck.config import Config
from imagecheck.errors import ConfigurationError
from imagecheck.inference.claude import ClaudeInferenceClient
from imagecheck.inference.client import InferenceClient
from imagecheck.inference.openai import OpenAIInferenceClient


def build_client(config: Config) -> InferenceClient:
    match config.provider:
        case "claude":
            return ClaudeInferenceClient(
                config.api_key, model=config.model, timeout=config.inference_timeout
            )
        case "openai":
            return OpenAIInferenceClient(
                config.api_key, model=config.model, timeout=config.inference_timeout
            )
        case other:
            raise ConfigurationError(f"Unknown inference provider: {other}")

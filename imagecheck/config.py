from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from imagecheck.constants import (
    CLAUDE_ANALYSIS_MODEL,
    DEFAULT_INFERENCE_TIMEOUT,
    OPENAI_ANALYSIS_MODEL,
    PROVIDER_CLAUDE,
    PROVIDER_OPENAI,
    PROVIDERS,
)
from imagecheck.errors import ConfigurationError


@dataclass(frozen=True)
class Config:
    provider: str
    model: str
    inference_timeout: float
    log_level: str
    anthropic_api_key: Optional[str]
    openai_api_key: Optional[str]
    telegram_bot_token: Optional[str] = None
    allowed_chat_id: Optional[str] = None

    @property
    def api_key(self) -> str:
        match self.provider:
            case "claude":
                return self.anthropic_api_key or ""
            case _:
                return self.openai_api_key or ""

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        anthropic_api_key = os.getenv("ANTHROPIC_API_KEY") or None
        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        provider = (os.getenv("INFERENCE_PROVIDER") or "").strip().lower() or None
        model = os.getenv("INFERENCE_MODEL") or None
        raw_timeout = os.getenv("INFERENCE_TIMEOUT", str(DEFAULT_INFERENCE_TIMEOUT))
        log_level = os.getenv("LOG_LEVEL", "INFO")
        telegram_bot_token = os.getenv("TELEGRAM_BOT_TOKEN") or None
        allowed_chat_id = os.getenv("ALLOWED_CHAT_ID") or None

        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ConfigurationError(
                f"INFERENCE_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from exc

        return cls._validate(
            provider=provider,
            model=model,
            inference_timeout=timeout,
            log_level=log_level,
            anthropic_api_key=anthropic_api_key,
            openai_api_key=openai_api_key,
            telegram_bot_token=telegram_bot_token,
            allowed_chat_id=allowed_chat_id,
        )

    def with_overrides(self, provider: Optional[str] = None, model: Optional[str] = None) -> "Config":
        """Re-validate with a different provider and/or model (CLI flags)."""
        new_provider = provider.lower() if provider else self.provider
        match (provider, model):
            case (None, None):
                return self
            case (_, None) if new_provider != self.provider:
                new_model = None
            case _:
                new_model = model or self.model
        return self._validate(
            provider=new_provider,
            model=new_model,
            inference_timeout=self.inference_timeout,
            log_level=self.log_level,
            anthropic_api_key=self.anthropic_api_key,
            openai_api_key=self.openai_api_key,
            telegram_bot_token=self.telegram_bot_token,
            allowed_chat_id=self.allowed_chat_id,
        )

    def require_telegram(self) -> "Config":
        match self.telegram_bot_token:
            case None | "":
                raise ConfigurationError("TELEGRAM_BOT_TOKEN must be set in .env")
            case _:
                pass

        match self.allowed_chat_id:
            case None | "":
                raise ConfigurationError("ALLOWED_CHAT_ID must be set in .env")
            case _:
                pass
        return self

    @staticmethod
    def _validate(
        provider: Optional[str],
        model: Optional[str],
        inference_timeout: float,
        log_level: str,
        anthropic_api_key: Optional[str],
        openai_api_key: Optional[str],
        telegram_bot_token: Optional[str],
        allowed_chat_id: Optional[str],
    ) -> "Config":
        match (provider, anthropic_api_key, openai_api_key):
            case (None, str(), _):
                provider = PROVIDER_CLAUDE
            case (None, None, str()):
                provider = PROVIDER_OPENAI
            case (None, None, None):
                raise ConfigurationError(
                    "ANTHROPIC_API_KEY or OPENAI_API_KEY must be set in .env"
                )
            case (p, _, _) if p not in PROVIDERS:
                raise ConfigurationError(
                    f"INFERENCE_PROVIDER must be one of {', '.join(PROVIDERS)}, got {p!r}"
                )
            case _:
                pass

        match (provider, anthropic_api_key, openai_api_key):
            case ("claude", None, _):
                raise ConfigurationError("ANTHROPIC_API_KEY must be set in .env")
            case ("openai", _, None):
                raise ConfigurationError("OPENAI_API_KEY must be set in .env")
            case _:
                pass

        match inference_timeout:
            case t if t > 0:
                pass
            case t:
                raise ConfigurationError(f"INFERENCE_TIMEOUT must be positive, got {t}")

        default_model = (
            CLAUDE_ANALYSIS_MODEL if provider == PROVIDER_CLAUDE else OPENAI_ANALYSIS_MODEL
        )
        return Config(
            provider=provider,
            model=model or default_model,
            inference_timeout=inference_timeout,
            log_level=log_level,
            anthropic_api_key=anthropic_api_key,
            openai_api_key=openai_api_key,
            telegram_bot_token=telegram_bot_token,
            allowed_chat_id=allowed_chat_id,
        )

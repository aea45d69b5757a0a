"""AnalysisResult — the validated verdict returned by the inference model."""
import json
import logging
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from imagecheck.constants import (
    ERR_INVALID_JSON,
    ERR_INVALID_SHAPE,
    LIKELIHOOD_DRIFT_TOLERANCE,
    MSG_LIKELIHOOD_DRIFT,
    PERCENT_TOTAL,
)
from imagecheck.errors import SchemaValidationError

logger = logging.getLogger(__name__)


class Verdict(str, Enum):
    LIKELY_AI = "LIKELY_AI"
    LIKELY_HUMAN = "LIKELY_HUMAN"
    UNCERTAIN = "UNCERTAIN"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ", 1)


class TechnicalDetails(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    lighting: str
    texture: str
    composition: str
    artifacts: str


class AnalysisResult(BaseModel):
    """One model verdict. Wire names are camelCase, attributes snake_case."""

    model_config = ConfigDict(frozen=True, strict=True, alias_generator=to_camel)

    ai_likelihood: float = Field(ge=0, le=100)
    human_likelihood: float = Field(ge=0, le=100)
    verdict: Verdict
    confidence_score: float = Field(ge=0, le=100)
    indicators: tuple[str, ...]
    analysis: str
    potential_prompt: str
    technical_details: TechnicalDetails

    @property
    def likelihood_total(self) -> float:
        return self.ai_likelihood + self.human_likelihood

    @property
    def likelihood_drift(self) -> float:
        return abs(self.likelihood_total - PERCENT_TOTAL)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def _payload_text(payload: str | bytes | bytearray) -> str:
    match payload:
        case str():
            return payload
        case _:
            return bytes(payload).decode(errors="replace")


def _field_names(exc: ValidationError) -> str:
    return ", ".join(".".join(map(str, e["loc"])) or "<root>" for e in exc.errors())


def parse_result(payload: str | bytes | bytearray | Mapping[str, Any]) -> AnalysisResult:
    """Decode and validate a model reply. Raises SchemaValidationError; never returns partial data.

    Validation runs in strict JSON mode against the camelCase wire names, so a
    reply is accepted only when it matches RESPONSE_SCHEMA: no string or bool
    coercion into numbers and no snake_case keys.
    """
    match payload:
        case str() | bytes() | bytearray():
            raw = _payload_text(payload)
            text = payload
        case _:
            raw = None
            try:
                text = json.dumps(dict(payload), allow_nan=False)
            except (TypeError, ValueError) as exc:
                raise SchemaValidationError(ERR_INVALID_JSON % exc) from exc

    try:
        result = AnalysisResult.model_validate_json(text)
    except ValidationError as exc:
        match [e for e in exc.errors() if e["type"] == "json_invalid"]:
            case [error, *_]:
                raise SchemaValidationError(ERR_INVALID_JSON % error["msg"], raw) from exc
            case _:
                raise SchemaValidationError(ERR_INVALID_SHAPE % _field_names(exc), raw) from exc

    match result.likelihood_drift:
        case drift if drift > LIKELIHOOD_DRIFT_TOLERANCE:
            logger.warning(
                MSG_LIKELIHOOD_DRIFT,
                result.likelihood_total,
                result.ai_likelihood,
                result.human_likelihood,
            )
        case _:
            pass
    return result

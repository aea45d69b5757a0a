"""InferenceClient — abstract base for hosted image-analysis backends.

Subclasses only build and send the provider request; the base class owns the
contract every backend shares:

* reject empty or unsupported images before touching the network,
* cap each call with a wall-clock timeout (no automatic retries),
* map any remote failure or empty reply to InferenceError,
* parse the reply with parse_result, which raises SchemaValidationError.
"""
import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Mapping

from imagecheck.constants import (
    DEFAULT_INFERENCE_TIMEOUT,
    ERR_EMPTY_IMAGE,
    ERR_EMPTY_PAYLOAD,
    ERR_TIMEOUT,
    ERR_UNSUPPORTED_MIME,
    MSG_INFERENCE_TIMEOUT,
    MSG_REQUEST_SENT,
    MSG_RESPONSE_OK,
)
from imagecheck.errors import InferenceError, UnsupportedImageError
from imagecheck.images import encode_image
from imagecheck.models import AnalysisResult, parse_result

logger = logging.getLogger(__name__)

Payload = str | Mapping[str, Any] | None


class InferenceClient(ABC):
    provider: str = ""
    supported_mime_types: frozenset[str] = frozenset()

    def __init__(self, model: str, timeout: float = DEFAULT_INFERENCE_TIMEOUT) -> None:
        self._model = model
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    async def analyze(self, image_bytes: bytes, mime_type: str) -> AnalysisResult:
        """Send one image to the model and return its validated verdict."""
        mime_type = mime_type.lower()
        self._check_image(image_bytes, mime_type)
        logger.info(MSG_REQUEST_SENT, self.provider, self._model, mime_type, len(image_bytes))

        start = time.time()
        try:
            payload = await asyncio.wait_for(
                self._request(encode_image(image_bytes), mime_type),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.error(MSG_INFERENCE_TIMEOUT, self._timeout)
            raise InferenceError(ERR_TIMEOUT % self._timeout) from exc
        except Exception as exc:
            logger.error("Error calling %s: %s", self.provider, exc)
            raise InferenceError(f"{self.provider} request failed: {exc}") from exc

        match payload:
            case p if not p:
                raise InferenceError(ERR_EMPTY_PAYLOAD)
            case _:
                logger.info(MSG_RESPONSE_OK, time.time() - start)
        return parse_result(payload)

    def _check_image(self, image_bytes: bytes, mime_type: str) -> None:
        match (image_bytes, mime_type):
            case (b"", _):
                raise UnsupportedImageError(ERR_EMPTY_IMAGE)
            case (_, mime) if mime not in self.supported_mime_types:
                raise UnsupportedImageError(ERR_UNSUPPORTED_MIME % mime_type)
            case _:
                pass

    @abstractmethod
    async def _request(self, image_data: str, mime_type: str) -> Payload:
        """Send base64 image data with the forensic prompt; return the raw JSON reply."""
        ...

    @abstractmethod
    async def aclose(self) -> None: ...

    async def __aenter__(self) -> "InferenceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

"""AnalysisSession — one current image and one current result, last submission wins."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from imagecheck.constants import MSG_SUPERSEDED
from imagecheck.images import data_url
from imagecheck.inference.client import InferenceClient
from imagecheck.models import AnalysisResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    result: Optional[AnalysisResult] = None
    image_preview: Optional[str] = None


def make_preview(image_bytes: bytes, mime_type: str) -> str:
    return data_url(image_bytes, mime_type)


class AnalysisSession:
    """Owns the state shown to one user.

    State is replaced as a whole, never mutated. A new submission cancels the
    previous pending request; a superseded submission returns None and never
    publishes its result.
    """

    def __init__(self, client: InferenceClient) -> None:
        self._client = client
        self._state = SessionState()
        self._task: asyncio.Task | None = None
        self._generation = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def begin(self) -> int:
        """Take the next place in line before the image bytes are available.

        Cancels the pending request and clears the state. Pass the returned
        generation to submit(); it is dropped if another begin() came after it.
        """
        self._generation += 1
        self._cancel_pending()
        self._state = SessionState()
        return self._generation

    async def submit(
        self, image_bytes: bytes, mime_type: str, generation: int | None = None
    ) -> AnalysisResult | None:
        match generation:
            case None:
                generation = self.begin()
            case reserved if not self._is_current(reserved):
                logger.debug(MSG_SUPERSEDED, reserved, self._generation)
                return None
            case _:
                self._cancel_pending()

        preview = make_preview(image_bytes, mime_type)
        self._state = SessionState(image_preview=preview)
        task = asyncio.create_task(self._client.analyze(image_bytes, mime_type))
        self._task = task
        try:
            result = await task
        except asyncio.CancelledError:
            match self._is_current(generation):
                case True:
                    raise
                case False:
                    logger.debug(MSG_SUPERSEDED, generation, self._generation)
                    return None
        finally:
            if self._task is task:
                self._task = None

        match self._is_current(generation):
            case True:
                self._state = SessionState(result=result, image_preview=preview)
                return result
            case False:
                logger.debug(MSG_SUPERSEDED, generation, self._generation)
                return None

    async def close(self) -> None:
        self._generation += 1
        match self._task:
            case task if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
                self._task = None
            case _:
                pass
        self._state = SessionState()

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _cancel_pending(self) -> None:
        match self._task:
            case None:
                pass
            case task if not task.done():
                task.cancel()
            case _:
                pass

"""Telegram typing indicator — re-sends the chat action until the block exits."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from telegram import Bot
from telegram.constants import ChatAction

from imagecheck.constants import TELEGRAM_TYPING_INTERVAL

logger = logging.getLogger(__name__)


async def _keep_typing(bot: Bot, chat_id: str, stop: asyncio.Event) -> None:
    while not stop.is_set():
        try:
            await bot.send_chat_action(chat_id=int(chat_id), action=ChatAction.TYPING)
        except Exception as exc:
            logger.debug("Typing action failed: %s", exc)
        try:
            await asyncio.wait_for(stop.wait(), timeout=TELEGRAM_TYPING_INTERVAL)
        except asyncio.TimeoutError:
            pass


@asynccontextmanager
async def typing_indicator(bot: Bot, chat_id: str) -> AsyncIterator[None]:
    stop = asyncio.Event()
    task = asyncio.create_task(_keep_typing(bot, chat_id, stop))
    try:
        yield
    finally:
        stop.set()
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

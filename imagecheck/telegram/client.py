"""TelegramClient — reply to photos with an AI-vs-human report via python-telegram-bot."""
import logging
import time
from typing import Callable, Optional

from telegram import Bot, Update
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.ext import MessageHandler as TGMessageHandler
from telegram.ext import filters

from imagecheck.config import Config
from imagecheck.constants import (
    CMD_HELP,
    CMD_STATUS,
    MSG_BLOCKED_CHAT,
    MSG_BOT_STARTING,
    MSG_HELP,
    MSG_SEND_FAIL,
    MSG_SEND_OK,
    MSG_STATUS,
    MSG_UNSUPPORTED_IMAGE,
    TELEGRAM_MAX_MESSAGE,
    TELEGRAM_PHOTO_MIME,
)
from imagecheck.errors import InferenceError, SchemaValidationError
from imagecheck.formatting import describe_error, format_text, split_message
from imagecheck.inference.client import InferenceClient
from imagecheck.presenter import render
from imagecheck.session import AnalysisSession, make_preview
from imagecheck.telegram.typing import typing_indicator

logger = logging.getLogger(__name__)


def _digits(s: str) -> str:
    return "".join(c for c in s if c.isdigit() or c == "-")


class TelegramClient:

    def __init__(self, config: Config, inference_client: InferenceClient) -> None:
        self._config = config
        self._token = config.telegram_bot_token
        self._allowed_chat_id = config.allowed_chat_id or ""
        self._inference_client = inference_client
        self._sessions: dict[str, AnalysisSession] = {}
        self._app: Optional[Application] = None

    def run(self) -> None:
        logger.info(MSG_BOT_STARTING)
        # Concurrent updates let a newer photo supersede a pending analysis.
        self._app = (
            Application.builder()
            .token(self._token)
            .concurrent_updates(True)
            .post_shutdown(self._shutdown)
            .build()
        )
        self._app.add_handler(TGMessageHandler(filters.PHOTO, self._photo_handler))
        self._app.add_handler(TGMessageHandler(filters.Document.IMAGE, self._document_handler))
        self._app.add_handler(CommandHandler(CMD_HELP, self._make_reply_handler(lambda: MSG_HELP)))
        self._app.add_handler(CommandHandler("start", self._make_reply_handler(lambda: MSG_HELP)))
        self._app.add_handler(CommandHandler(CMD_STATUS, self._make_reply_handler(self.status_text)))
        self._app.run_polling()

    async def send_message(self, to: str, text: str) -> bool:
        match self._app:
            case None:
                logger.error("send_message called before run()")
                return False
            case app:
                try:
                    for chunk in split_message(text, TELEGRAM_MAX_MESSAGE):
                        await app.bot.send_message(chat_id=int(to), text=chunk)
                    return True
                except Exception as exc:
                    logger.error("Telegram send_message failed: %s", exc)
                    return False

    def status_text(self) -> str:
        return MSG_STATUS % (
            self._config.provider,
            self._config.model,
            f"{self._config.inference_timeout:g}",
        )

    def session_for(self, sender: str) -> AnalysisSession:
        match self._sessions.get(sender):
            case None:
                session = AnalysisSession(self._inference_client)
                self._sessions[sender] = session
                return session
            case session:
                return session

    async def analyze_and_reply(
        self,
        sender: str,
        image_bytes: bytes,
        mime_type: str,
        bot: Bot,
        generation: Optional[int] = None,
    ) -> None:
        session = self.session_for(sender)
        start = time.time()
        try:
            async with typing_indicator(bot, sender):
                result = await session.submit(image_bytes, mime_type, generation)
        except (InferenceError, SchemaValidationError) as exc:
            logger.exception("Image analysis failed")
            await self.send_message(sender, describe_error(exc))
            return

        match result:
            case None:
                return
            case _:
                report = render(result, make_preview(image_bytes, mime_type))

        elapsed = time.time() - start
        match await self.send_message(sender, format_text(report)):
            case True:
                logger.info(MSG_SEND_OK, elapsed)
            case False:
                logger.error(MSG_SEND_FAIL, elapsed)

    # ── helpers (also used in tests) ─────────────────────────────────────────

    def _is_allowed(self, update: Update) -> bool:
        if update.effective_chat is None:
            return False
        return _digits(str(update.effective_chat.id)) == _digits(self._allowed_chat_id)

    def _sender(self, update: Update) -> Optional[str]:
        match self._is_allowed(update):
            case False:
                chat_id = update.effective_chat.id if update.effective_chat else "?"
                logger.warning(MSG_BLOCKED_CHAT, chat_id)
                return None
            case True:
                return str(update.effective_chat.id)

    # ── handlers ──────────────────────────────────────────────────────────────

    def _make_reply_handler(self, callback: Callable[[], str]) -> Callable:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            match self._sender(update):
                case None:
                    return
                case sender:
                    await self.send_message(sender, callback())

        return _handler

    async def _photo_handler(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        sender = self._sender(update)
        photos = update.message.photo if update.message else None
        match (sender, photos):
            case (None, _) | (_, None | ()):
                return
            case _:
                pass
        # Reserve the place in line on arrival so a slow download cannot jump a newer photo.
        generation = self.session_for(sender).begin()
        tg_file = await photos[-1].get_file()
        image_bytes = bytes(await tg_file.download_as_bytearray())
        await self.analyze_and_reply(
            sender, image_bytes, TELEGRAM_PHOTO_MIME, context.bot, generation=generation
        )

    async def _document_handler(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        sender = self._sender(update)
        document = update.message.document if update.message else None
        match (sender, document):
            case (None, _) | (_, None):
                return
            case (_, doc) if not doc.mime_type:
                await self.send_message(sender, MSG_UNSUPPORTED_IMAGE)
                return
            case _:
                pass
        generation = self.session_for(sender).begin()
        tg_file = await document.get_file()
        image_bytes = bytes(await tg_file.download_as_bytearray())
        await self.analyze_and_reply(
            sender, image_bytes, document.mime_type, context.bot, generation=generation
        )

    async def _shutdown(self, app: Application) -> None:
        for session in self._sessions.values():
            await session.close()
        self._sessions.clear()
        await self._inference_client.aclose()

from __future__ import annotations
import logging

from aiogram import Bot, Dispatcher, F
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import Message

from .assistant import GradingAssistant
from .config import Settings
from .i18n import t
from .llm import LLMClient, ModelClient
from .media import PDF_MIME, detect_mime_type, is_image_mime
from .messaging import Send
from .state import SessionStateManager

logger = logging.getLogger(__name__)

def _build_llm(settings: Settings) -> LLMClient:
    return LLMClient(settings.gemini_api_key, model=settings.llm_model, timeout_sec=settings.llm_timeout_sec)

def _sender(bot: Bot, chat_id: int) -> Send:
    async def _send(text: str):
        # plain text: model output is not MarkdownV2-escaped
        return await bot.send_message(chat_id, text, parse_mode=None)
    return _send

def _is_exercise_caption(caption: str | None) -> bool:
    return (caption or "").strip().lower().startswith("/exercise")

async def _download(bot: Bot, file_id: str) -> tuple[bytes, str | None]:
    file = await bot.get_file(file_id)
    buf = await bot.download_file(file.file_path)
    return buf.read(), file.file_path

def register_handlers(
    dp: Dispatcher,
    *,
    settings: Settings,
    state: SessionStateManager,
    llm: ModelClient | None = None,
) -> GradingAssistant:
    assistant = GradingAssistant(
        llm=llm or _build_llm(settings),
        state=state,
        ui_lang=settings.ui_default_lang,
        send_attempts=settings.send_attempts,
        send_retry_base_sec=settings.send_retry_base_sec,
    )
    lang = settings.ui_default_lang

    @dp.message(CommandStart())
    @dp.message(Command("help"))
    async def on_help(m: Message):
        await m.answer(t("help", lang), parse_mode=None)

    @dp.message(Command("exercise"))
    async def on_exercise_text(m: Message, command: CommandObject):
        chat_id = m.chat.id
        logger.info("exercise_text chat_id=%s text_len=%s", chat_id, len(command.args or ""))
        await assistant.reply(
            _sender(m.bot, chat_id),
            assistant.register_exercise(chat_id, command.args or ""),
            conversation_id=chat_id,
            failure_key="exercise_failed",
        )

    @dp.message(Command("answerkey"))
    async def on_answer_key(m: Message):
        chat_id = m.chat.id
        await assistant.reply(
            _sender(m.bot, chat_id),
            assistant.answer_key(chat_id),
            conversation_id=chat_id,
        )

    @dp.message(Command("submissions"))
    async def on_submissions(m: Message):
        if m.from_user is None or m.from_user.id not in settings.admin_ids:
            await m.answer(t("forbidden", lang), parse_mode=None)
            return
        chat_id = m.chat.id
        logger.info("admin_action: submissions admin_id=%s chat_id=%s", m.from_user.id, chat_id)
        await assistant.reply(
            _sender(m.bot, chat_id),
            assistant.submissions(chat_id),
            conversation_id=chat_id,
        )

    async def _handle_file(m: Message, file_id: str, declared_mime: str | None):
        chat_id = m.chat.id
        as_exercise = declared_mime == PDF_MIME or _is_exercise_caption(m.caption)

        async def _work() -> str:
            nonlocal as_exercise
            data, file_path = await _download(m.bot, file_id)
            mime = declared_mime or detect_mime_type(data, file_path)
            as_exercise = as_exercise or mime == PDF_MIME
            logger.info("file chat_id=%s mime=%s bytes=%s exercise=%s", chat_id, mime, len(data), as_exercise)
            if as_exercise:
                return await assistant.register_exercise_file(chat_id, data, mime)
            return await assistant.grade_file(chat_id, data, mime)

        await assistant.reply(
            _sender(m.bot, chat_id),
            _work(),
            conversation_id=chat_id,
            # resolved after the download: an undeclared PDF is an exercise
            failure_key=lambda: "exercise_failed" if as_exercise else "grading_failed",
        )

    @dp.message(F.document)
    async def on_document(m: Message):
        mime = (m.document.mime_type or "").lower() or None
        if mime is not None and mime != PDF_MIME and not is_image_mime(mime):
            await m.answer(t("unsupported", lang), parse_mode=None)
            return
        await _handle_file(m, m.document.file_id, mime)

    @dp.message(F.photo)
    async def on_photo(m: Message):
        await _handle_file(m, m.photo[-1].file_id, None)

    @dp.message(F.text)
    async def on_answer(m: Message):
        chat_id = m.chat.id
        logger.info("submission chat_id=%s text_len=%s", chat_id, len(m.text))
        await assistant.reply(_sender(m.bot, chat_id), assistant.grade(chat_id, m.text), conversation_id=chat_id)

    @dp.message()
    async def on_unsupported(m: Message):
        await m.answer(t("unsupported", lang), parse_mode=None)

    return assistant

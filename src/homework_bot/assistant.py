from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Awaitable, Callable

from .answer_key import derive_answer_key, new_exercise_id
from .errors import AssistantError, PreconditionError
from .grading import grade_submission
from .i18n import t
from .llm import ModelClient
from .messaging import Send, send_with_retry
from .models import utcnow
from .normalize import normalize
from .report import render_answer_key, render_report
from .state import SessionStateManager
from .types import Submission

logger = logging.getLogger(__name__)


def _resolve(failure_key: str | Callable[[], str]) -> str:
    return failure_key() if callable(failure_key) else failure_key


@dataclass
class GradingAssistant:
    """Runs one inbound message to exactly one reply.

    The ``register_*`` / ``grade*`` coroutines return the reply text or raise an
    ``AssistantError``; ``reply`` turns either outcome into a single message.
    """

    llm: ModelClient
    state: SessionStateManager
    ui_lang: str = "en"
    send_attempts: int = 3
    send_retry_base_sec: float = 0.5
    new_id: Callable[[], str] = new_exercise_id

    async def register_exercise(self, conversation_id: str | int, exercise_text: str) -> str:
        exercise_id, _, active = await derive_answer_key(
            exercise_text,
            conversation_id=conversation_id,
            llm=self.llm,
            state=self.state,
            new_id=self.new_id,
        )
        if not active:
            return t("exercise_not_active", self.ui_lang, exercise_id=exercise_id)
        return t("exercise_saved", self.ui_lang, exercise_id=exercise_id)

    async def register_exercise_file(self, conversation_id: str | int, data: bytes, mime_type: str) -> str:
        text = await self.llm.extract_text(data, mime_type)
        return await self.register_exercise(conversation_id, text)

    async def grade(self, conversation_id: str | int, submission_text: str) -> str:
        exercise_id = await self.state.get_current_exercise_id(conversation_id)
        if not exercise_id:
            raise PreconditionError("no_exercise")
        record = await self.state.get_exercise(exercise_id)
        if record is None:
            # pointer without a readable record is treated as no answer key
            raise PreconditionError("answer_key_missing", exercise_id=exercise_id)

        answers = normalize(submission_text)
        if not answers:
            raise PreconditionError("no_text_extracted")

        report = await grade_submission(
            exercise_id=exercise_id,
            record=record,
            answers=answers,
            llm=self.llm,
        )
        submission = Submission(
            conversation_id=str(conversation_id),
            answers=answers,
            sections=report.to_json()["sections"],
            submitted_at=utcnow().isoformat(),
        )
        await self.state.add_submission(
            exercise_id,
            f"{conversation_id}:{secrets.token_hex(4)}",
            submission,
        )
        return render_report(report) or t("nothing_graded", self.ui_lang)

    async def grade_file(self, conversation_id: str | int, data: bytes, mime_type: str) -> str:
        if not await self.state.get_current_exercise_id(conversation_id):
            # skip the extraction call when there is nothing to grade against
            raise PreconditionError("no_exercise")
        text = await self.llm.extract_text(data, mime_type)
        return await self.grade(conversation_id, text)

    async def answer_key(self, conversation_id: str | int) -> str:
        exercise_id = await self.state.get_current_exercise_id(conversation_id)
        if not exercise_id:
            raise PreconditionError("no_exercise")
        record = await self.state.get_exercise(exercise_id)
        if record is None or not record.answer_key:
            raise PreconditionError("answer_key_missing", exercise_id=exercise_id)
        return f"🔑 {exercise_id}\n\n{render_answer_key(record.answer_key)}"

    async def submissions(self, conversation_id: str | int) -> str:
        exercise_id = await self.state.get_current_exercise_id(conversation_id)
        if not exercise_id:
            raise PreconditionError("no_exercise")
        submissions = await self.state.get_submissions(exercise_id)
        return t("submissions_count", self.ui_lang, exercise_id=exercise_id, count=len(submissions))

    def _failure_text(self, exc: BaseException, failure_key: str) -> str:
        if isinstance(exc, PreconditionError):
            return t(exc.key, self.ui_lang, **exc.context)
        if isinstance(exc, AssistantError):
            return t(failure_key, self.ui_lang, reason=exc.reason or exc.key)
        return t(failure_key, self.ui_lang, reason=type(exc).__name__)

    async def reply(
        self,
        send: Send,
        work: Awaitable[str],
        *,
        conversation_id: str | int,
        failure_key: str | Callable[[], str] = "grading_failed",
    ) -> None:
        """Await ``work`` and send exactly one message: its text or a failure text.

        ``failure_key`` may be a callable, read only once ``work`` has failed.
        """
        try:
            text = await work
        except AssistantError as exc:
            logger.warning(
                "request_failed kind=%s key=%s chat_id=%s reason=%s",
                type(exc).__name__,
                exc.key,
                conversation_id,
                exc.reason,
            )
            text = self._failure_text(exc, _resolve(failure_key))
        except Exception as exc:
            logger.exception("request_crashed chat_id=%s", conversation_id)
            text = self._failure_text(exc, _resolve(failure_key))

        try:
            await send_with_retry(
                send,
                text,
                attempts=self.send_attempts,
                base_delay=self.send_retry_base_sec,
            )
        except Exception:
            logger.exception("reply_undeliverable chat_id=%s", conversation_id)

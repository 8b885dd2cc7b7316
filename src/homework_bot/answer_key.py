from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Callable

from .errors import InvalidAnswerKeyError, PreconditionError
from .llm import ModelClient
from .state import SessionStateManager
from .structured import parse_model_json
from .types import AnswerKey, ExerciseRecord

logger = logging.getLogger(__name__)


def new_exercise_id() -> str:
    # millisecond timestamp plus a random suffix; only uniqueness matters
    return f"{int(time.time() * 1000)}{secrets.token_hex(4)}"


def _build_prompt(exercise_text: str) -> str:
    return f"""You are an English teacher preparing the answer key for a grammar exercise.
Exercise text:
{exercise_text}

Solve every question of every exercise section.

Return ONLY valid JSON with this schema:
{{
  "<section id, e.g. 73.1>": {{
    "<question number, e.g. 1>": "<the single correct answer>"
  }}
}}
Constraints:
- Use the section and question numbers exactly as they appear in the text.
- Exactly ONE canonical answer string per question.
- No explanations, no notes, no nested objects below the question level.
- No prose before or after the JSON.
"""


def _validate_answer_key(payload: Any) -> AnswerKey:
    if not isinstance(payload, dict) or not payload:
        raise InvalidAnswerKeyError("answer key must be a non-empty object of sections")
    answer_key: AnswerKey = {}
    for section_id, questions in payload.items():
        if not isinstance(questions, dict):
            raise InvalidAnswerKeyError(f"section {section_id} must map question ids to answers")
        answers: dict[str, str] = {}
        for question_id, answer in questions.items():
            if isinstance(answer, (dict, list)):
                raise InvalidAnswerKeyError(
                    f"answer {section_id}.{question_id} must be a single string"
                )
            answers[str(question_id)] = "" if answer is None else str(answer).strip()
        answer_key[str(section_id)] = answers
    return answer_key


async def derive_answer_key(
    exercise_text: str,
    *,
    conversation_id: str | int,
    llm: ModelClient,
    state: SessionStateManager,
    new_id: Callable[[], str] = new_exercise_id,
) -> tuple[str, AnswerKey, bool]:
    """Turn extracted exercise text into a stored answer key.

    Makes exactly one model call. Returns ``(exercise_id, answer_key, active)``;
    ``active`` is true only when both the record and the conversation pointer
    were written. Otherwise the conversation keeps whatever pointer it had and
    the caller must not announce the new exercise as current.
    """
    if not exercise_text or not exercise_text.strip():
        raise PreconditionError("no_text_extracted")

    raw = await llm.generate([_build_prompt(exercise_text)], purpose="derive_answer_key")
    answer_key = _validate_answer_key(parse_model_json(raw, what="answer key"))

    exercise_id = new_id()
    saved = await state.set_exercise(exercise_id, ExerciseRecord(text=exercise_text, answer_key=answer_key))
    active = saved and await state.set_current_exercise_id(conversation_id, exercise_id)
    if not active:
        logger.warning(
            "exercise_not_active exercise_id=%s chat_id=%s record_saved=%s degraded=%s",
            exercise_id,
            conversation_id,
            saved,
            state.degraded,
        )
    logger.info(
        "answer_key_derived exercise_id=%s chat_id=%s sections=%s questions=%s active=%s",
        exercise_id,
        conversation_id,
        len(answer_key),
        sum(len(q) for q in answer_key.values()),
        active,
    )
    return exercise_id, answer_key, active

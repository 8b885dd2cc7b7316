from __future__ import annotations

import json
import logging
from typing import Any

from .store import KeyValueStore
from .types import ExerciseRecord, Submission

logger = logging.getLogger(__name__)


def exercise_key(exercise_id: str) -> str:
    return f"exercise:{exercise_id}"


def current_exercise_key(conversation_id: str | int) -> str:
    return f"chat:{conversation_id}:current_exercise"


def submissions_key(exercise_id: str) -> str:
    return f"submissions:{exercise_id}"


class SessionStateManager:
    """Per-conversation exercise state over an optional key-value store.

    Degraded-store policy: the store may be missing (not configured) or fail
    on any call. Reads then return ``None`` (or an empty mapping), writes
    return ``False``, nothing is raised to the caller. Each such event is
    logged as ``store_degraded`` and counted in ``degraded_events`` so a
    systemic outage stays visible to operators.
    """

    def __init__(self, store: KeyValueStore | None):
        self._store = store
        self.degraded_events = 0

    @property
    def degraded(self) -> bool:
        return self._store is None

    def _degrade(self, op: str, key: str, exc: BaseException | None = None) -> None:
        self.degraded_events += 1
        if exc is None:
            logger.warning("store_degraded op=%s key=%s reason=no_store", op, key)
        else:
            logger.warning(
                "store_degraded op=%s key=%s reason=%s: %s",
                op,
                key,
                type(exc).__name__,
                exc,
                exc_info=exc,
            )

    async def _get(self, key: str) -> str | None:
        if self._store is None:
            self._degrade("get", key)
            return None
        try:
            value = await self._store.get(key)
        except Exception as exc:
            self._degrade("get", key, exc)
            return None
        logger.info("store_get key=%s found=%s", key, value is not None)
        return value or None

    async def _put(self, key: str, value: str) -> bool:
        if self._store is None:
            self._degrade("put", key)
            return False
        try:
            await self._store.put(key, value)
        except Exception as exc:
            self._degrade("put", key, exc)
            return False
        logger.info("store_put key=%s", key)
        return True

    async def _get_json(self, key: str) -> Any:
        raw = await self._get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            self._degrade("decode", key, exc)
            return None

    async def get_exercise(self, exercise_id: str) -> ExerciseRecord | None:
        data = await self._get_json(exercise_key(exercise_id))
        if not isinstance(data, dict):
            return None
        return ExerciseRecord.from_json(data)

    async def set_exercise(self, exercise_id: str, record: ExerciseRecord) -> bool:
        payload = json.dumps(record.to_json(), ensure_ascii=False)
        return await self._put(exercise_key(exercise_id), payload)

    async def get_current_exercise_id(self, conversation_id: str | int) -> str | None:
        return await self._get(current_exercise_key(conversation_id))

    async def set_current_exercise_id(self, conversation_id: str | int, exercise_id: str) -> bool:
        return await self._put(current_exercise_key(conversation_id), exercise_id)

    async def get_submissions(self, exercise_id: str) -> dict[str, Any]:
        data = await self._get_json(submissions_key(exercise_id))
        return data if isinstance(data, dict) else {}

    async def add_submission(self, exercise_id: str, submission_id: str, submission: Submission) -> bool:
        # read-modify-write; concurrent submissions are last-write-wins
        submissions = await self.get_submissions(exercise_id)
        submissions[submission_id] = submission.to_json()
        payload = json.dumps(submissions, ensure_ascii=False)
        return await self._put(submissions_key(exercise_id), payload)

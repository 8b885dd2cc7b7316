from __future__ import annotations

import json
import logging
from typing import Any

from .errors import InvalidReportStructureError, PreconditionError
from .llm import ModelClient
from .normalize import normalize
from .structured import parse_model_json
from .types import ExerciseRecord, GradingReport, SectionResult

logger = logging.getLogger(__name__)


def _build_prompt(*, exercise_id: str, exercise_text: str, answer_key: dict, answers: str) -> str:
    key_block = json.dumps(answer_key, ensure_ascii=False, indent=2)
    return f"""You are an English grammar teacher checking a student's homework.
Exercise id: {exercise_id}
Exercise text:
{exercise_text}

Answer key (JSON, section -> question -> correct answer):
{key_block}

Student answers:
{answers}

Grading policy (must follow):
- Compare ONLY the meaning and the verb tense/form of each answer with the answer key.
- Ignore spelling, punctuation, capitalization and minor grammar slips.
- If the student did not answer a question, SKIP it. Do not report it.
- For each wrong answer give the FULL corrected sentence.
- Do NOT rewrite or mention answers that are already correct.

Return ONLY valid JSON with this schema:
{{
  "exercise_id": "{exercise_id}",
  "sections": {{
    "<section id>": {{
      "all_correct": true,
      "corrections": {{
        "<question number>": "<full corrected sentence>"
      }}
    }}
  }}
}}
Constraints:
- Include every section the student answered.
- When all_correct is true, corrections must be empty.
- No prose before or after the JSON.
"""


def _all_correct_flag(section_id: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    # models sometimes quote the flag
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise InvalidReportStructureError(
        f"invalid report structure: all_correct of section {section_id} is not a boolean"
    )


def _section_from_payload(section_id: str, payload: Any) -> SectionResult:
    if not isinstance(payload, dict):
        raise InvalidReportStructureError(f"invalid report structure: section {section_id} is not an object")
    corrections = payload.get("corrections") or {}
    if not isinstance(corrections, dict):
        raise InvalidReportStructureError(
            f"invalid report structure: corrections of section {section_id} is not an object"
        )
    all_correct = _all_correct_flag(section_id, payload.get("all_correct", False))
    if all_correct:
        if corrections:
            logger.warning(
                "report_repair: dropped corrections of all-correct section section=%s count=%s",
                section_id,
                len(corrections),
            )
        return SectionResult(all_correct=True, corrections={})
    return SectionResult(
        all_correct=False,
        corrections={str(qid): str(sentence or "").strip() for qid, sentence in corrections.items()},
    )


def validate_report(payload: Any, *, exercise_id: str) -> GradingReport:
    if not isinstance(payload, dict) or "sections" not in payload:
        raise InvalidReportStructureError("invalid report structure: missing sections")
    sections = payload["sections"]
    if not isinstance(sections, dict):
        raise InvalidReportStructureError("invalid report structure: sections is not an object")
    reported_id = payload.get("exercise_id")
    if reported_id is not None and str(reported_id) != exercise_id:
        logger.warning(
            "report_repair: exercise_id mismatch reported=%s active=%s",
            reported_id,
            exercise_id,
        )
    return GradingReport(
        exercise_id=exercise_id,
        sections={str(sid): _section_from_payload(str(sid), sec) for sid, sec in sections.items()},
    )


async def grade_submission(
    *,
    exercise_id: str,
    record: ExerciseRecord,
    answers: str,
    llm: ModelClient,
) -> GradingReport:
    """Grade normalized student answers against the stored answer key.

    Exactly one model call, never retried. The model judges correctness;
    this function only enforces the input and output contract around it.
    """
    if not record.answer_key:
        raise PreconditionError("answer_key_missing", exercise_id=exercise_id)
    if not record.text or not record.text.strip():
        raise PreconditionError("exercise_text_missing", exercise_id=exercise_id)

    prompt = _build_prompt(
        exercise_id=exercise_id,
        exercise_text=normalize(record.text),
        answer_key=record.answer_key,
        answers=answers,
    )
    raw = await llm.generate([prompt], purpose=f"grade_submission exercise_id={exercise_id}")
    report = validate_report(parse_model_json(raw, what="grading report"), exercise_id=exercise_id)
    logger.info(
        "graded exercise_id=%s sections=%s corrections=%s",
        exercise_id,
        len(report.sections),
        sum(len(sec.corrections) for sec in report.sections.values()),
    )
    return report

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# section id -> question id -> canonical answer
AnswerKey = dict[str, dict[str, str]]


@dataclass(frozen=True)
class ExerciseRecord:
    text: str
    answer_key: AnswerKey | None

    def to_json(self) -> dict[str, Any]:
        return {"text": self.text, "answer_key": self.answer_key}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ExerciseRecord":
        return cls(text=str(data.get("text") or ""), answer_key=data.get("answer_key") or None)


@dataclass(frozen=True)
class SectionResult:
    all_correct: bool
    corrections: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class GradingReport:
    exercise_id: str
    sections: dict[str, SectionResult]

    def to_json(self) -> dict[str, Any]:
        return {
            "exercise_id": self.exercise_id,
            "sections": {
                sid: {"all_correct": sec.all_correct, "corrections": dict(sec.corrections)}
                for sid, sec in self.sections.items()
            },
        }


@dataclass(frozen=True)
class Submission:
    conversation_id: str
    answers: str
    sections: dict[str, Any]
    submitted_at: str

    def to_json(self) -> dict[str, Any]:
        return {
            "conversation_id": self.conversation_id,
            "answers": self.answers,
            "sections": self.sections,
            "submitted_at": self.submitted_at,
        }

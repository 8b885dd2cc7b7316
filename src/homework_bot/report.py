from __future__ import annotations

from .types import AnswerKey, GradingReport

ALL_CORRECT_MARKER = "✅ All correct"
REST_CORRECT_MARKER = "✅ The rest are correct"


def render_report(report: GradingReport) -> str:
    blocks: list[str] = []
    for section_id, section in report.sections.items():
        lines = [section_id]
        if section.all_correct:
            lines.append(ALL_CORRECT_MARKER)
        else:
            for question_id, sentence in section.corrections.items():
                lines.append(f"{question_id}. {sentence}")
            lines.append(REST_CORRECT_MARKER)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks).rstrip()


def render_answer_key(answer_key: AnswerKey) -> str:
    blocks: list[str] = []
    for section_id, answers in answer_key.items():
        lines = [section_id]
        lines.extend(f"{question_id}. {answer}" for question_id, answer in answers.items())
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks).rstrip()

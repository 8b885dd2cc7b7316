from __future__ import annotations


class AssistantError(Exception):
    """Failure that ends one message-handling invocation with a single reply.

    ``key`` selects the user-facing text in ``i18n.STRINGS``; ``reason`` is the
    underlying cause shown alongside it.
    """

    key = "unexpected_error"

    def __init__(self, reason: str = "", *, key: str | None = None):
        super().__init__(reason or (key or self.key))
        if key is not None:
            self.key = key
        self.reason = reason


class PreconditionError(AssistantError):
    # no_exercise | no_text_extracted | answer_key_missing | exercise_text_missing
    def __init__(self, key: str, **context: str):
        super().__init__("", key=key)
        self.context = context


class ModelCallError(AssistantError):
    """The language model could not be reached or answered with an error status."""

    key = "model_unavailable"

    def __init__(self, status: int | None, body: str):
        super().__init__(f"Gemini API error: {status} - {body}")
        self.status = status
        self.body = body


class StructuredOutputError(AssistantError):
    """The model answered, but the reply has the wrong shape."""

    key = "invalid_output"


class InvalidModelJSONError(StructuredOutputError):
    key = "invalid_json"

    def __init__(self, what: str, reason: str):
        super().__init__(f"failed to parse {what}: {reason}")
        self.what = what


class InvalidAnswerKeyError(StructuredOutputError):
    key = "invalid_answer_key"


class InvalidReportStructureError(StructuredOutputError):
    key = "invalid_report"

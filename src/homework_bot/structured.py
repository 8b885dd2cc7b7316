from __future__ import annotations
import json
import re
from typing import Any

from .errors import InvalidModelJSONError

# ```json ... ``` anywhere in the reply; the language tag is optional
_FENCE_RE = re.compile(r"```(?:[a-zA-Z0-9_-]+(?=[\s{\[]))?\s*(.*?)```", re.DOTALL)

def extract_json(raw: str | None) -> str:
    s = (raw or "").strip()
    match = _FENCE_RE.search(s)
    if match:
        return match.group(1).strip()
    return s

def parse_model_json(raw: str | None, *, what: str) -> Any:
    candidate = extract_json(raw)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise InvalidModelJSONError(what, str(exc)) from exc

from __future__ import annotations
import asyncio
from dataclasses import dataclass
import logging
from typing import Protocol, Sequence, Union
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .errors import ModelCallError

logger = logging.getLogger(__name__)

ContentPart = Union[str, types.Part]

_EXTRACT_PROMPT = """Extract ALL text from this file exactly as written.
Keep exercise numbers, section numbers, question numbers and line breaks.
Keep handwritten answers exactly as the student wrote them, including mistakes.
Do NOT correct, translate, summarize or explain anything.
Return plain text only."""

class ModelClient(Protocol):
    async def generate(self, contents: Sequence[ContentPart], *, purpose: str = "generate") -> str: ...

    async def extract_text(self, data: bytes, mime_type: str) -> str: ...

@dataclass
class LLMClient:
    api_key: str
    model: str = "gemini-2.5-flash-lite"
    timeout_sec: float = 60.0

    def _client(self) -> genai.Client:
        return genai.Client(api_key=self.api_key)

    async def generate(self, contents: Sequence[ContentPart], *, purpose: str = "generate") -> str:
        """One request/response model call; failures surface as ``ModelCallError``."""
        logger.info(
            "llm_usage: %s model=%s parts=%s text_len=%s",
            purpose,
            self.model,
            len(contents),
            sum(len(p) for p in contents if isinstance(p, str)),
        )
        client = self._client()
        config = types.GenerateContentConfig(temperature=0)

        def _call() -> str:
            resp = client.models.generate_content(
                model=self.model,
                contents=list(contents),
                config=config,
            )
            return (resp.text or "").strip()

        try:
            return await asyncio.wait_for(asyncio.to_thread(_call), timeout=self.timeout_sec)
        except genai_errors.APIError as exc:
            raise ModelCallError(exc.code, exc.message or str(exc)) from exc
        except asyncio.TimeoutError as exc:
            raise ModelCallError(504, f"no reply within {self.timeout_sec:g}s") from exc

    async def extract_text(self, data: bytes, mime_type: str) -> str:
        contents = [
            _EXTRACT_PROMPT,
            types.Part.from_bytes(data=data, mime_type=mime_type),
        ]
        return await self.generate(contents, purpose=f"extract_text mime={mime_type} bytes={len(data)}")

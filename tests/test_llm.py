import asyncio
import time
import pytest

genai = pytest.importorskip("google.genai")
from google.genai import errors as genai_errors
from google.genai import types

from homework_bot.errors import ModelCallError
from homework_bot.llm import LLMClient


class _Resp:
    def __init__(self, text):
        self.text = text


class _Models:
    def __init__(self, behaviour):
        self.behaviour = behaviour
        self.calls: list[dict] = []

    def generate_content(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        return self.behaviour()


class _Client:
    def __init__(self, behaviour):
        self.models = _Models(behaviour)


def _client_with(monkeypatch, behaviour) -> _Client:
    client = _Client(behaviour)
    monkeypatch.setattr(LLMClient, "_client", lambda self: client)
    return client


def test_generate_returns_stripped_text(monkeypatch):
    client = _client_with(monkeypatch, lambda: _Resp('  {"a": 1}\n'))
    llm = LLMClient("key", model="test-model")
    assert asyncio.run(llm.generate(["prompt"])) == '{"a": 1}'
    call = client.models.calls[0]
    assert call["model"] == "test-model"
    assert call["contents"] == ["prompt"]


def test_empty_reply_is_empty_string(monkeypatch):
    _client_with(monkeypatch, lambda: _Resp(None))
    assert asyncio.run(LLMClient("key").generate(["prompt"])) == ""


def test_api_error_becomes_model_call_error(monkeypatch):
    def _fail():
        raise genai_errors.ServerError(503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}})

    _client_with(monkeypatch, _fail)
    with pytest.raises(ModelCallError) as info:
        asyncio.run(LLMClient("key").generate(["prompt"]))
    assert info.value.status == 503


def test_timeout_becomes_model_call_error(monkeypatch):
    def _slow():
        time.sleep(0.3)
        return _Resp("late")

    _client_with(monkeypatch, _slow)
    with pytest.raises(ModelCallError) as info:
        asyncio.run(LLMClient("key", timeout_sec=0.05).generate(["prompt"]))
    assert info.value.status == 504


def test_extract_text_sends_inline_data(monkeypatch):
    client = _client_with(monkeypatch, lambda: _Resp("1. rises"))
    out = asyncio.run(LLMClient("key").extract_text(b"\xff\xd8\xff", "image/jpeg"))
    assert out == "1. rises"
    contents = client.models.calls[0]["contents"]
    assert isinstance(contents[0], str)
    assert isinstance(contents[1], types.Part)
    assert contents[1].inline_data.mime_type == "image/jpeg"
    assert contents[1].inline_data.data == b"\xff\xd8\xff"

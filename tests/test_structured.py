import pytest
from homework_bot.errors import InvalidModelJSONError, ModelCallError, StructuredOutputError
from homework_bot.structured import extract_json, parse_model_json

def test_fenced_json_block():
    assert extract_json('```json\n{"a":1}\n```') == '{"a":1}'

def test_unfenced_input_unchanged():
    assert extract_json('{"a":1}') == '{"a":1}'

def test_fence_inside_noise():
    assert extract_json('noise ```{"a":1}``` more') == '{"a":1}'

def test_fence_without_language_tag():
    assert extract_json('```\n[1, 2]\n```') == "[1, 2]"

def test_unfenced_input_is_trimmed():
    assert extract_json('  \n{"a":1}\n ') == '{"a":1}'
    assert extract_json(None) == ""

def test_parse_model_json_fenced():
    assert parse_model_json('Here you go:\n```json\n{"73.1": {"1": "rises"}}\n```', what="answer key") == {
        "73.1": {"1": "rises"}
    }

def test_parse_failure_is_structured_output_error():
    with pytest.raises(InvalidModelJSONError) as info:
        parse_model_json("Sorry, I cannot help with that.", what="answer key")
    assert isinstance(info.value, StructuredOutputError)
    assert not isinstance(info.value, ModelCallError)
    assert "failed to parse answer key" in str(info.value)

def test_language_tag_glued_to_json():
    assert extract_json('```json{"a":1}```') == '{"a":1}'
    assert extract_json('```json[1, 2]\n```') == "[1, 2]"
    assert parse_model_json('```JSON{"73.1": {"1": "rises"}}```', what="answer key") == {"73.1": {"1": "rises"}}

import pytest
from homework_bot.normalize import normalize

@pytest.mark.parametrize(
    "raw",
    [
        "  Full-Time ",
        "FULL   TIME",
        "I’m “fine”,\n\tthanks",
        "",
        "already normal",
        "Mixed spaces  and\r\nlines",
    ],
)
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once

def test_case_and_whitespace():
    assert normalize("  Full-Time ") == "full-time"
    assert normalize("FULL   TIME") == "full time"
    assert normalize("full time") == normalize("FULL   TIME")

def test_hyphens_and_underscores_untouched():
    assert normalize("Full-Time_Job") == "full-time_job"

def test_quote_normalization():
    assert normalize("I’m") == normalize("I'm") == "i'm"
    assert normalize("“Hello”") == "\"hello\""
    assert normalize("‘a’ „b‟") == "'a' \"b\""

def test_newlines_collapse_to_single_space():
    assert normalize("1. rises\n\n2. goes\tout") == "1. rises 2. goes out"

def test_none_is_empty():
    assert normalize(None) == ""
    assert normalize("   \n ") == ""

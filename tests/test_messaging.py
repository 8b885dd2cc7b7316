import asyncio
import pytest

from homework_bot.messaging import send_with_retry, split_message
from tests.fakes import Outbox

def _sleeps():
    delays: list[float] = []

    async def _sleep(delay: float) -> None:
        delays.append(delay)

    return delays, _sleep

def test_retry_doubles_delay_and_succeeds():
    delays, sleep = _sleeps()
    out = Outbox(fail_times=2)
    asyncio.run(send_with_retry(out, "hello", attempts=3, base_delay=0.5, sleep=sleep))
    assert out.sent == ["hello"]
    assert out.attempts == 3
    assert delays == [0.5, 1.0]

def test_retry_gives_up_after_attempts():
    delays, sleep = _sleeps()
    out = Outbox(fail_times=5)
    with pytest.raises(ConnectionError):
        asyncio.run(send_with_retry(out, "hello", attempts=3, base_delay=1.0, sleep=sleep))
    assert out.attempts == 3
    assert delays == [1.0, 2.0]

def test_no_retry_on_success():
    delays, sleep = _sleeps()
    out = Outbox()
    asyncio.run(send_with_retry(out, "hello", sleep=sleep))
    assert out.attempts == 1
    assert delays == []

def test_long_text_is_chunked():
    text = "a" * 9000
    chunks = split_message(text)
    assert [len(c) for c in chunks] == [4000, 4000, 1000]
    assert "".join(chunks) == text
    out = Outbox()
    asyncio.run(send_with_retry(out, text))
    assert out.sent == chunks

def test_short_text_single_chunk():
    assert split_message("") == [""]
    assert split_message("hi") == ["hi"]

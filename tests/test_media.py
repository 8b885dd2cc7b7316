import pytest
from homework_bot.media import detect_mime_type, is_image_mime

@pytest.mark.parametrize(
    "data,expected",
    [
        (b"\xff\xd8\xff\xe0rest", "image/jpeg"),
        (b"\x89PNG\r\n\x1a\n", "image/png"),
        (b"GIF89a....", "image/gif"),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
        (b"%PDF-1.7\n", "application/pdf"),
    ],
)
def test_magic_bytes(data, expected):
    assert detect_mime_type(data) == expected

def test_extension_fallback():
    assert detect_mime_type(b"????", "photos/file_1.PNG") == "image/png"
    assert detect_mime_type(b"????", "documents/ex.pdf") == "application/pdf"

def test_unknown_defaults_to_jpeg():
    assert detect_mime_type(b"", None) == "image/jpeg"

def test_is_image_mime():
    assert is_image_mime("image/png")
    assert not is_image_mime("application/pdf")
    assert not is_image_mime(None)

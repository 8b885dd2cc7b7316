from __future__ import annotations

PDF_MIME = "application/pdf"

_IMAGE_EXTENSIONS = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}

def detect_mime_type(data: bytes, file_path: str | None = None) -> str:
    head = data[:12]
    if head[:2] == b"\xff\xd8":
        return "image/jpeg"
    if head[:4] == b"\x89PNG":
        return "image/png"
    if head[:4] == b"GIF8":
        return "image/gif"
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp"
    if head[:5] == b"%PDF-":
        return PDF_MIME
    if file_path:
        lower = file_path.lower()
        for ext, mime in _IMAGE_EXTENSIONS.items():
            if lower.endswith(ext):
                return mime
        if lower.endswith(".pdf"):
            return PDF_MIME
    # Gemini rejects application/octet-stream
    return "image/jpeg"

def is_image_mime(mime_type: str | None) -> bool:
    return bool(mime_type) and mime_type.startswith("image/")

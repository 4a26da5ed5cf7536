from __future__ import annotations

import re

from slugify import slugify

_TAG_RE = re.compile(r"<[^>]*>")
_SCRIPT_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_JS_PROTOCOL_RE = re.compile(r"javascript:", re.IGNORECASE)
_CONTROL_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_STRICT_RE = re.compile(r"[^\w\s',.-]|_", re.UNICODE)
_SPACES_RE = re.compile(r"\s+")
_KEY_RE = re.compile(r"[^a-zA-Z0-9_-]")
_EMOJI_RE = re.compile(
    "[\U0001F300-\U0001FAFF\u2600-\u26FF\u2700-\u27BF]"
)


def sanitize_text(value: str, max_length: int = 500) -> str:
    """Plain text only: markup, script bodies and control characters are removed."""

    text = _SCRIPT_RE.sub("", value)
    text = _TAG_RE.sub("", text)
    text = text[:max_length]
    text = _JS_PROTOCOL_RE.sub("", text)
    text = _CONTROL_RE.sub("", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.strip()


def sanitize_strict_text(value: str, max_length: int = 100) -> str:
    """Letters, digits, spaces and basic punctuation only (names)."""

    text = _STRICT_RE.sub("", value[:max_length])
    return _SPACES_RE.sub(" ", text).strip()


def sanitize_slug(value: str, max_length: int = 50) -> str:
    return slugify(value, max_length=max_length, word_boundary=False)


def sanitize_emoji(value: str) -> str:
    match = _EMOJI_RE.search(value)
    return match.group(0) if match else ""


def sanitize_key(value: str, max_length: int = 100) -> str:
    return _KEY_RE.sub("", value[:max_length]).strip()

import math
import re

_URL_RE = re.compile(r"https?://\S+")
_EMAIL_RE = re.compile(r"[\w.-]+@[\w.-]+\.\w+")
_DISALLOWED_RE = re.compile(r"[^\w\s.,!?;:'\"()\-]")


def normalize_text(text: str) -> str:
    return " ".join(text.strip().split())


def preprocess_text(text: str) -> str:
    if not text:
        return ""
    processed = normalize_text(text)
    processed = _URL_RE.sub("", processed)
    processed = _EMAIL_RE.sub("", processed)
    processed = _DISALLOWED_RE.sub("", processed)
    return normalize_text(processed)


def tokens(text: str) -> list[str]:
    return [token for token in text.split(" ") if token]


def split_lines(raw: str) -> list[str]:
    return [line for line in raw.splitlines() if line.strip()]


def is_header_safe(value: str) -> bool:
    return value.isascii() and value.isprintable()


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor

"""Input normalisation shared by the score services."""

from __future__ import annotations

import numbers
import re
from typing import Any, Optional
from urllib.parse import urlparse

from ..errors import (
    InvalidDifficulty,
    InvalidIdentifier,
    InvalidImageReference,
    InvalidNameLength,
    InvalidQuizId,
    InvalidScore,
)

WALLET_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 30

DEFAULT_MAX_SCORE = 20

# Largest value the score columns hold on every supported backend.
MAX_SCORE_LIMIT = 2**31 - 1

DIFFICULTIES = frozenset(
    {"easy", "medium", "hard", "beginner", "intermediate", "advanced"}
)

IMAGE_SCHEMES = frozenset({"http", "https", "ipfs"})


def normalize_identifier(identifier: Any) -> str:
    """Return the lowercase wallet address or raise ``InvalidIdentifier``."""

    if not isinstance(identifier, str):
        raise InvalidIdentifier("Wallet address is required")
    candidate = identifier.strip()
    if not WALLET_ADDRESS_RE.match(candidate):
        raise InvalidIdentifier(
            "Wallet address must be 0x followed by 40 hexadecimal characters"
        )
    return candidate.lower()


def validate_display_name(name: Any) -> str:
    if not isinstance(name, str):
        raise InvalidNameLength("Display name is required")
    normalized = name.strip()
    if not NAME_MIN_LENGTH <= len(normalized) <= NAME_MAX_LENGTH:
        raise InvalidNameLength(
            f"Display name must be between {NAME_MIN_LENGTH} and "
            f"{NAME_MAX_LENGTH} characters"
        )
    return normalized


def validate_image_ref(image_ref: Any) -> Optional[str]:
    """Return a cleaned image URI, ``None`` for empty input."""

    if image_ref is None:
        return None
    if not isinstance(image_ref, str):
        raise InvalidImageReference("Image reference must be a URI string")
    candidate = image_ref.strip()
    if not candidate:
        return None
    parsed = urlparse(candidate)
    if parsed.scheme.lower() not in IMAGE_SCHEMES or not parsed.netloc:
        raise InvalidImageReference(
            "Image reference must be an http(s) or ipfs URI"
        )
    return candidate


def _as_int(value: Any, field: str) -> int:
    # bool is an Integral; a checkbox value is not a score.
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidScore(f"{field} must be a number")
    if isinstance(value, numbers.Integral):
        return int(value)
    if not float(value).is_integer():
        raise InvalidScore(f"{field} must be a whole number")
    return int(value)


def validate_max_score(max_score: Any) -> int:
    if max_score is None:
        return DEFAULT_MAX_SCORE
    value = _as_int(max_score, "maxScore")
    if value <= 0:
        raise InvalidScore("maxScore must be positive")
    if value > MAX_SCORE_LIMIT:
        raise InvalidScore(f"maxScore must not exceed {MAX_SCORE_LIMIT}")
    return value


def validate_raw_score(raw_score: Any, max_score: int) -> int:
    if raw_score is None:
        raise InvalidScore("score is required")
    value = _as_int(raw_score, "score")
    if not 0 <= value <= max_score:
        raise InvalidScore(f"score must be between 0 and {max_score}")
    return value


def normalize_difficulty(difficulty: Any) -> str:
    if not isinstance(difficulty, str) or not difficulty.strip():
        raise InvalidDifficulty("difficulty is required")
    normalized = difficulty.strip().lower()
    if normalized not in DIFFICULTIES:
        raise InvalidDifficulty(
            f"difficulty must be one of: {', '.join(sorted(DIFFICULTIES))}"
        )
    return normalized


def validate_quiz_id(quiz_id: Any) -> str:
    if isinstance(quiz_id, int) and not isinstance(quiz_id, bool):
        quiz_id = str(quiz_id)
    if not isinstance(quiz_id, str) or not quiz_id.strip():
        raise InvalidQuizId("quizId is required")
    return quiz_id.strip()


def percentage_of(raw_score: int, max_score: int) -> float:
    return round(raw_score / max_score * 100, 2)


def clamp(value: int, lower: int, upper: Optional[int] = None) -> int:
    if value < lower:
        return lower
    if upper is not None and value > upper:
        return upper
    return value


__all__ = [
    "DEFAULT_MAX_SCORE",
    "DIFFICULTIES",
    "MAX_SCORE_LIMIT",
    "NAME_MAX_LENGTH",
    "NAME_MIN_LENGTH",
    "WALLET_ADDRESS_RE",
    "clamp",
    "normalize_difficulty",
    "normalize_identifier",
    "percentage_of",
    "validate_display_name",
    "validate_image_ref",
    "validate_max_score",
    "validate_quiz_id",
    "validate_raw_score",
]

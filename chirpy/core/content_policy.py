"""
Chirp content policy

Module: core.content_policy
Date: 2026-10-19
Version: 0.1.0

Length limit and profanity masking applied to chirp bodies before
they reach the store. Words are split on single spaces only, so tabs
and runs of spaces pass through untouched.
"""

from typing import Iterable

from .constants import MAX_CHIRP_LENGTH, PROFANE_WORDS, PROFANITY_MASK


class ContentPolicyError(Exception):
    """Base content policy error"""
    pass


class ChirpTooLongError(ContentPolicyError):
    """Chirp body exceeds the length limit"""
    pass


def mask_words(
    message: str,
    mask: str = PROFANITY_MASK,
    denylist: Iterable[str] = PROFANE_WORDS,
) -> str:
    """
    Replace every denylisted word with a mask

    Matching is case-insensitive and on whole words only.

    Args:
        message: Text to clean
        mask: Replacement for each matching word
        denylist: Words to mask

    Returns:
        Cleaned text
    """
    banned = {word.lower() for word in denylist}
    words = message.split(" ")
    return " ".join(mask if word.lower() in banned else word for word in words)


def validate_chirp(body: str) -> str:
    """
    Validate and clean a chirp body

    Args:
        body: Raw chirp text

    Returns:
        Masked chirp text

    Raises:
        ChirpTooLongError: If body is longer than MAX_CHIRP_LENGTH
    """
    if len(body) > MAX_CHIRP_LENGTH:
        raise ChirpTooLongError(
            f"Chirp is too long ({len(body)} > {MAX_CHIRP_LENGTH} characters)"
        )
    return mask_words(body)

"""
Transcript normalization and wake-word stripping.

Detects command utterances like:
- "show me starbucks"
- "search for ghost towns"
- "navigate to crater lake"
- "find please the nearest gas"
- "hey voyager, show me coffee" / "voyager coffee"

and returns the free-text query after the trigger, or None when the
utterance is not (yet) an actionable command. Live speech recognition
delivers partial transcripts, so bare verbs and trigger-only fragments
are rejected rather than routed early.
"""

import re
from typing import Optional, Tuple

_WHITESPACE = re.compile(r"\s+")

# Multi-word triggers are checked first, longest first
MULTI_WORD_TRIGGERS: Tuple[str, ...] = tuple(sorted(
    (
        "navigate to",
        "go to",
        "take me to",
        "search for",
        "find me",
        "show me",
        "find nearest",
        "show nearest",
    ),
    key=len,
    reverse=True,
))

SINGLE_WORD_TRIGGERS: Tuple[str, ...] = ("show", "find", "search", "go", "navigate", "open")

# Addressing the assistant by name; the command may follow with or without a trigger
ASSISTANT_NAMES: Tuple[str, ...] = ("hey voyager", "ok voyager", "voyager")

FILLER_WORDS = frozenset({"me", "please", "uh", "um", "the"})

# Trailing proximity phrases; searches are already biased toward the user
PROXIMITY_SUFFIXES: Tuple[str, ...] = ("near me", "nearby", "around me", "close to me")


def normalize_transcript(raw: str) -> str:
    """Lowercase, trim, and collapse every whitespace run to one space."""
    return _WHITESPACE.sub(" ", raw).strip().lower()


def _strip_fillers(rest: str) -> str:
    tokens = rest.split()
    while tokens and tokens[0] in FILLER_WORDS:
        tokens.pop(0)
    return " ".join(tokens)


def _strip_proximity(rest: str) -> str:
    for suffix in PROXIMITY_SUFFIXES:
        if rest.endswith(" " + suffix):
            return rest[: -len(suffix) - 1].strip()
    return rest


def _remainder(text: str, trigger: str) -> Optional[str]:
    rest = _strip_fillers(text[len(trigger):])
    rest = _strip_proximity(rest)
    return rest or None


def strip_wake_word(text: str) -> Optional[str]:
    """
    Strip the command trigger and leading fillers from a normalized utterance.

    Args:
        text: Normalized transcript (see normalize_transcript)

    Returns:
        The remaining query, or None if the utterance is not a command
    """
    text = normalize_transcript(text)

    addressed = False
    for name in ASSISTANT_NAMES:
        if text == name:
            return None
        if text.startswith(name + " ") or text.startswith(name + ","):
            text = text[len(name):].lstrip(" ,")
            addressed = True
            break

    for trigger in MULTI_WORD_TRIGGERS:
        if text == trigger:
            return None
        if text.startswith(trigger + " "):
            return _remainder(text, trigger)

    for trigger in SINGLE_WORD_TRIGGERS:
        if text == trigger:
            # verb alone, almost always a partial transcript
            return None
        if text.startswith(trigger + " "):
            return _remainder(text, trigger)

    if addressed:
        return _remainder(text, "")
    return None

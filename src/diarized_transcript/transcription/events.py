#!/usr/bin/env python3
"""
Recognition Payload Parsing
---------------------------
Turns the detailed JSON returned by Azure Speech into word-level events.

Each "recognized" result carries a payload shaped like::

    {"NBest": [{"Words": [{"Word": "hello", "SpeakerId": "Guest-1",
                           "Offset": 0, "Duration": 10000000}]}]}

Offsets and durations are in ticks of 100 nanoseconds. Only the top-ranked
hypothesis (NBest[0]) is used.

Malformed entries are skipped with a warning by default; with ``strict=True``
a PayloadError is raised instead.
"""
import json
import logging
from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, List, Optional, Tuple

from diarized_transcript.diarization.speakers import UNKNOWN_SPEAKER
from diarized_transcript.exceptions import PayloadError

logger = logging.getLogger(__name__)

# 100ns ticks per second
TICKS_PER_SECOND = 10_000_000


def ticks_to_seconds(ticks: float) -> float:
    """Convert a 100ns tick count to seconds"""
    return ticks / TICKS_PER_SECOND


@dataclass(frozen=True)
class WordEvent:
    """A single recognized word with speaker and timing information"""
    speaker_id: str
    text: str
    start: float  # seconds
    end: float    # seconds

    @property
    def duration(self) -> float:
        return self.end - self.start

    @classmethod
    def from_ticks(cls, speaker_id: str, text: str, offset: float, duration: float) -> "WordEvent":
        return cls(
            speaker_id=speaker_id,
            text=text,
            start=ticks_to_seconds(offset),
            end=ticks_to_seconds(offset + duration),
        )


@dataclass(frozen=True)
class RecognizedUtterance:
    """One recognized-speech result: the raw payload and its parsed words"""
    payload: Dict[str, Any]
    words: Tuple[WordEvent, ...]

    @property
    def start(self) -> Optional[float]:
        return self.words[0].start if self.words else None

    @property
    def end(self) -> Optional[float]:
        return self.words[-1].end if self.words else None


def _reject(message: str, strict: bool) -> None:
    if strict:
        raise PayloadError(message)
    logger.warning(f"Skipping malformed payload entry: {message}")


def _is_number(value: Any) -> bool:
    # bool is a subclass of int but never a valid tick count
    return isinstance(value, Real) and not isinstance(value, bool)


def decode_payload(text: Optional[str], strict: bool = False) -> Optional[Dict[str, Any]]:
    """
    Decode the JSON text of a recognition result

    Args:
        text: Raw JSON string from the service
        strict: Raise PayloadError instead of returning None on bad input

    Returns:
        Decoded payload, or None when it was skipped
    """
    if not text:
        _reject("empty result payload", strict)
        return None

    try:
        payload = json.loads(text)
    except ValueError as e:
        _reject(f"invalid JSON ({e})", strict)
        return None

    if not isinstance(payload, dict):
        _reject(f"expected a JSON object, got {type(payload).__name__}", strict)
        return None

    return payload


def parse_word(entry: Any, strict: bool = False) -> Optional[WordEvent]:
    """
    Parse one entry of a hypothesis' "Words" list

    Args:
        entry: Word object from the payload
        strict: Raise PayloadError instead of returning None on bad input

    Returns:
        WordEvent, or None when the entry was skipped
    """
    if not isinstance(entry, dict):
        _reject(f"word entry is not an object: {entry!r}", strict)
        return None

    text = entry.get("Word")
    offset = entry.get("Offset")
    duration = entry.get("Duration")
    speaker_id = entry.get("SpeakerId") or UNKNOWN_SPEAKER

    if not isinstance(text, str):
        _reject(f"word entry without text: {entry!r}", strict)
        return None
    if not _is_number(offset) or not _is_number(duration):
        _reject(f"word {text!r} has no usable Offset/Duration", strict)
        return None
    if not isinstance(speaker_id, str):
        _reject(f"word {text!r} has a non-string SpeakerId", strict)
        return None

    return WordEvent.from_ticks(speaker_id, text, offset, duration)


def parse_words(payload: Dict[str, Any], strict: bool = False) -> Optional[List[WordEvent]]:
    """
    Extract the words of the top-ranked hypothesis

    Args:
        payload: Decoded recognition result
        strict: Raise PayloadError instead of skipping bad entries

    Returns:
        Words in document order, or None when the whole utterance was skipped
    """
    nbest = payload.get("NBest")
    if not isinstance(nbest, list) or not nbest:
        _reject("result has no NBest hypotheses", strict)
        return None

    best = nbest[0]
    words = best.get("Words") if isinstance(best, dict) else None
    if not isinstance(words, list):
        _reject("top hypothesis has no Words list", strict)
        return None

    if len(nbest) > 1:
        logger.debug(f"Ignoring {len(nbest) - 1} lower-ranked hypotheses")

    parsed = []
    for entry in words:
        word = parse_word(entry, strict=strict)
        if word is not None:
            parsed.append(word)
    return parsed

#!/usr/bin/env python3
"""
Recognition Event Aggregator
----------------------------
Collects recognized-speech results into a speaker-labelled transcript.

The speech SDK delivers results on its own dispatch thread, so the registry and
buffer are lock-guarded while the session runs. Once the session has drained,
``freeze()`` hands an immutable Transcript to whoever renders it; the
aggregator refuses further events after that point.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Iterator, List, Mapping, Optional, Tuple

from diarized_transcript.diarization.speakers import SpeakerRegistry
from diarized_transcript.transcription.events import (
    RecognizedUtterance,
    WordEvent,
    decode_payload,
    parse_words,
)

logger = logging.getLogger(__name__)


class TranscriptBuffer:
    """Append-only list of utterances in arrival order"""

    def __init__(self):
        self._utterances: List[RecognizedUtterance] = []
        self._lock = threading.Lock()

    def append(self, utterance: RecognizedUtterance) -> None:
        with self._lock:
            self._utterances.append(utterance)

    def snapshot(self) -> Tuple[RecognizedUtterance, ...]:
        with self._lock:
            return tuple(self._utterances)

    def __len__(self) -> int:
        with self._lock:
            return len(self._utterances)


@dataclass(frozen=True)
class Transcript:
    """Finished transcript, safe to read from any thread"""
    utterances: Tuple[RecognizedUtterance, ...]
    speakers: Mapping[str, str]

    def words(self) -> Iterator[WordEvent]:
        """All words in arrival order, then document order"""
        for utterance in self.utterances:
            yield from utterance.words

    def label_for(self, speaker_id: str) -> str:
        return self.speakers[speaker_id]

    @property
    def word_count(self) -> int:
        return sum(len(u.words) for u in self.utterances)

    @property
    def duration(self) -> float:
        return max((w.end for w in self.words()), default=0.0)


class EventAggregator:
    """Receives recognition results and builds the transcript state"""

    def __init__(self, strict: bool = False, registry: Optional[SpeakerRegistry] = None):
        """
        Args:
            strict: Raise PayloadError on malformed payloads instead of skipping them
            registry: Speaker registry to fill (a new one by default)
        """
        self.strict = strict
        # An empty registry is falsy, so test for None explicitly
        self.registry = registry if registry is not None else SpeakerRegistry()
        self.buffer = TranscriptBuffer()

        self.word_count = 0
        self.skipped_count = 0
        self.no_match_count = 0

        self._frozen = False
        self._state_lock = threading.Lock()

    @property
    def utterance_count(self) -> int:
        return len(self.buffer)

    def handle_result_json(self, text: Optional[str]) -> Optional[RecognizedUtterance]:
        """
        Process the JSON payload of one recognized-speech event

        Args:
            text: Detailed JSON result from the service

        Returns:
            The stored utterance, or None if the payload was skipped
        """
        self._check_open()

        payload = decode_payload(text, strict=self.strict)
        words = parse_words(payload, strict=self.strict) if payload is not None else None
        if words is None:
            with self._state_lock:
                self.skipped_count += 1
            return None

        for word in words:
            label = self.registry.label_for(word.speaker_id)
            logger.info(f"- **{label}** ({word.start:.2f}s - {word.end:.2f}s): {word.text}")

        utterance = RecognizedUtterance(payload=payload, words=tuple(words))
        self.buffer.append(utterance)
        with self._state_lock:
            self.word_count += len(words)
        return utterance

    def record_no_match(self) -> None:
        """Count a result in which the service heard audio but recognized no speech"""
        self._check_open()
        with self._state_lock:
            self.no_match_count += 1

    def freeze(self) -> Transcript:
        """
        Stop accepting events and return the finished transcript

        Must only be called once the recognition session has drained.
        """
        with self._state_lock:
            self._frozen = True
        transcript = Transcript(
            utterances=self.buffer.snapshot(),
            speakers=self.registry.snapshot(),
        )
        logger.info(f"Collected {transcript.word_count} words in {len(transcript.utterances)} utterances "
                    f"from {len(transcript.speakers)} speakers")
        if self.skipped_count:
            logger.warning(f"Skipped {self.skipped_count} malformed results")
        return transcript

    def _check_open(self) -> None:
        with self._state_lock:
            if self._frozen:
                raise RuntimeError("Recognition event received after the transcript was frozen")

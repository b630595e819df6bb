#!/usr/bin/env python3
"""
Speaker Registry
----------------
Assigns human-readable labels to the opaque speaker ids returned by Azure.

Labels are handed out in order of first appearance ("Speaker 1" for the first
id seen, "Speaker 2" for the next new one, ...). Once an id has a label it
keeps it for the rest of the run.
"""
import logging
import threading
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

# Key used for words that arrive without a SpeakerId
UNKNOWN_SPEAKER = "Unknown"

LABEL_TEMPLATE = "Speaker {index}"


class SpeakerRegistry:
    """First-seen ordered mapping from speaker id to display label"""

    def __init__(self):
        self._labels: Dict[str, str] = {}
        self._lock = threading.Lock()

    def label_for(self, speaker_id: Optional[str]) -> str:
        """
        Look up the label for a speaker id, assigning the next one if it is new

        Args:
            speaker_id: Speaker id from the payload (None means unknown)

        Returns:
            Display label such as "Speaker 2"
        """
        key = speaker_id or UNKNOWN_SPEAKER
        with self._lock:
            label = self._labels.get(key)
            if label is None:
                label = LABEL_TEMPLATE.format(index=len(self._labels) + 1)
                self._labels[key] = label
                logger.debug(f"New speaker {key!r} labelled {label!r}")
            return label

    def get(self, speaker_id: Optional[str]) -> Optional[str]:
        """Look up a label without assigning one"""
        with self._lock:
            return self._labels.get(speaker_id or UNKNOWN_SPEAKER)

    def items(self) -> List[Tuple[str, str]]:
        """(speaker id, label) pairs in assignment order"""
        with self._lock:
            return list(self._labels.items())

    def snapshot(self) -> Mapping[str, str]:
        """Read-only copy of the current assignments"""
        with self._lock:
            return MappingProxyType(dict(self._labels))

    def __contains__(self, speaker_id) -> bool:
        with self._lock:
            return speaker_id in self._labels

    def __len__(self) -> int:
        with self._lock:
            return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter([speaker_id for speaker_id, _ in self.items()])

    def __repr__(self) -> str:
        return f"SpeakerRegistry({dict(self.items())!r})"

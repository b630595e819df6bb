"""
Speaker Diarization Module
------------------------
Maps the speaker ids reported by the speech service to stable display labels.

Diarization itself is done by Azure; this module only keeps track of which
speaker was heard first so that labels read "Speaker 1", "Speaker 2", ...
"""
from diarized_transcript.diarization.speakers import UNKNOWN_SPEAKER, SpeakerRegistry

__all__ = ["SpeakerRegistry", "UNKNOWN_SPEAKER"]

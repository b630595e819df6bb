"""
Diarized Transcript
-------------------
Transcribe a WAV file with Azure Speech and write a per-speaker Markdown transcript.
"""
from diarized_transcript.config import Settings, load_settings
from diarized_transcript.exceptions import (
    ConfigurationError,
    PayloadError,
    RecognitionError,
    RecognitionTimeout,
    TranscriptError,
)

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "load_settings",
    "TranscriptError",
    "ConfigurationError",
    "RecognitionError",
    "RecognitionTimeout",
    "PayloadError",
]

"""
Transcription Module
--------------------
Azure Speech recognition session and aggregation of its results.

The SDK-backed session lives in ``transcription.azure_speech`` and is not
imported here.
"""
from diarized_transcript.transcription.aggregator import EventAggregator, Transcript, TranscriptBuffer
from diarized_transcript.transcription.events import RecognizedUtterance, WordEvent

__all__ = ["EventAggregator", "Transcript", "TranscriptBuffer", "RecognizedUtterance", "WordEvent"]

"""
Errors raised while producing a transcript.
"""


class TranscriptError(Exception):
    """Base class for all transcript errors"""


class ConfigurationError(TranscriptError):
    """Required configuration is missing or invalid"""


class RecognitionError(TranscriptError):
    """The speech service failed to build or run a recognition session"""


class RecognitionTimeout(RecognitionError):
    """The recognition session did not report completion in time"""


class PayloadError(TranscriptError):
    """A recognition result payload is missing fields or has the wrong shape"""

#!/usr/bin/env python3
"""
Azure Speech Recognition Session
--------------------------------
Drives a continuous recognition session against Azure Cognitive Services Speech.

The recognizer is configured for dictation with word-level timestamps and the
detailed JSON output format, so every recognized result carries an NBest list
with per-word offsets, durations and speaker ids. Results are forwarded to an
EventAggregator as they arrive.

Speaker ids are read from each word's ``SpeakerId``. A plain SpeechRecognizer
does not diarize, so against the live service those ids are normally absent
and every word lands on the "Unknown" speaker; per-speaker labels need a
diarization-capable recognizer such as
``speechsdk.transcription.ConversationTranscriber``.

Completion is signalled by the SDK itself: the session waits for
``session_started`` and then for ``session_stopped`` (or a cancellation) before
stopping recognition, each bounded by a timeout, so every result has been
delivered by the time ``run()`` returns.
"""
import logging
import threading
import time
from typing import Any, Callable, Optional

import azure.cognitiveservices.speech as speechsdk

from diarized_transcript.config import Settings
from diarized_transcript.exceptions import RecognitionError, RecognitionTimeout
from diarized_transcript.transcription.aggregator import EventAggregator

logger = logging.getLogger(__name__)


class AzureSpeechSession:
    """Continuous recognition of a single WAV file"""

    def __init__(self, settings: Settings,
                 recognizer_factory: Optional[Callable[[], Any]] = None):
        """
        Initialize the recognition session

        Args:
            settings: Run settings (credentials, audio file, language, timeouts)
            recognizer_factory: Callable returning a recognizer; defaults to
                building a SpeechRecognizer from the settings
        """
        self.settings = settings
        self.recognizer_factory = recognizer_factory or self.build_recognizer

        self._started = threading.Event()
        self._finished = threading.Event()
        self._failure: Optional[BaseException] = None
        self._session_id: Optional[str] = None

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    def build_speech_config(self) -> "speechsdk.SpeechConfig":
        """Create the SpeechConfig for dictation with detailed word timings"""
        speech_config = speechsdk.SpeechConfig(
            subscription=self.settings.speech_key,
            region=self.settings.service_region,
        )
        speech_config.speech_recognition_language = self.settings.language
        speech_config.request_word_level_timestamps()
        speech_config.enable_dictation()
        speech_config.output_format = speechsdk.OutputFormat.Detailed
        return speech_config

    def build_recognizer(self) -> "speechsdk.SpeechRecognizer":
        """
        Create a SpeechRecognizer reading from the configured WAV file

        Raises:
            RecognitionError: the SDK rejected the configuration or audio source
        """
        try:
            speech_config = self.build_speech_config()
            audio_config = speechsdk.audio.AudioConfig(filename=str(self.settings.sound_file))
            recognizer = speechsdk.SpeechRecognizer(
                speech_config=speech_config,
                audio_config=audio_config,
            )
        except (RuntimeError, ValueError) as e:
            raise RecognitionError(f"Failed to create speech recognizer: {e}") from e

        logger.info(f"Speech recognizer created for {self.settings.sound_file} "
                    f"(region: {self.settings.service_region}, language: {self.settings.language})")
        return recognizer

    def run(self, aggregator: EventAggregator) -> None:
        """
        Recognize the whole file, feeding results to the aggregator

        Blocks until the service reports the session finished.

        Args:
            aggregator: Receives each recognized result

        Raises:
            RecognitionError: the recognizer failed or the service cancelled with an error
            RecognitionTimeout: the session did not start or finish in time
            PayloadError: a malformed result arrived and the aggregator is strict
        """
        self._started.clear()
        self._finished.clear()
        self._failure = None

        recognizer = self.recognizer_factory()
        self._connect(recognizer, aggregator)

        start_time = time.time()
        logger.info("Starting transcription and diarization...")
        try:
            recognizer.start_continuous_recognition()
        except RuntimeError as e:
            raise RecognitionError(f"Failed to start continuous recognition: {e}") from e

        try:
            if not self._started.wait(self.settings.start_timeout):
                raise RecognitionTimeout(
                    f"Recognition session did not start within {self.settings.start_timeout:.0f}s")

            if not self._finished.wait(self.settings.session_timeout):
                raise RecognitionTimeout(
                    f"Recognition did not finish within {self.settings.session_timeout:.0f}s")
        finally:
            self._stop(recognizer)

        if self._failure is not None:
            raise self._failure

        logger.info(f"Transcription completed in {time.time() - start_time:.2f}s")

    def _connect(self, recognizer: Any, aggregator: EventAggregator) -> None:
        recognizer.recognized.connect(lambda evt: self._on_recognized(evt, aggregator))
        recognizer.session_started.connect(self._on_session_started)
        recognizer.session_stopped.connect(self._on_session_stopped)
        recognizer.canceled.connect(self._on_canceled)

    def _stop(self, recognizer: Any) -> None:
        try:
            recognizer.stop_continuous_recognition()
        except RuntimeError as e:
            # Only surface a stop failure when nothing else went wrong
            logger.error(f"Failed to stop continuous recognition: {e}")
            if self._failure is None:
                self._failure = RecognitionError(f"Failed to stop continuous recognition: {e}")

    def _fail(self, error: BaseException) -> None:
        if self._failure is None:
            self._failure = error
        # A session can fail before it reports starting
        self._started.set()
        self._finished.set()

    def _on_recognized(self, evt: Any, aggregator: EventAggregator) -> None:
        result = evt.result
        try:
            if result.reason == speechsdk.ResultReason.RecognizedSpeech:
                aggregator.handle_result_json(result.json)
            elif result.reason == speechsdk.ResultReason.NoMatch:
                logger.debug("No speech recognized in segment")
                aggregator.record_no_match()
            else:
                logger.debug(f"Ignoring result with reason {result.reason}")
        except Exception as e:
            # Runs on the SDK dispatch thread; hand the error to run()
            logger.error(f"Error handling recognition result: {e}")
            self._fail(e)

    def _on_session_started(self, evt: Any) -> None:
        self._session_id = getattr(evt, "session_id", None)
        logger.info(f"Recognition session started: {self._session_id}")
        self._started.set()

    def _on_session_stopped(self, evt: Any) -> None:
        logger.info(f"Recognition session stopped: {getattr(evt, 'session_id', None)}")
        self._finished.set()

    def _on_canceled(self, evt: Any) -> None:
        details = evt.cancellation_details
        if details.reason == speechsdk.CancellationReason.EndOfStream:
            logger.info("Reached end of audio stream")
            return

        logger.error(f"Recognition canceled: {details.reason} - {details.error_details}")
        self._fail(RecognitionError(f"Recognition canceled ({details.reason}): {details.error_details}"))

#!/usr/bin/env python3
"""
Transcript Pipeline
-------------------
Runs a recognition session and turns its results into a Markdown transcript.

Steps:
1. Stream recognition results from Azure Speech into an EventAggregator
2. Freeze the aggregated state once the session has finished
3. Render the transcript to the output file (and optionally the raw results to JSON)
"""
import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from diarized_transcript.config import Settings
from diarized_transcript.output.files import atomic_write_text
from diarized_transcript.output.markdown import TranscriptRenderer
from diarized_transcript.transcription.aggregator import EventAggregator, Transcript

logger = logging.getLogger(__name__)


@dataclass
class ProcessingResult:
    """Container for the outcome of a transcription run"""
    output_path: str
    transcript: Transcript
    num_words: int = 0
    num_utterances: int = 0
    speakers: Dict[str, str] = field(default_factory=dict)
    skipped_results: int = 0
    processing_time: float = 0.0
    session_id: Optional[str] = None
    raw_output_path: Optional[str] = None

    @property
    def num_speakers(self) -> int:
        return len(self.speakers)


class TranscriptPipeline:
    """End-to-end transcription of one audio file"""

    def __init__(self, settings: Settings, session=None, renderer: Optional[TranscriptRenderer] = None):
        """
        Initialize the pipeline

        Args:
            settings: Run settings
            session: Recognition session (or None to create an AzureSpeechSession)
            renderer: Markdown renderer (or None to create default)
        """
        self.settings = settings
        if session is None:
            # Imported here so the SDK is only loaded when a real session is needed
            from diarized_transcript.transcription.azure_speech import AzureSpeechSession
            session = AzureSpeechSession(settings)
        self.session = session
        self.renderer = renderer or TranscriptRenderer()

    def process(self) -> ProcessingResult:
        """
        Transcribe the configured sound file and write the transcript

        Returns:
            ProcessingResult describing the written output
        """
        start_time = time.time()

        aggregator = EventAggregator(strict=self.settings.strict_payloads)
        self.session.run(aggregator)
        transcript = aggregator.freeze()

        # Raw results go first so a failure there leaves no transcript behind
        raw_output_path = None
        if self.settings.raw_output_file:
            raw_output_path = str(self.save_raw_results(transcript, self.settings.raw_output_file))

        logger.info("Transcription completed. Writing to output file...")
        self.renderer.write(transcript, self.settings.output_file)

        processing_time = time.time() - start_time
        audio_duration = transcript.duration
        processing_ratio = processing_time / audio_duration if audio_duration > 0 else 0

        logger.info(f"Complete processing finished in {processing_time:.2f}s for {audio_duration:.2f}s audio "
                    f"(processing ratio: {processing_ratio:.2f}x)")

        return ProcessingResult(
            output_path=str(self.settings.output_file),
            transcript=transcript,
            num_words=transcript.word_count,
            num_utterances=len(transcript.utterances),
            speakers=dict(transcript.speakers),
            skipped_results=aggregator.skipped_count,
            processing_time=processing_time,
            session_id=getattr(self.session, "session_id", None),
            raw_output_path=raw_output_path,
        )

    def save_raw_results(self, transcript: Transcript, path: Path) -> Path:
        """
        Save the raw recognition payloads and speaker labels as JSON

        Args:
            transcript: Frozen transcript
            path: JSON file to write

        Returns:
            Path of the written file
        """
        path = Path(path)
        serializable_result = {
            "sound_file": str(self.settings.sound_file),
            "language": self.settings.language,
            "speakers": dict(transcript.speakers),
            "results": [utterance.payload for utterance in transcript.utterances],
            "processed_at": time.strftime("%Y-%m-%d %H:%M:%S"),
        }
        atomic_write_text(path, json.dumps(serializable_result, indent=2, ensure_ascii=False) + "\n")

        logger.info(f"Raw results saved to: {path}")
        return path

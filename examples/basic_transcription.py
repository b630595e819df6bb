#!/usr/bin/env python3
"""
Basic Diarized Transcript Example
---------------------------------
Demonstrates how to run the pipeline from Python instead of the CLI.
"""
import logging

from diarized_transcript.config import load_env_file, load_settings
from diarized_transcript.exceptions import ConfigurationError
from diarized_transcript.pipeline.transcript_pipeline import TranscriptPipeline

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    """Transcribe SOUND_FILE into OUTPUT_FILE"""
    load_env_file()

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        logger.error("Set AZURE_SPEECH_KEY, AZURE_SERVICE_REGION, SOUND_FILE and OUTPUT_FILE")
        return

    result = TranscriptPipeline(settings).process()

    print(f"Transcribed {result.num_words} words from {result.num_speakers} speakers")
    for speaker_id, label in result.speakers.items():
        print(f"  {label}: {speaker_id}")
    print(f"Transcript saved to: {result.output_path}")


if __name__ == "__main__":
    main()

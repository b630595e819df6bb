#!/usr/bin/env python3
"""
Diarized Transcript CLI
-----------------------
Command-line entry point. All run settings come from environment variables
(optionally loaded from a .env file); see diarized_transcript.config.
"""
import sys
import argparse
import logging

from diarized_transcript.config import load_env_file, load_settings
from diarized_transcript.exceptions import ConfigurationError, TranscriptError
from diarized_transcript.pipeline.transcript_pipeline import TranscriptPipeline

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Transcribe a WAV file with Azure Speech and write a per-speaker Markdown transcript. "
                    "Requires AZURE_SPEECH_KEY, AZURE_SERVICE_REGION, SOUND_FILE and OUTPUT_FILE.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--env-file",
        help="dotenv file to load before reading the environment (default: search for .env)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv=None):
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT
    )

    try:
        load_env_file(args.env_file)
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    if not settings.sound_file.is_file():
        logger.error(f"Audio file not found: {settings.sound_file}")
        return 1

    try:
        pipeline = TranscriptPipeline(settings)
        result = pipeline.process()
    except TranscriptError as e:
        logger.error(f"Transcription failed: {e}")
        return 1
    except OSError as e:
        logger.error(f"Could not write output: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Error processing audio: {e}")
        return 1

    logger.info(f"Found {result.num_speakers} speakers and {result.num_words} words")
    logger.info(f"Output written to {result.output_path}")
    if result.raw_output_path:
        logger.info(f"Raw results saved to: {result.raw_output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

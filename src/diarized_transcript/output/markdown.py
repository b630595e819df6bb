#!/usr/bin/env python3
"""
Markdown Transcript Renderer
----------------------------
Writes a speaker-labelled transcript as one Markdown bullet per word:

    - **Speaker 1** (0.00s - 1.00s): hello

Words keep the order in which the service delivered them.
"""
import logging
from pathlib import Path
from typing import Iterator, List, Union

from diarized_transcript.output.files import atomic_write_text
from diarized_transcript.transcription.aggregator import Transcript
from diarized_transcript.transcription.events import WordEvent

logger = logging.getLogger(__name__)

LINE_TEMPLATE = "- **{label}** ({start:.2f}s - {end:.2f}s): {text}"


def format_line(label: str, word: WordEvent) -> str:
    """Format a single word as a Markdown bullet"""
    return LINE_TEMPLATE.format(label=label, start=word.start, end=word.end, text=word.text)


class TranscriptRenderer:
    """Renders a finished Transcript to Markdown"""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def render_lines(self, transcript: Transcript) -> Iterator[str]:
        for word in transcript.words():
            yield format_line(transcript.label_for(word.speaker_id), word)

    def render(self, transcript: Transcript) -> str:
        """
        Render the whole transcript

        Args:
            transcript: Frozen transcript

        Returns:
            Markdown text, newline-terminated unless empty
        """
        lines: List[str] = list(self.render_lines(transcript))
        return "\n".join(lines) + "\n" if lines else ""

    def write(self, transcript: Transcript, output_path: Union[str, Path]) -> int:
        """
        Write the transcript to a file

        The file is written to a temporary sibling first and moved into place,
        so a failure never leaves a partial transcript behind.

        Args:
            transcript: Frozen transcript
            output_path: Markdown file to create or replace

        Returns:
            Number of lines written

        Raises:
            OSError: the file could not be written
        """
        lines = list(self.render_lines(transcript))
        text = "".join(line + "\n" for line in lines)
        written = atomic_write_text(output_path, text, encoding=self.encoding)

        logger.info(f"Output written to {written} ({len(lines)} lines)")
        return len(lines)

#!/usr/bin/env python3
"""
Configuration
-------------
Environment-based settings for a transcription run.

Required variables:
    AZURE_SPEECH_KEY      Speech resource subscription key
    AZURE_SERVICE_REGION  Speech resource region, e.g. "westeurope"
    SOUND_FILE            WAV file to transcribe
    OUTPUT_FILE           Markdown file to write

Optional variables:
    SPEECH_LANGUAGE        Recognition language (default "en-US")
    SESSION_START_TIMEOUT  Seconds to wait for the session to start (default 30)
    SESSION_TIMEOUT        Seconds to wait for recognition to finish (default 3600)
    STRICT_PAYLOADS        Abort on malformed results instead of skipping them
    RAW_OUTPUT_FILE        Also save the raw recognition results as JSON
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from diarized_transcript.exceptions import ConfigurationError

REQUIRED_VARIABLES = (
    "AZURE_SPEECH_KEY",
    "AZURE_SERVICE_REGION",
    "SOUND_FILE",
    "OUTPUT_FILE",
)

DEFAULT_LANGUAGE = "en-US"
DEFAULT_START_TIMEOUT = 30.0
DEFAULT_SESSION_TIMEOUT = 3600.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Settings for a single transcription run"""
    speech_key: str
    service_region: str
    sound_file: Path
    output_file: Path
    language: str = DEFAULT_LANGUAGE
    start_timeout: float = DEFAULT_START_TIMEOUT
    session_timeout: float = DEFAULT_SESSION_TIMEOUT
    strict_payloads: bool = False
    raw_output_file: Optional[Path] = None

    def __repr__(self) -> str:
        # Keep the subscription key out of logs and tracebacks
        return (f"Settings(service_region={self.service_region!r}, sound_file={str(self.sound_file)!r}, "
                f"output_file={str(self.output_file)!r}, language={self.language!r})")


def load_env_file(path: Optional[str] = None) -> bool:
    """
    Load variables from a dotenv file without overriding the environment

    Args:
        path: Explicit file to load (default: search for ".env")

    Returns:
        True if a file was found and loaded

    Raises:
        ConfigurationError: an explicit path does not exist
    """
    if path:
        if not Path(path).is_file():
            raise ConfigurationError(f"Environment file not found: {path}")
        return load_dotenv(path)
    return load_dotenv(find_dotenv(usecwd=True))


def _parse_seconds(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def _parse_flag(environ: Mapping[str, str], name: str) -> bool:
    raw = environ.get(name, "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        Validated settings

    Raises:
        ConfigurationError: a required variable is unset or a value is invalid
    """
    environ = os.environ if environ is None else environ

    missing = [name for name in REQUIRED_VARIABLES if not environ.get(name, "").strip()]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    raw_output = environ.get("RAW_OUTPUT_FILE", "").strip()

    return Settings(
        speech_key=environ["AZURE_SPEECH_KEY"].strip(),
        service_region=environ["AZURE_SERVICE_REGION"].strip(),
        sound_file=Path(environ["SOUND_FILE"]),
        output_file=Path(environ["OUTPUT_FILE"]),
        language=environ.get("SPEECH_LANGUAGE", "").strip() or DEFAULT_LANGUAGE,
        start_timeout=_parse_seconds(environ, "SESSION_START_TIMEOUT", DEFAULT_START_TIMEOUT),
        session_timeout=_parse_seconds(environ, "SESSION_TIMEOUT", DEFAULT_SESSION_TIMEOUT),
        strict_payloads=_parse_flag(environ, "STRICT_PAYLOADS"),
        raw_output_file=Path(raw_output) if raw_output else None,
    )

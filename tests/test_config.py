#!/usr/bin/env python3
"""
Tests for environment configuration
"""
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

# Add the src directory to the path to import the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from diarized_transcript.config import (
    DEFAULT_LANGUAGE,
    DEFAULT_SESSION_TIMEOUT,
    load_env_file,
    load_settings,
)
from diarized_transcript.exceptions import ConfigurationError

REQUIRED_ENV = {
    "AZURE_SPEECH_KEY": "secret-key",
    "AZURE_SERVICE_REGION": "westeurope",
    "SOUND_FILE": "meeting.wav",
    "OUTPUT_FILE": "meeting.md",
}


class TestLoadSettings(unittest.TestCase):

    def test_required_variables(self):
        settings = load_settings(REQUIRED_ENV)
        self.assertEqual(settings.speech_key, "secret-key")
        self.assertEqual(settings.service_region, "westeurope")
        self.assertEqual(settings.sound_file, Path("meeting.wav"))
        self.assertEqual(settings.output_file, Path("meeting.md"))
        self.assertEqual(settings.language, DEFAULT_LANGUAGE)
        self.assertEqual(settings.session_timeout, DEFAULT_SESSION_TIMEOUT)
        self.assertFalse(settings.strict_payloads)
        self.assertIsNone(settings.raw_output_file)

    def test_each_missing_variable_fails(self):
        for name in REQUIRED_ENV:
            env = dict(REQUIRED_ENV)
            del env[name]
            with self.subTest(missing=name):
                with self.assertRaises(ConfigurationError) as ctx:
                    load_settings(env)
                self.assertIn(name, str(ctx.exception))

    def test_all_missing_variables_reported(self):
        with self.assertRaises(ConfigurationError) as ctx:
            load_settings({"SOUND_FILE": "a.wav", "AZURE_SPEECH_KEY": "  "})
        message = str(ctx.exception)
        for name in ("AZURE_SPEECH_KEY", "AZURE_SERVICE_REGION", "OUTPUT_FILE"):
            self.assertIn(name, message)
        self.assertNotIn("SOUND_FILE", message)

    def test_optional_variables(self):
        env = dict(REQUIRED_ENV,
                   SPEECH_LANGUAGE="fr-FR",
                   SESSION_START_TIMEOUT="5",
                   SESSION_TIMEOUT="120.5",
                   STRICT_PAYLOADS="yes",
                   RAW_OUTPUT_FILE="raw.json")
        settings = load_settings(env)
        self.assertEqual(settings.language, "fr-FR")
        self.assertEqual(settings.start_timeout, 5.0)
        self.assertEqual(settings.session_timeout, 120.5)
        self.assertTrue(settings.strict_payloads)
        self.assertEqual(settings.raw_output_file, Path("raw.json"))

    def test_invalid_optional_values(self):
        for name, value in [("SESSION_TIMEOUT", "soon"), ("SESSION_START_TIMEOUT", "-1"),
                            ("STRICT_PAYLOADS", "maybe")]:
            with self.subTest(name=name):
                with self.assertRaises(ConfigurationError):
                    load_settings(dict(REQUIRED_ENV, **{name: value}))

    def test_repr_hides_key(self):
        self.assertNotIn("secret-key", repr(load_settings(REQUIRED_ENV)))

    def test_reads_process_environment_by_default(self):
        with mock.patch.dict("os.environ", REQUIRED_ENV, clear=True):
            self.assertEqual(load_settings().service_region, "westeurope")


class TestEnvFile(unittest.TestCase):

    def test_missing_explicit_env_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ConfigurationError) as ctx:
                load_env_file(str(Path(tmp) / "missing.env"))
        self.assertIn("missing.env", str(ctx.exception))

    def test_env_file_does_not_override_environment(self):
        with tempfile.TemporaryDirectory() as tmp:
            env_file = Path(tmp) / "run.env"
            env_file.write_text("AZURE_SERVICE_REGION=eastus\nSOUND_FILE=from-file.wav\n", encoding="utf-8")
            with mock.patch.dict("os.environ", {"AZURE_SERVICE_REGION": "westeurope"}, clear=True):
                self.assertTrue(load_env_file(str(env_file)))
                self.assertEqual(os.environ["AZURE_SERVICE_REGION"], "westeurope")
                self.assertEqual(os.environ["SOUND_FILE"], "from-file.wav")


if __name__ == "__main__":
    unittest.main()

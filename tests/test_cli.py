#!/usr/bin/env python3
"""
Tests for the command-line entry point
"""
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

# Add the src directory to the path to import the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from diarized_transcript.cli import main as cli
from diarized_transcript.config import load_env_file
from diarized_transcript.exceptions import RecognitionError


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.sound_file = Path(self.tmp.name) / "meeting.wav"
        self.sound_file.write_bytes(b"RIFF")
        self.env = {
            "AZURE_SPEECH_KEY": "key",
            "AZURE_SERVICE_REGION": "westeurope",
            "SOUND_FILE": str(self.sound_file),
            "OUTPUT_FILE": str(Path(self.tmp.name) / "meeting.md"),
        }
        # Never pick up a developer's .env during tests
        patcher = mock.patch.object(cli, "load_env_file")
        self.load_env_file = patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_variable_fails_before_recognition(self):
        env = dict(self.env)
        del env["AZURE_SPEECH_KEY"]
        with mock.patch.dict("os.environ", env, clear=True), \
                mock.patch.object(cli, "TranscriptPipeline") as pipeline_cls:
            self.assertEqual(cli.main([]), 1)
        pipeline_cls.assert_not_called()

    def test_missing_env_file(self):
        self.load_env_file.side_effect = load_env_file
        missing = str(Path(self.tmp.name) / "missing.env")
        with mock.patch.dict("os.environ", self.env, clear=True), \
                mock.patch.object(cli, "TranscriptPipeline") as pipeline_cls:
            with self.assertLogs("diarized_transcript.cli.main", level="ERROR") as logs:
                self.assertEqual(cli.main(["--env-file", missing]), 1)
        pipeline_cls.assert_not_called()
        self.assertIn("Environment file not found", logs.output[0])

    def test_missing_sound_file(self):
        env = dict(self.env, SOUND_FILE=str(Path(self.tmp.name) / "missing.wav"))
        with mock.patch.dict("os.environ", env, clear=True), \
                mock.patch.object(cli, "TranscriptPipeline") as pipeline_cls:
            self.assertEqual(cli.main([]), 1)
        pipeline_cls.assert_not_called()

    def test_success(self):
        with mock.patch.dict("os.environ", self.env, clear=True), \
                mock.patch.object(cli, "TranscriptPipeline") as pipeline_cls:
            pipeline_cls.return_value.process.return_value = mock.Mock(
                num_speakers=2, num_words=10, output_path=self.env["OUTPUT_FILE"], raw_output_path=None)
            self.assertEqual(cli.main(["--env-file", "custom.env"]), 0)

        self.load_env_file.assert_called_once_with("custom.env")
        settings = pipeline_cls.call_args[0][0]
        self.assertEqual(settings.sound_file, self.sound_file)

    def test_recognition_error_exit_code(self):
        with mock.patch.dict("os.environ", self.env, clear=True), \
                mock.patch.object(cli, "TranscriptPipeline") as pipeline_cls:
            pipeline_cls.return_value.process.side_effect = RecognitionError("canceled")
            self.assertEqual(cli.main([]), 1)

    def test_output_error_exit_code(self):
        with mock.patch.dict("os.environ", self.env, clear=True), \
                mock.patch.object(cli, "TranscriptPipeline") as pipeline_cls:
            pipeline_cls.return_value.process.side_effect = PermissionError("read-only")
            self.assertEqual(cli.main([]), 1)


if __name__ == "__main__":
    unittest.main()

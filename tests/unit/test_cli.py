"""
Tests for hr_assistant.cli — commands that run without MongoDB.
"""

import pytest
from typer.testing import CliRunner

from hr_assistant.cli import app

from conftest import RESUME_TEXT

runner = CliRunner()


@pytest.fixture
def resume_file(tmp_path):
    path = tmp_path / "jane_doe_resume.txt"
    path.write_text(RESUME_TEXT, encoding="utf-8")
    return path


class TestInfoCommands:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_info(self):
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "testing" in result.output


class TestAnalyzeCommand:
    def test_analyze_resume(self, resume_file):
        result = runner.invoke(app, ["analyze", str(resume_file)])
        assert result.exit_code == 0
        assert "resume" in result.output
        assert "jane@example.com" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "nope.txt")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_unsupported_file(self, tmp_path):
        path = tmp_path / "photo.png"
        path.write_bytes(b"\x89PNG\r\n")
        result = runner.invoke(app, ["analyze", str(path)])
        assert result.exit_code == 1
        assert "UnsupportedFormat" in result.output


class TestIngestCommand:
    def test_empty_directory(self, tmp_path):
        result = runner.invoke(app, ["ingest", str(tmp_path), "--memory"])
        assert result.exit_code == 0
        assert "No supported documents" in result.output

    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, ["ingest", str(tmp_path / "missing"), "--memory"])
        assert result.exit_code == 1

"""Unit tests for the command line client."""

import json

import click
import pytest
from click.testing import CliRunner

from eurovote.interface.cli.app import cli, normalize_code, parse_points


@pytest.fixture
def session_file(tmp_path, monkeypatch):
    """Session file the CLI's production container reads."""
    path = tmp_path / "sessions.json"
    monkeypatch.setenv("SESSION__PATH", str(path))
    return path


class TestParsePoints:
    """Tests for POINTS=ACT parsing."""

    def test_parses_pairs(self):
        """Should build the assignment from the pairs."""
        assert parse_points(("12=act-1", "10= act-7 ")) == {12: "act-1", 10: "act-7"}

    @pytest.mark.parametrize(
        "pairs",
        [("12",), ("12=",), ("twelve=act-1",), ("9=act-1",), ("12=act-1", "12=act-2")],
    )
    def test_rejects_bad_pairs(self, pairs):
        """Should refuse malformed, unknown or repeated point values."""
        with pytest.raises(click.BadParameter):
            parse_points(pairs)

    def test_normalizes_code(self):
        """Should apply the join code input rules."""
        assert normalize_code("abc-123") == "ABC123"
        with pytest.raises(click.BadParameter):
            normalize_code("abc")


class TestCommands:
    """Tests for commands that need no server."""

    def test_leave_forgets_record(self, session_file):
        """Should delete the record of the given party only."""
        session_file.write_text(json.dumps({"ABC123": "guest-1", "XYZ789": "guest-2"}))

        result = CliRunner().invoke(cli, ["leave", "abc123"])

        assert result.exit_code == 0, result.output
        assert "Left party ABC123." in result.output
        assert json.loads(session_file.read_text()) == {"XYZ789": "guest-2"}

    def test_vote_requires_join(self, session_file):
        """Should point to the join command when this device never joined."""
        result = CliRunner().invoke(cli, ["vote", "ABC123", "12=act-1"])

        assert result.exit_code == 1
        assert "eurovote join ABC123" in result.output

    def test_vote_with_bad_points(self, session_file):
        """Should fail as a usage error before doing anything."""
        result = CliRunner().invoke(cli, ["vote", "ABC123", "13=act-1"])

        assert result.exit_code == 2
        assert not session_file.exists()

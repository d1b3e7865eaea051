"""
Tests for the replay command line
==================================
"""

import io
import json
from collections import Counter

import pytest

from gesturecore import main as cli
from gesturecore.core.session import GestureSession
from gesturecore.core.types import GestureLabel
from gesturecore.utils.config import Config
from mock_hands import OPEN_PALM, record, shifted


@pytest.fixture(autouse=True)
def isolated(monkeypatch):
    Config.reset()
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    yield
    Config.reset()


def recording_lines(frames):
    return [json.dumps(frame) + "\n" for frame in frames]


@pytest.fixture
def recording(tmp_path):
    frames = [record(OPEN_PALM, timestamp_ms=33 * i) for i in range(4)]
    frames.append({"timestamp_ms": 132, "hands": []})
    frames += [record(shifted(OPEN_PALM, dx=-10 * i), timestamp_ms=165 + 33 * i) for i in range(4)]

    path = tmp_path / "session.jsonl"
    path.write_text("".join(recording_lines(frames)))
    return path


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("session:\n  profile: live_stream\n")
    return path


class TestReplay:
    """Test suite for replaying recorded frames."""

    def test_labels_per_line(self, recording):
        out = io.StringIO()
        with open(recording) as f:
            counts = cli.replay(GestureSession(), f, out=out)

        rows = [line.split("\t") for line in out.getvalue().splitlines()]
        assert [row[2] for row in rows] == [
            "NONE", "NONE", "NONE", "PALM_OPEN",
            "NONE",
            "NONE", "NONE", "NONE", "LEFT",
        ]
        assert rows[4][:2] == ["5", "0"]
        assert counts[GestureLabel.PALM_OPEN] == 1
        assert counts[GestureLabel.LEFT] == 1

    def test_skips_malformed_lines(self):
        lines = ["{not json\n", json.dumps({"hands": [{"landmarks": [[0, 0, 0]]}]}) + "\n", "\n"]
        lines += recording_lines([record(OPEN_PALM)])

        out = io.StringIO()
        counts = cli.replay(GestureSession(), lines, out=out)

        assert counts["skipped"] == 2
        assert out.getvalue() == "4\t1\tNONE\n"

    def test_skips_frames_the_session_rejects(self):
        """Coordinates that overflow once scaled are skipped, not fatal."""
        huge = {"hands": [{"handedness": "Left", "landmarks": [[1e306, 1e306, 1e306]] * 21}]}
        lines = recording_lines([huge, record(OPEN_PALM)])

        out = io.StringIO()
        session = GestureSession()
        counts = cli.replay(session, lines, out=out)

        assert counts["skipped"] == 1
        assert out.getvalue() == "2\t1\tNONE\n"
        assert session.frames_ingested == 1

    def test_summary(self):
        out = io.StringIO()
        cli._print_summary(Counter({GestureLabel.OK: 3, "skipped": 1}), out=out)

        lines = out.getvalue().splitlines()
        assert lines[1] == "Summary"
        assert lines[2].split() == ["OK", "3"]
        assert lines[3].split() == ["Skipped", "lines", "1"]


class TestMain:
    """Test suite for the gesturecore entry point."""

    def test_replay_command(self, recording, config_file, capsys):
        code = cli.main(["replay", str(recording), "--config", str(config_file)])

        assert code == 0
        output = capsys.readouterr().out
        assert "9\t1\tLEFT" in output
        assert "Summary" in output
        assert "Go Left" in output

    def test_profile_option(self, recording, config_file, capsys):
        code = cli.main(["replay", str(recording), "-c", str(config_file), "-p", "still_image"])

        assert code == 0
        # Five-frame window never fills between the hand loss and the end
        assert "PALM_OPEN" not in capsys.readouterr().out

    def test_missing_recording(self, tmp_path, config_file):
        code = cli.main(["replay", str(tmp_path / "absent.jsonl"), "-c", str(config_file)])
        assert code == 1

    def test_unknown_profile(self, recording, config_file):
        code = cli.main(["replay", str(recording), "-c", str(config_file), "-p", "webcam"])
        assert code == 2

    def test_null_threshold_in_config(self, recording, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("profiles:\n  live_stream:\n    static:\n      palm_open_threshold:\n")

        code = cli.main(["replay", str(recording), "-c", str(path)])
        assert code == 2

    def test_profiles_command(self, config_file, capsys):
        assert cli.main(["profiles", "-c", str(config_file)]) == 0
        assert capsys.readouterr().out.split() == ["live_stream", "still_image"]

    def test_profiles_lists_configured(self, tmp_path, capsys):
        path = tmp_path / "config.yaml"
        path.write_text("profiles:\n  review:\n    base: still_image\n")

        assert cli.main(["profiles", "--config", str(path)]) == 0
        assert "review\t(config)" in capsys.readouterr().out.splitlines()

    def test_replay_configured_profile(self, recording, tmp_path, capsys):
        path = tmp_path / "config.yaml"
        path.write_text("profiles:\n  slow:\n    base: live_stream\n    frame_buffer_size: 6\n")

        code = cli.main(["replay", str(recording), "-c", str(path), "-p", "slow"])

        assert code == 0
        assert "LEFT" not in capsys.readouterr().out

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.main([])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

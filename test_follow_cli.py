"""Tests for the follow_cli entry point."""

import io
from pathlib import Path

import pytest

import follow_cli
from step_viewer import StepViewer

MAPS_DIR = Path(__file__).parent / "maps"


class TestMain:
    """Tests for running the command line."""

    def test_map_file(self, capsys: pytest.CaptureFixture[str]) -> None:
        status = follow_cli.main([str(MAPS_DIR / "map1.txt")])

        assert status == 0
        assert capsys.readouterr().out == "Letters ACB\nPath as characters @---A---+|C|+---+|+-B-x\n"

    def test_stdin(self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO((MAPS_DIR / "map3.txt").read_bytes())))
        status = follow_cli.main([])

        assert status == 0
        out = capsys.readouterr().out
        assert "Letters BEEFCAKE\n" in out
        assert "Path as characters @---+B||E--+|E|+--F--+|C|||A--|-----K|||+--E--Ex\n" in out

    def test_non_utf8_map_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Undecodable bytes are blanked instead of aborting the run."""
        map_file = tmp_path / "latin1.txt"
        map_file.write_bytes(b"@-A-x \xe9\n")
        status = follow_cli.main([str(map_file)])

        assert status == 0
        assert capsys.readouterr().out == "Letters A\nPath as characters @-A-x\n"

    def test_non_utf8_stdin(self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"@-B-x\r\n\xe9\n")))
        status = follow_cli.main([])

        assert status == 0
        assert capsys.readouterr().out == "Letters B\nPath as characters @-B-x\n"

    def test_custom_markers(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        map_file = tmp_path / "map.txt"
        map_file.write_text("*-A-+\n    #\n", encoding="utf-8")
        status = follow_cli.main(["--start", "*", "--end", "#", str(map_file)])

        assert status == 0
        assert capsys.readouterr().out == "Letters A\nPath as characters *-A-+#\n"

    def test_show_renders_map(self, capsys: pytest.CaptureFixture[str]) -> None:
        status = follow_cli.main(["--show", str(MAPS_DIR / "map1.txt")])

        assert status == 0
        out = capsys.readouterr().out
        assert out.startswith("Letters ACB\n")
        assert "Path" in out.splitlines()[2]


class TestFailures:
    """Tests for exit status on bad maps and arguments."""

    @pytest.mark.parametrize(
        "name,message",
        [
            ("map_infinite_loop.txt", "Infinite path"),
            ("map_dead_end.txt", "No direction to follow"),
            ("map_no_end.txt", "'x' not found"),
        ],
    )
    def test_bad_map(
        self,
        name: str,
        message: str,
        capsys: pytest.CaptureFixture[str],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        status = follow_cli.main([str(MAPS_DIR / name)])

        assert status == 1
        assert capsys.readouterr().out == ""
        assert message in caplog.text

    def test_missing_file(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        status = follow_cli.main([str(tmp_path / "nope.txt")])

        assert status == 1
        assert "Cannot read map" in caplog.text

    def test_strict_forks(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        map_file = tmp_path / "fork.txt"
        map_file.write_text("x-@-A\n", encoding="utf-8")

        assert follow_cli.main([str(map_file)]) == 0
        assert follow_cli.main(["--strict-forks", str(map_file)]) == 1
        assert "Ambiguous fork" in caplog.text

    def test_unique_markers(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        map_file = tmp_path / "twice.txt"
        map_file.write_text("@-x-x\n", encoding="utf-8")

        assert follow_cli.main(["--unique-markers", str(map_file)]) == 1
        assert "appears 2 times" in caplog.text

    def test_invalid_marker_is_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            follow_cli.main(["--start", "+"])
        assert exc_info.value.code == 2


class TestStepMode:
    """Tests for launching the interactive viewer."""

    def test_step_launches_viewer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        launched: list[StepViewer] = []

        def fake_run(self: StepViewer) -> None:
            self.finish()
            launched.append(self)

        monkeypatch.setattr(StepViewer, "run", fake_run)
        status = follow_cli.main(["--step", str(MAPS_DIR / "map2.txt")])

        assert status == 0
        assert len(launched) == 1
        assert launched[0].tracer.finished

    def test_step_reports_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(StepViewer, "run", StepViewer.finish)
        status = follow_cli.main(["--step", str(MAPS_DIR / "map_infinite_loop.txt")])

        assert status == 1

"""Tests for CLI commands."""

import errno
import io
import logging
import os
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner
from rich.console import Console

from sangerrename.cli import _unique_paths, cli, setup_logging, summary_table
from sangerrename.models.rename import OutcomeStatus, RenameOutcome


# Wide terminal so rich tables are not wrapped in captured output
ENV = {"COLUMNS": "200"}


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def genewiz_file(tmp_path) -> Path:
    path = tmp_path / "TL1-T25_A01.ab1"
    path.write_bytes(b"ABIF genewiz")
    return path


class TestRenameCommand:
    """Tests for the interactive rename command."""

    def test_help(self, runner: CliRunner) -> None:
        """Test that --help lists the options."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "--vendor" in result.output
        assert "--date" in result.output
        assert "--primer-alias" in result.output

    def test_requires_files(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, [])

        assert result.exit_code != 0

    def test_genewiz_rename(self, runner: CliRunner, genewiz_file: Path, tmp_path: Path) -> None:
        """Test accepting every default after supplying the date on the command line."""
        result = runner.invoke(
            cli, ["--date", "250601", str(genewiz_file)], input="\n\n\n\nyes\n", env=ENV
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "250601.TL1.T25.ab1").read_bytes() == b"ABIF genewiz"
        assert not genewiz_file.exists()
        assert "Renamed 1" in result.output

    def test_date_from_environment(self, runner: CliRunner, genewiz_file: Path, tmp_path: Path) -> None:
        env = dict(ENV, SANGER_RENAME_DATE="251206")

        result = runner.invoke(cli, [str(genewiz_file)], input="\n\n\n\nyes\n", env=env)

        assert result.exit_code == 0, result.output
        assert (tmp_path / "251206.TL1.T25.ab1").exists()

    def test_typed_date_overrides_default(self, runner: CliRunner, genewiz_file: Path, tmp_path: Path) -> None:
        result = runner.invoke(
            cli, ["--date", "250601", str(genewiz_file)], input="\n\n\n+1d\nyes\n", env=ENV
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "250602.TL1.T25.ab1").exists()

    def test_cancel_at_confirmation(self, runner: CliRunner, genewiz_file: Path, tmp_path: Path) -> None:
        """Test that cancelling renames nothing and is not an error."""
        result = runner.invoke(
            cli, ["--date", "250601", str(genewiz_file)], input="\n\n\n\ncancel\n", env=ENV
        )

        assert result.exit_code == 0
        assert "Aborted. No files were renamed." in result.output
        assert [path.name for path in tmp_path.iterdir()] == ["TL1-T25_A01.ab1"]

    def test_end_of_input_cancels(self, runner: CliRunner, genewiz_file: Path) -> None:
        result = runner.invoke(cli, ["--date", "250601", str(genewiz_file)], input="", env=ENV)

        assert result.exit_code == 0
        assert "Aborted" in result.output
        assert genewiz_file.exists()

    def test_collision_is_skipped(self, runner: CliRunner, genewiz_file: Path, tmp_path: Path) -> None:
        """Test that an existing target is reported and left untouched."""
        existing = tmp_path / "250601.TL1.T25.ab1"
        existing.write_bytes(b"older run")

        result = runner.invoke(
            cli, ["--date", "250601", str(genewiz_file)], input="\n\n\n\nyes\n", env=ENV
        )

        assert result.exit_code == 0, result.output
        assert "target exists" in result.output
        assert genewiz_file.read_bytes() == b"ABIF genewiz"
        assert existing.read_bytes() == b"older run"

    def test_failure_sets_exit_code(
        self, runner: CliRunner, genewiz_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that an OS error fails the file and the run."""

        def refuse(*args, **kwargs):
            raise PermissionError(errno.EACCES, "Permission denied")

        monkeypatch.setattr(os, "link", refuse)
        monkeypatch.setattr(Path, "rename", refuse)

        result = runner.invoke(
            cli, ["--date", "250601", str(genewiz_file)], input="\n\n\n\nyes\n", env=ENV
        )

        assert result.exit_code == 1
        assert "Permission denied" in result.output
        assert genewiz_file.exists()

    def test_primer_alias_and_exact_acknowledgement(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test an exact Ruibio batch with a primer alias."""
        path = tmp_path / "K528-1.C1.34781340.B08.ab1"
        path.touch()

        result = runner.invoke(
            cli,
            ["--date", "250601", "--primer-alias", "B08=M13F", str(path)],
            input="\n\n\nyes\n",
            env=ENV,
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "250601.K528-1.M13F.ab1").exists()

    def test_manual_vendor(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "reads.seq"
        path.touch()

        result = runner.invoke(
            cli,
            ["--vendor", "MANUAL", "--date", "250601", str(path)],
            input="\npUC19\nM13F\n\nyes\n",
            env=ENV,
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "250601.pUC19.M13F.seq").exists()

    @pytest.mark.skipif(sys.platform != "linux", reason="needs a filesystem that accepts non-UTF-8 names")
    def test_undecodable_filename_is_displayed_and_renamed(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test that a name with invalid UTF-8 bytes is shown with replacement characters."""
        path = tmp_path / os.fsdecode(b"TL1-T25\xff_A01.ab1")
        path.write_bytes(b"ABIF genewiz")

        result = runner.invoke(
            cli, ["--vendor", "genewiz", str(path)], input="\n\n\n250601\nyes\n", env=ENV
        )

        assert result.exit_code == 0, result.output
        assert "\ufffd" in result.output
        assert (tmp_path / os.fsdecode(b"250601.TL1.T25\xff.ab1")).read_bytes() == b"ABIF genewiz"
        assert not path.exists()

    def test_duplicate_arguments_processed_once(
        self, runner: CliRunner, genewiz_file: Path, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            cli,
            ["--date", "250601", str(genewiz_file), str(genewiz_file)],
            input="\n\n\n\nyes\n",
            env=ENV,
        )

        assert result.exit_code == 0, result.output
        assert "Renaming 1 file(s)" in result.output
        assert (tmp_path / "250601.TL1.T25.ab1").exists()

    @pytest.mark.parametrize(
        "args,message",
        [
            (["--date", "2506"], "6 digits"),
            (["--date", "251301"], "not a valid calendar date"),
            (["--primer-alias", "B08"], "OLD=NEW"),
            (["--vendor", "acme"], "acme"),
            (["--sample-size", "0"], "sample-size"),
        ],
    )
    def test_bad_options(self, runner: CliRunner, genewiz_file: Path, args, message) -> None:
        """Test that bad option values are usage errors."""
        result = runner.invoke(cli, args + [str(genewiz_file)], env=ENV)

        assert result.exit_code == 2
        assert message in result.output
        assert genewiz_file.exists()


class TestHelpers:
    """Tests for CLI helper functions."""

    def test_unique_paths_keeps_order(self, tmp_path: Path) -> None:
        a, b = tmp_path / "a.ab1", tmp_path / "b.ab1"

        assert _unique_paths((str(b), str(a), str(b))) == [b, a]

    def test_summary_table(self) -> None:
        outcomes = [
            RenameOutcome(
                source_path=Path("0001_(TX)_[SP1].ab1"),
                target_path=Path("250601.TX.SP1.ab1"),
                status=OutcomeStatus.RENAMED,
            ),
            RenameOutcome(
                source_path=Path("b.ab1"),
                target_path=Path("250601.T.P.ab1"),
                status=OutcomeStatus.FAILED,
                reason="Permission denied",
            ),
        ]
        console = Console(file=io.StringIO(), width=200)

        console.print(summary_table(outcomes))
        output = console.file.getvalue()

        assert "0001_(TX)_[SP1].ab1" in output
        assert "failed" in output
        assert "Permission denied" in output

    @pytest.mark.parametrize("verbose,level", [(False, logging.WARNING), (True, logging.DEBUG)])
    def test_setup_logging(self, verbose, level) -> None:
        setup_logging(verbose)

        assert logging.getLogger().level == level

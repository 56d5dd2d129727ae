"""Tests for the command-line interface."""

from pathlib import Path

from typer.testing import CliRunner

from aom_store.cli import app

runner = CliRunner()

SESSION_YAML = """
snapshots:
  - key: body
    tag: body
    children:
      - key: status
        tag: div
        role: status
        children:
          - key: status-text
            text: "Saved"
  - key: body
    tag: body
    children:
      - key: status
        tag: div
        role: status
        children:
          - key: status-text
            text: "Updated"
      - key: field
        tag: input
        role: textbox
        attributes:
          aria-label: "Name"
        focused: true
"""


def create_session(path: Path, content: str = SESSION_YAML) -> Path:
    """Write a snapshot file for testing."""
    path.write_text(content, encoding="utf-8")
    return path


class TestCLIVersion:
    """Tests for version flag."""

    def test_version_flag(self) -> None:
        """Test --version shows version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.stdout

    def test_version_short_flag(self) -> None:
        """Test -v shows version."""
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "0.1.0" in result.stdout


class TestCLIHelp:
    """Tests for help output."""

    def test_main_help(self) -> None:
        """Test main --help shows commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "replay" in result.stdout
        assert "validate" in result.stdout


class TestCLIReplay:
    """Tests for the replay command."""

    def test_replay_prints_final_tree(self, tmp_path: Path) -> None:
        """Test that the tree after the last snapshot is printed."""
        path = create_session(tmp_path / "session.yaml")

        result = runner.invoke(app, ["replay", str(path)])

        assert result.exit_code == 0
        assert "focused: field" in result.stdout
        assert "- textbox [key=field] [focused]:" in result.stdout
        assert '- polite [source=status]: "Updated"' in result.stdout
        assert "# snapshot" not in result.stdout

    def test_replay_each(self, tmp_path: Path) -> None:
        """Test that --each prints a tree per snapshot."""
        path = create_session(tmp_path / "session.yaml")

        result = runner.invoke(app, ["replay", str(path), "--each"])

        assert result.exit_code == 0
        assert "# snapshot 1/2" in result.stdout
        assert "# snapshot 2/2" in result.stdout
        assert '"Saved"' in result.stdout

    def test_replay_minimal(self, tmp_path: Path) -> None:
        """Test the verbosity option."""
        path = create_session(tmp_path / "session.yaml")

        result = runner.invoke(app, ["replay", str(path), "-V", "minimal"])

        assert result.exit_code == 0
        assert '- textbox "Name" [key=field]' in result.stdout

    def test_replay_invalid_verbosity(self, tmp_path: Path) -> None:
        """Test that an unknown verbosity exits with an error."""
        path = create_session(tmp_path / "session.yaml")

        result = runner.invoke(app, ["replay", str(path), "--verbosity", "loud"])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_replay_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file exits with an error."""
        result = runner.invoke(app, ["replay", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_replay_duplicate_keys(self, tmp_path: Path) -> None:
        """Test that a store error exits with an error."""
        path = create_session(
            tmp_path / "dup.yaml",
            "snapshots:\n  - key: body\n    tag: body\n    children:\n"
            "      - {key: a, tag: div}\n      - {key: a, tag: div}\n",
        )

        result = runner.invoke(app, ["replay", str(path)])

        assert result.exit_code == 1
        assert "Duplicated element" in result.output


class TestCLIValidate:
    """Tests for the validate command."""

    def test_validate_ok(self, tmp_path: Path) -> None:
        """Test that a well-formed file is reported."""
        path = create_session(tmp_path / "session.yaml")

        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 0
        assert "2 snapshot(s) OK" in result.stdout

    def test_validate_lists_problems(self, tmp_path: Path) -> None:
        """Test that every problem is listed."""
        path = create_session(
            tmp_path / "bad.yaml", "snapshots:\n  - tag: body\n  - key: x\n"
        )

        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "2 problem(s)" in result.output
        assert "snapshots[0]: missing 'key'" in result.output
        assert "snapshots[1]: element 'x' needs either 'tag' or 'text'" in result.output

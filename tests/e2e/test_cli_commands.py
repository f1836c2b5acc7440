"""End-to-end tests for CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from notegraph import __version__
from notegraph.cli.main import app


@pytest.fixture
def cli_runner():
    """Create CLI runner for testing."""
    return CliRunner()


class TestStatsCommand:
    def test_stats(self, cli_runner, sample_vault: Path):
        result = cli_runner.invoke(app, ["stats", str(sample_vault)])

        assert result.exit_code == 0, result.output
        assert "Notes" in result.output
        assert "Links" in result.output
        assert "Most connected" in result.output
        assert "Index" in result.output

    def test_stats_with_hierarchy(self, cli_runner, sample_vault: Path):
        result = cli_runner.invoke(app, ["stats", str(sample_vault), "--hierarchy"])

        assert result.exit_code == 0, result.output
        assert "Folders" in result.output

    def test_missing_vault(self, cli_runner, tmp_path: Path):
        result = cli_runner.invoke(app, ["stats", str(tmp_path / "nope")])

        assert result.exit_code == 1
        assert "Vault not found" in result.output


class TestNeighborsCommand:
    def test_lists_linked_notes(self, cli_runner, sample_vault: Path):
        result = cli_runner.invoke(app, ["neighbors", str(sample_vault), "projects"])

        assert result.exit_code == 0, result.output
        assert "Garden" in result.output
        assert "Index" in result.output
        assert "Health" not in result.output

    def test_note_without_links(self, cli_runner, sample_vault: Path):
        result = cli_runner.invoke(app, ["neighbors", str(sample_vault), "Health.md"])

        assert result.exit_code == 0, result.output
        assert "no connections" in result.output

    def test_unknown_note(self, cli_runner, sample_vault: Path):
        result = cli_runner.invoke(app, ["neighbors", str(sample_vault), "Nope"])

        assert result.exit_code == 1
        assert "No note named" in result.output


class TestRenderCommand:
    def test_render_writes_svg(self, cli_runner, sample_vault: Path, tmp_path: Path):
        out = tmp_path / "out" / "graph.svg"
        result = cli_runner.invoke(
            app,
            ["render", str(sample_vault), "-o", str(out), "--steps", "30", "--seed", "1"],
        )

        assert result.exit_code == 0, result.output
        assert "Wrote" in result.output
        svg = out.read_text(encoding="utf-8")
        assert svg.startswith("<svg")
        assert svg.count("<text") == 5

    def test_render_focus(self, cli_runner, sample_vault: Path, tmp_path: Path):
        out = tmp_path / "focus.svg"
        result = cli_runner.invoke(
            app,
            ["render", str(sample_vault), "-o", str(out), "-n", "5", "--focus", "Index"],
        )

        assert result.exit_code == 0, result.output
        svg = out.read_text(encoding="utf-8")
        assert svg.count("<text") == 3
        assert ">Garden<" not in svg

    def test_render_hierarchy_and_dark_theme(
        self, cli_runner, sample_vault: Path, tmp_path: Path
    ):
        out = tmp_path / "tree.svg"
        result = cli_runner.invoke(
            app,
            [
                "render", str(sample_vault), "-o", str(out), "-n", "5",
                "--hierarchy", "--theme", "dark", "--boundary", "rectangular",
            ],
        )

        assert result.exit_code == 0, result.output
        svg = out.read_text(encoding="utf-8")
        assert ">areas<" in svg
        assert 'fill="#1e1e1e"' in svg

    def test_render_with_config(self, cli_runner, sample_vault: Path, tmp_path: Path):
        config = tmp_path / "graph.yaml"
        config.write_text("display:\n  show_labels: false\n", encoding="utf-8")
        out = tmp_path / "plain.svg"

        result = cli_runner.invoke(
            app,
            ["render", str(sample_vault), "-o", str(out), "-n", "5", "-c", str(config)],
        )

        assert result.exit_code == 0, result.output
        assert "<text" not in out.read_text(encoding="utf-8")

    def test_invalid_config(self, cli_runner, sample_vault: Path, tmp_path: Path):
        config = tmp_path / "graph.yaml"
        config.write_text("physics:\n  friction: 5\n", encoding="utf-8")

        result = cli_runner.invoke(
            app, ["render", str(sample_vault), "-c", str(config), "-o", str(tmp_path / "x.svg")]
        )

        assert result.exit_code == 1
        assert "Invalid settings" in result.output

    def test_unknown_theme(self, cli_runner, sample_vault: Path):
        result = cli_runner.invoke(app, ["render", str(sample_vault), "--theme", "neon"])

        assert result.exit_code == 1
        assert "Unknown theme" in result.output

    def test_unknown_boundary(self, cli_runner, sample_vault: Path, tmp_path: Path):
        result = cli_runner.invoke(
            app,
            ["render", str(sample_vault), "--boundary", "hex", "-o", str(tmp_path / "x.svg")],
        )

        assert result.exit_code == 1
        assert "Unknown boundary" in result.output

    def test_unknown_focus(self, cli_runner, sample_vault: Path, tmp_path: Path):
        result = cli_runner.invoke(
            app,
            ["render", str(sample_vault), "--focus", "Nope", "-o", str(tmp_path / "x.svg")],
        )

        assert result.exit_code == 1
        assert not (tmp_path / "x.svg").exists()


class TestWatchCommand:
    @pytest.fixture(autouse=True)
    def no_watch_loop(self, monkeypatch):
        async def stop_immediately(vault, scene, debounce, on_rebuild):
            return None

        monkeypatch.setattr(
            "notegraph.cli.commands.watch._watch_forever", stop_immediately
        )

    def test_watch_creates_output_directory(
        self, cli_runner, sample_vault: Path, tmp_path: Path
    ):
        out = tmp_path / "new_dir" / "graph.svg"
        result = cli_runner.invoke(
            app, ["watch", str(sample_vault), "-o", str(out), "--steps", "5"]
        )

        assert result.exit_code == 0, result.output
        assert "Wrote" in result.output
        assert out.read_text(encoding="utf-8").startswith("<svg")

    def test_watch_unknown_theme(self, cli_runner, sample_vault: Path):
        result = cli_runner.invoke(app, ["watch", str(sample_vault), "--theme", "neon"])
        assert result.exit_code == 1
        assert "Unknown theme" in result.output


def test_version(cli_runner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output

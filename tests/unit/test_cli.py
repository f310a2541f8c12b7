"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from svcspec.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def broken_dir(corpus_dir: Path) -> Path:
    """The fixture corpus plus a document with a bad fixed-point type on line 4."""
    (corpus_dir / "broken.md").write_text(
        "# Broken\n\n    identifier: 0x1e1589eb\n    rw level @ 0x80 : u3.3\n"
    )
    return corpus_dir


class TestBuild:
    def test_build_writes_outputs(self, cli_runner: CliRunner, corpus_dir: Path) -> None:
        result = cli_runner.invoke(app, ["build", str(corpus_dir)])
        assert result.exit_code == 0, result.output
        assert "Built 3 documents" in result.output

        generated = corpus_dir / "generated"
        header = (generated / "c" / "light.h").read_text(encoding="utf-8")
        assert "#define JD_LIGHT_LEVEL_EV_TRIPPED 0x1" in header
        light = json.loads((generated / "json" / "light.json").read_text(encoding="utf-8"))
        assert light["camelName"] == "LightLevel"
        aggregate = json.loads((generated / "spec.json").read_text(encoding="utf-8"))
        assert [spec["shortId"] for spec in aggregate] == ["_base", "_sensor", "light"]

    def test_build_options(self, cli_runner: CliRunner, corpus_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        result = cli_runner.invoke(
            app, ["build", str(corpus_dir), "--output", str(out), "-g", "yaml"]
        )
        assert result.exit_code == 0, result.output
        assert (out / "yaml" / "light.yaml").is_file()
        assert not (out / "c").exists()

    def test_manifest_settings(self, cli_runner: CliRunner, corpus_dir: Path) -> None:
        (corpus_dir / "svcspec.toml").write_text(
            '[build]\ngenerators = ["c"]\naggregate = "all.yaml"\n'
            'interchange_format = "yaml"\n\n[c]\nprefix = "SV"\n'
        )
        result = cli_runner.invoke(app, ["build", str(corpus_dir)])
        assert result.exit_code == 0, result.output
        header = (corpus_dir / "generated" / "c" / "light.h").read_text(encoding="utf-8")
        assert "#define SV_LIGHT_LEVEL_REG_BRIGHTNESS SV_REG_READING" in header
        assert (corpus_dir / "generated" / "all.yaml").is_file()

    def test_build_fails_on_diagnostics(self, cli_runner: CliRunner, broken_dir: Path) -> None:
        result = cli_runner.invoke(app, ["build", str(broken_dir)])
        assert result.exit_code == 1
        expected = f"{broken_dir.resolve() / 'broken.md'}(4): fixed point u3.3 can't be 6 bits"
        assert expected in result.output
        assert not (broken_dir / "generated").exists()

    def test_unknown_generator(self, cli_runner: CliRunner, corpus_dir: Path) -> None:
        result = cli_runner.invoke(app, ["build", str(corpus_dir), "-g", "rust"])
        assert result.exit_code == 1
        assert "Backend 'rust' not found" in result.output

    def test_empty_directory(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["build", str(tmp_path)])
        assert result.exit_code == 1
        assert "No documents matching '*.md'" in result.output

    def test_circular_extends(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_text("# A\n\n    extends: b\n")
        (tmp_path / "b.md").write_text("# B\n\n    extends: a\n")
        result = cli_runner.invoke(app, ["build", str(tmp_path)])
        assert result.exit_code == 1
        assert "Circular extends chain detected among: a, b" in result.output


class TestValidate:
    def test_valid_corpus(self, cli_runner: CliRunner, corpus_dir: Path) -> None:
        result = cli_runner.invoke(app, ["validate", str(corpus_dir)])
        assert result.exit_code == 0, result.output
        assert "OK: 3 documents are valid." in result.output

    def test_human_format(self, cli_runner: CliRunner, broken_dir: Path) -> None:
        result = cli_runner.invoke(app, ["validate", str(broken_dir)])
        assert result.exit_code == 1
        assert "ERROR: " in result.output
        assert "broken.md(4): fixed point u3.3 can't be 6 bits" in result.output

    def test_warnings_fail_validation(self, cli_runner: CliRunner, corpus_dir: Path) -> None:
        (corpus_dir / "warned.md").write_text(
            "# Warned\n\n    identifier: 0x1e1589eb\n    rw level @ 0x05 : u8\n"
        )
        result = cli_runner.invoke(app, ["validate", str(corpus_dir)])
        assert result.exit_code == 1
        assert "WARNING: " in result.output
        assert "rw @ 0x5 should be expressed with a name from _base.md" in result.output

    def test_vscode_format(self, cli_runner: CliRunner, broken_dir: Path) -> None:
        result = cli_runner.invoke(app, ["validate", str(broken_dir), "--format", "vscode"])
        assert result.exit_code == 1
        assert "broken.md:4:1: error: fixed point u3.3 can't be 6 bits" in result.output

    def test_vscode_success(self, cli_runner: CliRunner, corpus_dir: Path) -> None:
        result = cli_runner.invoke(app, ["validate", str(corpus_dir), "-f", "vscode"])
        assert result.exit_code == 0
        assert "::notice: Validation successful" in result.output

    def test_inherited_diagnostics_are_printed_once(
        self, cli_runner: CliRunner, broken_dir: Path
    ) -> None:
        (broken_dir / "child.md").write_text(
            "# Child\n\n    extends: broken\n    identifier: 0x12345678\n"
        )
        result = cli_runner.invoke(app, ["validate", str(broken_dir)])
        assert result.exit_code == 1
        assert result.output.count("fixed point u3.3 can't be 6 bits") == 1


class TestInspect:
    def test_json(self, cli_runner: CliRunner, corpus_dir: Path) -> None:
        result = cli_runner.invoke(
            app, ["inspect", str(corpus_dir / "light.md"), "--format", "json"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["name"] == "Light level"
        assert data["extends"] == ["_sensor"]
        assert len(data["packets"]) == 6

    def test_tree(self, cli_runner: CliRunner, corpus_dir: Path) -> None:
        result = cli_runner.invoke(app, ["inspect", str(corpus_dir / "light.md")])
        assert result.exit_code == 0, result.output
        assert "Light level" in result.output
        assert "Packets" in result.output

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["inspect", str(tmp_path / "nope.md")])
        assert result.exit_code == 1
        assert "Document not found" in result.output


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("svcspec ")

"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from petscript.cli import app
from petscript.core.errors import FetchError
from petscript.core.names import NameCatalog

ENV = {"COLUMNS": "200"}


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, catalog_files: tuple[Path, Path]) -> Path:
    """A directory with petscript.toml next to the catalog files."""
    (tmp_path / "petscript.toml").write_text("[logging]\nlevel = \"ERROR\"\n", encoding="utf-8")
    return tmp_path


def _write_script(directory: Path, text: str) -> Path:
    script = directory / "script.txt"
    script.write_text(text, encoding="utf-8")
    return script


class TestVersion:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "petscript version" in result.output


class TestParseCommand:
    def test_tree(self, cli_runner: CliRunner, tmp_path: Path, sample_script: str) -> None:
        script = _write_script(tmp_path, sample_script)
        result = cli_runner.invoke(app, ["parse", str(script)], env=ENV)
        assert result.exit_code == 0
        assert "[weather != Moonlight]" in result.output
        assert "standby" in result.output

    def test_json(self, cli_runner: CliRunner, tmp_path: Path, sample_script: str) -> None:
        script = _write_script(tmp_path, sample_script)
        result = cli_runner.invoke(app, ["parse", str(script), "--json"])
        assert result.exit_code == 0
        tree = json.loads(result.output)
        assert [node["type"] for node in tree] == ["if", "action"]
        assert tree[0]["end_line"] == 5

    def test_errors_exit_nonzero(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        script = _write_script(tmp_path, "if [round=1]\nstandby")
        result = cli_runner.invoke(app, ["parse", str(script)], env=ENV)
        assert result.exit_code == 1
        assert "Unterminated" in result.output

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["parse", str(tmp_path / "nope.txt")])
        assert result.exit_code != 0


class TestDescribeCommand:
    def test_with_catalog(self, cli_runner: CliRunner, project: Path) -> None:
        script = _write_script(project, "ability(595) [round=7]\nability(Starfire:595)")
        result = cli_runner.invoke(app, ["describe", str(script)], env=ENV)
        assert result.exit_code == 0
        assert "R7" in result.output
        assert "Moonfire (595)" in result.output
        assert "name mismatch" in result.output

    def test_no_names(self, cli_runner: CliRunner, project: Path) -> None:
        script = _write_script(project, "ability(595)")
        result = cli_runner.invoke(app, ["describe", str(script), "--no-names"], env=ENV)
        assert result.exit_code == 0
        assert "Use ability 595" in result.output

    def test_bad_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "petscript.toml").write_text("[api\n", encoding="utf-8")
        script = _write_script(tmp_path, "standby")
        result = cli_runner.invoke(app, ["describe", str(script)])
        assert result.exit_code == 1
        assert "Invalid TOML" in result.output


class TestCheckCommand:
    def test_clean_script(self, cli_runner: CliRunner, project: Path, sample_script: str) -> None:
        script = _write_script(project, sample_script)
        result = cli_runner.invoke(app, ["check", str(script)])
        assert result.exit_code == 0
        assert "OK: script is valid." in result.output

    def test_mismatch_fails(self, cli_runner: CliRunner, project: Path) -> None:
        script = _write_script(project, "standby\nability(Starfire:595)")
        result = cli_runner.invoke(app, ["check", str(script)])
        assert result.exit_code == 1
        assert "ERROR: line 2: ability name mismatch" in result.output

    def test_not_found_is_warning(self, cli_runner: CliRunner, project: Path) -> None:
        script = _write_script(project, "ability(999)")
        result = cli_runner.invoke(app, ["check", str(script)])
        assert result.exit_code == 0
        assert "WARNING: line 1: ability id 999 not found" in result.output

    def test_vscode_format(self, cli_runner: CliRunner, project: Path) -> None:
        script = _write_script(project, "standby\n  if broken")
        result = cli_runner.invoke(app, ["check", str(script), "--format", "vscode"])
        assert result.exit_code == 1
        assert f"{script}:2:3: error: Invalid if statement" in result.output

    def test_without_catalog(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "petscript.toml").write_text("[logging]\nlevel = \"ERROR\"\n", encoding="utf-8")
        script = _write_script(tmp_path, "ability(Starfire:595)")
        result = cli_runner.invoke(app, ["check", str(script)])
        assert result.exit_code == 0
        assert "skipping name checks" in result.output


class TestFetchNamesCommand:
    def test_writes_catalog(
        self,
        cli_runner: CliRunner,
        tmp_path: Path,
        catalog: NameCatalog,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def fake_fetch(self) -> NameCatalog:
            return catalog

        monkeypatch.setattr("petscript.cli.names.CatalogFetcher.fetch_catalog", fake_fetch)
        config = tmp_path / "petscript.toml"
        config.write_text('[catalog]\nabilities = "data/a.json"\npets = "data/p.json"\n', encoding="utf-8")

        result = cli_runner.invoke(
            app,
            ["fetch-names", "--client-id", "id", "--client-secret", "secret", "--config", str(config)],
            env=ENV,
        )
        assert result.exit_code == 0
        written = json.loads((tmp_path / "data" / "a.json").read_text(encoding="utf-8"))
        assert written["595"] == "Moonfire"
        assert (tmp_path / "data" / "p.json").exists()

    def test_fetch_error(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def failing_fetch(self) -> NameCatalog:
            raise FetchError("Auth failed: 401 invalid_client", status_code=401)

        monkeypatch.setattr("petscript.cli.names.CatalogFetcher.fetch_catalog", failing_fetch)
        config = tmp_path / "petscript.toml"
        config.write_text("", encoding="utf-8")

        result = cli_runner.invoke(
            app,
            ["fetch-names", "--config", str(config)],
            env={"OAUTH_CLIENT_ID": "id", "OAUTH_CLIENT_SECRET": "secret"},
        )
        assert result.exit_code == 1
        assert "Auth failed" in result.output


class TestUnreadableScript:
    @pytest.mark.parametrize("command", ["parse", "describe", "check"])
    def test_invalid_utf8(self, cli_runner: CliRunner, project: Path, command: str) -> None:
        script = project / "script.txt"
        script.write_bytes(b"ability(\xff)\n")
        result = cli_runner.invoke(app, [command, str(script)])
        assert result.exit_code == 1
        assert "not valid UTF-8" in result.output

"""Unit tests for the init-config command."""

from __future__ import annotations

import tomllib
from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from musicbrainz_automatcher.commands.init_config import _load_example_config, cli, render_config
from musicbrainz_automatcher.config import load_config


class TestLoadExampleConfig:
    def test_loads_non_empty_content(self) -> None:
        content = _load_example_config()
        assert len(content) > 0

    def test_contains_all_sections(self) -> None:
        content = _load_example_config()
        for section in ("[network]", "[cache]", "[display]"):
            assert section in content, f"Missing section {section}"

    def test_documents_user_agent(self) -> None:
        assert "user_agent" in _load_example_config()


class TestInitConfigCommand:
    def test_creates_config_file(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["--output", "test-config.toml"], standalone_mode=False)
            assert result.exception is None
            assert Path("test-config.toml").exists()
            assert "[network]" in Path("test-config.toml").read_text()

    def test_created_file_matches_example(self) -> None:
        example = _load_example_config()
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["--output", "test-config.toml"], standalone_mode=False)
            assert Path("test-config.toml").read_text() == example

    def test_fails_if_exists_without_force(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test-config.toml").write_text("existing")
            result = runner.invoke(cli, ["--output", "test-config.toml"], standalone_mode=False)
            assert isinstance(result.exception, SystemExit)
            assert result.exception.code == 1
            assert Path("test-config.toml").read_text() == "existing"

    def test_force_overwrites_existing(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("test-config.toml").write_text("old content")
            result = runner.invoke(
                cli, ["--output", "test-config.toml", "--force"], standalone_mode=False
            )
            assert result.exception is None
            content = Path("test-config.toml").read_text()
            assert "[cache]" in content
            assert "old content" not in content

    def test_creates_parent_directories(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli, ["--output", "deep/nested/dir/config.toml"], standalone_mode=False
            )
            assert result.exception is None
            assert Path("deep/nested/dir/config.toml").exists()

    def test_default_path_used_when_no_output(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            mock_path = MagicMock(return_value=Path("default-config.toml"))
            with patch(
                "musicbrainz_automatcher.commands.init_config.get_default_config_path", mock_path
            ):
                result = runner.invoke(cli, [], standalone_mode=False)
                assert result.exception is None
                assert Path("default-config.toml").exists()


class TestRenderConfig:
    def test_defaults_match_example(self) -> None:
        assert render_config() == _load_example_config()

    def test_sqlite_backend(self) -> None:
        content = render_config(cache="sqlite")
        assert 'backend = "sqlite"' in content
        assert 'backend = "memory"' not in content
        # Comments describing the options survive.
        assert '# "memory" (per process) or "sqlite" (persistent)' in content

    def test_user_agent_uncommented_and_escaped(self) -> None:
        content = render_config(user_agent='my-app/1.0 ( "me"@example.com )')
        data = tomllib.loads(content)
        assert data["network"]["user_agent"] == 'my-app/1.0 ( "me"@example.com )'

    def test_user_agent_left_commented_by_default(self) -> None:
        assert "user_agent" not in tomllib.loads(render_config())["network"]


class TestInitConfigOptions:
    def test_sqlite_and_user_agent_written(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                [
                    "--output",
                    "test-config.toml",
                    "--cache",
                    "sqlite",
                    "--user-agent",
                    "my-app/1.0 ( me@example.com )",
                ],
                standalone_mode=False,
            )
            assert result.exception is None

            config, _ = load_config(Path("test-config.toml"))
            assert config.cache_backend == "sqlite"
            assert config.user_agent == "my-app/1.0 ( me@example.com )"

    def test_unknown_backend_rejected(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["--output", "test-config.toml", "--cache", "redis"])
            assert result.exit_code == 2
            assert not Path("test-config.toml").exists()

    def test_hint_when_user_agent_missing(self) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["--output", "test-config.toml"])
            assert result.exit_code == 0
            assert "network.user_agent" in result.output

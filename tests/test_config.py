"""Tests for configuration management."""

from pathlib import Path

import pytest
import yaml

from proberunner import config


class TestLoadEnvFile:
    """Tests for load_env_file."""

    def test_load_env_file_missing_returns_empty(self, temp_dir: Path) -> None:
        assert config.load_env_file(temp_dir / ".env") == {}

    def test_load_env_file_parses_and_strips(self, temp_dir: Path) -> None:
        env_path = temp_dir / ".env"
        env_path.write_text("# comment\n\nFOO=\"bar\"\nBAZ='qux'\n")
        assert config.load_env_file(env_path) == {"FOO": "bar", "BAZ": "qux"}


class TestLoadGlobalConfig:
    """Tests for load_global_config."""

    def test_missing_returns_empty(self, fake_home: Path) -> None:
        assert config.load_global_config() == {}

    def test_loads_yml(self, fake_home: Path) -> None:
        config_dir = fake_home / ".proberunner"
        config_dir.mkdir()
        (config_dir / "config.yml").write_text("run:\n  delay_ms: 100\n")
        assert config.load_global_config() == {"run": {"delay_ms": 100}}
        assert config.get_run_defaults() == {"delay_ms": 100}


class TestGetConfig:
    """Tests for get_config priority."""

    def _write_global(self, home: Path, data: dict) -> None:
        config_dir = home / ".proberunner"
        config_dir.mkdir(exist_ok=True)
        (config_dir / "config.yml").write_text(yaml.dump(data))

    def test_default(self, fake_home: Path) -> None:
        assert config.get_config("PROBERUNNER_USER_AGENT", "fallback") == "fallback"

    def test_global_section_path(self, fake_home: Path) -> None:
        self._write_global(fake_home, {"http": {"user_agent": "from-yaml"}})
        assert config.get_config("PROBERUNNER_USER_AGENT") == "from-yaml"

    def test_global_flat_key(self, fake_home: Path) -> None:
        self._write_global(fake_home, {"PROBERUNNER_USER_AGENT": "flat"})
        assert config.get_config("PROBERUNNER_USER_AGENT") == "flat"

    def test_env_file_beats_global(self, fake_home: Path) -> None:
        self._write_global(fake_home, {"http": {"user_agent": "from-yaml"}})
        (fake_home / ".proberunner" / ".env").write_text("PROBERUNNER_USER_AGENT=from-env-file\n")
        assert config.get_config("PROBERUNNER_USER_AGENT") == "from-env-file"

    def test_environment_wins(self, fake_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        self._write_global(fake_home, {"http": {"user_agent": "from-yaml"}})
        monkeypatch.setenv("PROBERUNNER_USER_AGENT", "from-env")
        assert config.get_config("PROBERUNNER_USER_AGENT") == "from-env"


class TestTypedGetters:
    """Tests for the typed getters."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("1", True), ("yes", True), ("TRUE", True), ("0", False), ("off", False)],
    )
    def test_parse_bool(self, value, expected) -> None:
        assert config.parse_bool(value) is expected

    def test_parse_bool_default(self) -> None:
        assert config.parse_bool("maybe", default=True) is True
        assert config.parse_bool(None) is False

    def test_verify_ssl_default_and_override(
        self, fake_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        assert config.get_verify_ssl() is True
        monkeypatch.setenv("PROBERUNNER_VERIFY_SSL", "false")
        assert config.get_verify_ssl() is False

    def test_verbose_from_yaml(self, fake_home: Path) -> None:
        config_dir = fake_home / ".proberunner"
        config_dir.mkdir()
        (config_dir / "config.yml").write_text("run:\n  verbose_log: false\n")
        assert config.get_verbose() is False

    def test_data_dir(self, fake_home: Path, monkeypatch: pytest.MonkeyPatch, temp_dir: Path):
        assert config.get_data_dir() == fake_home / ".proberunner"
        assert config.get_db_path() == fake_home / ".proberunner" / "proberunner.db"
        monkeypatch.setenv("PROBERUNNER_DATA_DIR", str(temp_dir / "elsewhere"))
        assert config.get_results_dir() == temp_dir / "elsewhere" / "results"
        assert config.ensure_data_dir().is_dir()


class TestCreateGlobalConfig:
    """Tests for create_global_config."""

    def test_creates_template(self, fake_home: Path) -> None:
        path = config.create_global_config()
        assert path == fake_home / ".proberunner" / "config.yml"
        data = yaml.safe_load(path.read_text())
        assert data["run"]["delay_ms"] == 500
        assert data["http"]["verify_ssl"] is True

    def test_keeps_existing(self, fake_home: Path) -> None:
        config_dir = fake_home / ".proberunner"
        config_dir.mkdir()
        (config_dir / "config.yml").write_text("run:\n  delay_ms: 5\n")
        config.create_global_config()
        assert config.get_run_defaults() == {"delay_ms": 5}

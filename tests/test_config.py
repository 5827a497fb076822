"""Tests for swagen.config -- discovery, loading, settings, atomic writes."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from swagen.config import (
    Settings,
    atomic_write,
    discover_config,
    get_data_dir,
    load_config,
)
from swagen.exceptions import DiscoveryError
from swagen.exit_codes import EXIT_CONFIG_NOT_FOUND


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


class TestDiscoverConfig:
    def test_json_config(self, tmp_path: Path) -> None:
        (tmp_path / "swagen.config.json").write_text("{}", encoding="utf-8")
        assert discover_config(tmp_path) == tmp_path / "swagen.config.json"

    def test_script_is_preferred(self, tmp_path: Path) -> None:
        (tmp_path / "swagen.config.json").write_text("{}", encoding="utf-8")
        (tmp_path / "swagen.config.py").write_text("config = {}\n", encoding="utf-8")
        assert discover_config(tmp_path) == tmp_path / "swagen.config.py"

    def test_nothing_found(self, tmp_path: Path) -> None:
        with pytest.raises(DiscoveryError) as exc_info:
            discover_config(tmp_path)
        err = exc_info.value
        assert "swagen.config.py or swagen.config.json" in str(err)
        assert "swagen init" in err.remediation
        assert err.exit_code == EXIT_CONFIG_NOT_FOUND

    def test_directory_named_like_config_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "swagen.config.json").mkdir()
        with pytest.raises(DiscoveryError):
            discover_config(tmp_path)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_json_keeps_profile_order(self, tmp_path: Path) -> None:
        config = {"b": {"skip": True}, "a": {"skip": True}}
        (tmp_path / "swagen.config.json").write_text(json.dumps(config), encoding="utf-8")
        assert list(load_config(tmp_path)) == ["b", "a"]

    def test_script_config(self, tmp_path: Path) -> None:
        (tmp_path / "swagen.config.py").write_text(
            "import os\n"
            "config = {'api': {'url': os.environ.get('API_URL', 'https://example.com/doc.json'),\n"
            "                  'output': 'api.ts', 'generator': 'typescript'}}\n",
            encoding="utf-8",
        )
        assert load_config(tmp_path)["api"]["url"] == "https://example.com/doc.json"

    def test_script_without_config(self, tmp_path: Path) -> None:
        (tmp_path / "swagen.config.py").write_text("profiles = {}\n", encoding="utf-8")
        with pytest.raises(DiscoveryError, match="module-level 'config'"):
            load_config(tmp_path)

    def test_script_that_raises(self, tmp_path: Path) -> None:
        (tmp_path / "swagen.config.py").write_text("1 / 0\n", encoding="utf-8")
        with pytest.raises(DiscoveryError, match="ZeroDivisionError"):
            load_config(tmp_path)

    def test_invalid_json_reports_line(self, tmp_path: Path) -> None:
        (tmp_path / "swagen.config.json").write_text('{\n  "a": {},\n}', encoding="utf-8")
        with pytest.raises(DiscoveryError, match="line 3"):
            load_config(tmp_path)

    def test_top_level_must_be_mapping(self, tmp_path: Path) -> None:
        (tmp_path / "swagen.config.json").write_text("[]", encoding="utf-8")
        with pytest.raises(DiscoveryError, match="must map profile names"):
            load_config(tmp_path)

    def test_explicit_path_skips_discovery(self, tmp_path: Path) -> None:
        path = tmp_path / "other.json"
        path.write_text('{"api": {"skip": true}}', encoding="utf-8")
        assert load_config(tmp_path, path) == {"api": {"skip": True}}

    def test_explicit_path_must_exist(self, tmp_path: Path) -> None:
        with pytest.raises(DiscoveryError, match="not found"):
            load_config(tmp_path, tmp_path / "missing.json")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class TestSettings:
    def test_resolve_relative_and_absolute(self, tmp_path: Path) -> None:
        settings = Settings(cwd=tmp_path)
        assert settings.resolve("out/api.ts") == (tmp_path / "out" / "api.ts").resolve()
        assert settings.resolve(str(tmp_path / "abs.ts")) == (tmp_path / "abs.ts").resolve()

    def test_from_env_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SWAGEN_TIMEOUT", raising=False)
        settings = Settings.from_env(tmp_path)
        assert settings.cwd == tmp_path.resolve()
        assert settings.timeout == 30.0
        assert settings.user_agent.startswith("swagen/")

    def test_from_env_timeout(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SWAGEN_TIMEOUT", "2.5")
        assert Settings.from_env(tmp_path).timeout == 2.5

    def test_from_env_invalid_timeout(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SWAGEN_TIMEOUT", "soon")
        with pytest.raises(DiscoveryError, match="SWAGEN_TIMEOUT"):
            Settings.from_env(tmp_path)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_verbatim(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "out.ts"
        atomic_write(path, "line1\r\nline2")
        assert path.read_bytes() == b"line1\r\nline2"

    def test_replaces_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "out.ts"
        path.write_text("old", encoding="utf-8")
        atomic_write(path, "new")
        assert path.read_text(encoding="utf-8") == "new"
        assert os.listdir(tmp_path) == ["out.ts"]

    def test_failure_leaves_no_temp_file(self, tmp_path: Path) -> None:
        path = tmp_path / "out.ts"
        with patch("swagen.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                atomic_write(path, "data")
        assert os.listdir(tmp_path) == []


def test_data_dir_honours_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    with patch("swagen.config.platform.system", return_value="Linux"):
        assert get_data_dir() == tmp_path / "swagen"
    assert (tmp_path / "swagen").is_dir()

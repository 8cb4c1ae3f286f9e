"""Unit tests for configuration loading in main.py."""

import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from main import apply_env_overrides, load_config


def write_config(tmp_path, config):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clear_linear_env(monkeypatch):
    for name in ("LINEAR_API_URL", "LINEAR_API_KEY", "LINEAR_COMPANY_ID"):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Test config.json validation."""

    def test_repository_config(self):
        config = asyncio.run(load_config())
        assert config["source"] in ("linear", "file")
        assert Path(config["aliases_file"]).is_absolute()

    def test_missing_source(self, tmp_path):
        path = write_config(tmp_path, {"linear": {}})
        with pytest.raises(ValueError, match="source"):
            asyncio.run(load_config(path))

    def test_unsupported_source(self, tmp_path):
        path = write_config(tmp_path, {"source": "etuovi"})
        with pytest.raises(ValueError, match="Unsupported source"):
            asyncio.run(load_config(path))

    def test_file_source_requires_path(self, tmp_path):
        path = write_config(tmp_path, {"source": "file"})
        with pytest.raises(ValueError, match="file.path"):
            asyncio.run(load_config(path))

    def test_aliases_file_relative_to_config(self, tmp_path):
        path = write_config(tmp_path, {"source": "linear", "aliases_file": "aliases.yaml"})
        config = asyncio.run(load_config(path))
        assert config["aliases_file"] == str(tmp_path / "aliases.yaml")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            asyncio.run(load_config(tmp_path / "config.json"))


class TestEnvOverrides:
    """Test LINEAR_* environment variables."""

    def test_overrides_applied(self, monkeypatch):
        monkeypatch.setenv("LINEAR_API_KEY", "from-env")
        monkeypatch.setenv("LINEAR_COMPANY_ID", "acme")
        config = apply_env_overrides({"linear": {"api_key": "from-file"}})
        assert config["linear"]["api_key"] == "from-env"
        assert config["linear"]["company_id"] == "acme"

    def test_section_created(self, monkeypatch):
        monkeypatch.setenv("LINEAR_API_URL", "https://staging.example.fi")
        config = apply_env_overrides({})
        assert config["linear"] == {"base_url": "https://staging.example.fi"}

    def test_empty_env_ignored(self, monkeypatch):
        monkeypatch.setenv("LINEAR_API_KEY", "")
        config = apply_env_overrides({"linear": {"api_key": "from-file"}})
        assert config["linear"]["api_key"] == "from-file"

    def test_load_config_applies_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LINEAR_API_KEY", "from-env")
        path = write_config(tmp_path, {"source": "linear"})
        config = asyncio.run(load_config(path))
        assert config["linear"]["api_key"] == "from-env"


class TestRelativePaths:
    """Test path resolution against the config directory."""

    def test_file_path_relative_to_config(self, tmp_path):
        path = write_config(
            tmp_path, {"source": "file", "file": {"path": "exports/listings.json"}}
        )
        config = asyncio.run(load_config(path))
        assert config["file"]["path"] == str(tmp_path / "exports" / "listings.json")

    def test_absolute_paths_kept(self, tmp_path):
        absolute = str(tmp_path / "elsewhere" / "listings.json")
        path = write_config(tmp_path, {"source": "file", "file": {"path": absolute}})
        config = asyncio.run(load_config(path))
        assert config["file"]["path"] == absolute

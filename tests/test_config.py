"""Unit tests for Config and related Pydantic models (wc_scaffold.config).

Tests cover:
- ServeConfig defaults, url, validation
- ToolchainConfig command strings
- Config defaults, project_path, load, from_env
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from wc_scaffold.config import Config, ServeConfig, ToolchainConfig


# ---------------------------------------------------------------------------
# ServeConfig
# ---------------------------------------------------------------------------


class TestServeConfig:
    @pytest.mark.unit
    def test_defaults(self):
        serve = ServeConfig()
        assert serve.port == 3000
        assert serve.directory == "public"
        assert serve.open_delay == 2.0
        assert serve.wait_until_ready is False

    @pytest.mark.unit
    def test_url(self):
        assert ServeConfig().url == "http://localhost:3000"
        assert ServeConfig(port=4321).url == "http://localhost:4321"

    @pytest.mark.unit
    def test_port_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            ServeConfig(port=0)
        with pytest.raises(ValidationError):
            ServeConfig(port=70000)

    @pytest.mark.unit
    def test_negative_delay_rejected(self):
        with pytest.raises(ValidationError):
            ServeConfig(open_delay=-1)


# ---------------------------------------------------------------------------
# ToolchainConfig
# ---------------------------------------------------------------------------


class TestToolchainConfig:
    @pytest.mark.unit
    def test_install_command(self):
        assert ToolchainConfig().install_command() == "npm install serve open"

    @pytest.mark.unit
    def test_build_command(self):
        assert ToolchainConfig().build_command() == "npx webpack"

    @pytest.mark.unit
    def test_serve_command(self):
        assert ToolchainConfig().serve_command(ServeConfig()) == "npx serve public -l 3000"

    @pytest.mark.unit
    def test_open_command(self):
        assert (
            ToolchainConfig().open_command("http://localhost:3000")
            == "npx open http://localhost:3000"
        )

    @pytest.mark.unit
    def test_custom_package_manager(self):
        toolchain = ToolchainConfig(package_manager="pnpm", runner="pnpx")
        assert toolchain.install_command() == "pnpm install serve open"
        assert toolchain.build_command() == "pnpx webpack"


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.output_dir == Path(".")
        assert config.default_project_name == "my-web-component"
        assert config.verbose is False

    @pytest.mark.unit
    def test_project_path_is_absolute(self, tmp_path: Path):
        config = Config(output_dir=tmp_path)
        path = config.project_path("demo")
        assert path.is_absolute()
        assert path == tmp_path.resolve() / "demo"

    @pytest.mark.unit
    def test_empty_default_name_rejected(self):
        with pytest.raises(ValidationError):
            Config(default_project_name="")

    @pytest.mark.unit
    def test_load(self, tmp_path: Path):
        path = tmp_path / "wcs.json"
        path.write_text(
            json.dumps({"verbose": True, "serve": {"port": 4000}}), encoding="utf-8"
        )
        config = Config.load(path)
        assert config.verbose is True
        assert config.serve.port == 4000
        assert config.serve.directory == "public"

    @pytest.mark.unit
    def test_load_invalid_raises(self, tmp_path: Path):
        path = tmp_path / "wcs.json"
        path.write_text(json.dumps({"serve": {"port": "nope"}}), encoding="utf-8")
        with pytest.raises(ValidationError):
            Config.load(path)


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_no_env_keeps_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        assert config == Config()

    @pytest.mark.unit
    def test_overrides(self, tmp_path: Path):
        env = {
            "WCS_OUTPUT_DIR": str(tmp_path),
            "WCS_PORT": "3100",
            "WCS_OPEN_DELAY": "0.5",
            "WCS_PACKAGE_MANAGER": "yarn",
            "WCS_RUNNER": "bunx",
            "WCS_VERBOSE": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.output_dir == tmp_path
        assert config.serve.port == 3100
        assert config.serve.open_delay == 0.5
        assert config.toolchain.package_manager == "yarn"
        assert config.toolchain.runner == "bunx"
        assert config.verbose is True

    @pytest.mark.unit
    def test_applies_on_top_of_base(self):
        base = Config(default_project_name="base-name")
        with patch.dict(os.environ, {"WCS_PORT": "3200"}, clear=True):
            config = Config.from_env(base)
        assert config.default_project_name == "base-name"
        assert config.serve.port == 3200

    @pytest.mark.unit
    def test_invalid_port_rejected(self):
        with patch.dict(os.environ, {"WCS_PORT": "99999"}, clear=True):
            with pytest.raises(ValidationError):
                Config.from_env()

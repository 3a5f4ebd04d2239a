"""Tests for TOML configuration loading."""

import pytest

from tokenqr.config import AppConfig, load_config


class TestConfig:
    def test_defaults_when_missing(self, tmp_path):
        config = load_config(tmp_path / "missing.toml")
        assert config == AppConfig()
        assert config.ecc_level == "Q"
        assert config.version is None

    def test_sections_are_flattened(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            "[encoder]\n"
            'ecc_level = "h"\n'
            "version = 7\n"
            "\n"
            "[render]\n"
            'output_format = "html"\n'
            "cell_px = 4\n"
            "border = 2\n"
            "\n"
            "[logging]\n"
            'log_level = "DEBUG"\n')

        config = load_config(path)
        assert config.ecc_level == "H"
        assert config.version == 7
        assert config.output_format == "html"
        assert config.cell_px == 4
        assert config.border == 2
        assert config.log_level == "DEBUG"

    def test_version_zero_is_automatic(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[encoder]\nversion = 0\n")
        assert load_config(path).version is None

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[other]\nsomething = 1\n")
        assert load_config(path) == AppConfig()

    @pytest.mark.parametrize("body", [
        '[encoder]\necc_level = "X"\n',
        "[encoder]\nversion = 41\n",
        '[render]\noutput_format = "gif"\n',
        "[render]\ncell_px = 0\n",
        "[render]\nborder = -1\n",
        '[encoder]\nversion = "abc"\n',
        "[encoder]\necc_level = 3\n",
        "[render]\ncell_px = true\n",
        "[render]\nborder = 1.5\n",
        "[logging]\nlog_level = 10\n",
    ])
    def test_invalid(self, tmp_path, body):
        path = tmp_path / "config.toml"
        path.write_text(body)
        with pytest.raises(ValueError):
            load_config(path)

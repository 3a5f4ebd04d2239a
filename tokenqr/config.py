"""Configuration management: load TOML config files."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path

from . import rsblock

DEFAULT_CONFIG_PATH = Path("~/.config/tokenqr/config.toml").expanduser()

OUTPUT_FORMATS = ("text", "html", "png")


@dataclass
class AppConfig:
    """Top-level application configuration."""

    # Encoder
    ecc_level: str = rsblock.QR_ECC_Q
    version: int | None = None
    encoding: str = "utf-8"

    # Rendering
    output_format: str = "text"
    cell_px: int = 8
    border: int = 4

    # Logging
    log_level: str = "INFO"

    def validate(self) -> None:
        for name in ("ecc_level", "encoding", "output_format", "log_level"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"{name} must be a string, got {getattr(self, name)!r}")
        # bool is an int subclass, reject it explicitly
        for name in ("version", "cell_px", "border"):
            value = getattr(self, name)
            if name == "version" and value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")

        if self.ecc_level.upper() not in rsblock.ecc_level_index_:
            raise ValueError(f"Unknown error correction level {self.ecc_level!r}")
        self.ecc_level = self.ecc_level.upper()

        # 0 in a config file means automatic
        if self.version == 0:
            self.version = None
        if self.version is not None and not 1 <= self.version <= rsblock.QR_MAX_VERSION:
            raise ValueError(f"Version must be between 1 and 40, got {self.version}")

        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format {self.output_format!r}")
        if self.cell_px < 1:
            raise ValueError(f"cell_px must be positive, got {self.cell_px}")
        if self.border < 0:
            raise ValueError(f"border must not be negative, got {self.border}")


def load_config(path: Path | str | None = None) -> AppConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if the file doesn't exist.

    Example::

        [encoder]
        ecc_level = "Q"
        version = 0

        [render]
        output_format = "png"
        cell_px = 8
        border = 4

        [logging]
        log_level = "DEBUG"
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    path = Path(path)

    config = AppConfig()

    if not path.exists():
        return config

    with open(path, "rb") as f:
        data = tomllib.load(f)

    flat = _flatten_toml(data)

    for fld in fields(AppConfig):
        if fld.name in flat:
            setattr(config, fld.name, flat[fld.name])

    config.validate()
    return config


def _flatten_toml(data: dict) -> dict:
    """Flatten the TOML sections, keys are unique across sections."""
    result = {}
    for key, value in data.items():
        if isinstance(value, dict):
            result.update(_flatten_toml(value))
        else:
            result[key] = value
    return result

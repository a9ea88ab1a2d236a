"""
Configuration management for regionmask.

Loads YAML configuration with sensible defaults for mask extraction,
tracing and debug artifacts.
"""

import os
from dataclasses import dataclass, field

import yaml


COORDINATE_SYSTEMS = ("image", "physical", "fk5", "galactic")


@dataclass
class ExtractionConfig:
    """Configuration for mask extraction."""
    full: bool = False  # keep the full image frame instead of cropping
    silent: bool = True  # suppress the unknown-shape warning
    coords: str = "image"  # passed through to the region source, not interpreted
    pixel_origin: int = 1  # DS9 image pixels are 1-based


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class DebugConfig:
    """Configuration for debug artifact generation."""
    enabled: bool = False
    max_edge_scale: int = 1600


@dataclass
class MaskConfig:
    """Complete extraction configuration."""
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    Raises ValueError for an unsupported coordinate system.
    """
    config = MaskConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    check_coords(config.extraction.coords)

    return config


def check_coords(coords):
    """Raise ValueError unless coords names a supported coordinate system."""
    if coords not in COORDINATE_SYSTEMS:
        raise ValueError(
            f"Unsupported coordinate system {coords!r}, "
            f"expected one of {', '.join(COORDINATE_SYSTEMS)}"
        )


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
    if "extraction" in yaml_data:
        for key, value in yaml_data["extraction"].items():
            if hasattr(config.extraction, key):
                setattr(config.extraction, key, value)

    if "tracing" in yaml_data:
        for key, value in yaml_data["tracing"].items():
            if hasattr(config.tracing, key):
                setattr(config.tracing, key, value)

    if "debug" in yaml_data:
        for key, value in yaml_data["debug"].items():
            if hasattr(config.debug, key):
                setattr(config.debug, key, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    config = MaskConfig()

    yaml_data = {
        "extraction": {
            "full": config.extraction.full,
            "silent": config.extraction.silent,
            "coords": config.extraction.coords,
            "pixel_origin": config.extraction.pixel_origin,
        },
        "tracing": {
            "enabled": config.tracing.enabled,
            "level": config.tracing.level,
        },
        "debug": {
            "enabled": config.debug.enabled,
            "max_edge_scale": config.debug.max_edge_scale,
        },
    }

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)

# src/prickle/config.py
"""Check loop configuration with YAML presets.

Provides the ``PropertyConfig`` model and layered loading with
precedence CLI > config file > preset > defaults.

Presets live in ``prickle/presets/*.yaml``:
    quick:     a handful of tests, for tight edit loops
    default:   the standard 100 tests
    thorough:  many tests and a larger discard allowance, for CI soak runs
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

PRESETS_DIR = Path(__file__).parent / "presets"


class PropertyConfig(BaseModel):
    """Limits and rendering options for a property check."""

    model_config = {"frozen": True, "extra": "forbid"}

    test_limit: int = Field(
        default=100,
        gt=0,
        description="Number of successful tests required for the property to pass",
    )
    discard_limit: int | None = Field(
        default=100,
        ge=0,
        description="Discards tolerated before giving up (None = never give up)",
    )
    shrink_limit: int | None = Field(
        default=None,
        ge=0,
        description="Maximum shrink steps taken after a failure (None = until a local minimum)",
    )
    recheck: bool = Field(
        default=True,
        description="Include the recheck hint in failure reports",
    )
    preset_name: str | None = Field(
        default=None,
        description="Preset this configuration was loaded from, if any",
    )


def merge_layers(*layers: dict[str, Any] | None) -> dict[str, Any]:
    """Merge flat config layers left to right; later layers win key by key.

    ``None`` layers are skipped. ``PropertyConfig`` has no nested fields,
    so a shallow merge is the whole story.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        if layer:
            merged = {**merged, **layer}
    return merged


def _read_mapping(path: Path, what: str) -> dict[str, Any]:
    """Read a YAML file that must hold a mapping; an empty file is ``{}``."""
    with path.open() as f:
        loaded = yaml.safe_load(f)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"{what} must be a YAML mapping, got {type(loaded).__name__}")
    return loaded


def list_presets(presets_dir: Path = PRESETS_DIR) -> list[str]:
    """Sorted preset names (without the .yaml extension)."""
    if not presets_dir.exists():
        return []
    return sorted(p.stem for p in presets_dir.glob("*.yaml"))


def load_preset(preset_name: str, presets_dir: Path = PRESETS_DIR) -> dict[str, Any]:
    """Raw settings of a named preset.

    Raises:
        FileNotFoundError: If the preset does not exist.
        ValueError: If the preset is not a YAML mapping.
    """
    preset_path = presets_dir / f"{preset_name}.yaml"
    if not preset_path.exists():
        raise FileNotFoundError(f"Preset '{preset_name}' not found. Available presets: {list_presets(presets_dir)}")
    return _read_mapping(preset_path, f"Preset '{preset_name}'")


def load_config(
    *,
    preset: str | None = None,
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
    presets_dir: Path = PRESETS_DIR,
) -> PropertyConfig:
    """Build a ``PropertyConfig`` from preset, file and CLI layers.

    Later layers override earlier ones; fields no layer sets keep the
    model defaults.

    Raises:
        FileNotFoundError: If the preset or config file does not exist.
        ValueError: If a preset or config file is not a YAML mapping.
        yaml.YAMLError: If a YAML file is malformed.
        pydantic.ValidationError: If the merged settings are invalid.
    """
    preset_layer = load_preset(preset, presets_dir) if preset is not None else None

    file_layer = None
    if config_file is not None:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        file_layer = _read_mapping(config_file, f"Config file {config_file}")

    settings = merge_layers(preset_layer, file_layer, cli_overrides)
    return PropertyConfig(**{**settings, "preset_name": preset})

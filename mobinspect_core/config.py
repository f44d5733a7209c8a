# mobinspect_core/config.py
"""
@file config.py
@brief YAML configuration for the inspection engine, validated against a JSON schema.

Example:

    inspect:
      platform: react-native
      overlap_threshold: 0.5
      max_walk_depth: 60
      fallback_screen: {width: 393, height: 852}
      source_maps:
        - android/app/build/generated/sourcemaps/react/debug/index.android.bundle.map
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import yaml
from jsonschema import Draft202012Validator

from .exceptions import ConfigError
from .models import PLATFORM_IOS

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schemas", "config.schema.json")


@dataclass(frozen=True)
class InspectConfig:
    platform: str = PLATFORM_IOS
    overlap_threshold: float = 0.5
    max_walk_depth: int = 60
    # iPhone 15 logical size; used when no element source yields anything
    fallback_screen_width: float = 393
    fallback_screen_height: float = 852
    source_maps: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]], base_dir: Optional[str] = None) -> InspectConfig:
        """Build a config from an ``inspect:`` block, applying defaults."""
        d = d or {}
        screen = d.get("fallback_screen") or {}
        maps: List[str] = []
        for p in d.get("source_maps") or []:
            p = str(p)
            if base_dir and not os.path.isabs(p):
                p = os.path.join(base_dir, p)
            maps.append(p)
        return cls(
            platform=str(d.get("platform", PLATFORM_IOS)),
            overlap_threshold=float(d.get("overlap_threshold", 0.5)),
            max_walk_depth=int(d.get("max_walk_depth", 60)),
            fallback_screen_width=float(screen.get("width", 393)),
            fallback_screen_height=float(screen.get("height", 852)),
            source_maps=tuple(maps),
        )


def _load_schema(path: str = SCHEMA_PATH) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_inspect_block(block: Dict[str, Any]) -> None:
    """Raise ConfigError listing every schema violation in ``block``."""
    validator = Draft202012Validator(_load_schema())
    errors = sorted(validator.iter_errors(block), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = ["Config schema validation failed:"]
        for e in errors:
            lines.append(f"- {list(e.path)}: {e.message}")
        raise ConfigError("\n".join(lines))


def _load_yaml(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        raise ConfigError(f"Config YAML not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Config YAML must be a mapping at root.")
    return data


def load_config(path: str) -> InspectConfig:
    """
    Load and validate a config file.

    Relative ``source_maps`` entries are resolved against the file's directory.
    """
    path = os.path.abspath(path)
    data = _load_yaml(path)
    block = data.get("inspect", {})
    if block is None:
        block = {}
    if not isinstance(block, dict):
        raise ConfigError("'inspect' must be a mapping")
    validate_inspect_block(block)
    return InspectConfig.from_dict(block, base_dir=os.path.dirname(path))

"""Load and merge configuration from package.json, .cyselect.toml, env vars and CLI flags.

Sources, lowest to highest priority:

1. built-in defaults
2. the ``"cypress-test-selector"`` key of ``package.json``
3. ``.cyselect.toml`` (or an explicit ``--config`` file)
4. ``CI_CYSELECT_*`` environment variables
5. CLI flags
"""

from __future__ import annotations

import dataclasses
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from cyselect.config.schema import (
    OUTPUT_FORMATS,
    CySelectConfig,
    DiscoveryConfig,
    GitConfig,
    OutputConfig,
    SelectionConfig,
    WeightsConfig,
)
from cyselect.mapper.models import SAFETY_LEVELS

CONFIG_FILENAME = ".cyselect.toml"
PACKAGE_JSON_KEY = "cypress-test-selector"

RawConfig = Dict[str, Dict[str, Any]]

_SECTIONS = ("selection", "weights", "discovery", "git", "output")

# package.json camelCase key -> (section, field)
_PACKAGE_JSON_FIELDS = {
    "projectRoot": ("discovery", "project_root"),
    "testPatterns": ("discovery", "test_patterns"),
    "exclude": ("discovery", "exclude"),
    "safetyLevel": ("selection", "safety_level"),
    "threshold": ("selection", "threshold"),
    "defaultBase": ("git", "default_base"),
}

_ENV_FIELDS = {
    "CI_CYSELECT_SAFETY_LEVEL": ("selection", "safety_level"),
    "CI_CYSELECT_THRESHOLD": ("selection", "threshold"),
    "CI_CYSELECT_BASE": ("git", "default_base"),
    "CI_CYSELECT_FORMAT": ("output", "format"),
}


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(project_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = project_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> RawConfig:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def load_package_json_config(project_dir: Path) -> RawConfig:
    """Read the ``cypress-test-selector`` key of package.json, if any."""
    path = project_dir / "package.json"
    if not path.is_file():
        return {}
    try:
        package = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc

    section = package.get(PACKAGE_JSON_KEY) if isinstance(package, dict) else None
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f'{path}: "{PACKAGE_JSON_KEY}" must be an object')

    raw: RawConfig = {}
    for key, value in section.items():
        if key in _PACKAGE_JSON_FIELDS:
            name, field_name = _PACKAGE_JSON_FIELDS[key]
            raw.setdefault(name, {})[field_name] = value
    return raw


def _env_overrides() -> RawConfig:
    """Collect CI_CYSELECT_* environment variable overrides."""
    raw: RawConfig = {}
    for var, (section, field_name) in _ENV_FIELDS.items():
        if val := os.environ.get(var):
            if field_name == "threshold":
                try:
                    raw.setdefault(section, {})[field_name] = float(val)
                except ValueError as exc:
                    raise ConfigError(f"{var} must be a number, got {val!r}") from exc
            else:
                raw.setdefault(section, {})[field_name] = val
    return raw


def _merge(base: RawConfig, overlay: RawConfig) -> RawConfig:
    """Shallow-merge *overlay* into *base*, section by section."""
    merged = {name: dict(values) for name, values in base.items()}
    for name, values in overlay.items():
        if not isinstance(values, dict):
            if name in _SECTIONS:
                raise ConfigError(f"[{name}] must be a table")
            continue  # top-level scalars carry no settings
        merged.setdefault(name, {}).update(values)
    return merged


def _build_section(data: RawConfig, cls: type, section: str):
    """Build a dataclass from a config section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.get(section, {}).items() if k in valid_fields}
    return cls(**filtered)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_string_list(value: Any, name: str) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ConfigError(f"{name} must be a string or a list of strings")


def validate(cfg: CySelectConfig) -> None:
    """Raise ConfigError on the first invalid value."""
    sel = cfg.selection
    if sel.safety_level not in SAFETY_LEVELS:
        raise ConfigError(
            f"Invalid safety level: {sel.safety_level!r} "
            f"(expected one of {', '.join(SAFETY_LEVELS)})"
        )
    if sel.threshold is not None and not _is_number(sel.threshold):
        raise ConfigError(f"threshold must be a number, got {sel.threshold!r}")

    for f in dataclasses.fields(cfg.weights):
        value = getattr(cfg.weights, f.name)
        if not _is_number(value) or value < 0:
            raise ConfigError(f"weights.{f.name} must be a non-negative number, got {value!r}")

    if not isinstance(cfg.discovery.project_root, str):
        raise ConfigError("discovery.project_root must be a string")
    cfg.discovery.test_patterns = _as_string_list(cfg.discovery.test_patterns, "discovery.test_patterns")
    cfg.discovery.exclude = _as_string_list(cfg.discovery.exclude, "discovery.exclude")
    if cfg.discovery.manifest is not None and not isinstance(cfg.discovery.manifest, str):
        raise ConfigError("discovery.manifest must be a string")

    if cfg.git.default_base is not None and not isinstance(cfg.git.default_base, str):
        raise ConfigError("git.default_base must be a string")

    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format: {cfg.output.format!r} (expected human or json)")
    if not isinstance(cfg.output.verbose, bool):
        raise ConfigError("output.verbose must be true or false")


def load_config(
    project_dir: Path,
    config_override: Optional[str] = None,
    cli_overrides: Optional[RawConfig] = None,
) -> CySelectConfig:
    """Load, merge, validate and return a CySelectConfig.

    Relative ``project_root`` and ``manifest`` paths resolve against
    *project_dir*.
    """
    raw = load_package_json_config(project_dir)

    config_path = find_config_file(project_dir, config_override)
    if config_path is not None:
        raw = _merge(raw, _parse_toml(config_path))

    raw = _merge(raw, _env_overrides())
    if cli_overrides:
        # Unset flags are None and must not mask lower-priority sources
        flags = {
            name: {k: v for k, v in values.items() if v is not None}
            for name, values in cli_overrides.items()
        }
        raw = _merge(raw, flags)

    cfg = CySelectConfig(
        selection=_build_section(raw, SelectionConfig, "selection"),
        weights=_build_section(raw, WeightsConfig, "weights"),
        discovery=_build_section(raw, DiscoveryConfig, "discovery"),
        git=_build_section(raw, GitConfig, "git"),
        output=_build_section(raw, OutputConfig, "output"),
    )

    validate(cfg)

    cfg.discovery.project_root = (project_dir / cfg.discovery.project_root).resolve().as_posix()
    if cfg.discovery.manifest:
        cfg.discovery.manifest = str((project_dir / cfg.discovery.manifest).resolve())
    return cfg

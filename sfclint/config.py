"""Configuration loading for sfclint (.sfclint.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".sfclint.yml"
DEFAULT_MAX_DEPTH = 128

_BIND_STYLES = {"shorthand", "longform"}
_ARRAY_PROP_MODES = {"ignore", "check"}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or is invalid."""


@dataclass
class BindStyleConfig:
    """Preferred spelling for property-binding directives."""

    style: str = "shorthand"


@dataclass
class ComputedReturnConfig:
    """Options for the computed getter return check."""

    treat_undefined_as_unspecified: bool = True


@dataclass
class DefaultPropConfig:
    """Options for the prop default-value check."""

    array_props: str = "ignore"
    exempt_required: bool = False


@dataclass
class LintConfig:
    """Represents the settings defined in .sfclint.yml."""

    root: Path
    enabled: List[str] = field(default_factory=list)
    bind_style: BindStyleConfig = field(default_factory=BindStyleConfig)
    computed_return: ComputedReturnConfig = field(default_factory=ComputedReturnConfig)
    default_prop: DefaultPropConfig = field(default_factory=DefaultPropConfig)
    max_depth: int = DEFAULT_MAX_DEPTH


def load_config(config_path: Path) -> LintConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return LintConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
    return config_from_mapping(data, root=root)


def config_from_mapping(data: Dict[str, Any], *, root: Path | None = None) -> LintConfig:
    """Build a :class:`LintConfig` from an already-parsed mapping."""
    config = LintConfig(root=root or Path.cwd())

    rules_data = _as_dict(data.get("rules"))
    config.enabled = _as_str_list(rules_data.get("enabled"))

    bind_data = rules_data.get("v-bind-style")
    if isinstance(bind_data, str):
        bind_data = {"style": bind_data}
    bind_data = _as_dict(bind_data)
    if "style" in bind_data:
        style = _as_str(bind_data.get("style"))
        if style not in _BIND_STYLES:
            raise ConfigError(f"v-bind-style.style must be one of {sorted(_BIND_STYLES)}, got {style!r}")
        config.bind_style.style = style

    computed_data = _as_dict(rules_data.get("return-in-computed-property"))
    if "treat_undefined_as_unspecified" in computed_data:
        flag = _as_bool(computed_data.get("treat_undefined_as_unspecified"))
        if flag is None:
            raise ConfigError("return-in-computed-property.treat_undefined_as_unspecified must be a boolean")
        config.computed_return.treat_undefined_as_unspecified = flag

    prop_data = _as_dict(rules_data.get("require-default-prop"))
    if "array_props" in prop_data:
        mode = _as_str(prop_data.get("array_props"))
        if mode not in _ARRAY_PROP_MODES:
            raise ConfigError(
                f"require-default-prop.array_props must be one of {sorted(_ARRAY_PROP_MODES)}, got {mode!r}"
            )
        config.default_prop.array_props = mode
    if "exempt_required" in prop_data:
        exempt = _as_bool(prop_data.get("exempt_required"))
        if exempt is None:
            raise ConfigError("require-default-prop.exempt_required must be a boolean")
        config.default_prop.exempt_required = exempt

    if "max_depth" in data:
        depth = _as_int(data.get("max_depth"))
        if depth is None or depth < 1:
            raise ConfigError("max_depth must be a positive integer")
        config.max_depth = depth

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "BindStyleConfig",
    "CONFIG_FILENAME",
    "ComputedReturnConfig",
    "ConfigError",
    "DefaultPropConfig",
    "LintConfig",
    "config_from_mapping",
    "load_config",
]

"""Configuration manager for CodeFlow CLI using TOML files."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import toml

from . import config
from .models import ScanPolicy

logger = logging.getLogger(__name__)


DEFAULT_SECTIONS: Dict[str, Dict[str, Any]] = {
    "scan": {
        "extra_ignores": [],
        "extensions": sorted(config.TEXT_EXTENSIONS),
        "include_extensionless": True,
    },
    "export": {
        "max_text_size": config.DEFAULT_MAX_TEXT_SIZE,
        "timeout": config.DEFAULT_EXPORT_TIMEOUT,
    },
}


def load_full_config() -> Dict[str, Any]:
    """Load the entire TOML config (all sections).

    Returns:
        Parsed configuration, or an empty dict when the file is missing
        or cannot be parsed.
    """
    if not config.CONFIG_FILE.exists():
        return {}
    try:
        with open(config.CONFIG_FILE, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config.CONFIG_FILE, exc)
        return {}


def _save_full_config(data: Dict[str, Any]) -> bool:
    """Write entire config dict to TOML file, preserving all sections."""
    config.ensure_base_dirs()
    try:
        with open(config.CONFIG_FILE, "w", encoding="utf-8") as f:
            toml.dump(data, f)
        return True
    except OSError as exc:
        logger.warning("Could not write config %s: %s", config.CONFIG_FILE, exc)
        return False


def load_section(name: str) -> Dict[str, Any]:
    """Return a config section merged over its defaults."""
    merged = dict(DEFAULT_SECTIONS.get(name, {}))
    section = load_full_config().get(name, {})
    if isinstance(section, dict):
        merged.update(section)
    return merged


def load_scan_policy(extra_ignores: List[str] | None = None) -> ScanPolicy:
    """Build the scan policy from the ``[scan]`` section.

    Args:
        extra_ignores: Additional ignore patterns (e.g. from ``--ignore``)
            appended after the configured ones.

    Returns:
        A :class:`ScanPolicy` extending the built-in denylist.
    """
    scan = load_section("scan")
    extensions = {
        ext.lower() if ext.startswith(".") else f".{ext.lower()}"
        for ext in scan.get("extensions") or []
    }
    policy = ScanPolicy(
        ignore_patterns=tuple(config.DEFAULT_IGNORES),
        extensions=frozenset(extensions or config.TEXT_EXTENSIONS),
        include_extensionless=bool(scan.get("include_extensionless", True)),
    )
    patterns = list(scan.get("extra_ignores") or []) + list(extra_ignores or [])
    return policy.with_extra_ignores(patterns)


def load_export_config() -> Dict[str, Any]:
    """Load ``[export]`` settings with integer coercion."""
    export = load_section("export")
    defaults = DEFAULT_SECTIONS["export"]
    for key in ("max_text_size", "timeout"):
        try:
            export[key] = int(export[key])
        except (TypeError, ValueError):
            logger.warning("Invalid export.%s=%r, using %s", key, export[key], defaults[key])
            export[key] = defaults[key]
    return export


def set_value(dotted_key: str, raw_value: str) -> Any:
    """Set ``section.key`` to *raw_value*, coerced to the default's type.

    Raises:
        KeyError: If the key is not a known setting.
        ValueError: If the value cannot be coerced.
    """
    section, _, key = dotted_key.partition(".")
    if section not in DEFAULT_SECTIONS or key not in DEFAULT_SECTIONS[section]:
        raise KeyError(dotted_key)

    default = DEFAULT_SECTIONS[section][key]
    value: Any
    if isinstance(default, bool):
        lowered = raw_value.strip().lower()
        if lowered not in ("true", "false", "1", "0", "yes", "no"):
            raise ValueError(f"Expected a boolean, got {raw_value!r}")
        value = lowered in ("true", "1", "yes")
    elif isinstance(default, int):
        value = int(raw_value)
        if value <= 0:
            raise ValueError(f"Expected a positive integer, got {raw_value!r}")
    elif isinstance(default, list):
        value = [item.strip() for item in raw_value.split(",") if item.strip()]
    else:
        value = raw_value

    data = load_full_config()
    data.setdefault(section, {})[key] = value
    if not _save_full_config(data):
        raise OSError(f"Could not write {config.CONFIG_FILE}")
    return value


def reset_config() -> bool:
    """Remove the config file, restoring defaults."""
    if config.CONFIG_FILE.exists():
        config.CONFIG_FILE.unlink()
        return True
    return False

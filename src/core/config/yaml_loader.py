# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""YAML override loading.

Operators tune built-in tables (for example tutor style profiles) with
small YAML files. Overrides are merged over the defaults key by key, so a
file only needs to name what it changes.

Example:
    >>> from pathlib import Path
    >>> from src.core.config.yaml_loader import load_overrides
    >>> table = load_overrides(Path("style_profiles.yaml"), {"profiles": {}}, section="profiles")
"""

from pathlib import Path
from typing import Any

import yaml


class YAMLLoadError(Exception):
    """Raised when an override file cannot be loaded or has the wrong shape."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initialize YAMLLoadError.

        Args:
            path: Offending file.
            reason: What was wrong with it.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load YAML file '{path}': {reason}")


def load_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML file whose root is a mapping.

    Args:
        path: File to read.

    Returns:
        Parsed mapping; an empty or comment-only file yields {}.

    Raises:
        YAMLLoadError: If the file is missing, unreadable, malformed, or
            its root is not a mapping.
    """
    if not path.is_file():
        reason = "Path is not a file" if path.exists() else "File does not exist"
        raise YAMLLoadError(path, reason)

    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise YAMLLoadError(path, f"Cannot read file: {e}") from e
    except yaml.YAMLError as e:
        raise YAMLLoadError(path, f"Invalid YAML syntax: {e}") from e

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise YAMLLoadError(path, f"YAML root must be a mapping, got {type(parsed).__name__}")
    return parsed


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``.

    Nested mappings merge recursively; any other override value replaces
    the base value outright. Neither input is modified.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_overrides(
    path: Path,
    defaults: dict[str, Any],
    section: str | None = None,
) -> dict[str, Any]:
    """Merge a YAML override file over defaults.

    Args:
        path: Override file.
        defaults: Built-in table.
        section: If given, return only this top-level mapping of the
            merged result.

    Returns:
        Merged table (or section of it).

    Raises:
        YAMLLoadError: If the file cannot be loaded or the requested
            section is not a mapping.
    """
    merged = deep_merge(defaults, load_yaml(path))
    if section is None:
        return merged

    table = merged.get(section)
    if not isinstance(table, dict):
        raise YAMLLoadError(path, f"'{section}' must be a mapping")
    return table

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for YAML override loading."""

from pathlib import Path

import pytest

from src.core.config.yaml_loader import (
    YAMLLoadError,
    deep_merge,
    load_overrides,
    load_yaml,
)


@pytest.mark.unit
class TestLoadYaml:
    """Tests for load_yaml."""

    def test_reads_mapping(self, tmp_path: Path) -> None:
        """Test that a mapping file is parsed."""
        path = tmp_path / "profiles.yaml"
        path.write_text("profiles:\n  teen: short\n")

        assert load_yaml(path) == {"profiles": {"teen": "short"}}

    def test_comment_only_file_is_empty(self, tmp_path: Path) -> None:
        """Test that a file with only comments yields an empty mapping."""
        path = tmp_path / "empty.yaml"
        path.write_text("# nothing to override\n")

        assert load_yaml(path) == {}

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Test that a missing file is reported."""
        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(tmp_path / "missing.yaml")

        assert "File does not exist" in str(exc_info.value)

    def test_directory_raises(self, tmp_path: Path) -> None:
        """Test that a directory is rejected."""
        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(tmp_path)

        assert "Path is not a file" in str(exc_info.value)

    def test_list_root_raises(self, tmp_path: Path) -> None:
        """Test that a non-mapping root is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- short\n- medium_length\n")

        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(path)

        assert "YAML root must be a mapping" in str(exc_info.value)

    def test_invalid_syntax_raises(self, tmp_path: Path) -> None:
        """Test that malformed YAML is reported."""
        path = tmp_path / "broken.yaml"
        path.write_text("profiles: [short\n")

        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(path)

        assert "Invalid YAML syntax" in str(exc_info.value)


@pytest.mark.unit
class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_mappings_merge(self) -> None:
        """Test that nested keys are merged rather than replaced."""
        base = {"profiles": {"teen": "medium_length", "adult": "full_length"}}
        override = {"profiles": {"teen": "short"}}

        result = deep_merge(base, override)

        assert result == {"profiles": {"teen": "short", "adult": "full_length"}}

    def test_scalar_replaces_mapping(self) -> None:
        """Test that a non-mapping override replaces the base value."""
        result = deep_merge({"profiles": {"teen": "short"}}, {"profiles": None})

        assert result == {"profiles": None}

    def test_inputs_are_not_modified(self) -> None:
        """Test that neither input changes."""
        base = {"profiles": {"teen": "medium_length"}}
        override = {"profiles": {"adult": "full_length"}}

        deep_merge(base, override)

        assert base == {"profiles": {"teen": "medium_length"}}
        assert override == {"profiles": {"adult": "full_length"}}


@pytest.mark.unit
class TestLoadOverrides:
    """Tests for load_overrides."""

    def test_section_is_merged_over_defaults(self, tmp_path: Path) -> None:
        """Test that the file only needs to name what it changes."""
        path = tmp_path / "profiles.yaml"
        path.write_text("profiles:\n  teen: short\n")
        defaults = {"profiles": {"teen": "medium_length", "adult": "full_length"}}

        result = load_overrides(path, defaults, section="profiles")

        assert result == {"teen": "short", "adult": "full_length"}

    def test_whole_table_returned_without_section(self, tmp_path: Path) -> None:
        """Test that the full merged table is returned when no section is named."""
        path = tmp_path / "overrides.yaml"
        path.write_text("extra: true\n")

        result = load_overrides(path, {"profiles": {}})

        assert result == {"profiles": {}, "extra": True}

    def test_non_mapping_section_raises(self, tmp_path: Path) -> None:
        """Test that a section that is not a mapping is rejected."""
        path = tmp_path / "profiles.yaml"
        path.write_text("profiles: short\n")

        with pytest.raises(YAMLLoadError) as exc_info:
            load_overrides(path, {"profiles": {}}, section="profiles")

        assert "'profiles' must be a mapping" in str(exc_info.value)
        assert exc_info.value.path == path

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Tests for configuration loading, templates and validation.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
import yaml

from strandmerger.config import (
    DEFAULT_CONFIG,
    apply_overrides,
    load_config,
    save_config_template,
    validate_config,
)


class TestLoadConfig:
    """Test loading and merging of configuration files."""

    def test_defaults(self):
        config = load_config()
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG
        assert validate_config(config) == []

    def test_user_values_merged(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"merge": {"min_homology": 90}}))

        config = load_config(path)

        assert config["merge"]["min_homology"] == 90
        assert config["merge"]["min_alignment"] == 100
        assert DEFAULT_CONFIG["merge"]["min_homology"] == 85

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == DEFAULT_CONFIG

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_apply_overrides(self):
        config = apply_overrides(load_config(), {
            "merge.max_ctg_gap": 12,
            "execution.threads": None,
        })
        assert config["merge"]["max_ctg_gap"] == 12
        assert config["execution"]["threads"] == 1


class TestTemplates:
    """Test configuration templates."""

    @pytest.mark.parametrize("template,homology", [
        ("default", 85), ("strict", 95), ("permissive", 75),
    ])
    def test_template_round_trip(self, tmp_path, template, homology):
        path = tmp_path / f"{template}.yaml"
        save_config_template(path, template=template)

        config = load_config(path)

        assert config["merge"]["min_homology"] == homology
        assert validate_config(config) == []

    def test_unknown_template(self, tmp_path):
        with pytest.raises(ValueError):
            save_config_template(tmp_path / "x.yaml", template="fast")


class TestValidateConfig:
    """Test configuration validation."""

    @pytest.mark.parametrize("key,section,value", [
        ("min_homology", "merge", 120),
        ("min_alignment", "merge", 0),
        ("max_pctg_gap", "merge", -3),
        ("min_alignment_quotient", "merge", 2),
        ("threads", "execution", 0),
        ("on_error", "execution", "retry"),
    ])
    def test_invalid_values(self, key, section, value):
        config = apply_overrides(load_config(), {f"{section}.{key}": value})
        errors = validate_config(config)
        assert len(errors) == 1
        assert key in errors[0]

    def test_invalid_log_level(self):
        config = apply_overrides(load_config(), {"output.logging.level": "LOUD"})
        assert validate_config(config) == ["Invalid logging level: LOUD"]

# StrandMerger v0.1.0
# Any usage is subject to this software's license.

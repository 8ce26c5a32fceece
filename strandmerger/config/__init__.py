"""
StrandMerger v0.1.0

Configuration management for StrandMerger.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .schema import (
    DEFAULT_CONFIG,
    load_config,
    apply_overrides,
    save_config_template,
    validate_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "load_config",
    "apply_overrides",
    "save_config_template",
    "validate_config",
]

"""
StrandMerger v0.1.0

Configuration schema for StrandMerger.

Defines all available configuration parameters with defaults and validation.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..pctg.settings import (
    DEFAULT_MAX_GAPS,
    DEFAULT_MAX_SEARCHED_ALIGNMENT,
    MIN_ALIGNMENT,
    MIN_ALIGNMENT_QUOTIENT,
    MIN_HOMOLOGY,
)


TEMPLATES = ['default', 'strict', 'permissive']
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Merge engine
    # ========================================================================
    'merge': {
        'max_alignment': DEFAULT_MAX_SEARCHED_ALIGNMENT,  # Base comparisons per search
        'max_pctg_gap': DEFAULT_MAX_GAPS,  # Gap opened on the paired contig side
        'max_ctg_gap': DEFAULT_MAX_GAPS,  # Gap opened on the contig side
        'min_alignment': MIN_ALIGNMENT,  # Minimum alignment columns
        'min_homology': MIN_HOMOLOGY,  # Percent identity
        'min_alignment_quotient': MIN_ALIGNMENT_QUOTIENT,  # Degenerate alignment guard
    },

    # ========================================================================
    # Execution
    # ========================================================================
    'execution': {
        'threads': 1,  # Chains processed concurrently
        'on_error': 'skip',  # 'skip' a broken chain or 'abort' the run
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'prefix': 'pctg',
        'line_width': 80,
        'include_unmerged': True,  # Emit unplaced master contigs as singletons
        'write_placements': True,

        # Logging
        'logging': {
            'level': 'INFO',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
            'log_file': 'strandmerger.log',
        },
    },
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If ``config_path`` does not exist
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        with open(config_path) as f:
            user_config = yaml.safe_load(f)

        # Deep merge user config into defaults
        if user_config:
            config = _deep_merge(config, user_config)

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def apply_overrides(config: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply dotted-key overrides (e.g. ``'merge.min_homology'``), skipping None values.

    Returns:
        New configuration dictionary
    """
    result = copy.deepcopy(config)
    for key, value in overrides.items():
        if value is None:
            continue
        keys = key.split('.')
        target = result
        for k in keys[:-1]:
            target = target.setdefault(k, {})
        target[keys[-1]] = value
    return result


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'strict', 'permissive')
    """
    if template not in TEMPLATES:
        raise ValueError(f"Unknown template: {template}")

    config = copy.deepcopy(DEFAULT_CONFIG)

    # Customize for specific templates
    if template == 'strict':
        config['merge']['min_homology'] = 95
        config['merge']['min_alignment'] = 500
        config['merge']['max_pctg_gap'] = 50
        config['merge']['max_ctg_gap'] = 50
        config['execution']['on_error'] = 'abort'

    elif template == 'permissive':
        config['merge']['min_homology'] = 75
        config['merge']['min_alignment'] = 50

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []
    merge = config.get('merge', {})

    # Validate integer limits
    for key, minimum in (('max_alignment', 1), ('max_pctg_gap', 0),
                         ('max_ctg_gap', 0), ('min_alignment', 1)):
        value = merge.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
            errors.append(f"merge.{key} must be an integer >= {minimum}, got {value!r}")

    # Validate thresholds
    homology = merge.get('min_homology')
    if not isinstance(homology, (int, float)) or not 0 <= homology <= 100:
        errors.append(f"merge.min_homology must be a percentage in [0, 100], got {homology!r}")

    quotient = merge.get('min_alignment_quotient')
    if not isinstance(quotient, (int, float)) or not 0 <= quotient <= 1:
        errors.append(f"merge.min_alignment_quotient must be in [0, 1], got {quotient!r}")

    # Validate execution
    execution = config.get('execution', {})
    threads = execution.get('threads')
    if not isinstance(threads, int) or threads < 1:
        errors.append(f"execution.threads must be a positive integer, got {threads!r}")
    if execution.get('on_error') not in ('skip', 'abort'):
        errors.append(f"execution.on_error must be 'skip' or 'abort', got {execution.get('on_error')!r}")

    # Validate output
    level = config.get('output', {}).get('logging', {}).get('level')
    if level not in LOG_LEVELS:
        errors.append(f"Invalid logging level: {level}")

    return errors

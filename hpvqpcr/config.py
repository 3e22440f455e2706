"""
Configuration management for HPV qPCR analysis.
"""

import copy
import json
import logging
from typing import Dict, Optional

from hpvqpcr.constants import AnalysisConstants

logger = logging.getLogger(__name__)

CONFIG_FILE = "hpvqpcr_config.json"

DEFAULT_CONFIG = {
    'QC_THRESHOLDS': {
        'POS_CT_THRESHOLD': AnalysisConstants.POS_CT_THRESHOLD,
        'IC_CT_THRESHOLD': AnalysisConstants.IC_CT_THRESHOLD,
    },
    'STRICT_QC': False,
    'MAX_FILE_SIZE_MB': AnalysisConstants.MAX_FILE_SIZE_MB,
}


def _merge(base: Dict, override: Dict) -> Dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_config(config: Optional[Dict] = None) -> Dict:
    """Return ``config`` layered over the defaults (defaults when None)."""
    return _merge(DEFAULT_CONFIG, config or {})


def load_config(path: str = CONFIG_FILE) -> Dict:
    """Load configuration from file or return defaults."""
    try:
        with open(path, 'r') as f:
            return get_config(json.load(f))
    except FileNotFoundError:
        logger.debug(f"No config file at {path}, using defaults")
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read config {path}: {e}; using defaults")
    return get_config()


def save_config(config: Dict, path: str = CONFIG_FILE) -> bool:
    """Save configuration to file."""
    try:
        with open(path, 'w') as f:
            json.dump(config, f, indent=2)
        return True
    except OSError as e:
        logger.error(f"Could not save config {path}: {e}")
        return False

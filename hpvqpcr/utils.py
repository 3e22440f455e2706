"""Utility functions for HPV qPCR analysis.

Contains sorting helpers, Ct parsing and sample-name role checks.
"""

import math
import re
from typing import Optional

from hpvqpcr.constants import (
    NEGATIVE_CONTROL_TOKEN,
    NOT_APPLICABLE,
    NTC_NAME,
    POSITIVE_CONTROL_PREFIX,
)

_CT_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def natural_sort_key(sample_name):
    """Extract numbers from sample name for natural sorting (e.g., Sample2 < Sample10)"""
    parts = re.split(r"(\d+)", str(sample_name))
    return [int(part) if part.isdigit() else part.lower() for part in parts]


def parse_ct(ct: Optional[str]) -> Optional[float]:
    """Parse a raw Ct cell into a finite float.

    Args:
        ct: Raw cell text as exported by the instrument

    Returns:
        The Ct value, or None when the cell is empty, ``nan``, non-numeric
        or not finite
    """
    if ct is None:
        return None
    text = str(ct).strip()
    if not _CT_PATTERN.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def display_ct(ct: Optional[str]) -> str:
    return ct if ct else NOT_APPLICABLE


def leading_genotype_code(text: str) -> str:
    match = re.match(r"\d+", text or "")
    return match.group(0) if match else ""


def is_ntc(name: str) -> bool:
    return name == NTC_NAME


def is_positive_control(name: str) -> bool:
    return name.startswith(POSITIVE_CONTROL_PREFIX)


def is_negative_control(name: str) -> bool:
    return NEGATIVE_CONTROL_TOKEN in name


def is_control(name: str) -> bool:
    """True for any run control: positive, negative or NTC."""
    return is_ntc(name) or is_positive_control(name) or is_negative_control(name)

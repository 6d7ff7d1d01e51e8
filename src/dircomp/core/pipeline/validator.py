from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper between untrusted configuration sources (the JSON file
and CLI overrides) and the engines. Handles type coercion, default injection
and the policy floor of the safety depth.
"""

import logging
from typing import Any, Dict, List, Tuple

from dircomp.domain.config import get_default_config
from dircomp.domain.constants import MIN_SAFE_DEPTH

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Schema Definition (Declarative mapping)
    bool_fields = ["dry_run", "unlock_before_sync", "log_to_file"]
    string_fields = ["log_level", "log_file"]
    float_fields = ["delay_seconds", "unlock_timeout"]

    # 3. Field Processing & Normalization
    for field in bool_fields:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in float_fields:
        merged[field] = _as_non_negative_float(
            merged.get(field), defaults[field], field, warnings, strict
        )

    merged["min_depth"] = _as_min_depth(merged.get("min_depth"), warnings, strict)
    merged["log_level"] = merged["log_level"].upper()

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_non_negative_float(
        value: Any, fallback: float, field: str, warnings: List[str], strict: bool
) -> float:
    """Coerce numbers and numeric strings; negatives fall back to the default."""
    if value is None:
        return fallback

    number: float
    if isinstance(value, bool):
        number = -1.0
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and not strict:
        try:
            number = float(value.strip())
        except ValueError:
            number = -1.0
        else:
            warnings.append(f"Field '{field}' converted from '{value}' to number.")
    else:
        number = -1.0

    if number >= 0:
        return number

    msg = f"Invalid field '{field}': expected a non-negative number, received {value!r}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_min_depth(value: Any, warnings: List[str], strict: bool) -> int:
    """The safety depth may be raised but never lowered below the policy floor."""
    if value is None:
        return MIN_SAFE_DEPTH

    depth = value
    if isinstance(value, str) and not strict:
        try:
            depth = int(value.strip())
        except ValueError:
            depth = None

    if isinstance(depth, bool) or not isinstance(depth, int):
        msg = f"Invalid field 'min_depth': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return MIN_SAFE_DEPTH

    if depth < MIN_SAFE_DEPTH:
        msg = f"Field 'min_depth' cannot be lower than {MIN_SAFE_DEPTH} (received {depth})."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using {MIN_SAFE_DEPTH}.")
        return MIN_SAFE_DEPTH

    return depth

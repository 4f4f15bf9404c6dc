from __future__ import annotations

"""
Configuration Validation Service.

Ensures that the configuration dictionary assembled from defaults, the
persistent file and CLI overrides conforms to the expected schema. Handles
type coercion and default value injection.
"""

import logging
from typing import Any, Dict, List, Tuple

from binary2treemap.domain.config import get_default_config

logger = logging.getLogger(__name__)

_MAX_PORT = 65535


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
        strict: If True, raises exceptions on invalid values instead of
                coercing or falling back.

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

    # 2. Schema Definition
    string_fields = ["host"]
    bool_fields = ["serve", "print_tree", "json_output"]
    int_fields = {
        "port": (0, _MAX_PORT),
        "max_depth": (0, None),
        "progress_interval": (0, None),
    }

    # 3. Field Processing & Normalization
    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in bool_fields:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field, (low, high) in int_fields.items():
        merged[field] = _as_int(
            merged.get(field), defaults[field], field, low, high, warnings, strict
        )

    merged["path_map"] = _as_path_map(merged.get("path_map"), warnings, strict)

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


def _as_int(
        value: Any,
        fallback: int,
        field: str,
        low: int,
        high: Any,
        warnings: List[str],
        strict: bool,
) -> int:
    """Coerce to int and check the allowed range."""
    if value is None:
        return fallback

    number = None
    if isinstance(value, int) and not isinstance(value, bool):
        number = value
    elif isinstance(value, str) and not strict:
        try:
            number = int(value.strip())
            warnings.append(f"Field '{field}' converted from '{value}' to {number}.")
        except ValueError:
            number = None

    if number is None:
        msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if number < low or (high is not None and number > high):
        msg = f"Field '{field}' out of range: {number}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    return number


def _as_path_map(value: Any, warnings: List[str], strict: bool) -> Dict[str, str]:
    """Ensure the source path map is a dict of non-empty str -> str."""
    if value is None:
        return {}

    if not isinstance(value, dict):
        msg = f"Invalid field 'path_map': expected dict, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using empty mapping.")
        return {}

    out: Dict[str, str] = {}
    for src, dst in value.items():
        if isinstance(src, str) and src.strip() and isinstance(dst, str):
            out[src.strip()] = dst.strip()
            continue
        msg = f"Invalid entry in 'path_map': {src!r} -> {dst!r}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Entry discarded.")
    return out

"""
figtidy.io.config
=================

Option parsing + YAML loading helpers shared by the layout and style operations.

What belongs here
-----------------
- Load YAML safely and normalize structures
- Split an options file into its per-operation sections
- Map name-value option spellings ("TopMargin") onto dataclass fields
- Small validators used by the option dataclasses

What does NOT belong here
-------------------------
- The option dataclasses themselves (they live next to the operation that uses
  them: figtidy.viz.layout.LayoutOptions, figtidy.viz.style.StyleOptions)
"""

from __future__ import annotations

import math
import numbers
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

from ..errors import InvalidParameterError, UnrecognizedParameterError


PathLike = Union[str, Path]

# Top-level sections an options file may contain
OPTION_SECTIONS = ("layout", "style")


# -----------------------------------------------------------------------------
# YAML loading + normalization
# -----------------------------------------------------------------------------

def load_yaml(path: PathLike) -> Dict[str, Any]:
    """
    Load YAML from path using safe loader.

    Normalization:
      - empty YAML -> {}
      - top-level must be a dict (mapping); otherwise error
    """
    path = Path(path).expanduser().resolve()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise TypeError(f"Top-level YAML must be a mapping/dict: {path}")

    return data


def load_option_sections(path: PathLike) -> Dict[str, Dict[str, Any]]:
    """
    Load an options file and return one mapping per section.

    Example file:

        layout:
          TopMargin: 0.04
          LegendOutside: true
        style:
          FontSize: 16

    Missing sections come back as {}. Unknown sections are an error.
    """
    data = load_yaml(path)

    unknown = sorted(str(k) for k in data if k not in OPTION_SECTIONS)
    if unknown:
        raise UnrecognizedParameterError(
            f"Unrecognized section(s) in {path}: {', '.join(unknown)}. "
            f"Allowed: {', '.join(OPTION_SECTIONS)}"
        )

    out: Dict[str, Dict[str, Any]] = {}
    for section in OPTION_SECTIONS:
        body = data.get(section) or {}
        if not isinstance(body, dict):
            raise TypeError(f"Section '{section}' in {path} must be a mapping")
        out[section] = dict(body)
    return out


# -----------------------------------------------------------------------------
# Name-value option spellings
# -----------------------------------------------------------------------------

def map_option_names(
    options: Mapping[str, Any],
    aliases: Mapping[str, str],
    fields: Mapping[str, Any],
) -> Dict[str, Any]:
    """
    Translate user-facing option names to dataclass field names.

    Names are accepted either as field names ("top_margin") or through the
    alias table ("TopMargin"). Matching of aliases is case-insensitive.

    Raises UnrecognizedParameterError listing every unknown name, and
    InvalidParameterError when two names resolve to the same field.
    """
    folded = {k.lower(): v for k, v in aliases.items()}

    out: Dict[str, Any] = {}
    given: Dict[str, str] = {}
    unknown = []
    for name, value in options.items():
        key = str(name)
        if key in fields:
            field = key
        elif key.lower() in folded:
            field = folded[key.lower()]
        else:
            unknown.append(key)
            continue
        if field in given:
            raise InvalidParameterError(
                f"Option given twice: {given[field]} and {key} both set {field}"
            )
        given[field] = key
        out[field] = value

    if unknown:
        allowed = ", ".join(sorted(aliases))
        raise UnrecognizedParameterError(
            f"Unrecognized parameter(s): {', '.join(unknown)}. Allowed: {allowed}"
        )
    return out


# -----------------------------------------------------------------------------
# Validators
# -----------------------------------------------------------------------------

def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def check_open_interval(name: str, value: Any, low: float, high: float) -> float:
    """Return value as float if low < value < high, else raise."""
    if not _is_real(value) or not math.isfinite(float(value)):
        raise InvalidParameterError(f"{name} must be a finite real number, got {value!r}")
    value = float(value)
    if not (low < value < high):
        raise InvalidParameterError(
            f"{name} must lie in the open interval ({low}, {high}), got {value}"
        )
    return value


def check_positive(name: str, value: Any) -> float:
    """Return value as float if it is a finite number > 0, else raise."""
    if not _is_real(value) or not math.isfinite(float(value)):
        raise InvalidParameterError(f"{name} must be a finite real number, got {value!r}")
    value = float(value)
    if value <= 0:
        raise InvalidParameterError(f"{name} must be positive, got {value}")
    return value


def check_flag(name: str, value: Any) -> bool:
    """Accept bool or numeric 0/1; anything else is an error."""
    if isinstance(value, bool):
        return value
    if _is_real(value) and value in (0, 1):
        return bool(value)
    raise InvalidParameterError(f"{name} must be a boolean (or 0/1), got {value!r}")

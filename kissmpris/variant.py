"""D-Bus variant values and typed extraction from them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .model import MAX_OUTPUT_LENGTH

_INT64_RANGE = 1 << 64
_INT64_MAX = (1 << 63) - 1


class VariantError(ValueError):
    """Raised when a value that must be a variant is not one."""


@dataclass(frozen=True)
class Variant:
    """A D-Bus variant: a type signature and the value it holds."""

    signature: str
    value: Any


def _require_variant(value: Any) -> Variant:
    if not isinstance(value, Variant):
        raise VariantError("This message iterator must be have variant type")
    return value


def extract_double(value: Any) -> float:
    """Return the double held by the variant, or 0.0 for other types."""
    var = _require_variant(value)
    if var.signature == "d":
        return float(var.value)
    return 0.0


def extract_string(value: Any) -> str:
    """Return the text held by the variant.

    Strings and object paths are returned as they are; the string elements
    of an array are joined.  Other types give an empty string.
    """
    var = _require_variant(value)
    if var.signature in ("s", "o"):
        text = str(var.value)
    elif var.signature == "as":
        text = "".join(var.value)
    else:
        text = ""
    return text[: MAX_OUTPUT_LENGTH - 1]


def extract_int32(value: Any) -> int:
    """Return the 32-bit integer held by the variant, or 0 for other types."""
    var = _require_variant(value)
    if var.signature == "i":
        return int(var.value)
    return 0


def extract_int64(value: Any) -> int:
    """Return the 64-bit integer held by the variant, or 0 for other types.

    Unsigned values are reinterpreted as signed.
    """
    var = _require_variant(value)
    if var.signature == "x":
        return int(var.value)
    if var.signature == "t":
        number = int(var.value) % _INT64_RANGE
        return number - _INT64_RANGE if number > _INT64_MAX else number
    return 0


def extract_boolean(value: Any) -> bool:
    """Return the boolean held by the variant, or False for other types."""
    var = _require_variant(value)
    if var.signature == "b":
        return bool(var.value)
    return False
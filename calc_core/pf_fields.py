from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

REAL_POWER = "real_power"
REACTIVE_POWER = "reactive_power"
APPARENT_POWER = "apparent_power"
POWER_FACTOR = "power_factor"

# Display / iteration order of the power-triangle fields.
QUANTITIES: tuple[str, ...] = (REAL_POWER, APPARENT_POWER, REACTIVE_POWER, POWER_FACTOR)

POWER_QUANTITIES = frozenset({REAL_POWER, REACTIVE_POWER, APPARENT_POWER})

SHORT_NAMES = {
    REAL_POWER: "kW",
    APPARENT_POWER: "kVA",
    REACTIVE_POWER: "kVAR",
    POWER_FACTOR: "PF",
}


@dataclass(frozen=True)
class Empty:
    quantity: str


@dataclass(frozen=True)
class InvalidFormat:
    quantity: str
    text: str


@dataclass(frozen=True)
class OutOfDomain:
    quantity: str
    value: float


@dataclass(frozen=True)
class Valid:
    quantity: str
    value: float


FieldCheck = Union[Empty, InvalidFormat, OutOfDomain, Valid]


def _require_quantity(quantity: str) -> None:
    if quantity not in QUANTITIES:
        raise ValueError(f"Unknown quantity: {quantity}")


def in_domain(quantity: str, value: float) -> bool:
    """Powers are magnitudes (>= 0); power factor lies in [0, 1]."""
    _require_quantity(quantity)
    if quantity in POWER_QUANTITIES:
        return value >= 0.0
    return 0.0 <= value <= 1.0


def parse_number(text: str | None) -> float | None:
    """
    Strict float parsing of a field text.
    Returns None for text that is not a finite number.
    """
    if text is None:
        return None
    try:
        value = float(str(text).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def is_blank(text: str | None) -> bool:
    return text is None or str(text).strip() == ""


def validate_text(quantity: str, text: str | None) -> FieldCheck:
    """Check one raw field text; knows nothing about which fields are sources."""
    _require_quantity(quantity)
    if is_blank(text):
        return Empty(quantity)
    value = parse_number(text)
    if value is None:
        return InvalidFormat(quantity, str(text))
    if not in_domain(quantity, value):
        return OutOfDomain(quantity, value)
    return Valid(quantity, value)

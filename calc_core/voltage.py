from __future__ import annotations

import math
from dataclasses import dataclass

SQRT3 = math.sqrt(3.0)


def _finite(value: float, name: str) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{name} must be a number")
    val = float(value)
    if math.isnan(val) or math.isinf(val):
        raise ValueError(f"{name} must be finite")
    return val


def ll_to_ln(v_ll: float) -> float:
    """Line-to-line -> line-to-neutral voltage of a balanced system."""
    v = _finite(v_ll, "v_ll")
    if v < 0.0:
        raise ValueError("Voltage cannot be negative.")
    return v / SQRT3


def ln_to_ll(v_ln: float) -> float:
    v = _finite(v_ln, "v_ln")
    if v < 0.0:
        raise ValueError("Voltage cannot be negative.")
    return v * SQRT3


@dataclass(frozen=True)
class ThreePhasePower:
    apparent_kva: float
    real_kw: float
    reactive_kvar: float


def three_phase_power(
    current_a: float,
    power_factor: float,
    *,
    v_ll: float | None = None,
    v_ln: float | None = None,
) -> ThreePhasePower:
    """
    Balanced three-phase S, P, Q in k-units.

    Exactly one of v_ll / v_ln must be given:
    S = V_LL * I * sqrt(3) or S = 3 * V_LN * I; P = S * PF; Q = sqrt(S^2 - P^2).
    """
    if v_ll is not None and v_ln is not None:
        raise ValueError("Provide either v_ll or v_ln, not both")
    if v_ll is None and v_ln is None:
        raise ValueError("v_ll or v_ln is required")
    current = _finite(current_a, "current_a")
    pf = _finite(power_factor, "power_factor")
    if current < 0.0:
        raise ValueError("current_a must be >= 0")
    if pf < 0.0 or pf > 1.0:
        raise ValueError("power_factor must be in [0, 1]")

    if v_ll is not None:
        v = _finite(v_ll, "v_ll")
        if v < 0.0:
            raise ValueError("v_ll must be >= 0")
        s_va = v * current * SQRT3
    else:
        v = _finite(v_ln, "v_ln")
        if v < 0.0:
            raise ValueError("v_ln must be >= 0")
        s_va = 3.0 * v * current

    p_w = s_va * pf
    q_var = math.sqrt(max(0.0, s_va * s_va - p_w * p_w))
    return ThreePhasePower(
        apparent_kva=s_va / 1000.0,
        real_kw=p_w / 1000.0,
        reactive_kvar=q_var / 1000.0,
    )

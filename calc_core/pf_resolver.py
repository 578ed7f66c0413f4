from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Union

from .pf_fields import (
    APPARENT_POWER,
    POWER_FACTOR,
    REACTIVE_POWER,
    REAL_POWER,
    SHORT_NAMES,
    Valid,
)

ZERO_SNAP = 1e-9

_REASONS_EN = {
    "pf.reason.kva_zero_kw_nonzero": "kVA cannot be 0 if kW is non-zero.",
    "pf.reason.kw_exceeds_kva": "Absolute kW cannot be greater than absolute kVA.",
    "pf.reason.kvar_exceeds_kva": "Absolute kVAR cannot be greater than absolute kVA.",
    "pf.reason.pf_zero_kw_nonzero": "PF cannot be 0 if kW is non-zero.",
    "pf.reason.pf_range": "PF must be between 0 and 1.",
    "pf.reason.pf_one_kvar_nonzero": "PF cannot be 1 if kVAR is non-zero.",
    "pf.reason.pf_one_kvar_zero": "Cannot calculate from kVAR and PF=1. Please provide kW or kVA instead.",
    "pf.reason.not_finite": "Calculation resulted in a non-finite {field}.",
}


class ImpossibleCombination(ValueError):
    """The two supplied quantities cannot coexist under real-number physics."""

    def __init__(self, key: str, **params: Any) -> None:
        self.key = key
        self.params = params
        raw = _REASONS_EN.get(key, key)
        super().__init__(raw.format(**params) if params else raw)

    @property
    def reason(self) -> str:
        return str(self)


@dataclass(frozen=True)
class PowerTriangle:
    real_power: float
    reactive_power: float
    apparent_power: float
    power_factor: float

    def as_dict(self) -> dict[str, float]:
        return {
            REAL_POWER: self.real_power,
            REACTIVE_POWER: self.reactive_power,
            APPARENT_POWER: self.apparent_power,
            POWER_FACTOR: self.power_factor,
        }


def snap(value: float) -> float:
    return 0.0 if abs(value) < ZERO_SNAP else value


def _leg(hyp: float, side: float) -> float:
    # sqrt(hyp^2 - side^2) without squaring, so large magnitudes do not overflow;
    # clamped at 0 for rounding noise
    hyp, side = abs(hyp), abs(side)
    if side >= hyp:
        return 0.0
    return math.sqrt(hyp - side) * math.sqrt(hyp + side)


def _check_pf(f: float) -> None:
    if f < 0.0 or f > 1.0:
        raise ImpossibleCombination("pf.reason.pf_range")


def _check_finite(value: float, field: str) -> None:
    if not math.isfinite(value):
        raise ImpossibleCombination("pf.reason.not_finite", field=field)


@dataclass(frozen=True)
class ApparentReal:
    s: float
    p: float

    def solve(self) -> PowerTriangle:
        s, p = self.s, self.p
        if s == 0 and p != 0:
            raise ImpossibleCombination("pf.reason.kva_zero_kw_nonzero")
        if abs(p) > abs(s):
            raise ImpossibleCombination("pf.reason.kw_exceeds_kva")
        f = 1.0 if s == 0 else p / s
        return PowerTriangle(real_power=p, reactive_power=_leg(s, p), apparent_power=s, power_factor=f)


@dataclass(frozen=True)
class ReactiveReal:
    q: float
    p: float

    def solve(self) -> PowerTriangle:
        q, p = self.q, self.p
        s = math.hypot(p, q)
        _check_finite(s, "kVA")
        f = 1.0 if s == 0 else p / s
        return PowerTriangle(real_power=p, reactive_power=q, apparent_power=s, power_factor=f)


@dataclass(frozen=True)
class RealFactor:
    p: float
    f: float

    def solve(self) -> PowerTriangle:
        p, f = self.p, self.f
        if f == 0 and p != 0:
            raise ImpossibleCombination("pf.reason.pf_zero_kw_nonzero")
        _check_pf(f)
        s = 0.0 if f == 0 else p / f
        _check_finite(s, "kVA")
        return PowerTriangle(real_power=p, reactive_power=_leg(s, p), apparent_power=s, power_factor=f)


@dataclass(frozen=True)
class ApparentReactive:
    s: float
    q: float

    def solve(self) -> PowerTriangle:
        s, q = self.s, self.q
        if abs(q) > abs(s):
            raise ImpossibleCombination("pf.reason.kvar_exceeds_kva")
        p = _leg(s, q)
        f = 1.0 if s == 0 else p / s
        return PowerTriangle(real_power=p, reactive_power=q, apparent_power=s, power_factor=f)


@dataclass(frozen=True)
class ApparentFactor:
    s: float
    f: float

    def solve(self) -> PowerTriangle:
        s, f = self.s, self.f
        _check_pf(f)
        p = s * f
        return PowerTriangle(real_power=p, reactive_power=_leg(s, p), apparent_power=s, power_factor=f)


@dataclass(frozen=True)
class ReactiveFactor:
    q: float
    f: float

    def solve(self) -> PowerTriangle:
        """
        PF=1 is rejected for any kVAR: with kVAR=0 the triangle is flat and
        kW/kVA are undetermined, so the user must supply one of them instead.
        """
        q, f = self.q, self.f
        _check_pf(f)
        if f == 1 and q != 0:
            raise ImpossibleCombination("pf.reason.pf_one_kvar_nonzero")
        if f == 1:
            raise ImpossibleCombination("pf.reason.pf_one_kvar_zero")
        if f == 0:
            return PowerTriangle(real_power=0.0, reactive_power=q, apparent_power=abs(q), power_factor=f)
        angle = math.acos(f)
        p = q / math.tan(angle)
        s = q / math.sin(angle)
        _check_finite(p, "kW")
        _check_finite(s, "kVA")
        return PowerTriangle(real_power=p, reactive_power=q, apparent_power=s, power_factor=f)


PairCase = Union[ApparentReal, ReactiveReal, RealFactor, ApparentReactive, ApparentFactor, ReactiveFactor]

# Unordered pair -> (case class, constructor argument order).
_PAIR_CASES: dict[frozenset[str], tuple[type, tuple[str, str]]] = {
    frozenset({APPARENT_POWER, REAL_POWER}): (ApparentReal, (APPARENT_POWER, REAL_POWER)),
    frozenset({REACTIVE_POWER, REAL_POWER}): (ReactiveReal, (REACTIVE_POWER, REAL_POWER)),
    frozenset({REAL_POWER, POWER_FACTOR}): (RealFactor, (REAL_POWER, POWER_FACTOR)),
    frozenset({APPARENT_POWER, REACTIVE_POWER}): (ApparentReactive, (APPARENT_POWER, REACTIVE_POWER)),
    frozenset({APPARENT_POWER, POWER_FACTOR}): (ApparentFactor, (APPARENT_POWER, POWER_FACTOR)),
    frozenset({REACTIVE_POWER, POWER_FACTOR}): (ReactiveFactor, (REACTIVE_POWER, POWER_FACTOR)),
}


def pair_case(first: Valid, second: Valid) -> PairCase:
    """Build the case for an unordered source pair; argument order is irrelevant."""
    if first.quantity == second.quantity:
        raise ValueError(f"Source pair must name two different quantities, got {first.quantity} twice")
    key = frozenset({first.quantity, second.quantity})
    entry = _PAIR_CASES.get(key)
    if entry is None:
        raise ValueError(f"Unsupported source pair: {sorted(key)}")
    cls, order = entry
    by_name = {first.quantity: float(first.value), second.quantity: float(second.value)}
    return cls(by_name[order[0]], by_name[order[1]])


def resolve_pair(sources: list[Valid] | tuple[Valid, ...]) -> PowerTriangle:
    """
    Resolve the full power triangle from exactly two valid quantities.

    Source values are returned as given; derived values below ZERO_SNAP are
    reported as exactly 0. Raises ImpossibleCombination on any guard violation
    or a derived value that is not finite, and ValueError if the caller did
    not pass exactly two distinct checks.
    """
    if len(sources) != 2:
        raise ValueError(f"Expected exactly 2 source quantities, got {len(sources)}")
    first, second = sources
    triangle = pair_case(first, second).solve()
    source_ids = {first.quantity, second.quantity}
    for name, val in triangle.as_dict().items():
        if name not in source_ids:
            _check_finite(val, SHORT_NAMES[name])
    values = {
        name: (val if name in source_ids else snap(val))
        for name, val in triangle.as_dict().items()
    }
    return PowerTriangle(**values)

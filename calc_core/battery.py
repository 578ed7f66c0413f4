from __future__ import annotations

import math
from dataclasses import dataclass

MODE_IDLE = "IDLE"
MODE_CHARGING = "CHARGING"
MODE_DISCHARGING = "DISCHARGING"

RTE_SYSTEM = "system"
RTE_COMPONENT = "component"


def _num(value: float, name: str) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{name} must be a number")
    val = float(value)
    if math.isnan(val) or math.isinf(val):
        raise ValueError(f"{name} must be finite")
    return val


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


@dataclass(frozen=True)
class SocTiming:
    mode: str
    effective_power_kw: float
    hours: float | None

    @property
    def duration(self) -> str:
        return format_duration(self.hours) if self.hours is not None else "N/A"


def format_duration(hours: float | None) -> str:
    """Human readable duration, e.g. '2 hours, 5 minutes'."""
    if hours is None or math.isnan(hours) or hours < 0:
        return "N/A"
    if math.isinf(hours):
        return "Never (infinite)"
    whole = math.floor(hours)
    minutes = round((hours - whole) * 60)
    if minutes == 60:
        whole += 1
        minutes = 0
    parts: list[str] = []
    if whole > 0:
        parts.append(f"{whole} hour{'s' if whole > 1 else ''}")
    if minutes > 0:
        parts.append(f"{minutes} minute{'s' if minutes > 1 else ''}")
    return ", ".join(parts) if parts else "Less than a minute"


def soc_time_to_target(
    usable_energy_kwh: float,
    start_soc_pct: float,
    target_soc_pct: float,
    power_kw: float,
    *,
    inverter_eff_pct: float = 98.0,
    battery_eff_pct: float = 95.0,
    aux_loss_w: float = 150.0,
) -> SocTiming:
    """
    Time for a battery to move from start to target SoC at a fixed AC power.

    Positive power charges, negative discharges. Charging delivers
    P * eta_inv - aux to the battery; discharging draws |P| / eta_inv + aux.
    Battery efficiency is range-checked only; the estimate uses terminal power.
    """
    energy = _num(usable_energy_kwh, "usable_energy_kwh")
    start = _num(start_soc_pct, "start_soc_pct")
    target = _num(target_soc_pct, "target_soc_pct")
    power = _num(power_kw, "power_kw")
    inv_eff = _num(inverter_eff_pct, "inverter_eff_pct")
    bat_eff = _num(battery_eff_pct, "battery_eff_pct")
    aux_kw = _num(aux_loss_w, "aux_loss_w") / 1000.0

    if start < 0 or start > 100:
        raise ValueError("start_soc_pct must be in [0, 100]")
    if target < 0 or target > 100:
        raise ValueError("target_soc_pct must be in [0, 100]")
    if energy <= 0:
        raise ValueError("usable_energy_kwh must be > 0")
    if inv_eff <= 0 or inv_eff > 100:
        raise ValueError("inverter_eff_pct must be in (0, 100]")
    if bat_eff <= 0 or bat_eff > 100:
        raise ValueError("battery_eff_pct must be in (0, 100]")
    if start == target:
        raise ValueError("start_soc_pct and target_soc_pct cannot be the same")

    power_dir = _sign(power)
    soc_dir = _sign(target - start)
    if power_dir == 0:
        return SocTiming(mode=MODE_IDLE, effective_power_kw=0.0, hours=None)
    if power_dir != soc_dir:
        raise ValueError("power direction conflicts with SoC target")

    if power_dir > 0:
        mode = MODE_CHARGING
        effective = power * (inv_eff / 100.0) - aux_kw
        if effective <= 0:
            raise ValueError("charge power is too low to overcome system losses")
    else:
        mode = MODE_DISCHARGING
        effective = abs(power) / (inv_eff / 100.0) + aux_kw

    energy_to_move = abs(target - start) / 100.0 * energy
    return SocTiming(mode=mode, effective_power_kw=effective, hours=energy_to_move / effective)


@dataclass(frozen=True)
class RoundTripEfficiency:
    system_pct: float | None
    component_pct: float | None


def round_trip_efficiency(
    energy_charged_kwh: float,
    energy_discharged_kwh: float,
    *,
    mode: str = RTE_SYSTEM,
    aux_energy_kwh: float = 0.0,
) -> RoundTripEfficiency:
    """
    System (wall-to-wall) and component (BESS block) RTE in percent.

    The measured one is always computed; the other is inferred only when an
    auxiliary energy is given (aux load sits on the AC side).
    """
    e_in = _num(energy_charged_kwh, "energy_charged_kwh")
    e_out = _num(energy_discharged_kwh, "energy_discharged_kwh")
    aux = _num(aux_energy_kwh, "aux_energy_kwh")
    if mode not in (RTE_SYSTEM, RTE_COMPONENT):
        raise ValueError(f"Unsupported RTE mode: {mode}")
    if e_in <= 0:
        raise ValueError("energy_charged_kwh must be > 0")
    if e_out > e_in:
        raise ValueError("energy_discharged_kwh cannot be greater than energy_charged_kwh")

    measured = e_out / e_in * 100.0
    if mode == RTE_SYSTEM:
        component = None
        if aux > 0:
            e_in_component = e_in - aux
            if e_in_component <= 0:
                raise ValueError("aux_energy_kwh must be less than energy_charged_kwh")
            component = e_out / e_in_component * 100.0
        return RoundTripEfficiency(system_pct=measured, component_pct=component)

    system = e_out / (e_in + aux) * 100.0 if aux > 0 else None
    return RoundTripEfficiency(system_pct=system, component_pct=measured)

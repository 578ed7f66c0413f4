from __future__ import annotations

import math

ZERO_EPS = 1e-9


def _num(value: float, name: str) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{name} must be a number")
    val = float(value)
    if math.isnan(val) or math.isinf(val):
        raise ValueError(f"{name} must be finite")
    return val


def frequency_droop_delta_p(
    droop_pct: float,
    f_base_hz: float,
    p_max_w: float,
    p_initial_w: float,
    db_low_hz: float,
    db_high_hz: float,
    f_actual_hz: float,
) -> float:
    """
    Power change [W] for a frequency excursion outside the deadband.

    Outside the band: dP = Pinitial - (-1/droop) * ((f_db - f_actual) / f_base) * Pmax,
    with f_db the violated band edge and droop in per-unit. Inside the band: 0.
    """
    droop_pct = _num(droop_pct, "droop_pct")
    f_base = _num(f_base_hz, "f_base_hz")
    p_max = _num(p_max_w, "p_max_w")
    p_init = _num(p_initial_w, "p_initial_w")
    db_low = _num(db_low_hz, "db_low_hz")
    db_high = _num(db_high_hz, "db_high_hz")
    f_actual = _num(f_actual_hz, "f_actual_hz")

    if abs(droop_pct) < ZERO_EPS:
        raise ValueError("droop_pct cannot be zero")
    if abs(f_base) < ZERO_EPS:
        raise ValueError("f_base_hz cannot be zero")
    if db_low > f_base:
        raise ValueError("db_low_hz must be <= f_base_hz")
    if db_high < f_base:
        raise ValueError("db_high_hz must be >= f_base_hz")
    if db_low > db_high:
        raise ValueError("db_low_hz cannot be greater than db_high_hz")

    droop = droop_pct / 100.0
    if f_actual > db_high:
        return p_init - ((-1.0 / droop) * ((db_high - f_actual) / f_base) * p_max)
    if f_actual < db_low:
        return p_init - ((-1.0 / droop) * ((db_low - f_actual) / f_base) * p_max)
    return 0.0


def voltage_droop_q_response(
    v_nominal: float,
    v_setpoint: float,
    v_measured: float,
    q_base_var: float,
    droop_pct: float,
) -> float:
    """Q [VAR] = (V_set/V_nom - V_meas/V_nom) * (Q_base / droop)."""
    v_nom = _num(v_nominal, "v_nominal")
    v_set = _num(v_setpoint, "v_setpoint")
    v_meas = _num(v_measured, "v_measured")
    q_base = _num(q_base_var, "q_base_var")
    droop_pct = _num(droop_pct, "droop_pct")
    if v_nom == 0:
        raise ValueError("v_nominal cannot be zero")
    if droop_pct == 0:
        raise ValueError("droop_pct cannot be zero")
    return ((v_set / v_nom) - (v_meas / v_nom)) * (q_base / (droop_pct / 100.0))


def voltage_control_q_setpoint(
    droop_pct: float,
    v_nominal: float,
    q_max_kvar: float,
    q_initial_kvar: float,
    db_low_v: float,
    db_high_v: float,
    v_actual: float,
) -> float:
    """
    Q-V droop setpoint [kVAR], clipped to [-Qmax, Qmax].

    Positive injects Q (voltage sag), negative absorbs Q (swell). Setting both
    band edges to V_nom gives a response with no deadband.
    """
    droop_pct = _num(droop_pct, "droop_pct")
    v_nom = _num(v_nominal, "v_nominal")
    q_max = _num(q_max_kvar, "q_max_kvar")
    q_setpoint = _num(q_initial_kvar, "q_initial_kvar")
    db_low = _num(db_low_v, "db_low_v")
    db_high = _num(db_high_v, "db_high_v")
    v = _num(v_actual, "v_actual")

    if abs(droop_pct) < ZERO_EPS:
        raise ValueError("droop_pct cannot be zero")
    if v_nom <= 0:
        raise ValueError("v_nominal must be > 0")
    if db_low > v_nom:
        raise ValueError("db_low_v must be <= v_nominal")
    if db_high < v_nom:
        raise ValueError("db_high_v must be >= v_nominal")
    if db_low > db_high:
        raise ValueError("db_low_v cannot be greater than db_high_v")

    droop = droop_pct / 100.0
    if v > db_high:
        q_setpoint += (-1.0 / droop) * ((v - db_high) / v_nom) * q_max
    elif v < db_low:
        q_setpoint += (-1.0 / droop) * ((v - db_low) / v_nom) * q_max
    return max(-q_max, min(q_max, q_setpoint))

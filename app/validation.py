from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from calc_core.pf_fields import is_blank, parse_number

Translator = Callable[..., str]

# Default English strings for use without a translator (CLI, tests).
_VALIDATION_EN = {
    "validation.voltage_negative": "Voltage cannot be negative.",
    "validation.fill_required": "Please fill all required input fields.",
    "validation.fill_all": "Please fill all input fields.",
    "validation.fill_all_numbers": "Please fill all input fields with valid numbers.",
    "validation.fill_energy": "Please fill required energy fields with valid numbers.",
    "validation.numbers_required": "Please enter valid numbers for all required fields.",
    "validation.all_numbers": "All inputs must be valid numbers.",
    "validation.both_voltages": "Please provide EITHER Line-to-Line OR Line-to-Neutral voltage, not both.",
    "validation.voltage_current_negative": "Voltage and Current values cannot be negative.",
    "validation.pf_range": "Power Factor must be between 0 and 1.",
    "validation.droop_zero": "Droop cannot be zero.",
    "validation.droop_pct_zero": "Error: Droop Percentage cannot be zero.",
    "validation.f_base_zero": "Base Frequency cannot be zero.",
    "validation.f_db_low_gt_base": "Deadband Lower must be ≤ Base Frequency.",
    "validation.f_db_high_lt_base": "Deadband Higher must be ≥ Base Frequency.",
    "validation.db_low_gt_high": "Deadband Lower cannot be greater than Deadband Higher.",
    "validation.v_nominal_zero": "Error: Nominal Voltage cannot be zero.",
    "validation.v_nominal_positive": "Nominal Voltage must be > 0.",
    "validation.v_db_low_gt_nominal": "Deadband Lower should be ≤ Nominal Voltage.",
    "validation.v_db_high_lt_nominal": "Deadband Higher should be ≥ Nominal Voltage.",
    "validation.start_soc_range": "Start SoC must be 0-100%.",
    "validation.target_soc_range": "Target SoC must be 0-100%.",
    "validation.energy_positive": "Usable Energy must be > 0.",
    "validation.inverter_eff_range": "Inverter Efficiency must be > 0 and ≤ 100%.",
    "validation.battery_eff_range": "Battery Efficiency must be > 0 and ≤ 100%.",
    "validation.soc_same": "Start and Target SoC cannot be the same.",
    "validation.power_direction": "Power direction conflicts with SoC target (e.g., positive power to a lower SoC).",
    "validation.charge_too_low": "Charge power is too low to overcome system losses. The battery will not charge.",
    "validation.charged_positive": "Energy Charged must be greater than zero.",
    "validation.discharged_gt_charged_system": "Error: Discharged energy cannot be greater than charged energy at the grid.",
    "validation.discharged_gt_charged_component": "Error: Discharged energy cannot be greater than charged energy for the BESS component.",
    "validation.aux_ge_charged": "Auxiliary energy is greater than or equal to charged energy; cannot calculate Component RTE.",
}


def _tr(translator: Translator | None, key: str, **kwargs: Any) -> str:
    if translator is None:
        raw = _VALIDATION_EN.get(key, key)
        return raw.format(**kwargs) if kwargs else raw
    return translator(key, **kwargs)


@dataclass(frozen=True)
class FormCheck:
    """
    Result of validating one calculator form.

    ready: every required value parsed and no rule failed.
    Not ready and no errors means the form is still being filled (stay silent).
    """

    errors: list[str]
    values: dict[str, float] = field(default_factory=dict)
    ready: bool = False

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def _read(texts: Mapping[str, Any], ids: Iterable[str]) -> tuple[dict[str, float], list[str], list[str]]:
    values: dict[str, float] = {}
    blank: list[str] = []
    invalid: list[str] = []
    for fid in ids:
        raw = texts.get(fid)
        if is_blank(raw):
            blank.append(fid)
            continue
        num = parse_number(raw)
        if num is None:
            invalid.append(fid)
        else:
            values[fid] = num
    return values, blank, invalid


def validate_voltage_text(text: Any, *, translator: Translator | None = None) -> FormCheck:
    if is_blank(text):
        return FormCheck(errors=[])
    num = parse_number(text)
    if num is None:
        return FormCheck(errors=[])
    if num < 0:
        return FormCheck(errors=[_tr(translator, "validation.voltage_negative")])
    return FormCheck(errors=[], values={"v": num}, ready=True)


def validate_three_phase(texts: Mapping[str, Any], *, translator: Translator | None = None) -> FormCheck:
    ids = ("v_ll", "v_ln", "current_a", "power_factor")
    if not is_blank(texts.get("v_ll")) and not is_blank(texts.get("v_ln")):
        return FormCheck(errors=[_tr(translator, "validation.both_voltages")])
    values, blank, invalid = _read(texts, ids)
    has_voltage = not (is_blank(texts.get("v_ll")) and is_blank(texts.get("v_ln")))
    if not has_voltage or "current_a" in blank or "power_factor" in blank:
        if len(blank) == len(ids):
            return FormCheck(errors=[])
        return FormCheck(errors=[_tr(translator, "validation.fill_required")])
    if invalid:
        return FormCheck(errors=[_tr(translator, "validation.numbers_required")])
    if any(values.get(k, 0.0) < 0 for k in ("v_ll", "v_ln", "current_a")):
        return FormCheck(errors=[_tr(translator, "validation.voltage_current_negative")])
    pf = values["power_factor"]
    if pf < 0 or pf > 1:
        return FormCheck(errors=[_tr(translator, "validation.pf_range")])
    return FormCheck(errors=[], values=values, ready=True)


def validate_frequency_droop(texts: Mapping[str, Any], *, translator: Translator | None = None) -> FormCheck:
    ids = ("droop_pct", "f_base_hz", "p_max_w", "p_initial_w", "db_low_hz", "db_high_hz", "f_actual_hz")
    values, blank, invalid = _read(texts, ids)
    if blank:
        if len(blank) == len(ids):
            return FormCheck(errors=[])
        return FormCheck(errors=[_tr(translator, "validation.fill_all")])
    if invalid:
        return FormCheck(errors=[_tr(translator, "validation.all_numbers")])

    errors: list[str] = []
    f_base = values["f_base_hz"]
    db_low = values["db_low_hz"]
    db_high = values["db_high_hz"]
    if abs(values["droop_pct"]) < 1e-9:
        errors.append(_tr(translator, "validation.droop_zero"))
    if abs(f_base) < 1e-9:
        errors.append(_tr(translator, "validation.f_base_zero"))
    if db_low > f_base:
        errors.append(_tr(translator, "validation.f_db_low_gt_base"))
    if db_high < f_base:
        errors.append(_tr(translator, "validation.f_db_high_lt_base"))
    if db_low > db_high:
        errors.append(_tr(translator, "validation.db_low_gt_high"))
    return FormCheck(errors=errors, values=values, ready=not errors)


def validate_voltage_droop(texts: Mapping[str, Any], *, translator: Translator | None = None) -> FormCheck:
    ids = ("v_nominal", "v_setpoint", "v_measured", "q_base_var", "droop_pct")
    values, blank, invalid = _read(texts, ids)
    if blank or invalid:
        # incomplete form: no message, output cleared
        return FormCheck(errors=[])
    if values["v_nominal"] == 0:
        return FormCheck(errors=[_tr(translator, "validation.v_nominal_zero")])
    if values["droop_pct"] == 0:
        return FormCheck(errors=[_tr(translator, "validation.droop_pct_zero")])
    return FormCheck(errors=[], values=values, ready=True)


def validate_voltage_control_droop(texts: Mapping[str, Any], *, translator: Translator | None = None) -> FormCheck:
    ids = ("droop_pct", "v_nominal", "q_max_kvar", "q_initial_kvar", "db_low_v", "db_high_v", "v_actual")
    values, blank, invalid = _read(texts, ids)
    if blank or invalid:
        if len(blank) == len(ids):
            return FormCheck(errors=[])
        return FormCheck(errors=[_tr(translator, "validation.fill_all_numbers")])

    errors: list[str] = []
    v_nom = values["v_nominal"]
    if abs(values["droop_pct"]) < 1e-9:
        errors.append(_tr(translator, "validation.droop_zero"))
    if v_nom <= 0:
        errors.append(_tr(translator, "validation.v_nominal_positive"))
    if values["db_low_v"] > v_nom:
        errors.append(_tr(translator, "validation.v_db_low_gt_nominal"))
    if values["db_high_v"] < v_nom:
        errors.append(_tr(translator, "validation.v_db_high_lt_nominal"))
    if values["db_low_v"] > values["db_high_v"]:
        errors.append(_tr(translator, "validation.db_low_gt_high"))
    return FormCheck(errors=errors, values=values, ready=not errors)


def validate_soc(texts: Mapping[str, Any], *, translator: Translator | None = None) -> FormCheck:
    ids = (
        "usable_energy_kwh",
        "start_soc_pct",
        "target_soc_pct",
        "power_kw",
        "inverter_eff_pct",
        "battery_eff_pct",
        "aux_loss_w",
    )
    values, blank, invalid = _read(texts, ids)
    if blank or invalid:
        if len(blank) == len(ids):
            return FormCheck(errors=[])
        return FormCheck(errors=[_tr(translator, "validation.fill_all_numbers")])

    errors: list[str] = []
    start = values["start_soc_pct"]
    target = values["target_soc_pct"]
    inv = values["inverter_eff_pct"]
    bat = values["battery_eff_pct"]
    if start < 0 or start > 100:
        errors.append(_tr(translator, "validation.start_soc_range"))
    if target < 0 or target > 100:
        errors.append(_tr(translator, "validation.target_soc_range"))
    if values["usable_energy_kwh"] <= 0:
        errors.append(_tr(translator, "validation.energy_positive"))
    if inv <= 0 or inv > 100:
        errors.append(_tr(translator, "validation.inverter_eff_range"))
    if bat <= 0 or bat > 100:
        errors.append(_tr(translator, "validation.battery_eff_range"))
    if start == target:
        errors.append(_tr(translator, "validation.soc_same"))

    power = values["power_kw"]
    if power != 0 and start != target and (power > 0) != (target > start):
        errors.append(_tr(translator, "validation.power_direction"))
    if errors:
        return FormCheck(errors=errors, values=values)

    if power > 0 and power * (inv / 100.0) - values["aux_loss_w"] / 1000.0 <= 0:
        return FormCheck(errors=[_tr(translator, "validation.charge_too_low")], values=values)
    return FormCheck(errors=[], values=values, ready=True)


def validate_round_trip(texts: Mapping[str, Any], *, translator: Translator | None = None) -> FormCheck:
    mode = str(texts.get("mode") or "system")
    values, blank, invalid = _read(texts, ("energy_charged_kwh", "energy_discharged_kwh"))
    if blank or invalid:
        typed = not (is_blank(texts.get("energy_charged_kwh")) and is_blank(texts.get("energy_discharged_kwh")))
        return FormCheck(errors=[_tr(translator, "validation.fill_energy")] if typed else [])
    # optional; empty or unparseable counts as zero
    values["aux_energy_kwh"] = parse_number(texts.get("aux_energy_kwh")) or 0.0

    e_in = values["energy_charged_kwh"]
    e_out = values["energy_discharged_kwh"]
    if e_in <= 0:
        return FormCheck(errors=[_tr(translator, "validation.charged_positive")])
    if e_out > e_in:
        key = (
            "validation.discharged_gt_charged_component"
            if mode == "component"
            else "validation.discharged_gt_charged_system"
        )
        return FormCheck(errors=[_tr(translator, key)])
    if mode == "system" and values["aux_energy_kwh"] > 0 and e_in - values["aux_energy_kwh"] <= 0:
        return FormCheck(errors=[_tr(translator, "validation.aux_ge_charged")], values=values)
    return FormCheck(errors=[], values=values, ready=True)

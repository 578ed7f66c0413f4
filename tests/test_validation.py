from __future__ import annotations

import pytest

from app.validation import (
    validate_frequency_droop,
    validate_round_trip,
    validate_soc,
    validate_three_phase,
    validate_voltage_control_droop,
    validate_voltage_droop,
    validate_voltage_text,
)


def test_voltage_text() -> None:
    assert validate_voltage_text("").errors == []
    assert not validate_voltage_text("abc").ready
    res = validate_voltage_text("-5")
    assert res.has_errors and "negative" in res.errors[0]
    ok = validate_voltage_text(" 480 ")
    assert ok.ready and ok.values == {"v": 480.0}


def test_three_phase_rules() -> None:
    both = validate_three_phase({"v_ll": "400", "v_ln": "230", "current_a": "1", "power_factor": "0.9"})
    assert "not both" in both.errors[0]

    assert validate_three_phase({}).errors == []

    missing = validate_three_phase({"v_ll": "400", "current_a": "1"})
    assert missing.errors == ["Please fill all required input fields."]

    bad_pf = validate_three_phase({"v_ll": "400", "current_a": "1", "power_factor": "1.2"})
    assert bad_pf.errors == ["Power Factor must be between 0 and 1."]

    ok = validate_three_phase({"v_ln": "230", "current_a": "10", "power_factor": "0.8"})
    assert ok.ready
    assert ok.values == {"v_ln": 230.0, "current_a": 10.0, "power_factor": 0.8}


def _freq_texts(**overrides: str) -> dict[str, str]:
    texts = {
        "droop_pct": "5",
        "f_base_hz": "50",
        "p_max_w": "1000000",
        "p_initial_w": "0",
        "db_low_hz": "49.9",
        "db_high_hz": "50.1",
        "f_actual_hz": "50.2",
    }
    texts.update(overrides)
    return texts


def test_frequency_droop_rules() -> None:
    assert validate_frequency_droop(_freq_texts()).ready
    assert validate_frequency_droop(_freq_texts(droop_pct="")).errors == ["Please fill all input fields."]
    assert validate_frequency_droop(_freq_texts(droop_pct="x")).errors == ["All inputs must be valid numbers."]
    res = validate_frequency_droop(_freq_texts(droop_pct="0", db_low_hz="50.2"))
    joined = "\n".join(res.errors)
    assert "Droop cannot be zero." in joined
    assert "Deadband Lower must be ≤ Base Frequency." in joined
    assert "Deadband Lower cannot be greater than Deadband Higher." in joined
    assert not res.ready


def test_voltage_droop_is_silent_until_complete() -> None:
    assert validate_voltage_droop({"v_nominal": "480"}).errors == []
    texts = {"v_nominal": "480", "v_setpoint": "485", "v_measured": "478", "q_base_var": "1", "droop_pct": "0"}
    assert validate_voltage_droop(texts).errors == ["Error: Droop Percentage cannot be zero."]
    texts["droop_pct"] = "5"
    assert validate_voltage_droop(texts).ready


def test_voltage_control_droop_rules() -> None:
    texts = {
        "droop_pct": "5",
        "v_nominal": "480",
        "q_max_kvar": "500",
        "q_initial_kvar": "0",
        "db_low_v": "485",
        "db_high_v": "490",
        "v_actual": "470",
    }
    res = validate_voltage_control_droop(texts)
    assert res.errors == ["Deadband Lower should be ≤ Nominal Voltage."]
    texts["db_low_v"] = "475"
    assert validate_voltage_control_droop(texts).ready


def _soc_texts(**overrides: str) -> dict[str, str]:
    texts = {
        "usable_energy_kwh": "100",
        "start_soc_pct": "20",
        "target_soc_pct": "80",
        "power_kw": "50",
        "inverter_eff_pct": "98",
        "battery_eff_pct": "95",
        "aux_loss_w": "150",
    }
    texts.update(overrides)
    return texts


def test_soc_rules() -> None:
    assert validate_soc(_soc_texts()).ready
    assert validate_soc(_soc_texts(power_kw="-10")).errors == [
        "Power direction conflicts with SoC target (e.g., positive power to a lower SoC)."
    ]
    assert validate_soc(_soc_texts(power_kw="0.1")).errors == [
        "Charge power is too low to overcome system losses. The battery will not charge."
    ]
    assert "Start and Target SoC cannot be the same." in validate_soc(_soc_texts(target_soc_pct="20")).errors
    # zero power is idle, not an error
    assert validate_soc(_soc_texts(power_kw="0")).ready


@pytest.mark.parametrize(
    "mode, key_text",
    [("system", "at the grid"), ("component", "BESS component")],
)
def test_round_trip_discharged_over_charged(mode: str, key_text: str) -> None:
    res = validate_round_trip({"mode": mode, "energy_charged_kwh": "10", "energy_discharged_kwh": "11"})
    assert key_text in res.errors[0]


def test_round_trip_aux_defaults_to_zero() -> None:
    res = validate_round_trip({"mode": "system", "energy_charged_kwh": "100", "energy_discharged_kwh": "85"})
    assert res.ready
    assert res.values["aux_energy_kwh"] == 0.0


def test_round_trip_aux_ge_charged_in_system_mode() -> None:
    res = validate_round_trip(
        {"mode": "system", "energy_charged_kwh": "5", "energy_discharged_kwh": "4", "aux_energy_kwh": "5"}
    )
    assert not res.ready
    assert "Auxiliary energy" in res.errors[0]


def test_translator_is_used() -> None:
    res = validate_voltage_text("-1", translator=lambda key, **kw: f"<{key}>")
    assert res.errors == ["<validation.voltage_negative>"]


def test_forms_parse_numbers_like_the_power_triangle() -> None:
    from app import validation
    from calc_core import pf_fields

    assert validation.is_blank is pf_fields.is_blank
    assert validation.parse_number is pf_fields.parse_number

    # same strictness as the power-factor fields: no unit suffixes, no nan/inf
    for text in ("12kW", "nan", "inf", "-inf"):
        assert pf_fields.validate_text(pf_fields.REAL_POWER, text) == pf_fields.InvalidFormat(pf_fields.REAL_POWER, text)
        assert not validate_voltage_text(text).ready
        assert validate_round_trip({"energy_charged_kwh": "100", "energy_discharged_kwh": text}).errors == [
            "Please fill required energy fields with valid numbers."
        ]

from __future__ import annotations

import math

import pytest

from calc_core.voltage import SQRT3, ll_to_ln, ln_to_ll, three_phase_power


def test_ll_ln_conversion() -> None:
    assert ll_to_ln(480.0) == pytest.approx(277.128, abs=1e-3)
    assert ln_to_ll(230.0) == pytest.approx(398.372, abs=1e-3)
    assert ln_to_ll(ll_to_ln(400.0)) == pytest.approx(400.0)
    assert ll_to_ln(0.0) == 0.0


def test_negative_voltage_rejected() -> None:
    with pytest.raises(ValueError, match="negative"):
        ll_to_ln(-1.0)
    with pytest.raises(ValueError, match="negative"):
        ln_to_ll(-1.0)


def test_non_numeric_rejected() -> None:
    with pytest.raises(TypeError):
        ll_to_ln("480")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        ll_to_ln(math.nan)


def test_three_phase_from_line_to_line() -> None:
    res = three_phase_power(10.0, 0.8, v_ll=400.0)
    s = 400.0 * 10.0 * SQRT3 / 1000.0
    assert res.apparent_kva == pytest.approx(s)
    assert res.real_kw == pytest.approx(s * 0.8)
    assert res.reactive_kvar == pytest.approx(s * 0.6)


def test_three_phase_from_line_to_neutral() -> None:
    res = three_phase_power(100.0, 1.0, v_ln=230.0)
    assert res.apparent_kva == pytest.approx(69.0)
    assert res.real_kw == pytest.approx(69.0)
    assert res.reactive_kvar == pytest.approx(0.0, abs=1e-9)


def test_three_phase_voltage_choice_is_exclusive() -> None:
    with pytest.raises(ValueError, match="not both"):
        three_phase_power(1.0, 0.9, v_ll=400.0, v_ln=230.0)
    with pytest.raises(ValueError, match="required"):
        three_phase_power(1.0, 0.9)


@pytest.mark.parametrize("current, pf", [(-1.0, 0.9), (1.0, 1.1), (1.0, -0.1)])
def test_three_phase_input_ranges(current: float, pf: float) -> None:
    with pytest.raises(ValueError):
        three_phase_power(current, pf, v_ll=400.0)

"""
Declarative descriptors for every calculator panel.

The UI renders panels from these; labels and titles are i18n keys.
Registry order is navigation order.
"""
from __future__ import annotations

from dataclasses import dataclass

from .battery import RTE_COMPONENT, RTE_SYSTEM
from .pf_fields import APPARENT_POWER, POWER_FACTOR, REACTIVE_POWER, REAL_POWER


@dataclass(frozen=True)
class FieldSpec:
    id: str
    label_key: str
    placeholder: str = ""
    default: str = ""
    readonly: bool = False
    kind: str = "number"  # number | text | select
    options: tuple[str, ...] = ()
    help_key: str | None = None
    # shown as a range hint; the form validators enforce the same limits
    min_value: float | None = None
    max_value: float | None = None

    @property
    def bounded(self) -> bool:
        return self.min_value is not None and self.max_value is not None


@dataclass(frozen=True)
class CalculatorSpec:
    id: str
    title_key: str
    description_key: str
    fields: tuple[FieldSpec, ...]

    @property
    def inputs(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if not f.readonly)

    @property
    def outputs(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.readonly)

    def field(self, field_id: str) -> FieldSpec:
        for f in self.fields:
            if f.id == field_id:
                return f
        raise KeyError(f"{self.id} has no field {field_id!r}")

    def defaults(self) -> dict[str, str]:
        return {f.id: f.default for f in self.fields}


def _calc(calc_id: str, *fields: FieldSpec) -> CalculatorSpec:
    return CalculatorSpec(
        id=calc_id,
        title_key=f"calc.{calc_id}.title",
        description_key=f"calc.{calc_id}.description",
        fields=fields,
    )


def _out(field_id: str, label_key: str, kind: str = "number", help_key: str | None = None) -> FieldSpec:
    return FieldSpec(field_id, label_key, placeholder="Calculated", readonly=True, kind=kind, help_key=help_key)


POWER_FACTOR_CALC = _calc(
    "power_factor",
    FieldSpec(REAL_POWER, "field.real_power_kw", "Enter value"),
    FieldSpec(APPARENT_POWER, "field.apparent_power_kva", "Enter value"),
    FieldSpec(REACTIVE_POWER, "field.reactive_power_kvar", "Enter value"),
    FieldSpec(POWER_FACTOR, "field.power_factor", "Enter value (0-1)", min_value=0.0, max_value=1.0),
)

VOLTAGE_CONVERTER = _calc(
    "voltage_converter",
    FieldSpec("v_ll", "field.v_ll", "e.g., 480"),
    FieldSpec("v_ln", "field.v_ln", "e.g., 277"),
)

THREE_PHASE_POWER = _calc(
    "three_phase_power",
    FieldSpec("v_ll", "field.v_ll", "e.g., 480"),
    FieldSpec("v_ln", "field.v_ln_optional", "e.g., 277"),
    FieldSpec("current_a", "field.line_current", "e.g., 10"),
    FieldSpec("power_factor", "field.power_factor", "e.g., 0.95", min_value=0.0, max_value=1.0),
    _out("apparent_kva", "field.out_apparent_kva"),
    _out("real_kw", "field.out_real_kw"),
    _out("reactive_kvar", "field.out_reactive_kvar"),
)

FREQUENCY_DROOP = _calc(
    "frequency_droop",
    FieldSpec("droop_pct", "field.droop_pct", "e.g., 5"),
    FieldSpec("f_base_hz", "field.f_base", "e.g., 50 or 60"),
    FieldSpec("p_max_w", "field.p_max_w", "e.g., 1000000"),
    FieldSpec("p_initial_w", "field.p_initial_w", "e.g., 0"),
    FieldSpec("db_low_hz", "field.f_db_low", "e.g., 49.9"),
    FieldSpec("db_high_hz", "field.f_db_high", "e.g., 50.1"),
    FieldSpec("f_actual_hz", "field.f_actual", "e.g., 50.2"),
    _out("delta_p_w", "field.out_delta_p_w"),
)

VOLTAGE_DROOP = _calc(
    "voltage_droop",
    FieldSpec("v_nominal", "field.v_nominal", "e.g., 480"),
    FieldSpec("v_setpoint", "field.v_setpoint", "e.g., 485"),
    FieldSpec("v_measured", "field.v_measured", "e.g., 478"),
    FieldSpec("q_base_var", "field.q_base_var", "e.g., 100000"),
    FieldSpec("droop_pct", "field.droop_pct", "e.g., 5"),
    _out("q_response_var", "field.out_q_response_var"),
)

VOLTAGE_CONTROL_DROOP = _calc(
    "voltage_control_droop",
    FieldSpec("droop_pct", "field.v_droop_pct", "e.g., 2 to 7"),
    FieldSpec("v_nominal", "field.v_nominal", "e.g., 480"),
    FieldSpec("q_max_kvar", "field.q_max_kvar", "e.g., 500"),
    FieldSpec("q_initial_kvar", "field.q_initial_kvar", "e.g., 0"),
    FieldSpec("db_low_v", "field.v_db_low", "e.g., 475 (or 480 for no deadband)"),
    FieldSpec("db_high_v", "field.v_db_high", "e.g., 485 (or 480 for no deadband)"),
    FieldSpec("v_actual", "field.v_actual", "e.g., 470"),
    _out("q_setpoint_kvar", "field.out_q_setpoint_kvar", help_key="field.out_q_setpoint_help"),
)

SOC_TIME = _calc(
    "soc_time",
    FieldSpec("usable_energy_kwh", "field.usable_energy_kwh", "e.g., 100"),
    FieldSpec("start_soc_pct", "field.start_soc_pct", "e.g., 20", min_value=0.0, max_value=100.0),
    FieldSpec("target_soc_pct", "field.target_soc_pct", "e.g., 80", min_value=0.0, max_value=100.0),
    FieldSpec("power_kw", "field.power_kw", "+ for charge, - for discharge"),
    FieldSpec("inverter_eff_pct", "field.inverter_eff_pct", "e.g., 98", default="98", min_value=0.0, max_value=100.0),
    FieldSpec("battery_eff_pct", "field.battery_eff_pct", "e.g., 95", default="95", min_value=0.0, max_value=100.0),
    FieldSpec("aux_loss_w", "field.aux_loss_w", "e.g., 150", default="150"),
    _out("mode", "field.out_mode", kind="text"),
    _out("effective_power_kw", "field.out_effective_power_kw"),
    _out("time_to_target", "field.out_time_to_target", kind="text"),
)

ROUND_TRIP_EFFICIENCY = _calc(
    "round_trip_efficiency",
    FieldSpec("mode", "field.rte_mode", kind="select", options=(RTE_SYSTEM, RTE_COMPONENT), default=RTE_SYSTEM),
    FieldSpec("energy_charged_kwh", "field.energy_charged_kwh", "e.g., 110.5"),
    FieldSpec("energy_discharged_kwh", "field.energy_discharged_kwh", "e.g., 100.2"),
    FieldSpec("aux_energy_kwh", "field.aux_energy_kwh", "e.g., 2.5"),
    _out("system_rte_pct", "field.out_system_rte_pct"),
    _out("component_rte_pct", "field.out_component_rte_pct"),
)

CALCULATORS: tuple[CalculatorSpec, ...] = (
    POWER_FACTOR_CALC,
    VOLTAGE_CONVERTER,
    THREE_PHASE_POWER,
    FREQUENCY_DROOP,
    VOLTAGE_DROOP,
    VOLTAGE_CONTROL_DROOP,
    SOC_TIME,
    ROUND_TRIP_EFFICIENCY,
)


def get_calculator(calc_id: str) -> CalculatorSpec:
    for calc in CALCULATORS:
        if calc.id == calc_id:
            return calc
    raise KeyError(f"Unknown calculator: {calc_id}")

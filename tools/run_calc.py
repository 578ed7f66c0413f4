#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]

# Allow running as "python tools/run_calc.py" (so repo root is importable)
sys.path.insert(0, str(ROOT))

from app.i18n import translator_for  # noqa: E402
from calc_core import Rejected, Resolved, SolverSession, recompute  # noqa: E402
from calc_core.battery import round_trip_efficiency, soc_time_to_target  # noqa: E402
from calc_core.droop import (  # noqa: E402
    frequency_droop_delta_p,
    voltage_control_q_setpoint,
    voltage_droop_q_response,
)
from calc_core.pf_fields import QUANTITIES  # noqa: E402
from calc_core.voltage import ll_to_ln, ln_to_ll, three_phase_power  # noqa: E402

EXIT_REJECTED = 2

logger = logging.getLogger("run_calc")


def _cmd_pf(args: argparse.Namespace) -> dict[str, Any]:
    texts = {q: getattr(args, q) or "" for q in QUANTITIES}
    translator = translator_for(args.lang) if args.lang else None
    outcome = recompute(texts, SolverSession(), translator=translator)
    if isinstance(outcome, Resolved):
        return {
            "status": "RESOLVED",
            "values": outcome.values,
            "sources": sorted(outcome.source_ids),
            "derived": sorted(outcome.derived_ids),
        }
    if isinstance(outcome, Rejected):
        raise ValueError(outcome.message)
    raise ValueError(outcome.message or "Provide exactly two of --real-power/--reactive-power/--apparent-power/--power-factor")


def _cmd_voltage(args: argparse.Namespace) -> dict[str, Any]:
    if (args.v_ll is None) == (args.v_ln is None):
        raise ValueError("Provide exactly one of --v-ll / --v-ln")
    if args.v_ll is not None:
        return {"v_ll": args.v_ll, "v_ln": ll_to_ln(args.v_ll)}
    return {"v_ll": ln_to_ll(args.v_ln), "v_ln": args.v_ln}


def _cmd_three_phase(args: argparse.Namespace) -> dict[str, Any]:
    res = three_phase_power(args.current, args.pf, v_ll=args.v_ll, v_ln=args.v_ln)
    return asdict(res)


def _cmd_freq_droop(args: argparse.Namespace) -> dict[str, Any]:
    delta_p = frequency_droop_delta_p(
        args.droop, args.f_base, args.p_max, args.p_initial, args.db_low, args.db_high, args.f_actual
    )
    return {"delta_p_w": delta_p}


def _cmd_v_droop(args: argparse.Namespace) -> dict[str, Any]:
    q = voltage_droop_q_response(args.v_nominal, args.v_setpoint, args.v_measured, args.q_base, args.droop)
    return {"q_response_var": q}


def _cmd_qv_droop(args: argparse.Namespace) -> dict[str, Any]:
    q = voltage_control_q_setpoint(
        args.droop, args.v_nominal, args.q_max, args.q_initial, args.db_low, args.db_high, args.v_actual
    )
    return {"q_setpoint_kvar": q}


def _cmd_soc(args: argparse.Namespace) -> dict[str, Any]:
    res = soc_time_to_target(
        args.energy,
        args.start_soc,
        args.target_soc,
        args.power,
        inverter_eff_pct=args.inverter_eff,
        battery_eff_pct=args.battery_eff,
        aux_loss_w=args.aux_loss,
    )
    return {
        "mode": res.mode,
        "effective_power_kw": res.effective_power_kw,
        "hours": res.hours,
        "duration": res.duration,
    }


def _cmd_rte(args: argparse.Namespace) -> dict[str, Any]:
    res = round_trip_efficiency(args.charged, args.discharged, mode=args.mode, aux_energy_kwh=args.aux)
    return asdict(res)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="EE calculators from the command line (JSON output).")
    ap.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING...)")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("pf", help="Resolve the power triangle from any two values")
    p.add_argument("--real-power", dest="real_power", help="kW")
    p.add_argument("--reactive-power", dest="reactive_power", help="kVAR")
    p.add_argument("--apparent-power", dest="apparent_power", help="kVA")
    p.add_argument("--power-factor", dest="power_factor", help="0..1")
    p.add_argument("--lang", choices=["EN", "RU"], help="Language of status messages (default: built-in English)")
    p.set_defaults(func=_cmd_pf)

    p = sub.add_parser("voltage", help="Line-to-line <-> line-to-neutral")
    p.add_argument("--v-ll", type=float)
    p.add_argument("--v-ln", type=float)
    p.set_defaults(func=_cmd_voltage)

    p = sub.add_parser("three-phase", help="Three-phase S/P/Q from V, I, PF")
    p.add_argument("--v-ll", type=float)
    p.add_argument("--v-ln", type=float)
    p.add_argument("--current", type=float, required=True)
    p.add_argument("--pf", type=float, required=True)
    p.set_defaults(func=_cmd_three_phase)

    p = sub.add_parser("freq-droop", help="Frequency droop Delta P")
    p.add_argument("--droop", type=float, required=True, help="%%")
    p.add_argument("--f-base", type=float, required=True)
    p.add_argument("--p-max", type=float, required=True)
    p.add_argument("--p-initial", type=float, default=0.0)
    p.add_argument("--db-low", type=float, required=True)
    p.add_argument("--db-high", type=float, required=True)
    p.add_argument("--f-actual", type=float, required=True)
    p.set_defaults(func=_cmd_freq_droop)

    p = sub.add_parser("v-droop", help="Voltage droop Q response")
    p.add_argument("--v-nominal", type=float, required=True)
    p.add_argument("--v-setpoint", type=float, required=True)
    p.add_argument("--v-measured", type=float, required=True)
    p.add_argument("--q-base", type=float, required=True)
    p.add_argument("--droop", type=float, required=True, help="%%")
    p.set_defaults(func=_cmd_v_droop)

    p = sub.add_parser("qv-droop", help="Q-V droop control setpoint")
    p.add_argument("--droop", type=float, required=True, help="%%")
    p.add_argument("--v-nominal", type=float, required=True)
    p.add_argument("--q-max", type=float, required=True)
    p.add_argument("--q-initial", type=float, default=0.0)
    p.add_argument("--db-low", type=float, required=True)
    p.add_argument("--db-high", type=float, required=True)
    p.add_argument("--v-actual", type=float, required=True)
    p.set_defaults(func=_cmd_qv_droop)

    p = sub.add_parser("soc", help="Time to reach a target SoC")
    p.add_argument("--energy", type=float, required=True, help="usable kWh")
    p.add_argument("--start-soc", type=float, required=True)
    p.add_argument("--target-soc", type=float, required=True)
    p.add_argument("--power", type=float, required=True, help="kW, + charge / - discharge")
    p.add_argument("--inverter-eff", type=float, default=98.0)
    p.add_argument("--battery-eff", type=float, default=95.0)
    p.add_argument("--aux-loss", type=float, default=150.0, help="W")
    p.set_defaults(func=_cmd_soc)

    p = sub.add_parser("rte", help="Round-trip efficiency")
    p.add_argument("--charged", type=float, required=True)
    p.add_argument("--discharged", type=float, required=True)
    p.add_argument("--mode", choices=["system", "component"], default="system")
    p.add_argument("--aux", type=float, default=0.0)
    p.set_defaults(func=_cmd_rte)
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))
    try:
        result = args.func(args)
    except ValueError as exc:
        logger.info("%s rejected: %s", args.command, exc)
        print(json.dumps({"status": "REJECTED", "message": str(exc)}, ensure_ascii=False))
        return EXIT_REJECTED
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

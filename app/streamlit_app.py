from __future__ import annotations

import logging
import sys
from pathlib import Path
import streamlit as st

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.i18n import DEFAULT_LANG, LANGUAGES, t  # noqa: E402
from app.views import (  # noqa: E402
    frequency_droop,
    power_factor,
    round_trip_efficiency,
    soc_time,
    three_phase_power,
    voltage_control_droop,
    voltage_converter,
    voltage_droop,
)
from calc_core.registry import CALCULATORS  # noqa: E402

DEFAULT_DEBOUNCE_MS = 500

PAGES = {
    power_factor.CALC.id: power_factor,
    voltage_converter.CALC.id: voltage_converter,
    three_phase_power.CALC.id: three_phase_power,
    frequency_droop.CALC.id: frequency_droop,
    voltage_droop.CALC.id: voltage_droop,
    voltage_control_droop.CALC.id: voltage_control_droop,
    soc_time.CALC.id: soc_time,
    round_trip_efficiency.CALC.id: round_trip_efficiency,
}


def _init_state() -> None:
    state = st.session_state
    state.setdefault("lang", DEFAULT_LANG)
    state.setdefault("debounce_ms", DEFAULT_DEBOUNCE_MS)
    state.setdefault("active_calculator", CALCULATORS[0].id)
    state.setdefault("log_level", "WARNING")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    st.set_page_config(page_title="EE Calculators", layout="centered")
    _init_state()
    state = st.session_state
    _configure_logging(state["log_level"])

    calc_ids = [c.id for c in CALCULATORS]
    titles = {c.id: c.title_key for c in CALCULATORS}

    with st.sidebar:
        st.title(t("app.title"))
        st.selectbox(t("sidebar.language"), list(LANGUAGES), key="lang")
        st.radio(
            t("sidebar.navigation"),
            calc_ids,
            format_func=lambda cid: t(titles[cid]),
            key="active_calculator",
        )

    page = PAGES.get(state["active_calculator"])
    if page is None:
        st.error(t("errors.unknown_calculator", calc=state["active_calculator"]))
        return
    page.render(state)


if __name__ == "__main__":
    main()

"""
Lock-state tracker for the power-factor panel.

A SolverSession remembers which two quantities the user supplied. The first
time exactly two fields hold valid values and resolve, that pair is locked;
later recomputes read only the locked pair and overwrite the other two. Any
validation or resolver failure resets the session to unlocked.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Union

from .pf_fields import (
    POWER_FACTOR,
    QUANTITIES,
    SHORT_NAMES,
    Empty,
    InvalidFormat,
    OutOfDomain,
    Valid,
    is_blank,
    parse_number,
    validate_text,
)
from .pf_resolver import ImpossibleCombination, resolve_pair

logger = logging.getLogger(__name__)

Translator = Callable[..., str]

_SESSION_EN = {
    "pf.status.need_one_more": "Please provide one more value.",
    "pf.status.too_many": "Please provide exactly two values.",
    "pf.status.invalid_number": "Invalid number entered for {field}.",
    "pf.status.negative": "Value for {field} cannot be negative.",
    "pf.status.pf_range": "Power Factor (PF) must be between 0 and 1.",
    "pf.status.source_required": "Please provide a valid number for {field}.",
    "pf.status.calc_error": "Calculation Error: {reason}",
}


def _tr(translator: Translator | None, key: str, **kwargs: Any) -> str:
    if translator is None:
        raw = _SESSION_EN.get(key, key)
        return raw.format(**kwargs) if kwargs else raw
    return translator(key, **kwargs)


@dataclass
class SolverSession:
    """Per-panel lock state; empty set means unlocked."""

    locked_sources: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_locked(self) -> bool:
        return len(self.locked_sources) == 2

    def lock(self, sources: frozenset[str]) -> None:
        if len(sources) != 2:
            raise ValueError(f"A lock needs exactly 2 sources, got {sorted(sources)}")
        self.locked_sources = frozenset(sources)

    def reset(self) -> None:
        self.locked_sources = frozenset()


@dataclass(frozen=True)
class Resolved:
    values: dict[str, float]
    source_ids: frozenset[str]
    derived_ids: frozenset[str]


@dataclass(frozen=True)
class AwaitingInput:
    message: str = ""


@dataclass(frozen=True)
class Rejected:
    message: str
    # Fields the presenter must empty: previously derived values and unparseable text.
    cleared_ids: frozenset[str] = frozenset()


RecomputeOutcome = Union[Resolved, AwaitingInput, Rejected]


def _field_error(check: InvalidFormat | OutOfDomain, translator: Translator | None) -> str:
    name = SHORT_NAMES[check.quantity]
    if isinstance(check, InvalidFormat):
        return _tr(translator, "pf.status.invalid_number", field=name)
    if check.quantity == POWER_FACTOR:
        return _tr(translator, "pf.status.pf_range")
    return _tr(translator, "pf.status.negative", field=name)


def _reason(exc: ImpossibleCombination, translator: Translator | None) -> str:
    if translator is None:
        return exc.reason
    return translator(exc.key, **exc.params)


def _unparseable(texts: Mapping[str, str]) -> frozenset[str]:
    return frozenset(
        q for q in QUANTITIES if not is_blank(texts.get(q)) and parse_number(texts.get(q)) is None
    )


def _reject(
    session: SolverSession,
    message: str,
    texts: Mapping[str, str],
    derived: frozenset[str] = frozenset(),
) -> Rejected:
    was_locked = session.locked_sources
    session.reset()
    if was_locked:
        logger.info("Power-factor lock on %s released: %s", sorted(was_locked), message)
    return Rejected(message=message, cleared_ids=derived | _unparseable(texts))


def _resolve(
    session: SolverSession,
    sources: list[Valid],
    texts: Mapping[str, str],
    translator: Translator | None,
) -> RecomputeOutcome:
    source_ids = frozenset(c.quantity for c in sources)
    derived_ids = frozenset(QUANTITIES) - source_ids
    try:
        triangle = resolve_pair(sources)
    except ImpossibleCombination as exc:
        logger.info("Impossible power-factor pair %s: %s", sorted(source_ids), exc.reason)
        derived = derived_ids if session.is_locked else frozenset()
        msg = _tr(translator, "pf.status.calc_error", reason=_reason(exc, translator))
        return _reject(session, msg, texts, derived)
    if not session.is_locked:
        logger.debug("Power-factor sources locked: %s", sorted(source_ids))
        session.lock(source_ids)
    return Resolved(values=triangle.as_dict(), source_ids=source_ids, derived_ids=derived_ids)


def _recompute_unlocked(
    texts: Mapping[str, str],
    session: SolverSession,
    translator: Translator | None,
) -> RecomputeOutcome:
    checks = [validate_text(q, texts.get(q)) for q in QUANTITIES]
    errors = [c for c in checks if isinstance(c, (InvalidFormat, OutOfDomain))]
    if errors:
        # the last offending field wins the status line
        return _reject(session, _field_error(errors[-1], translator), texts)

    valid = [c for c in checks if isinstance(c, Valid)]
    if len(valid) == 0:
        return AwaitingInput("")
    if len(valid) == 1:
        return AwaitingInput(_tr(translator, "pf.status.need_one_more"))
    if len(valid) > 2:
        return AwaitingInput(_tr(translator, "pf.status.too_many"))
    return _resolve(session, valid, texts, translator)


def _recompute_locked(
    texts: Mapping[str, str],
    session: SolverSession,
    translator: Translator | None,
) -> RecomputeOutcome:
    derived_ids = frozenset(QUANTITIES) - session.locked_sources
    sources: list[Valid] = []
    for quantity in QUANTITIES:
        if quantity not in session.locked_sources:
            continue
        check = validate_text(quantity, texts.get(quantity))
        if isinstance(check, OutOfDomain):
            return _reject(session, _field_error(check, translator), texts, derived_ids)
        if isinstance(check, (Empty, InvalidFormat)):
            msg = _tr(translator, "pf.status.source_required", field=SHORT_NAMES[quantity])
            return _reject(session, msg, texts, derived_ids)
        sources.append(check)
    return _resolve(session, sources, texts, translator)


def recompute(
    texts: Mapping[str, str],
    session: SolverSession,
    *,
    translator: Translator | None = None,
) -> RecomputeOutcome:
    """
    Run one recompute cycle over the current field texts.

    texts maps quantity ids to raw text (missing keys count as empty).
    The session is updated in place; on Rejected it is already unlocked.
    """
    if session.is_locked:
        return _recompute_locked(texts, session, translator)
    return _recompute_unlocked(texts, session, translator)


def clear_session(session: SolverSession) -> dict[str, str]:
    """Explicit clear: unlock and return the emptied field texts."""
    session.reset()
    return {q: "" for q in QUANTITIES}


def apply_outcome(
    texts: Mapping[str, str],
    outcome: RecomputeOutcome,
    *,
    decimals: int = 3,
) -> dict[str, str]:
    """Field texts to display after an outcome: derived values formatted, cleared ids emptied."""
    updated = {q: str(texts.get(q) or "") for q in QUANTITIES}
    if isinstance(outcome, Resolved):
        for q in outcome.derived_ids:
            updated[q] = f"{outcome.values[q]:.{decimals}f}"
    elif isinstance(outcome, Rejected):
        for q in outcome.cleared_ids:
            updated[q] = ""
    return updated


def read_only_ids(outcome: RecomputeOutcome | None) -> frozenset[str]:
    """Derived fields are read-only; every other outcome leaves all four editable."""
    if isinstance(outcome, Resolved):
        return outcome.derived_ids
    return frozenset()

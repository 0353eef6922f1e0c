# faraid/rules/hajb.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import structlog

from faraid.relationships import DISPLAY, Relationship as R
from faraid.rules.facts import RosterFacts
from faraid.rules.normalizer import NormalizedHeir

log = structlog.get_logger(__name__)


@dataclass
class HajbOutcome:
    active: List[NormalizedHeir] = field(default_factory=list)
    excluded: Dict[int, str] = field(default_factory=dict)   # heir id -> reason
    notes: List[str] = field(default_factory=list)


# =========================
# Blocking predicates (hājib)
# Each returns the name of the blocking relative, or None.
# =========================
def _first(*checks) -> Optional[str]:
    for present, blocker in checks:
        if present:
            return blocker
    return None


def _never(f: RosterFacts) -> Optional[str]:
    return None


def _grandson(f: RosterFacts) -> Optional[str]:
    return _first((f.has(R.SON), "Son"))


def _granddaughter(f: RosterFacts) -> Optional[str]:
    return _first(
        (f.has(R.SON), "Son"),
        (f.count(R.DAUGHTER) >= 2 and not f.has(R.GRANDSON), "two or more Daughters"),
    )


def _grandfather(f: RosterFacts) -> Optional[str]:
    return _first((f.has(R.FATHER), "Father"))


def _grandmother(f: RosterFacts) -> Optional[str]:
    return _first((f.has(R.MOTHER), "Mother"))


def _sibling_base(f: RosterFacts) -> Optional[str]:
    """Shared by every sibling category: male descendant or Father."""
    return _first(
        (f.has(R.SON), "Son"),
        (f.has(R.GRANDSON), "Grandson"),
        (f.has(R.FATHER), "Father"),
    )


def _full_sibling(f: RosterFacts) -> Optional[str]:
    return _sibling_base(f)


def _consanguine_brother(f: RosterFacts) -> Optional[str]:
    # a Full Sister inheriting the residue with daughters stands in the Full Brother's place
    return _sibling_base(f) or _first(
        (f.has(R.FULL_BROTHER), "Full Brother"),
        (f.has(R.FULL_SISTER) and f.has_female_descendant, "Full Sister with female descendants"),
    )


def _consanguine_sister(f: RosterFacts) -> Optional[str]:
    return _consanguine_brother(f) or _first(
        (f.count(R.FULL_SISTER) >= 2 and not f.has(R.CONSANGUINE_BROTHER), "two or more Full Sisters"),
    )


def _uterine_sibling(f: RosterFacts) -> Optional[str]:
    return _sibling_base(f) or _first(
        (f.has(R.DAUGHTER), "Daughter"),
        (f.has(R.GRANDDAUGHTER), "Granddaughter"),
        (f.has(R.GRANDFATHER), "Grandfather"),
    )


def _full_nephew(f: RosterFacts) -> Optional[str]:
    return _first(
        (f.has(R.SON), "Son"),
        (f.has(R.GRANDSON), "Grandson"),
        (f.has(R.FATHER), "Father"),
        (f.has(R.GRANDFATHER), "Grandfather"),
        (f.has(R.FULL_BROTHER), "Full Brother"),
    )


EXCLUSION_RULES: Dict[R, Callable[[RosterFacts], Optional[str]]] = {
    R.HUSBAND: _never,
    R.WIFE: _never,
    R.FATHER: _never,
    R.MOTHER: _never,
    R.SON: _never,
    R.DAUGHTER: _never,
    R.GRANDSON: _grandson,
    R.GRANDDAUGHTER: _granddaughter,
    R.GRANDFATHER: _grandfather,
    R.GRANDMOTHER: _grandmother,
    R.FULL_BROTHER: _full_sibling,
    R.FULL_SISTER: _full_sibling,
    R.CONSANGUINE_BROTHER: _consanguine_brother,
    R.CONSANGUINE_SISTER: _consanguine_sister,
    R.UTERINE_BROTHER: _uterine_sibling,
    R.UTERINE_SISTER: _uterine_sibling,
    R.FULL_NEPHEW: _full_nephew,
    # The Excluded bucket is handled before the table is consulted.
    R.EXCLUDED: _never,
}


def resolve_exclusions(heirs: List[NormalizedHeir], facts: RosterFacts) -> HajbOutcome:
    """
    Split the normalized roster into active heirs and excluded heirs.
    Every decision is made against roster-wide predicates and appends a
    note naming the blocking relative.
    """
    outcome = HajbOutcome()
    for h in heirs:
        if h.relationship is R.EXCLUDED:
            reason = h.exclusion_reason or "does not inherit"
            outcome.excluded[h.id] = reason
            outcome.notes.append(f"{h.name} ({h.raw_relationship}) excluded: {reason}.")
            continue

        blocker = EXCLUSION_RULES[h.relationship](facts)
        if blocker:
            reason = f"Mahjub (blocked) by {blocker}"
            outcome.excluded[h.id] = reason
            outcome.notes.append(f"{h.name} ({DISPLAY[h.relationship]}) is excluded by {blocker}.")
            continue

        outcome.active.append(h)

    log.debug("hajb_resolved", active=len(outcome.active), excluded=len(outcome.excluded))
    return outcome

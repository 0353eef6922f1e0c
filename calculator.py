# calculator.py

from __future__ import annotations
from decimal import Decimal
from fractions import Fraction
from typing import Dict, List, Optional, Tuple

import structlog

import schemas
from faraid.errors import AllocationConsistencyError
from faraid.math.allocation import BASE_NUMBER, distribute_amounts, parts_text, split_pool
from faraid.relationships import DISPLAY, SPOUSES
from faraid.rules.asabah import distribute_residue
from faraid.rules.facts import RosterFacts
from faraid.rules.furudh import FixedShare, assign_furudh
from faraid.rules.hajb import resolve_exclusions
from faraid.rules.normalizer import NormalizedHeir, normalize_heirs

log = structlog.get_logger(__name__)

# --------------------------
# Classical Awl (origin -> raised totals)
# --------------------------
VALID_AUL = {
    6: {7, 8, 9, 10},
    12: {13, 15, 17},
    24: {27},
}

EXCLUDED_LABEL = "Excluded"


def _classical_aul(total: Fraction) -> Optional[Tuple[int, int]]:
    """Express a total over 24 as one of the classical Awl cases, if it is one."""
    for origin in (6, 12, 24):
        raised = total * origin / BASE_NUMBER
        if raised.denominator == 1 and int(raised) in VALID_AUL[origin]:
            return origin, int(raised)
    return None


# --------------------------
# AUL
# --------------------------
def _apply_aul(total: Fraction, notes: List[str]) -> int:
    """Keep every heir's parts and raise the base to the inflated total."""
    notes.append(f"Awl: total parts {parts_text(total)} exceed the base of {BASE_NUMBER}.")
    classical = _classical_aul(total)
    if classical:
        notes.append(f"This is the classical Awl of {classical[0]} raised to {classical[1]}.")
    notes.append(f"Base number raised from {BASE_NUMBER} to {parts_text(total)}; "
                 f"every share is reduced in proportion.")
    log.info("aul_applied", total=parts_text(total))
    return int(total)


# --------------------------
# RADD
# --------------------------
def _apply_radd(parts: Dict[int, Fraction],
                active: List[NormalizedHeir],
                notes: List[str]) -> Dict[int, Fraction]:
    """
    Return the shortfall to the non-spousal fixed-share heirs in proportion to
    their parts. Spouses never take Radd while a blood heir can.
    """
    total = sum(parts.values(), Fraction(0))
    shortfall = BASE_NUMBER - total
    eligible = [h for h in active if h.relationship not in SPOUSES and parts.get(h.id, 0) > 0]

    if not eligible:
        # only spouses hold shares: the remainder goes back to them
        eligible = [h for h in active if parts.get(h.id, 0) > 0]
        notes.append("Radd: no blood heir can take the return; the remainder goes to the spouse(s).")

    radd: Dict[int, Fraction] = {}
    for heir, extra in split_pool(shortfall, eligible, lambda h: parts[h.id]):
        radd[heir.id] = extra

    names = ", ".join(h.name for h in eligible)
    notes.append(f"Radd: shortfall of {parts_text(shortfall)} parts returned in proportion "
                 f"to existing shares ({names}); base stays {BASE_NUMBER}.")
    log.info("radd_applied", shortfall=parts_text(shortfall), recipients=len(eligible))
    return radd


def _share_label(fixed: Optional[FixedShare], residue: Fraction, radd: Fraction) -> str:
    if fixed and residue:
        return f"{fixed.label} + Residue"
    if fixed and radd:
        return f"{fixed.label} + Radd"
    if fixed:
        return fixed.label
    return "Residue"


def _empty_result(estate_amount: float, notes: List[str]) -> schemas.CalculationResult:
    return schemas.CalculationResult(
        estate_amount=estate_amount,
        base_number=BASE_NUMBER,
        total_parts=0,
        case="Standard",
        notes=notes,
        heirs=[],
        group_summary={},
        unmapped=[],
    )


# ============================================================
#                    MAIN ENTRY POINT
# ============================================================
def calculate_inheritance(calculation_input: schemas.CalculationInput,
                          currency_decimals: int = 2) -> schemas.CalculationResult:
    """
    Compute every heir's share of the estate.

    Normalizer -> Hajb -> Furud -> Asabah -> Awl/Radd -> amounts. Pure function:
    all working state lives in this call.
    """
    heirs = calculation_input.heirs
    estate = Decimal(str(calculation_input.estate_amount))
    notes: List[str] = []

    if not heirs:
        notes.append("Empty roster: nothing to distribute.")
        return _empty_result(calculation_input.estate_amount, notes)

    # 1) Normalize relationship labels
    normalized = normalize_heirs(heirs)
    unmapped = [h.id for h in normalized if h.unmapped]
    for h in normalized:
        if h.unmapped:
            notes.append(f"Unmapped relationship '{h.raw_relationship}' for {h.name}; treated as Excluded.")
    facts = RosterFacts.from_heirs(normalized)

    # 2) Hajb
    hajb = resolve_exclusions(normalized, facts)
    notes.extend(hajb.notes)
    active = hajb.active
    excluded: Dict[int, str] = dict(hajb.excluded)

    # 3) Furud
    fixed = assign_furudh(active, facts)
    for h in active:
        if h.id in fixed:
            f = fixed[h.id]
            notes.append(f"{h.name}: {parts_text(f.parts)}/{BASE_NUMBER} parts ({f.label}). {f.reason}.")
    fixed_total = sum((f.parts for f in fixed.values()), Fraction(0))

    # 4) Asabah
    residue_parts = distribute_residue(BASE_NUMBER - fixed_total, active, facts, notes)

    parts: Dict[int, Fraction] = {}
    for h in active:
        parts[h.id] = (fixed[h.id].parts if h.id in fixed else Fraction(0)) + residue_parts.get(h.id, Fraction(0))
    total = sum(parts.values(), Fraction(0))

    # 5) Awl / Radd
    case = "Standard"
    base_number = BASE_NUMBER
    radd_parts: Dict[int, Fraction] = {}
    if total > BASE_NUMBER:
        case = "Awl"
        base_number = _apply_aul(total, notes)
    elif 0 < total < BASE_NUMBER and not residue_parts:
        case = "Radd"
        radd_parts = _apply_radd(parts, active, notes)
        for hid, extra in radd_parts.items():
            parts[hid] += extra
    elif total == 0:
        notes.append("No heir in the roster inherits; the estate is not distributed.")

    # Active heirs left with nothing (outranked residuaries, residue already consumed)
    for h in active:
        if parts[h.id] == 0:
            reason = "Asabah with no residue left to take"
            excluded[h.id] = reason
            notes.append(f"{h.name} ({DISPLAY[h.relationship]}) receives nothing: {reason}.")
            del parts[h.id]

    total = sum(parts.values(), Fraction(0))
    if total and total != base_number:
        raise AllocationConsistencyError(total, base_number)

    # 6) Amounts, percentages, group summary
    all_parts = {h.id: parts.get(h.id, Fraction(0)) for h in normalized}
    amounts = distribute_amounts(estate, all_parts, base_number, currency_decimals)

    shares: List[schemas.ShareResult] = []
    groups: Dict[str, Dict[str, Decimal]] = {}
    for h in normalized:
        heir_parts = all_parts[h.id]
        amount = amounts[h.id]
        if h.id in excluded:
            label, reason = EXCLUDED_LABEL, excluded[h.id]
        else:
            f = fixed.get(h.id)
            label = _share_label(f, residue_parts.get(h.id, Fraction(0)), radd_parts.get(h.id, Fraction(0)))
            reason = f.reason if f else "Asabah: takes the residue"
            if h.id in residue_parts and f:
                reason = f"{reason}; also takes the residue as Asabah"
            if h.id in radd_parts:
                reason = f"{reason}; increased by Radd"
            notes.append(f"{h.name} = {parts_text(heir_parts)} x {estate:,} / {base_number} = {amount:,}")

        shares.append(schemas.ShareResult(
            id=h.id,
            name=h.name,
            heir_group=h.heir_group,
            relationship=h.relationship,
            share_fraction=label,
            parts=float(heir_parts),
            parts_fraction=parts_text(heir_parts),
            share_percentage=round(float(heir_parts / base_number * 100), 2),
            share_amount=float(amount),
            reason=reason,
        ))

        group = groups.setdefault(h.heir_group or "Ungrouped", {"count": Decimal(0), "total_share": Decimal(0)})
        group["count"] += 1
        group["total_share"] += amount

    log.info("calculation_completed", case=case, base_number=base_number,
             heirs=len(shares), excluded=len(excluded), unmapped=len(unmapped))

    return schemas.CalculationResult(
        estate_amount=calculation_input.estate_amount,
        base_number=base_number,
        total_parts=float(total),
        case=case,
        notes=notes,
        heirs=shares,
        group_summary={
            name: schemas.GroupSummary(count=int(g["count"]), total_share=float(g["total_share"]))
            for name, g in groups.items()
        },
        unmapped=unmapped,
    )

# faraid/rules/furudh.py

from __future__ import annotations
from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, List

from faraid.math.allocation import fraction_label, split_pool
from faraid.relationships import Relationship as R
from faraid.rules.facts import RosterFacts
from faraid.rules.normalizer import NormalizedHeir


@dataclass(frozen=True)
class FixedShare:
    parts: Fraction     # out of BASE_NUMBER (24)
    label: str          # e.g. "1/8 (shared)"
    reason: str


def _assign_pool(out: Dict[int, FixedShare],
                 members: List[NormalizedHeir],
                 pool: int,
                 reason: str) -> None:
    """Give a fixed pool of parts to members, split equally."""
    if not members:
        return
    label = fraction_label(Fraction(pool))
    if len(members) > 1:
        label = f"{label} (shared)"
    for heir, parts in split_pool(Fraction(pool), members):
        out[heir.id] = FixedShare(parts=parts, label=label, reason=reason)


def _one_half_or_two_thirds(count: int) -> int:
    return 12 if count == 1 else 16


def assign_furudh(active: List[NormalizedHeir], facts: RosterFacts) -> Dict[int, FixedShare]:
    """
    Assign the fixed Quranic shares, as parts out of 24, to the active heirs.
    Heirs not named here (sons, brothers, nephews, ...) get nothing at this
    stage and stay eligible for the residue.
    """
    by_rel: Dict[R, List[NormalizedHeir]] = {}
    for h in active:
        by_rel.setdefault(h.relationship, []).append(h)

    def members(*rels: R) -> List[NormalizedHeir]:
        return [h for h in active if h.relationship in rels]

    out: Dict[int, FixedShare] = {}
    has_desc = facts.has_descendant
    has_male_desc = facts.has_male_descendant

    # -----------------------
    # 1) Husband / Wives
    # -----------------------
    if has_desc:
        _assign_pool(out, by_rel.get(R.HUSBAND, []), 6, "Husband takes 1/4 because the deceased left descendants")
        _assign_pool(out, by_rel.get(R.WIFE, []), 3, "Wives share 1/8 because the deceased left descendants")
    else:
        _assign_pool(out, by_rel.get(R.HUSBAND, []), 12, "Husband takes 1/2 because the deceased left no descendants")
        _assign_pool(out, by_rel.get(R.WIFE, []), 6, "Wives share 1/4 because the deceased left no descendants")

    # -----------------------
    # 2) Father / Grandfather
    # -----------------------
    for rel, name in ((R.FATHER, "Father"), (R.GRANDFATHER, "Grandfather")):
        if has_male_desc:
            _assign_pool(out, by_rel.get(rel, []), 4, f"{name} takes 1/6 because of a male descendant")
        elif has_desc:
            _assign_pool(out, by_rel.get(rel, []), 4,
                         f"{name} takes 1/6 and the residue because only female descendants exist")
        # no descendants: pure residuary, nothing fixed

    # -----------------------
    # 3) Mother / Grandmother
    # -----------------------
    if has_desc or facts.sibling_count >= 2:
        _assign_pool(out, by_rel.get(R.MOTHER, []), 4,
                     "Mother takes 1/6 because of descendants or two or more siblings")
    else:
        _assign_pool(out, by_rel.get(R.MOTHER, []), 8,
                     "Mother takes 1/3 with no descendants and fewer than two siblings")
    _assign_pool(out, by_rel.get(R.GRANDMOTHER, []), 4, "Grandmother takes 1/6 in the absence of the Mother")

    # -----------------------
    # 4) Daughters / Granddaughters
    # -----------------------
    daughters = by_rel.get(R.DAUGHTER, [])
    if daughters and not facts.has(R.SON):
        pool = _one_half_or_two_thirds(len(daughters))
        _assign_pool(out, daughters, pool,
                     "A single Daughter takes 1/2" if pool == 12 else "Daughters share 2/3")

    granddaughters = by_rel.get(R.GRANDDAUGHTER, [])
    if granddaughters and not facts.has(R.GRANDSON):
        n_daughters = facts.count(R.DAUGHTER)
        if n_daughters == 0:
            pool = _one_half_or_two_thirds(len(granddaughters))
            _assign_pool(out, granddaughters, pool,
                         "A single Granddaughter takes 1/2" if pool == 12 else "Granddaughters share 2/3")
        elif n_daughters == 1:
            _assign_pool(out, granddaughters, 4, "Granddaughters take 1/6 to complete 2/3 with the Daughter")

    # -----------------------
    # 5) Full / Consanguine sisters
    # -----------------------
    sisters_may_take_fixed = not has_desc and not facts.has_male_ascendant
    full_sisters = by_rel.get(R.FULL_SISTER, [])
    if full_sisters and sisters_may_take_fixed and not facts.has(R.FULL_BROTHER):
        pool = _one_half_or_two_thirds(len(full_sisters))
        _assign_pool(out, full_sisters, pool,
                     "A single Full Sister takes 1/2" if pool == 12 else "Full Sisters share 2/3")

    consanguine_sisters = by_rel.get(R.CONSANGUINE_SISTER, [])
    if (consanguine_sisters and sisters_may_take_fixed
            and not facts.has(R.FULL_BROTHER, R.CONSANGUINE_BROTHER)):
        n_full = facts.count(R.FULL_SISTER)
        if n_full == 0:
            pool = _one_half_or_two_thirds(len(consanguine_sisters))
            _assign_pool(out, consanguine_sisters, pool,
                         "A single Consanguine Sister takes 1/2" if pool == 12
                         else "Consanguine Sisters share 2/3")
        elif n_full == 1:
            _assign_pool(out, consanguine_sisters, 4,
                         "Consanguine Sisters take 1/6 to complete 2/3 with the Full Sister")

    # -----------------------
    # 6) Uterine siblings, across both sexes
    # -----------------------
    uterine = members(R.UTERINE_BROTHER, R.UTERINE_SISTER)
    if uterine:
        if len(uterine) == 1:
            _assign_pool(out, uterine, 4, "A single uterine sibling takes 1/6")
        else:
            _assign_pool(out, uterine, 8, "Uterine siblings share 1/3 equally, male and female alike")

    return out

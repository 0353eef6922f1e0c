# faraid/rules/asabah.py

from __future__ import annotations
from fractions import Fraction
from typing import Dict, List, Optional, Tuple

import structlog

from faraid.math.allocation import parts_text, split_pool
from faraid.relationships import DISPLAY, MALE_RESIDUARIES, Relationship as R
from faraid.rules.facts import RosterFacts
from faraid.rules.normalizer import NormalizedHeir

log = structlog.get_logger(__name__)

# Residuary groups by descending priority: (leader, female co-residuary)
PRIORITY: List[Tuple[R, Optional[R]]] = [
    (R.SON, R.DAUGHTER),
    (R.GRANDSON, R.GRANDDAUGHTER),
    (R.FATHER, None),
    (R.GRANDFATHER, None),
    (R.FULL_BROTHER, R.FULL_SISTER),
    (R.CONSANGUINE_BROTHER, R.CONSANGUINE_SISTER),
    (R.FULL_NEPHEW, None),
]

# Sisters who inherit the residue "with the daughters" (ma'a al-ghair)
_SISTERS_WITH_DAUGHTERS = {R.FULL_BROTHER: R.FULL_SISTER, R.CONSANGUINE_BROTHER: R.CONSANGUINE_SISTER}


def residue_weight(heir: NormalizedHeir) -> int:
    return 2 if heir.relationship in MALE_RESIDUARIES else 1


def select_residuaries(active: List[NormalizedHeir], facts: RosterFacts) -> List[NormalizedHeir]:
    """
    Return the members of the single winning residuary group, or an empty list.
    The first category with an active member wins; all others are ignored.
    """
    for leader, companion in PRIORITY:
        leaders = [h for h in active if h.relationship is leader]
        if leaders:
            companions = [h for h in active if companion is not None and h.relationship is companion]
            return leaders + companions
        sister = _SISTERS_WITH_DAUGHTERS.get(leader)
        if sister is not None and facts.has_female_descendant:
            sisters = [h for h in active if h.relationship is sister]
            if sisters:
                return sisters
    return []


def distribute_residue(residue: Fraction,
                       active: List[NormalizedHeir],
                       facts: RosterFacts,
                       notes: List[str]) -> Dict[int, Fraction]:
    """
    Split a positive residue over the winning group, 2:1 male to female.
    Returns heir id -> residue parts (empty when nobody qualifies).
    """
    if residue <= 0:
        return {}
    group = select_residuaries(active, facts)
    if not group:
        log.debug("no_residuary", residue=str(residue))
        return {}

    allocated = {heir.id: parts for heir, parts in split_pool(residue, group, residue_weight)}

    if len(group) == 1:
        heir = group[0]
        notes.append(f"{heir.name} ({DISPLAY[heir.relationship]}) takes the residue of "
                     f"{parts_text(residue)} parts as Asabah.")
    else:
        detail = "; ".join(
            f"{h.name} ({DISPLAY[h.relationship]}) weight {residue_weight(h)}" for h in group
        )
        notes.append(f"Residue of {parts_text(residue)} parts shared among Asabah (2:1): {detail}.")
    log.debug("residue_distributed", residue=str(residue), members=len(group))
    return allocated

# portions.py
"""
Legacy portion-weighted split, kept for rosters that were distributed before
the Fara'id engine existed. Each heir's stored `portions` weight takes
estate / total_portions per portion; no Hajb, Awl or Radd is applied.
"""

from typing import Dict, List

import structlog

import schemas

log = structlog.get_logger(__name__)

DEFAULT_TOTAL_PORTIONS = 24


def calculate_by_portions(estate_amount: float, heirs: List[schemas.HeirInput]) -> schemas.PortionResult:
    total_portions = sum(h.portions for h in heirs) or DEFAULT_TOTAL_PORTIONS
    share_per_portion = estate_amount / total_portions if estate_amount > 0 else 0.0

    shares: List[schemas.PortionShare] = []
    groups: Dict[str, schemas.PortionGroupSummary] = {}
    for h in heirs:
        amount = round(share_per_portion * h.portions, 2)
        shares.append(schemas.PortionShare(
            id=h.id, name=h.name, heir_group=h.heir_group, portions=h.portions, share_amount=amount,
        ))
        group = groups.get(h.heir_group)
        if group is None:
            # the group keeps the portions weight of its first member
            group = groups[h.heir_group] = schemas.PortionGroupSummary(count=0, total_share=0, portions=h.portions)
        group.count += 1
        group.total_share += amount

    log.debug("portion_split", heirs=len(shares), total_portions=total_portions)
    return schemas.PortionResult(
        estate_amount=estate_amount,
        total_portions=total_portions,
        share_per_portion=round(share_per_portion, 2),
        heirs=shares,
        group_summary=groups,
    )

# faraid/rules/facts.py

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Mapping

from faraid.relationships import (
    DESCENDANTS, FEMALE_DESCENDANTS, MALE_ASCENDANTS, MALE_DESCENDANTS, SIBLINGS,
    Relationship as R,
)


@dataclass(frozen=True)
class RosterFacts:
    """
    Roster-wide predicates, computed once per calculation and passed down to
    every stage. Heirs in the Excluded bucket are not counted.
    """
    counts: Mapping[R, int]

    @classmethod
    def from_heirs(cls, heirs: Iterable) -> "RosterFacts":
        counter = Counter(h.relationship for h in heirs if h.relationship is not R.EXCLUDED)
        return cls(counts=dict(counter))

    def count(self, *relationships: R) -> int:
        return sum(self.counts.get(r, 0) for r in relationships)

    def has(self, *relationships: R) -> bool:
        return self.count(*relationships) > 0

    @property
    def has_descendant(self) -> bool:
        return self.has(*DESCENDANTS)

    @property
    def has_male_descendant(self) -> bool:
        return self.has(*MALE_DESCENDANTS)

    @property
    def has_female_descendant(self) -> bool:
        return self.has(*FEMALE_DESCENDANTS)

    @property
    def has_male_ascendant(self) -> bool:
        return self.has(*MALE_ASCENDANTS)

    @property
    def sibling_count(self) -> int:
        return self.count(*SIBLINGS)

# faraid/relationships.py

from __future__ import annotations
from enum import Enum
from typing import FrozenSet


class Relationship(str, Enum):
    """Canonical relationship vocabulary. Every stage works over this closed set."""

    HUSBAND = "Husband"
    WIFE = "Wife"
    FATHER = "Father"
    MOTHER = "Mother"
    SON = "Son"
    DAUGHTER = "Daughter"
    GRANDSON = "Grandson"
    GRANDDAUGHTER = "Granddaughter"
    GRANDFATHER = "Grandfather"
    GRANDMOTHER = "Grandmother"
    FULL_BROTHER = "FullBrother"
    FULL_SISTER = "FullSister"
    CONSANGUINE_BROTHER = "ConsanguineBrother"
    CONSANGUINE_SISTER = "ConsanguineSister"
    UTERINE_BROTHER = "UterineBrother"
    UTERINE_SISTER = "UterineSister"
    FULL_NEPHEW = "FullNephew"
    EXCLUDED = "Excluded"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


R = Relationship

SPOUSES: FrozenSet[Relationship] = frozenset({R.HUSBAND, R.WIFE})

MALE_DESCENDANTS: FrozenSet[Relationship] = frozenset({R.SON, R.GRANDSON})
FEMALE_DESCENDANTS: FrozenSet[Relationship] = frozenset({R.DAUGHTER, R.GRANDDAUGHTER})
DESCENDANTS: FrozenSet[Relationship] = MALE_DESCENDANTS | FEMALE_DESCENDANTS

MALE_ASCENDANTS: FrozenSet[Relationship] = frozenset({R.FATHER, R.GRANDFATHER})

UTERINE_SIBLINGS: FrozenSet[Relationship] = frozenset({R.UTERINE_BROTHER, R.UTERINE_SISTER})
CONSANGUINE_SIBLINGS: FrozenSet[Relationship] = frozenset({R.CONSANGUINE_BROTHER, R.CONSANGUINE_SISTER})
FULL_SIBLINGS: FrozenSet[Relationship] = frozenset({R.FULL_BROTHER, R.FULL_SISTER})
SIBLINGS: FrozenSet[Relationship] = FULL_SIBLINGS | CONSANGUINE_SIBLINGS | UTERINE_SIBLINGS

# Male residuaries, weighted 2:1 against their sisters
MALE_RESIDUARIES: FrozenSet[Relationship] = frozenset({
    R.SON, R.GRANDSON, R.FATHER, R.GRANDFATHER,
    R.FULL_BROTHER, R.CONSANGUINE_BROTHER, R.FULL_NEPHEW,
})

# Display names used in notes
DISPLAY = {
    R.HUSBAND: "Husband",
    R.WIFE: "Wife",
    R.FATHER: "Father",
    R.MOTHER: "Mother",
    R.SON: "Son",
    R.DAUGHTER: "Daughter",
    R.GRANDSON: "Grandson",
    R.GRANDDAUGHTER: "Granddaughter",
    R.GRANDFATHER: "Grandfather",
    R.GRANDMOTHER: "Grandmother",
    R.FULL_BROTHER: "Full Brother",
    R.FULL_SISTER: "Full Sister",
    R.CONSANGUINE_BROTHER: "Consanguine Brother",
    R.CONSANGUINE_SISTER: "Consanguine Sister",
    R.UTERINE_BROTHER: "Uterine Brother",
    R.UTERINE_SISTER: "Uterine Sister",
    R.FULL_NEPHEW: "Full Nephew",
    R.EXCLUDED: "Excluded relation",
}

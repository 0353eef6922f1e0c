# faraid/rules/normalizer.py

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import structlog

from faraid.relationships import Gender, Relationship as R

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NormalizedHeir:
    id: int
    name: str
    heir_group: str
    raw_relationship: str
    relationship: R
    exclusion_reason: Optional[str] = None
    unmapped: bool = False


# =========================
# Synonym tables
# =========================
_DIRECT: Dict[str, R] = {
    "husband": R.HUSBAND,
    "wife": R.WIFE,
    "wives": R.WIFE,
    "father": R.FATHER,
    "dad": R.FATHER,
    "mother": R.MOTHER,
    "mom": R.MOTHER,
    "son": R.SON,
    "daughter": R.DAUGHTER,
    "grandson": R.GRANDSON,
    "sons son": R.GRANDSON,
    "son of son": R.GRANDSON,
    "granddaughter": R.GRANDDAUGHTER,
    "sons daughter": R.GRANDDAUGHTER,
    "daughter of son": R.GRANDDAUGHTER,
    "grandfather": R.GRANDFATHER,
    "paternal grandfather": R.GRANDFATHER,
    "fathers father": R.GRANDFATHER,
    "grandmother": R.GRANDMOTHER,
    "paternal grandmother": R.GRANDMOTHER,
    "maternal grandmother": R.GRANDMOTHER,
    "fathers mother": R.GRANDMOTHER,
    "mothers mother": R.GRANDMOTHER,
    "brother": R.FULL_BROTHER,
    "full brother": R.FULL_BROTHER,
    "germane brother": R.FULL_BROTHER,
    "sister": R.FULL_SISTER,
    "full sister": R.FULL_SISTER,
    "germane sister": R.FULL_SISTER,
    "consanguine brother": R.CONSANGUINE_BROTHER,
    "paternal brother": R.CONSANGUINE_BROTHER,
    "paternal half brother": R.CONSANGUINE_BROTHER,
    "half brother paternal": R.CONSANGUINE_BROTHER,
    "consanguine sister": R.CONSANGUINE_SISTER,
    "paternal sister": R.CONSANGUINE_SISTER,
    "paternal half sister": R.CONSANGUINE_SISTER,
    "half sister paternal": R.CONSANGUINE_SISTER,
    "uterine brother": R.UTERINE_BROTHER,
    "maternal brother": R.UTERINE_BROTHER,
    "maternal half brother": R.UTERINE_BROTHER,
    "half brother maternal": R.UTERINE_BROTHER,
    "uterine sister": R.UTERINE_SISTER,
    "maternal sister": R.UTERINE_SISTER,
    "maternal half sister": R.UTERINE_SISTER,
    "half sister maternal": R.UTERINE_SISTER,
    "full nephew": R.FULL_NEPHEW,
    "brothers son": R.FULL_NEPHEW,
    "son of full brother": R.FULL_NEPHEW,
    "son of brother": R.FULL_NEPHEW,
}

# Generic labels resolved by gender: (male, female)
_GENERIC: Dict[str, Tuple[R, R]] = {
    "spouse": (R.HUSBAND, R.WIFE),
    "child": (R.SON, R.DAUGHTER),
    "children": (R.SON, R.DAUGHTER),
    "offspring": (R.SON, R.DAUGHTER),
    "parent": (R.FATHER, R.MOTHER),
    "grandchild": (R.GRANDSON, R.GRANDDAUGHTER),
    "grandchildren": (R.GRANDSON, R.GRANDDAUGHTER),
    "grandparent": (R.GRANDFATHER, R.GRANDMOTHER),
    "sibling": (R.FULL_BROTHER, R.FULL_SISTER),
    "full sibling": (R.FULL_BROTHER, R.FULL_SISTER),
    "consanguine sibling": (R.CONSANGUINE_BROTHER, R.CONSANGUINE_SISTER),
    "paternal half sibling": (R.CONSANGUINE_BROTHER, R.CONSANGUINE_SISTER),
    "uterine sibling": (R.UTERINE_BROTHER, R.UTERINE_SISTER),
    "maternal half sibling": (R.UTERINE_BROTHER, R.UTERINE_SISTER),
}

# Distant kindred (dhawu al-arham): never inherit in this engine
_DISTANT_KINDRED = {
    "maternal grandfather",
    "mothers father",
    "daughters son",
    "daughters daughter",
    "daughters child",
    "daughters children",
    "son of daughter",
    "daughter of daughter",
    "aunt",
    "paternal aunt",
    "maternal aunt",
    "maternal uncle",
    "sisters son",
    "sisters daughter",
    "sisters child",
    "son of sister",
    "daughter of sister",
    "niece",
    "brothers daughter",
    "uterine nephew",
    "maternal nephew",
}

# Categorically barred relations, matched anywhere in the label
_BARRED_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\bstep"), "step-relation"),
    (re.compile(r"\badopt"), "adopted relation"),
    (re.compile(r"\bfoster"), "foster relation"),
    (re.compile(r"\bmilk\b"), "foster relation"),
    (re.compile(r"\billegitimate\b|\bout of wedlock\b"), "illegitimate relation"),
    (re.compile(r"\bin law\b"), "relation by marriage"),
]

_MALE_WORDS = {"male", "m", "man", "men", "boy", "boys", "son", "sons", "husband", "husbands",
               "brother", "brothers", "father", "fathers", "grandson", "grandsons",
               "grandfather", "grandfathers", "nephew", "nephews"}
_FEMALE_WORDS = {"female", "f", "woman", "women", "girl", "girls", "daughter", "daughters",
                 "wife", "wives", "sister", "sisters", "mother", "mothers", "granddaughter",
                 "granddaughters", "grandmother", "grandmothers", "niece", "nieces"}


def _clean(text: Optional[str]) -> str:
    text = (text or "").lower().replace("'s", "s").replace("’s", "s")
    text = re.sub(r"[^a-z0-9]+", " ", text)
    return " ".join(text.split())


def _singular(label: str) -> str:
    if label.endswith("ren"):
        return label
    if label.endswith("s") and not label.endswith("ss"):
        return label[:-1]
    return label


def parse_gender(raw_gender: Optional[str], heir_group: Optional[str] = None) -> Optional[Gender]:
    """Explicit gender wins; otherwise the words of the heir group decide (e.g. "Sons")."""
    for source in (_clean(raw_gender), _clean(heir_group)):
        words = set(source.split())
        is_male = bool(words & _MALE_WORDS)
        is_female = bool(words & _FEMALE_WORDS)
        if is_male and not is_female:
            return Gender.MALE
        if is_female and not is_male:
            return Gender.FEMALE
    return None


def classify(raw_relationship: str,
             raw_gender: Optional[str] = None,
             heir_group: Optional[str] = None) -> Tuple[R, Optional[str], bool]:
    """
    Map one raw label to (relationship, exclusion_reason, unmapped).
    Pure single-record relabeling; no knowledge of other heirs.
    """
    label = _clean(raw_relationship)

    for pattern, reason in _BARRED_PATTERNS:
        if pattern.search(label):
            return R.EXCLUDED, f"{reason} does not inherit", False

    for candidate in (label, _singular(label)):
        if candidate in _DISTANT_KINDRED:
            return R.EXCLUDED, "distant kindred (dhawu al-arham) does not inherit", False
        if candidate in _DIRECT:
            return _DIRECT[candidate], None, False
        if candidate in _GENERIC:
            gender = parse_gender(raw_gender, heir_group)
            if gender is None:
                return R.EXCLUDED, f"gender of '{raw_relationship}' cannot be determined", True
            male, female = _GENERIC[candidate]
            return (male if gender is Gender.MALE else female), None, False

    return R.EXCLUDED, f"unrecognized relationship '{raw_relationship}'", True


def normalize_heirs(heirs) -> List[NormalizedHeir]:
    """
    Rewrite every heir's raw relationship into the canonical vocabulary.
    Heirs with a declared impediment (killer of the deceased, difference of
    religion, slavery) are excluded here as well.
    """
    normalized: List[NormalizedHeir] = []
    for h in heirs:
        relationship, reason, unmapped = classify(h.relationship, h.gender, h.heir_group)
        impediment = (getattr(h, "impediment", None) or "").strip()
        if impediment and relationship is not R.EXCLUDED:
            relationship, reason = R.EXCLUDED, f"impediment: {impediment}"
        if unmapped:
            log.warning("relationship_unmapped", heir_id=h.id, relationship=h.relationship,
                        gender=h.gender, heir_group=h.heir_group)
        normalized.append(NormalizedHeir(
            id=h.id,
            name=h.name,
            heir_group=h.heir_group,
            raw_relationship=h.relationship,
            relationship=relationship,
            exclusion_reason=reason,
            unmapped=unmapped,
        ))
    return normalized

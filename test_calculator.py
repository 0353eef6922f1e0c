"""
Test suite for the Fara'id share engine.
Covers: Furud, Hajb, Asabah, Awl, Radd, output assembly and invariants.
"""

from fractions import Fraction

import pytest
from pydantic import ValidationError

import calculator
from calculator import calculate_inheritance
from faraid.errors import AllocationConsistencyError
from faraid.relationships import Relationship
from faraid.rules.hajb import EXCLUSION_RULES
from schemas import CalculationInput, HeirInput


# ========== HELPERS ==========
def H(id, relationship, heir_group="", gender=None, name=None, impediment=None):
    return HeirInput(
        id=id,
        name=name or f"{relationship} {id}",
        relationship=relationship,
        heir_group=heir_group,
        gender=gender,
        impediment=impediment,
    )


def share(result, heir_id):
    return next(s for s in result.heirs if s.id == heir_id)


def run_test(heirs_input, estate=1000, expected_parts=None, expected_fractions=None,
             expected_case=None, expected_base=None):
    """Run the engine and check the expected parts/labels/case."""
    result = calculate_inheritance(CalculationInput(estate_amount=estate, heirs=heirs_input))

    if expected_base is not None:
        assert result.base_number == expected_base, \
            f"Wrong base number. Expected {expected_base}, got {result.base_number}"

    if expected_case is not None:
        assert result.case == expected_case, \
            f"Wrong case. Expected {expected_case}, got {result.case}"

    if expected_parts:
        for heir_id, parts in expected_parts.items():
            got = Fraction(share(result, heir_id).parts_fraction)
            assert got == Fraction(parts), \
                f"Wrong parts for heir {heir_id}. Expected {parts}, got {got}"

    if expected_fractions:
        for heir_id, label in expected_fractions.items():
            got = share(result, heir_id).share_fraction
            assert got == label, \
                f"Wrong label for heir {heir_id}. Expected {label}, got {got}"

    assert_invariants(result, estate)
    return result


def assert_invariants(result, estate):
    total = sum(Fraction(s.parts_fraction) for s in result.heirs)
    if total:
        assert total == result.base_number
    for s in result.heirs:
        if s.share_fraction == "Excluded":
            assert s.parts == 0 and s.share_amount == 0
        else:
            assert s.parts > 0
    ids = [s.id for s in result.heirs]
    assert len(ids) == len(set(ids))
    if total:
        assert sum(s.share_amount for s in result.heirs) == pytest.approx(estate, abs=0.01)


# ========== FURUD ==========
class TestFurud:
    """Fixed shares."""

    def test_husband_without_descendants(self):
        run_test(
            [H(1, "Husband"), H(2, "Mother")],
            expected_fractions={1: "1/2", 2: "1/3 + Radd"},
            expected_parts={1: 12, 2: 12},
            expected_case="Radd",
        )

    def test_husband_with_descendants(self):
        run_test(
            [H(1, "Husband"), H(2, "Son")],
            expected_fractions={1: "1/4", 2: "Residue"},
            expected_parts={1: 6, 2: 18},
        )

    def test_wife_without_descendants(self):
        run_test(
            [H(1, "Wife"), H(2, "Father")],
            expected_fractions={1: "1/4", 2: "Residue"},
            expected_parts={1: 6, 2: 18},
        )

    def test_father_with_son(self):
        run_test(
            [H(1, "Father"), H(2, "Son")],
            expected_fractions={1: "1/6"},
            expected_parts={1: 4, 2: 20},
        )

    def test_father_with_only_daughter_takes_residue_too(self):
        run_test(
            [H(1, "Father"), H(2, "Daughter")],
            expected_fractions={1: "1/6 + Residue", 2: "1/2"},
            expected_parts={1: 12, 2: 12},
            expected_case="Standard",
        )

    def test_mother_one_sixth_with_two_siblings(self):
        run_test(
            [H(1, "Mother"), H(2, "Full Brother"), H(3, "Full Brother")],
            expected_fractions={1: "1/6"},
            expected_parts={1: 4, 2: 10, 3: 10},
        )

    def test_mother_one_sixth_counts_blocked_siblings(self):
        result = run_test(
            [H(1, "Father"), H(2, "Mother"), H(3, "Full Brother"), H(4, "Full Brother")],
            expected_fractions={1: "Residue", 2: "1/6", 3: "Excluded", 4: "Excluded"},
            expected_parts={1: 20, 2: 4},
            expected_case="Standard",
        )
        assert share(result, 3).reason == "Mahjub (blocked) by Father"

    def test_mother_one_third_with_one_sibling(self):
        run_test(
            [H(1, "Mother"), H(2, "Full Brother")],
            expected_fractions={1: "1/3"},
            expected_parts={1: 8, 2: 16},
        )

    def test_two_daughters_share_two_thirds(self):
        run_test(
            [H(1, "Daughter"), H(2, "Daughter"), H(3, "Full Brother")],
            expected_fractions={1: "2/3 (shared)", 2: "2/3 (shared)"},
            expected_parts={1: 8, 2: 8, 3: 8},
        )

    def test_granddaughter_completes_two_thirds(self):
        run_test(
            [H(1, "Daughter"), H(2, "Granddaughter"), H(3, "Full Brother")],
            expected_fractions={1: "1/2", 2: "1/6"},
            expected_parts={1: 12, 2: 4, 3: 8},
        )

    def test_single_granddaughter_takes_half(self):
        run_test(
            [H(1, "Granddaughter"), H(2, "Full Nephew")],
            expected_fractions={1: "1/2"},
            expected_parts={1: 12, 2: 12},
        )

    def test_uterine_siblings_share_third_equally(self):
        run_test(
            [H(1, "Uterine Brother"), H(2, "Uterine Sister"), H(3, "Full Brother")],
            expected_fractions={1: "1/3 (shared)", 2: "1/3 (shared)"},
            expected_parts={1: 4, 2: 4, 3: 16},
        )

    def test_single_uterine_sibling(self):
        run_test(
            [H(1, "Uterine Sister"), H(2, "Full Nephew")],
            expected_fractions={1: "1/6"},
            expected_parts={1: 4, 2: 20},
        )

    def test_consanguine_sister_completes_two_thirds(self):
        run_test(
            [H(1, "Full Sister"), H(2, "Consanguine Sister"), H(3, "Full Nephew")],
            expected_fractions={1: "1/2", 2: "1/6"},
            expected_parts={1: 12, 2: 4, 3: 8},
        )

    def test_grandmother_one_sixth(self):
        run_test(
            [H(1, "Grandmother"), H(2, "Son")],
            expected_fractions={1: "1/6"},
            expected_parts={1: 4, 2: 20},
        )

    def test_grandfather_mirrors_father(self):
        run_test(
            [H(1, "Grandfather"), H(2, "Daughter")],
            expected_fractions={1: "1/6 + Residue"},
            expected_parts={1: 12, 2: 12},
        )


# ========== HAJB ==========
class TestHajb:
    """Blocking by closer relatives."""

    def test_exclusion_rules_cover_every_relationship(self):
        assert set(EXCLUSION_RULES) == set(Relationship)

    def test_grandson_blocked_by_son(self):
        result = run_test(
            [H(1, "Son"), H(2, "Grandson")],
            expected_fractions={2: "Excluded"},
            expected_parts={1: 24},
        )
        assert any("excluded by Son" in n for n in result.notes)

    def test_granddaughter_blocked_by_two_daughters(self):
        run_test(
            [H(1, "Daughter"), H(2, "Daughter"), H(3, "Granddaughter"), H(4, "Full Brother")],
            expected_fractions={3: "Excluded"},
            expected_parts={1: 8, 2: 8, 4: 8},
        )

    def test_grandson_turns_granddaughter_into_residuary(self):
        run_test(
            [H(1, "Daughter"), H(2, "Daughter"), H(3, "Granddaughter"), H(4, "Grandson")],
            expected_fractions={3: "Residue", 4: "Residue"},
            expected_parts={1: 8, 2: 8, 3: Fraction(8, 3), 4: Fraction(16, 3)},
        )

    def test_grandfather_blocked_by_father(self):
        run_test(
            [H(1, "Father"), H(2, "Grandfather")],
            expected_fractions={2: "Excluded"},
            expected_parts={1: 24},
        )

    def test_grandmother_blocked_by_mother(self):
        run_test(
            [H(1, "Mother"), H(2, "Grandmother"), H(3, "Son")],
            expected_fractions={2: "Excluded"},
            expected_parts={1: 4, 3: 20},
        )

    def test_siblings_blocked_by_father(self):
        run_test(
            [H(1, "Father"), H(2, "Full Brother"), H(3, "Uterine Sister")],
            expected_fractions={2: "Excluded", 3: "Excluded"},
            expected_parts={1: 24},
        )

    def test_siblings_blocked_by_grandson(self):
        run_test(
            [H(1, "Grandson"), H(2, "Full Sister")],
            expected_fractions={2: "Excluded"},
            expected_parts={1: 24},
        )

    def test_consanguine_siblings_blocked_by_full_brother(self):
        run_test(
            [H(1, "Full Brother"), H(2, "Consanguine Brother"), H(3, "Consanguine Sister")],
            expected_fractions={2: "Excluded", 3: "Excluded"},
            expected_parts={1: 24},
        )

    def test_consanguine_sister_blocked_by_two_full_sisters(self):
        run_test(
            [H(1, "Full Sister"), H(2, "Full Sister"), H(3, "Consanguine Sister"), H(4, "Full Nephew")],
            expected_fractions={3: "Excluded"},
            expected_parts={1: 8, 2: 8, 4: 8},
        )

    def test_consanguine_sister_blocked_by_full_sister_with_daughter(self):
        result = run_test(
            [H(1, "Daughter"), H(2, "Full Sister"), H(3, "Consanguine Sister"), H(4, "Consanguine Brother")],
            expected_fractions={1: "1/2", 2: "Residue", 3: "Excluded", 4: "Excluded"},
            expected_parts={1: 12, 2: 12},
        )
        assert share(result, 3).reason == "Mahjub (blocked) by Full Sister with female descendants"
        assert share(result, 4).reason == "Mahjub (blocked) by Full Sister with female descendants"

    def test_uterine_sibling_blocked_by_daughter(self):
        run_test(
            [H(1, "Daughter"), H(2, "Uterine Brother"), H(3, "Full Brother")],
            expected_fractions={2: "Excluded"},
            expected_parts={1: 12, 3: 12},
        )

    def test_uterine_sibling_blocked_by_grandfather(self):
        run_test(
            [H(1, "Grandfather"), H(2, "Uterine Sister")],
            expected_fractions={2: "Excluded"},
            expected_parts={1: 24},
        )

    def test_full_nephew_blocked_by_full_brother(self):
        result = run_test(
            [H(1, "Full Brother"), H(2, "Full Nephew")],
            expected_fractions={2: "Excluded"},
        )
        assert share(result, 2).reason == "Mahjub (blocked) by Full Brother"

    def test_distant_kindred_always_excluded(self):
        result = run_test(
            [H(1, "Maternal Grandfather"), H(2, "Son")],
            expected_fractions={1: "Excluded"},
            expected_parts={2: 24},
        )
        assert "distant kindred" in share(result, 1).reason
        assert result.unmapped == []

    def test_step_relation_excluded(self):
        run_test(
            [H(1, "Stepson"), H(2, "Daughter")],
            expected_fractions={1: "Excluded", 2: "1/2 + Radd"},
            expected_parts={2: 24},
        )

    def test_impediment_excludes_heir(self):
        result = run_test(
            [H(1, "Son", impediment="homicide"), H(2, "Daughter")],
            expected_fractions={1: "Excluded"},
            expected_parts={2: 24},
        )
        assert share(result, 1).reason == "impediment: homicide"

    def test_outranked_residuary_listed_as_excluded(self):
        result = run_test(
            [H(1, "Consanguine Brother"), H(2, "Full Nephew")],
            expected_fractions={2: "Excluded"},
            expected_parts={1: 24},
        )
        assert share(result, 2).reason == "Asabah with no residue left to take"


# ========== ASABAH ==========
class TestAsabah:
    """Residue distribution."""

    def test_son_and_daughter_two_to_one(self):
        run_test(
            [H(1, "Husband"), H(2, "Son"), H(3, "Daughter")],
            expected_fractions={2: "Residue", 3: "Residue"},
            expected_parts={1: 6, 2: 12, 3: 6},
        )

    def test_full_brother_and_sister_two_to_one(self):
        run_test(
            [H(1, "Full Brother"), H(2, "Full Sister")],
            expected_parts={1: 16, 2: 8},
        )

    def test_sister_takes_residue_with_daughter(self):
        run_test(
            [H(1, "Daughter"), H(2, "Full Sister")],
            expected_fractions={1: "1/2", 2: "Residue"},
            expected_parts={1: 12, 2: 12},
            expected_case="Standard",
        )

    def test_father_pure_residuary_with_mother(self):
        run_test(
            [H(1, "Father"), H(2, "Mother")],
            expected_fractions={1: "Residue", 2: "1/3"},
            expected_parts={1: 16, 2: 8},
        )

    def test_grandfather_outranks_full_brother(self):
        run_test(
            [H(1, "Wife"), H(2, "Grandfather"), H(3, "Full Brother")],
            expected_fractions={3: "Excluded"},
            expected_parts={1: 6, 2: 18},
        )


# ========== AWL & RADD ==========
class TestAwlRadd:
    """Over- and under-subscribed estates."""

    def test_awl_husband_two_full_sisters(self):
        result = run_test(
            [H(1, "Husband"), H(2, "Full Sister"), H(3, "Full Sister")],
            expected_case="Awl",
            expected_base=28,
            expected_parts={1: 12, 2: 8, 3: 8},
        )
        assert share(result, 1).share_percentage == pytest.approx(42.86)
        assert any("28" in n for n in result.notes)
        assert any("classical Awl of 6 raised to 7" in n for n in result.notes)

    def test_awl_to_twenty_seven(self):
        result = run_test(
            [H(1, "Wife"), H(2, "Daughter"), H(3, "Daughter"), H(4, "Father"), H(5, "Mother")],
            expected_case="Awl",
            expected_base=27,
            expected_parts={1: 3, 2: 8, 3: 8, 4: 4, 5: 4},
            expected_fractions={4: "1/6"},
        )
        assert any("classical Awl of 24 raised to 27" in n for n in result.notes)

    def test_radd_husband_and_daughter(self):
        run_test(
            [H(1, "Husband"), H(2, "Daughter")],
            expected_case="Radd",
            expected_base=24,
            expected_parts={1: 6, 2: 18},
            expected_fractions={1: "1/4", 2: "1/2 + Radd"},
        )

    def test_radd_without_spouse(self):
        run_test(
            [H(1, "Mother"), H(2, "Daughter")],
            expected_case="Radd",
            expected_parts={1: 6, 2: 18},
        )

    def test_radd_proportional_with_wife(self):
        run_test(
            [H(1, "Wife"), H(2, "Mother"), H(3, "Daughter")],
            expected_case="Radd",
            expected_parts={1: 3, 2: Fraction(21, 4), 3: Fraction(63, 4)},
        )

    def test_radd_to_spouse_when_alone(self):
        result = run_test(
            [H(1, "Wife")],
            expected_case="Radd",
            expected_parts={1: 24},
            expected_fractions={1: "1/4 + Radd"},
        )
        assert any("spouse" in n for n in result.notes)


# ========== REFERENCE CASES ==========
class TestReferenceCases:

    def test_single_son_takes_everything(self):
        result = run_test([H(1, "Son")], estate=5000, expected_parts={1: 24})
        assert share(result, 1).share_percentage == 100
        assert share(result, 1).share_amount == 5000

    def test_two_wives_son_father(self):
        heirs = [
            H(1, "Spouse", "Wives", gender="Female"),
            H(2, "Spouse", "Wives", gender="Female"),
            H(3, "Child", "Sons"),
            H(4, "Father", "Parents"),
        ]
        result = run_test(
            heirs,
            estate=2_400_000,
            expected_case="Standard",
            expected_parts={1: Fraction(3, 2), 2: Fraction(3, 2), 3: 17, 4: 4},
        )
        for s in result.heirs:
            assert s.share_amount == pytest.approx(s.parts / 24 * 2_400_000)
        assert result.group_summary["Wives"].count == 2
        assert result.group_summary["Wives"].total_share == pytest.approx(300_000)

    def test_ledger_default_roster(self):
        heirs = (
            [H(i, "Spouse", "Wives") for i in (1, 2)]
            + [H(i, "Child", "Daughters") for i in range(3, 10)]
            + [H(i, "Child", "Sons") for i in range(10, 17)]
        )
        result = run_test(heirs, estate=456_550)
        assert share(result, 1).relationship == Relationship.WIFE
        assert share(result, 10).parts == 2
        assert share(result, 3).parts == 1
        assert result.group_summary["Sons"].count == 7
        assert sum(g.total_share for g in result.group_summary.values()) == pytest.approx(456_550, abs=0.01)

    def test_idempotent(self):
        payload = CalculationInput(
            estate_amount=123_456.78,
            heirs=[H(1, "Wife"), H(2, "Mother"), H(3, "Daughter"), H(4, "Cousin")],
        )
        first = calculate_inheritance(payload)
        second = calculate_inheritance(payload)
        assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)

    def test_serializes_with_camel_case_fields(self):
        result = calculate_inheritance(CalculationInput(estate_amount=100, heirs=[H(1, "Son", "Sons")]))
        data = result.model_dump(by_alias=True)
        assert {"baseNumber", "case", "notes", "heirs", "groupSummary"} <= set(data)
        assert data["groupSummary"]["Sons"] == {"count": 1, "totalShare": 100.0}


# ========== DEGENERATE INPUT ==========
class TestDegenerate:

    def test_empty_roster(self):
        result = calculate_inheritance(CalculationInput(estate_amount=1000, heirs=[]))
        assert result.heirs == []
        assert result.total_parts == 0
        assert result.base_number == 24
        assert result.case == "Standard"

    def test_zero_estate_keeps_parts(self):
        result = run_test([H(1, "Son")], estate=0, expected_parts={1: 24})
        assert share(result, 1).share_amount == 0

    def test_nobody_inherits(self):
        result = run_test([H(1, "Stepdaughter")])
        assert result.total_parts == 0
        assert share(result, 1).share_fraction == "Excluded"

    def test_unmapped_relationship_is_flagged(self):
        result = run_test([H(1, "Cousin"), H(2, "Son")], expected_parts={2: 24})
        assert result.unmapped == [1]
        assert share(result, 1).share_fraction == "Excluded"
        assert any("Unmapped relationship 'Cousin'" in n for n in result.notes)

    def test_negative_estate_rejected(self):
        with pytest.raises(ValidationError):
            CalculationInput(estate_amount=-1, heirs=[])

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError):
            CalculationInput(estate_amount=1, heirs=[H(1, "Son"), H(1, "Daughter")])

    def test_very_large_estate_stays_exact(self):
        result = run_test([H(1, "Son"), H(2, "Wife")], estate=1e27, expected_parts={1: 21, 2: 3})
        assert share(result, 2).share_amount == pytest.approx(1.25e26)
        assert share(result, 1).share_amount == pytest.approx(8.75e26)

    @pytest.mark.parametrize("estate", [float("inf"), float("nan")])
    def test_non_finite_estate_rejected(self, estate):
        with pytest.raises(ValidationError):
            CalculationInput(estate_amount=estate, heirs=[])

    def test_inconsistent_allocation_raises(self, monkeypatch):
        monkeypatch.setattr(calculator, "distribute_residue",
                            lambda residue, active, facts, notes: {active[0].id: Fraction(10)})
        with pytest.raises(AllocationConsistencyError):
            calculate_inheritance(CalculationInput(estate_amount=100, heirs=[H(1, "Son")]))


# ========== INVARIANTS OVER MIXED ROSTERS ==========
ROSTERS = [
    [H(1, "Husband"), H(2, "Mother"), H(3, "Father"), H(4, "Daughter"), H(5, "Daughter")],
    [H(1, "Wife"), H(2, "Wife"), H(3, "Wife"), H(4, "Mother"), H(5, "Uterine Brother"), H(6, "Uterine Sister")],
    [H(1, "Husband"), H(2, "Mother"), H(3, "Uterine Brother"), H(4, "Uterine Brother"), H(5, "Full Brother")],
    [H(1, "Wife"), H(2, "Grandmother"), H(3, "Granddaughter"), H(4, "Granddaughter"), H(5, "Consanguine Brother")],
    [H(1, "Husband"), H(2, "Full Sister"), H(3, "Consanguine Sister"), H(4, "Uterine Sister"), H(5, "Mother")],
    [H(1, "Wife"), H(2, "Son"), H(3, "Son"), H(4, "Daughter"), H(5, "Grandson"), H(6, "Aunt")],
    [H(1, "Spouse", gender="Male"), H(2, "Sibling", "Sisters"), H(3, "Parent", gender="Female")],
]


@pytest.mark.parametrize("heirs", ROSTERS)
@pytest.mark.parametrize("estate", [1000, 2_400_000, 999.99])
def test_closure_and_amounts(heirs, estate):
    result = calculate_inheritance(CalculationInput(estate_amount=estate, heirs=heirs))
    assert_invariants(result, estate)
    assert sum(Fraction(s.parts_fraction) for s in result.heirs) == result.base_number

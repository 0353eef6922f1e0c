# test_portions.py

import pytest

from portions import calculate_by_portions
from schemas import HeirInput


def test_zero_portions_fall_back_to_twenty_four():
    heirs = [HeirInput(id=1, name="A", relationship="Son", heir_group="Sons")]
    result = calculate_by_portions(2400, heirs)
    assert result.total_portions == 24
    assert result.share_per_portion == 100
    assert result.heirs[0].share_amount == 0


def test_zero_estate_pays_nothing():
    heirs = [HeirInput(id=1, name="A", relationship="Son", heir_group="Sons", portions=2)]
    result = calculate_by_portions(0, heirs)
    assert result.share_per_portion == 0
    assert result.group_summary["Sons"].total_share == 0


def test_group_summary_aggregates_amounts():
    heirs = [
        HeirInput(id=1, name="A", relationship="Son", heir_group="Sons", portions=2),
        HeirInput(id=2, name="B", relationship="Son", heir_group="Sons", portions=2),
        HeirInput(id=3, name="C", relationship="Daughter", heir_group="Daughters", portions=1),
    ]
    result = calculate_by_portions(500, heirs)
    assert result.total_portions == 5
    assert result.group_summary["Sons"].count == 2
    assert result.group_summary["Sons"].total_share == pytest.approx(400)
    assert result.group_summary["Daughters"].portions == 1

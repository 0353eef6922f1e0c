# faraid/math/allocation.py

from __future__ import annotations
from decimal import Decimal
from fractions import Fraction
from typing import Callable, Dict, Hashable, List, Sequence, Tuple, TypeVar, Union

T = TypeVar("T")

BASE_NUMBER = 24


def split_pool(pool: Fraction,
               members: Sequence[T],
               weight: Callable[[T], Union[int, Fraction]] = lambda _: 1) -> List[Tuple[T, Fraction]]:
    """
    Divide a pool of parts among members in proportion to weight(member).
    Equal split for fixed-share pools (default weight), 2:1 for residuaries,
    existing parts for Radd.
    Exact rational arithmetic: the returned parts always sum to the pool.
    """
    if not members:
        return []
    weights = [weight(m) for m in members]
    total_weight = sum(weights)
    if total_weight <= 0:
        raise ValueError("total weight must be positive")
    return [(m, Fraction(pool) * w / total_weight) for m, w in zip(members, weights)]


def fraction_label(parts: Fraction, base: int = BASE_NUMBER) -> str:
    """Render parts out of base as a reduced fraction, e.g. 6 of 24 -> "1/4"."""
    value = Fraction(parts) / base
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"


def parts_text(parts: Fraction) -> str:
    if parts.denominator == 1:
        return str(parts.numerator)
    return f"{parts.numerator}/{parts.denominator}"


def _whole_units(value: Fraction) -> int:
    return value.numerator // value.denominator


def _from_units(units: int, decimals: int) -> Decimal:
    # Built from text so the context precision never rounds a large estate.
    return Decimal(f"{units}e-{decimals}")


def distribute_amounts(estate: Decimal,
                       parts_by_key: Dict[Hashable, Fraction],
                       base: int,
                       decimals: int = 2) -> Dict[Hashable, Decimal]:
    """
    Convert parts into currency amounts that sum exactly to the estate.

    Every share is first rounded down to the currency unit; the units left over
    go one by one to the largest remainders (ties keep insertion order).
    All counting is done in whole currency units, so estates of any size stay exact.
    """
    unit = Fraction(1, 10 ** decimals)
    total_parts = sum(parts_by_key.values(), Fraction(0))
    if not parts_by_key or total_parts == 0 or base == 0:
        return {k: _from_units(0, decimals) for k in parts_by_key}

    estate_fr = Fraction(estate)
    units: Dict[Hashable, int] = {}
    remainders: List[Tuple[Fraction, int, Hashable]] = []
    for order, (key, parts) in enumerate(parts_by_key.items()):
        exact = estate_fr * parts / base / unit
        units[key] = _whole_units(exact)
        remainders.append((exact - units[key], order, key))

    distributed = estate_fr * total_parts / base / unit
    units_left = _whole_units(distributed - sum(units.values()))

    remainders.sort(key=lambda r: (-r[0], r[1]))
    for _, _, key in remainders[:units_left]:
        units[key] += 1
    return {key: _from_units(n, decimals) for key, n in units.items()}

"""
Reduction of feasible recipe combinations to the maximal ones.
"""

from typing import Iterable, List, Sequence


def is_proper_subset(a: int, b: int) -> bool:
    return a != b and a & b == a


def reduce_to_maximal(masks: Iterable[int]) -> List[int]:
    """
    Drop every combination contained in another one.

    The result is an antichain: no mask is a proper subset of another.
    Duplicates are collapsed; masks of equal size are all kept.
    """
    unique = sorted(set(masks), key=lambda m: (-bin(m).count("1"), m))
    maximal: List[int] = []
    for mask in unique:
        # Larger masks come first, so any superset is already in ``maximal``.
        if not any(is_proper_subset(mask, kept) for kept in maximal):
            maximal.append(mask)
    return maximal


def sorted_name_sets(masks: Iterable[int], names: Sequence[str]) -> List[List[str]]:
    """
    Turn masks into name lists with a stable order.

    Names inside a set are sorted, and the sets are ordered lexicographically.
    """
    name_sets = [
        sorted(name for i, name in enumerate(names) if mask >> i & 1) for mask in masks
    ]
    return sorted(name_sets)

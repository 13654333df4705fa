"""
quick_sort.py — Quick Sort (Lomuto partition)
==============================================
The last element of each range is the pivot.  The partition scan
compares every candidate against it and swaps the candidate into the
"less than pivot" prefix when it is strictly smaller.  A final swap
drops the pivot into its sorted slot, even when that swap is a no-op.
"""

from typing import Generator, List, Sequence

from algorithms.step import Step, compare, swap


PSEUDOCODE: List[str] = [
    "QUICK-SORT(A, low, high):",
    "  if low < high",
    "    pi = PARTITION(A, low, high)",
    "    QUICK-SORT(A, low, pi - 1)",
    "    QUICK-SORT(A, pi + 1, high)",
]


def quick_sort(values: Sequence) -> Generator[Step, None, None]:
    a = list(values)
    yield from _sort(a, 0, len(a) - 1)


def _sort(a: List, low: int, high: int) -> Generator[Step, None, None]:
    if low < high:
        # _partition hands back the pivot's final index
        pi = yield from _partition(a, low, high)
        yield from _sort(a, low, pi - 1)
        yield from _sort(a, pi + 1, high)


def _partition(a: List, low: int, high: int) -> Generator[Step, None, int]:
    pivot = a[high]
    i = low - 1

    for j in range(low, high):
        yield compare(j, high)
        if a[j] < pivot:
            i += 1
            a[i], a[j] = a[j], a[i]
            yield swap(i, j)

    a[i + 1], a[high] = a[high], a[i + 1]
    yield swap(i + 1, high)
    return i + 1

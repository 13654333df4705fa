"""
insertion_sort.py — Insertion Sort
===================================
Each key A[i] is lifted out and larger predecessors are shifted one
slot to the right until the key's position is found.

Yields, per shift:  compare(j, i) then overwrite(j+1, A[j]).
Yields, per key:    overwrite(j+1, key) for the final placement.

Only comparisons that lead to a shift are recorded; the comparison that
ends the inner loop is not.
"""

from typing import Generator, List, Sequence

from algorithms.step import Step, compare, overwrite


PSEUDOCODE: List[str] = [
    "INSERTION-SORT(A):",
    "  for i = 1 to A.length - 1",
    "    key = A[i]",
    "    j = i - 1",
    "    while j >= 0 and A[j] > key",
    "      A[j+1] = A[j]",
    "      j = j - 1",
    "    A[j+1] = key",
]


def insertion_sort(values: Sequence) -> Generator[Step, None, None]:
    a = list(values)

    for i in range(1, len(a)):
        key = a[i]
        j = i - 1

        while j >= 0 and a[j] > key:
            yield compare(j, i)
            a[j + 1] = a[j]
            yield overwrite(j + 1, a[j])
            j -= 1

        a[j + 1] = key
        yield overwrite(j + 1, key)

"""
selection_sort.py — Selection Sort
===================================
For each position i the remaining suffix is scanned for its minimum,
comparing every candidate against the current minimum index.  One swap
per pass, and only when the minimum is not already in place.
"""

from typing import Generator, List, Sequence

from algorithms.step import Step, compare, swap


PSEUDOCODE: List[str] = [
    "SELECTION-SORT(A):",
    "  for i = 0 to A.length - 2",
    "    min_idx = i",
    "    for j = i+1 to A.length - 1",
    "      if A[j] < A[min_idx]",
    "        min_idx = j",
    "    if min_idx != i",
    "      swap(A[i], A[min_idx])",
]


def selection_sort(values: Sequence) -> Generator[Step, None, None]:
    a = list(values)
    n = len(a)

    for i in range(n - 1):
        min_idx = i
        for j in range(i + 1, n):
            yield compare(j, min_idx)
            if a[j] < a[min_idx]:
                min_idx = j

        if min_idx != i:
            a[i], a[min_idx] = a[min_idx], a[i]
            yield swap(i, min_idx)

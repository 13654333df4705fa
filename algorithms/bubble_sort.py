"""
bubble_sort.py — Bubble Sort
=============================
Plain nested-loop bubble sort: n-1 full passes, each one bound shorter
than the last.  There is no early exit on a clean pass, so the compare
count is always n(n-1)/2.
"""

from typing import Generator, List, Sequence

from algorithms.step import Step, compare, swap


PSEUDOCODE: List[str] = [
    "BUBBLE-SORT(A):",
    "  for i = 1 to A.length - 1",
    "    for j = 0 to A.length - i - 1",
    "      if A[j] > A[j+1]",
    "        swap(A[j], A[j+1])",
]


def bubble_sort(values: Sequence) -> Generator[Step, None, None]:
    a = list(values)
    n = len(a)

    for i in range(n - 1):
        for j in range(n - i - 1):
            yield compare(j, j + 1)
            if a[j] > a[j + 1]:
                a[j], a[j + 1] = a[j + 1], a[j]
                yield swap(j, j + 1)

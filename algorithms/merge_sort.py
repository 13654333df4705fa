"""
merge_sort.py — Merge Sort
===========================
Top-down merge sort.  The range [lo, hi] is split at (lo + hi) // 2,
both halves are sorted recursively, then merged through a scratch
buffer.

Yields:
  1. compare(i, j)      – heads of the left / right runs are compared
  2. overwrite(k, v)    – the merged run is written back, in output order

Ties go to the left run (<=), so the sort is stable.
"""

from typing import Generator, List, Sequence

from algorithms.step import Step, compare, overwrite


PSEUDOCODE: List[str] = [
    "MERGE-SORT(A, lo, hi):",
    "  if lo < hi",
    "    mid = floor((lo + hi) / 2)",
    "    MERGE-SORT(A, lo, mid)",
    "    MERGE-SORT(A, mid+1, hi)",
    "    MERGE(A, lo, mid, hi)",
]


def merge_sort(values: Sequence) -> Generator[Step, None, None]:
    a = list(values)
    yield from _sort(a, 0, len(a) - 1)


def _sort(a: List, lo: int, hi: int) -> Generator[Step, None, None]:
    if lo < hi:
        mid = (lo + hi) // 2
        yield from _sort(a, lo, mid)
        yield from _sort(a, mid + 1, hi)
        yield from _merge(a, lo, mid, hi)


def _merge(a: List, lo: int, mid: int, hi: int) -> Generator[Step, None, None]:
    merged = []
    i, j = lo, mid + 1

    while i <= mid and j <= hi:
        yield compare(i, j)
        if a[i] <= a[j]:
            merged.append(a[i])
            i += 1
        else:
            merged.append(a[j])
            j += 1

    # drain whichever run is left over
    merged.extend(a[i:mid + 1])
    merged.extend(a[j:hi + 1])

    for k, value in enumerate(merged):
        a[lo + k] = value
        yield overwrite(lo + k, value)

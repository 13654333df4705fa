"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every sorting algorithm the visualizer knows
about.

    from algorithms import Algorithm, REGISTRY, generate

REGISTRY is a dict:
    {
        Algorithm.MERGE: AlgoInfo(key, label, fn, pseudocode, …),
        …
    }

`generate(algorithm, values)` is the one entry point the engine, the
store and the web layer use to turn an array into a step log.  Callers
never switch on algorithm names themselves.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from errors import InvalidInput
from algorithms.step import Step, StepType
from algorithms.merge_sort     import merge_sort     as _merge,     PSEUDOCODE as _merge_pc
from algorithms.quick_sort     import quick_sort     as _quick,     PSEUDOCODE as _quick_pc
from algorithms.bubble_sort    import bubble_sort    as _bubble,    PSEUDOCODE as _bubble_pc
from algorithms.selection_sort import selection_sort as _selection, PSEUDOCODE as _selection_pc
from algorithms.insertion_sort import insertion_sort as _insertion, PSEUDOCODE as _insertion_pc


# ---------------------------------------------------------------------------
# The closed set of algorithm names
# ---------------------------------------------------------------------------
class Algorithm(str, Enum):
    MERGE     = "merge"
    QUICK     = "quick"
    BUBBLE    = "bubble"
    SELECTION = "selection"
    INSERTION = "insertion"

    @classmethod
    def parse(cls, name: Union["Algorithm", str, None]) -> "Algorithm":
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            raise InvalidInput(
                f"Unknown algorithm: {name!r} (expected one of {', '.join(a.value for a in cls)})"
            ) from None


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              Algorithm
    label:            str                      # e.g. "Merge Sort"
    fn:               Callable                 # the step generator
    pseudocode:       List[str]
    complexity_time:  str  = ""
    complexity_space: str  = ""
    stable:           bool = False
    tags:             List[str] = field(default_factory=list)
    description:      str  = ""


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[Algorithm, AlgoInfo] = {

    Algorithm.MERGE: AlgoInfo(
        key=Algorithm.MERGE, label="Merge Sort", fn=_merge, pseudocode=_merge_pc,
        complexity_time="O(n log n)", complexity_space="O(n)", stable=True,
        tags=["divide-and-conquer", "overwrite"],
        description="Splits in half, sorts each half, merges them back through a buffer.",
    ),

    Algorithm.QUICK: AlgoInfo(
        key=Algorithm.QUICK, label="Quick Sort", fn=_quick, pseudocode=_quick_pc,
        complexity_time="O(n log n) average", complexity_space="O(log n)",
        tags=["divide-and-conquer", "in-place"],
        description="Partitions around the last element, then recurses on both sides.",
    ),

    Algorithm.BUBBLE: AlgoInfo(
        key=Algorithm.BUBBLE, label="Bubble Sort", fn=_bubble, pseudocode=_bubble_pc,
        complexity_time="O(n²)", complexity_space="O(1)", stable=True,
        tags=["in-place"],
        description="Repeatedly swaps adjacent out-of-order pairs. Largest values bubble to the end.",
    ),

    Algorithm.SELECTION: AlgoInfo(
        key=Algorithm.SELECTION, label="Selection Sort", fn=_selection, pseudocode=_selection_pc,
        complexity_time="O(n²)", complexity_space="O(1)",
        tags=["in-place"],
        description="Finds the minimum of the unsorted suffix and swaps it into place.",
    ),

    Algorithm.INSERTION: AlgoInfo(
        key=Algorithm.INSERTION, label="Insertion Sort", fn=_insertion, pseudocode=_insertion_pc,
        complexity_time="O(n²)", complexity_space="O(1)", stable=True,
        tags=["in-place", "overwrite"],
        description="Grows a sorted prefix by shifting larger values right to make room.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: Union[Algorithm, str]) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    try:
        return REGISTRY.get(Algorithm(key))
    except ValueError:
        return None


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


# ---------------------------------------------------------------------------
# Step-log generation
# ---------------------------------------------------------------------------
def validate_values(values: Any, allow_empty: bool = True) -> List[Real]:
    """
    Return `values` as a fresh list of real numbers.

    Raises:
        InvalidInput – not a list/tuple, contains a non-number (bools and
                       NaN included), or empty when `allow_empty` is False.
    """
    if not isinstance(values, (list, tuple)):
        raise InvalidInput(f"Array must be a list of numbers, got {type(values).__name__}")
    if not values and not allow_empty:
        raise InvalidInput("Array cannot be empty")
    for pos, v in enumerate(values):
        if isinstance(v, bool) or not isinstance(v, Real):
            raise InvalidInput(f"Array element {pos} is not a number: {v!r}")
        if isinstance(v, float) and math.isnan(v):
            raise InvalidInput(f"Array element {pos} is NaN")
    return list(values)


def generate(algorithm: Union[Algorithm, str], values: Sequence) -> Tuple[Step, ...]:
    """
    Run `algorithm` against a private copy of `values` and return the
    step log it produced.  `values` itself is never touched.
    """
    info = REGISTRY[Algorithm.parse(algorithm)]
    return tuple(info.fn(validate_values(values)))


__all__ = [
    "Algorithm",
    "AlgoInfo",
    "REGISTRY",
    "Step",
    "StepType",
    "get_algorithm",
    "list_algorithms",
    "validate_values",
    "generate",
]

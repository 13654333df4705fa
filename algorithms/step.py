"""
step.py — Sorting Step Record
==============================
Every sorting algorithm is a generator that yields Step objects.
A Step is one primitive operation the algorithm performed against
index positions of the array it is sorting:

    • compare    – two positions were compared (no mutation)
    • overwrite  – one position was assigned a value
    • swap       – two positions exchanged their values

Design decisions:
  - Step is a frozen dataclass.  The algorithm generator is the only
    writer; the stepper / renderer / store are pure readers.
  - A step log is a plain tuple of Steps in the exact order the
    algorithm performed them.  Replaying only the mutating steps
    against a copy of the input reproduces the sorted array.
  - The wire format is the same dict shape the browser and the store
    use, so a persisted log can be fed straight back to the stepper.
"""

import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Dict, List, MutableSequence, Optional, Tuple, Union

from errors import MalformedStep


class StepType(Enum):
    COMPARE   = "compare"
    OVERWRITE = "overwrite"
    SWAP      = "swap"


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        type    : Which primitive operation this is.
        indices : (i, j) for compare / swap, (i,) for overwrite.
        value   : The value written (overwrite only).
    """

    type:    StepType
    indices: Tuple[int, ...]
    value:   Optional[Real] = None

    @property
    def index(self) -> int:
        return self.indices[0]

    @property
    def is_mutating(self) -> bool:
        return self.type is not StepType.COMPARE

    def apply(self, array: MutableSequence) -> Tuple[int, ...]:
        """Apply this step to `array` in place; return the highlighted indices."""
        if self.type is StepType.OVERWRITE:
            array[self.index] = self.value
        elif self.type is StepType.SWAP:
            i, j = self.indices
            array[i], array[j] = array[j], array[i]
        return self.indices

    def to_dict(self) -> Dict[str, Any]:
        if self.type is StepType.OVERWRITE:
            return {"type": self.type.value, "index": self.index, "value": self.value}
        return {"type": self.type.value, "indices": list(self.indices)}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Step":
        if not isinstance(raw, dict):
            raise MalformedStep(f"Step must be an object, got {type(raw).__name__}")

        tag = raw.get("type")
        try:
            kind = StepType(tag)
        except ValueError:
            raise MalformedStep(f"Unknown step type: {tag!r}") from None

        if kind is StepType.OVERWRITE:
            index = raw.get("index")
            value = raw.get("value")
            if not _is_index(index):
                raise MalformedStep(f"Overwrite step has invalid index: {index!r}")
            if not _is_number(value):
                raise MalformedStep(f"Overwrite step has invalid value: {value!r}")
            return overwrite(index, value)

        pair = raw.get("indices")
        if not isinstance(pair, (list, tuple)) or len(pair) != 2 or not all(_is_index(i) for i in pair):
            raise MalformedStep(f"{kind.value} step needs two integer indices, got {pair!r}")
        return Step(kind, (pair[0], pair[1]))


# ---------------------------------------------------------------------------
# Constructors used by the algorithm generators
# ---------------------------------------------------------------------------
def compare(i: int, j: int) -> Step:
    return Step(StepType.COMPARE, (i, j))


def overwrite(i: int, value: Real) -> Step:
    return Step(StepType.OVERWRITE, (i,), value)


def swap(i: int, j: int) -> Step:
    return Step(StepType.SWAP, (i, j))


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
RawStep = Union[Step, Dict[str, Any]]


def validate_step(raw: RawStep, length: int) -> Step:
    """
    Coerce a Step or its dict form into a Step whose indices are all
    valid positions in an array of `length` elements.

    Steps built in code get the same shape checks as their dict form.

    Raises:
        MalformedStep – unknown tag, wrong shape, or out-of-range index.
    """
    if isinstance(raw, Step):
        step = raw
        _check_shape(step)
    else:
        step = Step.from_dict(raw)
    for idx in step.indices:
        if not 0 <= idx < length:
            raise MalformedStep(
                f"{step.type.value} step index {idx} out of range for array of length {length}"
            )
    return step


def steps_to_dicts(steps) -> List[Dict[str, Any]]:
    return [s.to_dict() if isinstance(s, Step) else dict(s) for s in steps]


def _check_shape(step: Step) -> None:
    if not isinstance(step.type, StepType):
        raise MalformedStep(f"Unknown step type: {step.type!r}")

    indices = step.indices
    if not isinstance(indices, (tuple, list)) or not all(_is_index(i) for i in indices):
        raise MalformedStep(f"{step.type.value} step has invalid indices: {indices!r}")

    if step.type is StepType.OVERWRITE:
        if len(indices) != 1:
            raise MalformedStep(f"Overwrite step needs one index, got {indices!r}")
        if not _is_number(step.value):
            raise MalformedStep(f"Overwrite step has invalid value: {step.value!r}")
    elif len(indices) != 2:
        raise MalformedStep(f"{step.type.value} step needs two integer indices, got {indices!r}")


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and not (isinstance(value, float) and math.isnan(value))
    )

"""
Tests for the step-log generators.

Replaying only the mutating steps of a log against a copy of the input
must reproduce the sorted array, and the logs themselves must match the
textbook operation order exactly.
"""

import random

import pytest

from errors import InvalidInput
from algorithms import Algorithm, REGISTRY, generate, get_algorithm, list_algorithms
from algorithms.step import StepType, compare, overwrite, swap


ALL = list(Algorithm)


def replay(values, steps):
    arr = list(values)
    for s in steps:
        s.apply(arr)
    return arr


# ---------------------------------------------------------------------------
# Sorting property
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("algorithm", ALL)
@pytest.mark.parametrize("values", [
    [],
    [1],
    [2, 1],
    [3, 1, 2],
    [70, 20, 90, 10, 50, 30, 60, 80, 40],
    [5, 5, 5, 5],
    [1, 2, 3, 4, 5],
    [5, 4, 3, 2, 1],
    [-3, 0, 2.5, -7, 2.5, 1],
])
def test_replay_sorts(algorithm, values):
    steps = generate(algorithm, values)
    assert replay(values, steps) == sorted(values)


@pytest.mark.parametrize("algorithm", ALL)
def test_replay_sorts_random_inputs(algorithm):
    rng = random.Random(1234)
    for _ in range(50):
        values = [rng.randint(-20, 20) for _ in range(rng.randint(0, 25))]
        assert replay(values, generate(algorithm, values)) == sorted(values)


@pytest.mark.parametrize("algorithm", ALL)
def test_indices_stay_in_range(algorithm):
    values = [9, 3, 7, 1, 8, 2, 6]
    for s in generate(algorithm, values):
        assert all(0 <= i < len(values) for i in s.indices)


@pytest.mark.parametrize("algorithm", ALL)
def test_input_is_not_mutated(algorithm):
    values = [4, 3, 2, 1]
    generate(algorithm, values)
    assert values == [4, 3, 2, 1]


@pytest.mark.parametrize("algorithm", ALL)
def test_generation_is_deterministic(algorithm):
    values = [8, 1, 6, 3, 3, 9, 0]
    assert generate(algorithm, values) == generate(algorithm, values)


@pytest.mark.parametrize("algorithm", ALL)
def test_single_element_gives_empty_log(algorithm):
    assert generate(algorithm, [1]) == ()
    assert generate(algorithm, []) == ()


def test_algorithm_accepts_enum_or_name():
    assert generate("bubble", [2, 1]) == generate(Algorithm.BUBBLE, [2, 1])


# ---------------------------------------------------------------------------
# Exact logs for [3, 1, 2]
# ---------------------------------------------------------------------------
def test_bubble_scenario():
    steps = generate("bubble", [3, 1, 2])
    assert steps == (
        compare(0, 1), swap(0, 1),
        compare(1, 2), swap(1, 2),
        compare(0, 1),
    )
    arr = [3, 1, 2]
    steps[1].apply(arr)
    assert arr == [1, 3, 2]
    steps[3].apply(arr)
    assert arr == [1, 2, 3]


def test_merge_scenario():
    assert generate("merge", [3, 1, 2]) == (
        compare(0, 1), overwrite(0, 1), overwrite(1, 3),
        compare(0, 2), compare(1, 2),
        overwrite(0, 1), overwrite(1, 2), overwrite(2, 3),
    )


def test_quick_scenario():
    assert generate("quick", [3, 1, 2]) == (
        compare(0, 2), compare(1, 2), swap(0, 1), swap(1, 2),
    )


def test_selection_scenario():
    assert generate("selection", [3, 1, 2]) == (
        compare(1, 0), compare(2, 1), swap(0, 1),
        compare(2, 1), swap(1, 2),
    )


def test_insertion_scenario():
    assert generate("insertion", [3, 1, 2]) == (
        compare(0, 1), overwrite(1, 3), overwrite(0, 1),
        compare(1, 2), overwrite(2, 3), overwrite(1, 2),
    )


# ---------------------------------------------------------------------------
# Algorithm-specific rules
# ---------------------------------------------------------------------------
def test_merge_ties_prefer_left_run():
    # with <= the equal heads keep the merge going for a second comparison
    steps = generate("merge", [1, 2, 1])
    assert [s for s in steps if s.type is StepType.COMPARE] == [
        compare(0, 1), compare(0, 2), compare(1, 2),
    ]


def test_quick_emits_noop_pivot_swaps():
    assert generate("quick", [1, 2]) == (compare(0, 1), swap(0, 0), swap(1, 1))


def test_quick_compares_against_last_index():
    values = [4, 7, 5, 9, 3]
    first_pass = generate("quick", values)[:4]
    assert first_pass == tuple(compare(j, 4) for j in range(4))


@pytest.mark.parametrize("n", [0, 1, 2, 5, 9, 16])
def test_bubble_and_selection_compare_counts(n):
    values = list(range(n, 0, -1))
    for algorithm in ("bubble", "selection"):
        compares = [s for s in generate(algorithm, values) if s.type is StepType.COMPARE]
        assert len(compares) == n * (n - 1) // 2


def test_bubble_has_no_early_exit_on_sorted_input():
    steps = generate("bubble", [1, 2, 3, 4])
    assert len(steps) == 6
    assert all(s.type is StepType.COMPARE for s in steps)


def test_selection_skips_swap_when_minimum_in_place():
    steps = generate("selection", [1, 2, 3])
    assert all(s.type is StepType.COMPARE for s in steps)


def test_insertion_places_every_key_on_sorted_input():
    assert generate("insertion", [1, 2, 3]) == (overwrite(1, 2), overwrite(2, 3))


# ---------------------------------------------------------------------------
# Validation & registry
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("bad", [
    "3,1,2",
    [1, "2", 3],
    [1, None],
    [True, False],
    [1.0, float("nan")],
    {"a": 1},
])
def test_rejects_invalid_values(bad):
    with pytest.raises(InvalidInput):
        generate("merge", bad)


def test_rejects_unknown_algorithm():
    with pytest.raises(InvalidInput, match="Unknown algorithm"):
        generate("bogo", [2, 1])


def test_registry_covers_every_algorithm():
    assert set(REGISTRY) == set(Algorithm)
    assert [a.key for a in list_algorithms()] == list(Algorithm)
    assert get_algorithm("quick").label == "Quick Sort"
    assert get_algorithm("nope") is None
    for info in list_algorithms():
        assert info.pseudocode

"""Tests for run recording, metrics and side-by-side comparison."""

import pytest

from engine import Recorder, compare
from algorithms import generate


def run(algorithm, values):
    rec = Recorder()
    rec.start(algorithm, values)
    rec.run_to_completion()
    return rec


def test_metrics_for_bubble():
    m = run("bubble", [3, 1, 2]).metrics
    assert m.algo_key == "bubble"
    assert m.algo_label == "Bubble Sort"
    assert m.size == 3
    assert m.comparisons == 3
    assert m.swaps == 2
    assert m.overwrites == 0
    assert m.writes == 4
    assert m.total_steps == 5
    assert m.wall_time_ms >= 0


def test_metrics_for_merge():
    m = run("merge", [3, 1, 2]).metrics
    assert (m.comparisons, m.swaps, m.overwrites) == (3, 0, 5)
    assert m.writes == 5


def test_steps_match_generate():
    rec = run("selection", [9, 4, 7, 1])
    assert tuple(rec.steps) == generate("selection", [9, 4, 7, 1])


def test_run_requires_start():
    with pytest.raises(RuntimeError):
        Recorder().run_to_completion()


def test_compare_picks_fewer():
    values = [9, 8, 7, 6, 5, 4, 3, 2, 1]
    result = compare(run("merge", values), run("bubble", values))
    assert result.winner_comparisons == "Merge Sort"
    assert result.left.algo_key == "merge"
    assert result.right.algo_key == "bubble"


def test_compare_tie():
    values = [1, 2, 3]
    result = compare(run("bubble", values), run("selection", values))
    assert result.winner_comparisons == "tie"
    assert result.winner_writes == "tie"
    assert result.winner_steps == "tie"


def test_run_to_completion_returns_the_stored_metrics():
    rec = Recorder()
    rec.start("quick", [3, 1, 2])
    assert rec.metrics is None
    m = rec.run_to_completion()
    assert m is rec.metrics
    assert m.swaps == 2

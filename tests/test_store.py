"""Tests for the SQLite visualization store."""

import pytest

from errors import InvalidInput, NotFound
from engine import Recorder
from store import VisualizationStore, validate_record


def record(algorithm="bubble", values=(3, 1, 2)):
    rec = Recorder()
    rec.start(algorithm, list(values))
    rec.run_to_completion()
    return rec.export()


def test_create_and_get(store):
    meta = store.create(record())
    assert set(meta) == {"id", "algorithm", "createdAt"}
    assert meta["algorithm"] == "bubble"

    saved = store.get(meta["id"])
    assert saved["id"] == meta["id"]
    assert saved["createdAt"] == meta["createdAt"]
    assert saved["array"] == [3, 1, 2]
    assert saved["steps"] == record()["steps"]


def test_list_newest_first_without_steps(store):
    first = store.create(record("merge"))
    second = store.create(record("quick", (5, 4)))

    items = store.list()
    assert [i["id"] for i in items] == [second["id"], first["id"]]
    assert items[0] == {
        "id": second["id"],
        "algorithm": "quick",
        "size": 2,
        "createdAt": second["createdAt"],
    }
    assert all("steps" not in i for i in items)


def test_list_limit(store):
    for _ in range(3):
        store.create(record())
    assert len(store.list(limit=2)) == 2
    assert len(store.list(limit=500)) == 3


def test_get_unknown_raises_not_found(store):
    with pytest.raises(NotFound) as exc:
        store.get("missing")
    assert exc.value.id == "missing"


def test_delete(store):
    meta = store.create(record())
    assert store.delete(meta["id"])
    assert not store.delete(meta["id"])
    with pytest.raises(NotFound):
        store.get(meta["id"])


def test_persists_across_instances(tmp_path):
    path = str(tmp_path / "viz.db")
    meta = VisualizationStore(path).create(record())
    assert VisualizationStore(path).get(meta["id"])["algorithm"] == "bubble"


def test_empty_step_log_is_accepted(store):
    meta = store.create({"algorithm": "merge", "array": [7], "steps": []})
    assert store.get(meta["id"])["steps"] == []


@pytest.mark.parametrize("bad", [
    {"algorithm": "bubble", "array": [3, 1, 2]},
    {"algorithm": "bogo", "array": [3, 1, 2], "steps": []},
    {"algorithm": "bubble", "array": [], "steps": []},
    {"algorithm": "bubble", "array": ["a"], "steps": []},
    {"algorithm": "bubble", "array": [3, 1, 2], "steps": "nope"},
    {"algorithm": "bubble", "array": [3, 1, 2], "steps": [{"type": "swap", "indices": [0, 3]}]},
    {"algorithm": "bubble", "array": [3, 1, 2], "steps": [{"type": "jump"}]},
    ["bubble", [3, 1, 2], []],
])
def test_rejects_invalid_records(store, bad):
    with pytest.raises(InvalidInput):
        store.create(bad)
    assert store.list() == []


def test_validate_record_normalises_steps():
    doc = validate_record({
        "algorithm": "quick",
        "array": [2, 1],
        "steps": [{"type": "compare", "indices": [0, 1], "extra": True}],
    })
    assert doc["steps"] == [{"type": "compare", "indices": [0, 1]}]


def test_ping(store):
    assert store.ping()

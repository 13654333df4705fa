"""
visualizations.py — Saved Visualization Store
==============================================
Persists {algorithm, array, steps} records in SQLite.  Each row is one
JSON document plus the few columns the list view needs, keyed by an
opaque id with a server-assigned creation timestamp.

    store = VisualizationStore("visualizations.db")
    meta  = store.create({"algorithm": "bubble", "array": [3, 1, 2], "steps": [...]})
    store.list()            # newest first, steps omitted
    store.get(meta["id"])   # full record, or NotFound
    store.delete(meta["id"])
"""

import json
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List

from errors import InvalidInput, MalformedStep, NotFound
from algorithms import Algorithm, validate_values
from algorithms.step import steps_to_dicts, validate_step
from logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 50
REQUIRED_FIELDS = ("algorithm", "array", "steps")


def validate_record(record: Any) -> Dict[str, Any]:
    """
    Check a {algorithm, array, steps} record and return a normalised copy.

    Raises:
        InvalidInput – missing field, unknown algorithm, empty / non-numeric
                       array, or a step that does not fit the array.
    """
    if not isinstance(record, dict):
        raise InvalidInput("Record must be a JSON object")
    missing = [f for f in REQUIRED_FIELDS if record.get(f) is None]
    if missing:
        raise InvalidInput(f"Missing required fields: {', '.join(missing)}")

    algo = Algorithm.parse(record["algorithm"])
    array = validate_values(record["array"], allow_empty=False)
    steps = record["steps"]
    if not isinstance(steps, (list, tuple)):
        raise InvalidInput("Steps must be a list")
    try:
        checked = [validate_step(s, len(array)) for s in steps]
    except MalformedStep as exc:
        raise InvalidInput(f"Invalid step log: {exc}") from exc

    return {"algorithm": algo.value, "array": array, "steps": steps_to_dicts(checked)}


class VisualizationStore:
    """SQLite-backed store; one connection per call, safe across Flask threads."""

    def __init__(self, db_path: str = "visualizations.db"):
        self.db_path = db_path
        self._init_database()

    @contextmanager
    def get_connection(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self):
        with self.get_connection() as conn:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS visualizations (
                    id TEXT PRIMARY KEY,
                    algorithm TEXT NOT NULL,
                    size INTEGER NOT NULL,
                    document TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    seq INTEGER NOT NULL
                )
            ''')
            conn.execute('CREATE INDEX IF NOT EXISTS idx_viz_created ON visualizations(created_at, seq)')

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and save a record.  Returns {id, algorithm, createdAt}."""
        doc = validate_record(record)
        viz_id = uuid.uuid4().hex
        created_at = _utc_now()

        with self.get_connection() as conn:
            (seq,) = conn.execute('SELECT COALESCE(MAX(seq), 0) + 1 FROM visualizations').fetchone()
            conn.execute(
                'INSERT INTO visualizations (id, algorithm, size, document, created_at, seq) '
                'VALUES (?, ?, ?, ?, ?, ?)',
                (viz_id, doc["algorithm"], len(doc["array"]), json.dumps(doc), created_at, seq),
            )

        logger.info("Saved %s visualization %s (%d steps)", doc["algorithm"], viz_id, len(doc["steps"]))
        return {"id": viz_id, "algorithm": doc["algorithm"], "createdAt": created_at}

    def list(self, limit: int = DEFAULT_LIST_LIMIT) -> List[Dict[str, Any]]:
        """Newest first, step logs omitted."""
        limit = max(1, min(int(limit), DEFAULT_LIST_LIMIT))
        with self.get_connection() as conn:
            rows = conn.execute(
                'SELECT id, algorithm, size, created_at FROM visualizations '
                'ORDER BY created_at DESC, seq DESC LIMIT ?',
                (limit,),
            ).fetchall()
        return [
            {"id": r["id"], "algorithm": r["algorithm"], "size": r["size"], "createdAt": r["created_at"]}
            for r in rows
        ]

    def get(self, viz_id: str) -> Dict[str, Any]:
        with self.get_connection() as conn:
            row = conn.execute(
                'SELECT id, document, created_at FROM visualizations WHERE id = ?', (viz_id,)
            ).fetchone()
        if row is None:
            raise NotFound("Visualization not found", id=viz_id)
        doc = json.loads(row["document"])
        return {"id": row["id"], **doc, "createdAt": row["created_at"]}

    def delete(self, viz_id: str) -> bool:
        with self.get_connection() as conn:
            cur = conn.execute('DELETE FROM visualizations WHERE id = ?', (viz_id,))
            deleted = cur.rowcount > 0
        if deleted:
            logger.info("Deleted visualization %s", viz_id)
        return deleted

    def ping(self) -> bool:
        try:
            with self.get_connection() as conn:
                conn.execute('SELECT 1')
            return True
        except sqlite3.Error as exc:
            logger.error("Database ping failed: %s", exc)
            return False


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

"""
main.py — Sorting Algorithm Visualizer Flask App
=================================================
The web server that powers the visualizer.

Routes:
  GET    /                                  – main UI
  GET    /health                            – liveness + database status
  GET    /api/algorithms                    – the five sorts and their complexities
  POST   /api/visualizations                – save {algorithm, array, steps}
  GET    /api/visualizations                – newest-first summaries (no steps)
  GET    /api/visualizations/<id>           – one saved record
  DELETE /api/visualizations/<id>           – delete a saved record
  POST   /api/visualizations/<id>/load      – load a saved record into the session replay
  POST   /api/run                           – (re)generate if needed and play
  POST   /api/select                        – switch algorithm (resets, loads a fresh log)
  POST   /api/play | /api/pause | /api/reset
  POST   /api/step                          – apply one step while paused
  POST   /api/tick                          – fire the pending playback tick
  POST   /api/speed                         – set the speed slider value
  POST   /api/array                         – replace the array being sorted
  POST   /api/save                          – persist the session's current log
  POST   /api/compare                       – side-by-side metrics for two algorithms
  GET    /api/state                         – current replay state

State management:
  Each browser session gets its own Stepper, kept in a SessionRegistry
  keyed by an id stored in the Flask session cookie.  The browser is
  the clock: after every response it waits `delay_ms` and calls
  /api/tick while the state is "playing".
  Read-only routes (/, /api/state, /api/compare) never create a
  session; the registry keeps at most MAX_SESSIONS Steppers.
"""

from flask import Blueprint, Flask, current_app, jsonify, render_template_string, request, session
from werkzeug.exceptions import HTTPException
from datetime import datetime, timezone
import sys
import os
import uuid

# add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import Settings
from errors import InvalidInput, NotFound, VisualizerError
from logging_config import get_logger, setup_logging
from algorithms import Algorithm, REGISTRY, get_algorithm, list_algorithms
from engine import Recorder, RunMetrics, SessionRegistry, Stepper, compare
from store import VisualizationStore, DEFAULT_LIST_LIMIT
from ui import (
    render_bars,
    playback_controls,
    algorithm_selector,
    array_editor,
    pseudocode_viewer,
    analytics_panel,
    comparison_panel,
    saved_panel,
)

__version__ = "1.0.0"

logger = get_logger(__name__)
bp = Blueprint("visualizer", __name__)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(settings: Settings = None, store: VisualizationStore = None) -> Flask:
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    app.config.update(settings.flask_config())
    app.config["CORS_ORIGINS"] = list(settings.cors_origins)

    app.extensions["viz_store"]    = store or VisualizationStore(settings.database_path)
    app.extensions["viz_sessions"] = SessionRegistry(max_sessions=settings.max_sessions)

    app.register_blueprint(bp)
    _register_hooks(app)
    _register_error_handlers(app)
    return app


def _register_hooks(app: Flask) -> None:

    @app.before_request
    def log_request():
        logger.info("%s %s", request.method, request.path)

    @app.after_request
    def add_headers(response):
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        origin = request.headers.get("Origin")
        if origin and origin in app.config["CORS_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Max-Age"] = "86400"
            response.headers["Vary"] = "Origin"
        return response


def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(VisualizerError)
    def handle_visualizer_error(exc):
        body = {"error": str(exc)}
        if isinstance(exc, NotFound):
            body["id"] = exc.id
        return jsonify(body), exc.status_code

    @app.errorhandler(404)
    def handle_unknown_route(exc):
        return jsonify({
            "error":  "Endpoint not found",
            "path":   request.path,
            "method": request.method,
        }), 404

    @app.errorhandler(Exception)
    def handle_unexpected(exc):
        if isinstance(exc, HTTPException):
            return jsonify({"error": exc.description}), exc.code
        logger.exception("Server error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
def get_store() -> VisualizationStore:
    return current_app.extensions["viz_store"]


def get_stepper() -> Stepper:
    """This browser session's Stepper, created on first use."""
    sid = session.get("sid")
    if not sid:
        sid = uuid.uuid4().hex
        session["sid"] = sid
    return current_app.extensions["viz_sessions"].get(sid)


def peek_stepper() -> Stepper:
    """The session's Stepper if it has one, else a throwaway idle one that is never registered."""
    sessions = current_app.extensions["viz_sessions"]
    return sessions.find(session.get("sid")) or sessions.new_stepper()


def get_json() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def stepper_payload(stepper: Stepper, **extra) -> dict:
    """Replay state as JSON, plus the freshly rendered bars."""
    snap = stepper.snapshot()
    snap["svg"] = render_bars(snap["array"], snap["highlights"], complete=snap["state"] == "complete")
    snap.update(extra)
    return snap


def run_metrics(algorithm, values) -> RunMetrics:
    rec = Recorder()
    rec.start(algorithm, values)
    return rec.run_to_completion()


def algo_panels(stepper: Stepper) -> dict:
    """Pseudocode + analytics for whatever the stepper has loaded."""
    info = get_algorithm(stepper.algorithm) if stepper.algorithm else None
    metrics = run_metrics(stepper.algorithm, stepper.source) if stepper.algorithm else None
    return {
        "pseudocode": pseudocode_viewer(info.pseudocode if info else [], info.label if info else ""),
        "analytics":  analytics_panel(metrics),
    }


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@bp.route("/")
def index():
    stepper = peek_stepper()
    snap = stepper.snapshot()
    algo_info = get_algorithm(stepper.algorithm or Algorithm.MERGE)

    html = render_template_string(INDEX_TEMPLATE,
        svg=render_bars(snap["array"], snap["highlights"]),
        playback=playback_controls(
            state=snap["state"],
            cursor=snap["cursor"],
            total_steps=snap["total_steps"],
            speed=snap["speed"],
        ),
        algo_selector=algorithm_selector(list_algorithms(), algo_info.key.value),
        array_editor=array_editor(stepper.initial),
        pseudocode=pseudocode_viewer(algo_info.pseudocode, algo_info.label),
        analytics=analytics_panel(),
        comparison=comparison_panel(),
        saved=saved_panel(get_store().list()),
    )
    return html


# ---------------------------------------------------------------------------
# API: Service info
# ---------------------------------------------------------------------------
@bp.route("/health")
def health():
    return jsonify({
        "status":    "UP",
        "db":        "CONNECTED" if get_store().ping() else "DISCONNECTED",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version":   __version__,
    })


@bp.route("/api/algorithms")
def api_algorithms():
    return jsonify({
        "algorithms":       [a.value for a in Algorithm],
        "timeComplexities": {a.value: REGISTRY[a].complexity_time for a in Algorithm},
    })


# ---------------------------------------------------------------------------
# API: Saved visualizations
# ---------------------------------------------------------------------------
@bp.route("/api/visualizations", methods=["POST"])
def api_save_visualization():
    data = get_json()
    required = ["algorithm", "array", "steps"]
    if any(data.get(f) is None for f in required):
        return jsonify({"error": "Missing required fields", "required": required}), 400

    meta = get_store().create(data)
    return jsonify({"status": "success", "data": meta}), 201


@bp.route("/api/visualizations", methods=["GET"])
def api_list_visualizations():
    limit = request.args.get("limit", default=DEFAULT_LIST_LIMIT, type=int)
    items = get_store().list(limit)
    return jsonify({"status": "success", "count": len(items), "data": items})


@bp.route("/api/visualizations/<viz_id>", methods=["GET"])
def api_get_visualization(viz_id):
    return jsonify({"status": "success", "data": get_store().get(viz_id)})


@bp.route("/api/visualizations/<viz_id>", methods=["DELETE"])
def api_delete_visualization(viz_id):
    if not get_store().delete(viz_id):
        raise NotFound("Visualization not found", id=viz_id)
    return jsonify({"status": "success", "message": "Visualization deleted", "id": viz_id})


@bp.route("/api/visualizations/<viz_id>/load", methods=["POST"])
def api_load_visualization(viz_id):
    record = get_store().get(viz_id)
    stepper = get_stepper()
    stepper.load_log(record["algorithm"], record["array"], record["steps"])
    return jsonify(stepper_payload(stepper, **algo_panels(stepper)))


# ---------------------------------------------------------------------------
# API: Session replay
# ---------------------------------------------------------------------------
@bp.route("/api/run", methods=["POST"])
def api_run():
    data = get_json()
    stepper = get_stepper()
    if data.get("array") is not None:
        stepper.set_array(data["array"])
    stepper.start(data.get("algorithm"))
    return jsonify(stepper_payload(stepper, **algo_panels(stepper)))


@bp.route("/api/select", methods=["POST"])
def api_select():
    algorithm = Algorithm.parse(get_json().get("algorithm"))
    stepper = get_stepper()
    if stepper.is_playing or stepper.steps:
        stepper.reset()
    stepper.load(algorithm)
    return jsonify(stepper_payload(stepper, **algo_panels(stepper)))


@bp.route("/api/play", methods=["POST"])
def api_play():
    stepper = get_stepper()
    stepper.play()
    return jsonify(stepper_payload(stepper))


@bp.route("/api/pause", methods=["POST"])
def api_pause():
    stepper = get_stepper()
    stepper.pause()
    return jsonify(stepper_payload(stepper))


@bp.route("/api/reset", methods=["POST"])
def api_reset():
    stepper = get_stepper()
    stepper.reset()
    return jsonify(stepper_payload(stepper))


@bp.route("/api/step", methods=["POST"])
def api_step():
    stepper = get_stepper()
    stepper.next_step()
    return jsonify(stepper_payload(stepper))


@bp.route("/api/tick", methods=["POST"])
def api_tick():
    stepper = get_stepper()
    stepper.fire_next()
    payload = stepper_payload(stepper)
    # a malformed step pauses playback and is reported, the session lives on
    return jsonify(payload), (422 if payload["error"] else 200)


@bp.route("/api/speed", methods=["POST"])
def api_speed():
    speed = get_json().get("speed")
    if isinstance(speed, bool) or not isinstance(speed, (int, float)):
        raise InvalidInput(f"Speed must be a number, got {speed!r}")
    stepper = get_stepper()
    stepper.set_speed(speed)
    return jsonify(stepper_payload(stepper))


@bp.route("/api/array", methods=["POST"])
def api_array():
    stepper = get_stepper()
    stepper.set_array(get_json().get("array"))
    return jsonify(stepper_payload(stepper))


@bp.route("/api/save", methods=["POST"])
def api_save_session():
    stepper = get_stepper()
    if not stepper.steps:
        raise InvalidInput("No steps to save. Run the visualization first.")
    meta = get_store().create(stepper.export())
    return jsonify({"status": "success", "data": meta}), 201


@bp.route("/api/compare", methods=["POST"])
def api_compare():
    data = get_json()
    stepper = peek_stepper()
    values = data.get("array", stepper.source)

    left, right = Recorder(), Recorder()
    left.start(data.get("left", stepper.algorithm or Algorithm.MERGE), values)
    right.start(data.get("right"), values)
    left.run_to_completion()
    right.run_to_completion()

    result = compare(left, right)
    return jsonify({
        "left":       result.left.__dict__,
        "right":      result.right.__dict__,
        "winners": {
            "comparisons": result.winner_comparisons,
            "writes":      result.winner_writes,
            "steps":       result.winner_steps,
        },
        "comparison": comparison_panel(result),
    })


@bp.route("/api/state", methods=["GET"])
def api_state():
    return jsonify(stepper_payload(peek_stepper()))


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Sorting Algorithm Visualizer</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --accent-cyan: #0ea5e9;
      --accent-teal: #06b6d4;
      --accent-emerald: #10b981;
      --accent-rose: #f43f5e;
    }
    body {
      font-family: -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }
    #sidebar {
      width: 340px;
      background: var(--bg-dark);
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 24px 16px;
    }
    #main { flex: 1; display: flex; flex-direction: column; }
    #canvas-container {
      flex: 1;
      display: flex;
      align-items: center;
      justify-content: center;
      border-bottom: 1px solid var(--border);
    }
    #bottom-panel {
      display: grid;
      grid-template-columns: 1fr 1fr;
      gap: 20px;
      padding: 20px;
      background: var(--bg-dark);
      max-height: 360px;
      overflow: auto;
    }
    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 18px;
      margin-bottom: 16px;
    }
    .panel h3 {
      font-size: 13px;
      margin-bottom: 14px;
      text-transform: uppercase;
      letter-spacing: 0.5px;
    }
    .button-row { display: flex; gap: 8px; margin-bottom: 12px; flex-wrap: wrap; }
    button {
      background: linear-gradient(135deg, var(--accent-cyan), var(--accent-teal));
      color: #fff;
      border: none;
      padding: 10px 16px;
      border-radius: 8px;
      cursor: pointer;
      font-weight: 600;
    }
    .btn-primary { background: linear-gradient(135deg, var(--accent-emerald), #059669); }
    .btn-secondary { background: var(--bg-darker); border: 1px solid var(--border); }
    select, input[type="text"], input[type="range"] {
      width: 100%;
      padding: 10px 12px;
      margin: 6px 0;
      background: var(--bg-darker);
      border: 1px solid var(--border);
      border-radius: 8px;
      color: var(--text-primary);
    }
    label { display: block; margin: 10px 0 4px; font-size: 12px; color: var(--text-secondary); }
    .step-info {
      font-family: monospace;
      padding: 8px 12px;
      background: var(--bg-darker);
      border-left: 3px solid var(--accent-cyan);
      border-radius: 6px;
    }
    .finished-badge {
      background: var(--accent-emerald);
      padding: 2px 8px;
      border-radius: 6px;
      font-size: 11px;
      font-weight: 700;
    }
    .code-block { font-family: monospace; font-size: 13px; line-height: 1.6; white-space: pre; }
    .placeholder, .muted { color: var(--text-secondary); font-size: 13px; }
    table { width: 100%; font-size: 13px; }
    .saved-viz-item { border-top: 1px solid var(--border); padding: 8px 0; font-size: 13px; }
    .toast {
      position: fixed; bottom: 20px; right: 20px;
      padding: 12px 18px; border-radius: 8px; background: var(--accent-emerald);
    }
    .toast.error { background: var(--accent-rose); }
  </style>
</head>
<body>
  <div id="sidebar">
    {{ playback|safe }}
    {{ algo_selector|safe }}
    {{ array_editor|safe }}
    <div id="saved">{{ saved|safe }}</div>
    <div class="panel">
      <h3>⚖️ Compare With</h3>
      <select id="compare-select">
        <option value="merge">merge</option>
        <option value="quick">quick</option>
        <option value="bubble">bubble</option>
        <option value="selection">selection</option>
        <option value="insertion">insertion</option>
      </select>
      <button id="btn-compare" class="btn-secondary">Compare</button>
    </div>
  </div>

  <div id="main">
    <div id="canvas-container">
      <div id="canvas-svg">{{ svg|safe }}</div>
    </div>
    <div id="bottom-panel">
      <div id="pseudocode">{{ pseudocode|safe }}</div>
      <div>
        <div id="analytics">{{ analytics|safe }}</div>
        <div id="comparison">{{ comparison|safe }}</div>
      </div>
    </div>
  </div>

  <script>
    let timer = null;
    const $ = (id) => document.getElementById(id);

    async function post(url, data) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data || {}),
      });
      return await res.json();
    }

    function showToast(message, type = 'success') {
      const toast = document.createElement('div');
      toast.className = `toast ${type}`;
      toast.textContent = message;
      document.body.appendChild(toast);
      setTimeout(() => toast.remove(), 3000);
    }

    function render(data) {
      if (data.svg) $('canvas-svg').innerHTML = data.svg;
      if (data.pseudocode) $('pseudocode').innerHTML = data.pseudocode;
      if (data.analytics) $('analytics').innerHTML = data.analytics;
      if (data.cursor !== undefined) $('current-step').textContent = data.cursor;
      if (data.total_steps !== undefined) $('total-steps').textContent = data.total_steps;
      if (data.state) {
        $('state-badge').innerHTML = data.state === 'complete'
          ? ' <span class="finished-badge">COMPLETE</span>' : '';
      }
      if (data.error) showToast(data.error, 'error');
    }

    function stopTimer() {
      if (timer) clearTimeout(timer);
      timer = null;
    }

    // one tick in flight at a time: the next is scheduled only after this one rendered
    function schedule(data) {
      stopTimer();
      if (data.state === 'playing') timer = setTimeout(tick, data.delay_ms);
    }

    async function tick() {
      timer = null;
      const data = await post('/api/tick');
      render(data);
      schedule(data);
    }

    $('btn-start').addEventListener('click', async () => {
      const data = await post('/api/run', {algorithm: $('algorithm-select').value});
      render(data);
      schedule(data);
    });

    $('btn-pause').addEventListener('click', async () => {
      stopTimer();
      render(await post('/api/pause'));
    });

    $('btn-step').addEventListener('click', async () => {
      render(await post('/api/step'));
    });

    $('btn-reset').addEventListener('click', async () => {
      stopTimer();
      render(await post('/api/reset'));
    });

    $('speed').addEventListener('input', async (e) => {
      $('speed-val').textContent = e.target.value;
      await post('/api/speed', {speed: +e.target.value});
    });

    $('algorithm-select').addEventListener('change', async (e) => {
      stopTimer();
      render(await post('/api/select', {algorithm: e.target.value}));
    });

    $('btn-set-array').addEventListener('click', async () => {
      stopTimer();
      const values = $('array-input').value.split(',').map(s => s.trim()).filter(Boolean).map(Number);
      render(await post('/api/array', {array: values}));
    });

    $('btn-compare').addEventListener('click', async () => {
      const data = await post('/api/compare', {
        left: $('algorithm-select').value,
        right: $('compare-select').value,
      });
      if (data.comparison) $('comparison').innerHTML = data.comparison;
      if (data.error) showToast(data.error, 'error');
    });

    async function refreshSaved() {
      const res = await fetch('/api/visualizations');
      const body = await res.json();
      const list = $('saved-viz-list');
      if (!body.data || !body.data.length) {
        list.innerHTML = '<p class="placeholder">No saved visualizations found</p>';
        return;
      }
      list.innerHTML = body.data.map(viz => `
        <div class="saved-viz-item">
          <p>Algorithm: ${viz.algorithm}</p>
          <p>Elements: ${viz.size}</p>
          <p class="muted">${viz.createdAt}</p>
          <button class="btn-secondary btn-load" data-id="${viz.id}">Load</button>
          <button class="btn-secondary btn-delete" data-id="${viz.id}">Delete</button>
        </div>
      `).join('');
    }

    $('save-btn').addEventListener('click', async () => {
      const btn = $('save-btn');
      btn.disabled = true;
      btn.textContent = 'Saving...';
      const data = await post('/api/save');
      if (data.error) showToast(data.error, 'error');
      else { showToast('Saved successfully!'); await refreshSaved(); }
      btn.disabled = false;
      btn.textContent = 'Save';
    });

    $('load-btn').addEventListener('click', refreshSaved);

    $('saved-viz-list').addEventListener('click', async (e) => {
      const id = e.target.dataset.id;
      if (!id) return;
      if (e.target.classList.contains('btn-load')) {
        stopTimer();
        const data = await post(`/api/visualizations/${id}/load`);
        render(data);
        if (data.algorithm) {
          $('algorithm-select').value = data.algorithm;
          showToast('Visualization loaded!');
        }
      } else if (e.target.classList.contains('btn-delete')) {
        const res = await fetch(`/api/visualizations/${id}`, {method: 'DELETE'});
        if (!res.ok) showToast('Failed to delete', 'error');
        await refreshSaved();
      }
    });
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    app = create_app(settings)

    logger.info("Sorting Algorithm Visualizer %s", __version__)
    logger.info("Open http://%s:%d", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port)

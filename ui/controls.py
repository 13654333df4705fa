"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls   – start/pause/step/reset + speed slider
  • algorithm_selector  – dropdown of the five sorts
  • array_editor        – comma-separated input for a custom array
  • pseudocode_viewer   – the selected algorithm's pseudocode
  • analytics_panel     – comparisons, swaps, writes, …
  • comparison_panel    – side-by-side metrics of two runs
  • saved_panel         – save button + list of saved visualizations

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together.
"""

from html import escape
from typing import Any, Dict, List, Optional, Sequence

from algorithms import AlgoInfo
from engine import ComparisonResult, RunMetrics


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    state: str = "idle",
    cursor: int = 0,
    total_steps: int = 0,
    speed: float = 10,
) -> str:
    badge = ' <span class="finished-badge">COMPLETE</span>' if state == "complete" else ""

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-start" class="btn-primary" title="Start">▶ Start</button>
        <button id="btn-pause" title="Pause">⏸</button>
        <button id="btn-step" title="Next step">⏭</button>
        <button id="btn-reset" class="btn-secondary" title="Reset">⟲ Reset</button>
      </div>
      <div class="step-info">
        Step <span id="current-step">{cursor}</span> / <span id="total-steps">{total_steps}</span>
        <span id="state-badge">{badge}</span>
      </div>
      <label>Speed: <span id="speed-val">{speed:g}</span></label>
      <input type="range" id="speed" min="1" max="20" step="1" value="{speed:g}">
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(algorithms: List[AlgoInfo], selected_key: str = "merge") -> str:
    options = []
    for algo in algorithms:
        sel = 'selected' if algo.key.value == selected_key else ''
        options.append(
            f'<option value="{algo.key.value}" {sel}>{algo.label} — {algo.complexity_time}</option>'
        )

    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <select id="algorithm-select">
        {''.join(options)}
      </select>
    </div>
    """


# ---------------------------------------------------------------------------
# Array Editor
# ---------------------------------------------------------------------------
def array_editor(array: Sequence[float]) -> str:
    current = ", ".join(str(v) for v in array)
    return f"""
    <div class="panel array-editor">
      <h3>📊 Array</h3>
      <input type="text" id="array-input" value="{escape(current)}">
      <button id="btn-set-array" class="btn-secondary">Use Array</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
def pseudocode_viewer(pseudocode_lines: List[str], algo_label: str = "") -> str:
    if not pseudocode_lines:
        return '<div class="code-block"><p class="placeholder">Select an algorithm.</p></div>'

    lines = "".join(
        f'<div class="code-line">{escape(line)}</div>' for line in pseudocode_lines
    )
    return f"""
    <div class="code-block" data-algo="{escape(algo_label)}">
      {lines}
    </div>
    """


# ---------------------------------------------------------------------------
# Analytics Panel
# ---------------------------------------------------------------------------
def analytics_panel(metrics: Optional[RunMetrics] = None) -> str:
    if not metrics:
        return """
        <div class="panel analytics-panel">
          <h3>📈 Analytics</h3>
          <p class="placeholder">Run an algorithm to see metrics.</p>
        </div>
        """

    return f"""
    <div class="panel analytics-panel">
      <h3>📈 Analytics — {metrics.algo_label}</h3>
      <table>
        <tr><td>Elements:</td><td><strong>{metrics.size}</strong></td></tr>
        <tr><td>Comparisons:</td><td><strong>{metrics.comparisons}</strong></td></tr>
        <tr><td>Swaps:</td><td><strong>{metrics.swaps}</strong></td></tr>
        <tr><td>Overwrites:</td><td><strong>{metrics.overwrites}</strong></td></tr>
        <tr><td>Array Writes:</td><td><strong>{metrics.writes}</strong></td></tr>
        <tr><td>Total Steps:</td><td><strong>{metrics.total_steps}</strong></td></tr>
        <tr><td>Wall Time:</td><td><strong>{metrics.wall_time_ms:.2f} ms</strong></td></tr>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Comparison Panel (side-by-side)
# ---------------------------------------------------------------------------
def comparison_panel(comp: Optional[ComparisonResult] = None) -> str:
    if not comp:
        return """
        <div class="panel comparison-panel">
          <h3>⚖️ Comparison</h3>
          <p class="placeholder">Pick a second algorithm to compare on the same array.</p>
        </div>
        """

    left = comp.left
    right = comp.right

    def winner_badge(winner_label):
        if winner_label == "tie":
            return "🟰 Tie"
        return f"👑 {winner_label}"

    return f"""
    <div class="panel comparison-panel">
      <h3>⚖️ {left.algo_label} vs {right.algo_label}</h3>
      <table class="comparison-table">
        <thead>
          <tr><th>Metric</th><th>{left.algo_label}</th><th>{right.algo_label}</th><th>Winner</th></tr>
        </thead>
        <tbody>
          <tr>
            <td>Comparisons</td><td>{left.comparisons}</td><td>{right.comparisons}</td>
            <td>{winner_badge(comp.winner_comparisons)}</td>
          </tr>
          <tr>
            <td>Array Writes</td><td>{left.writes}</td><td>{right.writes}</td>
            <td>{winner_badge(comp.winner_writes)}</td>
          </tr>
          <tr>
            <td>Total Steps</td><td>{left.total_steps}</td><td>{right.total_steps}</td>
            <td>{winner_badge(comp.winner_steps)}</td>
          </tr>
        </tbody>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Saved Visualizations
# ---------------------------------------------------------------------------
def saved_panel(items: Optional[List[Dict[str, Any]]] = None) -> str:
    if not items:
        listing = '<p class="placeholder">No saved visualizations found</p>'
    else:
        listing = "".join(
            f"""
            <div class="saved-viz-item">
              <p>Algorithm: {escape(item["algorithm"])}</p>
              <p>Elements: {item.get("size", 0)}</p>
              <p class="muted">{escape(item["createdAt"])}</p>
              <button class="btn-secondary btn-load" data-id="{escape(item["id"])}">Load</button>
              <button class="btn-secondary btn-delete" data-id="{escape(item["id"])}">Delete</button>
            </div>
            """
            for item in items
        )

    return f"""
    <div class="panel saved-panel">
      <h3>💾 Saved</h3>
      <div class="button-row">
        <button id="save-btn">Save</button>
        <button id="load-btn" class="btn-secondary">Refresh</button>
      </div>
      <div id="saved-viz-list">{listing}</div>
    </div>
    """

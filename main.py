"""
main.py — Dijkstra Stepper Flask App
=====================================
JSON web API that lets a browser renderer drive a step-by-step Dijkstra
run.  The server never draws: every response carries the StepReport and
graph state, and the client renders them however it likes.

Routes:
  GET  /                       – API index
  GET  /api/graph              – current graph
  POST /api/graph/demo         – load the 7-node demo graph
  POST /api/graph/generate     – generate a random directed graph
  POST /api/graph/import       – import from adjacency-list text
  POST /api/run                – start a run {start, end}
  POST /api/step/next          – advance one step
  POST /api/step/prev          – show the previous step
  POST /api/step/goto          – jump to step {index}
  POST /api/run/complete       – run to the end, return metrics
  GET  /api/run/export         – full recorded run
  GET  /api/state              – displayed state (distances, comments, …)
  GET  /api/path               – reconstructed path
  GET  /api/pseudocode         – pseudocode lines

State management:
  Everything lives in the Flask session cookie.  Each user's session holds:
    • graph          – serialised Graph
    • start / end    – the run's endpoints
    • fetched        – how many steps the engine has taken
    • current_step   – displayed report index (-1 = initial state)
  The engine itself is never stored: it is rebuilt per request by
  replaying `fetched` steps, which is exact because runs are deterministic.

Configuration (layered, later wins):
  DEFAULT_CONFIG  →  DIJKSTRA_* environment variables  →  create_app(overrides)
"""

import logging
import secrets
from dataclasses import asdict
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, Flask, current_app, jsonify, request, session

from graph import (
    Graph,
    build_demo_graph,
    InvalidReference,
    InvalidState,
    AlgorithmExhausted,
)
from algorithms import PSEUDOCODE, reconstruct, path_edges
from engine import Stepper, Recorder, report_to_dict, finite

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    "MAX_GRAPH_NODES":    20,
    "MAX_SESSION_BYTES":  3800,
    "COMMENT_FADE_STEPS": 1,
    "LOG_LEVEL":          "INFO",
}

api = Blueprint("api", __name__)


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
def get_graph() -> Graph:
    """Deserialise graph from session, or create the demo graph."""
    if "graph" not in session:
        session["graph"] = build_demo_graph().to_dict()
    return Graph.from_dict(session["graph"])


def save_graph(graph: Graph) -> None:
    payload = graph.to_dict()
    check_session_size({**session, "graph": payload})
    session["graph"] = payload
    clear_run()


def check_session_size(data: Dict[str, Any]) -> None:
    """Refuse state whose signed cookie would be too large for a browser to keep."""
    serializer = current_app.session_interface.get_signing_serializer(current_app)
    if serializer is None:
        return
    size  = len(serializer.dumps(data))
    limit = current_app.config["MAX_SESSION_BYTES"]
    if size > limit:
        logger.warning("refusing %d-byte session (limit %d)", size, limit)
        raise ValueError(
            f"Graph is too large to keep in the session ({size} bytes, limit {limit}). "
            "Use fewer nodes or a lower edge probability."
        )


def clear_run() -> None:
    for key in ("start", "end", "fetched", "current_step"):
        session.pop(key, None)


def save_run(stepper: Stepper) -> None:
    session["fetched"]      = stepper.total_steps_fetched
    session["current_step"] = stepper.current_idx


def replay() -> Stepper:
    """Rebuild the session's run up to where the user left it."""
    if session.get("start") is None:
        raise InvalidState("No run in progress. POST /api/run first.")
    stepper = Stepper(get_graph(), comment_fade_steps=current_app.config["COMMENT_FADE_STEPS"])
    stepper.start(session["start"], session["end"])
    stepper.goto_step(session.get("fetched", 0) - 1)
    stepper.goto_step(session.get("current_step", -1))
    return stepper


_MISSING = object()


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def int_field(data: dict, key: str, default: Any = _MISSING) -> int:
    if key not in data:
        if default is _MISSING:
            raise ValueError(f"Missing field '{key}'")
        return default
    value = data[key]
    # bool is an int subclass, and 1.9 must not quietly become node 1
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"Field '{key}' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Field '{key}' must be an integer") from None


def float_field(data: dict, key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool):
        raise ValueError(f"Field '{key}' must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Field '{key}' must be a number") from None


def weight_range_field(data: dict) -> Optional[Tuple[int, int]]:
    value = data.get("weight_range")
    if value is None:
        return None
    if not isinstance(value, list) or len(value) != 2:
        raise ValueError("'weight_range' must be a pair [low, high]")
    bounds = {"low": value[0], "high": value[1]}
    low, high = int_field(bounds, "low"), int_field(bounds, "high")
    if not 0 <= low <= high:
        raise ValueError("'weight_range' needs 0 <= low <= high")
    return low, high


def state_payload(stepper: Stepper) -> Dict[str, Any]:
    engine = stepper.engine
    report = stepper.current_report
    if report is not None:
        distances = {str(k): finite(v) for k, v in report.distances.items()}
    else:
        distances = {str(n): (0.0 if n == engine.start else None) for n in stepper.graph.node_ids()}
    return {
        "start":         engine.start,
        "end":           engine.end,
        "engine_state":  engine.state.value,
        "stepper_state": stepper.state.value,
        "current_step":  stepper.current_idx,
        "total_steps":   stepper.total_steps_fetched,
        "report":        report_to_dict(report) if report else None,
        "distances":     distances,
        "comments":      [asdict(c) for c in stepper.comments()],
        "path":          stepper.path,
        "graph":         stepper.graph.to_dict(),
    }


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------
@api.route("/")
def index():
    rules = sorted(
        {r.rule for r in current_app.url_map.iter_rules() if r.endpoint.startswith("api.")}
    )
    return jsonify({"name": "dijkstra-stepper", "endpoints": rules})


# ---------------------------------------------------------------------------
# API: Graph
# ---------------------------------------------------------------------------
@api.route("/api/graph", methods=["GET"])
def api_graph():
    return jsonify(get_graph().to_dict())


@api.route("/api/graph/demo", methods=["POST"])
def api_graph_demo():
    g = build_demo_graph()
    save_graph(g)
    return jsonify(g.to_dict())


@api.route("/api/graph/generate", methods=["POST"])
def api_graph_generate():
    data = json_body()
    num_nodes = int_field(data, "nodes", 10)
    limit = current_app.config["MAX_GRAPH_NODES"]
    if not 1 <= num_nodes <= limit:
        raise ValueError(f"'nodes' must be between 1 and {limit}")

    prob = float_field(data, "prob", 0.3)
    if not 0.0 <= prob <= 1.0:
        raise ValueError("'prob' must be between 0 and 1")

    seed = data.get("seed")
    if seed is not None:
        seed = int_field(data, "seed")

    g = Graph.generate_random(
        num_nodes=num_nodes,
        edge_probability=prob,
        weight_range=weight_range_field(data),
        seed=seed,
    )
    save_graph(g)
    logger.info("generated graph with %d nodes, %d edges", g.node_count(), g.edge_count())
    return jsonify(g.to_dict())


@api.route("/api/graph/import", methods=["POST"])
def api_graph_import():
    data = json_body()
    text = data.get("text", "")
    if not isinstance(text, str):
        raise ValueError("Field 'text' must be a string")
    g = Graph.from_adjacency_list(text)
    if g.node_count() > current_app.config["MAX_GRAPH_NODES"]:
        raise ValueError(f"Graph has more than {current_app.config['MAX_GRAPH_NODES']} nodes")
    save_graph(g)
    return jsonify(g.to_dict())


# ---------------------------------------------------------------------------
# API: Run
# ---------------------------------------------------------------------------
@api.route("/api/run", methods=["POST"])
def api_run():
    data = json_body()
    start = int_field(data, "start")
    end   = int_field(data, "end")

    stepper = Stepper(get_graph(), comment_fade_steps=current_app.config["COMMENT_FADE_STEPS"])
    stepper.start(start, end)

    session["start"] = start
    session["end"]   = end
    save_run(stepper)
    return jsonify(state_payload(stepper))


@api.route("/api/run/complete", methods=["POST"])
def api_run_complete():
    if session.get("start") is None:
        raise InvalidState("No run in progress. POST /api/run first.")

    rec = Recorder()
    rec.start(get_graph(), session["start"], session["end"])
    metrics = rec.run_to_completion()
    save_run(rec.stepper)

    return jsonify({
        "metrics": asdict(metrics),
        "state":   state_payload(rec.stepper),
    })


@api.route("/api/run/export", methods=["GET"])
def api_run_export():
    if session.get("start") is None:
        raise InvalidState("No run in progress. POST /api/run first.")
    rec = Recorder()
    rec.start(get_graph(), session["start"], session["end"])
    rec.run_to_completion()
    return jsonify(rec.export())


# ---------------------------------------------------------------------------
# API: Step Navigation
# ---------------------------------------------------------------------------
@api.route("/api/step/next", methods=["POST"])
def api_step_next():
    stepper = replay()
    if not stepper.next_step():
        return jsonify({"error": "Already at last step"}), 400
    save_run(stepper)
    return jsonify(state_payload(stepper))


@api.route("/api/step/prev", methods=["POST"])
def api_step_prev():
    stepper = replay()
    if not stepper.prev_step():
        return jsonify({"error": "Already at first step"}), 400
    save_run(stepper)
    return jsonify(state_payload(stepper))


@api.route("/api/step/goto", methods=["POST"])
def api_step_goto():
    data = json_body()
    idx = int_field(data, "index")
    stepper = replay()
    if not stepper.goto_step(idx):
        return jsonify({"error": "Invalid step index"}), 400
    save_run(stepper)
    return jsonify(state_payload(stepper))


# ---------------------------------------------------------------------------
# API: Read-only state
# ---------------------------------------------------------------------------
@api.route("/api/state", methods=["GET"])
def api_state():
    return jsonify(state_payload(replay()))


@api.route("/api/path", methods=["GET"])
def api_path():
    stepper = replay()
    engine  = stepper.engine
    path    = reconstruct(engine, engine.end)
    edges   = path_edges(engine, path)
    return jsonify({
        "path":     path,
        "edges":    [e.id for e in edges],
        "cost":     sum(e.cost for e in edges),
        "distance": engine.distance_of(engine.end),
        "final":    engine.found,
    })


@api.route("/api/pseudocode", methods=["GET"])
def api_pseudocode():
    return jsonify({"lines": PSEUDOCODE})


# ---------------------------------------------------------------------------
# Error handling — every error leaves as {"error": message}
# ---------------------------------------------------------------------------
def _error(exc: Exception, status: int):
    return jsonify({"error": str(exc), "kind": type(exc).__name__}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(InvalidReference)
    def handle_invalid_reference(exc):
        return _error(exc, 404)

    @app.errorhandler(InvalidState)
    def handle_invalid_state(exc):
        return _error(exc, 409)

    @app.errorhandler(AlgorithmExhausted)
    def handle_exhausted(exc):
        logger.error("run aborted: %s", exc)
        return _error(exc, 500)

    @app.errorhandler(ValueError)
    def handle_bad_input(exc):
        return _error(exc, 400)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG)
    app.config["SECRET_KEY"] = secrets.token_hex(32)
    app.config.from_prefixed_env("DIJKSTRA")
    if overrides:
        app.config.update(overrides)

    app.register_blueprint(api)
    register_error_handlers(app)
    return app


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app = create_app()
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("=" * 60)
    print("  Dijkstra Stepper API")
    print("  Starting Flask server...")
    print("  Open http://localhost:5000")
    print("=" * 60)
    app.run(debug=True, host="0.0.0.0", port=5000)

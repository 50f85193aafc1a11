import logging
import os

from flask import Flask, current_app, jsonify, render_template, request
from flask_socketio import SocketIO, emit

from acstep.automaton import Automaton, InvalidPatternError, build_automaton
from acstep.patterns import load_patterns_file
from acstep.stepper import SCAN_COMPLETE, StepController
from acstep.visualization.dfa_exporter import export_automaton_to_dot, export_automaton_to_json
from acstep.visualization.graphviz_renderer import error_svg, render_automaton_svg

logger = logging.getLogger(__name__)

socketio = SocketIO(cors_allowed_origins="*")

# Used when create_app() gets no patterns
DEFAULT_PATTERNS_PATH = os.path.join("data", "sample_patterns.txt")
FALLBACK_PATTERNS = ["he", "she", "his", "hers"]

# Longest text a client may load for animation
MAX_TEXT_LENGTH = 1000


def _load_default_patterns():
    if os.path.exists(DEFAULT_PATTERNS_PATH):
        return load_patterns_file(DEFAULT_PATTERNS_PATH)
    return list(FALLBACK_PATTERNS)


def create_app(patterns=None, async_mode=None):
    """
    Build the dashboard app around one shared automaton.
    Every Socket.IO client gets its own StepController on that automaton.
    """
    app = Flask(__name__, static_folder="static", template_folder="templates")
    app.config['SECRET_KEY'] = os.environ.get("ACSTEP_SECRET_KEY", "acstep-dashboard-secret")
    app.config['AUTOMATON'] = build_automaton(patterns if patterns is not None else _load_default_patterns())
    app.config['MAX_TEXT_LENGTH'] = MAX_TEXT_LENGTH
    # sid -> StepController
    app.extensions['acstep_sessions'] = {}
    socketio.init_app(app, async_mode=async_mode)

    @app.route("/")
    def index():
        return render_template("stepper.html")

    @app.route("/api/automaton")
    def get_automaton():
        return jsonify(export_automaton_to_json(app.config['AUTOMATON']))

    @app.route("/api/automaton/dot")
    def get_automaton_dot():
        """API Endpoint: Returns the raw DOT source."""
        ac = app.config['AUTOMATON']
        dot_data = export_automaton_to_dot(ac, highlight=_state_arg(ac))
        return dot_data, 200, {'Content-Type': 'text/plain'}

    @app.route("/api/automaton/svg")
    def get_automaton_svg():
        """
        API Endpoint: Returns the SVG representation of the app-level automaton,
        optionally highlighting ?state=<id>. Sessions that loaded their own
        patterns get their frames through the "frame" socket event instead.
        """
        ac = app.config['AUTOMATON']
        headers = {'Content-Type': 'image/svg+xml'}
        try:
            highlight = _state_arg(ac)
        except ValueError as e:
            return error_svg(str(e)), 400, headers
        return render_automaton_svg(ac, highlight=highlight), 200, headers

    @app.errorhandler(ValueError)
    def bad_request(e):
        return jsonify({"error": str(e)}), 400

    @app.route("/health")
    def health():
        ac = app.config['AUTOMATON']
        return {"status": "ok", "patterns": len(ac.patterns), "states": len(ac)}

    return app


def _state_arg(ac: Automaton):
    raw = request.args.get("state")
    if raw is None:
        return None
    try:
        state_id = int(raw)
    except ValueError:
        raise ValueError(f"state must be an integer, got {raw!r}")
    if not 0 <= state_id < len(ac):
        raise ValueError(f"state {state_id} does not exist")
    return state_id


def _sessions():
    return current_app.extensions['acstep_sessions']


@socketio.on("load")
def on_load(data=None):
    data = data or {}
    if not isinstance(data, dict):
        emit("error", {"error": "load expects an object {text, patterns?}"})
        return
    text = data.get("text", "")
    if not isinstance(text, str) or len(text) > current_app.config['MAX_TEXT_LENGTH']:
        emit("error", {"error": "text must be a string of at most "
                                f"{current_app.config['MAX_TEXT_LENGTH']} characters"})
        return

    ac = current_app.config['AUTOMATON']
    if data.get("patterns") is not None:
        if not isinstance(data["patterns"], (list, tuple)):
            emit("error", {"error": "patterns must be a list of strings"})
            return
        try:
            ac = build_automaton(data["patterns"])
        except InvalidPatternError as e:
            emit("error", {"error": str(e), "index": e.index})
            return

    controller = StepController(ac, text)
    _sessions()[request.sid] = controller
    logger.info("Session %s loaded %d symbols against %r", request.sid, len(text), ac)
    emit("snapshot", dict(controller.snapshot(), automaton=export_automaton_to_json(ac)))


@socketio.on("step")
def on_step(data=None):
    controller = _sessions().get(request.sid)
    if controller is None:
        emit("error", {"error": "nothing loaded"})
        return
    step = controller.advance_one_symbol()
    if step is SCAN_COMPLETE:
        emit("complete", controller.snapshot())
        return
    emit("step", dict(step.to_dict(), status=controller.status.value))


@socketio.on("reset")
def on_reset(data=None):
    controller = _sessions().get(request.sid)
    if controller is None:
        emit("error", {"error": "nothing loaded"})
        return
    controller.reset()
    emit("snapshot", controller.snapshot())


@socketio.on("frame")
def on_frame(data=None):
    """Render the session's own automaton at its current state."""
    controller = _sessions().get(request.sid)
    if controller is None:
        emit("error", {"error": "nothing loaded"})
        return
    history = controller.history
    fail_path = history[-1].fail_path if history else ()
    svg = render_automaton_svg(controller.automaton, highlight=controller.state, fail_path=fail_path)
    emit("frame", {"state": controller.state, "position": controller.position, "svg": svg})


@socketio.on("disconnect")
def on_disconnect(*args):
    _sessions().pop(request.sid, None)

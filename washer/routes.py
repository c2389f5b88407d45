from flask import Blueprint, jsonify, request

from system import services
from system.log_utils import debug, info
from washer.composition import door_closed
from washer.errors import InvalidParameter
from washer.patterns import describe, generate_phases, program_phases
from washer.programs import builtin_phases, find_program, program_label, spin_cycle
from washer.types import PatternDescriptor, Program

washer_bp = Blueprint("washer", __name__)


def _unavailable():
    return jsonify({
        "error": "Washer engine not initialized",
        "code": "SERVICE_UNAVAILABLE"
    }), 503


def _json_body():
    """Request JSON as a dict; None when a body is present but is not an object."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    return body if isinstance(body, dict) else None


def _not_an_object():
    return jsonify({"error": "request body must be a JSON object"}), 400


def _start(phases, label, **extra):
    if not door_closed():
        return jsonify({"error": "Door is open"}), 409

    ok, msg = services.engine_service.start_phases(phases, label)
    if not ok:
        return jsonify({"error": msg}), 409

    info(f"[WEB] {msg}: {describe(phases)}")
    return jsonify({"ok": True, "message": msg, "phases": [p.to_dict() for p in phases], **extra})


# washer state: IDLE, RUNNING, FINISHED, STOPPED, FAILED
@washer_bp.route("/status", methods=["GET"])
def washer_status():
    engine = services.engine_service
    if engine is None:
        return _unavailable()

    snapshot = engine.progress.to_dict()
    snapshot["running"] = engine.is_running()
    snapshot["abort_raised"] = engine.abort_signal.is_raised()
    snapshot["last_result"] = engine.last_result.to_dict() if engine.last_result else None
    debug(f"[WASHER STATUS] {snapshot['state']} phase={snapshot['phase_index']}")
    return jsonify(snapshot)


@washer_bp.route("/programs", methods=["GET"])
def list_programs():
    if services.program_selector is None:
        return _unavailable()
    return jsonify(services.program_selector.to_dict())


@washer_bp.route("/programs/select", methods=["POST"])
def select_program():
    selector = services.program_selector
    if selector is None:
        return _unavailable()
    if services.engine_service.is_running():
        return jsonify({"error": "Washer already running"}), 409

    body = _json_body()
    if body is None:
        return _not_an_object()
    try:
        if "program" in body:
            selector.select(body["program"])
        else:
            selector.cycle()
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(selector.to_dict())


@washer_bp.route("/programs/start", methods=["POST"])
def start_program():
    """
    Body (all optional):
      {}                                  -> selected built-in program
      {"program": "spin"}                 -> named built-in program
      {"speed": 200, "spin_time": 5,
       "direction": "ccw", "brake": "brake"} -> custom one-phase program
    """
    selector = services.program_selector
    if services.engine_service is None or selector is None:
        return _unavailable()

    body = _json_body()
    if body is None:
        return _not_an_object()
    extra = {}
    try:
        if "speed" in body or "spin_time" in body:
            program = Program.from_dict(body)
            phases, label = program_phases(program), program.name
            extra["program"] = program.to_dict()
        elif "program" in body:
            chosen = find_program(body["program"])
            phases, label = builtin_phases(chosen, selector.default_speed), program_label(chosen)
        else:
            phases, label = selector.phases(), selector.label()
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return _start(phases, label, **extra)


@washer_bp.route("/patterns/start", methods=["POST"])
def start_pattern():
    if services.engine_service is None:
        return _unavailable()

    body = _json_body()
    if body is None:
        return _not_an_object()
    try:
        descriptor = PatternDescriptor.from_dict(body)
        phases = generate_phases(descriptor)
    except InvalidParameter as e:
        return jsonify({"error": str(e)}), 400

    return _start(phases, f"{descriptor.mode.value.capitalize()} pattern", pattern=descriptor.to_dict())


@washer_bp.route("/spin", methods=["POST"])
def start_spin():
    if services.engine_service is None:
        return _unavailable()

    body = _json_body()
    if body is None:
        return _not_an_object()
    try:
        phases = spin_cycle(body.get("speed", services.program_selector.default_speed))
    except InvalidParameter as e:
        return jsonify({"error": str(e)}), 400

    return _start(phases, "Spin")


@washer_bp.route("/abort", methods=["POST"])
def abort_phase():
    """Same as pressing the stop button: ends the current phase only."""
    engine = services.engine_service
    if engine is None:
        return _unavailable()

    ok, msg = engine.abort()
    return jsonify({"ok": ok, "message": msg})


@washer_bp.route("/stop", methods=["POST"])
def stop_run():
    engine = services.engine_service
    if engine is None:
        return _unavailable()

    ok, msg = engine.stop()
    return jsonify({"ok": ok, "message": msg})

"""Routes for the gateway blueprint."""

from flask import g, jsonify, request

from chill.auth import identify_caller
from chill.errors import ValidationError
from chill.extensions import backend
from chill.hangout.services import HangoutService

from . import bp


@bp.route("/", defaults={"path": ""}, methods=["GET", "PUT", "PATCH", "DELETE"])
@bp.route("/<path:path>", methods=["GET", "PUT", "PATCH", "DELETE"])
@identify_caller
def node(path):
    """Read or write the value at ``path`` as the calling user."""
    gateway = backend.gateway
    if request.method == "GET":
        return jsonify(gateway.read(g.uid, path))

    if request.method == "DELETE":
        gateway.delete(g.uid, path)
        return jsonify(None)

    if not request.is_json:
        raise ValidationError("Request body must be JSON.")
    value = request.get_json()
    if request.method == "PUT":
        gateway.set(g.uid, path, value)
    else:
        gateway.update(g.uid, path, value)
    return jsonify(value)


@bp.route("/hangouts/<hangout_id>/close-poll", methods=["POST"])
@identify_caller(required=True)
def close_poll(hangout_id):
    """Settle a hangout's date poll on the most voted candidate."""
    winner = HangoutService.close_poll(backend.gateway, g.uid, hangout_id)
    return jsonify({"status": "success", "time": winner})

"""Routes for the webhooks blueprint."""

import secrets

from flask import current_app, jsonify, request

from chill.errors import PermissionDenied, ValidationError
from chill.extensions import backend
from chill.store.changes import Change
from chill.store.paths import join_path, split_path

from . import bp


@bp.route("", methods=["POST"])
def receive_change():
    """Run the handlers for one change and fail loudly so the sender retries.

    The body is ``{"path": ..., "before": ..., "after": ...}``.
    """
    secret = current_app.config.get("EVENTS_SHARED_SECRET")
    if not secret:
        if not current_app.testing:
            current_app.logger.error("EVENTS_SHARED_SECRET is not set; refusing change")
            raise PermissionDenied("events secret is not configured")
    elif not secrets.compare_digest(
        request.headers.get("X-Chill-Events-Secret", ""), secret
    ):
        raise PermissionDenied("bad events secret")

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not payload.get("path"):
        raise ValidationError("A change needs a path.")

    change = Change(
        path=join_path(split_path(payload["path"])),
        before=payload.get("before"),
        after=payload.get("after"),
    )
    if change.kind is None:
        return jsonify({"status": "ignored", "handlers": {}})

    results = backend.dispatcher.deliver(change)
    failed = [name for name, ok in results.items() if not ok]
    if failed:
        current_app.logger.error(f"Handlers failed for {change.path}: {failed}")
        return jsonify({"status": "error", "handlers": results}), 500
    return jsonify({"status": "success", "handlers": results})

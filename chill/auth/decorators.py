"""Decorators for resolving the calling principal."""

from functools import wraps

from firebase_admin import auth
from flask import current_app, g, jsonify, request


def identify_caller(f=None, required=False):
    """Set ``g.uid`` from the request's bearer token.

    Requests without a token run as an anonymous caller (``g.uid`` is None)
    and are left for the access rules to reject. An invalid token is a 401.

    Usage:
    @identify_caller
    def view():
        ...

    @identify_caller(required=True)
    def signed_in_view():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            g.uid = None
            header = request.headers.get("Authorization", "")
            if header.startswith("Bearer "):
                try:
                    decoded_token = auth.verify_id_token(header[len("Bearer ") :])
                    g.uid = decoded_token["uid"]
                except Exception as e:
                    current_app.logger.warning(f"Rejected ID token: {e}")
                    return jsonify({"status": "error", "message": "Invalid token."}), 401
            if required and g.uid is None:
                return (
                    jsonify({"status": "error", "message": "Authentication required."}),
                    401,
                )
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator

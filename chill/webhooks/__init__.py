"""The webhooks blueprint: change events pushed by an external trigger runtime."""

from flask import Blueprint

bp = Blueprint("webhooks", __name__, url_prefix="/events")

from . import routes  # noqa: E402

__all__ = ["routes"]

"""The gateway blueprint: path-addressed store access for clients."""

from flask import Blueprint

bp = Blueprint("gateway", __name__, url_prefix="/db")

from . import routes  # noqa: E402

__all__ = ["routes"]

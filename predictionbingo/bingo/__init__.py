"""The bingo blueprint."""

from flask import Blueprint

bp = Blueprint("bingo", __name__, url_prefix="/group")

from . import routes  # noqa: E402

__all__ = ["routes"]

from flask import Blueprint

bingo_bp = Blueprint("bingo", __name__, url_prefix="/api")

from . import routes  # noqa: E402,F401

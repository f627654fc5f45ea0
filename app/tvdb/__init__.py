from flask import Blueprint

tvdb_bp = Blueprint("tvdb", __name__, url_prefix="/api")

from . import routes  # noqa: E402,F401

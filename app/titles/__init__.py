from flask import Blueprint

titles_bp = Blueprint("titles", __name__, url_prefix="/api")

from . import routes  # noqa: E402,F401

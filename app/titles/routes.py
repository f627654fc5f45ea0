# app/titles/routes.py
from flask import jsonify, request

from . import titles_bp
from .search import search_titles


@titles_bp.get("/search-sqlite")
def search_sqlite():
    q = (request.args.get("q") or "").strip()
    return jsonify({"items": search_titles(q)})

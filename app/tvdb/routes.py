# app/tvdb/routes.py
from __future__ import annotations

from flask import current_app, jsonify, request

from . import tvdb_bp
from .client import TvdbError
from .service import get_client, get_movie_details, search_movies


def _tvdb_error(code: str, exc: TvdbError):
    """Map an upstream failure to `{error, message, tvdb, hint}` with its status."""
    current_app.logger.warning("[tvdb] %s: %s (status %s)", code, exc, exc.status)
    resp = jsonify({
        "error": code,
        "message": str(exc),
        "tvdb": exc.payload,
        "hint": exc.hint,
    })
    resp.status_code = exc.status if 400 <= (exc.status or 0) < 600 else 502
    return resp


# -----------------------------------------------------------------------------
# Game-facing endpoints
# -----------------------------------------------------------------------------
@tvdb_bp.get("/search")
def search():
    q = (request.args.get("q") or "").strip()
    try:
        return jsonify({"items": search_movies(q)})
    except TvdbError as exc:
        return _tvdb_error("tvdb_search_failed", exc)


@tvdb_bp.get("/movie/<movie_id>")
def movie(movie_id: str):
    try:
        return jsonify(get_movie_details(movie_id))
    except TvdbError as exc:
        return _tvdb_error("tvdb_movie_failed", exc)


# -----------------------------------------------------------------------------
# Raw proxies (debugging)
# -----------------------------------------------------------------------------
@tvdb_bp.get("/tvdb/search")
def raw_search():
    params = request.args.to_dict()
    params.setdefault("type", "movie")
    try:
        return jsonify(get_client().get("/search", params))
    except TvdbError as exc:
        return _tvdb_error("tvdb_search_failed", exc)


@tvdb_bp.get("/tvdb/movies/<movie_id>/extended")
def raw_extended(movie_id: str):
    try:
        return jsonify(get_client().get(f"/movies/{movie_id}/extended", request.args.to_dict()))
    except TvdbError as exc:
        return _tvdb_error("tvdb_movie_failed", exc)


@tvdb_bp.get("/tvdb/movies/<movie_id>/people")
def raw_people(movie_id: str):
    try:
        page = int(request.args.get("page", 0))
    except ValueError:
        page = 0
    try:
        return jsonify(get_client().movie_people(movie_id, page))
    except TvdbError as exc:
        return _tvdb_error("tvdb_movie_failed", exc)

# app/tvdb/service.py
# Cache-or-fetch flows behind /api/search and /api/movie/<id>.
from __future__ import annotations

import json
from typing import Any, Dict, List

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.tvdb.client import TvdbClient, TvdbError
from app.tvdb.models import TvdbMovieCache, TvdbSearchCache, now_ms
from app.tvdb.normalize import (
    client_payload,
    directors_from_search,
    find_search_hit,
    genre_names,
    has_credit,
    is_complete,
    merge_people,
    poster_url,
    prefer_english_name,
)

MIN_QUERY_LEN = 2
SEARCH_LIMIT = 20


def get_client() -> TvdbClient:
    client = current_app.extensions.get("tvdb_client")
    if client is None:
        client = TvdbClient.from_config(current_app.config)
        current_app.extensions["tvdb_client"] = client
    return client


def _caching() -> bool:
    return not current_app.config.get("CACHE_READ_ONLY")


def _store(model, key_field: str, key: str, payload: Any) -> None:
    if not _caching():
        return
    try:
        row = db.session.get(model, key) or model(**{key_field: key})
        row.payload_json = json.dumps(payload)
        row.ts = now_ms()
        db.session.add(row)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.warning("[tvdb] cache write skipped for %s=%s: %s", key_field, key, exc)


def _items(data: Any) -> List[Dict[str, Any]]:
    rows = (data or {}).get("data") if isinstance(data, dict) else None
    return rows if isinstance(rows, list) else []


def clear_search_cache() -> int:
    deleted = TvdbSearchCache.query.delete()
    db.session.commit()
    return deleted


# -----------------------------------------------------------------------------
# Search
# -----------------------------------------------------------------------------
def search_movies(q: str) -> List[Dict[str, Any]]:
    q = (q or "").strip()
    if len(q) < MIN_QUERY_LEN:
        return []

    if _caching():
        cached = db.session.get(TvdbSearchCache, q)
        data = cached.to_payload() if cached else None
        if data is not None:
            return _items(data)

    data = get_client().search(q, type="movie", limit=SEARCH_LIMIT)
    for item in _items(data):
        prefer_english_name(item)
    # the raw TVDB body is cached, not the trimmed item list
    _store(TvdbSearchCache, "q", q, data)
    return _items(data)


# -----------------------------------------------------------------------------
# Details
# -----------------------------------------------------------------------------
def _search_hit(client: TvdbClient, name: str, movie_id: str, first_fallback: bool = False):
    if not name:
        return None
    sr = client.search(name, type="movie", limit=10)
    return find_search_hit(_items(sr), movie_id, first_fallback=first_fallback)


def _enrich_genres(client: TvdbClient, payload: Dict[str, Any], movie_id: str) -> List[str]:
    names = genre_names(payload.get("genres"))
    if names:
        return names
    name = payload.get("name") or (payload.get("translations") or {}).get("eng") or ""
    try:
        hit = _search_hit(client, name, movie_id, first_fallback=True)
    except TvdbError:
        return []
    return [str(g) for g in ((hit or {}).get("genres") or []) if g]


def fetch_movie(movie_id: str) -> Dict[str, Any]:
    """Pull a movie from TVDB and enrich people/genres/poster the way the board needs."""
    client = get_client()
    data = client.movie_extended(movie_id, meta="people")
    payload = data.get("data") if isinstance(data, dict) and isinstance(data.get("data"), dict) else data
    prefer_english_name(payload)

    people = merge_people(payload.get("people") if isinstance(payload.get("people"), list) else [], [])
    if isinstance(payload.get("characters"), list) and payload["characters"]:
        people = merge_people(people, payload["characters"])
    try:
        all_people = client.fetch_all_people(movie_id)
    except TvdbError as exc:
        current_app.logger.info("[tvdb] people pages unavailable for %s: %s", movie_id, exc)
        all_people = []
    if all_people:
        people = merge_people(people, all_people)

    if not has_credit(people, "director"):
        try:
            hit = _search_hit(client, payload.get("name") or "", movie_id)
            people.extend(directors_from_search(hit))
        except TvdbError:
            pass
    payload["people"] = people
    payload["genres"] = _enrich_genres(client, payload, movie_id)
    payload["posterUrl"] = poster_url(payload)
    return payload


def get_movie_details(movie_id: str) -> Dict[str, Any]:
    movie_id = str(movie_id).strip()
    if _caching():
        cached = db.session.get(TvdbMovieCache, movie_id)
        payload = cached.to_payload() if cached else None
        if isinstance(payload, dict) and is_complete(payload):
            return client_payload(payload)

    payload = fetch_movie(movie_id)
    _store(TvdbMovieCache, "id", movie_id, payload)
    return client_payload(payload)

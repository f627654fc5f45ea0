# app/titles/search.py
# Autocomplete over the IMDb-derived title index attached as the "titles" bind.
from __future__ import annotations

import re
from typing import Any, Dict, List

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.extensions import db

RESULT_LIMIT = 20

_FTS_SQL = text(
    """
    SELECT b.tconst, b.primaryTitle, b.startYear
    FROM title_fts f
    JOIN title_basics b ON b.tconst = f.tconst
    WHERE f.title MATCH :q
    LIMIT :limit
    """
)

_LIKE_SQL = text(
    """
    SELECT tconst, primaryTitle, startYear
    FROM title_basics
    WHERE primaryTitle LIKE :pattern
    ORDER BY numVotes IS NULL, numVotes DESC
    LIMIT :limit
    """
)


def _rows(result) -> List[Dict[str, Any]]:
    return [dict(row._mapping) for row in result]


def search_titles(q: str, limit: int = RESULT_LIMIT) -> List[Dict[str, Any]]:
    """Full-text match first; a LIKE scan ranked by votes when FTS is missing or rejects the query."""
    q = (q or "").strip()
    if not q:
        return []

    engine = db.engines["titles"]
    try:
        with engine.connect() as conn:
            return _rows(conn.execute(_FTS_SQL, {"q": re.sub(r"\s+", " ", q), "limit": limit}))
    except OperationalError as exc:
        current_app.logger.info("[titles] fts lookup failed, using LIKE: %s", exc.orig)

    with engine.connect() as conn:
        return _rows(conn.execute(_LIKE_SQL, {"pattern": f"%{q}%", "limit": limit}))

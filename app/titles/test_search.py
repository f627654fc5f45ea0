import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.extensions import db
from app.titles.search import search_titles

TITLES = [
    ("tt0113277", "Heat", 1995, 700000),
    ("tt0120689", "The Green Mile", 1999, 1400000),
    ("tt0101921", "Heat Wave", 1990, None),
    ("tt0114369", "Se7en", 1995, 1800000),
    ("tt0070001", "Heathers", 1988, 120000),
]


@pytest.fixture
def titles_db(app):
    engine = db.engines["titles"]
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE title_basics (tconst TEXT PRIMARY KEY, primaryTitle TEXT, startYear INTEGER, numVotes INTEGER)"
        ))
        for row in TITLES:
            conn.execute(
                text("INSERT INTO title_basics VALUES (:t, :title, :year, :votes)"),
                {"t": row[0], "title": row[1], "year": row[2], "votes": row[3]},
            )
    yield engine
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE IF EXISTS title_fts"))
        conn.execute(text("DROP TABLE title_basics"))


def test_like_fallback_ranks_by_votes(titles_db):
    rows = search_titles("heat")
    assert [r["tconst"] for r in rows] == ["tt0113277", "tt0070001", "tt0101921"]
    assert set(rows[0]) == {"tconst", "primaryTitle", "startYear"}


def test_full_text_match_when_index_exists(titles_db):
    try:
        with titles_db.begin() as conn:
            conn.execute(text("CREATE VIRTUAL TABLE title_fts USING fts5(tconst UNINDEXED, title)"))
            conn.execute(text("INSERT INTO title_fts SELECT tconst, primaryTitle FROM title_basics"))
    except OperationalError:
        pytest.skip("sqlite built without FTS5")
    rows = search_titles("green   mile")
    assert [r["primaryTitle"] for r in rows] == ["The Green Mile"]


def test_blank_query_returns_nothing(client, titles_db):
    assert search_titles("   ") == []
    assert client.get("/api/search-sqlite?q=").get_json() == {"items": []}


def test_route_returns_items(client, titles_db):
    body = client.get("/api/search-sqlite?q=se7en").get_json()
    assert body["items"] == [{"tconst": "tt0114369", "primaryTitle": "Se7en", "startYear": 1995}]

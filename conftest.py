import pytest

from app.app import create_app
from app.extensions import db
from app.tvdb.client import TvdbError


class FakeTvdbClient:
    """Stands in for TvdbClient; serves canned bodies and records every call."""

    def __init__(self, movies=None, search_results=None, people=None):
        self.movies = movies or {}
        self.search_results = search_results or {}
        self.people = people or {}
        self.calls = []

    def login(self):
        self.calls.append(("login",))
        return "fake-token"

    def search(self, query, type="movie", limit=20):
        self.calls.append(("search", query))
        return {"status": "success", "data": list(self.search_results.get(query, []))}

    def movie_extended(self, movie_id, meta=None):
        self.calls.append(("extended", str(movie_id)))
        if str(movie_id) not in self.movies:
            raise TvdbError("TVDB GET /movies/extended failed", status=404, payload={"status": "failure"})
        return {"status": "success", "data": dict(self.movies[str(movie_id)])}

    def fetch_all_people(self, movie_id):
        self.calls.append(("people", str(movie_id)))
        return list(self.people.get(str(movie_id), []))

    def movie_people(self, movie_id, page=0):
        self.calls.append(("people_page", str(movie_id), page))
        return {"data": list(self.people.get(str(movie_id), []))}

    def get(self, path, params=None):
        self.calls.append(("get", path))
        return {"data": [], "path": path}


def heat_payload():
    return {
        "id": 101,
        "name": "Heat",
        "year": "1995",
        "runtime": 170,
        "genres": [{"name": "Crime"}, {"name": "Drama"}],
        "originalLanguage": "eng",
        "budget": "$60,000,000",
        "boxOffice": "$187,436,818",
        "awards": [],
        "people": [
            {"personName": "Michael Mann", "peopleType": "Director"},
            {"personName": "Michael Mann", "peopleType": "Writer"},
            {"personName": "Al Pacino", "peopleType": "Actor", "name": "Vincent Hanna"},
            {"personName": "Robert De Niro", "peopleType": "Actor", "name": "Neil McCauley"},
        ],
    }


@pytest.fixture
def fake_tvdb():
    return FakeTvdbClient(movies={"101": heat_payload()})


@pytest.fixture
def app(fake_tvdb):
    app = create_app("testing")
    app.extensions["tvdb_client"] = fake_tvdb
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all(bind_key=None)


@pytest.fixture
def client(app):
    return app.test_client()

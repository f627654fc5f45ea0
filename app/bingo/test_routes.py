from app.bingo.game import new_game, state_to_dict
from app.bingo.models import BingoSession, DailyPuzzle
from app.bingo.prompts import PROMPTS_BY_ID
from app.bingo.sampler import generate_board
from app.extensions import db

TITLE_SHAPE_IDS = ["has-colon", "title-long-5", "has-color", "title-possessive", "starts-the", "has-number"]


def _session_cookie(resp):
    return next((h for h in resp.headers.getlist("Set-Cookie") if h.startswith("afgf_session_id=")), None)


def test_daily_prompts_for_a_fixed_date(client):
    resp = client.get("/api/daily-prompts?date=2024-05-01")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["seed"] == "2024-05-01"
    assert body["date"] == "2024-05-01"
    assert [p["id"] for p in body["prompts"]] == [p.id for p in generate_board("2024-05-01")]
    assert set(body["prompts"][0]) == {"id", "label"}


def test_daily_prompts_is_stable_across_calls(client):
    first = client.get("/api/daily-prompts").get_json()
    second = client.get("/api/daily-prompts").get_json()
    assert first == second


def test_daily_prompts_rejects_bad_dates(client):
    resp = client.get("/api/daily-prompts?date=05/01/2024")
    assert resp.status_code == 400
    assert resp.get_json() == {"ok": False, "error": "bad_date", "message": "date must be YYYY-MM-DD"}


def test_game_starts_and_resumes(client):
    resp = client.get("/api/game")
    assert resp.status_code == 200
    assert _session_cookie(resp)
    state = resp.get_json()["state"]
    assert len(state["cells"]) == 16
    assert state["guessesLeft"] == 10
    assert state["rerollCount"] == 0

    again = client.get("/api/game").get_json()["state"]
    assert again == state
    assert BingoSession.query.count() == 1


def test_guess_spends_a_guess_and_logs_the_movie(client, fake_tvdb):
    client.get("/api/game")
    resp = client.post("/api/game/guess", json={"movie_id": "101", "title": "Heat"})
    assert resp.status_code == 200
    body = resp.get_json()
    state = body["state"]
    assert state["guessesLeft"] == 9
    assert state["logs"][0]["title"] == "Heat"
    assert state["logs"][0]["directors"] == ["Michael Mann"]
    assert state["score"] == len(body["filled"])
    assert state["rerollCount"] == len(body["replaced"])
    assert len({c["prompt"]["id"] for c in state["cells"]}) == 16
    assert ("extended", "101") in fake_tvdb.calls


def test_same_movie_twice_is_refused(client):
    client.get("/api/game")
    client.post("/api/game/guess", json={"movie_id": "101", "title": "Heat"})
    resp = client.post("/api/game/guess", json={"movie_id": "101", "title": "Heat"})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "already_guessed"
    assert client.get("/api/game").get_json()["state"]["guessesLeft"] == 9


def test_guess_needs_a_session_and_a_movie(client):
    resp = client.post("/api/game/guess", json={"movie_id": "101"})
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "no_session"

    client.get("/api/game")
    assert client.post("/api/game/guess", json={}).status_code == 400
    assert client.post("/api/game/guess", data="nope").status_code == 400


def test_unknown_movie_maps_to_lookup_failure(client):
    client.get("/api/game")
    resp = client.post("/api/game/guess", json={"movie_id": "999"})
    assert resp.status_code == 502
    assert resp.get_json()["error"] == "movie_lookup_failed"
    assert client.get("/api/game").get_json()["state"]["guessesLeft"] == 10


def test_reset_discards_the_session(client):
    first = client.get("/api/game")
    client.post("/api/game/guess", json={"movie_id": "101", "title": "Heat"})
    resp = client.post("/api/game/reset")
    assert resp.get_json() == {"ok": True}
    assert BingoSession.query.count() == 0

    fresh = client.get("/api/game")
    assert fresh.get_json()["state"]["guessesLeft"] == 10
    assert _session_cookie(fresh) != _session_cookie(first)


def test_health(client):
    assert client.get("/api/health").get_json() == {"ok": True}


def test_other_days_are_served_without_being_stored(client):
    resp = client.get("/api/daily-prompts?date=9999-12-31")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["seed"] == "9999-12-31"
    assert [p["id"] for p in body["prompts"]] == [p.id for p in generate_board("9999-12-31")]
    assert DailyPuzzle.query.count() == 0


def test_title_prompts_use_the_fetched_title(client):
    client.get("/api/game")
    sess = BingoSession.query.one()
    board = new_game(sess.seed, [PROMPTS_BY_ID[i] for i in TITLE_SHAPE_IDS])
    sess.state = state_to_dict(board)
    db.session.commit()

    resp = client.post("/api/game/guess", json={"movie_id": "101", "title": "The Red 7: Bob's Big Blue Boat"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["filled"] == []
    assert body["state"]["logs"][0]["title"] == "Heat"

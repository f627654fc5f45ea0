# app/bingo/routes.py
from __future__ import annotations

import threading
from datetime import date
from typing import Any, Dict, Optional

from flask import abort, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.tvdb.client import TvdbError
from app.tvdb.normalize import movie_record
from app.tvdb.service import get_movie_details

from . import bingo_bp
from .daily import (
    ensure_daily_puzzle,
    local_today,
    parse_day,
    preview_payload,
    puzzle_payload,
    puzzle_prompts,
)
from .game import GameError, apply_guess, clear_filled, new_game, state_from_dict, state_to_dict
from .models import BingoSession

_SESSION_COOKIE = "afgf_session_id"
_SESSION_MAX_AGE = 60 * 60 * 36
_guess_lock = threading.Lock()


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _abort_json(status: int, code: str, message: str):
    resp = jsonify({"ok": False, "error": code, "message": message})
    resp.status_code = status
    return resp


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(_abort_json(400, "bad_request", "JSON body required"))
    return data


def _set_session_cookie(resp, sid: str):
    resp.set_cookie(
        _SESSION_COOKIE,
        sid,
        httponly=True,
        secure=bool(current_app.config.get("SESSION_COOKIE_SECURE")),
        samesite="Lax",
        max_age=_SESSION_MAX_AGE,
    )


def _get_session_id() -> Optional[str]:
    return request.cookies.get(_SESSION_COOKIE)


def _todays_session(today: date, for_update: bool = False) -> Optional[BingoSession]:
    sid = _get_session_id()
    if not sid:
        return None
    q = BingoSession.query.filter_by(id=sid, puzzle_date=today)
    if for_update:
        q = q.with_for_update().populate_existing()
    return q.first()


def _new_session(today: date) -> BingoSession:
    puzzle = ensure_daily_puzzle(today)
    state = new_game(
        puzzle.seed,
        prompts=puzzle_prompts(puzzle),
        max_guesses=int(current_app.config.get("MAX_GUESSES") or 10),
    )
    sess = BingoSession(
        id=BingoSession.new_id(),
        puzzle_date=today,
        seed=puzzle.seed,
        state=state_to_dict(state),
    )
    db.session.add(sess)
    db.session.commit()
    return sess


def _session_response(sess: BingoSession, extra: Optional[Dict[str, Any]] = None, status: int = 200):
    body = {"ok": True, "date": sess.puzzle_date.isoformat(), "state": sess.state}
    body.update(extra or {})
    resp = jsonify(body)
    resp.status_code = status
    _set_session_cookie(resp, sess.id)
    return resp


# -----------------------------------------------------------------------------
# Daily puzzle
# -----------------------------------------------------------------------------
@bingo_bp.get("/daily-prompts")
def daily_prompts():
    try:
        day = parse_day(request.args.get("date"))
    except ValueError:
        return _abort_json(400, "bad_date", "date must be YYYY-MM-DD")
    if day is not None and day != local_today():
        return jsonify(preview_payload(day))
    try:
        puzzle = ensure_daily_puzzle(day)
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception(f"[bingo] daily puzzle unavailable: {exc}")
        return _abort_json(503, "puzzle_unavailable", "Could not load today's puzzle.")
    return jsonify(puzzle_payload(puzzle))


# -----------------------------------------------------------------------------
# Game session
# -----------------------------------------------------------------------------
@bingo_bp.get("/game")
def game_state():
    today = local_today()
    sess = _todays_session(today)
    if sess is None:
        sess = _new_session(today)
    return _session_response(sess)


@bingo_bp.post("/game/guess")
def game_guess():
    data = _json_body()
    movie_id = str(data.get("movie_id") or data.get("id") or "").strip()
    if not movie_id:
        return _abort_json(400, "movie_id_required", "movie_id is required")

    today = local_today()
    if _todays_session(today) is None:
        return _abort_json(404, "no_session", "Start today's game first.")

    # fetch outside the lock; upstream can be slow
    try:
        details = get_movie_details(movie_id)
    except TvdbError as exc:
        current_app.logger.warning("[bingo] details failed for %s: %s", movie_id, exc)
        return _abort_json(502, "movie_lookup_failed", str(exc))
    movie = movie_record(details)

    with _guess_lock:
        try:
            sess = _todays_session(today, for_update=True)
            if sess is None:
                return _abort_json(404, "no_session", "Start today's game first.")
            state = state_from_dict(sess.state)
            try:
                # title prompts read the fetched record, never the client-supplied title
                satisfied = apply_guess(state, movie_id, movie.name, movie)
            except GameError as exc:
                db.session.rollback()
                return _abort_json(exc.status, exc.code, str(exc))
            replaced = clear_filled(state)

            sess.state = state_to_dict(state)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception(f"[bingo] guess not saved: {exc}")
            return _abort_json(500, "save_failed", "Could not save your guess.")

    current_app.logger.info(
        "[bingo] session=%s movie=%s cleared=%d guesses_left=%d",
        sess.id, movie_id, len(satisfied), state.guesses_left,
    )
    return _session_response(sess, {
        "filled": [p.to_public() for p in satisfied],
        "replaced": [
            {"index": r.index, "oldId": r.old_id, "newId": r.new_id, "rerollIndex": r.reroll_index}
            for r in replaced
        ],
    })


@bingo_bp.post("/game/reset")
def game_reset():
    today = local_today()
    sess = _todays_session(today)
    if sess is not None:
        try:
            db.session.delete(sess)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception(f"[bingo] reset failed: {exc}")
            return _abort_json(500, "reset_failed", "Could not reset the game.")
    resp = jsonify({"ok": True})
    resp.delete_cookie(_SESSION_COOKIE)
    return resp

# app/bingo/daily.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

import pytz
from apscheduler.schedulers.background import BackgroundScheduler
from flask import current_app
from sqlalchemy.exc import IntegrityError

from app.bingo.models import DailyPuzzle
from app.bingo.prompts import prompt_for_id
from app.bingo.sampler import generate_board
from app.extensions import db


# -----------------------------------------------------------------------------
# Timezone: every player's "today" comes from one configured zone
# -----------------------------------------------------------------------------
def _tz():
    return pytz.timezone(current_app.config.get("TIME_ZONE") or "UTC")


def local_today() -> date:
    """Return today's date in the configured timezone."""
    return datetime.now(_tz()).date()


def seed_for(day: date) -> str:
    return day.isoformat()


def parse_day(raw: Optional[str]) -> Optional[date]:
    """YYYY-MM-DD or None; raises ValueError on anything else."""
    if not raw:
        return None
    return datetime.strptime(raw.strip(), "%Y-%m-%d").date()


def ensure_daily_puzzle(day: Optional[date] = None) -> DailyPuzzle:
    """Fetch the stored board for `day`, generating and saving it on first use."""
    day = day or local_today()
    existing = DailyPuzzle.query.filter_by(puzzle_date=day).first()
    if existing:
        return existing

    seed = seed_for(day)
    prompts = generate_board(seed)
    puzzle = DailyPuzzle(puzzle_date=day, seed=seed, prompt_ids=[p.id for p in prompts])
    db.session.add(puzzle)
    try:
        db.session.commit()
    except IntegrityError:
        # another worker stored the same day first
        db.session.rollback()
        return DailyPuzzle.query.filter_by(puzzle_date=day).first()
    current_app.logger.info("[bingo] generated daily puzzle %s", day.isoformat())
    return puzzle


def puzzle_payload(puzzle: DailyPuzzle) -> Dict[str, Any]:
    return {
        "seed": puzzle.seed,
        "date": puzzle.puzzle_date.isoformat(),
        "prompts": [prompt_for_id(pid).to_public() for pid in (puzzle.prompt_ids or [])],
    }


def preview_payload(day: date) -> Dict[str, Any]:
    """Board for a day other than today, generated on the fly and never stored."""
    seed = seed_for(day)
    return {
        "seed": seed,
        "date": day.isoformat(),
        "prompts": [p.to_public() for p in generate_board(seed)],
    }


def puzzle_prompts(puzzle: DailyPuzzle):
    return [prompt_for_id(pid) for pid in (puzzle.prompt_ids or [])]


def schedule_daily_generation(app):
    def job():
        with app.app_context():
            try:
                puzzle = ensure_daily_puzzle()
                app.logger.info("[bingo] daily puzzle ready for %s", puzzle.puzzle_date.isoformat())
            except Exception as exc:  # noqa: BLE001
                db.session.rollback()
                app.logger.exception(f"[bingo] daily generation failed: {exc}")

    scheduler = BackgroundScheduler(timezone=pytz.timezone(app.config.get("TIME_ZONE") or "UTC"))
    scheduler.add_job(job, "cron", hour=0, minute=5)
    scheduler.start()
    return scheduler

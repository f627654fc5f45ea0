from datetime import datetime
import uuid

from app.extensions import db


class DailyPuzzle(db.Model):
    __tablename__ = "daily_puzzles"
    __table_args__ = {"extend_existing": True}

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    puzzle_date = db.Column(db.Date, unique=True, index=True, nullable=False)
    seed = db.Column(db.String(32), nullable=False)
    prompt_ids = db.Column(db.JSON, nullable=False)  # display order
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<DailyPuzzle {self.puzzle_date}>"


class BingoSession(db.Model):
    __tablename__ = "bingo_sessions"
    __table_args__ = {"extend_existing": True}

    id = db.Column(db.String(64), primary_key=True)
    puzzle_date = db.Column(db.Date, index=True, nullable=False)
    seed = db.Column(db.String(32), nullable=False)
    state = db.Column(db.JSON, nullable=False)  # board, rerollCount, guesses, score, logs
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

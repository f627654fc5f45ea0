from __future__ import annotations

import json
import time

from app.extensions import db


def now_ms() -> int:
    return int(time.time() * 1000)


class TvdbSearchCache(db.Model):
    __tablename__ = "tvdb_search_cache"
    __table_args__ = {"extend_existing": True}

    q = db.Column(db.String(200), primary_key=True)
    payload_json = db.Column("json", db.Text, nullable=False)  # raw TVDB response body
    ts = db.Column(db.BigInteger, default=now_ms, nullable=False)

    def to_payload(self):
        try:
            return json.loads(self.payload_json or "{}")
        except ValueError:
            return None


class TvdbMovieCache(db.Model):
    __tablename__ = "tvdb_movie_cache"
    __table_args__ = {"extend_existing": True}

    id = db.Column(db.String(32), primary_key=True)
    payload_json = db.Column("json", db.Text, nullable=False)  # enriched details payload
    ts = db.Column(db.BigInteger, default=now_ms, nullable=False)

    def to_payload(self):
        try:
            return json.loads(self.payload_json or "{}")
        except ValueError:
            return None

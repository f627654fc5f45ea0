# app/tvdb/normalize.py
# TVDB payload shaping: the one place where upstream's loose shapes become
# the MovieRecord that prompt predicates read.

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional

from app.records import Award, MovieRecord, Person

POSTER_ARTWORK_TYPE = 14
CLIENT_FIELDS = (
    "id", "name", "year", "runtime", "genres", "people", "posterUrl", "releaseDate",
    "originalLanguage", "budget", "boxOffice", "awards",
)


def prefer_english_name(item: Dict[str, Any]) -> Dict[str, Any]:
    eng = (item.get("translations") or {}).get("eng") if isinstance(item.get("translations"), dict) else None
    if isinstance(eng, str) and eng:
        item["name"] = eng
    return item


def _people_type(p: Dict[str, Any]) -> str:
    for key in ("peopleType", "type", "job", "category"):
        v = p.get(key)
        if isinstance(v, str) and v:
            return v
    # TVDB numeric type 3 is an actor credit
    if p.get("type") == 3:
        return "Actor"
    return ""


def normalize_person(p: Dict[str, Any]) -> Dict[str, str]:
    person = p.get("person") if isinstance(p.get("person"), dict) else {}
    role = p.get("role") or p.get("characters") or p.get("name") or ""
    return {
        # personName is the performer; name can be the character
        "name": p.get("personName") or person.get("name") or p.get("name") or "",
        "peopleType": _people_type(p),
        "role": role if isinstance(role, str) else ", ".join(str(r) for r in role),
    }


def merge_people(base: Iterable[Dict[str, Any]], extra: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    out = [normalize_person(p) for p in base if isinstance(p, dict)]
    for p in extra:
        if not isinstance(p, dict):
            continue
        np = normalize_person(p)
        if not np["name"]:
            continue
        kind = np["peopleType"].lower()
        if not any(x["name"] == np["name"] and x["peopleType"].lower() == kind for x in out):
            out.append(np)
    return out


def has_credit(people: Iterable[Dict[str, Any]], needle: str) -> bool:
    pat = re.compile(needle, re.IGNORECASE)
    return any(
        isinstance(p, dict) and (pat.search(p.get("peopleType") or "") or pat.search(str(p.get("role") or "")))
        for p in people or []
    )


def is_complete(payload: Dict[str, Any]) -> bool:
    """A cached movie is reusable only when it already lists a director and an actor."""
    people = payload.get("people") if isinstance(payload.get("people"), list) else []
    return has_credit(people, "director") and any(
        isinstance(p, dict) and re.search("actor", p.get("peopleType") or "", re.IGNORECASE) for p in people
    )


def genre_names(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    out = []
    for g in raw:
        name = g if isinstance(g, str) else (g.get("name") if isinstance(g, dict) else None)
        if name:
            out.append(str(name))
    return out


def directors_from_search(hit: Optional[Dict[str, Any]]) -> List[Dict[str, str]]:
    raw = (hit or {}).get("director")
    if not isinstance(raw, str):
        return []
    return [{"name": d.strip(), "peopleType": "Director", "role": ""} for d in raw.split(",") if d.strip()]


def find_search_hit(items: List[Dict[str, Any]], movie_id: str, first_fallback: bool = False) -> Optional[Dict[str, Any]]:
    for it in items:
        if str(it.get("tvdb_id")) == str(movie_id):
            return it
    return items[0] if (first_fallback and items) else None


def poster_url(payload: Dict[str, Any]) -> Optional[str]:
    for key in ("image", "image_url"):
        if isinstance(payload.get(key), str) and payload[key]:
            return payload[key]
    for art in payload.get("artworks") or []:
        if isinstance(art, dict) and art.get("type") == POSTER_ARTWORK_TYPE and art.get("language") == "eng":
            return art.get("image")
    return None


def client_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {k: payload.get(k) for k in CLIENT_FIELDS}


def release_date(data: Dict[str, Any]) -> Optional[str]:
    fr = data.get("first_release")
    if isinstance(fr, dict) and isinstance(fr.get("date"), str):
        return fr["date"]
    for key in ("first_air_time", "releaseDate"):
        if isinstance(data.get(key), str):
            return data[key]
    return None


def _runtime(raw: Any) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def _awards(raw: Any) -> Optional[tuple]:
    if not isinstance(raw, list):
        return None
    out = []
    for a in raw:
        if not isinstance(a, dict):
            continue
        winner = a.get("isWinner", a.get("is_winner"))
        out.append(Award(name=str(a.get("name") or ""), category=str(a.get("category") or ""), is_winner=bool(winner)))
    return tuple(out)


def movie_record(data: Dict[str, Any]) -> MovieRecord:
    """Normalize a details payload (cached, fresh or client-shaped) into a MovieRecord."""
    released = release_date(data)
    year = data.get("year")
    if not isinstance(year, (str, int)) or isinstance(year, bool):
        year = released[:4] if released and re.match(r"^\d{4}", released) else None

    people = data.get("people")
    translations = data.get("translations") if isinstance(data.get("translations"), dict) else {}
    return MovieRecord(
        id=str(data["id"]) if data.get("id") is not None else None,
        name=data.get("name") or translations.get("eng") or "",
        year=year,
        release_date=released,
        runtime=_runtime(data.get("runtime")),
        genres=tuple(genre_names(data.get("genres"))) if isinstance(data.get("genres"), list) else None,
        people=tuple(
            Person(name=p["name"], people_type=p["peopleType"], role=p["role"])
            for p in (normalize_person(x) for x in people if isinstance(x, dict))
            if p["name"]
        ) if isinstance(people, list) else None,
        original_language=data.get("originalLanguage") if isinstance(data.get("originalLanguage"), str) else None,
        budget=data.get("budget"),
        box_office=data.get("boxOffice"),
        awards=_awards(data.get("awards")),
        poster_url=data.get("posterUrl") or poster_url(data),
    )

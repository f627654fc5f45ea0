# Normalized movie shape seen by prompt predicates
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class Person:
    name: str
    people_type: str = ""   # "Director", "Writer", "Actor", ...
    role: str = ""

    def has_type(self, *needles: str) -> bool:
        kind = (self.people_type or "").lower()
        return any(n in kind for n in needles)


@dataclass(frozen=True)
class Award:
    name: str
    category: str = ""
    is_winner: bool = False


@dataclass(frozen=True)
class MovieRecord:
    id: Optional[str] = None
    name: str = ""
    year: Any = None                # str | int as delivered upstream
    release_date: Optional[str] = None
    runtime: Optional[float] = None  # minutes
    genres: Optional[Tuple[str, ...]] = None
    people: Optional[Tuple[Person, ...]] = None
    original_language: Optional[str] = None
    budget: Any = None              # free-form money string
    box_office: Any = None
    awards: Optional[Tuple[Award, ...]] = None
    poster_url: Optional[str] = None

    def credited(self, *needles: str) -> Tuple[Person, ...]:
        return tuple(p for p in (self.people or ()) if p.has_type(*needles))

    def directors(self) -> Tuple[Person, ...]:
        return self.credited("director")

    def writers(self) -> Tuple[Person, ...]:
        return self.credited("writer")

    def cast(self) -> Tuple[Person, ...]:
        return self.credited("actor", "actress")

    def release_year(self) -> Optional[int]:
        """Year from the explicit field first, then the release date; None if neither parses."""
        for raw in (self.year, self.release_date):
            if raw is None:
                continue
            head = str(raw).strip()[:4]
            if head.isdigit():
                return int(head)
        return None

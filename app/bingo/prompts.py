# app/bingo/prompts.py
# Static catalog of every prompt the board can show, grouped into weighted
# categories. Built once at import; never mutated afterwards.

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from app.records import MovieRecord
from app.utils.money import parse_money
from app.utils.text import name_matches, slugify

log = logging.getLogger(__name__)

PromptTest = Callable[[MovieRecord, str], bool]


@dataclass(frozen=True)
class Prompt:
    id: str
    label: str
    test: PromptTest

    def check(self, movie: MovieRecord, title: Optional[str] = None) -> bool:
        """Run the predicate; a raising predicate counts as not satisfied."""
        try:
            return bool(self.test(movie, title if title is not None else (movie.name or "")))
        except (TypeError, ValueError, AttributeError) as exc:
            log.debug("prompt %s raised on movie %s: %r", self.id, getattr(movie, "id", None), exc)
            return False

    def to_public(self) -> Dict[str, str]:
        return {"id": self.id, "label": self.label}


@dataclass(frozen=True)
class Category:
    name: str
    weight: int
    source: Tuple[Prompt, ...]


# --------------------------------------------------------------------
# Data sources
# --------------------------------------------------------------------

DIRECTORS = [
    "Steven Spielberg", "Martin Scorsese", "Quentin Tarantino", "Alfred Hitchcock",
    "Stanley Kubrick", "Christopher Nolan",
    "Spike Lee", "Wes Anderson", "David Fincher", "Denis Villeneuve",
    "James Cameron", "Peter Jackson", "Ridley Scott", "Tim Burton", "Coen Brothers",
    "The Wachowskis", "Hayao Miyazaki",
    "Guillermo del Toro", "Jordan Peele", "Taika Waititi", "David Lynch",
    "J.J. Abrams", "Robert Zemeckis", "Jon Favreau", "Sam Raimi", "Clint Eastwood",
    "George Clooney", "M Night Shyamalan", "Russo Brothers", "George Lucas",
    "Zack Snyder", "Joss Whedon", "Michael Bay", "John Carpenter", "David Cronenberg",
    "John Hughes", "Terry Gilliam",
]

ACTORS = [
    "Tom Hanks", "Leonardo DiCaprio", "Denzel Washington", "Meryl Streep",
    "Robert De Niro", "Al Pacino", "Jack Nicholson", "Morgan Freeman",
    "Samuel L. Jackson", "Kate Winslet", "Brad Pitt", "Cate Blanchett",
    "Jodie Foster", "Anthony Hopkins", "Daniel Day-Lewis", "Christian Bale",
    "Dustin Hoffman", "Robin Williams", "Sean Connery", "Harrison Ford",
    "Clint Eastwood", "Julia Roberts", "Will Smith", "Tom Cruise", "Johnny Depp",
    "Sigourney Weaver", "Sandra Bullock", "Keanu Reeves", "Angelina Jolie",
    "Matt Damon", "George Clooney", "Joaquin Phoenix", "Philip Seymour Hoffman",
    "Viola Davis", "Tilda Swinton", "Gary Oldman", "Jeff Bridges", "Julianne Moore",
    "Natalie Portman", "Robert Redford", "Steve McQueen", "Michael Caine",
    "Sean Penn", "Whoopi Goldberg", "Alan Rickman", "James Earl Jones",
    "Arnold Schwarzenegger", "Sylvester Stallone", "Bruce Willis", "Mel Gibson",
    "Kevin Costner", "Russell Crowe", "Bill Murray", "Eddie Murphy", "Jim Carrey",
    "Steve Martin", "John Travolta", "Kurt Russell", "Christopher Walken",
    "Scarlett Johansson", "Ryan Gosling", "Ryan Reynolds", "Emma Stone",
    "Hugh Jackman", "Anne Hathaway", "Keira Knightley", "Ben Affleck",
    "Emily Blunt", "Michael Fassbender", "Idris Elba", "Mahershala Ali",
    "Adam Driver", "Robert Downey Jr.", "Chris Evans", "Chris Hemsworth",
    "Mark Ruffalo", "Jeremy Renner", "Chris Pratt", 'Dwayne "The Rock" Johnson',
    "Patrick Stewart", "Ian McKellen", "Daniel Radcliffe",
    "Helena Bonham Carter", "Ralph Fiennes", "Liam Neeson", "Ewan McGregor",
    "Charlize Theron", "Halle Berry", "Jennifer Lawrence", "Reese Witherspoon",
    "Cameron Diaz", "Drew Barrymore", "Gwyneth Paltrow", "Edward Norton",
    "Will Ferrell", "Steve Carell", "Tina Fey", "Tom Hardy", "Benedict Cumberbatch",
    "Martin Freeman", "Colin Firth", "Mark Strong", "Geoffrey Rush",
    "Javier Bardem", "Antonio Banderas", "Christoph Waltz", "Daniel Craig",
    "Judi Dench", "Helen Mirren", "Emma Thompson", "Orlando Bloom",
    "Viggo Mortensen", "Elijah Wood", "Andy Serkis", "Hugo Weaving",
    "Christopher Lee", "Willem Dafoe", "Jeff Goldblum", "Sam Neill", "Uma Thurman",
    "Val Kilmer", "Tommy Lee Jones", "John Goodman", "Steve Buscemi",
    "Benicio del Toro", "Forest Whitaker", "Jamie Foxx", "Jon Hamm", "Elisabeth Moss",
    "Oscar Isaac", "John Boyega", "Jake Gyllenhaal", "Heath Ledger",
    "Bradley Cooper", "Vin Diesel", "Jason Statham", "Jackie Chan",
    "Zendaya", "Anya Taylor-Joy", "Timothée Chalamet", "Florence Pugh", "Brie Larson",
]

GENRES = [
    "Action", "Adventure", "Animation", "Comedy", "Crime", "Documentary",
    "Drama", "Fantasy", "Horror", "Mystery", "Romance", "Sci-Fi", "Thriller",
    "Western", "Musical", "War", "History", "Family", "Sport",
]

DECADES = [1970, 1980, 1990, 2000, 2010]

# name -> (label, both members that must be credited)
DIRECTOR_TEAMS = {
    "Coen Brothers": ("Directed by the Coen Brothers", ("Joel Coen", "Ethan Coen")),
    "The Wachowskis": ("Directed by The Wachowskis", ("Lana Wachowski", "Lilly Wachowski")),
    "Russo Brothers": ("Directed by the Russo Brothers", ("Anthony Russo", "Joe Russo")),
}

# Extra spellings a genre entry may use upstream (compared with non-alphanumerics removed)
GENRE_ALIASES = {
    "Sci-Fi": ("scifi", "sciencefiction"),
    "Animation": ("animation", "anime"),
}

ENGLISH_CODES = {"eng", "en"}
ACADEMY_AWARDS = "Academy Awards"

# --------------------------------------------------------------------
# Predicate helpers
# --------------------------------------------------------------------

def _year_between(lo: int, hi: int) -> PromptTest:
    def test(m: MovieRecord, _title: str) -> bool:
        y = m.release_year()
        return y is not None and lo <= y <= hi
    return test


def _alnum(s: str) -> str:
    return re.sub(r"[^a-z0-9]", "", (s or "").lower())


def _words(title: str) -> List[str]:
    return (title or "").split()


def _oscar_wins(m: MovieRecord) -> Optional[int]:
    if m.awards is None:
        return None
    return sum(1 for a in m.awards if a.is_winner and a.name == ACADEMY_AWARDS)


def _budget(m: MovieRecord) -> float:
    b = parse_money(m.budget)
    return b if b > 0 else math.nan


# --------------------------------------------------------------------
# Generator templates
# --------------------------------------------------------------------

def director_prompt(director: str) -> Prompt:
    team = DIRECTOR_TEAMS.get(director)
    if team:
        label, members = team

        def team_test(m: MovieRecord, _title: str) -> bool:
            credited = m.directors()
            return all(any(name_matches(member, d.name) for d in credited) for member in members)

        return Prompt(id=f"director-{slugify(director)}", label=label, test=team_test)

    return Prompt(
        id=f"director-{slugify(director)}",
        label=f"Directed by {director}",
        test=lambda m, _t: any(name_matches(director, d.name) for d in m.directors()),
    )


def actor_prompt(actor: str) -> Prompt:
    return Prompt(
        id=f"actor-{slugify(actor)}",
        label=f"Stars {actor}",
        test=lambda m, _t: any(name_matches(actor, p.name) for p in m.cast()),
    )


def genre_prompt(genre: str) -> Prompt:
    needles = GENRE_ALIASES.get(genre, (_alnum(genre),))

    def test(m: MovieRecord, _title: str) -> bool:
        return any(n in _alnum(g) for g in (m.genres or ()) for n in needles)

    return Prompt(id=f"genre-{slugify(genre)}", label=f"Genre: {genre}", test=test)


def decade_prompt(decade: int) -> Prompt:
    return Prompt(
        id=f"year-{decade}s",
        label=f"Released in the {decade}s",
        test=_year_between(decade, decade + 9),
    )


# --------------------------------------------------------------------
# Static / attribute prompts
# --------------------------------------------------------------------

_STOPWORDS = {"a", "an", "the", "in", "on", "of", "for", "to", "with", "and", "or", "but"}

_SPELLED_NUMBERS = (
    "one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve|thirteen|fourteen|"
    "fifteen|sixteen|seventeen|eighteen|nineteen|twenty|thirty|forty|fifty|sixty|seventy|"
    "eighty|ninety|hundred|thousand|million|billion|trillion"
)
_ROMAN_NUMERALS = "II|III|IV|V|VI|VII|VIII|IX|X|XI|XII|XIII|XIV|XV|XVI|XVII|XVIII|XIX|XX"
_NUMBER_RE = re.compile(rf"\d|\b(?:{_SPELLED_NUMBERS})\b|\b(?:{_ROMAN_NUMERALS})\b", re.IGNORECASE)
_COLOR_RE = re.compile(
    r"\b(?:red|blue|green|black|white|gold|silver|pink|purple|brown|gray|grey|orange|yellow)\b",
    re.IGNORECASE,
)
_POSSESSIVE_RE = re.compile(r"['’]s\b", re.IGNORECASE)
_STARTS_THE_RE = re.compile(r"^the\b", re.IGNORECASE)


def _alliterative(_m: MovieRecord, title: str) -> bool:
    cleaned = re.sub(r"[^a-z\s]", "", (title or "").lower())
    words = [w for w in cleaned.split() if w not in _STOPWORDS]
    if len(words) < 2:
        return False
    counts: Dict[str, int] = {}
    for w in words:
        counts[w[0]] = counts.get(w[0], 0) + 1
    return any(c >= 2 for c in counts.values())


def _written_and_directed(m: MovieRecord, _title: str) -> bool:
    directors = {d.name.strip().lower() for d in m.directors() if d.name.strip()}
    if not directors:
        return False
    writers = {w.name.strip().lower() for w in m.writers()}
    return bool(directors & writers)


def _non_english(m: MovieRecord, _title: str) -> bool:
    lang = (m.original_language or "").strip().lower()
    return bool(lang) and lang not in ENGLISH_CODES


def _runtime(m: MovieRecord) -> float:
    try:
        return float(m.runtime) if m.runtime is not None else math.nan
    except (TypeError, ValueError):
        return math.nan


def _box_office_ratio(m: MovieRecord) -> float:
    return parse_money(m.box_office) / _budget(m)


def _wins(m: MovieRecord) -> int:
    return sum(1 for a in (m.awards or ()) if a.is_winner)


STATIC_PROMPTS: Tuple[Prompt, ...] = (
    # Year
    Prompt("year-before-2000", "Released before 2000",
           lambda m, _t: (m.release_year() or 10_000) < 2000),
    Prompt("year-after-2000", "Released after 2000",
           lambda m, _t: (m.release_year() or 0) > 2000),
    Prompt("year-after-2020", "Released after 2020",
           lambda m, _t: (m.release_year() or 0) > 2020),
    Prompt("year-before-1970", "Released before 1970",
           lambda m, _t: (m.release_year() or 10_000) < 1970),

    # Title
    Prompt("title-possessive", "Title is possessive ('s)",
           lambda _m, t: bool(_POSSESSIVE_RE.search(t or ""))),
    Prompt("title-long-5", "Title is 5 words or longer",
           lambda _m, t: len(_words(t)) >= 5),
    Prompt("title-alliterative", "Alliterative title", _alliterative),
    Prompt("starts-the", 'Title starts with "The"',
           lambda _m, t: bool(_STARTS_THE_RE.search((t or "").strip()))),
    Prompt("one-word", "One-word title",
           lambda _m, t: len(_words(t)) == 1),
    Prompt("has-number", "Title contains a number",
           lambda _m, t: bool(_NUMBER_RE.search(t or ""))),
    Prompt("has-color", "Title contains a color",
           lambda _m, t: bool(_COLOR_RE.search(t or ""))),
    Prompt("has-colon", "Has a subtitle (colon)",
           lambda _m, t: ":" in (t or "")),

    # Runtime (NaN compares false both ways)
    Prompt("runtime-short", "Runtime < 90 min", lambda m, _t: _runtime(m) < 90),
    Prompt("runtime-epic", "Runtime ≥ 150 min", lambda m, _t: _runtime(m) >= 150),

    # People
    Prompt("written-and-directed-same", "Written & Directed by same person", _written_and_directed),

    # Language
    Prompt("lang-non-english", "Not in the English language", _non_english),

    # Budget & box office
    Prompt("budget-under-1m", "Budget < $1 million", lambda m, _t: _budget(m) < 1_000_000),
    Prompt("budget-over-100m", "Budget > $100 million", lambda m, _t: _budget(m) > 100_000_000),
    Prompt("box-office-10x", "Grossed > 10x budget", lambda m, _t: _box_office_ratio(m) > 10),
    Prompt("box-office-flop", "Grossed < 2x budget", lambda m, _t: _box_office_ratio(m) < 2),

    # Awards
    Prompt("award-oscar-winner", "Won at least one Oscar",
           lambda m, _t: (_oscar_wins(m) or 0) > 0),
    Prompt("award-multi-oscar-winner", "Won multiple Oscars",
           lambda m, _t: (_oscar_wins(m) or 0) > 1),
    Prompt("award-no-oscars", "Won no Oscars",
           lambda m, _t: _oscar_wins(m) == 0),
    Prompt("award-10-plus", "Won 10+ major awards",
           lambda m, _t: _wins(m) >= 10),
)

# --------------------------------------------------------------------
# Catalog assembly
# --------------------------------------------------------------------

def _unique(prompts: Iterable[Prompt], seen: set) -> Tuple[Prompt, ...]:
    out = []
    for p in prompts:
        if p.id in seen:
            continue
        seen.add(p.id)
        out.append(p)
    return tuple(out)


def build_categories() -> Tuple[Category, ...]:
    """Category order is part of the sampling contract: director, actor, genre, decade, static."""
    seen: set = set()
    return (
        Category("director", 2, _unique(map(director_prompt, DIRECTORS), seen)),
        Category("actor", 3, _unique(map(actor_prompt, ACTORS), seen)),
        Category("genre", 3, _unique(map(genre_prompt, GENRES), seen)),
        Category("decade", 2, _unique(map(decade_prompt, DECADES), seen)),
        Category("static", 3, _unique(STATIC_PROMPTS, seen)),
    )


CATEGORIES: Tuple[Category, ...] = build_categories()
ALL_PROMPTS: Tuple[Prompt, ...] = tuple(p for c in CATEGORIES for p in c.source)
PROMPTS_BY_ID: Dict[str, Prompt] = {p.id: p for p in ALL_PROMPTS}


def _never(_m: MovieRecord, _title: str) -> bool:
    return False


def prompt_for_id(prompt_id: str, label: Optional[str] = None) -> Prompt:
    """
    Rehydrate a prompt from its id. Ids the catalog does not know (e.g. added
    server-side later) become a label-only prompt nothing can satisfy.
    """
    known = PROMPTS_BY_ID.get(prompt_id)
    if known:
        return known
    return Prompt(id=prompt_id, label=label or prompt_id, test=_never)


def hydrate_prompts(items: Iterable[dict]) -> List[Prompt]:
    """Turn [{id, label}, ...] from the daily payload back into Prompt objects."""
    out = []
    for item in items or []:
        pid = str((item or {}).get("id") or "").strip()
        if not pid:
            continue
        out.append(prompt_for_id(pid, (item or {}).get("label")))
    return out

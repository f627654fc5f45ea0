import logging

from app.bingo.prompts import (
    ALL_PROMPTS,
    CATEGORIES,
    PROMPTS_BY_ID,
    Prompt,
    hydrate_prompts,
    prompt_for_id,
)
from app.records import Award, MovieRecord, Person


def _directed_by(*names):
    return MovieRecord(name="Fargo", people=tuple(Person(n, "Director") for n in names))


def test_catalog_order_and_weights():
    assert [(c.name, c.weight) for c in CATEGORIES] == [
        ("director", 2), ("actor", 3), ("genre", 3), ("decade", 2), ("static", 3),
    ]


def test_ids_are_unique():
    ids = [p.id for p in ALL_PROMPTS]
    assert len(ids) == len(set(ids))
    assert "actor-samuel-l-jackson" in PROMPTS_BY_ID
    assert PROMPTS_BY_ID["year-1990s"].label == "Released in the 1990s"


def test_coen_team_needs_both_brothers():
    coens = PROMPTS_BY_ID["director-coen-brothers"]
    assert coens.label == "Directed by the Coen Brothers"
    assert coens.check(_directed_by("Joel Coen", "Ethan Coen"))
    assert not coens.check(_directed_by("Joel Coen"))


def test_director_match_ignores_case_and_spacing():
    nolan = PROMPTS_BY_ID["director-christopher-nolan"]
    assert nolan.check(_directed_by("christopher  nolan"))
    assert not nolan.check(MovieRecord(people=(Person("Christopher Nolan", "Writer"),)))


def test_actor_prompt_reads_cast_only():
    hanks = PROMPTS_BY_ID["actor-tom-hanks"]
    assert hanks.check(MovieRecord(people=(Person("Tom Hanks", "Actor"),)))
    assert not hanks.check(MovieRecord(people=(Person("Tom Hanks", "Producer"),)))
    assert not hanks.check(MovieRecord(people=None))


def test_genre_aliases():
    scifi = PROMPTS_BY_ID["genre-sci-fi"]
    assert scifi.check(MovieRecord(genres=("Science Fiction",)))
    assert scifi.check(MovieRecord(genres=("Sci-Fi",)))
    assert not scifi.check(MovieRecord(genres=None))


def test_cheap_budget_without_box_office():
    movie = MovieRecord(name="Clerks", budget="$500,000")
    assert PROMPTS_BY_ID["budget-under-1m"].check(movie)
    assert not PROMPTS_BY_ID["box-office-10x"].check(movie)
    assert not PROMPTS_BY_ID["box-office-flop"].check(movie)


def test_title_numbers():
    has_number = PROMPTS_BY_ID["has-number"]
    assert has_number.check(MovieRecord(name="Se7en"))
    assert has_number.check(MovieRecord(name="Ocean's Eleven"))
    assert not has_number.check(MovieRecord(name="Heat"))


def test_year_field_drives_decade():
    movie = MovieRecord(name="Pulp Fiction", year="1994")
    assert PROMPTS_BY_ID["year-1990s"].check(movie)
    assert not PROMPTS_BY_ID["year-2000s"].check(movie)


def test_release_date_fallback_and_garbage_year():
    assert PROMPTS_BY_ID["year-2010s"].check(MovieRecord(release_date="2014-11-07"))
    assert not PROMPTS_BY_ID["year-before-2000"].check(MovieRecord(year="unknown"))
    assert not PROMPTS_BY_ID["year-after-2000"].check(MovieRecord())


def test_two_oscar_wins():
    movie = MovieRecord(awards=(
        Award("Academy Awards", "Best Picture", True),
        Award("Academy Awards", "Best Director", True),
        Award("Golden Globe Awards", "Best Drama", False),
    ))
    assert PROMPTS_BY_ID["award-multi-oscar-winner"].check(movie)
    assert PROMPTS_BY_ID["award-oscar-winner"].check(movie)
    assert not PROMPTS_BY_ID["award-no-oscars"].check(movie)


def test_no_oscars_needs_an_awards_list():
    assert PROMPTS_BY_ID["award-no-oscars"].check(MovieRecord(awards=()))
    assert not PROMPTS_BY_ID["award-no-oscars"].check(MovieRecord(awards=None))


def test_one_word_title():
    jaws = MovieRecord(name="Jaws")
    assert PROMPTS_BY_ID["one-word"].check(jaws)
    assert not PROMPTS_BY_ID["title-long-5"].check(jaws)


def test_title_shapes():
    assert PROMPTS_BY_ID["title-alliterative"].check(MovieRecord(name="Pitch Perfect"))
    assert not PROMPTS_BY_ID["title-alliterative"].check(MovieRecord(name="The Thing"))
    assert PROMPTS_BY_ID["starts-the"].check(MovieRecord(name="The Matrix"))
    assert not PROMPTS_BY_ID["starts-the"].check(MovieRecord(name="Theodore Rex"))
    assert PROMPTS_BY_ID["has-color"].check(MovieRecord(name="Blue Velvet"))
    assert not PROMPTS_BY_ID["has-color"].check(MovieRecord(name="Bored"))
    assert PROMPTS_BY_ID["title-possessive"].check(MovieRecord(name="Schindler's List"))


def test_display_title_overrides_record_name():
    assert PROMPTS_BY_ID["has-colon"].check(MovieRecord(name="Rogue One"), "Rogue One: A Star Wars Story")


def test_written_and_directed():
    same = MovieRecord(people=(Person("Michael Mann", "Director"), Person("Michael Mann", "Writer")))
    different = MovieRecord(people=(Person("Jonathan Demme", "Director"), Person("Ted Tally", "Writer")))
    assert PROMPTS_BY_ID["written-and-directed-same"].check(same)
    assert not PROMPTS_BY_ID["written-and-directed-same"].check(different)


def test_language_and_runtime_fail_closed():
    assert PROMPTS_BY_ID["lang-non-english"].check(MovieRecord(original_language="jpn"))
    assert not PROMPTS_BY_ID["lang-non-english"].check(MovieRecord(original_language="eng"))
    assert not PROMPTS_BY_ID["lang-non-english"].check(MovieRecord())
    assert not PROMPTS_BY_ID["runtime-short"].check(MovieRecord(runtime=None))
    assert PROMPTS_BY_ID["runtime-epic"].check(MovieRecord(runtime=170))


def test_unknown_id_becomes_unsatisfiable_placeholder():
    p = prompt_for_id("server-only-prompt", "Filmed in Iceland")
    assert p.label == "Filmed in Iceland"
    assert not p.check(MovieRecord(name="Anything"))
    assert prompt_for_id("one-word") is PROMPTS_BY_ID["one-word"]


def test_hydrate_prompts_skips_blank_ids():
    prompts = hydrate_prompts([{"id": "one-word", "label": "x"}, {"id": ""}, {"id": "mystery"}])
    assert [p.id for p in prompts] == ["one-word", "mystery"]
    assert prompts[0].label == "One-word title"


def test_wachowskis_team_needs_both_sisters():
    team = PROMPTS_BY_ID["director-the-wachowskis"]
    assert team.label == "Directed by The Wachowskis"
    assert team.check(_directed_by("Lana Wachowski", "Lilly Wachowski"))
    assert not team.check(_directed_by("Lana Wachowski"))


def test_russo_team_needs_both_brothers():
    team = PROMPTS_BY_ID["director-russo-brothers"]
    assert team.label == "Directed by the Russo Brothers"
    assert team.check(_directed_by("Anthony Russo", "Joe Russo"))
    assert not team.check(_directed_by("Joe Russo"))


def test_raising_predicate_is_logged_and_fails(caplog):
    def boom(_m, _t):
        raise TypeError("bad shape")

    prompt = Prompt("boom", "Boom", boom)
    with caplog.at_level(logging.DEBUG, logger="app.bingo.prompts"):
        assert not prompt.check(MovieRecord(id="42", name="Heat"))
    assert "boom" in caplog.text
    assert "bad shape" in caplog.text

from app.utils.text import collapse_ws, name_matches, slugify


def test_collapse_ws_squeezes_and_lowercases():
    assert collapse_ws("  Samuel   L.\tJackson ") == "samuel l. jackson"


def test_slugify_drops_punctuation():
    assert slugify("Samuel L. Jackson") == "samuel-l-jackson"
    assert slugify("J.J. Abrams") == "j-j-abrams"
    assert slugify("Sci-Fi") == "sci-fi"


def test_name_matches_tolerates_spacing():
    assert name_matches("Tom Hanks", "tom  hanks")
    assert name_matches("Joel Coen", "Joel Coen (uncredited)")
    assert not name_matches("Tom Hanks", "Tom Hardy")
    assert not name_matches("Tom Hanks", None)

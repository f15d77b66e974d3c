import pytest

from ticketmatch.domain.links import BROWSE_URL_TEMPLATES, browse_links, slugify
from ticketmatch.domain.models import Source


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Zach Bryan", "zach-bryan"),
        ("Beyoncé", "beyonce"),
        ("Mumford & Sons", "mumford-and-sons"),
        ("Guns N' Roses", "guns-n-roses"),
        ("  --AC/DC--  ", "ac-dc"),
        ("", ""),
        (None, ""),
        ("!!!", ""),
    ],
)
def test_slugify(name, expected):
    assert slugify(name) == expected


def test_links_cover_every_source():
    links = browse_links("Zach Bryan")
    assert set(links) == {source.value for source in Source}
    assert links["geturtix"] == "https://www.geturtix.com/performer/zach-bryan"
    assert all("zach-bryan" in url for url in links.values())


def test_no_links_for_empty_slug():
    assert browse_links("???") == {}


def test_custom_templates():
    assert browse_links("Hozier", {"tn": "https://tn.test/{slug}"}) == {"tn": "https://tn.test/hozier"}
    assert len(BROWSE_URL_TEMPLATES) == 4

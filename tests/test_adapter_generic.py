from pathlib import Path

from bs4 import BeautifulSoup

from tabgather.adapters.generic import GenericAdapter

FIXTURE = Path(__file__).parent / "fixtures" / "generic" / "dust-in-the-wind.html"


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_metadata_from_title():
    meta = GenericAdapter().metadata(_soup(FIXTURE.read_text(encoding="utf-8")))
    assert meta.title == "Dust in the Wind"
    assert meta.artist == "Kansas"


def test_extract_pre_fixture():
    candidate = GenericAdapter().extract(_soup(FIXTURE.read_text(encoding="utf-8")))
    lines = candidate.text.split("\n")
    assert candidate.method == "pre"
    assert lines[0] == "Intro"
    assert lines[2] == "e|-------0-------0-----|-------0-------0-----|"
    assert len([line for line in lines if "|" in line]) == 12


def test_multiple_pre_blocks_joined():
    candidate = GenericAdapter().extract(_soup("<pre>Verse\nAm G</pre><p>ad</p><pre>Chorus\nC F</pre>"))
    assert candidate.text == "Verse\nAm G\n\nChorus\nC F"


def test_code_used_only_without_pre():
    candidate = GenericAdapter().extract(_soup("<code>Am G C</code>"))
    assert candidate.method == "code"
    assert candidate.text == "Am G C"

    candidate = GenericAdapter().extract(_soup("<pre>Am</pre><code>ignored</code>"))
    assert candidate.text == "Am"


def test_no_cleanup_applied():
    text = "Am G\nClick here for more"
    assert GenericAdapter().extract(_soup(f"<pre>{text}</pre>")).text == text


def test_nothing_found():
    candidate = GenericAdapter().extract(_soup("<html><body><p>Just prose</p></body></html>"))
    assert candidate.text == ""
    assert candidate.method == ""

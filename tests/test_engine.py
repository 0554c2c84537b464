from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from tabgather.adapters.utils import page_text
from tabgather.engine import (
    MIN_PARSEABLE_LENGTH,
    REDIRECT_MESSAGE,
    TabEngine,
    is_parseable,
    parse_tab_from_html,
)
from tabgather.exceptions import FetchError
from tabgather.models import TabType
from tabgather.registry import DEFAULT_REGISTRY

FIXTURES = Path(__file__).parent / "fixtures"

JTOTAL_URL = "https://music.j-total.net/data/012ya/yamada/001.html"
UFRET_URL = "https://www.ufret.jp/song.php?data=12345"
CHORDWIKI_URL = "https://chordwiki.jpn.org/wiki.cgi?c=view&t=yoake"
UG_URL = "https://tabs.ultimate-guitar.com/tab/the-band/the-weight-chords-61592"


def fixture(site: str, name: str) -> str:
    return (FIXTURES / site / name).read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# per-site pages
# ---------------------------------------------------------------------------


def test_jtotal_page():
    result = parse_tab_from_html(fixture("jtotal", "yoake.html"), JTOTAL_URL)
    assert result.title == "夜明けの歌"
    assert result.artist == "山田バンド"
    assert result.content == fixture("jtotal", "yoake.txt")
    assert result.type == TabType.CHORD
    assert result.validation.lines == 25
    assert result.validation.valid is True
    assert result.parseable is True
    assert result.redirect_only is False
    assert result.key == "Am"
    assert result.capo == 2  # from the page text above the <pre>
    assert result.source == "j-total.net"
    assert result.method == "tt+pre"


def test_ufret_page():
    result = parse_tab_from_html(fixture("ufret", "yoake.html"), UFRET_URL)
    assert result.title == "夜明けの歌"
    assert result.artist == "山田バンド"
    assert result.type == TabType.CHORD
    assert len(result.content.split("\n")) == 7
    assert result.parseable is True
    assert result.validation.valid is False  # fewer than 20 lines
    assert result.capo is None


def test_ufret_single_string():
    line = "[Am]夜明けの街を[F]ひとりきりで歩いていく"
    html = (
        '<script>gtag("config", "G-XXXXXXX");</script>'
        f'<script>var ufret_chord_datas = ["{line}"];</script>'
        '<script>var ufret_song_title = "夜明けの歌";</script>'
    )
    result = parse_tab_from_html(html, UFRET_URL)
    assert result.content == line
    assert result.validation.lines == 1
    assert result.validation.valid is False


def test_chordwiki_page():
    result = parse_tab_from_html(fixture("chordwiki", "yoake.html"), CHORDWIKI_URL)
    assert result.title == "夜明けの歌"
    assert result.artist == "山田バンド"
    assert result.type == TabType.CHORD
    assert result.capo == 2
    assert result.method == "chord-lines"


def test_page_text_computed_once_per_parse():
    rows = "".join(f"<p>Am F G 歌詞{i}</p>" for i in range(11))
    html = f"<html><body><p>Capo 3</p>{rows}</body></html>"
    with patch("tabgather.engine.page_text", wraps=page_text) as visible, patch(
        "tabgather.adapters.base.page_text"
    ) as adapter_visible:
        result = parse_tab_from_html(html, CHORDWIKI_URL)
    assert result.method == "line-scan"
    assert result.capo == 3
    visible.assert_called_once()
    adapter_visible.assert_not_called()


def test_generic_site_fingerstyle():
    result = parse_tab_from_html(
        fixture("generic", "dust-in-the-wind.html"), "https://www.guitartabs.cc/tabs/k/kansas/dust.html"
    )
    assert result.title == "Dust in the Wind"
    assert result.artist == "Kansas"
    assert result.type == TabType.FINGERSTYLE
    assert result.capo == 2
    assert result.source == "guitartabs.cc"


def test_unregistered_site_uses_generic_extractor():
    result = parse_tab_from_html(
        "<title>Song - Band</title><pre>Am  F  G  C\nla la la</pre>", "https://tabs.example.org/x"
    )
    assert result.content == "Am  F  G  C\nla la la"
    assert result.type == TabType.CHORD
    assert result.source == "tabs.example.org"
    assert result.method == "pre"


def test_unregistered_site_without_blocks():
    result = parse_tab_from_html("<html><body><p>Hello</p></body></html>", "https://example.com/x")
    assert result.content == ""
    assert result.type == TabType.UNKNOWN
    assert result.parseable is False
    assert result.method == ""
    assert result.validation.valid is False


# ---------------------------------------------------------------------------
# redirect-only sites
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("url", [
    UG_URL,
    "https://www.songsterr.com/a/wsa/metallica-one-tab-s444",
    "https://chordify.net/chords/the-beatles-let-it-be",
])
def test_redirect_sites_never_extract(url):
    html = fixture("ultimate_guitar", "the-weight.html") + "<pre>Am F G C lots of text here</pre>"
    result = parse_tab_from_html(html, url)
    assert result.redirect_only is True
    assert result.content == ""
    assert result.parseable is False
    assert result.message == REDIRECT_MESSAGE
    assert result.method == ""


def test_redirect_title_from_page_title():
    result = parse_tab_from_html("<title>Let It Be - The Beatles - Chordify</title>", "https://chordify.net/x")
    assert result.title == "Let It Be"
    assert result.source == "chordify.net"


def test_override_makes_ultimate_guitar_parseable():
    registry = DEFAULT_REGISTRY.with_overrides({"ultimate-guitar.com": {"parse_mode": "server"}})
    result = parse_tab_from_html(fixture("ultimate_guitar", "the-weight.html"), UG_URL, registry)
    assert result.redirect_only is False
    assert result.title == "The Weight"
    assert result.artist == "The Band"
    assert result.capo == 2
    assert result.key == "A"
    assert result.type == TabType.CHORD
    assert result.method == "wiki-tab-json"


# ---------------------------------------------------------------------------
# robustness
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("html", [
    "",
    None,
    "<<<>>>",
    "<html><body><pre>",
    "\x00\x01 binary \xff garbage",
    "<script>var s = \"[Am]unterminated",
])
@pytest.mark.parametrize("url", [JTOTAL_URL, UFRET_URL, CHORDWIKI_URL, UG_URL, "https://example.com", "not a url", ""])
def test_never_raises(html, url):
    result = parse_tab_from_html(html, url)
    assert isinstance(result.content, str)
    assert result.parseable == (len(result.content) > MIN_PARSEABLE_LENGTH)


def test_unexpected_error_degrades_to_empty_result():
    with patch("tabgather.engine.classify", side_effect=RuntimeError("boom")):
        result = parse_tab_from_html(fixture("jtotal", "yoake.html"), JTOTAL_URL)
    assert result.content == ""
    assert result.type == TabType.UNKNOWN
    assert result.source == "j-total.net"


def test_same_input_same_output():
    html = fixture("ufret", "yoake.html")
    assert parse_tab_from_html(html, UFRET_URL) == parse_tab_from_html(html, UFRET_URL)


def test_parseable_threshold():
    short = "Am F G C"
    result = parse_tab_from_html(f"<pre>{short}</pre>", "https://example.com")
    assert result.content == short
    assert result.parseable is False

    long = "Am F G C\n" + "x" * MIN_PARSEABLE_LENGTH
    assert parse_tab_from_html(f"<pre>{long}</pre>", "https://example.com").parseable is True


def test_is_parseable():
    assert is_parseable(JTOTAL_URL)
    assert is_parseable(UFRET_URL)
    assert not is_parseable(UG_URL)
    assert not is_parseable("https://example.com")


# ---------------------------------------------------------------------------
# scrape
# ---------------------------------------------------------------------------


def test_scrape_fetches_and_parses():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Accept-Language"].startswith("ja")
        return httpx.Response(200, content=fixture("jtotal", "yoake.html").encode("shift_jis"))

    client = httpx.Client(transport=httpx.MockTransport(handler))
    result = TabEngine().scrape(JTOTAL_URL, client=client)
    assert result.title == "夜明けの歌"
    assert result.validation.valid is True


def test_scrape_http_error():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
    with pytest.raises(FetchError) as excinfo:
        TabEngine().scrape("https://example.com/missing", client=client)
    assert excinfo.value.status_code == 404

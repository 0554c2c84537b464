from bs4 import BeautifulSoup

from tabgather.adapters.utils import (
    block_text,
    clean_content,
    first_match,
    is_boilerplate,
    is_script_artifact,
    longest_block,
    normalize_block,
    page_text,
    pre_text,
    split_page_title,
    strip_type_suffix,
)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


# ---------------------------------------------------------------------------
# normalize_block / block_text
# ---------------------------------------------------------------------------


def test_normalize_strips_trailing_whitespace_keeps_indent():
    assert normalize_block("\n  Am   G  \r\n歌詞\t\n\n") == "  Am   G\n歌詞"


def test_normalize_collapses_blank_runs():
    assert normalize_block("a\n\n\n\nb") == "a\n\nb"


def test_normalize_nbsp():
    assert normalize_block("Am\xa0\xa0G") == "Am  G"


def test_block_text_br_and_scripts():
    soup = _soup("<tt>Am&nbsp;&nbsp;G<br>歌詞<script>var x = 1;</script><br>次</tt>")
    assert block_text(soup.tt) == "Am  G\n歌詞\n次"


def test_block_text_leaves_tree_untouched():
    soup = _soup("<div>a<br>b<script>var x;</script></div>")
    block_text(soup.div)
    assert soup.find("script") is not None
    assert soup.find("br") is not None


def test_pre_text_joins_blocks():
    soup = _soup("<pre>one</pre><p>x</p><pre>two</pre><pre>  </pre>")
    assert pre_text(soup) == "one\n\ntwo"


def test_page_text_skips_scripts():
    soup = _soup("<html><body><p>visible</p><script>hidden()</script></body></html>")
    assert page_text(soup) == "visible"


# ---------------------------------------------------------------------------
# first_match / longest_block
# ---------------------------------------------------------------------------


def test_first_match_takes_first_long_enough():
    methods = [
        ("short", lambda soup: "abc"),
        ("none", lambda soup: None),
        ("long", lambda soup: "abcdefghij"),
        ("later", lambda soup: "zzzzzzzzzzzzzz"),
    ]
    candidate = first_match(_soup(""), methods, min_length=5)
    assert candidate.method == "long"
    assert candidate.text == "abcdefghij"


def test_first_match_nothing():
    assert first_match(_soup(""), [("none", lambda soup: None)], min_length=1) is None


def test_longest_block():
    assert longest_block(["x" * 5, "y" * 30, "z" * 20], 10) == "y" * 30
    assert longest_block(["x" * 5], 10) is None


# ---------------------------------------------------------------------------
# cleanup
# ---------------------------------------------------------------------------


def test_script_artifacts():
    assert is_script_artifact("var chords = [];")
    assert is_script_artifact("const x = 1")
    assert is_script_artifact("function render() {")
    assert is_script_artifact("items.map((x) => x)")
    assert is_script_artifact("document.write('hi')")
    assert not is_script_artifact("Am  F  G  C")
    assert not is_script_artifact("[Am]歌詞[G]つづき")


def test_boilerplate():
    assert is_boilerplate("Click here for more tabs")
    assert is_boilerplate("詳しくはこちら")
    assert is_boilerplate("Copyright 2024 Example")
    assert is_boilerplate("無断転載禁止")
    assert is_boilerplate("Upgrade to Premium")
    assert is_boilerplate("Advertisement")
    assert not is_boilerplate("Take a load off, Fanny")


def test_clean_content_drops_lines_only():
    text = "var ad = load();\nAm  F  G\n歌詞\n\n\n\n無断転載禁止"
    assert clean_content(text) == "Am  F  G\n歌詞"


def test_clean_content_keeps_clean_text():
    text = "Am  F  G\n  歌詞\n\nC  G"
    assert clean_content(text) == text


# ---------------------------------------------------------------------------
# titles
# ---------------------------------------------------------------------------


def test_split_title_three_parts():
    assert split_page_title("Song Name - Artist Name - SiteBrand Tab") == (
        "Song Name",
        "Artist Name",
    )


def test_split_title_pipe_and_dash():
    assert split_page_title("Yesterday | The Beatles Chords | Tabs4U") == (
        "Yesterday",
        "The Beatles",
    )
    assert split_page_title("Yesterday – The Beatles") == ("Yesterday", "The Beatles")


def test_split_title_hyphenated_words_stay_whole():
    assert split_page_title("Spider-Man Theme - Some-Band") == ("Spider-Man Theme", "Some-Band")


def test_split_title_single_part_and_empty():
    assert split_page_title("Just A Title") == ("Just A Title", "")
    assert split_page_title("") == ("", "")


def test_strip_type_suffix():
    assert strip_type_suffix("Artist Name Chords") == "Artist Name"
    assert strip_type_suffix("山田バンド ギターコード") == "山田バンド"
    assert strip_type_suffix("Artist Guitar Pro Tab") == "Artist"

"""Adapter for j-total.net (J-Total Music) chord pages.

URL pattern: music.j-total.net/data/<index>/<artist-slug>/<nnn>.html

Page structure (hand-written HTML, Shift-JIS):
    <title>曲名（アーティスト） / コード譜 / ギター - J-Total Music</title>
    ...
    <tt>
        Am&nbsp;&nbsp;&nbsp;G<br>
        歌詞の一行目<br>
        ...
    </tt>

Older pages wrap the song in ``<pre>`` instead of ``<tt>``, and the chrome
around the song reuses ``<tt>`` for short snippets, so every ``<tt>`` and
``<pre>`` is a candidate and the longest one of at least 200 characters
wins.
"""

import re

from bs4 import BeautifulSoup

from ..models import PageMetadata, SiteFamily
from .base import SiteAdapter
from .utils import (
    ExtractionMethod,
    html_title,
    longest_block,
    split_page_title,
    tag_blocks,
)

MIN_BLOCK_LENGTH = 200

_SLASH_SEP_RE = re.compile(r"[/|]")
_PAREN_ARTIST_RE = re.compile(r"^(.+?)[（(](.+?)[）)]$")


class JTotalAdapter(SiteAdapter):
    """Adapter for j-total.net chord pages."""

    family = SiteFamily.JTOTAL
    min_length = MIN_BLOCK_LENGTH

    def methods(self) -> list[ExtractionMethod]:
        return [("tt+pre", _longest_tt_or_pre)]

    def metadata(self, soup: BeautifulSoup) -> PageMetadata:
        # "曲名（アーティスト） / コード譜 / ギター"
        main = _SLASH_SEP_RE.split(html_title(soup))[0].strip()
        m = _PAREN_ARTIST_RE.match(main)
        if m:
            return PageMetadata(title=m.group(1).strip(), artist=m.group(2).strip())
        title, artist = split_page_title(main)
        return PageMetadata(title=title, artist=artist)


def _longest_tt_or_pre(soup: BeautifulSoup) -> str | None:
    candidates = tag_blocks(soup, "tt") + tag_blocks(soup, "pre")
    return longest_block(candidates, MIN_BLOCK_LENGTH)

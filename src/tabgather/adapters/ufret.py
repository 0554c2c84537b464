"""Adapter for ufret.jp (U-FRET) chord pages.

URL pattern: www.ufret.jp/song.php?data=<id>

U-FRET draws the chord sheet in the browser; the server HTML has no
chord markup at all.  The song is shipped as ChordPro-style strings inside
an inline script, e.g.::

    var ufret_chord_datas = ["[Am]歌詞[G]歌詞", "[C]次の行", ...];

so the only method is the script-string scan from :mod:`.scripts`.

Title format: "曲名 / アーティスト ギターコード/ウクレレコード/ピアノコード - U-フレット"
"""

import re

from bs4 import BeautifulSoup

from ..models import PageMetadata, SiteFamily
from .base import SiteAdapter
from .scripts import MIN_STRING_LENGTH, extract_script_chords
from .utils import ExtractionMethod, first_heading, html_title

_SLASH_SEP_RE = re.compile(r"[/|]")
_ARTIST_NOISE_RE = re.compile(r"(?:ギター|U-?FRET|U-フレット|コード).*$", re.IGNORECASE)


class UFretAdapter(SiteAdapter):
    """Adapter for ufret.jp chord pages."""

    family = SiteFamily.UFRET
    # a single chord-bearing literal is enough
    min_length = MIN_STRING_LENGTH

    def methods(self) -> list[ExtractionMethod]:
        return [("script-strings", extract_script_chords)]

    def metadata(self, soup: BeautifulSoup) -> PageMetadata:
        parts = _SLASH_SEP_RE.split(html_title(soup))
        title = parts[0].strip()
        artist = _ARTIST_NOISE_RE.sub("", parts[1]).strip() if len(parts) > 1 else ""

        heading = first_heading(soup, "h1")
        if heading:
            title = heading
        return PageMetadata(title=title, artist=artist)

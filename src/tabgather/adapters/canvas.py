"""Adapters for sites whose tab never appears in the HTML.

Songsterr draws notation on a ``<canvas>`` and Chordify renders its chord
grid in the browser, so there is nothing to extract.  These adapters only
read the title; content is always empty and there is no generic fallback
(the pages' ``<pre>``/``<code>`` blocks are never the song).

Title formats:
    Songsterr:  "Artist - Song Tab | Songsterr Tabs with Rhythm"
    Chordify:   "Song - Artist Chords - Chordify"
"""

import re

from bs4 import BeautifulSoup

from ..models import PageMetadata, SiteFamily
from .base import SiteAdapter
from .utils import ExtractionMethod, html_title, strip_type_suffix

_DASH_SEP_RE = re.compile(r"\s+-\s+|\s*–\s*")
_BAR_SEP_RE = re.compile(r"\s*\|\s*")


class _CanvasAdapter(SiteAdapter):
    fallback_to_generic = False

    def methods(self) -> list[ExtractionMethod]:
        return []


class SongsterrAdapter(_CanvasAdapter):
    """Songsterr lists the artist first: "Artist - Song Tab"."""

    family = SiteFamily.SONGSTERR

    def metadata(self, soup: BeautifulSoup) -> PageMetadata:
        main = _BAR_SEP_RE.split(html_title(soup))[0]
        parts = _DASH_SEP_RE.split(main, maxsplit=1)
        artist = parts[0].strip()
        title = strip_type_suffix(parts[1]) if len(parts) > 1 else ""
        return PageMetadata(title=title, artist=artist)


class ChordifyAdapter(_CanvasAdapter):
    family = SiteFamily.CHORDIFY

    def metadata(self, soup: BeautifulSoup) -> PageMetadata:
        parts = [p for p in _DASH_SEP_RE.split(html_title(soup)) if p.strip()]
        title = parts[0].strip() if parts else ""
        artist = strip_type_suffix(parts[1]) if len(parts) > 1 else ""
        return PageMetadata(title=title, artist=artist)

"""Adapter for chordwiki.jpn.org chord pages.

URL pattern: chordwiki.jpn.org/wiki.cgi?c=view&t=<title>

Page structure (current template):
    <h1 class="title">曲名</h1>
    <h2 class="subtitle">アーティスト</h2>
    <div class="main">
        <p class="line"><span class="chord">Am</span><span class="word">歌詞</span>...</p>
        ...
    </div>

Older or mirrored pages use ``<pre>`` blocks or a plain wiki/content
``<div>``.  Methods, in order:

  1. ``<p class="line">`` rows, chords rendered inline as ``[Am]``
  2. every ``<pre>`` block
  3. outermost ``<div>`` whose class mentions wiki/content/chord, keeping
     only blocks of more than 5 lines (shorter ones are navigation chrome)
  4. line scan of the visible page text; more than 10 chord-bearing lines
     are required before the result is trusted
"""

import re

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..classifier import CHORD_TOKEN_RE
from ..models import PageMetadata, SiteFamily
from .base import SiteAdapter
from .utils import (
    ExtractionMethod,
    block_text,
    first_heading,
    html_title,
    pre_text,
    split_page_title,
)

MIN_REGION_LINES = 5  # a region needs more lines than this
MIN_SCAN_LINES = 10  # the line scan needs more matches than this

_REGION_CLASS_RE = re.compile(r"wiki|content|chord")
_BRAND_RE = re.compile(r"\s*ChordWiki.*$", re.IGNORECASE)


class ChordWikiAdapter(SiteAdapter):
    """Adapter for chordwiki.jpn.org chord pages."""

    family = SiteFamily.CHORDWIKI

    def methods(self) -> list[ExtractionMethod]:
        return [
            ("chord-lines", _chord_lines),
            ("pre", pre_text),
            ("wiki-region", _wiki_regions),
            ("line-scan", self._scan_chord_lines),
        ]

    def metadata(self, soup: BeautifulSoup) -> PageMetadata:
        title, artist = split_page_title(html_title(soup))
        artist = _BRAND_RE.sub("", artist)

        heading = first_heading(soup, "h1")
        if heading:
            title = heading
        subtitle = soup.find(class_="subtitle")
        if subtitle and subtitle.get_text(strip=True):
            artist = subtitle.get_text(strip=True)
        return PageMetadata(title=title, artist=artist)

    def _scan_chord_lines(self, soup: BeautifulSoup) -> str | None:
        lines = [
            line.strip()
            for line in self.page_text(soup).split("\n")
            if CHORD_TOKEN_RE.search(line)
        ]
        if len(lines) > MIN_SCAN_LINES:
            return "\n".join(lines)
        return None


def _chord_lines(soup: BeautifulSoup) -> str | None:
    """Render ``<p class="line">`` rows with ``<span class="chord">`` inline."""
    rows = soup.find_all("p", class_="line")
    if not rows:
        return None
    return "\n".join(_render_row(row) for row in rows).strip("\n")


def _render_row(row: Tag) -> str:
    parts: list[str] = []
    for node in row.descendants:
        if isinstance(node, Tag):
            if _is_chord(node):
                parts.append(f"[{node.get_text(strip=True)}]")
            elif node.name == "br":
                parts.append("\n")
        elif isinstance(node, NavigableString) and not isinstance(node, Comment):
            # chord text is emitted by its <span>
            if not _inside_chord(node, row):
                parts.append(str(node))
    return "".join(parts).replace("\xa0", " ").rstrip()


def _is_chord(tag: Tag) -> bool:
    return "chord" in (tag.get("class") or [])


def _inside_chord(node: NavigableString, row: Tag) -> bool:
    for parent in node.parents:
        if parent is row:
            return False
        if _is_chord(parent):
            return True
    return False


def _wiki_regions(soup: BeautifulSoup) -> str | None:
    blocks = []
    for div in soup.find_all("div", class_=_REGION_CLASS_RE):
        # nested regions are covered by their outermost ancestor
        if div.find_parent("div", class_=_REGION_CLASS_RE) is not None:
            continue
        text = block_text(div)
        if len(text.split("\n")) > MIN_REGION_LINES:
            blocks.append(text)
    return "\n\n".join(blocks) or None

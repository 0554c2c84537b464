"""Adapter for tabs.ultimate-guitar.com tab pages.

The default registry marks Ultimate Guitar as redirect-only (Cloudflare
blocks plain HTTP clients), so this adapter only runs when a site-table
override switches it to ``server`` or ``client``, or when a page saved
from a browser is fed in.

Data sources, in order:

Current format:
    <div class="js-store" data-content="<html-entity-encoded JSON>">
    JSON path:
        store.page.data.tab          .song_name / .artist_name / .tonality_name
        store.page.data.tab_view     .wiki_tab.content / .meta.capo

Legacy format (Next.js):
    <script id="__NEXT_DATA__" type="application/json">
    JSON path:
        props.pageProps.data.tab_view
            .song_name / .artist_name / .capo / .tonality_name
            .wiki_tab.content

Rendered page:
    <pre class="... tK8GG ...">   (hashed class of the tab body)

The tab text uses ``[ch]D[/ch]`` notation (rewritten to ``[D]``) and may
wrap chord+lyric pairs in ``[tab]...[/tab]`` (dropped).
"""

import html as html_module
import json
import logging
import re

from bs4 import BeautifulSoup, NavigableString

from ..models import PageMetadata, SiteFamily
from .base import SiteAdapter
from .utils import ExtractionMethod, block_text, first_heading, html_title, split_page_title

logger = logging.getLogger(__name__)

_CH_TAG_RE = re.compile(r"\[ch\]([^\[]*)\[/ch\]")
_TAB_TAG_RE = re.compile(r"\[/?tab\]")
_RENDERED_PRE_CLASS_RE = re.compile(r"tK8GG")
_BY_RE = re.compile(r"\bby\s*$", re.IGNORECASE)


def strip_ug_tags(text: str) -> str:
    """Strip UG-specific markup from tab content.

    - ``[ch]D[/ch]`` → ``[D]``
    - ``[tab]`` / ``[/tab]`` → removed
    """
    text = _CH_TAG_RE.sub(r"[\1]", text)
    text = _TAB_TAG_RE.sub("", text)
    return text


def page_data(soup: BeautifulSoup) -> dict:
    """Return the ``page.data`` dict from whichever JSON container is present.

    Tries the current ``js-store`` format first, then falls back to the
    legacy ``__NEXT_DATA__`` format.  Returns ``{}`` when neither decodes.
    """
    store_div = soup.find("div", class_="js-store")
    if store_div and store_div.get("data-content"):
        try:
            data = json.loads(html_module.unescape(store_div["data-content"]))
            return data["store"]["page"]["data"]
        except (KeyError, TypeError, json.JSONDecodeError) as exc:
            logger.warning("js-store data unusable: %s", exc)

    script_tag = soup.find("script", id="__NEXT_DATA__")
    if script_tag and script_tag.string:
        try:
            data = json.loads(script_tag.string)
            return data["props"]["pageProps"]["data"]
        except (KeyError, TypeError, json.JSONDecodeError) as exc:
            logger.warning("__NEXT_DATA__ unusable: %s", exc)

    return {}


class UltimateGuitarAdapter(SiteAdapter):
    """Adapter for tabs.ultimate-guitar.com tab pages."""

    family = SiteFamily.ULTIMATE_GUITAR

    def methods(self) -> list[ExtractionMethod]:
        return [
            ("wiki-tab-json", _wiki_tab_content),
            ("rendered-pre", _rendered_pre),
        ]

    def metadata(self, soup: BeautifulSoup) -> PageMetadata:
        data = page_data(soup)
        # Metadata lives in data["tab"] (new) or data["tab_view"] (legacy).
        tab_meta = _as_dict(data.get("tab")) or _as_dict(data.get("tab_view"))
        tab_view = _as_dict(data.get("tab_view"))

        if tab_meta:
            capo_raw = (
                tab_meta.get("capo")
                or tab_view.get("capo")
                or _as_dict(tab_view.get("meta")).get("capo")
                or 0
            )
            return PageMetadata(
                title=str(tab_meta.get("song_name") or ""),
                artist=str(tab_meta.get("artist_name") or ""),
                capo=_to_int(capo_raw),
                key=tab_meta.get("tonality_name") or tab_view.get("tonality_name") or None,
            )

        # Rendered page: <h1>Title</h1> ... by <a>Artist</a>
        title = first_heading(soup, "h1")
        artist = ""
        for link in soup.find_all("a"):
            prev = link.previous_sibling
            if isinstance(prev, NavigableString) and _BY_RE.search(prev):
                artist = link.get_text(strip=True)
                break
        if not title:
            title, artist = split_page_title(html_title(soup))
        return PageMetadata(title=title, artist=artist)


def _wiki_tab_content(soup: BeautifulSoup) -> str | None:
    tab_view = _as_dict(page_data(soup).get("tab_view"))
    content = _as_dict(tab_view.get("wiki_tab")).get("content") or ""
    if not isinstance(content, str) or not content:
        return None
    return strip_ug_tags(content).replace("\r\n", "\n").strip("\n")


def _rendered_pre(soup: BeautifulSoup) -> str | None:
    pre = soup.find("pre", class_=_RENDERED_PRE_CLASS_RE)
    return block_text(pre) if pre else None


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _to_int(value) -> int | None:
    try:
        capo = int(value)
    except (TypeError, ValueError):
        return None
    return capo or None

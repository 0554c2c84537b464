"""Ranking of web-search hits for tab pages.

The search backend itself is out of scope; callers hand in the raw hits
(title, snippet, url) and get back annotated hits in display order:

    1. pages this engine can parse come first (+100)
    2. chord sheets before fingerstyle before plain tabs (+40 / +30 / +20)
    3. well-known tab sites get a bonus by position in TRUSTED_DOMAINS
    4. ties are broken by the registry's site priority
"""

import re
from dataclasses import dataclass

from .classifier import CAPO_RE, classify_by_title_hint
from .models import TabFormat, TabType
from .registry import DEFAULT_REGISTRY, SiteRegistry, hostname

TRUSTED_DOMAINS = [
    "ultimate-guitar.com",
    "music.j-total.net",
    "u-fret.com",
    "guitartabs.cc",
    "azchords.com",
    "chordie.com",
    "songsterr.com",
    "chordify.net",
]

_TYPE_SCORES = {
    TabType.CHORD: 40,
    TabType.FINGERSTYLE: 30,
    TabType.TAB: 20,
}

_BRAND_SUFFIX_RE = re.compile(
    r"\s*[-–|]\s*(?:Ultimate Guitar|Songsterr|Chordify|Tabs|Tab|Chords?)\b.*$",
    re.IGNORECASE,
)
_BY_RE = re.compile(r"(.+?)\s+by\s+(.+)", re.IGNORECASE)
_DASH_RE = re.compile(r"(.+?)\s*[-–]\s*(.+)")
_TYPE_WORDS_RE = re.compile(
    r"\s*\b(?:chords?|tabs?|guitar|acoustic|fingerstyle)\b\s*", re.IGNORECASE
)
_KEY_RE = re.compile(r"key[:\s]*([A-G][#b]?m?)", re.IGNORECASE)

_GP_MARKERS = (".gp", ".gtp")
_VIDEO_HOSTS = ("youtube.com", "youtu.be", "nicovideo.jp", "bilibili.com")
_HTML_HOSTS = ("ufret.jp", "j-total.net", "chordwiki", "ultimate-guitar", "songsterr")
_HTML_TITLE_WORDS = ("tab", "chord", "コード", "タブ譜")


@dataclass(frozen=True)
class SearchHit:
    title: str
    snippet: str
    url: str


@dataclass(frozen=True)
class RankedHit:
    title: str
    artist: str
    type: TabType
    info: str
    source: str
    url: str
    parseable: bool
    format: TabFormat
    score: int = 0


def split_search_title(raw: str) -> tuple[str, str]:
    """Return ``(title, artist)`` from a search-result title.

    Handles "Song by Artist - Site", "Artist - Song Tab" and
    "Song Chords by Artist".
    """
    title = _BRAND_SUFFIX_RE.sub("", raw or "")
    artist = ""

    match = _BY_RE.match(title)
    if match:
        title, artist = match.group(1).strip(), match.group(2).strip()
    else:
        match = _DASH_RE.match(title)
        if match:
            artist, title = match.group(1).strip(), match.group(2).strip()

    title = re.sub(r"\s{2,}", " ", _TYPE_WORDS_RE.sub(" ", title)).strip()
    return title, artist


def extract_info(snippet: str, tab_type: TabType) -> str:
    """Short summary for a hit, e.g. ``"Chord · Capo 2 · Am"``."""
    parts: list[str] = []
    if tab_type is not TabType.UNKNOWN:
        parts.append(tab_type.value)

    capo = CAPO_RE.search(snippet or "")
    if capo:
        parts.append(f"Capo {capo.group(1)}")
    key = _KEY_RE.search(snippet or "")
    if key:
        parts.append(key.group(1))

    return " · ".join(parts) or tab_type.value


def detect_format(url: str, title: str = "") -> TabFormat:
    url_lower = url.lower()
    title_lower = (title or "").lower()

    if ".pdf" in url_lower or "pdf" in title_lower:
        return TabFormat.PDF
    if any(m in url_lower for m in _GP_MARKERS) or "guitar pro" in title_lower or "gp tab" in title_lower:
        return TabFormat.GP
    if any(h in url_lower for h in _VIDEO_HOSTS):
        return TabFormat.VIDEO
    if any(h in url_lower for h in _HTML_HOSTS):
        return TabFormat.HTML
    if any(w in title_lower for w in _HTML_TITLE_WORDS):
        return TabFormat.HTML
    return TabFormat.UNKNOWN


def score_hit(tab_type: TabType, parseable: bool, domain: str) -> int:
    score = 100 if parseable else 0
    score += _TYPE_SCORES.get(tab_type, 0)
    for index, trusted in enumerate(TRUSTED_DOMAINS):
        if trusted in domain:
            score += (len(TRUSTED_DOMAINS) - index) * 5
            break
    return score


def rank_hits(hits: list[SearchHit], registry: SiteRegistry | None = None) -> list[RankedHit]:
    """Annotate *hits* and return them best first."""
    registry = registry or DEFAULT_REGISTRY
    ranked: list[tuple[int, RankedHit]] = []

    for hit in hits:
        profile = registry.resolve(hit.url)
        domain = hostname(hit.url)
        tab_type = classify_by_title_hint(hit.title, hit.snippet)
        if tab_type is TabType.UNKNOWN and profile is not None:
            tab_type = profile.default_type
        parseable = registry.is_parseable(hit.url)
        title, artist = split_search_title(hit.title)
        score = score_hit(tab_type, parseable, domain)

        ranked.append((
            profile.priority if profile else 0,
            RankedHit(
                title=title or hit.title,
                artist=artist,
                type=tab_type,
                info=extract_info(hit.snippet, tab_type),
                source=domain,
                url=hit.url,
                parseable=parseable,
                format=detect_format(hit.url, hit.title),
                score=score,
            ),
        ))

    ranked.sort(key=lambda item: (item[1].score, item[0]), reverse=True)
    return [hit for _, hit in ranked]

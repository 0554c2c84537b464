"""Tab-type, capo and key heuristics over extracted text.

Everything here is regex counting; nothing is derived music-theoretically.
The "key" is the first chord seen at the start of a line, not the tonic.

Type decision, in priority order:

  1. >= 4 six-string tab lines (``e|--0--2--|``)          -> Tab
     ... and >= 10 of them with h/p/slide markers        -> Fingerstyle
  2. >= 3 distinct chord names (``Am``, ``G/B``, ``F(9)``) -> Chord
  3. otherwise                                           -> Unknown
"""

import re
from dataclasses import dataclass

from .models import TabType

# Chord name inside running text.  ASCII word boundaries so that a chord
# written flush against Japanese lyrics ("Am歌詞") is still recognised.  The
# closing lookahead also holds after a trailing "#", where \b would not.
CHORD_TOKEN_RE = re.compile(
    r"\b[A-G][#b]?(?:m|maj|min|dim|aug|sus|add|M)?[0-9]?(?:\([^)]*\))?(?:/[A-G][#b]?)?(?![\w#])",
    re.ASCII,
)

# A whole token that is a chord name (used for the key guess).
CHORD_NAME_RE = re.compile(
    r"[A-G][#b]?(?:m|maj|min|dim|aug|sus|add|M)?\d*(?:\([^)]*\))?(?:/[A-G][#b]?)?"
)

KEY_ROOT_RE = re.compile(r"[A-G][#b]?(?:m(?!aj)|min)?")

# One string of ASCII tablature, bounded by pipes: e|--0--2h3--|
TAB_LINE_RE = re.compile(r"[eEBGDA]\|[-0-9hpbr/\\~() \t]+\|")

_TECHNIQUE_RE = re.compile(r"[hp/\\]")

CAPO_RE = re.compile(r"(?:capo|カポ)[:\s]*(\d+)", re.IGNORECASE)

_LEADING_BRACKET_RE = re.compile(r"^\[([^\]]+)\]")

MIN_TAB_LINES = 4
MIN_FINGERSTYLE_LINES = 10
MIN_DISTINCT_CHORDS = 3


@dataclass(frozen=True)
class Classification:
    type: TabType = TabType.UNKNOWN
    capo: int | None = None
    key: str | None = None


def classify(content: str, source_text: str = "") -> Classification:
    """Classify *content* and pull capo/key hints out of it.

    *source_text* is the surrounding page text; it is only consulted for the
    capo when the extracted content itself does not mention one.
    """
    return Classification(
        type=detect_tab_type(content),
        capo=extract_capo(content) or extract_capo(source_text),
        key=extract_key(content),
    )


def detect_tab_type(content: str) -> TabType:
    if not content or not content.strip():
        return TabType.UNKNOWN

    tab_lines = TAB_LINE_RE.findall(content)
    if len(tab_lines) >= MIN_TAB_LINES:
        if len(tab_lines) >= MIN_FINGERSTYLE_LINES and any(
            _TECHNIQUE_RE.search(line[2:]) for line in tab_lines
        ):
            return TabType.FINGERSTYLE
        return TabType.TAB

    if len(set(CHORD_TOKEN_RE.findall(content))) >= MIN_DISTINCT_CHORDS:
        return TabType.CHORD

    return TabType.UNKNOWN


def extract_capo(text: str) -> int | None:
    """Return the fret from the first ``Capo 3`` / ``capo: 3`` mention."""
    if not text:
        return None
    m = CAPO_RE.search(text)
    if m:
        return int(m.group(1))
    return None


def extract_key(content: str) -> str | None:
    """Return the first chord that opens a line, reduced to root + minor."""
    if not content:
        return None
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        m = _LEADING_BRACKET_RE.match(stripped)
        token = m.group(1) if m else stripped.split()[0]
        if CHORD_NAME_RE.fullmatch(token):
            return KEY_ROOT_RE.match(token).group()
    return None


def classify_by_title_hint(title: str, snippet: str = "") -> TabType:
    """Guess the tab type of a search hit from its title and snippet."""
    text = f"{title} {snippet}".lower()

    if "fingerstyle" in text or "solo" in text or "instrumental" in text:
        return TabType.FINGERSTYLE
    if "tab" in text and "chord" not in text:
        return TabType.TAB
    if "chord" in text:
        return TabType.CHORD
    return TabType.UNKNOWN

"""Shared helpers used by all site adapters.

  1. block_text()          HTML element -> normalized plain-text block
  2. tag_blocks()          block_text() for every matching tag
     pre_text()/code_text()  (the generic <pre>/<code> methods)
  3. first_match()         run methods in order, keep the first long enough
  4. longest_block()       keep the longest block clearing a floor
  5. clean_content()       drop script residue and site boilerplate lines
  6. split_page_title()    "Song - Artist - Brand" -> (title, artist)
"""

import copy
import logging
import re
from collections.abc import Callable, Iterable

from bs4 import BeautifulSoup, Tag

from ..models import Candidate

logger = logging.getLogger(__name__)

# (name, fn) pairs; fn returns the extracted text or None.
ExtractionMethod = tuple[str, Callable[[BeautifulSoup], str | None]]

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

_BLANK_RUN_RE = re.compile(r"\n{3,}")
_TRAILING_WS_RE = re.compile(r"[ \t]+\n")

# Separators between title / artist / brand in a <title>.  A bare hyphen only
# counts when surrounded by spaces so that "U-Fret" or "J-Total" stay whole.
TITLE_SEP_RE = re.compile(r"\s*[|–—]\s*|\s+-\s+")

_TYPE_SUFFIX_RE = re.compile(
    r"\s*(?:\b(?:chords?|tabs?|guitar(?:\s+pro)?|ukulele)\b|コード|ギター|タブ譜).*$",
    re.IGNORECASE,
)

# Lines left behind when a page's script text ends up in the extracted block.
_SCRIPT_ARTIFACT_RES = [
    re.compile(r"^\s*(?:var|let|const)\s+[\w$]+\s*="),
    re.compile(r"^\s*function\b"),
    re.compile(r"\bfunction\s*\("),
    re.compile(r"=>"),
    re.compile(r"\b(?:document|window)\.\w+"),
    re.compile(r"\b(?:getElementById|querySelector(?:All)?|addEventListener)\s*\("),
]

# Click-here prompts, copyright notices, premium upsells, ads.
_BOILERPLATE_RES = [
    re.compile(r"click here", re.IGNORECASE),
    re.compile(r"はこちら|クリック"),
    re.compile(r"copyright|all rights reserved|©", re.IGNORECASE),
    re.compile(r"reproduction (?:is )?prohibited", re.IGNORECASE),
    re.compile(r"無断転載|転載禁止|複製禁止|剽窃"),
    re.compile(r"\bpremium\b|\bupgrade to\b", re.IGNORECASE),
    re.compile(r"プレミアム"),
    re.compile(r"^\s*(?:advertisement|sponsored)\s*$", re.IGNORECASE),
    re.compile(r"^\s*広告\s*$"),
]


# ---------------------------------------------------------------------------
# HTML -> text
# ---------------------------------------------------------------------------


def normalize_block(text: str) -> str:
    """Normalize line endings and blank runs of an extracted text block.

    Trailing whitespace is removed from every line and runs of three or more
    newlines collapse to one blank line.  Leading indentation is kept, since
    chord lines are aligned over their lyrics.
    """
    text = text.replace("\xa0", " ").replace("\r\n", "\n").replace("\r", "\n")
    text = _TRAILING_WS_RE.sub("\n", text)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if lines:
        lines[-1] = lines[-1].rstrip()
    return "\n".join(lines)


def block_text(element: Tag) -> str:
    """Return the visible text of *element* with ``<br>``/``</p>`` as newlines.

    Works on a detached copy so the caller's tree is left untouched for the
    next extraction method.
    """
    fragment = copy.copy(element)
    for hidden in fragment.find_all(["script", "style", "noscript"]):
        hidden.decompose()
    for br in fragment.find_all("br"):
        br.replace_with("\n")
    for p in fragment.find_all("p"):
        p.append("\n")
    return normalize_block(fragment.get_text())


def tag_blocks(soup: BeautifulSoup, name: str, **attrs) -> list[str]:
    """Return the non-empty :func:`block_text` of every ``<name>`` element."""
    blocks = (block_text(el) for el in soup.find_all(name, **attrs))
    return [b for b in blocks if b]


def pre_text(soup: BeautifulSoup) -> str:
    """All ``<pre>`` blocks, separated by a blank line."""
    return "\n\n".join(tag_blocks(soup, "pre"))


def code_text(soup: BeautifulSoup) -> str:
    """All ``<code>`` blocks, separated by a blank line."""
    return "\n\n".join(tag_blocks(soup, "code"))


def page_text(soup: BeautifulSoup) -> str:
    """Visible text of the whole document (scripts and styles removed)."""
    root = soup.body or soup
    return block_text(root)


# ---------------------------------------------------------------------------
# Method chains
# ---------------------------------------------------------------------------


def first_match(
    soup: BeautifulSoup, methods: Iterable[ExtractionMethod], min_length: int
) -> Candidate | None:
    """Run *methods* in order and return the first result of *min_length*+ chars."""
    for name, method in methods:
        text = method(soup)
        if text and len(text.strip()) >= min_length:
            logger.debug("method %s produced %d chars", name, len(text))
            return Candidate(text=text, method=name)
        logger.debug("method %s produced nothing usable", name)
    return None


def longest_block(blocks: Iterable[str], min_length: int) -> str | None:
    """Return the longest stripped block with at least *min_length* chars."""
    eligible = [b.strip() for b in blocks if len(b.strip()) >= min_length]
    if not eligible:
        return None
    return max(eligible, key=len)


# ---------------------------------------------------------------------------
# Cleanup
# ---------------------------------------------------------------------------


def is_script_artifact(line: str) -> bool:
    return any(r.search(line) for r in _SCRIPT_ARTIFACT_RES)


def is_boilerplate(line: str) -> bool:
    return any(r.search(line) for r in _BOILERPLATE_RES)


def clean_content(text: str) -> str:
    """Drop script residue and boilerplate lines; other lines pass unchanged."""
    kept = [
        line
        for line in text.split("\n")
        if not (is_script_artifact(line) or is_boilerplate(line))
    ]
    return _BLANK_RUN_RE.sub("\n\n", "\n".join(kept)).strip("\n")


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------


def html_title(soup: BeautifulSoup) -> str:
    if soup.title and soup.title.string:
        return soup.title.string.strip()
    return ""


def first_heading(soup: BeautifulSoup, name: str = "h1") -> str:
    tag = soup.find(name)
    return tag.get_text(strip=True) if tag else ""


def split_page_title(raw: str) -> tuple[str, str]:
    """Split a page ``<title>`` into ``(title, artist)``.

    The first segment is the song title, the second the artist with any
    trailing type words ("Chords", "Tab", "コード", ...) removed.  Further
    segments are site branding and are dropped::

        "Song Name - Artist Name - SiteBrand Tab"  ->  ("Song Name", "Artist Name")
    """
    parts = [p.strip() for p in TITLE_SEP_RE.split(raw or "") if p.strip()]
    if not parts:
        return "", ""
    title = parts[0]
    artist = strip_type_suffix(parts[1]) if len(parts) > 1 else ""
    return title, artist


def strip_type_suffix(text: str) -> str:
    return _TYPE_SUFFIX_RE.sub("", text).strip()

"""Chord text embedded as string literals in page scripts.

Some sites ship the whole song as data inside ``<script>`` and draw it in
the browser.  Rather than parse the script, this module treats it as a
soup of string literals and keeps the ones that read like ChordPro lines::

    var song = ["[Am]最初の歌詞[G]続き", "[C]次の行", ...];

Steps:

  1. Collect every ``<script>`` body.
  2. Pull out double-quoted literals, honouring backslash escapes.
  3. Unescape ``\\n \\r \\t \\" \\' \\\\ \\/`` and ``\\uXXXX``.  Surrogate
     pairs become one code point; a lone surrogate becomes U+FFFD.
  4. Keep literals of ``MIN_STRING_LENGTH``+ chars that contain a
     bracketed chord marker (``[Am]``, ``[G/B]``, ``[Cadd9]``).
  5. Deduplicate, rank by length, keep the top ``MAX_STRINGS``, reverse
     to get back roughly to document order, join with newlines.

This is best-effort pattern matching, not a script parser.  Literals that
contain a stray unescaped quote (inside a comment, say) can derail it.
"""

import re

from bs4 import BeautifulSoup

MIN_STRING_LENGTH = 20
MAX_STRINGS = 200

_DOUBLE_QUOTED_RE = re.compile(r'"([^"\\]*(?:\\.[^"\\]*)*)"', re.DOTALL)
_ESCAPE_RE = re.compile(
    r"\\(u[dD][89abAB][0-9a-fA-F]{2}\\u[dD][c-fC-F][0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|.)",
    re.DOTALL,
)
_BLANK_RUN_RE = re.compile(r"\n{3,}")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
}

BRACKETED_CHORD_RE = re.compile(
    r"\[[A-G](?:#|b)?(?:m|maj7?|m7|7|sus[24]?|dim|aug|add9?|M7)?(?:/[A-G](?:#|b)?)?\]"
)


def script_bodies(soup: BeautifulSoup) -> list[str]:
    bodies = (script.string or script.get_text() for script in soup.find_all("script"))
    return [body for body in bodies if body]


def string_literals(script: str) -> list[str]:
    """Return the raw (still escaped) contents of double-quoted literals."""
    return _DOUBLE_QUOTED_RE.findall(script)


def unescape_js(s: str) -> str:
    """Resolve JS escape sequences in one pass; unknown escapes are kept."""

    def _replace(m: re.Match) -> str:
        seq = m.group(1)
        if len(seq) == 11:  # uD8xx\uDCxx surrogate pair
            high, low = int(seq[1:5], 16), int(seq[7:], 16)
            return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))
        if len(seq) == 5:  # uXXXX
            code = int(seq[1:], 16)
            # a lone surrogate cannot be encoded as UTF-8
            return "\ufffd" if 0xD800 <= code <= 0xDFFF else chr(code)
        return _SIMPLE_ESCAPES.get(seq, m.group(0))

    return _ESCAPE_RE.sub(_replace, s)


def looks_like_chord_line(s: str) -> bool:
    return BRACKETED_CHORD_RE.search(s) is not None


def chord_strings(scripts: list[str]) -> list[str]:
    """Unescaped chord-bearing literals from *scripts*, deduplicated, in order."""
    seen: dict[str, None] = {}
    for script in scripts:
        for raw in string_literals(script):
            s = unescape_js(raw)
            if len(s) >= MIN_STRING_LENGTH and looks_like_chord_line(s):
                seen.setdefault(s, None)
    return list(seen)


def assemble(chunks: list[str]) -> str:
    """Length-rank *chunks*, keep the top ``MAX_STRINGS`` and rejoin them."""
    ranked = sorted(chunks, key=len, reverse=True)[:MAX_STRINGS]
    ranked.reverse()
    return _BLANK_RUN_RE.sub("\n\n", "\n".join(ranked)).strip()


def extract_script_chords(soup: BeautifulSoup) -> str:
    return assemble(chord_strings(script_bodies(soup)))

"""Extraction quality gate.

An extraction is considered usable when it has at least ``MIN_LINES``
non-blank lines and chord names make up more than ``MIN_CHORD_RATIO`` of
its whitespace-delimited tokens.  Callers use ``valid`` to decide between
showing the result and sending the user to the original page.
"""

from .classifier import CHORD_TOKEN_RE
from .models import Validation

MIN_LINES = 20
MIN_CHORD_RATIO = 0.05


def validate(content: str) -> Validation:
    content = content or ""
    lines = sum(1 for line in content.splitlines() if line.strip())
    tokens = content.split()
    if not tokens:
        return Validation(lines=lines, chord_ratio=0.0, valid=False)

    chord_ratio = len(CHORD_TOKEN_RE.findall(content)) / len(tokens)
    return Validation(
        lines=lines,
        chord_ratio=chord_ratio,
        valid=lines >= MIN_LINES and chord_ratio > MIN_CHORD_RATIO,
    )

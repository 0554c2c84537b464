"""ChordPro rendering of extraction results.

Output layout::

    {title: Song}
    {artist: Artist}
    {key: Am}              only when known
    {capo: 2}              only when known and non-zero
    {comment: Source j-total.net}

    <extracted content, verbatim>

Inline ``[C]`` chords already are ChordPro; chord-over-lyric sheets are
left as they are, since re-aligning them would need the original column
layout that HTML flattening does not always keep.

Usage::

    from tabgather.chordpro import ChordProFormatter
    text = ChordProFormatter().render(result)
    Path("output.cho").write_text(text)
"""

from .models import ExtractionResult


class ChordProFormatter:
    """Render an :class:`~tabgather.models.ExtractionResult` to ChordPro text."""

    def render(self, result: ExtractionResult) -> str:
        """Return ChordPro text for *result*.

        The returned string ends with a single newline and uses Unix line
        endings throughout.
        """
        parts: list[str] = [
            f"{{title: {result.title}}}",
            f"{{artist: {result.artist}}}",
        ]
        if result.key:
            parts.append(f"{{key: {result.key}}}")
        if result.capo:
            parts.append(f"{{capo: {result.capo}}}")
        if result.source:
            parts.append(f"{{comment: Source {result.source}}}")

        content = result.content.replace("\r\n", "\n").strip("\n")
        if content:
            parts.append("")
            parts.append(content)

        return "\n".join(parts) + "\n"

from dataclasses import dataclass, field
from enum import Enum


class ParseMode(Enum):
    """How a site's pages can be turned into tab text."""

    SERVER = "server"  # plain HTML carries the tab
    CLIENT = "client"  # tab is rendered by page scripts, but the data is in the HTML
    REDIRECT = "redirect"  # nothing extractable; send the user to the page


class TabType(Enum):
    CHORD = "Chord"
    TAB = "Tab"
    FINGERSTYLE = "Fingerstyle"
    UNKNOWN = "Unknown"


class TabFormat(Enum):
    PDF = "pdf"
    GP = "gp"  # Guitar Pro
    HTML = "html"
    VIDEO = "video"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class SiteFamily(Enum):
    """Extraction strategy a registered site is parsed with."""

    GENERIC = "generic"
    JTOTAL = "jtotal"
    CHORDWIKI = "chordwiki"
    UFRET = "ufret"
    ULTIMATE_GUITAR = "ultimate_guitar"
    SONGSTERR = "songsterr"
    CHORDIFY = "chordify"


@dataclass(frozen=True)
class SiteProfile:
    """Registry entry for one tab site."""

    domain: str
    parse_mode: ParseMode
    priority: int = 0
    default_type: TabType = TabType.UNKNOWN
    language: str = "en"
    family: SiteFamily = SiteFamily.GENERIC
    encoding: str | None = None  # e.g. "shift_jis"; None lets the fetcher decide
    notes: str = ""


@dataclass(frozen=True)
class Validation:
    lines: int = 0
    chord_ratio: float = 0.0
    valid: bool = False


@dataclass(frozen=True)
class Candidate:
    """A block of text produced by one extraction method."""

    text: str
    method: str = ""


@dataclass(frozen=True)
class PageMetadata:
    """Title/artist (and structured capo/key, when a page exposes them)."""

    title: str = ""
    artist: str = ""
    capo: int | None = None
    key: str | None = None


@dataclass(frozen=True)
class ExtractionResult:
    """Normalized record returned for every extraction call."""

    title: str = ""
    artist: str = ""
    type: TabType = TabType.UNKNOWN
    content: str = ""
    capo: int | None = None
    key: str | None = None
    parseable: bool = False
    redirect_only: bool = False
    validation: Validation = field(default_factory=Validation)
    message: str = ""
    source: str = ""
    method: str = ""

    def to_dict(self) -> dict:
        """Return a JSON-serialisable dict of the result."""
        return {
            "title": self.title,
            "artist": self.artist,
            "type": self.type.value,
            "content": self.content,
            "capo": self.capo,
            "key": self.key,
            "parseable": self.parseable,
            "redirect_only": self.redirect_only,
            "validation": {
                "lines": self.validation.lines,
                "chord_ratio": self.validation.chord_ratio,
                "valid": self.validation.valid,
            },
            "message": self.message,
            "source": self.source,
            "method": self.method,
        }

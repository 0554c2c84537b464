import logging
from abc import ABC, abstractmethod

from bs4 import BeautifulSoup

from ..models import Candidate, PageMetadata, SiteFamily
from .utils import ExtractionMethod, clean_content, code_text, first_match, page_text, pre_text

logger = logging.getLogger(__name__)

# Generic Extractor chain: every <pre>, else every <code>.
GENERIC_METHODS: list[ExtractionMethod] = [
    ("pre", pre_text),
    ("code", code_text),
]


class SiteAdapter(ABC):
    """Abstract base class for all site-specific adapters.

    An adapter is an ordered chain of extraction methods.  ``extract`` runs
    them until one clears ``min_length``, falls back to the generic
    ``<pre>``/``<code>`` chain when none does, and strips script residue and
    boilerplate from the winner.
    """

    family: SiteFamily = SiteFamily.GENERIC
    min_length: int = 20
    fallback_to_generic: bool = True
    clean: bool = True
    _page_text: str | None = None

    @abstractmethod
    def methods(self) -> list[ExtractionMethod]:
        """Return ``(name, fn)`` extraction methods in priority order."""

    @abstractmethod
    def metadata(self, soup: BeautifulSoup) -> PageMetadata:
        """Return title/artist (and any structured capo/key) for the page."""

    def extract(self, soup: BeautifulSoup, text: str | None = None) -> Candidate:
        """Run the method chain and return the winning block.

        *text* is the page's visible text when the caller already has it;
        methods that scan the whole page read it through :meth:`page_text`.
        Never raises for missing markup; returns an empty :class:`Candidate`
        when nothing was found.
        """
        self._page_text = text
        candidate = first_match(soup, self.methods(), self.min_length)
        if candidate is None and self.fallback_to_generic:
            logger.debug("%s: falling back to generic extraction", self.family.value)
            candidate = first_match(soup, GENERIC_METHODS, 1)
            if candidate is not None:
                candidate = Candidate(candidate.text, f"generic:{candidate.method}")
        if candidate is None:
            return Candidate(text="")
        if self.clean:
            return Candidate(clean_content(candidate.text), candidate.method)
        return candidate

    def page_text(self, soup: BeautifulSoup) -> str:
        """Visible text of *soup*, computed at most once per :meth:`extract`."""
        if self._page_text is None:
            self._page_text = page_text(soup)
        return self._page_text

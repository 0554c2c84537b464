"""Generic Extractor for sites with no registry entry.

Tab sites that the registry does not know about usually still put the tab
in a monospace block, so the whole strategy is:

    <pre> ... </pre>      every block, joined by a blank line
    <code> ... </code>    only if there was no <pre> text

Title and artist come from ``<title>`` split on the usual separators.
"""

from bs4 import BeautifulSoup

from ..models import PageMetadata, SiteFamily
from .base import GENERIC_METHODS, SiteAdapter
from .utils import ExtractionMethod, html_title, split_page_title


class GenericAdapter(SiteAdapter):
    """Adapter used for unregistered sites and generic-family profiles."""

    family = SiteFamily.GENERIC
    min_length = 1
    fallback_to_generic = False
    clean = False

    def methods(self) -> list[ExtractionMethod]:
        return list(GENERIC_METHODS)

    def metadata(self, soup: BeautifulSoup) -> PageMetadata:
        title, artist = split_page_title(html_title(soup))
        return PageMetadata(title=title, artist=artist)

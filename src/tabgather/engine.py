"""Extraction engine entry point.

    html, source_url
        -> registry.resolve()         site profile (or None)
        -> redirect-only?             short-circuit, no extractor runs
        -> page_text()                visible text, computed once
        -> adapter.extract()          per-site method chain / generic
        -> classify()                 type, capo, key (page text for capo)
        -> validate()                 lines, chord ratio, valid
        -> ExtractionResult

:func:`parse_tab_from_html` never raises.  Missing markup is absorbed by
the adapters' fallback chains; anything unexpected is logged and degraded
to an empty result.  Network failures only surface from :meth:`TabEngine.scrape`.
"""

import logging

import httpx
from bs4 import BeautifulSoup

from .adapters.utils import html_title, page_text, split_page_title
from .classifier import classify
from .fetch import DEFAULT_TIMEOUT, fetch_html
from .models import ExtractionResult, ParseMode, SiteProfile
from .registry import DEFAULT_REGISTRY, SiteRegistry, get_adapter, hostname
from .validator import validate

logger = logging.getLogger(__name__)

REDIRECT_MESSAGE = "This site must be viewed on the original page"

# Shorter content is returned but not offered as a parsed tab.
MIN_PARSEABLE_LENGTH = 50


class TabEngine:
    """Turns fetched HTML into :class:`~tabgather.models.ExtractionResult` records."""

    def __init__(self, registry: SiteRegistry | None = None):
        self.registry = registry or DEFAULT_REGISTRY

    def parse(self, html: str, source_url: str) -> ExtractionResult:
        """Extract a tab from *html* fetched from *source_url*."""
        profile = self.registry.resolve(source_url)
        source = profile.domain if profile else hostname(source_url)
        redirect = profile is not None and profile.parse_mode is ParseMode.REDIRECT

        try:
            soup = BeautifulSoup(html or "", "html.parser")
            if redirect:
                return self._redirect_result(soup, source)
            return self._extract(soup, profile, source)
        except Exception:
            logger.exception("extraction failed for %s", source_url)
            return ExtractionResult(
                redirect_only=redirect,
                message=REDIRECT_MESSAGE if redirect else "",
                source=source,
            )

    def scrape(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> ExtractionResult:
        """Convenience method: fetch + parse.

        Raises FetchError when the page cannot be fetched.
        """
        html = fetch_html(url, profile=self.registry.resolve(url), timeout=timeout, client=client)
        return self.parse(html, url)

    def _redirect_result(self, soup: BeautifulSoup, source: str) -> ExtractionResult:
        logger.info("%s is redirect-only; skipping extraction", source)
        title, _ = split_page_title(html_title(soup))
        return ExtractionResult(
            title=title,
            redirect_only=True,
            message=REDIRECT_MESSAGE,
            source=source,
        )

    def _extract(
        self, soup: BeautifulSoup, profile: SiteProfile | None, source: str
    ) -> ExtractionResult:
        adapter = get_adapter(profile)
        meta = adapter.metadata(soup)
        text = page_text(soup)
        candidate = adapter.extract(soup, text)
        content = candidate.text

        hints = classify(content, text)
        validation = validate(content)
        logger.debug(
            "%s: %s via %s, %d lines, chord ratio %.3f",
            source or "<unknown>",
            hints.type.value,
            candidate.method or "-",
            validation.lines,
            validation.chord_ratio,
        )
        return ExtractionResult(
            title=meta.title,
            artist=meta.artist,
            type=hints.type,
            content=content,
            capo=meta.capo if meta.capo is not None else hints.capo,
            key=meta.key or hints.key,
            parseable=len(content) > MIN_PARSEABLE_LENGTH,
            validation=validation,
            source=source,
            method=candidate.method if content else "",
        )


def parse_tab_from_html(
    html: str, source_url: str, registry: SiteRegistry | None = None
) -> ExtractionResult:
    """Extract a tab from *html*; see :meth:`TabEngine.parse`."""
    return TabEngine(registry).parse(html, source_url)


def is_parseable(url: str, registry: SiteRegistry | None = None) -> bool:
    """True when *url*'s site is registered as server- or client-parseable."""
    return (registry or DEFAULT_REGISTRY).is_parseable(url)

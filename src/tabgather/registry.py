"""Site registry: hostname -> :class:`~tabgather.models.SiteProfile`.

The registry is built once and handed to the engine; it is never mutated.
``with_overrides`` and ``from_yaml`` return new registries.

Override file format (YAML)::

    sites:
      ultimate-guitar.com:
        parse_mode: server        # server | client | redirect
      example-tabs.com:
        parse_mode: server
        priority: 55
        default_type: Tab
        language: en
        family: generic
      songsterr.com: null         # drop the entry

Hostname matching: a leading ``www.`` is ignored, an exact domain match
wins, otherwise the longest registered domain that the hostname ends with
or contains.
"""

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from urllib.parse import urlparse

import yaml

from .adapters.base import SiteAdapter
from .adapters.canvas import ChordifyAdapter, SongsterrAdapter
from .adapters.chordwiki import ChordWikiAdapter
from .adapters.generic import GenericAdapter
from .adapters.jtotal import JTotalAdapter
from .adapters.ufret import UFretAdapter
from .adapters.ultimate_guitar import UltimateGuitarAdapter
from .exceptions import ConfigError
from .models import ParseMode, SiteFamily, SiteProfile, TabType

logger = logging.getLogger(__name__)

DEFAULT_SITES: tuple[SiteProfile, ...] = (
    SiteProfile(
        domain="j-total.net",
        parse_mode=ParseMode.SERVER,
        priority=100,
        default_type=TabType.CHORD,
        language="ja",
        family=SiteFamily.JTOTAL,
        encoding="shift_jis",
        notes="Main Japanese chord source; plain HTML.",
    ),
    SiteProfile(
        domain="ufret.jp",
        parse_mode=ParseMode.CLIENT,
        priority=90,
        default_type=TabType.CHORD,
        language="ja",
        family=SiteFamily.UFRET,
        notes="Chords rendered by script; data embedded as string literals.",
    ),
    SiteProfile(
        domain="chordwiki.jpn.org",
        parse_mode=ParseMode.CLIENT,
        priority=85,
        default_type=TabType.CHORD,
        language="ja",
        family=SiteFamily.CHORDWIKI,
        notes="Cloudflare in front; pages saved from a browser parse fine.",
    ),
    SiteProfile(
        domain="gakufu.gakki.me",
        parse_mode=ParseMode.SERVER,
        priority=70,
        default_type=TabType.CHORD,
        language="ja",
        family=SiteFamily.GENERIC,
    ),
    SiteProfile(
        domain="ultimate-guitar.com",
        parse_mode=ParseMode.REDIRECT,
        priority=60,
        default_type=TabType.CHORD,
        language="en",
        family=SiteFamily.ULTIMATE_GUITAR,
        notes="Cloudflare in front; link only.",
    ),
    SiteProfile(
        domain="guitartabs.cc",
        parse_mode=ParseMode.SERVER,
        priority=50,
        default_type=TabType.TAB,
        language="en",
        family=SiteFamily.GENERIC,
    ),
    SiteProfile(
        domain="songsterr.com",
        parse_mode=ParseMode.REDIRECT,
        priority=40,
        default_type=TabType.TAB,
        language="en",
        family=SiteFamily.SONGSTERR,
        notes="Canvas rendering; nothing to extract.",
    ),
    SiteProfile(
        domain="chordify.net",
        parse_mode=ParseMode.REDIRECT,
        priority=30,
        default_type=TabType.CHORD,
        language="en",
        family=SiteFamily.CHORDIFY,
        notes="Chord grid rendered in the browser.",
    ),
)

_ADAPTERS: dict[SiteFamily, type[SiteAdapter]] = {
    SiteFamily.GENERIC: GenericAdapter,
    SiteFamily.JTOTAL: JTotalAdapter,
    SiteFamily.CHORDWIKI: ChordWikiAdapter,
    SiteFamily.UFRET: UFretAdapter,
    SiteFamily.ULTIMATE_GUITAR: UltimateGuitarAdapter,
    SiteFamily.SONGSTERR: SongsterrAdapter,
    SiteFamily.CHORDIFY: ChordifyAdapter,
}

_PROFILE_FIELDS = {"parse_mode", "priority", "default_type", "language", "family", "encoding", "notes"}


def get_adapter(profile: SiteProfile | None) -> SiteAdapter:
    """Return an instantiated adapter for *profile* (generic for ``None``)."""
    family = profile.family if profile else SiteFamily.GENERIC
    return _ADAPTERS[family]()


def hostname(url: str) -> str:
    """Lower-cased hostname of *url* without a leading ``www.``; ``""`` if none."""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    if host.startswith("www."):
        host = host[4:]
    return host


class SiteRegistry:
    """Immutable table of known tab sites."""

    def __init__(self, profiles: Iterable[SiteProfile]):
        self._profiles: Mapping[str, SiteProfile] = MappingProxyType(
            {p.domain.lower(): p for p in profiles}
        )

    @classmethod
    def default(cls) -> "SiteRegistry":
        return cls(DEFAULT_SITES)

    @classmethod
    def from_yaml(cls, path: str | Path, base: "SiteRegistry | None" = None) -> "SiteRegistry":
        """Load overrides from a YAML file on top of *base* (default table)."""
        base = base or cls.default()
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as exc:
            raise ConfigError(str(path), exc.strerror or str(exc)) from exc
        except yaml.YAMLError as exc:
            raise ConfigError(str(path), f"not valid YAML ({exc})") from exc

        if data is None:
            return base
        sites = (data.get("sites") or {}) if isinstance(data, dict) else None
        if not isinstance(sites, dict):
            raise ConfigError(str(path), "expected a mapping with a 'sites' mapping")
        return base.with_overrides(sites, source=str(path))

    def with_overrides(
        self, overrides: Mapping[str, Mapping | None], source: str = "<overrides>"
    ) -> "SiteRegistry":
        """Return a new registry with *overrides* applied.

        Each key is a domain; the value updates (or creates) that profile.
        A ``None`` value removes the domain.
        """
        profiles = dict(self._profiles)
        for domain, fields in overrides.items():
            domain = str(domain).lower()
            if domain.startswith("www."):
                domain = domain[4:]
            if fields is None:
                profiles.pop(domain, None)
                continue
            profiles[domain] = _merge_profile(domain, fields, profiles.get(domain), source)
            logger.debug("site profile %s overridden from %s", domain, source)
        return SiteRegistry(profiles.values())

    @property
    def profiles(self) -> Mapping[str, SiteProfile]:
        return self._profiles

    def resolve(self, url: str) -> SiteProfile | None:
        """Return the profile for *url*'s host, or ``None`` when unregistered."""
        host = hostname(url)
        if not host:
            return None
        exact = self._profiles.get(host)
        if exact is not None:
            return exact
        matches = [
            profile
            for domain, profile in self._profiles.items()
            if host.endswith(domain) or domain in host
        ]
        if not matches:
            return None
        return max(matches, key=lambda p: len(p.domain))

    def priority(self, url: str) -> int:
        profile = self.resolve(url)
        return profile.priority if profile else 0

    def is_server_parseable(self, url: str) -> bool:
        profile = self.resolve(url)
        return profile is not None and profile.parse_mode is ParseMode.SERVER

    def is_parseable(self, url: str) -> bool:
        """True for sites whose HTML carries the tab (server or client mode)."""
        profile = self.resolve(url)
        return profile is not None and profile.parse_mode in (ParseMode.SERVER, ParseMode.CLIENT)


DEFAULT_REGISTRY = SiteRegistry(DEFAULT_SITES)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _merge_profile(
    domain: str, fields: Mapping, current: SiteProfile | None, source: str
) -> SiteProfile:
    if not isinstance(fields, Mapping):
        raise ConfigError(source, f"{domain}: expected a mapping of profile fields")
    unknown = set(fields) - _PROFILE_FIELDS
    if unknown:
        raise ConfigError(source, f"{domain}: unknown field(s) {', '.join(sorted(unknown))}")
    if current is None and "parse_mode" not in fields:
        raise ConfigError(source, f"{domain}: new sites need a parse_mode")

    changes: dict = {}
    try:
        if "parse_mode" in fields:
            changes["parse_mode"] = ParseMode(str(fields["parse_mode"]).lower())
        if "priority" in fields:
            changes["priority"] = int(fields["priority"])
        if "default_type" in fields:
            changes["default_type"] = _tab_type(fields["default_type"])
        if "family" in fields:
            changes["family"] = SiteFamily(str(fields["family"]).lower())
    except (TypeError, ValueError) as exc:
        raise ConfigError(source, f"{domain}: {exc}") from exc
    for name in ("language", "notes"):
        if name in fields:
            changes[name] = str(fields[name] or "")
    if "encoding" in fields:
        changes["encoding"] = str(fields["encoding"]) if fields["encoding"] else None

    if current is None:
        return SiteProfile(domain=domain, **changes)
    return dataclasses.replace(current, **changes)


def _tab_type(value) -> TabType:
    text = str(value).lower()
    for tab_type in TabType:
        if tab_type.value.lower() == text:
            return tab_type
    raise ValueError(f"unknown tab type {value!r}")

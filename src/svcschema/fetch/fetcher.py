"""Fetch a service's raw specification, consulting the spec cache first.

:class:`SpecFetcher` is the boundary between the pure engine and the outside
world. It expands the configured source templates for a service, loads the
document (and an optional paginator document), and caches the merged result.

Only remote documents at a pinned version are cached. Local files and stdin
are always re-read, and so is the unpinned ``latest`` version, whose content
may change upstream at any time. The cache key includes both expanded
locations, so switching ``--source`` never serves a document fetched from
somewhere else.

Paginator documents use the botocore layout
(``{"pagination": {"ListBuckets": {"input_token": ...}}}``); their entries
are re-keyed by canonical operation name while merging, because that is how
the pagination detector looks them up. Entries already present in the raw
spec's own ``pagination`` map take precedence.
"""

from __future__ import annotations

from typing import Any, Optional

from svcschema.engine.operations import canonical_name
from svcschema.exceptions import ConfigError, FetchError, SpecParseError
from svcschema.fetch.cache import SpecCache
from svcschema.fetch.loader import load_spec
from svcschema.models import SourceConfig
from svcschema.output import debug

UNPINNED_VERSION = "latest"

_REMOTE_PREFIXES = ("http://", "https://")


class SpecFetcher:
    """Resolve service names to raw specification dicts.

    Args:
        source: Source templates, version, and timeout.
        cache: Optional :class:`~svcschema.fetch.cache.SpecCache`. ``None``
            disables caching.
    """

    def __init__(self, source: SourceConfig, cache: Optional[SpecCache] = None) -> None:
        self._source = source
        self._cache = cache

    @property
    def version(self) -> str:
        return self._source.version

    def fetch(self, service: str) -> dict[str, Any]:
        """Return the raw spec for *service*.

        Raises:
            FetchError: If the spec (or the configured paginator document)
                cannot be retrieved or parsed.
            ConfigError: If a source template is malformed.
        """
        version = self._source.version
        location = self.spec_location(service)
        paginators_location = None
        if self._source.paginators_template:
            paginators_location = self._expand(self._source.paginators_template, service)

        cache_source = self._cache_source(location, paginators_location)
        if cache_source is not None:
            cached = self._cache.get(service, version, source=cache_source)
            if cached is not None:
                debug(f"Spec cache hit: {service}@{version} from {location}")
                return cached

        debug(f"Loading spec for {service} from {location}")
        raw = self._load(service, location)

        if paginators_location is not None:
            debug(f"Loading paginators for {service} from {paginators_location}")
            raw = merge_paginators(raw, self._load(service, paginators_location))

        if cache_source is not None:
            self._cache.set(service, version, raw, source=cache_source)
        return raw

    def spec_location(self, service: str) -> str:
        return self._expand(self._source.spec_template, service)

    def _cache_source(self, location: str, paginators_location: Optional[str]) -> Optional[str]:
        """Cache key component for these locations, or ``None`` when not cacheable."""
        if self._cache is None or not self._cache.enabled:
            return None
        if self._source.version == UNPINNED_VERSION:
            return None
        locations = [location] if paginators_location is None else [location, paginators_location]
        if not all(loc.startswith(_REMOTE_PREFIXES) for loc in locations):
            return None
        return "|".join(locations)

    def _expand(self, template: str, service: str) -> str:
        try:
            return template.format(service=service, version=self._source.version)
        except (KeyError, IndexError, ValueError) as exc:
            raise ConfigError(f"Invalid source template '{template}': {exc}") from exc

    def _load(self, service: str, location: str) -> dict[str, Any]:
        try:
            return load_spec(location, timeout=self._source.timeout)
        except (FetchError, SpecParseError) as exc:
            raise FetchError(f"Cannot fetch spec for '{service}': {exc}") from exc


def merge_paginators(raw_spec: dict[str, Any], paginators: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *raw_spec* with paginator entries merged into ``pagination``.

    Args:
        raw_spec: The raw service spec.
        paginators: A paginator document whose ``pagination`` map is keyed by
            upstream operation name.

    Returns:
        A new top-level dict; the input is not modified.
    """
    entries = paginators.get("pagination")
    if not isinstance(entries, dict):
        return raw_spec

    existing = raw_spec.get("pagination")
    merged: dict[str, Any] = {}
    for name, config in entries.items():
        merged[canonical_name(str(name))] = config
    if isinstance(existing, dict):
        merged.update(existing)

    return {**raw_spec, "pagination": merged}

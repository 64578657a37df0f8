"""Raw spec fetch boundary -- load, cache, and merge upstream documents.

* :mod:`~svcschema.fetch.loader` -- I/O layer (URL, file, stdin) with
  JSON/YAML detection.
* :mod:`~svcschema.fetch.cache` -- :class:`SpecCache`, a diskcache store
  keyed by ``(service, version)``.
* :mod:`~svcschema.fetch.fetcher` -- :class:`SpecFetcher`, which expands
  source templates and ties loader and cache together.
"""

from svcschema.fetch.cache import SpecCache
from svcschema.fetch.fetcher import SpecFetcher, merge_paginators
from svcschema.fetch.loader import load_spec

__all__ = ["SpecCache", "SpecFetcher", "load_spec", "merge_paginators"]

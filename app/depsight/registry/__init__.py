"""Registry access for depsight.

This module exports the metadata service and its cache.
"""

from depsight.registry.cache import MetadataCache
from depsight.registry.metadata import MetadataService, RegistryError, parse_registry_document

__all__ = ["MetadataCache", "MetadataService", "RegistryError", "parse_registry_document"]

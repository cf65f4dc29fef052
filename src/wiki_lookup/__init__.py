"""Open wiki pages for Minecraft items, mobs, biomes and mods."""

from .catalog import Identifier, IdentifierCatalog, InMemoryIdentifierCatalog, ItemEntry
from .config import ConfigStore, WikiLookupConfig
from .lookup import WikiLookup
from .resolver import DEFAULT_WIKI, QueryResolver, ResolvedQuery, build_url

__all__ = [
    "DEFAULT_WIKI",
    "ConfigStore",
    "Identifier",
    "IdentifierCatalog",
    "InMemoryIdentifierCatalog",
    "ItemEntry",
    "QueryResolver",
    "ResolvedQuery",
    "WikiLookup",
    "WikiLookupConfig",
    "build_url",
]

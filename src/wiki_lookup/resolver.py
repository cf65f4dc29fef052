"""Query-to-URL resolution against the configured wiki map."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote_plus

from wiki_lookup.catalog import IdentifierCatalog

DEFAULT_WIKI = "_"
PLACEHOLDER = "{}"
MAIN_PAGE = "Main_Page"
MINECRAFT_WIKI_URL = "https://minecraft.wiki/w/Special:Search?search={}"
FANDOM_WIKI_URL = "https://minecraft.fandom.com/wiki/Special:Search?go=Search&search={}"

WikiMap = Mapping[str, str]

logger = logging.getLogger("wiki_lookup.resolver")


class ResolutionStage(str, Enum):
    """Which step picked the namespace for a query."""

    EXPLICIT = "explicit"
    NAMESPACE = "namespace"
    ITEM = "item"
    ENTITY = "entity"
    BIOME = "biome"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ResolvedQuery:
    namespace: str
    encoded_query: str
    url: str
    stage: ResolutionStage


def format_as_id(query: str) -> str:
    """Canonical identifier form: lower-cased, spaces as underscores."""
    return query.lower().replace(" ", "_")


def encode_query(query: str) -> str:
    """Form-encode a query ("Iron Sword" -> "Iron+Sword")."""
    return quote_plus(query, encoding="utf-8", errors="replace")


def select_template(namespace: str, wiki_map: WikiMap) -> str:
    if namespace in wiki_map:
        return wiki_map[namespace]
    if DEFAULT_WIKI in wiki_map:
        return wiki_map[DEFAULT_WIKI]
    return MINECRAFT_WIKI_URL


def fill_template(template: str, value: str) -> str:
    """Substitute ``value`` into the template placeholder.

    A template without a placeholder is returned verbatim.
    """
    if PLACEHOLDER not in template:
        logger.warning("template_missing_placeholder", extra={"template": template})
        return template
    return template.replace(PLACEHOLDER, value, 1)


def build_url(namespace: str, query: str, wiki_map: WikiMap) -> str:
    """Build the wiki URL for ``query`` using the template configured for ``namespace``."""
    return fill_template(select_template(namespace, wiki_map), encode_query(query))


class QueryResolver:
    """Guesses which configured wiki a free-text query belongs to.

    Stages run in priority order and the first hit wins:

    1. the canonical query is itself a configured namespace (jump to its main page);
    2. the top hit of an item-name search;
    3. an exact entity-type path match;
    4. an exact biome path match.

    Anything else falls back to the default wiki.
    """

    def __init__(
        self,
        wiki_map: WikiMap,
        catalog: IdentifierCatalog,
        *,
        attempt_resolution: bool = True,
    ) -> None:
        self._wiki_map = wiki_map
        self._catalog = catalog
        self._attempt_resolution = attempt_resolution

    @property
    def wiki_map(self) -> WikiMap:
        return self._wiki_map

    def resolve(self, query: str) -> str:
        return self._resolve_stage(query)[0]

    def resolve_query(self, query: str, namespace: str = DEFAULT_WIKI) -> ResolvedQuery:
        if namespace != DEFAULT_WIKI or not self._attempt_resolution:
            encoded = encode_query(query)
            return ResolvedQuery(
                namespace=namespace,
                encoded_query=encoded,
                url=fill_template(select_template(namespace, self._wiki_map), encoded),
                stage=ResolutionStage.EXPLICIT,
            )

        resolved_namespace, stage = self._resolve_stage(query)
        if stage is ResolutionStage.NAMESPACE:
            return ResolvedQuery(
                namespace=resolved_namespace,
                encoded_query=MAIN_PAGE,
                url=fill_template(self._wiki_map[resolved_namespace], MAIN_PAGE),
                stage=stage,
            )

        encoded = encode_query(query)
        return ResolvedQuery(
            namespace=resolved_namespace,
            encoded_query=encoded,
            url=fill_template(select_template(resolved_namespace, self._wiki_map), encoded),
            stage=stage,
        )

    def _resolve_stage(self, query: str) -> tuple[str, ResolutionStage]:
        query_id = format_as_id(query)

        if query_id in self._wiki_map:
            return query_id, ResolutionStage.NAMESPACE

        results = self._catalog.search_items(query.lower())
        if results:
            return results[0].identifier.namespace, ResolutionStage.ITEM

        # TODO: rank living entities ahead of projectiles and other non-mob entity types.
        for identifier in self._catalog.entity_types():
            if identifier.path == query_id:
                return identifier.namespace, ResolutionStage.ENTITY

        for identifier in self._catalog.biomes():
            if identifier.path == query_id:
                return identifier.namespace, ResolutionStage.BIOME

        logger.debug("resolution_fallback", extra={"query": query})
        return DEFAULT_WIKI, ResolutionStage.DEFAULT

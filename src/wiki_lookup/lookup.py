"""Wiki lookup service tying query resolution to the browser opener."""

from __future__ import annotations

import logging
from typing import Callable

from wiki_lookup.catalog import EmptyIdentifierCatalog, IdentifierCatalog
from wiki_lookup.config import ConfigStore, WikiLookupConfig
from wiki_lookup.errors import InvalidUrlError
from wiki_lookup.opener import REDIRECT_TEMPLATE, BrowserOpener, UrlOpener
from wiki_lookup.resolver import DEFAULT_WIKI, QueryResolver, ResolvedQuery


class WikiLookup:
    """Resolves a query against the current config snapshot and opens the wiki page."""

    def __init__(
        self,
        config_provider: Callable[[], WikiLookupConfig],
        *,
        catalog: IdentifierCatalog | None = None,
        browser: BrowserOpener | None = None,
        redirect_template: str = REDIRECT_TEMPLATE,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config_provider = config_provider
        self._catalog = catalog or EmptyIdentifierCatalog()
        self._browser = browser
        self._redirect_template = redirect_template
        self._logger = logger or logging.getLogger("wiki_lookup.lookup")

    @classmethod
    def from_config(cls, config: WikiLookupConfig, **kwargs) -> WikiLookup:
        return cls(lambda: config, **kwargs)

    @classmethod
    def from_store(cls, store: ConfigStore, **kwargs) -> WikiLookup:
        return cls(lambda: store.snapshot, **kwargs)

    def resolver(self, config: WikiLookupConfig | None = None) -> QueryResolver:
        if config is None:
            config = self._config_provider()
        return QueryResolver(
            config.wiki_definitions,
            self._catalog,
            attempt_resolution=config.attempt_wiki_resolution,
        )

    def resolve(self, query: str, namespace: str = DEFAULT_WIKI) -> ResolvedQuery:
        return self.resolver().resolve_query(query, namespace)

    def open_wiki(self, query: str, namespace: str = DEFAULT_WIKI) -> bool:
        """Open the wiki page for ``query``; ``False`` when the URL was rejected."""
        config = self._config_provider()
        resolved = self.resolver(config).resolve_query(query, namespace)
        opener = UrlOpener(
            self._browser,
            open_in_new_tab=config.open_in_new_tabs,
            redirect_template=self._redirect_template,
        )
        try:
            url = opener.open(resolved.url, query)
        except InvalidUrlError:
            self._logger.exception("wiki_open_rejected", extra={"url": resolved.url, "namespace": resolved.namespace})
            return False

        self._logger.info(
            "wiki_opened",
            extra={"url": url, "namespace": resolved.namespace, "stage": resolved.stage.value},
        )
        return True

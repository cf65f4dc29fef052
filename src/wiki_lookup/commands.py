"""In-game entry points: the ``/wiki`` chat command and the hovered-item hotkey."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from wiki_lookup.catalog import Identifier
from wiki_lookup.lookup import WikiLookup
from wiki_lookup.resolver import DEFAULT_WIKI

COMMAND_NAME = "wiki"
SUCCESS = 0
FAILURE = -1


@dataclass(frozen=True, slots=True)
class HoveredItem:
    """Item stack under the mouse in a container screen."""

    identifier: Identifier
    display_name: str


class HoveredItemSource(Protocol):
    """Host hook reporting the item under the mouse, if any."""

    def hovered_item(self) -> HoveredItem | None:
        """Return the hovered item or ``None`` outside container screens."""


class WikiCommand:
    """Handler for ``/wiki <query>`` with a greedy string argument."""

    def __init__(self, lookup: WikiLookup) -> None:
        self._lookup = lookup

    def execute(self, argument: str) -> int:
        query = argument.strip()
        if not query:
            return FAILURE
        return SUCCESS if self._lookup.open_wiki(query, DEFAULT_WIKI) else FAILURE


class HoveredItemLookup:
    """Key-binding handler that opens the wiki for the hovered item's own mod."""

    def __init__(self, lookup: WikiLookup, source: HoveredItemSource) -> None:
        self._lookup = lookup
        self._source = source

    def on_key_pressed(self) -> bool:
        item = self._source.hovered_item()
        if item is None:
            return False
        return self._lookup.open_wiki(item.display_name, item.identifier.namespace)

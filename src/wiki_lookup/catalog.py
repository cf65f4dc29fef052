"""Read-only identifier catalogs consulted during namespace auto-resolution.

The game client owns the real item/entity/biome registries. The resolver only needs a
narrow, queryable view of them, so hosts implement :class:`IdentifierCatalog` and tests
or the CLI use :class:`InMemoryIdentifierCatalog` built from a JSON snapshot.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError

from wiki_lookup.errors import CatalogError

DEFAULT_NAMESPACE = "minecraft"


@dataclass(frozen=True, slots=True)
class Identifier:
    """A ``namespace:path`` registry key."""

    namespace: str
    path: str

    @classmethod
    def parse(cls, raw: str) -> Identifier:
        namespace, sep, path = raw.strip().partition(":")
        if not sep:
            namespace, path = DEFAULT_NAMESPACE, namespace
        if not namespace or not path:
            raise ValueError(f"Invalid identifier: {raw!r}")
        return cls(namespace=namespace, path=path)

    def __str__(self) -> str:
        return f"{self.namespace}:{self.path}"


@dataclass(frozen=True, slots=True)
class ItemEntry:
    """An item registry key paired with its display name."""

    identifier: Identifier
    display_name: str


class IdentifierCatalog(Protocol):
    """Queryable snapshot of host registries."""

    def search_items(self, query: str) -> list[ItemEntry]:
        """Return items matching ``query``, most relevant first."""

    def entity_types(self) -> Iterable[Identifier]:
        """Enumerate known entity types."""

    def biomes(self) -> Iterable[Identifier]:
        """Enumerate known biomes."""


class EmptyIdentifierCatalog:
    """Catalog with no entries; auto-resolution then only matches configured namespaces."""

    def search_items(self, query: str) -> list[ItemEntry]:
        return []

    def entity_types(self) -> Iterable[Identifier]:
        return ()

    def biomes(self) -> Iterable[Identifier]:
        return ()


class InMemoryIdentifierCatalog:
    """Catalog over fixed item/entity/biome snapshots.

    Item search is a case-insensitive substring match over display names and paths.
    Results are ranked exact display-name match first, then display names starting with
    the query, then any other substring hit. Ties go to the shorter display name and
    then to the lexically smaller ``namespace:path``.
    """

    def __init__(
        self,
        items: Iterable[ItemEntry] = (),
        entity_types: Iterable[Identifier] = (),
        biomes: Iterable[Identifier] = (),
    ) -> None:
        self._items = tuple(items)
        self._entity_types = tuple(entity_types)
        self._biomes = tuple(biomes)

    def search_items(self, query: str) -> list[ItemEntry]:
        needle = query.strip().lower()
        if not needle:
            return []

        ranked: list[tuple[int, int, str, ItemEntry]] = []
        for item in self._items:
            name = item.display_name.lower()
            if name == needle:
                rank = 0
            elif name.startswith(needle):
                rank = 1
            elif needle in name or needle.replace(" ", "_") in item.identifier.path:
                rank = 2
            else:
                continue
            ranked.append((rank, len(item.display_name), str(item.identifier), item))

        ranked.sort(key=lambda entry: entry[:3])
        return [entry[3] for entry in ranked]

    def entity_types(self) -> Iterable[Identifier]:
        return self._entity_types

    def biomes(self) -> Iterable[Identifier]:
        return self._biomes


class _ItemRecord(BaseModel):
    id: str
    name: str


class _CatalogSnapshot(BaseModel):
    items: list[_ItemRecord] = Field(default_factory=list)
    entities: list[str] = Field(default_factory=list)
    biomes: list[str] = Field(default_factory=list)


def catalog_from_payload(payload: dict) -> InMemoryIdentifierCatalog:
    try:
        snapshot = _CatalogSnapshot.model_validate(payload)
        return InMemoryIdentifierCatalog(
            items=[ItemEntry(Identifier.parse(item.id), item.name) for item in snapshot.items],
            entity_types=[Identifier.parse(raw) for raw in snapshot.entities],
            biomes=[Identifier.parse(raw) for raw in snapshot.biomes],
        )
    except (ValidationError, ValueError) as exc:
        raise CatalogError(f"Invalid catalog snapshot: {exc}") from exc


def load_catalog(path: str | Path) -> InMemoryIdentifierCatalog:
    """Load a registry snapshot exported from the game client."""
    target = Path(path).expanduser()
    try:
        payload = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CatalogError(f"Unable to read catalog snapshot {target}: {exc}") from exc
    if not isinstance(payload, dict):
        raise CatalogError(f"Catalog snapshot {target} must be a JSON object")
    return catalog_from_payload(payload)

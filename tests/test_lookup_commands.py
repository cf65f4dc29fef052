from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import pytest

from wiki_lookup.catalog import Identifier, InMemoryIdentifierCatalog, ItemEntry
from wiki_lookup.commands import FAILURE, SUCCESS, HoveredItem, HoveredItemLookup, WikiCommand
from wiki_lookup.config import ConfigStore, WikiLookupConfig
from wiki_lookup.lookup import WikiLookup
from wiki_lookup.resolver import DEFAULT_WIKI, MINECRAFT_WIKI_URL

CREATE_WIKI = "https://create.fandom.com/wiki/Special:Search?search={}"


class RecordingBrowser:
    def __init__(self) -> None:
        self.uris: list[str] = []
        self.files: list[Path] = []

    def open_uri(self, url: str) -> None:
        self.uris.append(url)

    def open_file(self, path: Path) -> None:
        self.files.append(path)


class StubHoverSource:
    def __init__(self, item: HoveredItem | None) -> None:
        self.item = item

    def hovered_item(self) -> HoveredItem | None:
        return self.item


def _catalog() -> InMemoryIdentifierCatalog:
    return InMemoryIdentifierCatalog(items=[ItemEntry(Identifier("create", "brass_ingot"), "Brass Ingot")])


def _lookup(browser: RecordingBrowser, **options) -> WikiLookup:
    config = WikiLookupConfig(
        wiki_definitions=options.pop("wiki_definitions", {DEFAULT_WIKI: MINECRAFT_WIKI_URL, "create": CREATE_WIKI}),
        **options,
    )
    return WikiLookup.from_config(config, catalog=_catalog(), browser=browser)


def test_open_wiki_uses_auto_resolved_namespace() -> None:
    browser = RecordingBrowser()

    assert _lookup(browser).open_wiki("Brass Ingot") is True
    assert browser.uris == ["https://create.fandom.com/wiki/Special:Search?search=Brass+Ingot"]


def test_open_wiki_respects_disabled_resolution() -> None:
    browser = RecordingBrowser()

    assert _lookup(browser, attempt_wiki_resolution=False).open_wiki("Brass Ingot") is True
    assert browser.uris == ["https://minecraft.wiki/w/Special:Search?search=Brass+Ingot"]


def test_open_wiki_rejects_unsupported_scheme(caplog: pytest.LogCaptureFixture) -> None:
    browser = RecordingBrowser()
    lookup = _lookup(browser, wiki_definitions={DEFAULT_WIKI: "ftp://files.example/{}"})

    with caplog.at_level(logging.ERROR, logger="wiki_lookup.lookup"):
        assert lookup.open_wiki("Stone") is False

    assert browser.uris == []
    assert any(record.getMessage() == "wiki_open_rejected" for record in caplog.records)


def test_open_wiki_assumes_https_for_schemeless_template() -> None:
    browser = RecordingBrowser()
    lookup = _lookup(browser, wiki_definitions={DEFAULT_WIKI: "minecraft.wiki/w/Special:Search?search={}"})

    assert lookup.open_wiki("Stone") is True
    assert browser.uris == ["https://minecraft.wiki/w/Special:Search?search=Stone"]


def test_open_wiki_same_tab_uses_redirect_page(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    browser = RecordingBrowser()

    assert _lookup(browser, open_in_new_tabs=False).open_wiki("Stone") is True
    assert browser.uris == []
    assert len(browser.files) == 1


def test_lookup_from_store_follows_reload(tmp_path: Path) -> None:
    path = tmp_path / "wikilookup-common.toml"
    path.write_text('[client.options.wiki_definitions]\n_ = "https://one.example/{}"\n', encoding="utf-8")
    store = ConfigStore(path)
    browser = RecordingBrowser()
    lookup = WikiLookup.from_store(store, browser=browser)

    lookup.open_wiki("Stone")
    path.write_text('[client.options.wiki_definitions]\n_ = "https://two.example/{}"\n', encoding="utf-8")
    store.reload()
    lookup.open_wiki("Stone")

    assert browser.uris == ["https://one.example/Stone", "https://two.example/Stone"]


def test_wiki_command_status_codes() -> None:
    browser = RecordingBrowser()
    command = WikiCommand(_lookup(browser))

    assert command.execute("Iron Sword") == SUCCESS
    assert command.execute("   ") == FAILURE
    assert browser.uris == ["https://minecraft.wiki/w/Special:Search?search=Iron+Sword"]

    rejecting = WikiCommand(_lookup(RecordingBrowser(), wiki_definitions={DEFAULT_WIKI: "ftp://x/{}"}))
    assert rejecting.execute("Iron Sword") == FAILURE


def test_hovered_item_opens_its_own_mod_wiki() -> None:
    browser = RecordingBrowser()
    source = StubHoverSource(HoveredItem(Identifier("create", "cogwheel"), "Cogwheel"))

    assert HoveredItemLookup(_lookup(browser), source).on_key_pressed() is True
    assert browser.uris == ["https://create.fandom.com/wiki/Special:Search?search=Cogwheel"]


def test_hovered_item_from_unconfigured_mod_uses_default_wiki() -> None:
    browser = RecordingBrowser()
    source = StubHoverSource(HoveredItem(Identifier("minecraft", "iron_sword"), "Iron Sword"))

    HoveredItemLookup(_lookup(browser), source).on_key_pressed()

    assert browser.uris == ["https://minecraft.wiki/w/Special:Search?search=Iron+Sword"]


def test_key_press_without_hovered_item_does_nothing() -> None:
    browser = RecordingBrowser()

    assert HoveredItemLookup(_lookup(browser), StubHoverSource(None)).on_key_pressed() is False
    assert browser.uris == []


def test_open_wiki_handles_unencodable_query(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    browser = RecordingBrowser()

    assert _lookup(browser).open_wiki("Iron\udcffSword") is True
    assert _lookup(browser, open_in_new_tabs=False).open_wiki("Iron\udcffSword") is True
    assert browser.uris == [
        "https://minecraft.wiki/w/Special:Search?search=Iron%3FSword",
        "https://minecraft.wiki/w/Special:Search?search=Iron%3FSword",
    ]
    assert browser.files == []

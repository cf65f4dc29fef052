"""CLI entrypoint for Wiki Lookup."""

from __future__ import annotations

import typer
from rich import print

from wiki_lookup.catalog import EmptyIdentifierCatalog, IdentifierCatalog, load_catalog
from wiki_lookup.commands import FAILURE, SUCCESS, WikiCommand
from wiki_lookup.config import ConfigStore, clean_legacy_config, ensure_config_file, settings
from wiki_lookup.errors import WikiLookupError
from wiki_lookup.lookup import WikiLookup
from wiki_lookup.opener import validate_url
from wiki_lookup.resolver import DEFAULT_WIKI, ResolvedQuery
from wiki_lookup.telemetry import configure_logging

app = typer.Typer(help="Open wiki pages for Minecraft items, mobs, biomes and mods")


def _build_catalog(catalog_path: str | None) -> IdentifierCatalog:
    path = catalog_path or settings.catalog_path
    if not path:
        return EmptyIdentifierCatalog()
    return load_catalog(path)


def _build_lookup(config_path: str | None, catalog_path: str | None) -> WikiLookup:
    store = ConfigStore(config_path or settings.config_path)
    return WikiLookup.from_store(
        store,
        catalog=_build_catalog(catalog_path),
        redirect_template=settings.redirect_template,
    )


def _describe(resolved: ResolvedQuery) -> dict:
    return {
        "namespace": resolved.namespace,
        "stage": resolved.stage.value,
        "encoded_query": resolved.encoded_query,
        "url": resolved.url,
    }


@app.callback()
def main(log_level: str = typer.Option(None, help="Override WIKI_LOOKUP_LOG_LEVEL")) -> None:
    configure_logging(log_level or settings.log_level)


@app.command()
def wiki(
    query: list[str] = typer.Argument(..., help="Free-text query, e.g. Iron Sword"),
    namespace: str = typer.Option(DEFAULT_WIKI, "--namespace", "-n", help="Mod id whose wiki to use"),
    config_path: str = typer.Option(None, "--config", help="Path to the wiki definitions file"),
    catalog_path: str = typer.Option(None, "--catalog", help="Path to a JSON registry snapshot"),
    dry_run: bool = typer.Option(False, help="Print the resolved URL instead of opening it"),
) -> None:
    """Open the wiki page for a query."""
    text = " ".join(query)
    try:
        lookup = _build_lookup(config_path, catalog_path)
        if dry_run:
            resolved = lookup.resolve(text, namespace)
            print({**_describe(resolved), "url": validate_url(resolved.url)})
            return
    except WikiLookupError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)

    if namespace == DEFAULT_WIKI:
        status = WikiCommand(lookup).execute(text)
    else:
        status = SUCCESS if lookup.open_wiki(text, namespace) else FAILURE

    print({"query": text, "status": status})
    if status != SUCCESS:
        raise typer.Exit(code=1)


@app.command()
def resolve(
    query: list[str] = typer.Argument(..., help="Free-text query"),
    namespace: str = typer.Option(DEFAULT_WIKI, "--namespace", "-n"),
    config_path: str = typer.Option(None, "--config"),
    catalog_path: str = typer.Option(None, "--catalog"),
) -> None:
    """Show which wiki a query resolves to without opening it."""
    try:
        resolved = _build_lookup(config_path, catalog_path).resolve(" ".join(query), namespace)
    except WikiLookupError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)
    print(_describe(resolved))


@app.command("show-config")
def show_config(config_path: str = typer.Option(None, "--config")) -> None:
    """Show runtime settings and the effective wiki definitions."""
    path = config_path or settings.config_path
    try:
        config = ConfigStore(path).snapshot
    except WikiLookupError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)
    print(
        {
            "app_name": settings.app_name,
            "config_path": path,
            "catalog_path": settings.catalog_path,
            "open_in_new_tabs": config.open_in_new_tabs,
            "attempt_wiki_resolution": config.attempt_wiki_resolution,
            "wiki_definitions": dict(config.wiki_definitions),
        }
    )


@app.command("init-config")
def init_config(config_path: str = typer.Option(None, "--config")) -> None:
    """Write the default wiki definitions file if it does not exist."""
    path = config_path or settings.config_path
    print({"config_path": path, "created": ensure_config_file(path)})


@app.command("clean-config")
def clean_config(config_path: str = typer.Option(None, "--config")) -> None:
    """Rewrite legacy wiki URLs in the config file to their current defaults."""
    path = config_path or settings.config_path
    cleaned = clean_legacy_config(path)
    print({"config_path": path, "cleaned": cleaned})
    if not cleaned:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()

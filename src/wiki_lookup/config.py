"""Runtime settings and persisted wiki configuration for Wiki Lookup."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wiki_lookup.errors import ConfigError
from wiki_lookup.opener import REDIRECT_TEMPLATE
from wiki_lookup.resolver import DEFAULT_WIKI, FANDOM_WIKI_URL, MINECRAFT_WIKI_URL, PLACEHOLDER

logger = logging.getLogger("wiki_lookup.config")

LEGACY_URL_REWRITES = {FANDOM_WIKI_URL: MINECRAFT_WIKI_URL}

DEFAULT_CONFIG_TEXT = f"""\
[client.options]
# If enabled, all wiki lookups will be opened in new browser tabs.
# Opening in the same tab goes through a local redirect page, so the browser will not
# show the real wiki URL.
open_in_new_tabs = true
# If enabled, queries without an explicit mod id are matched against known mod ids,
# items, entities and biomes to pick the wiki to use.
attempt_wiki_resolution = true

# Wiki definitions in the format <mod id> = "<URL>". Each URL must contain exactly one {PLACEHOLDER}
# where the query goes. Use {DEFAULT_WIKI} for the default wiki.
[client.options.wiki_definitions]
{DEFAULT_WIKI} = "{MINECRAFT_WIKI_URL}"
"""


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="WIKI_LOOKUP_", env_file=".env", extra="ignore")

    app_name: str = "wiki-lookup"
    log_level: str = "INFO"
    config_path: str = Field(
        default="wikilookup-common.toml",
        description="Path to the persisted wiki definitions file.",
    )
    catalog_path: str | None = Field(
        default=None,
        description="Optional JSON registry snapshot used for namespace auto-resolution.",
    )
    redirect_template: str = REDIRECT_TEMPLATE


settings = Settings()


def migrate_legacy_url(url: str) -> str:
    return LEGACY_URL_REWRITES.get(url, url)


class WikiLookupConfig(BaseModel):
    """Immutable snapshot of the persisted client options."""

    model_config = ConfigDict(frozen=True)

    wiki_definitions: Mapping[str, str] = Field(
        default_factory=lambda: {DEFAULT_WIKI: MINECRAFT_WIKI_URL},
        validate_default=True,
    )
    open_in_new_tabs: bool = True
    attempt_wiki_resolution: bool = True

    @field_validator("wiki_definitions", mode="after")
    @classmethod
    def _freeze_definitions(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        migrated: dict[str, str] = {}
        for mod_id, url in value.items():
            current = migrate_legacy_url(url)
            if current != url:
                logger.info("legacy_wiki_url_migrated", extra={"mod_id": mod_id, "url": current})
            if current.count(PLACEHOLDER) != 1:
                logger.warning(
                    "wiki_template_placeholder_count",
                    extra={"mod_id": mod_id, "url": current, "placeholders": current.count(PLACEHOLDER)},
                )
            migrated[mod_id] = current
        return MappingProxyType(migrated)


def parse_config_text(text: str) -> WikiLookupConfig:
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML: {exc}") from exc

    client = document.get("client", {})
    options = client.get("options", {}) if isinstance(client, dict) else None
    if not isinstance(options, dict):
        raise ConfigError("[client.options] must be a table")
    try:
        return WikiLookupConfig.model_validate(options)
    except ValidationError as exc:
        raise ConfigError(f"Invalid wiki configuration: {exc}") from exc


def load_config(path: str | Path) -> WikiLookupConfig:
    """Read the config file, or return defaults when it does not exist."""
    target = Path(path).expanduser()
    if not target.exists():
        logger.info("config_missing_using_defaults", extra={"path": str(target)})
        return WikiLookupConfig()
    try:
        text = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Unable to read {target}: {exc}") from exc
    return parse_config_text(text)


def ensure_config_file(path: str | Path) -> bool:
    """Write the default config if none exists; return True when a file was created."""
    target = Path(path).expanduser()
    if target.exists():
        return False
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")
    logger.info("config_created", extra={"path": str(target)})
    return True


def clean_legacy_config(path: str | Path) -> bool:
    """Rewrite legacy wiki URLs in the config file in place.

    Best-effort: a failure is logged and reported as ``False``.
    """
    target = Path(path).expanduser()
    if not target.is_file():
        return False
    try:
        lines = target.read_text(encoding="utf-8").splitlines()
        cleaned = []
        for line in lines:
            for legacy, current in LEGACY_URL_REWRITES.items():
                line = line.replace(legacy, current)
            cleaned.append(line)
        with target.open("w", encoding="utf-8", newline="") as handle:
            handle.writelines(f"{line}\r\n" for line in cleaned)
    except (OSError, UnicodeDecodeError):
        logger.exception("config_clean_failed", extra={"path": str(target)})
        return False
    return True


class ConfigStore:
    """Holds the current config snapshot; reloads swap the whole snapshot."""

    def __init__(self, path: str | Path, *, snapshot: WikiLookupConfig | None = None) -> None:
        self._path = Path(path).expanduser()
        self._snapshot = snapshot if snapshot is not None else load_config(self._path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def snapshot(self) -> WikiLookupConfig:
        return self._snapshot

    def reload(self) -> WikiLookupConfig:
        """Re-read the file. On error the previous snapshot stays active."""
        fresh = load_config(self._path)
        self._snapshot = fresh
        logger.info("config_reloaded", extra={"path": str(self._path), "wikis": len(fresh.wiki_definitions)})
        return fresh

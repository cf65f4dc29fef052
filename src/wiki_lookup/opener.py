"""Opening resolved wiki URLs in the user's browser.

Opening in a new tab is a plain browser call. Reusing the same tab goes through a small
local redirect page that targets a named browser window; if that page cannot be
written or opened the opener falls back to a new tab.
"""

from __future__ import annotations

import atexit
import html
import logging
import tempfile
import webbrowser
from importlib.resources import files
from pathlib import Path
from typing import Protocol
from urllib.parse import urlsplit

from wiki_lookup.errors import InvalidUrlError, UnsupportedSchemeError

ALLOWED_SCHEMES = frozenset({"http", "https"})
REDIRECT_TEMPLATE = "pagebrowser.html"

logger = logging.getLogger("wiki_lookup.opener")


class BrowserOpener(Protocol):
    """Platform hook for handing URLs and local files to the browser."""

    def open_uri(self, url: str) -> None:
        """Open ``url`` in the default browser."""

    def open_file(self, path: Path) -> None:
        """Open a local file with the platform handler."""


class WebBrowserOpener:
    """Default opener backed by the standard ``webbrowser`` module."""

    def open_uri(self, url: str) -> None:
        if not webbrowser.open(url):
            logger.warning("browser_unavailable", extra={"url": url})

    def open_file(self, path: Path) -> None:
        if not webbrowser.open(path.resolve().as_uri()):
            raise OSError(f"No browser available to open {path}")


def validate_url(url: str) -> str:
    """Return an http(s) URL, assuming https when no scheme is given."""
    try:
        scheme = urlsplit(url).scheme
        if not scheme:
            url = f"https://{url}"
            scheme = urlsplit(url).scheme
    except ValueError as exc:
        raise InvalidUrlError(url, str(exc)) from exc

    if scheme.lower() not in ALLOWED_SCHEMES:
        raise UnsupportedSchemeError(url, scheme.lower())
    return url


def load_redirect_template(name: str = REDIRECT_TEMPLATE) -> str:
    return files("wiki_lookup.resources").joinpath(name).read_text(encoding="utf-8")


def render_redirect_page(template: str, url: str, query: str) -> str:
    return template.replace("%url", html.escape(url)).replace("%query", html.escape(query))


def _discard(path: Path) -> None:
    path.unlink(missing_ok=True)


def write_redirect_page(contents: str) -> Path:
    """Write the redirect page to a temp file removed at interpreter exit."""
    handle = tempfile.NamedTemporaryFile(
        "w",
        prefix="wikilookup-",
        suffix=".html",
        encoding="utf-8",
        delete=False,
    )
    path = Path(handle.name)
    atexit.register(_discard, path)
    with handle:
        handle.write(contents)
    return path


class UrlOpener:
    """Validates wiki URLs and opens them in a new or reused browser tab."""

    def __init__(
        self,
        browser: BrowserOpener | None = None,
        *,
        open_in_new_tab: bool = True,
        redirect_template: str = REDIRECT_TEMPLATE,
    ) -> None:
        self._browser = browser or WebBrowserOpener()
        self._open_in_new_tab = open_in_new_tab
        self._redirect_template = redirect_template

    def open(self, url: str, query: str = "") -> str:
        """Open ``url`` and return the validated form that was used.

        Raises :class:`InvalidUrlError` before touching the browser or filesystem.
        """
        target = validate_url(url)

        if not self._open_in_new_tab:
            try:
                page = render_redirect_page(load_redirect_template(self._redirect_template), target, query)
                self._browser.open_file(write_redirect_page(page))
                return target
            except (OSError, ValueError) as exc:
                logger.info(
                    "redirect_page_unavailable",
                    extra={"url": target, "error": f"{type(exc).__name__}: {exc}"},
                )

        self._browser.open_uri(target)
        return target

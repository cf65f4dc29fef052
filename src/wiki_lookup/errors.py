"""Exception hierarchy shared across wiki lookup modules."""


class WikiLookupError(Exception):
    """Base error for expected wiki lookup failures."""


class ConfigError(WikiLookupError):
    """Raised when the persisted wiki configuration cannot be read or validated."""


class CatalogError(WikiLookupError):
    """Raised when an identifier catalog snapshot is unreadable or malformed."""


class InvalidUrlError(WikiLookupError, ValueError):
    """Raised when a resolved wiki URL cannot be opened."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{reason} ({url})")
        self.url = url


class UnsupportedSchemeError(InvalidUrlError):
    """Raised when a resolved URL uses a scheme other than http/https."""

    def __init__(self, url: str, scheme: str) -> None:
        super().__init__(url, f"Unsupported protocol: {scheme}")
        self.scheme = scheme

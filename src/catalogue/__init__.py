"""Catalogue adapter registry.

Provides singleton access to the catalogue adapter. Uses the in-memory fake
by default; a real adapter can be installed with ``configure_catalog``.
"""

from catalogue.port import CatalogPort

_catalog_instance: CatalogPort | None = None


def get_catalog() -> CatalogPort:
    """Return the configured catalogue adapter (singleton)."""
    global _catalog_instance
    if _catalog_instance is None:
        from catalogue.fake_catalog import FakeCatalog

        _catalog_instance = FakeCatalog()
    return _catalog_instance


def configure_catalog(adapter: CatalogPort) -> None:
    global _catalog_instance
    _catalog_instance = adapter


def reset_catalog():
    """Reset the catalogue singleton (useful for testing)."""
    global _catalog_instance
    _catalog_instance = None

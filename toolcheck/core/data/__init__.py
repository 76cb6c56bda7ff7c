"""
Static data — the built-in requirement catalog.
"""

from toolcheck.core.data.catalog import CATALOG, default_catalog

__all__ = ["CATALOG", "default_catalog"]

"""
SiteFeed - Syndicated Feed Loader
=================================

Loads a remote RSS feed into a queryable store for a personal site.

Main Components:
- Ingestion: tolerant <item> extraction, text cleaning, slug derivation
- Processing: single-request fetcher and full-replace store synchronizer
- Storage: snapshot-swapped record store with a sorted query
- Delivery: regeneration of the site's own RSS feed
- Configuration: environment variables with Pydantic validation
"""

__version__ = "1.0.0"
__author__ = "SiteFeed Development Team"
__description__ = "Syndicated RSS loader for a personal site"

# Core imports for easy access
from .config.settings import get_settings
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import SiteFeedError

__all__ = [
    "get_settings",
    "configure_application_logging",
    "get_logger_for_component",
    "SiteFeedError",
]

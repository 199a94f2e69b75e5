"""
Ecobici Open Data

Fetches the Buenos Aires public bike-share datasets (user registry and
trip history), normalizes their columns and derives analysis features.
"""

__version__ = "0.1.0"

from .archive import load_csv_from_zip
from .config import EcobiciConfig, get_config
from .exceptions import ArchiveError, ColumnNotFoundError, DownloadError, EcobiciError
from .trips import fetch_trips
from .users import fetch_users

__all__ = [
    "ArchiveError",
    "ColumnNotFoundError",
    "DownloadError",
    "EcobiciConfig",
    "EcobiciError",
    "fetch_trips",
    "fetch_users",
    "get_config",
    "load_csv_from_zip",
]

"""
Salary Service Package.

HTTP service that stores salary entries and registered names in memory,
persisted to an append-only CSV file.
"""

__version__ = "1.0.0"
__description__ = "CSV-backed salary record service"

from .app import create_app
from .config import Settings, get_settings
from .store import RecordStore

__all__ = [
    "create_app",
    "RecordStore",
    "Settings",
    "get_settings",
    "__version__",
]

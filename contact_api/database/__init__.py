from .database import DB, Base, UTCDateTime, days_ago
from .errors import ConnectivityError, QueryError, StoreError, UnknownStoreError


__all__ = [
    "DB",
    "Base",
    "UTCDateTime",
    "days_ago",
    "StoreError",
    "ConnectivityError",
    "QueryError",
    "UnknownStoreError",
]

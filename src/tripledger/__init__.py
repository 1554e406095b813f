"""tripledger - Record store and change tracking for a small transport business."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tripledger")
except PackageNotFoundError:
    __version__ = "0+local"
from tripledger.client import LedgerClient
from tripledger.config import LedgerConfig
from tripledger.diff import ChangeSet, diff_records
from tripledger.exceptions import (
    LedgerApiError,
    LedgerConfigError,
    LedgerError,
    LedgerTransportError,
    RecordNotFoundError,
)
from tripledger.filters import filter_trips, trip_matches
from tripledger.models import (
    Client,
    Document,
    DocumentType,
    Trip,
    TripFilter,
    TripHistory,
    TripStatus,
)
from tripledger.remote import CollectionName, HttpCollection, RemoteCollection
from tripledger.result import FailureReason, StoreResult
from tripledger.stats import DailyFinancials, StatisticsPeriod, TripSummary, summarize, trips_in_period
from tripledger.store import RecordStore, StoreSnapshot

__all__ = [
    "__version__",
    "ChangeSet",
    "Client",
    "CollectionName",
    "DailyFinancials",
    "Document",
    "DocumentType",
    "FailureReason",
    "HttpCollection",
    "LedgerApiError",
    "LedgerClient",
    "LedgerConfig",
    "LedgerConfigError",
    "LedgerError",
    "LedgerTransportError",
    "RecordNotFoundError",
    "RecordStore",
    "RemoteCollection",
    "StatisticsPeriod",
    "StoreResult",
    "StoreSnapshot",
    "Trip",
    "TripFilter",
    "TripHistory",
    "TripStatus",
    "TripSummary",
    "diff_records",
    "filter_trips",
    "summarize",
    "trip_matches",
    "trips_in_period",
]

"""Record models exchanged with the remote record store."""

from tripledger.models._base import LedgerBaseModel, LedgerEnum
from tripledger.models.client import Client
from tripledger.models.document import Document, DocumentType
from tripledger.models.history import TripHistory
from tripledger.models.trip import Trip, TripFilter, TripStatus

__all__ = [
    "Client",
    "Document",
    "DocumentType",
    "LedgerBaseModel",
    "LedgerEnum",
    "Trip",
    "TripFilter",
    "TripHistory",
    "TripStatus",
]

"""Document attachment model."""

from __future__ import annotations

from pydantic import Field

from tripledger.models._base import LedgerBaseModel, LedgerEnum


class DocumentType(LedgerEnum):
    UNKNOWN = "unknown"
    INVOICE = "invoice"
    WAYBILL = "waybill"
    CONTRACT = "contract"
    OTHER = "other"


class Document(LedgerBaseModel):
    """A file attached to a trip.

    ``uri`` is an opaque locator produced by the file storage backend.
    """

    trip_id: str = ""
    name: str = ""
    document_type: DocumentType = Field(default=DocumentType.OTHER, alias="type")
    uri: str = ""
    upload_date: str = ""
    notes: str = ""

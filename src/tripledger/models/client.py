"""Client (counterparty organization) model."""

from __future__ import annotations

from pydantic import Field

from tripledger.models._base import LedgerBaseModel


class Client(LedgerBaseModel):
    """An organization the business transports cargo for."""

    name: str = ""
    tax_id: str = Field(default="", alias="inn")
    """Taxpayer identification number."""
    contact_person: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    notes: str = ""

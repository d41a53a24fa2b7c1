"""
Xendit schemas for callback and invoice validation.

WHAT: Pydantic schemas for the Xendit invoice callback payload, the create
invoice request and the created invoice returned to shop clients.

WHY: Callback payloads are untrusted input. Validating them into a schema
gives the reconciler typed access to the few fields it needs while the raw
payload is kept, unchanged, as payment metadata.

HOW: Uses Pydantic v2 with model_config. Provider fields we do not model
are preserved (extra="allow") so nothing Xendit sends is lost.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Callback Schemas
# ============================================================================


class XenditCallbackRequest(BaseModel):
    """
    Invoice callback sent by Xendit when an invoice is paid or expires.

    WHY: `external_id` is our order code and `description` carries the
    channel token ("<channelToken>_<orderId>"). Only those and `id` gate
    processing; the remaining fields are informational, so they are typed
    loosely and a malformed value never rejects a paid callback.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, description="Xendit invoice ID")
    external_id: str = Field(..., min_length=1, description="Order code")
    description: str = Field(default="", description="<channelToken>_<orderId>")
    amount: Any = None
    status: Any = None
    currency: Any = None
    created: Any = None
    updated: Any = None
    user_id: Any = None
    is_high: Any = None
    payer_email: Any = None
    merchant_name: Any = None


# ============================================================================
# Invoice Schemas
# ============================================================================


class XenditCreateInvoiceRequest(BaseModel):
    """Body of POST /v2/invoices."""

    amount: int = Field(..., ge=0)
    external_id: str
    currency: str
    payer_email: str
    description: str
    invoice_duration: int
    payment_methods: List[str] = Field(default_factory=list)


class AvailableBank(BaseModel):
    model_config = ConfigDict(extra="allow")

    bank_code: str
    collection_type: Optional[str] = None
    transfer_amount: Optional[float] = None
    bank_branch: Optional[str] = None
    account_holder_name: Optional[str] = None


class AvailableRetailOutlet(BaseModel):
    model_config = ConfigDict(extra="allow")

    retail_outlet_name: str


class AvailablePayLater(BaseModel):
    model_config = ConfigDict(extra="allow")

    paylater_type: str


class XenditCreateInvoiceResponse(BaseModel):
    """
    Invoice created by Xendit.

    WHY: Returned to the shop client, which redirects the customer to
    `invoice_url` to pay.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    user_id: Optional[str] = None
    external_id: str
    status: str
    merchant_name: Optional[str] = None
    merchant_profile_picture_url: Optional[str] = None
    amount: float
    payer_email: Optional[str] = None
    description: Optional[str] = None
    invoice_url: str
    expiry_date: Optional[datetime] = None
    currency: Optional[str] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    available_banks: List[AvailableBank] = Field(default_factory=list)
    available_retail_outlets: List[AvailableRetailOutlet] = Field(default_factory=list)
    available_paylaters: List[AvailablePayLater] = Field(default_factory=list)

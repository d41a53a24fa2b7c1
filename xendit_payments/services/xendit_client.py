"""
Xendit Invoice API client.

WHAT: Creates and expires hosted invoices through the Xendit REST API.

WHY: A hosted invoice lets Xendit collect the payment over any channel the
merchant enabled (virtual accounts, retail outlets, e-wallets, pay-later)
without card data ever touching this service.

HOW: Uses the httpx async client with HTTP basic auth (the secret API key
as username, empty password). Every failure is logged with the response
body when one exists and re-raised as a single error type per operation.
No retry, no backoff.
"""

import logging
from typing import Any, Dict

import httpx
from pydantic import ValidationError as PydanticValidationError

from xendit_payments.core.config import XenditOptions
from xendit_payments.core.exceptions import InvoiceCancellationError, InvoiceCreationError
from xendit_payments.schemas.xendit import (
    XenditCreateInvoiceRequest,
    XenditCreateInvoiceResponse,
)

logger = logging.getLogger(__name__)


class XenditClient:
    """
    Client for the Xendit Invoice API.

    Attributes:
        base_url: Xendit API base URL
        timeout: Request timeout in seconds
    """

    def __init__(self, options: XenditOptions):
        """
        Initialize XenditClient.

        Args:
            options: Xendit configuration
        """
        self._api_key = options.api_key
        self.base_url = options.base_url
        self.timeout = options.timeout

    @property
    def _auth(self) -> httpx.BasicAuth:
        return httpx.BasicAuth(username=self._api_key, password="")

    async def create_invoice(
        self,
        payload: XenditCreateInvoiceRequest,
    ) -> XenditCreateInvoiceResponse:
        """
        Create a hosted invoice.

        Args:
            payload: Invoice request body

        Returns:
            The created invoice

        Raises:
            InvoiceCreationError: On any transport error, non-2xx response
                or unparseable response body
        """
        url = f"{self.base_url}/v2/invoices"
        body = payload.model_dump()

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=body, auth=self._auth)
        except httpx.TimeoutException as e:
            logger.error(f"Xendit create invoice timeout: {e}")
            raise InvoiceCreationError(
                external_id=payload.external_id,
                timeout=self.timeout,
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Xendit create invoice request error: {e}")
            raise InvoiceCreationError(
                external_id=payload.external_id,
                error=str(e),
            ) from e

        if response.status_code >= 400:
            logger.error(
                f"Xendit create invoice returned error: {response.status_code} - {response.text}",
                extra={"order_code": payload.external_id},
            )
            raise InvoiceCreationError(
                external_id=payload.external_id,
                provider_status=response.status_code,
                response_text=response.text,
            )

        try:
            invoice = XenditCreateInvoiceResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Unexpected Xendit create invoice response: {response.text}")
            raise InvoiceCreationError(
                external_id=payload.external_id,
                error=str(e),
            ) from e

        logger.info(
            f"Xendit invoice {invoice.id} created for order {payload.external_id}",
            extra={"order_code": payload.external_id},
        )
        return invoice

    async def expire_invoice(self, invoice_id: str) -> Dict[str, Any]:
        """
        Expire (cancel) a hosted invoice.

        Args:
            invoice_id: Xendit invoice ID

        Returns:
            The expired invoice as returned by Xendit

        Raises:
            InvoiceCancellationError: On any transport error or non-2xx response
        """
        url = f"{self.base_url}/invoices/{invoice_id}/expire!"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, auth=self._auth)
        except httpx.RequestError as e:
            logger.error(f"Xendit expire invoice request error: {e}")
            raise InvoiceCancellationError(invoice_id=invoice_id, error=str(e)) from e

        if response.status_code >= 400:
            logger.error(
                f"Xendit expire invoice returned error: {response.status_code} - {response.text}"
            )
            raise InvoiceCancellationError(
                invoice_id=invoice_id,
                provider_status=response.status_code,
                response_text=response.text,
            )

        logger.info(f"Xendit invoice {invoice_id} expired")
        try:
            return response.json()
        except ValueError as e:
            raise InvoiceCancellationError(invoice_id=invoice_id, error=str(e)) from e

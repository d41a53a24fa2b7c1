"""
Xendit callback token verification.

WHAT: Checks the `x-callback-token` header Xendit sends with each callback
against the token configured for this deployment.

WHY: Anyone can POST to the webhook URL. The shared callback token is the
only proof that a settlement notification really came from Xendit.
Xendit makes the token optional, so an unconfigured token disables the
check.

HOW: `verify` answers "is this callback valid?". Tokens are compared with
hmac.compare_digest so the comparison time does not reveal how much of a
guessed token matched.
"""

import hmac
from typing import Optional

from xendit_payments.core.config import XenditOptions


class CallbackVerifier:
    """
    Verifies Xendit callback tokens.

    Attributes:
        callback_token: Configured token, None or empty to accept all callbacks
    """

    def __init__(self, options: XenditOptions):
        self.callback_token = options.callback_token

    @property
    def enabled(self) -> bool:
        return bool(self.callback_token)

    def verify(self, presented_token: Optional[str]) -> bool:
        """
        Check a presented callback token.

        Args:
            presented_token: Value of the x-callback-token header

        Returns:
            True if no token is configured or the tokens are equal,
            False otherwise
        """
        if not self.enabled:
            return True
        if presented_token is None:
            return False
        return hmac.compare_digest(
            presented_token.encode("utf-8"),
            self.callback_token.encode("utf-8"),
        )

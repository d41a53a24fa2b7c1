"""Application configuration"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Xendit accepts invoice durations between 1 second and 1 year
MIN_INVOICE_DURATION = 1
MAX_INVOICE_DURATION = 31_536_000
DEFAULT_INVOICE_DURATION = 60 * 60 * 24


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # API
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Xendit Payments API"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Security
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MINUTES: int = 1440  # 24 hours

    # Database
    DATABASE_URL: str

    # Xendit
    XENDIT_API_KEY: str
    XENDIT_CALLBACK_TOKEN: Optional[str] = None
    XENDIT_INVOICE_DURATION: int = Field(
        default=DEFAULT_INVOICE_DURATION,
        ge=MIN_INVOICE_DURATION,
        le=MAX_INVOICE_DURATION,
    )
    # WHY: Empty list means "all channels enabled in the Xendit dashboard"
    XENDIT_PAYMENT_METHODS: List[str] = []
    XENDIT_BASE_URL: str = "https://api.xendit.co"
    XENDIT_CURRENCY: str = "IDR"
    XENDIT_TIMEOUT_SECONDS: float = 30.0

    # CORS
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    @property
    def async_database_url(self) -> str:
        """Get async database URL"""
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")


@dataclass(frozen=True)
class XenditOptions:
    """
    Immutable Xendit configuration passed to every component that needs it.

    WHAT: The subset of settings the payment components read.

    WHY: Components receive their configuration through the constructor
    instead of reading a process-wide mutable object, so tests can build
    a component with any configuration without patching globals.

    Attributes:
        api_key: Secret key of the Xendit account
        callback_token: Token Xendit sends in x-callback-token (None disables checks)
        invoice_duration: Seconds the customer has to pay before the invoice expires
        payment_methods: Payment channels offered on the invoice (empty = all)
        base_url: Xendit API base URL
        currency: Invoice currency
        timeout: Outbound HTTP timeout in seconds
    """

    api_key: str
    callback_token: Optional[str] = None
    invoice_duration: int = DEFAULT_INVOICE_DURATION
    payment_methods: Tuple[str, ...] = field(default_factory=tuple)
    base_url: str = "https://api.xendit.co"
    currency: str = "IDR"
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("Xendit api_key is required")
        if not MIN_INVOICE_DURATION <= self.invoice_duration <= MAX_INVOICE_DURATION:
            raise ValueError(
                f"invoice_duration must be between {MIN_INVOICE_DURATION} "
                f"and {MAX_INVOICE_DURATION} seconds"
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "XenditOptions":
        """Build options from application settings."""
        return cls(
            api_key=settings.XENDIT_API_KEY,
            callback_token=settings.XENDIT_CALLBACK_TOKEN or None,
            invoice_duration=settings.XENDIT_INVOICE_DURATION,
            payment_methods=tuple(settings.XENDIT_PAYMENT_METHODS),
            base_url=settings.XENDIT_BASE_URL.rstrip("/"),
            currency=settings.XENDIT_CURRENCY,
            timeout=settings.XENDIT_TIMEOUT_SECONDS,
        )

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return (
            f"XenditOptions(base_url={self.base_url!r}, currency={self.currency!r}, "
            f"invoice_duration={self.invoice_duration}, "
            f"callback_token_configured={bool(self.callback_token)})"
        )


settings = Settings()

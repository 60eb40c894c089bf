"""API configuration models (Airtable).

This module contains configuration models for the remote table source,
the Airtable REST API.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from linkvault.shared.constants import AirtableConfig, NetworkConfig


class AirtableSettings(BaseModel):
    """Airtable API configuration.

    This class manages Airtable settings including authentication,
    pagination, rate limiting, retry behavior, and request timeouts.

    Security: api_key is masked in __repr__ to prevent accidental
    exposure in logs.
    """

    api_key: str = Field(
        default="",
        repr=False,
        description="Airtable personal access token",
    )
    base_id: str = Field(default="", description="Airtable base identifier (app...)")
    base_url: str = Field(
        default=AirtableConfig.BASE_URL,
        description="Airtable REST API root",
    )

    timeout: int = Field(
        default=NetworkConfig.TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )

    retry_attempts: int = Field(
        default=NetworkConfig.RETRY_ATTEMPTS,
        ge=0,
        description="Number of retry attempts",
    )
    retry_delay: float = Field(
        default=NetworkConfig.RETRY_DELAY,
        ge=0,
        description="Base delay between retries in seconds (doubled per attempt)",
    )

    rate_limit_rps: float = Field(
        default=AirtableConfig.RATE_LIMIT_RPS,
        gt=0,
        description="Rate limit in requests per second",
    )
    concurrent_requests: int = Field(
        default=AirtableConfig.DEFAULT_CONCURRENT_REQUESTS,
        gt=0,
        description="Maximum number of concurrent requests",
    )
    page_size: int = Field(
        default=AirtableConfig.MAX_PAGE_SIZE,
        gt=0,
        le=AirtableConfig.MAX_PAGE_SIZE,
        description="Records requested per page",
    )

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key.strip() and self.base_id.strip())

    def __repr__(self) -> str:
        """Representation with the api_key masked."""
        masked_key = "****" if self.api_key else "[empty]"
        return (
            f"AirtableSettings("
            f"api_key={masked_key}, "
            f"base_id={self.base_id!r}, "
            f"timeout={self.timeout}, "
            f"retry_attempts={self.retry_attempts}, "
            f"rate_limit_rps={self.rate_limit_rps})"
        )


class APISettings(BaseModel):
    """API configuration container.

    Note: Environment variable loading is handled by the parent Settings class.
    """

    airtable: AirtableSettings = Field(
        default_factory=AirtableSettings,
        description="Airtable API configuration",
    )


__all__ = [
    "APISettings",
    "AirtableSettings",
]

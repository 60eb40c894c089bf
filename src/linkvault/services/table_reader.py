"""Airtable table reader.

This module fetches the full record set of one table from the Airtable
REST API. Each page request goes through a concurrency limit, a token
bucket rate limiter and a retry loop with exponential backoff.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Protocol
from urllib.parse import quote

import requests

from linkvault.config.models.api_settings import AirtableSettings
from linkvault.services.rate_limiter import TokenBucketRateLimiter
from linkvault.shared.constants import AirtableConfig, HTTPStatusCodes, NetworkConfig
from linkvault.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    SecurityError,
    create_api_error,
)
from linkvault.shared.logging import log_api_call, log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


class TableReader(Protocol):
    """Remote source of raw table payloads.

    ``fetch_all`` returns every record of the table as
    ``{"id": ..., "createdTime": ..., "fields": {...}}`` dicts and raises
    on any failure.
    """

    async def fetch_all(self, table_name: str) -> list[dict[str, Any]]: ...


class AirtableTableReader:
    """Reads whole tables from an Airtable base.

    Args:
        settings: Airtable API settings (credentials, limits, retries)
        rate_limiter: Token bucket shared by all requests of this reader
        session: HTTP session; a new one is created when omitted

    Example:
        >>> reader = AirtableTableReader(settings.api.airtable)
        >>> records = await reader.fetch_all("lessons")
        >>> records[0]["fields"]["name"]
        'Intro'
    """

    def __init__(
        self,
        settings: AirtableSettings,
        rate_limiter: TokenBucketRateLimiter | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings
        self.rate_limiter = rate_limiter or TokenBucketRateLimiter(
            capacity=max(1, int(settings.rate_limit_rps)),
            refill_rate=settings.rate_limit_rps,
        )
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {settings.api_key.strip()}",
                "Accept": NetworkConfig.ACCEPT_JSON,
                "User-Agent": NetworkConfig.USER_AGENT,
            }
        )
        self._semaphore = asyncio.Semaphore(settings.concurrent_requests)

    def _require_credentials(self) -> None:
        """Fail unless both the API key and the base id are configured.

        Raises:
            SecurityError: If the API key or base id is missing
        """
        if not self.settings.api_key.strip():
            raise SecurityError(
                code=ErrorCode.MISSING_CONFIG,
                message=(
                    f"Airtable API key not configured. Set {AirtableConfig.API_KEY_ENV} "
                    "or api.airtable.api_key in the config file."
                ),
                context=ErrorContext(operation="check_credentials"),
            )
        if not self.settings.base_id.strip():
            raise SecurityError(
                code=ErrorCode.MISSING_CONFIG,
                message=(
                    f"Airtable base id not configured. Set {AirtableConfig.BASE_ID_ENV} "
                    "or api.airtable.base_id in the config file."
                ),
                context=ErrorContext(operation="check_credentials"),
            )

    def table_url(self, table_name: str) -> str:
        base_url = self.settings.base_url.rstrip("/")
        return f"{base_url}/{self.settings.base_id}/{quote(table_name, safe='')}"

    async def fetch_all(self, table_name: str) -> list[dict[str, Any]]:
        """Fetch every record of ``table_name``, following pagination.

        Returns:
            Raw record payloads in the order the API returns them

        Raises:
            SecurityError: If credentials are missing
            InfrastructureError: If a page cannot be fetched after all retries
                or the response is malformed
        """
        self._require_credentials()
        start = time.perf_counter()
        records: list[dict[str, Any]] = []
        offset: str | None = None
        pages = 0

        while True:
            page = await self._make_request(table_name, offset)
            pages += 1

            page_records = page.get(AirtableConfig.RECORDS_KEY)
            if not isinstance(page_records, list):
                raise create_api_error(
                    f"Malformed response for table '{table_name}': missing records",
                    code=ErrorCode.API_INVALID_RESPONSE,
                    table=table_name,
                )
            records.extend(page_records)

            offset = page.get(AirtableConfig.OFFSET_KEY)
            if not offset:
                break

        log_operation_success(
            logger=logger,
            operation="fetch_all",
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={"records": len(records), "pages": pages},
            context={"table": table_name},
        )
        return records

    async def _make_request(self, table_name: str, offset: str | None) -> dict[str, Any]:
        """Fetch one page under the concurrency limit and the rate limit."""
        async with self._semaphore:
            await self._apply_rate_limiting()
            return await self._execute_with_retry(table_name, offset)

    async def _apply_rate_limiting(self) -> None:
        while not self.rate_limiter.try_acquire():
            await asyncio.sleep(NetworkConfig.RATE_LIMIT_POLL_INTERVAL)

    async def _execute_with_retry(
        self,
        table_name: str,
        offset: str | None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"pageSize": self.settings.page_size}
        if offset:
            params["offset"] = offset

        attempt = 0
        while True:
            try:
                return await asyncio.to_thread(self._get_page, table_name, params)
            except InfrastructureError as e:
                if not _is_retryable(e):
                    log_operation_error(logger=logger, error=e, operation="fetch_all")
                    raise
                if attempt >= self.settings.retry_attempts:
                    final_error = create_api_error(
                        f"{e.message} (after {self.settings.retry_attempts} retries)",
                        code=e.code,
                        table=table_name,
                        original_error=e,
                    )
                    log_operation_error(logger=logger, error=final_error, operation="fetch_all")
                    raise final_error from e
                last_error = e

            delay = min(
                self.settings.retry_delay * (2**attempt),
                NetworkConfig.MAX_RETRY_DELAY,
            )
            logger.info(
                "Retrying table '%s' in %.1fs (attempt %d/%d): %s",
                table_name,
                delay,
                attempt + 1,
                self.settings.retry_attempts,
                last_error.message,
            )
            await asyncio.sleep(delay)
            attempt += 1

    def _get_page(self, table_name: str, params: dict[str, Any]) -> dict[str, Any]:
        """Blocking GET of one page; runs in a worker thread."""
        url = self.table_url(table_name)
        start = time.perf_counter()

        try:
            response = self.session.get(url, params=params, timeout=self.settings.timeout)
        except requests.Timeout as e:
            raise create_api_error(
                f"Request for table '{table_name}' timed out",
                code=ErrorCode.API_TIMEOUT,
                table=table_name,
                original_error=e,
            ) from e
        except requests.RequestException as e:
            raise create_api_error(
                f"Network error fetching table '{table_name}': {e}",
                code=ErrorCode.NETWORK_ERROR,
                table=table_name,
                original_error=e,
            ) from e

        log_api_call(
            logger,
            endpoint=url,
            status_code=response.status_code,
            duration_ms=(time.perf_counter() - start) * 1000,
            context={"table": table_name},
        )

        if response.status_code != HTTPStatusCodes.OK:
            raise _status_error(table_name, response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise create_api_error(
                f"Response for table '{table_name}' is not JSON",
                code=ErrorCode.API_INVALID_RESPONSE,
                table=table_name,
                original_error=e,
            ) from e

        if not isinstance(payload, dict):
            raise create_api_error(
                f"Response for table '{table_name}' is not an object",
                code=ErrorCode.API_INVALID_RESPONSE,
                table=table_name,
            )
        return payload

    def close(self) -> None:
        self.session.close()


def _status_error(table_name: str, status_code: int) -> InfrastructureError:
    """Convert a non-OK status into an API error."""
    if status_code in (HTTPStatusCodes.UNAUTHORIZED, HTTPStatusCodes.FORBIDDEN):
        code = ErrorCode.API_AUTHENTICATION_FAILED
        message = f"Access to table '{table_name}' denied (status {status_code})"
    elif status_code == HTTPStatusCodes.NOT_FOUND:
        code = ErrorCode.API_TABLE_NOT_FOUND
        message = f"Table '{table_name}' not found"
    elif status_code == HTTPStatusCodes.TOO_MANY_REQUESTS:
        code = ErrorCode.API_RATE_LIMIT
        message = f"Rate limit exceeded fetching table '{table_name}'"
    elif status_code >= HTTPStatusCodes.INTERNAL_SERVER_ERROR:
        code = ErrorCode.API_SERVER_ERROR
        message = f"Server error {status_code} fetching table '{table_name}'"
    else:
        code = ErrorCode.API_REQUEST_FAILED
        message = f"Request for table '{table_name}' failed with status {status_code}"

    return create_api_error(message, code=code, table=table_name, status_code=status_code)


def _is_retryable(error: InfrastructureError) -> bool:
    if error.code in (ErrorCode.NETWORK_ERROR, ErrorCode.API_TIMEOUT):
        return True
    status_code = (error.context.additional_data or {}).get("status_code")
    return status_code in HTTPStatusCodes.RETRYABLE

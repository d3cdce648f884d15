"""Shared HTTP utilities for providers (connection pooling, retry logic)."""

import httpx
import asyncio
from typing import Dict, Any, Optional
from docstruct.config import config
from docstruct.logging import logger
from docstruct.core.exceptions import (
    ProviderConnectionError,
    ProviderTimeoutError,
    ProviderError,
)


def create_http_client() -> httpx.AsyncClient:
    """Create an HTTP client with the configured timeouts."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            config.HTTP_READ_TIMEOUT,
            connect=config.HTTP_CONNECT_TIMEOUT,
            read=config.HTTP_READ_TIMEOUT,
            write=config.HTTP_WRITE_TIMEOUT,
            pool=config.HTTP_POOL_TIMEOUT
        )
    )


async def http_request_with_retry(
    client: httpx.AsyncClient,
    url: str,
    payload: Dict[str, Any],
    service_name: str = "Service",
    headers: Optional[Dict[str, str]] = None,
    max_retries: Optional[int] = None,
    retry_delay: Optional[float] = None,
    retry_count: int = 0,
) -> Dict[str, Any]:
    """
    Make HTTP request with exponential backoff retry for transient errors.

    Args:
        client: HTTP client to use
        url: Request URL
        payload: Request payload
        service_name: Service name for logging
        headers: Extra request headers (e.g. Authorization)
        max_retries: Max retry attempts (defaults to config)
        retry_delay: Base delay between retries (defaults to config)
        retry_count: Internal - current retry attempt

    Returns:
        Response JSON data

    Raises:
        ProviderConnectionError: Connection failed after retries
        ProviderTimeoutError: Request timed out after retries
        ProviderError: Non-retryable HTTP status or undecodable body
    """
    max_retries = config.HTTP_MAX_RETRIES if max_retries is None else max_retries
    retry_delay = config.HTTP_RETRY_DELAY if retry_delay is None else retry_delay

    async def _retry(reason: str) -> Dict[str, Any]:
        delay = retry_delay * (2 ** retry_count)
        logger.warning(
            f"{service_name} {reason} "
            f"(attempt {retry_count + 1}/{max_retries + 1}), "
            f"retrying in {delay}s"
        )
        await asyncio.sleep(delay)
        return await http_request_with_retry(
            client, url, payload, service_name, headers, max_retries, retry_delay, retry_count + 1
        )

    try:
        response = await client.post(url, json=payload, headers=headers)
        response.raise_for_status()
        return response.json()
    except (httpx.ConnectError, httpx.ConnectTimeout) as e:
        if retry_count < max_retries:
            return await _retry(f"connection error: {str(e)}")
        logger.error(f"{service_name} connection failed after {max_retries + 1} attempts: {str(e)}")
        raise ProviderConnectionError(f"{service_name} unavailable: {str(e)}")
    except httpx.TimeoutException:
        if retry_count < max_retries:
            return await _retry("timeout")
        logger.error(f"{service_name} timeout after {max_retries + 1} attempts")
        raise ProviderTimeoutError(f"{service_name} timed out. Please try again.")
    except httpx.HTTPStatusError as e:
        status_code = e.response.status_code
        if 500 <= status_code < 600 and retry_count < max_retries:
            return await _retry(f"server error {status_code}")
        logger.error(f"{service_name} HTTP error {status_code}: {e.response.text}")
        raise ProviderError(f"{service_name} HTTP error {status_code}: {e.response.text}")
    except ValueError as e:
        logger.error(f"{service_name} returned invalid JSON: {str(e)}")
        raise ProviderError(f"{service_name} returned invalid JSON: {str(e)}")

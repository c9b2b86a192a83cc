"""Shared helpers for the REST based providers (Stability, Replicate)."""
from __future__ import annotations
from typing import Optional

import httpx

from .base import ProviderResponseError

def build_client(timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout, transport=transport)

def raise_for_provider_status(label: str, response: httpx.Response) -> None:
    """Turn a 4xx/5xx response into a ProviderResponseError that keeps the body.

    The body is kept verbatim so the studio can dig the upstream message out
    of the embedded JSON.
    """
    if response.status_code < 400:
        return
    body = response.text.strip() or response.reason_phrase
    raise ProviderResponseError(f"{label} API error ({response.status_code}): {body}", status_code=response.status_code)

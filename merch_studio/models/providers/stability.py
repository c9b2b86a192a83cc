from __future__ import annotations
from typing import Optional
import time

import httpx

from .base import EnhanceProvider, EnhanceRequest, EnhanceResult, EnhancerError, EnhancerTimeout, EmptyResultError
from .http import build_client, raise_for_provider_status
from ...utils.image_converter import extension_for

class StabilityProvider(EnhanceProvider):
    """Stability AI structure control: keeps the design's layout and restyles it."""
    name = "stability"

    def __init__(self, api_key: str, base_url: str = "https://api.stability.ai", endpoint: str = "/v2beta/stable-image/control/structure", control_strength: float = 0.7, output_format: str = "png", timeout: float = 120.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.endpoint = endpoint
        self.control_strength = control_strength
        self.output_format = output_format
        self.timeout = timeout
        self._transport = transport

    async def enhance(self, req: EnhanceRequest) -> EnhanceResult:
        headers = {"Authorization": f"Bearer {self.api_key}", "Accept": "image/*"}
        data = {
            "prompt": req.prompt,
            "control_strength": str(self.control_strength),
            "output_format": self.output_format,
        }
        files = {"image": (f"design.{extension_for(req.mime_type)}", req.image, req.mime_type)}

        t0 = time.perf_counter()
        try:
            async with build_client(self.timeout, self._transport) as client:
                response = await client.post(f"{self.base_url}{self.endpoint}", headers=headers, data=data, files=files)
        except httpx.TimeoutException as e:
            raise EnhancerTimeout(f"Stability timeout after {self.timeout}s: {e}") from e
        except httpx.HTTPError as e:
            raise EnhancerError(f"Stability request failed: {e}") from e

        raise_for_provider_status("Stability", response)
        if not response.content:
            raise EmptyResultError("Stability returned an empty image")

        mime_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not mime_type.startswith("image/"):
            mime_type = f"image/{self.output_format}"

        meta = {
            "provider": self.name,
            "model": self.endpoint.rsplit("/", 1)[-1],
            "latency": time.perf_counter() - t0,
            "finish_reason": response.headers.get("finish-reason"),
            "seed": response.headers.get("seed"),
        }
        return EnhanceResult(image=response.content, mime_type=mime_type, meta=meta)

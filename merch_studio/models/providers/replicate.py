from __future__ import annotations
from typing import Any, Dict, Optional
import asyncio
import time

import httpx

from .base import EnhanceProvider, EnhanceRequest, EnhanceResult, EnhancerError, EnhancerTimeout, EmptyResultError, ProviderResponseError
from .http import build_client, raise_for_provider_status
from ...utils.image_converter import to_data_uri

TERMINAL_STATUS = {"succeeded", "failed", "canceled"}

class ReplicateProvider(EnhanceProvider):
    """Replicate predictions API for an image-editing model (flux kontext by default)."""
    name = "replicate"

    def __init__(self, api_key: str, model: str = "black-forest-labs/flux-kontext-pro", base_url: str = "https://api.replicate.com/v1", image_input: str = "input_image", output_format: str = "png", wait_s: int = 60, poll_interval_s: float = 1.0, timeout: float = 180.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.image_input = image_input
        self.output_format = output_format
        self.wait_s = wait_s
        self.poll_interval_s = poll_interval_s
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

    async def enhance(self, req: EnhanceRequest) -> EnhanceResult:
        payload = {
            "input": {
                "prompt": req.prompt,
                self.image_input: to_data_uri(req.image, req.mime_type),
                "output_format": self.output_format,
            }
        }

        t0 = time.perf_counter()
        try:
            async with build_client(self.timeout, self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/models/{self.model}/predictions",
                    headers={**self._headers(), "Prefer": f"wait={self.wait_s}"},
                    json=payload,
                )
                raise_for_provider_status("Replicate", response)
                prediction = await self._wait_for(client, response.json(), t0)

                output_url = self._output_url(prediction)
                image_response = await client.get(output_url)
                raise_for_provider_status("Replicate", image_response)
        except httpx.TimeoutException as e:
            raise EnhancerTimeout(f"Replicate timeout after {self.timeout}s: {e}") from e
        except httpx.HTTPError as e:
            raise EnhancerError(f"Replicate request failed: {e}") from e

        mime_type = image_response.headers.get("content-type", "").split(";")[0].strip()
        if not mime_type.startswith("image/"):
            mime_type = f"image/{self.output_format}"

        meta = {
            "provider": self.name,
            "model": self.model,
            "latency": time.perf_counter() - t0,
            "prediction_id": prediction.get("id"),
            "metrics": prediction.get("metrics"),
        }
        return EnhanceResult(image=image_response.content, mime_type=mime_type, meta=meta)

    async def _wait_for(self, client: httpx.AsyncClient, prediction: Dict[str, Any], t0: float) -> Dict[str, Any]:
        # Prefer: wait usually returns a finished prediction; long runs still need polling
        while prediction.get("status") not in TERMINAL_STATUS:
            if time.perf_counter() - t0 > self.timeout:
                raise EnhancerTimeout(f"Replicate prediction {prediction.get('id')} still {prediction.get('status')} after {self.timeout}s")
            get_url = (prediction.get("urls") or {}).get("get")
            if not get_url:
                raise EnhancerError(f"Replicate prediction has no polling URL: {prediction}")
            await asyncio.sleep(self.poll_interval_s)
            response = await client.get(get_url, headers=self._headers())
            raise_for_provider_status("Replicate", response)
            prediction = response.json()

        if prediction["status"] != "succeeded":
            raise ProviderResponseError(f"Replicate prediction {prediction['status']}: {prediction.get('error') or 'no error reported'}")
        return prediction

    @staticmethod
    def _output_url(prediction: Dict[str, Any]) -> str:
        output = prediction.get("output")
        if isinstance(output, list):
            output = output[0] if output else None
        if not output or not isinstance(output, str):
            raise EmptyResultError(f"Replicate prediction {prediction.get('id')} returned no output")
        return output

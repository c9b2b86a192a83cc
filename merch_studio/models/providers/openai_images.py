from __future__ import annotations
from typing import Dict, Any, Optional
import base64
import json
import time

import httpx
from openai import AsyncOpenAI
from openai import APIError, APIStatusError, APITimeoutError

from .base import EnhanceProvider, EnhanceRequest, EnhanceResult, EnhancerError, EnhancerTimeout, EmptyResultError, ProviderResponseError
from ...utils.image_converter import extension_for


def _error_body(e: APIStatusError) -> str:
    #e.message embeds the body as a python dict repr, which isn't parseable downstream
    if isinstance(e.body, dict):
        return json.dumps(e.body, default=str)
    return e.message

class OpenAIImageProvider(EnhanceProvider):
    name = "openai"

    def __init__(self, api_key: str, model: str = "gpt-image-1", base_url: Optional[str] = None, size: str = "1024x1024", quality: Optional[str] = None, output_format: Optional[str] = None, timeout: float = 120.0, **kwargs):
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0, #upstream errors are passed through, never retried
            **kwargs
        )
        self.model = model
        self.size = size
        self.quality = quality
        self.output_format = output_format #gpt-image-1 only, dall-e always returns png
        self.base_url = base_url
        self.timeout = timeout

    async def enhance(self, req: EnhanceRequest) -> EnhanceResult:
        params: Dict[str, Any] = {"size": self.size}
        if self.quality:
            params["quality"] = self.quality
        if self.output_format:
            params["output_format"] = self.output_format

        upload = (f"design.{extension_for(req.mime_type)}", req.image, req.mime_type)

        t0 = time.perf_counter()
        try:
            response = await self.client.images.edit(
                model=self.model,
                image=upload,
                prompt=req.prompt,
                n=1,
                **params
            )
        except APITimeoutError as e:
            raise EnhancerTimeout(f"OpenAI timeout: {e}") from e
        except APIStatusError as e:
            raise ProviderResponseError(f"OpenAI API error: {_error_body(e)}", status_code=e.status_code) from e
        except APIError as e:
            raise EnhancerError(f"OpenAI API error: {e}") from e

        try:
            item = response.data[0]
        except (IndexError, TypeError) as e:
            raise EmptyResultError("OpenAI returned no image data") from e

        if getattr(item, "b64_json", None):
            image = base64.b64decode(item.b64_json)
        elif getattr(item, "url", None):
            # dall-e models answer with a short lived URL instead of inline data
            image = await self._download(item.url)
        else:
            raise EmptyResultError("OpenAI returned no image payload")

        dt = time.perf_counter() - t0
        output_format = self.output_format or "png"
        meta = {
            "provider": self.name,
            "model": self.model,
            "latency": dt,
            "base_url": self.base_url or "https://api.openai.com/v1",
        }
        if getattr(response, "usage", None):
            try:
                meta["usage"] = response.usage.model_dump()
            except AttributeError:
                pass

        return EnhanceResult(image=image, mime_type=f"image/{output_format}", meta=meta)

    async def _download(self, url: str) -> bytes:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            raise EnhancerError(f"Failed to download OpenAI image: {e}") from e

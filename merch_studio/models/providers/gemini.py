from __future__ import annotations
from typing import Optional
import base64
import json
import time

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from .base import EnhanceProvider, EnhanceRequest, EnhanceResult, EnhancerError, EnhancerTimeout, EmptyResultError, ProviderResponseError


def _error_body(e: genai_errors.APIError) -> str:
    #str(e) prints the body as a python dict, keep it as JSON instead
    if isinstance(e.details, dict):
        return json.dumps(e.details, default=str)
    return e.message or str(e)


class GeminiImageProvider(EnhanceProvider):
    """Gemini image model ("nano banana") through the google-genai SDK."""
    name = "nanobanana"

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash-image", timeout: float = 120.0, temperature: Optional[float] = None):
        # google-genai expects the timeout in milliseconds
        self.client = genai.Client(
            api_key=api_key,
            http_options=genai_types.HttpOptions(timeout=int(timeout * 1000)),
        )
        self.model = model
        self.timeout = timeout
        self.temperature = temperature

    async def enhance(self, req: EnhanceRequest) -> EnhanceResult:
        contents = [
            genai_types.Part.from_bytes(data=req.image, mime_type=req.mime_type),
            genai_types.Part.from_text(text=req.prompt),
        ]
        config = genai_types.GenerateContentConfig(
            response_modalities=["IMAGE", "TEXT"],
            temperature=self.temperature,
        )

        t0 = time.perf_counter()
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except httpx.TimeoutException as e:
            raise EnhancerTimeout(f"Gemini timeout after {self.timeout}s: {e}") from e
        except genai_errors.APIError as e:
            raise ProviderResponseError(f"Gemini API error: {_error_body(e)}", status_code=e.code) from e
        except httpx.HTTPError as e:
            raise EnhancerError(f"Gemini request failed: {e}") from e

        dt = time.perf_counter() - t0

        texts = []
        for candidate in response.candidates or []:
            if candidate.content is None:
                continue
            for part in candidate.content.parts or []:
                if part.inline_data is not None and part.inline_data.data:
                    data = part.inline_data.data
                    if isinstance(data, str):
                        data = base64.b64decode(data)
                    meta = {"provider": self.name, "model": self.model, "latency": dt}
                    return EnhanceResult(image=data, mime_type=part.inline_data.mime_type or "image/png", meta=meta)
                if part.text:
                    texts.append(part.text)

        # the model answered with text only (usually a refusal or a safety block)
        reason = " ".join(texts).strip() or "no image returned"
        raise EmptyResultError(f"Gemini returned no image: {reason}")

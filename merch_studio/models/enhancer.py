from __future__ import annotations
from typing import Callable, Optional
import time
import logging

from .products import ProductType
from .prompts import PromptManager
from .providers.base import EnhanceProvider, EnhanceRequest, EnhanceResult, EnhancerError
from ..utils.image_converter import normalize_image

logger = logging.getLogger(__name__)

StatsCallback = Callable[[str, float, bool], None]


class MerchDesignEnhancer:
    """
    Client for one enhancement: turns an uploaded design into a merchandise mockup.

    Instances are cheap and bound to a single user's API key, so the API
    layer creates one per request through EnhancerManager.create_enhancer.
    """

    def __init__(self, provider: EnhanceProvider, prompts: PromptManager, prompt_ref: str, provider_name: Optional[str] = None, on_complete: Optional[StatsCallback] = None):
        self.provider = provider
        self.prompts = prompts
        self.prompt_ref = prompt_ref
        self.provider_name = provider_name or provider.name
        self._on_complete = on_complete

    def build_prompt(self, product_type: ProductType, color: Optional[str] = None) -> str:
        return self.prompts.render(self.prompt_ref, {"product_type": product_type.value, "color": color})

    async def enhance_image(self, image: bytes, product_type: ProductType, color: Optional[str] = None, mime_type: Optional[str] = None) -> EnhanceResult:
        start_time = time.perf_counter()

        try:
            image_data, image_mime = normalize_image(image, mime_type)
        except ValueError as e:
            raise EnhancerError(str(e)) from e

        request = EnhanceRequest(
            image=image_data,
            mime_type=image_mime,
            prompt=self.build_prompt(product_type, color),
        )

        logger.info(f"Enhancing {len(image_data)} byte {image_mime} design as {product_type.value} via {self.provider_name}")
        try:
            result = await self.provider.enhance(request)
        except Exception:
            self._record(start_time, success=False)
            raise

        self._record(start_time, success=True)
        result.meta.setdefault("prompt", request.prompt)
        result.meta.setdefault("product_type", product_type.value)
        return result

    def _record(self, start_time: float, success: bool):
        if self._on_complete:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            self._on_complete(self.provider_name, elapsed_ms, success)

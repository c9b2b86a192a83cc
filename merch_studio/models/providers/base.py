from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

#unified enhancer errors
class EnhancerError(RuntimeError): ...
class EnhancerTimeout(EnhancerError): ...
class UnsupportedProviderError(EnhancerError): ...
class EmptyResultError(EnhancerError): ...

class ProviderResponseError(EnhancerError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

@dataclass(frozen=True)
class EnhanceRequest:
    image: bytes
    mime_type: str #mime of the (normalized) input image
    prompt: str #rendered product prompt

@dataclass(frozen=True)
class EnhanceResult:
    image: bytes
    mime_type: str
    meta: Dict[str, Any] = field(default_factory=dict) #provider, model, latency, etc.

class EnhanceProvider(ABC):
    name: str = "base"

    @abstractmethod
    async def enhance(self, req: EnhanceRequest) -> EnhanceResult:
        raise NotImplementedError

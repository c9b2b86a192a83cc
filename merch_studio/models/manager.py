from __future__ import annotations
from typing import Optional, Dict, Any, List, Union
from pathlib import Path
from dataclasses import dataclass
from enum import Enum
import os
import yaml
import logging

from .enhancer import MerchDesignEnhancer
from .prompts import PromptManager
from .providers.base import UnsupportedProviderError
from .providers.gemini import GeminiImageProvider
from .providers.openai_images import OpenAIImageProvider
from .providers.replicate import ReplicateProvider
from .providers.stability import StabilityProvider

logger = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config" / "config.yaml"


class ProviderType(Enum):
    GEMINI = "gemini"
    OPENAI = "openai"
    STABILITY = "stability"
    REPLICATE = "replicate"

PROVIDER_CLASSES = {
    ProviderType.GEMINI: GeminiImageProvider,
    ProviderType.OPENAI: OpenAIImageProvider,
    ProviderType.STABILITY: StabilityProvider,
    ProviderType.REPLICATE: ReplicateProvider,
}

@dataclass(frozen=True)
class ProviderConfig:
    name: str #name the UI sends, e.g. "nanobanana"
    type: ProviderType
    settings: Dict[str, Any]


def resolve_config_path() -> Path:
    return Path(os.getenv("MERCH_STUDIO_CONFIG", DEFAULT_CONFIG_PATH))


class EnhancerManager:
    def __init__(self, config_path: Union[Path, str], prompts_dir: Optional[Path] = None):
        self.config_path = Path(config_path)
        self.config = self._load_config()
        self.providers: Dict[str, ProviderConfig] = {
            name: ProviderConfig(name=name, type=ProviderType(cfg["type"]), settings=cfg.get("settings") or {})
            for name, cfg in self.config["providers"].items()
        }
        self._stats = {} #performance tracking

        #initialize prompt manager
        self.prompts = PromptManager(prompts_dir or PACKAGE_ROOT / "prompts")
        self.prompt_ref = self.config.get("prompt_ref", "enhance/merch@v1")

    def _load_config(self) -> Dict:
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config not found: {self.config_path}")
        with open(self.config_path) as f:
            config = yaml.safe_load(f) or {}

        if not config.get('providers'):
            raise ValueError("Config missing 'providers'")

        known_types = {t.value for t in ProviderType}
        for provider_name, provider_cfg in config['providers'].items():
            if 'type' not in provider_cfg:
                raise ValueError(f"Provider '{provider_name}' missing type")
            if provider_cfg['type'] not in known_types:
                raise ValueError(f"Provider '{provider_name}' has unknown type '{provider_cfg['type']}'")

        default_provider = config.setdefault('default_provider', next(iter(config['providers'])))
        if default_provider not in config['providers']:
            raise ValueError(f"Default provider '{default_provider}' is not configured")

        return config

    @property
    def default_provider(self) -> str:
        return self.config["default_provider"]

    @property
    def server_settings(self) -> Dict[str, Any]:
        return self.config.get("server") or {}

    @property
    def max_upload_bytes(self) -> int:
        return int(float(self.server_settings.get("max_upload_mb", 20)) * 1024 * 1024)

    def provider_names(self) -> List[str]:
        return list(self.providers)

    def create_enhancer(self, api_key: str, provider: Optional[str] = None) -> MerchDesignEnhancer:
        """Build an enhancer bound to the caller's API key. Nothing is cached: keys are per request."""
        provider_name = provider or self.default_provider
        if provider_name not in self.providers:
            raise UnsupportedProviderError(f"Unknown provider: {provider_name}")

        provider_cfg = self.providers[provider_name]
        provider_cls = PROVIDER_CLASSES[provider_cfg.type]
        provider_instance = provider_cls(api_key=api_key, **provider_cfg.settings)
        logger.debug(f"created {provider_cfg.type.value} provider for {provider_name}")

        return MerchDesignEnhancer(
            provider=provider_instance,
            prompts=self.prompts,
            prompt_ref=self.prompt_ref,
            provider_name=provider_name,
            on_complete=self._track_stats,
        )

    def _track_stats(self, provider: str, latency_ms: float, success: bool):
        if provider not in self._stats:
            self._stats[provider] = {
                'total_calls': 0,
                'successful_calls': 0,
                'total_latency_ms': 0
            }

        stats = self._stats[provider]
        stats['total_calls'] += 1
        if success:
            stats['successful_calls'] += 1
            stats['total_latency_ms'] += latency_ms

    def get_stats(self, provider: Optional[str] = None) -> Dict:
        if provider:
            return self._stats.get(provider, {})
        return self._stats

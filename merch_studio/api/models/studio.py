"""
View state of the design studio page.

The studio keeps everything for one page session here: the design settings
the sliders control, the chosen provider and key, and the outcome of the last
enhancement. Nothing in it is persisted.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional
import math

from merch_studio.models.products import (
    DEFAULT_MERCHANDISE_TYPE, PRODUCT_TYPE_MAP, merchandise_label
)
from merch_studio.utils.color import DEFAULT_COLOR, color_to_hex

DEFAULT_PROVIDER = "nanobanana"


def _clamp(value: Any, low: int, high: int, default: int) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    # clamp before int() so +/-inf lands on the bounds
    return int(max(low, min(high, number)))


class DesignSettings(BaseModel):
    scale: int = Field(100, ge=10, le=200, description="Preview scale in percent")
    rotation: int = Field(0, ge=0, le=360, description="Preview rotation in degrees")
    opacity: int = Field(100, ge=0, le=100, description="Preview opacity in percent")
    color: str = Field(DEFAULT_COLOR, description="Color overlay as typed by the user")
    merchandise_type: str = Field(DEFAULT_MERCHANDISE_TYPE, description="UI product id")

    @field_validator("scale", mode="before")
    @classmethod
    def clamp_scale(cls, v):
        return _clamp(v, 10, 200, 100)

    @field_validator("rotation", mode="before")
    @classmethod
    def clamp_rotation(cls, v):
        return _clamp(v, 0, 360, 0)

    @field_validator("opacity", mode="before")
    @classmethod
    def clamp_opacity(cls, v):
        return _clamp(v, 0, 100, 100)

    @field_validator("color", mode="before")
    @classmethod
    def default_color(cls, v):
        return v if v else DEFAULT_COLOR

    @field_validator("merchandise_type", mode="before")
    @classmethod
    def known_merchandise_type(cls, v):
        return v if v in PRODUCT_TYPE_MAP else DEFAULT_MERCHANDISE_TYPE

    @property
    def color_hex(self) -> str:
        return color_to_hex(self.color)

    @property
    def preview_transform(self) -> str:
        return f"scale({self.scale / 100}) rotate({self.rotation}deg)"


class StudioState(BaseModel):
    settings: DesignSettings = Field(default_factory=DesignSettings)
    provider: str = DEFAULT_PROVIDER
    api_key: str = ""
    file_name: Optional[str] = None
    preview_url: Optional[str] = None
    enhanced_url: Optional[str] = None
    error: Optional[str] = None

    @property
    def product_label(self) -> Optional[str]:
        return merchandise_label(self.settings.merchandise_type)

    @property
    def status(self) -> str:
        return "Enhanced" if self.enhanced_url else "Original"

    @property
    def download_url(self) -> str:
        return self.enhanced_url or self.preview_url or ""

    @property
    def download_name(self) -> str:
        if self.enhanced_url:
            return f"enhanced-{self.file_name or 'design'}.png"
        return self.file_name or "design.png"

    @property
    def can_enhance(self) -> bool:
        return bool(self.preview_url and self.api_key.strip())

"""
Merchandise catalogue: the studio's product vocabulary and the enhancer's
ProductType enum it maps onto.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class ProductType(Enum):
    SHIRT = "shirt"
    HOODIE = "hoodie"
    MUG = "mug"
    STICKER_PAD = "sticker_pad"
    TOTE_BAG = "tote_bag"


@dataclass(frozen=True)
class CatalogOption:
    id: str
    label: str
    icon: str


MERCHANDISE_TYPES: Tuple[CatalogOption, ...] = (
    CatalogOption("t-shirt", "T-Shirt", "👕"),
    CatalogOption("hoodie", "Hoodie", "🧥"),
    CatalogOption("mug", "Mug", "☕"),
    CatalogOption("poster", "Poster", "🖼️"),
    CatalogOption("sticker", "Sticker", "🏷️"),
    CatalogOption("tote-bag", "Tote Bag", "👜"),
)

PROVIDER_OPTIONS: Tuple[CatalogOption, ...] = (
    CatalogOption("nanobanana", "Gemini", "✨"),
    CatalogOption("openai", "DALL-E", "🎨"),
    CatalogOption("stability", "Stability", "🌟"),
    CatalogOption("replicate", "Replicate", "⚡"),
)

DEFAULT_MERCHANDISE_TYPE = "t-shirt"
DEFAULT_PRODUCT_TYPE = ProductType.SHIRT

PRODUCT_TYPE_MAP: Dict[str, ProductType] = {
    "t-shirt": ProductType.SHIRT,
    "hoodie": ProductType.HOODIE,
    "mug": ProductType.MUG,
    "poster": ProductType.STICKER_PAD, # no poster type upstream, sticker_pad is the closest print format
    "sticker": ProductType.STICKER_PAD,
    "tote-bag": ProductType.TOTE_BAG,
}


def map_product_type(merchandise_type: Optional[str]) -> ProductType:
    return PRODUCT_TYPE_MAP.get(merchandise_type or "", DEFAULT_PRODUCT_TYPE)


def merchandise_label(merchandise_type: str) -> Optional[str]:
    for option in MERCHANDISE_TYPES:
        if option.id == merchandise_type:
            return option.label
    return None

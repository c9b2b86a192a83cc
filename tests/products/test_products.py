import pytest

from merch_studio.models.products import (
    MERCHANDISE_TYPES, PRODUCT_TYPE_MAP, PROVIDER_OPTIONS, ProductType, map_product_type, merchandise_label
)


class TestProductTypeMapping:
    @pytest.mark.parametrize("ui_type,expected", [
        ("t-shirt", ProductType.SHIRT),
        ("hoodie", ProductType.HOODIE),
        ("mug", ProductType.MUG),
        ("poster", ProductType.STICKER_PAD),
        ("sticker", ProductType.STICKER_PAD),
        ("tote-bag", ProductType.TOTE_BAG),
    ])
    def test_every_ui_type_is_mapped(self, ui_type, expected):
        assert map_product_type(ui_type) == expected

    @pytest.mark.parametrize("ui_type", ["phone-case", "T-Shirt", "", None])
    def test_unmapped_types_fall_back_to_shirt(self, ui_type):
        assert map_product_type(ui_type) == ProductType.SHIRT

    def test_catalogue_and_map_agree(self):
        """Every product the studio offers has a mapping and vice versa"""
        assert [option.id for option in MERCHANDISE_TYPES] == list(PRODUCT_TYPE_MAP)

    def test_labels(self):
        assert merchandise_label("tote-bag") == "Tote Bag"
        assert merchandise_label("yacht") is None

    def test_provider_options(self):
        assert [(p.id, p.label) for p in PROVIDER_OPTIONS] == [
            ("nanobanana", "Gemini"),
            ("openai", "DALL-E"),
            ("stability", "Stability"),
            ("replicate", "Replicate"),
        ]

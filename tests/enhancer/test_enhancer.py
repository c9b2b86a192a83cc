import asyncio
import io

import pytest
from unittest.mock import AsyncMock, Mock
from PIL import Image

from merch_studio.models.enhancer import MerchDesignEnhancer
from merch_studio.models.products import ProductType
from merch_studio.models.prompts import PromptManager
from merch_studio.models.providers.base import EnhanceProvider, EnhanceResult, EnhancerError, EnhancerTimeout


def make_image(fmt: str, mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, (4, 4), color=0).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def prompts(tmp_path):
    prompt_dir = tmp_path / "enhance" / "merch" / "v1"
    prompt_dir.mkdir(parents=True)
    (prompt_dir / "config.yaml").write_text("products:\n  hoodie: a black hoodie\n")
    (prompt_dir / "system.j2").write_text("Mockup artist.")
    (prompt_dir / "user.j2").write_text("Design on {{ product_description }}{% if color %} in {{ color }}{% endif %}.")
    return PromptManager(tmp_path)


@pytest.fixture
def provider():
    provider = Mock(spec=EnhanceProvider)
    provider.name = "stability"
    provider.enhance = AsyncMock(return_value=EnhanceResult(image=b"out", mime_type="image/png", meta={"provider": "stability"}))
    return provider


@pytest.fixture
def stats():
    return Mock()


@pytest.fixture
def enhancer(provider, prompts, stats):
    return MerchDesignEnhancer(provider=provider, prompts=prompts, prompt_ref="enhance/merch@v1", on_complete=stats)


class TestMerchDesignEnhancer:
    def test_enhance_sends_prompt_and_image(self, enhancer, provider):
        """
        Test: A PNG design enhanced as a hoodie
        How: Run enhance_image against a mocked provider
        Ensures: Provider gets the untouched PNG and the rendered product prompt
        """
        png = make_image("PNG")
        result = asyncio.run(enhancer.enhance_image(png, ProductType.HOODIE, color="#112233"))

        request = provider.enhance.call_args.args[0]
        assert request.image == png
        assert request.mime_type == "image/png"
        assert request.prompt == "Mockup artist.\n\nDesign on a black hoodie in #112233."
        assert result.image == b"out"
        assert result.meta["product_type"] == "hoodie"
        assert result.meta["prompt"] == request.prompt

    def test_provider_name_defaults_to_provider(self, enhancer):
        assert enhancer.provider_name == "stability"

    def test_gif_is_reencoded_to_png(self, enhancer, provider):
        asyncio.run(enhancer.enhance_image(make_image("GIF", mode="P"), ProductType.MUG))

        request = provider.enhance.call_args.args[0]
        assert request.mime_type == "image/png"
        assert request.image.startswith(b"\x89PNG")

    def test_jpeg_declared_as_octet_stream_is_sniffed(self, enhancer, provider):
        asyncio.run(enhancer.enhance_image(make_image("JPEG"), ProductType.SHIRT, mime_type="application/octet-stream"))

        assert provider.enhance.call_args.args[0].mime_type == "image/jpeg"

    def test_unreadable_image_raises_enhancer_error(self, enhancer, provider):
        with pytest.raises(EnhancerError, match="Unsupported image data"):
            asyncio.run(enhancer.enhance_image(b"definitely not an image", ProductType.SHIRT))

        provider.enhance.assert_not_called()

    def test_success_is_recorded(self, enhancer, stats):
        asyncio.run(enhancer.enhance_image(make_image("PNG"), ProductType.SHIRT))

        name, latency_ms, success = stats.call_args.args
        assert name == "stability"
        assert latency_ms >= 0
        assert success is True

    def test_failure_is_recorded_and_reraised(self, enhancer, provider, stats):
        provider.enhance.side_effect = EnhancerTimeout("Stability timeout after 120s")

        with pytest.raises(EnhancerTimeout):
            asyncio.run(enhancer.enhance_image(make_image("PNG"), ProductType.SHIRT))

        assert stats.call_args.args[2] is False

    def test_unexpected_provider_exception_is_recorded(self, enhancer, provider, stats):
        """
        Test: Provider fails with something other than an EnhancerError
        How: Provider raises ValueError, as a malformed JSON body would
        Ensures: The failed call still counts towards the provider stats
        """
        provider.enhance.side_effect = ValueError("Expecting value: line 1 column 1")

        with pytest.raises(ValueError):
            asyncio.run(enhancer.enhance_image(make_image("PNG"), ProductType.SHIRT))

        stats.assert_called_once()
        assert stats.call_args.args[0] == "stability"
        assert stats.call_args.args[2] is False

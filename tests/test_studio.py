"""
Tests for the studio page: rendering, the client-side checks and the
enhance round trip through the form.
"""

import base64
import io

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, Mock
from PIL import Image

from merch_studio.api.main import create_app
from merch_studio.api.dependencies.enhancer import get_enhancer_manager
from merch_studio.models.enhancer import MerchDesignEnhancer
from merch_studio.models.manager import EnhancerManager
from merch_studio.models.products import ProductType
from merch_studio.models.providers.base import EnhanceResult, ProviderResponseError
from merch_studio.utils.image_converter import to_data_uri


def make_png(color: str = "green") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def enhancer():
    enhancer = Mock(spec=MerchDesignEnhancer)
    enhancer.provider_name = "stability"
    enhancer.enhance_image = AsyncMock(return_value=EnhanceResult(image=b"mockup", mime_type="image/png", meta={"latency": 1.0}))
    return enhancer


@pytest.fixture
def manager(enhancer):
    manager = Mock(spec=EnhancerManager)
    manager.default_provider = "nanobanana"
    manager.max_upload_bytes = 20 * 1024 * 1024
    manager.create_enhancer.return_value = enhancer
    return manager


@pytest.fixture
def client(manager):
    app = create_app()
    app.dependency_overrides[get_enhancer_manager] = lambda: manager
    return TestClient(app)


@pytest.fixture
def studio_form():
    return {
        "scale": "120",
        "rotation": "45",
        "opacity": "80",
        "color": "navy",
        "merchandiseType": "mug",
        "provider": "stability",
        "apiKey": "sk-studio",
    }


class TestStudioPage:
    def test_renders_defaults(self, client):
        """
        Test: Initial studio render
        How: GET /
        Ensures: Page shows the empty preview, all product types and providers
        """
        response = client.get("/")

        assert response.status_code == 200
        html = response.text
        assert "2D Merch Studio" in html
        assert "Upload a design to preview" in html
        for label in ("T-Shirt", "Hoodie", "Mug", "Poster", "Sticker", "Tote Bag"):
            assert label in html
        for label in ("Gemini", "DALL-E", "Stability", "Replicate"):
            assert label in html
        assert 'value="nanobanana" checked' in html

    def test_static_assets_served(self, client):
        assert client.get("/static/studio.js").status_code == 200
        assert client.get("/static/studio.css").status_code == 200


class TestStudioChecks:
    def test_enhance_without_upload(self, client, manager, studio_form):
        response = client.post("/", data=studio_form)

        assert response.status_code == 200
        assert "Please upload an image first" in response.text
        manager.create_enhancer.assert_not_called()

    def test_non_image_upload_is_ignored(self, client, manager, studio_form):
        response = client.post("/", data=studio_form, files={"image": ("notes.txt", b"hello", "text/plain")})

        assert "Please upload an image first" in response.text
        manager.create_enhancer.assert_not_called()

    def test_enhance_without_api_key(self, client, manager, studio_form):
        """
        Test: Upload present but API key blank
        How: Post the form with apiKey="   "
        Ensures: Key error is shown and the uploaded design stays in the preview
        """
        studio_form["apiKey"] = "   "
        png = make_png()
        response = client.post("/", data=studio_form, files={"image": ("logo.png", png, "image/png")})

        assert "Please enter an API key" in response.text
        assert to_data_uri(png, "image/png") in response.text
        assert "logo.png" in response.text
        manager.create_enhancer.assert_not_called()


class TestStudioEnhance:
    def test_successful_enhancement(self, client, manager, enhancer, studio_form):
        response = client.post("/", data=studio_form, files={"image": ("logo.png", make_png(), "image/png")})

        html = response.text
        assert to_data_uri(b"mockup", "image/png") in html
        assert "Enhanced" in html
        assert 'download="enhanced-logo.png.png"' in html
        manager.create_enhancer.assert_called_once_with(api_key="sk-studio", provider="stability")
        kwargs = enhancer.enhance_image.call_args.kwargs
        assert kwargs["product_type"] == ProductType.MUG
        assert kwargs["color"] == "navy"

    def test_settings_survive_the_round_trip(self, client, studio_form):
        html = client.post("/", data=studio_form, files={"image": ("logo.png", make_png(), "image/png")}).text

        assert 'name="scale" min="10" max="200" value="120"' in html
        assert 'value="mug" checked' in html
        assert 'value="#000080"' in html  # color picker gets the resolved hex

    def test_previous_upload_is_reused(self, client, enhancer, studio_form):
        """
        Test: Second enhancement without re-uploading
        How: Send the design back as the hidden imageData data URI
        Ensures: The enhancer receives the original bytes
        """
        png = make_png("purple")
        studio_form["imageData"] = to_data_uri(png, "image/png")
        studio_form["fileName"] = "logo.png"

        response = client.post("/", data=studio_form)

        assert response.status_code == 200
        assert enhancer.enhance_image.call_args.kwargs["image"] == png
        assert enhancer.enhance_image.call_args.kwargs["mime_type"] == "image/png"

    def test_provider_error_is_made_readable(self, client, enhancer, studio_form):
        enhancer.enhance_image.side_effect = ProviderResponseError(
            'Stability API error (401): {"name": "unauthorized", "message": "Invalid API key"}', status_code=401
        )

        response = client.post("/", data=studio_form, files={"image": ("logo.png", make_png(), "image/png")})

        assert "Invalid API key" in response.text
        assert "Stability API error" not in response.text

    def test_out_of_range_settings_are_clamped(self, client, studio_form):
        studio_form.update({"scale": "900", "opacity": "-5", "merchandiseType": "yacht"})
        html = client.post("/", data=studio_form).text

        assert 'name="scale" min="10" max="200" value="200"' in html
        assert 'name="opacity" min="0" max="100" value="0"' in html
        assert 'value="t-shirt" checked' in html

    def test_non_finite_settings_are_clamped(self, client, studio_form):
        """
        Test: Slider values that aren't finite numbers
        How: Post scale=inf, rotation=-inf, opacity=nan
        Ensures: Infinities land on the bounds, NaN falls back to the default, no 500
        """
        studio_form.update({"scale": "inf", "rotation": "-inf", "opacity": "nan"})
        response = client.post("/", data=studio_form)

        assert response.status_code == 200
        html = response.text
        assert 'name="scale" min="10" max="200" value="200"' in html
        assert 'name="rotation" min="0" max="360" value="0"' in html
        assert 'name="opacity" min="0" max="100" value="100"' in html


def test_data_uri_encoding_matches_api():
    assert to_data_uri(b"abc", "image/png") == "data:image/png;base64," + base64.b64encode(b"abc").decode()

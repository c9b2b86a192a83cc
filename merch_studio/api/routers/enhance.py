"""
Enhance API endpoint and the color helper the studio page calls.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from ..models.common import APIError
from ..models.enhance import EnhanceResponse, ColorResponse
from ..dependencies.enhancer import get_enhancer_manager
from merch_studio.models.manager import EnhancerManager
from merch_studio.models.products import map_product_type
from merch_studio.utils.color import color_to_hex
from merch_studio.utils.image_converter import to_data_uri

logger = logging.getLogger(__name__)

router = APIRouter()

NO_IMAGE_ERROR = "No image file provided"
NO_API_KEY_ERROR = "API key is required"
DEFAULT_FAILURE = "Failed to enhance image"


async def read_upload(item: Any) -> Tuple[Optional[bytes], Optional[str], Optional[str]]:
    """Return (bytes, content type, filename) for a multipart file field, or Nones if it isn't one."""
    if not isinstance(item, UploadFile):
        return None, None, None
    data = await item.read()
    return data, item.content_type, item.filename


def form_text(form, name: str) -> Optional[str]:
    value = form.get(name)
    return value if isinstance(value, str) else None


async def run_enhancement(
    manager: EnhancerManager,
    image: Optional[bytes],
    api_key: Optional[str],
    product_type: Optional[str] = None,
    color: Optional[str] = None,
    provider: Optional[str] = None,
    mime_type: Optional[str] = None,
) -> Tuple[int, Dict[str, Any]]:
    """
    Validate the submission, run the enhancer and build the JSON body.

    Returns (status code, body). Shared by the JSON endpoint and the studio
    page so both see exactly the same payloads.
    """
    if not image:
        return 400, APIError(error=NO_IMAGE_ERROR).model_dump(exclude_none=True)

    if not api_key or not api_key.strip():
        return 400, APIError(error=NO_API_KEY_ERROR).model_dump(exclude_none=True)

    if len(image) > manager.max_upload_bytes:
        limit_mb = manager.max_upload_bytes / (1024 * 1024)
        return 400, APIError(error=f"Image exceeds the {limit_mb:g} MB upload limit").model_dump(exclude_none=True)

    try:
        enhancer = manager.create_enhancer(api_key=api_key.strip(), provider=provider or manager.default_provider)
        result = await enhancer.enhance_image(
            image=image,
            product_type=map_product_type(product_type),
            color=color or None,
            mime_type=mime_type,
        )

        logger.info(f"Enhanced design via {enhancer.provider_name}: {len(result.image)} bytes {result.mime_type} in {result.meta.get('latency', 0):.2f}s")

        response = EnhanceResponse(image=to_data_uri(result.image, result.mime_type), mime_type=result.mime_type)
        return 200, response.model_dump(by_alias=True)
    except Exception as e:
        logger.exception(f"Enhancement error: {e}")
        error = APIError(error=str(e) or DEFAULT_FAILURE, details=f"{type(e).__name__}: {e}")
        return 500, error.model_dump()


@router.post("/enhance", response_model=EnhanceResponse, responses={400: {"model": APIError}, 500: {"model": APIError}})
async def enhance_design(request: Request, manager: EnhancerManager = Depends(get_enhancer_manager)):
    """
    Enhance an uploaded design into a merchandise mockup.

    Multipart fields: image, productType, color, apiKey, provider.
    """
    form = await request.form()
    image, content_type, _ = await read_upload(form.get("image"))

    status_code, body = await run_enhancement(
        manager,
        image=image,
        api_key=form_text(form, "apiKey"),
        product_type=form_text(form, "productType"),
        color=form_text(form, "color"),
        provider=form_text(form, "provider"),
        mime_type=content_type,
    )
    return JSONResponse(status_code=status_code, content=body)


@router.get("/color", response_model=ColorResponse)
async def resolve_color(value: str = Query("", description="Hex value or color name")):
    """Normalise a typed color to #rrggbb for the color picker."""
    return ColorResponse(input=value, hex=color_to_hex(value))

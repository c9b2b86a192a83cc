"""
Design studio page.

The page is a single form: the upload, design controls, product type,
provider and API key all post back here, and the response re-renders the
studio with either the enhanced mockup or a readable error. The uploaded
design travels back to the browser as a data URI so the next submission
doesn't need a fresh upload.
"""
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from .enhance import DEFAULT_FAILURE, form_text, read_upload, run_enhancement
from ..models.studio import DEFAULT_PROVIDER, DesignSettings, StudioState
from ..dependencies.enhancer import get_enhancer_manager
from merch_studio.models.manager import EnhancerManager
from merch_studio.models.products import MERCHANDISE_TYPES, PROVIDER_OPTIONS
from merch_studio.utils.error_message import extract_error_message
from merch_studio.utils.image_converter import from_data_uri, to_data_uri

logger = logging.getLogger(__name__)

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).parents[1] / "templates"))

UPLOAD_FIRST = "Please upload an image first"
ENTER_API_KEY = "Please enter an API key"


def render_studio(request: Request, state: StudioState, status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "studio.html",
        {
            "state": state,
            "settings": state.settings,
            "merchandise_types": MERCHANDISE_TYPES,
            "providers": PROVIDER_OPTIONS,
        },
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse)
async def studio_page(request: Request):
    """Render an empty studio."""
    return render_studio(request, StudioState())


@router.post("/", response_class=HTMLResponse)
async def submit_studio(request: Request, manager: EnhancerManager = Depends(get_enhancer_manager)):
    """Run the 'Enhance with AI' action and re-render the studio with its outcome."""
    form = await request.form()

    settings = DesignSettings(
        scale=form_text(form, "scale"),
        rotation=form_text(form, "rotation"),
        opacity=form_text(form, "opacity"),
        color=form_text(form, "color"),
        merchandise_type=form_text(form, "merchandiseType") or form_text(form, "productType"),
    )
    state = StudioState(
        settings=settings,
        provider=form_text(form, "provider") or DEFAULT_PROVIDER,
        api_key=form_text(form, "apiKey") or "",
    )

    image, mime_type, file_name = await read_upload(form.get("image"))
    if image and mime_type and mime_type.startswith("image/"):
        state.file_name = file_name or None
    else:
        # non-image uploads are ignored, the previously loaded design stays
        image, mime_type = None, None
        previous = form_text(form, "imageData")
        if previous:
            try:
                image, mime_type = from_data_uri(previous)
                state.file_name = form_text(form, "fileName") or None
            except ValueError:
                logger.warning("Discarding malformed imageData from studio form")

    if image:
        state.preview_url = to_data_uri(image, mime_type)

    if not image:
        state.error = UPLOAD_FIRST
        return render_studio(request, state)
    if not state.api_key.strip():
        state.error = ENTER_API_KEY
        return render_studio(request, state)

    status_code, body = await run_enhancement(
        manager,
        image=image,
        api_key=state.api_key,
        product_type=settings.merchandise_type,
        color=settings.color,
        provider=state.provider,
        mime_type=mime_type,
    )
    if status_code == 200:
        state.enhanced_url = body["image"]
    else:
        state.error = extract_error_message(body.get("error") or DEFAULT_FAILURE)

    return render_studio(request, state)

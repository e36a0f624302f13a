import logging
import time

from fastapi import APIRouter, File, Form, Response, UploadFile, status
from fastapi.responses import JSONResponse

from app.api.v1.schemas import ErrorResponse, StyleInfo, StyleListResponse
from app.models.styles import DEFAULT_STYLE, list_styles
from app.services.overlay import render_overlay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.get(
    "/styles",
    response_model=StyleListResponse,
    tags=["styles"],
    summary="List available text styles",
)
async def get_styles() -> StyleListResponse:
    """Return every style key accepted by `/api/generate` with its label and font."""
    return StyleListResponse(styles=[StyleInfo.model_validate(style) for style in list_styles()])


@router.post(
    "/generate",
    tags=["overlay"],
    summary="Overlay text onto an uploaded image",
    response_class=Response,
    responses={
        200: {"content": {"image/jpeg": {}}, "description": "The composited JPEG."},
        400: {"model": ErrorResponse, "description": "Image or text missing."},
        500: {"model": ErrorResponse, "description": "Processing failed."},
    },
)
async def generate(
    image: UploadFile | None = File(default=None, description="Source image (any format Pillow reads)."),
    text: str = Form(default="", description="Text to draw on the image."),
    style: str = Form(default=DEFAULT_STYLE, description="Style key, see `/api/styles`."),
) -> Response:
    """
    Overlay `text` onto `image` and return the result as JPEG.

    The multipart/form-data request carries:
    - `image`: required image file.
    - `text`: required, non-blank text.
    - `style`: optional style key; unknown keys use the modern style.

    When an OpenRouter API key is configured a vision model picks the
    placement; otherwise, or if that call fails, the style's default
    placement is used. The response carries `X-Process-Time` in
    milliseconds.
    """
    start = time.perf_counter()
    logger.info("POST /api/generate received")

    try:
        user_text = (text or "").strip()
        image_bytes = await image.read() if image is not None else b""
        if not image_bytes or not user_text:
            logger.warning("Missing image or text")
            return _error("Missing data", status.HTTP_400_BAD_REQUEST)

        result = render_overlay(image_bytes, user_text, style or DEFAULT_STYLE)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Processing error: %s", exc)
        return _error(str(exc) or "Processing failed", status.HTTP_500_INTERNAL_SERVER_ERROR)

    elapsed = int((time.perf_counter() - start) * 1000)
    return Response(
        content=result.jpeg,
        media_type="image/jpeg",
        headers={"X-Process-Time": f"{elapsed}ms"},
    )

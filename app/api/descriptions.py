"""Image description endpoint: one route per model family, caller-supplied key."""

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from app.core.dependencies import get_description_gateway
from app.gateway.errors import DescriptionError
from app.gateway.gateway import DescriptionGateway
from app.gateway.types import DescriptionRequest
from app.schemas.description import DescriptionCreate, DescriptionResponse, ErrorResponse

router = APIRouter(prefix="/generate-description", tags=["descriptions"])


def error_response(exc: DescriptionError) -> JSONResponse:
    """Map a pipeline error to its HTTP status and public message only."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


@router.post(
    "/{model}",
    response_model=DescriptionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_description(
    model: str,
    body: DescriptionCreate | None = None,
    x_api_key: str | None = Header(None, description="Provider API key"),
    gateway: DescriptionGateway = Depends(get_description_gateway),
):
    """Describe the image at imageUrl with the provider behind ``model``.

    Known models: gpt-4o, gpt-4-turbo, gemini-1.5-flash, claude-3.
    """
    request = DescriptionRequest(
        image_url=body.image_url if body else None,
        api_key=x_api_key,
        model=model,
    )
    try:
        result = await gateway.describe(request)
    except DescriptionError as e:
        return error_response(e)

    return DescriptionResponse(alt_text=result.alt_text, long_description=result.long_description)

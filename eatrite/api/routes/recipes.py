"""Recipe generation endpoints."""

import logging
from typing import List, Optional

from fastapi import (
    APIRouter,
    Body,
    Depends,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)

from eatrite.api.dependencies import get_recipe_generator
from eatrite.config import settings
from eatrite.middleware.rate_limit import GENERATION_RATE_LIMIT, limiter
from eatrite.models.generation import GenerationRequest, SuggestionRequest, SuggestionResponse
from eatrite.models.recipe import Recipe
from eatrite.services.image_service import SUPPORTED_MIME_TYPES, ImageService
from eatrite.services.recipe_generator import RecipeGenerator
from eatrite.utils.exceptions import (
    ImageProcessingError,
    RecipeGenerationError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/recipes", tags=["recipes"])


async def _generate(recipe_generator: RecipeGenerator, generation_request: GenerationRequest) -> Recipe:
    """Run generation and translate service errors into HTTP errors."""
    try:
        return await recipe_generator.generate(generation_request, timeout=settings.generation_timeout)

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Invalid generation request", "detail": str(e)},
        ) from e
    except TransportError as e:
        if e.timed_out:
            raise HTTPException(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                detail={"error": "Timeout", "detail": str(e)},
            ) from e
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "Recipe service unavailable", "detail": str(e)},
        ) from e
    except RecipeGenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "Failed to generate recipe", "detail": str(e)},
        ) from e


@router.post("/generate", response_model=Recipe)
@limiter.limit(GENERATION_RATE_LIMIT)
async def generate_recipe(
    request: Request,
    generation_request: GenerationRequest = Body(...),
    recipe_generator: RecipeGenerator = Depends(get_recipe_generator),
) -> Recipe:
    """
    Generate a recipe from ingredients, or from a base64 ingredient photo (`imageBase64`).
    """
    logger.info(
        "Route /recipes/generate called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/recipes/generate",
            "params": {
                "ingredients_count": len(generation_request.ingredients),
                "image_mode": generation_request.is_image_mode,
            },
        },
    )

    if generation_request.image is not None:
        try:
            image_bytes = ImageService.decode_base64(generation_request.image)
        except ImageProcessingError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "Invalid image", "detail": str(e)},
            ) from e
        if len(image_bytes) > settings.max_request_size:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail={"error": "Image too large", "detail": f"Max size is {settings.max_request_size} bytes"},
            )

    return await _generate(recipe_generator, generation_request)


@router.post("/generate-from-image", response_model=Recipe)
@limiter.limit(GENERATION_RATE_LIMIT)
async def generate_recipe_from_image(
    request: Request,
    file: UploadFile = File(..., description="Photo of the ingredients (JPEG, PNG or WebP)"),
    cooking_time: int = Form(30, alias="cookingTime", gt=0, le=1440),
    servings: int = Form(4, gt=0, le=100),
    dietary_restrictions: List[str] = Form([], alias="dietaryRestrictions"),
    cuisine_type: Optional[str] = Form(None, alias="cuisineType"),
    additional_notes: Optional[str] = Form(None, alias="additionalNotes"),
    recipe_generator: RecipeGenerator = Depends(get_recipe_generator),
) -> Recipe:
    """
    Generate a recipe from an uploaded ingredient photo.

    - **file**: Image file (JPEG, PNG, or WebP, max 10MB)
    """
    logger.info(
        "Route /recipes/generate-from-image called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/recipes/generate-from-image",
            "params": {
                "filename": file.filename,
                "content_type": file.content_type,
                "cookingTime": cooking_time,
                "servings": servings,
                "dietaryRestrictions": dietary_restrictions,
                "cuisineType": cuisine_type,
            },
        },
    )

    if file.content_type and file.content_type.lower() not in SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Invalid image type",
                "detail": f"Unsupported content-type: {file.content_type}. Allowed: {sorted(SUPPORTED_MIME_TYPES)}",
            },
        )

    image_data = await file.read()
    if len(image_data) > settings.max_request_size:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={"error": "File too large", "detail": f"Max size is {settings.max_request_size} bytes"},
        )

    try:
        validated_bytes, mime_type = ImageService.validate_image(image_data, file.filename or "image")
        optimized_bytes, optimized_mime = ImageService.prepare_for_vision(validated_bytes, mime_type)
    except ImageProcessingError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Invalid image", "detail": str(e)},
        ) from e

    image_base64 = ImageService.encode_base64(optimized_bytes)
    generation_request = GenerationRequest(
        dietary_restrictions=dietary_restrictions,
        cuisine_type=cuisine_type,
        cooking_time=cooking_time,
        servings=servings,
        additional_notes=additional_notes,
        image=f"data:{optimized_mime};base64,{image_base64}",
    )

    return await _generate(recipe_generator, generation_request)


@router.post("/suggestions", response_model=SuggestionResponse)
@limiter.limit(GENERATION_RATE_LIMIT)
async def suggest_recipes(
    request: Request,
    suggestion_request: SuggestionRequest = Body(...),
    recipe_generator: RecipeGenerator = Depends(get_recipe_generator),
) -> SuggestionResponse:
    """
    Suggest up to 3 recipe ideas for the given ingredient names.

    Best-effort: an unavailable AI service yields an empty list, not an error.
    """
    logger.info(
        "Route /recipes/suggestions called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/recipes/suggestions",
            "params": {"ingredients": suggestion_request.ingredients},
        },
    )

    suggestions = await recipe_generator.suggest(
        suggestion_request.ingredients, timeout=settings.generation_timeout
    )
    return SuggestionResponse(suggestions=suggestions)

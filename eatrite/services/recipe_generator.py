"""Recipe generation service: request validation in front of a pluggable backend."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from eatrite.config import Settings, settings as default_settings
from eatrite.models.generation import GenerationRequest
from eatrite.models.recipe import Recipe
from eatrite.services.mock_service import MockRecipeBackend
from eatrite.services.openai_service import OpenAIRecipeBackend
from eatrite.services.recipe_backend import RecipeBackend
from eatrite.utils.exceptions import TransportError, ValidationError

logger = logging.getLogger(__name__)


class RecipeGenerator:
    """Generates recipes through the backend it was constructed with."""

    def __init__(self, backend: RecipeBackend):
        self.backend = backend

    async def generate(self, request: GenerationRequest, *, timeout: Optional[float] = None) -> Recipe:
        """
        Generate a recipe for the request.

        Args:
            request: Generation request
            timeout: Optional limit in seconds for the whole call

        Raises:
            ValidationError: If the request has neither ingredients nor an image
            RecipeGenerationError: If the backend failed
        """
        if not request.is_image_mode and not request.has_ingredients:
            raise ValidationError("Provide at least one ingredient or an ingredient image")

        logger.info(
            "Generating recipe",
            extra={
                "backend": self.backend.name,
                "image_mode": request.is_image_mode,
                "ingredients_count": len(request.ingredients),
            },
        )

        try:
            return await asyncio.wait_for(self.backend.generate(request), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Recipe generation took too long (> {timeout:.0f}s)",
                image_mode=request.is_image_mode,
                timed_out=True,
            ) from e

    async def suggest(self, ingredient_names: List[str], *, timeout: Optional[float] = None) -> List[str]:
        """Best-effort recipe ideas; never raises for backend failures."""
        names = [name.strip() for name in ingredient_names if isinstance(name, str) and name.strip()]
        if not names:
            return []

        try:
            return await asyncio.wait_for(self.backend.suggest(names), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Recipe suggestions timed out after %ss", timeout)
            return []
        except Exception as e:
            logger.warning("Recipe suggestions failed: %s", e, exc_info=True)
            return []


def create_backend(config: Optional[Settings] = None) -> RecipeBackend:
    """Select the backend from configuration: mock unless an OpenAI key is configured."""
    config = config or default_settings
    if config.mock_ai_enabled:
        logger.info("Using mock AI backend")
        return MockRecipeBackend(
            delay=config.mock_delay_seconds,
            suggestion_delay=config.mock_suggestion_delay_seconds,
        )

    logger.info("Using OpenAI backend (model=%s)", config.openai_text_model)
    return OpenAIRecipeBackend(
        api_key=config.openai_api_key,
        base_url=config.openai_base_url,
        text_model=config.openai_text_model,
        vision_model=config.openai_vision_model,
        suggestion_model=config.openai_suggestion_model,
        temperature=config.openai_temperature,
        max_tokens=config.openai_max_tokens,
        suggestion_max_tokens=config.openai_suggestion_max_tokens,
        timeout=config.http_timeout,
    )


def create_recipe_generator(config: Optional[Settings] = None) -> RecipeGenerator:
    """Create a RecipeGenerator wired to the configured backend."""
    return RecipeGenerator(create_backend(config))

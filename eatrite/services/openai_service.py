"""
OpenAI chat-completion backend for recipe generation.

Key design:
- Text mode sends the structured ingredient list; image mode sends the photo as
  a separate image_url content part and keeps the ingredient list out of the prompt.
- The completion content must be a JSON object; it is coerced into a Recipe once,
  with missing fields defaulted (cookingTime/servings fall back to the request).
- No retries. Every failure surfaces as a RecipeGenerationError variant.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from eatrite.config import settings
from eatrite.models.generation import GenerationRequest
from eatrite.models.recipe import Recipe
from eatrite.services.image_service import ImageService
from eatrite.services.prompt_service import (
    IMAGE_RECIPE_SYSTEM_PROMPT,
    RECIPE_SYSTEM_PROMPT,
    SUGGESTION_SYSTEM_PROMPT,
    create_image_recipe_prompt,
    create_recipe_prompt,
    create_suggestion_prompt,
)
from eatrite.services.recipe_backend import RecipeBackend
from eatrite.utils.exceptions import (
    EmptyContentError,
    MalformedContentError,
    RecipeGenerationError,
    TransportError,
    UpstreamRejectedError,
)
from eatrite.utils.llm_helpers import (
    get_error_message,
    get_message_content,
    parse_json_object,
    parse_suggestions,
)
from eatrite.utils.recipe_normalization import coerce_recipe

logger = logging.getLogger(__name__)


class OpenAIRecipeBackend(RecipeBackend):
    """Live backend calling the OpenAI chat-completions endpoint."""

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        text_model: Optional[str] = None,
        vision_model: Optional[str] = None,
        suggestion_model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        suggestion_max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self.text_model = text_model or settings.openai_text_model
        self.vision_model = vision_model or settings.openai_vision_model
        self.suggestion_model = suggestion_model or settings.openai_suggestion_model
        self.temperature = temperature if temperature is not None else settings.openai_temperature
        self.max_tokens = max_tokens or settings.openai_max_tokens
        self.suggestion_max_tokens = suggestion_max_tokens or settings.openai_suggestion_max_tokens
        self.timeout = timeout if timeout is not None else settings.http_timeout
        # Injected clients are shared and never closed here
        self._client = client

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------

    async def generate(self, request: GenerationRequest) -> Recipe:
        """Generate a recipe, using the vision model when the request carries an image."""
        if request.is_image_mode:
            return await self._generate_from_image(request)

        logger.info("Generating recipe from %d ingredients", len(request.ingredients))
        payload = self._build_payload(
            model=self.text_model,
            system_prompt=RECIPE_SYSTEM_PROMPT,
            user_content=create_recipe_prompt(request),
            max_tokens=self.max_tokens,
        )
        return await self._complete_recipe(payload, request)

    async def suggest(self, ingredient_names: List[str]) -> List[str]:
        """Get up to 3 recipe ideas; returns [] on any failure."""
        payload = self._build_payload(
            model=self.suggestion_model,
            system_prompt=SUGGESTION_SYSTEM_PROMPT,
            user_content=create_suggestion_prompt(ingredient_names),
            max_tokens=self.suggestion_max_tokens,
        )

        try:
            data = await self._post_chat_completion(payload, image_mode=False)
        except RecipeGenerationError as e:
            logger.warning("Error getting recipe suggestions: %s", e.detail)
            return []
        except Exception as e:
            logger.warning("Error getting recipe suggestions: %s", e, exc_info=True)
            return []

        return parse_suggestions(get_message_content(data) or "")

    # ---------------------------------------------------------------------
    # Request building
    # ---------------------------------------------------------------------

    async def _generate_from_image(self, request: GenerationRequest) -> Recipe:
        logger.info("Generating recipe from image")
        user_content = [
            {"type": "text", "text": create_image_recipe_prompt(request)},
            {"type": "image_url", "image_url": {"url": ImageService.to_data_url(request.image)}},
        ]
        payload = self._build_payload(
            model=self.vision_model,
            system_prompt=IMAGE_RECIPE_SYSTEM_PROMPT,
            user_content=user_content,
            max_tokens=self.max_tokens,
        )
        return await self._complete_recipe(payload, request)

    def _build_payload(
        self,
        *,
        model: str,
        system_prompt: str,
        user_content: Any,
        max_tokens: int,
    ) -> Dict[str, Any]:
        return {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "temperature": self.temperature,
            "max_tokens": max_tokens,
        }

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    # ---------------------------------------------------------------------
    # Transport / parsing
    # ---------------------------------------------------------------------

    async def _complete_recipe(self, payload: Dict[str, Any], request: GenerationRequest) -> Recipe:
        image_mode = request.is_image_mode
        try:
            data = await self._post_chat_completion(payload, image_mode=image_mode)

            content = get_message_content(data)
            if content is None:
                raise EmptyContentError(image_mode=image_mode)

            try:
                recipe_json = parse_json_object(content)
            except ValueError as e:
                raise MalformedContentError(str(e), content, image_mode=image_mode) from e

            return coerce_recipe(recipe_json, request)

        except RecipeGenerationError as e:
            logger.error("AI service error: %s", str(e), exc_info=True)
            raise

    async def _post_chat_completion(self, payload: Dict[str, Any], *, image_mode: bool) -> Dict[str, Any]:
        """Single chat-completion call. Returns the decoded JSON body."""
        try:
            if self._client is not None:
                response = await self._client.post(self.completions_url, json=payload, headers=self._headers())
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.completions_url, json=payload, headers=self._headers())
        except httpx.TimeoutException as e:
            raise TransportError(
                f"OpenAI request timed out: {e}", image_mode=image_mode, timed_out=True
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Could not reach OpenAI: {e}", image_mode=image_mode) from e

        if not response.is_success:
            try:
                error_body = response.json()
            except ValueError:
                error_body = None
            message = get_error_message(error_body) or response.reason_phrase or f"HTTP {response.status_code}"
            raise UpstreamRejectedError(response.status_code, message, image_mode=image_mode)

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedContentError(
                f"response body is not JSON: {e}", response.text, image_mode=image_mode
            ) from e

        logger.debug("OpenAI raw response:\n%s", data)
        return data if isinstance(data, dict) else {}

"""Network-free recipe backend for development and testing."""

import asyncio
import logging
from typing import List, Optional

from eatrite.config import settings
from eatrite.models.generation import GenerationRequest
from eatrite.models.recipe import Difficulty, NutritionInfo, Recipe, RecipeIngredient
from eatrite.services.recipe_backend import RecipeBackend

logger = logging.getLogger(__name__)

MOCK_SUGGESTIONS = (
    "Stir-fry with vegetables",
    "Pasta dish with sauce",
    "Quick salad with protein",
)


class MockRecipeBackend(RecipeBackend):
    """Returns canned recipes after an artificial delay.

    The delay keeps the async suspension callers see from the live backend;
    pass ``delay=0`` in tests.
    """

    name = "mock"

    def __init__(self, delay: Optional[float] = None, suggestion_delay: Optional[float] = None) -> None:
        self.delay = settings.mock_delay_seconds if delay is None else delay
        self.suggestion_delay = (
            settings.mock_suggestion_delay_seconds if suggestion_delay is None else suggestion_delay
        )

    async def generate(self, request: GenerationRequest) -> Recipe:
        await asyncio.sleep(self.delay)

        if request.is_image_mode:
            logger.info("Returning mock image-based recipe")
            return self._image_recipe(request)

        logger.info("Returning mock recipe for %d ingredients", len(request.ingredients))
        return self._text_recipe(request)

    async def suggest(self, ingredient_names: List[str]) -> List[str]:
        await asyncio.sleep(self.suggestion_delay)
        return list(MOCK_SUGGESTIONS)

    @staticmethod
    def _image_recipe(request: GenerationRequest) -> Recipe:
        return Recipe(
            title="Image-Based Recipe",
            description="A delicious recipe created from your ingredient photo",
            ingredients=[
                RecipeIngredient(name="Fresh vegetables", quantity="2", unit="cups", notes="From your photo"),
                RecipeIngredient(name="Protein", quantity="1", unit="lb", notes="Visible in image"),
                RecipeIngredient(name="Seasonings", quantity="to taste", unit="tsp", notes="As needed"),
            ],
            instructions=[
                "Analyze the ingredients from your photo",
                "Prepare and wash all vegetables",
                "Cook protein to desired doneness",
                "Combine ingredients and season to taste",
                "Serve hot and enjoy!",
            ],
            nutrition_info=NutritionInfo(calories=400, protein="25g", carbs="30g", fat="15g", fiber="10g"),
            cooking_time=request.cooking_time,
            servings=request.servings,
            difficulty=Difficulty.EASY,
            tips=[
                "Use fresh ingredients for best results",
                "Adjust cooking time based on ingredient sizes",
            ],
        )

    @staticmethod
    def _text_recipe(request: GenerationRequest) -> Recipe:
        return Recipe(
            title="Delicious Recipe",
            description="A tasty dish made with your ingredients",
            ingredients=[
                RecipeIngredient(
                    name=ing.name,
                    quantity=ing.quantity,
                    unit=ing.unit,
                    notes="Fresh ingredients recommended",
                )
                for ing in request.ingredients
            ],
            instructions=[
                "Prepare all ingredients as listed",
                "Heat oil in a large pan over medium heat",
                "Add ingredients and cook until done",
                "Season to taste and serve hot",
            ],
            nutrition_info=NutritionInfo(calories=350, protein="15g", carbs="45g", fat="12g", fiber="8g"),
            cooking_time=request.cooking_time,
            servings=request.servings,
            difficulty=Difficulty.EASY,
            tips=[
                "Use fresh ingredients for best results",
                "Adjust seasoning to your taste preferences",
            ],
        )

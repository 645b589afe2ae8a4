"""Pydantic models."""

from eatrite.models.generation import (
    GenerationRequest,
    IngredientInput,
    SuggestionRequest,
    SuggestionResponse,
)
from eatrite.models.recipe import (
    Difficulty,
    NutritionInfo,
    Recipe,
    RecipeIngredient,
)

__all__ = [
    "Difficulty",
    "GenerationRequest",
    "IngredientInput",
    "NutritionInfo",
    "Recipe",
    "RecipeIngredient",
    "SuggestionRequest",
    "SuggestionResponse",
]

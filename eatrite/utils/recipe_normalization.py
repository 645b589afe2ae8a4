"""Coercion of raw LLM recipe JSON into the Recipe model.

The completion backend is asked to fill in a JSON template but nothing
guarantees that it does. ``RecipePayload`` accepts whatever came back,
turning every missing or wrong-typed field into ``None``; ``to_recipe``
then applies the per-field defaults once, taking ``cookingTime`` and
``servings`` from the originating request.
"""

import logging
import math
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from eatrite.models.generation import GenerationRequest
from eatrite.models.recipe import Difficulty, NutritionInfo, Recipe, RecipeIngredient

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Generated Recipe"
DEFAULT_DESCRIPTION = "A delicious recipe made with your ingredients"
DEFAULT_CALORIES = 0
DEFAULT_MACRO = "0g"
DEFAULT_DIFFICULTY = Difficulty.MEDIUM

_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


# ---------------------------------------------------------------------------
# Scalar coercion helpers
# ---------------------------------------------------------------------------

def _text_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _positive_int_or_none(value: Any) -> Optional[int]:
    if _is_number(value):
        number = int(round(value))
        return number if number > 0 else None
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match:
            number = int(round(float(match.group(1))))
            return number if number > 0 else None
    return None


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if _is_number(item):
            item = str(item)
        text = _text_or_none(item)
        if text:
            items.append(text)
    return items


def _amount_text(value: Any) -> str:
    if _is_number(value):
        return f"{value:g}"
    return _text_or_none(value) or ""


# ---------------------------------------------------------------------------
# Intermediate payload
# ---------------------------------------------------------------------------

class NutritionPayload(BaseModel):
    """Lenient view of ``nutritionInfo``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    calories: Optional[int] = None
    protein: Optional[str] = None
    carbs: Optional[str] = None
    fat: Optional[str] = None
    fiber: Optional[str] = None

    @field_validator("calories", mode="before")
    @classmethod
    def coerce_calories(cls, value: Any) -> Optional[int]:
        if _is_number(value):
            return max(int(round(value)), 0)
        if isinstance(value, str):
            match = _LEADING_NUMBER.match(value)
            if match:
                return int(round(float(match.group(1))))
        return None

    @field_validator("protein", "carbs", "fat", "fiber", mode="before")
    @classmethod
    def coerce_macro(cls, value: Any) -> Optional[str]:
        if _is_number(value):
            return f"{value:g}g"
        return _text_or_none(value)

    def to_nutrition_info(self) -> NutritionInfo:
        return NutritionInfo(
            calories=self.calories if self.calories is not None else DEFAULT_CALORIES,
            protein=self.protein or DEFAULT_MACRO,
            carbs=self.carbs or DEFAULT_MACRO,
            fat=self.fat or DEFAULT_MACRO,
            fiber=self.fiber or DEFAULT_MACRO,
        )


class RecipePayload(BaseModel):
    """Lenient view of the recipe JSON returned by the completion backend.

    Every field is optional and wrong-typed values become ``None`` (or an
    empty list) instead of failing validation.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    ingredients: List[RecipeIngredient] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    nutrition_info: NutritionPayload = Field(default_factory=NutritionPayload)
    cooking_time: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[Difficulty] = None
    tips: List[str] = Field(default_factory=list)

    @field_validator("title", "description", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Optional[str]:
        return _text_or_none(value)

    @field_validator("instructions", "tips", mode="before")
    @classmethod
    def coerce_string_list(cls, value: Any) -> List[str]:
        return _string_list(value)

    @field_validator("ingredients", mode="before")
    @classmethod
    def coerce_ingredients(cls, value: Any) -> List[Dict[str, Any]]:
        if not isinstance(value, list):
            return []
        ingredients = []
        for item in value:
            if isinstance(item, str) and item.strip():
                ingredients.append({"name": item.strip()})
                continue
            if not isinstance(item, dict):
                continue
            name = _text_or_none(item.get("name"))
            if not name:
                continue
            ingredients.append(
                {
                    "name": name,
                    "quantity": _amount_text(item.get("quantity")),
                    "unit": _amount_text(item.get("unit")),
                    "notes": _text_or_none(item.get("notes")),
                }
            )
        return ingredients

    @field_validator("nutrition_info", mode="before")
    @classmethod
    def coerce_nutrition(cls, value: Any) -> Dict[str, Any]:
        return value if isinstance(value, dict) else {}

    @field_validator("cooking_time", "servings", mode="before")
    @classmethod
    def coerce_positive_int(cls, value: Any) -> Optional[int]:
        return _positive_int_or_none(value)

    @field_validator("difficulty", mode="before")
    @classmethod
    def coerce_difficulty(cls, value: Any) -> Optional[Difficulty]:
        if not isinstance(value, str):
            return None
        wanted = value.strip().lower()
        for level in Difficulty:
            if level.value.lower() == wanted:
                return level
        return None

    def to_recipe(self, request: GenerationRequest) -> Recipe:
        """Apply defaults and build the final Recipe."""
        return Recipe(
            title=self.title or DEFAULT_TITLE,
            description=self.description or DEFAULT_DESCRIPTION,
            ingredients=list(self.ingredients),
            instructions=list(self.instructions),
            nutrition_info=self.nutrition_info.to_nutrition_info(),
            cooking_time=self.cooking_time or request.cooking_time,
            servings=self.servings or request.servings,
            difficulty=self.difficulty or DEFAULT_DIFFICULTY,
            tips=list(self.tips),
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def unwrap_recipe_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Unwrap single-key envelopes such as ``{"recipe": {...}}``."""
    if len(data) == 1:
        key, inner = next(iter(data.items()))
        if isinstance(inner, dict) and "recipe" in key.lower():
            logger.info(f"Unwrapping nested JSON response from key: {key}")
            return inner
    return data


def coerce_recipe(data: Dict[str, Any], request: GenerationRequest) -> Recipe:
    """Coerce parsed recipe JSON into a well-formed Recipe.

    Args:
        data: JSON object parsed from the completion content
        request: Request the recipe was generated for

    Returns:
        Recipe with every missing field defaulted
    """
    payload = RecipePayload.model_validate(unwrap_recipe_data(data))
    return payload.to_recipe(request)

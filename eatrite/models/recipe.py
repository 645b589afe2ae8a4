"""Recipe Pydantic models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Difficulty(str, Enum):
    """Recipe difficulty level."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class RecipeIngredient(BaseModel):
    """Single ingredient of a generated recipe."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str = Field(..., description="Ingredient name")
    quantity: str = Field("", description="Quantity/amount (e.g., '1', '2.5', 'to taste')")
    unit: str = Field("", description="Unit of measurement (e.g., 'cups', 'tsp')")
    notes: Optional[str] = Field(None, description="Optional preparation notes")


class NutritionInfo(BaseModel):
    """Nutritional information per serving."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    calories: int = Field(0, ge=0, description="Calories per serving")
    protein: str = Field("0g", description="Protein, unit-suffixed (e.g., '15g')")
    carbs: str = Field("0g", description="Carbohydrates, unit-suffixed")
    fat: str = Field("0g", description="Fat, unit-suffixed")
    fiber: str = Field("0g", description="Fiber, unit-suffixed")


class Recipe(BaseModel):
    """Normalized recipe returned by every generation backend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "title": "Garlic Butter Eggs",
                "description": "Soft scrambled eggs finished with garlic butter",
                "ingredients": [
                    {"name": "Egg", "quantity": "2", "unit": "pcs", "notes": None},
                    {"name": "Butter", "quantity": "1", "unit": "tbsp", "notes": "unsalted"},
                ],
                "instructions": [
                    "Melt the butter over low heat.",
                    "Whisk the eggs and stir gently until just set.",
                ],
                "nutritionInfo": {
                    "calories": 220,
                    "protein": "13g",
                    "carbs": "1g",
                    "fat": "18g",
                    "fiber": "0g",
                },
                "cookingTime": 10,
                "servings": 2,
                "difficulty": "Easy",
                "tips": ["Take the pan off the heat while the eggs still look wet."],
            }
        },
    )

    title: str = Field(..., min_length=1, description="Recipe title")
    description: str = Field(..., min_length=1, description="Short description of the dish")
    ingredients: List[RecipeIngredient] = Field(default_factory=list, description="Ingredients used")
    instructions: List[str] = Field(default_factory=list, description="Steps in execution order")
    nutrition_info: NutritionInfo = Field(default_factory=NutritionInfo, description="Nutritional information")
    cooking_time: int = Field(..., gt=0, description="Cooking time in minutes")
    servings: int = Field(..., gt=0, description="Number of servings")
    difficulty: Difficulty = Field(Difficulty.MEDIUM, description="Easy, Medium or Hard")
    tips: List[str] = Field(default_factory=list, description="Cooking tips")

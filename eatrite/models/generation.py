"""Generation request Pydantic models."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class IngredientInput(BaseModel):
    """Ingredient supplied by the user."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, str_strip_whitespace=True
    )

    name: str = Field(..., min_length=1, max_length=200, description="Ingredient name")
    quantity: str = Field("", max_length=50, description="Amount (e.g., '2', '1/2')")
    unit: str = Field("", max_length=50, description="Unit of measurement (e.g., 'cups', 'pcs')")

    @field_validator("quantity", "unit", mode="before")
    @classmethod
    def stringify(cls, value: Any) -> Any:
        """Accept numeric quantities from JSON clients."""
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def as_prompt_text(self) -> str:
        """Render as '<quantity> <unit> <name>'."""
        return f"{self.quantity} {self.unit} {self.name}"


class GenerationRequest(BaseModel):
    """Structured input describing the recipe to generate.

    The request is in image mode whenever ``image`` is set; the textual
    ingredient list is then advisory only.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    ingredients: List[IngredientInput] = Field(
        default_factory=list, max_length=50, description="Ingredients to cook with"
    )
    dietary_restrictions: List[str] = Field(
        default_factory=list, description="Dietary restrictions (e.g., 'Vegetarian')"
    )
    cuisine_type: Optional[str] = Field(None, max_length=100, description="Cuisine style hint")
    cooking_time: int = Field(..., gt=0, le=1440, description="Maximum cooking time in minutes")
    servings: int = Field(..., gt=0, le=100, description="Number of servings")
    additional_notes: Optional[str] = Field(None, max_length=2000, description="Free text appended to the prompt")
    image: Optional[str] = Field(
        None,
        alias="imageBase64",
        description="Base64-encoded ingredient photo (bare payload or data: URL)",
    )

    @field_validator("dietary_restrictions", mode="before")
    @classmethod
    def normalize_restrictions(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, (list, tuple, set)):
            return value
        seen: List[str] = []
        for item in value:
            if not isinstance(item, str):
                continue
            item = item.strip()
            if item and item not in seen:
                seen.append(item)
        return seen

    @field_validator("cuisine_type", "additional_notes", "image", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def is_image_mode(self) -> bool:
        """True when the photo drives generation."""
        return self.image is not None

    @property
    def has_ingredients(self) -> bool:
        return len(self.ingredients) > 0


class SuggestionRequest(BaseModel):
    """Request body for recipe idea suggestions."""

    ingredients: List[str] = Field(..., description="Ingredient names")


class SuggestionResponse(BaseModel):
    """Recipe idea suggestions (at most 3)."""

    suggestions: List[str] = Field(default_factory=list, description="Short recipe ideas")

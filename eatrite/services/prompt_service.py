"""Prompt generation for recipe generation and suggestions."""

from typing import List

from eatrite.models.generation import GenerationRequest

RECIPE_SYSTEM_PROMPT = (
    "You are a professional chef and nutritionist. Generate detailed, practical recipes that are:\n"
    "- Easy to follow with clear step-by-step instructions\n"
    "- Nutritionally balanced and healthy\n"
    "- Respectful of dietary restrictions\n"
    "- Optimized for the specified cooking time and servings\n"
    "- Include helpful cooking tips and variations\n\n"
    "Always respond with valid JSON in the exact format specified."
)

IMAGE_RECIPE_SYSTEM_PROMPT = (
    "You are a professional chef and nutritionist. Analyze the image of ingredients and generate "
    "a detailed, practical recipe that:\n"
    "- Uses the ingredients visible in the image\n"
    "- Is easy to follow with clear step-by-step instructions\n"
    "- Is nutritionally balanced and healthy\n"
    "- Respects any dietary restrictions mentioned\n"
    "- Is optimized for the specified cooking time and servings\n"
    "- Includes helpful cooking tips and variations\n\n"
    "Always respond with valid JSON in the exact format specified."
)

SUGGESTION_SYSTEM_PROMPT = (
    "You are a helpful cooking assistant. Suggest 3 recipe ideas based on the provided ingredients."
)

RECIPE_JSON_TEMPLATE = """{
  "title": "Recipe Name",
  "description": "Brief description of the dish",
  "ingredients": [
    {
      "name": "ingredient name",
      "quantity": "amount",
      "unit": "unit of measurement",
      "notes": "optional notes"
    }
  ],
  "instructions": [
    "Step 1 instruction",
    "Step 2 instruction",
    "Step 3 instruction"
  ],
  "nutritionInfo": {
    "calories": 350,
    "protein": "15g",
    "carbs": "45g",
    "fat": "12g",
    "fiber": "8g"
  },
  "cookingTime": 30,
  "servings": 4,
  "difficulty": "Easy",
  "tips": [
    "Helpful cooking tip 1",
    "Helpful cooking tip 2"
  ]
}"""


def _constraint_clauses(request: GenerationRequest) -> str:
    """Dietary, cuisine and notes clauses; each omitted when empty."""
    clauses = ""
    if request.dietary_restrictions:
        clauses += f"Dietary restrictions: {', '.join(request.dietary_restrictions)}. "
    if request.cuisine_type:
        clauses += f"Cuisine style: {request.cuisine_type}. "
    if request.additional_notes:
        clauses += f"Additional notes: {request.additional_notes}. "
    return clauses


def _requirements_block(request: GenerationRequest, source_rule: str) -> str:
    return (
        "Requirements:\n"
        f"- Cooking time: {request.cooking_time} minutes maximum\n"
        f"- Servings: {request.servings} people\n"
        f"- {source_rule}\n"
        "- Include nutritional information\n"
        "- Provide helpful cooking tips"
    )


def format_ingredient_list(request: GenerationRequest) -> str:
    """Render ingredients as '<quantity> <unit> <name>' joined by commas."""
    return ", ".join(ing.as_prompt_text() for ing in request.ingredients)


def create_recipe_prompt(request: GenerationRequest) -> str:
    """Create the user prompt for text-mode recipe generation."""
    return (
        f"Create a delicious recipe using these ingredients: {format_ingredient_list(request)}.\n\n"
        f"{_constraint_clauses(request)}\n"
        f"{_requirements_block(request, 'Must use all provided ingredients')}\n\n"
        "Respond with a JSON object in this exact format:\n"
        f"{RECIPE_JSON_TEMPLATE}"
    )


def create_image_recipe_prompt(request: GenerationRequest) -> str:
    """Create the text part of an image-mode prompt.

    The ingredient list is left out: the photo is the ingredient source.
    """
    return (
        "Analyze the ingredients in this image and create a delicious recipe.\n\n"
        f"{_constraint_clauses(request)}\n"
        f"{_requirements_block(request, 'Use ingredients visible in the image')}\n\n"
        "Respond with a JSON object in this exact format:\n"
        f"{RECIPE_JSON_TEMPLATE}"
    )


def create_suggestion_prompt(ingredient_names: List[str]) -> str:
    """Create the user prompt for recipe idea suggestions."""
    return (
        f"Suggest 3 recipe ideas using these ingredients: {', '.join(ingredient_names)}. "
        "Respond with a simple list."
    )

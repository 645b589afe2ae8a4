"""Recipe generation services."""

from eatrite.services.mock_service import MockRecipeBackend
from eatrite.services.openai_service import OpenAIRecipeBackend
from eatrite.services.recipe_backend import RecipeBackend
from eatrite.services.recipe_generator import RecipeGenerator, create_backend, create_recipe_generator

__all__ = [
    "MockRecipeBackend",
    "OpenAIRecipeBackend",
    "RecipeBackend",
    "RecipeGenerator",
    "create_backend",
    "create_recipe_generator",
]

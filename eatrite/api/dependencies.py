"""Shared API dependencies."""

from functools import lru_cache

from eatrite.services.recipe_generator import RecipeGenerator, create_recipe_generator


@lru_cache(maxsize=1)
def get_recipe_generator() -> RecipeGenerator:
    """Get the process-wide recipe generator (backend chosen from settings)."""
    return create_recipe_generator()

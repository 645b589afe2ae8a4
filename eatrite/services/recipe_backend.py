"""Backend interface shared by the live and mock recipe generators."""

from abc import ABC, abstractmethod
from typing import List

from eatrite.models.generation import GenerationRequest
from eatrite.models.recipe import Recipe


class RecipeBackend(ABC):
    """Produces recipes and recipe ideas for a generation request."""

    name: str = "backend"

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> Recipe:
        """
        Generate a recipe.

        Raises:
            RecipeGenerationError: If no recipe could be produced
        """

    @abstractmethod
    async def suggest(self, ingredient_names: List[str]) -> List[str]:
        """
        Suggest up to 3 recipe ideas.

        Best-effort: failures are logged and an empty list is returned.
        """

"""Health check endpoints."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from eatrite.api.dependencies import get_recipe_generator
from eatrite.middleware.performance import metrics
from eatrite.services.recipe_generator import RecipeGenerator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> Dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check(
    recipe_generator: RecipeGenerator = Depends(get_recipe_generator),
) -> Dict[str, Any]:
    """
    Readiness check. Reports which recipe backend is serving requests.
    """
    return {
        "status": "ready",
        "backend": recipe_generator.backend.name,
    }


@router.get("/metrics")
async def performance_metrics() -> Dict[str, Any]:
    """
    Get performance metrics.

    Returns:
        Request counts, average duration, slow requests and error rate
    """
    return {
        "status": "ok",
        **metrics.get_summary(),
    }

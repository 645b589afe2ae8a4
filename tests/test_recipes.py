"""Tests for recipe endpoints."""

import io
from typing import List

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from eatrite.api.dependencies import get_recipe_generator
from eatrite.main import app
from eatrite.models.generation import GenerationRequest
from eatrite.models.recipe import Recipe
from eatrite.services.recipe_backend import RecipeBackend
from eatrite.services.recipe_generator import RecipeGenerator
from eatrite.utils.exceptions import (
    EmptyContentError,
    MalformedContentError,
    TransportError,
    UpstreamRejectedError,
)


class FailingBackend(RecipeBackend):
    name = "failing"

    def __init__(self, error: Exception):
        self.error = error

    async def generate(self, request: GenerationRequest) -> Recipe:
        raise self.error

    async def suggest(self, ingredient_names: List[str]) -> List[str]:
        raise self.error


def _png_bytes(size=(64, 48)) -> bytes:
    out = io.BytesIO()
    Image.new("RGB", size, (30, 160, 60)).save(out, format="PNG")
    return out.getvalue()


def _generation_body(**overrides) -> dict:
    body = {
        "ingredients": [
            {"name": "Chicken", "quantity": "1", "unit": "lb"},
            {"name": "Rice", "quantity": "2", "unit": "cups"},
        ],
        "dietaryRestrictions": ["Gluten-Free"],
        "cuisineType": "Asian",
        "cookingTime": 40,
        "servings": 3,
    }
    body.update(overrides)
    return body


def test_root(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "EatRite API"


def test_health_check(client: TestClient):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_readiness_check(client: TestClient):
    """Test readiness check reports the active backend."""
    response = client.get("/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "backend": "mock"}


def test_metrics(client: TestClient):
    """Test performance metrics endpoint."""
    client.get("/health")
    response = client.get("/health/metrics")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["total_requests"] >= 1
    for key in ("average_duration_ms", "slow_requests", "very_slow_requests", "errors", "error_rate"):
        assert key in data


def test_response_headers(client: TestClient):
    """Test request id, timing and security headers are set."""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert "X-Response-Time" in response.headers
    assert response.headers["X-Content-Type-Options"] == "nosniff"

    generated = client.get("/health").headers["X-Request-ID"]
    assert generated and generated != "req-123"


def test_generate_recipe(client: TestClient):
    """Test recipe generation from an ingredient list."""
    response = client.post("/recipes/generate", json=_generation_body())

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {
        "title", "description", "ingredients", "instructions",
        "nutritionInfo", "cookingTime", "servings", "difficulty", "tips",
    }
    assert [i["name"] for i in data["ingredients"]] == ["Chicken", "Rice"]
    assert data["cookingTime"] == 40
    assert data["servings"] == 3
    assert data["difficulty"] in ("Easy", "Medium", "Hard")
    assert set(data["nutritionInfo"]) == {"calories", "protein", "carbs", "fat", "fiber"}


def test_generate_recipe_from_base64_image(client: TestClient):
    """Test an imageBase64 field switches generation to image mode."""
    body = _generation_body(ingredients=[], imageBase64="data:image/png;base64,iVBORw0KGgo=")

    response = client.post("/recipes/generate", json=body)

    assert response.status_code == 200
    assert response.json()["title"] == "Image-Based Recipe"


def test_generate_recipe_invalid_base64_image(client: TestClient):
    response = client.post("/recipes/generate", json=_generation_body(imageBase64="not base64!!"))

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid image"


def test_generate_recipe_without_ingredients_or_image(client: TestClient):
    """Test a request with nothing to cook from is rejected."""
    response = client.post("/recipes/generate", json=_generation_body(ingredients=[]))

    assert response.status_code == 400
    assert "ingredient" in response.json()["detail"]
    assert response.json()["request_id"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"cookingTime": 0},
        {"servings": -2},
        {"ingredients": [{"name": "", "quantity": "1", "unit": "cup"}]},
        {"cookingTime": "soon"},
    ],
)
def test_generate_recipe_validation_error(client: TestClient, overrides):
    """Test malformed bodies are rejected with field errors."""
    response = client.post("/recipes/generate", json=_generation_body(**overrides))

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "Validation error"
    assert data["detail"]
    assert "request_id" in data


def test_generate_recipe_missing_required_fields(client: TestClient):
    response = client.post("/recipes/generate", json={"ingredients": [{"name": "Egg"}]})
    assert response.status_code == 422


@pytest.mark.parametrize(
    "error,status_code",
    [
        (UpstreamRejectedError(401, "Invalid API key"), 502),
        (EmptyContentError(), 502),
        (MalformedContentError("Expecting value", "oops"), 502),
        (TransportError("connection refused"), 502),
        (TransportError("read timed out", timed_out=True), 504),
    ],
)
def test_generate_recipe_backend_failures(client: TestClient, error, status_code):
    """Test backend failures map to gateway errors carrying the reason."""
    app.dependency_overrides[get_recipe_generator] = lambda: RecipeGenerator(FailingBackend(error))

    response = client.post("/recipes/generate", json=_generation_body())

    assert response.status_code == status_code
    assert response.json()["detail"] == str(error)


def test_generate_recipe_upstream_message_surfaces(client: TestClient):
    app.dependency_overrides[get_recipe_generator] = lambda: RecipeGenerator(
        FailingBackend(UpstreamRejectedError(400, "API error"))
    )

    response = client.post("/recipes/generate", json=_generation_body())

    assert "API error" in response.json()["detail"]


def test_generate_from_image_upload(client: TestClient):
    """Test recipe generation from an uploaded photo with form fields."""
    response = client.post(
        "/recipes/generate-from-image",
        files={"file": ("fridge.png", _png_bytes(), "image/png")},
        data={"cookingTime": "45", "servings": "2", "dietaryRestrictions": ["Vegan", "Nut-Free"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Image-Based Recipe"
    assert data["cookingTime"] == 45
    assert data["servings"] == 2


def test_generate_from_image_defaults(client: TestClient):
    response = client.post(
        "/recipes/generate-from-image",
        files={"file": ("fridge.png", _png_bytes(), "image/png")},
    )

    assert response.status_code == 200
    assert response.json()["cookingTime"] == 30
    assert response.json()["servings"] == 4


def test_generate_from_image_wrong_content_type(client: TestClient):
    response = client.post(
        "/recipes/generate-from-image",
        files={"file": ("notes.txt", b"two eggs", "text/plain")},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid image type"


def test_generate_from_image_not_an_image(client: TestClient):
    """Test bytes that are not a supported image are rejected."""
    response = client.post(
        "/recipes/generate-from-image",
        files={"file": ("photo.png", b"definitely not a png", "image/png")},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid image"


def test_generate_from_image_missing_file(client: TestClient):
    response = client.post("/recipes/generate-from-image", data={"cookingTime": "20"})
    assert response.status_code == 422


def test_suggestions(client: TestClient):
    """Test recipe idea suggestions."""
    response = client.post("/recipes/suggestions", json={"ingredients": ["Egg", "Spinach"]})

    assert response.status_code == 200
    suggestions = response.json()["suggestions"]
    assert len(suggestions) == 3
    assert "Stir-fry with vegetables" in suggestions


def test_suggestions_blank_ingredients(client: TestClient):
    response = client.post("/recipes/suggestions", json={"ingredients": ["", "  "]})

    assert response.status_code == 200
    assert response.json() == {"suggestions": []}


def test_suggestions_backend_failure_is_empty(client: TestClient):
    """Test suggestion failures never become HTTP errors."""
    app.dependency_overrides[get_recipe_generator] = lambda: RecipeGenerator(
        FailingBackend(TransportError("down"))
    )

    response = client.post("/recipes/suggestions", json={"ingredients": ["Egg"]})

    assert response.status_code == 200
    assert response.json() == {"suggestions": []}

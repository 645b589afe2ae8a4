"""Pytest configuration and fixtures."""

import json
import os
from typing import Any, Callable, List, Tuple

# Settings are read at import time; force the network-free backend for tests
os.environ["USE_MOCK_AI"] = "true"
os.environ["OPENAI_API_KEY"] = ""
os.environ["MOCK_DELAY_SECONDS"] = "0"
os.environ["MOCK_SUGGESTION_DELAY_SECONDS"] = "0"
os.environ["RATE_LIMIT_PER_HOUR"] = "1000"

import httpx
import pytest
from fastapi.testclient import TestClient

from eatrite.api.dependencies import get_recipe_generator
from eatrite.main import app
from eatrite.models.generation import GenerationRequest
from eatrite.services.mock_service import MockRecipeBackend
from eatrite.services.openai_service import OpenAIRecipeBackend
from eatrite.services.recipe_generator import RecipeGenerator


def completion_body(content: Any) -> dict:
    """Chat-completion response body carrying ``content``."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }


class FakeOpenAI:
    """httpx MockTransport handler that replays queued responses and records requests."""

    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def payload(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def recipe_json() -> dict:
    """A complete, well-formed recipe as the model would return it."""
    return {
        "title": "Test Recipe",
        "description": "A test recipe",
        "ingredients": [{"name": "Egg", "quantity": "2", "unit": "pcs"}],
        "instructions": ["Step 1", "Step 2"],
        "nutritionInfo": {"calories": 100, "protein": "10g", "carbs": "5g", "fat": "2g", "fiber": "1g"},
        "cookingTime": 10,
        "servings": 2,
        "difficulty": "Easy",
        "tips": ["Tip 1"],
    }


@pytest.fixture
def text_request() -> GenerationRequest:
    return GenerationRequest(
        ingredients=[{"name": "Egg", "quantity": "2", "unit": "pcs"}],
        dietary_restrictions=[],
        cooking_time=10,
        servings=2,
    )


@pytest.fixture
def image_request() -> GenerationRequest:
    return GenerationRequest(
        ingredients=[{"name": "Egg", "quantity": "2", "unit": "pcs"}],
        dietary_restrictions=["Vegetarian"],
        cooking_time=25,
        servings=3,
        image="base64string",
    )


@pytest.fixture
def openai_stub() -> Callable[..., Tuple[OpenAIRecipeBackend, FakeOpenAI]]:
    """Build an OpenAI backend whose HTTP calls are answered by ``responses`` in order.

    Each response is an ``httpx.Response`` or an exception to raise.
    """

    def make(*responses: Any) -> Tuple[OpenAIRecipeBackend, FakeOpenAI]:
        fake = FakeOpenAI(list(responses))
        client = httpx.AsyncClient(transport=httpx.MockTransport(fake))
        backend = OpenAIRecipeBackend(api_key="test-api-key", client=client)
        return backend, fake

    return make


@pytest.fixture
def ok_response() -> Callable[[Any], httpx.Response]:
    """Successful chat-completion response whose content is ``content`` (dicts are JSON-encoded)."""

    def make(content: Any) -> httpx.Response:
        if isinstance(content, dict):
            content = json.dumps(content)
        return httpx.Response(200, json=completion_body(content))

    return make


@pytest.fixture
def mock_generator() -> RecipeGenerator:
    return RecipeGenerator(MockRecipeBackend(delay=0, suggestion_delay=0))


@pytest.fixture
def client(mock_generator: RecipeGenerator):
    """Create test client backed by the mock recipe backend."""
    app.dependency_overrides[get_recipe_generator] = lambda: mock_generator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

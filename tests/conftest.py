import json
from types import SimpleNamespace
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from recipe_finder.config import Config
from recipe_finder.models import Recipe


RICE_RECIPE: dict[str, Any] = {
    "name": "Test Recipe",
    "servings": 2,
    "prepTime": 15,
    "cookTime": 30,
    "ingredients": [
        {"quantity": "1 cup", "name": "rice"},
        {"quantity": "2 cups", "name": "water"},
        {"quantity": "to taste", "name": "salt"},
    ],
    "instructions": ["Cook rice", "Serve"],
    "nutrition": {"protein": 10, "fiber": 5, "calories": 200},
    "source": {
        "platform": "Instagram",
        "author": "Emily English",
        "url": "https://instagram.com/p/example",
    },
}


@pytest.fixture
def recipe_json() -> str:
    return json.dumps(RICE_RECIPE)


@pytest.fixture
def recipe() -> Recipe:
    return Recipe.model_validate(RICE_RECIPE)


@pytest.fixture
def config() -> Config:
    return Config(openai_api_key="sk-test", retry_base_delay=0, scraper_delay=0)


@pytest.fixture
def completion() -> Callable[[str], SimpleNamespace]:
    def make(content: str) -> SimpleNamespace:
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
            usage=SimpleNamespace(prompt_tokens=10, completion_tokens=20),
        )

    return make


@pytest.fixture
def fake_openai() -> SimpleNamespace:
    """Quacks like `openai.AsyncClient` as far as chat completions go."""
    return SimpleNamespace(
        chat=SimpleNamespace(completions=SimpleNamespace(create=AsyncMock())),
        close=AsyncMock(),
    )

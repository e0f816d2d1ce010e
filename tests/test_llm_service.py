from types import SimpleNamespace
from typing import Callable
from unittest.mock import AsyncMock

import httpx
import openai
import pytest

from recipe_finder.config import Config
from recipe_finder.llm_service import (
    LLMService,
    LLMServiceError,
    extract_json,
    with_retry,
)
from recipe_finder.models import (
    ChatMessage,
    Platform,
    Recipe,
    ScrapedRecipe,
    SearchConfig,
)


REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(request=REQUEST)


def auth_error() -> openai.AuthenticationError:
    return openai.AuthenticationError(
        "Incorrect API key provided.",
        response=httpx.Response(401, request=REQUEST),
        body=None,
    )


CANDIDATE = ScrapedRecipe(
    platform=Platform.web,
    author="Yotam Ottolenghi",
    url="https://ottolenghi.co.uk/quinoa",
    raw_content="Quinoa bowl. " * 500,
)


@pytest.fixture
def llm(fake_openai: SimpleNamespace, config: Config) -> LLMService:
    return LLMService(fake_openai, config=config)  # pyright: ignore[reportArgumentType]


@pytest.mark.asyncio
async def test_with_retry_recovers() -> None:
    operation = AsyncMock(side_effect=[connection_error(), connection_error(), "ok"])
    got = await with_retry(operation, max_retries=3, base_delay=0)
    assert got == "ok"
    assert operation.await_count == 3


@pytest.mark.asyncio
async def test_with_retry_gives_up() -> None:
    operation = AsyncMock(side_effect=connection_error())
    with pytest.raises(openai.APIConnectionError):
        await with_retry(operation, max_retries=2, base_delay=0)
    assert operation.await_count == 2


@pytest.mark.asyncio
async def test_with_retry_does_not_retry_auth_errors() -> None:
    operation = AsyncMock(side_effect=auth_error())
    with pytest.raises(openai.AuthenticationError):
        await with_retry(operation, max_retries=3, base_delay=0)
    assert operation.await_count == 1


@pytest.mark.asyncio
async def test_with_retry_does_not_retry_bad_requests() -> None:
    operation = AsyncMock(
        side_effect=openai.BadRequestError(
            "Invalid model.",
            response=httpx.Response(400, request=REQUEST),
            body=None,
        )
    )
    with pytest.raises(openai.BadRequestError):
        await with_retry(operation, max_retries=3, base_delay=0)
    assert operation.await_count == 1


@pytest.mark.asyncio
async def test_with_retry_needs_an_attempt() -> None:
    with pytest.raises(ValueError):
        await with_retry(AsyncMock(), max_retries=0)


@pytest.mark.parametrize(
    "text,expected",
    (
        ('{"a": 1}', '{"a": 1}'),
        ('Here you go:\n```json\n{"a": {"b": 2}}\n```\nEnjoy!', '{"a": {"b": 2}}'),
    ),
)
def test_extract_json(text: str, expected: str) -> None:
    assert extract_json(text) == expected


def test_extract_json_without_object() -> None:
    with pytest.raises(ValueError):
        extract_json("Sorry, I can't help with that.")


@pytest.mark.asyncio
async def test_search_strategy(
    llm: LLMService,
    fake_openai: SimpleNamespace,
    completion: Callable[[str], SimpleNamespace],
    config: Config,
) -> None:
    create: AsyncMock = fake_openai.chat.completions.create
    create.return_value = completion(
        '{"keywords": ["chicken", "pasta"], '
        '"sources": [{"platform": "Instagram", "accounts": ["@gordongram"]}]}'
    )

    got = await llm.search_strategy(
        "chicken pasta", SearchConfig(protein_priority=True, servings=4)
    )

    assert got.keywords == ("chicken", "pasta")
    assert got.sources[0].accounts == ("@gordongram",)
    kwargs = create.await_args.kwargs
    assert kwargs["model"] == config.core_model
    assert kwargs["response_format"] == {"type": "json_object"}
    user_content = kwargs["messages"][1]["content"]
    assert '"chicken pasta"' in user_content
    assert "High protein: YES" in user_content
    assert "High fiber: NO" in user_content
    assert "Servings: 4" in user_content
    assert "@emilyenglishnutrition" in user_content


@pytest.mark.asyncio
async def test_search_strategy_bad_json(
    llm: LLMService,
    fake_openai: SimpleNamespace,
    completion: Callable[[str], SimpleNamespace],
) -> None:
    fake_openai.chat.completions.create.return_value = completion("chicken, pasta")
    with pytest.raises(LLMServiceError) as exc_info:
        await llm.search_strategy("chicken pasta", SearchConfig())
    assert exc_info.value.kind == "search_strategy_failed"


@pytest.mark.asyncio
async def test_search_strategy_auth_error(
    llm: LLMService, fake_openai: SimpleNamespace
) -> None:
    fake_openai.chat.completions.create.side_effect = auth_error()
    with pytest.raises(LLMServiceError) as exc_info:
        await llm.search_strategy("chicken pasta", SearchConfig())
    assert exc_info.value.status_code == 401
    assert fake_openai.chat.completions.create.await_count == 1


@pytest.mark.asyncio
async def test_select_best_recipe(
    llm: LLMService,
    fake_openai: SimpleNamespace,
    completion: Callable[[str], SimpleNamespace],
    recipe_json: str,
    recipe: Recipe,
) -> None:
    create: AsyncMock = fake_openai.chat.completions.create
    create.return_value = completion(f"The best one is:\n{recipe_json}\n")

    config = SearchConfig(fiber_priority=True, original_query="rice")
    got = await llm.select_best_recipe([CANDIDATE], config)

    assert got == recipe
    user_content = create.await_args.kwargs["messages"][1]["content"]
    assert 'Search query: "rice"' in user_content
    assert "HIGH FIBER" in user_content
    assert "Normal protein" in user_content
    assert "Candidate recipes (1 total)" in user_content
    assert CANDIDATE.raw_content not in user_content


@pytest.mark.asyncio
async def test_select_best_recipe_invalid_recipe(
    llm: LLMService,
    fake_openai: SimpleNamespace,
    completion: Callable[[str], SimpleNamespace],
) -> None:
    fake_openai.chat.completions.create.return_value = completion(
        '{"name": "Half a recipe", "servings": 2}'
    )
    with pytest.raises(LLMServiceError) as exc_info:
        await llm.select_best_recipe([CANDIDATE], SearchConfig())
    assert exc_info.value.kind == "recipe_analysis_failed"


@pytest.mark.asyncio
async def test_select_best_recipe_no_candidates(llm: LLMService) -> None:
    with pytest.raises(ValueError):
        await llm.select_best_recipe([], SearchConfig())


@pytest.mark.asyncio
async def test_chat(
    llm: LLMService,
    fake_openai: SimpleNamespace,
    completion: Callable[[str], SimpleNamespace],
    recipe: Recipe,
    config: Config,
) -> None:
    create: AsyncMock = fake_openai.chat.completions.create
    create.return_value = completion("  Use quinoa instead.  ")
    history = [
        ChatMessage(role="user", content="Hi"),
        ChatMessage(role="assistant", content="Hello! What are we cooking?"),
    ]

    got = await llm.chat("What can I swap the rice for?", history, last_recipe=recipe)

    assert got == "Use quinoa instead."
    kwargs = create.await_args.kwargs
    assert kwargs["model"] == config.chat_model
    assert "response_format" not in kwargs
    roles = [m["role"] for m in kwargs["messages"]]
    assert roles == ["system", "user", "assistant", "user"]
    assert "Ingredients: rice, water, salt" in kwargs["messages"][-1]["content"]


@pytest.mark.asyncio
async def test_chat_retries_then_fails(
    llm: LLMService, fake_openai: SimpleNamespace, config: Config
) -> None:
    fake_openai.chat.completions.create.side_effect = connection_error()
    with pytest.raises(LLMServiceError) as exc_info:
        await llm.chat("Hello")
    assert exc_info.value.kind == "chat_failed"
    assert fake_openai.chat.completions.create.await_count == config.max_retries

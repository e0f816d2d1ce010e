import logging
import re
from typing import Any, Awaitable, Callable, Iterable, Sequence, TypeVar

import httpx
import openai
from openai.types.chat import (
    ChatCompletionMessageParam,
    ChatCompletionSystemMessageParam,
    ChatCompletionUserMessageParam,
)
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from recipe_finder.config import Config
from recipe_finder.models import (
    PREFERRED_CHEFS,
    ChatMessage,
    Recipe,
    ScrapedRecipe,
    SearchConfig,
    SearchStrategy,
)


logger = logging.getLogger(__name__)


CONFIG = Config()


CANDIDATE_CHARS = 1500
JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)
NO_RETRY = (openai.AuthenticationError, openai.BadRequestError)


STRATEGY_SYSTEM = """
You plan recipe searches. Given a query and preferences, choose search keywords
and the platforms, accounts and hashtags most likely to have a good recipe.
Respond with a JSON object only:
{"keywords": ["..."], "sources": [{"platform": "Instagram", "accounts": ["@..."], "hashtags": ["#..."], "searchTerms": ["..."]}]}
Platforms are one of Instagram, TikTok, YouTube, Web.
""".strip()


ANALYSIS_SYSTEM = """
You judge recipes for quality and nutrition. From the candidates pick the single
best match for the preferences, weighing nutrition (30%), completeness (30%),
clarity of instructions (20%) and the credibility of the source (20%).
Drop adverts, anecdotes and calls to like or follow.
Respond with a JSON object only:
{"name": "...", "servings": 2, "prepTime": 15, "cookTime": 30,
 "ingredients": [{"quantity": "2 cups", "name": "chicken breast", "notes": "diced"}],
 "instructions": ["..."],
 "nutrition": {"protein": 35, "fiber": 8, "calories": 450},
 "source": {"platform": "Instagram", "author": "...", "url": "https://..."}}
""".strip()


CHAT_SYSTEM = (
    "You are a helpful cooking assistant. Answer questions about recipes, "
    "cooking techniques and ingredient substitutions. Be concise and friendly."
)


class LLMServiceError(Exception):
    def __init__(self, kind: str, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


T = TypeVar("T")


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 3,
    base_delay: float = 1.0,
) -> T:
    """Await `operation` up to `max_retries` times, backing off 1x, 2x, 4x ...

    Authentication and bad request errors are raised straight away.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1.")

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=base_delay),
        retry=(
            retry_if_exception_type(openai.APIError)
            & retry_if_not_exception_type(NO_RETRY)
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return await retrying(operation)


def extract_json(text: str) -> str:
    m = JSON_OBJECT.search(text)
    if m is None:
        raise ValueError(f"No JSON object in response: {text[:200]}")
    return m.group()


def strategy_message(query: str, config: SearchConfig) -> str:
    chefs = "\n".join(
        f"- {c.name} ({c.instagram or c.tiktok or c.youtube}) - {c.specialty}"
        for c in PREFERRED_CHEFS
    )
    return (
        f'Query: "{query}"\n'
        "Preferences:\n"
        f"- High protein: {'YES' if config.protein_priority else 'NO'}\n"
        f"- High fiber: {'YES' if config.fiber_priority else 'NO'}\n"
        f"- Servings: {config.servings}\n\n"
        f"Preferred chefs to prioritise:\n{chefs}\n\n"
        "Generate the search strategy as JSON, "
        "focusing on recipes that match the nutritional priorities."
    )


def analysis_message(candidates: Sequence[ScrapedRecipe], config: SearchConfig) -> str:
    protein = (
        "HIGH PROTEIN (>25g per serving)" if config.protein_priority else "Normal protein"
    )
    fiber = "HIGH FIBER (>8g per serving)" if config.fiber_priority else "Normal fiber"
    recipes = "\n".join(
        f"--- Recipe {i} ---\n"
        f"Source: {c.platform.value} - {c.author}\n"
        f"URL: {c.url}\n"
        f"Content: {c.raw_content[:CANDIDATE_CHARS]}\n"
        for i, c in enumerate(candidates, 1)
    )
    return (
        f'Search query: "{config.original_query or "recipe search"}"\n\n'
        f"Dietary priorities:\n- {protein}\n- {fiber}\n\n"
        f"Target servings: {config.servings}\n\n"
        f"Candidate recipes ({len(candidates)} total):\n{recipes}\n"
        "Select the single best recipe and return it as the JSON object, "
        "keeping the servings and quantities the recipe was written for."
    )


class LLMService:
    def __init__(
        self,
        openai_client: openai.AsyncClient | None = None,
        *,
        config: Config | None = None,
    ) -> None:
        self.config = CONFIG if config is None else config
        self.openai_client = (
            openai.AsyncClient(
                api_key=self.config.openai_api_key,
                # Retried by with_retry.
                max_retries=0,
                http_client=httpx.AsyncClient(timeout=self.config.timeout),
            )
            if openai_client is None
            else openai_client
        )

    async def complete(
        self,
        messages: list[ChatCompletionMessageParam],
        *,
        model: str,
        max_tokens: int,
        temperature: float,
        json_mode: bool = False,
    ) -> str:
        extra: dict[str, Any] = (
            {"response_format": {"type": "json_object"}} if json_mode else {}
        )
        resp = await with_retry(
            lambda: self.openai_client.chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
                **extra,
            ),
            max_retries=self.config.max_retries,
            base_delay=self.config.retry_base_delay,
        )
        if resp.usage is not None:
            logger.info(
                "%s used %d input and %d output tokens",
                model,
                resp.usage.prompt_tokens,
                resp.usage.completion_tokens,
            )
        return (resp.choices[0].message.content or "").strip()

    async def search_strategy(self, query: str, config: SearchConfig) -> SearchStrategy:
        system_message: ChatCompletionSystemMessageParam = {
            "role": "system",
            "content": STRATEGY_SYSTEM,
        }
        user_message: ChatCompletionUserMessageParam = {
            "role": "user",
            "content": strategy_message(query, config),
        }
        try:
            text = await self.complete(
                [system_message, user_message],
                model=self.config.core_model,
                max_tokens=2048,
                temperature=0.7,
                json_mode=True,
            )
            strategy = SearchStrategy.model_validate_json(extract_json(text))
        except (openai.APIError, ValueError) as e:
            logger.error("Failed to generate search strategy for %r: %s", query, e)
            raise LLMServiceError(
                "search_strategy_failed",
                "Failed to generate search strategy.",
                status_code=getattr(e, "status_code", None),
            ) from e

        logger.info(
            "Search strategy: keywords %s, %d sources",
            strategy.keywords,
            len(strategy.sources),
        )
        return strategy

    async def select_best_recipe(
        self,
        candidates: Sequence[ScrapedRecipe],
        config: SearchConfig,
    ) -> Recipe:
        if not candidates:
            raise ValueError("No candidate recipes to choose from.")

        system_message: ChatCompletionSystemMessageParam = {
            "role": "system",
            "content": ANALYSIS_SYSTEM,
        }
        user_message: ChatCompletionUserMessageParam = {
            "role": "user",
            "content": analysis_message(candidates, config),
        }
        try:
            text = await self.complete(
                [system_message, user_message],
                model=self.config.core_model,
                max_tokens=self.config.max_tokens,
                temperature=0.3,
                json_mode=True,
            )
            recipe = Recipe.model_validate_json(extract_json(text))
        except (openai.APIError, ValueError) as e:
            logger.error("Failed to analyse %d recipes: %s", len(candidates), e)
            raise LLMServiceError(
                "recipe_analysis_failed",
                "Failed to analyse and select a recipe.",
                status_code=getattr(e, "status_code", None),
            ) from e

        logger.info("Selected %r from %d candidates", recipe.name, len(candidates))
        return recipe

    async def chat(
        self,
        message: str,
        history: Iterable[ChatMessage] = (),
        last_recipe: Recipe | None = None,
    ) -> str:
        if last_recipe is not None:
            names = ", ".join(i.name for i in last_recipe.ingredients)
            message += (
                "\n\nContext: the user is looking at this recipe:\n"
                f"Name: {last_recipe.name}\nIngredients: {names}"
            )

        messages: list[ChatCompletionMessageParam] = [
            {"role": "system", "content": CHAT_SYSTEM}
        ]
        for m in history:
            if m.role == "user":
                messages.append({"role": "user", "content": m.content})
            else:
                messages.append({"role": "assistant", "content": m.content})
        messages.append({"role": "user", "content": message})

        try:
            return await self.complete(
                messages,
                model=self.config.chat_model,
                max_tokens=self.config.chat_max_tokens,
                temperature=0.7,
            )
        except openai.APIError as e:
            logger.error("Failed to answer chat message: %s", e)
            raise LLMServiceError(
                "chat_failed",
                "Failed to process chat message.",
                status_code=getattr(e, "status_code", None),
            ) from e

    async def close(self) -> None:
        await self.openai_client.close()

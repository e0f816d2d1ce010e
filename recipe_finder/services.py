"""Finding a recipe, from query to a recipe for the right number of people."""

import logging
import time
from typing import Awaitable, Callable, TypeAlias

from recipe_finder.llm_service import LLMService
from recipe_finder.models import (
    Recipe,
    Record,
    ScrapedRecipe,
    SearchConfig,
    SearchStrategy,
)
from recipe_finder.scaling import scale_recipe_servings
from recipe_finder.scraper import scrape_recipes


logger = logging.getLogger(__name__)


Scraper: TypeAlias = Callable[[SearchStrategy], Awaitable[list[ScrapedRecipe]]]


class RecipeNotFound(Exception):
    def __init__(self, query: str) -> None:
        super().__init__(f'No recipes found for query: "{query}"')
        self.query = query


class SearchResult(Record):
    recipe: Recipe
    search_time: float  # milliseconds


async def search_for_recipe(
    query: str,
    config: SearchConfig,
    *,
    llm: LLMService,
    scraper: Scraper = scrape_recipes,
) -> SearchResult:
    if not query.strip():
        raise ValueError("Query must be a non-empty string.")

    start = time.perf_counter()
    logger.info("Recipe search started for %r with %s", query, config)
    config = config.model_copy(update={"original_query": query})

    try:
        strategy = await llm.search_strategy(query, config)
        candidates = await scraper(strategy)
        if not candidates:
            raise RecipeNotFound(query)
        logger.info("Analysing %d candidates for %r", len(candidates), query)

        recipe = await llm.select_best_recipe(candidates, config)
        if recipe.servings != config.servings:
            recipe = scale_recipe_servings(recipe, config.servings)
    except Exception:
        elapsed = (time.perf_counter() - start) * 1000
        logger.exception("Recipe search for %r failed after %.0fms", query, elapsed)
        raise

    elapsed = (time.perf_counter() - start) * 1000
    logger.info("Recipe search for %r completed in %.0fms", query, elapsed)
    return SearchResult(recipe=recipe, search_time=elapsed)

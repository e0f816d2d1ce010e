"""Find recipes from the terminal.

    python -m recipe_finder

Type what you fancy. Then ``:servings 4`` rescales the last recipe and
``:ask <question>`` asks about it. ``q`` quits.
"""

import asyncio
import logging

from rich import print
from rich.markdown import Markdown

from recipe_finder.config import Config
from recipe_finder.llm_service import LLMService, LLMServiceError
from recipe_finder.models import ChatMessage, Recipe, SearchConfig
from recipe_finder.scaling import scale_recipe_servings
from recipe_finder.services import RecipeNotFound, search_for_recipe


CONFIG = Config()


def requested_servings(msg: str) -> int:
    """``":servings 4"`` -> 4, held to the range a search accepts."""
    return SearchConfig(servings=int(msg.split()[-1])).servings


async def main() -> None:
    logging.basicConfig(level=CONFIG.log_level)
    llm = LLMService()
    config = SearchConfig(
        protein_priority=CONFIG.protein_priority,
        fiber_priority=CONFIG.fiber_priority,
        servings=CONFIG.servings,
    )
    recipe: Recipe | None = None
    history: list[ChatMessage] = []

    while True:
        msg = input("Recipe: ").strip()
        if msg.lower() in ("q", "quit", "exit"):
            break
        if not msg:
            continue

        if msg.startswith(":servings"):
            if recipe is None:
                print("[yellow]Find a recipe first.[/yellow]")
                continue
            try:
                recipe = scale_recipe_servings(recipe, requested_servings(msg))
            except ValueError as e:
                print(f"[red]{e}[/red]")
                continue
            print(Markdown(recipe.markdown))

        elif msg.startswith(":ask"):
            question = msg.removeprefix(":ask").strip()
            try:
                answer = await llm.chat(question, history, last_recipe=recipe)
            except LLMServiceError as e:
                print(f"[red]{e}[/red]")
                continue
            history += [
                ChatMessage(role="user", content=question),
                ChatMessage(role="assistant", content=answer),
            ]
            print(Markdown(answer))

        else:
            try:
                result = await search_for_recipe(msg, config, llm=llm)
            except (RecipeNotFound, LLMServiceError) as e:
                print(f"[red]{e}[/red]")
                continue
            recipe = result.recipe
            history.clear()
            print(Markdown(recipe.markdown))
            print(f"[dim]Found in {result.search_time / 1000:.1f}s[/dim]")
        print()

    await llm.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()

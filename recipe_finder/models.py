from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Immutable, accepts camelCase keys from the model as well as field names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Platform(Enum):
    instagram = "Instagram"
    tiktok = "TikTok"
    youtube = "YouTube"
    web = "Web"


class Ingredient(Record):
    quantity: str
    name: str
    notes: str | None = None

    def __str__(self) -> str:
        s = f"{self.quantity} {self.name}".strip()
        return f"{s}, {self.notes}" if self.notes else s


class NutritionInfo(Record):
    protein: float
    fiber: float
    calories: float


class RecipeSource(Record):
    platform: Platform
    author: str
    url: str


class Recipe(Record):
    name: str
    servings: int = Field(ge=1)
    prep_time: int | None = None
    cook_time: int | None = None
    ingredients: tuple[Ingredient, ...]
    instructions: tuple[str, ...]
    nutrition: NutritionInfo | None = None
    source: RecipeSource

    def __repr__(self) -> str:
        return f"<Recipe(name={self.name}, servings={self.servings})>"

    @property
    def markdown(self) -> str:
        lines = [f"### {self.name}", "", f"🍴 Serves: {self.servings}"]
        if self.prep_time is not None:
            lines.append(f"⏰ Preparation time: {self.prep_time} mins")
        if self.cook_time is not None:
            lines.append(f"🔥 Cooking time: {self.cook_time} mins")
        lines += ["", "#### 📝 Ingredients", ""]
        lines += [f"- {ingredient}" for ingredient in self.ingredients]
        lines += ["", "#### ✅ Instructions", ""]
        lines += [f"{i}. {step}" for i, step in enumerate(self.instructions, 1)]
        if self.nutrition is not None:
            n = self.nutrition
            lines += [
                "",
                f"Per serving: {n.protein:g}g protein, {n.fiber:g}g fiber, "
                f"{n.calories:g} calories",
            ]
        src = self.source
        lines += ["", f"From [{src.author}]({src.url}) on {src.platform.value}"]
        return "\n".join(lines)


class SearchConfig(Record):
    protein_priority: bool = False
    fiber_priority: bool = False
    servings: int = Field(default=2, ge=1, le=8)
    original_query: str | None = None


class SourceTarget(Record):
    platform: Platform
    accounts: tuple[str, ...] = ()
    hashtags: tuple[str, ...] = ()
    search_terms: tuple[str, ...] = ()


class SearchStrategy(Record):
    keywords: tuple[str, ...]
    sources: tuple[SourceTarget, ...] = ()


class ScrapedRecipe(Record):
    platform: Platform
    author: str
    url: str
    raw_content: str
    timestamp: float = 0.0


class ChatMessage(Record):
    role: Literal["user", "assistant"]
    content: str


class PreferredChef(Record):
    name: str
    specialty: str
    instagram: str | None = None
    tiktok: str | None = None
    youtube: str | None = None


PREFERRED_CHEFS = (
    PreferredChef(
        name="Emily English",
        instagram="@emilyenglishnutrition",
        specialty="Nutrition-focused recipes",
    ),
    PreferredChef(
        name="Gordon Ramsay",
        instagram="@gordongram",
        tiktok="@gordonramsayofficial",
        youtube="@GordonRamsay",
        specialty="Professional cooking techniques",
    ),
    PreferredChef(
        name="Jamie Oliver",
        instagram="@jamieoliver",
        youtube="@JamieOliver",
        specialty="Healthy home cooking",
    ),
    PreferredChef(
        name="Yotam Ottolenghi",
        instagram="@ottolenghi",
        specialty="Vegetable-forward dishes",
    ),
    PreferredChef(
        name="Notorious Foodie",
        instagram="@notoriousfoodie",
        tiktok="@notoriousfoodie",
        specialty="Modern creative recipes",
    ),
)

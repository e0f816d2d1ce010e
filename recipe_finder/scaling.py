"""Scale ingredient quantities from one serving size to another.

Quantities come from people and language models, so they are free text:
``"2 cups"``, ``"1 1/2 tbsp"``, ``"to taste"``. Reading them is forgiving.
Anything that cannot be read as a number is `NonScalable` and passed through
untouched rather than raising.

Scaled amounts are written back using the fractions a cook would reach for
(quarters, thirds, halves). The unit is whatever word first follows the number
in the original text. There is no unit system here, so ``"4 cups"`` for four
scaled down to one is ``"1 cups"``.
"""

from dataclasses import dataclass
import math
import re
from typing import Callable, TypeAlias

from recipe_finder.models import Ingredient, Recipe


NON_SCALABLE_TERMS = ("to taste", "pinch", "dash", "handful", "splash")

# Order matters, the first of equally near candidates wins.
COOKING_FRACTIONS = (
    (0.0, ""),
    (0.25, "1/4"),
    (0.33, "1/3"),
    (0.5, "1/2"),
    (0.67, "2/3"),
    (0.75, "3/4"),
)

ROUNDING_TOLERANCE = 0.05

MIXED_NUMBER = re.compile(r"(\d+)\s+(\d+)/(\d+)", re.ASCII)
FRACTION = re.compile(r"(\d+)/(\d+)", re.ASCII)
DECIMAL = re.compile(r"\d+\.?\d*", re.ASCII)
UNIT = re.compile(r"[a-zA-Z]+")


@dataclass(frozen=True)
class Scalable:
    amount: float


@dataclass(frozen=True)
class NonScalable:
    pass


ParsedQuantity: TypeAlias = Scalable | NonScalable
Matcher: TypeAlias = Callable[[str], ParsedQuantity | None]


def _checked(amount: float) -> ParsedQuantity:
    return Scalable(amount) if math.isfinite(amount) else NonScalable()


def _ratio(numerator: str, denominator: str) -> float | None:
    den = float(denominator)
    if den == 0:
        return None
    return float(numerator) / den


def match_mixed_number(text: str) -> ParsedQuantity | None:
    """``"1 1/2"`` -> 1.5"""
    m = MIXED_NUMBER.search(text)
    if m is None:
        return None
    whole, numerator, denominator = m.groups()
    part = _ratio(numerator, denominator)
    if part is None:
        return NonScalable()
    return _checked(float(whole) + part)


def match_fraction(text: str) -> ParsedQuantity | None:
    """``"1/2"`` -> 0.5"""
    m = FRACTION.search(text)
    if m is None:
        return None
    amount = _ratio(*m.groups())
    if amount is None:
        return NonScalable()
    return _checked(amount)


def match_decimal(text: str) -> ParsedQuantity | None:
    """``"2"`` -> 2.0, ``"1.5"`` -> 1.5"""
    m = DECIMAL.search(text)
    if m is None:
        return None
    return _checked(float(m.group()))


MATCHERS: tuple[Matcher, ...] = (match_mixed_number, match_fraction, match_decimal)


def parse_quantity(quantity: str) -> ParsedQuantity:
    """Read the amount in a quantity string.

    Vague terms win over any number in the text, so ``"1 pinch"`` is
    `NonScalable`. Otherwise the matchers are tried in order and the first to
    find something decides.
    """
    text = quantity.strip().lower()

    if any(term in text for term in NON_SCALABLE_TERMS):
        return NonScalable()

    for matcher in MATCHERS:
        parsed = matcher(text)
        if parsed is not None:
            return parsed

    return NonScalable()


def to_fraction(amount: float) -> str:
    """Write an amount with the nearest common cooking fraction.

    A remainder within `ROUNDING_TOLERANCE` of a whole number is dropped,
    rounding down or up to that whole number.

    >>> to_fraction(1.25)
    '1 1/4'
    >>> to_fraction(2.96)
    '3'
    """
    whole = math.floor(amount)
    remainder = amount - whole

    if remainder < ROUNDING_TOLERANCE:
        return str(whole)
    if 1 - remainder < ROUNDING_TOLERANCE:
        return str(whole + 1)

    _, fraction = min(COOKING_FRACTIONS, key=lambda c: abs(remainder - c[0]))

    if not fraction:
        return str(whole)
    if whole == 0:
        return fraction
    return f"{whole} {fraction}"


def unit_of(quantity: str) -> str:
    m = UNIT.search(quantity)
    return "" if m is None else m.group()


def scale_ingredient(
    ingredient: Ingredient,
    from_servings: int,
    to_servings: int,
) -> Ingredient:
    """A copy of the ingredient with its quantity scaled by to/from servings."""
    parsed = parse_quantity(ingredient.quantity)
    if isinstance(parsed, NonScalable):
        return ingredient.model_copy()

    if from_servings <= 0 or to_servings <= 0:
        raise ValueError(
            f"Servings must be positive, got {from_servings} -> {to_servings}."
        )

    scaled = parsed.amount * (to_servings / from_servings)
    if not math.isfinite(scaled):
        return ingredient.model_copy()

    quantity = to_fraction(scaled)
    unit = unit_of(ingredient.quantity)
    if unit:
        quantity = f"{quantity} {unit}"

    return ingredient.model_copy(update={"quantity": quantity})


def scale_recipe_servings(recipe: Recipe, to_servings: int) -> Recipe:
    """A copy of the recipe for `to_servings`. Only quantities and servings change."""
    if to_servings < 1:
        raise ValueError(f"Servings must be at least 1, got {to_servings}.")

    ingredients = tuple(
        scale_ingredient(ingredient, recipe.servings, to_servings)
        for ingredient in recipe.ingredients
    )
    return recipe.model_copy(
        update={"servings": to_servings, "ingredients": ingredients}
    )

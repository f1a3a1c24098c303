"""
Recipe & pantry domain models

Recipes come from the AI recipe suggestions; identified items and
ingredient action items pair an AI-produced food name with the catalog
product it matched (if any).

Also holds the ingredient scaling rules used when the user changes the
number of servings.

Author: Wanka's
Date: 2025-06-05
"""
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wankas.domain.product import Product


class Recipe(BaseModel):
    """
    A suggested recipe

    Fields:
        recipe_name: Recipe name in Spanish
        servings: Servings the ingredient list was written for (>= 1)
        ingredients: Ingredient lines, ideally starting with a quantity
        preparation_steps: Ordered preparation steps
    """

    recipe_name: str = Field(..., alias="recipeName", min_length=1)
    servings: int = Field(1, ge=1)
    ingredients: List[str] = Field(default_factory=list)
    preparation_steps: List[str] = Field(default_factory=list, alias="preparationSteps")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("servings", mode="before")
    @classmethod
    def _at_least_one_serving(cls, value):
        try:
            servings = int(value)
        except (TypeError, ValueError):
            return 1
        return servings if servings > 0 else 1


class IdentifiedItem(BaseModel):
    """Food item recognized in a pantry photo"""
    name: str
    ai_original_name: str
    db_product: Optional[Product] = None
    quantity_to_add_to_cart: int = 1


class IngredientActionItem(BaseModel):
    """Recipe ingredient the user can add to the cart"""
    ai_name: str
    db_product: Optional[Product] = None
    quantity_to_add_to_cart: int = 1


def capitalize_first_letter(text: str) -> str:
    """'papa amarilla' -> 'Papa amarilla'"""
    if not text:
        return text
    return text[0].upper() + text[1:]


# ============================================================================
# Ingredient scaling
# ============================================================================

# Leading quantity: a fraction "1/2", "1 / 2", or a number "2", "0.25"
_LEADING_QUANTITY = re.compile(r"^(\d+\s*/\s*\d+|\d+(?:\.\d+)?)\s*")

# Scaled quantities below this are too small to print; the line is kept as is
_MIN_PRINTABLE_QUANTITY = 0.1


def _parse_quantity(token: str) -> Optional[float]:
    token = token.strip()
    if "/" in token:
        numerator, denominator = (part.strip() for part in token.split("/", 1))
        if float(denominator) == 0:
            return None
        return float(numerator) / float(denominator)
    return float(token)


def format_quantity(quantity: float) -> str:
    """Integers print bare, everything else with one decimal, halves rounded up (2.0 -> '2', 1.25 -> '1.3')"""
    if float(quantity).is_integer():
        return str(int(quantity))
    rounded = Decimal(quantity).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    if rounded == rounded.to_integral_value():
        return str(int(rounded))
    return str(rounded)


def scale_ingredient(ingredient: str, original_servings: int, new_servings: int) -> str:
    """
    Rescale the leading quantity of an ingredient line.

    "500 gramos de lomo" for 4 -> 6 servings gives "750 gramos de lomo".
    Lines without a leading quantity ("Sal al gusto") are returned unchanged.
    """
    if original_servings <= 0 or new_servings == original_servings:
        return ingredient

    match = _LEADING_QUANTITY.match(ingredient)
    if not match:
        return ingredient

    quantity = _parse_quantity(match.group(1))
    if quantity is None:
        return ingredient

    new_quantity = quantity * (new_servings / original_servings)
    if 0 < new_quantity < _MIN_PRINTABLE_QUANTITY:
        return ingredient

    return f"{format_quantity(new_quantity)} {ingredient[match.end():]}"


def scale_recipe_ingredients(recipe: Recipe, desired_servings: int) -> List[str]:
    original = recipe.servings if recipe.servings > 0 else 1
    return [scale_ingredient(line, original, desired_servings) for line in recipe.ingredients]


# ============================================================================
# Missing ingredient filtering
# ============================================================================

# Cooking phrases ("al horno", "a la peruana") the model sometimes returns as ingredients
_PHRASE_PATTERN = re.compile(r"\s(al|a la|de|para)\s", re.IGNORECASE)


def filter_missing_ingredients(missing: List[str], available: List[str]) -> List[str]:
    """
    Keep only concrete, purchasable names that the user does not already have.

    Drops blank entries, descriptive phrases and names present in `available`
    (case-insensitive).
    """
    available_lower = {name.lower() for name in available}
    result = []
    for name in missing:
        if not name or not name.strip():
            continue
        if _PHRASE_PATTERN.search(name):
            continue
        if name.lower() in available_lower:
            continue
        result.append(name)
    return result

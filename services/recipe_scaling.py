"""Recipe scaling engine.

Pure functions turning a `Recipe` snapshot into a new, scaled `Recipe`.
The source recipe is never mutated.

Rounding contract:
    - ingredient amounts: `amount * multiplier`, rounded half-up to
      `SCALE_DECIMAL_PLACES` (3) decimals;
    - a positive amount never rounds away: it is kept at the smallest
      representable amount (0.001) instead of 0;
    - servings: `servings * multiplier`, rounded half-up to an integer and
      never below 1.
"""

import math
import numbers
from typing import Optional

from core.config import SCALE_DECIMAL_PLACES
from core.exceptions import DivisionByZeroError, InvalidArgumentError, NotFoundError
from core.logger import get_logger
from schemas.recipe_schema import Recipe, RecipeIngredient
from services.rounding import round_half_up, round_half_up_int

logger = get_logger("services.recipe_scaling")

# Smallest non-zero amount at the rounding precision.
MIN_SCALED_AMOUNT = 10 ** -SCALE_DECIMAL_PLACES


def _require_positive(value, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgumentError(f"{field} must be a number", field=field, value=value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidArgumentError(f"{field} must be a finite number greater than zero", field=field, value=value)
    return float(value)


def find_key_ingredient(recipe: Recipe, key_ingredient_id: int) -> Optional[RecipeIngredient]:
    """Return the recipe line for `key_ingredient_id`, or None."""
    for line in recipe.ingredients:
        if line.ingredient_id == key_ingredient_id:
            return line
    return None


def scale_by_multiplier(recipe: Recipe, multiplier: float) -> Recipe:
    """Return a copy of `recipe` with servings and every amount scaled.

    Raises:
        InvalidArgumentError: If `multiplier` is not a finite number > 0, or
            if it would push an amount beyond float range.
    """
    multiplier = _require_positive(multiplier, "multiplier")
    if multiplier == 1:
        return recipe.model_copy(deep=True)

    lines = []
    for line in recipe.ingredients:
        if not math.isfinite(line.amount) or line.amount < 0:
            raise InvalidArgumentError(
                f"ingredient {line.ingredient_id} has an invalid amount", field="amount", value=line.amount
            )
        scaled = line.amount * multiplier
        if not math.isfinite(scaled):
            raise InvalidArgumentError("multiplier is too large for this recipe", field="multiplier", value=multiplier)
        amount = round_half_up(scaled, SCALE_DECIMAL_PLACES)
        if amount == 0 and line.amount > 0:
            amount = MIN_SCALED_AMOUNT
        lines.append(line.model_copy(update={"amount": amount}))

    servings = recipe.servings * multiplier
    if not math.isfinite(servings):
        raise InvalidArgumentError("multiplier is too large for this recipe", field="multiplier", value=multiplier)

    scaled_recipe = recipe.model_copy(update={
        "servings": max(1, round_half_up_int(servings)),
        "ingredients": lines,
    })
    logger.debug(
        "Scaled recipe %s by %s: servings %s -> %s",
        recipe.id, multiplier, recipe.servings, scaled_recipe.servings
    )
    return scaled_recipe


def scale_by_key_ingredient(recipe: Recipe, key_ingredient_id: Optional[int], new_amount: float) -> Recipe:
    """Scale `recipe` so the key ingredient ends up at `new_amount`.

    `new_amount` is in the unit the recipe already uses for that ingredient.
    When `key_ingredient_id` is None the recipe's own
    `scaling_key_ingredient_id` is used.

    Raises:
        InvalidArgumentError: No key ingredient given or configured, or
            `new_amount` not a finite number > 0.
        NotFoundError: The key ingredient is not one of the recipe's lines.
        DivisionByZeroError: The key ingredient's current amount is zero.
    """
    key_id = key_ingredient_id if key_ingredient_id is not None else recipe.scaling_key_ingredient_id
    if key_id is None:
        raise InvalidArgumentError(
            "recipe has no scaling key ingredient; specify key_ingredient_id", field="key_ingredient_id"
        )

    line = find_key_ingredient(recipe, key_id)
    if line is None:
        raise NotFoundError("Ingredient", key_id, message="key ingredient not present in this recipe")

    new_amount = _require_positive(new_amount, "new_amount")
    if line.amount == 0:
        raise DivisionByZeroError(
            "cannot derive a multiplier from a zero key ingredient amount",
            details={"ingredient_id": key_id},
        )

    multiplier = new_amount / line.amount
    logger.debug("Key ingredient %s: %s -> %s %s (x%s)", key_id, line.amount, new_amount, line.unit, multiplier)
    return scale_by_multiplier(recipe, multiplier)

"""Nutrition aggregation for (possibly scaled) recipes.

Totals are the sum over recipe lines of `nutrient x quantity`, where the
quantity is the line amount expressed in multiples of the ingredient's
`nutrition_basis`. No conversion between measurement units is attempted:
a line whose unit differs from the unit the ingredient's facts are given
in contributes nothing and marks every nutrient incomplete.
"""

from typing import Dict, List, Optional

from core.exceptions import InvalidArgumentError
from core.logger import get_logger
from schemas.ingredient_schema import NUTRIENT_FIELDS
from schemas.nutrition_schema import NutrientTotals, NutritionSummary
from schemas.recipe_schema import Recipe, RecipeIngredient
from services.rounding import round_half_up

logger = get_logger("services.nutrition_calculator")

# Spelling variants of the same unit label; not conversions between units.
_UNIT_ALIASES = {
    "gram": "g",
    "grams": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "cups": "cup",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "ounce": "oz",
    "ounces": "oz",
    "pound": "lb",
    "pounds": "lb",
    "lbs": "lb",
    "pieces": "piece",
    "slices": "slice",
    "cloves": "clove",
}


def normalize_unit(unit: str) -> str:
    u = " ".join((unit or "").split()).lower()
    return _UNIT_ALIASES.get(u, u)


class NutritionCalculator:
    """Aggregates ingredient nutrition facts into recipe totals."""

    def quantity_in_basis(self, line: RecipeIngredient) -> Optional[float]:
        """Return the line amount in multiples of the ingredient's basis.

        None when the line's unit does not match the ingredient's
        `nutrition_unit`.
        """
        ingredient = line.ingredient
        if ingredient.nutrition_basis is None or ingredient.nutrition_basis <= 0:
            return None
        if ingredient.nutrition_unit is not None and normalize_unit(ingredient.nutrition_unit) != normalize_unit(line.unit):
            return None
        return line.amount / ingredient.nutrition_basis

    def compute_nutrition_totals(self, recipe: Recipe) -> NutritionSummary:
        """Return per-recipe and per-serving totals for `recipe`.

        Missing values count as zero and are reported in
        `incomplete_nutrients` instead of being silently absorbed.

        Raises:
            InvalidArgumentError: If the recipe has no positive serving count.
        """
        if recipe.servings is None or recipe.servings <= 0:
            raise InvalidArgumentError("servings must be greater than zero", field="servings", value=recipe.servings)

        totals: Dict[str, float] = {name: 0.0 for name in NUTRIENT_FIELDS}
        missing = set()
        unmatched: List[str] = []

        for line in recipe.ingredients:
            quantity = self.quantity_in_basis(line)
            if quantity is None:
                unmatched.append(f"{line.ingredient.name} ({line.unit})")
                missing.update(NUTRIENT_FIELDS)
                continue
            for name in NUTRIENT_FIELDS:
                value = getattr(line.ingredient, name)
                if value is None:
                    missing.add(name)
                    continue
                totals[name] += value * quantity

        per_recipe = NutrientTotals(**{name: round_half_up(v) for name, v in totals.items()})
        per_serving = NutrientTotals(**{name: round_half_up(v / recipe.servings) for name, v in totals.items()})
        incomplete_nutrients = [name for name in NUTRIENT_FIELDS if name in missing]

        if unmatched:
            logger.debug("Recipe %s: no unit match for %s", recipe.id, unmatched)
        logger.debug("Nutrition for recipe %s: calories=%s incomplete=%s", recipe.id, per_recipe.calories, incomplete_nutrients)

        return NutritionSummary(
            per_recipe=per_recipe,
            per_serving=per_serving,
            servings=recipe.servings,
            incomplete=bool(incomplete_nutrients),
            incomplete_nutrients=incomplete_nutrients,
            unmatched_units=unmatched,
        )


# export singleton
nutrition_calculator = NutritionCalculator()


def compute_nutrition_totals(recipe: Recipe) -> NutritionSummary:
    """Module-level shortcut for `nutrition_calculator.compute_nutrition_totals`."""
    return nutrition_calculator.compute_nutrition_totals(recipe)


__all__ = ["NutritionCalculator", "nutrition_calculator", "compute_nutrition_totals", "normalize_unit"]

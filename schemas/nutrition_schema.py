"""Schemas for aggregated recipe nutrition."""

from typing import List

from pydantic import BaseModel, ConfigDict


class NutrientTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    vitamin_a: float = 0.0
    vitamin_c: float = 0.0
    vitamin_d: float = 0.0
    calcium: float = 0.0
    iron: float = 0.0


class NutritionSummary(BaseModel):
    """Per-recipe and per-serving totals.

    `incomplete_nutrients` names every total derived from at least one
    ingredient that lacks the value; `incomplete` is true when any is.
    """

    model_config = ConfigDict(frozen=True)

    per_recipe: NutrientTotals
    per_serving: NutrientTotals
    servings: int
    incomplete: bool
    incomplete_nutrients: List[str] = []
    unmatched_units: List[str] = []

"""Pydantic schema package for domain snapshots and request/response models."""

from .ingredient_schema import Ingredient, NUTRIENT_FIELDS
from .recipe_schema import Recipe, RecipeIngredient, ScaleRequest
from .nutrition_schema import NutrientTotals, NutritionSummary
from .safe_food_schema import AcceptanceStatus, SafeFood, Timeline
from .user_schema import UserCreateRequest, UserResponse

__all__ = [
    "Ingredient",
    "NUTRIENT_FIELDS",
    "Recipe",
    "RecipeIngredient",
    "ScaleRequest",
    "NutrientTotals",
    "NutritionSummary",
    "AcceptanceStatus",
    "SafeFood",
    "Timeline",
    "UserCreateRequest",
    "UserResponse",
]

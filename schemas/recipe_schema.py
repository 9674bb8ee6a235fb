"""Schemas for recipes, their ingredient lines and scaling requests."""

import json
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .ingredient_schema import Ingredient


class RecipeVisibility(str, Enum):
    public = "public"
    private = "private"


class RecipeIngredient(BaseModel):
    """One ordered ingredient line of a recipe."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: Optional[int] = None
    ingredient_id: int
    ingredient: Ingredient
    amount: float
    unit: str
    order: int = 0
    notes: Optional[str] = None
    is_optional: bool = False


class Recipe(BaseModel):
    """Immutable recipe snapshot.

    Built from an ORM row with `Recipe.model_validate(row)`; instruction
    steps stored as JSON text are decoded on the way in.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: Optional[int] = None
    user_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    instructions: List[str] = []
    servings: int
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    scaling_key_ingredient_id: Optional[int] = None
    visibility: RecipeVisibility = RecipeVisibility.private
    ingredients: List[RecipeIngredient] = []

    @field_validator("instructions", mode="before")
    @classmethod
    def _decode_instructions(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return json.loads(value) if value.strip() else []
        return value

    @field_validator("ingredients", mode="after")
    @classmethod
    def _sort_by_order(cls, value: List[RecipeIngredient]) -> List[RecipeIngredient]:
        return sorted(value, key=lambda line: line.order)


class RecipeIngredientInput(BaseModel):
    """Ingredient line supplied when creating a recipe."""

    ingredient_id: int = Field(..., examples=[1])
    amount: float = Field(..., gt=0, examples=[2])
    unit: str = Field(..., min_length=1, examples=["cup"])
    notes: Optional[str] = Field(None, examples=["sifted"])
    is_optional: bool = False


class RecipeCreateRequest(BaseModel):
    """Payload for creating a recipe; line order follows the list order."""

    title: str = Field(..., min_length=1, examples=["Plain buttered pasta"])
    description: Optional[str] = None
    instructions: List[str] = Field(default_factory=list, examples=[["Boil pasta", "Stir in butter"]])
    servings: int = Field(1, ge=1, examples=[2])
    prep_time: Optional[int] = Field(None, ge=0, description="Minutes")
    cook_time: Optional[int] = Field(None, ge=0, description="Minutes")
    scaling_key_ingredient_id: Optional[int] = Field(None, description="Ingredient caregivers scale this recipe by")
    visibility: RecipeVisibility = Field(RecipeVisibility.private, description="Public recipes are visible to every user")
    ingredients: List[RecipeIngredientInput] = Field(..., min_length=1)


class ScaleRequest(BaseModel):
    """Scale either by a multiplier or to a new amount of the key ingredient.

    Numeric bounds are enforced by the scaling engine itself so the API and
    direct callers get the same errors.
    """

    multiplier: Optional[float] = Field(None, examples=[2.0])
    new_amount: Optional[float] = Field(None, examples=[4.0])
    key_ingredient_id: Optional[int] = Field(None, description="Defaults to the recipe's scaling key ingredient")

    @model_validator(mode="after")
    def _one_mode(self):
        if (self.multiplier is None) == (self.new_amount is None):
            raise ValueError("provide exactly one of 'multiplier' or 'new_amount'")
        if self.multiplier is not None and self.key_ingredient_id is not None:
            raise ValueError("'key_ingredient_id' only applies together with 'new_amount'")
        return self


class RecipeVisibilityUpdateRequest(BaseModel):
    visibility: RecipeVisibility

"""Schemas for ingredients and their nutrition facts."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Nutrients tracked per ingredient, in the order they are reported.
NUTRIENT_FIELDS = (
    "calories",
    "protein",
    "carbs",
    "fat",
    "fiber",
    "sugar",
    "sodium",
    "vitamin_a",
    "vitamin_c",
    "vitamin_d",
    "calcium",
    "iron",
)


def normalize_ingredient_name(name: str) -> str:
    """Return the identity form of an ingredient name."""
    return " ".join(name.split()).lower()


class Ingredient(BaseModel):
    """Immutable ingredient snapshot used by the scaling and nutrition engine."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str
    category: Optional[str] = None
    nutrition_unit: Optional[str] = None
    nutrition_basis: float = 1.0
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    fiber: Optional[float] = None
    sugar: Optional[float] = None
    sodium: Optional[float] = None
    vitamin_a: Optional[float] = None
    vitamin_c: Optional[float] = None
    vitamin_d: Optional[float] = None
    calcium: Optional[float] = None
    iron: Optional[float] = None


class _NutritionFacts(BaseModel):
    nutrition_unit: Optional[str] = Field(None, examples=["g"], description="Unit the facts are expressed in; omit for 'per recipe unit'")
    nutrition_basis: Optional[float] = Field(None, gt=0, examples=[100], description="Quantity of nutrition_unit the facts describe")
    calories: Optional[float] = Field(None, ge=0, examples=[364])
    protein: Optional[float] = Field(None, ge=0, examples=[10.3])
    carbs: Optional[float] = Field(None, ge=0, examples=[76.3])
    fat: Optional[float] = Field(None, ge=0, examples=[1.0])
    fiber: Optional[float] = Field(None, ge=0)
    sugar: Optional[float] = Field(None, ge=0)
    sodium: Optional[float] = Field(None, ge=0)
    vitamin_a: Optional[float] = Field(None, ge=0)
    vitamin_c: Optional[float] = Field(None, ge=0)
    vitamin_d: Optional[float] = Field(None, ge=0)
    calcium: Optional[float] = Field(None, ge=0)
    iron: Optional[float] = Field(None, ge=0)


class IngredientCreateRequest(_NutritionFacts):
    """Payload for adding an ingredient to the shared catalogue."""

    name: str = Field(..., min_length=1, examples=["All-Purpose Flour"])
    category: Optional[str] = Field(None, examples=["Grains"])

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        value = normalize_ingredient_name(value)
        if not value:
            raise ValueError("name must not be blank")
        return value


class IngredientUpdateRequest(_NutritionFacts):
    """Correction edit: only the supplied fields are changed."""

    category: Optional[str] = None

"""SQLAlchemy ORM models for the safe-food tracking service.

Models are plain declarative classes without business logic: lifecycle
transitions and recipe scaling live in `services/` and operate on Pydantic
snapshots built from these rows.
"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class User(Base):
    """Caregiver account owning safe foods, meal logs and recipes."""

    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class Ingredient(Base):
    """Shared ingredient with optional nutrition facts.

    `name` is stored normalized (lower-cased, trimmed). Each nutrient is
    nullable since values are crowd-entered. A null `nutrition_unit` means
    the facts are per one unit of whatever label a recipe uses.
    """

    __tablename__ = "ingredients"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    category = Column(String, nullable=True)
    # Nutrition facts describe `nutrition_basis` of `nutrition_unit` (e.g. per 100 g).
    nutrition_unit = Column(String, nullable=True)
    nutrition_basis = Column(Float, nullable=False, default=1.0)
    calories = Column(Float, nullable=True)
    protein = Column(Float, nullable=True)
    carbs = Column(Float, nullable=True)
    fat = Column(Float, nullable=True)
    fiber = Column(Float, nullable=True)
    sugar = Column(Float, nullable=True)
    sodium = Column(Float, nullable=True)
    vitamin_a = Column(Float, nullable=True)
    vitamin_c = Column(Float, nullable=True)
    vitamin_d = Column(Float, nullable=True)
    calcium = Column(Float, nullable=True)
    iron = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Recipe(Base):
    """Recipe with ordered instruction steps stored as a JSON-encoded list.

    Private recipes are visible to their owner only; public ones to everyone.
    """

    __tablename__ = "recipes"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    instructions = Column(Text, nullable=False, default="[]")
    servings = Column(Integer, nullable=False, default=1)
    prep_time = Column(Integer, nullable=True)
    cook_time = Column(Integer, nullable=True)
    scaling_key_ingredient_id = Column(Integer, ForeignKey("ingredients.id"), nullable=True)
    visibility = Column(String, nullable=False, default="private")  # public | private
    created_at = Column(DateTime, default=datetime.utcnow)

    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.order",
    )


class RecipeIngredient(Base):
    """Join row between a recipe and an ingredient, owned by the recipe."""

    __tablename__ = "recipe_ingredients"
    id = Column(Integer, primary_key=True, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    ingredient_id = Column(Integer, ForeignKey("ingredients.id"), nullable=False)
    amount = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    order = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    is_optional = Column(Boolean, nullable=False, default=False)

    recipe = relationship("Recipe", back_populates="ingredients")
    ingredient = relationship("Ingredient", lazy="joined")


class SafeFood(Base):
    """Per-user tolerated food.

    `status` holds the acceptance state ('candidate' or 'established');
    `is_active` is the separate soft-deactivation flag.
    """

    __tablename__ = "safe_foods"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    food_name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    preparation_notes = Column(Text, nullable=True)
    texture_notes = Column(Text, nullable=True)
    brand_preference = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    personal_rating = Column(Integer, nullable=True)  # 1-5
    status = Column(String, nullable=False, default="candidate")
    times_consumed = Column(Integer, nullable=False, default=0)
    date_first_accepted = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class MealLog(Base):
    """One recorded attempt at eating a safe food."""

    __tablename__ = "meal_logs"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    safe_food_id = Column(Integer, ForeignKey("safe_foods.id"), nullable=False)
    meal_date = Column(DateTime, nullable=False)
    meal_type = Column(String, nullable=False)
    portion_eaten = Column(String, nullable=False)
    energy_before = Column(Integer, nullable=True)  # 1-10
    energy_after = Column(Integer, nullable=True)  # 1-10
    location = Column(String, nullable=True)
    success_factors = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class IncidentLog(Base):
    """A mealtime shutdown ("lockdown") episode and how it was resolved."""

    __tablename__ = "incident_logs"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    incident_date = Column(DateTime, nullable=False)
    incident_time = Column(String(5), nullable=False)  # HH:MM, local to the family
    duration_minutes = Column(Integer, nullable=True)
    energy_level_before = Column(Integer, nullable=True)  # 1-10
    triggers = Column(Text, nullable=True)
    behaviors_observed = Column(Text, nullable=True)
    resolution_strategy = Column(String, nullable=True)
    resolution_time_minutes = Column(Integer, nullable=True)
    family_impact_level = Column(Integer, nullable=True)  # 1-10
    notes = Column(Text, nullable=True)
    lessons_learned = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

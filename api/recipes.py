"""Recipe endpoints, including scaling and nutrition totals.

Scaled recipes are computed on request and returned without being stored;
the stored recipe always keeps its original amounts. Private recipes are
only visible to their owner; anonymous callers see public recipes only.
"""

import json
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.orm import Query, Session, selectinload

from api.deps import get_current_user_id, get_optional_user_id
from core.exceptions import NotFoundError, ValidationError
from core.logger import get_logger
from core.repository import OwnedRepository, save
from database import models
from database.deps import get_db_read, get_db_write
from schemas.nutrition_schema import NutritionSummary
from schemas.recipe_schema import (
    Recipe,
    RecipeCreateRequest,
    RecipeVisibility,
    RecipeVisibilityUpdateRequest,
    ScaleRequest,
)
from services.nutrition_calculator import nutrition_calculator
from services.recipe_scaling import scale_by_key_ingredient, scale_by_multiplier

logger = get_logger("api.recipes")
router = APIRouter(prefix="/api/recipes", tags=["recipes"])


def visible_recipes(db: Session, user_id: Optional[int]) -> Query:
    """Return a recipe query limited to what `user_id` may see."""
    query = db.query(models.Recipe).options(selectinload(models.Recipe.ingredients))
    public = models.Recipe.visibility == RecipeVisibility.public.value
    if user_id is None:
        return query.filter(public)
    return query.filter(or_(public, models.Recipe.user_id == user_id))


def load_recipe(db: Session, recipe_id: int, user_id: Optional[int] = None) -> Recipe:
    """Load a visible recipe with its ingredient lines as a `Recipe` snapshot.

    Raises:
        NotFoundError: If the recipe does not exist or is private to someone else.
    """
    row = visible_recipes(db, user_id).filter(models.Recipe.id == recipe_id).first()
    if row is None:
        raise NotFoundError("Recipe", recipe_id)
    return Recipe.model_validate(row)


@router.get("", response_model=List[Recipe])
def list_recipes(
    skip: int = 0,
    limit: int = 20,
    mine: bool = False,
    user_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db_read),
):
    """Return visible recipes, newest first; `mine` keeps only the caller's own."""
    query = visible_recipes(db, user_id)
    if mine:
        if user_id is None:
            return []
        query = query.filter(models.Recipe.user_id == user_id)
    rows = (
        query.order_by(models.Recipe.created_at.desc(), models.Recipe.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return [Recipe.model_validate(r) for r in rows]


@router.get("/{recipe_id}", response_model=Recipe)
def get_recipe(
    recipe_id: int,
    scale: Optional[float] = None,
    user_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db_read),
):
    """Return a recipe, optionally scaled by the `scale` multiplier.

    Raises:
        NotFoundError: If the recipe does not exist or is not visible.
        InvalidArgumentError: If `scale` is not a finite number > 0.
    """
    recipe = load_recipe(db, recipe_id, user_id)
    if scale is not None:
        recipe = scale_by_multiplier(recipe, scale)
    return recipe


@router.post("", response_model=Recipe, status_code=201)
def create_recipe(
    payload: RecipeCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Create a recipe owned by the caller.

    Ingredient lines keep the order they are given in.

    Raises:
        NotFoundError: If a referenced ingredient does not exist.
        ValidationError: If the scaling key ingredient is not one of the lines.
    """
    ingredient_ids = [line.ingredient_id for line in payload.ingredients]
    known = {
        i.id for i in db.query(models.Ingredient).filter(models.Ingredient.id.in_(ingredient_ids)).all()
    }
    for ingredient_id in ingredient_ids:
        if ingredient_id not in known:
            raise NotFoundError("Ingredient", ingredient_id)

    key_id = payload.scaling_key_ingredient_id
    if key_id is not None and key_id not in ingredient_ids:
        raise ValidationError(
            "scaling key ingredient must be one of the recipe's ingredients",
            field="scaling_key_ingredient_id",
        )

    recipe = models.Recipe(
        user_id=user_id,
        title=payload.title.strip(),
        description=payload.description,
        instructions=json.dumps(payload.instructions),
        servings=payload.servings,
        prep_time=payload.prep_time,
        cook_time=payload.cook_time,
        scaling_key_ingredient_id=key_id,
        visibility=payload.visibility.value,
        ingredients=[
            models.RecipeIngredient(
                ingredient_id=line.ingredient_id,
                amount=line.amount,
                unit=line.unit,
                notes=line.notes,
                is_optional=line.is_optional,
                order=index,
            )
            for index, line in enumerate(payload.ingredients)
        ],
    )
    recipe = save(db, recipe)
    logger.info("Recipe created: id=%s user=%s lines=%s", recipe.id, user_id, len(ingredient_ids))
    return Recipe.model_validate(recipe)


@router.delete("/{recipe_id}", status_code=204)
def delete_recipe(
    recipe_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Delete one of the caller's recipes together with its ingredient lines.

    Raises:
        NotFoundError: If the recipe does not exist or belongs to someone else.
    """
    repo = OwnedRepository(models.Recipe, db, user_id)
    recipe = repo.get_by_id(recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe", recipe_id)
    repo.delete(recipe)
    logger.info("Recipe deleted: id=%s user=%s", recipe_id, user_id)


@router.put("/{recipe_id}/visibility", response_model=Recipe)
def set_recipe_visibility(
    recipe_id: int,
    payload: RecipeVisibilityUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Share a recipe with everyone or make it private again.

    Raises:
        NotFoundError: If the recipe does not exist or belongs to someone else.
    """
    repo = OwnedRepository(models.Recipe, db, user_id)
    recipe = repo.get_for_update(recipe_id)
    recipe.visibility = payload.visibility.value
    recipe = repo.update(recipe)
    logger.info("Recipe %s visibility set to %s by user %s", recipe_id, recipe.visibility, user_id)
    return Recipe.model_validate(recipe)


@router.post("/{recipe_id}/scale", response_model=Recipe)
def scale_recipe(
    recipe_id: int,
    payload: ScaleRequest,
    user_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db_read),
):
    """Return the recipe scaled by a multiplier or to a key ingredient amount.

    Raises:
        NotFoundError: Recipe missing, or key ingredient not in the recipe.
        InvalidArgumentError: Non-positive or non-finite numbers.
        DivisionByZeroError: The key ingredient's stored amount is zero.
    """
    recipe = load_recipe(db, recipe_id, user_id)
    if payload.multiplier is not None:
        return scale_by_multiplier(recipe, payload.multiplier)
    return scale_by_key_ingredient(recipe, payload.key_ingredient_id, payload.new_amount)


@router.get("/{recipe_id}/nutrition", response_model=NutritionSummary)
def get_recipe_nutrition(
    recipe_id: int,
    scale: Optional[float] = None,
    user_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db_read),
):
    """Return nutrition totals for a recipe, optionally scaled first."""
    recipe = load_recipe(db, recipe_id, user_id)
    if scale is not None:
        recipe = scale_by_multiplier(recipe, scale)
    return nutrition_calculator.compute_nutrition_totals(recipe)

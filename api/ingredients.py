"""Ingredient catalogue endpoints.

Ingredients are shared across users and identified by their normalized
name; adding a name that already exists returns the stored ingredient.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from api.deps import get_current_user_id
from core.logger import get_logger
from core.repository import BaseRepository, save
from database import models
from database.deps import get_db_read, get_db_write
from schemas.ingredient_schema import (
    Ingredient,
    IngredientCreateRequest,
    IngredientUpdateRequest,
    normalize_ingredient_name,
)

logger = get_logger("api.ingredients")
router = APIRouter(prefix="/api/ingredients", tags=["ingredients"])


@router.get("", response_model=List[Ingredient])
def list_ingredients(
    q: Optional[str] = None,
    category: Optional[str] = None,
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db_read),
):
    """Search ingredients by name fragment and/or category, ordered by name."""
    query = db.query(models.Ingredient)
    if q:
        query = query.filter(models.Ingredient.name.contains(normalize_ingredient_name(q)))
    if category:
        query = query.filter(models.Ingredient.category == category)
    rows = query.order_by(models.Ingredient.name).offset(skip).limit(limit).all()
    return [Ingredient.model_validate(r) for r in rows]


@router.get("/{ingredient_id}", response_model=Ingredient)
def get_ingredient(ingredient_id: int, db: Session = Depends(get_db_read)):
    """Return one ingredient.

    Raises:
        NotFoundError: If the ingredient does not exist.
    """
    return Ingredient.model_validate(BaseRepository(models.Ingredient, db).get_or_404(ingredient_id))


@router.post("", response_model=Ingredient, status_code=status.HTTP_201_CREATED)
def create_ingredient(
    payload: IngredientCreateRequest,
    response: Response,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Add an ingredient, or return the existing one with the same name."""
    existing = db.query(models.Ingredient).filter(models.Ingredient.name == payload.name).first()
    if existing:
        logger.info("Ingredient '%s' already exists: id=%s", payload.name, existing.id)
        response.status_code = status.HTTP_200_OK
        return Ingredient.model_validate(existing)

    data = payload.model_dump(exclude_none=True)
    ingredient = save(db, models.Ingredient(**data))
    logger.info("Ingredient created by user %s: %s (id=%s)", user_id, ingredient.name, ingredient.id)
    return Ingredient.model_validate(ingredient)


@router.put("/{ingredient_id}", response_model=Ingredient)
def update_ingredient(
    ingredient_id: int,
    payload: IngredientUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db_write),
):
    """Correct an ingredient's category or nutrition facts.

    Only fields present in the payload are changed; an explicit null clears
    a nutrient value.
    """
    repo = BaseRepository(models.Ingredient, db)
    ingredient = repo.get_or_404(ingredient_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("nutrition_basis") is None:
        changes.pop("nutrition_basis", None)
    for field, value in changes.items():
        setattr(ingredient, field, value)
    ingredient = repo.update(ingredient)
    logger.info("Ingredient %s corrected by user %s: %s", ingredient_id, user_id, sorted(changes))
    return Ingredient.model_validate(ingredient)

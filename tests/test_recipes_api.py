"""Recipe and ingredient endpoints exercised against the test database."""
import uuid

import pytest
from fastapi import Response
from pydantic import ValidationError as PydanticValidationError

from api.ingredients import create_ingredient, get_ingredient, list_ingredients, update_ingredient
from api.recipes import (
    create_recipe,
    delete_recipe,
    get_recipe,
    get_recipe_nutrition,
    list_recipes,
    scale_recipe,
    set_recipe_visibility,
)
from core.exceptions import InvalidArgumentError, NotFoundError, ValidationError
from schemas.ingredient_schema import IngredientCreateRequest, IngredientUpdateRequest
from schemas.recipe_schema import RecipeCreateRequest, RecipeVisibility, RecipeVisibilityUpdateRequest, ScaleRequest


def _ingredient(db, user_id, base, **facts):
    payload = IngredientCreateRequest(name=f"{base} {uuid.uuid4().hex[:6]}", **facts)
    return create_ingredient(payload, Response(), user_id=user_id, db=db)


@pytest.fixture
def pasta_recipe(db, user_id):
    pasta = _ingredient(db, user_id, "Pasta", nutrition_unit="g", nutrition_basis=100, calories=371, protein=13)
    butter = _ingredient(db, user_id, "Butter", nutrition_unit="tbsp", calories=102, protein=0.1)
    salt = _ingredient(db, user_id, "Salt", nutrition_unit="tsp")
    payload = RecipeCreateRequest(
        title="Plain buttered pasta",
        instructions=["Boil pasta", "Stir in butter"],
        servings=2,
        scaling_key_ingredient_id=pasta.id,
        ingredients=[
            {"ingredient_id": pasta.id, "amount": 200, "unit": "g"},
            {"ingredient_id": butter.id, "amount": 1.5, "unit": "tbsp"},
            {"ingredient_id": salt.id, "amount": 0.25, "unit": "tsp", "is_optional": True},
        ],
    )
    recipe = create_recipe(payload, user_id=user_id, db=db)
    return recipe, pasta, butter, salt


def test_duplicate_ingredient_returns_existing(db, user_id):
    first = _ingredient(db, user_id, "Oat Milk", calories=43)
    response = Response()
    again = create_ingredient(
        IngredientCreateRequest(name="  " + first.name.upper() + " "), response, user_id=user_id, db=db
    )
    assert again.id == first.id
    assert again.calories == 43
    assert response.status_code == 200


def test_ingredient_search_and_correction(db, user_id):
    ing = _ingredient(db, user_id, "Rice Cake", category="Snacks", calories=35)
    assert ing.id in [i.id for i in list_ingredients(q=ing.name.upper(), db=db)]

    corrected = update_ingredient(ing.id, IngredientUpdateRequest(calories=37, fiber=0.4), user_id=user_id, db=db)
    assert corrected.calories == 37
    assert corrected.fiber == 0.4
    assert corrected.category == "Snacks"
    assert get_ingredient(ing.id, db=db).calories == 37


def test_unknown_ingredient_is_not_found(db):
    with pytest.raises(NotFoundError):
        get_ingredient(10**9, db=db)


def test_created_recipe_keeps_line_order(pasta_recipe):
    recipe, pasta, butter, salt = pasta_recipe
    assert [l.ingredient_id for l in recipe.ingredients] == [pasta.id, butter.id, salt.id]
    assert [l.order for l in recipe.ingredients] == [0, 1, 2]
    assert recipe.instructions == ["Boil pasta", "Stir in butter"]
    assert recipe.ingredients[2].is_optional is True


def test_get_recipe_scaled_does_not_change_stored_recipe(db, user_id, pasta_recipe):
    recipe, *_ = pasta_recipe
    scaled = get_recipe(recipe.id, scale=2, user_id=user_id, db=db)
    assert [l.amount for l in scaled.ingredients] == [400, 3, 0.5]
    assert scaled.servings == 4
    assert get_recipe(recipe.id, user_id=user_id, db=db) == recipe
    assert recipe.id in [r.id for r in list_recipes(limit=100, user_id=user_id, db=db)]


def test_scale_endpoint_by_key_ingredient(db, user_id, pasta_recipe):
    recipe, pasta, butter, _ = pasta_recipe
    scaled = scale_recipe(recipe.id, ScaleRequest(new_amount=300), user_id=user_id, db=db)
    assert [l.amount for l in scaled.ingredients] == [300, 2.25, 0.375]
    assert scaled.servings == 3

    by_butter = scale_recipe(recipe.id, ScaleRequest(new_amount=3, key_ingredient_id=butter.id), user_id=user_id, db=db)
    assert by_butter.ingredients[0].amount == 400


def test_scale_endpoint_errors(db, user_id, pasta_recipe):
    recipe, *_ = pasta_recipe
    with pytest.raises(NotFoundError):
        scale_recipe(recipe.id, ScaleRequest(new_amount=2, key_ingredient_id=10**9), user_id=user_id, db=db)
    with pytest.raises(InvalidArgumentError):
        scale_recipe(recipe.id, ScaleRequest(multiplier=-1), user_id=user_id, db=db)
    with pytest.raises(NotFoundError):
        scale_recipe(10**9, ScaleRequest(multiplier=2), user_id=user_id, db=db)


@pytest.mark.parametrize("body", [{}, {"multiplier": 2, "new_amount": 3}, {"multiplier": 2, "key_ingredient_id": 1}])
def test_scale_request_needs_exactly_one_mode(body):
    with pytest.raises(PydanticValidationError):
        ScaleRequest(**body)


def test_nutrition_endpoint_flags_missing_data(db, user_id, pasta_recipe):
    recipe, *_ = pasta_recipe
    summary = get_recipe_nutrition(recipe.id, user_id=user_id, db=db)
    assert summary.per_recipe.calories == pytest.approx(742 + 153)
    assert summary.per_serving.calories == pytest.approx(447.5)
    assert summary.incomplete is True
    assert "calories" in summary.incomplete_nutrients

    doubled = get_recipe_nutrition(recipe.id, scale=2, user_id=user_id, db=db)
    assert doubled.per_recipe.calories == pytest.approx(2 * summary.per_recipe.calories)


def test_recipe_with_unknown_ingredient_is_rejected(db, user_id):
    payload = RecipeCreateRequest(title="Ghost", ingredients=[{"ingredient_id": 10**9, "amount": 1, "unit": "cup"}])
    with pytest.raises(NotFoundError):
        create_recipe(payload, user_id=user_id, db=db)


def test_scaling_key_must_be_a_recipe_line(db, user_id):
    flour = _ingredient(db, user_id, "Flour")
    sugar = _ingredient(db, user_id, "Sugar")
    payload = RecipeCreateRequest(
        title="Shortbread",
        scaling_key_ingredient_id=sugar.id,
        ingredients=[{"ingredient_id": flour.id, "amount": 2, "unit": "cup"}],
    )
    with pytest.raises(ValidationError):
        create_recipe(payload, user_id=user_id, db=db)


def test_only_owner_can_delete_recipe(db, user_id, other_user_id, pasta_recipe):
    recipe, *_ = pasta_recipe
    with pytest.raises(NotFoundError):
        delete_recipe(recipe.id, user_id=other_user_id, db=db)
    delete_recipe(recipe.id, user_id=user_id, db=db)
    with pytest.raises(NotFoundError):
        get_recipe(recipe.id, user_id=user_id, db=db)


def test_private_recipe_is_hidden_from_others(db, user_id, other_user_id, pasta_recipe):
    recipe, *_ = pasta_recipe
    assert recipe.visibility == RecipeVisibility.private
    for caller in (other_user_id, None):
        with pytest.raises(NotFoundError):
            get_recipe(recipe.id, user_id=caller, db=db)
        with pytest.raises(NotFoundError):
            scale_recipe(recipe.id, ScaleRequest(multiplier=2), user_id=caller, db=db)
        with pytest.raises(NotFoundError):
            get_recipe_nutrition(recipe.id, user_id=caller, db=db)
        assert recipe.id not in [r.id for r in list_recipes(limit=100, user_id=caller, db=db)]


def test_public_recipe_is_visible_to_everyone(db, user_id, other_user_id, pasta_recipe):
    recipe, *_ = pasta_recipe
    with pytest.raises(NotFoundError):
        set_recipe_visibility(
            recipe.id, RecipeVisibilityUpdateRequest(visibility="public"), user_id=other_user_id, db=db
        )

    shared = set_recipe_visibility(recipe.id, RecipeVisibilityUpdateRequest(visibility="public"), user_id=user_id, db=db)
    assert shared.visibility == RecipeVisibility.public
    assert get_recipe(recipe.id, user_id=other_user_id, db=db).id == recipe.id
    assert get_recipe(recipe.id, user_id=None, db=db).id == recipe.id
    assert recipe.id in [r.id for r in list_recipes(limit=100, user_id=None, db=db)]
    assert recipe.id not in [r.id for r in list_recipes(limit=100, mine=True, user_id=other_user_id, db=db)]
    assert recipe.id in [r.id for r in list_recipes(limit=100, mine=True, user_id=user_id, db=db)]

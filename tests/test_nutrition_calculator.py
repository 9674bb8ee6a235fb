"""Unit tests for recipe nutrition aggregation."""
import pytest

from core.exceptions import InvalidArgumentError
from schemas.ingredient_schema import NUTRIENT_FIELDS, Ingredient
from schemas.recipe_schema import Recipe, RecipeIngredient
from services.nutrition_calculator import NutritionCalculator, compute_nutrition_totals, normalize_unit
from services.recipe_scaling import scale_by_multiplier


def _full_facts(**values):
    facts = {name: 1.0 for name in NUTRIENT_FIELDS}
    facts.update(values)
    return facts


def _line(ingredient, amount, unit, order=0):
    return RecipeIngredient(ingredient_id=ingredient.id, ingredient=ingredient, amount=amount, unit=unit, order=order)


FLOUR = Ingredient(id=1, name="flour", **_full_facts(calories=455, protein=13))
EGG = Ingredient(id=2, name="egg", **_full_facts(calories=72, protein=6.3))
SUGAR_NO_CALORIES = Ingredient(id=3, name="sugar", **_full_facts(calories=None))
CHEESE_PER_100G = Ingredient(id=4, name="cheddar", nutrition_unit="g", nutrition_basis=100, **_full_facts(calories=403))


def make_recipe(lines, servings=2):
    return Recipe(id=1, title="Test", servings=servings, ingredients=lines)


def test_totals_sum_amount_times_facts():
    summary = compute_nutrition_totals(make_recipe([_line(FLOUR, 2, "cup"), _line(EGG, 1, "large", 1)]))
    assert summary.per_recipe.calories == 982
    assert summary.per_recipe.protein == pytest.approx(32.3)
    assert summary.incomplete is False
    assert summary.incomplete_nutrients == []


def test_per_serving_divides_by_servings():
    summary = compute_nutrition_totals(make_recipe([_line(FLOUR, 2, "cup"), _line(EGG, 1, "large", 1)], servings=4))
    assert summary.per_serving.calories == pytest.approx(245.5)
    assert summary.servings == 4


def test_missing_value_flags_incomplete_and_sums_the_rest():
    summary = compute_nutrition_totals(make_recipe([_line(FLOUR, 1, "cup"), _line(SUGAR_NO_CALORIES, 0.5, "cup", 1)]))
    assert summary.incomplete is True
    assert summary.incomplete_nutrients == ["calories"]
    assert summary.per_recipe.calories == 455
    # Other totals stay complete and include both ingredients.
    assert summary.per_recipe.fat == pytest.approx(1.5)


def test_ingredient_without_any_data_marks_everything_incomplete():
    homemade = Ingredient(id=9, name="grandma's broth")
    summary = compute_nutrition_totals(make_recipe([_line(FLOUR, 1, "cup"), _line(homemade, 2, "cup", 1)]))
    assert summary.incomplete_nutrients == list(NUTRIENT_FIELDS)
    assert summary.per_recipe.calories == 455


def test_nutrition_basis_is_applied():
    summary = compute_nutrition_totals(make_recipe([_line(CHEESE_PER_100G, 250, "g")], servings=1))
    assert summary.per_recipe.calories == pytest.approx(1007.5)
    assert summary.incomplete is False


def test_unit_spelling_variants_match():
    summary = compute_nutrition_totals(make_recipe([_line(CHEESE_PER_100G, 50, "Grams")], servings=1))
    assert summary.per_recipe.calories == pytest.approx(201.5)
    assert summary.unmatched_units == []


def test_unit_mismatch_is_reported_not_converted():
    summary = compute_nutrition_totals(make_recipe([_line(FLOUR, 1, "cup"), _line(CHEESE_PER_100G, 1, "cup", 1)]))
    assert summary.per_recipe.calories == 455
    assert summary.incomplete is True
    assert summary.unmatched_units == ["cheddar (cup)"]


def test_scaled_recipe_totals_follow_the_scale():
    recipe = make_recipe([_line(FLOUR, 2, "cup"), _line(EGG, 1, "large", 1)], servings=2)
    base = compute_nutrition_totals(recipe)
    doubled = compute_nutrition_totals(scale_by_multiplier(recipe, 2))
    assert doubled.per_recipe.calories == pytest.approx(base.per_recipe.calories * 2)
    assert doubled.per_serving.calories == pytest.approx(base.per_serving.calories)


def test_empty_recipe_is_complete_zero():
    summary = compute_nutrition_totals(make_recipe([]))
    assert summary.per_recipe.calories == 0
    assert summary.incomplete is False


def test_totals_are_rounded_to_three_decimals():
    summary = compute_nutrition_totals(make_recipe([_line(EGG, 1, "large")], servings=3))
    assert summary.per_serving.calories == 24.0
    assert summary.per_serving.protein == 2.1


def test_zero_servings_rejected():
    recipe = Recipe.model_construct(id=1, title="Broken", servings=0, ingredients=[], instructions=[])
    with pytest.raises(InvalidArgumentError):
        NutritionCalculator().compute_nutrition_totals(recipe)


def test_normalize_unit():
    assert normalize_unit("  Cups ") == "cup"
    assert normalize_unit("tablespoons") == "tbsp"
    assert normalize_unit("handful") == "handful"

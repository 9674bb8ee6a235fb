"""Sample ingredients seeded into an empty database.

Nutrition facts are given per `nutrition_basis` of `nutrition_unit`
(here: per 100 g). Gaps are deliberate: crowd-entered data is rarely
complete and the nutrition totals flag what is missing.
"""

INGREDIENTS_DATA = [
    {"name": "All-Purpose Flour", "category": "Grains", "nutrition_unit": "g", "nutrition_basis": 100,
     "calories": 364, "protein": 10.3, "carbs": 76.3, "fat": 1.0, "fiber": 2.7, "sodium": 2, "calcium": 15, "iron": 4.6},
    {"name": "Large Eggs", "category": "Protein", "nutrition_unit": "g", "nutrition_basis": 100,
     "calories": 155, "protein": 13.0, "carbs": 1.1, "fat": 11.0, "fiber": 0, "sodium": 124, "calcium": 50, "iron": 1.2},
    {"name": "Granulated Sugar", "category": "Sweeteners", "nutrition_unit": "g", "nutrition_basis": 100,
     "calories": 387, "protein": 0, "carbs": 100.0, "fat": 0, "fiber": 0, "sodium": 0, "calcium": 1, "iron": 0.01},
    {"name": "Unsalted Butter", "category": "Dairy", "nutrition_unit": "g", "nutrition_basis": 100,
     "calories": 717, "protein": 0.9, "carbs": 0.1, "fat": 81.0, "fiber": 0, "sodium": 11, "calcium": 24, "iron": 0.02},
    {"name": "Whole Milk", "category": "Dairy", "nutrition_unit": "g", "nutrition_basis": 100,
     "calories": 61, "protein": 3.2, "carbs": 4.8, "fat": 3.2, "fiber": 0, "sodium": 44, "calcium": 113, "iron": 0.03},
    {"name": "Chicken Breast", "category": "Protein", "nutrition_unit": "g", "nutrition_basis": 100,
     "calories": 165, "protein": 31.0, "carbs": 0, "fat": 3.6, "sodium": 74, "iron": 1.0},
    {"name": "Plain Pasta", "category": "Grains", "nutrition_unit": "g", "nutrition_basis": 100,
     "calories": 371, "protein": 13.0, "carbs": 75.0, "fat": 1.5, "fiber": 3.2},
    {"name": "Cheddar Cheese", "category": "Dairy", "nutrition_unit": "g", "nutrition_basis": 100,
     "calories": 403, "protein": 25.0, "carbs": 1.3, "fat": 33.0, "sodium": 621, "calcium": 721},
    {"name": "Salt", "category": "Seasoning", "nutrition_unit": "g", "nutrition_basis": 1,
     "calories": 0, "sodium": 387.6},
]

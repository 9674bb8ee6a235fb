"""Utilities to import ingredient nutrition facts from CSV files.

This module provides:
- parse_ingredients_csv(csv_path): returns a list of normalized ingredient dicts
- seed_ingredients_from_csv(csv_path, session): idempotently upserts the ingredients table

The CSV needs a `name` column (`ingredient` and `food` are accepted too).
Optional columns: `category`, `nutrition_unit` / `unit`, `nutrition_basis` /
`per`, and one column per nutrient (see `NUTRIENT_FIELDS`; camelCase
headers such as `vitaminA` are accepted). Empty cells stay empty: a missing
value is not the same as zero.
"""
from __future__ import annotations

import math
import re
from typing import Dict, List, Optional

import pandas as pd

from core.logger import get_logger
from database import models
from database.database import WriteSessionLocal
from schemas.ingredient_schema import NUTRIENT_FIELDS, normalize_ingredient_name

logger = get_logger("data.ingest_ingredients")

NAME_COLUMNS = ("name", "ingredient", "food")
UNIT_COLUMNS = ("nutrition_unit", "unit")
BASIS_COLUMNS = ("nutrition_basis", "per")


def _snake(column: str) -> str:
    column = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", column.strip())
    return re.sub(r"[\s\-]+", "_", column).lower()


def _cell(row, columns) -> Optional[object]:
    for col in columns:
        if col in row.index:
            val = row.get(col)
            if val is None or (isinstance(val, float) and math.isnan(val)):
                continue
            if isinstance(val, str) and not val.strip():
                continue
            return val
    return None


def _number(val) -> Optional[float]:
    """Parse a numeric cell; None for blanks, unparsable or negative values."""
    if val is None:
        return None
    try:
        num = float(str(val).strip().replace(",", "."))
    except ValueError:
        return None
    if math.isnan(num) or math.isinf(num) or num < 0:
        return None
    return num


def parse_ingredients_csv(csv_path: str) -> List[Dict]:
    """Parse the CSV and return a list of normalized ingredient dictionaries.

    Rows without a name are skipped; of duplicate names the last row wins.
    """
    logger.info("Parsing ingredients CSV: %s", csv_path)
    df = pd.read_csv(csv_path, encoding="utf-8", engine="python", dtype=str, keep_default_na=False)
    df = df.rename(columns=_snake)

    parsed: Dict[str, Dict] = {}
    for _, row in df.iterrows():
        raw_name = _cell(row, NAME_COLUMNS)
        if raw_name is None:
            continue
        name = normalize_ingredient_name(str(raw_name))
        if not name:
            continue

        item = {"name": name}
        category = _cell(row, ("category",))
        if category is not None:
            item["category"] = str(category).strip()
        unit = _cell(row, UNIT_COLUMNS)
        if unit is not None:
            item["nutrition_unit"] = str(unit).strip()
        basis = _number(_cell(row, BASIS_COLUMNS))
        if basis:
            item["nutrition_basis"] = basis

        for nutrient in NUTRIENT_FIELDS:
            raw = _cell(row, (nutrient,))
            value = _number(raw)
            if raw is not None and value is None:
                logger.debug("Ignoring %s=%r for %s", nutrient, raw, name)
            item[nutrient] = value

        parsed[name] = item

    logger.info("Parsed %s ingredients from CSV", len(parsed))
    return list(parsed.values())


def seed_ingredients_from_csv(csv_path: str, session=None) -> Dict[str, int]:
    """Insert new ingredients and apply corrections to existing ones.

    Existing ingredients are matched by normalized name. Only values present
    in the CSV overwrite stored ones, so a partial CSV never erases data.

    If `session` is not supplied, a `WriteSessionLocal` session is used.

    Returns:
        Dictionary with 'added' and 'updated' counts.
    """
    close_session = False
    if session is None:
        session = WriteSessionLocal()
        close_session = True
    try:
        added = 0
        updated = 0
        for item in parse_ingredients_csv(csv_path):
            values = {k: v for k, v in item.items() if v is not None}
            existing = session.query(models.Ingredient).filter(models.Ingredient.name == item["name"]).first()
            if existing is None:
                session.add(models.Ingredient(**values))
                added += 1
                continue
            changed = False
            for field, value in values.items():
                if getattr(existing, field) != value:
                    setattr(existing, field, value)
                    changed = True
            if changed:
                updated += 1
        if added or updated:
            session.commit()
        logger.info("Ingredients import: %s added, %s updated", added, updated)
        return {"added": added, "updated": updated}
    finally:
        if close_session:
            session.close()


if __name__ == "__main__":
    import argparse

    from database import init_db

    p = argparse.ArgumentParser("Import ingredient nutrition facts from CSV into the DB")
    p.add_argument("csv_path")
    args = p.parse_args()
    init_db()
    result = seed_ingredients_from_csv(args.csv_path)
    print(f"Done: {result['added']} added, {result['updated']} updated")

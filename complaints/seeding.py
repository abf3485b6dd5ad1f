"""
Taxonomy Seeding
Loads the default options into an empty store, keeps department codes
current and imports extra options from spreadsheets.
"""
import logging
from pathlib import Path
from typing import Dict, List

import pandas as pd

from complaints.option_store import make_option, normalize_key
from complaints.taxonomy_config import (
    OptionType,
    FALLBACK_CATEGORIES,
    FALLBACK_DEPARTMENTS,
    FALLBACK_SUBCATEGORIES,
    DEPARTMENT_CODES,
)

logger = logging.getLogger('seeding')

IMPORT_COLUMNS = ('type', 'value', 'parentCategory', 'code')


def default_options() -> List[Dict]:
    """Categories, departments and subcategories the system starts with"""
    options = [make_option(OptionType.CATEGORY, value) for value in FALLBACK_CATEGORIES]
    options += [make_option(OptionType.DEPARTMENT, name, code=code) for name, code in FALLBACK_DEPARTMENTS]
    options += [
        make_option(OptionType.SUB_CATEGORY, value, parent)
        for parent, values in FALLBACK_SUBCATEGORIES.items()
        for value in values
    ]
    return options


def seed_default_options(store) -> int:
    """
    Insert the default options, only if the store holds none yet.

    Returns:
        number of options inserted (0 when the store already had data)
    """
    existing = store.count_options()
    if existing > 0:
        logger.info(f"SEED_SKIPPED | {existing} options already present")
        return 0

    inserted = store.add_many(default_options())
    logger.info(f"SEED_DONE | {inserted} options inserted")
    return inserted


def ensure_department_codes(store) -> int:
    """Bring stored department codes in line with DEPARTMENT_CODES. Returns rows updated."""
    updated = 0
    for department in store.list_options(OptionType.DEPARTMENT):
        code = DEPARTMENT_CODES.get(normalize_key(department['value']))
        if code and department['code'] != code:
            updated += store.set_department_code(department['value'], code)
    logger.info(f"DEPARTMENT_CODES_ENSURED | {updated} updated")
    return updated


def _cell(row, column):
    value = row.get(column)
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def import_options_file(store, file_path: str, sheet_name=0) -> Dict:
    """
    Import options from an Excel or CSV file with columns
    type, value, parentCategory, code.

    Returns:
        stats dict with total, inserted, skipped and per-row errors
    """
    path = Path(file_path)
    if path.suffix.lower() == '.csv':
        df = pd.read_csv(path, dtype=str)
    else:
        df = pd.read_excel(path, sheet_name=sheet_name, dtype=str)

    missing = [col for col in ('type', 'value') if col not in df.columns]
    if missing:
        raise ValueError(f"Missing columns in {path.name}: {', '.join(missing)}")

    stats = {'total': len(df), 'inserted': 0, 'skipped': 0, 'errors': []}
    options = []
    for idx, row in df.iterrows():
        option_type = _cell(row, 'type')
        value = _cell(row, 'value')
        if option_type not in OptionType.ALL_TYPES or not value:
            stats['errors'].append(f"Row {idx + 2}: invalid type '{option_type}' or empty value")
            stats['skipped'] += 1
            continue
        parent = _cell(row, 'parentCategory')
        if option_type == OptionType.SUB_CATEGORY and not parent:
            stats['errors'].append(f"Row {idx + 2}: subCategory '{value}' needs a parentCategory")
            stats['skipped'] += 1
            continue
        options.append(make_option(option_type, value, parent, _cell(row, 'code')))

    inserted = store.add_many(options)
    stats['inserted'] = inserted
    stats['skipped'] += len(options) - inserted
    logger.info(f"OPTION_IMPORT | {path.name} | {inserted}/{stats['total']} inserted")
    return stats

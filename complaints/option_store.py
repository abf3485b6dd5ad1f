"""
Taxonomy Option Sources
Two interchangeable sources answer list_options(option_type, parent_category):

- OptionStore: the dynamic options table in SQLite (source of truth)
- StaticOptionSource: built-in constants used when the store is unreachable

Options are plain dicts: {type, value, parentCategory, code}
"""
import sqlite3
import logging
from typing import Dict, Iterable, List, Optional

from db_config import db_connection, get_dict_cursor
from complaints.taxonomy_config import (
    OptionType,
    FALLBACK_CATEGORIES,
    FALLBACK_DEPARTMENTS,
    FALLBACK_SUBCATEGORIES,
)

logger = logging.getLogger('option_store')


def normalize_key(value: Optional[str]) -> str:
    """Canonical form for every taxonomy comparison: trimmed and lower-cased"""
    return (value or '').strip().lower()


def make_option(option_type: str, value: str, parent_category: Optional[str] = None,
                code: Optional[str] = None) -> Dict:
    """Build an option record"""
    return {
        'type': option_type,
        'value': value,
        'parentCategory': parent_category or None,
        'code': code or None,
    }


def _check_type(option_type: str):
    if option_type not in OptionType.ALL_TYPES:
        raise ValueError(
            f"Unknown option type '{option_type}'. Must be one of: {', '.join(OptionType.ALL_TYPES)}"
        )


class OptionStore:
    """Reads and writes taxonomy options in the SQLite options table"""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def initialize(self):
        """Create the options table and indexes if they don't exist"""
        with db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS options (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    type TEXT NOT NULL,
                    value TEXT NOT NULL,
                    parent_category TEXT NOT NULL DEFAULT '',
                    code TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            # Uniqueness is case-insensitive to match how options are looked up
            cursor.execute('''
                CREATE UNIQUE INDEX IF NOT EXISTS idx_option_identity
                ON options(type, LOWER(value), LOWER(parent_category))
            ''')
            cursor.execute(
                'CREATE INDEX IF NOT EXISTS idx_option_parent ON options(type, parent_category)'
            )
        logger.info(f"OPTION_STORE_READY | {self.db_path}")

    @staticmethod
    def _row_to_option(row) -> Dict:
        return make_option(row['type'], row['value'], row['parent_category'], row['code'])

    def list_options(self, option_type: str, parent_category: Optional[str] = None) -> List[Dict]:
        """
        List options of a type in insertion order.

        Args:
            option_type: One of OptionType.ALL_TYPES
            parent_category: Optional parent filter, matched case-insensitively

        Raises:
            StoreUnavailable: if the database cannot be read
        """
        _check_type(option_type)

        query = 'SELECT type, value, parent_category, code FROM options WHERE type = ?'
        params = [option_type]
        if parent_category is not None:
            query += ' AND LOWER(parent_category) = ?'
            params.append(normalize_key(parent_category))
        query += ' ORDER BY id'

        with db_connection(self.db_path) as conn:
            cursor = get_dict_cursor(conn)
            cursor.execute(query, params)
            return [self._row_to_option(row) for row in cursor.fetchall()]

    def count_options(self) -> int:
        with db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT COUNT(*) FROM options')
            return cursor.fetchone()[0]

    def add_option(self, option_type: str, value: str, parent_category: Optional[str] = None,
                   code: Optional[str] = None) -> bool:
        """
        Insert a single option.

        Returns:
            True if inserted, False if an equivalent option already exists
        """
        return self.add_many([make_option(option_type, value, parent_category, code)]) == 1

    def add_many(self, options: Iterable[Dict]) -> int:
        """Insert options, skipping duplicates. Returns the number inserted."""
        rows = []
        for option in options:
            _check_type(option['type'])
            value = (option.get('value') or '').strip()
            if not value:
                raise ValueError("Option value must not be empty")
            rows.append((
                option['type'],
                value,
                (option.get('parentCategory') or '').strip(),
                option.get('code') or None,
            ))

        inserted = 0
        with db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            for row in rows:
                try:
                    cursor.execute('''
                        INSERT INTO options (type, value, parent_category, code)
                        VALUES (?, ?, ?, ?)
                    ''', row)
                    inserted += 1
                except sqlite3.IntegrityError:
                    logger.debug(f"OPTION_DUPLICATE | {row[0]} | {row[1]} | {row[2]}")
        return inserted

    def set_department_code(self, department: str, code: str) -> int:
        """Update the code of a department matched case-insensitively. Returns rows changed."""
        with db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                UPDATE options SET code = ?
                WHERE type = ? AND LOWER(value) = ? AND COALESCE(code, '') != ?
            ''', (code, OptionType.DEPARTMENT, normalize_key(department), code))
            return cursor.rowcount

    def clear(self):
        with db_connection(self.db_path) as conn:
            conn.execute('DELETE FROM options')
        logger.info(f"OPTION_STORE_CLEARED | {self.db_path}")


class StaticOptionSource:
    """Serves the built-in taxonomy; never fails"""

    def list_options(self, option_type: str, parent_category: Optional[str] = None) -> List[Dict]:
        _check_type(option_type)

        if option_type == OptionType.CATEGORY:
            options = [make_option(option_type, value) for value in FALLBACK_CATEGORIES]
        elif option_type == OptionType.DEPARTMENT:
            options = [make_option(option_type, name, code=code) for name, code in FALLBACK_DEPARTMENTS]
        else:
            options = [
                make_option(option_type, value, parent)
                for parent, values in FALLBACK_SUBCATEGORIES.items()
                for value in values
            ]

        if parent_category is None:
            return options

        wanted = normalize_key(parent_category)
        return [opt for opt in options if normalize_key(opt['parentCategory']) == wanted]

"""
Taxonomy Seeding Utility for the College Complaint Management System
Seeds default categories, departments and subcategories into SQLite and
optionally imports more from an Excel (.xlsx) or CSV file

Usage:
    python scripts/seed_options.py
    python scripts/seed_options.py --reset
    python scripts/seed_options.py --file "data/options.xlsx" --sheet Sheet1
"""
import argparse
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import COMPLAINTS_DB_PATH
from complaints.errors import StoreUnavailable
from complaints.option_store import OptionStore
from complaints.seeding import seed_default_options, ensure_department_codes, import_options_file


def main():
    parser = argparse.ArgumentParser(description='Seed and import complaint taxonomy options')
    parser.add_argument('--db', default=COMPLAINTS_DB_PATH, help='Path to the complaints database')
    parser.add_argument('--file', help='Excel or CSV file with type, value, parentCategory, code columns')
    parser.add_argument('--sheet', default='Sheet1', help='Sheet name for Excel files')
    parser.add_argument('--reset', action='store_true', help='Delete existing options before seeding')

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')

    store = OptionStore(args.db)
    try:
        store.initialize()
        if args.reset:
            store.clear()

        inserted = seed_default_options(store)
        print(f"✓ Default options inserted: {inserted}")
        print(f"✓ Department codes updated: {ensure_department_codes(store)}")

        if args.file:
            if not Path(args.file).exists():
                print(f"❌ File not found: {args.file}")
                return 1
            stats = import_options_file(store, args.file, sheet_name=args.sheet)
            print(f"✓ Imported {stats['inserted']} of {stats['total']} rows, skipped {stats['skipped']}")
            for error in stats['errors']:
                print(f"  ⚠️ {error}")
    except StoreUnavailable:
        print(f"❌ Could not open database: {args.db}")
        return 1
    except ValueError as e:
        print(f"❌ Import failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

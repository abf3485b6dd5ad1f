"""
Centralized Database Configuration - SQLite Only
One database file holds both taxonomy options and complaints

Usage:
    from db_config import db_connection, get_dict_cursor

    with db_connection('data/complaints.db') as conn:
        cursor = get_dict_cursor(conn)
        cursor.execute("SELECT * FROM complaints")
"""
import os
import sqlite3
import logging
from contextlib import contextmanager

from complaints.errors import StoreUnavailable

logger = logging.getLogger('db_config')

DEFAULT_TIMEOUT = 30  # seconds


# ============================================
# Public API
# ============================================

def get_db_connection(db_path: str, timeout: int = DEFAULT_TIMEOUT):
    """
    Get SQLite database connection for the given file.

    Args:
        db_path: Path to the SQLite database file
        timeout: Lock wait timeout in seconds

    Returns:
        sqlite3 connection

    Raises:
        StoreUnavailable: if the database cannot be opened
    """
    conn = None
    try:
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(db_path, timeout=timeout, check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA foreign_keys=ON;")
        return conn
    except (OSError, sqlite3.Error) as e:
        if conn:
            conn.close()
        logger.error(f"DB_CONNECT_FAIL | {db_path} | {e}")
        raise StoreUnavailable() from e


def get_dict_cursor(conn):
    """
    Get a cursor that returns dict-like rows (SQLite Row factory)
    """
    conn.row_factory = sqlite3.Row
    return conn.cursor()


@contextmanager
def db_connection(db_path: str, timeout: int = DEFAULT_TIMEOUT):
    """
    Context manager for safe database connections.
    Auto-commits on success, rolls back on error, always closes.
    Storage errors surface as StoreUnavailable; no retries are attempted.

    Usage:
        with db_connection('data/complaints.db') as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM complaints")
    """
    conn = get_db_connection(db_path, timeout)
    try:
        yield conn
        conn.commit()
    except sqlite3.IntegrityError:
        conn.rollback()
        raise
    except sqlite3.Error as e:
        conn.rollback()
        logger.error(f"DB_OPERATION_FAIL | {db_path} | {e}")
        raise StoreUnavailable() from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()

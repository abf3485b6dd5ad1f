"""
Complaint Database Handler
Stores complaint records in SQLite and serves the staff and student lookups
"""
import json
import uuid
import sqlite3
import logging
from datetime import datetime
from typing import Dict, List, Optional

import pytz

from db_config import db_connection, get_dict_cursor
from complaints.errors import InvalidStatus, NotFound, StoreUnavailable
from complaints.taxonomy_config import ComplaintStatus

logger = logging.getLogger('complaint_db')

IST = pytz.timezone('Asia/Kolkata')

DATABASE_PATH = "data/complaints.db"

# Tracking ids are random; a clash only triggers a fresh id, not a storage retry
MAX_TRACKING_ID_ATTEMPTS = 3


class ComplaintDatabase:
    """Handles all database operations for complaints"""

    def __init__(self, db_path: str = DATABASE_PATH):
        self.db_path = db_path

    def initialize(self):
        """Create the complaints table and indexes if they don't exist"""
        with db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS complaints (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    tracking_id TEXT UNIQUE NOT NULL,
                    email TEXT NOT NULL,
                    department TEXT NOT NULL,
                    category TEXT NOT NULL,
                    sub_category TEXT NOT NULL,
                    sub_other TEXT,
                    description TEXT NOT NULL,
                    priority TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'open',
                    attachment_info TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            ''')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_complaint_email ON complaints(email)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_complaint_status ON complaints(status)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_complaint_created ON complaints(created_at DESC)')
        logger.info(f"COMPLAINT_DB_READY | {self.db_path}")

    @staticmethod
    def _now() -> str:
        return datetime.now(IST).isoformat(timespec='seconds')

    @staticmethod
    def generate_tracking_id() -> str:
        """Generate a tracking ID in format CMP-YYYYMMDD-XXXXXXXX"""
        today = datetime.now(IST).strftime('%Y%m%d')
        return f"CMP-{today}-{uuid.uuid4().hex[:8].upper()}"

    @staticmethod
    def _row_to_complaint(row) -> Dict:
        attachment = json.loads(row['attachment_info']) if row['attachment_info'] else None
        return {
            'id': row['id'],
            'trackingId': row['tracking_id'],
            'email': row['email'],
            'department': row['department'],
            'category': row['category'],
            'subCategory': row['sub_category'],
            'subOther': row['sub_other'],
            'description': row['description'],
            'priority': row['priority'],
            'status': row['status'],
            'attachment': attachment,
            'createdAt': row['created_at'],
            'updatedAt': row['updated_at'],
        }

    def create_complaint(self, complaint: Dict) -> Dict:
        """
        Persist a normalized complaint with a fresh tracking id and the initial status.

        Args:
            complaint: dict with email, department, category, subCategory,
                subOther, description, priority and optional attachment

        Returns:
            The stored complaint record

        Raises:
            StoreUnavailable: if the insert fails
        """
        attachment = complaint.get('attachment')
        attachment_info = json.dumps(attachment) if attachment else None

        for attempt in range(MAX_TRACKING_ID_ATTEMPTS):
            tracking_id = self.generate_tracking_id()
            now = self._now()
            try:
                with db_connection(self.db_path) as conn:
                    cursor = conn.cursor()
                    cursor.execute('''
                        INSERT INTO complaints (
                            tracking_id, email, department, category, sub_category,
                            sub_other, description, priority, status, attachment_info,
                            created_at, updated_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ''', (
                        tracking_id,
                        complaint['email'],
                        complaint['department'],
                        complaint['category'],
                        complaint['subCategory'],
                        complaint.get('subOther'),
                        complaint['description'],
                        complaint['priority'],
                        ComplaintStatus.INITIAL,
                        attachment_info,
                        now,
                        now,
                    ))
                    complaint_id = cursor.lastrowid
            except sqlite3.IntegrityError as e:
                logger.warning(f"TRACKING_ID_CLASH | {tracking_id} | attempt {attempt + 1} | {e}")
                continue

            logger.info(
                f"COMPLAINT_CREATED | {tracking_id} | {complaint['category']}/{complaint['subCategory']} "
                f"| {complaint['priority']}"
            )
            return self.get_complaint(complaint_id)

        logger.error(f"COMPLAINT_CREATE_FAIL | {complaint['email']} | no unique tracking id")
        raise StoreUnavailable()

    def _fetch_one(self, where: str, params: tuple) -> Optional[Dict]:
        with db_connection(self.db_path) as conn:
            cursor = get_dict_cursor(conn)
            cursor.execute(f'SELECT * FROM complaints WHERE {where}', params)
            row = cursor.fetchone()
        return self._row_to_complaint(row) if row else None

    def get_complaint(self, complaint_id: int) -> Dict:
        """Get complaint by database id; raises NotFound"""
        complaint = self._fetch_one('id = ?', (complaint_id,))
        if not complaint:
            raise NotFound(f"Complaint {complaint_id} not found")
        return complaint

    def get_by_tracking_id(self, tracking_id: str) -> Dict:
        """Get complaint by tracking id (case-insensitive); raises NotFound"""
        complaint = self._fetch_one('UPPER(tracking_id) = ?', ((tracking_id or '').strip().upper(),))
        if not complaint:
            raise NotFound(f"No complaint found for tracking ID {tracking_id}")
        return complaint

    def get_complaints_by_email(self, email: str) -> List[Dict]:
        """Get all complaints submitted by an email, newest first"""
        with db_connection(self.db_path) as conn:
            cursor = get_dict_cursor(conn)
            cursor.execute('''
                SELECT * FROM complaints
                WHERE LOWER(email) = ?
                ORDER BY created_at DESC, id DESC
            ''', ((email or '').strip().lower(),))
            rows = cursor.fetchall()
        return [self._row_to_complaint(row) for row in rows]

    def get_all_complaints(self, status_filter: Optional[str] = None, limit: int = 200) -> List[Dict]:
        """
        Get complaints for the staff dashboard

        Args:
            status_filter: Optional status to filter by
            limit: Max complaints to return
        """
        query = 'SELECT * FROM complaints'
        params = []
        if status_filter:
            query += ' WHERE status = ?'
            params.append(status_filter)
        query += ' ORDER BY created_at DESC, id DESC LIMIT ?'
        params.append(limit)

        with db_connection(self.db_path) as conn:
            cursor = get_dict_cursor(conn)
            cursor.execute(query, params)
            rows = cursor.fetchall()
        return [self._row_to_complaint(row) for row in rows]

    def update_status(self, complaint_id: int, status: str) -> Dict:
        """
        Move a complaint to a new status.

        Raises:
            InvalidStatus: status is not a known complaint status
            NotFound: no complaint with that id
        """
        status = (status or '').strip().lower()
        if status not in ComplaintStatus.ALL_STATUSES:
            raise InvalidStatus(status, ComplaintStatus.ALL_STATUSES)

        with db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                UPDATE complaints SET status = ?, updated_at = ?
                WHERE id = ?
            ''', (status, self._now(), complaint_id))
            changed = cursor.rowcount

        if not changed:
            raise NotFound(f"Complaint {complaint_id} not found")

        logger.info(f"COMPLAINT_STATUS | {complaint_id} | {status}")
        return self.get_complaint(complaint_id)

"""
Attachment Service
Validates and stores the single optional file attached to a complaint.
Uses UUID filenames and atomic temp-file writes.
"""

import os
import uuid
import logging
from typing import Dict, Iterable, Optional

from werkzeug.utils import secure_filename

from complaints.errors import FileTooLarge, StoreUnavailable, UnsupportedFileType

logger = logging.getLogger('attachment_service')

DEFAULT_UPLOAD_DIR = os.path.join('uploads', 'complaints')
DEFAULT_ALLOWED_TYPES = ('pdf', 'doc', 'docx', 'jpg', 'jpeg', 'png')
DEFAULT_MAX_BYTES = 5 * 1024 * 1024  # 5MB


class AttachmentService:
    """Handles complaint attachment validation and storage."""

    def __init__(self, upload_dir: str = DEFAULT_UPLOAD_DIR,
                 max_bytes: int = DEFAULT_MAX_BYTES,
                 allowed_types: Iterable[str] = DEFAULT_ALLOWED_TYPES):
        self.upload_dir = upload_dir
        self.max_bytes = max_bytes
        self.allowed_types = tuple(t.lower() for t in allowed_types)

    @staticmethod
    def _extension(filename: str) -> str:
        return filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''

    def inspect(self, file) -> Optional[Dict]:
        """
        Validate an uploaded file without storing it.

        Args:
            file: Werkzeug FileStorage object, or None

        Returns:
            dict with the original name, extension, content type and bytes,
            or None when no file was uploaded

        Raises:
            UnsupportedFileType: extension not in the allow-list
            FileTooLarge: more than max_bytes of content
        """
        if file is None or not file.filename:
            return None

        ext = self._extension(file.filename)
        if ext not in self.allowed_types:
            logger.info(f"ATTACHMENT_REJECTED | type | {file.filename}")
            raise UnsupportedFileType(ext, self.allowed_types)

        # Read one byte past the limit so oversize uploads are detected without buffering them whole
        data = file.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            logger.info(f"ATTACHMENT_REJECTED | size | {file.filename}")
            raise FileTooLarge(self.max_bytes)

        return {
            'originalName': secure_filename(file.filename) or f"attachment.{ext}",
            'extension': ext,
            'contentType': file.mimetype or 'application/octet-stream',
            'data': data,
        }

    def save(self, inspected: Dict) -> Dict:
        """
        Write an inspected attachment to the upload directory.

        Returns:
            attachment metadata stored on the complaint

        Raises:
            StoreUnavailable: the file could not be written
        """
        filename = f"{uuid.uuid4().hex}.{inspected['extension']}"
        full_path = os.path.join(self.upload_dir, filename)
        temp_path = full_path + '.tmp'

        try:
            os.makedirs(self.upload_dir, exist_ok=True)
            with open(temp_path, 'wb') as f:
                f.write(inspected['data'])
            os.replace(temp_path, full_path)
        except OSError as e:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            logger.error(f"ATTACHMENT_SAVE_FAIL | {inspected['originalName']} | {e}")
            raise StoreUnavailable() from e

        logger.info(f"ATTACHMENT_SAVED | {inspected['originalName']} | {filename}")
        return {
            'filename': inspected['originalName'],
            'path': full_path,
            'size': len(inspected['data']),
            'contentType': inspected['contentType'],
        }

    def delete(self, attachment: Optional[Dict]):
        """Remove a stored attachment, e.g. after the complaint insert failed."""
        if not attachment:
            return
        path = attachment.get('path')
        try:
            if path and os.path.exists(path):
                os.remove(path)
                logger.info(f"ATTACHMENT_CLEANUP | {path}")
        except OSError as e:
            logger.error(f"ATTACHMENT_CLEANUP_FAIL | {path} | {e}")

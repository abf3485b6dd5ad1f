"""
Complaint Support Services Package
"""

from services.attachment_service import AttachmentService

__all__ = [
    'AttachmentService',
]

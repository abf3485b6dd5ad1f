"""
Complaint Intake - Validates submissions and records complaints
"""
import logging
from typing import Dict, Optional

from complaints.errors import InvalidSubcategory, MissingField, StoreUnavailable, ValidationFailure
from complaints.option_store import normalize_key
from complaints.taxonomy_config import OTHER_SUBCATEGORY

logger = logging.getLogger('complaint_intake')

# Checked in this order; the first empty one is reported
REQUIRED_FIELDS = ('email', 'department', 'category', 'subCategory', 'description')


class ComplaintIntake:
    """Validates complaint submissions, stamps priority and persists them"""

    def __init__(self, resolver, db, attachments):
        self.resolver = resolver
        self.db = db
        self.attachments = attachments

    @staticmethod
    def _clean(value) -> str:
        return value.strip() if isinstance(value, str) else ''

    def validate(self, submission: Dict) -> Dict:
        """
        Validate a submission and build the normalized complaint.

        Any client-supplied priority is ignored; the resolver decides it.

        Args:
            submission: form fields, plus an optional 'file' (Werkzeug FileStorage)

        Returns:
            normalized complaint dict; 'upload' holds the inspected file or None

        Raises:
            MissingField, InvalidSubcategory, FileTooLarge, UnsupportedFileType,
            StoreUnavailable
        """
        fields = {name: self._clean(submission.get(name)) for name in REQUIRED_FIELDS}
        for name in REQUIRED_FIELDS:
            if not fields[name]:
                raise MissingField(name)

        sub_other = self._clean(submission.get('subOther'))
        is_other = normalize_key(fields['subCategory']) == OTHER_SUBCATEGORY
        if is_other and not sub_other:
            raise MissingField('subOther')

        upload = self.attachments.inspect(submission.get('file'))

        category = normalize_key(fields['category'])
        sub_category = self.resolver.resolve_subcategory(category, fields['subCategory'])
        if sub_category is None:
            raise InvalidSubcategory(fields['category'], fields['subCategory'])

        return {
            'email': fields['email'].lower(),
            'department': fields['department'],
            'category': category,
            'subCategory': sub_category,
            'subOther': sub_other if is_other else None,
            'description': fields['description'],
            'priority': self.resolver.derive_priority(category, sub_category),
            'upload': upload,
        }

    def submit(self, submission: Dict) -> Dict:
        """
        Validate and persist a complaint.

        Returns:
            the stored complaint, including its tracking id and status

        Raises:
            ValidationFailure subclasses for client errors, StoreUnavailable
            when the complaint could not be stored
        """
        try:
            complaint = self.validate(submission)
        except ValidationFailure as e:
            logger.info(f"COMPLAINT_REJECTED | {e.code} | {self._clean(submission.get('email'))} | {e.message}")
            raise

        client_priority = self._clean(submission.get('priority'))
        if client_priority and client_priority.lower() != complaint['priority']:
            logger.info(
                f"PRIORITY_OVERRIDDEN | {complaint['email']} | client={client_priority} "
                f"| server={complaint['priority']}"
            )

        upload = complaint.pop('upload')
        complaint['attachment'] = self.attachments.save(upload) if upload else None

        try:
            return self.db.create_complaint(complaint)
        except StoreUnavailable:
            self.attachments.delete(complaint['attachment'])
            raise

    def preview_priority(self, category: Optional[str], sub_category: Optional[str]) -> Dict:
        """Priority shown next to the form before submission; advisory only"""
        return {
            'category': normalize_key(category),
            'subCategory': normalize_key(sub_category),
            'priority': self.resolver.derive_priority(category, sub_category),
        }

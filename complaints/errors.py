"""
Complaint System Errors
Each failure kind carries a stable code, a user-facing message and an HTTP status
"""


class ComplaintError(Exception):
    """Base class for every failure reported to API clients"""

    code = 'complaint_error'
    http_status = 500
    default_message = 'Something went wrong while processing the complaint'

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            'success': False,
            'error': self.message,
            'code': self.code,
        }


class ValidationFailure(ComplaintError):
    """Client-correctable submission problem"""

    code = 'validation_failed'
    http_status = 400
    default_message = 'The complaint could not be validated'


class MissingField(ValidationFailure):
    code = 'missing_field'

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['field'] = self.field
        return data


class InvalidSubcategory(ValidationFailure):
    code = 'invalid_subcategory'

    def __init__(self, category: str, sub_category: str):
        self.category = category
        self.sub_category = sub_category
        super().__init__(f"'{sub_category}' is not a valid subcategory of '{category}'")


class FileTooLarge(ValidationFailure):
    code = 'file_too_large'
    http_status = 413

    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes
        super().__init__(f"File size should be less than {max_bytes // (1024 * 1024)}MB")


class FieldTooLarge(ValidationFailure):
    code = 'field_too_large'
    http_status = 413

    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes
        super().__init__(f"A form field exceeds the maximum length of {max_bytes // 1024}KB")


class UnsupportedFileType(ValidationFailure):
    code = 'unsupported_file_type'
    http_status = 415

    def __init__(self, extension: str, allowed):
        self.extension = extension
        shown = extension or 'none'
        super().__init__(f"Invalid file type: {shown}. Allowed: {', '.join(allowed)}")


class InvalidStatus(ValidationFailure):
    code = 'invalid_status'

    def __init__(self, status: str, allowed):
        self.status = status
        super().__init__(f"Invalid status '{status}'. Must be one of: {', '.join(allowed)}")


class NotFound(ComplaintError):
    code = 'not_found'
    http_status = 404
    default_message = 'Complaint not found'


class StoreUnavailable(ComplaintError):
    """Storage could not be reached; internal details are never forwarded"""

    code = 'store_unavailable'
    http_status = 503
    default_message = 'Complaint service is temporarily unavailable. Please try again later.'

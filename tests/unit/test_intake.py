"""Unit tests for complaint intake validation and submission."""

import os

import pytest

from complaints.errors import (
    FileTooLarge, InvalidSubcategory, MissingField, StoreUnavailable, UnsupportedFileType
)
from complaints.intake import ComplaintIntake, REQUIRED_FIELDS
from complaints.taxonomy import TaxonomyResolver
from complaints.taxonomy_config import ComplaintStatus, Priority


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
def test_empty_required_field_is_rejected_without_persisting(intake, complaint_db, valid_submission, field) -> None:
    valid_submission[field] = "   "

    with pytest.raises(MissingField) as exc_info:
        intake.submit(valid_submission)

    assert exc_info.value.field == field
    assert complaint_db.get_all_complaints() == []


def test_absent_required_field_is_rejected(intake, valid_submission) -> None:
    del valid_submission["description"]
    with pytest.raises(MissingField) as exc_info:
        intake.validate(valid_submission)
    assert exc_info.value.field == "description"


def test_first_missing_field_is_reported(intake) -> None:
    with pytest.raises(MissingField) as exc_info:
        intake.validate({"category": "hostel"})
    assert exc_info.value.field == "email"


def test_other_subcategory_requires_sub_other(intake, valid_submission) -> None:
    valid_submission["subCategory"] = "other"

    with pytest.raises(MissingField) as exc_info:
        intake.validate(valid_submission)
    assert exc_info.value.field == "subOther"

    valid_submission["subOther"] = "  broken window latch "
    complaint = intake.validate(valid_submission)
    assert complaint["subCategory"] == "other"
    assert complaint["subOther"] == "broken window latch"
    assert complaint["priority"] == Priority.MEDIUM


def test_sub_other_is_dropped_for_listed_subcategories(intake, valid_submission) -> None:
    valid_submission["subOther"] = "ignored"
    assert intake.validate(valid_submission)["subOther"] is None


def test_subcategory_must_belong_to_category(intake, complaint_db, valid_submission) -> None:
    valid_submission["subCategory"] = "wheelchair"

    with pytest.raises(InvalidSubcategory):
        intake.submit(valid_submission)
    assert complaint_db.get_all_complaints() == []


def test_other_subcategory_requires_a_known_category(intake, complaint_db, valid_submission) -> None:
    valid_submission.update(category="no-such-category", subCategory="other", subOther="x")

    with pytest.raises(InvalidSubcategory):
        intake.submit(valid_submission)
    assert complaint_db.get_all_complaints() == []


def test_validate_normalizes_fields(intake) -> None:
    complaint = intake.validate({
        "email": "  S@X.com ",
        "department": " Computer Science ",
        "category": "Facility",
        "subCategory": "water-cooler",
        "description": "  cooler leaking  ",
    })

    assert complaint["email"] == "s@x.com"
    assert complaint["department"] == "Computer Science"
    assert complaint["category"] == "facility"
    assert complaint["subCategory"] == "Water-Cooler"
    assert complaint["description"] == "cooler leaking"
    assert complaint["priority"] == Priority.HIGH
    assert complaint["upload"] is None


def test_server_overrides_client_priority(intake, valid_submission) -> None:
    valid_submission["priority"] = "low"

    stored = intake.submit(valid_submission)

    assert stored["priority"] == Priority.URGENT


def test_submit_persists_open_complaint_with_tracking_id(intake, complaint_db, valid_submission) -> None:
    stored = intake.submit(valid_submission)

    assert stored["trackingId"].startswith("CMP-")
    assert stored["status"] == ComplaintStatus.OPEN
    assert stored["priority"] == Priority.URGENT
    assert stored["attachment"] is None
    assert complaint_db.get_by_tracking_id(stored["trackingId"]) == stored


def test_oversize_attachment_is_rejected_without_persisting(
    intake, complaint_db, valid_submission, make_upload, upload_dir
) -> None:
    valid_submission["file"] = make_upload("report.pdf", size=6 * 1024 * 1024, content_type="application/pdf")

    with pytest.raises(FileTooLarge):
        intake.submit(valid_submission)

    assert complaint_db.get_all_complaints() == []
    assert not upload_dir.exists() or os.listdir(upload_dir) == []


def test_attachment_of_exactly_five_mib_is_accepted(intake, valid_submission, make_upload) -> None:
    valid_submission["file"] = make_upload("report.pdf", size=5 * 1024 * 1024, content_type="application/pdf")
    stored = intake.submit(valid_submission)
    assert stored["attachment"]["size"] == 5 * 1024 * 1024


def test_unsupported_attachment_type_is_rejected(intake, complaint_db, valid_submission, make_upload) -> None:
    valid_submission["file"] = make_upload("script.exe", content_type="application/octet-stream")

    with pytest.raises(UnsupportedFileType):
        intake.submit(valid_submission)
    assert complaint_db.get_all_complaints() == []


def test_attachment_is_saved_with_complaint(intake, valid_submission, make_upload) -> None:
    valid_submission["file"] = make_upload("Photo.JPG", size=2048, content_type="image/jpeg")

    stored = intake.submit(valid_submission)

    attachment = stored["attachment"]
    assert attachment["filename"] == "Photo.JPG"
    assert attachment["size"] == 2048
    assert attachment["contentType"] == "image/jpeg"
    assert attachment["path"].endswith(".jpg")
    assert os.path.exists(attachment["path"])


def test_submission_fails_loudly_when_store_is_down(
    unavailable_store, complaint_db, attachments, valid_submission
) -> None:
    intake = ComplaintIntake(TaxonomyResolver(unavailable_store), complaint_db, attachments)

    with pytest.raises(StoreUnavailable):
        intake.submit(valid_submission)
    assert complaint_db.get_all_complaints() == []


def test_saved_attachment_is_removed_when_insert_fails(
    resolver, attachments, valid_submission, make_upload, upload_dir
) -> None:
    class FailingDatabase:
        def create_complaint(self, complaint):
            raise StoreUnavailable()

    intake = ComplaintIntake(resolver, FailingDatabase(), attachments)
    valid_submission["file"] = make_upload("photo.png")

    with pytest.raises(StoreUnavailable):
        intake.submit(valid_submission)
    assert os.listdir(upload_dir) == []


def test_preview_priority_matches_intake(intake, valid_submission) -> None:
    preview = intake.preview_priority("Hostel", "Electricity")
    assert preview == {"category": "hostel", "subCategory": "electricity", "priority": Priority.URGENT}
    assert intake.validate(valid_submission)["priority"] == preview["priority"]

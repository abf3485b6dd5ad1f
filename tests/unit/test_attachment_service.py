"""Unit tests for complaint attachment validation and storage."""

import os

import pytest

from complaints.errors import FileTooLarge, UnsupportedFileType
from services.attachment_service import AttachmentService


def test_no_file_means_no_attachment(attachments, make_upload) -> None:
    assert attachments.inspect(None) is None
    assert attachments.inspect(make_upload(filename="")) is None


@pytest.mark.parametrize("filename", ["a.pdf", "a.doc", "a.DOCX", "a.jpg", "a.jpeg", "a.png"])
def test_allowed_extensions(attachments, make_upload, filename) -> None:
    inspected = attachments.inspect(make_upload(filename=filename))
    assert inspected["extension"] == filename.rsplit(".", 1)[1].lower()


@pytest.mark.parametrize("filename", ["a.gif", "a.exe", "noextension", "a.pdf.zip"])
def test_disallowed_extensions(attachments, make_upload, filename) -> None:
    with pytest.raises(UnsupportedFileType):
        attachments.inspect(make_upload(filename=filename))


def test_size_limit(make_upload) -> None:
    service = AttachmentService(upload_dir="unused", max_bytes=100)
    assert len(service.inspect(make_upload(size=100))["data"]) == 100
    with pytest.raises(FileTooLarge):
        service.inspect(make_upload(size=101))


def test_save_and_delete(attachments, make_upload, upload_dir) -> None:
    inspected = attachments.inspect(make_upload(filename="../../etc/passwd.png", size=12))

    saved = attachments.save(inspected)

    assert saved["filename"] == "etc_passwd.png"
    assert saved["size"] == 12
    assert os.path.dirname(saved["path"]) == str(upload_dir)
    with open(saved["path"], "rb") as f:
        assert f.read() == b"x" * 12

    attachments.delete(saved)
    assert not os.path.exists(saved["path"])
    # Deleting nothing is a no-op
    attachments.delete(None)

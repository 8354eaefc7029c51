import io

import pytest

from src.skyhr_attendance.skyhr_attendance.core.exceptions import ValidationError
from src.skyhr_attendance.skyhr_attendance.storage.local import LocalStorage


def test_upload_writes_file_and_returns_url(tmp_path):
    storage = LocalStorage(tmp_path, "/uploads/")

    stored = storage.upload(io.BytesIO(b"png-bytes"), "qr/location/geo1.png", "image/png")

    assert stored.key == "qr/location/geo1.png"
    assert stored.url == "/uploads/qr/location/geo1.png"
    assert (tmp_path / "qr" / "location" / "geo1.png").read_bytes() == b"png-bytes"


def test_upload_rejects_path_traversal(tmp_path):
    storage = LocalStorage(tmp_path / "root", "/uploads")

    with pytest.raises(ValidationError):
        storage.upload(io.BytesIO(b"x"), "../escape.txt", "text/plain")

import os

import pytest

from portal_app.errors import PersistenceError
from portal_app.services.blob_storage import LocalBlobStorage


def test_upload_writes_file(blobs):
    blobs.upload("source-code", "u1/source-code.zip", b"zip-bytes", "application/zip")
    with open(blobs.path_for("source-code", "u1/source-code.zip"), "rb") as f:
        assert f.read() == b"zip-bytes"


def test_upload_overwrites_in_place(blobs):
    blobs.upload("profile-pictures", "u1/profile.png", b"one")
    blobs.upload("profile-pictures", "u1/profile.png", b"two")
    folder = os.path.dirname(blobs.path_for("profile-pictures", "u1/profile.png"))
    assert os.listdir(folder) == ["profile.png"]
    with open(os.path.join(folder, "profile.png"), "rb") as f:
        assert f.read() == b"two"


def test_upload_without_overwrite_refuses_existing(blobs):
    blobs.upload("b", "k", b"one")
    with pytest.raises(PersistenceError):
        blobs.upload("b", "k", b"two", overwrite=False)


@pytest.mark.parametrize("path", ["../escape.txt", "u1/../../escape.txt", "/etc/passwd", ""])
def test_paths_cannot_escape_the_bucket(blobs, path):
    with pytest.raises(PersistenceError):
        blobs.upload("bucket", path, b"x")


def test_public_url(tmp_path):
    storage = LocalBlobStorage(str(tmp_path), "http://files.test/")
    assert storage.public_url("profile-pictures", "u 1/profile.png") == \
        "http://files.test/storage/profile-pictures/u%201/profile.png"

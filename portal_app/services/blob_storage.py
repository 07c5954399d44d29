from __future__ import annotations
import logging
import os
import tempfile
from urllib.parse import quote

from ..config import PUBLIC_STORAGE_BASE, UPLOAD_DIR
from ..errors import PersistenceError
from ..ports import BlobStorage

logger = logging.getLogger(__name__)


class LocalBlobStorage(BlobStorage):
    """Buckets are directories under ``root``; files are served by ``file_server``."""

    def __init__(self, root: str = UPLOAD_DIR, public_base: str = PUBLIC_STORAGE_BASE):
        self.root = os.path.abspath(root)
        self.public_base = public_base.rstrip("/")
        os.makedirs(self.root, exist_ok=True)

    def path_for(self, bucket: str, path: str) -> str:
        bucket_dir = os.path.join(self.root, bucket)
        full = os.path.abspath(os.path.join(bucket_dir, path))
        if os.path.commonpath([full, bucket_dir]) != bucket_dir or full == bucket_dir:
            raise PersistenceError(f"Invalid storage path: {bucket}/{path}")
        return full

    def upload(self, bucket: str, path: str, data: bytes,
               content_type: str = "application/octet-stream", overwrite: bool = True) -> None:
        target = self.path_for(bucket, path)
        if not overwrite and os.path.exists(target):
            raise PersistenceError(f"{bucket}/{path} already exists")
        tmp_name = None
        try:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=os.path.dirname(target), prefix=".upload-")
            with os.fdopen(fd, "wb") as out:
                out.write(data)
            os.replace(tmp_name, target)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise PersistenceError(f"Failed to upload {bucket}/{path}") from e
        logger.info("Stored %s/%s (%d bytes, %s)", bucket, path, len(data), content_type)

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base}/storage/{quote(bucket)}/{quote(path)}"

"""
Blob Storage Service - raw report files on local disk
"""
import hashlib
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from medisync.config import settings

logger = logging.getLogger(__name__)

METADATA_SUFFIX = ".meta.json"


def build_report_key(owner: str, timestamp_ms: int, filename: str) -> str:
    """Blob key for an uploaded report: medical-reports/{owner}/{epoch-ms}-{filename}"""
    return f"medical-reports/{owner}/{timestamp_ms}-{filename}"


@dataclass
class StoredObject:
    """A blob and its HTTP metadata"""
    key: str
    path: Path
    content_type: str
    size: int
    etag: str

    def iter_bytes(self, chunk_size: int = 64 * 1024) -> Iterator[bytes]:
        with open(self.path, "rb") as f:
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    break
                yield chunk


class BlobStorageService:
    """Stores objects under a root directory, one file plus a JSON sidecar per key"""

    def __init__(self, root_dir: str):
        self.root = Path(root_dir).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"Blob storage initialized at {self.root}")

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if path == self.root or self.root not in path.parents:
            raise ValueError(f"Blob key escapes storage root: {key}")
        return path

    def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        """
        Write an object and its metadata

        Args:
            key: Object key (slash-separated)
            data: Raw bytes
            content_type: Declared MIME type

        Returns:
            StoredObject describing what was written
        """
        path = self._path_for(key)
        os.makedirs(path.parent, exist_ok=True)

        etag = f'"{hashlib.md5(data).hexdigest()}"'
        with open(path, "wb") as f:
            f.write(data)

        metadata = {"content_type": content_type, "size": len(data), "etag": etag}
        with open(f"{path}{METADATA_SUFFIX}", "w") as f:
            json.dump(metadata, f)

        logger.info(f"Stored blob {key} ({len(data)} bytes)")
        return StoredObject(key=key, path=path, content_type=content_type, size=len(data), etag=etag)

    def get(self, key: str) -> Optional[StoredObject]:
        """Look up an object; None when it does not exist"""
        path = self._path_for(key)
        meta_path = Path(f"{path}{METADATA_SUFFIX}")
        if not path.is_file() or not meta_path.is_file():
            return None

        with open(meta_path) as f:
            metadata = json.load(f)

        return StoredObject(
            key=key,
            path=path,
            content_type=metadata.get("content_type") or "application/octet-stream",
            size=metadata.get("size", path.stat().st_size),
            etag=metadata["etag"]
        )


_storage_service: Optional[BlobStorageService] = None


def get_storage_service() -> BlobStorageService:
    """Shared storage service rooted at BLOB_STORAGE_DIR"""
    global _storage_service
    if _storage_service is None:
        _storage_service = BlobStorageService(settings.BLOB_STORAGE_DIR)
    return _storage_service

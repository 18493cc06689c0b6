from pathlib import Path
from typing import Protocol
from uuid import uuid4

from fastapi import UploadFile

from funeralcover.errors import DomainValidationError, UnavailableError

CHUNK_SIZE = 64 * 1024


class DocumentStorage(Protocol):
    """Stores uploaded claim documents and hands back an opaque reference."""

    async def save(self, upload: UploadFile, kind: str) -> str: ...


class LocalDocumentStorage:
    """
    Keeps documents on the local filesystem; the reference is the file path.

    Uploads are copied in chunks. Anything empty or larger than ``max_bytes``
    is refused and nothing is left on disk.
    """

    def __init__(self, root: str | Path, max_bytes: int = 10 * 1024 * 1024):
        self.root = Path(root)
        self.max_bytes = max_bytes

    async def save(self, upload: UploadFile, kind: str) -> str:
        suffix = Path(upload.filename or "").suffix.lower()
        path = self.root / f"{kind}-{uuid4().hex}{suffix}"
        size = 0
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as out:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        break
                    out.write(chunk)
        except OSError as e:
            path.unlink(missing_ok=True)
            raise UnavailableError(f"Could not store {kind} document") from e

        if size == 0:
            path.unlink(missing_ok=True)
            raise DomainValidationError(f"Uploaded {kind} document is empty")
        if size > self.max_bytes:
            path.unlink(missing_ok=True)
            raise DomainValidationError(
                f"Uploaded {kind} document exceeds {self.max_bytes} bytes"
            )
        return str(path)

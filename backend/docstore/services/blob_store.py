import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator

from docstore.errors import FilesystemError, InvalidType, NotFound, TooLarge
from docstore.utils.filesystem import generate_stored_name

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredBlob:
    path: str
    size: int
    stored_name: str


class BlobStore:
    """Uploaded file bytes, one file per document, in a single flat directory."""

    def __init__(self, root: Path, max_size: int, allowed_type: str = "application/pdf"):
        self.root = root
        self.max_size = max_size
        self.allowed_type = allowed_type

    def ensure_root(self) -> None:
        self.root = self.root.resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def accept(
        self,
        stream: BinaryIO,
        original_name: str,
        content_type: str | None,
        max_size: int | None = None,
        allowed_type: str | None = None,
    ) -> StoredBlob:
        """Stream an upload to disk under a freshly generated name.

        Nothing is written for a rejected content type. A payload over the
        size limit, or a write error, removes the partial file before raising.
        """
        max_size = self.max_size if max_size is None else max_size
        allowed_type = allowed_type or self.allowed_type
        if content_type != allowed_type:
            raise InvalidType()

        stored_name = generate_stored_name(original_name)
        path = self.root / stored_name
        size = 0
        try:
            out = open(path, "xb")
        except OSError as exc:
            raise FilesystemError(f"Error uploading file: {exc}") from exc
        try:
            with out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > max_size:
                        raise TooLarge()
                    out.write(chunk)
                out.flush()
                os.fsync(out.fileno())
        except TooLarge:
            self._discard(path)
            raise
        except OSError as exc:
            self._discard(path)
            raise FilesystemError(f"Error uploading file: {exc}") from exc

        return StoredBlob(path=str(path), size=size, stored_name=stored_name)

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def remove(self, path: str) -> None:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as exc:
            raise FilesystemError(f"Error deleting file: {exc}") from exc

    def iter_chunks(self, path: str) -> Iterator[bytes]:
        """Yield the file in ``CHUNK_SIZE`` pieces.

        The file is opened on the first ``next()`` and closed when the
        generator finishes or is closed.
        """
        try:
            handle = open(path, "rb")
        except FileNotFoundError as exc:
            raise NotFound("File not found on server") from exc
        except OSError as exc:
            raise FilesystemError(f"Error reading file: {exc}") from exc
        with handle:
            for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
                yield chunk

    def list_blobs(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(str(p) for p in self.root.iterdir() if p.is_file())

    def _discard(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove partial upload %s", path, exc_info=True)

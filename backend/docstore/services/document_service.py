import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterator

from docstore.errors import (
    DocumentError,
    MetadataWriteError,
    NoFile,
    NotFound,
    StoreError,
)
from docstore.models.document import Document
from docstore.services.blob_store import BlobStore
from docstore.services.metadata_store import MetadataStore

logger = logging.getLogger(__name__)


@dataclass
class Download:
    document: Document
    chunks: Iterator[bytes]


class DocumentService:
    """Upload, list, download and delete over a blob store and a metadata store.

    A record only becomes visible once its blob is on disk; if the record
    cannot be written the blob is removed again.
    """

    def __init__(self, blobs: BlobStore, store: MetadataStore):
        self.blobs = blobs
        self.store = store

    def upload(self, stream: BinaryIO | None, original_name: str | None, content_type: str | None) -> Document:
        if stream is None or not original_name:
            raise NoFile()

        blob = self.blobs.accept(stream, original_name, content_type)

        try:
            doc = self.store.insert(original_name, blob.path, blob.size)
        except StoreError as exc:
            self._compensate(blob.path)
            raise MetadataWriteError(exc.message) from exc

        logger.info("Stored document id=%s size=%d path=%s", doc.id, doc.filesize, doc.filepath)
        return doc

    def list(self) -> list[Document]:
        return self.store.list_all()

    def download(self, document_id: int) -> Download:
        doc = self.store.get_by_id(document_id)
        if doc is None:
            raise NotFound()
        if not self.blobs.exists(doc.filepath):
            raise NotFound("File not found on server")
        return Download(document=doc, chunks=self.blobs.iter_chunks(doc.filepath))

    def delete(self, document_id: int) -> None:
        doc = self.store.get_by_id(document_id)
        if doc is None:
            raise NotFound()

        self.blobs.remove(doc.filepath)

        if not self.store.delete_by_id(document_id):
            raise NotFound()
        logger.info("Deleted document id=%s", document_id)

    def _compensate(self, path: str) -> None:
        try:
            self.blobs.remove(path)
        except DocumentError:
            logger.warning("Compensating delete failed; orphan blob left at %s", path, exc_info=True)

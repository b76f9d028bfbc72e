import logging
from dataclasses import dataclass, field
from pathlib import Path

from docstore.models.document import Document
from docstore.services.blob_store import BlobStore
from docstore.services.metadata_store import MetadataStore

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    orphan_blobs: list[str] = field(default_factory=list)
    dangling_records: list[Document] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.orphan_blobs and not self.dangling_records


def find_drift(blobs: BlobStore, store: MetadataStore) -> ReconcileReport:
    """Compare the upload directory against the documents table."""
    records = store.list_all()
    referenced = {str(Path(d.filepath).resolve()) for d in records}

    report = ReconcileReport()
    for path in blobs.list_blobs():
        if str(Path(path).resolve()) not in referenced:
            report.orphan_blobs.append(path)
    for doc in records:
        if not blobs.exists(doc.filepath):
            report.dangling_records.append(doc)
    return report


def repair(blobs: BlobStore, store: MetadataStore, report: ReconcileReport) -> None:
    for path in report.orphan_blobs:
        blobs.remove(path)
        logger.info("Removed orphan blob %s", path)
    # Read ids up front: every commit expires the loaded instances.
    dangling = [(doc.id, doc.filepath) for doc in report.dangling_records]
    for document_id, filepath in dangling:
        store.delete_by_id(document_id)
        logger.info("Removed dangling record id=%s (%s)", document_id, filepath)

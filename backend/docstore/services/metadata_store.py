import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from docstore.errors import StoreError
from docstore.models.document import Document

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value; larger ids cannot exist.
MAX_DOCUMENT_ID = 2**63 - 1


def _store_error(action: str, exc: SQLAlchemyError) -> StoreError:
    """Log the full driver error, keep only its short reason for the caller."""
    logger.error("%s failed", action, exc_info=exc)
    reason = getattr(exc, "orig", None)
    if reason is None:
        return StoreError(action)
    return StoreError(f"{action}: {reason}")


def _valid_id(document_id: int) -> bool:
    return 0 < document_id <= MAX_DOCUMENT_ID


class MetadataStore:
    """Document records in the ``documents`` table.

    Every SQLAlchemy failure is rolled back and re-raised as ``StoreError``.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert(self, filename: str, filepath: str, filesize: int) -> Document:
        now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        doc = Document(
            filename=filename,
            filepath=filepath,
            filesize=filesize,
            created_at=now,
        )
        try:
            self.db.add(doc)
            self.db.commit()
            self.db.refresh(doc)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise _store_error("Error saving document metadata", exc) from exc
        return doc

    def list_all(self) -> list[Document]:
        try:
            return (
                self.db.query(Document)
                .order_by(Document.created_at.desc(), Document.id.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise _store_error("Error fetching documents", exc) from exc

    def get_by_id(self, document_id: int) -> Document | None:
        if not _valid_id(document_id):
            return None
        try:
            return self.db.query(Document).filter(Document.id == document_id).first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise _store_error("Error fetching document", exc) from exc

    def delete_by_id(self, document_id: int) -> bool:
        if not _valid_id(document_id):
            return False
        try:
            deleted = (
                self.db.query(Document)
                .filter(Document.id == document_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise _store_error("Error deleting document", exc) from exc
        return deleted > 0

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from docstore.database import get_db
from docstore.services.blob_store import BlobStore
from docstore.services.document_service import DocumentService
from docstore.services.metadata_store import MetadataStore


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_metadata_store(db: Session = Depends(get_db)) -> MetadataStore:
    return MetadataStore(db)


def get_document_service(
    blobs: BlobStore = Depends(get_blob_store),
    store: MetadataStore = Depends(get_metadata_store),
) -> DocumentService:
    return DocumentService(blobs, store)

from urllib.parse import quote

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import StreamingResponse

from docstore.dependencies import get_document_service
from docstore.errors import NoFile
from docstore.models.document import Document
from docstore.schemas.document import (
    DocumentListResponse,
    DocumentResponse,
    MessageResponse,
    UploadResponse,
)
from docstore.services.document_service import DocumentService

router = APIRouter(prefix="/documents", tags=["documents"])


def _doc_to_response(doc: Document) -> DocumentResponse:
    return DocumentResponse(
        id=doc.id,
        filename=doc.filename,
        filepath=doc.filepath,
        filesize=doc.filesize,
        created_at=doc.created_at,
    )


def _content_disposition(filename: str) -> str:
    # Header values must be latin-1 and single-line; the name is client-supplied.
    safe = "".join(c for c in filename if c.isprintable() and c != '"')
    if not safe.isascii():
        return f"attachment; filename*=utf-8''{quote(safe)}"
    return f'attachment; filename="{safe}"'


@router.post("/upload", response_model=UploadResponse, status_code=201)
def upload_document(
    file: UploadFile | None = File(None),
    service: DocumentService = Depends(get_document_service),
):
    if file is None:
        raise NoFile()
    doc = service.upload(file.file, file.filename, file.content_type)
    return UploadResponse(
        message="File uploaded successfully",
        document=_doc_to_response(doc),
    )


@router.get("", response_model=DocumentListResponse)
def list_documents(service: DocumentService = Depends(get_document_service)):
    docs = service.list()
    return DocumentListResponse(documents=[_doc_to_response(d) for d in docs])


@router.get("/{document_id}")
def download_document(document_id: int, service: DocumentService = Depends(get_document_service)):
    download = service.download(document_id)
    doc = download.document
    return StreamingResponse(
        download.chunks,
        media_type="application/pdf",
        headers={
            "Content-Disposition": _content_disposition(doc.filename),
            "Content-Length": str(doc.filesize),
        },
    )


@router.delete("/{document_id}", response_model=MessageResponse)
def delete_document(document_id: int, service: DocumentService = Depends(get_document_service)):
    service.delete(document_id)
    return MessageResponse(success=True, message="Document deleted successfully")

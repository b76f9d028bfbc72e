from pydantic import BaseModel


class DocumentResponse(BaseModel):
    id: int
    filename: str
    filepath: str
    filesize: int
    created_at: str


class UploadResponse(BaseModel):
    success: bool = True
    message: str
    document: DocumentResponse


class DocumentListResponse(BaseModel):
    success: bool = True
    documents: list[DocumentResponse]


class MessageResponse(BaseModel):
    success: bool
    message: str

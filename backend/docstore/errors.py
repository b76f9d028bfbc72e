class DocumentError(Exception):
    """Base for failures that map onto an HTTP status and a user-facing message."""

    status_code = 500
    default_message = "An error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NoFile(DocumentError):
    status_code = 400
    default_message = "No file uploaded"


class InvalidType(DocumentError):
    status_code = 400
    default_message = "Only PDF files are allowed"


class TooLarge(DocumentError):
    status_code = 400
    default_message = "File size exceeds 10MB limit"


class NotFound(DocumentError):
    status_code = 404
    default_message = "Document not found"


class StoreError(DocumentError):
    default_message = "Error accessing document metadata"


class MetadataWriteError(DocumentError):
    default_message = "Error saving document metadata"


class FilesystemError(DocumentError):
    default_message = "Error accessing document file"

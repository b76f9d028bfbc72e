"""HTTP client for the document API, used by the command-line interface."""
import mimetypes
from pathlib import Path

import httpx

from docstore.utils.filesystem import sanitize_filename

PDF_CONTENT_TYPE = "application/pdf"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class ClientError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _server_message(response: httpx.Response) -> str:
    try:
        return response.json().get("message") or response.reason_phrase
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"


class DocumentClient:
    def __init__(self, http: httpx.Client, max_upload_bytes: int = MAX_UPLOAD_BYTES):
        self.http = http
        self.max_upload_bytes = max_upload_bytes

    @classmethod
    def connect(cls, base_url: str, timeout: float = 30.0) -> "DocumentClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def close(self) -> None:
        self.http.close()

    def _request(self, method: str, url: str, action: str, **kwargs) -> httpx.Response:
        try:
            response = self.http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise ClientError(f"{action} failed: {exc}") from exc
        if response.is_error:
            raise ClientError(f"{action} failed: {_server_message(response)}", response.status_code)
        return response

    def list_documents(self) -> list[dict]:
        response = self._request("GET", "/documents", "Fetch")
        return response.json()["documents"]

    def validate_upload(self, path: Path) -> None:
        """Reject what the server would reject before sending any bytes."""
        if not path.is_file():
            raise ClientError(f"Please select a file to upload: {path} does not exist")
        guessed, _ = mimetypes.guess_type(path.name)
        if guessed != PDF_CONTENT_TYPE:
            raise ClientError("Please select a PDF file")
        if path.stat().st_size > self.max_upload_bytes:
            raise ClientError("File size must be less than 10MB")

    def upload(self, path: Path) -> dict:
        self.validate_upload(path)
        with open(path, "rb") as fh:
            response = self._request(
                "POST",
                "/documents/upload",
                "Upload",
                files={"file": (path.name, fh, PDF_CONTENT_TYPE)},
            )
        return response.json()["document"]

    def download(self, document: dict, dest_dir: Path) -> Path:
        response = self._request("GET", f"/documents/{document['id']}", "Download")
        dest_dir.mkdir(parents=True, exist_ok=True)
        target = dest_dir / sanitize_filename(document["filename"])
        target.write_bytes(response.content)
        return target

    def get_document(self, document_id: int) -> dict:
        for doc in self.list_documents():
            if doc["id"] == document_id:
                return doc
        raise ClientError("Download failed: Document not found", 404)

    def delete(self, document_id: int) -> str:
        response = self._request("DELETE", f"/documents/{document_id}", "Delete")
        return response.json()["message"]

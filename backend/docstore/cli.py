from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer

from docstore.client import ClientError, DocumentClient
from docstore.config import settings
from docstore.database import get_engine, get_session_factory, table_info
from docstore.services.blob_store import BlobStore
from docstore.services.metadata_store import MetadataStore
from docstore.services.reconcile_service import find_drift, repair
from docstore.utils.formatting import format_date, format_file_size

app = typer.Typer(help="Document store server, client and maintenance commands", no_args_is_help=True, add_completion=False)

RULE = "═" * 63

ApiUrl = typer.Option(None, "--api-url", envvar="DOCSTORE_API_URL", help="Base URL of the document API.")


def _success(message: str) -> None:
    typer.secho(message, fg=typer.colors.GREEN)


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@contextmanager
def _client(api_url: Optional[str]):
    client = DocumentClient.connect(api_url or f"http://localhost:{settings.port}")
    try:
        yield client
    except ClientError as exc:
        _fail(exc.message)
    finally:
        client.close()


@contextmanager
def _local_stores():
    if not settings.db_path.exists():
        _fail(f"Database not found at {settings.db_path}")
    engine = get_engine(settings.db_path)
    db = get_session_factory(engine)()
    try:
        blobs = BlobStore(settings.uploads_dir, max_size=settings.max_upload_bytes)
        yield blobs, MetadataStore(db)
    finally:
        db.close()
        engine.dispose()


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Interface to bind; defaults to settings."),
    port: Optional[int] = typer.Option(None, help="Port to listen on; defaults to $PORT or 5001."),
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "docstore.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


@app.command("list")
def list_documents(api_url: Optional[str] = ApiUrl):
    """List uploaded documents, newest first."""
    with _client(api_url) as client:
        documents = client.list_documents()
    if not documents:
        typer.echo("No documents uploaded yet.")
        typer.echo("Upload your first document with `docstore upload <file.pdf>`.")
        return
    for doc in documents:
        typer.echo(f"[{doc['id']}] {doc['filename']}")
        typer.echo(f"    Size: {format_file_size(doc['filesize'])}    Uploaded: {format_date(doc['created_at'])}")


@app.command("upload")
def upload(
    path: Path = typer.Argument(..., help="PDF file to upload (max 10MB)."),
    api_url: Optional[str] = ApiUrl,
):
    """Upload a PDF document."""
    with _client(api_url) as client:
        doc = client.upload(path)
    _success(f"File uploaded successfully! (id={doc['id']})")


@app.command("download")
def download(
    document_id: int = typer.Argument(..., help="Id of the document to download."),
    dest: Path = typer.Option(Path("."), "--dest", help="Directory to save the file in."),
    api_url: Optional[str] = ApiUrl,
):
    """Download a document by id."""
    with _client(api_url) as client:
        doc = client.get_document(document_id)
        target = client.download(doc, dest)
    _success(f"File downloaded successfully! -> {target}")


@app.command("delete")
def delete(
    document_id: int = typer.Argument(..., help="Id of the document to delete."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
    api_url: Optional[str] = ApiUrl,
):
    """Delete a document by id."""
    if not yes and not typer.confirm("Are you sure you want to delete this document?"):
        raise typer.Abort()
    with _client(api_url) as client:
        client.delete(document_id)
    _success("Document deleted successfully!")


@app.command("show-db")
def show_db():
    """Print every stored record and the documents table structure."""
    with _local_stores() as (_, store):
        rows = store.list_all()
        if not rows:
            typer.echo("No documents found in the database.")
            typer.echo("The table exists but is empty.\n")
        else:
            typer.echo(RULE)
            typer.echo(f"Total Documents: {len(rows)}")
            typer.echo(RULE + "\n")
            for index, row in enumerate(rows, start=1):
                typer.echo(f"Document #{index}:")
                typer.echo(f"  ID:         {row.id}")
                typer.echo(f"  Filename:   {row.filename}")
                typer.echo(f"  Filepath:   {row.filepath}")
                typer.echo(f"  Size:       {format_file_size(row.filesize)}")
                typer.echo(f"  Created:    {format_date(row.created_at)}")
                typer.echo("")

    typer.echo(RULE)
    typer.echo("Table Structure: documents")
    typer.echo(RULE)
    for col in table_info(settings.db_path):
        null = "NOT NULL" if col["notnull"] else "NULL"
        default = f"DEFAULT {col['dflt_value']}" if col["dflt_value"] else ""
        typer.echo(f"  {col['name']:<15} {col['type']:<20} {null} {default}".rstrip())
    typer.echo("")


@app.command("reconcile")
def reconcile(fix: bool = typer.Option(False, "--fix", help="Remove orphan blobs and dangling records.")):
    """Report uploads without a record and records without an upload."""
    with _local_stores() as (blobs, store):
        report = find_drift(blobs, store)
        if report.clean:
            _success("Blob directory and database are consistent.")
            return
        for path in report.orphan_blobs:
            typer.echo(f"orphan blob:     {path}")
        for doc in report.dangling_records:
            typer.echo(f"dangling record: id={doc.id} {doc.filepath}")
        if not fix:
            typer.echo("Run again with --fix to repair.")
            raise typer.Exit(code=1)
        repair(blobs, store, report)
    _success("Repaired.")


if __name__ == "__main__":
    app()

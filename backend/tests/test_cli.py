from pathlib import Path

import pytest
from typer.testing import CliRunner

from docstore import cli
from docstore.client import DocumentClient

from pdf_factory import make_pdf

runner = CliRunner()


@pytest.fixture
def api(client, monkeypatch):
    """Route the CLI's HTTP calls to the in-process app."""
    monkeypatch.setattr(DocumentClient, "connect", classmethod(lambda cls, base_url, timeout=30.0: cls(client)))
    monkeypatch.setattr(DocumentClient, "close", lambda self: None)
    return client


def _seed(client, name="seed.pdf"):
    r = client.post("/documents/upload", files={"file": (name, make_pdf(name), "application/pdf")})
    return r.json()["document"]


class TestClientCommands:
    def test_list_empty(self, api):
        result = runner.invoke(cli.app, ["list"])
        assert result.exit_code == 0, result.output
        assert "No documents uploaded yet." in result.output

    def test_upload_then_list(self, api, tmp_path):
        path = tmp_path / "invoice.pdf"
        path.write_bytes(make_pdf("invoice"))

        result = runner.invoke(cli.app, ["upload", str(path)])
        assert result.exit_code == 0, result.output
        assert "File uploaded successfully!" in result.output

        result = runner.invoke(cli.app, ["list"])
        assert result.exit_code == 0
        assert "invoice.pdf" in result.output
        assert "Size:" in result.output

    def test_upload_rejects_non_pdf(self, api, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hi")
        result = runner.invoke(cli.app, ["upload", str(path)])
        assert result.exit_code == 1
        assert "Please select a PDF file" in result.output

    def test_download(self, api, tmp_path):
        doc = _seed(api, "lab-results.pdf")
        result = runner.invoke(cli.app, ["download", str(doc["id"]), "--dest", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "lab-results.pdf").read_bytes() == Path(doc["filepath"]).read_bytes()

    def test_download_unknown(self, api, tmp_path):
        result = runner.invoke(cli.app, ["download", "999", "--dest", str(tmp_path)])
        assert result.exit_code == 1
        assert "Document not found" in result.output

    def test_delete_with_confirmation(self, api):
        doc = _seed(api)
        result = runner.invoke(cli.app, ["delete", str(doc["id"])], input="y\n")
        assert result.exit_code == 0, result.output
        assert "Document deleted successfully!" in result.output
        assert api.get("/documents").json()["documents"] == []

    def test_delete_declined(self, api):
        doc = _seed(api)
        result = runner.invoke(cli.app, ["delete", str(doc["id"])], input="n\n")
        assert result.exit_code == 1
        assert len(api.get("/documents").json()["documents"]) == 1

    def test_delete_unknown(self, api):
        result = runner.invoke(cli.app, ["delete", "999", "--yes"])
        assert result.exit_code == 1
        assert "Delete failed: Document not found" in result.output


class TestAdminCommands:
    def test_show_db_missing_database(self, patched_settings):
        result = runner.invoke(cli.app, ["show-db"])
        assert result.exit_code == 1
        assert "Database not found" in result.output

    def test_show_db_empty(self, patched_settings, client):
        result = runner.invoke(cli.app, ["show-db"])
        assert result.exit_code == 0, result.output
        assert "No documents found in the database." in result.output
        assert "Table Structure: documents" in result.output
        assert "filepath" in result.output

    def test_show_db_lists_records(self, patched_settings, client):
        _seed(client, "first.pdf")
        _seed(client, "second.pdf")
        result = runner.invoke(cli.app, ["show-db"])
        assert result.exit_code == 0, result.output
        assert "Total Documents: 2" in result.output
        assert result.output.index("second.pdf") < result.output.index("first.pdf")
        assert "INTEGER" in result.output

    def test_reconcile_clean(self, patched_settings, client):
        _seed(client)
        result = runner.invoke(cli.app, ["reconcile"])
        assert result.exit_code == 0, result.output
        assert "consistent" in result.output

    def test_reconcile_reports_and_fixes(self, patched_settings, client):
        kept = _seed(client, "kept.pdf")
        dangling = _seed(client, "dangling.pdf")
        Path(dangling["filepath"]).unlink()
        orphan = patched_settings.uploads_dir / "123-456-orphan.pdf"
        orphan.write_bytes(b"%PDF-orphan")

        result = runner.invoke(cli.app, ["reconcile"])
        assert result.exit_code == 1
        assert "orphan blob" in result.output
        assert f"id={dangling['id']}" in result.output
        assert orphan.exists()

        result = runner.invoke(cli.app, ["reconcile", "--fix"])
        assert result.exit_code == 0, result.output
        assert not orphan.exists()
        ids = [d["id"] for d in client.get("/documents").json()["documents"]]
        assert ids == [kept["id"]]
        assert Path(kept["filepath"]).exists()

import pytest

from docstore.config import Settings
from docstore.utils.formatting import format_date, format_file_size


@pytest.mark.parametrize(
    "size,expected",
    [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1048576, "1 MB"),
        (10 * 1024 * 1024, "10 MB"),
        (1234567, "1.18 MB"),
        (3 * 1024**3, "3 GB"),
    ],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_format_date_renders_local_time():
    rendered = format_date("2024-05-01T12:30:00Z")
    assert rendered.startswith("2024-")
    assert len(rendered) == len("2024-05-01 12:30:00")


def test_format_date_passes_through_garbage():
    assert format_date("not a date") == "not a date"


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("DOCSTORE_PORT", raising=False)
        s = Settings()
        assert s.port == 5001
        assert s.max_upload_bytes == 10 * 1024 * 1024
        assert s.db_path == s.data_path / "database.sqlite"
        assert s.uploads_dir == s.data_path / "uploads"

    def test_port_from_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "6123")
        assert Settings().port == 6123

    def test_prefixed_env(self, monkeypatch, tmp_path):
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.setenv("DOCSTORE_PORT", "7000")
        monkeypatch.setenv("DOCSTORE_DATA_PATH", str(tmp_path))
        s = Settings()
        assert s.port == 7000
        assert s.data_path == tmp_path
